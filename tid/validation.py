# tid/validation.py
"""
pydantic 字段校验适配器。

用法::

    set_default_codec(Tid({0: "topSecret"}))

    class OrderRef(BaseModel):
        order_id: Annotated[UUID | None, valid_tid("order")] = None

`None` 值直接放行；其余值只有在 `valid_tag and type_matches` 时才被接受。
"""
from __future__ import annotations

import uuid

import structlog
from pydantic import AfterValidator

from tid.core import Tid, TypeLabel, encode_type_label
from tid.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

_default_codec: Tid | None = None


def set_default_codec(codec: Tid | None) -> None:
    """注册进程范围内的默认编解码器，传入 None 可取消注册。"""
    global _default_codec
    _default_codec = codec


def get_default_codec() -> Tid | None:
    return _default_codec


def valid_tid(type_label: TypeLabel, *, codec: Tid | None = None) -> AfterValidator:
    """
    构建一个校验 Tid 标识符的 `AfterValidator`。

    Args:
        type_label: 期望的类型标签，在构建时即完成编码和长度检查。
        codec: 显式指定的编解码器；省略时在校验时使用默认编解码器。
    """
    label = encode_type_label(type_label, "type_label")

    def _check(value: uuid.UUID | None) -> uuid.UUID | None:
        if value is None:
            return value
        active = codec or _default_codec
        if active is None:
            raise ConfigurationError("未设置 Tid 编解码器，请先调用 set_default_codec()")

        info = active.decode(value, label)
        if not info.is_valid:
            logger.debug(
                "Tid 校验失败。",
                valid_tag=info.valid_tag,
                type_matches=info.type_matches,
                secret_index=info.secret_index,
            )
            raise ValueError(f"Tid verification failed for type {label!r}")
        return value

    return AfterValidator(_check)
