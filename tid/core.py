# tid/core.py
"""
Tid 门面：把密钥环、类型指纹、摘要引擎和位布局组合成 `generate` 与 `decode`。

两个操作都是同步、无 I/O 的常量时间计算。工作缓冲区在每次调用时新建，
因此同一个 `Tid` 实例可以被多个线程并发使用。
"""
from __future__ import annotations

import time
import uuid
from collections.abc import Callable, Mapping
from secrets import token_bytes
from typing import TYPE_CHECKING, Any, Union

from tid._codec import layout
from tid._codec.digest import KeyedDigest
from tid._codec.fingerprint import fingerprint
from tid.exceptions import ConfigurationError, InvalidArgumentError
from tid.keyring import SecretKeyring, SecretValue, Selector
from tid.types import MAX_TYPE_LENGTH, PROTOCOL_VERSION, TAG_LENGTHS, Mode, TidInfo

if TYPE_CHECKING:
    from tid.config import TidConfig

Clock = Callable[[], int]
TypeLabel = Union[bytes, bytearray, memoryview, str]


def system_clock_millis() -> int:
    """默认时钟：Unix 纪元以来的毫秒数。"""
    return time.time_ns() // 1_000_000


def encode_type_label(label: Any, name: str) -> bytes:
    if label is None:
        raise InvalidArgumentError(f"{name} 不能为 None")
    if isinstance(label, str):
        encoded = label.encode("utf-8")
    elif isinstance(label, (bytes, bytearray, memoryview)):
        encoded = bytes(label)
    else:
        raise InvalidArgumentError(
            f"{name} 必须是 bytes 或 str，但得到了 {type(label).__name__}"
        )
    if len(encoded) > MAX_TYPE_LENGTH:
        raise InvalidArgumentError(
            f"{name} 长度不能超过 {MAX_TYPE_LENGTH} 字节，当前为 {len(encoded)}"
        )
    return encoded


class Tid:
    """
    生成并校验自描述的 128 位标识符。

    Args:
        secrets: 密钥索引 (0-15) 到密钥的映射，或一个已构建的 `SecretKeyring`。
        clock: 返回毫秒时间戳的函数，默认使用系统时钟。
        selector: 密钥索引选择策略，默认均匀随机。传入 `SecretKeyring` 时不可再指定。
        random_source: `n -> n 个随机字节` 的函数，默认 `secrets.token_bytes`。
    """

    def __init__(
        self,
        secrets: Mapping[int, SecretValue] | SecretKeyring,
        *,
        clock: Clock | None = None,
        selector: Selector | None = None,
        random_source: layout.RandomSource | None = None,
    ) -> None:
        if isinstance(secrets, SecretKeyring):
            if selector is not None:
                raise ConfigurationError("已构建的密钥环自带选择策略，不能再指定 selector")
            self._keyring = secrets
        else:
            self._keyring = SecretKeyring(secrets, selector)
        self._digest = KeyedDigest(self._keyring)
        self._clock = clock or system_clock_millis
        self._random_source = random_source or token_bytes

    @classmethod
    def from_config(cls, config: TidConfig, **overrides: Any) -> Tid:
        """从 `TidConfig` 构建实例，`overrides` 会原样传给构造函数。"""
        return cls(config.secret_bytes(), **overrides)

    @property
    def keyring(self) -> SecretKeyring:
        return self._keyring

    def generate(self, type_label: TypeLabel, mode: Mode, tag_length: int) -> uuid.UUID:
        """
        生成一个新的标识符。

        Args:
            type_label: 类型标签 (最多 255 字节；str 按 UTF-8 编码)。
            mode: `Mode.RANDOM` 或 `Mode.TIME_SORTED`。
            tag_length: 校验标签长度，1 或 2 个字节。

        Returns:
            一个与标准 UUID 容器逐位兼容的 `uuid.UUID`。

        Raises:
            InvalidArgumentError: 任一参数违反前置条件。
        """
        label = encode_type_label(type_label, "type_label")
        if not isinstance(mode, Mode):
            raise InvalidArgumentError(f"mode 必须是 Mode 枚举成员，但得到了 {mode!r}")
        if (
            isinstance(tag_length, bool)
            or not isinstance(tag_length, int)
            or tag_length not in TAG_LENGTHS
        ):
            raise InvalidArgumentError(f"tag_length 必须是 1 或 2，但得到了 {tag_length!r}")

        secret_index = self._keyring.select()
        buf = bytearray(layout.BUFFER_SIZE)
        layout.lay_out(
            buf,
            timestamp=self._clock() if mode is Mode.TIME_SORTED else None,
            random_source=self._random_source,
            fingerprint=fingerprint(label),
            info=layout.pack_info(secret_index, PROTOCOL_VERSION, mode.bit),
            tag_length=tag_length,
        )
        prefix = bytes(buf[: layout.offsets_for(tag_length).tag])
        layout.seal(buf, self._digest.sign(secret_index, prefix, tag_length), tag_length)
        return uuid.UUID(bytes=bytes(buf))

    def decode(self, identifier: uuid.UUID, expected_type: TypeLabel) -> TidInfo:
        """
        解码并校验标识符。

        被篡改、类型不符、密钥未知或版本不受支持的标识符不会抛出异常，
        而是以 `valid_tag=False` / `type_matches=False` 返回。标签签名覆盖了
        指纹字节，因此只有在期望类型与签发类型一致时 `valid_tag` 才可能为 True。

        Raises:
            InvalidArgumentError: `identifier` 不是 UUID，或 `expected_type` 无效。
        """
        if not isinstance(identifier, uuid.UUID):
            raise InvalidArgumentError(
                f"identifier 必须是 uuid.UUID，但得到了 {type(identifier).__name__}"
            )
        expected = encode_type_label(expected_type, "expected_type")

        fields = layout.unpack(identifier.bytes)
        mode = Mode.from_bit(fields.mode_bit)
        type_matches = fields.fingerprint == fingerprint(expected)
        valid_tag = (
            type_matches
            and fields.version == PROTOCOL_VERSION
            and self._digest.verify(fields.secret_index, fields.prefix, fields.tag)
        )

        return TidInfo(
            valid_tag=valid_tag,
            type_matches=type_matches,
            timestamp=fields.timestamp if mode is Mode.TIME_SORTED else 0,
            secret_index=fields.secret_index,
            mode=mode,
            version=fields.version,
            tag_length=fields.tag_length,
        )
