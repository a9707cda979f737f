# tid/keyring.py
"""
密钥环：保存最多 16 个按索引 (0-15) 编号的密钥，并决定签名时使用哪一个。

密钥环在构造时完成全部校验，之后不可变。选择策略可以注入，
默认策略是在已配置的索引中均匀随机选择。
"""
from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from secrets import choice
from typing import Union

import structlog

from tid.exceptions import ConfigurationError
from tid.types import MAX_SECRETS

logger = structlog.get_logger(__name__)

SecretValue = Union[bytes, bytearray, memoryview, str]
Selector = Callable[[Sequence[int]], int]


def uniform_selector(indices: Sequence[int]) -> int:
    """默认选择策略：使用 CSPRNG 在所有已配置索引中均匀选择。"""
    return choice(indices)


def _to_secret_bytes(index: int, value: SecretValue) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise ConfigurationError(
        f"密钥 {index} 必须是 bytes 或 str，但得到了 {type(value).__name__}"
    )


class SecretKeyring:
    """一个不可变的、按索引查找的密钥集合。"""

    __slots__ = ("_slots", "_indices", "_selector")

    def __init__(
        self, secrets: Mapping[int, SecretValue], selector: Selector | None = None
    ) -> None:
        if not isinstance(secrets, Mapping):
            raise ConfigurationError(
                f"密钥必须是索引到密钥的映射，但得到了 {type(secrets).__name__}"
            )
        if not 1 <= len(secrets) <= MAX_SECRETS:
            raise ConfigurationError(
                f"密钥数量必须在 1 到 {MAX_SECRETS} 之间"
            )

        slots: list[bytes | None] = [None] * MAX_SECRETS
        for index, value in secrets.items():
            if isinstance(index, bool) or not isinstance(index, int):
                raise ConfigurationError(f"密钥索引必须是整数，但得到了 {index!r}")
            if not 0 <= index < MAX_SECRETS:
                raise ConfigurationError(
                    f"密钥索引必须在 0-{MAX_SECRETS - 1} 之间，但得到了 {index}"
                )
            slots[index] = _to_secret_bytes(index, value)

        self._slots = tuple(slots)
        self._indices = tuple(sorted(secrets))
        self._selector = selector or uniform_selector
        logger.info(
            "密钥环已初始化。",
            secret_count=len(self._indices),
            indices=list(self._indices),
        )

    @property
    def indices(self) -> tuple[int, ...]:
        return self._indices

    def select(self) -> int:
        """按选择策略挑选一个用于签名的密钥索引。"""
        index = self._selector(self._indices)
        if index not in self._indices:
            raise ConfigurationError(f"选择策略返回了未配置的密钥索引: {index!r}")
        return index

    def secret_for(self, index: int) -> bytes | None:
        """
        返回指定索引的密钥字节。

        索引结构上合法 (0-15) 但从未配置时返回 None，调用方将其视为未知密钥。
        """
        if not 0 <= index < MAX_SECRETS:
            return None
        return self._slots[index]

    def __len__(self) -> int:
        return len(self._indices)

    def __contains__(self, index: object) -> bool:
        return index in self._indices

    def __repr__(self) -> str:
        return f"SecretKeyring(indices={list(self._indices)})"
