# tid/types.py
"""
本模块定义了 Tid 系统的核心数据类型与协议常量。
"""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple

PROTOCOL_VERSION = 1
MAX_SECRETS = 16
MAX_TYPE_LENGTH = 255
TAG_LENGTHS = (1, 2)


class Mode(str, Enum):
    """标识符的生成模式，在 info 字节中占用 1 位。"""

    RANDOM = "random"
    TIME_SORTED = "time_sorted"

    @property
    def bit(self) -> int:
        return 1 if self is Mode.TIME_SORTED else 0

    @classmethod
    def from_bit(cls, bit: int) -> Mode:
        return cls.TIME_SORTED if bit & 0x01 else cls.RANDOM


class TidInfo(NamedTuple):
    """
    `decode` 的结果，每次调用都会生成一个新的值对象。

    无论校验是否通过，所有字段都会按照标识符中实际存在的位进行填充，
    由调用者根据 `valid_tag and type_matches` 决定接受或拒绝。

    Attributes:
        valid_tag: 校验标签是否与已知密钥重新计算的摘要一致。
        type_matches: 存储的类型指纹是否等于期望类型的指纹。
        timestamp: TIME_SORTED 模式下的 48 位毫秒时间戳，否则为 0。
        secret_index: info 字节中记录的密钥索引 (0-15)。
        mode: info 字节中记录的模式。
        version: info 字节中记录的协议版本 (0-7)。
        tag_length: 由尾部标志位得出的校验标签长度 (1 或 2)。
    """
    valid_tag: bool
    type_matches: bool
    timestamp: int
    secret_index: int
    mode: Mode
    version: int
    tag_length: int

    @property
    def is_valid(self) -> bool:
        return self.valid_tag and self.type_matches
