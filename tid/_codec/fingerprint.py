# tid/_codec/fingerprint.py
"""
类型标签指纹：CRC-8 (多项式 0x07，初始值 0，无反射，无异或输出)。

指纹结果在进程范围内缓存。缓存只追加不淘汰，标签集合被假定为
小而稳定；并发填充时允许重复计算，同一标签的结果总是一致的。
"""
from __future__ import annotations

import threading

from cachetools import cached

CRC8_POLYNOMIAL = 0x07


def _build_table(polynomial: int) -> tuple[int, ...]:
    table = []
    for value in range(256):
        crc = value
        for _ in range(8):
            if crc & 0x80:
                crc = ((crc << 1) ^ polynomial) & 0xFF
            else:
                crc = (crc << 1) & 0xFF
        table.append(crc)
    return tuple(table)


_CRC8_TABLE = _build_table(CRC8_POLYNOMIAL)

_FINGERPRINT_CACHE: dict = {}
_FINGERPRINT_LOCK = threading.Lock()


def crc8(data: bytes) -> int:
    """计算 `data` 的 CRC-8 校验值（不经过缓存）。"""
    crc = 0
    for byte in data:
        crc = _CRC8_TABLE[crc ^ byte]
    return crc


@cached(cache=_FINGERPRINT_CACHE, lock=_FINGERPRINT_LOCK)
def fingerprint(label: bytes) -> int:
    """
    返回类型标签的 1 字节指纹。

    Args:
        label: 已编码的类型标签，必须是可哈希的 `bytes`。

    Returns:
        0-255 之间的整数。
    """
    return crc8(label)
