# tid/_codec/layout.py
"""
16 字节缓冲区的位布局（所有多字节字段均为大端序）。

    [0, 6)          毫秒时间戳 (仅 TIME_SORTED；RANDOM 模式下为随机数)
    [ts_end, 14-t)  随机数
    [14-t]          类型指纹
    [15-t]          info 字节: 高 4 位密钥索引 | 中 3 位协议版本 | 低 1 位模式
    [16-t, 16)      校验标签；最后一个字节的最低位是尾部长度标志

写入顺序为 时间戳 → 随机数 → 指纹 → info → 标签，标签最后计算，
因为它签名的是之前写入的全部字节。读取时先读固定位置的尾部标志以得到 t。
"""
from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

from tid.exceptions import ConfigurationError

BUFFER_SIZE = 16
TIMESTAMP_LENGTH = 6
TIMESTAMP_MASK = (1 << (TIMESTAMP_LENGTH * 8)) - 1
FOOTER_INDEX = BUFFER_SIZE - 1

RandomSource = Callable[[int], bytes]


class Offsets(NamedTuple):
    fingerprint: int
    info: int
    tag: int


class Fields(NamedTuple):
    """从缓冲区中提取出的原始字段，不做任何校验。"""
    tag_length: int
    fingerprint: int
    secret_index: int
    version: int
    mode_bit: int
    timestamp: int
    prefix: bytes
    tag: bytes


def offsets_for(tag_length: int) -> Offsets:
    return Offsets(
        fingerprint=BUFFER_SIZE - 2 - tag_length,
        info=BUFFER_SIZE - 1 - tag_length,
        tag=BUFFER_SIZE - tag_length,
    )


def pack_info(secret_index: int, version: int, mode_bit: int) -> int:
    return ((secret_index & 0x0F) << 4) | ((version & 0x07) << 1) | (mode_bit & 0x01)


def unpack_info(info: int) -> tuple[int, int, int]:
    """返回 (secret_index, version, mode_bit)。"""
    return (info >> 4) & 0x0F, (info >> 1) & 0x07, info & 0x01


def read_tag_length(buf: bytes) -> int:
    return 2 if buf[FOOTER_INDEX] & 0x01 else 1


def lay_out(
    buf: bytearray,
    *,
    timestamp: int | None,
    random_source: RandomSource,
    fingerprint: int,
    info: int,
    tag_length: int,
) -> None:
    """写入标签之前的全部字段。`timestamp` 为 None 时整个前缀区域都填充随机数。"""
    start = 0
    if timestamp is not None:
        buf[0:TIMESTAMP_LENGTH] = (timestamp & TIMESTAMP_MASK).to_bytes(
            TIMESTAMP_LENGTH, "big"
        )
        start = TIMESTAMP_LENGTH

    offsets = offsets_for(tag_length)
    size = offsets.fingerprint - start
    filler = random_source(size)
    if len(filler) != size:
        raise ConfigurationError(
            f"随机源返回了 {len(filler)} 个字节，期望 {size} 个"
        )
    buf[start : offsets.fingerprint] = filler
    buf[offsets.fingerprint] = fingerprint
    buf[offsets.info] = info


def seal(buf: bytearray, tag: bytes, tag_length: int) -> None:
    """写入校验标签，并用尾部标志记录标签长度 (0 → 1 字节, 1 → 2 字节)。"""
    buf[offsets_for(tag_length).tag :] = tag
    buf[FOOTER_INDEX] = (buf[FOOTER_INDEX] & 0xFE) | (tag_length - 1)


def unpack(buf: bytes) -> Fields:
    tag_length = read_tag_length(buf)
    offsets = offsets_for(tag_length)
    secret_index, version, mode_bit = unpack_info(buf[offsets.info])
    return Fields(
        tag_length=tag_length,
        fingerprint=buf[offsets.fingerprint],
        secret_index=secret_index,
        version=version,
        mode_bit=mode_bit,
        timestamp=int.from_bytes(buf[0:TIMESTAMP_LENGTH], "big"),
        prefix=bytes(buf[: offsets.tag]),
        tag=bytes(buf[offsets.tag :]),
    )
