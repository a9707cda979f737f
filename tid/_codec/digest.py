# tid/_codec/digest.py
"""
带密钥的摘要引擎：tag = SHA-256(secret ‖ prefix)[:t]。

最后一个标签字节的最低位是尾部长度标志，不参与比较。
"""
from __future__ import annotations

import hashlib
import hmac

from tid.keyring import SecretKeyring
from tid.types import MAX_SECRETS

FOOTER_FLAG_MASK = 0x01


def mask_tag(tag: bytes) -> bytes:
    """清除最后一个字节的尾部标志位，得到参与比较的有效标签位。"""
    return tag[:-1] + bytes((tag[-1] & ~FOOTER_FLAG_MASK & 0xFF,))


class KeyedDigest:
    """
    为密钥环中的每个密钥预先吸收密钥字节的 SHA-256 上下文。

    每次计算都从预置上下文 `copy()` 出一个新对象，调用之间不共享可变状态，
    因此可以被多个线程同时使用。
    """

    __slots__ = ("_seeded",)

    def __init__(self, keyring: SecretKeyring) -> None:
        seeded: list = [None] * MAX_SECRETS
        for index in keyring.indices:
            seeded[index] = hashlib.sha256(keyring.secret_for(index))
        self._seeded = tuple(seeded)

    def knows(self, index: int) -> bool:
        return 0 <= index < MAX_SECRETS and self._seeded[index] is not None

    def sign(self, index: int, prefix: bytes, length: int) -> bytes:
        """返回 `length` 个字节的原始标签（尚未写入尾部标志）。"""
        context = self._seeded[index].copy()
        context.update(prefix)
        return context.digest()[:length]

    def verify(self, index: int, prefix: bytes, tag: bytes) -> bool:
        """
        用 `index` 对应的密钥重新计算标签，并以常量时间比较掩码后的字节。

        未配置的索引直接返回 False。
        """
        if not self.knows(index):
            return False
        expected = self.sign(index, prefix, len(tag))
        return hmac.compare_digest(mask_tag(expected), mask_tag(tag))
