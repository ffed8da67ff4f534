"""GF(2^8) arithmetic with the AES reduction polynomial x^8 + x^4 + x^3 + x + 1."""

from __future__ import annotations

AES_REDUCTION = 0x1B


def xtime(a: int) -> int:
    """Multiply by x (i.e. by 2) in GF(2^8)."""
    a &= 0xFF
    hi = a & 0x80
    a = (a << 1) & 0xFF
    if hi:
        a ^= AES_REDUCTION
    return a


def gmul(a: int, b: int) -> int:
    """Carry-less multiplication of two bytes, reduced modulo 0x11B."""
    a &= 0xFF
    b &= 0xFF
    res = 0
    for _ in range(8):
        if b & 1:
            res ^= a
        a = xtime(a)
        b >>= 1
    return res
