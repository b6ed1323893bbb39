"""Multiplication in GF(2**128) modulo x**128 + x**7 + x**2 + x + 1."""

from __future__ import annotations

from collections.abc import Iterable

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1


def clmul64(a: int, b: int) -> int:
    """Carry-less product of two 64-bit words."""
    a &= _MASK64
    b &= _MASK64
    result = 0
    while b:
        if b & 1:
            result ^= a
        a <<= 1
        b >>= 1
    return result


def mul128(a: int, b: int) -> tuple[int, int]:
    """Carry-less product of two 128-bit values as (low, high) halves."""
    a_lo, a_hi = a & _MASK64, (a >> 64) & _MASK64
    b_lo, b_hi = b & _MASK64, (b >> 64) & _MASK64
    low = clmul64(a_lo, b_lo)
    middle = clmul64(a_lo, b_hi) ^ clmul64(a_hi, b_lo)
    high = clmul64(a_hi, b_hi)
    low ^= (middle << 64) & _MASK128
    high ^= middle >> 64
    return low, high


def _times_tail(value: int) -> int:
    return value ^ (value << 1) ^ (value << 2) ^ (value << 7)


def reduce(low: int, high: int) -> int:
    """Reduce the 256-bit polynomial high * x**128 + low to 128 bits."""
    folded = _times_tail(high & _MASK128)
    overflow = folded >> 128
    folded = (folded & _MASK128) ^ _times_tail(overflow)
    return (low & _MASK128) ^ folded


def gfmul(a: int, b: int) -> int:
    """Multiply two field elements."""
    return reduce(*mul128(a, b))


def gfmul_batch(a: Iterable[int], b: Iterable[int]) -> list[int]:
    """Multiply two sequences of field elements pairwise."""
    return [gfmul(x, y) for x, y in zip(a, b, strict=True)]