"""Arithmetic in the Mersenne prime field of order 2**61 - 1.

Scalars are Python ints holding 64-bit words. A "block" is a 128-bit int
made of two 64-bit lanes (high, low). Block operations work lane by lane.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

MERSENNE_PRIME_EXP = 61
PR = (1 << MERSENNE_PRIME_EXP) - 1

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1
_SIGN64 = 1 << 63


def make_block(high: int, low: int) -> int:
    """Pack two 64-bit words into one 128-bit block."""
    return ((high & _MASK64) << 64) | (low & _MASK64)


def high64(block: int) -> int:
    """Return the upper 64-bit lane of a block."""
    return (block >> 64) & _MASK64


def low64(block: int) -> int:
    """Return the lower 64-bit lane of a block."""
    return block & _MASK64


def _lanes(block: int) -> tuple[int, int]:
    block &= _MASK128
    return high64(block), low64(block)


def mod_pre(x: int) -> int:
    """Fold a value of up to 128 bits once; the result may still be >= PR."""
    x &= _MASK128
    return ((x & PR) + (x >> MERSENNE_PRIME_EXP)) & _MASK64


def mod(x: int) -> int:
    """Fold once and subtract PR if needed; fully reduces any 64-bit value."""
    i = (x & PR) + (x >> MERSENNE_PRIME_EXP)
    return i - PR if i >= PR else i


def add_mod(a: int, b: int) -> int:
    """Add two reduced field elements."""
    res = (a + b) & _MASK64
    return res - PR if res >= PR else res


def _fold_product(a: int, b: int) -> int:
    product = (a & _MASK64) * (b & _MASK64)
    low = product & _MASK64
    high = product >> 64
    folded = (low >> MERSENNE_PRIME_EXP) ^ ((high << (64 - MERSENNE_PRIME_EXP)) & _MASK64)
    return ((low & PR) + folded) & _MASK64


def mult_mod(a: int, b: int) -> int:
    """Multiply two reduced field elements."""
    res = _fold_product(a, b)
    return res - PR if res >= PR else res


def _partial_lane(lane: int) -> int:
    # Lanes compare as signed 64-bit integers, so a lane with its top bit set
    # is left as it is.
    if lane < _SIGN64 and lane >= PR:
        return lane - PR
    return lane


def vec_partial_mod(block: int) -> int:
    """Subtract PR from every lane that is at least PR (signed compare)."""
    high, low = _lanes(block)
    return make_block(_partial_lane(high), _partial_lane(low))


def vec_mod(block: int) -> int:
    """Reduce both lanes of a block."""
    high, low = _lanes(block)
    folded = make_block(
        (high & PR) + (high >> MERSENNE_PRIME_EXP),
        (low & PR) + (low >> MERSENNE_PRIME_EXP),
    )
    return vec_partial_mod(folded)


def add_mod_block(a: int, b: int) -> int:
    """Add two blocks lane by lane in the field."""
    ah, al = _lanes(a)
    bh, bl = _lanes(b)
    return vec_partial_mod(make_block(ah + bh, al + bl))


def mult_mod_block(a: int, b: int) -> int:
    """Multiply both lanes of a block by the same scalar."""
    high, low = _lanes(a)
    return vec_partial_mod(make_block(_fold_product(high, b), _fold_product(low, b)))


def mult_mod_batch(a: Iterable[int], b: Iterable[int]) -> list[int]:
    """Multiply two sequences element by element."""
    return [mult_mod(x, y) for x, y in zip(a, b, strict=True)]


def extract_fp(x: int) -> int:
    """Return the reduced low lane of a block."""
    return mod(low64(x))


def uni_hash_coeff_gen(seed: int, size: int) -> list[int]:
    """Return the powers seed, seed**2, ..., seed**size of the field."""
    if size < 1:
        raise ValueError("size must be at least 1")
    coeff = [seed]
    for _ in range(1, size):
        coeff.append(mult_mod(coeff[-1], seed))
    return coeff


def vector_inn_prdt_sum_red(a: Sequence[int], b: Sequence[int]) -> int:
    """Inner product of two equally long vectors of field elements."""
    res = 0
    for x, y in zip(a, b, strict=True):
        res = add_mod(res, mult_mod(x, y))
    return res