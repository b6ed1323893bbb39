"""Elements of the 384-bit OPRF field, held as three 128-bit limbs."""

from __future__ import annotations

from dataclasses import dataclass

_LIMB_BITS = 128
_LIMB_MASK = (1 << _LIMB_BITS) - 1
_WORD_MASK = (1 << 64) - 1

_MOD_HIGH = (18446744073709551615 << 64) | 18446744073709551615
_MOD_MIDDLE = (18446744073709551615 << 64) | 18446744073709518241
_MOD_LOW = (0 << 64) | 1

MODULUS = (_MOD_HIGH << (2 * _LIMB_BITS)) | (_MOD_MIDDLE << _LIMB_BITS) | _MOD_LOW


@dataclass
class OprfFp:
    """A 384-bit value split into high, middle and low 128-bit limbs."""

    high: int = 0
    middle: int = 0
    low: int = 0

    def __post_init__(self) -> None:
        for limb in (self.high, self.middle, self.low):
            if not 0 <= limb <= _LIMB_MASK:
                raise ValueError("limb out of 128-bit range")

    @classmethod
    def from_int(cls, value: int) -> OprfFp:
        if not 0 <= value < 1 << (3 * _LIMB_BITS):
            raise ValueError("value does not fit in 384 bits")
        return cls(
            high=value >> (2 * _LIMB_BITS),
            middle=(value >> _LIMB_BITS) & _LIMB_MASK,
            low=value & _LIMB_MASK,
        )

    def to_int(self) -> int:
        return (self.high << (2 * _LIMB_BITS)) | (self.middle << _LIMB_BITS) | self.low

    def bound(self) -> bool:
        """Whether the value lies below the modulus."""
        l2 = self.high < _MOD_HIGH
        l1 = self.middle < _MOD_MIDDLE
        l0 = self.low < _MOD_LOW
        e1 = self.middle == _MOD_MIDDLE
        return l2 or l1 or (e1 and l0)

    def reduce_mod(self) -> None:
        """Subtract the modulus once, wrapping modulo 2**384."""
        over = self.low < _MOD_LOW
        self.low = (self.low - _MOD_LOW) & _LIMB_MASK
        if over:
            if self.middle != 0:
                over = False
            self.middle = (self.middle - 1) & _LIMB_MASK
        if self.middle < _MOD_MIDDLE:
            over = True
        self.middle = (self.middle - _MOD_MIDDLE) & _LIMB_MASK
        if over:
            self.high = (self.high - 1) & _LIMB_MASK
        self.high = (self.high - _MOD_HIGH) & _LIMB_MASK

    def __add__(self, other: object) -> OprfFp:
        if not isinstance(other, OprfFp):
            return NotImplemented
        return oprf_fp_add_mod(self, other)

    def __str__(self) -> str:
        words = []
        for limb in (self.high, self.middle, self.low):
            words.append((limb >> 64) & _WORD_MASK)
            words.append(limb & _WORD_MASK)
        return " ".join(str(w) for w in words)


def oprf_fp_add_mod(left: OprfFp, right: OprfFp) -> OprfFp:
    """Add two field elements and reduce the sum once."""
    low = (left.low + right.low) & _LIMB_MASK
    over1 = low < max(left.low, right.low)
    middle = (left.middle + right.middle) & _LIMB_MASK
    over2 = middle < max(left.middle, right.middle)
    if over1:
        middle = (middle + 1) & _LIMB_MASK
        if middle == 0:
            over2 = True
    high = (left.high + right.high) & _LIMB_MASK
    over3 = high < max(left.high, right.high)
    if over2:
        high = (high + 1) & _LIMB_MASK
        if high == 0:
            over3 = True

    out = OprfFp(high=high, middle=middle, low=low)
    if over3 or not out.bound():
        out.reduce_mod()
    return out