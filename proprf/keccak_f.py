"""The Keccak-p[1600] permutation on a single state of 25 64-bit lanes.

Lanes are indexed ``x + 5 * y``, so lane 0 is the first lane absorbed and
lane 1 the second, matching the little-endian byte layout of the state.
"""

from __future__ import annotations

from collections.abc import Sequence

LANE_COUNT = 25
MAX_ROUNDS = 24

_MASK64 = (1 << 64) - 1

# Rotation offsets of the rho step, indexed x + 5 * y.
RHO_OFFSETS: tuple[int, ...] = (
    0, 1, 62, 28, 27,
    36, 44, 6, 55, 20,
    3, 10, 43, 25, 39,
    41, 45, 15, 21, 8,
    18, 2, 61, 56, 14,
)


def _rc_bit(t: int) -> int:
    """Output bit t of the LFSR x**8 + x**6 + x**5 + x**4 + 1."""
    t %= 255
    register = 1
    for _ in range(t):
        register <<= 1
        if register & 0x100:
            register ^= 0x171
    return register & 1


def _round_constant(index: int) -> int:
    value = 0
    for j in range(7):
        if _rc_bit(j + 7 * index):
            value |= 1 << ((1 << j) - 1)
    return value


ROUND_CONSTANTS: tuple[int, ...] = tuple(_round_constant(i) for i in range(MAX_ROUNDS))


def rol64(value: int, shift: int) -> int:
    """Rotate a 64-bit word left by ``shift`` bits."""
    value &= _MASK64
    shift %= 64
    if shift == 0:
        return value
    return ((value << shift) | (value >> (64 - shift))) & _MASK64


def _check_lanes(lanes: Sequence[int]) -> list[int]:
    state = list(lanes)
    if len(state) != LANE_COUNT:
        raise ValueError(f"a Keccak state has {LANE_COUNT} lanes, got {len(state)}")
    for lane in state:
        if not 0 <= lane <= _MASK64:
            raise ValueError("lane out of 64-bit range")
    return state


def keccak_round(lanes: Sequence[int], round_constant: int) -> list[int]:
    """Apply theta, rho, pi, chi and iota once and return the new state."""
    a = _check_lanes(lanes)

    # theta
    columns = [a[x] ^ a[x + 5] ^ a[x + 10] ^ a[x + 15] ^ a[x + 20] for x in range(5)]
    d = [columns[(x - 1) % 5] ^ rol64(columns[(x + 1) % 5], 1) for x in range(5)]
    a = [lane ^ d[i % 5] for i, lane in enumerate(a)]

    # rho and pi
    b = [0] * LANE_COUNT
    for i, lane in enumerate(a):
        x, y = i % 5, i // 5
        b[y + 5 * ((2 * x + 3 * y) % 5)] = rol64(lane, RHO_OFFSETS[i])

    # chi
    out = [0] * LANE_COUNT
    for i in range(LANE_COUNT):
        x, row = i % 5, i - i % 5
        out[i] = b[i] ^ (~b[row + (x + 1) % 5] & b[row + (x + 2) % 5] & _MASK64)

    # iota
    out[0] ^= round_constant & _MASK64
    return out


def keccak_p1600(lanes: Sequence[int], rounds: int = MAX_ROUNDS) -> list[int]:
    """Apply the last ``rounds`` rounds of Keccak-f[1600] and return the state."""
    if not 0 <= rounds <= MAX_ROUNDS:
        raise ValueError(f"rounds must lie between 0 and {MAX_ROUNDS}")
    state = _check_lanes(lanes)
    for constant in ROUND_CONSTANTS[MAX_ROUNDS - rounds:]:
        state = keccak_round(state, constant)
    return state