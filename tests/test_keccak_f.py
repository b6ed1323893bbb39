import hashlib

import pytest
from hypothesis import given
from hypothesis import strategies as st

from proprf.keccak_f import (
    LANE_COUNT,
    ROUND_CONSTANTS,
    keccak_p1600,
    keccak_round,
    rol64,
)

MASK64 = (1 << 64) - 1

lane_lists = st.lists(
    st.integers(min_value=0, max_value=MASK64), min_size=LANE_COUNT, max_size=LANE_COUNT
)


def _sponge(message: bytes, rate: int, suffix: int, out_len: int) -> bytes:
    padded = bytearray(message)
    padded.append(suffix)
    while len(padded) % rate:
        padded.append(0)
    padded[-1] |= 0x80

    state = [0] * LANE_COUNT
    for start in range(0, len(padded), rate):
        chunk = padded[start:start + rate]
        for i in range(rate // 8):
            state[i] ^= int.from_bytes(chunk[8 * i:8 * i + 8], "little")
        state = keccak_p1600(state, 24)

    out = bytearray()
    while True:
        out.extend(b"".join(lane.to_bytes(8, "little") for lane in state[: rate // 8]))
        if len(out) >= out_len:
            return bytes(out[:out_len])
        state = keccak_p1600(state, 24)


def test_rol64_simple_values():
    assert rol64(1, 1) == 2
    assert rol64(1 << 63, 1) == 1
    assert rol64(0x1234, 0) == 0x1234
    assert rol64(0x1234, 64) == 0x1234


@given(st.integers(min_value=0, max_value=MASK64), st.integers(min_value=0, max_value=63))
def test_rol64_inverse(value, shift):
    assert rol64(rol64(value, shift), 64 - shift) == value


@pytest.mark.parametrize(
    "constant",
    [0x0000000000000001, 0x0000000000008082, 0x8000000080008081, 0x8000000080008008],
)
def test_round_on_zero_state_only_applies_iota(constant):
    # Theta, rho, pi and chi map the zero state to itself, so only iota acts.
    assert keccak_round([0] * LANE_COUNT, constant) == [constant] + [0] * (LANE_COUNT - 1)


def test_round_constants_from_source():
    assert len(ROUND_CONSTANTS) == 24
    assert ROUND_CONSTANTS[0] == 0x0000000000000001
    assert ROUND_CONSTANTS[1] == 0x0000000000008082
    assert ROUND_CONSTANTS[6] == 0x8000000080008081
    assert ROUND_CONSTANTS[23] == 0x8000000080008008
    # A single round on the zero state uses the last constant of the schedule.
    assert keccak_p1600([0] * LANE_COUNT, 1) == [0x8000000080008008] + [0] * (LANE_COUNT - 1)


@pytest.mark.parametrize("message", [b"", b"abc", b"a" * 135, b"a" * 136, bytes(range(200))])
def test_sha3_256_matches_hashlib(message):
    assert _sponge(message, 136, 0x06, 32) == hashlib.sha3_256(message).digest()


@pytest.mark.parametrize("message", [b"", b"zero knowledge", bytes(range(150))])
def test_sha3_512_matches_hashlib(message):
    assert _sponge(message, 72, 0x06, 64) == hashlib.sha3_512(message).digest()


def test_shake128_long_output_matches_hashlib():
    message = b"oblivious"
    assert _sponge(message, 168, 0x1F, 400) == hashlib.shake_128(message).digest(400)


@given(lane_lists)
def test_zero_rounds_is_identity(lanes):
    assert keccak_p1600(lanes, 0) == lanes


@given(lane_lists)
def test_twelve_rounds_use_last_constants(lanes):
    state = list(lanes)
    for constant in ROUND_CONSTANTS[12:]:
        state = keccak_round(state, constant)
    assert keccak_p1600(lanes, 12) == state


def test_twelve_and_twentyfour_rounds_differ():
    lanes = list(range(LANE_COUNT))
    assert keccak_p1600(lanes, 12) != keccak_p1600(lanes, 24)
    assert keccak_p1600(lanes) == keccak_p1600(lanes, 24)


def test_input_is_not_mutated():
    lanes = list(range(LANE_COUNT))
    keccak_p1600(lanes)
    assert lanes == list(range(LANE_COUNT))


@given(lane_lists)
def test_output_lanes_are_64_bit(lanes):
    out = keccak_round(lanes, ROUND_CONSTANTS[5])
    assert len(out) == LANE_COUNT
    assert all(0 <= lane <= MASK64 for lane in out)


def test_wrong_lane_count_raises():
    with pytest.raises(ValueError):
        keccak_p1600([0] * 24)
    with pytest.raises(ValueError):
        keccak_round([0] * 26, 1)


def test_lane_out_of_range_raises():
    lanes = [0] * LANE_COUNT
    lanes[3] = 1 << 64
    with pytest.raises(ValueError):
        keccak_p1600(lanes)


@pytest.mark.parametrize("rounds", [-1, 25])
def test_bad_round_count_raises(rounds):
    with pytest.raises(ValueError):
        keccak_p1600([0] * LANE_COUNT, rounds)