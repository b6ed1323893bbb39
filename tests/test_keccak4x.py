import hashlib

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from proprf.keccak4x import KeccakP1600Times4
from proprf.keccak_f import keccak_p1600


def _pad(message: bytes, rate: int, suffix: int) -> bytes:
    padded = bytearray(message) + bytes([suffix])
    while len(padded) % rate:
        padded.append(0)
    padded[-1] |= 0x80
    return bytes(padded)


def _instance_lanes(state: KeccakP1600Times4, instance: int) -> list[int]:
    raw = state.extract_bytes(instance, 0, 200)
    return [int.from_bytes(raw[i:i + 8], "little") for i in range(0, 200, 8)]


def test_zero_state_permutation_known_first_lane():
    state = KeccakP1600Times4()
    state.permute_all_24rounds()
    for instance in range(4):
        assert _instance_lanes(state, instance)[0] == 0xF1258F7940E1DDE7


def test_permutations_match_single_state():
    state = KeccakP1600Times4()
    for instance in range(4):
        state.add_bytes(instance, bytes([instance + 1]) * 200)
    expected24 = [keccak_p1600(_instance_lanes(state, i), 24) for i in range(4)]
    state.permute_all_24rounds()
    assert [_instance_lanes(state, i) for i in range(4)] == expected24
    expected12 = [keccak_p1600(_instance_lanes(state, i), 12) for i in range(4)]
    state.permute_all_12rounds()
    assert [_instance_lanes(state, i) for i in range(4)] == expected12


def test_sha3_256_single_block_parallel():
    messages = [b"", b"a", b"x" * 100, b"y" * 135]
    data = b"".join(_pad(m, 136, 0x06) for m in messages)
    state = KeccakP1600Times4()
    state.add_lanes_all(data, 17, 17)
    state.permute_all_24rounds()
    for instance, message in enumerate(messages):
        assert state.extract_bytes(instance, 0, 32) == hashlib.sha3_256(message).digest()


def test_sha3_256_fast_loop_multiblock():
    messages = [b"p" * 136, b"q" * 200, b"r" * 250, b"s" * 271]
    padded = [_pad(m, 136, 0x06) for m in messages]
    assert {len(p) for p in padded} == {272}
    data = b"".join(padded)
    state = KeccakP1600Times4()
    consumed = state.fast_loop_absorb(17, 34, 17, data)
    assert consumed == 272
    for instance, message in enumerate(messages):
        assert state.extract_bytes(instance, 0, 32) == hashlib.sha3_256(message).digest()


def test_shake128_with_21_lanes():
    messages = [b"one", b"two two", b"", b"z" * 167]
    data = b"".join(_pad(m, 168, 0x1F) for m in messages)
    state = KeccakP1600Times4()
    consumed = state.fast_loop_absorb(21, 21, 21, data)
    assert consumed == 168
    out = state.extract_lanes_all(4, 21)
    assert len(out) == (3 * 21 + 4) * 8
    for instance, message in enumerate(messages):
        start = instance * 168
        assert out[start:start + 32] == hashlib.shake_128(message).digest(32)


def test_fast_loop_12rounds_matches_manual_steps():
    data = bytes(range(256)) * 2
    looped = KeccakP1600Times4()
    consumed = looped.fast_loop_absorb_12rounds(5, 10, 5, data)
    manual = KeccakP1600Times4()
    position = 0
    while len(data) - position >= (3 * 10 + 5) * 8:
        manual.add_lanes_all(data[position:], 5, 10)
        manual.permute_all_12rounds()
        position += 40
    assert consumed == position
    assert consumed > 0
    assert [_instance_lanes(looped, i) for i in range(4)] == [
        _instance_lanes(manual, i) for i in range(4)
    ]


def test_fast_loop_short_data_consumes_nothing():
    state = KeccakP1600Times4()
    assert state.fast_loop_absorb(17, 17, 17, bytes(100)) == 0
    assert state.extract_bytes(0, 0, 200) == bytes(200)


@settings(max_examples=40)
@given(
    instance=st.integers(0, 3),
    offset=st.integers(0, 199),
    data=st.binary(max_size=64),
)
def test_add_bytes_round_trip(instance, offset, data):
    data = data[: 200 - offset]
    state = KeccakP1600Times4()
    state.add_bytes(instance, data, offset)
    assert state.extract_bytes(instance, offset, len(data)) == data
    state.add_bytes(instance, data, offset)
    assert state.extract_bytes(instance, 0, 200) == bytes(200)


def test_overwrite_bytes_and_isolation():
    state = KeccakP1600Times4()
    state.add_bytes(1, b"\xff" * 200)
    state.overwrite_bytes(1, b"hello world", 3)
    raw = state.extract_bytes(1, 0, 200)
    assert raw[3:14] == b"hello world"
    assert raw[:3] == b"\xff" * 3
    assert raw[14:] == b"\xff" * 186
    for other in (0, 2, 3):
        assert state.extract_bytes(other, 0, 200) == bytes(200)


def test_overwrite_with_zeroes():
    state = KeccakP1600Times4()
    state.add_bytes(2, b"\xaa" * 200)
    state.overwrite_with_zeroes(2, 13)
    raw = state.extract_bytes(2, 0, 200)
    assert raw[:13] == bytes(13)
    assert raw[13:] == b"\xaa" * 187


def test_extract_and_add_bytes_xors_state():
    state = KeccakP1600Times4()
    state.add_bytes(3, bytes(range(200)))
    state.permute_all_24rounds()
    data = b"secret message!"
    out = state.extract_and_add_bytes(3, data, 5)
    stream = state.extract_bytes(3, 5, len(data))
    assert bytes(a ^ b for a, b in zip(out, stream)) == data


def test_lanes_all_round_trip_and_extract_and_add():
    data = bytes(range(256)) + bytes(range(64))
    state = KeccakP1600Times4()
    state.overwrite_lanes_all(data, 10, 10)
    out = state.extract_lanes_all(10, 10)
    assert out == data[:len(out)]
    xored = state.extract_and_add_lanes_all(out, 10, 10)
    assert xored == bytes(len(out))
    state.add_lanes_all(data, 10, 10)
    assert state.extract_bytes(0, 0, 200) == bytes(200)


def test_lane_layout_places_instances_apart():
    data = bytearray(4 * 25 * 8)
    for instance in range(4):
        data[instance * 200] = instance + 10
    state = KeccakP1600Times4()
    state.add_lanes_all(bytes(data), 25, 25)
    for instance in range(4):
        assert state.extract_bytes(instance, 0, 1) == bytes([instance + 10])


def test_initialize_all_clears():
    state = KeccakP1600Times4()
    state.add_bytes(0, b"\x01" * 50)
    state.permute_all_24rounds()
    state.initialize_all()
    for instance in range(4):
        assert state.extract_bytes(instance, 0, 200) == bytes(200)


def test_errors():
    state = KeccakP1600Times4()
    with pytest.raises(ValueError):
        state.add_bytes(4, b"x")
    with pytest.raises(ValueError):
        state.extract_bytes(0, 195, 10)
    with pytest.raises(ValueError):
        state.overwrite_with_zeroes(0, 201)
    with pytest.raises(ValueError):
        state.add_lanes_all(bytes(10), 17, 17)
    with pytest.raises(ValueError):
        state.extract_lanes_all(26, 26)
    with pytest.raises(ValueError):
        state.fast_loop_absorb(1, 0, 0, bytes(64))