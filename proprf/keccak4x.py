"""Four interleaved Keccak-p[1600] states that are processed together.

The states are stored lane by lane: lane ``p`` of instance ``i`` sits at
position ``4 * p + i``. Byte-level operations address one instance. Its
200-byte state is read little-endian lane by lane. Lane-level operations
address all four instances at once. In their buffers, instance ``i``
starts ``i * lane_offset`` lanes from the start.
"""

from __future__ import annotations

from collections.abc import Iterable

from proprf.keccak_f import LANE_COUNT, keccak_p1600

INSTANCES = 4
LANE_BYTES = 8
STATE_BYTES = LANE_COUNT * LANE_BYTES

_MASK64 = (1 << 64) - 1


def _lane_index(position: int, instance: int) -> int:
    return position * INSTANCES + instance


def _read_lane(data: bytes, start: int) -> int:
    return int.from_bytes(data[start:start + LANE_BYTES], "little")


class KeccakP1600Times4:
    """Four Keccak-p[1600] states, permuted in lockstep."""

    def __init__(self) -> None:
        self._lanes: list[int] = [0] * (LANE_COUNT * INSTANCES)

    # -- helpers -----------------------------------------------------------

    @staticmethod
    def _check_instance(instance: int) -> None:
        if not 0 <= instance < INSTANCES:
            raise ValueError(f"instance must lie between 0 and {INSTANCES - 1}")

    @staticmethod
    def _check_span(offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > STATE_BYTES:
            raise ValueError(
                f"bytes {offset}..{offset + length} fall outside the "
                f"{STATE_BYTES}-byte state"
            )

    @staticmethod
    def _check_layout(data_len: int | None, lane_count: int, lane_offset: int) -> None:
        if not 0 <= lane_count <= LANE_COUNT:
            raise ValueError(f"lane_count must lie between 0 and {LANE_COUNT}")
        if lane_offset < 0:
            raise ValueError("lane_offset must not be negative")
        if data_len is not None:
            needed = (3 * lane_offset + lane_count) * LANE_BYTES
            if data_len < needed:
                raise ValueError(f"need {needed} bytes of data, got {data_len}")

    def _instance_bytes(self, instance: int) -> bytearray:
        out = bytearray()
        for position in range(LANE_COUNT):
            out += self._lanes[_lane_index(position, instance)].to_bytes(
                LANE_BYTES, "little"
            )
        return out

    def _store_instance(self, instance: int, state: bytes) -> None:
        for position in range(LANE_COUNT):
            self._lanes[_lane_index(position, instance)] = _read_lane(
                state, position * LANE_BYTES
            )

    def _lane_positions(self, lane_count: int, lane_offset: int) -> Iterable[tuple[int, int, int]]:
        """Yield (state index, instance, byte start in buffer) for every lane."""
        for position in range(lane_count):
            for instance in range(INSTANCES):
                start = (instance * lane_offset + position) * LANE_BYTES
                yield _lane_index(position, instance), instance, start

    # -- whole-state operations -------------------------------------------

    def initialize_all(self) -> None:
        """Set all four states to zero."""
        self._lanes = [0] * (LANE_COUNT * INSTANCES)

    def permute_all_24rounds(self) -> None:
        """Apply the full 24-round permutation to every instance."""
        self._permute(24)

    def permute_all_12rounds(self) -> None:
        """Apply the last 12 rounds of the permutation to every instance."""
        self._permute(12)

    def _permute(self, rounds: int) -> None:
        for instance in range(INSTANCES):
            state = [
                self._lanes[_lane_index(p, instance)] for p in range(LANE_COUNT)
            ]
            for position, lane in enumerate(keccak_p1600(state, rounds)):
                self._lanes[_lane_index(position, instance)] = lane

    # -- byte-level operations on one instance ------------------------------

    def add_bytes(self, instance: int, data: bytes, offset: int = 0) -> None:
        """XOR ``data`` into one instance starting at byte ``offset``."""
        self._check_instance(instance)
        data = bytes(data)
        self._check_span(offset, len(data))
        state = self._instance_bytes(instance)
        for i, byte in enumerate(data, start=offset):
            state[i] ^= byte
        self._store_instance(instance, state)

    def overwrite_bytes(self, instance: int, data: bytes, offset: int = 0) -> None:
        """Replace bytes of one instance starting at byte ``offset``."""
        self._check_instance(instance)
        data = bytes(data)
        self._check_span(offset, len(data))
        state = self._instance_bytes(instance)
        state[offset:offset + len(data)] = data
        self._store_instance(instance, state)

    def overwrite_with_zeroes(self, instance: int, byte_count: int) -> None:
        """Zero the first ``byte_count`` bytes of one instance."""
        self._check_instance(instance)
        self._check_span(0, byte_count)
        state = self._instance_bytes(instance)
        state[:byte_count] = bytes(byte_count)
        self._store_instance(instance, state)

    def extract_bytes(self, instance: int, offset: int, length: int) -> bytes:
        """Return ``length`` bytes of one instance starting at ``offset``."""
        self._check_instance(instance)
        self._check_span(offset, length)
        return bytes(self._instance_bytes(instance)[offset:offset + length])

    def extract_and_add_bytes(self, instance: int, data: bytes, offset: int = 0) -> bytes:
        """Return ``data`` XORed with the state bytes starting at ``offset``."""
        self._check_instance(instance)
        data = bytes(data)
        self._check_span(offset, len(data))
        state = self._instance_bytes(instance)[offset:offset + len(data)]
        return bytes(a ^ b for a, b in zip(data, state))

    # -- lane-level operations on all instances -----------------------------

    def add_lanes_all(self, data: bytes, lane_count: int, lane_offset: int) -> None:
        """XOR ``lane_count`` lanes into each instance from ``data``."""
        data = bytes(data)
        self._check_layout(len(data), lane_count, lane_offset)
        for index, _, start in self._lane_positions(lane_count, lane_offset):
            self._lanes[index] ^= _read_lane(data, start)

    def overwrite_lanes_all(self, data: bytes, lane_count: int, lane_offset: int) -> None:
        """Replace the first ``lane_count`` lanes of each instance."""
        data = bytes(data)
        self._check_layout(len(data), lane_count, lane_offset)
        for index, _, start in self._lane_positions(lane_count, lane_offset):
            self._lanes[index] = _read_lane(data, start)

    def extract_lanes_all(self, lane_count: int, lane_offset: int) -> bytes:
        """Return the first ``lane_count`` lanes of each instance.

        Instance ``i`` starts ``i * lane_offset`` lanes into the returned
        buffer. Bytes between the instances are zero.
        """
        self._check_layout(None, lane_count, lane_offset)
        out = bytearray((3 * lane_offset + lane_count) * LANE_BYTES)
        for index, _, start in self._lane_positions(lane_count, lane_offset):
            out[start:start + LANE_BYTES] = self._lanes[index].to_bytes(
                LANE_BYTES, "little"
            )
        return bytes(out)

    def extract_and_add_lanes_all(self, data: bytes, lane_count: int, lane_offset: int) -> bytes:
        """Return ``data`` with the first lanes of each instance XORed in.

        Bytes outside the lane regions are returned unchanged.
        """
        out = bytearray(data)
        self._check_layout(len(out), lane_count, lane_offset)
        for index, _, start in self._lane_positions(lane_count, lane_offset):
            lane = (_read_lane(out, start) ^ self._lanes[index]) & _MASK64
            out[start:start + LANE_BYTES] = lane.to_bytes(LANE_BYTES, "little")
        return bytes(out)

    # -- absorbing loops ------------------------------------------------------

    def fast_loop_absorb(
        self,
        lane_count: int,
        lane_offset_parallel: int,
        lane_offset_serial: int,
        data: bytes,
    ) -> int:
        """Absorb whole blocks with 24-round permutations; return bytes consumed."""
        return self._absorb(lane_count, lane_offset_parallel, lane_offset_serial, data, 24)

    def fast_loop_absorb_12rounds(
        self,
        lane_count: int,
        lane_offset_parallel: int,
        lane_offset_serial: int,
        data: bytes,
    ) -> int:
        """Absorb whole blocks with 12-round permutations; return bytes consumed."""
        return self._absorb(lane_count, lane_offset_parallel, lane_offset_serial, data, 12)

    def _absorb(
        self,
        lane_count: int,
        lane_offset_parallel: int,
        lane_offset_serial: int,
        data: bytes,
        rounds: int,
    ) -> int:
        self._check_layout(None, lane_count, lane_offset_parallel)
        data = bytes(data)
        block_span = (lane_offset_parallel * 3 + lane_count) * LANE_BYTES
        step = lane_offset_serial * LANE_BYTES
        position = 0
        remaining = len(data)
        while remaining >= block_span:
            if step <= 0:
                raise ValueError("lane_offset_serial must be positive")
            self.add_lanes_all(data[position:], lane_count, lane_offset_parallel)
            self._permute(rounds)
            position += step
            remaining -= step
        return position