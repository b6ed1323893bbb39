"""Clear-value side of a read/write memory checked by trace sorting.

Every access is recorded as a packed row of 128-bit words. The first word
holds ``index || step || op`` in its upper 64 bits and the first value word
in its lower 64 bits. Further value words follow two per row word, high
lane first. A trace is consistent when, once it is sorted by (index, step),
every read returns the value left by the access before it to the same index.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from proprf.field61 import high64, low64

STEP_FIELD_BITS = 31
VALUE_WORD_BITS = 64

_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1


class RamCheckError(Exception):
    """Raised when a memory trace fails the consistency check."""


@dataclass(frozen=True)
class TraceEntry:
    """One memory access: where, when, whether it wrote, and the value."""

    index: int
    step: int
    is_write: bool
    value: tuple[int, ...]


def _check_words(value: Sequence[int]) -> list[int]:
    words = list(value)
    if not words:
        raise ValueError("a value needs at least one 64-bit word")
    for word in words:
        if not 0 <= word <= _MASK64:
            raise ValueError("value word out of 64-bit range")
    return words


def pack_row(index: int, value: Sequence[int], step: int, op: int) -> list[int]:
    """Pack one access into ``len(value) // 2 + 1`` 128-bit words."""
    words = _check_words(value)
    header = ((index << (STEP_FIELD_BITS + 1)) | (step << 1) | (op & 0x1)) & _MASK64
    row = [((header << VALUE_WORD_BITS) | words[0]) & _MASK128]
    rest = words[1:]
    for j in range(0, len(rest), 2):
        high = rest[j]
        low = rest[j + 1] if j + 1 < len(rest) else 0
        row.append((high << VALUE_WORD_BITS) | low)
    if len(row) < len(words) // 2 + 1:
        # An even word count leaves a final row whose low lane is empty.
        row.append(0)
    return row


def unpack_row(
    row: Sequence[int], value_words: int, index_bits: int, step_bits: int
) -> TraceEntry:
    """Recover the access that ``pack_row`` packed into ``row``."""
    if value_words < 1:
        raise ValueError("value_words must be positive")
    row = list(row)
    if len(row) != value_words // 2 + 1:
        raise ValueError(
            f"a row for {value_words} words has {value_words // 2 + 1} parts, "
            f"got {len(row)}"
        )
    words = [low64(row[0])]
    for part in row[1:]:
        words.append(high64(part))
        words.append(low64(part))
    header = high64(row[0])
    step_mask = (1 << step_bits) - 1
    index_mask = (1 << index_bits) - 1
    return TraceEntry(
        index=(header >> (STEP_FIELD_BITS + 1)) & index_mask,
        step=(header >> 1) & step_mask,
        is_write=bool(header & 0x1),
        value=tuple(words[:value_words]),
    )


def _sort_key(entry: TraceEntry) -> tuple[int, int, int, int]:
    return (entry.index, entry.step, int(entry.is_write), entry.value[0])


def trace_is_consistent(entries: Iterable[TraceEntry]) -> bool:
    """Sort the accesses and check that every read sees the last value stored.

    Between neighbours at the same index the step must increase, and a read
    must carry the same value as the access before it.
    """
    ordered = sorted(entries, key=_sort_key)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.index != current.index:
            continue
        if not previous.step < current.step:
            return False
        if not current.is_write and previous.value != current.value:
            return False
    return True


class RamTrace:
    """A memory of ``2**index_bits`` cells that records every access."""

    def __init__(self, index_bits: int, step_bits: int, value_bits: int) -> None:
        if index_bits < 1 or step_bits < 2 or value_bits < 1:
            raise ValueError("index_bits, step_bits and value_bits must be positive")
        self.index_bits = index_bits
        self.step_bits = step_bits
        self.value_bits = value_bits
        self.value_words = (value_bits + VALUE_WORD_BITS - 1) // VALUE_WORD_BITS
        self.capacity = 1 << index_bits
        self.step = 0
        self.rows: list[list[int]] = []
        self._memory: list[tuple[int, ...]] = self._blank_memory()

    def _blank_memory(self) -> list[tuple[int, ...]]:
        return [(0,) * self.value_words for _ in range(self.capacity)]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.capacity:
            raise IndexError(f"index {index} outside memory of {self.capacity} cells")

    def read(self, index: int) -> list[int]:
        """Return the value at ``index`` and record the read."""
        self._check_index(index)
        value = self._memory[index]
        self.rows.append(pack_row(index, value, self.step, 0))
        self.step += 1
        return list(value)

    def write(self, index: int, value: Sequence[int]) -> None:
        """Store ``value`` at ``index`` and record the write."""
        self._check_index(index)
        words = _check_words(value)
        if len(words) != self.value_words:
            raise ValueError(f"value must have {self.value_words} words, got {len(words)}")
        self._memory[index] = tuple(words)
        self.rows.append(pack_row(index, words, self.step, 1))
        self.step += 1

    def entries(self) -> list[TraceEntry]:
        """The recorded accesses in the order they happened."""
        return [
            unpack_row(row, self.value_words, self.index_bits, self.step_bits)
            for row in self.rows
        ]

    def check(self) -> None:
        """Verify the trace, then clear the memory, the trace and the step count."""
        if not trace_is_consistent(self.entries()):
            raise RamCheckError("zk ram ext check error")
        self._memory = self._blank_memory()
        self.rows.clear()
        self.step = 0

    def refresh(self) -> bool:
        """Check and restart the trace once the step counter nears its limit.

        Every cell is read, the trace is checked, and every cell is written
        back. Return whether this happened.
        """
        if self.step + self.capacity != 1 << (self.step_bits - 1):
            return False
        saved = [self.read(i) for i in range(self.capacity)]
        self.check()
        for i, value in enumerate(saved):
            self.write(i, value)
        return True