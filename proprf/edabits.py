"""Bookkeeping of extended doubly-authenticated bits (edaBits).

A batch holds ``ell = buckets * batch + opened`` candidates. The first
``batch`` are kept. ``opened`` are opened at a random point of the remaining
``ell - batch`` faulty ones. The rest are combined bucket-wise with the kept
ones. Indices into the faulty region wrap around past its end.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from proprf.auth_helper import Party
from proprf.channel import Channel
from proprf.field61 import PR, add_mod, high64, low64, make_block, mult_mod

BATCH = 800000
BUCKETS = 2
OPENED = 2

_MASK32 = (1 << 32) - 1


@dataclass
class EdabitLayout:
    """Index arithmetic for one batch of edaBit candidates."""

    batch: int = BATCH
    buckets: int = BUCKETS
    opened: int = OPENED
    np_rg: int = 0

    def __post_init__(self) -> None:
        if self.batch < 1 or self.buckets < 1 or self.opened < 0:
            raise ValueError("batch and buckets must be positive, opened non-negative")

    @property
    def ell(self) -> int:
        """Number of candidates in one batch."""
        return self.buckets * self.batch + self.opened

    @property
    def ell_faulty(self) -> int:
        """Number of candidates outside the kept part."""
        return self.ell - self.batch

    @property
    def bucket_step(self) -> int:
        """Stride between members of one bucket."""
        return self.buckets - 1

    def fp_index(self, offset: int) -> int:
        """Wrap an index into the arithmetic candidate buffer."""
        if offset >= self.np_rg:
            offset -= self.ell_faulty
        return offset

    def f2_index(self, offset: int) -> int:
        """Wrap an index into the boolean candidate buffer."""
        if offset >= self.ell:
            offset -= self.ell_faulty
        return offset


def plan_rounds(length: int, available: int, batch: int = BATCH) -> list[int]:
    """Split a conversion of ``length`` values into rounds.

    The first round uses the ``available`` edaBits left over. Every later
    round uses a fresh batch. Return the number of values per round.
    """
    if length < 0 or available < 0:
        raise ValueError("length and available must not be negative")
    if batch < 1:
        raise ValueError("batch must be positive")
    if length <= available:
        rounds, first, leftover = 1, length, 0
    else:
        first = available
        rounds = (length - available) // batch + 2
        leftover = (length - available) % batch
        if leftover == 0:
            rounds -= 1
            leftover = batch
        if available == 0:
            rounds -= 1
            first = batch
            if rounds == 1:
                first = leftover
    sizes = []
    for j in range(rounds):
        num = batch
        if j == rounds - 1:
            num = leftover
        if j == 0:
            num = first
        sizes.append(num)
    return sizes


def intfp_add(party: Party, a: int, b: int) -> int:
    """Add two authenticated shares held by ``party``."""
    if Party(party) is Party.ALICE:
        return make_block(
            add_mod(high64(a), high64(b)), add_mod(low64(a), low64(b))
        )
    return make_block(0, add_mod(low64(a), low64(b)))


def intfp_add_const(party: Party, a: int, b: int, delta_fp: int | None = None) -> int:
    """Add the public constant ``b`` to an authenticated share."""
    if Party(party) is Party.ALICE:
        return make_block(add_mod(high64(a), b), low64(a))
    if delta_fp is None:
        raise ValueError("the verifier needs delta_fp")
    shift = PR - mult_mod(b, low64(delta_fp))
    return make_block(0, add_mod(low64(a), shift))


def random_point(party: Party, channel: Channel, upper: int) -> int:
    """Agree on a point in ``range(upper)`` chosen by the verifier."""
    if upper < 1:
        raise ValueError("upper must be positive")
    if Party(party) is Party.ALICE:
        return int.from_bytes(channel.recv(4), "little")
    point = secrets.randbits(32) % upper
    channel.send((point & _MASK32).to_bytes(4, "little"))
    channel.flush()
    return point