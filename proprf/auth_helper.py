"""Opening and checking of authenticated values between prover and verifier.

The prover (ALICE) holds shares as 128-bit blocks. The upper lane is the
value and the lower lane is its MAC. The verifier (BOB) holds keys in the
lower lane of a block. A MAC satisfies ``mac = key + value * delta_fp`` in
the field of order 2**61 - 1. Opened MACs are folded into a running SHA-256
transcript. The two transcripts are compared in ``triple_equality_check``.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from enum import IntEnum

from proprf.channel import Channel
from proprf.field61 import add_mod, high64, low64, mult_mod

_WORD_BYTES = 8
_MASK64 = (1 << 64) - 1


class Party(IntEnum):
    """The two roles in a protocol run."""

    ALICE = 1
    BOB = 2


class CheckFailedError(Exception):
    """Raised when the verifier finds the prover's openings inconsistent."""


class _Transcript:
    """A SHA-256 hash that can be reset after its digest is taken."""

    def __init__(self) -> None:
        self._hash = hashlib.sha256()

    def put(self, data: bytes) -> None:
        self._hash.update(data)

    def digest(self) -> bytes:
        return self._hash.digest()

    def reset(self) -> None:
        self._hash = hashlib.sha256()


def _words(values: Iterable[int]) -> bytes:
    return b"".join((v & _MASK64).to_bytes(_WORD_BYTES, "little") for v in values)


class DoubAuthHelper:
    """Opens authenticated field values and checks them in one batch."""

    def __init__(self, party: Party, channel: Channel) -> None:
        self.party = Party(party)
        self.channel = channel
        self.hash = _Transcript()
        self.delta_f2: int | None = None
        self.delta_fp: int | None = None

    def set_delta(self, delta_f2: int, delta_fp: int) -> None:
        """Install the global keys of the boolean and arithmetic fields."""
        self.delta_f2 = delta_f2
        self.delta_fp = delta_fp

    def open_check_send(self, shares: Iterable[int]) -> list[int]:
        """Prover side: send the values of ``shares`` and hash their MACs."""
        shares = list(shares)
        values = [high64(share) for share in shares]
        macs = [low64(share) for share in shares]
        self.hash.put(_words(macs))
        self.channel.send(_words(values))
        return values

    def open_check_recv(self, keys: Iterable[int]) -> list[int]:
        """Verifier side: receive the opened values and hash the expected MACs."""
        if self.delta_fp is None:
            raise ValueError("delta_fp is not set")
        keys = list(keys)
        raw = self.channel.recv(len(keys) * _WORD_BYTES)
        values = [
            int.from_bytes(raw[i:i + _WORD_BYTES], "little")
            for i in range(0, len(raw), _WORD_BYTES)
        ]
        delta = self.delta_fp & _MASK64
        macs = [
            add_mod(low64(key), mult_mod(value, delta))
            for key, value in zip(keys, values)
        ]
        self.hash.put(_words(macs))
        return values

    def equality_check(self, hasher: _Transcript) -> bool:
        """Compare the transcript with the other party's; reset it afterwards.

        The prover sends its digest and always returns True. The verifier
        returns whether the received digest matches its own.
        """
        digest = hasher.digest()
        hasher.reset()
        if self.party is Party.ALICE:
            self.channel.send(digest)
            self.channel.flush()
            return True
        received = self.channel.recv(len(digest))
        return received == digest

    def triple_equality_check(self) -> bool:
        """Check the running transcript; raise CheckFailedError on mismatch."""
        if not self.equality_check(self.hash):
            raise CheckFailedError("cut and choose fails")
        return True