"""Byte channels between the two parties of a protocol."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod


class Channel(ABC):
    """A reliable, ordered byte stream to the other party."""

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Queue bytes for the other party."""

    @abstractmethod
    def recv(self, size: int) -> bytes:
        """Return exactly ``size`` bytes from the other party."""

    @abstractmethod
    def flush(self) -> None:
        """Push queued bytes to the other party."""


class MemoryChannel(Channel):
    """One end of an in-process pipe; build a connected pair with make_pipe."""

    def __init__(self, timeout: float | None = 5.0) -> None:
        self.timeout = timeout
        self.bytes_sent = 0
        self.flushes = 0
        self._inbox = bytearray()
        self._cond = threading.Condition()
        self._peer: MemoryChannel | None = None

    def _connect(self, peer: MemoryChannel) -> None:
        self._peer = peer

    def send(self, data: bytes) -> None:
        if self._peer is None:
            raise ConnectionError("channel is not connected")
        payload = bytes(data)
        peer = self._peer
        with peer._cond:
            peer._inbox.extend(payload)
            peer._cond.notify_all()
        self.bytes_sent += len(payload)

    def recv(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("size must not be negative")
        with self._cond:
            ready = self._cond.wait_for(lambda: len(self._inbox) >= size, self.timeout)
            if not ready:
                raise TimeoutError(
                    f"wanted {size} bytes, only {len(self._inbox)} arrived"
                )
            data = bytes(self._inbox[:size])
            del self._inbox[:size]
            return data

    def flush(self) -> None:
        # Bytes are delivered on send; flushing only records the call.
        self.flushes += 1

    def pending(self) -> int:
        """Number of received bytes not yet read."""
        with self._cond:
            return len(self._inbox)


def make_pipe() -> tuple[MemoryChannel, MemoryChannel]:
    """Return two connected channel ends."""
    a, b = MemoryChannel(), MemoryChannel()
    a._connect(b)
    b._connect(a)
    return a, b