"""Statement framing: sentinel tokens, completion detection and the output buffer."""

from __future__ import annotations

import uuid

from shelldb.constants import SENTINEL_PREFIX, SENTINEL_SUFFIX


def make_sentinel_token() -> str:
    """Return a fresh token for a connection's completion banner."""

    return f"{SENTINEL_PREFIX}{uuid.uuid4().hex.upper()}{SENTINEL_SUFFIX}"


def is_complete(buffer: bytes | bytearray, sentinel: bytes) -> bool:
    """Return True iff the buffer's trailing bytes are exactly the sentinel.

    Only the last ``len(sentinel)`` bytes are compared, so running this after
    every appended chunk costs the same regardless of how much output has
    accumulated.
    """

    if not sentinel or len(buffer) < len(sentinel):
        return False
    return buffer[-len(sentinel) :] == sentinel


class OutputBuffer:
    """Bytes received from the shell since the last statement boundary."""

    def __init__(self, sentinel: bytes):
        if not sentinel:
            raise ValueError("sentinel must be a non-empty byte string")
        self.sentinel = sentinel
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def append(self, chunk: bytes) -> bool:
        """Append a chunk and report whether the statement output is complete."""

        self._data.extend(chunk)
        return is_complete(self._data, self.sentinel)

    @property
    def complete(self) -> bool:
        return is_complete(self._data, self.sentinel)

    def peek(self) -> bytes:
        return bytes(self._data)

    def drain(self) -> bytes:
        """Return the accumulated bytes and reset the buffer."""

        data = bytes(self._data)
        self._data.clear()
        return data

    def clear(self) -> None:
        self._data.clear()
