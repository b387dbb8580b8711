"""Pool of reusable byte buffers for staging request bodies."""

from __future__ import annotations

import io
import threading
from collections.abc import Iterator
from contextlib import contextmanager


class BufferPool:
    """Thread-safe free list of ``io.BytesIO`` buffers.

    Buffers come back empty from :meth:`get`. Callers should prefer
    :meth:`borrow`, which returns the buffer on every exit path.
    """

    def __init__(self, max_idle: int = 16) -> None:
        self._max_idle = max_idle
        self._free: list[io.BytesIO] = []
        self._lock = threading.Lock()
        self._outstanding = 0

    @property
    def outstanding(self) -> int:
        """Number of buffers currently lent out."""
        with self._lock:
            return self._outstanding

    @property
    def idle(self) -> int:
        with self._lock:
            return len(self._free)

    def get(self) -> io.BytesIO:
        with self._lock:
            self._outstanding += 1
            if self._free:
                return self._free.pop()
        return io.BytesIO()

    def put(self, buf: io.BytesIO) -> None:
        buf.seek(0)
        buf.truncate()
        with self._lock:
            self._outstanding -= 1
            if len(self._free) < self._max_idle:
                self._free.append(buf)

    @contextmanager
    def borrow(self) -> Iterator[io.BytesIO]:
        buf = self.get()
        try:
            yield buf
        finally:
            self.put(buf)
