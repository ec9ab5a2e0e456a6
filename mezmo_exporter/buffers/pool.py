"""Thread-safe pool of reusable byte buffers."""

import io
import threading
from collections.abc import Iterator
from contextlib import contextmanager

DEFAULT_MAX_IDLE = 16

# Global instances
_DEFAULT_POOL = None
_LOCK = threading.Lock()


def reset_buffer(buffer: io.BytesIO) -> io.BytesIO:
    """Drop any content and rewind so the buffer is empty."""
    buffer.seek(0)
    buffer.truncate(0)
    return buffer


class BufferPool:
    """Pool of io.BytesIO scratch buffers shared by concurrent pushes.

    Features:
    - acquire() never blocks, a fresh buffer is created when none is idle
    - release() keeps at most max_idle buffers, extra ones are dropped
    - Buffers come back with whatever the last user wrote; callers reset
      them with reset_buffer() before writing
    """

    def __init__(self, max_idle: int = DEFAULT_MAX_IDLE):
        self.max_idle = max_idle
        self._lock = threading.Lock()
        self._idle: list[io.BytesIO] = []

    def acquire(self) -> io.BytesIO:
        with self._lock:
            if self._idle:
                return self._idle.pop()
        return io.BytesIO()

    def release(self, buffer: io.BytesIO):
        with self._lock:
            if len(self._idle) < self.max_idle:
                self._idle.append(buffer)

    @contextmanager
    def borrow(self) -> Iterator[io.BytesIO]:
        """Acquire a buffer, reset it, and release it when the block exits."""
        buffer = reset_buffer(self.acquire())
        try:
            yield buffer
        finally:
            self.release(buffer)

    def idle_count(self) -> int:
        with self._lock:
            return len(self._idle)


def get_default_pool() -> BufferPool:
    """Get or create the process wide pool."""
    global _DEFAULT_POOL
    if _DEFAULT_POOL is not None:
        return _DEFAULT_POOL

    with _LOCK:
        if _DEFAULT_POOL is None:
            _DEFAULT_POOL = BufferPool()
        return _DEFAULT_POOL
