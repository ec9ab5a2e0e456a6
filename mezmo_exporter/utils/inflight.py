"""Counter of running operations that shutdown can wait on."""

import threading


class InFlightTracker:
    """Thread-safe count of in-flight operations.

    Usage:
        with tracker:
            do_work()

        tracker.wait()  # blocks until every `with` block has exited
    """

    def __init__(self):
        self._count = 0
        self._idle = threading.Condition(threading.Lock())

    def __enter__(self):
        with self._idle:
            self._count += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        with self._idle:
            self._count -= 1
            if self._count == 0:
                self._idle.notify_all()
        return False

    @property
    def count(self) -> int:
        with self._idle:
            return self._count

    def wait(self, timeout: float | None = None) -> bool:
        """Block until nothing is in flight. Returns False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._count == 0, timeout=timeout)
