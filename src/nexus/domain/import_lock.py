"""Single-slot guard so only one import runs at a time."""

import threading

from nexus.domain.errors import BusyError, import_already_running


class ImportLock:
    """Non-blocking, single-slot lock.

    A second caller does not queue; it gets ``BusyError`` straight away.
    Use as a context manager::

        with lock:
            ...
    """

    def __init__(self):
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def acquire(self) -> None:
        if not self._lock.acquire(blocking=False):
            raise BusyError(import_already_running())

    def release(self) -> None:
        self._lock.release()

    def __enter__(self) -> "ImportLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
