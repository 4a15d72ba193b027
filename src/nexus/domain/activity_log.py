"""In-memory activity log streamed to the operator during an import."""

import logging
from collections import deque
from itertools import count
from typing import Callable, Optional

from nexus.domain.entities import ImportLogEntry, Severity
from nexus.logger import get_logger

logger = get_logger(__name__)

Listener = Callable[[ImportLogEntry], None]

_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.NEW: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class ImportLog:
    """Append-only, capped log of import activity.

    Listeners are called synchronously for every appended entry, which is
    how the CLI streams progress while an import runs. Once ``capacity`` is
    reached the oldest entries are discarded.
    """

    def __init__(self, capacity: int = 500, listeners: Optional[list[Listener]] = None):
        self._entries: deque[ImportLogEntry] = deque(maxlen=capacity)
        self._ids = count(1)
        self._listeners: list[Listener] = list(listeners or [])

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def append(self, severity: Severity, message: str) -> ImportLogEntry:
        entry = ImportLogEntry(id=next(self._ids), severity=severity, message=message)
        self._entries.append(entry)
        logger.log(_LOG_LEVELS[severity], "[%s] %s", severity.value, message)
        for listener in self._listeners:
            listener(entry)
        return entry

    def info(self, message: str) -> ImportLogEntry:
        return self.append(Severity.INFO, message)

    def success(self, message: str) -> ImportLogEntry:
        return self.append(Severity.SUCCESS, message)

    def warning(self, message: str) -> ImportLogEntry:
        return self.append(Severity.WARNING, message)

    def error(self, message: str) -> ImportLogEntry:
        return self.append(Severity.ERROR, message)

    def new(self, message: str) -> ImportLogEntry:
        return self.append(Severity.NEW, message)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def entries(self) -> list[ImportLogEntry]:
        return list(self._entries)

    def by_severity(self, severity: Severity) -> list[ImportLogEntry]:
        return [entry for entry in self._entries if entry.severity is severity]

    def __len__(self) -> int:
        return len(self._entries)
