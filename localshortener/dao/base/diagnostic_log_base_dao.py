"""Abstract base class for diagnostic log data access objects (DAOs).

The diagnostic log is an append-only, size-capped collection of log entries,
persisted independently of the short URL collection. Only the most recent
entries are retained.

Entry format:
    {
        "timestamp": "2025-10-15T12:00:00.000Z",
        "level": "INFO" | "WARN" | "ERROR" | "DEBUG",
        "logger": "localshortener.registry.url_registry",
        "message": "Short URL created.",
        "data": {...} | None
    }
"""

from abc import ABC, abstractmethod
from typing import Optional

from localshortener.types import LogEntry


class DiagnosticLogBaseDAO(ABC):
    """Interface for diagnostic log data access objects (DAOs).

    Methods:
        append(entry: LogEntry, **kwargs) -> DiagnosticLogBaseDAO:
            Append an entry, dropping the oldest entries beyond the cap.

        entries(level: str | None = None, limit: int | None = None, **kwargs) -> list[LogEntry]:
            Return stored entries (oldest first), optionally filtered by level
            and cut down to the `limit` most recent ones.

        clear(**kwargs) -> DiagnosticLogBaseDAO:
            Remove every stored entry.
    """

    @abstractmethod
    def append(self, entry: LogEntry, **kwargs) -> 'DiagnosticLogBaseDAO':
        pass

    @abstractmethod
    def entries(self, level: Optional[str] = None, limit: Optional[int] = None, **kwargs) -> list[LogEntry]:
        pass

    @abstractmethod
    def clear(self, **kwargs) -> 'DiagnosticLogBaseDAO':
        pass
