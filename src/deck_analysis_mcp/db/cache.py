"""Analysis result caches."""

import time
from abc import ABC, abstractmethod

from ..models import AnalysisReport


class AnalysisCache(ABC):
    """Key/value store for finished analysis reports with expiry."""

    @abstractmethod
    def get(self, key: str) -> AnalysisReport | None:
        """Return the cached report, or None when missing or expired."""

    @abstractmethod
    def set(self, key: str, report: AnalysisReport, ttl_seconds: int) -> None:
        """Store a report for ttl_seconds."""


class InMemoryAnalysisCache(AnalysisCache):
    """Process-local cache, used when no database is configured and in tests."""

    def __init__(self):
        self._entries: dict[str, tuple[float, AnalysisReport]] = {}

    def get(self, key: str) -> AnalysisReport | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, report = entry
        if expires_at <= time.time():
            del self._entries[key]
            return None
        return report

    def set(self, key: str, report: AnalysisReport, ttl_seconds: int) -> None:
        self._entries[key] = (time.time() + ttl_seconds, report)

    def __len__(self) -> int:
        return len(self._entries)
