"""
In-Memory Enrichment Cache

Process-local store used by default and in tests.
"""
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from src.leadenrich.cache.base import is_expired, utcnow
from src.leadenrich.models.enrichment import Enrichment


@dataclass(frozen=True)
class CacheEntry:
    enrichment: Enrichment
    created_at: datetime


class MemoryEnrichmentCache:
    """
    Thread-safe dict-backed cache.

    Entries are deep-copied in and out so a caller mutating a returned
    Enrichment cannot change what is cached.
    """

    blocking = False

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            clock: Returns the current UTC time (override in tests)
        """
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._clock = clock or utcnow

    def get(self, key: str) -> Optional[Enrichment]:
        with self._lock:
            entry = self._entries.get(key)
        return entry.enrichment.model_copy(deep=True) if entry else None

    def set(self, key: str, enrichment: Enrichment) -> None:
        entry = CacheEntry(enrichment=enrichment.model_copy(deep=True), created_at=self._clock())
        with self._lock:
            self._entries[key] = entry

    def created_at(self, key: str) -> Optional[datetime]:
        with self._lock:
            entry = self._entries.get(key)
        return entry.created_at if entry else None

    def is_stale(self, key: str, stale_days: int) -> bool:
        created_at = self.created_at(key)
        if created_at is None:
            return True
        return is_expired(created_at, stale_days, now=self._clock())

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        return removed

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        """Backend and size. Hits are counted by the pipeline after its staleness check."""
        return {"backend": "memory", "size": self.size()}
