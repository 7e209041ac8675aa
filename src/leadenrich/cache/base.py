"""
Enrichment cache contract.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from src.leadenrich.models.enrichment import Enrichment


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_expired(created_at: datetime, stale_days: int, now: Optional[datetime] = None) -> bool:
    """
    Check whether an entry created at ``created_at`` is older than
    ``stale_days``. A non-positive window never expires.
    """
    if stale_days <= 0:
        return False
    now = now or utcnow()
    return now - created_at >= timedelta(days=stale_days)


@runtime_checkable
class EnrichmentCache(Protocol):
    """
    Key/value store of enrichments keyed by address fingerprint.

    ``blocking`` tells the pipeline whether calls do I/O and should run on
    a worker thread.
    """

    blocking: bool

    def get(self, key: str) -> Optional[Enrichment]:
        ...

    def set(self, key: str, enrichment: Enrichment) -> None:
        ...

    def is_stale(self, key: str, stale_days: int) -> bool:
        """True when the entry is missing or older than stale_days."""
        ...

    def delete(self, key: str) -> bool:
        ...

    def clear(self) -> int:
        """Remove every entry. Returns the number removed."""
        ...

    def size(self) -> int:
        ...

    def stats(self) -> Dict[str, Any]:
        ...
