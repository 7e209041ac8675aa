"""
Redis Enrichment Cache

Persistent cache for deployments that run more than one pipeline process.
"""
import json
from datetime import datetime
from typing import Any, Dict, Optional

import redis

from config.settings import settings
from src.leadenrich.cache.base import is_expired, utcnow
from src.leadenrich.models.enrichment import Enrichment
from src.leadenrich.utils.logger import get_logger

logger = get_logger(__name__)


class RedisEnrichmentCache:
    """
    Stores each enrichment as a JSON document under ``<prefix>:<fingerprint>``.

    The document carries its own ``created_at`` so staleness survives
    restarts. Connection and command errors propagate to the caller.
    """

    blocking = True

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
        ttl_days: Optional[int] = None,
    ):
        """
        Args:
            client: Redis client (built from settings.redis_url when omitted)
            prefix: Key prefix
            ttl_days: Hard expiry passed to Redis; entries older than this are
                dropped by the server even if nobody calls clear()
        """
        if client is None:
            if not settings.redis_url:
                raise ValueError("redis_url is not configured")
            client = redis.Redis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
        self.client = client
        self.prefix = prefix or settings.enrichment_cache_prefix
        self.ttl_seconds = ttl_days * 86400 if ttl_days and ttl_days > 0 else None
        logger.info("redis_cache_initialized", prefix=self.prefix, ttl_seconds=self.ttl_seconds)

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def _load(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self.client.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    def get(self, key: str) -> Optional[Enrichment]:
        document = self._load(key)
        if document is None:
            return None
        return Enrichment.model_validate(document["enrichment"])

    def set(self, key: str, enrichment: Enrichment) -> None:
        payload = json.dumps({
            "created_at": utcnow().isoformat(),
            "enrichment": enrichment.to_dict(),
        })
        if self.ttl_seconds:
            self.client.setex(self._key(key), self.ttl_seconds, payload)
        else:
            self.client.set(self._key(key), payload)

    def is_stale(self, key: str, stale_days: int) -> bool:
        document = self._load(key)
        if document is None:
            return True
        created_at = datetime.fromisoformat(document["created_at"])
        return is_expired(created_at, stale_days)

    def delete(self, key: str) -> bool:
        return bool(self.client.delete(self._key(key)))

    def _keys(self) -> list:
        return list(self.client.scan_iter(match=f"{self.prefix}:*"))

    def clear(self) -> int:
        keys = self._keys()
        if not keys:
            return 0
        removed = self.client.delete(*keys)
        logger.info("redis_cache_cleared", prefix=self.prefix, removed=removed)
        return removed

    def size(self) -> int:
        return len(self._keys())

    def stats(self) -> Dict[str, Any]:
        try:
            return {
                "backend": "redis",
                "available": True,
                "size": self.size(),
            }
        except redis.RedisError as e:
            return {
                "backend": "redis",
                "available": False,
                "size": 0,
                "error": str(e),
            }
