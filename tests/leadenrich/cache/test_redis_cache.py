"""
Tests for the Redis enrichment cache, using an in-process stand-in client
"""
import fnmatch
import json
import sys
from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import redis

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.leadenrich.cache.base import utcnow
from src.leadenrich.cache.redis_store import RedisEnrichmentCache
from src.leadenrich.models.enrichment import Enrichment, Location


class DictRedis:
    """Minimal subset of the redis-py client backed by a dict."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed

    def scan_iter(self, match=None):
        return [k for k in list(self.data) if match is None or fnmatch.fnmatch(k, match)]


@pytest.fixture
def client():
    return DictRedis()


def sample_enrichment():
    return Enrichment(
        place_id="place-1",
        location=Location(lat=28.5383, lng=-81.3792),
        sources=["GoogleProvider:geocode"],
    )


class TestRedisEnrichmentCache:
    """Tests for RedisEnrichmentCache"""

    def test_round_trip(self, client):
        """Test storing and loading an enrichment"""
        cache = RedisEnrichmentCache(client=client, prefix="test")
        cache.set("abc", sample_enrichment())

        assert "test:abc" in client.data
        assert cache.get("abc") == sample_enrichment()

    def test_document_carries_created_at(self, client):
        """Test the stored JSON document layout"""
        cache = RedisEnrichmentCache(client=client, prefix="test")
        cache.set("abc", sample_enrichment())

        document = json.loads(client.data["test:abc"])

        assert "created_at" in document
        assert document["enrichment"]["place_id"] == "place-1"

    def test_ttl_uses_setex(self, client):
        """Test a hard expiry is passed to Redis"""
        cache = RedisEnrichmentCache(client=client, prefix="test", ttl_days=30)
        cache.set("abc", sample_enrichment())

        assert client.ttls["test:abc"] == 30 * 86400

    def test_staleness_from_document(self, client):
        """Test is_stale reads created_at from the document"""
        cache = RedisEnrichmentCache(client=client, prefix="test")
        client.data["test:old"] = json.dumps({
            "created_at": (utcnow() - timedelta(days=45)).isoformat(),
            "enrichment": sample_enrichment().to_dict(),
        })
        cache.set("new", sample_enrichment())

        assert cache.is_stale("old", 30)
        assert not cache.is_stale("new", 30)
        assert cache.is_stale("missing", 30)
        assert not cache.is_stale("old", 0)

    def test_clear_only_touches_prefix(self, client):
        """Test clear removes this cache's keys only"""
        client.data["other:key"] = "x"
        cache = RedisEnrichmentCache(client=client, prefix="test")
        cache.set("a", sample_enrichment())
        cache.set("b", sample_enrichment())

        assert cache.size() == 2
        assert cache.clear() == 2
        assert cache.size() == 0
        assert "other:key" in client.data
        assert cache.clear() == 0

    def test_stats_reports_unavailable(self):
        """Test stats degrade when Redis is down"""
        client = MagicMock()
        client.scan_iter.side_effect = redis.ConnectionError("refused")
        cache = RedisEnrichmentCache(client=client, prefix="test")

        stats = cache.stats()

        assert stats["available"] is False
        assert "refused" in stats["error"]

    def test_get_propagates_connection_errors(self):
        """Test cache-layer errors reach the caller"""
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("refused")
        cache = RedisEnrichmentCache(client=client, prefix="test")

        with pytest.raises(redis.ConnectionError):
            cache.get("abc")

    def test_is_blocking(self, client):
        """Test the pipeline is told to run calls off the event loop"""
        assert RedisEnrichmentCache(client=client).blocking is True
