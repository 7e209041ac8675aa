"""
Tests for provider health aggregation
"""
import asyncio
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.leadenrich.enrichment import EnrichmentPipeline, HealthMonitor
from src.leadenrich.models import ProviderHealth
from src.leadenrich.providers import BaseProvider


class HealthyProvider(BaseProvider):
    def __init__(self, name, latency_ms=12.5, quota=900, delay=0.0):
        super().__init__(name)
        self.latency_ms = latency_ms
        self.quota = quota
        self.delay = delay

    async def health(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        return ProviderHealth(name=self.name, ok=True, latency_ms=self.latency_ms, quota=self.quota)


class DegradedProvider(BaseProvider):
    async def health(self):
        return ProviderHealth(name=self.name, ok=False, error="quota exhausted", quota=0)


class RejectingProvider(BaseProvider):
    async def health(self):
        raise ConnectionError("connection refused")


class SilentProvider(BaseProvider):
    async def health(self):
        await asyncio.sleep(5)


class NoHealthMethod:
    name = "Bare"

    async def geocode(self, address):
        return None


class NamelessRejecting:
    """No name attribute; health() still has to be called."""

    async def health(self):
        raise ConnectionError("vendor offline")


class BlockingHealth(BaseProvider):
    def health(self):
        time.sleep(0.5)
        return ProviderHealth(name=self.name, ok=True)



class TestHealthMonitor:
    """Tests for HealthMonitor.check"""

    def test_rejected_check_is_isolated(self):
        """Test 3 providers where the 2nd rejects"""
        first = HealthyProvider("First")
        second = RejectingProvider("Second")
        third = DegradedProvider("Third")

        reports = asyncio.run(HealthMonitor([first, second, third]).check())

        assert len(reports) == 3
        assert reports[0] == ProviderHealth(name="First", ok=True, latency_ms=12.5, quota=900)
        assert reports[1].name == "Second"
        assert reports[1].ok is False
        assert reports[1].error == "connection refused"
        assert reports[2] == ProviderHealth(name="Third", ok=False, error="quota exhausted", quota=0)

    def test_checks_run_concurrently(self):
        """Test total time tracks the slowest check, not the sum"""
        providers = [HealthyProvider(f"P{i}", delay=0.2) for i in range(5)]

        started = time.perf_counter()
        reports = asyncio.run(HealthMonitor(providers).check())
        elapsed = time.perf_counter() - started

        assert all(r.ok for r in reports)
        assert elapsed < 0.8

    def test_hanging_check_times_out(self):
        """Test a check that never answers is reported down"""
        reports = asyncio.run(HealthMonitor([SilentProvider("Slow"), HealthyProvider("Fast")], timeout=0.05).check())

        assert reports[0].ok is False
        assert "timed out" in reports[0].error
        assert reports[1].ok is True

    def test_provider_without_health_method(self):
        """Test providers without a health method are assumed up"""
        reports = asyncio.run(HealthMonitor([NoHealthMethod()]).check())

        assert reports == [ProviderHealth(name="Bare", ok=True)]

    def test_provider_without_name_is_still_checked(self):
        """Test a failing health() is reported even when the provider has no name"""
        reports = asyncio.run(HealthMonitor([NamelessRejecting()]).check())

        assert reports == [ProviderHealth(name="NamelessRejecting", ok=False, error="vendor offline")]

    def test_blocking_sync_health_times_out(self):
        """Test a plain-function health() that blocks is cut off by the timeout"""
        reports = asyncio.run(HealthMonitor([BlockingHealth("Blocking"), HealthyProvider("Fast")], timeout=0.05).check())

        assert reports[0].name == "Blocking"
        assert reports[0].ok is False
        assert "timed out" in reports[0].error
        assert reports[1].ok is True

    def test_default_health_from_base_provider(self):

        """Test BaseProvider reports ok by default"""
        reports = asyncio.run(HealthMonitor([BaseProvider("Plain")]).check())

        assert reports == [ProviderHealth(name="Plain", ok=True)]

    def test_dict_health_is_validated(self):
        """Test a health check returning a plain dict is accepted"""
        class DictHealth(BaseProvider):
            async def health(self):
                return {"name": self.name, "ok": True, "latency_ms": 3}

        reports = asyncio.run(HealthMonitor([DictHealth()]).check())

        assert reports[0].latency_ms == 3

    def test_empty_provider_list(self):
        """Test no providers yields no reports"""
        assert asyncio.run(HealthMonitor([]).check()) == []


def test_pipeline_health_status_preserves_order():
    """Test the pipeline exposes one report per provider in order"""
    providers = [HealthyProvider("A"), RejectingProvider("B"), HealthyProvider("C")]
    pipeline = EnrichmentPipeline(providers)

    reports = asyncio.run(pipeline.get_health_status())

    assert [r.name for r in reports] == ["A", "B", "C"]
    assert [r.ok for r in reports] == [True, False, True]
