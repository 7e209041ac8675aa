"""
Provider Health Monitor

Checks every registered provider in parallel and reports per-provider
liveness. One unreachable provider never hides the status of the others.
"""
import asyncio
import inspect
from typing import List, Optional, Sequence

from config.settings import settings
from src.leadenrich.enrichment.outcomes import describe_error
from src.leadenrich.models.enrichment import ProviderHealth
from src.leadenrich.providers.base import HealthReporter, provider_name
from src.leadenrich.utils.logger import get_logger

logger = get_logger(__name__)


class HealthMonitor:
    """
    Concurrent, all-settle health check across providers.
    """

    def __init__(self, providers: Sequence[object], timeout: Optional[float] = None):
        """
        Args:
            providers: Providers to check, reported in this order
            timeout: Seconds allowed per check (settings default when omitted)
        """
        self.providers = list(providers)
        self.timeout = timeout if timeout is not None else settings.enrichment_health_timeout_seconds

    async def _check_one(self, provider: object) -> ProviderHealth:
        if not isinstance(provider, HealthReporter):
            return ProviderHealth(name=provider_name(provider), ok=True)

        async def _health():
            if inspect.iscoroutinefunction(provider.health):
                result = await provider.health()
            else:
                result = await asyncio.to_thread(provider.health)
            if inspect.isawaitable(result):
                result = await result
            return result

        try:
            result = await asyncio.wait_for(_health(), self.timeout) if self.timeout else await _health()
        except asyncio.TimeoutError:
            raise asyncio.TimeoutError(f"health check timed out after {self.timeout}s") from None
        return ProviderHealth.model_validate(result)

    async def check(self) -> List[ProviderHealth]:
        """
        Run every check concurrently and wait for all of them.

        Returns:
            One ProviderHealth per provider, in registration order
        """
        results = await asyncio.gather(
            *(self._check_one(provider) for provider in self.providers),
            return_exceptions=True,
        )

        reports: List[ProviderHealth] = []
        for provider, result in zip(self.providers, results):
            if isinstance(result, BaseException):
                name = provider_name(provider)
                logger.warning("provider_health_check_failed", provider=name, error=describe_error(result))
                reports.append(ProviderHealth(name=name, ok=False, error=str(result) or type(result).__name__))
            else:
                reports.append(result)

        logger.info(
            "provider_health_checked",
            total=len(reports),
            healthy=sum(1 for r in reports if r.ok),
        )
        return reports
