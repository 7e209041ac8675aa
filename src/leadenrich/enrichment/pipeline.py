"""
Address enrichment pipeline.

Runs five stages in order (normalize, geocode, property, people,
phoneVerify) against an ordered provider list. Within a stage providers are
tried one at a time until one succeeds; failures fall through to the next
provider and an exhausted stage simply leaves its fields empty.

Results are memoized by address fingerprint, and concurrent requests for the
same address share one in-flight computation.
"""
from __future__ import annotations

import asyncio
from collections import Counter, deque
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from pydantic import TypeAdapter

from config.settings import settings
from src.leadenrich.cache import EnrichmentCache, MemoryEnrichmentCache
from src.leadenrich.enrichment.health import HealthMonitor
from src.leadenrich.enrichment.outcomes import CallOutcome, Stage, invoke
from src.leadenrich.models.address import Address
from src.leadenrich.models.enrichment import (
    EmailRecord,
    Enrichment,
    GeocodeResult,
    Location,
    Owner,
    Parcel,
    PeopleQuery,
    PeopleResult,
    PhoneRecord,
    PropertyResult,
    ProviderHealth,
)
from src.leadenrich.providers.base import (
    Geocoder,
    Normalizer,
    PeopleLookup,
    PhoneVerifier,
    PropertyLookup,
    provider_name,
)
from src.leadenrich.transformers.address_standardizer import address_fingerprint
from src.leadenrich.utils.logger import get_logger

logger = get_logger(__name__)

AddressInput = Union[Address, Dict[str, Any]]

_phone_list = TypeAdapter(List[PhoneRecord])


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        value = value.strip() if isinstance(value, str) else value
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


class EnrichmentPipeline:
    """
    Orchestrates providers into a single best-effort Enrichment.

    enrich() never raises because of a provider. It raises only for invalid
    input (pydantic ValidationError) or cache backend errors.
    """

    def __init__(
        self,
        providers: Sequence[object],
        cache: Optional[EnrichmentCache] = None,
        stale_days: Optional[int] = None,
        call_timeout: Optional[float] = None,
        health_timeout: Optional[float] = None,
        attempt_log_size: Optional[int] = None,
    ):
        """
        Args:
            providers: Providers in fallback priority order
            cache: Cache store (in-memory when omitted)
            stale_days: Age at which cached entries are recomputed, <= 0 never
            call_timeout: Seconds allowed per provider call, 0/None for no limit
            health_timeout: Seconds allowed per health check
            attempt_log_size: Number of recent provider calls kept for inspection
        """
        self._providers = list(providers)
        self.cache = cache if cache is not None else MemoryEnrichmentCache()
        self.stale_days = settings.enrichment_stale_days if stale_days is None else stale_days
        self.call_timeout = settings.enrichment_call_timeout_seconds if call_timeout is None else call_timeout
        self.health_timeout = health_timeout
        self._attempts: deque = deque(maxlen=attempt_log_size or settings.enrichment_attempt_log_size)
        self._in_flight: Dict[str, asyncio.Future] = {}
        self._counters: Counter = Counter()

        names = [provider_name(p) for p in self._providers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            logger.warning("duplicate_provider_names", names=duplicates)

        logger.info(
            "enrichment_pipeline_initialized",
            providers=names,
            stale_days=self.stale_days,
            call_timeout=self.call_timeout,
            cache=type(self.cache).__name__,
        )

    async def enrich(self, address: AddressInput) -> Enrichment:
        """
        Enrich one address.

        Args:
            address: Address model or a dict with its fields

        Returns:
            Enrichment, served from cache when a fresh entry exists
        """
        address = Address.model_validate(address)
        key = address_fingerprint(address)

        cached = await self._read_cache(key)
        if cached is not None:
            return cached

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._compute(key, address))
            self._in_flight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        else:
            self._counters["coalesced"] += 1
            logger.debug("enrichment_joined_in_flight", fingerprint=key)

        enrichment = await asyncio.shield(task)
        return enrichment.model_copy(deep=True)

    def enrich_sync(self, address: AddressInput) -> Enrichment:
        """Blocking wrapper around enrich() for callers without an event loop."""
        return asyncio.run(self.enrich(address))

    async def enrich_many(
        self,
        addresses: Iterable[AddressInput],
        concurrency: Optional[int] = None,
    ) -> List[Enrichment]:
        """
        Enrich a batch of addresses concurrently.

        All addresses are validated before any provider is called.

        Args:
            addresses: Addresses to enrich
            concurrency: Maximum enrich() calls in flight at once

        Returns:
            Enrichments in input order
        """
        validated = [Address.model_validate(a) for a in addresses]
        semaphore = asyncio.Semaphore(max(concurrency or settings.enrichment_batch_concurrency, 1))

        async def _one(address: Address) -> Enrichment:
            async with semaphore:
                return await self.enrich(address)

        logger.info("batch_enrichment_started", count=len(validated))
        results = await asyncio.gather(*(_one(a) for a in validated))
        logger.info(
            "batch_enrichment_complete",
            count=len(results),
            with_contacts=sum(1 for r in results if r.has_contacts()),
        )
        return list(results)

    async def get_health_status(self) -> List[ProviderHealth]:
        """Check every provider concurrently. See HealthMonitor."""
        return await HealthMonitor(self._providers, timeout=self.health_timeout).check()

    def get_providers(self) -> List[object]:
        """Copy of the provider list; mutating it does not affect the pipeline."""
        return list(self._providers)

    def get_cache_stats(self) -> Dict[str, Any]:
        """Cache size plus hit, miss, stale and coalescing counters."""
        hits = self._counters["cache_hits"]
        lookups = hits + self._counters["cache_misses"] + self._counters["stale"]
        stats = dict(self.cache.stats())
        stats.setdefault("size", self.cache.size())
        stats.update({
            "hits": hits,
            "misses": self._counters["cache_misses"],
            "hit_rate": hits / max(lookups, 1) * 100,
            "stale": self._counters["stale"],
            "coalesced": self._counters["coalesced"],
            "provider_failures": self._counters["provider_failures"],
            "in_flight": len(self._in_flight),
        })
        return stats

    def clear_cache(self) -> int:
        """Drop every cached enrichment, forcing full re-runs."""
        removed = self.cache.clear()
        logger.info("enrichment_cache_cleared", removed=removed)
        return removed

    def get_attempt_log(self, limit: Optional[int] = None) -> List[CallOutcome]:
        """
        Most recent provider calls, oldest first.

        Args:
            limit: Return at most this many of the latest attempts
        """
        attempts = list(self._attempts)
        if limit is not None:
            attempts = attempts[-limit:] if limit > 0 else []
        return attempts

    async def _cache_call(self, func: Callable, *args):
        if getattr(self.cache, "blocking", False):
            return await asyncio.to_thread(func, *args)
        return func(*args)

    async def _read_cache(self, key: str) -> Optional[Enrichment]:
        cached = await self._cache_call(self.cache.get, key)
        if cached is None:
            self._counters["cache_misses"] += 1
            logger.debug("enrichment_cache_miss", fingerprint=key)
            return None

        if await self._cache_call(self.cache.is_stale, key, self.stale_days):
            self._counters["stale"] += 1
            logger.info("enrichment_cache_stale", fingerprint=key, stale_days=self.stale_days)
            return None

        self._counters["cache_hits"] += 1
        logger.debug("enrichment_cache_hit", fingerprint=key)
        return cached

    def _forget(self, key: str, task: asyncio.Future) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Retrieve the exception so an unawaited failure is not reported as lost.
        if not task.cancelled():
            task.exception()

    async def _compute(self, key: str, address: Address) -> Enrichment:
        enrichment = await self._run_stages(address)
        await self._cache_call(self.cache.set, key, enrichment)
        logger.info(
            "enrichment_complete",
            fingerprint=key,
            sources=enrichment.sources,
            phones=len(enrichment.phones),
            emails=len(enrichment.emails),
        )
        return enrichment

    async def _run_stages(self, address: Address) -> Enrichment:
        enrichment = Enrichment()

        normalized = await self._run_stage(
            Stage.NORMALIZE, Normalizer, enrichment,
            lambda p: p.normalize(address),
            Address.model_validate,
        )
        if normalized is not None:
            enrichment.address_norm = normalized
        working = normalized or address

        geocode = await self._run_stage(
            Stage.GEOCODE, Geocoder, enrichment,
            lambda p: p.geocode(working),
            GeocodeResult.model_validate,
        )
        if geocode is not None:
            enrichment.place_id = geocode.place_id
            enrichment.location = Location(lat=geocode.lat, lng=geocode.lng)

        prop = await self._run_stage(
            Stage.PROPERTY, PropertyLookup, enrichment,
            lambda p: p.lookup_property(working, place_id=enrichment.place_id),
            PropertyResult.model_validate,
        )
        if prop is not None:
            if prop.apn or prop.wkt:
                enrichment.parcel = Parcel(apn=prop.apn, wkt=prop.wkt)
            if prop.owner:
                enrichment.owner = Owner(name=prop.owner)

        query = PeopleQuery(
            name=enrichment.owner.name if enrichment.owner else None,
            address=working,
        )
        people = await self._run_stage(
            Stage.PEOPLE, PeopleLookup, enrichment,
            lambda p: p.people(query),
            PeopleResult.model_validate,
        )
        if people is not None:
            enrichment.phones = [PhoneRecord(number=n) for n in _unique(people.phones)]
            enrichment.emails = [EmailRecord(email=e) for e in _unique(people.emails)]

        if enrichment.phones:
            numbers = [phone.number for phone in enrichment.phones]
            verified = await self._run_stage(
                Stage.PHONE_VERIFY, PhoneVerifier, enrichment,
                lambda p: p.verify_phones(list(numbers)),
                _phone_list.validate_python,
            )
            if verified is not None:
                enrichment.phones = verified

        return enrichment

    async def _run_stage(
        self,
        stage: Stage,
        capability: type,
        enrichment: Enrichment,
        call: Callable[[Any], Any],
        coerce: Callable[[Any], Any],
    ) -> Optional[Any]:
        """
        Try each provider with the stage's capability in priority order.

        Returns:
            The first successful result, or None when the stage is exhausted
        """
        candidates = [p for p in self._providers if isinstance(p, capability)]
        if not candidates:
            logger.debug("stage_skipped_no_capability", stage=stage.value)
            return None

        for provider in candidates:
            outcome = await invoke(provider, stage, call, coerce=coerce, timeout=self.call_timeout)
            self._attempts.append(outcome)

            if outcome.ok:
                enrichment.sources.append(outcome.source)
                logger.debug(
                    "provider_call_succeeded",
                    provider=outcome.provider,
                    stage=stage.value,
                    duration_ms=outcome.duration_ms,
                )
                return outcome.value

            self._counters["provider_failures"] += 1
            logger.warning(
                "provider_call_failed",
                provider=outcome.provider,
                stage=stage.value,
                error=outcome.error,
                duration_ms=outcome.duration_ms,
            )

        logger.info("stage_exhausted", stage=stage.value, tried=len(candidates))
        return None
