"""
Provider capability interfaces.

A provider implements any subset of the capabilities below. The pipeline
discovers capabilities with isinstance checks against these protocols, so a
provider opts in simply by defining the method.

Returning an empty or partial result means "no data". Raising means the call
itself failed (network, auth, rate limit, parse) and the next provider in the
stage is tried.
"""
from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from src.leadenrich.models.address import Address
from src.leadenrich.models.enrichment import (
    GeocodeResult,
    PeopleQuery,
    PeopleResult,
    PhoneRecord,
    PropertyResult,
    ProviderHealth,
)


@runtime_checkable
class Provider(Protocol):
    name: str


@runtime_checkable
class HealthReporter(Protocol):
    async def health(self) -> ProviderHealth:
        """Report liveness. Failures should come back as ok=False."""
        ...


@runtime_checkable
class Normalizer(Protocol):
    async def normalize(self, address: Address) -> Address:
        ...


@runtime_checkable
class Geocoder(Protocol):
    async def geocode(self, address: Address) -> GeocodeResult:
        ...


@runtime_checkable
class PropertyLookup(Protocol):
    async def lookup_property(self, address: Address, place_id: Optional[str] = None) -> PropertyResult:
        """Parcel and owner lookup. place_id is passed when a geocoder found one."""
        ...


@runtime_checkable
class PeopleLookup(Protocol):
    async def people(self, query: PeopleQuery) -> PeopleResult:
        ...


@runtime_checkable
class PhoneVerifier(Protocol):
    async def verify_phones(self, numbers: List[str]) -> List[PhoneRecord]:
        ...


class BaseProvider:
    """
    Convenience base for providers.

    Supplies a name (the class name unless overridden) and a health check
    that reports the provider as up. Subclasses add capability methods.
    """

    name: str = ""

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.name or type(self).__name__

    async def health(self) -> ProviderHealth:
        return ProviderHealth(name=self.name, ok=True)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def provider_name(provider: object) -> str:
    """Name used in sources and health reports."""
    return getattr(provider, "name", None) or type(provider).__name__
