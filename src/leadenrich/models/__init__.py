"""
Models Package

Pydantic data shapes shared by providers, the cache and the pipeline.
"""
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

__all__ = [
    "Address",
    "EmailRecord",
    "Enrichment",
    "GeocodeResult",
    "Location",
    "Owner",
    "Parcel",
    "PeopleQuery",
    "PeopleResult",
    "PhoneRecord",
    "PropertyResult",
    "ProviderHealth",
]
