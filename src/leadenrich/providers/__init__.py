"""
Providers Package

Capability protocols and reusable provider bases.
"""
from src.leadenrich.providers.base import (
    BaseProvider,
    Geocoder,
    HealthReporter,
    Normalizer,
    PeopleLookup,
    PhoneVerifier,
    PropertyLookup,
    Provider,
    provider_name,
)
from src.leadenrich.providers.http import HttpProvider
from src.leadenrich.providers.standardizer import StandardizerProvider

__all__ = [
    "BaseProvider",
    "Geocoder",
    "HealthReporter",
    "HttpProvider",
    "Normalizer",
    "PeopleLookup",
    "PhoneVerifier",
    "PropertyLookup",
    "Provider",
    "StandardizerProvider",
    "provider_name",
]
