"""
Transformers Package

Address normalization and cache fingerprinting.
"""
from src.leadenrich.transformers.address_standardizer import (
    AddressStandardizer,
    StandardizedAddress,
    address_fingerprint,
)

__all__ = ["AddressStandardizer", "StandardizedAddress", "address_fingerprint"]
