"""
Lead Enrichment - Core Package

This package contains the address enrichment pipeline: provider contracts,
fallback orchestration, caching, and provider health aggregation.
"""

__version__ = "0.1.0"
