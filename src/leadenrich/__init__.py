"""
Address enrichment for lead qualification.

Turns a bare postal address into a contactable lead profile by composing
unreliable external data providers behind an ordered fallback pipeline.
"""
from src.leadenrich.models.address import Address
from src.leadenrich.models.enrichment import Enrichment
from src.leadenrich.enrichment.pipeline import EnrichmentPipeline

__all__ = ["Address", "Enrichment", "EnrichmentPipeline"]
