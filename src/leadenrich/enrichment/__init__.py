"""
Enrichment Module

Provider-fallback orchestration, per-call outcomes and health aggregation.
"""
from src.leadenrich.enrichment.health import HealthMonitor
from src.leadenrich.enrichment.outcomes import CallOutcome, Stage, invoke
from src.leadenrich.enrichment.pipeline import EnrichmentPipeline

__all__ = ["CallOutcome", "EnrichmentPipeline", "HealthMonitor", "Stage", "invoke"]
