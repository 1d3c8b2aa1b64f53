"""Pipeline orchestration: configuration, runner and rule snapshots."""

from biblioinsights.engine.config import PipelineConfig, PipelineResult
from biblioinsights.engine.runner import run_pipeline
from biblioinsights.engine.snapshot import InsightsService, RuleSet

__all__ = [
    "InsightsService",
    "PipelineConfig",
    "PipelineResult",
    "RuleSet",
    "run_pipeline",
]
