"""Deny-list cleaning and topic trend classification for bibliographic corpora.

This package provides:
- Data models (biblioinsights.models): the Work record
- Normalization (biblioinsights.normalize): canonical identifiers and slugs
- Parsing (biblioinsights.parse): corpus and deny-list input
- Exclusion (biblioinsights.exclusion): global and per-author deny rules
- Trends (biblioinsights.trends): aggregation, growth, labels, ranking
- Engine (biblioinsights.engine): audited pipeline and rule snapshots
- Audit (biblioinsights.audit): event log and run manifest
- CLI (biblioinsights.cli): command-line interface
- Public API (biblioinsights.api): high-level convenience functions
"""

__version__ = "0.1.0"

from biblioinsights.api import (
    ParseError,
    analyze,
    clean_corpus,
    compute_insights,
    load_corpus,
    write_jsonl,
)
from biblioinsights.exclusion import ExclusionEngine
from biblioinsights.models import Work
from biblioinsights.trends import InsightLabel, Period, TopicInsight, classify

__all__ = [
    "__version__",
    "ExclusionEngine",
    "InsightLabel",
    "ParseError",
    "Period",
    "TopicInsight",
    "Work",
    "analyze",
    "classify",
    "clean_corpus",
    "compute_insights",
    "load_corpus",
    "write_jsonl",
]
