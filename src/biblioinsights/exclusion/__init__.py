"""Deny-list exclusion of works, globally or per author."""

from biblioinsights.exclusion.engine import ExclusionEngine, work_identity
from biblioinsights.exclusion.models import (
    ExclusionEntry,
    ExclusionMatch,
    MatchField,
    Scope,
    parse_scope,
)

__all__ = [
    "ExclusionEngine",
    "ExclusionEntry",
    "ExclusionMatch",
    "MatchField",
    "Scope",
    "parse_scope",
    "work_identity",
]
