"""Insights configuration: thresholds and default comparison periods.

The configuration document is JSON::

    {
      "insightThresholds": {"strongSurge": {"pubs": 2, "cites": 2}, ...},
      "insightsDefaultPeriodA": {"from": 2010, "to": 2014},
      "insightsDefaultPeriodB": {"from": 2015}
    }

Invalid configuration never fails a request: offending leaves are dropped
and fall back to their defaults, and the reasons are returned as warnings.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from typing import Any

import jsonschema

from biblioinsights.parse.base import read_text
from biblioinsights.trends.models import Period
from biblioinsights.trends.thresholds import InsightThresholds

__all__ = [
    "InsightsConfig",
    "load_insights_config",
    "load_config_schema",
    "sanitize_config_document",
]

_SCHEMA_NAME = "insights_config.schema.json"


@lru_cache(maxsize=1)
def load_config_schema() -> dict[str, Any]:
    """Load the bundled JSON schema for the insights configuration."""
    resource = files("biblioinsights") / "schemas" / _SCHEMA_NAME
    return json.loads(resource.read_text(encoding="utf-8"))


def _year(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return int(value)


def _period(data: Any) -> Period:
    if not isinstance(data, Mapping):
        return Period()
    return Period(_year(data.get("from")), _year(data.get("to")))


@dataclass(frozen=True)
class InsightsConfig:
    """Immutable insights configuration.

    Attributes
    ----------
    thresholds : InsightThresholds
        Classifier thresholds.
    default_period_a : Period
        Configured default for period A; unset bounds are resolved
        against the corpus year span.
    default_period_b : Period
        Configured default for period B.
    """

    thresholds: InsightThresholds = field(default_factory=InsightThresholds)
    default_period_a: Period = field(default_factory=Period)
    default_period_b: Period = field(default_factory=Period)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "InsightsConfig":
        """Build from an (already sanitized) configuration document."""
        data = data if isinstance(data, Mapping) else {}
        return cls(
            thresholds=InsightThresholds.from_dict(data.get("insightThresholds")),
            default_period_a=_period(data.get("insightsDefaultPeriodA")),
            default_period_b=_period(data.get("insightsDefaultPeriodB")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the configuration file's keys."""
        return {
            "insightThresholds": self.thresholds.to_dict(),
            "insightsDefaultPeriodA": self.default_period_a.to_dict(),
            "insightsDefaultPeriodB": self.default_period_b.to_dict(),
        }


def _drop_path(document: dict[str, Any], path: list[Any]) -> None:
    node: Any = document
    for key in path[:-1]:
        if not isinstance(node, dict) or key not in node:
            return
        node = node[key]
    if isinstance(node, dict):
        node.pop(path[-1], None)


def sanitize_config_document(document: Any) -> tuple[dict[str, Any], list[str]]:
    """Validate a configuration document and prune every invalid leaf.

    Parameters
    ----------
    document : Any
        Parsed JSON document.

    Returns
    -------
    tuple[dict[str, Any], list[str]]
        (document with invalid values removed, warnings)
    """
    if not isinstance(document, dict):
        return {}, ["configuration root must be an object; using defaults"]

    validator = jsonschema.Draft202012Validator(load_config_schema())
    errors = sorted(validator.iter_errors(document), key=lambda e: len(e.absolute_path))

    warnings: list[str] = []
    for error in errors:
        path = list(error.absolute_path)
        location = ".".join(str(p) for p in path) or "<root>"
        warnings.append(f"{location}: {error.message}; using default")
        if path:
            _drop_path(document, path)

    return document, warnings


def load_insights_config(path: Path | None) -> tuple[InsightsConfig, list[str]]:
    """Load the insights configuration, degrading to defaults on any problem.

    Parameters
    ----------
    path : Path | None
        JSON configuration file. None means built-in defaults.

    Returns
    -------
    tuple[InsightsConfig, list[str]]
        (configuration, warnings)
    """
    if path is None:
        return InsightsConfig(), []

    try:
        text = read_text(path)
    except FileNotFoundError:
        return InsightsConfig(), [f"configuration file not found: {path}; using defaults"]

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        return InsightsConfig(), [f"invalid JSON in {path.name}: {e.msg}; using defaults"]

    document, warnings = sanitize_config_document(document)
    return InsightsConfig.from_dict(document), warnings
