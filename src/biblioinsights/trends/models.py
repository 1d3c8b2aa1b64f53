"""Data models for topic windows and trend insights."""

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

__all__ = [
    "InsightLabel",
    "MetricTrend",
    "Period",
    "TopicWindow",
    "TopicInsight",
    "encode_delta",
]


class InsightLabel(StrEnum):
    """Classification outcome for a topic compared across two periods."""

    EMERGING = "Emerging in period B"
    ABSENT = "Absent in period B"
    STRONG_SURGE = "Strong surge in output and impact"
    GROWING_PRIORITY = "Growing priority with rising impact"
    OUTPUT_SOFTENING = "Output rising, impact softening"
    DECLINING = "Declining emphasis"
    IMPACT_LED = "Impact rising faster than output"
    STABLE = "Stable focus"


class MetricTrend(StrEnum):
    """Coarse direction of a single metric's relative change."""

    EMERGING = "Emerging"
    ABSENT = "Absent"
    RISING = "Rising"
    UP = "Up"
    STABLE = "Stable"
    SOFTENING = "Softening"
    DECLINING = "Declining"
    NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class Period:
    """Inclusive year window; an unset bound is open.

    Attributes
    ----------
    from_year : int | None
        First year included.
    to_year : int | None
        Last year included.
    """

    from_year: int | None = None
    to_year: int | None = None

    def contains(self, year: int | None) -> bool:
        """Whether a (possibly missing) year falls inside the window."""
        if year is None:
            return False
        if self.from_year is not None and year < self.from_year:
            return False
        if self.to_year is not None and year > self.to_year:
            return False
        return True

    @classmethod
    def parse(cls, text: str) -> "Period":
        """Parse ``"2010:2013"``, ``"2010:"``, ``":2013"`` or ``"2015"``.

        Raises
        ------
        ValueError
            If a bound is not an integer.
        """
        if ":" not in text:
            year = int(text.strip())
            return cls(year, year)
        start, end = text.split(":", 1)
        return cls(
            int(start) if start.strip() else None,
            int(end) if end.strip() else None,
        )

    def to_dict(self) -> dict[str, int | None]:
        """Serialize with the config file's keys."""
        return {"from": self.from_year, "to": self.to_year}


@dataclass(frozen=True)
class TopicWindow:
    """Per-topic totals for one period.

    Attributes
    ----------
    publication_count : int
        Works listing the topic.
    citation_sum : int
        Citations summed over those works.
    """

    publication_count: int = 0
    citation_sum: int = 0


def encode_delta(value: float | None) -> float | str | None:
    """Make a delta JSON-safe: infinities become ``"+inf"`` / ``"-inf"``."""
    if value is None or math.isnan(value):
        return None
    if value == math.inf:
        return "+inf"
    if value == -math.inf:
        return "-inf"
    return value


@dataclass(frozen=True)
class TopicInsight:
    """One row of the topic trend table.

    Attributes
    ----------
    topic : str
        Topic name.
    pubs_a, pubs_b : int
        Publication counts in period A and B.
    cites_a, cites_b : int
        Citation sums in period A and B.
    pubs_delta, cites_delta : float | None
        Relative change from A to B; ``inf`` / ``-inf`` when one side is
        zero, None in single-period mode.
    label : InsightLabel | None
        Classification, None in single-period mode.
    """

    topic: str
    pubs_a: int
    pubs_b: int
    cites_a: int
    cites_b: int
    pubs_delta: float | None = None
    cites_delta: float | None = None
    label: InsightLabel | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output (infinite deltas as strings)."""
        return {
            "topic": self.topic,
            "pubs_a": self.pubs_a,
            "pubs_b": self.pubs_b,
            "cites_a": self.cites_a,
            "cites_b": self.cites_b,
            "pubs_delta": encode_delta(self.pubs_delta),
            "cites_delta": encode_delta(self.cites_delta),
            "label": self.label.value if self.label is not None else None,
        }
