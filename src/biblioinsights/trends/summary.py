"""Corpus-level summaries over insight rows and topic windows."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from biblioinsights.models import Work
from biblioinsights.trends.classifier import INSIGHT_RULES
from biblioinsights.trends.models import InsightLabel, Period, TopicInsight

__all__ = ["TopicCoverage", "tally_labels", "topic_coverage"]


def tally_labels(insights: Iterable[TopicInsight]) -> dict[InsightLabel, int]:
    """Count rows per label.

    Every label is present (zero counts included), in rule order. Rows
    without a label (single-period mode) are not counted.
    """
    tally = dict.fromkeys((rule.label for rule in INSIGHT_RULES), 0)
    for row in insights:
        if row.label is not None:
            tally[row.label] = tally.get(row.label, 0) + 1
    return tally


@dataclass(frozen=True)
class TopicCoverage:
    """How many topics the comparison windows actually cover.

    Attributes
    ----------
    total_topics : int
        Distinct topics among dated works.
    in_windows : int
        Topics with at least one work inside period A or B.
    outside_windows : int
        Topics never seen inside either window.
    only_after : int
        Outside topics whose works all postdate both windows.
    only_before : int
        Outside topics whose works all predate both windows.
    """

    total_topics: int
    in_windows: int
    outside_windows: int
    only_after: int
    only_before: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_topics": self.total_topics,
            "in_windows": self.in_windows,
            "outside_windows": self.outside_windows,
            "only_after": self.only_after,
            "only_before": self.only_before,
        }


def _outer_bound(values: list[int | None], pick: Any) -> int | None:
    # An open bound on either window means nothing lies beyond it.
    if any(v is None for v in values):
        return None
    return pick(v for v in values if v is not None)


def topic_coverage(works: Iterable[Work], period_a: Period, period_b: Period) -> TopicCoverage:
    """Compare the corpus' topics against the two comparison windows.

    Parameters
    ----------
    works : Iterable[Work]
        Cleaned corpus.
    period_a : Period
        First window.
    period_b : Period
        Second window.

    Returns
    -------
    TopicCoverage
        Coverage counts.
    """
    topic_years: dict[str, set[int]] = {}
    in_windows: set[str] = set()

    for work in works:
        if work.year is None:
            continue
        inside = period_a.contains(work.year) or period_b.contains(work.year)
        for topic in work.topics:
            if not topic:
                continue
            topic_years.setdefault(topic, set()).add(work.year)
            if inside:
                in_windows.add(topic)

    earliest = _outer_bound([period_a.from_year, period_b.from_year], min)
    latest = _outer_bound([period_a.to_year, period_b.to_year], max)

    outside = [topic for topic in topic_years if topic not in in_windows]
    only_after = sum(
        1 for topic in outside if latest is not None and min(topic_years[topic]) > latest
    )
    only_before = sum(
        1 for topic in outside if earliest is not None and max(topic_years[topic]) < earliest
    )

    return TopicCoverage(
        total_topics=len(topic_years),
        in_windows=len(in_windows),
        outside_windows=len(outside),
        only_after=only_after,
        only_before=only_before,
    )
