"""Per-topic aggregation over an inclusive year window."""

from collections.abc import Iterable

from biblioinsights.models import Work
from biblioinsights.trends.models import Period, TopicWindow

__all__ = ["aggregate_topics", "aggregate_period"]


def aggregate_topics(
    works: Iterable[Work],
    from_year: int | None = None,
    to_year: int | None = None,
) -> dict[str, TopicWindow]:
    """Count publications and sum citations per topic inside a window.

    Works without a year are skipped. Each work contributes at most once
    per distinct non-empty topic. Topics with no included work are absent
    from the result rather than present with zeros.

    Parameters
    ----------
    works : Iterable[Work]
        Cleaned corpus.
    from_year : int | None, optional
        First year included; open when None.
    to_year : int | None, optional
        Last year included; open when None.

    Returns
    -------
    dict[str, TopicWindow]
        Totals keyed by topic name.
    """
    period = Period(from_year, to_year)
    counts: dict[str, list[int]] = {}

    for work in works:
        if not period.contains(work.year):
            continue
        for topic in dict.fromkeys(t for t in work.topics if t):
            totals = counts.setdefault(topic, [0, 0])
            totals[0] += 1
            totals[1] += work.citations or 0

    return {topic: TopicWindow(pubs, cites) for topic, (pubs, cites) in counts.items()}


def aggregate_period(works: Iterable[Work], period: Period) -> dict[str, TopicWindow]:
    """:func:`aggregate_topics` for a :class:`Period`."""
    return aggregate_topics(works, period.from_year, period.to_year)
