"""Topic insight table: the classification query consumed by presenters.

Two modes:
- comparison (period B given): one row per topic seen in A or B, with
  deltas and a label;
- single period (period B omitted): A's counts only, no deltas or label.
"""

from collections.abc import Iterable, Sequence

from biblioinsights.models import Work
from biblioinsights.trends.aggregate import aggregate_period
from biblioinsights.trends.classifier import classify
from biblioinsights.trends.config import InsightsConfig
from biblioinsights.trends.growth import relative_delta
from biblioinsights.trends.models import Period, TopicInsight, TopicWindow
from biblioinsights.trends.ranking import SINGLE_PERIOD_SORT_KEYS, SortKey, sort_insights
from biblioinsights.trends.thresholds import InsightThresholds

__all__ = [
    "build_insights",
    "corpus_year_span",
    "filter_insights",
    "resolve_periods",
    "resolve_query_periods",
]

_EMPTY = TopicWindow()


def corpus_year_span(works: Iterable[Work]) -> tuple[int, int] | None:
    """Earliest and latest publication year, or None for an undated corpus."""
    years = {work.year for work in works if work.year is not None}
    if not years:
        return None
    return min(years), max(years)


def _clamp(value: int | None, low: int, high: int) -> int | None:
    if value is None:
        return None
    return min(max(value, low), high)


def _normalize_period(period: Period, low: int, high: int) -> Period:
    start = _clamp(period.from_year, low, high)
    end = _clamp(period.to_year, low, high)
    start = low if start is None else start
    end = high if end is None else end
    if start > end:
        return Period(low, high)
    return Period(start, end)


def resolve_periods(
    works: Sequence[Work],
    config: InsightsConfig | None = None,
) -> tuple[Period, Period] | None:
    """Concrete default periods A and B for a corpus.

    Unset bounds take the corpus' earliest / latest year, configured bounds
    are clamped to that span, and an inverted window resets to the full
    span.

    Parameters
    ----------
    works : Sequence[Work]
        Cleaned corpus.
    config : InsightsConfig | None, optional
        Configured defaults; built-in defaults when None.

    Returns
    -------
    tuple[Period, Period] | None
        (period A, period B), or None if no work has a year.
    """
    span = corpus_year_span(works)
    if span is None:
        return None
    low, high = span
    config = config or InsightsConfig()
    return (
        _normalize_period(config.default_period_a, low, high),
        _normalize_period(config.default_period_b, low, high),
    )


def resolve_query_periods(
    works: Sequence[Work],
    config: InsightsConfig | None = None,
    period_a: Period | None = None,
    period_b: Period | None = None,
    single_period: bool = False,
) -> tuple[Period, Period | None] | None:
    """Fill in the periods a query leaves unset.

    Explicit periods are kept as given; missing ones come from
    :func:`resolve_periods`.

    Returns
    -------
    tuple[Period, Period | None] | None
        (period A, period B or None in single-period mode), or None when a
        period is missing and no work has a year.
    """
    if period_a is None or (period_b is None and not single_period):
        defaults = resolve_periods(works, config)
        if defaults is None:
            return None
        period_a = period_a or defaults[0]
        period_b = period_b or defaults[1]
    return period_a, None if single_period else period_b


def filter_insights(rows: Iterable[TopicInsight], query: str | None) -> list[TopicInsight]:
    """Keep rows whose topic or label contains ``query`` (case-insensitive)."""
    needle = (query or "").strip().casefold()
    if not needle:
        return list(rows)
    return [
        row
        for row in rows
        if needle in row.topic.casefold()
        or (row.label is not None and needle in row.label.value.casefold())
    ]


def build_insights(
    works: Sequence[Work],
    period_a: Period,
    period_b: Period | None = None,
    thresholds: InsightThresholds | None = None,
    *,
    sort_key: SortKey | str | None = None,
    descending: bool = True,
    search: str | None = None,
) -> list[TopicInsight]:
    """Build the topic insight rows for one or two periods.

    Parameters
    ----------
    works : Sequence[Work]
        Cleaned, deduplicated corpus.
    period_a : Period
        Reference window.
    period_b : Period | None, optional
        Comparison window; None selects single-period mode.
    thresholds : InsightThresholds | None, optional
        Classifier thresholds; defaults when None.
    sort_key : SortKey | str | None, optional
        Column to sort by; rows keep aggregation order when None. In
        single-period mode only ``topic``, ``pubs_a`` and ``cites_a`` are
        honoured, anything else sorts by ``pubs_a``.
    descending : bool, optional
        Sort direction, by default True.
    search : str | None, optional
        Case-insensitive substring filter on topic (and label).

    Returns
    -------
    list[TopicInsight]
        One row per topic.

    Examples
    --------
        >>> rows = build_insights(works, Period(2010, 2013), Period(2014, 2017))
        >>> rows[0].label
        <InsightLabel.STRONG_SURGE: 'Strong surge in output and impact'>
    """
    thresholds = thresholds or InsightThresholds()
    window_a = aggregate_period(works, period_a)
    compare = period_b is not None
    window_b = aggregate_period(works, period_b) if compare else {}

    rows: list[TopicInsight] = []
    for topic in dict.fromkeys([*window_a, *window_b]):
        a = window_a.get(topic, _EMPTY)
        b = window_b.get(topic, _EMPTY)
        if compare:
            rows.append(
                TopicInsight(
                    topic=topic,
                    pubs_a=a.publication_count,
                    pubs_b=b.publication_count,
                    cites_a=a.citation_sum,
                    cites_b=b.citation_sum,
                    pubs_delta=relative_delta(a.publication_count, b.publication_count),
                    cites_delta=relative_delta(a.citation_sum, b.citation_sum),
                    label=classify(
                        a.publication_count,
                        b.publication_count,
                        a.citation_sum,
                        b.citation_sum,
                        thresholds,
                    ),
                )
            )
        else:
            rows.append(
                TopicInsight(
                    topic=topic,
                    pubs_a=a.publication_count,
                    pubs_b=0,
                    cites_a=a.citation_sum,
                    cites_b=0,
                )
            )

    rows = filter_insights(rows, search)

    if sort_key is None:
        return rows

    key = SortKey(sort_key)
    if not compare and key not in SINGLE_PERIOD_SORT_KEYS:
        key = SortKey.PUBS_A
    return sort_insights(rows, key, descending)
