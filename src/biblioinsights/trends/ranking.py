"""Total order over deltas that may be infinite or undefined.

Ascending order: undefined < -inf < finite values < +inf. Sorting maps
each value to a rank tuple once, so the sentinel handling lives in
:func:`rank_key` only. Direction is applied with ``reverse=`` after the
order is fixed; Python's sort stays stable either way.
"""

import math
from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from biblioinsights.trends.models import TopicInsight

__all__ = [
    "SortKey",
    "SINGLE_PERIOD_SORT_KEYS",
    "rank_key",
    "compare_values",
    "sort_values",
    "sort_insights",
]

_UNDEFINED = 0
_NEG_INF = 1
_FINITE = 2
_POS_INF = 3


class SortKey(StrEnum):
    """Sortable columns of the insight table."""

    TOPIC = "topic"
    PUBS_A = "pubs_a"
    PUBS_B = "pubs_b"
    PUBS_DELTA = "pubs_delta"
    CITES_A = "cites_a"
    CITES_B = "cites_b"
    CITES_DELTA = "cites_delta"
    LABEL = "label"


SINGLE_PERIOD_SORT_KEYS = frozenset({SortKey.TOPIC, SortKey.PUBS_A, SortKey.CITES_A})


def rank_key(value: float | None) -> tuple[int, float]:
    """Map a value to a ``(category, magnitude)`` tuple for ordering.

    Parameters
    ----------
    value : float | None
        Finite number, ``inf``, ``-inf``, or None (undefined). NaN is
        treated as undefined.

    Returns
    -------
    tuple[int, float]
        Key that orders undefined first and ``+inf`` last.
    """
    if value is None or math.isnan(value):
        return (_UNDEFINED, 0.0)
    if value == -math.inf:
        return (_NEG_INF, 0.0)
    if value == math.inf:
        return (_POS_INF, 0.0)
    return (_FINITE, float(value))


def compare_values(a: float | None, b: float | None) -> int:
    """Three-way comparison under :func:`rank_key` (for ``functools.cmp_to_key``)."""
    key_a, key_b = rank_key(a), rank_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_values(values: Iterable[float | None], descending: bool = False) -> list[float | None]:
    """Stable sort of possibly infinite or undefined values."""
    return sorted(values, key=rank_key, reverse=descending)


def _row_key(key: SortKey) -> Any:
    if key is SortKey.TOPIC:
        return lambda row: row.topic.casefold()
    if key is SortKey.LABEL:
        return lambda row: row.label.value.casefold() if row.label is not None else ""
    attribute = key.value
    return lambda row: rank_key(getattr(row, attribute))


def sort_insights(
    rows: Iterable[TopicInsight],
    key: SortKey | str = SortKey.PUBS_A,
    descending: bool = True,
) -> list[TopicInsight]:
    """Sort insight rows by one column.

    Parameters
    ----------
    rows : Iterable[TopicInsight]
        Rows to sort.
    key : SortKey | str, optional
        Column name, by default ``pubs_a``.
    descending : bool, optional
        Largest first, by default True.

    Returns
    -------
    list[TopicInsight]
        New sorted list; ties keep their input order.

    Raises
    ------
    ValueError
        If ``key`` is not a known column.
    """
    return sorted(rows, key=_row_key(SortKey(key)), reverse=descending)
