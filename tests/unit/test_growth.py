"""Tests for growth ratios, relative deltas and their display forms."""

import math

import pytest

from biblioinsights.trends import (
    MetricTrend,
    classify_metric_change,
    format_delta,
    growth_ratio,
    relative_delta,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [(0, 0, 0.0), (0, 3, math.inf), (4, 0, 0.0), (2, 3, 1.5), (4, 2, 0.5)],
)
def test_growth_ratio(a: int, b: int, expected: float) -> None:
    """Test growth ratio sentinels and plain ratios."""
    assert growth_ratio(a, b) == expected


@pytest.mark.unit
def test_growth_ratio_is_total() -> None:
    """Test growth never raises and never returns NaN on non-negative input."""
    for a in range(6):
        for b in range(6):
            value = growth_ratio(a, b)
            assert not math.isnan(value)
            assert value >= 0


@pytest.mark.unit
@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [(0, 0, 0.0), (0, 5, math.inf), (5, 0, -math.inf), (4, 6, 0.5), (4, 3, -0.25)],
)
def test_relative_delta(a: int, b: int, expected: float) -> None:
    """Test relative change with appearance and disappearance sentinels."""
    assert relative_delta(a, b) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (math.inf, MetricTrend.EMERGING),
        (-math.inf, MetricTrend.ABSENT),
        (None, MetricTrend.NOT_AVAILABLE),
        (math.nan, MetricTrend.NOT_AVAILABLE),
        (0.5, MetricTrend.RISING),
        (0.2, MetricTrend.UP),
        (0.19, MetricTrend.STABLE),
        (0.0, MetricTrend.STABLE),
        (-0.2, MetricTrend.SOFTENING),
        (-0.5, MetricTrend.DECLINING),
        (-0.9, MetricTrend.DECLINING),
    ],
)
def test_classify_metric_change(delta: float | None, expected: MetricTrend) -> None:
    """Test coarse buckets for a single metric."""
    assert classify_metric_change(delta) is expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (math.inf, "New"),
        (-math.inf, "Absent"),
        (None, "N/A"),
        (math.nan, "N/A"),
        (0.0, "Stable"),
        (0.004, "Stable"),
        (0.5, "+50%"),
        (-0.25, "-25%"),
        (2.0, "+200%"),
    ],
)
def test_format_delta(delta: float | None, expected: str) -> None:
    """Test display strings keep -inf and undefined apart."""
    assert format_delta(delta) == expected
