"""Growth ratios and relative deltas with explicit zero handling.

None of these functions raise for non-negative integer inputs.
"""

import math

from biblioinsights.trends.models import MetricTrend

__all__ = [
    "growth_ratio",
    "relative_delta",
    "classify_metric_change",
    "format_delta",
]

RISING_DELTA = 0.5
UP_DELTA = 0.2


def growth_ratio(a: int, b: int) -> float:
    """Ratio of period B to period A.

    Parameters
    ----------
    a : int
        Non-negative count in period A.
    b : int
        Non-negative count in period B.

    Returns
    -------
    float
        ``inf`` when only B is non-zero, ``0.0`` when both are zero,
        otherwise ``b / a``.
    """
    if a == 0:
        return math.inf if b > 0 else 0.0
    return b / a


def relative_delta(a: int, b: int) -> float:
    """Relative change ``(b - a) / a`` with sentinels.

    Returns ``inf`` for appearance from zero, ``-inf`` for disappearance,
    ``0.0`` when both periods are empty.
    """
    if a == 0:
        return math.inf if b > 0 else 0.0
    if b == 0:
        return -math.inf
    return (b - a) / a


def classify_metric_change(delta: float | None) -> MetricTrend:
    """Bucket a relative delta into a coarse trend."""
    if delta is None or math.isnan(delta):
        return MetricTrend.NOT_AVAILABLE
    if delta == math.inf:
        return MetricTrend.EMERGING
    if delta == -math.inf:
        return MetricTrend.ABSENT
    if delta >= RISING_DELTA:
        return MetricTrend.RISING
    if delta >= UP_DELTA:
        return MetricTrend.UP
    if delta <= -RISING_DELTA:
        return MetricTrend.DECLINING
    if delta <= -UP_DELTA:
        return MetricTrend.SOFTENING
    return MetricTrend.STABLE


def format_delta(delta: float | None) -> str:
    """Render a delta for display: ``"New"``, ``"Absent"``, ``"N/A"``, ``"+50%"``.

    Undefined and ``-inf`` render differently even though they rank
    next to each other.
    """
    if delta is None or math.isnan(delta):
        return "N/A"
    if delta == math.inf:
        return "New"
    if delta == -math.inf:
        return "Absent"
    pct = round(delta * 100)
    if pct == 0:
        return "Stable"
    sign = "+" if pct > 0 else ""
    return f"{sign}{pct}%"
