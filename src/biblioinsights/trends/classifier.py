"""Ordered rule evaluation for topic trend labels.

Rules are evaluated in a fixed order and the first match wins; the order
is the tie-break policy. Rules 1-2 look at raw publication counts so that
a topic absent from both periods (growth 0 by convention) or appearing
from nothing is never mistaken for a ratio-based outcome.
"""

from collections.abc import Callable
from dataclasses import dataclass

from biblioinsights.trends.growth import growth_ratio
from biblioinsights.trends.models import InsightLabel
from biblioinsights.trends.thresholds import InsightThresholds

__all__ = ["GrowthContext", "InsightRule", "INSIGHT_RULES", "classify", "first_matching_rule"]


@dataclass(frozen=True)
class GrowthContext:
    """Counts and growth ratios for one topic.

    Attributes
    ----------
    pubs_a, pubs_b : int
        Publication counts per period.
    cites_a, cites_b : int
        Citation sums per period.
    pubs_growth, cites_growth : float
        :func:`growth_ratio` of each metric.
    """

    pubs_a: int
    pubs_b: int
    cites_a: int
    cites_b: int
    pubs_growth: float
    cites_growth: float

    @classmethod
    def from_counts(cls, pubs_a: int, pubs_b: int, cites_a: int, cites_b: int) -> "GrowthContext":
        """Compute growth ratios for raw counts."""
        return cls(
            pubs_a=pubs_a,
            pubs_b=pubs_b,
            cites_a=cites_a,
            cites_b=cites_b,
            pubs_growth=growth_ratio(pubs_a, pubs_b),
            cites_growth=growth_ratio(cites_a, cites_b),
        )


Predicate = Callable[[GrowthContext, InsightThresholds], bool]


@dataclass(frozen=True)
class InsightRule:
    """A guarded outcome: ``label`` applies when ``predicate`` holds."""

    name: str
    label: InsightLabel
    predicate: Predicate


INSIGHT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        "emerging",
        InsightLabel.EMERGING,
        lambda g, t: g.pubs_a == 0 and g.pubs_b > 0,
    ),
    InsightRule(
        "absent",
        InsightLabel.ABSENT,
        lambda g, t: g.pubs_a > 0 and g.pubs_b == 0,
    ),
    InsightRule(
        "strong_surge",
        InsightLabel.STRONG_SURGE,
        lambda g, t: (
            g.pubs_growth >= t.strong_surge.pubs and g.cites_growth >= t.strong_surge.cites
        ),
    ),
    InsightRule(
        "growing_priority",
        InsightLabel.GROWING_PRIORITY,
        lambda g, t: (
            g.pubs_growth >= t.growing_priority.pubs
            and g.cites_growth >= t.growing_priority.cites
        ),
    ),
    InsightRule(
        "output_softening",
        InsightLabel.OUTPUT_SOFTENING,
        lambda g, t: (
            g.pubs_growth >= t.output_softening.pubs
            and g.cites_growth < t.output_softening.cites_max
        ),
    ),
    InsightRule(
        "declining",
        InsightLabel.DECLINING,
        lambda g, t: g.pubs_growth < t.decline_drop and g.cites_growth < t.decline_drop,
    ),
    InsightRule(
        "impact_led",
        InsightLabel.IMPACT_LED,
        lambda g, t: (
            g.cites_growth >= t.impact_led.cites and g.pubs_growth <= t.impact_led.pubs_max
        ),
    ),
    InsightRule("stable", InsightLabel.STABLE, lambda g, t: True),
)


def first_matching_rule(
    context: GrowthContext,
    thresholds: InsightThresholds,
    rules: tuple[InsightRule, ...] = INSIGHT_RULES,
) -> InsightRule:
    """Return the first rule whose predicate holds.

    Raises
    ------
    ValueError
        If no rule matches (only possible with a custom rule set lacking a
        catch-all).
    """
    for rule in rules:
        if rule.predicate(context, thresholds):
            return rule
    raise ValueError("No insight rule matched; rule set has no catch-all")


def classify(
    pubs_a: int,
    pubs_b: int,
    cites_a: int,
    cites_b: int,
    thresholds: InsightThresholds | None = None,
) -> InsightLabel:
    """Label a topic's change from period A to period B.

    Parameters
    ----------
    pubs_a, pubs_b : int
        Publication counts in period A and B.
    cites_a, cites_b : int
        Citation sums in period A and B.
    thresholds : InsightThresholds | None, optional
        Threshold set; defaults when None.

    Returns
    -------
    InsightLabel
        Exactly one of the eight labels.

    Examples
    --------
        >>> classify(1, 2, 3, 6).value
        'Strong surge in output and impact'
        >>> classify(1, 0, 5, 0).value
        'Absent in period B'
    """
    context = GrowthContext.from_counts(pubs_a, pubs_b, cites_a, cites_b)
    return first_matching_rule(context, thresholds or InsightThresholds()).label
