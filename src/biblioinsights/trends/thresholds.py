"""Threshold parameters for the trend classifier.

Every leaf has a built-in default. Partial overrides merge leaf by leaf:
``{"strongSurge": {"pubs": 3}}`` keeps ``strongSurge.cites`` at its default.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "StrongSurge",
    "GrowingPriority",
    "ImpactLed",
    "OutputSoftening",
    "InsightThresholds",
    "DEFAULT_DECLINE_DROP",
]

DEFAULT_DECLINE_DROP = 0.8


def _leaf(group: Any, key: str, default: float) -> float:
    """Read one numeric leaf, falling back to ``default`` when unusable."""
    if not isinstance(group, Mapping):
        return default
    value = group.get(key)
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    if math.isnan(number) or number < 0:
        return default
    return number


@dataclass(frozen=True)
class StrongSurge:
    """Minimum growth in both output and impact for a strong surge."""

    pubs: float = 2.0
    cites: float = 2.0


@dataclass(frozen=True)
class GrowingPriority:
    """Minimum growth in output and impact for a growing priority."""

    pubs: float = 1.5
    cites: float = 1.2


@dataclass(frozen=True)
class ImpactLed:
    """Citation growth floor with a cap on output growth."""

    cites: float = 1.5
    pubs_max: float = 1.0


@dataclass(frozen=True)
class OutputSoftening:
    """Output growth floor with a cap on citation growth."""

    pubs: float = 1.2
    cites_max: float = 0.9


@dataclass(frozen=True)
class InsightThresholds:
    """Complete, immutable threshold set for :func:`classify`.

    Attributes
    ----------
    strong_surge : StrongSurge
        ``strongSurge{pubs, cites}``.
    growing_priority : GrowingPriority
        ``growingPriority{pubs, cites}``.
    impact_led : ImpactLed
        ``impactLed{cites, pubsMax}``.
    output_softening : OutputSoftening
        ``outputSoftening{pubs, citesMax}``.
    decline_drop : float
        Both growths below this mark a decline.
    """

    strong_surge: StrongSurge = field(default_factory=StrongSurge)
    growing_priority: GrowingPriority = field(default_factory=GrowingPriority)
    impact_led: ImpactLed = field(default_factory=ImpactLed)
    output_softening: OutputSoftening = field(default_factory=OutputSoftening)
    decline_drop: float = DEFAULT_DECLINE_DROP

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "InsightThresholds":
        """Merge a (partial) ``insightThresholds`` document with the defaults.

        Parameters
        ----------
        data : Mapping[str, Any] | None
            camelCase threshold groups; missing or invalid leaves use their
            defaults.

        Returns
        -------
        InsightThresholds
            Fully populated thresholds.
        """
        data = data if isinstance(data, Mapping) else {}
        surge = data.get("strongSurge")
        growing = data.get("growingPriority")
        impact = data.get("impactLed")
        softening = data.get("outputSoftening")

        decline = _leaf(data, "declineDrop", DEFAULT_DECLINE_DROP)

        return cls(
            strong_surge=StrongSurge(
                pubs=_leaf(surge, "pubs", StrongSurge.pubs),
                cites=_leaf(surge, "cites", StrongSurge.cites),
            ),
            growing_priority=GrowingPriority(
                pubs=_leaf(growing, "pubs", GrowingPriority.pubs),
                cites=_leaf(growing, "cites", GrowingPriority.cites),
            ),
            impact_led=ImpactLed(
                cites=_leaf(impact, "cites", ImpactLed.cites),
                pubs_max=_leaf(impact, "pubsMax", ImpactLed.pubs_max),
            ),
            output_softening=OutputSoftening(
                pubs=_leaf(softening, "pubs", OutputSoftening.pubs),
                cites_max=_leaf(softening, "citesMax", OutputSoftening.cites_max),
            ),
            decline_drop=decline,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the config file's camelCase keys."""
        return {
            "strongSurge": {"pubs": self.strong_surge.pubs, "cites": self.strong_surge.cites},
            "growingPriority": {
                "pubs": self.growing_priority.pubs,
                "cites": self.growing_priority.cites,
            },
            "impactLed": {"cites": self.impact_led.cites, "pubsMax": self.impact_led.pubs_max},
            "outputSoftening": {
                "pubs": self.output_softening.pubs,
                "citesMax": self.output_softening.cites_max,
            },
            "declineDrop": self.decline_drop,
        }
