"""Hot-reloadable rule snapshot for long-lived callers.

A :class:`RuleSet` bundles the exclusion engine and the insights
configuration. :class:`InsightsService` publishes one ``RuleSet`` at a
time: a reload builds the complete replacement first and then swaps the
single reference, so a query that read the old snapshot finishes with it
and never sees a half-built one.
"""

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from biblioinsights.exclusion import ExclusionEngine
from biblioinsights.models import Work, select_author_works
from biblioinsights.parse.denylist import DenyListResult, parse_deny_list
from biblioinsights.trends.config import InsightsConfig, load_insights_config
from biblioinsights.trends.models import Period, TopicInsight
from biblioinsights.trends.query import build_insights, resolve_query_periods
from biblioinsights.trends.ranking import SortKey

__all__ = ["RuleSet", "InsightsService"]


@dataclass(frozen=True)
class RuleSet:
    """Immutable exclusion rules plus insights configuration.

    Attributes
    ----------
    exclusion : ExclusionEngine
        Deny-list engine.
    config : InsightsConfig
        Thresholds and default periods.
    deny_list : DenyListResult
        Parse report of the deny-list the engine was built from.
    """

    exclusion: ExclusionEngine = field(default_factory=lambda: ExclusionEngine.from_entries(()))
    config: InsightsConfig = field(default_factory=InsightsConfig)
    deny_list: DenyListResult = field(default_factory=DenyListResult)

    @classmethod
    def load(
        cls,
        deny_list_path: Path | None = None,
        config_path: Path | None = None,
    ) -> tuple["RuleSet", list[str]]:
        """Build a rule set from files.

        Parameters
        ----------
        deny_list_path : Path | None, optional
            Deny-list CSV; no exclusions when None.
        config_path : Path | None, optional
            Insights configuration JSON; defaults when None.

        Returns
        -------
        tuple[RuleSet, list[str]]
            (rule set, warnings from both inputs)

        Raises
        ------
        FileNotFoundError
            If ``deny_list_path`` is given but does not exist.
        """
        deny_list = parse_deny_list(deny_list_path) if deny_list_path else DenyListResult()
        config, config_warnings = load_insights_config(config_path)
        rules = cls(
            exclusion=ExclusionEngine.from_entries(deny_list.entries),
            config=config,
            deny_list=deny_list,
        )
        return rules, [*deny_list.warnings, *config_warnings]


class InsightsService:
    """Serves exclusion and insight queries against the current rule set.

    Readers never lock; they read :attr:`rules` once per query. Writers
    serialize on an internal lock so two concurrent reloads cannot
    interleave.
    """

    def __init__(self, rules: RuleSet | None = None) -> None:
        self._rules = rules or RuleSet()
        self._write_lock = threading.Lock()

    @property
    def rules(self) -> RuleSet:
        """Currently published rule set."""
        return self._rules

    def replace(self, rules: RuleSet) -> RuleSet:
        """Publish ``rules`` and return the previous snapshot."""
        with self._write_lock:
            previous = self._rules
            self._rules = rules
        return previous

    def reload(
        self,
        deny_list_path: Path | None = None,
        config_path: Path | None = None,
    ) -> list[str]:
        """Rebuild the rule set from files and publish it.

        The current snapshot stays in place if loading raises.

        Returns
        -------
        list[str]
            Warnings from parsing the inputs.
        """
        rules, warnings = RuleSet.load(deny_list_path, config_path)
        self.replace(rules)
        return warnings

    def clean(self, works: Sequence[Work], author_id: str | None = None) -> list[Work]:
        """Drop deny-listed works under the current snapshot."""
        return self._rules.exclusion.filter_works(works, author_id)

    def insights(
        self,
        works: Sequence[Work],
        period_a: Period | None = None,
        period_b: Period | None = None,
        *,
        author_id: str | None = None,
        single_period: bool = False,
        sort_key: SortKey | str | None = SortKey.PUBS_A,
        descending: bool = True,
        search: str | None = None,
    ) -> list[TopicInsight]:
        """Clean the works and build the insight table in one snapshot.

        With ``author_id`` the table covers the works linked to that author
        that survive both the global rules and the author's own. Missing
        periods are resolved from the snapshot's configuration and the
        cleaned corpus' year span, so every author is compared on the same
        windows.
        """
        rules = self._rules
        clean = rules.exclusion.filter_works(works, author_id)

        windows = resolve_query_periods(clean, rules.config, period_a, period_b, single_period)
        if windows is None:
            return []

        return build_insights(
            select_author_works(clean, author_id),
            *windows,
            rules.config.thresholds,
            sort_key=sort_key,
            descending=descending,
            search=search,
        )
