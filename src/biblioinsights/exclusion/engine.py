"""Deny-list matching engine.

Rules are partitioned once, at construction, into global lookup sets and
per-author lookup maps keyed by the normalized author identifier. Global
rules never need an author context to apply.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from biblioinsights.exclusion.models import (
    ExclusionEntry,
    ExclusionMatch,
    MatchField,
    Scope,
)
from biblioinsights.models import Work
from biblioinsights.normalize import (
    canonical_doi,
    canonical_work_id,
    normalize_key,
    slugify,
    work_slug,
)

__all__ = ["ExclusionEngine", "work_identity"]

_FIELDS = (MatchField.WORK_ID, MatchField.DOI, MatchField.TITLE_SLUG)


def work_identity(work: Work) -> dict[MatchField, str]:
    """Canonical identity values of a work, keyed by match field."""
    return {
        MatchField.WORK_ID: canonical_work_id(work.work_id),
        MatchField.DOI: canonical_doi(work.doi),
        MatchField.TITLE_SLUG: work_slug(work.title, work.year),
    }


def _entry_values(entry: ExclusionEntry) -> dict[MatchField, str]:
    return {
        MatchField.WORK_ID: canonical_work_id(entry.work_identifier),
        MatchField.DOI: canonical_doi(entry.doi),
        MatchField.TITLE_SLUG: slugify(entry.title_slug),
    }


@dataclass(frozen=True)
class ExclusionEngine:
    """Immutable exclusion predicate over works.

    Build with :meth:`from_entries`; the lookup structures are read-only
    mappings over frozensets, so one engine can be shared between
    concurrent queries.

    Attributes
    ----------
    global_values : Mapping[MatchField, frozenset[str]]
        Canonical values excluded everywhere.
    author_values : Mapping[MatchField, Mapping[str, frozenset[str]]]
        Canonical values excluded per normalized author key.
    """

    global_values: Mapping[MatchField, frozenset[str]] = field(
        default_factory=lambda: MappingProxyType({f: frozenset() for f in _FIELDS})
    )
    author_values: Mapping[MatchField, Mapping[str, frozenset[str]]] = field(
        default_factory=lambda: MappingProxyType({f: MappingProxyType({}) for f in _FIELDS})
    )

    @classmethod
    def from_entries(cls, entries: Iterable[ExclusionEntry]) -> "ExclusionEngine":
        """Partition deny-list entries into lookup structures.

        Per-author entries without an author key are dropped. Empty
        canonical values are never stored.

        Parameters
        ----------
        entries : Iterable[ExclusionEntry]
            Parsed deny-list rules.

        Returns
        -------
        ExclusionEngine
            Engine ready for matching.
        """
        global_sets: dict[MatchField, set[str]] = {f: set() for f in _FIELDS}
        author_sets: dict[MatchField, defaultdict[str, set[str]]] = {
            f: defaultdict(set) for f in _FIELDS
        }

        for entry in entries:
            values = _entry_values(entry)
            if entry.scope is Scope.PER_AUTHOR:
                author_key = normalize_key(entry.author_id)
                if not author_key:
                    continue
                for match_field, value in values.items():
                    if value:
                        author_sets[match_field][author_key].add(value)
            else:
                for match_field, value in values.items():
                    if value:
                        global_sets[match_field].add(value)

        return cls(
            global_values=MappingProxyType({f: frozenset(global_sets[f]) for f in _FIELDS}),
            author_values=MappingProxyType(
                {
                    f: MappingProxyType(
                        {key: frozenset(vals) for key, vals in author_sets[f].items()}
                    )
                    for f in _FIELDS
                }
            ),
        )

    @property
    def global_rule_count(self) -> int:
        """Number of distinct global matcher values."""
        return sum(len(values) for values in self.global_values.values())

    @property
    def author_keys(self) -> frozenset[str]:
        """Normalized author keys that own at least one per-author rule."""
        keys: set[str] = set()
        for buckets in self.author_values.values():
            keys.update(buckets)
        return frozenset(keys)

    def match(self, work: Work, author_id: str | None = None) -> ExclusionMatch | None:
        """Return the first rule that excludes ``work``, if any.

        Global rules are checked first and apply regardless of
        ``author_id``; per-author rules only when ``author_id`` is given.

        Parameters
        ----------
        work : Work
            Work to test.
        author_id : str | None, optional
            Author whose view is being built.

        Returns
        -------
        ExclusionMatch | None
            Matching rule description, or None if the work is kept.
        """
        identity = work_identity(work)

        for match_field in _FIELDS:
            value = identity[match_field]
            if value and value in self.global_values[match_field]:
                return ExclusionMatch(Scope.GLOBAL, match_field, value)

        author_key = normalize_key(author_id)
        if not author_key:
            return None

        for match_field in _FIELDS:
            value = identity[match_field]
            bucket = self.author_values[match_field].get(author_key)
            if value and bucket is not None and value in bucket:
                return ExclusionMatch(Scope.PER_AUTHOR, match_field, value, author_key)

        return None

    def is_excluded(self, work: Work, author_id: str | None = None) -> bool:
        """Whether ``work`` is on the deny-list (globally or for ``author_id``)."""
        return self.match(work, author_id) is not None

    def filter_works(self, works: Iterable[Work], author_id: str | None = None) -> list[Work]:
        """Keep the works that are not excluded, preserving input order."""
        return [work for work in works if not self.is_excluded(work, author_id)]
