"""Bibliographic work record consumed by exclusion and trend analysis."""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from biblioinsights.normalize import normalize_key

__all__ = [
    "Work",
    "YEAR_KEYS",
    "parse_year",
    "parse_citations",
    "select_author_works",
]

YEAR_KEYS = ("year", "publicationYear", "publication_year")
CITATION_KEYS = ("citations", "citedByCount", "cited_by_count")


def parse_year(value: Any) -> int | None:
    """Coerce a raw year value to an integer, or None when unparseable.

    Accepts integers (not booleans), integral finite floats such as
    ``2015.0`` and strings of digits.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def parse_citations(value: Any) -> int:
    """Coerce a raw citation count to a non-negative integer (default 0).

    Finite floats are floored, so ``12.0`` counts as 12 and ``1.5`` as 1.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(math.floor(value), 0) if math.isfinite(value) else 0
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


def _as_str_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(str(item) for item in value if item is not None)
    return ()


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True)
class Work:
    """One bibliographic record.

    Attributes
    ----------
    work_id : str
        Registry identifier, bare or URL-prefixed.
    doi : str | None
        DOI, possibly with a resolver URL or ``doi:`` scheme.
    title : str
        Display title (may contain markup).
    year : int | None
        Publication year; undated works never enter windowed aggregates.
    citations : int
        Non-negative citation count.
    topics : tuple[str, ...]
        Topic names; repeats within one work count once.
    author_ids : tuple[str, ...]
        Author identifiers linked to the work.
    """

    work_id: str
    doi: str | None = None
    title: str = ""
    year: int | None = None
    citations: int = 0
    topics: tuple[str, ...] = ()
    author_ids: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Work":
        """Build a work from a corpus row (camelCase or snake_case keys)."""
        work_id = _first(data, "workId", "work_id", "id")
        doi = _first(data, "doi")
        title = _first(data, "title")
        return cls(
            work_id=str(work_id) if work_id is not None else "",
            doi=str(doi) if doi else None,
            title=str(title) if title is not None else "",
            year=parse_year(_first(data, *YEAR_KEYS)),
            citations=parse_citations(_first(data, *CITATION_KEYS)),
            topics=_as_str_tuple(_first(data, "topics") or ()),
            author_ids=_as_str_tuple(_first(data, "authorIds", "author_ids") or ()),
        )

    def has_author(self, author_id: str | None) -> bool:
        """Whether ``author_id`` is among the linked authors (trimmed, case-insensitive)."""
        key = normalize_key(author_id)
        return bool(key) and any(normalize_key(linked) == key for linked in self.author_ids)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the corpus' camelCase keys."""
        return {
            "workId": self.work_id,
            "doi": self.doi,
            "title": self.title,
            "year": self.year,
            "citations": self.citations,
            "topics": list(self.topics),
            "authorIds": list(self.author_ids),
        }


def select_author_works(works: Iterable[Work], author_id: str | None) -> list[Work]:
    """Keep the works linked to one author, preserving input order.

    Parameters
    ----------
    works : Iterable[Work]
        Corpus, usually already cleaned for that author.
    author_id : str | None
        Author whose view is being built. A blank or missing author
        leaves the corpus unscoped.

    Returns
    -------
    list[Work]
        Works whose ``author_ids`` contain the author.
    """
    if not normalize_key(author_id):
        return list(works)
    return [work for work in works if work.has_author(author_id)]
