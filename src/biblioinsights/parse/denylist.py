"""Deny-list (exclusion rules) CSV parsing.

Columns, in fixed order: ``scope, authorId, workIdentifier, doi, titleSlug``.
The first non-comment row is a header. Malformed rows are skipped and
reported, never fatal.
"""

import csv
from dataclasses import dataclass
from pathlib import Path

from biblioinsights.exclusion.models import ExclusionEntry, Scope, parse_scope
from biblioinsights.parse.base import SkippedRow, read_text

__all__ = ["DENY_LIST_COLUMNS", "DenyListResult", "parse_deny_list", "parse_deny_list_text"]

DENY_LIST_COLUMNS = ("scope", "authorId", "workIdentifier", "doi", "titleSlug")


@dataclass(frozen=True)
class DenyListResult:
    """Outcome of parsing a deny-list.

    Attributes
    ----------
    entries : tuple[ExclusionEntry, ...]
        Rules accepted for the engine.
    skipped : tuple[SkippedRow, ...]
        Rows dropped (too few columns, per-author without author id).
    unknown_scopes : int
        Rows whose scope token was not recognized and defaulted to global.
    warnings : tuple[str, ...]
        Human-readable messages for skipped rows.
    """

    entries: tuple[ExclusionEntry, ...] = ()
    skipped: tuple[SkippedRow, ...] = ()
    unknown_scopes: int = 0
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        """Summary suitable for a JSON report."""
        return {
            "entries": len(self.entries),
            "global_entries": sum(1 for e in self.entries if e.scope is Scope.GLOBAL),
            "per_author_entries": sum(1 for e in self.entries if e.scope is Scope.PER_AUTHOR),
            "unknown_scopes": self.unknown_scopes,
            "skipped": [
                {"line": row.line_number, "reason": row.reason} for row in self.skipped
            ],
        }


def _clean(value: str) -> str | None:
    value = value.strip()
    return value or None


def parse_deny_list_text(text: str) -> DenyListResult:
    """Parse deny-list CSV content.

    Blank lines and lines starting with ``#`` are ignored. Quoted fields
    have their quotes stripped and ``""`` unescaped.

    Parameters
    ----------
    text : str
        CSV content including the header row.

    Returns
    -------
    DenyListResult
        Accepted entries and skipped-row diagnostics.
    """
    numbered = [
        (number, line.strip())
        for number, line in enumerate(text.split("\n"), start=1)
        if line.strip() and not line.strip().startswith("#")
    ]
    if len(numbered) <= 1:
        return DenyListResult()

    entries: list[ExclusionEntry] = []
    skipped: list[SkippedRow] = []
    warnings: list[str] = []
    unknown_scopes = 0

    for line_number, line in numbered[1:]:
        columns = next(csv.reader([line], skipinitialspace=True), [])
        if len(columns) < len(DENY_LIST_COLUMNS):
            skipped.append(SkippedRow(line_number, "too_few_columns", line))
            warnings.append(
                f"line {line_number}: expected {len(DENY_LIST_COLUMNS)} columns, "
                f"got {len(columns)}"
            )
            continue

        scope_raw, author_id, work_identifier, doi, title_slug = (
            c.strip() for c in columns[: len(DENY_LIST_COLUMNS)]
        )
        scope = parse_scope(scope_raw)
        if scope is Scope.GLOBAL and scope_raw != Scope.GLOBAL.value:
            unknown_scopes += 1

        if scope is Scope.PER_AUTHOR and not author_id:
            skipped.append(SkippedRow(line_number, "missing_author_id", line))
            warnings.append(f"line {line_number}: per-author rule without authorId")
            continue

        entries.append(
            ExclusionEntry(
                scope=scope,
                author_id=_clean(author_id.lower()),
                work_identifier=_clean(work_identifier),
                doi=_clean(doi),
                title_slug=_clean(title_slug.lower()),
            )
        )

    return DenyListResult(tuple(entries), tuple(skipped), unknown_scopes, tuple(warnings))


def parse_deny_list(path: Path) -> DenyListResult:
    """Parse a deny-list CSV file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    return parse_deny_list_text(read_text(path))
