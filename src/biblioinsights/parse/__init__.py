"""Input parsing: work corpora (JSON / JSON Lines) and deny-list CSV files."""

from biblioinsights.parse.base import ParseResult, SkippedRow
from biblioinsights.parse.corpus import parse_corpus, parse_corpus_text, sniff_format
from biblioinsights.parse.denylist import (
    DENY_LIST_COLUMNS,
    DenyListResult,
    parse_deny_list,
    parse_deny_list_text,
)

__all__ = [
    "DENY_LIST_COLUMNS",
    "DenyListResult",
    "ParseResult",
    "SkippedRow",
    "parse_corpus",
    "parse_corpus_text",
    "parse_deny_list",
    "parse_deny_list_text",
    "sniff_format",
]
