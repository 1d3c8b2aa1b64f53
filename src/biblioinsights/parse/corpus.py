"""Corpus loading from JSON or JSON Lines.

Accepted layouts:
- a JSON array of work objects
- a JSON object with a ``works`` array
- JSON Lines, one work object per line
"""

import json
from pathlib import Path
from typing import Any

from biblioinsights.models import YEAR_KEYS, Work
from biblioinsights.parse.base import ParseResult, read_text

__all__ = ["parse_corpus", "parse_corpus_text", "sniff_format"]


def sniff_format(text: str) -> str:
    """Guess the corpus layout.

    Parameters
    ----------
    text : str
        File content.

    Returns
    -------
    str
        ``"json"``, ``"jsonl"`` or ``"unknown"``.
    """
    stripped = text.lstrip()
    if not stripped:
        return "unknown"
    if stripped.startswith("["):
        return "json"
    if stripped.startswith("{"):
        first_line = stripped.split("\n", 1)[0].strip()
        try:
            json.loads(first_line)
        except json.JSONDecodeError:
            return "json"
        return "jsonl"
    return "unknown"


def _rows_to_works(rows: list[Any], label: str) -> ParseResult[Work]:
    works: list[Work] = []
    warnings: list[str] = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            warnings.append(f"{label} {index}: expected an object, got {type(row).__name__}")
            continue
        work = Work.from_dict(row)
        if not work.work_id:
            warnings.append(f"{label} {index}: missing work identifier")
        raw_year = next((row[key] for key in YEAR_KEYS if key in row), None)
        if work.year is None and raw_year not in (None, ""):
            warnings.append(f"{label} {index}: unparseable year {raw_year!r}; work left undated")
        works.append(work)
    return ParseResult(works, warnings, [])


def parse_corpus_text(text: str) -> ParseResult[Work]:
    """Parse corpus content already read into memory.

    Parameters
    ----------
    text : str
        JSON or JSON Lines content.

    Returns
    -------
    ParseResult[Work]
        Works in input order plus warnings and errors.
    """
    layout = sniff_format(text)

    if layout == "unknown":
        if not text.strip():
            return ParseResult([], ["corpus is empty"], [])
        return ParseResult([], [], ["unrecognized corpus format (expected JSON or JSON Lines)"])

    if layout == "json":
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            return ParseResult([], [], [f"invalid JSON: {e}"])
        if isinstance(document, dict):
            document = document.get("works")
        if not isinstance(document, list):
            return ParseResult([], [], ["JSON corpus must be an array or contain a 'works' array"])
        return _rows_to_works(document, "item")

    rows: list[Any] = []
    errors: list[str] = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            rows.append(json.loads(line))
        except json.JSONDecodeError as e:
            errors.append(f"line {line_number}: invalid JSON: {e.msg}")
    works, warnings, _ = _rows_to_works(rows, "row")
    return ParseResult(works, warnings, errors)


def parse_corpus(path: Path) -> ParseResult[Work]:
    """Parse a corpus file.

    Parameters
    ----------
    path : Path
        JSON or JSON Lines file.

    Returns
    -------
    ParseResult[Work]
        Works in input order plus warnings and errors.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    return parse_corpus_text(read_text(path))
