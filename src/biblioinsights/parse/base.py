"""Shared result types and text decoding for input parsers."""

from dataclasses import dataclass
from pathlib import Path
from typing import Generic, NamedTuple, TypeVar

T = TypeVar("T")

__all__ = [
    "ParseResult",
    "SkippedRow",
    "detect_encoding",
    "normalize_line_endings",
    "read_text",
]


class ParseResult(NamedTuple, Generic[T]):
    """Result of parsing an input file.

    Supports tuple unpacking: ``works, warnings, errors = parse_corpus(...)``.

    Attributes
    ----------
    items : list[T]
        Parsed items.
    warnings : list[str]
        Recoverable problems; parsing continued.
    errors : list[str]
        Problems that prevented (part of) the input from being read.
    """

    items: list[T]
    warnings: list[str]
    errors: list[str]


@dataclass(frozen=True)
class SkippedRow:
    """A tabular input row that was dropped during parsing.

    Attributes
    ----------
    line_number : int
        1-based line number in the source text.
    reason : str
        Short reason code (e.g. ``"too_few_columns"``).
    raw : str
        Original line content.
    """

    line_number: int
    reason: str
    raw: str


def detect_encoding(file_bytes: bytes) -> str:
    """Pick a decoding for raw bytes: UTF-8 (with or without BOM), else Latin-1."""
    if file_bytes.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    try:
        file_bytes.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    return "latin-1"


def normalize_line_endings(content: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    content = content.replace("\r\n", "\n")
    return content.replace("\r", "\n")


def read_text(path: Path) -> str:
    """Read a text file with encoding detection and LF line endings.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    file_bytes = path.read_bytes()
    return normalize_line_endings(file_bytes.decode(detect_encoding(file_bytes)))
