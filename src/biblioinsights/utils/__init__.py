"""Shared helpers for biblioinsights: timestamps and content hashing."""

from biblioinsights.utils.hashing import calculate_file_sha256, format_sha256
from biblioinsights.utils.timestamps import get_file_mtime, get_iso_timestamp

__all__ = [
    "get_iso_timestamp",
    "get_file_mtime",
    "calculate_file_sha256",
    "format_sha256",
]
