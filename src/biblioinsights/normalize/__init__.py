"""Canonical forms for work identity fields.

All functions are pure and total: empty or missing input yields ``""``.

- ``canonical_work_id``: registry identifier without URL prefix
- ``canonical_doi``: bare DOI without resolver URL or ``doi:`` scheme
- ``slugify`` / ``work_slug``: title(+year) slug
- ``normalize_key``: trimmed lowercase key (author identifiers)
"""

from biblioinsights.normalize.identifiers import (
    canonical_doi,
    canonical_work_id,
    normalize_key,
)
from biblioinsights.normalize.slug import slugify, work_slug

__all__ = [
    "canonical_doi",
    "canonical_work_id",
    "normalize_key",
    "slugify",
    "work_slug",
]
