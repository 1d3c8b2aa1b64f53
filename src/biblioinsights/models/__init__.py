"""Shared record types for biblioinsights.

Domain-specific types live closer to their consumers:
- Exclusion types → biblioinsights.exclusion.models
- Trend types → biblioinsights.trends.models
"""

from biblioinsights.models.works import (
    YEAR_KEYS,
    Work,
    parse_citations,
    parse_year,
    select_author_works,
)

__all__ = ["YEAR_KEYS", "Work", "parse_citations", "parse_year", "select_author_works"]
