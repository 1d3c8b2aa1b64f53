"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from biblioinsights.models import Work  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample corpus, deny-list and configuration."""
    return FIXTURES_DIR


@pytest.fixture
def make_work() -> Callable[..., Work]:
    """Factory for test works with minimal boilerplate."""

    def _factory(
        work_id: str = "W1",
        *,
        doi: str | None = None,
        title: str = "Untitled",
        year: int | None = 2015,
        citations: int = 0,
        topics: tuple[str, ...] | list[str] = (),
        author_ids: tuple[str, ...] | list[str] = (),
    ) -> Work:
        return Work(
            work_id=work_id,
            doi=doi,
            title=title,
            year=year,
            citations=citations,
            topics=tuple(topics),
            author_ids=tuple(author_ids),
        )

    return _factory
