"""Public API for cleaning a corpus and classifying topic trends.

This module provides the main public API for biblioinsights, enabling:
- Loading a corpus of works from JSON or JSON Lines
- Removing deny-listed works, globally or for one author
- Building the topic insight table for one or two periods
- Running the full audited pipeline
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from biblioinsights.exclusion import ExclusionEngine
from biblioinsights.models import Work, select_author_works
from biblioinsights.parse.corpus import parse_corpus
from biblioinsights.parse.denylist import parse_deny_list
from biblioinsights.trends.config import InsightsConfig, load_insights_config
from biblioinsights.trends.models import Period, TopicInsight
from biblioinsights.trends.query import build_insights, resolve_query_periods
from biblioinsights.trends.ranking import SortKey

if TYPE_CHECKING:
    from biblioinsights.engine.config import PipelineResult

__all__ = [
    "ParseError",
    "analyze",
    "clean_corpus",
    "compute_insights",
    "load_corpus",
    "write_jsonl",
]


class _Serializable(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


class ParseError(Exception):
    """Raised when an input cannot be parsed."""

    def __init__(self, message: str, file: str | None = None) -> None:
        """Initialize parse error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where the error occurred.
        """
        super().__init__(message)
        self.file = file


def load_corpus(path: str | Path, *, strict: bool = True) -> list[Work]:
    """Load works from a JSON or JSON Lines corpus.

    Parameters
    ----------
    path : str | Path
        Corpus file.
    strict : bool, optional
        If True, raise on malformed content. If False, return whatever
        works could be read, by default True.

    Returns
    -------
    list[Work]
        Works in file order.

    Raises
    ------
    ParseError
        If the content is malformed and strict=True.
    FileNotFoundError
        If the file does not exist.

    Examples
    --------
        >>> from biblioinsights import load_corpus
        >>> works = load_corpus("works.jsonl")
        >>> works[0].topics
        ('Machine learning', 'Ecology')
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    works, _, errors = parse_corpus(file_path)

    if errors and strict:
        raise ParseError(
            f"Failed to parse {file_path.name}: {'; '.join(errors[:3])}",
            file=str(file_path),
        )

    return works


def _as_engine(deny_list: ExclusionEngine | str | Path | None) -> ExclusionEngine:
    if isinstance(deny_list, ExclusionEngine):
        return deny_list
    if deny_list is None:
        return ExclusionEngine.from_entries(())
    deny_path = Path(deny_list)
    if not deny_path.exists():
        raise FileNotFoundError(f"Deny-list not found: {deny_list}")
    return ExclusionEngine.from_entries(parse_deny_list(deny_path).entries)


def clean_corpus(
    works: Iterable[Work],
    deny_list: ExclusionEngine | str | Path | None,
    author_id: str | None = None,
) -> list[Work]:
    """Drop deny-listed works.

    Parameters
    ----------
    works : Iterable[Work]
        Corpus to clean.
    deny_list : ExclusionEngine | str | Path | None
        Built engine or a deny-list CSV path. None keeps every work.
    author_id : str | None, optional
        Author whose per-author rules also apply.

    Returns
    -------
    list[Work]
        Kept works in input order.

    Raises
    ------
    FileNotFoundError
        If a deny-list path does not exist.
    """
    return _as_engine(deny_list).filter_works(works, author_id)


def compute_insights(
    works: Sequence[Work],
    period_a: Period | str | None = None,
    period_b: Period | str | None = None,
    *,
    config: InsightsConfig | str | Path | None = None,
    author_id: str | None = None,
    single_period: bool = False,
    sort_key: SortKey | str | None = SortKey.PUBS_A,
    descending: bool = True,
    search: str | None = None,
) -> list[TopicInsight]:
    """Build the topic insight table for a cleaned corpus.

    Parameters
    ----------
    works : Sequence[Work]
        Cleaned corpus.
    period_a : Period | str | None, optional
        Reference window (``"2010:2014"`` style strings accepted). Resolved
        from the configuration and the corpus year span when None.
    period_b : Period | str | None, optional
        Comparison window, resolved the same way.
    config : InsightsConfig | str | Path | None, optional
        Configuration object or JSON file; defaults when None.
    author_id : str | None, optional
        Restrict the table to works linked to this author. Periods still
        resolve against all of ``works``. Pass the same author to
        :func:`clean_corpus` first so their per-author rules apply.
    single_period : bool, optional
        Report period A only, by default False.
    sort_key : SortKey | str | None, optional
        Sort column, by default ``pubs_a``; None keeps aggregation order.
    descending : bool, optional
        Sort direction, by default True.
    search : str | None, optional
        Case-insensitive topic/label filter.

    Returns
    -------
    list[TopicInsight]
        Insight rows; empty when no work carries a year and no period was
        given.

    Examples
    --------
        >>> rows = compute_insights(works, "2010:2014", "2015:2019", sort_key="pubs_delta")
        >>> [(r.topic, r.label.value) for r in rows[:1]]
        [('Ecology', 'Emerging in period B')]
    """
    if not isinstance(config, InsightsConfig):
        config, _ = load_insights_config(Path(config) if config is not None else None)

    if isinstance(period_a, str):
        period_a = Period.parse(period_a)
    if isinstance(period_b, str):
        period_b = Period.parse(period_b)

    windows = resolve_query_periods(works, config, period_a, period_b, single_period)
    if windows is None:
        return []

    return build_insights(
        select_author_works(works, author_id),
        *windows,
        config.thresholds,
        sort_key=sort_key,
        descending=descending,
        search=search,
    )


def write_jsonl(
    rows: Iterable[_Serializable],
    path: str | Path,
    *,
    sort_keys: bool = False,
) -> int:
    """Write objects with ``to_dict()`` to a JSONL file.

    Parameters
    ----------
    rows : Iterable
        Works, insight rows, or anything else with ``to_dict()``.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Sort dictionary keys, by default False.

    Returns
    -------
    int
        Number of lines written.
    """
    count = 0
    with Path(path).open("w", encoding="utf-8", newline="\n") as f:
        for row in rows:
            f.write(json.dumps(row.to_dict(), ensure_ascii=False, sort_keys=sort_keys) + "\n")
            count += 1
    return count


def analyze(
    corpus_path: str | Path,
    *,
    output_dir: str | Path = "out",
    deny_list: str | Path | None = None,
    config: str | Path | None = None,
    author_id: str | None = None,
    period_a: str | None = None,
    period_b: str | None = None,
) -> PipelineResult:
    """Run the full pipeline: load, exclude, classify, summarize.

    Parameters
    ----------
    corpus_path : str | Path
        Corpus file.
    output_dir : str | Path, optional
        Directory for artifacts, reports and the audit trail.
    deny_list : str | Path | None, optional
        Deny-list CSV.
    config : str | Path | None, optional
        Insights configuration JSON.
    author_id : str | None, optional
        Author whose per-author rules apply.
    period_a, period_b : str | None, optional
        Windows as ``"from:to"``; resolved from the configuration when None.

    Returns
    -------
    PipelineResult
        Counts and output file paths.

    Raises
    ------
    FileNotFoundError
        If the corpus does not exist.
    ParseError
        If the run fails.
    """
    from biblioinsights.engine import PipelineConfig, run_pipeline

    corpus = Path(corpus_path)
    if not corpus.exists():
        raise FileNotFoundError(f"Corpus not found: {corpus_path}")

    pipeline_config = PipelineConfig(
        output_dir=Path(output_dir),
        deny_list_path=Path(deny_list) if deny_list is not None else None,
        config_path=Path(config) if config is not None else None,
        author_id=author_id,
        period_a=Period.parse(period_a) if period_a else None,
        period_b=Period.parse(period_b) if period_b else None,
    )

    result = run_pipeline(corpus, pipeline_config)

    if not result.success:
        raise ParseError(f"Pipeline failed: {result.error_message}", file=str(corpus))

    return result
