"""Pipeline configuration and result dataclasses."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from biblioinsights.trends.models import Period
from biblioinsights.trends.ranking import SortKey

__all__ = ["PipelineConfig", "PipelineResult"]


@dataclass
class PipelineConfig:
    """Configuration for a full clean-and-classify run.

    Attributes
    ----------
    output_dir : Path
        Base directory for all outputs.
    deny_list_path : Path | None
        Deny-list CSV. None runs without exclusions.
    config_path : Path | None
        Insights configuration JSON. None uses built-in defaults.
    author_id : str | None
        Author whose view is built: their per-author exclusions apply and
        the insight table covers only works linked to them. None applies
        only the global rules to the whole corpus.
    period_a : Period | None
        Reference window; resolved from the configuration and the corpus
        year span when None.
    period_b : Period | None
        Comparison window; resolved like ``period_a`` when None.
    single_period : bool
        Report period A only (no deltas, no labels).
    sort_key : SortKey
        Column the insight rows are sorted by.
    descending : bool
        Sort direction.
    search : str | None
        Case-insensitive topic/label filter.
    """

    output_dir: Path = Path("out")
    deny_list_path: Path | None = None
    config_path: Path | None = None
    author_id: str | None = None
    period_a: Period | None = None
    period_b: Period | None = None
    single_period: bool = False
    sort_key: SortKey = SortKey.PUBS_A
    descending: bool = True
    search: str | None = None

    def __post_init__(self) -> None:
        """Coerce paths and sort key, validate windows."""
        self.output_dir = Path(self.output_dir)
        if self.deny_list_path is not None:
            self.deny_list_path = Path(self.deny_list_path)
        if self.config_path is not None:
            self.config_path = Path(self.config_path)

        try:
            self.sort_key = SortKey(self.sort_key)
        except ValueError:
            valid = ", ".join(k.value for k in SortKey)
            raise ValueError(f"sort_key must be one of {valid}, got {self.sort_key!r}") from None

        for name in ("period_a", "period_b"):
            period = getattr(self, name)
            if (
                period is not None
                and period.from_year is not None
                and period.to_year is not None
                and period.from_year > period.to_year
            ):
                raise ValueError(
                    f"{name} starts after it ends: {period.from_year} > {period.to_year}"
                )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dictionary."""
        return {
            "output_dir": str(self.output_dir),
            "deny_list_path": str(self.deny_list_path) if self.deny_list_path else None,
            "config_path": str(self.config_path) if self.config_path else None,
            "author_id": self.author_id,
            "period_a": self.period_a.to_dict() if self.period_a else None,
            "period_b": self.period_b.to_dict() if self.period_b else None,
            "single_period": self.single_period,
            "sort_key": self.sort_key.value,
            "descending": self.descending,
            "search": self.search,
        }


@dataclass
class PipelineResult:
    """Results from a pipeline run.

    Attributes
    ----------
    success : bool
        Whether the run completed.
    total_works : int
        Works read from the corpus.
    excluded_works : int
        Works removed by the deny-list.
    clean_works : int
        Works kept after exclusion.
    author_works : int | None
        Works in the author view (None when no author was given).
    topics : int
        Rows in the insight table.
    period_a : dict[str, int | None] | None
        Window used for period A.
    period_b : dict[str, int | None] | None
        Window used for period B (None in single-period mode).
    label_counts : dict[str, int]
        Rows per insight label.
    output_files : dict[str, str]
        Artifact name to file path.
    warnings : list[str]
        Non-fatal input problems.
    error_message : str | None
        Error message if the run failed.
    """

    success: bool
    total_works: int = 0
    excluded_works: int = 0
    clean_works: int = 0
    author_works: int | None = None
    topics: int = 0
    period_a: dict[str, int | None] | None = None
    period_b: dict[str, int | None] | None = None
    label_counts: dict[str, int] = field(default_factory=dict)
    output_files: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
