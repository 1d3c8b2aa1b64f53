"""Data models for deny-list rules and exclusion matches."""

from dataclasses import dataclass
from enum import StrEnum

__all__ = ["Scope", "MatchField", "ExclusionEntry", "ExclusionMatch", "parse_scope"]


class Scope(StrEnum):
    """Reach of a deny-list rule.

    Attributes
    ----------
    GLOBAL : str
        Excludes the work from every view.
    PER_AUTHOR : str
        Excludes the work only when viewed in one author's context.
    """

    GLOBAL = "global"
    PER_AUTHOR = "per-author"


class MatchField(StrEnum):
    """Identity field on which an exclusion rule matched."""

    WORK_ID = "work_id"
    DOI = "doi"
    TITLE_SLUG = "title_slug"


def parse_scope(token: str | None) -> Scope:
    """Map a raw scope token to a Scope; anything but ``per-author`` is global."""
    if token is not None and token.strip() == Scope.PER_AUTHOR.value:
        return Scope.PER_AUTHOR
    return Scope.GLOBAL


@dataclass(frozen=True)
class ExclusionEntry:
    """One deny-list rule.

    Any populated matcher is sufficient to exclude a work.

    Attributes
    ----------
    scope : Scope
        Global or per-author reach.
    author_id : str | None
        Author the rule applies to; required for per-author rules.
    work_identifier : str | None
        Work identifier matcher.
    doi : str | None
        DOI matcher.
    title_slug : str | None
        Title+year slug matcher.
    """

    scope: Scope = Scope.GLOBAL
    author_id: str | None = None
    work_identifier: str | None = None
    doi: str | None = None
    title_slug: str | None = None

    @property
    def has_matcher(self) -> bool:
        """Whether at least one matcher field is populated."""
        return bool(self.work_identifier or self.doi or self.title_slug)


@dataclass(frozen=True)
class ExclusionMatch:
    """Why a work was excluded.

    Attributes
    ----------
    scope : Scope
        Scope of the rule set that matched.
    field : MatchField
        Identity field that matched.
    value : str
        Canonical value that matched.
    author_key : str | None
        Normalized author key for per-author matches.
    """

    scope: Scope
    field: MatchField
    value: str
    author_key: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary for serialization."""
        return {
            "scope": self.scope.value,
            "field": self.field.value,
            "value": self.value,
            "author_key": self.author_key,
        }
