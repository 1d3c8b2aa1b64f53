"""Title-derived slugs used to match works without a stable identifier."""

from ._helpers import DASH_RE, NON_SLUG_CHAR_RE, WHITESPACE_RE, strip_accents

__all__ = ["slugify", "work_slug"]


def slugify(raw: str | None) -> str:
    """Build a hyphenated slug that tolerates typographic variation.

    Lowercases, strips diacritics, maps dash-like characters to ``-``,
    replaces anything other than letters, digits, whitespace and hyphens with
    a space, then joins the remaining words with single hyphens.

    Parameters
    ----------
    raw : str | None
        Free text, possibly with markup or punctuation.

    Returns
    -------
    str
        Slug such as ``"deep-learning-for-x-2020"``, or ``""``.

    Examples
    --------
        >>> slugify("Café – “Naïve” Models")
        'cafe---naive-models'
    """
    if not raw:
        return ""
    text = strip_accents(raw.strip().lower())
    text = DASH_RE.sub("-", text)
    text = NON_SLUG_CHAR_RE.sub(" ", text)
    text = WHITESPACE_RE.sub(" ", text).strip()
    return WHITESPACE_RE.sub("-", text)


def work_slug(title: str | None, year: int | None) -> str:
    """Slug of a work's title and year, e.g. ``"my-title-2020"``."""
    year_part = str(year) if year is not None else ""
    return slugify(f"{title or ''} {year_part}")
