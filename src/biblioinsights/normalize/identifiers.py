"""Identifier and DOI canonicalization."""

from ._helpers import DOI_RESOLVER_RE, DOI_SCHEME_RE, REGISTRY_URL_RE, strip_prefixes

__all__ = ["normalize_key", "canonical_work_id", "canonical_doi"]


def normalize_key(value: str | None) -> str:
    """Trim and lowercase a free-form key such as an author identifier.

    Parameters
    ----------
    value : str | None
        Raw value.

    Returns
    -------
    str
        Trimmed lowercase value, ``""`` for None or blank input.
    """
    if not value:
        return ""
    return value.strip().lower()


def canonical_work_id(value: str | None) -> str:
    """Canonicalize a work identifier.

    Strips a leading registry URL (``https://openalex.org/W123`` becomes
    ``w123``) and lowercases.

    Parameters
    ----------
    value : str | None
        Raw identifier, bare or URL-prefixed.

    Returns
    -------
    str
        Bare lowercase identifier, ``""`` if nothing is left.
    """
    return strip_prefixes(normalize_key(value), (REGISTRY_URL_RE,))


def canonical_doi(value: str | None) -> str:
    """Canonicalize a DOI.

    Strips a resolver URL (``https://doi.org/``, ``http://dx.doi.org/``) or a
    ``doi:`` scheme and lowercases.

    Parameters
    ----------
    value : str | None
        Raw DOI string.

    Returns
    -------
    str
        Bare lowercase DOI, ``""`` if nothing is left.
    """
    return strip_prefixes(normalize_key(value), (DOI_RESOLVER_RE, DOI_SCHEME_RE))
