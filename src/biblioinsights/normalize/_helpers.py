"""Compiled patterns and text helpers shared by the canonicalizers."""

import re
import unicodedata
from collections.abc import Iterable

# Registry URL prefix: scheme, optional "www.", host, path separator
REGISTRY_URL_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://(?:www\.)?[^/\s]+/")
DOI_RESOLVER_RE = re.compile(r"^https?://(?:www\.|dx\.)?doi\.org/")
DOI_SCHEME_RE = re.compile(r"^doi:")

# Hyphen, non-breaking hyphen, figure dash, en/em dash, horizontal bar,
# minus sign, two/three-em dashes, small and fullwidth hyphen-minus
DASH_RE = re.compile("[\u2010-\u2015\u2212\u2e3a\u2e3b\ufe58\ufe63\uff0d]")

# Anything that is not a letter, digit, whitespace or hyphen ("_" is a word char)
NON_SLUG_CHAR_RE = re.compile(r"[^\w\s-]|_")
WHITESPACE_RE = re.compile(r"\s+")


def strip_accents(text: str) -> str:
    """Remove combining marks after canonical decomposition.

    Parameters
    ----------
    text : str
        Input text with potential diacritics.

    Returns
    -------
    str
        Decomposed text without combining marks.
    """
    nfd = unicodedata.normalize("NFD", text)
    return "".join(c for c in nfd if not unicodedata.category(c).startswith("M"))


def strip_prefixes(value: str, patterns: Iterable[re.Pattern[str]]) -> str:
    """Strip leading prefixes until none of the patterns match.

    Repeating to a fixed point keeps the canonicalizers idempotent for
    inputs such as ``"doi: https://doi.org/10.1/x"``.
    """
    patterns = tuple(patterns)
    previous = None
    while value != previous:
        previous = value
        for pattern in patterns:
            value = pattern.sub("", value, count=1).strip()
    return value
