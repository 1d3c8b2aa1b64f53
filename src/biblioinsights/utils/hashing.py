"""Content digests for run inputs and output artifacts."""

import hashlib
from pathlib import Path

__all__ = ["format_sha256", "calculate_file_sha256"]

_CHUNK_SIZE = 8192


def format_sha256(hex_digest: str) -> str:
    """Prefix a hex digest with ``sha256:``."""
    return f"sha256:{hex_digest}"


def calculate_file_sha256(path: Path) -> str:
    """Hash a file in chunks.

    Parameters
    ----------
    path : Path
        File to hash.

    Returns
    -------
    str
        Digest in the form ``sha256:<hex>``.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    digest = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)

    return format_sha256(digest.hexdigest())
