"""Run identifiers and environment information for the audit trail.

For timestamp and hashing utilities, see biblioinsights.utils.
"""

import importlib.metadata
import platform
import secrets
import sys
from datetime import UTC, datetime

__all__ = [
    "RUNTIME_DEPENDENCIES",
    "generate_run_id",
    "get_dependency_versions",
    "get_package_version",
    "get_platform_info",
    "get_python_version",
]

RUNTIME_DEPENDENCIES = ("click", "jsonschema")


def generate_run_id() -> str:
    """Generate a unique run identifier.

    Returns
    -------
    str
        ``<ISO8601 timestamp>__<random hex suffix>``.
    """
    timestamp = datetime.now(UTC).isoformat().replace("+00:00", "Z")
    return f"{timestamp}__{secrets.token_hex(4)}"


def get_package_version() -> str:
    """Installed biblioinsights version, or "unknown"."""
    try:
        return importlib.metadata.version("biblioinsights")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_python_version() -> str:
    """Python version string (e.g., "3.12.3")."""
    return sys.version.split()[0]


def get_platform_info() -> str:
    """Platform string (e.g., "Linux-6.8.0-x86_64")."""
    return f"{platform.system()}-{platform.release()}-{platform.machine()}"


def get_dependency_versions(packages: tuple[str, ...] = RUNTIME_DEPENDENCIES) -> dict[str, str]:
    """Versions of the given distributions; "unknown" when not installed."""
    versions: dict[str, str] = {}
    for package in packages:
        try:
            versions[package] = importlib.metadata.version(package)
        except importlib.metadata.PackageNotFoundError:
            versions[package] = "unknown"
    return versions
