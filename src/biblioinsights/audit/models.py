"""Data models for the audit trail: log events and the run manifest."""

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ArtifactInfo",
    "EnvironmentInfo",
    "ErrorInfo",
    "InputInfo",
    "LogEvent",
    "ManifestData",
    "StageInfo",
]


@dataclass
class EnvironmentInfo:
    """Execution environment.

    Attributes
    ----------
    python_version : str
        Python version (e.g., "3.12.3").
    platform : str
        OS and architecture (e.g., "Linux-6.8.0-x86_64").
    package_version : str
        biblioinsights package version.
    dependencies : dict[str, str]
        Versions of the runtime dependencies.
    """

    python_version: str
    platform: str
    package_version: str
    dependencies: dict[str, str] = field(default_factory=dict)


@dataclass
class InputInfo:
    """One input file of a run.

    Attributes
    ----------
    role : str
        What the file is used for ("corpus", "deny_list", "config").
    name : str
        Filename.
    bytes : int
        File size in bytes.
    sha256 : str
        Digest with "sha256:" prefix.
    mtime : str | None
        ISO8601 modification time.
    records_read : int | None
        Rows or records taken from the file, when meaningful.
    """

    role: str
    name: str
    bytes: int
    sha256: str
    mtime: str | None = None
    records_read: int | None = None


@dataclass
class ArtifactInfo:
    """Output artifact.

    Attributes
    ----------
    path : str
        Path relative to the output directory.
    sha256 : str
        Digest with "sha256:" prefix.
    bytes : int | None
        File size in bytes.
    record_count : int | None
        Number of records in the artifact.
    """

    path: str
    sha256: str
    bytes: int | None = None
    record_count: int | None = None


@dataclass
class StageInfo:
    """Stage timing and counters."""

    name: str
    started_at: str
    counters: dict[str, int] = field(default_factory=dict)
    finished_at: str | None = None
    duration_seconds: float | None = None


@dataclass
class ErrorInfo:
    """Error record.

    Attributes
    ----------
    timestamp : str
        ISO8601 time the error was recorded.
    exception_class : str
        Exception class name.
    message : str
        Error message.
    stage : str | None
        Stage where the error occurred.
    traceback : str | None
        Stack trace, when requested.
    """

    timestamp: str
    exception_class: str
    message: str
    stage: str | None = None
    traceback: str | None = None


@dataclass
class ManifestData:
    """Complete run manifest (``run.json``).

    Attributes
    ----------
    manifest_version : str
        Manifest format version.
    run_id : str
        Unique run identifier.
    created_at : str
        ISO8601 UTC time the run started.
    status : str
        "success", "failed" or "partial".
    command : list[str]
        Command-line arguments.
    environment : EnvironmentInfo
        Execution environment.
    parameters : dict[str, Any]
        Configuration snapshot.
    inputs : list[InputInfo]
        Input files.
    stages : list[StageInfo]
        Stage records, in execution order.
    artifacts : list[ArtifactInfo]
        Files written by the run.
    finished_at : str | None
        ISO8601 UTC time the run finished.
    duration_seconds : float | None
        Total execution time.
    errors : list[ErrorInfo]
        Errors recorded during the run.
    """

    manifest_version: str
    run_id: str
    created_at: str
    status: str
    command: list[str]
    environment: EnvironmentInfo
    parameters: dict[str, Any]
    inputs: list[InputInfo] = field(default_factory=list)
    stages: list[StageInfo] = field(default_factory=list)
    artifacts: list[ArtifactInfo] = field(default_factory=list)
    finished_at: str | None = None
    duration_seconds: float | None = None
    errors: list[ErrorInfo] = field(default_factory=list)


@dataclass
class LogEvent:
    """One line of ``events.jsonl``.

    Attributes
    ----------
    ts : str
        ISO8601 UTC timestamp with microseconds.
    run_id : str
        Unique run identifier.
    level : str
        "DEBUG", "INFO", "WARN" or "ERROR".
    event : str
        Event type.
    data : dict[str, Any]
        Event payload.
    stage : str | None
        Stage the event belongs to.
    work_id : str | None
        Work identifier for work-specific events.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    stage: str | None = None
    work_id: str | None = None
