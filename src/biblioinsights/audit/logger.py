"""Structured audit logger writing one JSON object per line.

Events are append-only and flushed after every write so that an
interrupted run still leaves a readable trail.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from biblioinsights.audit.models import LogEvent
from biblioinsights.exclusion import ExclusionMatch
from biblioinsights.parse.base import SkippedRow
from biblioinsights.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with a persistent file handle.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        JSONL file receiving the events.
    current_stage : str | None
        Stage attached to events that do not name one.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        self.run_id = run_id
        self.log_path = log_path
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        """Whether the log file handle has been closed."""
        return self._file.closed

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set (or clear with None) the current stage."""
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        work_id: str | None = None,
    ) -> None:
        """Write one structured event.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "stage_started").
        data : dict[str, Any] | None, optional
            Event payload.
        level : str, optional
            "DEBUG", "INFO", "WARN" or "ERROR".
        stage : str | None, optional
            Stage identifier; defaults to ``current_stage``.
        work_id : str | None, optional
            Work identifier for work-specific events.
        """
        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data or {},
            stage=stage if stage is not None else self.current_stage,
            work_id=work_id,
        )
        json.dump(asdict(log_event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log run_started with the command line and configuration."""
        self.event("run_started", data={"command": command, "parameters": parameters})

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        works_processed: int | None = None,
    ) -> None:
        """Log run_finished with the final status."""
        data: dict[str, Any] = {"status": status, "duration_seconds": duration_seconds}
        if works_processed is not None:
            data["works_processed"] = works_processed
        self.event("run_finished", data=data)

    def stage_started(self, stage: str, expected_records: int | None = None) -> None:
        """Log stage_started and make ``stage`` current."""
        self.set_stage(stage)
        data: dict[str, Any] = {}
        if expected_records is not None:
            data["expected_records"] = expected_records
        self.event("stage_started", data=data, stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Log stage_finished with the stage counters."""
        data: dict[str, Any] = {"duration_seconds": duration_seconds}
        if counters:
            data["counters"] = counters
        self.event("stage_finished", data=data, stage=stage)

    def work_excluded(self, work_id: str, match: ExclusionMatch, stage: str | None = None) -> None:
        """Log which deny-list rule removed a work.

        Parameters
        ----------
        work_id : str
            Identifier of the excluded work.
        match : ExclusionMatch
            Scope and matcher that fired.
        stage : str | None, optional
            Stage identifier.
        """
        self.event("work_excluded", data=match.to_dict(), stage=stage, work_id=work_id)

    def denylist_row_skipped(self, row: SkippedRow, stage: str | None = None) -> None:
        """Log a deny-list row that could not be used."""
        self.event(
            "denylist_row_skipped",
            data={"line_number": row.line_number, "reason": row.reason},
            level="WARN",
            stage=stage,
        )

    def config_fallback(self, message: str, stage: str | None = None) -> None:
        """Log a configuration value replaced by its default."""
        self.event("config_fallback", data={"message": message}, level="WARN", stage=stage)

    def warning(self, message: str, stage: str | None = None) -> None:
        """Log a non-fatal input problem."""
        self.event("warning", data={"message": message}, level="WARN", stage=stage)

    def artifact_written(
        self,
        path: str,
        sha256: str,
        stage: str | None = None,
        bytes_written: int | None = None,
        record_count: int | None = None,
    ) -> None:
        """Log artifact_written with the artifact digest."""
        data: dict[str, Any] = {"path": path, "sha256": sha256}
        if bytes_written is not None:
            data["bytes"] = bytes_written
        if record_count is not None:
            data["record_count"] = record_count
        self.event("artifact_written", data=data, stage=stage)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        traceback: str | None = None,
    ) -> None:
        """Log an error event."""
        data: dict[str, Any] = {"exception_class": exception_class, "message": message}
        if traceback is not None:
            data["traceback"] = traceback
        self.event("error", data=data, stage=stage, level="ERROR")
