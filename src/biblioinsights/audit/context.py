"""Run lifecycle: audit logger and manifest managed together."""

import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from biblioinsights.audit.helpers import (
    generate_run_id,
    get_dependency_versions,
    get_package_version,
    get_platform_info,
    get_python_version,
)
from biblioinsights.audit.logger import AuditLogger
from biblioinsights.audit.manifest import ManifestWriter
from biblioinsights.audit.models import ArtifactInfo, EnvironmentInfo, ErrorInfo, StageInfo
from biblioinsights.utils import get_iso_timestamp

__all__ = ["RunContext"]


class RunContext:
    """Audit logging and manifest tracking for one pipeline run.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    output_dir : Path
        Directory receiving every run output.
    audit_logger : AuditLogger
        Structured event logger (``events.jsonl``).
    manifest_writer : ManifestWriter
        Manifest builder (``run.json``).
    start_time : datetime
        Run start time.
    """

    def __init__(
        self,
        run_id: str,
        output_dir: Path,
        audit_logger: AuditLogger,
        manifest_writer: ManifestWriter,
    ) -> None:
        self.run_id = run_id
        self.output_dir = output_dir
        self.audit_logger = audit_logger
        self.manifest_writer = manifest_writer
        self.start_time = datetime.now(UTC)
        self._stage_start_times: dict[str, datetime] = {}

    @classmethod
    def start(
        cls,
        output_dir: Path,
        parameters: dict[str, Any],
        command_argv: list[str] | None = None,
    ) -> "RunContext":
        """Create the output layout, open the logger and start the manifest.

        Parameters
        ----------
        output_dir : Path
            Run output directory.
        parameters : dict[str, Any]
            Configuration snapshot recorded in the manifest.
        command_argv : list[str] | None, optional
            Command line; ``sys.argv`` when None.

        Returns
        -------
        RunContext
            Started run.
        """
        run_id = generate_run_id()

        output_dir.mkdir(parents=True, exist_ok=True)
        (output_dir / "artifacts").mkdir(exist_ok=True)
        (output_dir / "reports").mkdir(exist_ok=True)

        argv = list(command_argv or sys.argv)
        environment = EnvironmentInfo(
            python_version=get_python_version(),
            platform=get_platform_info(),
            package_version=get_package_version(),
            dependencies=get_dependency_versions(),
        )

        audit_logger = AuditLogger(run_id=run_id, log_path=output_dir / "events.jsonl")
        manifest_writer = ManifestWriter(
            run_id=run_id,
            output_dir=output_dir,
            command=argv,
            environment=environment,
            parameters=parameters,
        )

        audit_logger.run_started(command=argv, parameters=parameters)

        return cls(
            run_id=run_id,
            output_dir=output_dir,
            audit_logger=audit_logger,
            manifest_writer=manifest_writer,
        )

    def start_stage(self, stage_name: str, expected_records: int | None = None) -> None:
        """Start a pipeline stage."""
        self._stage_start_times[stage_name] = datetime.now(UTC)
        self.manifest_writer.add_stage(StageInfo(name=stage_name, started_at=get_iso_timestamp()))
        self.audit_logger.stage_started(stage=stage_name, expected_records=expected_records)

    def finish_stage(self, stage_name: str, counters: dict[str, int] | None = None) -> None:
        """Finish a pipeline stage.

        Raises
        ------
        ValueError
            If the stage was not started.
        """
        start_time = self._stage_start_times.pop(stage_name, None)
        if start_time is None:
            raise ValueError(f"Stage not started: {stage_name}")

        duration = (datetime.now(UTC) - start_time).total_seconds()
        self.manifest_writer.finish_stage(
            stage_name=stage_name,
            finished_at=get_iso_timestamp(),
            duration_seconds=duration,
        )
        if counters:
            self.manifest_writer.update_stage_counters(stage_name, counters)

        self.audit_logger.stage_finished(
            stage=stage_name,
            duration_seconds=duration,
            counters=counters,
        )
        self.audit_logger.set_stage(None)

    def register_artifact(self, path: Path, record_count: int | None = None) -> ArtifactInfo:
        """Record a written file in the manifest and the event log."""
        artifact = self.manifest_writer.add_artifact(path, record_count=record_count)
        self.audit_logger.artifact_written(
            path=artifact.path,
            sha256=artifact.sha256,
            bytes_written=artifact.bytes,
            record_count=record_count,
        )
        return artifact

    def record_error(
        self,
        exception: BaseException,
        stage: str | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Record an error in both the event log and the manifest."""
        exception_class = type(exception).__name__
        message = str(exception)

        tb = None
        if include_traceback:
            tb = "".join(
                traceback.format_exception(type(exception), exception, exception.__traceback__)
            )

        self.manifest_writer.add_error(
            ErrorInfo(
                timestamp=get_iso_timestamp(),
                exception_class=exception_class,
                message=message,
                stage=stage,
                traceback=tb,
            )
        )
        self.audit_logger.error(
            exception_class=exception_class,
            message=message,
            stage=stage,
            traceback=tb,
        )

    def finish(self, status: str = "success", works_processed: int | None = None) -> None:
        """Close the event log and write the final manifest.

        The logger is closed before hashing so that ``events.jsonl`` is
        complete on disk.
        """
        duration = (datetime.now(UTC) - self.start_time).total_seconds()

        self.audit_logger.run_finished(
            status=status,
            duration_seconds=duration,
            works_processed=works_processed,
        )
        self.audit_logger.close()

        self.manifest_writer.register_event_log()
        self.manifest_writer.finish(
            status=status,
            finished_at=get_iso_timestamp(),
            duration_seconds=duration,
        )

    def __enter__(self) -> "RunContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.audit_logger.closed:
            return
        if exc_type is not None:
            self.record_error(exc_val, include_traceback=True)
            self.finish(status="failed")
        else:
            self.finish(status="success")
