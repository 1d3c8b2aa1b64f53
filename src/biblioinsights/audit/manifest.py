"""Run manifest writer.

The manifest is written atomically (temporary file, fsync, rename) so a
reader never sees a partial ``run.json``.
"""

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any

from biblioinsights.audit.models import (
    ArtifactInfo,
    EnvironmentInfo,
    ErrorInfo,
    InputInfo,
    ManifestData,
    StageInfo,
)
from biblioinsights.utils import calculate_file_sha256, get_file_mtime, get_iso_timestamp

__all__ = ["MANIFEST_VERSION", "ManifestWriter"]

MANIFEST_VERSION = "1.0.0"


class ManifestWriter:
    """Builds the run manifest and writes it atomically.

    Attributes
    ----------
    manifest : ManifestData
        Manifest being built.
    output_dir : Path
        Run output directory; artifact paths are relative to it.
    manifest_path : Path
        Final location of ``run.json``.
    """

    def __init__(
        self,
        run_id: str,
        output_dir: Path,
        command: list[str],
        environment: EnvironmentInfo,
        parameters: dict[str, Any],
    ) -> None:
        self.output_dir = output_dir
        self.manifest_path = output_dir / "run.json"
        self.manifest = ManifestData(
            manifest_version=MANIFEST_VERSION,
            run_id=run_id,
            created_at=get_iso_timestamp(),
            status="partial",
            command=command,
            environment=environment,
            parameters=parameters,
        )
        self._stage_index: dict[str, StageInfo] = {}

    def _get_stage(self, stage_name: str) -> StageInfo:
        stage = self._stage_index.get(stage_name)
        if stage is None:
            raise ValueError(f"Stage not found: {stage_name}")
        return stage

    def add_input(self, role: str, path: Path, records_read: int | None = None) -> InputInfo:
        """Register an input file with its size, digest and mtime.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        """
        info = InputInfo(
            role=role,
            name=path.name,
            bytes=path.stat().st_size,
            sha256=calculate_file_sha256(path),
            mtime=get_file_mtime(path),
            records_read=records_read,
        )
        self.manifest.inputs.append(info)
        return info

    def add_stage(self, stage: StageInfo) -> None:
        """Append a stage record."""
        self.manifest.stages.append(stage)
        self._stage_index[stage.name] = stage

    def update_stage_counters(self, stage_name: str, counters: dict[str, int]) -> None:
        """Merge counters into an existing stage.

        Raises
        ------
        ValueError
            If the stage was never added.
        """
        self._get_stage(stage_name).counters.update(counters)

    def finish_stage(
        self,
        stage_name: str,
        finished_at: str | None = None,
        duration_seconds: float | None = None,
    ) -> None:
        """Mark a stage as finished.

        Raises
        ------
        ValueError
            If the stage was never added.
        """
        stage = self._get_stage(stage_name)
        stage.finished_at = finished_at or get_iso_timestamp()
        stage.duration_seconds = duration_seconds

    def add_artifact(self, path: Path, record_count: int | None = None) -> ArtifactInfo:
        """Hash a written file and register it as an output artifact."""
        artifact = ArtifactInfo(
            path=path.relative_to(self.output_dir).as_posix(),
            sha256=calculate_file_sha256(path),
            bytes=path.stat().st_size,
            record_count=record_count,
        )
        self.manifest.artifacts.append(artifact)
        return artifact

    def add_error(self, error: ErrorInfo) -> None:
        """Append an error record."""
        self.manifest.errors.append(error)

    def register_event_log(self) -> None:
        """Register ``events.jsonl`` as an artifact if it exists."""
        events_path = self.output_dir / "events.jsonl"
        if events_path.exists():
            self.add_artifact(events_path)

    def finish(
        self,
        status: str,
        finished_at: str | None = None,
        duration_seconds: float | None = None,
    ) -> None:
        """Set the final status and write ``run.json``."""
        self.manifest.status = status
        self.manifest.finished_at = finished_at or get_iso_timestamp()
        self.manifest.duration_seconds = duration_seconds
        self._write_atomic(self.manifest_path)

    def _write_atomic(self, path: Path) -> None:
        temp_path = path.with_suffix(".tmp")
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(asdict(self.manifest), f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        temp_path.replace(path)

    def to_dict(self) -> dict[str, Any]:
        """Manifest as a dictionary."""
        return asdict(self.manifest)
