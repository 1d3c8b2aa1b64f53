"""Tests for schema validation of manifests and events."""

import json
from pathlib import Path

import jsonschema
import pytest

from biblioinsights.audit import RunContext
from biblioinsights.exclusion import ExclusionMatch, MatchField, Scope
from biblioinsights.parse.base import SkippedRow

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "src" / "biblioinsights" / "schemas"


@pytest.fixture(scope="module")
def manifest_schema() -> dict:
    """Load run manifest JSON schema."""
    with (_SCHEMAS_DIR / "run_manifest.schema.json").open() as f:
        return json.load(f)


@pytest.fixture(scope="module")
def event_schema() -> dict:
    """Load log event JSON schema."""
    with (_SCHEMAS_DIR / "log_event.schema.json").open() as f:
        return json.load(f)


@pytest.mark.unit
def test_schemas_are_valid(manifest_schema: dict, event_schema: dict) -> None:
    """Test the bundled schemas are themselves valid."""
    jsonschema.Draft202012Validator.check_schema(manifest_schema)
    jsonschema.Draft202012Validator.check_schema(event_schema)
    with (_SCHEMAS_DIR / "insights_config.schema.json").open() as f:
        jsonschema.Draft202012Validator.check_schema(json.load(f))


@pytest.mark.unit
def test_generated_manifest_validates(tmp_path: Path, manifest_schema: dict) -> None:
    """Test programmatically generated manifest validates against schema."""
    output_dir = tmp_path / "output"
    corpus = tmp_path / "corpus.jsonl"
    corpus.write_text('{"workId": "W1"}\n', encoding="utf-8")

    run = RunContext.start(output_dir=output_dir, parameters={"author_id": None})
    run.manifest_writer.add_input("corpus", corpus, records_read=1)
    run.start_stage("load_corpus")
    run.finish_stage("load_corpus", counters={"works_read": 1})
    run.record_error(ValueError("bad"), stage="load_corpus")
    run.finish(status="success")

    with (output_dir / "run.json").open() as f:
        jsonschema.validate(instance=json.load(f), schema=manifest_schema)


@pytest.mark.unit
def test_generated_events_validate(tmp_path: Path, event_schema: dict) -> None:
    """Test programmatically generated events validate against schema."""
    output_dir = tmp_path / "output"
    run = RunContext.start(output_dir=output_dir, parameters={})
    run.start_stage("exclude")
    run.audit_logger.work_excluded("W11", ExclusionMatch(Scope.GLOBAL, MatchField.DOI, "10.9/x"))
    run.audit_logger.denylist_row_skipped(SkippedRow(8, "too_few_columns", "global,too,few"))
    run.audit_logger.config_fallback("declineDrop: bad")
    run.finish_stage("exclude", counters={})
    run.finish(status="success")

    with (output_dir / "events.jsonl").open() as f:
        for line in f:
            if line.strip():
                jsonschema.validate(instance=json.loads(line), schema=event_schema)


@pytest.mark.unit
def test_invalid_data_rejected_by_schema(manifest_schema: dict, event_schema: dict) -> None:
    """Test schemas reject invalid status, level, and missing fields."""
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            instance={
                "manifest_version": "1.0.0",
                "run_id": "r",
                "created_at": "2026-01-01T00:00:00Z",
                "status": "maybe",
                "command": [],
                "environment": {"python_version": "3", "platform": "p", "package_version": "0"},
                "parameters": {},
                "inputs": [],
                "stages": [],
                "artifacts": [],
                "errors": [],
            },
            schema=manifest_schema,
        )

    event = {
        "ts": "2026-01-01T00:00:00Z",
        "run_id": "r",
        "level": "INFO",
        "event": "e",
        "data": {},
        "stage": None,
        "work_id": None,
    }
    jsonschema.validate(instance=event, schema=event_schema)

    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance={**event, "level": "TRACE"}, schema=event_schema)
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(
            instance={k: v for k, v in event.items() if k != "data"},
            schema=event_schema,
        )
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance={**event, "extra": 1}, schema=event_schema)
