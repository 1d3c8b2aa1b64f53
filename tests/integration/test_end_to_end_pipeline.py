"""Integration tests for the end-to-end clean-and-classify pipeline.

The sample corpus has 16 works. Two are removed by global deny rules (one
by DOI, one by registry URL) and one more only in author A1's view.
"""

import json
from pathlib import Path

import jsonschema
import pytest

from biblioinsights.engine import PipelineConfig, run_pipeline
from biblioinsights.trends import Period

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "src" / "biblioinsights" / "schemas"


def _load_schema(name: str) -> dict:
    with (_SCHEMAS_DIR / name).open() as f:
        return json.load(f)


def _read_jsonl(path: Path) -> list[dict]:
    with path.open(encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def _config(fixtures_dir: Path, output_dir: Path, **overrides: object) -> PipelineConfig:
    return PipelineConfig(
        output_dir=output_dir,
        deny_list_path=fixtures_dir / "denylist.csv",
        config_path=fixtures_dir / "insightsconfig.json",
        **overrides,
    )


@pytest.mark.integration
def test_pipeline_counts_and_labels(fixtures_dir: Path, tmp_path: Path) -> None:
    """Test exclusion counts, resolved periods and one label per topic."""
    result = run_pipeline(fixtures_dir / "corpus.jsonl", _config(fixtures_dir, tmp_path / "out"))

    assert result.success
    assert result.error_message is None
    assert result.total_works == 16
    assert result.excluded_works == 2
    assert result.clean_works == 14
    assert result.topics == 4
    assert result.period_a == {"from": 2010, "to": 2014}
    assert result.period_b == {"from": 2015, "to": 2019}
    assert len(result.warnings) == 3

    nonzero = {label: count for label, count in result.label_counts.items() if count}
    assert nonzero == {
        "Emerging in period B": 1,
        "Absent in period B": 1,
        "Strong surge in output and impact": 1,
        "Stable focus": 1,
    }

    for name, path in result.output_files.items():
        assert Path(path).exists(), f"Output file missing: {name} at {path}"


@pytest.mark.integration
def test_pipeline_artifacts(fixtures_dir: Path, tmp_path: Path) -> None:
    """Test the content of every artifact and report."""
    output_dir = tmp_path / "out"
    run_pipeline(fixtures_dir / "corpus.jsonl", _config(fixtures_dir, output_dir))

    clean = _read_jsonl(output_dir / "artifacts" / "clean_works.jsonl")
    assert len(clean) == 14
    assert {"W11", "https://openalex.org/W16"}.isdisjoint(w["workId"] for w in clean)

    rows = _read_jsonl(output_dir / "artifacts" / "insights.jsonl")
    insights = {row["topic"]: row for row in rows}
    assert insights["Machine learning"]["pubs_a"] == 1
    assert insights["Machine learning"]["cites_b"] == 15
    assert insights["Machine learning"]["pubs_delta"] == 2.0
    assert insights["Ecology"]["pubs_delta"] == "+inf"
    assert insights["Soil science"]["cites_delta"] == "-inf"
    assert insights["Hydrology"]["pubs_delta"] == 0.0

    report = json.loads((output_dir / "reports" / "denylist_report.json").read_text())
    assert report["entries"] == 4
    assert report["global_rules"] == 3
    assert report["authors_with_rules"] == 1
    assert report["unknown_scopes"] == 1
    assert report["works_excluded"] == 2
    assert report["skipped"] == [
        {"line": 7, "reason": "missing_author_id"},
        {"line": 8, "reason": "too_few_columns"},
    ]

    coverage = json.loads((output_dir / "reports" / "topic_coverage.json").read_text())
    assert coverage == {
        "total_topics": 6,
        "in_windows": 4,
        "outside_windows": 2,
        "only_after": 1,
        "only_before": 1,
    }

    summary = json.loads((output_dir / "reports" / "label_summary.json").read_text())
    assert summary["topics"] == 4
    assert len(summary["labels"]) == 8


@pytest.mark.integration
def test_pipeline_audit_trail(fixtures_dir: Path, tmp_path: Path) -> None:
    """Test events and manifest validate and record the domain events."""
    output_dir = tmp_path / "out"
    run_pipeline(fixtures_dir / "corpus.jsonl", _config(fixtures_dir, output_dir))

    event_schema = _load_schema("log_event.schema.json")
    events = _read_jsonl(output_dir / "events.jsonl")
    for event in events:
        jsonschema.validate(instance=event, schema=event_schema)

    assert events[0]["event"] == "run_started"
    assert events[-1]["event"] == "run_finished"
    assert events[-1]["data"]["status"] == "success"

    excluded = [e for e in events if e["event"] == "work_excluded"]
    assert [e["work_id"] for e in excluded] == ["W11", "https://openalex.org/W16"]
    assert [e["data"]["field"] for e in excluded] == ["doi", "work_id"]
    assert all(e["stage"] == "exclude" for e in excluded)

    skipped = [e["data"] for e in events if e["event"] == "denylist_row_skipped"]
    assert skipped == [
        {"line_number": 7, "reason": "missing_author_id"},
        {"line_number": 8, "reason": "too_few_columns"},
    ]
    fallbacks = [e for e in events if e["event"] == "config_fallback"]
    assert len(fallbacks) == 1
    assert fallbacks[0]["level"] == "WARN"

    manifest = json.loads((output_dir / "run.json").read_text())
    jsonschema.validate(instance=manifest, schema=_load_schema("run_manifest.schema.json"))
    assert manifest["status"] == "success"
    assert [i["role"] for i in manifest["inputs"]] == ["corpus", "deny_list", "config"]
    assert [s["name"] for s in manifest["stages"]] == [
        "load_corpus",
        "exclude",
        "aggregate_classify",
        "summarize",
    ]
    exclude_stage = manifest["stages"][1]
    assert exclude_stage["counters"]["works_excluded"] == 2
    assert exclude_stage["counters"]["denylist_rows_skipped"] == 2
    artifact_paths = {a["path"] for a in manifest["artifacts"]}
    assert {
        "artifacts/clean_works.jsonl",
        "artifacts/insights.jsonl",
        "reports/denylist_report.json",
        "reports/label_summary.json",
        "reports/topic_coverage.json",
        "events.jsonl",
    } <= artifact_paths


@pytest.mark.integration
def test_pipeline_author_view(fixtures_dir: Path, tmp_path: Path) -> None:
    """Test the author view: per-author rules apply and only linked works are classified."""
    output_dir = tmp_path / "out"
    result = run_pipeline(
        fixtures_dir / "corpus.jsonl",
        _config(fixtures_dir, output_dir, author_id="A1"),
    )

    assert result.success
    assert result.excluded_works == 3
    assert result.clean_works == 13
    # W1 is A1's only remaining work; windows still come from the whole corpus
    assert result.author_works == 1
    assert result.period_a == {"from": 2010, "to": 2014}
    assert result.topics == 1
    assert result.label_counts["Absent in period B"] == 1
    assert sum(result.label_counts.values()) == 1

    insights = _read_jsonl(output_dir / "artifacts" / "insights.jsonl")
    assert [(row["topic"], row["pubs_a"], row["cites_a"]) for row in insights] == [
        ("Machine learning", 1, 3)
    ]

    manifest = json.loads((output_dir / "run.json").read_text(encoding="utf-8"))
    classify_stage = next(s for s in manifest["stages"] if s["name"] == "aggregate_classify")
    assert classify_stage["counters"]["author_works"] == 1

    per_author = [
        e
        for e in _read_jsonl(output_dir / "events.jsonl")
        if e["event"] == "work_excluded" and e["data"]["scope"] == "per-author"
    ]
    assert len(per_author) == 1
    assert per_author[0]["work_id"] == "W12"
    assert per_author[0]["data"]["field"] == "title_slug"
    assert per_author[0]["data"]["author_key"] == "a1"


@pytest.mark.integration
def test_pipeline_single_period(fixtures_dir: Path, tmp_path: Path) -> None:
    """Test single-period runs skip labels and coverage."""
    result = run_pipeline(
        fixtures_dir / "corpus.jsonl",
        _config(fixtures_dir, tmp_path / "out", period_a=Period(2015, 2019), single_period=True),
    )

    assert result.success
    assert result.period_b is None
    assert result.topics == 3
    assert sum(result.label_counts.values()) == 0
    assert "topic_coverage" not in result.output_files


@pytest.mark.integration
def test_pipeline_determinism(fixtures_dir: Path, tmp_path: Path) -> None:
    """Test repeated runs produce identical artifacts."""
    corpus = fixtures_dir / "corpus.jsonl"
    run_pipeline(corpus, _config(fixtures_dir, tmp_path / "run1"))
    run_pipeline(corpus, _config(fixtures_dir, tmp_path / "run2"))

    for relative in (
        "artifacts/clean_works.jsonl",
        "artifacts/insights.jsonl",
        "reports/label_summary.json",
        "reports/topic_coverage.json",
        "reports/denylist_report.json",
    ):
        first = (tmp_path / "run1" / relative).read_bytes()
        second = (tmp_path / "run2" / relative).read_bytes()
        assert first == second, relative


@pytest.mark.integration
def test_pipeline_failure_is_audited(tmp_path: Path) -> None:
    """Test a corpus that cannot be parsed fails the run with a manifest."""
    corpus = tmp_path / "works.txt"
    corpus.write_text("not a corpus\n", encoding="utf-8")
    output_dir = tmp_path / "out"

    result = run_pipeline(corpus, PipelineConfig(output_dir=output_dir))

    assert not result.success
    assert result.error_message.startswith("ParseError")
    manifest = json.loads((output_dir / "run.json").read_text())
    assert manifest["status"] == "failed"
    assert manifest["errors"][0]["stage"] == "load_corpus"


@pytest.mark.integration
def test_pipeline_missing_corpus(tmp_path: Path) -> None:
    """Test a missing corpus fails before any output is written."""
    output_dir = tmp_path / "out"

    result = run_pipeline(tmp_path / "missing.jsonl", PipelineConfig(output_dir=output_dir))

    assert not result.success
    assert "does not exist" in result.error_message
    assert not output_dir.exists()
