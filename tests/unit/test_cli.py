"""Tests for CLI module."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from biblioinsights.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Provide Click test CLI runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Top-level CLI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cli_version_flag(runner: CliRunner) -> None:
    """Test --version flag outputs version string."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "biblioinsights" in result.output


@pytest.mark.unit
def test_cli_help(runner: CliRunner) -> None:
    """Test --help output lists commands."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "clean" in result.output
    assert "insights" in result.output
    assert "run" in result.output


@pytest.mark.unit
def test_cli_invalid_command(runner: CliRunner) -> None:
    """Test invalid command returns non-zero exit code."""
    result = runner.invoke(cli, ["invalid-command"])

    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# clean command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_clean_writes_kept_works(runner: CliRunner, fixtures_dir: Path, tmp_path: Path) -> None:
    """Test clean applies global and per-author rules."""
    output = tmp_path / "clean.jsonl"

    result = runner.invoke(
        cli,
        [
            "clean",
            str(fixtures_dir / "corpus.jsonl"),
            "-d",
            str(fixtures_dir / "denylist.csv"),
            "--author",
            "A1",
            "-o",
            str(output),
        ],
    )

    assert result.exit_code == 0
    assert "Wrote 13 works" in result.output
    lines = output.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 13
    assert "W12" not in {json.loads(line)["workId"] for line in lines}


@pytest.mark.unit
def test_clean_missing_corpus(runner: CliRunner, tmp_path: Path) -> None:
    """Test a missing corpus is a usage error."""
    result = runner.invoke(cli, ["clean", str(tmp_path / "nope.jsonl"), "-o", "x.jsonl"])

    assert result.exit_code == 2


@pytest.mark.unit
def test_clean_unusable_corpus_is_lenient(runner: CliRunner, tmp_path: Path) -> None:
    """Test clean loads leniently and writes nothing for an unusable corpus."""
    corpus = tmp_path / "works.jsonl"
    corpus.write_text("not json at all\n", encoding="utf-8")
    output = tmp_path / "clean.jsonl"

    result = runner.invoke(cli, ["clean", str(corpus), "-o", str(output)])

    assert result.exit_code == 0
    assert "Wrote 0 works" in result.output


# ---------------------------------------------------------------------------
# insights command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_insights_table(runner: CliRunner, fixtures_dir: Path) -> None:
    """Test the comparison table shows labels and delta strings."""
    result = runner.invoke(
        cli,
        [
            "insights",
            str(fixtures_dir / "corpus.jsonl"),
            "-d",
            str(fixtures_dir / "denylist.csv"),
            "--period-a",
            "2010:2014",
            "--period-b",
            "2015:2019",
        ],
    )

    assert result.exit_code == 0
    assert "Label" in result.output
    assert "Emerging in period B" in result.output
    assert "Absent in period B" in result.output
    assert "New" in result.output


@pytest.mark.unit
def test_insights_jsonl_sorted(runner: CliRunner, fixtures_dir: Path) -> None:
    """Test JSONL output honours the sort column and direction."""
    result = runner.invoke(
        cli,
        [
            "insights",
            str(fixtures_dir / "corpus.jsonl"),
            "-d",
            str(fixtures_dir / "denylist.csv"),
            "--period-a",
            "2010:2014",
            "--period-b",
            "2015:2019",
            "--sort",
            "pubs_delta",
            "--format",
            "jsonl",
        ],
    )

    assert result.exit_code == 0
    rows = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
    assert [row["topic"] for row in rows] == [
        "Ecology",
        "Machine learning",
        "Hydrology",
        "Soil science",
    ]
    assert rows[0]["pubs_delta"] == "+inf"
    assert rows[-1]["pubs_delta"] == "-inf"


@pytest.mark.unit
def test_insights_single_period_and_search(runner: CliRunner, fixtures_dir: Path) -> None:
    """Test single-period table and the empty-result message."""
    corpus = str(fixtures_dir / "corpus.jsonl")

    single = runner.invoke(cli, ["insights", corpus, "--period-a", "2015:2019", "--single-period"])
    assert single.exit_code == 0
    assert "Label" not in single.output
    assert "Machine learning" in single.output

    empty = runner.invoke(cli, ["insights", corpus, "--search", "astrophysics"])
    assert empty.exit_code == 0
    assert "No topics in the selected periods." in empty.output


@pytest.mark.unit
def test_insights_writes_file(runner: CliRunner, fixtures_dir: Path, tmp_path: Path) -> None:
    """Test -o writes the rows as JSONL."""
    output = tmp_path / "insights.jsonl"

    result = runner.invoke(
        cli,
        [
            "insights",
            str(fixtures_dir / "corpus.jsonl"),
            "-c",
            str(fixtures_dir / "insightsconfig.json"),
            "-o",
            str(output),
        ],
    )

    assert result.exit_code == 0
    assert "Warning:" in result.output
    assert len(output.read_text(encoding="utf-8").splitlines()) == 5


@pytest.mark.unit
def test_insights_bad_period(runner: CliRunner, fixtures_dir: Path) -> None:
    """Test a malformed period is a usage error."""
    result = runner.invoke(
        cli, ["insights", str(fixtures_dir / "corpus.jsonl"), "--period-a", "early:late"]
    )

    assert result.exit_code == 2
    assert "FROM:TO" in result.output


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_run_pipeline_command(runner: CliRunner, fixtures_dir: Path, tmp_path: Path) -> None:
    """Test the run command writes the audited outputs."""
    output_dir = tmp_path / "out"

    result = runner.invoke(
        cli,
        [
            "run",
            str(fixtures_dir / "corpus.jsonl"),
            "-o",
            str(output_dir),
            "-d",
            str(fixtures_dir / "denylist.csv"),
            "-c",
            str(fixtures_dir / "insightsconfig.json"),
            "-v",
        ],
    )

    assert result.exit_code == 0
    assert "Classified 4 topics from 14 works (2 excluded)" in result.output
    assert (output_dir / "run.json").exists()
    assert (output_dir / "events.jsonl").exists()


@pytest.mark.unit
def test_run_failure_exits_nonzero(runner: CliRunner, tmp_path: Path) -> None:
    """Test a failing pipeline reports the error."""
    corpus = tmp_path / "works.txt"
    corpus.write_text("garbage\n", encoding="utf-8")

    result = runner.invoke(cli, ["run", str(corpus), "-o", str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "Pipeline failed" in result.output
