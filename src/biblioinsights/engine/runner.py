"""End-to-end run: load a corpus, apply the deny-list, classify topics.

Stages:
    load_corpus         read works, register inputs
    exclude             build rules, drop deny-listed works
    aggregate_classify  resolve periods, select the author view, build the
                        insight table
    summarize           label tally and topic coverage reports

Every run leaves ``events.jsonl`` and ``run.json`` in the output
directory, including failed ones.
"""

import json
from pathlib import Path
from typing import Any

from biblioinsights.api import ParseError, write_jsonl
from biblioinsights.audit import RunContext
from biblioinsights.engine.config import PipelineConfig, PipelineResult
from biblioinsights.engine.snapshot import RuleSet
from biblioinsights.exclusion import ExclusionEngine
from biblioinsights.models import Work, select_author_works
from biblioinsights.normalize import normalize_key
from biblioinsights.parse.corpus import parse_corpus
from biblioinsights.parse.denylist import DenyListResult, parse_deny_list
from biblioinsights.trends.config import load_insights_config
from biblioinsights.trends.models import Period
from biblioinsights.trends.query import build_insights, resolve_query_periods
from biblioinsights.trends.summary import tally_labels, topic_coverage

__all__ = ["run_pipeline"]

STAGE_LOAD = "load_corpus"
STAGE_EXCLUDE = "exclude"
STAGE_CLASSIFY = "aggregate_classify"
STAGE_SUMMARIZE = "summarize"


def _write_json(path: Path, payload: Any) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False, sort_keys=True)
        f.write("\n")


def _load_stage(run: RunContext, corpus_path: Path, result: PipelineResult) -> list[Work]:
    run.start_stage(STAGE_LOAD)

    works, warnings, errors = parse_corpus(corpus_path)
    run.manifest_writer.add_input("corpus", corpus_path, records_read=len(works))

    for message in warnings:
        run.audit_logger.warning(message)
        result.warnings.append(message)

    if errors and not works:
        raise ParseError(f"Failed to parse {corpus_path.name}: {'; '.join(errors[:3])}")
    for message in errors:
        run.audit_logger.warning(message)
        result.warnings.append(message)

    result.total_works = len(works)
    run.finish_stage(
        STAGE_LOAD,
        counters={"works_read": len(works), "warnings": len(warnings), "errors": len(errors)},
    )
    return works


def _load_rules(run: RunContext, config: PipelineConfig, result: PipelineResult) -> RuleSet:
    deny_list = DenyListResult()
    if config.deny_list_path is not None:
        deny_list = parse_deny_list(config.deny_list_path)
        run.manifest_writer.add_input(
            "deny_list", config.deny_list_path, records_read=len(deny_list.entries)
        )
        for row in deny_list.skipped:
            run.audit_logger.denylist_row_skipped(row)
        result.warnings.extend(deny_list.warnings)

    insights_config, config_warnings = load_insights_config(config.config_path)
    if config.config_path is not None and config.config_path.exists():
        run.manifest_writer.add_input("config", config.config_path)
    for message in config_warnings:
        run.audit_logger.config_fallback(message)
    result.warnings.extend(config_warnings)

    return RuleSet(
        exclusion=ExclusionEngine.from_entries(deny_list.entries),
        config=insights_config,
        deny_list=deny_list,
    )


def _exclude_stage(
    run: RunContext,
    works: list[Work],
    config: PipelineConfig,
    result: PipelineResult,
) -> tuple[list[Work], RuleSet]:
    run.start_stage(STAGE_EXCLUDE, expected_records=len(works))
    rules = _load_rules(run, config, result)

    clean: list[Work] = []
    for work in works:
        match = rules.exclusion.match(work, config.author_id)
        if match is None:
            clean.append(work)
        else:
            run.audit_logger.work_excluded(work.work_id, match)

    clean_path = run.output_dir / "artifacts" / "clean_works.jsonl"
    write_jsonl(clean, clean_path)
    run.register_artifact(clean_path, record_count=len(clean))

    report_path = run.output_dir / "reports" / "denylist_report.json"
    _write_json(
        report_path,
        {
            **rules.deny_list.to_dict(),
            "global_rules": rules.exclusion.global_rule_count,
            "authors_with_rules": len(rules.exclusion.author_keys),
            "author_id": config.author_id,
            "works_excluded": len(works) - len(clean),
        },
    )
    run.register_artifact(report_path)

    result.clean_works = len(clean)
    result.excluded_works = len(works) - len(clean)
    result.output_files["clean_works"] = str(clean_path)
    result.output_files["denylist_report"] = str(report_path)

    run.finish_stage(
        STAGE_EXCLUDE,
        counters={
            "works_in": len(works),
            "works_excluded": result.excluded_works,
            "works_out": len(clean),
            "denylist_rows_skipped": len(rules.deny_list.skipped),
            "unknown_scopes": rules.deny_list.unknown_scopes,
        },
    )
    return clean, rules


def _run_stages(run: RunContext, corpus_path: Path, config: PipelineConfig) -> PipelineResult:
    result = PipelineResult(success=False)

    works = _load_stage(run, corpus_path, result)
    clean, rules = _exclude_stage(run, works, config, result)

    run.start_stage(STAGE_CLASSIFY, expected_records=len(clean))
    view = clean
    classify_counters: dict[str, int] = {}
    if normalize_key(config.author_id):
        view = select_author_works(clean, config.author_id)
        result.author_works = len(view)
        classify_counters["author_works"] = len(view)

    windows = resolve_query_periods(
        clean, rules.config, config.period_a, config.period_b, config.single_period
    )
    if windows is None:
        insights = []
        period_a, period_b = Period(), None
        run.audit_logger.warning("no dated works after exclusion; insight table is empty")
    else:
        period_a, period_b = windows
        insights = build_insights(
            view,
            period_a,
            period_b,
            rules.config.thresholds,
            sort_key=config.sort_key,
            descending=config.descending,
            search=config.search,
        )

    insights_path = run.output_dir / "artifacts" / "insights.jsonl"
    write_jsonl(insights, insights_path)
    run.register_artifact(insights_path, record_count=len(insights))

    result.topics = len(insights)
    result.period_a = period_a.to_dict() if windows is not None else None
    result.period_b = period_b.to_dict() if period_b is not None else None
    result.output_files["insights"] = str(insights_path)
    run.finish_stage(STAGE_CLASSIFY, counters={**classify_counters, "topics": len(insights)})

    run.start_stage(STAGE_SUMMARIZE)
    labels = {label.value: count for label, count in tally_labels(insights).items()}
    labels_path = run.output_dir / "reports" / "label_summary.json"
    _write_json(
        labels_path,
        {
            "period_a": result.period_a,
            "period_b": result.period_b,
            "topics": len(insights),
            "labels": labels,
        },
    )
    run.register_artifact(labels_path)
    result.label_counts = labels
    result.output_files["label_summary"] = str(labels_path)

    counters = {"labels_nonzero": sum(1 for count in labels.values() if count)}
    if period_b is not None:
        coverage = topic_coverage(view, period_a, period_b)
        coverage_path = run.output_dir / "reports" / "topic_coverage.json"
        _write_json(coverage_path, coverage.to_dict())
        run.register_artifact(coverage_path)
        result.output_files["topic_coverage"] = str(coverage_path)
        counters["topics_outside_windows"] = coverage.outside_windows
    run.finish_stage(STAGE_SUMMARIZE, counters=counters)

    result.success = True
    return result


def run_pipeline(
    corpus_path: Path | str,
    config: PipelineConfig | None = None,
    command_argv: list[str] | None = None,
) -> PipelineResult:
    """Run the complete clean-and-classify pipeline.

    Parameters
    ----------
    corpus_path : Path | str
        Corpus file (JSON or JSON Lines).
    config : PipelineConfig | None, optional
        Pipeline configuration. If None, uses defaults.
    command_argv : list[str] | None, optional
        Command line recorded in the manifest; ``sys.argv`` when None.

    Returns
    -------
    PipelineResult
        Run outcome. Failures are reported through ``success`` and
        ``error_message`` and recorded in the audit trail.

    Examples
    --------
        >>> from biblioinsights.engine import PipelineConfig, run_pipeline
        >>> config = PipelineConfig(output_dir=Path("out"), deny_list_path=Path("deny.csv"))
        >>> result = run_pipeline("works.jsonl", config)
        >>> result.label_counts["Emerging in period B"]
        4
    """
    corpus_path = Path(corpus_path)
    config = config or PipelineConfig()

    if not corpus_path.exists():
        return PipelineResult(
            success=False,
            error_message=f"Corpus does not exist: {corpus_path}",
        )

    run = RunContext.start(
        output_dir=config.output_dir,
        parameters=config.to_dict(),
        command_argv=command_argv,
    )

    try:
        result = _run_stages(run, corpus_path, config)
    except Exception as e:
        run.record_error(e, stage=run.audit_logger.current_stage, include_traceback=True)
        run.finish(status="failed")
        return PipelineResult(
            success=False,
            output_files={"events": str(run.output_dir / "events.jsonl")},
            error_message=f"{type(e).__name__}: {e}",
        )

    run.finish(status="success", works_processed=result.total_works)
    result.output_files["events"] = str(run.output_dir / "events.jsonl")
    result.output_files["manifest"] = str(run.output_dir / "run.json")
    return result
