"""Command-line interface for biblioinsights.

Provides commands to clean a corpus with a deny-list, print the topic
insight table, and run the audited pipeline.
"""

import importlib.metadata
import sys
from pathlib import Path

import click

from biblioinsights.trends.models import Period, TopicInsight
from biblioinsights.trends.ranking import SortKey

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("biblioinsights")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"


def _parse_period(ctx: click.Context, param: click.Parameter, value: str | None) -> Period | None:
    if value is None:
        return None
    try:
        return Period.parse(value)
    except ValueError:
        raise click.BadParameter(f"expected FROM:TO years, got {value!r}") from None


_deny_list_option = click.option(
    "--deny-list",
    "-d",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Deny-list CSV (scope,authorId,workIdentifier,doi,titleSlug)",
)
_author_option = click.option(
    "--author",
    "author_id",
    default=None,
    help="Apply this author's per-author deny rules; insights and run keep only their works",
)
_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Insights configuration JSON (thresholds, default periods)",
)
_period_a_option = click.option(
    "--period-a",
    callback=_parse_period,
    default=None,
    help="Period A as FROM:TO, e.g. 2010:2014 (default: from config / corpus span)",
)
_period_b_option = click.option(
    "--period-b",
    callback=_parse_period,
    default=None,
    help="Period B as FROM:TO (default: from config / corpus span)",
)


@click.group()
@click.version_option(version=__version__, prog_name="biblioinsights")
def cli() -> None:
    """Deny-list cleaning and topic trend classification for bibliographic corpora.

    Use 'biblioinsights COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False))
@_deny_list_option
@_author_option
@click.option("--output", "-o", type=click.Path(), required=True, help="Output JSONL file path")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def clean(
    corpus: str,
    deny_list: str | None,
    author_id: str | None,
    output: str,
    verbose: bool,
) -> None:
    """Remove deny-listed works from CORPUS and write the rest as JSONL.

    Examples
    --------
        biblioinsights clean works.jsonl -d deny.csv -o clean.jsonl
        biblioinsights clean works.json -d deny.csv --author A123 -o clean.jsonl
    """
    from biblioinsights import clean_corpus, load_corpus, write_jsonl

    try:
        works = load_corpus(corpus, strict=False)
        kept = clean_corpus(works, deny_list, author_id)

        if verbose:
            click.echo(f"Read {len(works)} works from {corpus}", err=True)
            click.echo(f"Excluded {len(works) - len(kept)} works", err=True)

        write_jsonl(kept, output)
        click.secho(f"✓ Wrote {len(kept)} works to {output}", fg="green")

    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


def _echo_table(rows: list[TopicInsight], compare: bool) -> None:
    from biblioinsights.trends.growth import format_delta

    if compare:
        header = f"{'Topic':<40} {'Pubs A':>7} {'Pubs B':>7} {'ΔPubs':>8} "
        header += f"{'Cites A':>8} {'Cites B':>8} {'ΔCites':>8}  Label"
    else:
        header = f"{'Topic':<40} {'Pubs':>7} {'Cites':>8}"
    click.echo(header)
    click.echo("-" * len(header))

    for row in rows:
        topic = row.topic if len(row.topic) <= 40 else row.topic[:37] + "..."
        if compare:
            label = row.label.value if row.label is not None else ""
            click.echo(
                f"{topic:<40} {row.pubs_a:>7} {row.pubs_b:>7} {format_delta(row.pubs_delta):>8} "
                f"{row.cites_a:>8} {row.cites_b:>8} {format_delta(row.cites_delta):>8}  {label}"
            )
        else:
            click.echo(f"{topic:<40} {row.pubs_a:>7} {row.cites_a:>8}")


@cli.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False))
@_deny_list_option
@_author_option
@_config_option
@_period_a_option
@_period_b_option
@click.option("--single-period", is_flag=True, help="Report period A only (no deltas or labels)")
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice([k.value for k in SortKey]),
    default=SortKey.PUBS_A.value,
    show_default=True,
    help="Sort column",
)
@click.option("--ascending", is_flag=True, help="Sort ascending instead of descending")
@click.option("--search", default=None, help="Keep topics (or labels) containing this text")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "jsonl"]),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option("--output", "-o", type=click.Path(), default=None, help="Write JSONL to this file")
def insights(
    corpus: str,
    deny_list: str | None,
    author_id: str | None,
    config_path: str | None,
    period_a: Period | None,
    period_b: Period | None,
    single_period: bool,
    sort_key: str,
    ascending: bool,
    search: str | None,
    output_format: str,
    output: str | None,
) -> None:
    """Classify how each topic of CORPUS changed between two periods.

    Examples
    --------
        biblioinsights insights works.jsonl --period-a 2010:2014 --period-b 2015:2019
        biblioinsights insights works.jsonl -d deny.csv --sort pubs_delta --search ecology
        biblioinsights insights works.jsonl --single-period --period-a 2020:2024
    """
    import json

    from biblioinsights import clean_corpus, compute_insights, load_corpus, write_jsonl
    from biblioinsights.trends.config import load_insights_config

    try:
        config, warnings = load_insights_config(Path(config_path) if config_path else None)
        for message in warnings:
            click.secho(f"Warning: {message}", fg="yellow", err=True)

        works = clean_corpus(load_corpus(corpus, strict=False), deny_list, author_id)
        rows = compute_insights(
            works,
            period_a,
            period_b,
            config=config,
            author_id=author_id,
            single_period=single_period,
            sort_key=sort_key,
            descending=not ascending,
            search=search,
        )

        if output:
            write_jsonl(rows, output)
            click.secho(f"✓ Wrote {len(rows)} topics to {output}", fg="green")
        elif output_format == "jsonl":
            for row in rows:
                click.echo(json.dumps(row.to_dict(), ensure_ascii=False))
        elif not rows:
            click.echo("No topics in the selected periods.")
        else:
            _echo_table(rows, compare=not single_period)

    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default="out",
    help="Output directory for results (default: out)",
)
@_deny_list_option
@_author_option
@_config_option
@_period_a_option
@_period_b_option
@click.option("--single-period", is_flag=True, help="Report period A only (no deltas or labels)")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def run(
    corpus: str,
    output_dir: str,
    deny_list: str | None,
    author_id: str | None,
    config_path: str | None,
    period_a: Period | None,
    period_b: Period | None,
    single_period: bool,
    verbose: bool,
) -> None:
    """Run the audited pipeline on CORPUS.

    Writes cleaned works, the insight table, label and coverage reports,
    plus events.jsonl and run.json, to OUTPUT_DIR.

    Examples
    --------
        biblioinsights run works.jsonl -d deny.csv -c insights.json -o results
    """
    from biblioinsights.engine import PipelineConfig, run_pipeline

    if verbose:
        click.echo("Starting pipeline...", err=True)
        click.echo(f"  Corpus: {corpus}", err=True)
        click.echo(f"  Output: {output_dir}", err=True)

    try:
        config = PipelineConfig(
            output_dir=Path(output_dir),
            deny_list_path=Path(deny_list) if deny_list else None,
            config_path=Path(config_path) if config_path else None,
            author_id=author_id,
            period_a=period_a,
            period_b=period_b,
            single_period=single_period,
        )
        result = run_pipeline(corpus, config, command_argv=sys.argv)
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    if not result.success:
        click.secho(f"✗ Pipeline failed: {result.error_message}", fg="red", err=True)
        sys.exit(1)

    if verbose:
        for message in result.warnings:
            click.secho(f"Warning: {message}", fg="yellow", err=True)
        click.echo("\nOutputs:", err=True)
        for name, path in result.output_files.items():
            click.echo(f"  {name}: {path}", err=True)

    click.secho(
        f"✓ Classified {result.topics} topics from {result.clean_works} works "
        f"({result.excluded_works} excluded)",
        fg="green",
    )


if __name__ == "__main__":
    cli()
