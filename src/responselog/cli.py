import json
import logging
import sys
from typing import List, Optional, Tuple

import click
from rich.console import Console

from .core.aggregator import Aggregator, rank_rows, sort_rows
from .core.errors import ResponseLogError
from .core.ingestor import LogIngestor
from .core.report import build_table, rows_to_dicts, write_csv
from .core.urlpattern import extract
from .processors.pipeline import Pipeline, method_filter, status_class_filter
from .utils.config import Config
from .utils.constants import HTTP_STATUS_CLASSES, OUTPUT_FORMATS, SORT_KEYS
from .utils.logging_utils import log_duration, setup_logging

logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", type=click.Path(exists=True, dir_okay=False), help="Configuration file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: Optional[str]):
    """responselog - summarize HTTP response logs by URL pattern"""
    setup_logging(verbose)
    try:
        settings = Config(config)
        settings.validate()
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))
    ctx.obj = settings


def build_pipeline(methods: Tuple[str, ...], status_classes: Tuple[str, ...]) -> Pipeline:
    """Record filters requested on the command line"""
    pipeline = Pipeline()
    if methods:
        pipeline.add_step(method_filter(methods))
    if status_classes:
        pipeline.add_step(status_class_filter(status_classes))
    return pipeline


@cli.command()
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False, allow_dash=True))
@click.option(
    "--format", "-fmt", "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (default from config: csv)",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file")
@click.option("--sort", "-s", "sort_by", type=click.Choice(SORT_KEYS), help="Sort rows by column")
@click.option("--desc", is_flag=True, help="Sort in descending order")
@click.option("--top", type=click.IntRange(min=1), help="Keep the N groups with the highest total latency")
@click.option("--bottom", type=click.IntRange(min=1), help="Keep the N groups with the lowest total latency")
@click.option("--method", "-m", "methods", multiple=True, help="Only include this HTTP method")
@click.option(
    "--status-class",
    "status_classes",
    multiple=True,
    type=click.Choice(sorted(HTTP_STATUS_CLASSES)),
    help="Only include responses in this status class",
)
@click.pass_obj
def summarize(
    config: Config,
    files: Tuple[str, ...],
    output_format: Optional[str],
    output: Optional[str],
    sort_by: Optional[str],
    desc: bool,
    top: Optional[int],
    bottom: Optional[int],
    methods: Tuple[str, ...],
    status_classes: Tuple[str, ...],
):
    """Summarize response times per method and URL pattern.

    Reads FILES (logs.json when none are given, - for stdin) and writes
    one row per group with columns URL, Count, Sum and Avg.
    """
    if top is not None and bottom is not None:
        raise click.UsageError("--top and --bottom cannot be used together")

    output_format = output_format or config.get("output.format")

    try:
        with log_duration(logger, "Ingestion took {duration}"):
            result = LogIngestor(config=config).ingest(*files)
    except ResponseLogError as e:
        raise click.ClickException(str(e))

    records = build_pipeline(methods, status_classes).run(result.records)
    if len(records) != len(result.records):
        logger.info(f"Filters kept {len(records)} of {len(result.records)} records")

    aggregator = Aggregator(default_method=config.get("aggregation.default_method"))
    rows = aggregator.aggregate(records)
    rows = rank_rows(rows, top=top, bottom=bottom)
    if sort_by:
        rows = sort_rows(rows, sort_by, descending=desc)

    if output:
        try:
            with open(output, "w", newline="") as f:
                _write_rows(rows, output_format, f)
        except OSError as e:
            raise click.ClickException(f"could not write {output}: {e.strerror or e}")
        logger.info(f"Wrote {len(rows)} rows to {output}")
    else:
        _write_rows(rows, output_format, sys.stdout)


def _write_rows(rows, output_format: str, stream) -> None:
    if output_format == "json":
        json.dump(rows_to_dicts(rows), stream, indent=2)
        stream.write("\n")
    elif output_format == "table":
        Console(file=stream).print(build_table(rows))
    else:
        write_csv(rows, stream)
    stream.flush()


@cli.command()
@click.argument("paths", nargs=-1)
def normalize(paths: List[str]):
    """Print the URL pattern for each PATH (reads stdin when none given)"""
    if not paths:
        paths = [line.rstrip("\r\n") for line in sys.stdin]
    for path in paths:
        click.echo(extract(path))


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, show_default=True, type=int, help="Port")
@click.pass_obj
def serve(config: Config, host: str, port: int):
    """Run the demo web service with response logging enabled"""
    from .web.app import start

    start(host=host, port=port, config=config)


if __name__ == "__main__":
    cli()
