"""
querysketch CLI - sampling-based size estimates for layout candidates.

Usage:
    querysketch estimate source.json --kind repartitioning
    querysketch estimate source.json --kind file-skipping --json
    querysketch sketch source.json --sample-size 100

A source description is a JSON file:

    {
        "format": "csv",
        "paths": ["data/part-0.csv", "data/part-1.csv"],
        "options": {"header": "true"},
        "schema": {"id": "int", "city": "string"}
    }

Relative paths are resolved against the description file's directory.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, NoReturn, Optional

import polars as pl
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from querysketch import __version__
from querysketch.config import get_config
from querysketch.estimator import SamplingSizeEstimator, SizeProjectionPolicy
from querysketch.exceptions import QuerySketchError
from querysketch.models import (
    Candidate,
    FileSkippingIndexing,
    Repartitioning,
    SourceLoad,
)
from querysketch.observability import EstimatorMetrics
from querysketch.plan.nodes import FileSourceRelation, LogicalRelation
from querysketch.sampling.sketch import SketchBuilder
from querysketch.sources.polars_loader import PolarsSourceLoader


class CandidateChoice(str, Enum):
    """Candidate kinds that can be sized from the command line."""
    repartitioning = "repartitioning"
    file_skipping = "file-skipping"


app = typer.Typer(
    name="querysketch",
    help="Sampling-based size estimates for data-layout candidates",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"querysketch version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """querysketch - sampling-based size estimation."""
    pass


def load_source_description(path: Path) -> tuple[SourceLoad, FileSourceRelation]:
    """Read a JSON source description into a descriptor and its relation."""
    data: dict[str, Any] = json.loads(path.read_text())
    base_dir = path.parent
    paths = [
        str(p if Path(p).is_absolute() or "://" in p else base_dir / p)
        for p in data.get("paths", [])
    ]
    source = SourceLoad.from_paths(
        data["format"],
        paths,
        options=data.get("options", {}),
        data_schema=data.get("schema"),
    )
    relation = FileSourceRelation(
        name=path.stem,
        paths=tuple(paths),
        format=source.format,
        data_schema=source.data_schema,
        options=dict(source.options),
    )
    return source, relation


def _fail(message: str) -> NoReturn:
    error_console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def _read_description(source_file: Path) -> tuple[SourceLoad, FileSourceRelation]:
    try:
        return load_source_description(source_file)
    except (json.JSONDecodeError, KeyError, ValidationError) as e:
        _fail(f"Invalid source description {source_file}: {e}")


@app.command()
def estimate(
    source_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON source description",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    kind: Annotated[
        CandidateChoice,
        typer.Option("--kind", "-k", help="Candidate kind to size"),
    ] = CandidateChoice.repartitioning,
    key: Annotated[
        str,
        typer.Option("--key", help="Partition or index key of the candidate"),
    ] = "",
    sample_size: Annotated[
        Optional[int],
        typer.Option("--sample-size", "-n", min=0, help="Reservoir size per partition"),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", min=1, help="Partitions sampled concurrently"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output results as JSON"),
    ] = False,
) -> None:
    """Estimate write and read sizes of a candidate over a source."""
    config = get_config()
    source, relation = _read_description(source_file)

    candidate: Candidate
    if kind is CandidateChoice.repartitioning:
        candidate = Repartitioning(source=source, partition_key=key)
    else:
        candidate = FileSkippingIndexing(source=source, index_key=key)

    metrics = EstimatorMetrics()
    estimator = SamplingSizeEstimator(
        PolarsSourceLoader(),
        sample_size=sample_size if sample_size is not None else config.sample_size,
        policy=SizeProjectionPolicy.from_config(config),
        max_workers=workers if workers is not None else config.max_workers,
        metrics=metrics,
    )

    try:
        candidate = estimator.estimate_size(LogicalRelation(relation), candidate)
    except QuerySketchError as e:
        _fail(e.message)
    except (OSError, pl.exceptions.PolarsError) as e:
        _fail(str(e))

    size_info = candidate.size_info
    assert size_info is not None

    if json_output:
        payload = {
            "candidate": candidate.to_dict(),
            "sample_size": estimator.sample_size,
            "metrics": metrics.to_dict(),
        }
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    table = Table(title=f"{candidate.kind.value} estimate", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Source files", str(source.source_count))
    table.add_row("Rows seen", str(metrics.rows_seen))
    table.add_row("Rows sampled", str(metrics.rows_sampled))
    table.add_row("Write size", str(size_info.write_size))
    table.add_row("Read size", str(size_info.read_size_info.to_dict().get("bytes", "-")))
    console.print(table)


@app.command()
def sketch(
    source_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a JSON source description",
            exists=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    sample_size: Annotated[
        Optional[int],
        typer.Option("--sample-size", "-n", min=0, help="Reservoir size per partition"),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", min=1, help="Partitions sampled concurrently"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output results as JSON"),
    ] = False,
) -> None:
    """Show per-partition counts and sample sizes for a source."""
    config = get_config()
    source, relation = _read_description(source_file)
    k = sample_size if sample_size is not None else config.sample_size

    builder = SketchBuilder(
        max_workers=workers if workers is not None else config.max_workers,
    )
    try:
        result = builder.sketch(PolarsSourceLoader().load(source, relation), k)
    except QuerySketchError as e:
        _fail(e.message)
    except (OSError, pl.exceptions.PolarsError) as e:
        _fail(str(e))

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    table = Table(title=f"Sketch (k={k})", show_header=True)
    table.add_column("Partition", justify="right")
    table.add_column("Path", style="cyan")
    table.add_column("Rows", justify="right")
    table.add_column("Sampled", justify="right")
    table.add_column("Selectivity", justify="right")
    for p in result.partitions:
        selectivity = p.selectivity
        table.add_row(
            str(p.index),
            source.paths[p.index],
            str(p.count),
            str(p.sample_size),
            f"{selectivity:.4f}" if selectivity is not None else "-",
        )
    console.print(table)
    console.print(f"Total rows: [bold]{result.total_count}[/bold]")


if __name__ == "__main__":
    app()
