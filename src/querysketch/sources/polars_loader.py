"""
Polars-backed source loader.

Each source path becomes one partition. Files are scanned lazily: a
partition's file is only read when the worker sampling it starts iterating,
and then in batches of ``batch_size`` rows so that a worker never holds more
than one batch of its file.

CSV options follow the Spark reader: ``header`` is off unless set to
``"true"``, and ``sep`` (or ``delimiter``) defaults to a comma.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator

import polars as pl

from querysketch.exceptions import SourceLoadError
from querysketch.models import SourceLoad
from querysketch.plan.nodes import FileSourceRelation
from querysketch.sampling.collection import LazyCollection
from querysketch.sources.base import resolve_reader_settings

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50_000

_TRUE_VALUES = ("true", "1", "yes", "on")


def _scan_csv(path: str, options: dict[str, str]) -> pl.LazyFrame:
    separator = options.get("sep", options.get("delimiter", ","))
    has_header = options.get("header", "false").lower() in _TRUE_VALUES
    return pl.scan_csv(path, separator=separator, has_header=has_header)


def _scan_parquet(path: str, options: dict[str, str]) -> pl.LazyFrame:
    return pl.scan_parquet(path)


def _scan_ndjson(path: str, options: dict[str, str]) -> pl.LazyFrame:
    return pl.scan_ndjson(path)


def _scan_ipc(path: str, options: dict[str, str]) -> pl.LazyFrame:
    return pl.scan_ipc(path)


SCANNERS: dict[str, Callable[[str, dict[str, str]], pl.LazyFrame]] = {
    "csv": _scan_csv,
    "parquet": _scan_parquet,
    "json": _scan_ndjson,
    "ndjson": _scan_ndjson,
    "ipc": _scan_ipc,
    "arrow": _scan_ipc,
    "feather": _scan_ipc,
}


class PolarsSourceLoader:
    """
    Loads file sources with polars, one partition per path.

    Rows are yielded as ``dict`` (column name -> value). When a data schema
    is known, only its columns are read.

    Args:
        batch_size: Rows materialized at a time while a partition is read.
    """

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.batch_size = batch_size

    def load(
        self,
        source: SourceLoad,
        relation: FileSourceRelation | None = None,
    ) -> LazyCollection:
        fmt = source.format.lower()
        scanner = SCANNERS.get(fmt)
        if scanner is None:
            raise SourceLoadError(
                f"Unsupported source format '{source.format}'. "
                f"Supported: {', '.join(sorted(SCANNERS))}",
                source=source.format,
            )

        options, schema = resolve_reader_settings(source, relation)
        columns = list(schema) if schema else None
        batch_size = self.batch_size

        def reader(path: str) -> Callable[[], Iterator[dict[str, Any]]]:
            def read() -> Iterator[dict[str, Any]]:
                frame = scanner(path, options)
                if columns:
                    frame = frame.select(columns)
                for batch in frame.collect_batches(chunk_size=batch_size):
                    yield from batch.iter_rows(named=True)
            return read

        collection = LazyCollection([reader(path) for path in source.paths])
        logger.debug(
            "Prepared %s source with %d path(s) as %r", fmt, source.source_count, collection,
        )
        return collection
