"""
Source loading contract.

Locating and reading data belongs to the storage layer. The estimator only
needs to turn a ``SourceLoad`` descriptor (plus the reader settings the
engine resolved on the matching relation) into a partitioned collection.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, Sequence

from querysketch.exceptions import SourceLoadError
from querysketch.models import SourceLoad
from querysketch.plan.nodes import FileSourceRelation
from querysketch.sampling.collection import InMemoryCollection, PartitionedCollection

logger = logging.getLogger(__name__)


class SourceLoader(Protocol):
    """Turns a source descriptor into a partitioned row collection."""

    def load(
        self,
        source: SourceLoad,
        relation: FileSourceRelation | None = None,
    ) -> PartitionedCollection:
        """
        Load ``source`` for sampling.

        Args:
            source: The descriptor carried by the candidate.
            relation: The query plan relation backing the source; supplies
                reader options and the data schema.
        """
        ...


def resolve_reader_settings(
    source: SourceLoad,
    relation: FileSourceRelation | None,
) -> tuple[dict[str, str], dict[str, str] | None]:
    """
    Merge reader options and schema from the relation and the descriptor.

    Relation options come first, descriptor options override them. The
    relation's data schema wins over the descriptor's.
    """
    options: dict[str, str] = {}
    schema = source.data_schema
    if relation is not None:
        options.update(relation.options)
        if relation.data_schema is not None:
            schema = relation.data_schema
    options.update(source.options)
    return options, schema


class InMemorySourceLoader:
    """
    Loader over rows already held in memory, keyed by source path.

    Every path maps to a list of partitions. The loaded collection holds the
    partitions of all the descriptor's paths, in path order.

    Example:
        loader = InMemorySourceLoader({
            "s3://bucket/a.parquet": [[row1, row2], [row3]],
            "s3://bucket/b.parquet": [[row4]],
        })
    """

    def __init__(self, partitions_by_path: Mapping[str, Sequence[Sequence[Any]]]) -> None:
        self._partitions_by_path = {
            path: [list(p) for p in partitions]
            for path, partitions in partitions_by_path.items()
        }

    def load(
        self,
        source: SourceLoad,
        relation: FileSourceRelation | None = None,
    ) -> InMemoryCollection:
        partitions: list[list[Any]] = []
        for path in source.paths:
            if path not in self._partitions_by_path:
                raise SourceLoadError(f"Unknown source path: {path}", source=path)
            partitions.extend(self._partitions_by_path[path])

        collection = InMemoryCollection(partitions)
        logger.debug(
            "Loaded %d path(s) as %r", source.source_count, collection,
        )
        return collection
