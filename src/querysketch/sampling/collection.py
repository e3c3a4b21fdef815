"""
Partitioned row collections.

The storage layer hands the estimator a collection that can be iterated one
partition at a time, in parallel, without ever materializing the whole
dataset in one place. ``PartitionedCollection`` is that contract.

Every collection carries a stable integer ``id``. Together with the
partition index it seeds the per-partition sampler, so repeated sampling of
the same collection instance is reproducible.
"""

from __future__ import annotations

import itertools
import threading
from typing import Any, Callable, Iterable, Iterator, Protocol, Sequence

_id_lock = threading.Lock()
_id_counter = itertools.count()


def next_collection_id() -> int:
    """Allocate a process-wide, monotonically increasing collection id."""
    with _id_lock:
        return next(_id_counter)


class PartitionedCollection(Protocol):
    """A row collection split into independently iterable partitions."""

    @property
    def id(self) -> int: ...

    @property
    def num_partitions(self) -> int: ...

    def iter_partition(self, index: int) -> Iterator[Any]:
        """Iterate the rows of one partition. Safe to call from any thread."""
        ...


class InMemoryCollection:
    """
    Collection over already materialized partitions.

    Example:
        collection = InMemoryCollection([[1, 2, 3], [], [4, 5]])
        collection.num_partitions   # 3
    """

    def __init__(
        self,
        partitions: Sequence[Iterable[Any]],
        collection_id: int | None = None,
    ) -> None:
        self._partitions = [list(p) for p in partitions]
        self._id = collection_id if collection_id is not None else next_collection_id()

    @property
    def id(self) -> int:
        return self._id

    @property
    def num_partitions(self) -> int:
        return len(self._partitions)

    def iter_partition(self, index: int) -> Iterator[Any]:
        return iter(self._partitions[index])

    def __repr__(self) -> str:
        return f"InMemoryCollection(id={self._id}, partitions={self.num_partitions})"


class LazyCollection:
    """
    Collection whose partitions are produced on demand.

    Each partition is described by a zero-argument callable returning an
    iterable of rows. The callable runs inside the worker that samples the
    partition, so nothing is read until sampling starts.
    """

    def __init__(
        self,
        partition_readers: Sequence[Callable[[], Iterable[Any]]],
        collection_id: int | None = None,
    ) -> None:
        self._readers = list(partition_readers)
        self._id = collection_id if collection_id is not None else next_collection_id()

    @property
    def id(self) -> int:
        return self._id

    @property
    def num_partitions(self) -> int:
        return len(self._readers)

    def iter_partition(self, index: int) -> Iterator[Any]:
        return iter(self._readers[index]())

    def __repr__(self) -> str:
        return f"LazyCollection(id={self._id}, partitions={self.num_partitions})"
