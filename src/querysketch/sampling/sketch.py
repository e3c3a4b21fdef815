"""
Partitioned Sketch Builder.

Runs the reservoir sampler over every partition of a collection, each
partition on its own worker with its own generator, and aggregates the
per-partition ``(index, count, sample)`` results.

Seeds depend only on the collection id and the partition index, so workers
need no coordination and re-sampling the same collection yields the same
sketch regardless of scheduling.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from querysketch.sampling.collection import PartitionedCollection
from querysketch.sampling.reservoir import reservoir_sample_and_count
from querysketch.sampling.rng import byteswap32

logger = logging.getLogger(__name__)

# Keeps collection ids clear of the partition index bits before mixing
COLLECTION_ID_SHIFT = 16


def partition_seed(collection_id: int, partition_index: int) -> int:
    """Derive the sampling seed of one partition."""
    return byteswap32(partition_index ^ (collection_id << COLLECTION_ID_SHIFT))


@dataclass(frozen=True)
class PartitionSample:
    """Sampling result of a single partition."""

    index: int
    count: int
    sample: tuple[Any, ...]

    @property
    def sample_size(self) -> int:
        return len(self.sample)

    @property
    def selectivity(self) -> float | None:
        """Fraction of the partition kept in the sample; None when empty."""
        if self.count == 0:
            return None
        return len(self.sample) / self.count


@dataclass(frozen=True)
class Sketch:
    """Aggregated sampling result for one partitioned collection."""

    total_count: int
    partitions: tuple[PartitionSample, ...]

    @property
    def num_partitions(self) -> int:
        return len(self.partitions)

    @property
    def sampled_rows(self) -> int:
        return sum(p.sample_size for p in self.partitions)

    @property
    def non_empty_partitions(self) -> tuple[PartitionSample, ...]:
        return tuple(p for p in self.partitions if p.count > 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_count": self.total_count,
            "partitions": [
                {"index": p.index, "count": p.count, "sample_size": p.sample_size}
                for p in self.partitions
            ],
        }


class SketchBuilder:
    """
    Samples all partitions of a collection in parallel.

    Example:
        builder = SketchBuilder(max_workers=4)
        result = builder.sketch(collection, k=1000)
        result.total_count
    """

    def __init__(self, max_workers: int | None = None) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.max_workers = max_workers

    def sketch(self, collection: PartitionedCollection, k: int) -> Sketch:
        """
        Build the sketch of ``collection`` with reservoir size ``k``.

        Errors raised while reading a partition propagate unchanged.
        """
        if k < 0:
            raise ValueError(f"reservoir size must be non-negative, got {k}")

        started = time.perf_counter()
        collection_id = collection.id
        indices = range(collection.num_partitions)

        def sample_partition(index: int) -> PartitionSample:
            seed = partition_seed(collection_id, index)
            sample, count = reservoir_sample_and_count(
                collection.iter_partition(index), k, seed,
            )
            logger.debug(
                "Sampled partition %d of collection %d: count=%d kept=%d seed=%d",
                index, collection_id, count, len(sample), seed,
            )
            return PartitionSample(index=index, count=count, sample=tuple(sample))

        if len(indices) <= 1:
            results = [sample_partition(i) for i in indices]
        else:
            with ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="querysketch-sample",
            ) as executor:
                results = list(executor.map(sample_partition, indices))

        partitions = tuple(sorted(results, key=lambda p: p.index))
        result = Sketch(
            total_count=sum(p.count for p in partitions),
            partitions=partitions,
        )
        logger.debug(
            "Sketched collection %d: %d partitions, %d rows in %.2fms",
            collection_id, result.num_partitions, result.total_count,
            (time.perf_counter() - started) * 1000,
        )
        return result


def sketch(
    collection: PartitionedCollection,
    k: int,
    max_workers: int | None = None,
) -> Sketch:
    """Sketch ``collection`` with a one-off builder."""
    return SketchBuilder(max_workers=max_workers).sketch(collection, k)
