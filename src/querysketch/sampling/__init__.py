"""
Sampling engine: seeded RNG, reservoir sampler and partitioned sketches.
"""

from querysketch.sampling.collection import (
    InMemoryCollection,
    LazyCollection,
    PartitionedCollection,
    next_collection_id,
)
from querysketch.sampling.reservoir import reservoir_sample_and_count
from querysketch.sampling.rng import XorShiftRandom, byteswap32, hash_seed
from querysketch.sampling.sketch import (
    PartitionSample,
    Sketch,
    SketchBuilder,
    partition_seed,
    sketch,
)

__all__ = [
    "InMemoryCollection",
    "LazyCollection",
    "PartitionedCollection",
    "PartitionSample",
    "Sketch",
    "SketchBuilder",
    "XorShiftRandom",
    "byteswap32",
    "hash_seed",
    "next_collection_id",
    "partition_seed",
    "reservoir_sample_and_count",
    "sketch",
]
