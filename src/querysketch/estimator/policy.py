"""
Size Projection Policy: turn a sketch into a SizeInfo.

Write size: the average per-partition selectivity (share of a partition kept
by the reservoir) times the number of source paths. The average is a plain
mean over partitions that held at least one row; empty partitions are left
out rather than counted as zero.

Read size: a fixed fraction of the source path count. Repartitioning by the
query's predicate key is assumed to prune harder (1/10) than coarse file
skipping (1/2).

Both quantities are in source-file units. See ``querysketch.models``.
"""

from __future__ import annotations

import logging
from fractions import Fraction

from querysketch.config import (
    DEFAULT_FILE_SKIPPING_READ_DIVISOR,
    DEFAULT_REPARTITION_READ_DIVISOR,
    Config,
)
from querysketch.exceptions import ConfigurationError, DegenerateSample
from querysketch.models import BasicReadSizeInfo, CandidateKind, SizeInfo
from querysketch.sampling.sketch import Sketch

logger = logging.getLogger(__name__)


def average_selectivity(sketch: Sketch) -> Fraction:
    """
    Unweighted mean selectivity over the non-empty partitions of ``sketch``.

    The mean is exact so that whole-number projections are not truncated
    one file short.

    Raises:
        DegenerateSample: If no partition produced any row.
    """
    selectivities = [
        Fraction(p.sample_size, p.count) for p in sketch.non_empty_partitions
    ]
    if not selectivities:
        raise DegenerateSample(
            f"No rows observed in any of {sketch.num_partitions} partition(s)",
            partitions=sketch.num_partitions,
        )
    return sum(selectivities) / len(selectivities)


class SizeProjectionPolicy:
    """Projects write and read sizes per candidate kind."""

    def __init__(
        self,
        repartition_read_divisor: int = DEFAULT_REPARTITION_READ_DIVISOR,
        file_skipping_read_divisor: int = DEFAULT_FILE_SKIPPING_READ_DIVISOR,
    ) -> None:
        for key, value in (
            ("repartition_read_divisor", repartition_read_divisor),
            ("file_skipping_read_divisor", file_skipping_read_divisor),
        ):
            if value < 1:
                raise ConfigurationError(
                    f"{key} must be at least 1, got {value}", config_key=key,
                )
        self.repartition_read_divisor = repartition_read_divisor
        self.file_skipping_read_divisor = file_skipping_read_divisor

    @classmethod
    def from_config(cls, config: Config) -> "SizeProjectionPolicy":
        return cls(
            repartition_read_divisor=config.repartition_read_divisor,
            file_skipping_read_divisor=config.file_skipping_read_divisor,
        )

    def read_divisor(self, kind: CandidateKind) -> int:
        if kind is CandidateKind.REPARTITIONING:
            return self.repartition_read_divisor
        if kind is CandidateKind.FILE_SKIPPING_INDEXING:
            return self.file_skipping_read_divisor
        raise ValueError(f"No read-size projection defined for {kind.value} candidates")

    def project(self, kind: CandidateKind, sketch: Sketch, source_count: int) -> SizeInfo:
        """
        Project the SizeInfo of a candidate of ``kind`` over ``source_count`` paths.

        Raises:
            DegenerateSample: If the sketch holds no observations.
            ValueError: If ``kind`` has no projection (caching).
        """
        divisor = self.read_divisor(kind)
        selectivity = average_selectivity(sketch)
        write_size = int(selectivity * source_count)
        read_size = source_count // divisor

        logger.debug(
            "Projected %s: selectivity=%.4f sources=%d write=%d read=%d",
            kind.value, float(selectivity), source_count, write_size, read_size,
        )
        return SizeInfo(
            write_size=write_size,
            read_size_info=BasicReadSizeInfo(bytes=read_size),
        )
