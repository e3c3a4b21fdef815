"""
SamplingSizeEstimator - the optimizer-facing entry point.

The optimizer calls the estimator once per candidate it is considering:

    estimator = SamplingSizeEstimator(loader, sample_size=1000)

    # Pure: returns the estimate, leaves the candidate alone
    size_info = estimator.estimate(plan, candidate)

    # Convenience: returns the candidate with its SizeInfo replaced
    candidate = estimator.estimate_size(plan, candidate)

Repartitioning and file-skipping candidates are sized by sampling their
source. Caching candidates only have their sources located for now; no
SizeInfo is produced for them and the call never fails for that reason.
"""

from __future__ import annotations

import logging
import time

from querysketch.config import DEFAULT_SAMPLE_SIZE, Config
from querysketch.estimator.policy import SizeProjectionPolicy
from querysketch.exceptions import ConfigurationError
from querysketch.models import (
    Caching,
    Candidate,
    FileSkippingIndexing,
    Repartitioning,
    SizeInfo,
)
from querysketch.observability import EstimatorMetrics
from querysketch.plan.locator import locate_sources, require_file_relation
from querysketch.plan.nodes import LogicalPlan
from querysketch.sampling.sketch import Sketch, SketchBuilder
from querysketch.sources.base import SourceLoader

logger = logging.getLogger(__name__)


class SamplingSizeEstimator:
    """
    Estimates candidate sizes from per-partition reservoir samples.

    Args:
        loader: Storage-layer collaborator that loads source descriptors.
        sample_size: Reservoir size k drawn from every partition.
        policy: Projection policy (read-size divisors).
        max_workers: Bound on partitions sampled concurrently.
        metrics: Metrics collector; nothing is recorded when omitted.
    """

    def __init__(
        self,
        loader: SourceLoader,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        policy: SizeProjectionPolicy | None = None,
        max_workers: int | None = None,
        metrics: EstimatorMetrics | None = None,
    ) -> None:
        if sample_size < 0:
            raise ConfigurationError(
                f"sample_size must be non-negative, got {sample_size}",
                config_key="sample_size",
            )
        self.loader = loader
        self.sample_size = sample_size
        self.policy = policy or SizeProjectionPolicy()
        self.sketch_builder = SketchBuilder(max_workers=max_workers)
        self.metrics = metrics

    @classmethod
    def from_config(
        cls,
        loader: SourceLoader,
        config: Config,
        metrics: EstimatorMetrics | None = None,
    ) -> "SamplingSizeEstimator":
        if metrics is None and config.metrics_enabled:
            metrics = EstimatorMetrics()
        return cls(
            loader,
            sample_size=config.sample_size,
            policy=SizeProjectionPolicy.from_config(config),
            max_workers=config.max_workers,
            metrics=metrics,
        )

    def estimate(self, plan: LogicalPlan, candidate: Candidate) -> SizeInfo | None:
        """
        Estimate the size of ``candidate`` evaluated against ``plan``.

        Returns:
            The estimate, or None for candidate kinds that are not sized yet.

        Raises:
            StructuralMismatch: If ``plan`` does not fit the candidate.
            DegenerateSample: If the source produced no rows to sample.
            TypeError: If ``candidate`` is not a known candidate kind.
        """
        kind = getattr(candidate, "kind", None)
        label = kind.value if kind is not None else type(candidate).__name__
        started = time.perf_counter()
        try:
            if isinstance(candidate, (Repartitioning, FileSkippingIndexing)):
                size_info, sketched = self._estimate_source_layout(plan, candidate)
                if self.metrics is not None:
                    self.metrics.record_estimation(
                        label,
                        (time.perf_counter() - started) * 1000,
                        partitions=sketched.num_partitions,
                        rows_seen=sketched.total_count,
                        rows_sampled=sketched.sampled_rows,
                    )
                logger.info(
                    "Estimated %s candidate: write_size=%d read_size=%s",
                    label, size_info.write_size, size_info.read_size_info.to_dict(),
                )
                return size_info

            if isinstance(candidate, Caching):
                self._estimate_caching(plan, candidate)
                if self.metrics is not None:
                    self.metrics.record_skipped(label)
                return None

            raise TypeError(f"Unknown candidate type: {type(candidate).__name__}")
        except Exception as e:
            if self.metrics is not None:
                self.metrics.record_failure(label, type(e).__name__)
            raise

    def estimate_size(self, plan: LogicalPlan, candidate: Candidate) -> Candidate:
        """
        Return ``candidate`` with a freshly estimated SizeInfo.

        A previous SizeInfo is replaced, never merged. When no estimate is
        produced the candidate is returned unchanged.
        """
        size_info = self.estimate(plan, candidate)
        if size_info is None:
            return candidate
        return candidate.with_size_info(size_info)

    # ── Per-kind paths ────────────────────────────────────────────────

    def _estimate_source_layout(
        self,
        plan: LogicalPlan,
        candidate: Repartitioning | FileSkippingIndexing,
    ) -> tuple[SizeInfo, Sketch]:
        relation = require_file_relation(plan)
        collection = self.loader.load(candidate.source, relation)
        sketched = self.sketch_builder.sketch(collection, self.sample_size)
        size_info = self.policy.project(
            candidate.kind, sketched, candidate.source.source_count,
        )
        return size_info, sketched

    def _estimate_caching(self, plan: LogicalPlan, candidate: Caching) -> None:
        located = locate_sources(plan, candidate.plan)
        logger.debug(
            "Caching candidate reads %d source(s); cache sizing not implemented",
            len(located),
        )
