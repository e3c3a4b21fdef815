"""
Metrics for the size estimator.

One instrumentation layer, pluggable backends:
- EstimatorMetrics keeps simple in-memory counters (CLI and tests)
- An optional MetricsExporter forwards the same events to a monitoring system

Usage:
    metrics = EstimatorMetrics()
    estimator = SamplingSizeEstimator(loader, metrics=metrics)
    ...
    metrics.to_dict()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class MetricsExporter(Protocol):
    """Protocol for metrics exporters."""

    def record_counter(self, name: str, value: int, labels: dict[str, str]) -> None:
        """Record a counter metric."""
        ...

    def record_histogram(self, name: str, value: float, labels: dict[str, str]) -> None:
        """Record a histogram metric."""
        ...


@dataclass
class EstimatorMetrics:
    """
    Counters and duration history for estimation calls.

    Durations keep only the most recent ``_max_samples`` values.
    """

    estimations_total: int = 0
    failures_total: int = 0
    skipped_total: int = 0
    partitions_sampled: int = 0
    rows_seen: int = 0
    rows_sampled: int = 0

    estimation_durations_ms: list[float] = field(default_factory=list)

    _max_samples: int = 1000
    _exporter: "MetricsExporter | None" = field(default=None, repr=False)

    def record_estimation(
        self,
        kind: str,
        duration_ms: float,
        partitions: int = 0,
        rows_seen: int = 0,
        rows_sampled: int = 0,
    ) -> None:
        """Record a completed estimation that produced a SizeInfo."""
        self.estimations_total += 1
        self.partitions_sampled += partitions
        self.rows_seen += rows_seen
        self.rows_sampled += rows_sampled
        self._record_duration(duration_ms)

        if self._exporter is not None:
            labels = {"kind": kind}
            self._exporter.record_counter("estimations_total", 1, labels)
            self._exporter.record_histogram("estimation_duration_ms", duration_ms, labels)
            self._exporter.record_counter("rows_sampled_total", rows_sampled, labels)

    def record_skipped(self, kind: str) -> None:
        """Record an estimation that intentionally produced no SizeInfo."""
        self.skipped_total += 1
        if self._exporter is not None:
            self._exporter.record_counter("estimations_skipped_total", 1, {"kind": kind})

    def record_failure(self, kind: str, error_type: str) -> None:
        """Record an estimation that raised."""
        self.failures_total += 1
        if self._exporter is not None:
            self._exporter.record_counter(
                "estimation_failures_total", 1, {"kind": kind, "error_type": error_type},
            )

    def _record_duration(self, duration_ms: float) -> None:
        self.estimation_durations_ms.append(duration_ms)
        if len(self.estimation_durations_ms) > self._max_samples:
            self.estimation_durations_ms = self.estimation_durations_ms[-self._max_samples:]

    @property
    def avg_duration_ms(self) -> float:
        if not self.estimation_durations_ms:
            return 0.0
        return sum(self.estimation_durations_ms) / len(self.estimation_durations_ms)

    @property
    def p95_duration_ms(self) -> float:
        if not self.estimation_durations_ms:
            return 0.0
        sorted_durations = sorted(self.estimation_durations_ms)
        idx = int(len(sorted_durations) * 0.95)
        return sorted_durations[min(idx, len(sorted_durations) - 1)]

    def to_dict(self) -> dict[str, Any]:
        """Export metrics as dictionary for JSON/monitoring."""
        return {
            "estimations_total": self.estimations_total,
            "failures_total": self.failures_total,
            "skipped_total": self.skipped_total,
            "partitions_sampled": self.partitions_sampled,
            "rows_seen": self.rows_seen,
            "rows_sampled": self.rows_sampled,
            "avg_duration_ms": self.avg_duration_ms,
            "p95_duration_ms": self.p95_duration_ms,
        }


class LoggingMetricsExporter:
    """Exporter that logs metrics. Useful for development and debugging."""

    def __init__(self, logger_name: str = "querysketch.metrics") -> None:
        self._logger = logging.getLogger(logger_name)

    def record_counter(self, name: str, value: int, labels: dict[str, str]) -> None:
        self._logger.info("COUNTER %s += %d %s", name, value, labels)

    def record_histogram(self, name: str, value: float, labels: dict[str, str]) -> None:
        self._logger.info("HISTOGRAM %s = %.2f %s", name, value, labels)


class InMemoryMetricsExporter:
    """Exporter that stores everything it receives (tests)."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.histograms: dict[str, list[float]] = {}

    def record_counter(self, name: str, value: int, labels: dict[str, str]) -> None:
        self.counters[name] = self.counters.get(name, 0) + value

    def record_histogram(self, name: str, value: float, labels: dict[str, str]) -> None:
        self.histograms.setdefault(name, []).append(value)
