"""
Package-level exception hierarchy for querysketch.

All exceptions inherit from QuerySketchError, enabling:
- Catching all estimator errors with a single except clause
- Rich context fields for debugging (node path, config key, source, ...)
- Structured serialization via to_dict() for JSON error responses

Hierarchy:
    QuerySketchError
    ├── StructuralMismatch  – Plan node shape/backing does not fit the candidate
    ├── DegenerateSample    – Sampling produced no usable observations
    ├── ConfigurationError  – Invalid estimator configuration
    └── SourceLoadError     – A source descriptor could not be resolved

Errors raised by the storage layer while reading data (I/O, format) are
never wrapped: they reach the caller verbatim.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from querysketch.plan.path import NodePath


class QuerySketchError(Exception):
    """
    Base exception for all querysketch errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON error responses."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
        }


# ── Estimation Errors ────────────────────────────────────────────────────


class StructuralMismatch(QuerySketchError):
    """
    A plan node does not have the shape or backing the candidate expects.

    Raised when a repartitioning or file-skipping candidate is estimated
    against a node that is not a physical file-backed relation, or when the
    query plan and the candidate plan diverge during a lock-step walk.
    The optimizer should drop or re-derive the candidate.

    Attributes:
        path: Path to the offending node (if known).
        expected: Description of the expected node.
        actual: Description of the node actually found.
    """

    def __init__(
        self,
        message: str,
        path: "NodePath | None" = None,
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        if path is not None:
            message = f"{message} (at {path})"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["node_path"] = list(self.path.segments) if self.path else None
        result["expected"] = self.expected
        result["actual"] = self.actual
        return result


class DegenerateSample(QuerySketchError):
    """
    Sampling produced no usable observations.

    Typically every partition of the source was empty. Callers may fall
    back to a conservative default estimate.

    Attributes:
        partitions: Number of partitions that were sampled.
    """

    def __init__(self, message: str, partitions: int = 0) -> None:
        self.partitions = partitions
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["partitions"] = self.partitions
        return result


class ConfigurationError(QuerySketchError):
    """
    Error in estimator configuration.

    Attributes:
        config_key: The configuration key that caused the error (if known).
    """

    def __init__(self, message: str, config_key: str | None = None) -> None:
        self.config_key = config_key
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["config_key"] = self.config_key
        return result


# ── Source Errors ────────────────────────────────────────────────────────


class SourceLoadError(QuerySketchError):
    """
    A source descriptor could not be turned into a row collection.

    Raised for unknown paths or unsupported formats. Not raised for errors
    while actually reading data; those propagate unchanged.

    Attributes:
        source: The path or format that could not be resolved.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["source"] = self.source
        return result
