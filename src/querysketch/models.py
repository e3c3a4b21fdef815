"""
Data model shared by the estimator and its collaborators.

- SourceFile / SourceLoad: pydantic models describing a physical source
  dataset, as handed over by the catalog layer.
- ReadSizeInfo / SizeInfo: immutable estimate snapshots.
- Repartitioning / FileSkippingIndexing / Caching: the closed set of
  candidate kinds. Candidates are immutable; estimation produces a new
  candidate via ``with_size_info`` instead of mutating a shared object.

Units: ``SizeInfo.write_size`` is expressed in source-file units
(average sampled selectivity times the number of source paths), not bytes.
``BasicReadSizeInfo.bytes`` carries the same file-count unit despite its
name. Both are kept as-is so estimates stay comparable with the layer that
consumes them.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum, unique
from typing import TYPE_CHECKING, Any, Union

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from querysketch.plan.nodes import CandidatePlan


# =============================================================================
# Source descriptors
# =============================================================================


class SourceFile(BaseModel):
    """A single physical file or directory backing a source dataset."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Location of the file (local path or URI)")
    size: int | None = Field(default=None, ge=0, description="Size in bytes, if known")
    modification_time: int | None = Field(
        default=None, description="Last modification time, if known",
    )


class SourceLoad(BaseModel):
    """
    Description of a physical source load.

    Immutable. Created by the plan/catalog layer and only read here.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    format: str = Field(description="Format tag, e.g. 'parquet' or 'csv'")
    sources: tuple[SourceFile, ...] = Field(
        default=(), description="Ordered source files",
    )
    data_schema: dict[str, str] | None = Field(
        default=None,
        alias="schema",
        description="Column name -> type name, if known",
    )
    options: dict[str, str] = Field(
        default_factory=dict, description="Reader options",
    )

    @classmethod
    def from_paths(cls, format: str, paths: list[str] | tuple[str, ...], **kwargs: Any) -> "SourceLoad":
        """Build a descriptor from bare paths."""
        return cls(format=format, sources=tuple(SourceFile(path=p) for p in paths), **kwargs)

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(source.path for source in self.sources)

    @property
    def source_count(self) -> int:
        return len(self.sources)


# =============================================================================
# Size estimates
# =============================================================================


@dataclass(frozen=True)
class ReadSizeInfo:
    """Base of all read-cost shapes."""

    def to_dict(self) -> dict[str, Any]:
        return {"type": type(self).__name__}


@dataclass(frozen=True)
class BasicReadSizeInfo(ReadSizeInfo):
    """Read cost described by a single amount scanned."""

    bytes: int = 0

    def __post_init__(self) -> None:
        if self.bytes < 0:
            raise ValueError(f"read size must be non-negative, got {self.bytes}")

    def to_dict(self) -> dict[str, Any]:
        return {"type": type(self).__name__, "bytes": self.bytes}


@dataclass(frozen=True)
class SizeInfo:
    """
    Snapshot of an estimate taken at estimation time.

    Re-estimating a candidate replaces its SizeInfo wholesale.
    """

    write_size: int
    read_size_info: ReadSizeInfo

    def __post_init__(self) -> None:
        if self.write_size < 0:
            raise ValueError(f"write size must be non-negative, got {self.write_size}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "write_size": self.write_size,
            "read_size_info": self.read_size_info.to_dict(),
        }


# =============================================================================
# Candidates
# =============================================================================


@unique
class CandidateKind(str, Enum):
    """Closed set of layout transformations the estimator understands."""

    REPARTITIONING = "repartitioning"
    FILE_SKIPPING_INDEXING = "file_skipping_indexing"
    CACHING = "caching"


@dataclass(frozen=True)
class Repartitioning:
    """Rewrite a source dataset partitioned by ``partition_key``."""

    source: SourceLoad
    partition_key: str
    size_info: SizeInfo | None = None

    kind = CandidateKind.REPARTITIONING

    def with_size_info(self, size_info: SizeInfo | None) -> "Repartitioning":
        return dataclasses.replace(self, size_info=size_info)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "source": self.source.model_dump(by_alias=True),
            "partition_key": self.partition_key,
            "size_info": self.size_info.to_dict() if self.size_info else None,
        }


@dataclass(frozen=True)
class FileSkippingIndexing:
    """Build a file-skipping index over a source dataset on ``index_key``."""

    source: SourceLoad
    index_key: str
    size_info: SizeInfo | None = None

    kind = CandidateKind.FILE_SKIPPING_INDEXING

    def with_size_info(self, size_info: SizeInfo | None) -> "FileSkippingIndexing":
        return dataclasses.replace(self, size_info=size_info)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "source": self.source.model_dump(by_alias=True),
            "index_key": self.index_key,
            "size_info": self.size_info.to_dict() if self.size_info else None,
        }


@dataclass(frozen=True)
class Caching:
    """Cache the output of an arbitrary candidate sub-plan verbatim."""

    plan: "CandidatePlan"
    size_info: SizeInfo | None = None

    kind = CandidateKind.CACHING

    def with_size_info(self, size_info: SizeInfo | None) -> "Caching":
        return dataclasses.replace(self, size_info=size_info)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "plan": self.plan.structure_signature(),
            "size_info": self.size_info.to_dict() if self.size_info else None,
        }


Candidate = Union[Repartitioning, FileSkippingIndexing, Caching]
