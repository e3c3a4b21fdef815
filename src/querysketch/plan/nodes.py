"""
Plan trees consumed by the estimator.

Two parallel trees are involved in estimating a candidate:

- The query plan (``LogicalPlan``): what the engine would run. Leaves that
  read data are ``LogicalRelation`` nodes wrapping a relation; relations
  over files in a recognized backing store are ``FileSourceRelation``.
- The candidate plan (``CandidatePlan``): a transformed mirror of the query
  plan, in which physical reads are marked by ``SourceLoadNode``.

The query engine owns the real plan representation. These classes are the
minimal structural surface the estimator needs: node identity, children and
the source-load markers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from querysketch.models import SourceLoad


# =============================================================================
# Relations
# =============================================================================


@dataclass(frozen=True)
class BaseRelation:
    """A relation the engine can read from."""

    name: str = ""

    def describe(self) -> str:
        return f"{type(self).__name__}({self.name})" if self.name else type(self).__name__


@dataclass(frozen=True)
class FileSourceRelation(BaseRelation):
    """
    A relation backed by files in a recognized store.

    Carries the reader configuration the engine resolved for the relation.
    """

    paths: tuple[str, ...] = ()
    format: str = "parquet"
    data_schema: dict[str, str] | None = field(default=None, hash=False)
    options: dict[str, str] = field(default_factory=dict, hash=False)


# =============================================================================
# Query plan
# =============================================================================


class LogicalPlan:
    """Base of query plan nodes."""

    children: tuple["LogicalPlan", ...]

    @property
    def node_name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class LogicalOperator(LogicalPlan):
    """Any non-leaf query operator (filter, project, join, ...)."""

    name: str
    children: tuple[LogicalPlan, ...] = ()

    @property
    def node_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class LogicalRelation(LogicalPlan):
    """Leaf that reads a relation."""

    relation: BaseRelation
    children: tuple[LogicalPlan, ...] = field(default=(), init=False)

    @property
    def node_name(self) -> str:
        return f"LogicalRelation({self.relation.describe()})"


# =============================================================================
# Candidate plan
# =============================================================================


class CandidatePlan:
    """Base of candidate plan nodes."""

    children: tuple["CandidatePlan", ...]

    @property
    def node_name(self) -> str:
        return type(self).__name__

    def structure_signature(self) -> str:
        child_sigs = [c.structure_signature() for c in self.children]
        return f"{self.node_name}[{','.join(child_sigs)}]"


@dataclass(frozen=True)
class CandidateOperator(CandidatePlan):
    """Non-leaf node of a candidate plan."""

    name: str
    children: tuple[CandidatePlan, ...] = ()

    @property
    def node_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class SourceLoadNode(CandidatePlan):
    """Marks a physical read of a source dataset."""

    source: SourceLoad
    children: tuple[CandidatePlan, ...] = field(default=(), init=False)

    @property
    def node_name(self) -> str:
        return f"SourceLoad({self.source.format}:{self.source.source_count})"
