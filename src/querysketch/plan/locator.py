"""
Source Locator: find physical source loads behind a candidate plan.

The candidate plan is a transformed mirror of the query plan, so the two
trees are walked in lock-step. ``zip_plans`` makes the shape assumption
explicit and fails with StructuralMismatch the moment the trees diverge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from querysketch.exceptions import StructuralMismatch
from querysketch.models import SourceLoad
from querysketch.plan.nodes import (
    CandidatePlan,
    FileSourceRelation,
    LogicalPlan,
    LogicalRelation,
    SourceLoadNode,
)
from querysketch.plan.path import NodePath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocatedSource:
    """A source load paired with the query plan relation that backs it."""

    source: SourceLoad
    relation: FileSourceRelation
    path: NodePath


def require_file_relation(plan: LogicalPlan, path: NodePath | None = None) -> FileSourceRelation:
    """
    Return the file-backed relation read by ``plan``.

    Raises:
        StructuralMismatch: If ``plan`` is not a LogicalRelation over a
            FileSourceRelation.
    """
    if not isinstance(plan, LogicalRelation):
        raise StructuralMismatch(
            "Expected a physical relation load",
            path=path,
            expected="LogicalRelation",
            actual=_describe(plan),
        )
    if not isinstance(plan.relation, FileSourceRelation):
        raise StructuralMismatch(
            "Relation is not backed by a recognized file store",
            path=path,
            expected="FileSourceRelation",
            actual=plan.relation.describe(),
        )
    return plan.relation


def zip_plans(
    plan: LogicalPlan,
    candidate_plan: CandidatePlan,
    path: NodePath | None = None,
) -> Iterator[tuple[NodePath, LogicalPlan, CandidatePlan]]:
    """
    Walk both trees together, yielding ``(path, node, candidate_node)``.

    Children of a SourceLoadNode are not visited: the load is a leaf on the
    candidate side regardless of what the query plan holds below it.

    Raises:
        StructuralMismatch: If two paired nodes have different child counts.
    """
    current = path or NodePath.root()
    yield current, plan, candidate_plan

    if isinstance(candidate_plan, SourceLoadNode):
        return

    if len(plan.children) != len(candidate_plan.children):
        raise StructuralMismatch(
            "Query plan and candidate plan disagree in shape",
            path=current,
            expected=f"{len(candidate_plan.children)} children",
            actual=f"{len(plan.children)} children",
        )

    for i, (child, candidate_child) in enumerate(zip(plan.children, candidate_plan.children)):
        yield from zip_plans(child, candidate_child, current.child(i))


def locate_sources(plan: LogicalPlan, candidate_plan: CandidatePlan) -> list[LocatedSource]:
    """
    Find every source load reachable from ``candidate_plan``.

    Returns:
        Located sources in depth-first order.

    Raises:
        StructuralMismatch: If the trees diverge in shape, or a source load's
            counterpart is not a file-backed relation load.
    """
    located: list[LocatedSource] = []
    for path, node, candidate_node in zip_plans(plan, candidate_plan):
        if isinstance(candidate_node, SourceLoadNode):
            relation = require_file_relation(node, path)
            located.append(LocatedSource(candidate_node.source, relation, path))

    logger.debug("Located %d source load(s) under %s", len(located), candidate_plan.node_name)
    return located


def _describe(plan: object) -> str:
    node_name = getattr(plan, "node_name", None)
    return node_name if isinstance(node_name, str) else type(plan).__name__
