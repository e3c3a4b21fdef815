"""
Tests for the lock-step Source Locator and plan trees.
"""

from __future__ import annotations

import pytest

from querysketch.exceptions import StructuralMismatch
from querysketch.models import Caching, SourceLoad
from querysketch.plan import (
    BaseRelation,
    CandidateOperator,
    FileSourceRelation,
    LogicalOperator,
    LogicalRelation,
    NodePath,
    SourceLoadNode,
    locate_sources,
    require_file_relation,
    zip_plans,
)


# =============================================================================
# Fixtures
# =============================================================================

ORDERS = SourceLoad.from_paths("parquet", ["s3://lake/orders/p0.parquet", "s3://lake/orders/p1.parquet"])
USERS = SourceLoad.from_paths("csv", ["s3://lake/users.csv"])


def relation_for(source: SourceLoad) -> LogicalRelation:
    return LogicalRelation(FileSourceRelation(paths=source.paths, format=source.format))


@pytest.fixture
def join_plan() -> LogicalOperator:
    """Join(Filter(orders), users)."""
    return LogicalOperator(
        "Join",
        (
            LogicalOperator("Filter", (relation_for(ORDERS),)),
            relation_for(USERS),
        ),
    )


@pytest.fixture
def join_candidate() -> CandidateOperator:
    return CandidateOperator(
        "Join",
        (
            CandidateOperator("Filter", (SourceLoadNode(ORDERS),)),
            SourceLoadNode(USERS),
        ),
    )


# =============================================================================
# Locating sources
# =============================================================================


class TestLocateSources:

    def test_finds_nested_sources_in_order(self, join_plan, join_candidate) -> None:
        located = locate_sources(join_plan, join_candidate)

        assert [loc.source for loc in located] == [ORDERS, USERS]
        assert located[0].path == NodePath.root().child(0).child(0)
        assert located[1].path == NodePath.root().child(1)
        assert located[0].relation.paths == ORDERS.paths

    def test_source_load_at_root(self) -> None:
        located = locate_sources(relation_for(USERS), SourceLoadNode(USERS))
        assert len(located) == 1
        assert located[0].path == NodePath.root()

    def test_no_sources(self) -> None:
        plan = LogicalOperator("Values")
        assert locate_sources(plan, CandidateOperator("Values")) == []


class TestStructuralMismatch:

    def test_child_count_divergence(self, join_plan) -> None:
        candidate = CandidateOperator("Join", (SourceLoadNode(USERS),))
        with pytest.raises(StructuralMismatch) as exc_info:
            locate_sources(join_plan, candidate)

        err = exc_info.value
        assert err.path == NodePath.root()
        assert err.expected == "1 children"
        assert err.actual == "2 children"

    def test_source_load_over_operator(self, join_plan) -> None:
        candidate = CandidateOperator(
            "Join",
            (SourceLoadNode(ORDERS), SourceLoadNode(USERS)),
        )
        with pytest.raises(StructuralMismatch) as exc_info:
            locate_sources(join_plan, candidate)
        assert exc_info.value.path == NodePath.root().child(0)
        assert exc_info.value.actual == "Filter"

    def test_source_load_over_unrecognized_relation(self) -> None:
        plan = LogicalRelation(BaseRelation(name="jdbc"))
        with pytest.raises(StructuralMismatch) as exc_info:
            locate_sources(plan, SourceLoadNode(USERS))
        assert exc_info.value.expected == "FileSourceRelation"

    def test_error_serializes_path(self, join_plan) -> None:
        candidate = CandidateOperator("Join", ())
        with pytest.raises(StructuralMismatch) as exc_info:
            locate_sources(join_plan, candidate)
        data = exc_info.value.to_dict()
        assert data["error_type"] == "StructuralMismatch"
        assert data["node_path"] == ["Plan"]


class TestPlanHelpers:

    def test_require_file_relation(self) -> None:
        relation = require_file_relation(relation_for(ORDERS))
        assert relation.format == "parquet"

    def test_require_file_relation_rejects_operator(self) -> None:
        with pytest.raises(StructuralMismatch):
            require_file_relation(LogicalOperator("Project", (relation_for(ORDERS),)))

    def test_zip_plans_pairs_nodes(self, join_plan, join_candidate) -> None:
        pairs = list(zip_plans(join_plan, join_candidate))
        assert [str(path) for path, _, _ in pairs] == [
            "Plan",
            "Plan → children[0]",
            "Plan → children[0] → children[0]",
            "Plan → children[1]",
        ]

    def test_caching_candidate_dict_shows_plan_shape(self, join_candidate) -> None:
        assert Caching(join_candidate).to_dict() == {
            "kind": "caching",
            "plan": "Join[Filter[SourceLoad(parquet:2)[]],SourceLoad(csv:1)[]]",
            "size_info": None,
        }
