"""
Plan trees and the lock-step Source Locator.
"""

from querysketch.plan.locator import (
    LocatedSource,
    locate_sources,
    require_file_relation,
    zip_plans,
)
from querysketch.plan.nodes import (
    BaseRelation,
    CandidateOperator,
    CandidatePlan,
    FileSourceRelation,
    LogicalOperator,
    LogicalPlan,
    LogicalRelation,
    SourceLoadNode,
)
from querysketch.plan.path import NodePath

__all__ = [
    "BaseRelation",
    "CandidateOperator",
    "CandidatePlan",
    "FileSourceRelation",
    "LocatedSource",
    "LogicalOperator",
    "LogicalPlan",
    "LogicalRelation",
    "NodePath",
    "SourceLoadNode",
    "locate_sources",
    "require_file_relation",
    "zip_plans",
]
