"""Logical plan representation."""

from .logical import (
    LogicalPlanNode,
    LogicalPlanVisitor,
    Scan,
    Project,
    Select,
    Product,
    Join,
    walk,
    walk_post_order,
    contains_node_type,
    scan_names,
)
from .predicates import AttributeRef, Predicate, PredicateKind
from .builder import CanonicalPlanBuilder
from .explain import ExplainFormat, PlanFormatter, explain_plan

__all__ = [
    # Logical nodes
    "LogicalPlanNode",
    "LogicalPlanVisitor",
    "Scan",
    "Project",
    "Select",
    "Product",
    "Join",
    "walk",
    "walk_post_order",
    "contains_node_type",
    "scan_names",
    # Predicates
    "AttributeRef",
    "Predicate",
    "PredicateKind",
    # Construction and display
    "CanonicalPlanBuilder",
    "ExplainFormat",
    "PlanFormatter",
    "explain_plan",
]
