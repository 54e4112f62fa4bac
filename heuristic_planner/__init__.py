"""Cardinality estimation and heuristic rewriting of relational query plans."""

from .catalog import Catalog, CatalogError, Attribute, Relation, NamedRelation
from .plan import (
    Scan,
    Project,
    Select,
    Product,
    Join,
    Predicate,
    AttributeRef,
    CanonicalPlanBuilder,
)
from .optimizer import Estimator, HeuristicOptimizer

__version__ = "0.1.0"

__all__ = [
    "Catalog",
    "CatalogError",
    "Attribute",
    "Relation",
    "NamedRelation",
    "Scan",
    "Project",
    "Select",
    "Product",
    "Join",
    "Predicate",
    "AttributeRef",
    "CanonicalPlanBuilder",
    "Estimator",
    "HeuristicOptimizer",
]
