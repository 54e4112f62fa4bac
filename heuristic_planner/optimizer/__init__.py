"""Query optimizer."""

from .estimator import Estimator
from .heuristic import (
    HeuristicOptimizer,
    OptimizerState,
    SubtreeCandidate,
    relation_contains_predicate,
)

__all__ = [
    "Estimator",
    "HeuristicOptimizer",
    "OptimizerState",
    "SubtreeCandidate",
    "relation_contains_predicate",
]
