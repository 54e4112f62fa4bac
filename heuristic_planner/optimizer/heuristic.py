"""Heuristic rewriting of canonical logical plans."""

import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..catalog.catalog import Catalog
from ..catalog.statistics import NamedRelation, Relation
from ..config.config import OptimizerConfig
from ..plan.explain import PlanFormatter
from ..plan.logical import (
    LogicalPlanNode,
    LogicalPlanVisitor,
    Scan,
    Project,
    Select,
    Product,
    Join,
    walk_post_order,
)
from ..plan.predicates import Predicate
from ..utils.logging import get_contextual_logger
from .estimator import Estimator


@dataclass
class SubtreeCandidate:
    """One relation's pushed-down subtree and its estimated cost."""

    subtree: LogicalPlanNode
    cost: int


@dataclass
class OptimizerState:
    """Working state of a single optimize call.

    Predicates and attribute names are kept in dicts used as
    insertion-ordered sets so the rewritten plan is reproducible.
    """

    relations: List[NamedRelation] = field(default_factory=list)
    pending_predicates: Dict[Predicate, None] = field(default_factory=dict)
    pending_attributes: Dict[str, None] = field(default_factory=dict)
    final_attributes: List[str] = field(default_factory=list)

    def consume(self, predicate: Predicate) -> None:
        """Mark a predicate as placed in the plan."""
        del self.pending_predicates[predicate]
        for ref in predicate.attributes():
            self.pending_attributes.pop(ref.name, None)

    def keep_attributes(self, relation: Relation) -> List[str]:
        """Attributes of relation still needed above it, in relation order."""
        kept = []
        for name in relation.attribute_names():
            if name in self.final_attributes or name in self.pending_attributes:
                kept.append(name)
        return kept


class _PlanCollector(LogicalPlanVisitor):
    """Gathers base relations, predicates and predicate attributes."""

    def __init__(self, state: OptimizerState):
        self.state = state
        self._seen = set()

    def visit_scan(self, node: Scan) -> None:
        if id(node.relation) in self._seen:
            return
        self._seen.add(id(node.relation))
        self.state.relations.append(node.relation)

    def visit_select(self, node: Select) -> None:
        self.state.pending_predicates[node.predicate] = None
        for ref in node.predicate.attributes():
            self.state.pending_attributes[ref.name] = None

    def visit_project(self, node: Project) -> None:
        pass

    def visit_product(self, node: Product) -> None:
        pass

    def visit_join(self, node: Join) -> None:
        pass


def relation_contains_predicate(relation: Relation, predicate: Predicate) -> bool:
    """Return True when every attribute the predicate needs is in relation."""
    return relation.contains(*predicate.attributes())


class HeuristicOptimizer:
    """Rewrites a canonical plan into a cheaper, equivalent plan.

    The rewrite runs five passes in order:

    1. Collect base relations, predicates and required attributes.
    2. Push selections and projections onto each relation's scan.
    3. Order the per-relation subtrees by ascending estimated cost.
    4. Connect them into a left-deep product tree.
    5. Turn products into joins where an attribute equality connects them,
       adding selections and projections on the way up.

    All per-call state lives in an OptimizerState, so one instance can be
    shared between threads.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        config: Optional[OptimizerConfig] = None,
    ):
        """Initialize optimizer.

        Args:
            catalog: Catalog the plan's scans were resolved against
            config: Optimizer configuration
        """
        self.catalog = catalog
        self.config = config or OptimizerConfig()

    def optimize(self, plan: LogicalPlanNode) -> LogicalPlanNode:
        """Optimize a canonical logical plan.

        Args:
            plan: Canonical plan (left-deep products, selections and a
                projection on top)

        Returns:
            Rewritten plan
        """
        log = get_contextual_logger(__name__, {"call_id": uuid.uuid4().hex[:8]})
        state = OptimizerState()

        self._collect(plan, state)
        log.debug(
            f"Collected {len(state.relations)} relations, "
            f"{len(state.pending_predicates)} predicates, "
            f"final attributes {state.final_attributes}"
        )
        self._warn_unregistered(state, log)

        candidates = self._push_to_scans(state)
        log.debug(f"Built {len(candidates)} relation subtrees")
        for candidate in candidates:
            self._trace(log, "scan subtree", candidate.subtree)

        if not candidates:
            log.warning("No relation contributes to the result, plan left unchanged")
            return plan

        if len(candidates) == 1:
            result = candidates[0].subtree
        else:
            ordered = self._reorder(candidates)
            log.debug(f"Relation order by cost: {[c.cost for c in ordered]}")

            product = self._connect(ordered)
            Estimator().estimate(product)
            self._trace(log, "connected products", product)

            result = self._introduce_joins(product, state)

        if state.pending_predicates:
            log.warning(
                f"Predicates not placed: {[str(p) for p in state.pending_predicates]}"
            )
        self._finish(result, log)
        return result

    optimise = optimize

    def _collect(self, plan: LogicalPlanNode, state: OptimizerState) -> None:
        """Pass 1: gather relations, predicates and final attributes."""
        if plan.output is None:
            Estimator().estimate(plan)
        state.final_attributes.extend(plan.output.attribute_names())

        collector = _PlanCollector(state)
        for node in walk_post_order(plan):
            node.accept(collector)

    def _push_to_scans(self, state: OptimizerState) -> List[SubtreeCandidate]:
        """Pass 2: build one selected, projected subtree per relation."""
        candidates: List[SubtreeCandidate] = []
        for relation in state.relations:
            subtree: LogicalPlanNode = Scan(relation)

            for predicate in list(state.pending_predicates):
                if relation_contains_predicate(relation, predicate):
                    subtree = Select(subtree, predicate)
                    state.consume(predicate)

            kept = state.keep_attributes(relation)
            if not kept:
                continue
            if len(kept) < len(relation):
                subtree = Project(subtree, kept)

            estimator = Estimator()
            estimator.estimate(subtree)
            candidates.append(SubtreeCandidate(subtree, estimator.cost))
        return candidates

    def _reorder(self, candidates: List[SubtreeCandidate]) -> List[SubtreeCandidate]:
        """Pass 3: cheapest first; equal costs keep discovery order."""
        return sorted(candidates, key=lambda candidate: candidate.cost)

    def _connect(self, candidates: List[SubtreeCandidate]) -> Product:
        """Pass 4: fold candidates into a left-deep product tree.

        The first candidate is the deepest left leaf and each later one
        becomes the right child of a new root.
        """
        tree: LogicalPlanNode = candidates[0].subtree
        for candidate in candidates[1:]:
            tree = Product(tree, candidate.subtree)
        return tree

    def _introduce_joins(
        self, node: LogicalPlanNode, state: OptimizerState
    ) -> LogicalPlanNode:
        """Pass 5: replace products with joins, bottom of the spine first."""
        if not isinstance(node, Product):
            return node

        # Containment is judged on the product as connected in pass 4
        connected = node.output
        root: LogicalPlanNode = Product(
            self._introduce_joins(node.left, state), node.right
        )

        for predicate in list(state.pending_predicates):
            if not relation_contains_predicate(connected, predicate):
                continue
            root = self._apply_predicate(root, predicate)
            state.consume(predicate)

        kept = state.keep_attributes(connected)
        if len(kept) != len(connected):
            root = Project(root, kept)
        return root

    def _apply_predicate(
        self, root: LogicalPlanNode, predicate: Predicate
    ) -> LogicalPlanNode:
        """Join a still-plain product on predicate, otherwise select above it."""
        if not isinstance(root, Product) or predicate.is_value_equality():
            return Select(root, predicate)

        Estimator().estimate(root)
        left = root.left.output
        right = root.right.output
        if not (
            left.contains(predicate.left_attribute)
            and right.contains(predicate.right_attribute)
        ):
            predicate = predicate.swapped()
        return Join(root.left, root.right, predicate)

    def _warn_unregistered(self, state: OptimizerState, log) -> None:
        if self.catalog is None:
            return
        for relation in state.relations:
            if self.catalog.get_relation(relation.name) is not relation:
                log.warning(f"Relation {relation.name} is not the catalog's instance")

    def _finish(self, result: LogicalPlanNode, log) -> None:
        if self.config.estimate_result:
            estimator = Estimator()
            estimator.estimate(result)
            log.debug(f"Optimized plan cost: {estimator.cost}")
        self._trace(log, "optimized plan", result)

    def _trace(self, log, label: str, plan: LogicalPlanNode) -> None:
        if not self.config.trace_passes:
            return
        lines = PlanFormatter().format(plan)
        log.debug(f"{label}:\n" + "\n".join(lines))

    def __repr__(self) -> str:
        return f"HeuristicOptimizer(catalog={self.catalog!r})"
