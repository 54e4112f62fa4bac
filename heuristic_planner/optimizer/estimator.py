"""Cardinality and cost estimation for logical plans."""

import logging

from ..catalog.statistics import Attribute, AttributeLookup, Relation
from ..plan.logical import (
    LogicalPlanNode,
    LogicalPlanVisitor,
    Scan,
    Project,
    Select,
    Product,
    Join,
)
from ..plan.predicates import AttributeRef

logger = logging.getLogger(__name__)


class Estimator(LogicalPlanVisitor):
    """Bottom-up estimator of output statistics and total plan cost.

    Each visited node gets a fresh output Relation attached, and its output
    tuple count is added to ``cost``. A predicate whose attributes are
    missing from its input yields an empty relation with no attributes and
    contributes nothing to the cost; a zero distinct-value count yields an
    empty relation that still lists every input attribute.
    """

    def __init__(self):
        """Initialize estimator with zero accumulated cost."""
        self.cost = 0

    def estimate(self, plan: LogicalPlanNode) -> Relation:
        """Estimate every node of a plan, children first.

        Args:
            plan: Root of the plan to estimate

        Returns:
            Output relation attached to the root
        """
        for child in plan.children():
            self.estimate(child)
        plan.accept(self)
        return plan.output

    def reset(self) -> None:
        """Zero the accumulated cost."""
        self.cost = 0

    def visit_scan(self, node: Scan) -> None:
        base = node.relation
        output = Relation(base.tuple_count)
        for attribute in base.attributes:
            output.add_attribute(attribute)
        self._finish(node, output)

    def visit_project(self, node: Project) -> None:
        source = node.input.output
        output = Relation(source.tuple_count)
        for ref in node.attributes:
            lookup = source.find_attribute(ref)
            if lookup.found and not output.contains(ref):
                output.add_attribute(lookup.attribute)
        self._finish(node, output)

    def visit_select(self, node: Select) -> None:
        source = node.input.output
        predicate = node.predicate

        if predicate.is_value_equality():
            lookup = source.find_attribute(predicate.left_attribute)
            if not lookup.found:
                self._missing_attribute(node, lookup)
                return
            value_count = lookup.value_count
            tuple_count = self._divide(source.tuple_count, value_count)
            kept_values = 1
        else:
            left = source.find_attribute(predicate.left_attribute)
            right = source.find_attribute(predicate.right_attribute)
            if not left.found or not right.found:
                self._missing_attribute(node, left if not left.found else right)
                return
            largest = max(left.value_count, right.value_count)
            tuple_count = self._divide(source.tuple_count, largest)
            kept_values = min(left.value_count, right.value_count)

        kept_values = min(tuple_count, kept_values)
        predicate_names = self._names(predicate.attributes())
        output = Relation(tuple_count)
        for attribute in source.attributes:
            if attribute.name in predicate_names:
                output.add_attribute(attribute.with_value_count(kept_values))
            else:
                output.add_attribute(
                    attribute.with_value_count(min(tuple_count, attribute.value_count))
                )
        self._finish(node, output)

    def visit_product(self, node: Product) -> None:
        left = node.left.output
        right = node.right.output
        output = Relation(left.tuple_count * right.tuple_count)
        # V only exceeds T here when one side is empty
        for attribute in left.attributes + right.attributes:
            self._append_new(
                output,
                attribute.with_value_count(min(output.tuple_count, attribute.value_count)),
            )
        self._finish(node, output)

    def visit_join(self, node: Join) -> None:
        left_input = node.left.output
        right_input = node.right.output
        predicate = node.predicate

        left = left_input.find_attribute(predicate.left_attribute)
        right = right_input.find_attribute(predicate.right_attribute)
        if not left.found or not right.found:
            self._missing_attribute(node, left if not left.found else right)
            return

        largest = max(left.value_count, right.value_count)
        tuple_count = self._divide(
            left_input.tuple_count * right_input.tuple_count, largest
        )
        kept_values = min(tuple_count, min(left.value_count, right.value_count))

        output = Relation(tuple_count)
        self._copy_capped(left_input, predicate.left_attribute, kept_values, output)
        self._copy_capped(right_input, predicate.right_attribute, kept_values, output)
        self._finish(node, output)

    def _copy_capped(
        self,
        source: Relation,
        joined: AttributeRef,
        kept_values: int,
        output: Relation,
    ) -> None:
        """Copy one join input's attributes, capping V at T(output)."""
        for attribute in source.attributes:
            if attribute.name == joined.name:
                value_count = kept_values
            else:
                value_count = min(output.tuple_count, attribute.value_count)
            self._append_new(output, attribute.with_value_count(value_count))

    def _append_new(self, output: Relation, attribute: Attribute) -> None:
        """Append unless the name is taken; the first occurrence wins lookups."""
        if not output.contains(attribute.name):
            output.add_attribute(attribute)

    def _divide(self, tuples: int, value_count: int) -> int:
        if value_count == 0:
            return 0
        return tuples // value_count

    def _names(self, refs) -> set:
        return {ref.name for ref in refs}

    def _missing_attribute(
        self, node: LogicalPlanNode, lookup: AttributeLookup
    ) -> None:
        """Attach an empty, attribute-free relation; no cost is added."""
        logger.debug(f"{node!r}: attribute {lookup.name} not in input, output is empty")
        node.set_output(Relation(0))

    def _finish(self, node: LogicalPlanNode, output: Relation) -> None:
        node.set_output(output)
        self.cost += output.tuple_count
        logger.debug(
            f"Estimated {node!r}: T={output.tuple_count}, "
            f"attrs={len(output)}, cost={self.cost}"
        )

    def __repr__(self) -> str:
        return f"Estimator(cost={self.cost})"
