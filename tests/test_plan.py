"""Tests for predicates, logical plan nodes and canonical plan construction."""

import json

import pytest

from heuristic_planner.catalog import CatalogError
from heuristic_planner.optimizer import Estimator
from heuristic_planner.plan import (
    AttributeRef,
    CanonicalPlanBuilder,
    ExplainFormat,
    Join,
    PlanFormatter,
    Predicate,
    PredicateKind,
    Product,
    Project,
    Scan,
    Select,
    contains_node_type,
    explain_plan,
    scan_names,
    walk,
    walk_post_order,
)

from conftest import make_relation


class TestPredicate:
    """Construction, identity and display of predicates."""

    def test_value_equality(self):
        predicate = Predicate.equals_value("a", "x")

        assert predicate.kind == PredicateKind.VALUE_EQUALITY
        assert predicate.is_value_equality()
        assert predicate.attributes() == [AttributeRef("a")]
        assert str(predicate) == "a = 'x'"

    def test_numeric_value_printed_bare(self):
        assert str(Predicate.equals_value("a", 5)) == "a = 5"

    def test_attribute_equality(self):
        predicate = Predicate.equals_attribute("a", AttributeRef("b"))

        assert not predicate.is_value_equality()
        assert predicate.attributes() == [AttributeRef("a"), AttributeRef("b")]
        assert str(predicate) == "a = b"

    def test_equal_content_means_equal_predicates(self):
        assert Predicate.equals_attribute("a", "b") == Predicate.equals_attribute("a", "b")
        assert len({Predicate.equals_value("a", 1), Predicate.equals_value("a", 1)}) == 1
        assert Predicate.equals_value("a", 1) != Predicate.equals_value("a", 2)

    def test_swapped(self):
        swapped = Predicate.equals_attribute("a", "b").swapped()
        assert swapped == Predicate.equals_attribute("b", "a")

    def test_value_equality_cannot_swap(self):
        with pytest.raises(ValueError):
            Predicate.equals_value("a", 1).swapped()

    def test_attribute_equality_needs_right_side(self):
        with pytest.raises(ValueError):
            Predicate(PredicateKind.ATTRIBUTE_EQUALITY, AttributeRef("a"))


class TestLogicalNodes:
    """Node structure, traversal and immutability."""

    @pytest.fixture
    def plan(self):
        r = make_relation("R", 10, a=5)
        s = make_relation("S", 20, b=4)
        return Project(
            Select(Product(Scan(r), Scan(s)), Predicate.equals_attribute("a", "b")),
            ["a"],
        )

    def test_project_normalises_attribute_names(self, plan):
        assert plan.attributes == (AttributeRef("a"),)
        assert plan.attribute_names() == ["a"]

    def test_walk_orders(self, plan):
        pre = [repr(node) for node in walk(plan)]
        post = [repr(node) for node in walk_post_order(plan)]

        assert pre == ["Project(a)", "Select(a = b)", "Product", "Scan(R)", "Scan(S)"]
        assert post == ["Scan(R)", "Scan(S)", "Product", "Select(a = b)", "Project(a)"]

    def test_contains_node_type_and_scan_names(self, plan):
        assert contains_node_type(plan, Product)
        assert not contains_node_type(plan, Join)
        assert scan_names(plan) == ["R", "S"]

    def test_nodes_are_frozen(self, plan):
        with pytest.raises(AttributeError):
            plan.input = None

    def test_with_children_builds_new_node(self, plan):
        replacement = Scan(make_relation("T", 1, t=1))
        rebuilt = plan.with_children([replacement])

        assert rebuilt is not plan
        assert rebuilt.input is replacement
        assert rebuilt.attributes == plan.attributes

    def test_output_not_part_of_equality(self, plan):
        twin = plan.with_children(plan.children())
        Estimator().estimate(plan)

        assert plan.output is not None
        assert twin.output is None
        assert plan == twin

    def test_join_rejects_value_predicate(self):
        r = Scan(make_relation("R", 10, a=5))
        s = Scan(make_relation("S", 10, b=5))
        with pytest.raises(ValueError):
            Join(r, s, Predicate.equals_value("a", 1))


class TestCanonicalPlanBuilder:
    """Canonical plans from relation names, predicates and attributes."""

    @pytest.fixture
    def builder(self, three_relation_catalog):
        return CanonicalPlanBuilder(three_relation_catalog)

    def test_canonical_shape(self, builder):
        predicates = [
            Predicate.equals_attribute("x", "y"),
            Predicate.equals_attribute("y", "z"),
        ]
        plan = builder.build(["R1", "R2", "R3"], predicates, ["z"])

        assert isinstance(plan, Project)
        assert plan.input.predicate == predicates[1]
        assert plan.input.input.predicate == predicates[0]
        product = plan.input.input.input
        assert isinstance(product, Product)
        assert isinstance(product.left, Product)
        assert scan_names(plan) == ["R1", "R2", "R3"]

    def test_scans_share_catalog_instances(self, builder, three_relation_catalog):
        plan = builder.build(["R1"])
        assert isinstance(plan, Scan)
        assert plan.relation is three_relation_catalog.get_relation("R1")

    def test_unknown_relation(self, builder):
        with pytest.raises(CatalogError, match="Unknown relation: Nope"):
            builder.build(["R1", "Nope"])

    def test_relation_listed_twice(self, builder):
        with pytest.raises(CatalogError, match="listed twice"):
            builder.build(["R1", "R1"])

    def test_no_relations(self, builder):
        with pytest.raises(CatalogError):
            builder.build([])

    def test_shared_attribute_name_rejected(self, three_relation_catalog):
        three_relation_catalog.add_relation("R4", 10, {"x": 2})
        builder = CanonicalPlanBuilder(three_relation_catalog)

        with pytest.raises(CatalogError, match="appears in both R1 and R4"):
            builder.build(["R1", "R4"])


class TestExplain:
    """Text and JSON plan rendering."""

    @pytest.fixture
    def plan(self, three_relation_catalog):
        builder = CanonicalPlanBuilder(three_relation_catalog)
        return builder.build(["R1", "R2"], [Predicate.equals_attribute("x", "y")], ["x"])

    def test_unestimated_rows(self, plan):
        lines = PlanFormatter().format(plan)
        assert lines[0] == "Project rows=-1 details=attributes=[x]"

    def test_text_lines(self, plan):
        Estimator().estimate(plan)
        lines = PlanFormatter().format(plan)

        assert lines == [
            "Project rows=1000 details=attributes=[x]",
            "  -> Select rows=1000 details=predicate=x = y",
            "    -> Product rows=20000",
            "      -> Scan rows=100 details=relation=R1",
            "      -> Scan rows=200 details=relation=R2",
        ]
        assert explain_plan(plan) == "\n".join(lines)

    def test_json_document(self, plan):
        Estimator().estimate(plan)
        document = json.loads(explain_plan(plan, ExplainFormat.JSON))

        assert document["node"] == "Project"
        assert document["rows"] == 1000
        assert document["attributes"] == {"x": 10}
        assert document["details"] == "attributes=[x]"
        product = document["children"][0]["children"][0]
        assert "details" not in product
        assert [child["details"] for child in product["children"]] == [
            "relation=R1",
            "relation=R2",
        ]
        assert "children" not in product["children"][0]
