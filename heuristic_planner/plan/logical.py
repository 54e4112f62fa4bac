"""Logical plan nodes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Type

from ..catalog.statistics import NamedRelation, Relation
from .predicates import AttributeRef, Predicate, _as_ref


class LogicalPlanNode(ABC):
    """Base class for logical plan nodes.

    Every node carries an ``output`` slot holding the Relation estimated for
    it. The slot is excluded from node equality and is replaced, never
    mutated, when the node is re-estimated.
    """

    @abstractmethod
    def children(self) -> List["LogicalPlanNode"]:
        """Return child nodes."""
        pass

    @abstractmethod
    def with_children(self, children: List["LogicalPlanNode"]) -> "LogicalPlanNode":
        """Create a new node with different children (immutable)."""
        pass

    @abstractmethod
    def accept(self, visitor):
        """Accept a visitor for the visitor pattern."""
        pass

    def set_output(self, relation: Optional[Relation]) -> None:
        """Attach the estimated output relation."""
        object.__setattr__(self, "output", relation)

    def __repr__(self) -> str:
        return self.__class__.__name__


@dataclass(frozen=True)
class Scan(LogicalPlanNode):
    """Scan a named base relation."""

    relation: NamedRelation
    output: Optional[Relation] = field(default=None, init=False, compare=False, repr=False)

    def children(self) -> List[LogicalPlanNode]:
        return []

    def with_children(self, children: List[LogicalPlanNode]) -> "Scan":
        assert len(children) == 0
        return self

    def accept(self, visitor):
        return visitor.visit_scan(self)

    def __repr__(self) -> str:
        return f"Scan({self.relation.name})"


@dataclass(frozen=True)
class Project(LogicalPlanNode):
    """Keep only the listed attributes."""

    input: LogicalPlanNode
    attributes: Tuple[AttributeRef, ...]
    output: Optional[Relation] = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        refs = tuple(_as_ref(attribute) for attribute in self.attributes)
        object.__setattr__(self, "attributes", refs)

    def children(self) -> List[LogicalPlanNode]:
        return [self.input]

    def with_children(self, children: List[LogicalPlanNode]) -> "Project":
        assert len(children) == 1
        return Project(children[0], self.attributes)

    def accept(self, visitor):
        return visitor.visit_project(self)

    def attribute_names(self) -> List[str]:
        return [attribute.name for attribute in self.attributes]

    def __repr__(self) -> str:
        return f"Project({', '.join(self.attribute_names())})"


@dataclass(frozen=True)
class Select(LogicalPlanNode):
    """Filter tuples by an equality predicate."""

    input: LogicalPlanNode
    predicate: Predicate
    output: Optional[Relation] = field(default=None, init=False, compare=False, repr=False)

    def children(self) -> List[LogicalPlanNode]:
        return [self.input]

    def with_children(self, children: List[LogicalPlanNode]) -> "Select":
        assert len(children) == 1
        return Select(children[0], self.predicate)

    def accept(self, visitor):
        return visitor.visit_select(self)

    def __repr__(self) -> str:
        return f"Select({self.predicate})"


@dataclass(frozen=True)
class Product(LogicalPlanNode):
    """Cartesian product of two inputs."""

    left: LogicalPlanNode
    right: LogicalPlanNode
    output: Optional[Relation] = field(default=None, init=False, compare=False, repr=False)

    def children(self) -> List[LogicalPlanNode]:
        return [self.left, self.right]

    def with_children(self, children: List[LogicalPlanNode]) -> "Product":
        assert len(children) == 2
        return Product(children[0], children[1])

    def accept(self, visitor):
        return visitor.visit_product(self)

    def __repr__(self) -> str:
        return "Product"


@dataclass(frozen=True)
class Join(LogicalPlanNode):
    """Equi-join of two inputs on an attribute equality predicate."""

    left: LogicalPlanNode
    right: LogicalPlanNode
    predicate: Predicate
    output: Optional[Relation] = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        if self.predicate.is_value_equality():
            raise ValueError(f"Join needs an attribute equality, got {self.predicate}")

    def children(self) -> List[LogicalPlanNode]:
        return [self.left, self.right]

    def with_children(self, children: List[LogicalPlanNode]) -> "Join":
        assert len(children) == 2
        return Join(children[0], children[1], self.predicate)

    def accept(self, visitor):
        return visitor.visit_join(self)

    def __repr__(self) -> str:
        return f"Join({self.predicate})"


class LogicalPlanVisitor(ABC):
    """Visitor interface for logical plan nodes."""

    @abstractmethod
    def visit_scan(self, node: Scan):
        pass

    @abstractmethod
    def visit_project(self, node: Project):
        pass

    @abstractmethod
    def visit_select(self, node: Select):
        pass

    @abstractmethod
    def visit_product(self, node: Product):
        pass

    @abstractmethod
    def visit_join(self, node: Join):
        pass


def walk(plan: LogicalPlanNode) -> Iterator[LogicalPlanNode]:
    """Yield every node of a plan in pre-order."""
    yield plan
    for child in plan.children():
        yield from walk(child)


def walk_post_order(plan: LogicalPlanNode) -> Iterator[LogicalPlanNode]:
    """Yield every node of a plan, children before their parent."""
    for child in plan.children():
        yield from walk_post_order(child)
    yield plan


def contains_node_type(
    plan: LogicalPlanNode, *node_types: Type[LogicalPlanNode]
) -> bool:
    """Return True when any node of the plan is one of node_types."""
    for node in walk(plan):
        if isinstance(node, node_types):
            return True
    return False


def scan_names(plan: LogicalPlanNode) -> Sequence[str]:
    """Return base relation names in left-to-right leaf order."""
    return [node.relation.name for node in walk(plan) if isinstance(node, Scan)]
