"""Attribute references and equality predicates."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional


@dataclass(frozen=True)
class AttributeRef:
    """Reference to an attribute by name."""

    name: str

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"AttributeRef({self.name})"


class PredicateKind(Enum):
    """Predicate kinds."""

    VALUE_EQUALITY = "attr=value"
    ATTRIBUTE_EQUALITY = "attr=attr"


@dataclass(frozen=True)
class Predicate:
    """Equality predicate: attribute = value, or attribute = attribute.

    Equality and hashing are by content (kind, attribute names and compared
    value), so the same predicate appearing twice in a plan collapses when
    collected into a set.
    """

    kind: PredicateKind
    left_attribute: AttributeRef
    right_attribute: Optional[AttributeRef] = None
    value: Any = None

    def __post_init__(self):
        if self.kind == PredicateKind.ATTRIBUTE_EQUALITY and self.right_attribute is None:
            raise ValueError("Attribute equality needs a right attribute")
        if self.kind == PredicateKind.VALUE_EQUALITY and self.right_attribute is not None:
            raise ValueError("Value equality takes no right attribute")

    @classmethod
    def equals_value(cls, attribute, value: Any) -> "Predicate":
        """Build an ``attribute = value`` predicate."""
        return cls(PredicateKind.VALUE_EQUALITY, _as_ref(attribute), None, value)

    @classmethod
    def equals_attribute(cls, left, right) -> "Predicate":
        """Build an ``left = right`` attribute equality predicate."""
        return cls(PredicateKind.ATTRIBUTE_EQUALITY, _as_ref(left), _as_ref(right))

    def is_value_equality(self) -> bool:
        return self.kind == PredicateKind.VALUE_EQUALITY

    def attributes(self) -> List[AttributeRef]:
        """Return referenced attributes, left first."""
        if self.is_value_equality():
            return [self.left_attribute]
        return [self.left_attribute, self.right_attribute]

    def swapped(self) -> "Predicate":
        """Return this attribute equality with its sides exchanged."""
        if self.is_value_equality():
            raise ValueError("Cannot swap a value equality predicate")
        return Predicate.equals_attribute(self.right_attribute, self.left_attribute)

    def __str__(self) -> str:
        if self.is_value_equality():
            if isinstance(self.value, str):
                return f"{self.left_attribute} = '{self.value}'"
            return f"{self.left_attribute} = {self.value}"
        return f"{self.left_attribute} = {self.right_attribute}"

    def __repr__(self) -> str:
        return f"Predicate({self})"


def _as_ref(attribute) -> AttributeRef:
    if isinstance(attribute, AttributeRef):
        return attribute
    if isinstance(attribute, str):
        return AttributeRef(attribute)
    return AttributeRef(attribute.name)
