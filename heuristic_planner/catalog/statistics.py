"""Relation and attribute statistics records."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union


class AttributeNotFoundError(KeyError):
    """Raised by Relation.get_attribute when an attribute is absent."""


@dataclass(frozen=True)
class Attribute:
    """An attribute of a relation with its distinct-value count.

    Equality and hashing use the attribute name only, so an attribute
    looked up in one relation matches the same-named attribute in another.
    """

    name: str
    value_count: int = field(default=0, compare=False)

    def with_value_count(self, value_count: int) -> "Attribute":
        """Return a copy carrying a different distinct-value count."""
        return Attribute(self.name, value_count)

    def __repr__(self) -> str:
        return f"Attribute({self.name}, V={self.value_count})"


@dataclass(frozen=True)
class AttributeLookup:
    """Outcome of looking an attribute up in a relation."""

    name: str
    attribute: Optional[Attribute] = None

    @property
    def found(self) -> bool:
        return self.attribute is not None

    @property
    def value_count(self) -> int:
        if self.attribute is None:
            raise AttributeNotFoundError(self.name)
        return self.attribute.value_count


AttributeKey = Union[str, Attribute]


def _key_name(key) -> str:
    """Resolve a lookup key (name, Attribute or AttributeRef) to a name."""
    if isinstance(key, str):
        return key
    return key.name


class Relation:
    """Tuple count plus an ordered list of attributes.

    Relations are built incrementally with add_attribute and treated as
    immutable once attached to a plan node.
    """

    def __init__(self, tuple_count: int, attributes: Optional[Iterable[Attribute]] = None):
        """Initialize relation.

        Args:
            tuple_count: Estimated number of tuples
            attributes: Optional initial attributes, in order
        """
        self.tuple_count = tuple_count
        self._attributes: List[Attribute] = []
        self._index = {}
        if attributes:
            for attribute in attributes:
                self.add_attribute(attribute)

    @property
    def attributes(self) -> List[Attribute]:
        return list(self._attributes)

    def add_attribute(self, attribute: Attribute) -> None:
        """Append an attribute.

        Args:
            attribute: Attribute to append

        Raises:
            ValueError: If an attribute with the same name exists
        """
        if attribute.name in self._index:
            raise ValueError(f"Duplicate attribute: {attribute.name}")
        self._index[attribute.name] = len(self._attributes)
        self._attributes.append(attribute)

    def find_attribute(self, key: AttributeKey) -> AttributeLookup:
        """Look up an attribute without raising.

        Args:
            key: Attribute name, Attribute or AttributeRef

        Returns:
            Lookup result; ``found`` is False when the attribute is absent
        """
        name = _key_name(key)
        position = self._index.get(name)
        if position is None:
            return AttributeLookup(name)
        return AttributeLookup(name, self._attributes[position])

    def get_attribute(self, key: AttributeKey) -> Attribute:
        """Look up an attribute, raising AttributeNotFoundError when absent."""
        lookup = self.find_attribute(key)
        if not lookup.found:
            raise AttributeNotFoundError(lookup.name)
        return lookup.attribute

    def contains(self, *keys: AttributeKey) -> bool:
        """Return True when every given attribute is present."""
        for key in keys:
            if not self.find_attribute(key).found:
                return False
        return True

    def attribute_names(self) -> List[str]:
        return [attribute.name for attribute in self._attributes]

    def __len__(self) -> int:
        return len(self._attributes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Relation):
            return NotImplemented
        if self.tuple_count != other.tuple_count:
            return False
        mine = [(a.name, a.value_count) for a in self._attributes]
        theirs = [(a.name, a.value_count) for a in other._attributes]
        return mine == theirs

    def __repr__(self) -> str:
        return f"Relation(T={self.tuple_count}, attrs={self._attributes})"


class NamedRelation(Relation):
    """A base relation registered in the catalog."""

    def __init__(
        self,
        name: str,
        tuple_count: int,
        attributes: Optional[Iterable[Attribute]] = None,
    ):
        super().__init__(tuple_count, attributes)
        self.name = name

    def __eq__(self, other) -> bool:
        if isinstance(other, NamedRelation) and other.name != self.name:
            return False
        return super().__eq__(other)

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        return f"NamedRelation({self.name}, T={self.tuple_count}, attrs={len(self)})"
