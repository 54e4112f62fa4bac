"""Catalog of base-relation statistics."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .statistics import Attribute, NamedRelation

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised for invalid statistics or unknown relations."""


class Catalog:
    """Central catalog holding statistics for every named base relation."""

    def __init__(self):
        """Initialize catalog."""
        self.relations_by_name: Dict[str, NamedRelation] = {}

    def add_relation(
        self, name: str, tuple_count: int, attributes: Mapping[str, int]
    ) -> NamedRelation:
        """Create and register a base relation.

        Args:
            name: Relation name
            tuple_count: Number of tuples
            attributes: Attribute name -> distinct-value count, in order

        Returns:
            The registered relation
        """
        self._check_count(name, "tuple count", tuple_count)
        relation = NamedRelation(name, tuple_count)
        for attr_name, value_count in attributes.items():
            self._check_count(f"{name}.{attr_name}", "distinct-value count", value_count)
            if value_count > tuple_count:
                raise CatalogError(
                    f"{name}.{attr_name}: distinct-value count {value_count} "
                    f"exceeds tuple count {tuple_count}"
                )
            try:
                relation.add_attribute(Attribute(attr_name, value_count))
            except ValueError as exc:
                raise CatalogError(f"{name}: {exc}") from exc
        self.register(relation)
        return relation

    def register(self, relation: NamedRelation) -> None:
        """Register an existing relation.

        Args:
            relation: Relation to register

        Raises:
            CatalogError: If a relation with the same name is registered
        """
        if relation.name in self.relations_by_name:
            raise CatalogError(f"Duplicate relation: {relation.name}")
        self.relations_by_name[relation.name] = relation
        logger.debug(
            f"Registered relation {relation.name} "
            f"(T={relation.tuple_count}, attrs={len(relation)})"
        )

    def get_relation(self, name: str) -> Optional[NamedRelation]:
        """Get relation by name.

        Args:
            name: Relation name

        Returns:
            Relation if found, None otherwise
        """
        return self.relations_by_name.get(name)

    def has_relation(self, name: str) -> bool:
        return name in self.relations_by_name

    def relations(self) -> List[NamedRelation]:
        return list(self.relations_by_name.values())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Catalog":
        """Build a catalog from the ``relations`` section of a config file.

        Example YAML format:
            relations:
              orders:
                tuples: 1000
                attributes:
                  order_id: 1000
                  customer_id: 100

        Args:
            data: Mapping of relation name -> {tuples, attributes}

        Returns:
            Populated catalog
        """
        catalog = cls()
        for name, entry in (data or {}).items():
            if not isinstance(entry, Mapping) or "tuples" not in entry:
                raise CatalogError(f"Relation {name} must define 'tuples'")
            attributes = entry.get("attributes") or {}
            if not isinstance(attributes, Mapping):
                raise CatalogError(f"Relation {name}: 'attributes' must be a mapping")
            catalog.add_relation(str(name), entry["tuples"], attributes)
        return catalog

    def _check_count(self, owner: str, label: str, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise CatalogError(f"{owner}: {label} must be an integer, got {value!r}")
        if value < 0:
            raise CatalogError(f"{owner}: {label} must be non-negative, got {value}")

    def __len__(self) -> int:
        return len(self.relations_by_name)

    def __repr__(self) -> str:
        return f"Catalog(relations={len(self.relations_by_name)})"
