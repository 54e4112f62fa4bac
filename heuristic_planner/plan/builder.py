"""Construction of canonical logical plans."""

from typing import Iterable, List, Optional

from ..catalog.catalog import Catalog, CatalogError
from .logical import LogicalPlanNode, Scan, Project, Select, Product
from .predicates import Predicate


class CanonicalPlanBuilder:
    """Builds the canonical plan of a select-from-where query.

    The canonical shape is a left-deep product of scans in FROM order, one
    selection per predicate in WHERE order on top of it, and a projection
    over the SELECT list when one is given.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def build(
        self,
        relations: Iterable[str],
        predicates: Iterable[Predicate] = (),
        attributes: Optional[Iterable[str]] = None,
    ) -> LogicalPlanNode:
        """Build a canonical plan.

        Args:
            relations: Relation names, FROM order
            predicates: Predicates, WHERE order
            attributes: Attribute names to project, None for all

        Returns:
            Root of the canonical plan

        Raises:
            CatalogError: On unknown or repeated relations, or attribute
                names shared between relations
        """
        scans = self._build_scans(list(relations))

        plan: LogicalPlanNode = scans[0]
        for scan in scans[1:]:
            plan = Product(plan, scan)

        for predicate in predicates:
            plan = Select(plan, predicate)

        if attributes is not None:
            plan = Project(plan, list(attributes))
        return plan

    def _build_scans(self, names: List[str]) -> List[Scan]:
        if not names:
            raise CatalogError("A query needs at least one relation")

        scans: List[Scan] = []
        owners = {}
        for name in names:
            relation = self.catalog.get_relation(name)
            if relation is None:
                raise CatalogError(f"Unknown relation: {name}")
            if any(scan.relation is relation for scan in scans):
                raise CatalogError(f"Relation listed twice: {name}")
            for attr_name in relation.attribute_names():
                if attr_name in owners:
                    raise CatalogError(
                        f"Attribute {attr_name} appears in both "
                        f"{owners[attr_name]} and {name}"
                    )
                owners[attr_name] = name
            scans.append(Scan(relation))
        return scans
