"""Catalog and statistics records for base relations."""

from .catalog import Catalog, CatalogError
from .statistics import (
    Attribute,
    AttributeLookup,
    AttributeNotFoundError,
    NamedRelation,
    Relation,
)

__all__ = [
    "Catalog",
    "CatalogError",
    "Attribute",
    "AttributeLookup",
    "AttributeNotFoundError",
    "NamedRelation",
    "Relation",
]
