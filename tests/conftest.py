"""Shared fixtures for the planner test suite."""

import logging

import pytest

from heuristic_planner.catalog import Attribute, Catalog, NamedRelation
from heuristic_planner.utils.logging import PACKAGE_LOGGER


def make_relation(name: str, tuples: int, **value_counts: int) -> NamedRelation:
    """Build a base relation from keyword attribute -> distinct-value count."""
    attributes = [Attribute(attr, count) for attr, count in value_counts.items()]
    return NamedRelation(name, tuples, attributes)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler changes made by setup_logging (e.g. through the CLI)."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def three_relation_catalog():
    """R1(T=100, x:10), R2(T=200, y:20), R3(T=50, z:5)."""
    catalog = Catalog()
    catalog.add_relation("R1", 100, {"x": 10})
    catalog.add_relation("R2", 200, {"y": 20})
    catalog.add_relation("R3", 50, {"z": 5})
    return catalog
