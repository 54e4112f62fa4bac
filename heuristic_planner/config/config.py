"""Configuration management for the heuristic planner."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import yaml
from pathlib import Path

from ..catalog.catalog import Catalog
from ..plan.predicates import Predicate


@dataclass
class OptimizerConfig:
    """Configuration for the heuristic optimizer."""

    estimate_result: bool = True  # Attach statistics to the rewritten plan
    trace_passes: bool = False  # Log the intermediate plan of every pass


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    structured: bool = False
    log_file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class."""

    relations: Dict[str, Any] = field(default_factory=dict)
    optimizer: OptimizerConfig = field(default_factory=OptimizerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def build_catalog(self) -> Catalog:
        """Build a validated catalog from the ``relations`` section."""
        return Catalog.from_dict(self.relations)


@dataclass
class QuerySpec:
    """Structured query description: FROM relations, WHERE predicates, SELECT list."""

    relations: List[str]
    predicates: List[Predicate] = field(default_factory=list)
    attributes: Optional[List[str]] = None  # None keeps every attribute


def _read_yaml(config_path: str) -> Dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: top level must be a mapping")
    return data


def load_config(config_path: str) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Parsed configuration

    Example YAML format:
        relations:
          orders:
            tuples: 1000
            attributes:
              order_id: 1000
              customer_id: 100
          customers:
            tuples: 100
            attributes:
              cust_id: 100

        optimizer:
          estimate_result: true
          trace_passes: false

        logging:
          level: DEBUG
          structured: true
    """
    data = _read_yaml(config_path)

    relations = data.get("relations") or {}

    optimizer_data = data.get("optimizer") or {}
    optimizer = OptimizerConfig(**optimizer_data)

    logging_data = data.get("logging") or {}
    logging_config = LoggingConfig(**logging_data)

    return Config(relations=relations, optimizer=optimizer, logging=logging_config)


def load_query(query_path: str) -> QuerySpec:
    """Load a structured query description from YAML file.

    Args:
        query_path: Path to YAML query file

    Returns:
        Parsed query description

    Example YAML format:
        select: [customer_id]
        from: [orders, customers]
        where:
          - {left: customer_id, right: cust_id}
          - {left: status, value: shipped}
    """
    data = _read_yaml(query_path)
    return parse_query(data)


def parse_query(data: Dict[str, Any]) -> QuerySpec:
    """Build a QuerySpec from an already-loaded mapping."""
    relations = data.get("from")
    if not relations or not isinstance(relations, list):
        raise ValueError("Query must list at least one relation under 'from'")

    predicates = []
    for entry in data.get("where") or []:
        predicates.append(_parse_predicate(entry))

    attributes = data.get("select")
    if attributes is not None:
        if not isinstance(attributes, list):
            raise ValueError("'select' must be a list of attribute names")
        attributes = [str(name) for name in attributes]

    return QuerySpec(
        relations=[str(name) for name in relations],
        predicates=predicates,
        attributes=attributes,
    )


def _parse_predicate(entry: Any) -> Predicate:
    if not isinstance(entry, dict) or "left" not in entry:
        raise ValueError(f"Predicate needs a 'left' attribute: {entry!r}")
    has_right = "right" in entry
    has_value = "value" in entry
    if has_right == has_value:
        raise ValueError(f"Predicate needs exactly one of 'right' or 'value': {entry!r}")
    if has_right:
        return Predicate.equals_attribute(str(entry["left"]), str(entry["right"]))
    value = entry["value"]
    if isinstance(value, (list, dict)):
        raise ValueError(f"Predicate value must be a scalar: {entry!r}")
    return Predicate.equals_value(str(entry["left"]), value)
