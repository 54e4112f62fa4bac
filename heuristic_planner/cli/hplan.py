"""Command line driver: build, estimate and optimize a query plan."""

from __future__ import annotations

from typing import Optional, Tuple

import click

from ..catalog import Catalog, CatalogError
from ..config import Config, QuerySpec, load_config, load_query
from ..optimizer import Estimator, HeuristicOptimizer
from ..plan import CanonicalPlanBuilder, ExplainFormat, LogicalPlanNode, explain_plan
from ..utils.logging import setup_logging_from_config


class PlanRuntime:
    """Wraps the build -> estimate -> optimize pipeline."""

    def __init__(self, config: Config):
        self.config = config
        self.catalog: Catalog = config.build_catalog()
        self.builder = CanonicalPlanBuilder(self.catalog)
        self.optimizer = HeuristicOptimizer(self.catalog, config.optimizer)

    def canonical(self, query: QuerySpec) -> Tuple[LogicalPlanNode, int]:
        """Build and estimate the canonical plan of a query."""
        plan = self.builder.build(query.relations, query.predicates, query.attributes)
        return plan, self._cost(plan)

    def optimize(self, plan: LogicalPlanNode) -> Tuple[LogicalPlanNode, int]:
        """Optimize a canonical plan and estimate the result."""
        optimized = self.optimizer.optimize(plan)
        return optimized, self._cost(optimized)

    def _cost(self, plan: LogicalPlanNode) -> int:
        estimator = Estimator()
        estimator.estimate(plan)
        return estimator.cost


class PlanPrinter:
    """Prints plans with their total cost."""

    def __init__(self, emit, fmt: ExplainFormat):
        self.emit = emit
        self.fmt = fmt

    def display(self, title: str, plan: LogicalPlanNode, cost: int) -> None:
        self.emit(f"{title} (cost={cost}):")
        self.emit(explain_plan(plan, self.fmt))
        self.emit("")


def _load_inputs(config_path: str, query_path: str) -> Tuple[Config, QuerySpec]:
    config = load_config(config_path)
    query = load_query(query_path)
    return config, query


@click.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="YAML file with relation statistics and optimizer settings.",
)
@click.option(
    "-q",
    "--query",
    "query_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="YAML query description (select/from/where).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    show_default=True,
)
@click.option(
    "--show-canonical/--no-show-canonical",
    default=False,
    help="Also print the canonical plan before optimization.",
)
@click.option("--log-level", default=None, help="Override the configured log level.")
def cli(
    config_path: str,
    query_path: str,
    output_format: str,
    show_canonical: bool,
    log_level: Optional[str],
) -> None:
    """Entry point for the hplan CLI."""
    try:
        config, query = _load_inputs(config_path, query_path)
        if log_level:
            config.logging.level = log_level
        setup_logging_from_config(config.logging)

        runtime = PlanRuntime(config)
        canonical, canonical_cost = runtime.canonical(query)
        optimized, optimized_cost = runtime.optimize(canonical)
    except (CatalogError, ValueError, FileNotFoundError, TypeError) as exc:
        raise click.ClickException(str(exc))

    printer = PlanPrinter(click.echo, ExplainFormat(output_format.upper()))
    if show_canonical:
        printer.display("Canonical plan", canonical, canonical_cost)
    printer.display("Optimized plan", optimized, optimized_cost)
    click.echo(f"Estimated cost: {canonical_cost} -> {optimized_cost}")


if __name__ == "__main__":
    cli()
