"""Text and JSON renderings of logical plans."""

import json
from enum import Enum
from typing import Any, Callable, Dict, List

from .logical import LogicalPlanNode, Scan, Project, Select, Join


class ExplainFormat(Enum):
    """Supported EXPLAIN output formats."""

    TEXT = "TEXT"
    JSON = "JSON"


class PlanFormatter:
    """Formats a logical plan one node per line, children indented."""

    def __init__(self):
        self._detail_builders: Dict[type, Callable[[LogicalPlanNode], str]] = {}
        self._detail_builders[Scan] = self._scan_detail
        self._detail_builders[Project] = self._project_detail
        self._detail_builders[Select] = self._predicate_detail
        self._detail_builders[Join] = self._predicate_detail

    def format(self, node: LogicalPlanNode) -> List[str]:
        lines: List[str] = []
        self._append_node_line(node, 0, lines)
        return lines

    def to_document(self, node: LogicalPlanNode) -> Dict[str, Any]:
        """Build a nested JSON-safe description of the plan."""
        document: Dict[str, Any] = {
            "node": node.__class__.__name__,
            "rows": self._rows(node),
            "attributes": self._attributes(node),
        }
        detail = self._detail_for(node)
        if detail:
            document["details"] = detail
        children = [self.to_document(child) for child in node.children()]
        if children:
            document["children"] = children
        return document

    def _append_node_line(self, node: LogicalPlanNode, depth: int, lines: List[str]) -> None:
        indent = self._build_indent(depth)
        header = self._build_header(node)
        lines.append(f"{indent}{header}")
        for child in node.children():
            self._append_node_line(child, depth + 1, lines)

    def _build_indent(self, depth: int) -> str:
        if depth == 0:
            return ""
        return f"{'  ' * depth}-> "

    def _build_header(self, node: LogicalPlanNode) -> str:
        name = node.__class__.__name__
        rows = self._rows(node)
        detail = self._detail_for(node)
        if detail:
            return f"{name} rows={rows} details={detail}"
        return f"{name} rows={rows}"

    def _rows(self, node: LogicalPlanNode) -> int:
        if node.output is None:
            return -1
        return node.output.tuple_count

    def _attributes(self, node: LogicalPlanNode) -> Dict[str, int]:
        if node.output is None:
            return {}
        return {attr.name: attr.value_count for attr in node.output.attributes}

    def _detail_for(self, node: LogicalPlanNode) -> str:
        builder = self._detail_builders.get(type(node))
        if builder is None:
            return ""
        return builder(node)

    def _scan_detail(self, node: Scan) -> str:
        return f"relation={node.relation.name}"

    def _project_detail(self, node: Project) -> str:
        return f"attributes=[{', '.join(node.attribute_names())}]"

    def _predicate_detail(self, node: LogicalPlanNode) -> str:
        return f"predicate={node.predicate}"


def explain_plan(plan: LogicalPlanNode, fmt: ExplainFormat = ExplainFormat.TEXT) -> str:
    """Render a plan as text lines or as an indented JSON document."""
    formatter = PlanFormatter()
    if fmt == ExplainFormat.JSON:
        return json.dumps(formatter.to_document(plan), indent=2)
    return "\n".join(formatter.format(plan))
