"""Node/link exports of a schema graph for diagram renderers."""

import re
from typing import Any, Dict, List

from erd_core.issues import Issue
from erd_core.model import Column, SchemaData
from erd_core.schema import schema_issues

NODE_WIDTH = 150
NODE_HEIGHT = 65


def to_graph(schema: SchemaData) -> Dict[str, List[Dict[str, Any]]]:
    """Return ``{"nodes": [...], "links": [...]}`` for a force-directed layout.

    An empty schema gives empty lists, which renderers show as an empty
    canvas.
    """
    nodes = []
    for table in schema.tables:
        nodes.append(
            {
                "id": table.id,
                "label": table.name,
                "columnCount": len(table.columns),
                "primaryKeys": table.primary_keys,
                "width": NODE_WIDTH,
                "height": NODE_HEIGHT,
            }
        )
    links = [rel.to_dict() for rel in schema.relationships]
    return {"nodes": nodes, "links": links}


def _mermaid_type(column: Column) -> str:
    # Mermaid attribute types cannot contain spaces, parens or commas.
    cleaned = re.sub(r"[^A-Za-z0-9_]+", "_", column.type).strip("_")
    return cleaned or "unknown"


def _mermaid_comment(text: str) -> str:
    return text.replace('"', "'")


def to_mermaid(schema: SchemaData) -> str:
    lines = ["erDiagram"]
    for table in schema.tables:
        lines.append(f"    {table.name} {{")
        for column in table.columns:
            keys = []
            if column.is_primary_key:
                keys.append("PK")
            if column.is_foreign_key:
                keys.append("FK")
            parts = [_mermaid_type(column), column.name]
            if keys:
                parts.append(",".join(keys))
            if column.comment:
                parts.append(f'"{_mermaid_comment(column.comment)}"')
            lines.append("        " + " ".join(parts))
        lines.append("    }")

    for rel in schema.relationships:
        lines.append(f"    {rel.target} ||--o{{ {rel.source} : {rel.label}")

    return "\n".join(lines) + "\n"


def graph_issues(graph_payload: Dict[str, Any], schema: Dict[str, Any]) -> List[Issue]:
    """Validate a ``to_graph`` payload against the bundled ``graph`` definition.

    Links whose endpoints are not node ids are reported once the payload
    has the right shape.
    """
    graph_schema = {
        "$schema": schema.get("$schema", "https://json-schema.org/draft/2020-12/schema"),
        "$defs": schema.get("$defs", {}),
        "$ref": "#/$defs/graph",
    }
    issues = schema_issues(graph_payload, graph_schema)
    if issues:
        return issues

    node_ids = {node["id"] for node in graph_payload["nodes"]}
    for index, link in enumerate(graph_payload["links"]):
        for end in ("source", "target"):
            if link[end] not in node_ids:
                issues.append(
                    Issue(
                        severity="error",
                        code="UNKNOWN_TABLE_REFERENCE",
                        message=f"Link {end} '{link[end]}' is not a node in this graph.",
                        path=f"/links/{index}/{end}",
                    )
                )
    return issues
