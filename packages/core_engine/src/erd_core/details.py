"""Per-table details and a Markdown data dictionary for a parsed schema.

Generates:
- the details payload for one selected table (columns plus the
  relationships entering and leaving it)
- a Markdown export of the whole schema for a wiki or pull request
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from erd_core.model import SchemaData, Table


def table_details(table: Table, schema: SchemaData) -> Dict[str, Any]:
    return {
        "id": table.id,
        "name": table.name,
        "columnCount": len(table.columns),
        "primaryKeys": table.primary_keys,
        "foreignKeys": table.foreign_keys,
        "columns": [c.to_dict() for c in table.columns],
        "references": [r.to_dict() for r in schema.relationships_from(table.id)],
        "referencedBy": [r.to_dict() for r in schema.relationships_to(table.id)],
    }


def _key_badges(column) -> str:
    badges = []
    if column.is_primary_key:
        badges.append("PK")
    if column.is_foreign_key:
        badges.append("FK")
    return ", ".join(badges)


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def generate_markdown_docs(schema: SchemaData, title: Optional[str] = None) -> str:
    """Generate a Markdown data dictionary from a parsed schema."""
    stats = schema.stats()

    lines: List[str] = []
    lines.append(f"# {title or 'Schema'} — Data Dictionary")
    lines.append("")
    lines.append("| Tables | Columns | Relationships |")
    lines.append("|--------|---------|---------------|")
    lines.append(f"| {stats['tables']} | {stats['columns']} | {stats['relationships']} |")
    lines.append("")

    if schema.is_empty:
        lines.append("_No tables found._")
        lines.append("")
        return "\n".join(lines)

    lines.append("## Table of Contents")
    lines.append("")
    for table in schema.tables:
        lines.append(f"- [{table.name}](#{table.name.lower()})")
    if schema.relationships:
        lines.append("- [Relationships](#relationships)")
    lines.append("")

    lines.append("---")
    lines.append("")

    for table in schema.tables:
        lines.append(f"## {table.name}")
        lines.append("")
        lines.append(f"**Columns:** {len(table.columns)}  ")
        if table.primary_keys:
            lines.append(f"**Primary key:** {', '.join(f'`{k}`' for k in table.primary_keys)}  ")
        lines.append("")

        lines.append("| Column | Type | Key | Nullable | Comment |")
        lines.append("|--------|------|-----|----------|---------|")
        for column in table.columns:
            nullable = "Yes" if column.nullable else "No"
            comment = _cell(column.comment or "")
            lines.append(
                f"| `{column.name}` | `{_cell(column.type)}` | {_key_badges(column)} | {nullable} | {comment} |"
            )
        lines.append("")

    if schema.relationships:
        lines.append("---")
        lines.append("")
        lines.append("## Relationships")
        lines.append("")
        lines.append("| From | To | Column |")
        lines.append("|------|----|--------|")
        for rel in schema.relationships:
            lines.append(f"| `{rel.source}` | `{rel.target}` | `{rel.label}` |")
        lines.append("")

    return "\n".join(lines)


def write_markdown_docs(schema: SchemaData, output_path: str, title: Optional[str] = None) -> str:
    """Generate and write Markdown docs to a file. Returns the output path."""
    content = generate_markdown_docs(schema, title=title)
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return str(path)
