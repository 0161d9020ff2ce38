"""Text projection of a schema for a language-model assistant.

Only the prompt text is built here; sending it anywhere is the caller's job.
"""

from typing import List

from erd_core.model import Column, SchemaData, Table

SYSTEM_PROMPT_TEMPLATE = """You are a Senior Database Architect and SQL Expert.
You are analyzing a database schema provided by the user.

Current Schema Context:
{summary}

Answer the user's question based strictly on this schema.
If they ask for optimization, relationships, or business logic implied by the table names/comments, provide detailed, actionable advice.
Use Markdown for formatting.
"""


def _column_summary(column: Column) -> str:
    text = f"{column.name}({column.type})"
    if column.comment:
        text += f" [{column.comment}]"
    return text


def table_summary(table: Table) -> str:
    columns = ", ".join(_column_summary(c) for c in table.columns)
    return f"Table: {table.name}\nColumns: {columns}"


def schema_summary(schema: SchemaData) -> str:
    """One block per table, blocks separated by a blank line."""
    blocks: List[str] = [table_summary(t) for t in schema.tables]
    return "\n\n".join(blocks)


def build_assistant_prompt(schema: SchemaData) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(summary=schema_summary(schema))
