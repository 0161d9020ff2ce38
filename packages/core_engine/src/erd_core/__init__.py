from erd_core.assistant import build_assistant_prompt, schema_summary, table_summary
from erd_core.config import Settings, load_settings
from erd_core.details import generate_markdown_docs, table_details, write_markdown_docs
from erd_core.graph import graph_issues, to_graph, to_mermaid
from erd_core.inference import infer_relationships
from erd_core.issues import Issue, has_errors, to_lines
from erd_core.loader import load_schema_document, load_sql_text
from erd_core.model import Column, Relationship, SchemaData, Table
from erd_core.parser import check_input, parse_sql_to_schema, parse_tables, parse_with_issues
from erd_core.samples import DEFAULT_SQL
from erd_core.schema import default_schema_path, load_schema, reference_issues, schema_issues
from erd_core.segmenter import segment

__all__ = [
    "build_assistant_prompt",
    "check_input",
    "Column",
    "DEFAULT_SQL",
    "default_schema_path",
    "generate_markdown_docs",
    "graph_issues",
    "has_errors",
    "infer_relationships",
    "Issue",
    "load_schema",
    "load_schema_document",
    "load_settings",
    "load_sql_text",
    "parse_sql_to_schema",
    "parse_tables",
    "parse_with_issues",
    "reference_issues",
    "Relationship",
    "schema_issues",
    "schema_summary",
    "SchemaData",
    "segment",
    "Settings",
    "Table",
    "table_details",
    "table_summary",
    "to_graph",
    "to_lines",
    "to_mermaid",
    "write_markdown_docs",
]
