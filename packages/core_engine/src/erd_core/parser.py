"""DDL text to schema graph.

The pipeline has two phases: every table is parsed first, then
relationships are resolved over the complete table list. Malformed input
never raises; it yields fewer tables, or none.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from erd_core.columns import parse_body
from erd_core.inference import infer_relationships
from erd_core.issues import EMPTY_INPUT, NO_TABLES_FOUND, Issue
from erd_core.model import SchemaData, Table
from erd_core.segmenter import segment

logger = logging.getLogger(__name__)


def parse_tables(sql: str) -> List[Table]:
    tables: List[Table] = []
    for block in segment(sql):
        columns, _ = parse_body(block.body)
        tables.append(Table(id=block.name, name=block.name, columns=columns, raw_sql=block.raw_sql))
    return tables


def parse_sql_to_schema(sql: str) -> SchemaData:
    """Parse ``CREATE TABLE`` statements into tables and inferred relationships."""
    tables = parse_tables(sql or "")
    relationships, messages = infer_relationships(tables)
    for message in messages:
        logger.debug(message)
    logger.debug("Parsed %d tables, %d relationships", len(tables), len(relationships))
    return SchemaData(tables=tables, relationships=relationships)


def check_input(sql: str) -> List[Issue]:
    if not (sql or "").strip():
        return [Issue(severity="error", code=EMPTY_INPUT, message="Please enter some SQL to parse.")]
    return []


def parse_with_issues(sql: str) -> Tuple[SchemaData, List[Issue]]:
    """Parse ``sql`` and report the caller-facing empty conditions.

    Blank input and input that produced no tables are reported with
    different codes so they can be messaged differently.
    """
    issues = check_input(sql)
    if issues:
        return SchemaData(), issues

    schema = parse_sql_to_schema(sql)
    if schema.is_empty:
        issues.append(
            Issue(
                severity="error",
                code=NO_TABLES_FOUND,
                message="No tables found. Check your SQL syntax.",
            )
        )
    return schema, issues
