"""Foreign-key inference from column naming conventions.

Runs after every table has been parsed, because a column can only be
resolved against the complete set of table names.

Resolution for a column ``<base>_id`` (first match wins):

1. ``parent_id`` always points at its own table (tree-shaped tables)
2. a table named ``<base>``
3. a table named ``<base>s``
4. a table named ``<base>es``

Only these mechanical plural rules are applied. A column that resolves to
nothing stays a plain column.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from erd_core.model import Relationship, Table

logger = logging.getLogger(__name__)

FK_SUFFIX = "_id"
SELF_REFERENCE_COLUMN = "parent_id"
PLURAL_SUFFIXES = ("", "s", "es")


def _build_table_lookup(tables: List[Table]) -> Dict[str, Table]:
    """Map table name to the first table declared with it."""
    lookup: Dict[str, Table] = {}
    for table in tables:
        lookup.setdefault(table.name, table)
    return lookup


def resolve_target(column_name: str, owner: Table, lookup: Dict[str, Table]) -> Optional[Table]:
    if not column_name.endswith(FK_SUFFIX):
        return None
    if column_name == SELF_REFERENCE_COLUMN:
        return owner

    base = column_name[: -len(FK_SUFFIX)]
    for suffix in PLURAL_SUFFIXES:
        target = lookup.get(base + suffix)
        if target is not None:
            return target
    return None


def infer_relationships(tables: List[Table]) -> Tuple[List[Relationship], List[str]]:
    """Infer relationships for every ``*_id`` column and flag it as a foreign key.

    Returns (relationships in table/column declaration order, inference messages).
    """
    lookup = _build_table_lookup(tables)
    relationships: List[Relationship] = []
    messages: List[str] = []

    for table in tables:
        for column in table.columns:
            if not column.name.endswith(FK_SUFFIX):
                continue

            target = resolve_target(column.name, table, lookup)
            if target is None:
                logger.debug("No table found for %s.%s", table.name, column.name)
                continue

            column.is_foreign_key = True
            relationships.append(Relationship(source=table.id, target=target.id, label=column.name))
            messages.append(f"Inferred FK: {table.name}.{column.name} → {target.name}")

    return relationships, messages
