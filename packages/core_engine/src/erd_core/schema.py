import json
from pathlib import Path
from typing import Any, Dict, List, Set

from jsonschema import Draft202012Validator

from erd_core.issues import SCHEMA_VALIDATION_FAILED, Issue

BUNDLED_SCHEMA = Path(__file__).resolve().parent / "schemas" / "schema_graph.schema.json"


def default_schema_path() -> str:
    return str(BUNDLED_SCHEMA)


def load_schema(schema_path: str = "") -> Dict[str, Any]:
    path = Path(schema_path or BUNDLED_SCHEMA)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _to_json_path(parts: List[Any]) -> str:
    if not parts:
        return "/"
    formatted = []
    for part in parts:
        formatted.append(str(part))
    return "/" + "/".join(formatted)


def schema_issues(document: Dict[str, Any], schema: Dict[str, Any]) -> List[Issue]:
    validator = Draft202012Validator(schema)
    issues: List[Issue] = []

    for error in sorted(validator.iter_errors(document), key=lambda e: list(e.absolute_path)):
        issues.append(
            Issue(
                severity="error",
                code=SCHEMA_VALIDATION_FAILED,
                message=error.message,
                path=_to_json_path(list(error.absolute_path)),
            )
        )

    return issues


def reference_issues(document: Dict[str, Any]) -> List[Issue]:
    """Graph-level checks the JSON schema cannot express.

    Relationship endpoints must name tables in the same document, column
    names must be unique within a table, and a table id must equal its name.
    Repeated table ids are only warned about.
    """
    issues: List[Issue] = []
    tables = document.get("tables", []) if isinstance(document, dict) else []
    relationships = document.get("relationships", []) if isinstance(document, dict) else []

    table_ids: Set[str] = set()
    for t_index, table in enumerate(tables):
        if not isinstance(table, dict):
            continue
        table_id = table.get("id", "")
        if table_id in table_ids:
            issues.append(
                Issue(
                    severity="warn",
                    code="DUPLICATE_TABLE_ID",
                    message=f"Table id '{table_id}' is declared more than once.",
                    path=f"/tables/{t_index}/id",
                )
            )
        table_ids.add(table_id)

        if table_id != table.get("name"):
            issues.append(
                Issue(
                    severity="error",
                    code="TABLE_ID_MISMATCH",
                    message=f"Table id '{table_id}' does not match name '{table.get('name')}'.",
                    path=f"/tables/{t_index}/id",
                )
            )

        seen: Set[str] = set()
        for c_index, column in enumerate(table.get("columns", [])):
            name = column.get("name") if isinstance(column, dict) else None
            if name in seen:
                issues.append(
                    Issue(
                        severity="error",
                        code="DUPLICATE_COLUMN",
                        message=f"Column '{name}' appears more than once in table '{table_id}'.",
                        path=f"/tables/{t_index}/columns/{c_index}/name",
                    )
                )
            seen.add(name)

    for r_index, rel in enumerate(relationships):
        if not isinstance(rel, dict):
            continue
        for end in ("source", "target"):
            if rel.get(end) not in table_ids:
                issues.append(
                    Issue(
                        severity="error",
                        code="UNKNOWN_TABLE_REFERENCE",
                        message=f"Relationship {end} '{rel.get(end)}' is not a table in this schema.",
                        path=f"/relationships/{r_index}/{end}",
                    )
                )

    return issues
