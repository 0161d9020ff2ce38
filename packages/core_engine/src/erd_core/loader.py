import json
import sys
from pathlib import Path
from typing import Any, Dict

import yaml


def load_sql_text(path: str) -> str:
    """Read DDL from ``path``; ``-`` reads standard input."""
    if path == "-":
        return sys.stdin.read()
    sql_path = Path(path)
    if not sql_path.exists():
        raise FileNotFoundError(f"SQL file not found: {path}")
    return sql_path.read_text(encoding="utf-8")


def load_schema_document(path: str) -> Dict[str, Any]:
    """Load an exported schema graph from JSON or YAML."""
    doc_path = Path(path)
    if not doc_path.exists():
        raise FileNotFoundError(f"Schema document not found: {path}")

    with doc_path.open("r", encoding="utf-8") as handle:
        if doc_path.suffix.lower() == ".json":
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
        else:
            try:
                data = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ValueError("Schema document must parse to an object/map at root.")

    return data
