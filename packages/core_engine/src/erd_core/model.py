"""Schema graph types produced by the DDL parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Column:
    name: str
    type: str
    is_primary_key: bool = False
    is_foreign_key: bool = False
    comment: Optional[str] = None
    nullable: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "isPrimaryKey": self.is_primary_key,
            "isForeignKey": self.is_foreign_key,
            "nullable": self.nullable,
        }
        if self.comment is not None:
            data["comment"] = self.comment
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        return cls(
            name=data["name"],
            type=data["type"],
            is_primary_key=bool(data.get("isPrimaryKey", False)),
            is_foreign_key=bool(data.get("isForeignKey", False)),
            comment=data.get("comment"),
            nullable=bool(data.get("nullable", True)),
        )


@dataclass
class Table:
    """One parsed ``CREATE TABLE`` statement.

    ``id`` equals ``name`` and is what relationships point at.
    """

    id: str
    name: str
    columns: List[Column] = field(default_factory=list)
    raw_sql: Optional[str] = None

    def get_column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @property
    def primary_keys(self) -> List[str]:
        return [c.name for c in self.columns if c.is_primary_key]

    @property
    def foreign_keys(self) -> List[str]:
        return [c.name for c in self.columns if c.is_foreign_key]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
        }
        if self.raw_sql is not None:
            data["rawSql"] = self.raw_sql
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        return cls(
            id=data.get("id", data["name"]),
            name=data["name"],
            columns=[Column.from_dict(c) for c in data.get("columns", [])],
            raw_sql=data.get("rawSql"),
        )


@dataclass
class Relationship:
    source: str
    target: str
    label: str

    @property
    def is_self_reference(self) -> bool:
        return self.source == self.target

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target, "label": self.label}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relationship":
        return cls(source=data["source"], target=data["target"], label=data.get("label", ""))


@dataclass
class SchemaData:
    """Tables plus inferred relationships; a fresh instance per parse."""

    tables: List[Table] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tables

    def table_names(self) -> List[str]:
        return [t.name for t in self.tables]

    def get_table(self, table_id: str) -> Optional[Table]:
        for table in self.tables:
            if table.id == table_id:
                return table
        return None

    def relationships_from(self, table_id: str) -> List[Relationship]:
        return [r for r in self.relationships if r.source == table_id]

    def relationships_to(self, table_id: str) -> List[Relationship]:
        return [r for r in self.relationships if r.target == table_id]

    def stats(self) -> Dict[str, int]:
        return {
            "tables": len(self.tables),
            "columns": sum(len(t.columns) for t in self.tables),
            "relationships": len(self.relationships),
            "primary_keys": sum(len(t.primary_keys) for t in self.tables),
            "foreign_keys": sum(len(t.foreign_keys) for t in self.tables),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tables": [t.to_dict() for t in self.tables],
            "relationships": [r.to_dict() for r in self.relationships],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaData":
        if not isinstance(data, dict):
            raise ValueError("Schema document must be an object/map at root.")
        return cls(
            tables=[Table.from_dict(t) for t in data.get("tables", [])],
            relationships=[Relationship.from_dict(r) for r in data.get("relationships", [])],
        )
