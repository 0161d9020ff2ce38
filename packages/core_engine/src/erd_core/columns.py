"""Parse the column/constraint list of a single ``CREATE TABLE`` body."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from erd_core.model import Column

logger = logging.getLogger(__name__)

PRIMARY_KEY = "primary_key"
CONSTRAINT = "constraint"
COLUMN = "column"
UNRECOGNIZED = "unrecognized"

PRIMARY_KEY_RE = re.compile(
    r"^(?:constraint\s+[`\"]?\w+[`\"]?\s+)?primary\s+key\b",
    flags=re.IGNORECASE,
)
PK_COLUMNS_RE = re.compile(r"\((.*)\)", flags=re.DOTALL)
CONSTRAINT_RE = re.compile(
    r"^(?:(?:unique|fulltext|spatial)\s+)?(?:key|index)\b"
    r"|^unique\b"
    r"|^constraint\b"
    r"|^foreign\s+key\b"
    r"|^check\b",
    flags=re.IGNORECASE,
)
COLUMN_RE = re.compile(r"^`?(\w+)`?\s+(\w+(?:\([^)]*\))?)(.*)$", flags=re.DOTALL)
COMMENT_RE = re.compile(r"comment\s+'((?:[^'\\]|\\.|'')*)'", flags=re.IGNORECASE | re.DOTALL)
INLINE_PK_RE = re.compile(r"\bprimary\s+key\b", flags=re.IGNORECASE)
NOT_NULL_RE = re.compile(r"\bnot\s+null\b", flags=re.IGNORECASE)


def split_definitions(body: str) -> List[str]:
    """Split a column list on commas that are not nested in parens or quotes."""
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    quote = ""
    escaped = False

    # A doubled '' closes and reopens the quote, which leaves the state unchanged.
    for char in body:
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = ""
        elif char in ("'", '"', "`"):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    if current:
        parts.append("".join(current).strip())
    return [part for part in parts if part]


def classify_line(line: str) -> str:
    stripped = line.strip()
    if PRIMARY_KEY_RE.match(stripped):
        return PRIMARY_KEY
    if CONSTRAINT_RE.match(stripped):
        return CONSTRAINT
    if COLUMN_RE.match(stripped):
        return COLUMN
    return UNRECOGNIZED


def _strip_identifier(token: str) -> str:
    token = token.strip()
    # `name`(10) prefix-length index parts
    token = re.sub(r"\(\s*\d+\s*\)$", "", token).strip()
    return token.strip("`\"")


def primary_key_columns(line: str) -> List[str]:
    """Column names listed by a ``PRIMARY KEY (...)`` constraint line."""
    match = PK_COLUMNS_RE.search(line)
    if not match:
        return []
    names = [_strip_identifier(part) for part in split_definitions(match.group(1))]
    return [name for name in names if name]


def parse_column(line: str) -> Optional[Column]:
    match = COLUMN_RE.match(line.strip())
    if not match:
        return None

    rest = match.group(3)
    comment = None
    comment_match = COMMENT_RE.search(rest)
    if comment_match:
        comment = comment_match.group(1)
        # Keywords inside the comment text must not set flags.
        rest = rest[: comment_match.start()] + rest[comment_match.end() :]

    return Column(
        name=match.group(1),
        type=match.group(2),
        is_primary_key=bool(INLINE_PK_RE.search(rest)),
        is_foreign_key=False,
        comment=comment,
        nullable=not NOT_NULL_RE.search(rest),
    )


def parse_body(body: str) -> Tuple[List[Column], List[str]]:
    """Parse a table body into columns and constraint-declared primary keys.

    A ``PRIMARY KEY (...)`` line only marks columns declared before it; a
    name that does not exist is ignored. Index and constraint lines are
    skipped. A repeated column name replaces the earlier declaration.
    """
    columns: List[Column] = []
    primary_keys: List[str] = []

    for line in split_definitions(body):
        kind = classify_line(line)

        if kind == PRIMARY_KEY:
            for name in primary_key_columns(line):
                target = next((c for c in columns if c.name == name), None)
                if target is None:
                    logger.debug("PRIMARY KEY names unknown column %s", name)
                    continue
                target.is_primary_key = True
                if name not in primary_keys:
                    primary_keys.append(name)
            continue

        if kind == CONSTRAINT:
            continue

        if kind == UNRECOGNIZED:
            logger.debug("Skipping unrecognized definition: %r", line[:60])
            continue

        column = parse_column(line)
        if column is None:
            continue
        for index, existing in enumerate(columns):
            if existing.name == column.name:
                columns[index] = column
                break
        else:
            columns.append(column)

    return columns, primary_keys
