"""Locate ``CREATE TABLE`` statements in raw DDL text.

Each statement is reduced to a :class:`TableBlock`: the table name, the
literal text of its column/constraint list and the statement text itself.
Blocks that have no usable name or body are dropped, never raised.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

# MySQL conditional comments: /*!40101 SET NAMES utf8 */
DIRECTIVE_RE = re.compile(r"/\*!.*?\*/", flags=re.DOTALL)
LINE_COMMENT_RE = re.compile(r"^\s*(?:--|#).*$", flags=re.MULTILINE)
CREATE_TABLE_RE = re.compile(r"\bcreate\s+table\b", flags=re.IGNORECASE)
TABLE_NAME_RE = re.compile(r"^\s*(?:if\s+not\s+exists\s+)?`?(\w+)`?", flags=re.IGNORECASE)
BODY_TAIL_RE = re.compile(r"\(([\s\S]*)\)(?=\s*engine|\s*;)", flags=re.IGNORECASE)


@dataclass(frozen=True)
class TableBlock:
    name: str
    body: str
    raw_sql: str


def strip_directives(sql: str) -> str:
    """Remove vendor directives and whole-line comments."""
    cleaned = DIRECTIVE_RE.sub("", sql)
    return LINE_COMMENT_RE.sub("", cleaned)


def _quoted_spans(sql: str) -> List[Tuple[int, int]]:
    """``(start, end)`` ranges of quoted strings and identifiers in ``sql``."""
    spans: List[Tuple[int, int]] = []
    quote = ""
    start = 0
    escaped = False
    for index, char in enumerate(sql):
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                spans.append((start, index))
                quote = ""
        elif char in ("'", '"', "`"):
            quote = char
            start = index
    if quote:
        spans.append((start, len(sql)))
    return spans


def split_table_blocks(sql: str) -> List[str]:
    """Return the text following each ``CREATE TABLE``, up to the next one.

    Occurrences inside quoted text (a ``COMMENT '...'`` string) do not start
    a block.
    """
    spans = _quoted_spans(sql)
    starts: List[Tuple[int, int]] = []
    for match in CREATE_TABLE_RE.finditer(sql):
        if any(begin < match.start() <= end for begin, end in spans):
            continue
        starts.append((match.start(), match.end()))

    # Anything before the first CREATE TABLE is not a table definition.
    blocks = []
    for position, (_, body_start) in enumerate(starts):
        body_end = starts[position + 1][0] if position + 1 < len(starts) else len(sql)
        blocks.append(sql[body_start:body_end])
    return blocks


def extract_table_name(block: str) -> Optional[str]:
    match = TABLE_NAME_RE.match(block)
    if not match:
        return None
    return match.group(1)


def _matching_paren(text: str, start: int) -> int:
    """Index of the ``)`` closing the ``(`` at ``start``, or -1."""
    depth = 0
    quote = ""
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = ""
            continue
        if char in ("'", '"', "`"):
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def extract_body(block: str, name_end: int = 0) -> Tuple[Optional[str], int]:
    """Return ``(body, close_index)`` for the column list of ``block``.

    The list starts at the first ``(`` after the table name and ends at the
    parenthesis that balances it. Unbalanced text falls back to the
    ``ENGINE``/``;`` anchored match and finally to the last ``)``.
    """
    open_index = block.find("(", name_end)
    if open_index == -1:
        return None, -1

    close_index = _matching_paren(block, open_index)
    if close_index != -1:
        return block[open_index + 1 : close_index], close_index

    tail = BODY_TAIL_RE.search(block, open_index)
    if tail:
        return tail.group(1), tail.end(1)

    close_index = block.rfind(")")
    if close_index <= open_index:
        return None, -1
    return block[open_index + 1 : close_index], close_index


def _statement_text(block: str, close_index: int) -> str:
    end = block.find(";", close_index)
    statement = block[: end + 1] if end != -1 else block
    return f"CREATE TABLE {statement.strip()}"


def segment(sql: str) -> List[TableBlock]:
    """Split ``sql`` into ordered table blocks."""
    blocks: List[TableBlock] = []
    for block in split_table_blocks(strip_directives(sql)):
        match = TABLE_NAME_RE.match(block)
        if not match:
            logger.debug("Skipping CREATE TABLE block without a table name: %r", block[:60])
            continue
        name = match.group(1)

        body, close_index = extract_body(block, match.end())
        if body is None or not body.strip():
            logger.debug("Skipping table %s: no column list found", name)
            continue

        blocks.append(TableBlock(name=name, body=body, raw_sql=_statement_text(block, close_index)))
    return blocks
