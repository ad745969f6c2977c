"""
syntax/parser.py

JavaScript parsing backed by tree-sitter.

Notes:
- tree-sitter is error tolerant; a tree that contains ERROR or MISSING nodes is
  rejected here so transforms only ever see well-formed programs.
- `load_module` splits the program into top-level statements and attaches
  comments to them, producing the mutable `JsModule` the transforms edit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import tree_sitter_javascript as tsjs
from tree_sitter import Language, Node, Parser, Tree

from .module import Comment, JsModule, JsSyntaxError, SourceBuffer, SourceStatement
from .nodes import node_text

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tsjs.language())

_parser: Optional[Parser] = None

COMMENT_TYPES = frozenset({"comment", "html_comment"})
HASH_BANG_LINE = "hash_bang_line"


def _get_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = Parser(JS_LANGUAGE)
    return _parser


@dataclass
class ParsedSource:
    """A parsed program together with the bytes it was parsed from."""

    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def parse_source(source: str) -> ParsedSource:
    """
    Parse JavaScript source text.

    Raises:
        JsSyntaxError: If the program does not parse cleanly.
    """
    source_bytes = source.encode("utf-8")
    tree = _get_parser().parse(source_bytes)
    root = tree.root_node

    if root.has_error:
        bad = _first_error(root) or root
        line, column = bad.start_point[0] + 1, bad.start_point[1] + 1
        raise JsSyntaxError(f"Unable to parse JavaScript at line {line}, column {column}", line, column)

    return ParsedSource(source=source_bytes, tree=tree)


def is_valid_source(source: str) -> bool:
    """Return True if `source` parses without errors."""
    try:
        parse_source(source)
    except JsSyntaxError:
        return False
    return True


def _comment_of(node: Node, previous_end_row: Optional[int]) -> Comment:
    return Comment(
        text=node_text(node),
        start_row=node.start_point[0],
        end_row=node.end_point[0],
        blank_line_before=previous_end_row is not None and node.start_point[0] > previous_end_row + 1,
    )


def _split_root_comments(pending: List[Comment], first_row: int) -> int:
    """
    Index into `pending` where the comments owned by the first statement begin.

    Comments above the last blank line before the first statement belong to the
    module root.
    """
    split = 0
    for index, comment in enumerate(pending):
        if comment.blank_line_before:
            split = index
    if pending:
        last = pending[-1]
        if first_row > last.end_row + 1:
            split = len(pending)
    return split


def load_module(source: str) -> JsModule:
    """
    Parse `source` and build the mutable statement-level module model.

    Raises:
        JsSyntaxError: If the program does not parse cleanly.
    """
    parsed = parse_source(source)
    buffer = SourceBuffer(parsed.source)
    module = JsModule(buffer=buffer, tree=parsed.tree)
    if b"\r\n" in parsed.source:
        module.newline = "\r\n"

    pending: List[Comment] = []
    previous_end_row: Optional[int] = None
    last_statement: Optional[SourceStatement] = None

    for child in parsed.root.named_children:
        if child.type == HASH_BANG_LINE:
            # must stay on the first line, never relocated
            module.hashbang = node_text(child).rstrip("\r")
            previous_end_row = child.end_point[0]
            continue

        if child.type in COMMENT_TYPES:
            if last_statement is not None and not pending and child.start_point[0] == last_statement.end_row:
                last_statement.trailing_comment = node_text(child)
            else:
                pending.append(_comment_of(child, previous_end_row))
            previous_end_row = child.end_point[0]
            continue

        start_row = child.start_point[0]
        if last_statement is None:
            split = _split_root_comments(pending, start_row)
            module.root_comments.extend(pending[:split])
            pending = pending[split:]

        statement = SourceStatement(
            child,
            buffer,
            leading_comments=pending,
            blank_line_before=previous_end_row is not None and start_row > previous_end_row + 1,
        )
        module.statements.append(statement)
        last_statement = statement
        pending = []
        previous_end_row = child.end_point[0]

    module.trailing_comments.extend(pending)
    logger.debug(
        "Loaded module with %d statements, %d root comments",
        len(module.statements),
        len(module.root_comments),
    )
    return module
