"""
syntax/module.py

Mutable statement-level model of a JavaScript module.

The tree-sitter tree itself is immutable. Edits are therefore modelled in two
layers:

- The top-level statement list (`JsModule.statements`) is a real mutable
  sequence: statements can be prepended, appended, removed or swapped for
  synthesized statements.
- Replacements of nodes nested inside original statements are buffered on the
  `SourceBuffer` and applied when the module is rendered.

Because nothing is written back to the source until `JsModule.render()`, a
transform that fails half way leaves the original text untouched.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Deque, List, Optional

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

logger = logging.getLogger(__name__)


class TransformError(Exception):
    """Base class for errors that abort the transform of a whole file."""


class JsSyntaxError(TransformError):
    """Raised when source text is not a well-formed JavaScript program."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.line = line
        self.column = column


class NodeReplacementError(TransformError):
    """Raised when a node (or an overlapping range) has already been replaced."""


class SyntheticNode:
    """A node created by a transform rather than read from the source."""

    def to_source(self) -> str:
        raise NotImplementedError


@dataclass
class Replacement:
    start: int
    end: int
    node: SyntheticNode


class SourceBuffer:
    """Original source bytes plus the node replacements registered against them."""

    def __init__(self, source: bytes):
        self.source = source
        self._replacements: List[Replacement] = []

    @property
    def replacements(self) -> List[Replacement]:
        return list(self._replacements)

    def replace(self, node: "Node", new_node: SyntheticNode) -> None:
        """
        Replace `node` with `new_node` when rendering.

        Raises:
            NodeReplacementError: If `node` overlaps a node that was already replaced.
        """
        start, end = node.start_byte, node.end_byte
        for existing in self._replacements:
            if existing.start < end and start < existing.end:
                line, column = node.start_point[0] + 1, node.start_point[1] + 1
                raise NodeReplacementError(
                    f"Node '{node.type}' at line {line}, column {column} has already been replaced"
                )
        self._replacements.append(Replacement(start, end, new_node))

    def render(self, start: int, end: int) -> str:
        """Source text between byte offsets with replacements applied."""
        out = bytearray()
        cursor = start
        for replacement in sorted(self._replacements, key=lambda r: r.start):
            if replacement.start < start or replacement.end > end:
                continue
            out += self.source[cursor:replacement.start]
            out += replacement.node.to_source().encode("utf-8")
            cursor = replacement.end
        out += self.source[cursor:end]
        return out.decode("utf-8")

    def render_node(self, node: "Node") -> str:
        return self.render(node.start_byte, node.end_byte)


@dataclass
class Comment:
    text: str
    start_row: int = 0
    end_row: int = 0
    blank_line_before: bool = False


class Statement(SyntheticNode):
    """
    A top-level statement.

    Subclasses provide `to_source`; comments and spacing are shared state.
    """

    leading_comments: List[Comment]
    trailing_comment: Optional[str]
    blank_line_before: bool

    def _init_layout(
        self,
        leading_comments: Optional[List[Comment]] = None,
        trailing_comment: Optional[str] = None,
        blank_line_before: bool = False,
    ) -> None:
        self.leading_comments = list(leading_comments or [])
        self.trailing_comment = trailing_comment
        self.blank_line_before = blank_line_before

    @property
    def has_comments(self) -> bool:
        return bool(self.leading_comments)


class SourceStatement(Statement):
    """A statement read from the original source."""

    def __init__(
        self,
        node: "Node",
        buffer: SourceBuffer,
        leading_comments: Optional[List[Comment]] = None,
        trailing_comment: Optional[str] = None,
        blank_line_before: bool = False,
    ):
        self.node = node
        self.buffer = buffer
        self._init_layout(leading_comments, trailing_comment, blank_line_before)

    @property
    def type(self) -> str:
        return self.node.type

    @property
    def end_row(self) -> int:
        return self.node.end_point[0]

    def to_source(self) -> str:
        return self.buffer.render_node(self.node)

    def __repr__(self) -> str:
        return f"SourceStatement({self.node.type!r}, line={self.node.start_point[0] + 1})"


@dataclass
class JsModule:
    """
    A parsed JavaScript module.

    Attributes:
        buffer: Original source and buffered node replacements.
        tree: The tree-sitter tree the statements were read from.
        statements: Top-level statements in order; supports O(1) front insertion.
        root_comments: Document comments owned by the module root.
        trailing_comments: Comments after the last statement.
        hashbang: A leading `#!` line, always printed first.
        newline: Line terminator of the source, reused when printing.
    """

    buffer: SourceBuffer
    tree: Optional["Tree"] = None
    statements: Deque[Statement] = field(default_factory=deque)
    root_comments: List[Comment] = field(default_factory=list)
    trailing_comments: List[Comment] = field(default_factory=list)
    hashbang: Optional[str] = None
    newline: str = "\n"

    @property
    def root_node(self) -> Optional["Node"]:
        return self.tree.root_node if self.tree is not None else None

    def prepend(self, statement: Statement) -> None:
        self.statements.appendleft(statement)

    def append(self, statement: Statement) -> None:
        self.statements.append(statement)

    def remove(self, statement: Statement) -> None:
        self.statements.remove(statement)

    def replace_statement(self, old: Statement, new: Statement) -> None:
        """Swap `old` for `new` in place, carrying over comments and spacing."""
        index = self.statements.index(old)
        new.leading_comments = old.leading_comments
        new.trailing_comment = old.trailing_comment
        new.blank_line_before = old.blank_line_before
        self.statements[index] = new

    def find_statement(self, node: "Node") -> Optional[SourceStatement]:
        """The top-level source statement whose node is `node`, if any."""
        for statement in self.statements:
            if isinstance(statement, SourceStatement) and (
                statement.node.start_byte,
                statement.node.end_byte,
            ) == (node.start_byte, node.end_byte):
                return statement
        return None

    def render(self) -> str:
        lines: List[str] = [self.hashbang] if self.hashbang is not None else []

        def emit_comments(comments: List[Comment]) -> None:
            for comment in comments:
                if comment.blank_line_before and lines:
                    lines.append("")
                lines.append(comment.text)

        emit_comments(self.root_comments)
        for statement in self.statements:
            emit_comments(statement.leading_comments)
            if statement.blank_line_before and lines:
                lines.append("")
            text = statement.to_source()
            if statement.trailing_comment:
                text = f"{text} {statement.trailing_comment}"
            lines.append(text)
        emit_comments(self.trailing_comments)

        return self.newline.join(lines) + self.newline if lines else ""
