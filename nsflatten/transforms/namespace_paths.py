"""
transforms/namespace_paths.py

Locating namespaced paths in a JavaScript tree.

A namespaced path starts at a tracked root label (``my`` in
``my.name.space.Class.prototype.method``) and is extended outward one property
access at a time until one of a small set of stop conditions says the rest of
the chain belongs to the class rather than to its namespace.

Stop conditions, first match wins:
- the enclosing node is not a plain dotted property access
- the property is ``prototype``
- the chain up to and including the property is being called
- the property is an upper-case constant name
- the previous segment looks like a class name (upper-case first character)
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from tree_sitter import Node

from ..interfaces import Diagnostic, DiagnosticKind, DiagnosticListener
from ..syntax.nodes import (
    IDENTIFIER,
    is_call_target,
    is_member_expression,
    is_namespaced_expression,
    is_object_of_parent,
    line_of,
    member_property_name,
    node_text,
)
from .naming import is_class_like_name, is_constant_name

PROTOTYPE = "prototype"
PATH_SEPARATOR = "/"


class StopReason(Enum):
    NOT_A_MEMBER = "not_a_member"
    PROTOTYPE = "prototype"
    CALL_TARGET = "call_target"
    CLASS_CONSTANT = "class_constant"
    CLASS_MEMBER = "class_member"


@dataclass(frozen=True)
class PathMatch:
    """A complete namespaced path found from one root occurrence."""

    path: Tuple[str, ...]
    node: Node
    stop_reason: StopReason

    @property
    def key(self) -> str:
        return PATH_SEPARATOR.join(self.path)


@dataclass(eq=False)
class NamespaceRecord:
    """
    All occurrences of one distinct namespaced path.

    Attributes:
        key: The full path joined with ``/``, also the required module id.
        segments: Path segments, root first. The leaf is removed once by
            `take_leaf` during identifier allocation.
        reference_nodes: Outermost node of every occurrence, in discovery order.
        module_variable_id: Local name assigned by allocation.
    """

    key: str
    segments: List[str]
    reference_nodes: List[Node] = field(default_factory=list)
    module_variable_id: Optional[str] = None
    _leaf: Optional[str] = None

    def take_leaf(self) -> str:
        if self._leaf is not None:
            raise ValueError(f"Leaf of namespace {self.key} has already been removed")
        self._leaf = self.segments.pop()
        return self._leaf

    @property
    def leaf(self) -> str:
        return self._leaf if self._leaf is not None else self.segments[-1]


class NamespaceRecords:
    """Records keyed by path, kept in discovery order."""

    def __init__(self) -> None:
        self._records: "OrderedDict[str, NamespaceRecord]" = OrderedDict()

    def add(self, match: PathMatch) -> NamespaceRecord:
        record = self._records.get(match.key)
        if record is None:
            record = NamespaceRecord(key=match.key, segments=list(match.path))
            self._records[match.key] = record
        record.reference_nodes.append(match.node)
        return record

    def get(self, key: str) -> Optional[NamespaceRecord]:
        return self._records.get(key)

    def __iter__(self) -> Iterator[NamespaceRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: str) -> bool:
        return key in self._records

    def keys(self) -> List[str]:
        return list(self._records.keys())


def is_namespace_root(node: Node, root_label: str, consumed: Optional[Set[int]] = None) -> bool:
    """
    True if `node` is an occurrence of `root_label` at the left end of a dotted chain.

    `consumed` holds the start offsets of roots that already produced a match.
    """
    if node.type != IDENTIFIER or not is_namespaced_expression(node, (root_label,)):
        return False
    if not is_object_of_parent(node):
        return False
    return consumed is None or node.start_byte not in consumed


def stop_reason(member: Optional[Node], path: Sequence[str]) -> Optional[StopReason]:
    """Why the path cannot be extended through `member`, or None if it can."""
    if not is_member_expression(member):
        return StopReason.NOT_A_MEMBER
    name = member_property_name(member)
    if name is None:
        return StopReason.NOT_A_MEMBER
    if name == PROTOTYPE:
        return StopReason.PROTOTYPE
    if is_call_target(member):
        return StopReason.CALL_TARGET
    if is_constant_name(name):
        return StopReason.CLASS_CONSTANT
    if is_class_like_name(path[-1]):
        return StopReason.CLASS_MEMBER
    return None


def collect_namespace_path(root: Node, listener: Optional[DiagnosticListener] = None) -> PathMatch:
    """Walk outward from a matched root and return the complete path it starts."""
    path = [node_text(root)]
    current = root

    while True:
        enclosing = current.parent
        reason = stop_reason(enclosing, path)
        if reason is None:
            path.append(member_property_name(enclosing))
            current = enclosing
            continue

        if listener is not None and reason in (StopReason.CLASS_CONSTANT, StopReason.CLASS_MEMBER):
            _report_classification(listener, enclosing, reason, path)
        return PathMatch(path=tuple(path), node=current, stop_reason=reason)


def _report_classification(
    listener: DiagnosticListener, member: Node, reason: StopReason, path: Sequence[str]
) -> None:
    name = member_property_name(member)
    dotted = ".".join(path)
    if reason is StopReason.CLASS_CONSTANT:
        kind = DiagnosticKind.ASSUMED_CLASS_CONSTANT
        message = f"{name} assumed to be constant of class {dotted}"
    else:
        kind = DiagnosticKind.ASSUMED_CLASS_MEMBER
        message = f"{name} assumed to be property of class {dotted}"
    listener.notify(Diagnostic(kind=kind, message=message, line=line_of(member)))
