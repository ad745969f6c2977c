"""
transforms/root_namespace.py

Converts every expression rooted at one of the tracked namespace roots into a
flat identifier backed by a CommonJS require.

Given ``namespace_roots=["my"]`` the module

    my.name.space.Widget = function() {
        this.factory = new my.other.Factory();
    };

becomes

    var Factory = require("my/other/Factory");
    var Widget = require("my/name/space/Widget");
    Widget = function() {
        this.factory = new Factory();
    };
    module.exports = Widget;

The transform runs in two passes over one module:

1. A single walk collects namespaced paths, every declared variable and
   function name, and whether the module already assigns ``module.exports``.
2. Root comments are moved onto the first statement, reserved globals are
   added to the taken names, the export is resolved, a collision-free local
   name is allocated per path, and then one require is front-inserted and all
   occurrences rewritten per path.

Requires are front-inserted in discovery order, so the printed requires appear
in the reverse of the order their paths were first seen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from tree_sitter import Node

from ..interfaces import Diagnostic, DiagnosticKind, DiagnosticListener, LoggingDiagnosticListener
from ..syntax import builders
from ..syntax.module import JsModule, SourceStatement
from ..syntax.nodes import (
    IDENTIFIER,
    first_named_child,
    is_assignment_target,
    is_object_of_parent,
    member_property_name,
    node_text,
    walk,
)
from .namespace_paths import NamespaceRecord, NamespaceRecords, collect_namespace_path, is_namespace_root
from .naming import DEFAULT_RESERVED_GLOBALS, unique_module_variable_id

logger = logging.getLogger(__name__)

DECLARATION_TYPES = frozenset(
    {"function_declaration", "generator_function_declaration", "class_declaration"}
)


@dataclass
class ModuleScan:
    """Everything the first pass learns about a module."""

    records: NamespaceRecords = field(default_factory=NamespaceRecords)
    declared_identifiers: Set[str] = field(default_factory=set)
    module_exports: List[Node] = field(default_factory=list)

    @property
    def has_module_export(self) -> bool:
        return bool(self.module_exports)


@dataclass
class TransformReport:
    """What `RootNamespaceTransform.apply` did to a module."""

    module_variable_ids: Dict[str, str] = field(default_factory=dict)
    references_rewritten: int = 0
    export_added: bool = False
    comments_relocated: bool = False

    @property
    def requires_added(self) -> int:
        return len(self.module_variable_ids)


def is_module_exports_assignment(identifier_node: Node) -> bool:
    """True for the ``module`` of an assignment to ``module.exports``."""
    if identifier_node.type != IDENTIFIER or node_text(identifier_node) != "module":
        return False
    if not is_object_of_parent(identifier_node):
        return False
    member = identifier_node.parent
    return member_property_name(member) == "exports" and is_assignment_target(member)


def _declared_name(node: Node) -> Optional[str]:
    if node.type in DECLARATION_TYPES or node.type == "variable_declarator":
        name = node.child_by_field_name("name")
        if name is not None and name.type == IDENTIFIER:
            return node_text(name)
    return None


def scan_module(
    root: Node, namespace_roots: Iterable[str], listener: Optional[DiagnosticListener] = None
) -> ModuleScan:
    """First pass: one depth-first walk of the whole tree."""
    scan = ModuleScan()
    roots = list(namespace_roots)
    consumed: Set[int] = set()

    for node in walk(root):
        declared = _declared_name(node)
        if declared is not None:
            scan.declared_identifiers.add(declared)
            continue

        if node.type != IDENTIFIER:
            continue

        for root_label in roots:
            if is_namespace_root(node, root_label, consumed):
                consumed.add(node.start_byte)
                scan.records.add(collect_namespace_path(node, listener))

        if is_module_exports_assignment(node):
            scan.module_exports.append(node)

    return scan


def move_root_comments_into_body(module: JsModule) -> bool:
    """
    Move root document comments onto the first statement if it has none.

    Requires are inserted in front of the first statement afterwards, so the
    comments stay with the code they document.
    """
    if not module.root_comments or not module.statements:
        return False
    first = module.statements[0]
    if first.has_comments:
        return False
    first.leading_comments = module.root_comments
    module.root_comments = []
    return True


def insert_exports_statement(module: JsModule, class_name: str) -> None:
    """
    Append ``module.exports = ...``.

    A trailing top-level ``return expr;`` is removed and ``expr`` exported;
    otherwise the class name is exported.
    """
    last = module.statements[-1] if module.statements else None
    exported = None
    carried = None

    if isinstance(last, SourceStatement) and last.type == "return_statement":
        argument = first_named_child(last.node)
        if argument is not None:
            exported = builders.source_expression(argument, module.buffer)
        module.remove(last)
        carried = last

    statement = builders.create_export_statement(exported or builders.identifier(class_name))
    if carried is not None:
        statement.leading_comments = carried.leading_comments
        statement.trailing_comment = carried.trailing_comment
        statement.blank_line_before = carried.blank_line_before
    module.append(statement)


def find_unique_identifiers_for_modules(records: Iterable[NamespaceRecord], identifiers: Set[str]) -> None:
    """Give every record a local name not already in `identifiers`, in record order."""
    for record in records:
        candidate = record.take_leaf()
        module_variable_id = unique_module_variable_id(candidate, identifiers)
        identifiers.add(module_variable_id)
        record.module_variable_id = module_variable_id
        if module_variable_id != candidate:
            logger.debug("Renamed %s to %s to avoid a clash", record.key, module_variable_id)


def transform_namespaced_expressions(module: JsModule, records: Iterable[NamespaceRecord]) -> int:
    """Front-insert a require per record and rewrite each of its references."""
    rewritten = 0
    for record in records:
        module.prepend(builders.create_require_declaration(record.module_variable_id, record.key))
        for node in record.reference_nodes:
            module.buffer.replace(node, builders.identifier(record.module_variable_id))
            rewritten += 1
    return rewritten


class RootNamespaceTransform:
    """
    Flattens namespaced expressions under the given roots into required modules.

    Args:
        namespace_roots: Top level labels, e.g. ``["my", "other"]``.
        class_name: Name exported when the module has no export and no trailing return.
        insert_export: Whether a missing ``module.exports`` should be added.
        reserved_globals: Names allocated identifiers must never take.
        listener: Receives heuristic classification notices.
    """

    def __init__(
        self,
        namespace_roots: Iterable[str],
        class_name: str,
        insert_export: bool = True,
        reserved_globals: Iterable[str] = DEFAULT_RESERVED_GLOBALS,
        listener: Optional[DiagnosticListener] = None,
    ):
        self.namespace_roots = list(namespace_roots)
        self.class_name = class_name
        self.insert_export = insert_export
        self.reserved_globals = list(reserved_globals)
        self.listener = listener or LoggingDiagnosticListener()

    def apply(self, module: JsModule) -> TransformReport:
        report = TransformReport()
        if module.root_node is None:
            raise ValueError("Module has no syntax tree to transform")

        scan = scan_module(module.root_node, self.namespace_roots, self.listener)
        identifiers = set(scan.declared_identifiers)

        report.comments_relocated = move_root_comments_into_body(module)
        identifiers.update(self.reserved_globals)

        if self.insert_export and not scan.has_module_export:
            insert_exports_statement(module, self.class_name)
            report.export_added = True
            self.listener.notify(
                Diagnostic(DiagnosticKind.EXPORT_ADDED, f"Added module export for {self.class_name}")
            )

        find_unique_identifiers_for_modules(scan.records, identifiers)
        report.references_rewritten = transform_namespaced_expressions(module, scan.records)
        report.module_variable_ids = {
            record.key: record.module_variable_id for record in scan.records
        }

        logger.debug(
            "Flattened %d namespaces (%d references) under roots %s",
            len(scan.records),
            report.references_rewritten,
            self.namespace_roots,
        )
        return report
