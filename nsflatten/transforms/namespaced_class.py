"""
transforms/namespaced_class.py

Flattens the module's own fully qualified class name.

    my.name.space.MyClass = function() {};
    my.name.space.MyClass.prototype.myMethod = function() {};

becomes

    function MyClass() {}
    MyClass.prototype.myMethod = function() {};
"""

from __future__ import annotations

import logging
from typing import Optional

from tree_sitter import Node

from ..interfaces import Diagnostic, DiagnosticKind, DiagnosticListener, LoggingDiagnosticListener
from ..syntax import builders
from ..syntax.module import JsModule
from ..syntax.nodes import (
    ASSIGNMENT_EXPRESSION,
    FUNCTION_EXPRESSIONS,
    MEMBER_EXPRESSION,
    is_assignment_target,
    is_namespaced_expression,
    line_of,
    walk,
)

logger = logging.getLogger(__name__)


class NamespacedClassFlattener:
    """
    Args:
        fully_qualified_name: Dotted class name, e.g. ``my.name.space.MyClass``.
        listener: Receives notices about shapes that were left untouched.
    """

    def __init__(self, fully_qualified_name: str, listener: Optional[DiagnosticListener] = None):
        self.namespace_parts = tuple(part for part in fully_qualified_name.split(".") if part)
        if len(self.namespace_parts) < 2:
            raise ValueError(f"'{fully_qualified_name}' is not a namespaced class name")
        self.class_name = self.namespace_parts[-1]
        self.listener = listener or LoggingDiagnosticListener()

    def apply(self, module: JsModule) -> int:
        flattened = 0
        matches = [
            node
            for node in walk(module.root_node)
            if node.type == MEMBER_EXPRESSION and is_namespaced_expression(node, self.namespace_parts)
        ]

        for node in matches:
            if self._is_constructor_assignment(node):
                if self._replace_constructor(module, node):
                    flattened += 1
                continue
            module.buffer.replace(node, builders.identifier(self.class_name))
            flattened += 1

        return flattened

    def _is_constructor_assignment(self, node: Node) -> bool:
        if not is_assignment_target(node):
            return False
        right = node.parent.child_by_field_name("right")
        return right is not None and right.type in FUNCTION_EXPRESSIONS

    def _replace_constructor(self, module: JsModule, node: Node) -> bool:
        assignment = node.parent
        statement_node = assignment.parent
        statement = module.find_statement(statement_node) if statement_node is not None else None

        if statement is None or statement_node.type != "expression_statement":
            self.listener.notify(
                Diagnostic(
                    DiagnosticKind.UNTRANSFORMED_SHAPE,
                    "Namespaced expression not transformed, grandparent node type :: "
                    f"{statement_node.type if statement_node is not None else ASSIGNMENT_EXPRESSION}",
                    line=line_of(node),
                )
            )
            return False

        function = assignment.child_by_field_name("right")
        declaration = builders.function_declaration(
            builders.identifier(self.class_name),
            builders.source_expression(function.child_by_field_name("parameters"), module.buffer),
            builders.source_expression(function.child_by_field_name("body"), module.buffer),
        )
        module.replace_statement(statement, declaration)
        logger.debug("Flattened constructor of %s", ".".join(self.namespace_parts))
        return True
