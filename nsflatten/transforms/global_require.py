"""
transforms/global_require.py

Adds CommonJS requires for library globals used by a module.

With ``{("jQuery",): "jquery"}`` a module using ``jQuery(...)`` gains
``var jQuery = require("jquery");``. Sequences can span several levels and
calls: ``("moment", "()", "tz")`` matches ``moment().tz`` and requires
``moment-timezone`` under the name ``moment``.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Mapping, Optional, Sequence, Tuple

from tree_sitter import Node

from ..interfaces import Diagnostic, DiagnosticKind, DiagnosticListener, LoggingDiagnosticListener
from ..syntax import builders
from ..syntax.module import JsModule
from ..syntax.nodes import (
    CALL_EXPRESSION,
    IDENTIFIER,
    PROPERTY_IDENTIFIER,
    is_member_expression,
    is_object_of_parent,
    member_object,
    node_text,
    walk,
)

logger = logging.getLogger(__name__)

CALL_SEGMENT = "()"

IdentifierSequence = Tuple[str, ...]


def parse_identifier_sequence(dotted: str) -> IdentifierSequence:
    """``"moment.().tz"`` -> ``("moment", "()", "tz")``."""
    parts = tuple(part.strip() for part in dotted.split(".") if part.strip())
    if not parts or parts[0] == CALL_SEGMENT:
        raise ValueError(f"Invalid global identifier sequence: {dotted!r}")
    return parts


def _next_node(node: Node, sequence: IdentifierSequence) -> Optional[Tuple[Node, IdentifierSequence]]:
    parent = node.parent
    if not is_member_expression(parent):
        return None

    remaining = sequence[:-1]
    obj = member_object(parent)
    if obj is not None and obj.type == CALL_EXPRESSION and remaining and remaining[-1] == CALL_SEGMENT:
        return obj.child_by_field_name("function"), remaining[:-1]
    return obj, remaining


def is_standalone_identifier(node: Node) -> bool:
    """
    An identifier that is not part of a larger expression by coincidence.

    ``my.expression.jQuery`` must not match the jQuery library.
    """
    parent = node.parent
    if parent is None:
        return False
    if parent.type == CALL_EXPRESSION:
        return True
    if is_member_expression(parent):
        return is_object_of_parent(node)
    return False


def is_identifier_to_require(node: Optional[Node], sequence: IdentifierSequence) -> bool:
    if node is None or node.type not in (IDENTIFIER, PROPERTY_IDENTIFIER) or not sequence:
        return False
    if node_text(node) != sequence[-1]:
        return False

    if len(sequence) > 1:
        following = _next_node(node, sequence)
        if following is None:
            return False
        return is_identifier_to_require(*following)

    return node.type == IDENTIFIER and is_standalone_identifier(node)


class AddRequireForGlobalIdentifier:
    """
    Args:
        identifiers_to_require: Identifier sequence -> module id to require.
        listener: Receives a notice per require added.
    """

    def __init__(
        self,
        identifiers_to_require: Mapping[Sequence[str], str],
        listener: Optional[DiagnosticListener] = None,
    ):
        self.identifiers_to_require: Dict[IdentifierSequence, str] = {
            tuple(sequence): module_id for sequence, module_id in identifiers_to_require.items()
        }
        self.listener = listener or LoggingDiagnosticListener()

    def apply(self, module: JsModule) -> int:
        matched: "OrderedDict[IdentifierSequence, None]" = OrderedDict()

        for node in walk(module.root_node):
            for sequence in self.identifiers_to_require:
                if is_identifier_to_require(node, sequence):
                    matched[sequence] = None

        for sequence in matched:
            module_id = self.identifiers_to_require[sequence]
            module.prepend(builders.create_require_declaration(sequence[0], module_id))
            self.listener.notify(
                Diagnostic(
                    DiagnosticKind.REQUIRE_ADDED,
                    f"Adding require for {module_id} with variable name {sequence[0]}",
                )
            )

        return len(matched)
