"""Replace every occurrence of one known member expression with an identifier."""

from __future__ import annotations

import logging
from typing import Sequence

from ..syntax import builders
from ..syntax.module import JsModule
from ..syntax.nodes import MEMBER_EXPRESSION, is_namespaced_expression, walk

logger = logging.getLogger(__name__)


class FlattenMemberExpression:
    """
    Flatten ``some.call`` (given as ``["some", "call"]``) to ``newcall``.

    Only chains that spell exactly the given parts are replaced; ``some.call.x``
    becomes ``newcall.x``.
    """

    def __init__(self, member_expression_parts: Sequence[str], replacement_identifier: str):
        if len(member_expression_parts) < 2:
            raise ValueError("A member expression needs at least two parts")
        self.member_expression_parts = tuple(member_expression_parts)
        self.replacement_identifier = replacement_identifier

    def apply(self, module: JsModule) -> int:
        replaced = 0
        for node in walk(module.root_node):
            if node.type == MEMBER_EXPRESSION and is_namespaced_expression(node, self.member_expression_parts):
                module.buffer.replace(node, builders.identifier(self.replacement_identifier))
                replaced += 1

        logger.debug(
            "Flattened %d occurrences of %s to %s",
            replaced,
            ".".join(self.member_expression_parts),
            self.replacement_identifier,
        )
        return replaced
