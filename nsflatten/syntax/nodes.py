"""Helpers for inspecting tree-sitter JavaScript nodes.

The helpers are pure: they never modify the tree and only rely on node types
and field names of the tree-sitter JavaScript grammar.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence

from tree_sitter import Node

MEMBER_EXPRESSION = "member_expression"
CALL_EXPRESSION = "call_expression"
IDENTIFIER = "identifier"
PROPERTY_IDENTIFIER = "property_identifier"
ASSIGNMENT_EXPRESSION = "assignment_expression"
FUNCTION_EXPRESSIONS = frozenset({"function_expression", "function"})


def node_text(node: Node) -> str:
    """Source text covered by `node`."""
    return node.text.decode("utf-8") if node.text is not None else ""


def same_node(first: Optional[Node], second: Optional[Node]) -> bool:
    if first is None or second is None:
        return False
    return (first.start_byte, first.end_byte, first.type) == (
        second.start_byte,
        second.end_byte,
        second.type,
    )


def walk(node: Node) -> Iterator[Node]:
    """Depth-first, pre-order, top-to-bottom traversal of `node` and its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def is_member_expression(node: Optional[Node]) -> bool:
    return node is not None and node.type == MEMBER_EXPRESSION


def member_object(node: Node) -> Optional[Node]:
    return node.child_by_field_name("object")


def member_property_name(node: Node) -> Optional[str]:
    """Name of a non-computed property access (`a.b` -> `b`), else None."""
    prop = node.child_by_field_name("property")
    if prop is None or prop.type != PROPERTY_IDENTIFIER:
        return None
    return node_text(prop)


def is_object_of_parent(node: Node) -> bool:
    """True if `node` is the object (left-hand side) of its parent member access."""
    parent = node.parent
    return is_member_expression(parent) and same_node(member_object(parent), node)


def is_call_target(node: Node) -> bool:
    """True if `node` is the callee of the call expression that encloses it."""
    parent = node.parent
    return (
        parent is not None
        and parent.type == CALL_EXPRESSION
        and same_node(parent.child_by_field_name("function"), node)
    )


def is_assignment_target(node: Node) -> bool:
    parent = node.parent
    return (
        parent is not None
        and parent.type == ASSIGNMENT_EXPRESSION
        and same_node(parent.child_by_field_name("left"), node)
    )


def is_namespaced_expression(node: Optional[Node], path: Sequence[str]) -> bool:
    """
    Check that `node` spells exactly the dotted `path`.

    `path` is root first, e.g. ``("my", "name", "Class")`` matches the
    expression ``my.name.Class`` and nothing longer or shorter.
    """
    if node is None or not path:
        return False

    *container, leaf = path
    if node.type == IDENTIFIER:
        return not container and node_text(node) == leaf
    if node.type == MEMBER_EXPRESSION:
        return (
            bool(container)
            and member_property_name(node) == leaf
            and is_namespaced_expression(member_object(node), container)
        )
    return False


def first_named_child(node: Node, skip: Sequence[str] = ("comment",)) -> Optional[Node]:
    for child in node.named_children:
        if child.type not in skip:
            return child
    return None


def line_of(node: Node) -> int:
    """1-based line number of `node`."""
    return node.start_point[0] + 1
