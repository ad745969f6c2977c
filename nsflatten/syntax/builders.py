"""
Builders for synthesized JavaScript nodes.

Every builder returns a fresh node instance; callers that need the same
identifier at several sites must call `identifier` once per site.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, List, Optional, Union

from .module import Comment, SourceBuffer, Statement, SyntheticNode

if TYPE_CHECKING:
    from tree_sitter import Node


class Identifier(SyntheticNode):
    def __init__(self, name: str):
        self.name = name

    def to_source(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Identifier({self.name!r})"


class StringLiteral(SyntheticNode):
    def __init__(self, value: str):
        self.value = value

    def to_source(self) -> str:
        return json.dumps(self.value)


class SourceExpression(SyntheticNode):
    """An original expression, rendered with any replacements made inside it."""

    def __init__(self, node: "Node", buffer: SourceBuffer):
        self.node = node
        self.buffer = buffer

    def to_source(self) -> str:
        return self.buffer.render_node(self.node)


class MemberExpression(SyntheticNode):
    def __init__(self, obj: SyntheticNode, prop: Identifier):
        self.object = obj
        self.property = prop

    def to_source(self) -> str:
        return f"{self.object.to_source()}.{self.property.to_source()}"


class CallExpression(SyntheticNode):
    def __init__(self, callee: SyntheticNode, arguments: List[SyntheticNode]):
        self.callee = callee
        self.arguments = arguments

    def to_source(self) -> str:
        args = ", ".join(argument.to_source() for argument in self.arguments)
        return f"{self.callee.to_source()}({args})"


class AssignmentExpression(SyntheticNode):
    def __init__(self, operator: str, left: SyntheticNode, right: SyntheticNode):
        self.operator = operator
        self.left = left
        self.right = right

    def to_source(self) -> str:
        return f"{self.left.to_source()} {self.operator} {self.right.to_source()}"


class ExpressionStatement(Statement):
    def __init__(self, expression: SyntheticNode, leading_comments: Optional[List[Comment]] = None):
        self.expression = expression
        self._init_layout(leading_comments)

    def to_source(self) -> str:
        return f"{self.expression.to_source()};"


class VariableDeclaration(Statement):
    """A single-declarator `var` statement."""

    def __init__(self, kind: str, name: Identifier, init: Optional[SyntheticNode] = None):
        self.kind = kind
        self.name = name
        self.init = init
        self._init_layout()

    def to_source(self) -> str:
        if self.init is None:
            return f"{self.kind} {self.name.to_source()};"
        return f"{self.kind} {self.name.to_source()} = {self.init.to_source()};"


class FunctionDeclaration(Statement):
    """`function name(params) body` built from original parameter and body nodes."""

    def __init__(self, name: Identifier, params: SourceExpression, body: SourceExpression):
        self.name = name
        self.params = params
        self.body = body
        self._init_layout()

    def to_source(self) -> str:
        return f"function {self.name.to_source()}{self.params.to_source()} {self.body.to_source()}"


def identifier(name: str) -> Identifier:
    return Identifier(name)


def string_literal(value: str) -> StringLiteral:
    return StringLiteral(value)


def source_expression(node: "Node", buffer: SourceBuffer) -> SourceExpression:
    return SourceExpression(node, buffer)


def member_expression(obj: Union[SyntheticNode, str], prop: Union[Identifier, str]) -> MemberExpression:
    if isinstance(obj, str):
        obj = Identifier(obj)
    if isinstance(prop, str):
        prop = Identifier(prop)
    return MemberExpression(obj, prop)


def call_expression(callee: SyntheticNode, *arguments: SyntheticNode) -> CallExpression:
    return CallExpression(callee, list(arguments))


def assignment_expression(operator: str, left: SyntheticNode, right: SyntheticNode) -> AssignmentExpression:
    return AssignmentExpression(operator, left, right)


def expression_statement(expression: SyntheticNode) -> ExpressionStatement:
    return ExpressionStatement(expression)


def variable_declaration(kind: str, name: Identifier, init: Optional[SyntheticNode] = None) -> VariableDeclaration:
    return VariableDeclaration(kind, name, init)


def function_declaration(name: Identifier, params: SourceExpression, body: SourceExpression) -> FunctionDeclaration:
    return FunctionDeclaration(name, params, body)


def create_require_declaration(local_name: Union[Identifier, str], module_path: str) -> VariableDeclaration:
    """Build `var <local_name> = require("<module_path>");`."""
    if isinstance(local_name, str):
        local_name = identifier(local_name)
    require_call = call_expression(identifier("require"), string_literal(module_path))
    return variable_declaration("var", local_name, require_call)


def create_export_statement(exported: SyntheticNode) -> ExpressionStatement:
    """Build `module.exports = <exported>;`."""
    exports = member_expression("module", "exports")
    return expression_statement(assignment_expression("=", exports, exported))
