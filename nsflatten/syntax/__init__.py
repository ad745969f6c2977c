"""
Tree representation for nsflatten

Parses JavaScript with tree-sitter and exposes a mutable, statement-level
module model that transforms edit in place and print back to source.
"""

from .module import (
    Comment,
    JsModule,
    JsSyntaxError,
    NodeReplacementError,
    SourceBuffer,
    SourceStatement,
    Statement,
    TransformError,
)
from .parser import ParsedSource, is_valid_source, load_module, parse_source
from .nodes import is_namespaced_expression
from .builders import create_export_statement, create_require_declaration

__all__ = [
    "Comment",
    "JsModule",
    "JsSyntaxError",
    "NodeReplacementError",
    "SourceBuffer",
    "SourceStatement",
    "Statement",
    "TransformError",
    "ParsedSource",
    "is_valid_source",
    "load_module",
    "parse_source",
    "is_namespaced_expression",
    "create_export_statement",
    "create_require_declaration",
]
