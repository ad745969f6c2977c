"""
Tests for the tree-sitter backed module model.
"""

import pytest

from nsflatten.syntax import builders
from nsflatten.syntax.module import JsSyntaxError, NodeReplacementError, TransformError
from nsflatten.syntax.nodes import (
    is_call_target,
    is_namespaced_expression,
    is_object_of_parent,
    member_property_name,
    node_text,
    walk,
)
from nsflatten.syntax.parser import is_valid_source, load_module, parse_source


def find_node(root, node_type, text):
    for node in walk(root):
        if node.type == node_type and node_text(node) == text:
            return node
    raise AssertionError(f"No {node_type} node spelling {text!r}")


class TestParseSource:
    """Tests for parse_source and is_valid_source."""

    def test_parses_program(self):
        parsed = parse_source("var a = 1;\n")
        assert parsed.root.type == "program"
        assert parsed.source == b"var a = 1;\n"

    def test_syntax_error_reports_position(self):
        with pytest.raises(JsSyntaxError) as excinfo:
            parse_source("var a = 1;\nvar = ;\n")
        assert excinfo.value.line == 2
        assert excinfo.value.column >= 1

    def test_syntax_error_is_a_transform_error(self):
        assert issubclass(JsSyntaxError, TransformError)

    def test_is_valid_source(self):
        assert is_valid_source("a.b.c = function() {};")
        assert not is_valid_source("a.b.c = function( {};")


class TestNodeHelpers:
    """Tests for the pure node predicates."""

    def test_walk_is_pre_order(self):
        root = parse_source("a.b;\n").root
        types = [node.type for node in walk(root)]
        assert types[0] == "program"
        assert types.index("member_expression") < types.index("identifier")

    def test_namespaced_expression_matches_exact_chain(self):
        root = parse_source("my.name.Class;\n").root
        node = find_node(root, "member_expression", "my.name.Class")
        assert is_namespaced_expression(node, ("my", "name", "Class"))
        assert not is_namespaced_expression(node, ("my", "name"))
        assert not is_namespaced_expression(node, ("name", "Class"))
        assert not is_namespaced_expression(node, ("my", "name", "Class", "x"))

    def test_member_helpers(self):
        root = parse_source("my.call(1);\n").root
        member = find_node(root, "member_expression", "my.call")
        my = find_node(root, "identifier", "my")
        assert member_property_name(member) == "call"
        assert is_call_target(member)
        assert is_object_of_parent(my)

    def test_computed_property_has_no_name(self):
        root = parse_source("my['name'];\n").root
        node = next(n for n in walk(root) if n.type == "subscript_expression")
        assert member_property_name(node) is None


class TestLoadModule:
    """Tests for statement splitting and comment attachment."""

    SOURCE = "// header\n\n// leads a\nvar a = 1; // trailing\n\nvar b = 2;\n// tail\n"

    def test_round_trip_preserves_layout(self):
        assert load_module(self.SOURCE).render() == self.SOURCE

    def test_comment_ownership(self):
        module = load_module(self.SOURCE)
        first, second = module.statements

        assert [c.text for c in module.root_comments] == ["// header"]
        assert [c.text for c in first.leading_comments] == ["// leads a"]
        assert first.trailing_comment == "// trailing"
        assert second.blank_line_before
        assert [c.text for c in module.trailing_comments] == ["// tail"]

    def test_comment_separated_by_blank_line_belongs_to_root(self):
        module = load_module("/** doc */\n\nvar a;\n")
        assert [c.text for c in module.root_comments] == ["/** doc */"]
        assert module.statements[0].leading_comments == []
        assert module.statements[0].blank_line_before

    def test_attached_comment_belongs_to_statement(self):
        module = load_module("/** doc */\nvar a;\n")
        assert module.root_comments == []
        assert [c.text for c in module.statements[0].leading_comments] == ["/** doc */"]

    def test_empty_module(self):
        module = load_module("")
        assert len(module.statements) == 0
        assert module.render() == ""

    def test_hashbang_is_kept_above_prepended_statements(self):
        module = load_module("#!/usr/bin/env node\n\nvar a;\n")
        module.prepend(builders.create_require_declaration("B", "lib/B"))
        assert module.hashbang == "#!/usr/bin/env node"
        assert module.render() == '#!/usr/bin/env node\nvar B = require("lib/B");\n\nvar a;\n'

    def test_crlf_round_trip(self):
        source = "// header\r\n\r\nvar a = 1; // one\r\nvar b = 2;\r\n"
        module = load_module(source)
        assert module.newline == "\r\n"
        assert module.render() == source

    def test_prepend_is_rendered_first(self):
        module = load_module("var a;\n")
        module.prepend(builders.create_require_declaration("B", "lib/B"))
        assert module.render() == 'var B = require("lib/B");\nvar a;\n'


class TestSourceBuffer:
    """Tests for buffered node replacement."""

    def test_replacement_is_rendered(self):
        module = load_module("new my.other.Factory();\n")
        node = find_node(module.root_node, "member_expression", "my.other.Factory")
        module.buffer.replace(node, builders.identifier("Factory"))
        assert module.render() == "new Factory();\n"

    def test_source_is_untouched_until_render(self):
        module = load_module("a.b;\n")
        node = find_node(module.root_node, "member_expression", "a.b")
        module.buffer.replace(node, builders.identifier("c"))
        assert module.buffer.source == b"a.b;\n"
        assert len(module.buffer.replacements) == 1

    def test_replacing_twice_fails(self):
        module = load_module("a.b;\n")
        node = find_node(module.root_node, "member_expression", "a.b")
        module.buffer.replace(node, builders.identifier("c"))
        with pytest.raises(NodeReplacementError):
            module.buffer.replace(node, builders.identifier("d"))

    def test_replacing_inside_a_replaced_node_fails(self):
        module = load_module("a.b.c;\n")
        outer = find_node(module.root_node, "member_expression", "a.b.c")
        inner = find_node(module.root_node, "member_expression", "a.b")
        module.buffer.replace(outer, builders.identifier("x"))
        with pytest.raises(NodeReplacementError):
            module.buffer.replace(inner, builders.identifier("y"))


class TestBuilders:
    """Tests for synthesized nodes."""

    def test_require_declaration(self):
        statement = builders.create_require_declaration("Factory", "my/other/Factory")
        assert statement.to_source() == 'var Factory = require("my/other/Factory");'

    def test_export_statement(self):
        statement = builders.create_export_statement(builders.identifier("Widget"))
        assert statement.to_source() == "module.exports = Widget;"

    def test_identifiers_are_distinct_instances(self):
        assert builders.identifier("A") is not builders.identifier("A")

    def test_call_expression(self):
        call = builders.call_expression(
            builders.member_expression("a", "b"), builders.string_literal("x")
        )
        assert call.to_source() == 'a.b("x")'
