"""
Tests for namespace root matching and path collection.
"""

import pytest

from nsflatten.interfaces import DiagnosticKind
from nsflatten.syntax.nodes import node_text, walk
from nsflatten.syntax.parser import parse_source
from nsflatten.transforms.namespace_paths import (
    NamespaceRecords,
    StopReason,
    collect_namespace_path,
    is_namespace_root,
)


def first_root(source, label="my"):
    root = parse_source(source).root
    for node in walk(root):
        if is_namespace_root(node, label):
            return node
    return None


def collect(source, listener=None):
    return collect_namespace_path(first_root(source), listener)


class TestIsNamespaceRoot:
    """Tests for is_namespace_root."""

    def test_object_of_member_access(self):
        assert first_root("my.name;\n") is not None

    def test_bare_identifier_is_not_a_root(self):
        assert first_root("my;\n") is None

    def test_property_with_same_name_is_not_a_root(self):
        assert first_root("other.my.name;\n") is None

    def test_other_labels_do_not_match(self):
        assert first_root("mine.name;\n") is None

    def test_consumed_root_is_skipped(self):
        node = first_root("my.name;\n")
        assert not is_namespace_root(node, "my", {node.start_byte})


class TestCollectNamespacePath:
    """Tests for the stop conditions of collect_namespace_path."""

    def test_full_chain_used_as_value(self):
        match = collect("my.name.space.Widget = 1;\n")
        assert match.path == ("my", "name", "space", "Widget")
        assert match.key == "my/name/space/Widget"
        assert match.stop_reason is StopReason.NOT_A_MEMBER
        assert node_text(match.node) == "my.name.space.Widget"

    def test_stops_before_prototype(self):
        match = collect("my.name.Widget.prototype.render = null;\n")
        assert match.path == ("my", "name", "Widget")
        assert match.stop_reason is StopReason.PROTOTYPE

    def test_stops_before_called_member(self):
        match = collect("my.util.helper();\n")
        assert match.path == ("my", "util")
        assert match.stop_reason is StopReason.CALL_TARGET

    def test_root_itself_can_be_the_path(self):
        match = collect("my.extend(A, B);\n")
        assert match.path == ("my",)
        assert node_text(match.node) == "my"

    def test_constant_after_class(self, collector):
        match = collect("x = my.name.Widget.MAX_SIZE;\n", collector)
        assert match.path == ("my", "name", "Widget")
        assert match.stop_reason is StopReason.CLASS_CONSTANT
        diagnostics = collector.of_kind(DiagnosticKind.ASSUMED_CLASS_CONSTANT)
        assert [d.message for d in diagnostics] == [
            "MAX_SIZE assumed to be constant of class my.name.Widget"
        ]
        assert diagnostics[0].line == 1

    def test_constant_stops_even_after_namespace_segment(self):
        match = collect("x = my.name.SETTINGS;\n")
        assert match.path == ("my", "name")
        assert match.stop_reason is StopReason.CLASS_CONSTANT

    def test_single_capital_letter_is_a_constant(self):
        match = collect("x = my.b.C;\n")
        assert match.path == ("my", "b")
        assert match.stop_reason is StopReason.CLASS_CONSTANT

    def test_member_after_class_like_segment(self, collector):
        match = collect("x = my.constant.MyConstants.lowerValue;\n", collector)
        assert match.path == ("my", "constant", "MyConstants")
        assert match.stop_reason is StopReason.CLASS_MEMBER
        assert collector.of_kind(DiagnosticKind.ASSUMED_CLASS_MEMBER)

    def test_computed_access_ends_the_path(self):
        match = collect("x = my.name['Widget'];\n")
        assert match.path == ("my", "name")
        assert match.stop_reason is StopReason.NOT_A_MEMBER


class TestNamespaceRecords:
    """Tests for the ordered record map."""

    def test_records_keep_discovery_order_and_group_references(self):
        root = parse_source("a = my.b.Cls; d = my.e.Fn; g = my.b.Cls;\n").root
        records = NamespaceRecords()
        consumed = set()
        for node in walk(root):
            if is_namespace_root(node, "my", consumed):
                consumed.add(node.start_byte)
                records.add(collect_namespace_path(node))

        assert records.keys() == ["my/b/Cls", "my/e/Fn"]
        assert len(records.get("my/b/Cls").reference_nodes) == 2
        assert "my/e/Fn" in records
        assert len(records) == 2

    def test_leaf_can_only_be_taken_once(self):
        records = NamespaceRecords()
        record = records.add(collect("my.b.Cls;\n"))
        assert record.take_leaf() == "Cls"
        assert record.segments == ["my", "b"]
        assert record.leaf == "Cls"
        with pytest.raises(ValueError):
            record.take_leaf()
