"""
Tests for the naming heuristics and identifier allocation.
"""

import pytest

from nsflatten.transforms.naming import (
    DEFAULT_RESERVED_GLOBALS,
    is_class_like_name,
    is_constant_name,
    unique_module_variable_id,
)


class TestIsConstantName:
    """Tests for is_constant_name."""

    @pytest.mark.parametrize("name", ["MAX_SIZE", "A", "_", "SOME_CONSTANT_"])
    def test_upper_case_names(self, name):
        assert is_constant_name(name)

    @pytest.mark.parametrize("name", ["MaxSize", "max", "MAX_2", "Field"])
    def test_other_names(self, name):
        assert not is_constant_name(name)

    def test_empty_name_matches(self):
        """The pattern allows zero characters."""
        assert is_constant_name("")


class TestIsClassLikeName:
    """Tests for is_class_like_name."""

    def test_capitalised_name(self):
        assert is_class_like_name("Widget")

    def test_lower_case_name(self):
        assert not is_class_like_name("widget")

    def test_underscore_prefix_counts_as_class_like(self):
        """Upper-casing '_' leaves it unchanged."""
        assert is_class_like_name("_private")

    def test_dollar_prefix_counts_as_class_like(self):
        assert is_class_like_name("$jq")


class TestUniqueModuleVariableId:
    """Tests for unique_module_variable_id."""

    def test_free_candidate_is_kept(self):
        assert unique_module_variable_id("Factory", {"Other"}) == "Factory"

    def test_first_suffix(self):
        assert unique_module_variable_id("Factory", {"Factory"}) == "Factory__1"

    def test_suffix_keeps_growing(self):
        taken = {"Factory", "Factory__1", "Factory__2"}
        assert unique_module_variable_id("Factory", taken) == "Factory__3"

    def test_identifiers_are_not_modified(self):
        taken = {"Factory"}
        unique_module_variable_id("Factory", taken)
        assert taken == {"Factory"}

    def test_default_reserved_globals(self):
        assert DEFAULT_RESERVED_GLOBALS == ("Number", "Error")
