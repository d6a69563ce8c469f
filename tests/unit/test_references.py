"""
Tests for reference resolution.

Tests cover:
- Literal pass-through and chained references
- Mode shorthand for scale steps and alpha steps
- Cycle, depth, unsafe and invalid path failures
- Per-entry isolation in resolve_set
"""

import pytest

from themeforge.core.errors import (
    CircularReferenceError,
    InvalidReferencePathError,
    MaxDepthExceededError,
    ReferenceResolutionError,
    UnsafeReferencePathError,
)
from themeforge.core.references import (
    expand_mode_shorthand,
    is_unsafe_segment,
    resolve_reference,
    resolve_set,
)


class TestResolveReference:
    """Test following $ref chains."""

    def test_literal_is_returned_unchanged(self, v2_theme):
        value = "210 40% 98%"
        assert resolve_reference(value, v2_theme) is value

    def test_full_path(self, v2_data):
        ref = {"$ref": "scales.teal.steps.light.9"}
        assert resolve_reference(ref, v2_data) == "173 60% 37%"

    def test_step_shorthand_uses_mode(self, v2_data):
        ref = {"$ref": "scales.teal.9"}
        assert resolve_reference(ref, v2_data, "light") == "173 60% 37%"
        assert resolve_reference(ref, v2_data, "dark") == "173 60% 63%"

    def test_alpha_shorthand(self, v2_data):
        ref = {"$ref": "scales.teal.a3"}
        assert resolve_reference(ref, v2_data, "dark") == "173 60% 50% / 0.15"

    def test_shorthand_without_mode_is_invalid(self, v2_data):
        with pytest.raises(InvalidReferencePathError):
            resolve_reference({"$ref": "scales.teal.9"}, v2_data)

    def test_chained_reference(self, v2_theme):
        ref = {"$ref": "semanticTokens.light.card-foreground"}
        assert resolve_reference(ref, v2_theme, "light") == "222 47% 11%"

    def test_resolution_is_deterministic(self, v2_theme):
        ref = {"$ref": "semanticTokens.dark.primary"}
        first = resolve_reference(ref, v2_theme, "dark")
        second = resolve_reference(ref, v2_theme, "dark")
        assert first == second == "173 60% 63%"

    def test_list_index_segment(self):
        tree = {"palette": ["0 0% 0%", "0 0% 100%"]}
        assert resolve_reference({"$ref": "palette.1"}, tree) == "0 0% 100%"


class TestResolutionFailures:
    """Test that malformed documents fail instead of looping."""

    def test_two_node_cycle(self):
        tree = {"tokens": {"a": {"$ref": "tokens.b"}, "b": {"$ref": "tokens.a"}}}
        with pytest.raises(CircularReferenceError) as exc_info:
            resolve_reference({"$ref": "tokens.a"}, tree)
        assert exc_info.value.path == "tokens.a"
        assert "tokens.a -> tokens.b -> tokens.a" in exc_info.value.message

    def test_self_reference(self):
        tree = {"a": {"$ref": "a"}}
        with pytest.raises(CircularReferenceError):
            resolve_reference({"$ref": "a"}, tree)

    def test_missing_segment(self, v2_data):
        with pytest.raises(InvalidReferencePathError) as exc_info:
            resolve_reference({"$ref": "scales.purple.steps.light.9"}, v2_data)
        assert exc_info.value.segment == "purple"

    def test_non_string_path(self):
        with pytest.raises(InvalidReferencePathError):
            resolve_reference({"$ref": 42}, {})

    def test_empty_path(self):
        with pytest.raises(InvalidReferencePathError):
            resolve_reference({"$ref": "  "}, {})

    @pytest.mark.parametrize("path", ["__proto__.polluted", "a.constructor", "__class__"])
    def test_unsafe_segments(self, path):
        tree = {"a": {"constructor": "x"}, "__class__": "y"}
        with pytest.raises(UnsafeReferencePathError):
            resolve_reference({"$ref": path}, tree)

    def test_depth_bound(self):
        tree = {f"n{i}": {"$ref": f"n{i + 1}"} for i in range(20)}
        tree["n20"] = "0 0% 0%"
        with pytest.raises(MaxDepthExceededError) as exc_info:
            resolve_reference({"$ref": "n0"}, tree, max_depth=5)
        assert exc_info.value.max_depth == 5

    def test_chain_within_depth(self):
        tree = {f"n{i}": {"$ref": f"n{i + 1}"} for i in range(5)}
        tree["n5"] = "0 0% 0%"
        assert resolve_reference({"$ref": "n0"}, tree) == "0 0% 0%"

    def test_all_failures_share_base_class(self):
        for error in (
            CircularReferenceError("a", ["b"]),
            InvalidReferencePathError("a"),
            UnsafeReferencePathError("a", "__proto__"),
            MaxDepthExceededError("a", 3),
        ):
            assert isinstance(error, ReferenceResolutionError)


class TestShorthand:
    """Test scale shorthand expansion."""

    def test_step(self):
        assert expand_mode_shorthand("scales.blue.9", "light") == "scales.blue.steps.light.9"

    def test_alpha(self):
        assert expand_mode_shorthand("scales.blue.a4", "dark") == "scales.blue.alpha.dark.4"

    def test_other_paths_untouched(self):
        assert expand_mode_shorthand("semanticTokens.light.primary", "light") == (
            "semanticTokens.light.primary"
        )
        assert expand_mode_shorthand("scales.blue.hue", "light") == "scales.blue.hue"

    def test_no_mode(self):
        assert expand_mode_shorthand("scales.blue.9", None) == "scales.blue.9"

    def test_dunder_names_are_unsafe(self):
        assert is_unsafe_segment("__init__")
        assert is_unsafe_segment("prototype")
        assert not is_unsafe_segment("primary")


class TestResolveSet:
    """Test bulk resolution."""

    def test_failures_are_isolated(self, v2_data):
        group = {
            "primary": {"$ref": "scales.teal.9"},
            "broken": {"$ref": "scales.missing.9"},
            "plain": "0 0% 100%",
        }
        result = resolve_set(group, v2_data, "light", label="semanticTokens.light")

        assert result.values["primary"] == "173 60% 37%"
        assert result.values["plain"] == "0 0% 100%"
        assert result.values["broken"] == {"$ref": "scales.missing.9"}
        assert list(result.failures) == ["broken"]
        assert not result.ok
        assert len(result.warnings) == 1
        assert "semanticTokens.light.broken" in result.warnings[0]

    def test_empty_group(self, v2_data):
        result = resolve_set(None, v2_data)
        assert result.values == {}
        assert result.ok
