"""Tests for canonlint.engine.patterns — color and layout token matchers."""

from __future__ import annotations

from canonlint.engine.patterns import (
    COLOR_FAMILIES,
    DEFAULT_PATTERNS,
    build_pattern_table,
    has_grid_class,
)


class TestRawColors:
    def test_one_match_per_raw_token(self) -> None:
        assert DEFAULT_PATTERNS.find_raw_colors(["bg-gray-500", "bg-accent"]) == ["bg-gray-500"]

    def test_shadeless_family(self) -> None:
        assert DEFAULT_PATTERNS.find_raw_colors(["text-white", "text-contrast"]) == ["text-white"]

    def test_variant_prefix(self) -> None:
        matches = DEFAULT_PATTERNS.find_raw_colors(["hover:border-slate-200", "md:p-4"])
        assert matches == ["border-slate-200"]

    def test_gradient_stops(self) -> None:
        matches = DEFAULT_PATTERNS.find_raw_colors(["from-red-500", "via-blue-100", "to-black"])
        assert matches == ["from-red-500", "via-blue-100", "to-black"]

    def test_every_occurrence_reported(self) -> None:
        matches = DEFAULT_PATTERNS.find_raw_colors(["bg-gray-500", "p-4", "bg-gray-500"])
        assert matches == ["bg-gray-500", "bg-gray-500"]

    def test_allow_list(self) -> None:
        matches = DEFAULT_PATTERNS.find_raw_colors(
            ["text-white", "bg-black"], allowed=["text-white"]
        )
        assert matches == ["bg-black"]

    def test_semantic_tokens_pass(self) -> None:
        semantic = ["bg-accent", "text-body", "border-contrast"]
        assert DEFAULT_PATTERNS.find_raw_colors(semantic) == []

    def test_custom_families(self) -> None:
        table = build_pattern_table(families=["brand"])
        assert table.find_raw_colors(["bg-brand-500", "bg-gray-500"]) == ["bg-brand-500"]

    def test_default_families_cover_neutrals(self) -> None:
        assert {"gray", "slate", "zinc", "neutral", "stone"} <= set(COLOR_FAMILIES)


class TestArbitraryColors:
    def test_hex(self) -> None:
        assert DEFAULT_PATTERNS.find_arbitrary_colors(["bg-[#ff0000]", "p-4"]) == ["bg-[#ff0000]"]

    def test_functions(self) -> None:
        class_tokens = [
            "text-[rgb(0,0,0)]",
            "border-[hsla(0,0%,0%,0.5)]",
            "bg-[oklch(70%_0.1_200)]",
        ]
        assert DEFAULT_PATTERNS.find_arbitrary_colors(class_tokens) == class_tokens

    def test_case_insensitive(self) -> None:
        assert DEFAULT_PATTERNS.find_arbitrary_colors(["BG-[#FFF]"]) == ["BG-[#FFF]"]

    def test_unapproved_var(self) -> None:
        assert DEFAULT_PATTERNS.find_arbitrary_colors(["bg-[var(--brand)]"]) == [
            "bg-[var(--brand)]"
        ]

    def test_approved_var_namespace(self) -> None:
        assert DEFAULT_PATTERNS.find_arbitrary_colors(["bg-[var(--color-accent)]"]) == []

    def test_non_color_arbitrary_value(self) -> None:
        assert DEFAULT_PATTERNS.find_arbitrary_colors(["w-[320px]", "grid-cols-[1fr_2fr]"]) == []

    def test_allow_list(self) -> None:
        assert DEFAULT_PATTERNS.find_arbitrary_colors(["bg-[#000]"], allowed=["bg-[#000]"]) == []


class TestGridClass:
    def test_standalone_grid(self) -> None:
        assert has_grid_class(["grid", "gap-4"]) is True

    def test_grid_cols(self) -> None:
        assert has_grid_class(["md:flex", "grid-cols-3"]) is True

    def test_other_grid_utilities(self) -> None:
        assert has_grid_class(["grid-flow-row", "grid-area", "my-grid"]) is False
