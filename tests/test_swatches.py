"""
Unit tests for swatch reduction and the ordered swatch stack.
"""

import pytest

from palettesmith.services.colors.space import InvalidColorFormat
from palettesmith.services.colors.swatches import (
    Swatch, build_swatch_stack, is_neutral, reduce_swatches
)
from palettesmith.services.colors.tokens import ThemeTokenSet, derive_tokens

GRAYS = ["#000000", "#222222", "#444444", "#666666", "#888888", "#AAAAAA", "#CCCCCC", "#EEEEEE"]


class TestNearDuplicates:
    """Near-duplicate colors collapse onto the first occurrence."""

    def test_exact_and_near_duplicates_dropped(self):
        reduced = reduce_swatches([("A", "#FF0000"), ("B", "#ff0000"), ("C", "#FF0001")], cap=8, threshold=2.0)
        assert reduced == [Swatch("A", "#FF0000")]

    def test_threshold_zero_keeps_distinct_hexes(self):
        reduced = reduce_swatches([("A", "#FF0000"), ("B", "#FF0000"), ("C", "#FF0001")], cap=8, threshold=0.0)
        assert [s.hex for s in reduced] == ["#FF0000", "#FF0001"]

    def test_distant_colors_survive(self):
        named = [("Red", "#FF0000"), ("Green", "#00FF00"), ("Blue", "#0000FF")]
        assert [s.name for s in reduce_swatches(named)] == ["Red", "Green", "Blue"]


class TestNeutralThrottle:

    def test_neutral_classification(self):
        assert is_neutral("#808080")
        assert is_neutral("#F5F5F5")
        assert not is_neutral("#FF0000")
        assert not is_neutral("#3366CC")

    def test_neutrals_capped_in_input_order(self):
        named = [(f"Gray {i}", hex_color) for i, hex_color in enumerate(GRAYS)]
        named.insert(4, ("Red", "#FF0000"))
        reduced = reduce_swatches(named, cap=3, threshold=2.0)
        assert [s.name for s in reduced] == ["Gray 0", "Gray 1", "Gray 2", "Red"]

    def test_eleven_neutrals_and_three_colors(self):
        """Eight neutrals survive the cap next to every chromatic color."""
        grays = [f"#{v:02X}{v:02X}{v:02X}" for v in range(0, 256, 24)]
        assert len(grays) == 11
        named = [("Neutral", gray) for gray in grays]
        named += [("Accent", "#FF0000"), ("Accent", "#00FF00"), ("Accent", "#0000FF")]
        reduced = reduce_swatches(named, cap=8, threshold=2.0)
        names = [s.name for s in reduced]
        assert len(reduced) == 11
        assert len(set(names)) == 11
        assert sum(1 for s in reduced if is_neutral(s.hex)) == 8

    def test_chromatic_colors_are_not_throttled(self):
        named = [("Red", "#FF0000"), ("Green", "#00FF00"), ("Blue", "#0000FF"), ("Gray", "#808080")]
        reduced = reduce_swatches(named, cap=0, threshold=2.0)
        assert [s.name for s in reduced] == ["Red", "Green", "Blue"]


class TestNamingAndLimits:

    def test_duplicate_names_are_suffixed(self):
        named = [("Blue", "#0000FF"), ("Blue", "#00FF00"), ("Blue", "#FF0000")]
        assert [s.name for s in reduce_swatches(named)] == ["Blue", "Blue (2)", "Blue (3)"]

    def test_suffixed_input_names_do_not_collide(self):
        named = [("A", "#FF0000"), ("A", "#00FF00"), ("A (2)", "#0000FF")]
        names = [s.name for s in reduce_swatches(named)]
        assert names[:2] == ["A", "A (2)"]
        assert len(names) == 3
        assert len(set(names)) == 3

    def test_max_colors(self):
        named = [("Red", "#FF0000"), ("Green", "#00FF00"), ("Blue", "#0000FF")]
        assert len(reduce_swatches(named, max_colors=2)) == 2
        assert reduce_swatches(named, max_colors=0) == []

    def test_css_text_is_accepted(self):
        assert reduce_swatches([("Red", "rgb(255, 0, 0)")]) == [Swatch("Red", "#FF0000")]

    def test_invalid_color(self):
        with pytest.raises(InvalidColorFormat):
            reduce_swatches([("Bad", "#ZZZZZZ")])

    def test_empty_input(self):
        assert reduce_swatches([]) == []


class TestSwatchStack:

    def test_stack_follows_token_values(self):
        tokens = derive_tokens((210, 60, 50))
        stack = build_swatch_stack(tokens)
        assert stack[0].name == "Primary"
        assert stack[0].path == "brand.primary"
        assert stack[0].hex == tokens["brand.primary"]
        assert all(entry.hex == tokens.get(entry.path, entry.hex) for entry in stack)

    def test_fallback_paths(self):
        tokens = ThemeTokenSet(base_hue=0, groups={
            "brand": {"primary": "#111111"},
            "surfaces": {"header-background": "#222222"},
        })
        stack = build_swatch_stack(tokens)
        assert [(e.name, e.path, e.hex) for e in stack] == [
            ("Primary", "brand.primary", "#111111"),
            ("Header background", "surfaces.header-background", "#222222"),
            ("Header/overlay background", "aliases.overlay-panel", "#222222"),
        ]

    def test_stack_feeds_reducer(self):
        tokens = derive_tokens((210, 60, 50))
        stack = build_swatch_stack(tokens)
        reduced = reduce_swatches([(e.name, e.hex) for e in stack], cap=4)
        names = [s.name for s in reduced]
        assert len(names) == len(set(names))
        assert sum(1 for s in reduced if is_neutral(s.hex)) <= 4
