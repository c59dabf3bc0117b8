"""
Unit tests for color space conversion, luminance and distance.
"""

import math

import pytest

from palettesmith.services.colors.space import (
    InvalidColorFormat, approximate_name, blend_colors_perceptual, cmyk_to_rgb,
    contrast_ratio, convert, delta_e, describe, display_contrast_ratio,
    hex_to_oklch, hex_to_rgb, hsl_to_rgb, lab_to_rgb, normalize_hex,
    oklch_to_rgb, parse_color, rgb_to_cmyk, rgb_to_hex, rgb_to_hsl, rgb_to_lab,
    rgb_to_oklch, round_half_up
)
from palettesmith.services.colors.hue import hue_distance

SAMPLE_COLORS = [
    (0, 0, 0), (255, 255, 255), (255, 0, 0), (0, 255, 0), (0, 0, 255),
    (108, 92, 231), (18, 52, 86), (200, 150, 100), (1, 2, 3), (254, 253, 252),
    (127, 127, 127), (33, 200, 180),
]


def _within_one(a, b):
    return all(abs(x - y) <= 1 for x, y in zip(a, b))


class TestHexParsing:
    """Test hex <-> RGB parsing and formatting."""

    def test_six_digit_hex(self):
        assert hex_to_rgb("#6C5CE7") == (108, 92, 231)
        assert hex_to_rgb("6c5ce7") == (108, 92, 231)

    def test_shorthand_and_whitespace(self):
        assert hex_to_rgb("fff") == (255, 255, 255)
        assert normalize_hex("  #abc ") == "#AABBCC"

    def test_invalid_hex_format(self):
        """Malformed hex raises InvalidColorFormat, which is a ValueError."""
        for bad in ("#GGGGGG", "#12345", "", "#1234567", "rgb"):
            with pytest.raises(InvalidColorFormat):
                hex_to_rgb(bad)
        with pytest.raises(ValueError):
            hex_to_rgb(123)

    def test_rgb_to_hex_rounds_and_clamps(self):
        assert rgb_to_hex((255.5, -3, 12.49)) == "#FF000C"
        assert rgb_to_hex((0.5, 1.5, 2.5)) == "#010203"

    def test_rgb_to_hex_rejects_nan(self):
        with pytest.raises(InvalidColorFormat):
            rgb_to_hex((float("nan"), 0, 0))
        with pytest.raises(InvalidColorFormat):
            rgb_to_hex(("a", 0, 0))

    def test_hex_roundtrip(self):
        for rgb in SAMPLE_COLORS:
            assert hex_to_rgb(rgb_to_hex(rgb)) == rgb

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(-0.5) == 0


class TestHSL:
    """Test RGB <-> HSL conversions."""

    def test_primary_colors(self):
        assert rgb_to_hsl((255, 0, 0)) == (0, 100, 50)
        h, s, l = rgb_to_hsl((0, 0, 255))
        assert h == pytest.approx(240)
        assert s == pytest.approx(100)
        assert l == pytest.approx(50)

    def test_achromatic_has_zero_hue_and_saturation(self):
        h, s, l = rgb_to_hsl((128, 128, 128))
        assert h == 0
        assert s == 0
        assert l == pytest.approx(50.196, abs=0.01)

    def test_hsl_roundtrip(self):
        for rgb in SAMPLE_COLORS:
            assert _within_one(hsl_to_rgb(rgb_to_hsl(rgb)), rgb)

    def test_hue_wraps_and_channels_clamp(self):
        assert hsl_to_rgb((480, 100, 50)) == (0, 255, 0)
        assert hsl_to_rgb((0, 150, -10)) == (0, 0, 0)


class TestCMYK:

    def test_black_is_pure_key(self):
        assert rgb_to_cmyk((0, 0, 0)) == (0, 0, 0, 100)

    def test_red(self):
        assert rgb_to_cmyk((255, 0, 0)) == (0, 100, 100, 0)
        assert cmyk_to_rgb((0, 100, 100, 0)) == (255, 0, 0)

    def test_out_of_range_raises(self):
        with pytest.raises(InvalidColorFormat):
            cmyk_to_rgb((0, 120, 0, 0))


class TestLab:
    """Test CIE LAB conversion under D65."""

    def test_white_and_black(self):
        l, a, b = rgb_to_lab((255, 255, 255))
        assert l == pytest.approx(100, abs=1e-6)
        assert abs(a) < 0.05
        assert abs(b) < 0.05
        assert tuple(rgb_to_lab((0, 0, 0))) == pytest.approx((0, 0, 0), abs=1e-9)

    def test_red_reference_values(self):
        l, a, b = rgb_to_lab((255, 0, 0))
        assert l == pytest.approx(53.24, abs=0.5)
        assert a == pytest.approx(80.09, abs=0.5)
        assert b == pytest.approx(67.20, abs=0.5)

    def test_lab_roundtrip(self):
        for rgb in SAMPLE_COLORS:
            assert _within_one(lab_to_rgb(rgb_to_lab(rgb)), rgb)


class TestOKLCH:
    """Test OKLCH conversion."""

    def test_black_is_achromatic(self):
        assert rgb_to_oklch((0, 0, 0)) == (0, 0, 0)

    def test_white_lightness(self):
        l, c, _ = rgb_to_oklch((255, 255, 255))
        assert l == pytest.approx(1.0, abs=1e-3)
        assert c < 1e-3

    def test_red_reference_values(self):
        l, c, h = hex_to_oklch("#FF0000")
        assert l == pytest.approx(0.628, abs=0.01)
        assert c == pytest.approx(0.2577, abs=0.01)
        assert h == pytest.approx(29.23, abs=0.5)

    def test_oklch_roundtrip(self):
        for rgb in SAMPLE_COLORS:
            assert _within_one(oklch_to_rgb(rgb_to_oklch(rgb)), rgb)


class TestContrastAndDistance:
    """Test WCAG luminance contrast and LAB distance."""

    def test_black_on_white(self):
        assert contrast_ratio("#000000", "#FFFFFF") == pytest.approx(21.0)

    def test_same_color_is_one(self):
        assert contrast_ratio("#6C5CE7", "#6C5CE7") == pytest.approx(1.0)

    def test_symmetry_and_bounds(self):
        colors = [rgb_to_hex(rgb) for rgb in SAMPLE_COLORS]
        for a in colors:
            for b in colors:
                ratio = contrast_ratio(a, b)
                assert ratio == contrast_ratio(b, a)
                assert 1.0 <= ratio <= 21.0 + 1e-9

    def test_display_rounding(self):
        assert display_contrast_ratio("#777777", "#FFFFFF") == 4.48

    def test_accepts_rgb_triples(self):
        assert contrast_ratio((0, 0, 0), "#FFFFFF") == pytest.approx(21.0)

    def test_out_of_range_triples_raise(self):
        with pytest.raises(InvalidColorFormat):
            contrast_ratio((300, -20, 0), "#FFFFFF")
        with pytest.raises(InvalidColorFormat):
            delta_e((999, 0, 0), (255, 0, 0))

    def test_delta_e(self):
        assert delta_e("#000000", "#FFFFFF") == pytest.approx(100, abs=0.1)
        assert delta_e("#123456", "#123456") == 0


class TestBlend:

    def test_weight_endpoints(self):
        a, b = "#3366CC", "#CC6633"
        assert _within_one(hex_to_rgb(blend_colors_perceptual(a, b, 0)), hex_to_rgb(a))
        assert _within_one(hex_to_rgb(blend_colors_perceptual(a, b, 1)), hex_to_rgb(b))

    def test_weight_is_clamped(self):
        assert blend_colors_perceptual("#3366CC", "#CC6633", 5) == blend_colors_perceptual("#3366CC", "#CC6633", 1)

    def test_achromatic_endpoint_borrows_hue(self):
        blended = blend_colors_perceptual("#000000", "#FF0000", 0.5)
        assert hue_distance(hex_to_oklch(blended).h, hex_to_oklch("#FF0000").h) < 5


class TestConvert:
    """Test generic space-to-space conversion."""

    def test_hex_to_hsl(self):
        assert convert("#FF0000", "hex", "hsl") == (0, 100, 50)

    def test_rgb_to_cmyk(self):
        assert convert([255, 0, 0], "rgb", "cmyk") == (0, 100, 100, 0)

    def test_hsl_to_hex(self):
        assert convert([0, 100, 50], "HSL", "hex") == "#FF0000"

    def test_unknown_space(self):
        with pytest.raises(InvalidColorFormat):
            convert("#FF0000", "hex", "xyz")

    def test_out_of_range_channels(self):
        with pytest.raises(InvalidColorFormat):
            convert([256, 0, 0], "rgb", "hex")
        with pytest.raises(InvalidColorFormat):
            convert([0, 120, 50], "hsl", "hex")
        with pytest.raises(InvalidColorFormat):
            convert([0.5, -0.1, 30], "oklch", "hex")
        with pytest.raises(InvalidColorFormat):
            convert([101, 0, 0], "lab", "hex")


class TestParsing:

    def test_css_like_text(self):
        assert parse_color("rgb(255, 0, 0)") == "#FF0000"
        assert parse_color("hsl(120, 100%, 50%)") == "#00FF00"
        assert parse_color("#abc") == "#AABBCC"

    def test_unsupported_text(self):
        with pytest.raises(InvalidColorFormat):
            parse_color("blue")

    def test_approximate_name(self):
        assert approximate_name("#FFFFFF") == "Pure White"
        assert approximate_name("#010101") == "Coal Black"

    def test_describe(self):
        info = describe("#FF0000")
        assert info["hex"] == "#FF0000"
        assert info["rgb"] == [255, 0, 0]
        assert info["hsl"] == [0, 100, 50]
        assert info["cmyk"] == [0, 100, 100, 0]
        assert not math.isnan(info["lab"][0])
