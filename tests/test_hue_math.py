"""
Unit tests for circular hue arithmetic.
"""

import pytest

from palettesmith.services.colors.hue import (
    blend_hue, hue_delta, hue_distance, interpolate_hue, rotate_hue, wrap_hue
)


class TestWrapping:
    """Test normalization into [0, 360)."""

    def test_negative_and_large_values(self):
        assert wrap_hue(-30) == 330
        assert wrap_hue(720) == 0
        assert wrap_hue(359.5) == 359.5

    def test_tiny_negative_stays_in_range(self):
        assert 0 <= wrap_hue(-1e-18) < 360

    def test_rotation(self):
        assert rotate_hue(300, 90) == 30
        assert rotate_hue(10, -20) == 350


class TestShortestArc:
    """Hue differences never use plain linear subtraction."""

    def test_signed_delta_crosses_zero(self):
        assert hue_delta(350, 10) == 20
        assert hue_delta(10, 350) == -20

    def test_opposite_hues(self):
        assert hue_delta(0, 180) == -180
        assert hue_distance(0, 180) == 180

    def test_distance_is_symmetric(self):
        for a, b in [(350, 10), (0, 90), (45, 300), (123.5, 321.25)]:
            assert hue_distance(a, b) == hue_distance(b, a)
            assert 0 <= hue_distance(a, b) <= 180

    def test_interpolation_takes_short_path(self):
        assert interpolate_hue(350, 10, 0.5) == pytest.approx(0)
        assert interpolate_hue(10, 350, 0.25) == pytest.approx(5)
        assert interpolate_hue(90, 90, 0.7) == 90

    def test_blend_hue(self):
        assert blend_hue(350, 20, 0.5) == pytest.approx(0)
        assert blend_hue(120, 60, 0) == 120
        assert blend_hue(120, 60, 1) == pytest.approx(180)
