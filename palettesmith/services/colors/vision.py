"""
Color vision deficiency simulation for palette accessibility previews.
"""

from enum import Enum
from types import MappingProxyType

import numpy as np

from .space import hex_to_rgb, normalize_hex, rgb_to_hex


class VisionMode(str, Enum):
    """Supported vision simulation modes."""
    NORMAL = "normal"
    PROTANOPIA = "protanopia"
    DEUTERANOPIA = "deuteranopia"
    TRITANOPIA = "tritanopia"
    ACHROMATOPSIA = "achromatopsia"


VISION_MATRICES = MappingProxyType({
    VisionMode.PROTANOPIA: np.array([
        [0.56667, 0.43333, 0.0],
        [0.55833, 0.44167, 0.0],
        [0.0, 0.24167, 0.75833],
    ]),
    VisionMode.DEUTERANOPIA: np.array([
        [0.625, 0.375, 0.0],
        [0.7, 0.3, 0.0],
        [0.0, 0.3, 0.7],
    ]),
    VisionMode.TRITANOPIA: np.array([
        [0.95, 0.05, 0.0],
        [0.0, 0.43333, 0.56667],
        [0.0, 0.475, 0.525],
    ]),
    VisionMode.ACHROMATOPSIA: np.array([
        [0.299, 0.587, 0.114],
        [0.299, 0.587, 0.114],
        [0.299, 0.587, 0.114],
    ]),
})


def simulate_color_vision(hex_color: str, mode: str = "normal") -> str:
    """
    Approximate how a color appears under a color vision deficiency.

    Args:
        hex_color: Color to transform
        mode: One of the VisionMode values; unknown modes leave the color as is

    Returns:
        Normalized hex color
    """
    try:
        vision = VisionMode(mode)
    except ValueError:
        return normalize_hex(hex_color)
    if vision == VisionMode.NORMAL:
        return normalize_hex(hex_color)

    rgb = np.array(hex_to_rgb(hex_color), dtype=float)
    adjusted = VISION_MATRICES[vision] @ rgb
    return rgb_to_hex(tuple(float(v) for v in adjusted))


def simulate_palette(palette, mode: str = "normal"):
    """Apply simulate_color_vision to every color of a palette."""
    return [simulate_color_vision(color, mode) for color in palette]
