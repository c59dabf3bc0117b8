"""
Palettesmith Colors Module

Provides color-space conversion, WCAG contrast, harmony palette generation,
theme token derivation, swatch reduction and color vision simulation.
Every function is pure and synchronous; malformed colors raise
InvalidColorFormat.
"""

from .contrast import ensure_contrast
from .harmony import generate_palette
from .space import InvalidColorFormat, contrast_ratio, convert, delta_e
from .swatches import reduce_swatches
from .tokens import derive_tokens
from .vision import simulate_color_vision, simulate_palette

__version__ = "1.0.0"

__all__ = [
    "InvalidColorFormat",
    "contrast_ratio",
    "convert",
    "delta_e",
    "derive_tokens",
    "ensure_contrast",
    "generate_palette",
    "reduce_swatches",
    "simulate_color_vision",
    "simulate_palette",
]
