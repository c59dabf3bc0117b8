"""
Theme harmony table and random palette specs.

HarmonySpec rows drive the theme token deriver: hue rotations for the
secondary/accent roles, their saturation multipliers, and how far surface and
background hues drift towards those roles.
"""

import random
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Optional, Union

from ..space import rgb_to_hex, round_half_up


class ThemeHarmony(str, Enum):
    """Harmony tags used for theme token derivation."""
    MONOCHROMATIC = "Monochromatic"
    ANALOGOUS = "Analogous"
    COMPLEMENTARY = "Complementary"
    TERTIARY = "Tertiary"
    APOCALYPSE = "Apocalypse"


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    POP = "pop"


@dataclass(frozen=True)
class HarmonySpec:
    """Fixed offsets for one theme harmony."""
    sec_h: float
    acc_h: float
    sec_sat: float
    acc_sat: float
    surface_mix: float
    background_mix: float


HARMONY_SPECS = MappingProxyType({
    ThemeHarmony.MONOCHROMATIC: HarmonySpec(8, -8, 0.9, 0.95, 0.08, 0.06),
    ThemeHarmony.ANALOGOUS: HarmonySpec(-30, 28, 1.05, 1.15, 0.28, 0.2),
    ThemeHarmony.COMPLEMENTARY: HarmonySpec(180, -150, 1.08, 1.2, 0.34, 0.28),
    ThemeHarmony.TERTIARY: HarmonySpec(120, -120, 1.12, 1.18, 0.38, 0.32),
})

# Used for any tag outside the table
DEFAULT_HARMONY_SPEC = HarmonySpec(0, 0, 0.92, 1.0, 0, 0)


def resolve_theme_harmony(tag: Union[str, ThemeHarmony, None]) -> Optional[ThemeHarmony]:
    """Case-insensitive lookup; returns None for unknown tags."""
    if isinstance(tag, ThemeHarmony):
        return tag
    key = str(tag or "").strip().lower()
    for member in ThemeHarmony:
        if member.value.lower() == key:
            return member
    return None


def get_harmony_spec(tag: Union[str, ThemeHarmony, None], intensity: float = 1.0) -> HarmonySpec:
    """
    Look up the harmony row for a theme.

    Args:
        tag: Theme harmony name
        intensity: Scalar applied only to the Apocalypse row

    Returns:
        The matching HarmonySpec, or the neutral default row
    """
    harmony = resolve_theme_harmony(tag)
    if harmony == ThemeHarmony.APOCALYPSE:
        return HarmonySpec(
            sec_h=180,
            acc_h=180,
            sec_sat=2.0 * intensity,
            acc_sat=2.2 * intensity,
            surface_mix=min(0.6, 0.45 * intensity),
            background_mix=min(0.55, 0.35 * intensity),
        )
    if harmony is None:
        return DEFAULT_HARMONY_SPEC
    return HARMONY_SPECS[harmony]


@dataclass(frozen=True)
class RandomPaletteSpec:
    """Inputs for one randomly generated theme."""
    base_color: str
    harmony: ThemeHarmony
    theme_mode: ThemeMode
    harmony_intensity: int
    apocalypse_intensity: int
    neutral_curve: int
    accent_strength: int
    pop_intensity: int = 100


def generate_random_palette_spec(rng: random.Random) -> RandomPaletteSpec:
    """
    Draw a random theme spec from an explicitly passed generator.

    Args:
        rng: Random source; pass random.Random(seed) for reproducible output

    Returns:
        RandomPaletteSpec with harmony 70-150, apocalypse 50-150,
        neutral curve 80-130 and accent strength 80-130
    """
    base = rgb_to_hex([int(rng.random() * 256) for _ in range(3)])
    harmonies = list(ThemeHarmony)
    theme_modes = list(ThemeMode)
    return RandomPaletteSpec(
        base_color=base,
        harmony=harmonies[int(rng.random() * len(harmonies))],
        theme_mode=theme_modes[int(rng.random() * len(theme_modes))],
        harmony_intensity=round_half_up(70 + rng.random() * 80),
        apocalypse_intensity=round_half_up(50 + rng.random() * 100),
        neutral_curve=round_half_up(80 + rng.random() * 50),
        accent_strength=round_half_up(80 + rng.random() * 50),
        pop_intensity=100,
    )


def crank_apocalypse(spec: RandomPaletteSpec) -> RandomPaletteSpec:
    """Switch a spec to Apocalypse at full intensity."""
    return replace(
        spec,
        harmony=ThemeHarmony.APOCALYPSE,
        apocalypse_intensity=150,
        harmony_intensity=120,
    )
