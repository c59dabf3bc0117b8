"""
Palettesmith Theme Token Deriver

Computes a complete design-token set (backgrounds, surfaces, text, brand,
status colors, neutral ramps) from a base HSL color, the dark/pop/apocalypse
flags and a handful of intensity scalars. The derivation is a pure function:
the same inputs always give the same tokens, and every call recomputes the
whole set.

Slot lightness and saturation are layered in a fixed order: base defaults,
then light/dark overrides, then apocalypse overrides, then pop overrides, with
pop clamped into a narrow "poster" band.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from palettesmith.utils.logging import logger
from .contrast import ensure_contrast, on_color
from .harmony.specs import HarmonySpec, ThemeHarmony, ThemeMode, get_harmony_spec, resolve_theme_harmony
from .hue import blend_hue, wrap_hue
from .space import (
    HSL, as_hsl, blend_colors_perceptual, clamp, hex_to_hsl, hsl_to_hex, normalize_hex, parse_color
)

POP_INTENSITY = 0.28
LIGHT_TEMP_SHIFT = 8

# Ten-step neutral ramps, lightest first
LIGHT_NEUTRAL_STEPS = (98, 95, 90, 78, 66, 52, 38, 26, 16, 10)
LIGHT_APOCALYPSE_NEUTRAL_STEPS = (98, 96, 92, 84, 70, 56, 40, 28, 18, 10)
DARK_NEUTRAL_STEPS = (96, 88, 78, 68, 55, 45, 32, 22, 14, 8)
DARK_APOCALYPSE_NEUTRAL_STEPS = (94, 80, 64, 50, 40, 30, 18, 10, 6, 3)
NEUTRAL_SAT_MULTS = (0.15, 0.18, 0.2, 0.22, 0.24, 0.26, 0.28, 0.3, 0.32, 0.34)

# (hue, {(is_apocalypse, is_dark): (saturation, lightness)})
STATUS_TARGETS = MappingProxyType({
    "success": (145, {(True, True): (100, 60), (True, False): (95, 40),
                      (False, True): (65, 45), (False, False): (65, 40)}),
    "warning": (45, {(True, True): (100, 60), (True, False): (100, 50),
                     (False, True): (90, 50), (False, False): (90, 45)}),
    "error": (0, {(True, True): (100, 65), (True, False): (100, 45),
                  (False, True): (70, 60), (False, False): (70, 50)}),
    "info": (210, {(True, True): (100, 65), (True, False): (100, 50),
                   (False, True): (80, 60), (False, False): (80, 50)}),
})

# (base HSL, lightness dark, lightness light)
STATUS_STRONG_TARGETS = MappingProxyType({
    "success": (HSL(145, 65, 50), 52, 48),
    "warning": (HSL(45, 90, 55), 52, 50),
    "error": (HSL(0, 72, 55), 58, 52),
})

# Background tokens that get a matching "on-" text color
ON_COLOR_TARGETS: Tuple[Tuple[str, str], ...] = (
    ("brand", "primary"),
    ("brand", "secondary"),
    ("brand", "accent"),
    ("brand", "accent-strong"),
    ("brand", "cta"),
    ("brand", "cta-hover"),
    ("surfaces", "background"),
    ("surfaces", "page-background"),
    ("surfaces", "header-background"),
    ("surfaces", "surface-plain"),
    ("surfaces", "surface-plain-border"),
    ("cards", "card-panel-surface"),
    ("cards", "card-panel-surface-strong"),
    ("cards", "card-tag-bg"),
    ("glass", "glass-surface"),
    ("glass", "glass-surface-strong"),
    ("entity", "entity-card-surface"),
    ("named", "color-midnight"),
    ("named", "color-night"),
    ("named", "color-dusk"),
    ("named", "color-ink"),
    ("named", "color-amethyst"),
    ("named", "color-iris"),
    ("named", "color-gold"),
    ("named", "color-rune"),
    ("named", "color-fog"),
    ("status", "success"),
    ("status", "warning"),
    ("status", "error"),
    ("status", "info"),
    ("status", "success-strong"),
    ("status", "warning-strong"),
    ("status", "error-strong"),
    ("admin", "admin-surface-base"),
    ("admin", "admin-accent"),
    ("aliases", "surface-panel-primary"),
    ("aliases", "surface-panel-secondary"),
    ("aliases", "surface-card-hover"),
    ("aliases", "surface-muted"),
    ("aliases", "chip-background"),
)

PRINT_SECTIONS = ("foundation", "brand", "typography", "surfaces", "cards", "glass", "entity", "status")


@dataclass(frozen=True)
class ThemeIntensities:
    """
    User-facing intensity controls, as percentages.

    Values are clamped to their working ranges when scales are derived:
    harmony 40-160, apocalypse 20-150, neutral curve 50-150, accent strength
    50-150, pop 60-140.
    """
    harmony: float = 100
    apocalypse: float = 100
    neutral_curve: float = 100
    accent_strength: float = 100
    pop: float = 100
    print_mode: bool = False


@dataclass(frozen=True)
class IntensityScales:
    apocalypse: float
    harmony: float
    accent: float
    neutral_curve: float
    pop: float
    pop_boost: float


@dataclass(frozen=True)
class LightnessSlots:
    background: float
    surface: float
    text_main: float
    text_muted: float
    border: float


@dataclass(frozen=True)
class BrandLightness:
    brand: float
    accent: float
    cta: float
    cta_hover: float


@dataclass
class ThemeTokenSet:
    """Token groups mapping token name to "#RRGGBB"."""
    base_hue: float
    groups: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def get(self, path: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a "group.token" path."""
        group, _, name = path.partition(".")
        return self.groups.get(group, {}).get(name, default)

    def __getitem__(self, path: str) -> str:
        value = self.get(path)
        if value is None:
            raise KeyError(path)
        return value

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        for group, tokens in self.groups.items():
            for name, value in tokens.items():
                yield f"{group}.{name}", value

    def flat(self) -> Dict[str, str]:
        return dict(iter(self))

    def copy(self) -> "ThemeTokenSet":
        return ThemeTokenSet(
            base_hue=self.base_hue,
            groups={group: dict(tokens) for group, tokens in self.groups.items()},
        )


def intensity_scales(intensities: ThemeIntensities, is_apocalypse: bool, is_pop: bool) -> IntensityScales:
    """Convert percentage controls into the multipliers used by the deriver."""
    pop_scale = clamp(intensities.pop, 60, 140) / 100
    pop_boost = 0.0
    if is_pop:
        pop_boost = POP_INTENSITY * clamp(pop_scale, 0.85, 1.15) * (0.85 if intensities.print_mode else 1)
    return IntensityScales(
        apocalypse=clamp(intensities.apocalypse, 20, 150) / 100 if is_apocalypse else 1.0,
        harmony=clamp(intensities.harmony, 40, 160) / 100,
        accent=clamp(intensities.accent_strength, 50, 150) / 100,
        neutral_curve=clamp(intensities.neutral_curve, 50, 150) / 100,
        pop=pop_scale,
        pop_boost=pop_boost,
    )


def get_color(base: Sequence[float], hue_shift: float = 0, sat_mult: float = 1,
              light_set: Optional[float] = None, light_shift: float = 0) -> str:
    """
    Derive a color from a base HSL.

    Args:
        base: (h, s, l) base color
        hue_shift: Degrees added to the base hue
        sat_mult: Multiplier on the base saturation, result clamped to [0, 100]
        light_set: Absolute lightness; takes precedence over light_shift
        light_shift: Offset from the base lightness

    Returns:
        Hex color
    """
    h, s, l = base
    hue = wrap_hue(h + hue_shift)
    sat = clamp(s * sat_mult, 0, 100)
    light = light_set if light_set is not None else clamp(l + light_shift, 0, 100)
    return hsl_to_hex(hue, sat, light)


def lightness_slots(is_dark: bool, is_apocalypse: bool, is_pop: bool, pop_scale: float) -> LightnessSlots:
    """Lightness for background, surface, main text, muted text and border."""
    if is_apocalypse:
        bg = 2 if is_dark else 99
        surface = 6 if is_dark else 98
        text_main = 98 if is_dark else 8
        text_muted = 70 if is_dark else 35
        border = 10 if is_dark else 88
    else:
        bg = 10 if is_dark else 98
        surface = 16 if is_dark else 93
        text_main = 95 if is_dark else 10
        text_muted = 65 if is_dark else 40
        border = 25 if is_dark else 90

    if not is_dark:
        if is_apocalypse:
            bg, surface, border = 98, 94, 88
        else:
            bg, surface, border = 96, 92, 88

    if is_pop:
        base_pop = clamp(56 + (pop_scale - 1) * 6 - (2 if is_apocalypse else 0), 42, 62)
        bg = base_pop
        surface = clamp(base_pop - (2 if is_apocalypse else 4), 38, 58)
        border = clamp(base_pop - (4 if is_apocalypse else 8), 32, 52)

    return LightnessSlots(bg, surface, text_main, text_muted, border)


def surface_saturation(base_s: float, is_dark: bool, is_apocalypse: bool,
                       is_pop: bool, pop_boost: float) -> Tuple[float, float]:
    """
    Saturation for UI chrome.

    Returns:
        Tuple of (surface saturation, uncompressed base surface saturation)
    """
    if is_apocalypse:
        base_surface_sat = clamp(base_s * 0.8, 32, 82)
    else:
        base_surface_sat = clamp(base_s * 0.42, 14, 56)

    if is_dark:
        surface_sat = base_surface_sat
    else:
        gamma_light_sat = (base_surface_sat / 100) ** 1.02 * 100
        surface_sat = min(32 if is_apocalypse else 24,
                          max(8, gamma_light_sat * (0.85 if is_apocalypse else 0.65)))

    if is_pop:
        cap = 38 if is_apocalypse else 34
        floor = 14 if is_apocalypse else 10
        surface_sat = clamp(surface_sat * (1 + pop_boost * 1.4), floor, cap)

    return surface_sat, base_surface_sat


def brand_lightness(is_dark: bool, is_apocalypse: bool, is_pop: bool, pop_boost: float) -> BrandLightness:
    if is_apocalypse:
        brand = 75 if is_dark else 52
        accent = 78 if is_dark else 56
        cta = 78 if is_dark else 54
        cta_hover = 82 if is_dark else 50
    else:
        brand = 60 if is_dark else 50
        accent = 67 if is_dark else 55
        cta = 62 if is_dark else 52
        cta_hover = 68 if is_dark else 48

    if is_pop:
        brand = clamp(brand + pop_boost * 6 - 2, 46, 70)
        accent = clamp(accent + pop_boost * 6 - 2, 48, 72)
        cta = clamp(cta + pop_boost * 5 - 2, 46, 68)
        cta_hover = clamp(cta_hover + pop_boost * 4 - 2, 44, 66)

    return BrandLightness(brand, accent, cta, cta_hover)


def brand_saturation(is_apocalypse: bool, scales: IntensityScales, sat_normalizer: float,
                     spec: HarmonySpec, is_pop: bool) -> Tuple[float, float, float]:
    """Saturation multipliers for the primary, secondary and accent roles."""
    primary = (1.5 if is_apocalypse else 0.9) * scales.accent
    secondary = spec.sec_sat * sat_normalizer * scales.harmony * scales.accent
    accent = spec.acc_sat * sat_normalizer * scales.harmony * scales.accent

    if is_pop:
        boost = 1 + scales.pop_boost * 1.3
        primary *= boost
        secondary *= boost * 1.1
        accent *= boost * 1.25

    return primary, secondary, accent


def neutral_steps(is_dark: bool, is_apocalypse: bool, curve_scale: float) -> List[float]:
    """
    Ten neutral lightness steps rescaled around a pivot.

    Args:
        is_dark: Dark ramps pivot at 55, light ramps at 50
        is_apocalypse: Selects the apocalypse ramp
        curve_scale: Contrast multiplier around the pivot

    Returns:
        Lightness values clamped to [1, 99]
    """
    if is_dark:
        steps = DARK_APOCALYPSE_NEUTRAL_STEPS if is_apocalypse else DARK_NEUTRAL_STEPS
    else:
        steps = LIGHT_APOCALYPSE_NEUTRAL_STEPS if is_apocalypse else LIGHT_NEUTRAL_STEPS
    pivot = 55 if is_dark else 50
    return [clamp(pivot + (value - pivot) * curve_scale, 1, 99) for value in steps]


def status_colors(is_dark: bool, is_apocalypse: bool) -> Dict[str, str]:
    colors = {}
    for name, (hue, targets) in STATUS_TARGETS.items():
        saturation, lightness = targets[(is_apocalypse, is_dark)]
        colors[name] = hsl_to_hex(hue, saturation, lightness)
    return colors


def derive_tokens(
    base_hsl: Sequence[float],
    is_dark: bool = False,
    is_apocalypse: bool = False,
    is_pop: bool = False,
    intensities: Optional[ThemeIntensities] = None,
    harmony: Union[str, ThemeHarmony] = ThemeHarmony.MONOCHROMATIC,
) -> ThemeTokenSet:
    """
    Derive the full theme token set.

    Args:
        base_hsl: Base color as (h, s, l)
        is_dark: Dark theme
        is_apocalypse: Apocalypse tables and harmony row
        is_pop: Pop ("poster") overrides, applied last
        intensities: Intensity controls; defaults to 100% everywhere
        harmony: Theme harmony row used when not in apocalypse mode

    Returns:
        ThemeTokenSet with foundation, brand, typography, text-palette,
        borders, surfaces, cards, glass, entity, named, status, admin, aliases
        and dawn groups
    """
    hsl = as_hsl(base_hsl)
    base_hex = hsl_to_hex(*hsl)
    scales = intensity_scales(intensities or ThemeIntensities(), is_apocalypse, is_pop)
    p = scales.pop_boost

    spec = get_harmony_spec(ThemeHarmony.APOCALYPSE if is_apocalypse else harmony, scales.apocalypse)
    sec_h, acc_h = spec.sec_h, spec.acc_h
    surface_mix = clamp(spec.surface_mix * scales.harmony, 0, 0.6 if is_apocalypse else 0.5)
    background_mix = clamp(spec.background_mix * scales.harmony, 0, 0.55 if is_apocalypse else 0.45)

    slots = lightness_slots(is_dark, is_apocalypse, is_pop, scales.pop)
    surface_sat, _ = surface_saturation(hsl.s, is_dark, is_apocalypse, is_pop, p)
    brand_l = brand_lightness(is_dark, is_apocalypse, is_pop, p)

    if is_apocalypse:
        sat_normalizer = 1.35 if is_dark else 1.5
    else:
        sat_normalizer = 0.92 if is_dark else 0.86
    primary_sat, secondary_sat, accent_sat = brand_saturation(is_apocalypse, scales, sat_normalizer, spec, is_pop)
    if is_pop:
        sat_normalizer *= 1 + p * 0.55

    bg_l, surface_l, border_l = slots.background, slots.surface, slots.border

    # Surface and background hues drift towards the secondary/accent roles
    secondary_target = get_color(hsl, sec_h, 1, hsl.l)
    accent_target = get_color(hsl, acc_h, 1, hsl.l)
    if surface_mix > 0.2:
        surface_hue = hex_to_hsl(blend_colors_perceptual(base_hex, secondary_target, surface_mix)).h
    else:
        surface_hue = blend_hue(hsl.h, sec_h, surface_mix)
    if background_mix > 0.2:
        background_hue = hex_to_hsl(blend_colors_perceptual(base_hex, accent_target, background_mix)).h
    else:
        background_hue = blend_hue(hsl.h, acc_h, background_mix)

    neutral_shift = 0 if is_dark else LIGHT_TEMP_SHIFT
    neutral_surface_hue = wrap_hue(surface_hue + neutral_shift)
    neutral_background_hue = wrap_hue(background_hue + neutral_shift)
    background_sat_scale = 0.85 if is_dark else 1.05
    background_base = HSL(neutral_background_hue, surface_sat * background_sat_scale, bg_l)
    surface_base = HSL(neutral_surface_hue, surface_sat, bg_l)

    pop_light = is_pop and not is_dark
    if pop_light:
        large_hue = blend_hue(neutral_background_hue, hsl.h - neutral_background_hue, 0.02 + p * 0.05)
        medium_hue = blend_hue(neutral_surface_hue, hsl.h - neutral_surface_hue, 0.08 + p * 0.1)
        large_surface_base = HSL(large_hue, clamp(surface_sat * 0.9, 4, 14), bg_l)
        medium_surface_base = HSL(medium_hue, clamp(surface_sat * (1 + p * 0.7), 6, 26), bg_l)
    else:
        large_surface_base = background_base
        medium_surface_base = surface_base

    def neutral_color(lightness: float, sat_mult: float) -> str:
        return get_color(HSL(neutral_background_hue, surface_sat * sat_mult, lightness), 0, 1, lightness)

    steps = neutral_steps(is_dark, is_apocalypse, scales.neutral_curve)
    status = status_colors(is_dark, is_apocalypse)
    status_strong = {
        name: get_color(base, 0, 1, dark_l if is_dark else light_l)
        for name, (base, dark_l, light_l) in STATUS_STRONG_TARGETS.items()
    }

    accent_hue_main = wrap_hue(hsl.h + acc_h)
    accent_hue_secondary = wrap_hue(hsl.h + sec_h)
    accent_light_steps = (68, 60, 52, 36) if is_dark else (58, 52, 46, 32)
    accent_base_sat = clamp(max(20, hsl.s) * scales.accent, 10, 100)

    def accent_color(hue: float, sat_mult: float, lightness: float) -> str:
        return get_color(HSL(hue, accent_base_sat, lightness), 0, sat_mult, lightness)

    link_brand_sat = 0.9 if is_dark else 0.9 + p * 0.6
    link_text_sat = 1 if is_dark else 1 + p * 0.6
    focus_ring_sat = 1 if is_dark else 0.8 + p * 0.7
    focus_ring_l = 50 if is_dark else 62 + p * 6
    accent_text_sat = 1 if is_dark else 1 + p * 0.55
    accent_text_strong_sat = 1 if is_dark else 1 + p * 0.7

    def toward_text(offset: float) -> float:
        # Border variants move away from the background
        return border_l + offset if is_dark else border_l - offset

    primary = get_color(hsl, 0, primary_sat, brand_l.brand)
    accent_strong = get_color(hsl, acc_h, accent_sat * 0.9 + 0.04, brand_l.accent + 5)
    header_l = bg_l + 2 if is_dark else clamp(bg_l + (1 if is_pop else 2), 90 if is_pop else 94, 98)

    groups: Dict[str, Dict[str, str]] = {}

    foundation = {f"neutral-{i}": neutral_color(steps[i], NEUTRAL_SAT_MULTS[i]) for i in range(10)}
    foundation.update({
        "accent-1": accent_color(accent_hue_main, sat_normalizer * spec.acc_sat * 0.9, accent_light_steps[0]),
        "accent-2": accent_color(accent_hue_secondary, sat_normalizer * spec.sec_sat * 0.98, accent_light_steps[1]),
        "accent-3": accent_color(hsl.h, sat_normalizer * spec.acc_sat * 1.05, accent_light_steps[2]),
        "accent-ink": accent_color(accent_hue_main, sat_normalizer * spec.acc_sat * 1.2, accent_light_steps[3]),
    })
    foundation.update(status)
    groups["foundation"] = foundation

    groups["brand"] = {
        "primary": primary,
        "secondary": get_color(hsl, sec_h, secondary_sat * 0.96, brand_l.brand),
        "accent": get_color(hsl, acc_h, accent_sat * 0.9, brand_l.accent),
        "accent-strong": accent_strong,
        "cta": get_color(hsl, acc_h, accent_sat * 0.88 + 0.02, brand_l.cta),
        "cta-hover": get_color(hsl, acc_h, accent_sat * 0.88 + 0.05, brand_l.cta_hover),
        "gradient-start": get_color(hsl, 0, 1, brand_l.brand + 5 if is_dark else brand_l.brand + 8),
        "gradient-end": get_color(hsl, acc_h, accent_sat * 0.9, brand_l.brand - 4 if is_dark else brand_l.brand - 2),
        "link-color": get_color(hsl, acc_h, link_brand_sat, 70 if is_dark else 45),
        "focus-ring": get_color(hsl, acc_h, focus_ring_sat, focus_ring_l),
    }

    groups["typography"] = {
        "heading": get_color(hsl, 0, 0.1, slots.text_main),
        "text-strong": get_color(hsl, 0, 0.1, 90 if is_dark else 15),
        "text-body": get_color(hsl, 0, 0.1, 80 if is_dark else 25),
        "text-muted": get_color(hsl, 0, 0.1, slots.text_muted),
        "text-hint": get_color(hsl, 0, 0.2, 50 if is_dark else 60),
        "text-disabled": get_color(hsl, 0, 0.1, 30 if is_dark else 80),
        "text-accent": get_color(hsl, acc_h, accent_text_sat, 75 if is_dark else 40),
        "text-accent-strong": get_color(hsl, acc_h, accent_text_strong_sat, 85 if is_dark else 30),
        "footer-text": get_color(hsl, 0, 0.1, 60 if is_dark else 85),
        "footer-text-muted": get_color(hsl, 0, 0.1, 40 if is_dark else 60),
    }

    groups["text-palette"] = {
        "text-primary": get_color(hsl, 0, 0.1, 92 if is_dark else 18),
        "text-secondary": get_color(hsl, 0, 0.1, 86 if is_dark else 24),
        "text-tertiary": get_color(hsl, 0, 0.1, 78 if is_dark else 32),
        "text-hint": get_color(hsl, 0, 0.2, 60 if is_dark else 50),
        "text-disabled": get_color(hsl, 0, 0.1, 38 if is_dark else 80),
        "text-accent": get_color(hsl, acc_h, accent_text_sat, 75 if is_dark else 40),
        "text-accent-strong": get_color(hsl, acc_h, accent_text_strong_sat, 85 if is_dark else 30),
        "link-color": get_color(hsl, acc_h, link_text_sat, 70 if is_dark else 45),
    }

    groups["borders"] = {
        "border-subtle": get_color(surface_base, 0, 0.9, border_l),
        "border-strong": get_color(surface_base, 0, 0.9, toward_text(12)),
        "border-accent-subtle": get_color(hsl, acc_h, 0.15 if is_dark else 0.12 + p * 0.12, toward_text(5)),
        "border-accent-medium": get_color(hsl, acc_h, 0.25 if is_dark else 0.18 + p * 0.16, toward_text(10)),
        "border-accent-strong": get_color(hsl, acc_h, 0.35 if is_dark else 0.26 + p * 0.2, toward_text(18)),
        "border-accent-hover": get_color(hsl, acc_h, 0.4 if is_dark else 0.3 + p * 0.24, toward_text(22)),
    }

    groups["surfaces"] = {
        "background": get_color(background_base, 0, 1, bg_l),
        "page-background": get_color(background_base, 0, 1, bg_l - 2),
        "header-background": get_color(large_surface_base, 0, 1, header_l),
        "surface-plain": get_color(medium_surface_base, 0, 1, surface_l),
        "surface-plain-border": get_color(medium_surface_base, 0, 1, border_l),
    }

    groups["cards"] = {
        "card-panel-surface": get_color(medium_surface_base, 0, 1, surface_l),
        "card-panel-surface-strong": get_color(
            medium_surface_base, 0, 1, surface_l + 5 if is_dark else min(97, surface_l + (2 if is_pop else 4))
        ),
        "card-panel-border": get_color(medium_surface_base, 0, 1, border_l),
        "card-panel-border-soft": get_color(
            medium_surface_base, 0, 1, border_l - 5 if is_dark else min(96, border_l + 6)
        ),
        "card-panel-border-strong": get_color(surface_base, 0, 1, border_l + 15 if is_dark else 85),
        "card-tag-bg": (get_color(hsl, 0, 0.2, 20) if is_dark
                        else get_color(hsl, acc_h, 0.12 + p * 0.2, 94)),
        "card-tag-text": get_color(hsl, 0, 0.4, 80 if is_dark else 30),
        "card-tag-border": (get_color(hsl, 0, 0.2, 30) if is_dark
                            else get_color(hsl, acc_h, 0.18 + p * 0.2, 85)),
    }

    groups["glass"] = {
        "glass-surface": get_color(hsl, 0, 0.1, 20 if is_dark else 95),
        "glass-surface-strong": get_color(hsl, 0, 0.1, 30 if is_dark else 90),
        "glass-border": get_color(hsl, 0, 0.1, 35 if is_dark else 85),
        "glass-border-strong": get_color(hsl, 0, 0.2, 45 if is_dark else 80),
        "glass-hover": get_color(hsl, acc_h, 0.3, 25 if is_dark else 95),
        "glass-shadow": get_color(hsl, 0, 0.3, 5 if is_dark else 80),
        "glass-highlight": get_color(hsl, 0, 0, 30 if is_dark else 99),
        "glass-glow": get_color(hsl, acc_h, 0.5, 28 if is_dark else 72),
    }

    groups["entity"] = {
        "entity-card-surface": get_color(hsl, sec_h, 0.15, 18 if is_dark else 98),
        "entity-card-border": get_color(hsl, sec_h, 0.2, 35 if is_dark else 85),
        "entity-card-glow": get_color(hsl, sec_h, 0.6, 25 if is_dark else 90),
        "entity-card-highlight": get_color(hsl, sec_h, 0.4, 30 if is_dark else 95),
        "entity-card-heading": get_color(hsl, sec_h, 0.5, 80 if is_dark else 20),
    }

    groups["named"] = {
        "color-midnight": get_color(hsl, 0, 0.8, 10),
        "color-night": get_color(hsl, 10, 0.6, 15),
        "color-dusk": get_color(hsl, sec_h, 0.4, 30),
        "color-ink": get_color(hsl, 0, 0.1, 20),
        "color-amethyst": get_color(hsl, acc_h, 0.7, 60),
        "color-iris": get_color(hsl, acc_h, 0.9, 75),
        "color-gold": get_color(hsl, 45, 0.8, 60),
        "color-rune": get_color(hsl, sec_h, 0.6, 85),
        "color-fog": get_color(hsl, 0, 0.1, 90),
    }

    groups["status"] = dict(status)
    groups["status"].update({f"{name}-strong": color for name, color in status_strong.items()})

    groups["admin"] = {
        "admin-surface-base": get_color(
            medium_surface_base if pop_light else background_base, 0, 1,
            bg_l + 6 if is_dark else min(98, bg_l + 3)
        ),
        "admin-accent": get_color(hsl, acc_h, 0.95 if is_dark else 0.85 + p * 0.35, 64 if is_dark else 54),
    }

    groups["aliases"] = {
        "surface-panel-primary": get_color(medium_surface_base, 0, 1, surface_l),
        "surface-panel-secondary": get_color(medium_surface_base, 0, 1, surface_l + 4 if is_dark else surface_l - 2),
        "surface-card-hover": get_color(medium_surface_base, 0, 1, surface_l + 6 if is_dark else surface_l - 4),
        "surface-muted": get_color(medium_surface_base, 0, 1, surface_l - 2 if is_dark else surface_l + 2),
        "border-purple-subtle": get_color(hsl, acc_h, 0.25 if is_dark else 0.18 + p * 0.16, border_l),
        "border-purple-medium": get_color(hsl, acc_h, 0.35 if is_dark else 0.26 + p * 0.2, toward_text(8)),
        "border-accent-subtle": get_color(hsl, acc_h, 0.2 if is_dark else 0.16 + p * 0.14, toward_text(5)),
        "border-accent-medium": get_color(hsl, acc_h, 0.35 if is_dark else 0.26 + p * 0.18, toward_text(10)),
        "border-accent-strong": get_color(hsl, acc_h, 0.5 if is_dark else 0.38 + p * 0.24, toward_text(18)),
        "border-accent-hover": get_color(hsl, acc_h, 0.6 if is_dark else 0.46 + p * 0.28, toward_text(22)),
        "text-subtle": get_color(hsl, 0, 0.1, slots.text_muted),
        "text-accent-strong": get_color(hsl, acc_h, accent_text_strong_sat, 88 if is_dark else 34),
        "accent-purple-strong": accent_strong,
        "accent-purple-soft": get_color(hsl, acc_h, 0.7, 75 if is_dark else 70),
        "overlay-panel": get_color(medium_surface_base, 0, 1, surface_l + 2 if is_dark else surface_l),
        "overlay-panel-strong": get_color(medium_surface_base, 0, 1, surface_l + 6 if is_dark else surface_l - 2),
        "focus-ring": get_color(hsl, acc_h, focus_ring_sat, 40 if is_dark else 68 + p * 4),
        "chip-background": (get_color(surface_base, 0, 1, surface_l - 2) if is_dark
                            else get_color(hsl, acc_h, 0.08 + p * 0.14, surface_l + 2)),
        "chip-border": (get_color(surface_base, 0, 1, border_l + 6) if is_dark
                        else get_color(hsl, acc_h, 0.12 + p * 0.16, border_l - 6)),
    }

    dawn_soft = HSL(neutral_background_hue, max(surface_sat * 0.55, 10), 98)
    dawn_card = HSL(neutral_background_hue, max(surface_sat * 0.6, 12), 97)
    dawn_hover = HSL(neutral_background_hue, max(surface_sat * 0.5, 10), 94)
    groups["dawn"] = {
        "surface-base": get_color(dawn_soft, 0, 1, 98),
        "surface-panel": get_color(dawn_soft, 0, 1, 98),
        "surface-card": get_color(dawn_card, 0, 1, 97),
        "surface-elevated": get_color(dawn_card, 0, 1, 96),
        "surface-hover": get_color(dawn_hover, 0, 1, 94),
        "text-strong": get_color(hsl, 0, 0.1, 18),
        "text-body": get_color(hsl, 0, 0.1, 26),
        "text-muted": get_color(hsl, 0, 0.1, 36),
        "border-subtle": get_color(surface_base, 0, 1, 90),
        "border-strong": get_color(surface_base, 0, 1, 78),
        "accent-link": get_color(hsl, acc_h, 1, 45),
        "accent-code": get_color(hsl, acc_h, 0.95, 42),
        "prose-bg-soft": get_color(surface_base, 0, 1, 94),
        "prose-bg-strong": get_color(surface_base, 0, 1, 92),
    }

    _enforce_text_contrast(groups, is_dark)
    if is_pop:
        _enforce_pop_contrast(groups)

    return ThemeTokenSet(base_hue=hsl.h, groups=groups)


# (group, token, reference token, target)
TEXT_CONTRAST_RULES: Tuple[Tuple[str, str, str, float], ...] = (
    ("typography", "heading", "surfaces.background", 7),
    ("typography", "text-strong", "surfaces.background", 7),
    ("typography", "text-body", "surfaces.background", 4.5),
    ("typography", "text-muted", "cards.card-panel-surface", 3.2),
    ("typography", "footer-text", "surfaces.background", 4.5),
    ("typography", "footer-text-muted", "surfaces.background", 3.2),
    ("text-palette", "text-primary", "surfaces.background", 7),
    ("text-palette", "text-secondary", "cards.card-panel-surface", 4.5),
    ("text-palette", "text-tertiary", "cards.card-panel-surface", 3.2),
    ("typography", "text-accent", "surfaces.background", 4.5),
    ("typography", "text-accent-strong", "surfaces.background", 4.5),
)


def _lookup(groups: Dict[str, Dict[str, str]], path: str) -> str:
    group, _, name = path.partition(".")
    return groups[group][name]


def _enforce_text_contrast(groups: Dict[str, Dict[str, str]], is_dark: bool):
    for group, name, reference, target in TEXT_CONTRAST_RULES:
        groups[group][name] = ensure_contrast(groups[group][name], _lookup(groups, reference), target, is_dark)


def _enforce_pop_contrast(groups: Dict[str, Dict[str, str]]):
    """Pop themes sit on mid-lightness backgrounds, so brand colors need an extra pass."""
    brand = groups["brand"]
    borders = groups["borders"]
    background = groups["surfaces"]["background"]
    card = groups["cards"]["card-panel-surface"]
    plain = groups["surfaces"]["surface-plain"]
    body_text = groups["typography"]["text-body"]
    lighten_against_text = hex_to_hsl(body_text).l < 50

    for name in ("primary", "secondary", "accent", "cta", "cta-hover", "link-color"):
        brand[name] = ensure_contrast(brand[name], background, 4.5, False)
    brand["focus-ring"] = ensure_contrast(brand["focus-ring"], card, 3.5, False)
    for name in ("border-accent-medium", "border-accent-strong", "border-accent-hover"):
        borders[name] = ensure_contrast(borders[name], plain, 3.2, False)

    for name in ("primary", "secondary", "accent", "accent-strong", "cta", "cta-hover"):
        brand[name] = ensure_contrast(brand[name], body_text, 4.5, lighten_against_text)


def generate_theme(
    base_color: str,
    harmony: Union[str, ThemeHarmony] = ThemeHarmony.MONOCHROMATIC,
    theme_mode: Union[str, ThemeMode] = ThemeMode.LIGHT,
    intensities: Optional[ThemeIntensities] = None,
) -> ThemeTokenSet:
    """
    Derive tokens from a base color and string mode names.

    Args:
        base_color: Base color text ("#hex", "rgb(...)", "hsl(...)")
        harmony: Theme harmony; "Apocalypse" switches on apocalypse mode
        theme_mode: "light", "dark" or "pop"; unknown values mean light
        intensities: Intensity controls

    Returns:
        ThemeTokenSet
    """
    hsl = hex_to_hsl(parse_color(base_color))
    try:
        mode = ThemeMode(str(getattr(theme_mode, "value", theme_mode)).lower())
    except ValueError:
        logger.debug("Unknown theme mode, using light", extra={"theme_mode": theme_mode})
        mode = ThemeMode.LIGHT
    resolved_harmony = resolve_theme_harmony(harmony)
    return derive_tokens(
        hsl,
        is_dark=mode == ThemeMode.DARK,
        is_apocalypse=resolved_harmony == ThemeHarmony.APOCALYPSE,
        is_pop=mode == ThemeMode.POP,
        intensities=intensities,
        harmony=resolved_harmony or harmony,
    )


def add_on_colors(tokens: ThemeTokenSet) -> ThemeTokenSet:
    """
    Return a copy with an "on-<name>" text color for every background token.

    Neutral ramp steps get one too.
    """
    enhanced = tokens.copy()
    for group, name in ON_COLOR_TARGETS:
        background = tokens.get(f"{group}.{name}")
        if background is not None:
            enhanced.groups[group][f"on-{name}"] = on_color(background)
    for name, background in tokens.groups.get("foundation", {}).items():
        if name.startswith("neutral-"):
            enhanced.groups["foundation"][f"on-{name}"] = on_color(background)
    return enhanced


def to_cmyk_safe(hex_color: str) -> str:
    """Cap saturation at 88 and pull lightness into [8, 92] for print."""
    h, s, l = hex_to_hsl(hex_color)
    if l < 15:
        l = 8
    elif l > 92:
        l = 92
    return hsl_to_hex(h, min(s, 88), l)


def add_print_tokens(tokens: ThemeTokenSet, base_color: str, is_dark: bool = False) -> ThemeTokenSet:
    """
    Return a copy with a "print" group of CMYK-safe colors.

    Print token names join section and token with "/", e.g. "brand/primary".
    Fixed paper, ink and foil colors are added alongside.
    """
    printed = tokens.copy()
    group: Dict[str, str] = {}
    for section in PRINT_SECTIONS:
        for name, value in tokens.groups.get(section, {}).items():
            group[f"{section}/{name}"] = to_cmyk_safe(value)
    group.update({
        "background/paper": "#FDFDF9",
        "ink/richblack": "#0A0A0A" if is_dark else "#111111",
        "ink/dark": "#111111",
        "ink/mid": "#333333",
        "foil/gold": "#D4AF37",
        "foil/silver": "#E8E8E8",
        "foil/rose": "#C8A2C8",
        "glass-replacement/border": "#333333" if is_dark else "#CCCCCC",
        "glass-replacement/fill": "#1A1A1A" if is_dark else "#F8F8F8",
        "meta/base-color": normalize_hex(base_color),
    })
    printed.groups["print"] = group
    return printed
