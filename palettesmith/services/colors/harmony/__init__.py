"""
Palettesmith Harmony Engine

Generates N-color palettes from a base color under a named color theory
relationship (monochromatic, analogous, complementary, split-complementary,
triadic, tetradic), plus golden-ratio random and "AI-inspired" curated-cluster
palettes. Locked entries keep their value at their index across regeneration.
"""

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from palettesmith.utils.logging import logger
from ..hue import wrap_hue
from ..space import InvalidColorFormat, clamp, hex_to_hsl, hsl_to_hex, parse_color, round_half_up


class HarmonyMode(str, Enum):
    """Supported palette relationships. Unknown tags resolve to MONOCHROMATIC."""
    MONOCHROMATIC = "monochromatic"
    ANALOGOUS = "analogous"
    COMPLEMENTARY = "complementary"
    SPLIT_COMPLEMENTARY = "split-complementary"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"
    RANDOM = "random"
    AI = "ai"

    @classmethod
    def from_tag(cls, tag: Union[str, "HarmonyMode", None]) -> "HarmonyMode":
        """
        Resolve a free-form mode tag.

        Args:
            tag: Mode name, alias or enum member

        Returns:
            Matching mode, or MONOCHROMATIC when the tag is not recognized
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(_normalize_tag(tag))
        except ValueError:
            logger.debug("Unknown harmony mode, using monochromatic", extra={"mode": tag})
            return cls.MONOCHROMATIC

    @classmethod
    def is_known(cls, tag: Union[str, "HarmonyMode", None]) -> bool:
        """Whether a tag names a mode or alias rather than falling back."""
        if isinstance(tag, cls):
            return True
        return _normalize_tag(tag) in {member.value for member in cls}


def _normalize_tag(tag) -> str:
    key = str(tag or "").strip().lower().replace("_", "-").replace(" ", "-")
    return _MODE_ALIASES.get(key, key)


_MODE_ALIASES = {
    "mono": "monochromatic",
    "split": "split-complementary",
    "splitcomplementary": "split-complementary",
    "tetrad": "tetradic",
    "square": "tetradic",
    "ai-inspired": "ai",
}


@dataclass(frozen=True)
class LockedEntry:
    """A palette slot pinned to a fixed color."""
    index: int
    hex: str


GOLDEN_RATIO_CONJUGATE = 0.618033988749895

# Curated "pleasant" hue clusters for AI-inspired palettes
AI_HUE_CLUSTERS: Tuple[Tuple[int, ...], ...] = (
    (12, 58, 92, 196),
    (42, 180, 284),
    (322, 28, 194),
    (11, 138, 265),
    (310, 44, 120, 220),
)

MONO_SPREAD = 12


class GoldenRatioSequence:
    """
    Low-discrepancy sequence in [0, 1) stepping by the golden ratio conjugate.

    State is explicit so callers can reproduce a palette by passing a seeded
    instance instead of relying on a module-level generator.
    """

    def __init__(self, seed: Optional[float] = None, rng: Optional[random.Random] = None):
        if seed is None:
            seed = (rng or random.Random()).random()
        self._state = float(seed) % 1.0

    @classmethod
    def seeded(cls, seed: int) -> "GoldenRatioSequence":
        """Build a sequence whose start point is derived from an integer seed."""
        return cls(rng=random.Random(seed))

    @property
    def state(self) -> float:
        return self._state

    def next(self) -> float:
        self._state = (self._state + GOLDEN_RATIO_CONJUGATE) % 1.0
        return self._state


def rotate_hex(hex_color: str, degrees: float) -> str:
    """Rotate a color's HSL hue, keeping saturation and lightness."""
    h, s, l = hex_to_hsl(hex_color)
    return hsl_to_hex(wrap_hue(h + degrees), s, l)


def shift_lightness(hex_color: str, delta: float) -> str:
    """Shift a color's HSL lightness by delta, clamped to [0, 100]."""
    h, s, l = hex_to_hsl(hex_color)
    return hsl_to_hex(h, s, clamp(l + delta, 0, 100))


def _fit_to_count(colors: List[str], count: int) -> List[str]:
    if len(colors) >= count:
        return colors[:count]
    return [colors[i % len(colors)] for i in range(count)]


def generate_monochromatic(base: str, count: int) -> List[str]:
    """
    Lightness steps of 12 around the base, lighter first, deduplicated.

    Expansion stops once both directions are pinned at 0 and 100, so very
    large counts terminate and are padded by repetition.
    """
    h, s, l = hex_to_hsl(base)
    palette = [base]
    seen = {base}
    step = 1
    while len(palette) < count:
        for direction in (1, -1):
            candidate = hsl_to_hex(h, s, clamp(l + direction * MONO_SPREAD * step, 0, 100))
            if candidate not in seen:
                seen.add(candidate)
                palette.append(candidate)
            if len(palette) >= count:
                break
        if l + MONO_SPREAD * step >= 100 and l - MONO_SPREAD * step <= 0:
            break
        step += 1
    return _fit_to_count(palette, count)


def generate_analogous(base: str, count: int) -> List[str]:
    h, s, l = hex_to_hsl(base)
    spacing = 360.0 / max(count, 3)
    return [
        hsl_to_hex(wrap_hue(h + (idx - count // 2) * spacing), s, l)
        for idx in range(count)
    ]


def generate_complementary(base: str, count: int) -> List[str]:
    """Base and complement, then lightness variants cycling through the pair."""
    palette = [base, rotate_hex(base, 180)]
    idx = 1
    while len(palette) < count:
        shift = (12 if idx % 4 < 2 else -12) * math.ceil(idx / 2)
        palette.append(shift_lightness(palette[idx % 2], shift))
        idx += 1
    return palette[:count]


def _extend_by_shifts(palette: List[str], count: int, cycle: int, shift: int) -> List[str]:
    while len(palette) < count:
        position = len(palette)
        delta = shift if position % 2 == 0 else -shift
        palette.append(shift_lightness(palette[position % cycle], delta))
    return palette[:count]


def generate_split_complementary(base: str, count: int) -> List[str]:
    palette = [base, rotate_hex(base, 150), rotate_hex(base, -150)]
    return _extend_by_shifts(palette, count, cycle=3, shift=10)


def generate_triadic(base: str, count: int) -> List[str]:
    palette = [base, rotate_hex(base, 120), rotate_hex(base, 240)]
    return _extend_by_shifts(palette, count, cycle=3, shift=12)


def generate_tetradic(base: str, count: int) -> List[str]:
    palette = [base] + [rotate_hex(base, inc) for inc in (90, 180, 270)]
    return _extend_by_shifts(palette, count, cycle=4, shift=14)


def generate_random(count: int, sequence: GoldenRatioSequence) -> List[str]:
    """
    Random palette from the golden-ratio sequence.

    Args:
        count: Number of colors
        sequence: Source of the low-discrepancy values

    Returns:
        Colors with saturation in [45, 90] and lightness in [40, 75]
    """
    colors = []
    for _ in range(count):
        hue = sequence.next() * 360
        saturation = 0.45 + sequence.next() * 0.45
        lightness = 0.4 + sequence.next() * 0.35
        colors.append(hsl_to_hex(hue, round_half_up(saturation * 100), round_half_up(lightness * 100)))
    return colors


def generate_ai_inspired(base: str, count: int, sequence: GoldenRatioSequence) -> List[str]:
    """
    Curated hue cluster rotated by one random offset, keyed to the base.

    Saturation is at least 35 and lightness is held in [35, 65] relative to
    the base color. Short clusters are padded with alternating +/-10 lightness
    variants.
    """
    _, base_s, base_l = hex_to_hsl(base)
    cluster = AI_HUE_CLUSTERS[int(math.floor(sequence.next() * len(AI_HUE_CLUSTERS)))]
    offset = sequence.next() * 360

    palette = [base]
    for hue in cluster:
        generated = hsl_to_hex(wrap_hue(hue + offset), max(35.0, base_s), clamp(base_l, 35, 65))
        if generated not in palette:
            palette.append(generated)

    idx = 0
    while len(palette) < count:
        source = palette[idx % len(palette)]
        palette.append(shift_lightness(source, 10 if idx % 2 == 0 else -10))
        idx += 1
    return palette[:count]


_DETERMINISTIC_GENERATORS: Dict[HarmonyMode, Callable[[str, int], List[str]]] = {
    HarmonyMode.MONOCHROMATIC: generate_monochromatic,
    HarmonyMode.ANALOGOUS: generate_analogous,
    HarmonyMode.COMPLEMENTARY: generate_complementary,
    HarmonyMode.SPLIT_COMPLEMENTARY: generate_split_complementary,
    HarmonyMode.TRIADIC: generate_triadic,
    HarmonyMode.TETRADIC: generate_tetradic,
}


def _normalize_locked(locked: Iterable[Union[LockedEntry, Sequence]]) -> List[LockedEntry]:
    entries = []
    for entry in locked:
        try:
            if isinstance(entry, LockedEntry):
                index, color = entry.index, entry.hex
            elif isinstance(entry, dict):
                index, color = entry["index"], entry["hex"]
            else:
                index, color = entry
            index = int(index)
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidColorFormat(f"Locked entry must be (index, color), got {entry!r}") from exc
        entries.append(LockedEntry(index=index, hex=parse_color(color)))
    return entries


def generate_palette(
    mode: Union[str, HarmonyMode],
    base: str,
    count: int,
    locked: Iterable[Union[LockedEntry, Sequence]] = (),
    sequence: Optional[GoldenRatioSequence] = None,
) -> List[str]:
    """
    Generate a palette of exactly `count` colors.

    Args:
        mode: Harmony mode tag; unrecognized tags fall back to monochromatic
        base: Base color as "#hex", "rgb(...)" or "hsl(...)" text
        count: Palette length; zero or negative yields an empty palette
        locked: (index, hex) pairs applied after generation; indices outside
            the palette are ignored
        sequence: Golden-ratio state for the random and AI modes. A fresh
            randomly seeded sequence is used when omitted.

    Returns:
        List of uppercase "#RRGGBB" colors

    Raises:
        InvalidColorFormat: If the base or a locked color is malformed
    """
    normalized_base = parse_color(base)
    locked_entries = _normalize_locked(locked)
    count = int(count)
    if count <= 0:
        return []

    resolved = HarmonyMode.from_tag(mode)
    if resolved == HarmonyMode.RANDOM:
        palette = generate_random(count, sequence or GoldenRatioSequence())
    elif resolved == HarmonyMode.AI:
        palette = generate_ai_inspired(normalized_base, count, sequence or GoldenRatioSequence())
    else:
        palette = _DETERMINISTIC_GENERATORS[resolved](normalized_base, count)

    palette = _fit_to_count(palette, count)
    for entry in locked_entries:
        if 0 <= entry.index < count:
            palette[entry.index] = entry.hex
    return palette
