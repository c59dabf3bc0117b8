"""
Palettesmith Contrast Solver

Adjusts a foreground color's lightness, keeping hue and saturation fixed, until
it reaches a WCAG contrast target against a background. The search is bounded
and falls back to pure black or white when lightness alone cannot get there.
"""

from dataclasses import dataclass
from enum import Enum

from palettesmith.utils.logging import logger
from .space import contrast_ratio, hex_to_hsl, hex_to_oklch, hsl_to_hex, normalize_hex

MAX_STEPS = 30
LIGHTNESS_STEP = 2
MIN_LIGHTNESS = 1
MAX_LIGHTNESS = 99

BLACK = "#000000"
WHITE = "#FFFFFF"


class WCAGLevel(str, Enum):
    """WCAG 2.1 conformance bands for a contrast ratio."""
    AAA = "AAA"
    AA = "AA"
    AA18 = "AA18"  # large text only
    FAIL = "FAIL"


@dataclass
class ContrastResult:
    """Outcome of a contrast search."""
    color: str
    ratio: float
    steps: int
    fell_back: bool


def wcag_level(ratio: float) -> WCAGLevel:
    if ratio >= 7:
        return WCAGLevel.AAA
    if ratio >= 4.5:
        return WCAGLevel.AA
    if ratio >= 3:
        return WCAGLevel.AA18
    return WCAGLevel.FAIL


def black_or_white(bg: str) -> str:
    """Whichever of black and white contrasts more with bg; black on ties."""
    black_ratio = contrast_ratio(BLACK, bg)
    white_ratio = contrast_ratio(WHITE, bg)
    return BLACK if black_ratio >= white_ratio else WHITE


def solve_contrast(fg: str, bg: str, target: float, prefer_lighten: bool) -> ContrastResult:
    """
    Search lightness for a color meeting the target ratio against bg.

    Each step compares lightening and darkening by 2 (bounded to [1, 99]) and
    keeps the direction with the higher ratio; equal ratios follow
    prefer_lighten. The search stops early when neither direction changes the
    ratio, or when both directions tie for two consecutive steps.

    Args:
        fg: Foreground color to adjust
        bg: Fixed background color
        target: Minimum contrast ratio
        prefer_lighten: Direction to take when both directions tie

    Returns:
        ContrastResult with the chosen color and the number of steps taken

    Raises:
        InvalidColorFormat: If either color is malformed
    """
    color = normalize_hex(fg)
    background = normalize_hex(bg)
    h, s, l = hex_to_hsl(color)
    ratio = contrast_ratio(color, background)
    if ratio >= target:
        return ContrastResult(color=color, ratio=ratio, steps=0, fell_back=False)

    consecutive_ties = 0
    for step in range(1, MAX_STEPS + 1):
        up = min(MAX_LIGHTNESS, l + LIGHTNESS_STEP)
        down = max(MIN_LIGHTNESS, l - LIGHTNESS_STEP)
        up_color = hsl_to_hex(h, s, up)
        down_color = hsl_to_hex(h, s, down)
        up_ratio = contrast_ratio(up_color, background)
        down_ratio = contrast_ratio(down_color, background)

        if up_ratio == ratio and down_ratio == ratio:
            break
        if up_ratio == down_ratio:
            consecutive_ties += 1
            if consecutive_ties >= 2:
                break
            if prefer_lighten:
                l, color, ratio = up, up_color, up_ratio
            else:
                l, color, ratio = down, down_color, down_ratio
        else:
            consecutive_ties = 0
            if up_ratio > down_ratio:
                l, color, ratio = up, up_color, up_ratio
            else:
                l, color, ratio = down, down_color, down_ratio

        if ratio >= target:
            return ContrastResult(color=color, ratio=ratio, steps=step, fell_back=False)

    fallback = black_or_white(background)
    logger.debug("Contrast search fell back to black/white", extra={
        "fg": fg,
        "bg": background,
        "target": target,
        "fallback": fallback
    })
    return ContrastResult(
        color=fallback,
        ratio=contrast_ratio(fallback, background),
        steps=MAX_STEPS,
        fell_back=True,
    )


def ensure_contrast(fg: str, bg: str, target: float, prefer_lighten: bool = False) -> str:
    """
    Return fg adjusted in lightness to meet target contrast against bg.

    Args:
        fg: Foreground color
        bg: Background color
        target: Minimum WCAG contrast ratio
        prefer_lighten: Tie-break direction

    Returns:
        Adjusted color, or black/white when the search does not converge
    """
    return solve_contrast(fg, bg, target, prefer_lighten).color


def pick_readable_text(bg: str, light: str = WHITE, dark: str = "#0F172A", threshold: float = 4.5) -> str:
    """Prefer the light text color unless it is both under threshold and worse than dark."""
    ratio_light = contrast_ratio(light, bg)
    ratio_dark = contrast_ratio(dark, bg)
    if ratio_light >= threshold or ratio_light >= ratio_dark:
        return normalize_hex(light)
    return normalize_hex(dark)


def on_color(bg: str, threshold: float = 4.5) -> str:
    """
    Text/icon color for content placed on a background.

    When both black and white pass the threshold the OKLCH lightness of the
    background decides; otherwise the passing (or stronger) one wins.
    """
    white_ratio = contrast_ratio(WHITE, bg)
    black_ratio = contrast_ratio(BLACK, bg)
    if white_ratio >= threshold and black_ratio >= threshold:
        return BLACK if hex_to_oklch(bg).l > 0.5 else WHITE
    if white_ratio >= threshold:
        return WHITE
    if black_ratio >= threshold:
        return BLACK
    return WHITE if white_ratio > black_ratio else BLACK
