"""
Swatch list reduction for exporters.

Collapses near-duplicate colors, throttles how many neutrals survive and
makes swatch names unique, keeping the caller's ordering throughout.
"""

from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from palettesmith.utils.logging import logger
from .space import hex_to_lab, lab_array, lab_to_lch, parse_color
from .tokens import ThemeTokenSet

NEUTRAL_CHROMA = 12.0


class Swatch(NamedTuple):
    name: str
    hex: str


class StackEntry(NamedTuple):
    name: str
    path: str
    hex: str


# (display name, token path, fallback path)
ORDERED_SWATCH_SPEC: Tuple[Tuple[str, str, Optional[str]], ...] = (
    ("Primary", "brand.primary", None),
    ("Accent", "brand.accent", None),
    ("Background", "surfaces.background", None),
    ("Body text", "typography.text-body", None),
    ("Heading", "typography.heading", None),
    ("Muted", "typography.text-muted", None),
    ("Page background", "surfaces.page-background", None),
    ("Header background", "surfaces.header-background", None),
    ("Header border", "surfaces.surface-plain-border", None),
    ("Footer background", "cards.card-panel-surface-strong", None),
    ("Footer border", "cards.card-panel-border", None),
    ("Header/overlay background", "aliases.overlay-panel", "surfaces.header-background"),
    ("Card surface background", "cards.card-panel-surface", None),
    ("Primary CTA & accents", "brand.cta", None),
    ("Brand accent colour", "brand.secondary", None),
    ("Hover & interactive states", "brand.cta-hover", None),
    ("Text accent", "typography.text-accent", None),
    ("Text accent strong", "typography.text-accent-strong", None),
    ("Link colour", "brand.link-color", None),
    ("Focus ring colour", "brand.focus-ring", None),
    ("Text primary", "text-palette.text-primary", None),
    ("Text secondary", "text-palette.text-secondary", None),
    ("Text tertiary", "text-palette.text-tertiary", None),
    ("Text strong", "typography.text-strong", None),
    ("Text hint", "typography.text-hint", None),
    ("Text disabled", "typography.text-disabled", None),
    ("Ink body", "named.color-ink", "text-palette.text-primary"),
    ("Ink strong", "named.color-midnight", "typography.text-strong"),
    ("Ink muted", "named.color-dusk", "text-palette.text-tertiary"),
    ("Surface plain", "surfaces.surface-plain", None),
    ("Footer text", "typography.footer-text", None),
    ("Footer muted text", "typography.footer-text-muted", None),
    ("Card panel border strong", "cards.card-panel-border-strong", None),
    ("Card panel border soft", "cards.card-panel-border-soft", None),
    ("Card badge bg", "cards.card-tag-bg", None),
    ("Card badge border", "cards.card-tag-border", None),
    ("Card badge text", "cards.card-tag-text", None),
    ("Card spoon bg", "aliases.chip-background", "cards.card-panel-surface"),
    ("Card spoon border", "aliases.chip-border", "cards.card-panel-border"),
    ("Glass base", "glass.glass-surface", None),
    ("Glass strong", "glass.glass-surface-strong", None),
    ("Glass hover", "glass.glass-hover", None),
    ("Glass border", "glass.glass-border", None),
    ("Glass border strong", "glass.glass-border-strong", None),
    ("Glass highlight", "glass.glass-highlight", None),
    ("Glass glow", "glass.glass-glow", None),
    ("Success", "status.success", None),
    ("Warning", "status.warning", None),
    ("Error", "status.error", None),
    ("Info", "status.info", None),
    ("Entity card border", "entity.entity-card-border", None),
    ("Entity card glow", "entity.entity-card-glow", None),
    ("Entity card highlight", "entity.entity-card-highlight", None),
    ("Entity card surface", "entity.entity-card-surface", None),
    ("Entity card heading", "entity.entity-card-heading", None),
    ("Entity card CTA", "brand.cta", None),
    ("Entity card CTA hover", "brand.cta-hover", None),
)


def is_neutral(hex_color: str) -> bool:
    """Neutral means CIE LCH chroma below 12."""
    return lab_to_lch(hex_to_lab(hex_color)).c < NEUTRAL_CHROMA


def _unique_names(swatches: List[Swatch]) -> List[Swatch]:
    """Suffix repeated names with " (n)", skipping any name already emitted."""
    used = set()
    result = []
    for swatch in swatches:
        name = swatch.name
        suffix = 2
        while name in used:
            name = f"{swatch.name} ({suffix})"
            suffix += 1
        used.add(name)
        result.append(Swatch(name, swatch.hex))
    return result


def reduce_swatches(
    named: Iterable[Sequence[str]],
    cap: int = 8,
    threshold: float = 2.0,
    max_colors: Optional[int] = None,
) -> List[Swatch]:
    """
    Reduce a named color list for export.

    Args:
        named: (name, color) pairs; colors may be "#hex", "rgb(...)" or "hsl(...)"
        cap: Maximum number of neutrals kept (first ones win)
        threshold: Colors closer than this LAB distance to an earlier kept
            color are dropped
        max_colors: Optional cap on the final list length

    Returns:
        Swatches in input order with unique names

    Raises:
        InvalidColorFormat: If any color is malformed
    """
    parsed = [Swatch(str(name), parse_color(color)) for name, color in named]

    kept: List[Swatch] = []
    kept_hexes = set()
    kept_labs = np.zeros((0, 3))
    for swatch in parsed:
        if swatch.hex in kept_hexes:
            continue
        lab = lab_array([swatch.hex])
        if len(kept_labs) and np.linalg.norm(kept_labs - lab, axis=1).min() < threshold:
            continue
        kept.append(swatch)
        kept_hexes.add(swatch.hex)
        kept_labs = np.vstack([kept_labs, lab])

    neutrals = 0
    throttled = []
    for swatch in kept:
        if is_neutral(swatch.hex):
            neutrals += 1
            if neutrals > cap:
                continue
        throttled.append(swatch)

    if max_colors is not None:
        throttled = throttled[:max(0, int(max_colors))]

    logger.debug("Reduced swatches", extra={
        "input": len(parsed),
        "deduplicated": len(kept),
        "output": len(throttled)
    })
    return _unique_names(throttled)


def build_swatch_stack(tokens: ThemeTokenSet) -> List[StackEntry]:
    """
    Ordered named token list for exporters.

    Entries whose path (and fallback path) are missing from the token set are
    skipped.
    """
    stack = []
    for name, path, fallback in ORDERED_SWATCH_SPEC:
        value = tokens.get(path)
        if value is None and fallback is not None:
            value = tokens.get(fallback)
        if value is not None:
            stack.append(StackEntry(name, path, value))
    return stack
