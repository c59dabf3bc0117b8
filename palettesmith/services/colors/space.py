"""
Palettesmith Color Space Conversions

Pure conversions between HEX, sRGB, HSL, CMYK, CIE LAB (D65) and OKLCH, plus
WCAG luminance/contrast and the LAB Euclidean Delta E used for perceptual
distance. sRGB 0-255 integer triples are the canonical form; every other
representation is a derived view with a forward and inverse function.
"""

import math
import numbers
import re
from typing import Any, Dict, List, NamedTuple, Sequence, Tuple, Union

import numpy as np

from .hue import wrap_hue, interpolate_hue


class InvalidColorFormat(ValueError):
    """Raised for malformed color text or out-of-domain channel values."""


class RGB(NamedTuple):
    r: int
    g: int
    b: int


class HSL(NamedTuple):
    h: float  # [0, 360)
    s: float  # [0, 100]
    l: float  # [0, 100]


class CMYK(NamedTuple):
    c: int
    m: int
    y: int
    k: int


class LAB(NamedTuple):
    l: float
    a: float
    b: float


class LCH(NamedTuple):
    l: float
    c: float
    h: float


class OKLCH(NamedTuple):
    l: float  # [0, 1]
    c: float  # >= 0
    h: float  # [0, 360)


ColorLike = Union[str, Sequence[float]]

COLOR_SPACES = ("hex", "rgb", "hsl", "cmyk", "lab", "oklch")

# OKLCH chroma below this carries no meaningful hue
ACHROMATIC_CHROMA = 1e-7

# D65 reference white (2 degree observer)
D65_WHITE = np.array([95.047, 100.0, 108.883])

_XYZ_FROM_LINEAR = np.array([
    [0.4124, 0.3576, 0.1805],
    [0.2126, 0.7152, 0.0722],
    [0.0193, 0.1192, 0.9505],
])
_LINEAR_FROM_XYZ = np.linalg.inv(_XYZ_FROM_LINEAR)

_LMS_FROM_LINEAR = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
])
_OKLAB_FROM_LMS = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
])
_LMS_FROM_OKLAB = np.array([
    [1.0, 0.3963377774, 0.2158037573],
    [1.0, -0.1055613458, -0.0638541728],
    [1.0, -0.0894841775, -1.2914855480],
])
_LINEAR_FROM_LMS = np.array([
    [4.0767416621, -3.3077115913, 0.2309699292],
    [-1.2684380046, 2.6097574011, -0.3413193965],
    [-0.0041960863, -0.7034186147, 1.7076147010],
])

_HEX_RE = re.compile(r"^[0-9a-fA-F]{6}$")
_RGB_TEXT_RE = re.compile(r"^rgb\((\d{1,3}),\s*(\d{1,3}),\s*(\d{1,3})\)$", re.IGNORECASE)
_HSL_TEXT_RE = re.compile(r"^hsl\((\d{1,3}),\s*(\d{1,3})%,\s*(\d{1,3})%\)$", re.IGNORECASE)

# Small curated table for friendly names
NAMED_COLORS: Tuple[Tuple[str, str], ...] = (
    ("Pure White", "#FFFFFF"),
    ("Coal Black", "#000000"),
    ("Soft Gray", "#B0BEC5"),
    ("Charcoal", "#37474F"),
    ("Coral", "#FF6B6B"),
    ("Sunflower", "#FFC312"),
    ("Sky Blue", "#60A5FA"),
    ("Ocean", "#0EA5E9"),
    ("Lavender", "#A78BFA"),
    ("Violet", "#7C3AED"),
    ("Emerald", "#10B981"),
    ("Forest", "#065F46"),
    ("Rose", "#F472B6"),
    ("Clay", "#B5651D"),
    ("Slate", "#64748B"),
    ("Azure", "#3A7BD5"),
    ("Amber", "#FFB300"),
    ("Mint", "#34D399"),
    ("Crimson", "#DC2626"),
    ("Saffron", "#F59E0B"),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going up."""
    return int(math.floor(value + 0.5))


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def _require_number(value: Any, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidColorFormat(f"{label} must be a number, got {value!r}")
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        raise InvalidColorFormat(f"{label} must be finite, got {value!r}")
    return value


def _require_triple(values: Any, labels: str) -> Tuple[float, float, float]:
    if isinstance(values, str) or not isinstance(values, Sequence) or len(values) != 3:
        raise InvalidColorFormat(f"Expected three channel values ({labels}), got {values!r}")
    return tuple(_require_number(v, labels[i]) for i, v in enumerate(values))


def _require_range(value: float, lo: float, hi: float, label: str) -> float:
    if value < lo or value > hi:
        raise InvalidColorFormat(f"{label} out of range [{lo}, {hi}]: {value}")
    return value


# -- HEX <-> RGB ------------------------------------------------------------

def hex_to_rgb(hex_color: str) -> RGB:
    """
    Parse a 3 or 6 digit hex color.

    Args:
        hex_color: Color such as "#6C5CE7", "6c5ce7" or "#FFF"

    Returns:
        RGB triple of integers in [0, 255]

    Raises:
        InvalidColorFormat: If the text is not a hex color
    """
    if not isinstance(hex_color, str):
        raise InvalidColorFormat(f"Hex color must be a string, got {hex_color!r}")

    sanitized = hex_color.strip()
    if sanitized.startswith("#"):
        sanitized = sanitized[1:]
    if len(sanitized) == 3:
        sanitized = "".join(ch + ch for ch in sanitized)
    if not _HEX_RE.match(sanitized):
        raise InvalidColorFormat(f"Invalid hex color format: {hex_color}")

    value = int(sanitized, 16)
    return RGB((value >> 16) & 255, (value >> 8) & 255, value & 255)


def rgb_to_hex(rgb: Sequence[float]) -> str:
    """
    Encode an RGB triple as uppercase "#RRGGBB".

    Channels are rounded half-up and clamped to [0, 255] before encoding.
    """
    r, g, b = (int(clamp(round_half_up(v), 0, 255)) for v in _require_triple(rgb, "rgb"))
    return f"#{r:02X}{g:02X}{b:02X}"


def normalize_hex(hex_color: str) -> str:
    """Return the canonical "#RRGGBB" form of any accepted hex color."""
    return rgb_to_hex(hex_to_rgb(hex_color))


def to_rgb(color: ColorLike) -> RGB:
    """Accept a hex string or an RGB triple and return a validated RGB."""
    if isinstance(color, str):
        return hex_to_rgb(color)
    channels = _require_triple(color, "rgb")
    for channel, label in zip(channels, "rgb"):
        _require_range(channel, 0, 255, label)
    return RGB(*(round_half_up(v) for v in channels))


# -- HSL --------------------------------------------------------------------

def rgb_to_hsl(rgb: Sequence[float]) -> HSL:
    """
    Convert RGB to HSL.

    Values are returned at full precision; display code rounds. The hue branch
    is picked by the maximum channel, checked in R, G, B order.

    Args:
        rgb: RGB triple in [0, 255]

    Returns:
        HSL with H in [0, 360), S and L in [0, 100]. Achromatic colors have
        H == S == 0.
    """
    r, g, b = (v / 255.0 for v in _require_triple(rgb, "rgb"))
    mx = max(r, g, b)
    mn = min(r, g, b)
    delta = mx - mn
    h = 0.0
    s = 0.0
    l = (mx + mn) / 2.0

    if delta != 0:
        if mx == r:
            h = (g - b) / delta + (6.0 if g < b else 0.0)
        elif mx == g:
            h = (b - r) / delta + 2.0
        else:
            h = (r - g) / delta + 4.0
        h = wrap_hue(h * 60.0)
        s = delta / (1.0 - abs(2.0 * l - 1.0))

    return HSL(h, s * 100.0, l * 100.0)


def hsl_to_rgb(hsl: Sequence[float]) -> RGB:
    """
    Convert HSL to RGB.

    Hue wraps, saturation and lightness are clamped to [0, 100].
    """
    h, s, l = _require_triple(hsl, "hsl")
    sat = clamp(s / 100.0, 0.0, 1.0)
    light = clamp(l / 100.0, 0.0, 1.0)
    hue = wrap_hue(h)

    chroma = (1.0 - abs(2.0 * light - 1.0)) * sat
    x = chroma * (1.0 - abs(((hue / 60.0) % 2.0) - 1.0))
    m = light - chroma / 2.0

    if hue < 60:
        r, g, b = chroma, x, 0.0
    elif hue < 120:
        r, g, b = x, chroma, 0.0
    elif hue < 180:
        r, g, b = 0.0, chroma, x
    elif hue < 240:
        r, g, b = 0.0, x, chroma
    elif hue < 300:
        r, g, b = x, 0.0, chroma
    else:
        r, g, b = chroma, 0.0, x

    return RGB(
        round_half_up((r + m) * 255),
        round_half_up((g + m) * 255),
        round_half_up((b + m) * 255),
    )


def as_hsl(value: Sequence[float]) -> HSL:
    """Validate an (h, s, l) triple, wrapping hue and clamping S/L to [0, 100]."""
    h, s, l = _require_triple(value, "hsl")
    return HSL(wrap_hue(h), clamp(s, 0.0, 100.0), clamp(l, 0.0, 100.0))


def hex_to_hsl(hex_color: str) -> HSL:
    return rgb_to_hsl(hex_to_rgb(hex_color))


def hsl_to_hex(h: float, s: float, l: float) -> str:
    return rgb_to_hex(hsl_to_rgb((h, s, l)))


# -- CMYK -------------------------------------------------------------------

def rgb_to_cmyk(rgb: Sequence[float]) -> CMYK:
    """
    Convert RGB to integer CMYK percentages.

    Pure black maps to (0, 0, 0, 100) instead of dividing by zero.
    """
    r, g, b = (v / 255.0 for v in _require_triple(rgb, "rgb"))
    k = 1.0 - max(r, g, b)
    if k == 1.0:
        return CMYK(0, 0, 0, 100)
    c = (1.0 - r - k) / (1.0 - k)
    m = (1.0 - g - k) / (1.0 - k)
    y = (1.0 - b - k) / (1.0 - k)
    return CMYK(
        round_half_up(c * 100),
        round_half_up(m * 100),
        round_half_up(y * 100),
        round_half_up(k * 100),
    )


def cmyk_to_rgb(cmyk: Sequence[float]) -> RGB:
    """Convert CMYK percentages in [0, 100] back to RGB."""
    if isinstance(cmyk, str) or not isinstance(cmyk, Sequence) or len(cmyk) != 4:
        raise InvalidColorFormat(f"Expected four channel values (cmyk), got {cmyk!r}")
    c, m, y, k = (
        _require_range(_require_number(v, label), 0, 100, label) / 100.0
        for v, label in zip(cmyk, "cmyk")
    )
    return RGB(
        round_half_up(255 * (1 - c) * (1 - k)),
        round_half_up(255 * (1 - m) * (1 - k)),
        round_half_up(255 * (1 - y) * (1 - k)),
    )


# -- CIE LAB ----------------------------------------------------------------

def _srgb_decode(channel: np.ndarray) -> np.ndarray:
    return np.where(channel > 0.04045, ((channel + 0.055) / 1.055) ** 2.4, channel / 12.92)


def _srgb_encode(linear: np.ndarray) -> np.ndarray:
    linear = np.clip(linear, 0.0, 1.0)
    return np.where(linear <= 0.0031308, linear * 12.92, 1.055 * np.power(linear, 1 / 2.4) - 0.055)


def _lab_f(t: np.ndarray) -> np.ndarray:
    return np.where(t > 0.008856, np.cbrt(t), 7.787 * t + 16.0 / 116.0)


def _lab_f_inv(t: np.ndarray) -> np.ndarray:
    cubed = t ** 3
    return np.where(cubed > 0.008856, cubed, (t - 16.0 / 116.0) / 7.787)


def rgb_to_lab(rgb: Sequence[float]) -> LAB:
    """
    Convert RGB to CIE L*a*b* via linear-light XYZ under D65.

    Args:
        rgb: RGB triple in [0, 255]

    Returns:
        LAB with L in [0, 100]
    """
    channels = np.array(_require_triple(rgb, "rgb")) / 255.0
    linear = _srgb_decode(channels) * 100.0
    xyz = _XYZ_FROM_LINEAR @ linear
    fx, fy, fz = _lab_f(xyz / D65_WHITE)
    return LAB(float(116.0 * fy - 16.0), float(500.0 * (fx - fy)), float(200.0 * (fy - fz)))


def lab_to_rgb(lab: Sequence[float]) -> RGB:
    """Inverse of rgb_to_lab; out-of-gamut results are clamped."""
    l, a, b = _require_triple(lab, "lab")
    fy = (l + 16.0) / 116.0
    fx = fy + a / 500.0
    fz = fy - b / 200.0
    xyz = _lab_f_inv(np.array([fx, fy, fz])) * D65_WHITE
    linear = (_LINEAR_FROM_XYZ @ xyz) / 100.0
    encoded = _srgb_encode(linear) * 255.0
    return RGB(*(round_half_up(float(v)) for v in encoded))


def lab_to_lch(lab: Sequence[float]) -> LCH:
    """Polar form of LAB; chroma is the length of (a, b)."""
    l, a, b = _require_triple(lab, "lab")
    c = math.hypot(a, b)
    h = wrap_hue(math.degrees(math.atan2(b, a))) if c > 0 else 0.0
    return LCH(l, c, h)


def hex_to_lab(hex_color: str) -> LAB:
    return rgb_to_lab(hex_to_rgb(hex_color))


# -- OKLCH ------------------------------------------------------------------

def rgb_to_oklch(rgb: Sequence[float]) -> OKLCH:
    """
    Convert RGB to OKLCH through the OKLab LMS matrices.

    Chroma below 1e-7 forces the hue to 0.
    """
    channels = np.array(_require_triple(rgb, "rgb")) / 255.0
    lms = np.cbrt(_LMS_FROM_LINEAR @ _srgb_decode(channels))
    L, a, b = _OKLAB_FROM_LMS @ lms
    c = float(math.hypot(a, b))
    h = 0.0 if c < ACHROMATIC_CHROMA else wrap_hue(math.degrees(math.atan2(b, a)))
    return OKLCH(float(clamp(L, 0.0, 1.0)), c, h)


def oklch_to_rgb(oklch: Sequence[float]) -> RGB:
    """Convert OKLCH to RGB, clamping linear light into gamut."""
    l, c, h = _require_triple(oklch, "lch")
    hr = math.radians(wrap_hue(h))
    chroma = max(0.0, c)
    lab = np.array([l, math.cos(hr) * chroma, math.sin(hr) * chroma])
    lms = (_LMS_FROM_OKLAB @ lab) ** 3
    encoded = _srgb_encode(_LINEAR_FROM_LMS @ lms) * 255.0
    return RGB(*(round_half_up(float(v)) for v in encoded))


def hex_to_oklch(hex_color: str) -> OKLCH:
    return rgb_to_oklch(hex_to_rgb(hex_color))


def oklch_to_hex(oklch: Sequence[float]) -> str:
    return rgb_to_hex(oklch_to_rgb(oklch))


# -- Luminance, contrast and distance ---------------------------------------

def relative_luminance(color: ColorLike) -> float:
    """WCAG 2.1 relative luminance in [0, 1]."""
    rgb = to_rgb(color)

    def channel(c: int) -> float:
        v = c / 255.0
        return v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4

    return 0.2126 * channel(rgb.r) + 0.7152 * channel(rgb.g) + 0.0722 * channel(rgb.b)


def contrast_ratio(color_a: ColorLike, color_b: ColorLike) -> float:
    """
    WCAG contrast ratio between two colors at full precision.

    Args:
        color_a: Hex string or RGB triple
        color_b: Hex string or RGB triple

    Returns:
        Ratio in [1, 21]; symmetric in its arguments
    """
    lum_a = relative_luminance(color_a)
    lum_b = relative_luminance(color_b)
    lighter = max(lum_a, lum_b)
    darker = min(lum_a, lum_b)
    return (lighter + 0.05) / (darker + 0.05)


def display_contrast_ratio(color_a: ColorLike, color_b: ColorLike) -> float:
    """Contrast ratio rounded to two decimals for display."""
    return round_half_up(contrast_ratio(color_a, color_b) * 100) / 100.0


def delta_e(color_a: ColorLike, color_b: ColorLike) -> float:
    """
    Euclidean distance in CIE LAB.

    This is the plain 1976 formula, not CIE94/CIEDE2000. Thresholds elsewhere
    (near-duplicate collapse, neutral cutoff) are tuned against it.
    """
    lab_a = np.array(rgb_to_lab(to_rgb(color_a)))
    lab_b = np.array(rgb_to_lab(to_rgb(color_b)))
    return float(np.linalg.norm(lab_a - lab_b))


def blend_colors_perceptual(hex_a: str, hex_b: str, weight: float = 0.0) -> str:
    """
    Blend two colors in OKLCH.

    L and C are interpolated linearly and H along the shortest arc. An
    achromatic endpoint takes the other endpoint's hue so the blend does not
    swing through an unrelated hue.

    Args:
        hex_a: Color at weight 0
        hex_b: Color at weight 1
        weight: Blend factor, clamped to [0, 1]

    Returns:
        Blended hex color
    """
    t = clamp(_require_number(weight, "weight"), 0.0, 1.0)
    a = hex_to_oklch(hex_a)
    b = hex_to_oklch(hex_b)

    h1 = a.h if a.c >= ACHROMATIC_CHROMA else None
    h2 = b.h if b.c >= ACHROMATIC_CHROMA else None
    if h1 is None:
        h1 = h2 if h2 is not None else 0.0
    if h2 is None:
        h2 = h1

    l = a.l + (b.l - a.l) * t
    c = max(0.0, a.c + (b.c - a.c) * t)
    h = interpolate_hue(h1, h2, t)
    return oklch_to_hex((l, c, h))


# -- Generic conversion -----------------------------------------------------

def _space_to_rgb(value: Any, space: str) -> RGB:
    if space == "hex":
        return hex_to_rgb(value)
    if space == "rgb":
        return to_rgb(_require_triple(value, "rgb"))
    if space == "hsl":
        h, s, l = _require_triple(value, "hsl")
        _require_range(s, 0, 100, "s")
        _require_range(l, 0, 100, "l")
        return hsl_to_rgb((h, s, l))
    if space == "cmyk":
        return cmyk_to_rgb(value)
    if space == "lab":
        l, a, b = _require_triple(value, "lab")
        _require_range(l, 0, 100, "l")
        return lab_to_rgb((l, a, b))
    if space == "oklch":
        l, c, h = _require_triple(value, "lch")
        _require_range(l, 0, 1, "l")
        _require_range(c, 0, math.inf, "c")
        return oklch_to_rgb((l, c, h))
    raise InvalidColorFormat(f"Unsupported color space: {space}")


def _rgb_to_space(rgb: RGB, space: str) -> Any:
    if space == "hex":
        return rgb_to_hex(rgb)
    if space == "rgb":
        return rgb
    if space == "hsl":
        return rgb_to_hsl(rgb)
    if space == "cmyk":
        return rgb_to_cmyk(rgb)
    if space == "lab":
        return rgb_to_lab(rgb)
    if space == "oklch":
        return rgb_to_oklch(rgb)
    raise InvalidColorFormat(f"Unsupported color space: {space}")


def convert(value: Any, from_space: str, to_space: str) -> Any:
    """
    Convert a color between any two supported spaces.

    Supported spaces are hex, rgb, hsl, cmyk, lab and oklch. Conversion goes
    through the canonical 8-bit RGB form, so cross-space results are quantized.

    Args:
        value: Hex string for "hex", otherwise a channel sequence
        from_space: Space the value is expressed in
        to_space: Space to convert into

    Returns:
        Hex string or the named tuple for the target space

    Raises:
        InvalidColorFormat: Malformed value, out-of-range channel or unknown space
    """
    if not isinstance(from_space, str) or not isinstance(to_space, str):
        raise InvalidColorFormat("Color space names must be strings")
    source = from_space.strip().lower()
    target = to_space.strip().lower()
    for space in (source, target):
        if space not in COLOR_SPACES:
            raise InvalidColorFormat(f"Unsupported color space: {space}")
    return _rgb_to_space(_space_to_rgb(value, source), target)


def parse_color(text: str) -> str:
    """
    Parse "#hex", "rgb(r, g, b)" or "hsl(h, s%, l%)" into a normalized hex.

    Channels written outside their range are clamped.
    """
    if not isinstance(text, str):
        raise InvalidColorFormat(f"Color text must be a string, got {text!r}")
    trimmed = text.strip()
    if trimmed.startswith("#"):
        return normalize_hex(trimmed)

    match = _RGB_TEXT_RE.match(trimmed)
    if match:
        return rgb_to_hex([clamp(int(v), 0, 255) for v in match.groups()])

    match = _HSL_TEXT_RE.match(trimmed)
    if match:
        h, s, l = (int(v) for v in match.groups())
        return hsl_to_hex(clamp(h, 0, 360), clamp(s, 0, 100), clamp(l, 0, 100))

    raise InvalidColorFormat(f"Unsupported color format: {text}")


def approximate_name(hex_color: str) -> str:
    """
    Nearest friendly name from NAMED_COLORS by Delta E.

    Names further than 10 units away get a trailing " ~".
    """
    best_name = NAMED_COLORS[0][0]
    shortest = math.inf
    for name, candidate in NAMED_COLORS:
        distance = delta_e(hex_color, candidate)
        if distance < shortest:
            shortest = distance
            best_name = name
    return f"{best_name} ~" if shortest > 10 else best_name


def describe(hex_color: str) -> Dict[str, Any]:
    """Every representation of one color, as plain values for serialization."""
    rgb = hex_to_rgb(hex_color)
    hsl = rgb_to_hsl(rgb)
    lab = rgb_to_lab(rgb)
    oklch = rgb_to_oklch(rgb)
    return {
        "hex": rgb_to_hex(rgb),
        "rgb": list(rgb),
        "hsl": [round_half_up(hsl.h) % 360, round_half_up(hsl.s), round_half_up(hsl.l)],
        "cmyk": list(rgb_to_cmyk(rgb)),
        "lab": [round(v, 2) for v in lab],
        "oklch": [round(oklch.l, 4), round(oklch.c, 4), round(oklch.h, 2)],
        "name": approximate_name(hex_color),
    }


def lab_array(hex_colors: List[str]) -> np.ndarray:
    """Stack LAB values for a list of colors into an (n, 3) array."""
    if not hex_colors:
        return np.zeros((0, 3))
    return np.array([rgb_to_lab(hex_to_rgb(c)) for c in hex_colors])
