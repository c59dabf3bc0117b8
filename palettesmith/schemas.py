"""
Palettesmith API Schemas
Pydantic models for conversion, contrast, palette, token, swatch and vision
request/response validation.
"""
from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field, field_validator

from palettesmith.config import config
from palettesmith.services.colors.vision import VisionMode

HEX_PATTERN = r"^#[0-9A-Fa-f]{6}$"
VISION_MODES = [mode.value for mode in VisionMode]


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("palettesmith", description="Service name")


# ============================================================================
# COLOR SPACE SCHEMAS
# ============================================================================

class ConvertRequest(BaseModel):
    """Convert a color between two spaces."""
    value: Union[str, List[float]] = Field(
        ...,
        description="Hex string for 'hex', otherwise a list of channel values"
    )
    from_space: str = Field(..., description="Source space: hex, rgb, hsl, cmyk, lab or oklch")
    to_space: str = Field(..., description="Target space: hex, rgb, hsl, cmyk, lab or oklch")

    @field_validator("from_space", "to_space")
    @classmethod
    def validate_space(cls, v):
        if not config.validate_space(v):
            raise ValueError(f"space must be one of {', '.join(config.SUPPORTED_SPACES)}")
        return v.lower()


class ConvertResponse(BaseModel):
    from_space: str
    to_space: str
    value: Union[str, List[float]] = Field(..., description="Converted value")
    hex: str = Field(..., pattern=HEX_PATTERN, description="Hex form of the color")


# ============================================================================
# CONTRAST SCHEMAS
# ============================================================================

class ContrastRequest(BaseModel):
    """Compare two colors."""
    foreground: str = Field(..., description="Foreground color (#hex, rgb(), hsl())")
    background: str = Field(..., description="Background color (#hex, rgb(), hsl())")


class ContrastResponse(BaseModel):
    foreground: str = Field(..., pattern=HEX_PATTERN)
    background: str = Field(..., pattern=HEX_PATTERN)
    ratio: float = Field(..., ge=1.0, le=21.0, description="WCAG contrast ratio, two decimals")
    level: str = Field(..., description="AAA, AA, AA18 or FAIL")
    delta_e: float = Field(..., ge=0.0, description="Euclidean LAB distance")


class EnsureContrastRequest(BaseModel):
    """Adjust a foreground color until it meets a contrast target."""
    foreground: str = Field(..., description="Foreground color to adjust")
    background: str = Field(..., description="Fixed background color")
    target: float = Field(config.CONTRAST_TARGET, description="Minimum contrast ratio")
    prefer_lighten: bool = Field(False, description="Direction to take when both directions tie")

    @field_validator("target")
    @classmethod
    def validate_target(cls, v):
        if not config.validate_contrast_target(v):
            raise ValueError("target must be between 1 and 21")
        return v


class EnsureContrastResponse(BaseModel):
    color: str = Field(..., pattern=HEX_PATTERN)
    ratio: float = Field(..., description="Achieved contrast ratio, two decimals")
    steps: int = Field(..., ge=0, description="Lightness steps taken")
    fell_back: bool = Field(..., description="Whether black/white was substituted")


# ============================================================================
# PALETTE SCHEMAS
# ============================================================================

class LockedColor(BaseModel):
    """A palette slot pinned to a color."""
    index: int = Field(..., ge=0, description="Palette index")
    hex: str = Field(..., description="Locked color")


class PaletteRequest(BaseModel):
    """Generate a harmony palette."""
    base: str = Field(..., description="Base color (#hex, rgb(), hsl())")
    mode: str = Field("monochromatic", description="Harmony mode; unknown modes fall back to monochromatic")
    count: int = Field(config.DEFAULT_PALETTE_SIZE, ge=0, description="Number of colors")
    locked: List[LockedColor] = Field(default_factory=list, description="Locked slots")
    seed: Optional[int] = Field(None, description="Seed for the random and ai modes")

    @field_validator("count")
    @classmethod
    def validate_count(cls, v):
        if v > config.MAX_TOKEN_PALETTE_SIZE:
            raise ValueError(f"count must be at most {config.MAX_TOKEN_PALETTE_SIZE}")
        return v


class PaletteResponse(BaseModel):
    mode: str = Field(..., description="Resolved harmony mode")
    base: str = Field(..., pattern=HEX_PATTERN)
    colors: List[str] = Field(..., description="Generated palette")
    fallback_used: bool = Field(False, description="Whether the requested mode was unknown")


class RandomSpecRequest(BaseModel):
    seed: Optional[int] = Field(None, description="Seed for reproducible output")
    crank_apocalypse: bool = Field(False, description="Force Apocalypse at full intensity")


class RandomSpecResponse(BaseModel):
    base_color: str = Field(..., pattern=HEX_PATTERN)
    harmony: str
    theme_mode: str
    harmony_intensity: int
    apocalypse_intensity: int
    neutral_curve: int
    accent_strength: int
    pop_intensity: int


# ============================================================================
# THEME TOKEN SCHEMAS
# ============================================================================

class IntensitiesModel(BaseModel):
    """Intensity controls in percent; clamped to working ranges by the deriver."""
    harmony: float = Field(100, description="Harmony intensity (40-160)")
    apocalypse: float = Field(100, description="Apocalypse intensity (20-150)")
    neutral_curve: float = Field(100, description="Neutral curve (50-150)")
    accent_strength: float = Field(100, description="Accent strength (50-150)")
    pop: float = Field(100, description="Pop intensity (60-140)")
    print_mode: bool = Field(False, description="Soften pop boost for print")


class TokensRequest(BaseModel):
    """Derive a theme token set."""
    base_color: str = Field(..., description="Base color (#hex, rgb(), hsl())")
    harmony: str = Field("Monochromatic", description="Monochromatic, Analogous, Complementary, Tertiary or Apocalypse")
    theme_mode: str = Field("light", description="light, dark or pop")
    intensities: IntensitiesModel = Field(default_factory=IntensitiesModel)
    include_on_colors: bool = Field(False, description="Add on-* text colors for backgrounds")
    include_print: bool = Field(False, description="Add a CMYK-safe print group")

    @field_validator("theme_mode")
    @classmethod
    def normalize_theme_mode(cls, v):
        return v.strip().lower()


class TokensResponse(BaseModel):
    base_hue: float
    groups: Dict[str, Dict[str, str]] = Field(..., description="Token groups of name -> #RRGGBB")
    swatch_stack: List[Dict[str, str]] = Field(default_factory=list, description="Ordered named swatches")


# ============================================================================
# SWATCH SCHEMAS
# ============================================================================

class NamedColor(BaseModel):
    name: str = Field(..., min_length=1)
    hex: str = Field(..., description="Color (#hex, rgb(), hsl())")


class SwatchReduceRequest(BaseModel):
    """Reduce a named color list for export."""
    swatches: List[NamedColor] = Field(..., description="Named colors in export order")
    cap: int = Field(config.NEUTRAL_CAP, ge=0, description="Maximum neutrals kept")
    threshold: float = Field(config.NEAR_DUP_THRESHOLD, description="Near-duplicate LAB distance")
    max_colors: Optional[int] = Field(None, ge=0, description="Optional cap on swatches returned")

    @field_validator("threshold")
    @classmethod
    def validate_threshold(cls, v):
        if not config.validate_threshold(v):
            raise ValueError("threshold must be between 0 and 100")
        return v


class SwatchReduceResponse(BaseModel):
    swatches: List[NamedColor]
    dropped: int = Field(..., ge=0, description="Number of input colors removed")


# ============================================================================
# VISION SCHEMAS
# ============================================================================

class VisionRequest(BaseModel):
    """Preview a palette under a color vision deficiency."""
    colors: List[str] = Field(..., min_length=1, description="Colors (#hex, rgb(), hsl())")
    mode: str = Field("normal", description="normal, protanopia, deuteranopia, tritanopia or achromatopsia")

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v):
        mode = v.strip().lower()
        if mode not in VISION_MODES:
            raise ValueError(f"mode must be one of {', '.join(VISION_MODES)}")
        return mode


class VisionResponse(BaseModel):
    mode: str
    colors: List[str] = Field(..., description="Normalized input colors")
    simulated: List[str] = Field(..., description="Colors as seen under the mode")


class MetricsResponse(BaseModel):
    uptime_seconds: float
    counters: Dict[str, int]
    timing_stats: Dict[str, Dict[str, float]]
    palette_size_stats: Dict[str, float]
