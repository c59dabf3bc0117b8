"""
Palettesmith Configuration
Manages environment variables and defaults for the palette engine and API.
"""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration class for Palettesmith services."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTESMITH_LOG_LEVEL", "INFO")
    LOG_JSON: bool = bool(int(os.environ.get("PALETTESMITH_LOG_JSON", "0")))

    # Palette generation
    DEFAULT_PALETTE_SIZE: int = int(os.environ.get("PALETTESMITH_DEFAULT_PALETTE_SIZE", "5"))
    MAX_TOKEN_PALETTE_SIZE: int = int(os.environ.get("PALETTESMITH_MAX_TOKEN_PALETTE_SIZE", "256"))

    # Contrast solving
    CONTRAST_TARGET: float = float(os.environ.get("PALETTESMITH_CONTRAST_TARGET", "4.5"))

    # Swatch export reduction
    NEAR_DUP_THRESHOLD: float = float(os.environ.get("PALETTESMITH_NEAR_DUP_THRESHOLD", "2.0"))
    NEUTRAL_CAP: int = int(os.environ.get("PALETTESMITH_NEUTRAL_CAP", "8"))

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get(
        "PALETTESMITH_ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173"
    )

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("PALETTESMITH_METRICS_ENABLED", "1")))

    # Accepted color spaces for generic conversion
    SUPPORTED_SPACES = ["hex", "rgb", "hsl", "cmyk", "lab", "oklch"]

    @classmethod
    def allowed_origins(cls) -> List[str]:
        """Split the comma separated origin list."""
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @classmethod
    def validate_contrast_target(cls, target: float) -> bool:
        """Validate a WCAG contrast target."""
        return 1.0 <= target <= 21.0

    @classmethod
    def validate_threshold(cls, threshold: float) -> bool:
        """Validate near-duplicate LAB distance."""
        return 0.0 <= threshold <= 100.0

    @classmethod
    def validate_space(cls, space: str) -> bool:
        """Validate color space name."""
        return space.lower() in cls.SUPPORTED_SPACES


# Global config instance
config = Config()
