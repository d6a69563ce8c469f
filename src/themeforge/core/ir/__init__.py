"""
ThemeForge intermediate representation types.

Re-exports the theme document models so callers can import from
``themeforge.core.ir`` directly.
"""

from .theme import (
    MODES,
    REF_KEY,
    V2_INDICATOR_KEYS,
    AnimationSpec,
    ColorMode,
    ColorScale,
    Effects,
    FontFamily,
    GlassMorphism,
    Glow,
    Gradient,
    Spacing,
    ThemeDocument,
    TokenValue,
    Typography,
    is_reference,
    normalize_version,
)

__all__ = [
    "MODES",
    "REF_KEY",
    "V2_INDICATOR_KEYS",
    "AnimationSpec",
    "ColorMode",
    "ColorScale",
    "Effects",
    "FontFamily",
    "GlassMorphism",
    "Glow",
    "Gradient",
    "Spacing",
    "ThemeDocument",
    "TokenValue",
    "Typography",
    "is_reference",
    "normalize_version",
]
