"""
Theme document IR types.

A theme document comes in two schema versions:

- Version 1: flat ``colors.light`` / ``colors.dark`` maps plus ``radius`` and
  ``fontFamily``.
- Version 2: color scales, semantic/status/sidebar token groups, chart
  colors, typography, spacing, effects and animations.

Token values are either literal strings or reference mappings of the form
``{"$ref": "<dot-path>"}``. The JSON spelling of every field (camelCase) is
kept as the alias so that reference paths navigate the same tree the author
wrote.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# =============================================================================
# Enums and constants
# =============================================================================


class ColorMode(StrEnum):
    """Color mode a token group belongs to."""

    LIGHT = "light"
    DARK = "dark"


MODES: tuple[ColorMode, ...] = (ColorMode.LIGHT, ColorMode.DARK)

# Presence of any of these top-level keys marks an unversioned document as v2
V2_INDICATOR_KEYS: tuple[str, ...] = (
    "scales",
    "semanticTokens",
    "statusColors",
    "effects",
    "animations",
    "colorSystem",
)

_V2_FIELD_NAMES: tuple[str, ...] = ("semantic_tokens", "status_colors", "color_system")

REF_KEY = "$ref"

TokenValue = str | dict[str, Any]
"""A literal value or a ``{"$ref": path}`` mapping."""


def is_reference(value: Any) -> bool:
    """Return True if ``value`` is a ``{"$ref": ...}`` mapping."""
    return isinstance(value, dict) and REF_KEY in value


def normalize_version(data: Any) -> str:
    """Return ``"1"`` or ``"2"`` for a raw document mapping.

    An explicit ``version`` wins; otherwise any v2-only key marks the document
    as version 2.
    """
    if not isinstance(data, dict):
        return "1"
    raw = data.get("version")
    if raw is not None:
        text = str(raw).strip()
        if text in ("2", "2.0"):
            return "2"
        if text in ("1", "1.0"):
            return "1"
        raise ValueError(f"Unsupported theme version: {raw!r}")
    if any(data.get(key) is not None for key in (*V2_INDICATOR_KEYS, *_V2_FIELD_NAMES)):
        return "2"
    return "1"


def _stringify_keys(value: Any) -> Any:
    """Coerce integer step/mode keys (common in YAML) to strings."""
    if isinstance(value, dict):
        return {str(k): _stringify_keys(v) for k, v in value.items()}
    return value


# =============================================================================
# Scales
# =============================================================================


class ColorScale(BaseModel):
    """A hue family with 12-step opaque and alpha ladders per mode."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: str | None = Field(default=None, description="Display name, defaults to the scale key")
    hue: float | str | None = Field(default=None, description="Hue anchor of the family")
    steps: dict[str, dict[str, TokenValue]] | None = Field(
        default=None, description="mode -> step (1..12) -> opaque value"
    )
    alpha: dict[str, dict[str, TokenValue]] | None = Field(
        default=None, description="mode -> step (1..12) -> translucent value"
    )

    @field_validator("steps", "alpha", mode="before")
    @classmethod
    def _coerce_step_keys(cls, value: Any) -> Any:
        return _stringify_keys(value)


# =============================================================================
# Typography and spacing
# =============================================================================


class FontFamily(BaseModel):
    """Font stacks."""

    model_config = ConfigDict(frozen=True, extra="allow")

    sans: str | None = None
    mono: str | None = None


class Typography(BaseModel):
    """Typography settings carried into generated outputs."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    font_family: FontFamily | None = Field(default=None, alias="fontFamily")
    font_feature_settings: str | None = Field(default=None, alias="fontFeatureSettings")


class Spacing(BaseModel):
    """Radius settings."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    radius: str | None = None
    radius_lg: str | None = Field(default=None, alias="radiusLg")
    radius_md: str | None = Field(default=None, alias="radiusMd")
    radius_sm: str | None = Field(default=None, alias="radiusSm")


# =============================================================================
# Effects and animations
# =============================================================================


class GlassMorphism(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    background: TokenValue | None = None
    backdrop_blur: str | None = Field(default=None, alias="backdropBlur")


class Glow(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    default: str | None = None
    lg: str | None = None
    color: TokenValue | None = None


class Gradient(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    from_: TokenValue | None = Field(default=None, alias="from")
    to: TokenValue | None = None
    direction: str | None = None


class Effects(BaseModel):
    """Glass, glow and gradient effect definitions."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    glass_morphism: GlassMorphism | None = Field(default=None, alias="glassMorphism")
    glow: Glow | None = None
    gradient: dict[str, Gradient] | None = None


class AnimationSpec(BaseModel):
    """Animation timing plus optional keyframes.

    Keyframes map a stop (``0%``, ``from``...) to CSS properties. Property
    names may be camelCase; generators emit them kebab-case.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    duration: str | None = None
    easing: str | None = None
    iteration: str | int | None = None
    keyframes: dict[str, dict[str, str | int | float]] | None = None


# =============================================================================
# Theme document
# =============================================================================


class ThemeDocument(BaseModel):
    """Root theme artifact (version 1 or 2).

    Documents are frozen. Migration and other transforms build a new
    document rather than mutating an existing one.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    version: str = Field(default="1", description='"1" (flat) or "2" (extended)')
    id: str | None = Field(default=None, description="Kebab-case identifier")
    name: str | None = None
    category: str | None = None
    description: str | None = None

    # Version 2
    color_system: dict[str, Any] | None = Field(default=None, alias="colorSystem")
    scales: dict[str, ColorScale] | None = None
    semantic_tokens: dict[str, dict[str, TokenValue]] | None = Field(
        default=None, alias="semanticTokens"
    )
    status_colors: dict[str, dict[str, TokenValue]] | None = Field(
        default=None, alias="statusColors"
    )
    chart_colors: dict[str, TokenValue] | None = Field(default=None, alias="chartColors")
    sidebar_tokens: dict[str, dict[str, TokenValue]] | None = Field(
        default=None, alias="sidebarTokens"
    )
    typography: Typography | None = None
    spacing: Spacing | None = None
    effects: Effects | None = None
    animations: dict[str, AnimationSpec] | None = None

    # Version 1 (retained on migrated documents for backward-reading callers)
    colors: dict[str, dict[str, str]] | None = None
    radius: str | None = None
    font_family: FontFamily | None = Field(default=None, alias="fontFamily")

    @model_validator(mode="before")
    @classmethod
    def _normalize_version(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data["version"] = normalize_version(data)
            if data.get("chartColors") is not None:
                data["chartColors"] = _stringify_keys(data["chartColors"])
        return data

    @property
    def is_v2(self) -> bool:
        return self.version == "2"

    @property
    def display_name(self) -> str:
        return self.name or self.id or "Untitled"

    def to_tree(self) -> dict[str, Any]:
        """Plain JSON-compatible view using the document's own key spelling."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        """Serialize to indented JSON (stable for identical documents)."""
        return json.dumps(self.to_tree(), indent=2, ensure_ascii=False) + "\n"
