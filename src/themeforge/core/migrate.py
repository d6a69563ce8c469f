"""
Schema migration from version 1 (flat colors) to version 2 (token groups).

Migrating a version 2 document returns the same object, so the operation
is idempotent: ``migrate_theme(migrate_theme(doc)) is migrate_theme(doc)``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .color import adjust_lightness, parse_hsl
from .errors import ThemeMigrationError
from .ir import MODES, ColorMode, ThemeDocument, normalize_version

logger = logging.getLogger(__name__)

# Hover tokens are darker in light mode and lighter in dark mode
HOVER_LIGHTNESS_SHIFT: dict[ColorMode, float] = {
    ColorMode.LIGHT: -4.0,
    ColorMode.DARK: 4.0,
}

RING_OFFSET: dict[ColorMode, str] = {
    ColorMode.LIGHT: "0 0% 100%",
    ColorMode.DARK: "0 0% 0%",
}

OVERLAY: dict[ColorMode, str] = {
    ColorMode.LIGHT: "0 0% 0% / 0.4",
    ColorMode.DARK: "0 0% 0% / 0.6",
}

PANEL_TRANSLUCENT_ALPHA = "0.8"

DEFAULT_STATUS_COLORS: dict[ColorMode, dict[str, str]] = {
    ColorMode.LIGHT: {
        "destructive": "0 84.2% 60.2%",
        "destructive-foreground": "0 0% 98%",
        "success": "151 55% 42%",
        "success-foreground": "0 0% 100%",
        "warning": "39 100% 62%",
        "warning-foreground": "39 40% 20%",
        "info": "206 100% 50%",
        "info-foreground": "0 0% 100%",
    },
    ColorMode.DARK: {
        "destructive": "0 62.8% 30.6%",
        "destructive-foreground": "0 0% 98%",
        "success": "151 50% 45%",
        "success-foreground": "0 0% 100%",
        "warning": "39 90% 55%",
        "warning-foreground": "39 80% 10%",
        "info": "206 90% 55%",
        "info-foreground": "0 0% 100%",
    },
}

DEFAULT_CHART_COLORS: dict[str, str] = {
    "2": "206 100% 50%",
    "3": "151 55% 42%",
    "4": "39 100% 62%",
    "5": "0 84.2% 60.2%",
}

DEFAULT_SIDEBAR_BACKGROUND: dict[ColorMode, str] = {
    ColorMode.LIGHT: "0 0% 98%",
    ColorMode.DARK: "0 0% 5%",
}

DEFAULT_FONT_SANS = "Inter, system-ui, sans-serif"
DEFAULT_FONT_MONO = "JetBrains Mono, monospace"
DEFAULT_FONT_FEATURE_SETTINGS = '"rlig" 1, "calt" 1'
DEFAULT_RADIUS = "0.5rem"


# =============================================================================
# Version detection
# =============================================================================


def detect_theme_version(data: ThemeDocument | Mapping[str, Any] | None) -> str:
    """Return ``"1"`` or ``"2"`` for a document or raw mapping."""
    if data is None:
        return "1"
    if isinstance(data, ThemeDocument):
        return data.version
    try:
        return normalize_version(dict(data))
    except ValueError:
        return "1"


def is_v2_theme(data: ThemeDocument | Mapping[str, Any] | None) -> bool:
    return detect_theme_version(data) == "2"


# =============================================================================
# Token derivation
# =============================================================================


def _first(colors: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        value = colors.get(name)
        if value:
            return value
    return None


def _hover(value: str | None, mode: ColorMode) -> str | None:
    if value is None:
        return None
    return adjust_lightness(value, HOVER_LIGHTNESS_SHIFT[mode])


def _translucent(value: str | None) -> str | None:
    if value is None:
        return None
    color = parse_hsl(value)
    if color is None or color.alpha is not None:
        return value
    return f"{value} / {PANEL_TRANSLUCENT_ALPHA}"


def derive_extended_tokens(colors: Mapping[str, str], mode: ColorMode) -> dict[str, str]:
    """Synthesize surface, hover, panel and overlay tokens from v1 colors.

    Tokens whose base color is missing are left out.
    """
    panel = _first(colors, "muted", "background")
    derived: dict[str, str | None] = {
        "surface": panel,
        "surface-hover": _first(colors, "accent", "muted"),
        "surface-active": _first(colors, "secondary", "muted"),
        "primary-hover": _hover(colors.get("primary"), mode),
        "secondary-hover": _hover(colors.get("secondary"), mode),
        "accent-hover": _hover(colors.get("accent"), mode),
        "border-hover": _hover(_first(colors, "input", "border"), mode),
        "input-hover": _hover(colors.get("input"), mode),
        "ring-offset": RING_OFFSET[mode],
        "panel": panel,
        "panel-translucent": _translucent(panel),
        "overlay": OVERLAY[mode],
    }
    return {k: v for k, v in derived.items() if v is not None}


def derive_status_colors(colors: Mapping[str, str], mode: ColorMode) -> dict[str, str]:
    """Default status palette, keeping any status colors the v1 map already has."""
    status = dict(DEFAULT_STATUS_COLORS[mode])
    for name in status:
        if colors.get(name):
            status[name] = colors[name]
    return status


def derive_chart_colors(light: Mapping[str, str]) -> dict[str, str]:
    chart: dict[str, str] = {}
    for n in ("1", "2", "3", "4", "5"):
        value = light.get(f"chart-{n}") or (
            light.get("primary") if n == "1" else DEFAULT_CHART_COLORS[n]
        )
        if value:
            chart[n] = value
    return chart


def derive_sidebar_tokens(colors: Mapping[str, str], mode: ColorMode) -> dict[str, str]:
    fallbacks: dict[str, str | None] = {
        "background": DEFAULT_SIDEBAR_BACKGROUND[mode],
        "foreground": colors.get("muted-foreground"),
        "primary": colors.get("primary"),
        "primary-foreground": "0 0% 98%",
        "accent": colors.get("muted"),
        "accent-foreground": colors.get("foreground"),
        "border": colors.get("border"),
        "ring": colors.get("ring"),
    }
    sidebar: dict[str, str] = {}
    for key, fallback in fallbacks.items():
        value = colors.get(f"sidebar-{key}") or fallback
        if value:
            sidebar[key] = value
    return sidebar


# =============================================================================
# Migration
# =============================================================================


def _coerce(document: ThemeDocument | Mapping[str, Any] | None) -> ThemeDocument:
    if document is None:
        raise ThemeMigrationError("Cannot migrate a missing theme document")
    if isinstance(document, ThemeDocument):
        return document
    try:
        return ThemeDocument.model_validate(dict(document))
    except ValidationError as e:
        raise ThemeMigrationError(f"Theme document is not well-formed: {e}") from e


def migrate_theme(document: ThemeDocument | Mapping[str, Any] | None) -> ThemeDocument:
    """Upgrade a version 1 document to version 2.

    A version 2 ThemeDocument is returned unchanged (same object). A raw
    mapping is parsed first.

    Raises:
        ThemeMigrationError: If the document is missing or malformed.
    """
    theme = _coerce(document)
    if theme.is_v2:
        return theme

    logger.debug(f"Migrating theme {theme.id or '<unnamed>'} from version 1 to version 2")
    colors = theme.colors or {}
    semantic: dict[str, dict[str, str]] = {}
    status: dict[str, dict[str, str]] = {}
    sidebar: dict[str, dict[str, str]] = {}
    for mode in MODES:
        mode_colors = colors.get(mode.value) or {}
        semantic[mode.value] = {**mode_colors, **derive_extended_tokens(mode_colors, mode)}
        status[mode.value] = derive_status_colors(mode_colors, mode)
        sidebar[mode.value] = derive_sidebar_tokens(mode_colors, mode)

    font_family = theme.font_family
    tree: dict[str, Any] = {
        **(theme.model_extra or {}),
        "version": "2",
        "id": theme.id,
        "name": theme.name,
        "category": theme.category,
        "description": theme.description or "",
        "colorSystem": {"type": "semantic", "version": "1.0"},
        "scales": {},
        "semanticTokens": semantic,
        "statusColors": status,
        "chartColors": derive_chart_colors(colors.get(ColorMode.LIGHT.value) or {}),
        "sidebarTokens": sidebar,
        "typography": {
            "fontFamily": {
                "sans": (font_family.sans if font_family else None) or DEFAULT_FONT_SANS,
                "mono": (font_family.mono if font_family else None) or DEFAULT_FONT_MONO,
            },
            "fontFeatureSettings": DEFAULT_FONT_FEATURE_SETTINGS,
        },
        "spacing": {
            "radius": theme.radius or DEFAULT_RADIUS,
            "radiusLg": "var(--radius)",
            "radiusMd": "calc(var(--radius) - 2px)",
            "radiusSm": "calc(var(--radius) - 4px)",
        },
        "effects": {},
        "animations": {},
        # Legacy fields kept for backward-reading callers
        "colors": theme.colors,
        "radius": theme.radius,
        "fontFamily": font_family.model_dump(exclude_none=True) if font_family else None,
    }
    return ThemeDocument.model_validate(tree)
