"""
Token name catalogs shared by the migrator, validator and generators.

Names follow the shadcn/ui CSS variable convention (``--primary``,
``--primary-foreground``...).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeCategory:
    """A named group of bundled themes."""

    id: str
    name: str
    description: str


THEME_CATEGORIES: dict[str, ThemeCategory] = {
    c.id: c
    for c in (
        ThemeCategory(
            "tech-ai", "Tech & AI", "Futuristic, cyberpunk, and technology-inspired themes"
        ),
        ThemeCategory("minimal-clean", "Minimal & Clean", "Simple and distraction-free themes"),
        ThemeCategory(
            "corporate-enterprise",
            "Corporate & Enterprise",
            "Professional themes for business applications",
        ),
        ThemeCategory(
            "creative-bold", "Creative & Bold", "Vibrant, expressive themes for creative projects"
        ),
        ThemeCategory(
            "nature-organic", "Nature & Organic", "Earthy palettes inspired by nature"
        ),
    )
}

REQUIRED_COLORS: tuple[str, ...] = (
    "background",
    "foreground",
    "primary",
    "primary-foreground",
    "secondary",
    "secondary-foreground",
    "muted",
    "muted-foreground",
    "accent",
    "accent-foreground",
    "destructive",
    "destructive-foreground",
    "border",
    "input",
    "ring",
    "card",
    "card-foreground",
    "popover",
    "popover-foreground",
)

# Added to semanticTokens when a version 1 document is migrated
EXTENDED_TOKENS: tuple[str, ...] = (
    "surface",
    "surface-hover",
    "surface-active",
    "primary-hover",
    "secondary-hover",
    "accent-hover",
    "border-hover",
    "input-hover",
    "ring-offset",
    "panel",
    "panel-translucent",
    "overlay",
)

STATUS_COLORS: tuple[str, ...] = (
    "success",
    "success-foreground",
    "warning",
    "warning-foreground",
    "info",
    "info-foreground",
)


def required_v2_tokens() -> list[str]:
    """Every token a fully populated version 2 theme exposes per mode."""
    return [*REQUIRED_COLORS, *EXTENDED_TOKENS, *STATUS_COLORS]
