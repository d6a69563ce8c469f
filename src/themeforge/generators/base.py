"""
Shared helpers for format generators.

Every generator works from the migrated (version 2) document and its
resolved snapshots, so all formats agree on variable names and values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from themeforge.core.ir import MODES, ThemeDocument
from themeforge.core.migrate import (
    DEFAULT_FONT_FEATURE_SETTINGS,
    DEFAULT_FONT_MONO,
    DEFAULT_FONT_SANS,
    DEFAULT_RADIUS,
    migrate_theme,
)
from themeforge.core.processing import ResolvedSnapshot, process_theme

logger = logging.getLogger(__name__)

GENERATOR_NAME = "ThemeForge"

# Non-color scales shared by the design-tool exports
FONT_SIZES: dict[str, str] = {
    "xs": "0.75rem",
    "sm": "0.875rem",
    "base": "1rem",
    "lg": "1.125rem",
    "xl": "1.25rem",
    "2xl": "1.5rem",
    "3xl": "1.875rem",
    "4xl": "2.25rem",
    "5xl": "3rem",
}

FONT_WEIGHTS: dict[str, str] = {"normal": "400", "medium": "500", "semibold": "600", "bold": "700"}

LINE_HEIGHTS: dict[str, str] = {
    "none": "1",
    "tight": "1.25",
    "snug": "1.375",
    "normal": "1.5",
    "relaxed": "1.625",
    "loose": "2",
}

SPACING: dict[str, str] = {
    "0": "0",
    "1": "0.25rem",
    "2": "0.5rem",
    "3": "0.75rem",
    "4": "1rem",
    "5": "1.25rem",
    "6": "1.5rem",
    "8": "2rem",
    "10": "2.5rem",
    "12": "3rem",
    "16": "4rem",
    "20": "5rem",
    "24": "6rem",
    "32": "8rem",
    "40": "10rem",
    "48": "12rem",
    "56": "14rem",
    "64": "16rem",
}


def prepare(document: ThemeDocument) -> tuple[ThemeDocument, dict[str, ResolvedSnapshot]]:
    """Migrate ``document`` and resolve both modes."""
    theme = migrate_theme(document)
    return theme, {mode.value: process_theme(theme, mode) for mode in MODES}


def source_version(document: ThemeDocument) -> str:
    """Human-readable schema version of the document as written."""
    return "2.0" if document.is_v2 else "1.0"


def font_sans(theme: ThemeDocument) -> str:
    for family in (theme.typography.font_family if theme.typography else None, theme.font_family):
        if family is not None and family.sans:
            return family.sans
    return DEFAULT_FONT_SANS


def font_mono(theme: ThemeDocument) -> str:
    for family in (theme.typography.font_family if theme.typography else None, theme.font_family):
        if family is not None and family.mono:
            return family.mono
    return DEFAULT_FONT_MONO


def font_feature_settings(theme: ThemeDocument) -> str:
    if theme.typography is not None and theme.typography.font_feature_settings:
        return theme.typography.font_feature_settings
    return DEFAULT_FONT_FEATURE_SETTINGS


def radius(theme: ThemeDocument) -> str:
    if theme.spacing is not None and theme.spacing.radius:
        return theme.spacing.radius
    return theme.radius or DEFAULT_RADIUS


def printable(variables: Mapping[str, Any]) -> dict[str, str]:
    """Scalar variables as strings. Unresolved reference mappings are dropped."""
    result: dict[str, str] = {}
    for name, value in variables.items():
        if isinstance(value, str | int | float) and not isinstance(value, bool):
            result[name] = str(value)
        else:
            logger.debug(f"Skipping non-scalar variable {name}: {value!r}")
    return result


def scale_names(theme: ThemeDocument) -> list[str]:
    """Display names of the theme's scales, in document order."""
    return [scale.name or key for key, scale in (theme.scales or {}).items()]
