"""
Figma design token export.

Two flavours share one builder:

- ``figma``: Figma Tokens plugin layout with ``value``/``type`` keys.
- ``tokens-studio``: DTCG-style ``$value``/``$type`` keys, as read by
  Tokens Studio and other W3C token tooling.

Token sets are ``global`` (typography, spacing, radius, effects), ``light``
and ``dark`` (colors grouped by category). ``$themes`` enables the global
set with one mode set each.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

from themeforge.core.color import hsl_to_hex, is_hsl
from themeforge.core.ir import ColorMode, ThemeDocument

from .base import (
    FONT_SIZES,
    FONT_WEIGHTS,
    GENERATOR_NAME,
    LINE_HEIGHTS,
    SPACING,
    font_mono,
    font_sans,
    prepare,
    printable,
    radius,
    source_version,
)

FIGMA_FORMATS = ("figma", "tokens-studio")

COLOR_CATEGORIES: tuple[str, ...] = (
    "background",
    "foreground",
    "primary",
    "secondary",
    "muted",
    "accent",
    "destructive",
    "border",
    "input",
    "ring",
    "card",
    "popover",
    "sidebar",
    "chart",
    "success",
    "warning",
    "info",
    "surface",
    "panel",
    "overlay",
)

_SCALE_VARIABLE = re.compile(r"^([a-z][a-z0-9]*)-a?\d+$")


class _TokenFactory:
    """Builds token leaves in the requested flavour."""

    def __init__(self, fmt: str):
        if fmt not in FIGMA_FORMATS:
            raise ValueError(f"Unsupported Figma token format: {fmt}")
        self.value_key = "$value" if fmt == "tokens-studio" else "value"
        self.type_key = "$type" if fmt == "tokens-studio" else "type"

    def __call__(self, value: Any, token_type: str) -> dict[str, Any]:
        return {self.value_key: value, self.type_key: token_type}


def color_category(name: str) -> str:
    """Group a variable name under a color category."""
    for category in COLOR_CATEGORIES:
        if name == category or name.startswith(f"{category}-"):
            return category
    match = _SCALE_VARIABLE.match(name)
    if match:
        return match.group(1)
    return "other"


def to_hex(value: str) -> str:
    """Hex for an HSL value, ignoring alpha. Falls back to black."""
    try:
        return hsl_to_hex(value.split("/")[0].strip())
    except ValueError:
        return "#000000"


def _color_tokens(
    variables: Mapping[str, str], token: _TokenFactory, include_hex: bool
) -> dict[str, dict[str, Any]]:
    groups: dict[str, dict[str, Any]] = {}
    for name, value in variables.items():
        if not is_hsl(value):
            continue
        leaf = token(value, "color")
        if include_hex:
            leaf["$extensions"] = {"figma": {"hexValue": to_hex(value)}}

        category = color_category(name)
        group = groups.setdefault(category, {})
        if name == category:
            group["DEFAULT"] = leaf
        elif name.startswith(f"{category}-"):
            group[name[len(category) + 1 :].replace("-", ".", 1)] = leaf
        else:
            group[name.replace("-", ".", 1)] = leaf
    return groups


def _typography_tokens(theme: ThemeDocument, token: _TokenFactory) -> dict[str, Any]:
    return {
        "fontFamily": {
            "sans": token(font_sans(theme), "fontFamilies"),
            "mono": token(font_mono(theme), "fontFamilies"),
        },
        "fontSize": {k: token(v, "fontSizes") for k, v in FONT_SIZES.items()},
        "fontWeight": {k: token(v, "fontWeights") for k, v in FONT_WEIGHTS.items()},
        "lineHeight": {k: token(v, "lineHeights") for k, v in LINE_HEIGHTS.items()},
    }


def _radius_tokens(theme: ThemeDocument, token: _TokenFactory) -> dict[str, Any]:
    base = radius(theme)
    return {
        "none": token("0", "borderRadius"),
        "sm": token(f"calc({base} - 4px)", "borderRadius"),
        "md": token(f"calc({base} - 2px)", "borderRadius"),
        "DEFAULT": token(base, "borderRadius"),
        "lg": token(base, "borderRadius"),
        "xl": token(f"calc({base} + 4px)", "borderRadius"),
        "2xl": token(f"calc({base} + 8px)", "borderRadius"),
        "full": token("9999px", "borderRadius"),
    }


def _effect_tokens(theme: ThemeDocument, token: _TokenFactory) -> dict[str, Any]:
    effects = theme.effects
    tokens: dict[str, Any] = {}
    if effects is None:
        return tokens
    if effects.glass_morphism is not None:
        tokens["glass"] = {
            "blur": token(effects.glass_morphism.backdrop_blur or "12px", "dimension")
        }
    if effects.glow is not None:
        tokens["glow"] = {
            "DEFAULT": token(effects.glow.default or "0 0 20px", "boxShadow"),
            "lg": token(effects.glow.lg or "0 0 40px", "boxShadow"),
        }
    return tokens


def build_figma_tokens(
    document: ThemeDocument,
    *,
    format: str = "figma",
    include_hex: bool = True,
    include_meta: bool = True,
) -> dict[str, Any]:
    """Build the token structure as a dict."""
    token = _TokenFactory(format)
    theme, snapshots = prepare(document)
    theme_id = theme.id or "theme"
    name = theme.display_name

    tokens: dict[str, Any] = {
        "$themes": [
            {
                "id": f"{theme_id}-light",
                "name": f"{name} Light",
                "selectedTokenSets": {"global": "enabled", "light": "enabled"},
            },
            {
                "id": f"{theme_id}-dark",
                "name": f"{name} Dark",
                "selectedTokenSets": {"global": "enabled", "dark": "enabled"},
            },
        ],
    }
    if include_meta:
        tokens["$metadata"] = {
            "tokenSetOrder": ["global", "light", "dark"],
            "generator": GENERATOR_NAME,
            "themeId": theme.id,
            "themeName": theme.name,
            "version": source_version(document),
        }

    global_set: dict[str, Any] = {
        "typography": _typography_tokens(theme, token),
        "spacing": {k: token(v, "spacing") for k, v in SPACING.items()},
        "borderRadius": _radius_tokens(theme, token),
    }
    effects = _effect_tokens(theme, token)
    if effects:
        global_set["effects"] = effects
    tokens["global"] = global_set

    for mode in (ColorMode.LIGHT, ColorMode.DARK):
        variables = printable(snapshots[mode.value].variables)
        tokens[mode.value] = {"colors": _color_tokens(variables, token, include_hex)}
    return tokens


def generate_figma_tokens(
    document: ThemeDocument,
    *,
    format: str = "figma",
    include_hex: bool = True,
    include_meta: bool = True,
) -> str:
    """Generate Figma design tokens as indented JSON."""
    tokens = build_figma_tokens(
        document, format=format, include_hex=include_hex, include_meta=include_meta
    )
    return json.dumps(tokens, indent=2, ensure_ascii=False) + "\n"


def generate_tokens_studio(document: ThemeDocument) -> str:
    """Generate DTCG-style tokens for Tokens Studio."""
    return generate_figma_tokens(document, format="tokens-studio")
