"""
Style Dictionary token export.

Colors are emitted either nested by semantic group (``color.primary.light.hover``)
or flat per mode (``color.light.primary-hover``). Scales are exposed under
``color.scale.<name>.<mode>.<step>``. Output is deterministic: the optional
``generated_at`` timestamp is only written when the caller supplies one.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from themeforge.core.color import is_hsl
from themeforge.core.ir import MODES, ThemeDocument
from themeforge.core.scales import SCALE_STEPS

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
    scale_names,
    source_version,
)

COLOR_GROUPS: dict[str, tuple[str, ...]] = {
    "base": ("background", "foreground"),
    "primary": ("primary", "primary-foreground", "primary-hover"),
    "secondary": ("secondary", "secondary-foreground", "secondary-hover"),
    "muted": ("muted", "muted-foreground"),
    "accent": ("accent", "accent-foreground", "accent-hover"),
    "destructive": ("destructive", "destructive-foreground"),
    "border": ("border", "border-hover", "input", "input-hover", "ring", "ring-offset"),
    "card": ("card", "card-foreground"),
    "popover": ("popover", "popover-foreground"),
    "sidebar": (
        "sidebar-background",
        "sidebar-foreground",
        "sidebar-primary",
        "sidebar-primary-foreground",
        "sidebar-accent",
        "sidebar-accent-foreground",
        "sidebar-border",
        "sidebar-ring",
    ),
    "chart": ("chart-1", "chart-2", "chart-3", "chart-4", "chart-5"),
    "status": (
        "success",
        "success-foreground",
        "warning",
        "warning-foreground",
        "info",
        "info-foreground",
    ),
    "surface": ("surface", "surface-hover", "surface-active", "panel", "panel-translucent", "overlay"),
}

PLATFORMS: dict[str, dict[str, Any]] = {
    "css": {
        "transformGroup": "css",
        "buildPath": "build/css/",
        "files": [{"destination": "variables.css", "format": "css/variables"}],
    },
    "scss": {
        "transformGroup": "scss",
        "buildPath": "build/scss/",
        "files": [{"destination": "_variables.scss", "format": "scss/variables"}],
    },
    "js": {
        "transformGroup": "js",
        "buildPath": "build/js/",
        "files": [{"destination": "tokens.js", "format": "javascript/module"}],
    },
    "json": {
        "transformGroup": "web",
        "buildPath": "build/json/",
        "files": [{"destination": "tokens.json", "format": "json"}],
    },
}


def _leaf(value: Any, token_type: str, category: str, **extra: Any) -> dict[str, Any]:
    return {"value": value, "type": token_type, "category": category, **extra}


def _colors(variables: Mapping[str, Any]) -> dict[str, str]:
    return {k: v for k, v in printable(variables).items() if is_hsl(v)}


def _flat_colors(by_mode: Mapping[str, dict[str, str]], category: str) -> dict[str, Any]:
    tokens: dict[str, Any] = {}
    for mode, colors in by_mode.items():
        label = mode.capitalize()
        tokens[mode] = {
            name: _leaf(value, "color", category, comment=f"{label} mode {name}")
            for name, value in colors.items()
        }
    return tokens


def _nested_colors(
    by_mode: Mapping[str, dict[str, str]], scales: list[str], category: str
) -> dict[str, Any]:
    tokens: dict[str, Any] = {}
    for group, names in COLOR_GROUPS.items():
        entry: dict[str, dict[str, Any]] = {mode: {} for mode in by_mode}
        for mode, colors in by_mode.items():
            for name in names:
                if name in colors:
                    short = name.removeprefix(f"{group}-")
                    entry[mode][short] = _leaf(colors[name], "color", category)
        if any(entry.values()):
            tokens[group] = entry

    scale_tokens: dict[str, Any] = {}
    for scale in scales:
        entry = {mode: {} for mode in by_mode}
        for mode, colors in by_mode.items():
            for step in [*(str(n) for n in SCALE_STEPS), *(f"a{n}" for n in SCALE_STEPS)]:
                value = colors.get(f"{scale}-{step}")
                if value:
                    entry[mode][step] = _leaf(value, "color", category)
        if any(entry.values()):
            scale_tokens[scale] = entry
    if scale_tokens:
        tokens["scale"] = scale_tokens
    return tokens


def _font_tokens(theme: ThemeDocument, category: str) -> dict[str, Any]:
    return {
        "family": {
            "sans": _leaf(font_sans(theme), "fontFamily", category),
            "mono": _leaf(font_mono(theme), "fontFamily", category),
        },
        "size": {k: _leaf(v, "dimension", category) for k, v in FONT_SIZES.items()},
        "weight": {k: _leaf(v, "fontWeight", category) for k, v in FONT_WEIGHTS.items()},
        "lineHeight": {k: _leaf(v, "lineHeight", category) for k, v in LINE_HEIGHTS.items()},
    }


def _radius_tokens(theme: ThemeDocument, category: str) -> dict[str, Any]:
    base = radius(theme)
    return {
        "none": _leaf("0", "dimension", category),
        "sm": _leaf(f"calc({base} - 4px)", "dimension", category),
        "md": _leaf(f"calc({base} - 2px)", "dimension", category),
        "default": _leaf(base, "dimension", category),
        "lg": _leaf(base, "dimension", category),
        "xl": _leaf(f"calc({base} + 4px)", "dimension", category),
        "2xl": _leaf(f"calc({base} + 8px)", "dimension", category),
        "full": _leaf("9999px", "dimension", category),
    }


def _effect_tokens(
    theme: ThemeDocument, light: Mapping[str, Any], category: str
) -> dict[str, Any]:
    effects = theme.effects
    tokens: dict[str, Any] = {}
    if effects is None:
        return tokens
    if effects.glass_morphism is not None:
        tokens["glass"] = {
            "blur": _leaf(effects.glass_morphism.backdrop_blur or "12px", "dimension", category)
        }
    if effects.glow is not None:
        tokens["glow"] = {
            "default": _leaf(effects.glow.default or "0 0 20px", "boxShadow", category),
            "lg": _leaf(effects.glow.lg or "0 0 40px", "boxShadow", category),
        }
    if effects.gradient:
        tokens["gradient"] = {
            name: {
                "from": _leaf(light.get(f"gradient-{name}-from"), "color", category),
                "to": _leaf(light.get(f"gradient-{name}-to"), "color", category),
                "direction": _leaf(gradient.direction or "135deg", "dimension", category),
            }
            for name, gradient in effects.gradient.items()
        }
    return tokens


def _animation_tokens(theme: ThemeDocument, category: str) -> dict[str, Any]:
    tokens: dict[str, Any] = {}
    for name, animation in (theme.animations or {}).items():
        entry = {
            "duration": _leaf(animation.duration or "0.2s", "duration", category),
            "easing": _leaf(animation.easing or "ease-out", "cubicBezier", category),
        }
        if animation.iteration is not None:
            entry["iteration"] = _leaf(animation.iteration, "number", category)
        tokens[name] = entry
    return tokens


def build_style_dictionary(
    document: ThemeDocument,
    *,
    category: str = "brand",
    include_meta: bool = True,
    flat_structure: bool = False,
    generated_at: str | None = None,
) -> dict[str, Any]:
    """Build the Style Dictionary token tree as a dict."""
    theme, snapshots = prepare(document)
    by_mode = {mode.value: _colors(snapshots[mode.value].variables) for mode in MODES}

    tokens: dict[str, Any] = {}
    if include_meta:
        meta: dict[str, Any] = {
            "generator": GENERATOR_NAME,
            "themeId": theme.id,
            "themeName": theme.name,
            "themeVersion": source_version(document),
        }
        if generated_at is not None:
            meta["generatedAt"] = generated_at
        tokens["$meta"] = meta

    if flat_structure:
        tokens["color"] = _flat_colors(by_mode, category)
    else:
        tokens["color"] = _nested_colors(by_mode, scale_names(theme), category)

    tokens["font"] = _font_tokens(theme, category)
    tokens["spacing"] = {k: _leaf(v, "dimension", category) for k, v in SPACING.items()}
    tokens["radius"] = _radius_tokens(theme, category)

    effects = _effect_tokens(theme, snapshots[MODES[0].value].variables, category)
    if effects:
        tokens["effect"] = effects
    animations = _animation_tokens(theme, category)
    if animations:
        tokens["animation"] = animations
    return tokens


def generate_style_dictionary(
    document: ThemeDocument,
    *,
    category: str = "brand",
    include_meta: bool = True,
    flat_structure: bool = False,
    generated_at: str | None = None,
) -> str:
    """Generate Style Dictionary tokens as indented JSON."""
    tokens = build_style_dictionary(
        document,
        category=category,
        include_meta=include_meta,
        flat_structure=flat_structure,
        generated_at=generated_at,
    )
    return json.dumps(tokens, indent=2, ensure_ascii=False) + "\n"


def generate_style_dictionary_config(source: str = "tokens/**/*.json") -> str:
    """Companion ``config.json`` building css, scss, js and json outputs."""
    config = {"source": [source], "platforms": PLATFORMS}
    return json.dumps(config, indent=2) + "\n"
