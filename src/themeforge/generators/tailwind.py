"""
Tailwind CSS configuration generator.

Maps semantic colors to ``hsl(var(--token))``, exposes every scale step
(``teal.9``, ``teal.a9``) when the theme defines scales, and passes
animations and keyframes through to ``theme.extend``.
"""

from __future__ import annotations

import json
import re

from themeforge.core.ir import ThemeDocument
from themeforge.core.processing import process_animations
from themeforge.core.scales import SCALE_STEPS

from .base import font_mono, font_sans, prepare, scale_names

TAILWIND_FORMATS = ("ts", "js")

DEFAULT_CONTENT_PATHS: tuple[str, ...] = (
    "./pages/**/*.{js,ts,jsx,tsx,mdx}",
    "./components/**/*.{js,ts,jsx,tsx,mdx}",
    "./app/**/*.{js,ts,jsx,tsx,mdx}",
    "./src/**/*.{js,ts,jsx,tsx,mdx}",
)

# Colors exposed as { DEFAULT, foreground }
_PAIRED = ("card", "popover", "primary", "secondary", "muted", "accent", "destructive")
_STATUS = ("success", "warning", "info")
_SIDEBAR_KEYS = (
    "primary",
    "primary-foreground",
    "accent",
    "accent-foreground",
    "border",
    "ring",
)

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _key(name: str) -> str:
    return name if _IDENTIFIER.match(name) else json.dumps(name)


def _var(name: str) -> str:
    return f'"hsl(var(--{name}))"'


def _pair(name: str, indent: str) -> list[str]:
    return [
        f"{indent}{_key(name)}: {{",
        f"{indent}  DEFAULT: {_var(name)},",
        f"{indent}  foreground: {_var(name + '-foreground')},",
        f"{indent}}},",
    ]


def _base_colors(indent: str) -> list[str]:
    lines = [
        f"{indent}background: {_var('background')},",
        f"{indent}foreground: {_var('foreground')},",
    ]
    for name in _PAIRED:
        lines.extend(_pair(name, indent))
    lines.extend(
        [
            f"{indent}border: {_var('border')},",
            f"{indent}input: {_var('input')},",
            f"{indent}ring: {_var('ring')},",
            f"{indent}chart: {{",
        ]
    )
    for n in range(1, 6):
        lines.append(f'{indent}  "{n}": {_var(f"chart-{n}")},')
    lines.append(f"{indent}}},")
    lines.append(f"{indent}sidebar: {{")
    lines.append(f"{indent}  DEFAULT: {_var('sidebar-background')},")
    lines.append(f"{indent}  foreground: {_var('sidebar-foreground')},")
    for key in _SIDEBAR_KEYS:
        lines.append(f"{indent}  {_key(key)}: {_var('sidebar-' + key)},")
    lines.append(f"{indent}}},")
    return lines


def _scale_colors(name: str, indent: str) -> list[str]:
    lines = [f"{indent}{_key(name)}: {{"]
    for n in SCALE_STEPS:
        lines.append(f'{indent}  "{n}": {_var(f"{name}-{n}")},')
    for n in SCALE_STEPS:
        lines.append(f'{indent}  "a{n}": {_var(f"{name}-a{n}")},')
    lines.append(f"{indent}}},")
    return lines


def _animation_lines(theme: ThemeDocument, indent: str) -> tuple[list[str], list[str]]:
    keyframes, shorthands = process_animations(theme)
    animation = [
        f"{indent}{json.dumps(name)}: {json.dumps(value)}," for name, value in shorthands.items()
    ]
    frames: list[str] = []
    for name, stops in keyframes.items():
        frames.append(f"{indent}{json.dumps(name)}: {{")
        for stop, props in stops.items():
            frames.append(f"{indent}  {json.dumps(stop)}: {{")
            for prop, value in props.items():
                css_prop = re.sub(r"([A-Z])", r"-\1", prop).lower()
                frames.append(f"{indent}    {json.dumps(css_prop)}: {json.dumps(str(value))},")
            frames.append(f"{indent}  }},")
        frames.append(f"{indent}}},")
    return animation, frames


def generate_tailwind(
    document: ThemeDocument,
    *,
    format: str = "ts",
    include_color_scales: bool = True,
    include_animations: bool = True,
    content_paths: list[str] | tuple[str, ...] | None = None,
) -> str:
    """
    Generate a ``tailwind.config`` file.

    Args:
        document: Theme document (version 1 documents are migrated).
        format: ``"ts"`` (typed default export) or ``"js"`` (CommonJS).
        include_color_scales: Expose 12-step scales as color families.
        include_animations: Pass animations and keyframes through.
        content_paths: Globs for Tailwind's ``content`` option.

    Returns:
        Config file text.
    """
    if format not in TAILWIND_FORMATS:
        raise ValueError(f"Unsupported Tailwind config format: {format}")
    theme, _ = prepare(document)
    paths = list(content_paths) if content_paths is not None else list(DEFAULT_CONTENT_PATHS)
    colors_indent = " " * 8

    colors = _base_colors(colors_indent)
    if include_color_scales:
        for name in scale_names(theme):
            colors.extend(_scale_colors(name, colors_indent))
    for name in _STATUS:
        colors.extend(_pair(name, colors_indent))

    lines: list[str] = []
    if format == "ts":
        lines.append('import type { Config } from "tailwindcss";')
        lines.append("")
        lines.append("const config: Config = {")
    else:
        lines.append("/** @type {import('tailwindcss').Config} */")
        lines.append("module.exports = {")

    lines.append('  darkMode: ["class"],')
    lines.append("  content: [")
    lines.extend(f"    {json.dumps(p)}," for p in paths)
    lines.append("  ],")
    lines.append("  theme: {")
    lines.append("    extend: {")
    lines.append("      colors: {")
    lines.extend(colors)
    lines.append("      },")
    lines.extend(
        [
            "      borderRadius: {",
            '        lg: "var(--radius)",',
            '        md: "calc(var(--radius) - 2px)",',
            '        sm: "calc(var(--radius) - 4px)",',
            "      },",
            "      fontFamily: {",
            f"        sans: [{json.dumps(font_sans(theme))}],",
            f"        mono: [{json.dumps(font_mono(theme))}],",
            "      },",
        ]
    )
    if include_animations:
        animation, frames = _animation_lines(theme, colors_indent)
        if animation:
            lines.append("      animation: {")
            lines.extend(animation)
            lines.append("      },")
        if frames:
            lines.append("      keyframes: {")
            lines.extend(frames)
            lines.append("      },")
    lines.append("    },")
    lines.append("  },")
    lines.append('  plugins: [require("tailwindcss-animate")],')
    if format == "ts":
        lines.append("};")
        lines.append("")
        lines.append("export default config;")
    else:
        lines.append("};")
    lines.append("")
    return "\n".join(lines)


def generate_tailwind_minimal(document: ThemeDocument, *, format: str = "ts") -> str:
    """Semantic colors only: no scales, no animations."""
    return generate_tailwind(
        document, format=format, include_color_scales=False, include_animations=False
    )
