"""
CSS generator.

Produces CSS custom properties for light (``:root``) and dark (``.dark``)
modes, keyframes for theme animations, and font/radius variables. Values
are bare HSL components so utilities can wrap them as ``hsl(var(--token))``.
"""

from __future__ import annotations

from themeforge.core.ir import ColorMode, ThemeDocument
from themeforge.core.processing import ResolvedSnapshot, generate_keyframes_css

from .base import (
    GENERATOR_NAME,
    font_feature_settings,
    font_mono,
    font_sans,
    prepare,
    printable,
    radius,
    source_version,
)


def _header(document: ThemeDocument, theme: ThemeDocument) -> list[str]:
    return [
        f"/* {GENERATOR_NAME} Theme: {theme.display_name} */",
        f"/* Theme ID: {theme.id or ''} */",
        f"/* Category: {theme.category or ''} */",
        f"/* Version: {source_version(document)} */",
        "/* Auto-generated - do not edit */",
        "",
    ]


def _shared_lines(theme: ThemeDocument, snapshot: ResolvedSnapshot, indent: str) -> list[str]:
    """Mode-independent variables emitted once in the light block."""
    lines = [
        f"{indent}--radius: {radius(theme)};",
        f"{indent}--font-sans: {font_sans(theme)};",
        f"{indent}--font-mono: {font_mono(theme)};",
        f"{indent}--font-feature-settings: {font_feature_settings(theme)};",
    ]
    for name, value in snapshot.animations.items():
        lines.append(f"{indent}--animation-{name}: {value};")
    return lines


def _variable_lines(snapshot: ResolvedSnapshot, indent: str) -> list[str]:
    return [f"{indent}--{name}: {value};" for name, value in printable(snapshot.variables).items()]


def _block(selector: str, body: list[str], indent: str) -> list[str]:
    return [f"{indent}{selector} {{", *body, f"{indent}}}"]


def generate_css(document: ThemeDocument, *, include_base: bool = True) -> str:
    """
    Generate a complete theme stylesheet.

    Args:
        document: Theme document (version 1 documents are migrated).
        include_base: Wrap the variables in ``@layer base`` and add base
            element rules. When False, plain ``:root`` and ``.dark`` blocks
            are emitted.

    Returns:
        CSS text.
    """
    theme, snapshots = prepare(document)
    light = snapshots[ColorMode.LIGHT.value]
    dark = snapshots[ColorMode.DARK.value]

    lines = _header(document, theme)

    keyframes = generate_keyframes_css(light.keyframes)
    if keyframes:
        lines.append(keyframes)

    indent = "  " if include_base else ""
    inner = indent + "  "
    root = _block(
        ":root", _variable_lines(light, inner) + _shared_lines(theme, light, inner), indent
    )
    dark_block = _block(".dark", _variable_lines(dark, inner), indent)

    if include_base:
        lines.append("@layer base {")
        lines.extend(root)
        lines.append("")
        lines.extend(dark_block)
        lines.append("}")
        lines.append("")
        lines.extend(
            [
                "@layer base {",
                "  * {",
                "    @apply border-border;",
                "  }",
                "  body {",
                "    @apply bg-background text-foreground;",
                "    font-family: var(--font-sans);",
                "    font-feature-settings: var(--font-feature-settings);",
                "  }",
                "}",
            ]
        )
    else:
        lines.extend(root)
        lines.append("")
        lines.extend(dark_block)

    lines.append("")
    return "\n".join(lines)


def generate_css_for_mode(document: ThemeDocument, mode: str = ColorMode.LIGHT) -> str:
    """Generate a single ``:root`` block holding one mode's variables."""
    theme, snapshots = prepare(document)
    snapshot = snapshots[ColorMode(mode).value]
    lines = _header(document, theme)
    lines.extend(
        _block(
            ":root",
            _variable_lines(snapshot, "  ") + _shared_lines(theme, snapshot, "  "),
            "",
        )
    )
    lines.append("")
    return "\n".join(lines)
