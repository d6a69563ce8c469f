"""
SCSS generator.

Emits per-mode variables (``$<prefix>-light-primary``), color maps
(``$<prefix>-colors-light``), and optional helpers: a lookup function,
background/text mixins and a mixin that writes the CSS custom properties.
Values are bare HSL components, so use them as ``hsl(<prefix>-color(primary))``.
"""

from __future__ import annotations

from themeforge.core.ir import MODES, ThemeDocument

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


def _scss_value(value: str) -> str:
    # A bare "/" would be parsed as division
    if "/" in value:
        return f'unquote("{value}")'
    return value


def _variables(document: ThemeDocument, prefix: str) -> list[str]:
    theme, snapshots = prepare(document)
    lines = [
        f"// {GENERATOR_NAME} Theme: {theme.display_name}",
        f"// Theme ID: {theme.id or ''}",
        f"// Category: {theme.category or ''}",
        f"// Version: {source_version(document)}",
        "// Auto-generated - do not edit",
        "",
        "// Typography and shape",
        # Font stacks and feature settings are already valid Sass lists
        f"${prefix}-font-sans: {font_sans(theme)};",
        f"${prefix}-font-mono: {font_mono(theme)};",
        f"${prefix}-font-feature-settings: {font_feature_settings(theme)};",
        f"${prefix}-radius: {radius(theme)};",
        "",
    ]

    for mode in MODES:
        variables = printable(snapshots[mode.value].variables)
        lines.append(f"// {mode.value.capitalize()} mode")
        for name, value in variables.items():
            lines.append(f"${prefix}-{mode.value}-{name}: {_scss_value(value)};")
        lines.append("")

    for mode in MODES:
        variables = printable(snapshots[mode.value].variables)
        lines.append(f"${prefix}-colors-{mode.value}: (")
        for name in variables:
            lines.append(f'  "{name}": ${prefix}-{mode.value}-{name},')
        lines.append(");")
        lines.append("")
    return lines


def _helpers(prefix: str) -> list[str]:
    return [
        "// Helpers",
        f"@function {prefix}-color($name, $mode: light) {{",
        "  @if $mode == dark {",
        f"    @return map-get(${prefix}-colors-dark, $name);",
        "  }",
        f"  @return map-get(${prefix}-colors-light, $name);",
        "}",
        "",
        f"@mixin {prefix}-bg($name, $mode: light) {{",
        f"  background-color: hsl({prefix}-color($name, $mode));",
        "}",
        "",
        f"@mixin {prefix}-text($name, $mode: light) {{",
        f"  color: hsl({prefix}-color($name, $mode));",
        "}",
        "",
        f"@mixin {prefix}-root {{",
        "  :root {",
        f"    @each $name, $value in ${prefix}-colors-light {{",
        "      --#{$name}: #{$value};",
        "    }",
        f"    --radius: #{{${prefix}-radius}};",
        f"    --font-sans: #{{${prefix}-font-sans}};",
        f"    --font-mono: #{{${prefix}-font-mono}};",
        "  }",
        "  .dark {",
        f"    @each $name, $value in ${prefix}-colors-dark {{",
        "      --#{$name}: #{$value};",
        "    }",
        "  }",
        "}",
        "",
    ]


def generate_scss(
    document: ThemeDocument, *, prefix: str = "theme", include_mixins: bool = True
) -> str:
    """Generate SCSS variables, maps and (optionally) helper mixins."""
    lines = _variables(document, prefix)
    if include_mixins:
        lines.extend(_helpers(prefix))
    return "\n".join(lines)


def generate_scss_partial(document: ThemeDocument, *, prefix: str = "theme") -> str:
    """Variables and maps only, for ``@use`` as a partial."""
    return generate_scss(document, prefix=prefix, include_mixins=False)
