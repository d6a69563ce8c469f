"""
Theme processing: turns a theme document into flat, mode-specific variables.

Variables are assembled in a fixed order so that later groups override
earlier ones on name clashes:

1. Expanded color scales
2. Semantic tokens
3. Status colors
4. Chart colors (``chart-<n>``)
5. Sidebar tokens (``sidebar-<key>``)
6. Effects (``glass-*``, ``glow*``, ``gradient-<name>-*``)

Unresolvable references keep their original value and are reported as
warnings on the snapshot.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import ReferenceResolutionError
from .ir import MODES, ColorMode, ThemeDocument
from .migrate import migrate_theme
from .references import resolve_reference, resolve_set
from .scales import expand_scales

logger = logging.getLogger(__name__)

DEFAULT_ANIMATION_DURATION = "0.2s"
DEFAULT_ANIMATION_EASING = "ease-out"


@dataclass(frozen=True)
class ResolvedSnapshot:
    """Resolved variables for one mode. Produced fresh on every call."""

    mode: str
    variables: dict[str, Any]
    animations: dict[str, str] = field(default_factory=dict)
    keyframes: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()


@dataclass
class ThemeDiff:
    """Variable-level difference between two themes for one mode."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: dict[str, tuple[Any, Any]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)


def _camel_to_kebab(name: str) -> str:
    return re.sub(r"([A-Z])", r"-\1", name).lower()


# =============================================================================
# Effects and animations
# =============================================================================


def process_effects(
    document: ThemeDocument, mode: str | None = None, warnings: list[str] | None = None
) -> dict[str, Any]:
    """Flatten effect definitions into variables."""
    result: dict[str, Any] = {}
    effects = document.effects
    if effects is None:
        return result

    tree = document.to_tree()

    def resolve(name: str, value: Any) -> Any:
        try:
            return resolve_reference(value, tree, mode)
        except ReferenceResolutionError as e:
            message = f"Could not resolve effect {name}: {e.message}"
            logger.warning(message)
            if warnings is not None:
                warnings.append(message)
            return value

    glass = effects.glass_morphism
    if glass is not None:
        if glass.background:
            result["glass-background"] = resolve("glass-background", glass.background)
        if glass.backdrop_blur:
            result["glass-blur"] = glass.backdrop_blur

    glow = effects.glow
    if glow is not None:
        if glow.default:
            result["glow"] = glow.default
        if glow.lg:
            result["glow-lg"] = glow.lg
        if glow.color:
            result["glow-color"] = resolve("glow-color", glow.color)

    for name, gradient in (effects.gradient or {}).items():
        if gradient.from_:
            result[f"gradient-{name}-from"] = resolve(f"gradient-{name}-from", gradient.from_)
        if gradient.to:
            result[f"gradient-{name}-to"] = resolve(f"gradient-{name}-to", gradient.to)
        if gradient.direction:
            result[f"gradient-{name}-direction"] = gradient.direction

    return result


def process_animations(
    document: ThemeDocument,
) -> tuple[dict[str, dict[str, dict[str, Any]]], dict[str, str]]:
    """Return ``(keyframes, shorthands)`` for the document's animations.

    The shorthand is ``"<name> <duration> <easing>[ <iteration>]"``.
    """
    keyframes: dict[str, dict[str, dict[str, Any]]] = {}
    shorthands: dict[str, str] = {}
    for name, animation in (document.animations or {}).items():
        if animation.keyframes:
            keyframes[name] = animation.keyframes
        parts = [
            name,
            animation.duration or DEFAULT_ANIMATION_DURATION,
            animation.easing or DEFAULT_ANIMATION_EASING,
        ]
        if animation.iteration is not None:
            parts.append(str(animation.iteration))
        shorthands[name] = " ".join(parts)
    return keyframes, shorthands


def generate_keyframes_css(keyframes: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> str:
    """Render ``@keyframes`` blocks. camelCase properties become kebab-case."""
    lines: list[str] = []
    for name, frames in keyframes.items():
        lines.append(f"@keyframes {name} {{")
        for stop, properties in frames.items():
            lines.append(f"  {stop} {{")
            for prop, value in properties.items():
                lines.append(f"    {_camel_to_kebab(prop)}: {value};")
            lines.append("  }")
        lines.append("}")
        lines.append("")
    return "\n".join(lines)


# =============================================================================
# Resolution
# =============================================================================


def process_theme(document: ThemeDocument, mode: str = ColorMode.LIGHT) -> ResolvedSnapshot:
    """Resolve a theme into flat variables for ``mode``.

    Version 1 documents are migrated first.
    """
    theme = migrate_theme(document)
    mode = str(mode)
    tree = theme.to_tree()
    variables: dict[str, Any] = {}
    warnings: list[str] = []

    scale_values = expand_scales(theme.scales, mode)
    resolved = resolve_set(scale_values, tree, mode, label="scales")
    variables.update(resolved.values)
    warnings.extend(resolved.warnings)

    for label, groups in (
        ("semanticTokens", theme.semantic_tokens),
        ("statusColors", theme.status_colors),
    ):
        resolved = resolve_set((groups or {}).get(mode), tree, mode, label=f"{label}.{mode}")
        variables.update(resolved.values)
        warnings.extend(resolved.warnings)

    resolved = resolve_set(theme.chart_colors, tree, mode, label="chartColors")
    for key, value in resolved.values.items():
        variables[f"chart-{key}"] = value
    warnings.extend(resolved.warnings)

    sidebar = (theme.sidebar_tokens or {}).get(mode)
    resolved = resolve_set(sidebar, tree, mode, label=f"sidebarTokens.{mode}")
    for key, value in resolved.values.items():
        variables[f"sidebar-{key}"] = value
    warnings.extend(resolved.warnings)

    variables.update(process_effects(theme, mode, warnings))

    keyframes, animations = process_animations(theme)
    return ResolvedSnapshot(
        mode=mode,
        variables=variables,
        animations=animations,
        keyframes=keyframes,
        warnings=tuple(warnings),
    )


def resolve_theme_modes(document: ThemeDocument) -> dict[str, ResolvedSnapshot]:
    """Snapshots for both light and dark modes."""
    return {mode.value: process_theme(document, mode) for mode in MODES}


def theme_variable_names(document: ThemeDocument) -> list[str]:
    """Sorted union of variable names across both modes."""
    names: set[str] = set()
    for snapshot in resolve_theme_modes(document).values():
        names.update(snapshot.variables)
    return sorted(names)


def compare_themes(
    old: ThemeDocument, new: ThemeDocument, mode: str = ColorMode.LIGHT
) -> ThemeDiff:
    """Compare two themes' resolved variables for one mode."""
    before = process_theme(old, mode).variables
    after = process_theme(new, mode).variables
    diff = ThemeDiff()
    diff.added = sorted(k for k in after if k not in before)
    diff.removed = sorted(k for k in before if k not in after)
    for key in sorted(before.keys() & after.keys()):
        if before[key] != after[key]:
            diff.changed[key] = (before[key], after[key])
    return diff
