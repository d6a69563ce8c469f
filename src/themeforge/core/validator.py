"""
Theme document validation.

Validation never raises: every problem found in a document is collected so
that a single call reports the complete list. Errors make a document
unusable; warnings flag likely mistakes that do not block use.

Error checks, in order:

1. The document exists.
2. ``name``, ``id`` and ``category`` are present.
3. ``id`` is kebab-case.
4. Every ``{"$ref": ...}`` anywhere in the document resolves.
5. The document matches the ThemeDocument model (raw mappings only).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .color import is_hsl
from .errors import ReferenceResolutionError
from .ir import MODES, ThemeDocument, is_reference
from .references import resolve_reference
from .tokens import REQUIRED_COLORS, THEME_CATEGORIES

logger = logging.getLogger(__name__)

KEBAB_CASE_ID = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

REQUIRED_FIELDS: tuple[str, ...] = ("name", "id", "category")

# Token groups whose literal values are expected in "H S% L%" form
_HSL_GROUPS: tuple[str, ...] = ("semanticTokens", "statusColors", "sidebarTokens", "colors")

_MODE_NAMES = frozenset(m.value for m in MODES)


class ThemeValidationResult:
    """Result of theme validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}

    def __repr__(self) -> str:
        return f"ThemeValidationResult(errors={len(self.errors)}, warnings={len(self.warnings)})"


# =============================================================================
# Tree walking
# =============================================================================


def iter_references(tree: Mapping[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    """Return ``(location, ref)`` for every reference mapping, in document order."""
    found: list[tuple[str, dict[str, Any]]] = []
    stack: list[tuple[tuple[str, ...], Any]] = [((), tree)]
    while stack:
        location, node = stack.pop()
        if is_reference(node):
            found.append((".".join(location), node))
            continue
        if isinstance(node, Mapping):
            children = [((*location, str(k)), v) for k, v in node.items()]
        elif isinstance(node, list):
            children = [((*location, str(i)), v) for i, v in enumerate(node)]
        else:
            continue
        stack.extend(reversed(children))
    return found


def infer_mode(location: str) -> str | None:
    """The color mode a location sits under, if any."""
    for segment in location.split("."):
        if segment in _MODE_NAMES:
            return segment
    return None


# =============================================================================
# Validation
# =============================================================================


def _structure_errors(data: Mapping[str, Any]) -> list[str]:
    try:
        ThemeDocument.model_validate(dict(data))
    except ValidationError as e:
        messages = []
        for err in e.errors():
            loc = ".".join(str(part) for part in err["loc"]) or "<root>"
            messages.append(f"Invalid structure at {loc}: {err['msg']}")
        return messages
    return []


def _check_references(tree: Mapping[str, Any], result: ThemeValidationResult) -> None:
    for location, ref in iter_references(tree):
        # Refs outside a mode group are resolved once per mode at processing time
        mode = infer_mode(location)
        for candidate in [mode] if mode else [m.value for m in MODES]:
            try:
                resolve_reference(ref, tree, candidate)
            except ReferenceResolutionError as e:
                result.add_error(f"Invalid $ref at {location}: {e.message}")
                break


def _check_warnings(tree: Mapping[str, Any], result: ThemeValidationResult) -> None:
    category = tree.get("category")
    if isinstance(category, str) and category and category not in THEME_CATEGORIES:
        result.add_warning(f"Unknown category '{category}'")

    scales = tree.get("scales")
    if isinstance(scales, Mapping):
        for key, scale in scales.items():
            steps = scale.get("steps") if isinstance(scale, Mapping) else None
            if not isinstance(steps, Mapping) or any(not steps.get(m) for m in _MODE_NAMES):
                result.add_warning(f"Scale '{key}' is missing light or dark steps")

    semantic = tree.get("semanticTokens")
    if isinstance(semantic, Mapping):
        for mode in MODES:
            if not semantic.get(mode.value):
                result.add_warning(f"Missing semanticTokens.{mode.value}")

    colors = tree.get("colors")
    if isinstance(colors, Mapping) and not semantic:
        for mode in MODES:
            mode_colors = colors.get(mode.value)
            if not isinstance(mode_colors, Mapping):
                result.add_warning(f"Missing colors.{mode.value}")
                continue
            missing = [c for c in REQUIRED_COLORS if c not in mode_colors]
            if missing:
                result.add_warning(
                    f"colors.{mode.value} is missing required colors: {', '.join(missing)}"
                )

    for group in _HSL_GROUPS:
        by_mode = tree.get(group)
        if not isinstance(by_mode, Mapping):
            continue
        for mode, tokens in by_mode.items():
            if not isinstance(tokens, Mapping):
                continue
            for name, value in tokens.items():
                if isinstance(value, str) and not is_hsl(value):
                    result.add_warning(
                        f"{group}.{mode}.{name} value '{value}' is not in 'H S% L%' form"
                    )


def validate_theme(document: ThemeDocument | Mapping[str, Any] | None) -> ThemeValidationResult:
    """Validate a theme document.

    Args:
        document: Parsed ThemeDocument, raw mapping, or None.

    Returns:
        ThemeValidationResult listing every error and warning found.
    """
    result = ThemeValidationResult()

    if document is None:
        result.add_error("Theme document is missing")
        return result

    if isinstance(document, ThemeDocument):
        tree: Mapping[str, Any] = document.to_tree()
        structure: list[str] = []
    elif isinstance(document, Mapping):
        tree = document
        structure = _structure_errors(document)
    else:
        result.add_error(f"Theme document must be a mapping, got {type(document).__name__}")
        return result

    for field_name in REQUIRED_FIELDS:
        if not tree.get(field_name):
            result.add_error(f"Missing required field: {field_name}")

    theme_id = tree.get("id")
    if isinstance(theme_id, str) and theme_id and not KEBAB_CASE_ID.match(theme_id):
        result.add_error(f"Invalid id format: '{theme_id}' (must be kebab-case)")

    _check_references(tree, result)

    for message in structure:
        result.add_error(message)

    _check_warnings(tree, result)

    logger.debug(f"Validated theme {theme_id or '<unnamed>'}: {result!r}")
    return result
