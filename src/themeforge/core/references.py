"""
Reference resolution for theme documents.

A token may point at another node in the same document with
``{"$ref": "scales.teal.steps.light.9"}``. Chains are followed with an
explicit loop and a per-chain visited list, bounded by
``MAX_REFERENCE_DEPTH`` hops, so cyclic documents fail instead of looping.

When a mode is supplied, the scale shorthand ``scales.<name>.<n>`` and
``scales.<name>.a<n>`` expand to that mode's opaque and alpha ladders.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import (
    CircularReferenceError,
    InvalidReferencePathError,
    MaxDepthExceededError,
    ReferenceResolutionError,
    UnsafeReferencePathError,
)
from .ir import REF_KEY, ThemeDocument, is_reference

logger = logging.getLogger(__name__)

MAX_REFERENCE_DEPTH = 16

UNSAFE_SEGMENTS = frozenset({"__proto__", "constructor", "prototype"})

DocumentLike = ThemeDocument | Mapping[str, Any]


def is_unsafe_segment(segment: str) -> bool:
    """True for prototype-style names and Python dunder names."""
    if segment in UNSAFE_SEGMENTS:
        return True
    return len(segment) > 4 and segment.startswith("__") and segment.endswith("__")


def document_tree(document: DocumentLike) -> Mapping[str, Any]:
    """Return the navigable tree for a document or raw mapping."""
    if isinstance(document, ThemeDocument):
        return document.to_tree()
    if isinstance(document, Mapping):
        return document
    raise TypeError(f"Expected ThemeDocument or mapping, got {type(document).__name__}")


def expand_mode_shorthand(path: str, mode: str | None) -> str:
    """Expand ``scales.<name>.<n>`` / ``scales.<name>.a<n>`` for ``mode``."""
    if not mode:
        return path
    parts = path.split(".")
    if len(parts) != 3 or parts[0] != "scales":
        return path
    name, step = parts[1], parts[2]
    if step.isdigit():
        return f"scales.{name}.steps.{mode}.{step}"
    if step.startswith("a") and step[1:].isdigit():
        return f"scales.{name}.alpha.{mode}.{step[1:]}"
    return path


def _lookup(tree: Mapping[str, Any], path: str) -> Any:
    segments = path.split(".")
    for segment in segments:
        if is_unsafe_segment(segment):
            raise UnsafeReferencePathError(path, segment)

    node: Any = tree
    for segment in segments:
        if isinstance(node, Mapping) and segment in node:
            node = node[segment]
        elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
            node = node[int(segment)]
        else:
            raise InvalidReferencePathError(path, segment)
    return node


def resolve_reference(
    value: Any,
    document: DocumentLike,
    mode: str | None = None,
    *,
    max_depth: int = MAX_REFERENCE_DEPTH,
) -> Any:
    """Resolve ``value`` to a concrete value.

    Non-reference values are returned unchanged (the same object).

    Args:
        value: Literal value or ``{"$ref": path}`` mapping.
        document: Theme document (or its raw tree) the path is relative to.
        mode: Optional color mode enabling the scale shorthand.
        max_depth: Maximum number of hops in one chain.

    Raises:
        CircularReferenceError: A path was revisited within the chain.
        InvalidReferencePathError: A segment does not exist, or the ref is not a string.
        UnsafeReferencePathError: A segment names an object metaproperty.
        MaxDepthExceededError: More than ``max_depth`` hops were needed.
    """
    if not is_reference(value):
        return value

    tree = document_tree(document)
    chain: list[str] = []
    current: Any = value
    while is_reference(current):
        raw_path = current.get(REF_KEY)
        if not isinstance(raw_path, str) or not raw_path.strip():
            raise InvalidReferencePathError(str(raw_path))
        path = expand_mode_shorthand(raw_path.strip(), mode)
        if path in chain:
            raise CircularReferenceError(path, chain)
        if len(chain) >= max_depth:
            raise MaxDepthExceededError(path, max_depth)
        chain.append(path)
        current = _lookup(tree, path)
    return current


@dataclass
class ResolvedSet:
    """Outcome of resolving a whole token group.

    ``values`` holds every entry; entries that failed keep their original
    value and have a message in ``warnings`` and the error in ``failures``.
    """

    values: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    failures: dict[str, ReferenceResolutionError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def resolve_set(
    token_group: Mapping[str, Any] | None,
    document: DocumentLike,
    mode: str | None = None,
    *,
    label: str | None = None,
) -> ResolvedSet:
    """Resolve every entry of ``token_group`` independently.

    One entry failing never affects the others.
    """
    result = ResolvedSet()
    if not token_group:
        return result

    tree = document_tree(document)
    for key, value in token_group.items():
        try:
            result.values[key] = resolve_reference(value, tree, mode)
        except ReferenceResolutionError as e:
            name = f"{label}.{key}" if label else key
            message = f"Could not resolve {name}: {e.message}"
            logger.warning(message)
            result.values[key] = value
            result.warnings.append(message)
            result.failures[key] = e
    return result
