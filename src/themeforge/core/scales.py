"""Expansion of 12-step color scales into flat per-step variables."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .ir import ColorScale

SCALE_STEPS: tuple[int, ...] = tuple(range(1, 13))


def _ladder(scale: ColorScale | Mapping[str, Any], kind: str, mode: str) -> Mapping[str, Any]:
    if isinstance(scale, ColorScale):
        ladders = getattr(scale, kind)
    else:
        ladders = scale.get(kind)
    if not ladders:
        return {}
    return ladders.get(str(mode)) or {}


def _step(ladder: Mapping[Any, Any], n: int) -> Any:
    # Raw YAML mappings may key steps by int
    value = ladder.get(str(n))
    return value if value is not None else ladder.get(n)


def _scale_name(key: str, scale: ColorScale | Mapping[str, Any]) -> str:
    name = scale.name if isinstance(scale, ColorScale) else scale.get("name")
    return name or key


def scale_step_names(name: str) -> list[str]:
    """All 24 variable names a full scale expands to."""
    return [f"{name}-{n}" for n in SCALE_STEPS] + [f"{name}-a{n}" for n in SCALE_STEPS]


def expand_scales(
    scales: Mapping[str, ColorScale | Mapping[str, Any]] | None, mode: str
) -> dict[str, Any]:
    """Flatten scales for one mode.

    Emits ``<name>-<n>`` from the opaque ladder and ``<name>-a<n>`` from the
    alpha ladder for n in 1..12. Missing ladders or steps emit nothing.
    """
    result: dict[str, Any] = {}
    if not scales:
        return result

    for key, scale in scales.items():
        name = _scale_name(key, scale)
        steps = _ladder(scale, "steps", mode)
        alpha = _ladder(scale, "alpha", mode)
        for n in SCALE_STEPS:
            value = _step(steps, n)
            if value:
                result[f"{name}-{n}"] = value
        for n in SCALE_STEPS:
            value = _step(alpha, n)
            if value:
                result[f"{name}-a{n}"] = value
    return result
