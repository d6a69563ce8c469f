"""
Color value helpers.

Theme documents store colors as space-separated HSL components
(``"346.8 77.2% 49.8%"``, optionally followed by ``" / <alpha>"``), the form
expected inside ``hsl(var(--token))``. These helpers convert between that
form and hex for design-tool exports, and shift lightness for derived
hover tokens.
"""

from __future__ import annotations

import colorsys
import re
from dataclasses import dataclass

HSL_PATTERN = re.compile(
    r"^\s*(-?\d+(?:\.\d+)?)\s+(\d+(?:\.\d+)?)%\s+(\d+(?:\.\d+)?)%\s*(?:/\s*(\d*\.?\d+%?))?\s*$"
)


def _fmt(value: float) -> str:
    """Format a component with at most one decimal, dropping a trailing .0."""
    rounded = round(value, 1)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.1f}"


@dataclass(frozen=True)
class HSLColor:
    """Parsed HSL components (hue in degrees, saturation/lightness in percent)."""

    h: float
    s: float
    l: float  # noqa: E741
    alpha: str | None = None

    def format(self) -> str:
        text = f"{_fmt(self.h)} {_fmt(self.s)}% {_fmt(self.l)}%"
        if self.alpha is not None:
            text += f" / {self.alpha}"
        return text


def parse_hsl(value: str) -> HSLColor | None:
    """Parse an ``H S% L%`` string. Returns None if the value is not in that form."""
    if not isinstance(value, str):
        return None
    match = HSL_PATTERN.match(value)
    if not match:
        return None
    h, s, l, alpha = match.groups()  # noqa: E741
    return HSLColor(float(h), float(s), float(l), alpha)


def is_hsl(value: object) -> bool:
    return isinstance(value, str) and HSL_PATTERN.match(value) is not None


def adjust_lightness(value: str, delta: float) -> str:
    """Shift the lightness of an HSL value by ``delta`` percentage points.

    Lightness is clamped to 0..100. Values that are not HSL are returned
    unchanged.
    """
    color = parse_hsl(value)
    if color is None:
        return value
    lightness = min(100.0, max(0.0, color.l + delta))
    return HSLColor(color.h, color.s, lightness, color.alpha).format()


def hsl_to_hex(hsl_value: str) -> str:
    """Convert an ``H S% L%`` string to uppercase ``#RRGGBB``.

    Any alpha component is ignored.

    Raises:
        ValueError: If the input is not an HSL string.
    """
    color = parse_hsl(hsl_value)
    if color is None:
        raise ValueError(f"Not an HSL color: {hsl_value!r}")
    r, g, b = colorsys.hls_to_rgb((color.h % 360) / 360, color.l / 100, color.s / 100)
    return "#" + "".join(f"{round(c * 255):02X}" for c in (r, g, b))
