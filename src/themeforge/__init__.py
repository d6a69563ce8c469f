"""
ThemeForge - design-token resolution, migration and project rewrites.

Turns declarative theme documents into mode-specific style variables,
exports them to CSS, SCSS, Tailwind, Figma and Style Dictionary formats,
and rewrites a project's hard-coded colors with backup and rollback.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import OperationalError, ThemeForgeError
from .core.ir import ThemeDocument

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "ThemeDocument",
    "ThemeForgeError",
    "OperationalError",
]
