"""Core ThemeForge functionality: theme IR, reference resolution, migration, validation, scanning."""

from . import ir
from .errors import (
    CircularReferenceError,
    InvalidReferencePathError,
    MaxDepthExceededError,
    OperationalError,
    ReferenceResolutionError,
    ThemeForgeError,
    ThemeLoadError,
    ThemeValidationError,
    UnknownFormatError,
    UnsafeReferencePathError,
)
from .migrate import detect_theme_version, is_v2_theme, migrate_theme
from .processing import ResolvedSnapshot, compare_themes, process_theme, resolve_theme_modes
from .references import resolve_reference, resolve_set
from .scales import expand_scales
from .scanner import ScanOptions, ScanReport, apply_fixes, scan_project
from .validator import ThemeValidationResult, validate_theme

__all__ = [
    "ir",
    "ThemeForgeError",
    "ThemeValidationError",
    "ThemeLoadError",
    "UnknownFormatError",
    "ReferenceResolutionError",
    "CircularReferenceError",
    "InvalidReferencePathError",
    "UnsafeReferencePathError",
    "MaxDepthExceededError",
    "OperationalError",
    "resolve_reference",
    "resolve_set",
    "expand_scales",
    "detect_theme_version",
    "is_v2_theme",
    "migrate_theme",
    "validate_theme",
    "ThemeValidationResult",
    "process_theme",
    "resolve_theme_modes",
    "compare_themes",
    "ResolvedSnapshot",
    "scan_project",
    "apply_fixes",
    "ScanOptions",
    "ScanReport",
]
