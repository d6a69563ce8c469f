"""
Error types for ThemeForge theme loading, resolution, generation, and project rewrites.

Three families:

- Structural errors: a theme document or request is malformed.
- Referential errors: a ``{"$ref": ...}`` pointer cannot be resolved.
- Operational errors: an expected, user-recoverable condition in a project
  (not initialized, unknown theme, missing backups). These are raised
  internally and converted into failure results by the rebuild engine.
"""

from __future__ import annotations

from typing import Any


class ThemeForgeError(Exception):
    """Base exception for all ThemeForge errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({details})"
        return self.message


# =============================================================================
# Structural errors
# =============================================================================


class ThemeValidationError(ThemeForgeError):
    """
    Raised when a theme document fails validation and the caller asked for strictness.

    Examples:
    - Missing name, id, or category
    - Non kebab-case id
    - Unresolvable references
    """

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = list(errors or [])
        super().__init__(message)


class ThemeLoadError(ThemeForgeError):
    """
    Raised when a theme file cannot be read or parsed.

    Examples:
    - Invalid JSON or YAML
    - Top-level value is not a mapping
    - Unsupported file extension
    """

    pass


class ThemeMigrationError(ThemeForgeError):
    """Raised when a document cannot be migrated (for example a missing document)."""

    pass


class UnknownFormatError(ThemeForgeError):
    """Raised when a generator is requested for a format that is not registered."""

    def __init__(self, fmt: str, available: list[str] | None = None):
        self.format = fmt
        self.available = list(available or [])
        message = f"Unknown format: {fmt}"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class ConfigError(ThemeForgeError):
    """Raised when .themeforge/config.toml cannot be parsed."""

    pass


# =============================================================================
# Referential errors
# =============================================================================


class ReferenceResolutionError(ThemeForgeError):
    """Base class for failures while following a ``$ref`` chain."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message)


class CircularReferenceError(ReferenceResolutionError):
    """Raised when a reference path is revisited within a single resolution chain."""

    def __init__(self, path: str, chain: list[str] | None = None):
        self.chain = list(chain or [])
        trail = " -> ".join([*self.chain, path]) if self.chain else path
        super().__init__(f"Circular reference detected: {trail}", path)


class InvalidReferencePathError(ReferenceResolutionError):
    """Raised when a dot-path does not resolve to an existing node."""

    def __init__(self, path: str, segment: str | None = None):
        self.segment = segment
        if segment is None:
            message = f"Invalid reference path: {path!r}"
        else:
            message = f"Invalid reference path: {path} ({segment} not found)"
        super().__init__(message, path)


class UnsafeReferencePathError(ReferenceResolutionError):
    """Raised when a path segment targets object metaproperties."""

    def __init__(self, path: str, segment: str):
        self.segment = segment
        super().__init__(f"Unsafe reference path: {path} (segment {segment!r} is not allowed)", path)


class MaxDepthExceededError(ReferenceResolutionError):
    """Raised when a reference chain is longer than the traversal bound."""

    def __init__(self, path: str, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Maximum reference depth ({max_depth}) exceeded at: {path}", path)


# =============================================================================
# Operational errors
# =============================================================================


class OperationalError(ThemeForgeError):
    """
    Expected, user-recoverable failure of a project operation.

    Each subclass carries a stable ``code`` used in failure results.
    """

    code = "operational-error"


class NotInitializedError(OperationalError):
    """Raised when the project has no .themeforge directory."""

    code = "not-initialized"


class ThemeNotFoundError(OperationalError):
    """Raised when a theme id is not present in any registry search path."""

    code = "theme-not-found"


class InvalidThemeError(OperationalError):
    """Raised when the requested theme exists but does not validate."""

    code = "invalid-theme"

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = list(errors or [])
        super().__init__(message)


class BackupNotFoundError(OperationalError):
    """Raised when a rollback names a manifest id that does not exist."""

    code = "backup-not-found"


class NoBackupsError(OperationalError):
    """Raised when a rollback is requested but no manifest exists."""

    code = "no-backups"
