"""
ThemeForge CLI utilities.

Shared helpers used across CLI modules.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer
from rich.console import Console

from themeforge._version import get_version
from themeforge.core.errors import ThemeForgeError, ThemeNotFoundError
from themeforge.core.ir import ThemeDocument
from themeforge.core.registry import THEME_FILE_SUFFIXES, load_theme_file, project_registry

console = Console()

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"ThemeForge {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )


def resolve_project(project: str | None) -> Path:
    return Path(project or ".").resolve()


def load_theme_arg(source: str, project_root: Path) -> ThemeDocument:
    """Load a theme given either a file path or a theme id.

    Raises:
        ThemeNotFoundError: If ``source`` is neither a theme file nor a known id.
        ThemeLoadError: If the file exists but cannot be loaded.
    """
    path = Path(source)
    if path.suffix in THEME_FILE_SUFFIXES and path.exists():
        return load_theme_file(path)
    theme = project_registry(project_root).get_theme(source)
    if theme is None:
        raise ThemeNotFoundError(f"Theme not found: {source}")
    return theme


def fail(message: str, code: int = 1) -> typer.Exit:
    """Print an error to stderr and return the Exit to raise."""
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=code)


def fail_from(error: ThemeForgeError) -> typer.Exit:
    return fail(str(error))
