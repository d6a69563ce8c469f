"""
Theme catalog CLI commands.

- list: Themes available to a project (bundled, project, configured paths)
- show: Resolved variables of one theme for a mode
"""

from __future__ import annotations

import json

import typer
from rich.table import Table

from themeforge.cli.utils import console, fail, fail_from, load_theme_arg, resolve_project
from themeforge.core.errors import ThemeForgeError
from themeforge.core.ir import ColorMode
from themeforge.core.migrate import detect_theme_version
from themeforge.core.processing import process_theme
from themeforge.core.registry import project_registry
from themeforge.core.tokens import THEME_CATEGORIES

themes_app = typer.Typer(help="Browse available themes", no_args_is_help=True)


@themes_app.command("list")
def themes_list(
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
    category: str | None = typer.Option(None, "--category", "-c", help="Filter by category"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List available themes."""
    if category is not None and category not in THEME_CATEGORIES:
        raise fail(f"Unknown category: {category}. Available: {', '.join(THEME_CATEGORIES)}")

    registry = project_registry(resolve_project(project))
    themes = registry.list_themes(category)

    if as_json:
        rows = [
            {
                "id": t.id,
                "name": t.name,
                "category": t.category,
                "version": detect_theme_version(t),
            }
            for t in themes
        ]
        typer.echo(json.dumps(rows, indent=2))
        return

    if not themes:
        console.print("[yellow]No themes found[/yellow]")
        return

    table = Table(title="Themes")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Version", justify="right")
    for theme in themes:
        table.add_row(
            theme.id or "-",
            theme.display_name,
            theme.category or "-",
            detect_theme_version(theme),
        )
    console.print(table)

    for path, error in registry.load_errors.items():
        console.print(f"[yellow]Skipped {path}: {error}[/yellow]")


@themes_app.command("show")
def themes_show(
    theme: str = typer.Argument(..., help="Theme id or theme file"),
    mode: ColorMode = typer.Option(ColorMode.LIGHT, "--mode", "-m", help="Color mode"),
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Show a theme's resolved variables."""
    try:
        document = load_theme_arg(theme, resolve_project(project))
    except ThemeForgeError as e:
        raise fail_from(e)

    snapshot = process_theme(document, mode)
    if as_json:
        typer.echo(json.dumps(snapshot.variables, indent=2, ensure_ascii=False))
        return

    console.print(f"[bold]{document.display_name}[/bold] ({document.id}, {mode.value} mode)")
    table = Table()
    table.add_column("Variable", style="cyan")
    table.add_column("Value")
    for name, value in snapshot.variables.items():
        table.add_row(f"--{name}", str(value))
    console.print(table)
    for warning in snapshot.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")
