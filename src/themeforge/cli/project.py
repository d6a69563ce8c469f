"""
Theme document CLI commands.

- validate: Check a theme file or theme id and list every problem
- migrate: Convert a version 1 theme to version 2
- export: Generate CSS, SCSS, Tailwind, Figma or Style Dictionary output
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from themeforge.cli.utils import console, fail, fail_from, load_theme_arg, resolve_project
from themeforge.core.errors import ThemeForgeError, UnknownFormatError
from themeforge.core.migrate import is_v2_theme, migrate_theme
from themeforge.core.registry import THEME_FILE_SUFFIXES, read_theme_data
from themeforge.core.validator import validate_theme
from themeforge.generators import GENERATORS, available_formats, export_theme, generate_theme


def validate_command(
    theme: str = typer.Argument(..., help="Theme id or theme file"),
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of text"),
) -> None:
    """
    Validate a theme and report every error and warning.

    Exits with status 1 when the theme has errors.
    """
    path = Path(theme)
    try:
        if path.suffix in THEME_FILE_SUFFIXES and path.exists():
            result = validate_theme(read_theme_data(path))
        else:
            result = validate_theme(load_theme_arg(theme, resolve_project(project)))
    except ThemeForgeError as e:
        raise fail_from(e)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for error in result.errors:
            console.print(f"[red]ERROR[/red] {escape(error)}")
        for warning in result.warnings:
            console.print(f"[yellow]WARNING[/yellow] {escape(warning)}")
        if result.is_valid:
            console.print(f"[green]✓[/green] {theme} is valid")

    if not result.is_valid:
        raise typer.Exit(code=1)


def migrate_command(
    theme: str = typer.Argument(..., help="Theme id or theme file"),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Write the migrated theme here (default: stdout)"
    ),
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
) -> None:
    """Migrate a version 1 theme to the version 2 schema."""
    try:
        document = load_theme_arg(theme, resolve_project(project))
        migrated = migrate_theme(document)
    except ThemeForgeError as e:
        raise fail_from(e)

    if is_v2_theme(document):
        typer.echo(f"{theme} is already version 2", err=True)

    content = migrated.to_json()
    if output is None:
        typer.echo(content, nl=False)
        return
    Path(output).write_text(content, encoding="utf-8")
    typer.echo(f"✓ Wrote {output}", err=True)


def export_command(
    theme: str = typer.Argument(..., help="Theme id or theme file"),
    formats: list[str] | None = typer.Option(
        None, "--format", "-f", help="Output format (repeatable, default: all)"
    ),
    output_dir: str | None = typer.Option(
        None, "--output-dir", "-o", help="Directory to write files into"
    ),
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
) -> None:
    """
    Export a theme to one or more formats.

    With a single --format and no --output-dir the result is printed.
    """
    selected = list(formats) if formats else available_formats()
    for fmt in selected:
        if fmt not in GENERATORS:
            raise fail_from(UnknownFormatError(fmt, available_formats()))

    try:
        document = load_theme_arg(theme, resolve_project(project))
    except ThemeForgeError as e:
        raise fail_from(e)

    if output_dir is None and len(selected) == 1:
        typer.echo(generate_theme(document, selected[0]), nl=False)
        return

    written = export_theme(document, Path(output_dir or "."), selected)

    table = Table(title=f"Export: {document.display_name}")
    table.add_column("Format", style="cyan")
    table.add_column("Result")
    failed = False
    for fmt, result in written.items():
        if isinstance(result, Path):
            table.add_row(fmt, str(result))
        else:
            failed = True
            table.add_row(fmt, f"[red]{result}[/red]")
    console.print(table)

    if failed:
        raise fail("Some formats failed to generate")
