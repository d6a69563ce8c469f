"""
Project rewrite CLI commands.

- scan: Report hard-coded colors in a project
- rebuild: Apply a theme and rewrite fixable colors (with backup)
- rollback: Restore the newest (or a named) backup
- backups list / prune: Inspect and trim backup history
"""

from __future__ import annotations

import json

import typer
from rich.markup import escape
from rich.table import Table

from themeforge.cli.utils import console, fail, fail_from, resolve_project
from themeforge.core.backup import list_backups, prune_backups
from themeforge.core.errors import NotInitializedError, ThemeForgeError
from themeforge.core.project import is_initialized, load_config
from themeforge.core.rebuild import (
    OperationFailure,
    RebuildOptions,
    rebuild_project_theme,
    rollback_theme,
)
from themeforge.core.scanner import scan_project

backups_app = typer.Typer(help="Manage theme backups", no_args_is_help=True)

MAX_LISTED_FINDINGS = 50


def scan_command(
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
    full: bool = typer.Option(
        False, "--full", help="Scan extra directories and enable dynamic suggestions"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the JSON report"),
) -> None:
    """Scan a project for hard-coded colors."""
    root = resolve_project(project)
    try:
        config = load_config(root)
    except ThemeForgeError as e:
        raise fail_from(e)

    options = config.scan.to_options(full_mode=True if full else None)
    report = scan_project(root, options)

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
        return

    findings = report.non_compliant
    console.print(
        f"Scanned [bold]{report.scanned_files}[/bold] files: "
        f"{len(findings)} hard-coded colors, {len(report.fixable)} fixable"
    )
    if not findings:
        console.print("[green]✓ No hard-coded colors found[/green]")
        return

    table = Table()
    table.add_column("Location", style="cyan")
    table.add_column("Match")
    table.add_column("Suggestion")
    for finding in findings[:MAX_LISTED_FINDINGS]:
        table.add_row(
            escape(f"{finding.file}:{finding.line}"),
            escape(finding.match),
            finding.suggestion or "[yellow]manual review[/yellow]",
        )
    console.print(table)
    if len(findings) > MAX_LISTED_FINDINGS:
        console.print(f"... and {len(findings) - MAX_LISTED_FINDINGS} more (use --json)")


def rebuild_command(
    theme: str = typer.Argument(..., help="Theme id to apply"),
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would change"),
    fix_colors: bool | None = typer.Option(
        None, "--fix-colors/--no-fix-colors", help="Rewrite hard-coded colors"
    ),
    full: bool = typer.Option(False, "--full", help="Use full-mode scanning"),
    tailwind_format: str | None = typer.Option(
        None, "--tailwind-format", help="Tailwind config flavour: ts or js"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the JSON report"),
) -> None:
    """
    Apply a theme to the project.

    Backs up every touched file first; undo with `themeforge rollback`.
    """
    if tailwind_format not in (None, "ts", "js"):
        raise fail(f"Unsupported Tailwind format: {tailwind_format}")

    options = RebuildOptions(
        dry_run=dry_run,
        fix_colors=fix_colors,
        full_mode=True if full else None,
        tailwind_format=tailwind_format,
    )
    try:
        result = rebuild_project_theme(resolve_project(project), theme, options)
    except ThemeForgeError as e:
        raise fail_from(e)

    if isinstance(result, OperationFailure):
        if as_json:
            typer.echo(json.dumps(result.to_dict(), indent=2))
            raise typer.Exit(code=1)
        raise fail(result.error)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    verb = "Would change" if result.dry_run else "Changed"
    title = "[yellow]Dry run[/yellow]" if result.dry_run else "[green]✓ Theme applied[/green]"
    console.print(f"{title}: {theme}")
    if result.backup_id:
        console.print(f"Backup: {result.backup_id}")
    console.print(f"{verb} {len(result.changed_files)} files:")
    for path in result.changed_files:
        console.print(f"  {escape(path)}")
    if result.colors_fixed:
        console.print(f"Colors {'to fix' if result.dry_run else 'fixed'}: {result.colors_fixed}")
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")


def rollback_command(
    backup_id: str | None = typer.Argument(None, help="Backup to restore (default: newest)"),
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the JSON report"),
) -> None:
    """Restore project theme files from a backup."""
    result = rollback_theme(resolve_project(project), backup_id)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        if isinstance(result, OperationFailure):
            raise typer.Exit(code=1)
        return

    if isinstance(result, OperationFailure):
        raise fail(result.error)

    console.print(f"[green]✓ Restored backup {result.backup_id}[/green]")
    if result.restored_theme:
        console.print(f"Theme: {result.restored_theme}")
    for path in result.restored_files:
        console.print(f"  {path}")
    console.print(f"Safety backup: {result.safety_backup_id}")


@backups_app.command("list")
def backups_list(
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List backups, newest first."""
    root = resolve_project(project)
    if not is_initialized(root):
        raise fail_from(NotInitializedError(f"Not a ThemeForge project: {root}"))

    manifests = list_backups(root)
    if as_json:
        rows = [m.model_dump(mode="json", by_alias=True) for m in manifests]
        typer.echo(json.dumps(rows, indent=2))
        return

    if not manifests:
        console.print("[yellow]No backups found[/yellow]")
        return

    table = Table(title="Backups")
    table.add_column("ID", style="cyan")
    table.add_column("Reason")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Files", justify="right")
    for manifest in manifests:
        table.add_row(
            manifest.id,
            manifest.reason.value,
            manifest.previous_theme or "-",
            manifest.new_theme or "-",
            str(len(manifest.files)),
        )
    console.print(table)


@backups_app.command("prune")
def backups_prune(
    keep: int = typer.Option(5, "--keep", "-k", min=0, help="Number of backups to keep"),
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project directory (default: current)"
    ),
) -> None:
    """Delete all but the newest backups."""
    root = resolve_project(project)
    if not is_initialized(root):
        raise fail_from(NotInitializedError(f"Not a ThemeForge project: {root}"))

    removed = prune_backups(root, keep)
    if removed:
        console.print(f"[green]✓ Removed {len(removed)} backups[/green]")
    else:
        console.print("Nothing to prune")
