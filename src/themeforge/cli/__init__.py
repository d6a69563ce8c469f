"""
ThemeForge CLI.

Modules:

- themes.py: Theme catalog commands (themes list / show)
- project.py: Theme document commands (validate, migrate, export)
- rebuild.py: Project rewrite commands (scan, rebuild, rollback, backups)
- utils.py: Shared helpers
"""

from __future__ import annotations

import sys

import typer

from themeforge._version import get_version
from themeforge.cli.project import export_command, migrate_command, validate_command
from themeforge.cli.rebuild import backups_app, rebuild_command, rollback_command, scan_command
from themeforge.cli.themes import themes_app
from themeforge.cli.utils import configure_logging, version_callback

__version__ = get_version()

# =============================================================================
# Main Application
# =============================================================================

app = typer.Typer(
    help="""ThemeForge - design tokens for Tailwind projects

Command Types:
  • Themes: themes list, themes show, validate, migrate, export
    → Work on theme documents (bundled, project-local or a file path)

  • Project: scan, rebuild, rollback, backups
    → Operate on a project with a .themeforge/ directory
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """ThemeForge CLI main callback for global options."""
    configure_logging(verbose)


app.add_typer(themes_app, name="themes")

app.command(name="validate")(validate_command)
app.command(name="migrate")(migrate_command)
app.command(name="export")(export_command)

app.command(name="scan")(scan_command)
app.command(name="rebuild")(rebuild_command)
app.command(name="rollback")(rollback_command)
app.add_typer(backups_app, name="backups")


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])

__all__ = ["__version__", "app", "main"]
