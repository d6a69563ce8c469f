"""
Project rebuild and rollback.

``rebuild_project_theme`` applies a theme to an initialized project:

1. Check the project has a ``.themeforge/`` directory.
2. Look the theme up in the project registry and validate it.
3. Back up every file the rebuild will touch (skipped in dry-run).
4. Write ``theme.json``, ``theme.css`` and the Tailwind config, and make
   sure the global stylesheet imports ``theme.css``.
5. Rewrite hard-coded colors that have a suggestion.
6. Report colors without a suggestion as warnings.

A dry-run goes through the same steps without touching the filesystem.
Writes are not atomic across files; the backup taken in step 3 is what
makes a rebuild reversible. Rebuilds and rollbacks against the same project
must not run concurrently.

Expected failures (uninitialized project, unknown theme, missing backups)
come back as :class:`OperationFailure` values instead of exceptions.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from themeforge.generators import generate_css, generate_tailwind

from .backup import (
    BackupReason,
    create_backup,
    list_backups,
    load_backup_manifest,
    prune_backups,
    restore_backup,
)
from .errors import (
    InvalidThemeError,
    NoBackupsError,
    NotInitializedError,
    OperationalError,
    ThemeLoadError,
    ThemeNotFoundError,
)
from .migrate import is_v2_theme, migrate_theme
from .project import (
    PROJECT_DIR_NAME,
    THEME_CSS,
    THEME_JSON,
    design_dir,
    find_globals_css,
    find_tailwind_config,
    is_initialized,
    load_config,
)
from .registry import ThemeRegistry, get_project_theme, project_registry
from .scanner import FileFix, ScanReport, apply_fixes, scan_project
from .validator import validate_theme

logger = logging.getLogger(__name__)

DEFAULT_TAILWIND_FORMAT = "ts"


@dataclass
class RebuildOptions:
    """Per-call overrides; ``None`` falls back to the project config."""

    dry_run: bool = False
    fix_colors: bool | None = None
    full_mode: bool | None = None
    tailwind_format: str | None = None
    registry: ThemeRegistry | None = None


@dataclass(frozen=True)
class OperationFailure:
    """Discriminated failure result for expected, recoverable errors."""

    error: str
    code: str
    success: bool = False

    @classmethod
    def from_error(cls, error: OperationalError) -> OperationFailure:
        return cls(error=error.message, code=error.code)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "error": self.error, "code": self.code}


@dataclass
class RebuildReport:
    theme_id: str
    previous_theme: str | None = None
    dry_run: bool = False
    migrated: bool = False
    backup_id: str | None = None
    changed_files: list[str] = field(default_factory=list)
    fixes: list[FileFix] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    scan: ScanReport | None = None
    success: bool = True

    @property
    def colors_fixed(self) -> int:
        return sum(fix.replacements for fix in self.fixes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "themeId": self.theme_id,
            "previousTheme": self.previous_theme,
            "dryRun": self.dry_run,
            "migrated": self.migrated,
            "backupId": self.backup_id,
            "changedFiles": list(self.changed_files),
            "fixedColors": [
                {"file": fix.path, "replacements": fix.replacements}
                for fix in self.fixes
                if fix.replacements
            ],
            "colorsFixed": self.colors_fixed,
            "warnings": list(self.warnings),
        }


@dataclass
class RollbackReport:
    backup_id: str
    safety_backup_id: str
    restored_theme: str | None = None
    restored_files: list[str] = field(default_factory=list)
    success: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "backupUsed": self.backup_id,
            "safetyBackup": self.safety_backup_id,
            "restoredTheme": self.restored_theme,
            "restoredFiles": list(self.restored_files),
        }


def _require_initialized(project_root: Path) -> None:
    if not is_initialized(project_root):
        raise NotInitializedError(
            f"Not a ThemeForge project: {project_root} (missing {PROJECT_DIR_NAME}/)"
        )


def _current_theme_id(project_root: Path) -> str | None:
    try:
        current = get_project_theme(project_root)
    except ThemeLoadError as e:
        logger.warning(f"Current theme.json is unreadable: {e}")
        return None
    return current.id if current else None


def _relpath(project_root: Path, path: Path) -> str:
    return path.relative_to(project_root).as_posix()


def _import_line(globals_css: Path, theme_css: Path) -> str:
    rel = Path(os.path.relpath(theme_css, globals_css.parent)).as_posix()
    return f"@import '{rel}';"


def _with_theme_import(content: str, line: str) -> str | None:
    """``content`` with the theme import prepended, or None if already present."""
    marker = f"{PROJECT_DIR_NAME}/design/{THEME_CSS}"
    if marker in content:
        return None
    return f"{line}\n{content}"


def _tailwind_target(project_root: Path, fmt: str | None) -> Path:
    if fmt is not None:
        return project_root / f"tailwind.config.{fmt}"
    existing = find_tailwind_config(project_root)
    if existing is not None:
        return existing
    return project_root / f"tailwind.config.{DEFAULT_TAILWIND_FORMAT}"


def _rebuild(project_root: Path, theme_id: str, options: RebuildOptions) -> RebuildReport:
    _require_initialized(project_root)
    config = load_config(project_root)

    registry = options.registry or project_registry(project_root)
    theme = registry.get_theme(theme_id)
    if theme is None:
        raise ThemeNotFoundError(f"Theme not found: {theme_id}")

    validation = validate_theme(theme)
    if not validation.is_valid:
        raise InvalidThemeError(
            f"Invalid theme: {'; '.join(validation.errors)}", validation.errors
        )

    report = RebuildReport(
        theme_id=theme_id,
        previous_theme=_current_theme_id(project_root),
        dry_run=options.dry_run,
        migrated=not is_v2_theme(theme),
    )
    migrated = migrate_theme(theme)

    fix_colors = config.rebuild.fix_colors if options.fix_colors is None else options.fix_colors
    full_mode = config.scan.full_mode if options.full_mode is None else options.full_mode
    if fix_colors:
        report.scan = scan_project(project_root, config.scan.to_options(full_mode))

    theme_dir = design_dir(project_root)
    theme_json = theme_dir / THEME_JSON
    theme_css = theme_dir / THEME_CSS
    tailwind_path = _tailwind_target(
        project_root, options.tailwind_format or config.rebuild.tailwind_format
    )
    tailwind_format = tailwind_path.suffix.lstrip(".")
    globals_css = find_globals_css(project_root, config.rebuild.globals_css)

    outputs: dict[Path, str] = {
        theme_json: migrated.to_json(),
        theme_css: generate_css(migrated),
        tailwind_path: generate_tailwind(migrated, format=tailwind_format),
    }
    if globals_css is not None:
        try:
            current_css = globals_css.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {globals_css}: {e}")
            report.warnings.append(
                f"{_relpath(project_root, globals_css)} could not be read ({e}); "
                "add an import of theme.css manually"
            )
        else:
            updated = _with_theme_import(current_css, _import_line(globals_css, theme_css))
            if updated is not None:
                outputs[globals_css] = updated
    else:
        report.warnings.append("globals.css not found; add an import of theme.css manually")

    fixable_files = sorted({f.file for f in report.scan.fixable}) if report.scan else []

    if not options.dry_run:
        manifest = create_backup(
            project_root,
            [*outputs, *(project_root / rel for rel in fixable_files)],
            previous_theme=report.previous_theme,
            new_theme=theme_id,
            reason=BackupReason.REBUILD,
        )
        report.backup_id = manifest.id
        theme_dir.mkdir(parents=True, exist_ok=True)
        for path, content in outputs.items():
            path.write_text(content, encoding="utf-8")
            logger.debug(f"Wrote {path}")

    report.changed_files.extend(_relpath(project_root, path) for path in outputs)

    if report.scan is not None:
        report.fixes = apply_fixes(project_root, report.scan.fixable, dry_run=options.dry_run)
        report.changed_files.extend(fix.path for fix in report.fixes if fix.replacements)
        for fix in report.fixes:
            if fix.stale:
                report.warnings.append(f"{fix.path}: {fix.stale} colors changed since scan")
        for finding in report.scan.unfixable:
            report.warnings.append(
                f"{finding.file}:{finding.line} - {finding.match} (manual review needed)"
            )

    if not options.dry_run and config.rebuild.keep_backups:
        prune_backups(project_root, config.rebuild.keep_backups)

    logger.info(
        f"{'Planned' if options.dry_run else 'Applied'} theme {theme_id}: "
        f"{len(report.changed_files)} files, {report.colors_fixed} colors fixed"
    )
    return report


def rebuild_project_theme(
    project_root: Path, theme_id: str, options: RebuildOptions | None = None
) -> RebuildReport | OperationFailure:
    """
    Apply ``theme_id`` to the project at ``project_root``.

    Args:
        project_root: Project directory.
        theme_id: Theme to apply.
        options: Dry-run and per-call overrides.

    Returns:
        RebuildReport on success (also for dry-run), OperationFailure for
        expected failures.
    """
    try:
        return _rebuild(project_root, theme_id, options or RebuildOptions())
    except OperationalError as e:
        logger.info(f"Rebuild failed: {e}")
        return OperationFailure.from_error(e)


def rollback_theme(
    project_root: Path, backup_id: str | None = None
) -> RollbackReport | OperationFailure:
    """
    Restore the newest backup, or ``backup_id``.

    A safety backup of the same files is taken first so the rollback can
    itself be rolled back.
    """
    try:
        _require_initialized(project_root)
        if backup_id is not None:
            manifest = load_backup_manifest(project_root, backup_id)
        else:
            backups = list_backups(project_root)
            if not backups:
                raise NoBackupsError("No theme backups found")
            manifest = backups[0]
    except OperationalError as e:
        logger.info(f"Rollback failed: {e}")
        return OperationFailure.from_error(e)

    safety = create_backup(
        project_root,
        [project_root / path for path in manifest.file_paths],
        previous_theme=_current_theme_id(project_root),
        new_theme=manifest.previous_theme,
        reason=BackupReason.ROLLBACK,
    )
    restored = restore_backup(project_root, manifest)
    return RollbackReport(
        backup_id=manifest.id,
        safety_backup_id=safety.id,
        restored_theme=manifest.previous_theme,
        restored_files=restored,
    )
