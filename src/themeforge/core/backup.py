"""
Backup manifests for project rewrites.

Each rebuild (and each rollback) first captures the files it is about to
touch into ``.themeforge/design/backups/<id>/``: a ``manifest.json``
descriptor plus one verbatim copy per captured file. Manifest ids are
``<UTC timestamp>-<theme id>`` and sort chronologically, so the backups form
a linear history in which every manifest can be restored on its own.

Files that did not exist when the backup was taken are recorded with
``existed=False``; restoring the manifest removes them again.
"""

from __future__ import annotations

import logging
import re
import shutil
from collections.abc import Iterable
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import BackupNotFoundError
from .project import backups_dir

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.json"
TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%fZ"

_SAFE_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class BackupReason(StrEnum):
    REBUILD = "rebuild"
    ROLLBACK = "rollback"


class BackupFile(BaseModel):
    """One captured file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str
    existed: bool = True
    backup: str | None = Field(default=None, description="Copy name inside the backup dir")


class BackupManifest(BaseModel):
    """Descriptor written as ``manifest.json`` in each backup directory."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    created_at: str = Field(alias="createdAt")
    previous_theme: str | None = Field(default=None, alias="previousTheme")
    new_theme: str | None = Field(default=None, alias="newTheme")
    reason: BackupReason = BackupReason.REBUILD
    files: list[BackupFile] = Field(default_factory=list)

    @property
    def file_paths(self) -> list[str]:
        return [f.path for f in self.files]

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2) + "\n"


def _theme_slug(theme_id: str | None) -> str:
    slug = re.sub(r"[^A-Za-z0-9._-]+", "-", theme_id or "none").strip("-")
    return slug or "none"


def backup_dir(project_root: Path, backup_id: str) -> Path:
    return backups_dir(project_root) / backup_id


def _allocate_id(project_root: Path, stamp: datetime, theme_id: str | None) -> str:
    base = f"{stamp.strftime(TIMESTAMP_FORMAT)}-{_theme_slug(theme_id)}"
    candidate = base
    counter = 1
    while backup_dir(project_root, candidate).exists():
        counter += 1
        candidate = f"{base}-{counter}"
    return candidate


def _relative(project_root: Path, path: Path | str) -> str:
    path = Path(path)
    path = path if path.is_absolute() else project_root / path
    return path.resolve().relative_to(project_root.resolve()).as_posix()


def create_backup(
    project_root: Path,
    files: Iterable[Path | str],
    *,
    previous_theme: str | None,
    new_theme: str | None,
    reason: BackupReason = BackupReason.REBUILD,
    now: datetime | None = None,
) -> BackupManifest:
    """
    Capture ``files`` verbatim into a new backup directory.

    Args:
        project_root: Project directory.
        files: Files to capture, absolute or relative to ``project_root``.
            Missing files are recorded as absent.
        previous_theme: Theme id applied before the operation.
        new_theme: Theme id the operation applies.
        reason: ``rebuild`` or ``rollback``.
        now: Timestamp override.

    Returns:
        The written manifest.
    """
    stamp = (now or datetime.now(UTC)).astimezone(UTC)
    theme_for_id = new_theme if reason == BackupReason.REBUILD else f"rollback-from-{previous_theme}"
    backup_id = _allocate_id(project_root, stamp, theme_for_id)
    target = backup_dir(project_root, backup_id)
    target.mkdir(parents=True)

    entries: list[BackupFile] = []
    seen: set[str] = set()
    for path in files:
        rel = _relative(project_root, path)
        if rel in seen:
            continue
        seen.add(rel)
        source = project_root / rel
        if not source.is_file():
            entries.append(BackupFile(path=rel, existed=False))
            continue
        copy_name = f"{len(entries):03d}-{source.name}.bak"
        (target / copy_name).write_bytes(source.read_bytes())
        entries.append(BackupFile(path=rel, existed=True, backup=copy_name))

    manifest = BackupManifest(
        id=backup_id,
        created_at=stamp.isoformat().replace("+00:00", "Z"),
        previous_theme=previous_theme,
        new_theme=new_theme,
        reason=reason,
        files=entries,
    )
    (target / MANIFEST_FILE).write_text(manifest.to_json(), encoding="utf-8")
    logger.info(f"Created backup {backup_id} ({len(entries)} files)")
    return manifest


def load_backup_manifest(project_root: Path, backup_id: str) -> BackupManifest:
    """
    Load one manifest by id.

    Raises:
        BackupNotFoundError: If no readable manifest with that id exists.
    """
    if not _SAFE_ID.match(backup_id):
        raise BackupNotFoundError(f"Backup not found: {backup_id}")
    path = backup_dir(project_root, backup_id) / MANIFEST_FILE
    if not path.is_file():
        raise BackupNotFoundError(f"Backup not found: {backup_id}")
    try:
        return BackupManifest.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise BackupNotFoundError(f"Backup manifest is unreadable: {backup_id}") from e


def list_backups(project_root: Path) -> list[BackupManifest]:
    """All readable manifests, newest first. Unreadable ones are logged and skipped."""
    root = backups_dir(project_root)
    if not root.is_dir():
        return []
    manifests: list[BackupManifest] = []
    for entry in root.iterdir():
        if not entry.is_dir():
            continue
        try:
            manifests.append(load_backup_manifest(project_root, entry.name))
        except BackupNotFoundError as e:
            logger.warning(f"Skipping backup directory {entry.name}: {e}")
    manifests.sort(key=lambda m: m.id, reverse=True)
    return manifests


def restore_backup(project_root: Path, manifest: BackupManifest) -> list[str]:
    """
    Restore every file in ``manifest``.

    Captured files are written back byte-for-byte; files recorded as absent
    are deleted.

    Returns:
        Relative paths that were restored or removed.
    """
    source_dir = backup_dir(project_root, manifest.id)
    touched: list[str] = []
    for entry in manifest.files:
        target = project_root / entry.path
        if not entry.existed:
            if target.exists():
                target.unlink()
                touched.append(entry.path)
            continue
        if entry.backup is None:
            logger.warning(f"Backup {manifest.id} has no copy for {entry.path}")
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes((source_dir / entry.backup).read_bytes())
        touched.append(entry.path)
    logger.info(f"Restored {len(touched)} files from backup {manifest.id}")
    return touched


def prune_backups(project_root: Path, keep: int) -> list[str]:
    """
    Delete all but the ``keep`` newest backups.

    Returns:
        Ids of the removed backups.
    """
    if keep < 0:
        raise ValueError("keep must not be negative")
    removed: list[str] = []
    for manifest in list_backups(project_root)[keep:]:
        shutil.rmtree(backup_dir(project_root, manifest.id))
        removed.append(manifest.id)
    if removed:
        logger.info(f"Pruned {len(removed)} backups")
    return removed
