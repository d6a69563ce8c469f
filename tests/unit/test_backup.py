"""Tests for backup manifests: capture, listing, restore and pruning."""

import shutil
from datetime import UTC, datetime, timedelta

import pytest

from themeforge.core.backup import (
    MANIFEST_FILE,
    BackupManifest,
    BackupReason,
    backup_dir,
    create_backup,
    list_backups,
    load_backup_manifest,
    prune_backups,
    restore_backup,
)
from themeforge.core.errors import BackupNotFoundError

STAMP = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


class TestCreateBackup:
    def test_captures_existing_and_missing_files(self, project):
        globals_css = project / "app" / "globals.css"
        manifest = create_backup(
            project,
            [globals_css, project / "tailwind.config.ts"],
            previous_theme=None,
            new_theme="ocean-blue",
            now=STAMP,
        )

        assert manifest.id == "20240501T120000000000Z-ocean-blue"
        assert manifest.created_at == "2024-05-01T12:00:00Z"
        assert manifest.reason is BackupReason.REBUILD
        assert [(f.path, f.existed) for f in manifest.files] == [
            ("app/globals.css", True),
            ("tailwind.config.ts", False),
        ]
        copy = backup_dir(project, manifest.id) / manifest.files[0].backup
        assert copy.read_bytes() == globals_css.read_bytes()

    def test_manifest_json_uses_camel_case(self, project):
        manifest = create_backup(
            project, [], previous_theme="a", new_theme="b", now=STAMP
        )
        text = (backup_dir(project, manifest.id) / MANIFEST_FILE).read_text()
        assert '"previousTheme": "a"' in text
        assert '"newTheme": "b"' in text
        assert BackupManifest.model_validate_json(text) == manifest

    def test_duplicate_paths_are_captured_once(self, project):
        path = project / "app" / "globals.css"
        manifest = create_backup(
            project, [path, "app/globals.css"], previous_theme=None, new_theme="x", now=STAMP
        )
        assert manifest.file_paths == ["app/globals.css"]

    def test_id_collision_gets_suffix(self, project):
        first = create_backup(project, [], previous_theme=None, new_theme="x", now=STAMP)
        second = create_backup(project, [], previous_theme=None, new_theme="x", now=STAMP)
        assert second.id == f"{first.id}-2"

    def test_rollback_backup_id(self, project):
        manifest = create_backup(
            project,
            [],
            previous_theme="teal-glow",
            new_theme="ocean-blue",
            reason=BackupReason.ROLLBACK,
            now=STAMP,
        )
        assert manifest.id.endswith("-rollback-from-teal-glow")
        assert manifest.reason is BackupReason.ROLLBACK


class TestListAndLoad:
    def test_newest_first(self, project):
        for offset in (0, 2, 1):
            create_backup(
                project,
                [],
                previous_theme=None,
                new_theme=f"t{offset}",
                now=STAMP + timedelta(seconds=offset),
            )
        assert [m.new_theme for m in list_backups(project)] == ["t2", "t1", "t0"]

    def test_no_backups(self, project):
        assert list_backups(project) == []

    def test_unreadable_manifest_is_skipped(self, project):
        good = create_backup(project, [], previous_theme=None, new_theme="x", now=STAMP)
        broken = backup_dir(project, "20990101T000000000000Z-broken")
        broken.mkdir()
        (broken / MANIFEST_FILE).write_text("{")
        assert [m.id for m in list_backups(project)] == [good.id]

    def test_load_unknown_id(self, project):
        with pytest.raises(BackupNotFoundError):
            load_backup_manifest(project, "nope")

    def test_load_rejects_path_traversal(self, project):
        with pytest.raises(BackupNotFoundError):
            load_backup_manifest(project, "../../etc")


class TestRestoreAndPrune:
    def test_restore_round_trip(self, project):
        globals_css = project / "app" / "globals.css"
        original = globals_css.read_bytes()
        new_file = project / "tailwind.config.ts"
        manifest = create_backup(
            project, [globals_css, new_file], previous_theme=None, new_theme="x", now=STAMP
        )

        globals_css.write_text("changed")
        new_file.write_text("created")
        restored = restore_backup(project, manifest)

        assert restored == ["app/globals.css", "tailwind.config.ts"]
        assert globals_css.read_bytes() == original
        assert not new_file.exists()

    def test_restore_recreates_deleted_directories(self, project):
        button = project / "src" / "components" / "Button.tsx"
        original = button.read_bytes()
        manifest = create_backup(project, [button], previous_theme=None, new_theme="x", now=STAMP)
        shutil.rmtree(button.parent)
        restore_backup(project, manifest)
        assert button.read_bytes() == original

    def test_prune(self, project):
        for offset in range(4):
            create_backup(
                project,
                [],
                previous_theme=None,
                new_theme=f"t{offset}",
                now=STAMP + timedelta(seconds=offset),
            )
        removed = prune_backups(project, 2)
        assert len(removed) == 2
        assert [m.new_theme for m in list_backups(project)] == ["t3", "t2"]
        assert not backup_dir(project, removed[0]).exists()

    def test_prune_negative(self, project):
        with pytest.raises(ValueError):
            prune_backups(project, -1)
