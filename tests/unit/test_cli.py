"""Tests for CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from themeforge.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


def run(cli_runner, *args: str):
    return cli_runner.invoke(app, list(args))


class TestGlobalOptions:
    def test_version(self, cli_runner):
        result = run(cli_runner, "--version")
        assert result.exit_code == 0
        assert "ThemeForge" in result.stdout

    def test_help(self, cli_runner):
        result = run(cli_runner, "--help")
        assert result.exit_code == 0
        assert "rebuild" in result.stdout


class TestThemesCommands:
    def test_list_json(self, cli_runner, project):
        result = run(cli_runner, "themes", "list", "--json", "--project", str(project))
        assert result.exit_code == 0
        rows = {row["id"]: row for row in json.loads(result.stdout)}
        assert rows["neural-teal"]["version"] == "2"
        assert rows["ocean-blue"]["version"] == "1"

    def test_list_by_category(self, cli_runner, project):
        result = run(
            cli_runner, "themes", "list", "--json", "-c", "tech-ai", "--project", str(project)
        )
        ids = [row["id"] for row in json.loads(result.stdout)]
        assert ids == ["neural-teal", "teal-glow"]

    def test_list_unknown_category(self, cli_runner):
        result = run(cli_runner, "themes", "list", "--category", "brutalist")
        assert result.exit_code == 1

    def test_list_table(self, cli_runner, project):
        result = run(cli_runner, "themes", "list", "--project", str(project))
        assert result.exit_code == 0
        assert "neural-teal" in result.stdout

    def test_show_json(self, cli_runner, project):
        result = run(
            cli_runner, "themes", "show", "teal-glow", "--json", "--project", str(project)
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["primary"] == "173 60% 37%"

    def test_show_dark_mode(self, cli_runner, project):
        result = run(
            cli_runner,
            "themes",
            "show",
            "teal-glow",
            "--mode",
            "dark",
            "--json",
            "--project",
            str(project),
        )
        assert json.loads(result.stdout)["primary"] == "173 60% 63%"

    def test_show_unknown_theme(self, cli_runner, project):
        result = run(cli_runner, "themes", "show", "nope", "--project", str(project))
        assert result.exit_code == 1
        assert "Theme not found" in result.output


class TestThemeDocumentCommands:
    def test_validate_bundled(self, cli_runner):
        result = run(cli_runner, "validate", "neural-teal")
        assert result.exit_code == 0
        assert "is valid" in result.stdout

    def test_validate_invalid_file(self, cli_runner, tmp_path, theme_factory):
        data = theme_factory.v1("Bad Id")
        del data["colors"]["light"]["primary"]
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(data))

        result = run(cli_runner, "validate", str(path), "--json")

        assert result.exit_code == 1
        report = json.loads(result.stdout)
        assert report["valid"] is False
        assert report["errors"]

    def test_migrate_to_stdout(self, cli_runner, project):
        result = run(cli_runner, "migrate", "ocean-blue", "--project", str(project))
        assert result.exit_code == 0
        migrated = json.loads(result.stdout)
        assert migrated["version"] == "2"
        assert "semanticTokens" in migrated

    def test_migrate_to_file(self, cli_runner, project, tmp_path):
        output = tmp_path / "out.json"
        result = run(
            cli_runner, "migrate", "ocean-blue", "-o", str(output), "--project", str(project)
        )
        assert result.exit_code == 0
        assert json.loads(output.read_text())["id"] == "ocean-blue"

    def test_export_single_format(self, cli_runner):
        result = run(cli_runner, "export", "neural-teal", "-f", "css")
        assert result.exit_code == 0
        assert "--primary:" in result.stdout

    def test_export_to_directory(self, cli_runner, tmp_path):
        result = run(
            cli_runner, "export", "neural-teal", "-f", "css", "-f", "scss", "-o", str(tmp_path)
        )
        assert result.exit_code == 0
        assert (tmp_path / "neural-teal.css").exists()
        assert (tmp_path / "neural-teal.scss").exists()

    def test_export_unknown_format(self, cli_runner):
        result = run(cli_runner, "export", "neural-teal", "-f", "xml")
        assert result.exit_code == 1
        assert "xml" in result.output


class TestProjectCommands:
    def test_scan_json(self, cli_runner, project):
        result = run(cli_runner, "scan", "--json", "--project", str(project))
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["totalReferences"] == 4
        assert report["scannedFiles"] == 2

    def test_rebuild_dry_run(self, cli_runner, project):
        result = run(
            cli_runner, "rebuild", "ocean-blue", "--dry-run", "--json", "--project", str(project)
        )
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["dryRun"] is True
        assert report["colorsFixed"] == 3
        assert not (project / "tailwind.config.ts").exists()

    def test_rebuild_failure(self, cli_runner, project):
        result = run(cli_runner, "rebuild", "nope", "--json", "--project", str(project))
        assert result.exit_code == 1
        assert json.loads(result.stdout)["code"] == "theme-not-found"

    def test_rebuild_not_initialized(self, cli_runner, tmp_path):
        result = run(cli_runner, "rebuild", "ocean-blue", "--project", str(tmp_path))
        assert result.exit_code == 1
        assert "Not a ThemeForge project" in result.output

    def test_rebuild_and_rollback(self, cli_runner, project):
        button = project / "src" / "components" / "Button.tsx"
        original = button.read_bytes()

        result = run(cli_runner, "rebuild", "ocean-blue", "--project", str(project))
        assert result.exit_code == 0
        assert button.read_bytes() != original

        result = run(cli_runner, "rollback", "--project", str(project))
        assert result.exit_code == 0
        assert "Restored backup" in result.stdout
        assert button.read_bytes() == original

    def test_rollback_without_backups(self, cli_runner, project):
        result = run(cli_runner, "rollback", "--json", "--project", str(project))
        assert result.exit_code == 1
        assert json.loads(result.stdout)["code"] == "no-backups"

    def test_backups_list_and_prune(self, cli_runner, project):
        run(cli_runner, "rebuild", "ocean-blue", "--project", str(project))
        run(cli_runner, "rebuild", "teal-glow", "--project", str(project))

        result = run(cli_runner, "backups", "list", "--json", "--project", str(project))
        rows = json.loads(result.stdout)
        assert [row["newTheme"] for row in rows] == ["teal-glow", "ocean-blue"]

        result = run(cli_runner, "backups", "prune", "--keep", "1", "--project", str(project))
        assert result.exit_code == 0
        assert "Removed 1 backups" in result.stdout

        result = run(cli_runner, "backups", "list", "--json", "--project", str(project))
        assert len(json.loads(result.stdout)) == 1
