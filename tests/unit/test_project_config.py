"""Tests for project layout helpers and .themeforge/config.toml loading."""

from pathlib import Path

import pytest

from themeforge.core.errors import ConfigError
from themeforge.core.project import (
    find_globals_css,
    find_tailwind_config,
    is_initialized,
    load_config,
)
from themeforge.core.scanner import FULL_DIRECTORIES, SOURCE_EXTENSIONS, STANDARD_DIRECTORIES


def _write_config(root: Path, content: str) -> None:
    (root / ".themeforge").mkdir(exist_ok=True)
    (root / ".themeforge" / "config.toml").write_text(content)


class TestLayout:
    def test_is_initialized(self, tmp_path, project):
        assert is_initialized(project)
        assert not is_initialized(tmp_path)

    def test_tailwind_config_prefers_ts(self, tmp_path):
        assert find_tailwind_config(tmp_path) is None
        (tmp_path / "tailwind.config.js").write_text("")
        assert find_tailwind_config(tmp_path).name == "tailwind.config.js"
        (tmp_path / "tailwind.config.ts").write_text("")
        assert find_tailwind_config(tmp_path).name == "tailwind.config.ts"

    def test_globals_css_lookup(self, tmp_path, project):
        assert find_globals_css(project) == project / "app" / "globals.css"
        assert find_globals_css(tmp_path) is None

    def test_configured_globals_css(self, project):
        (project / "theme").mkdir()
        (project / "theme" / "main.css").write_text("")
        assert find_globals_css(project, "theme/main.css") == project / "theme" / "main.css"
        assert find_globals_css(project, "missing.css") is None


class TestLoadConfig:
    def test_defaults_without_file(self, project):
        config = load_config(project)
        assert config.scan.full_mode is False
        assert config.scan.directories is None
        assert config.scan.extensions == list(SOURCE_EXTENSIONS)
        assert config.rebuild.fix_colors is True
        assert config.rebuild.tailwind_format is None
        assert config.rebuild.keep_backups is None
        assert config.theme_paths == []

    def test_full_config(self, project):
        _write_config(
            project,
            """
[scan]
full_mode = true
directories = ["src"]
extensions = [".tsx"]

[rebuild]
fix_colors = false
tailwind_format = "js"
globals_css = "src/app/globals.css"
keep_backups = 3

[themes]
paths = ["design/themes"]
default = "ocean-blue"
""",
        )
        config = load_config(project)

        assert config.scan.full_mode is True
        assert config.scan.directories == ["src"]
        assert config.rebuild.fix_colors is False
        assert config.rebuild.tailwind_format == "js"
        assert config.rebuild.globals_css == "src/app/globals.css"
        assert config.rebuild.keep_backups == 3
        assert config.themes.default == "ocean-blue"
        assert config.theme_paths == [project / "design" / "themes"]

    def test_to_options(self, project):
        _write_config(project, "[scan]\nfull_mode = true\n")
        scan = load_config(project).scan

        assert scan.to_options().effective_directories == FULL_DIRECTORIES
        assert scan.to_options(full_mode=False).effective_directories == STANDARD_DIRECTORIES

    def test_invalid_toml(self, project):
        _write_config(project, "[scan\nfull_mode = ")
        with pytest.raises(ConfigError, match="Invalid config file"):
            load_config(project)

    @pytest.mark.parametrize(
        "content",
        [
            '[rebuild]\ntailwind_format = "mjs"\n',
            "[rebuild]\nkeep_backups = 0\n",
            '[scan]\ndirectories = "src"\n',
            "[themes]\npaths = [1, 2]\n",
        ],
    )
    def test_invalid_values(self, project, content):
        _write_config(project, content)
        with pytest.raises(ConfigError):
            load_config(project)
