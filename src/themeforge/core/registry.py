"""
Theme discovery and loading.

Themes are JSON or YAML documents laid out as ``<root>/<category>/<id>.json``
(or flat ``<root>/<id>.json``). The registry searches the bundled themes
first, then project and configured paths; a later root overrides an earlier
one for the same theme id.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import ThemeLoadError
from .ir import ThemeDocument
from .project import THEME_JSON, design_dir, load_config, project_themes_dir

logger = logging.getLogger(__name__)

THEME_FILE_SUFFIXES: tuple[str, ...] = (".json", ".yaml", ".yml")

BUNDLED_THEMES_DIR = Path(__file__).resolve().parent.parent / "themes"


def read_theme_data(path: Path) -> Any:
    """
    Parse a JSON or YAML theme file without validating it.

    Raises:
        ThemeLoadError: If the file cannot be read or parsed.
    """
    if path.suffix not in THEME_FILE_SUFFIXES:
        raise ThemeLoadError(f"Unsupported theme file type: {path.suffix}", {"path": str(path)})
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (OSError, UnicodeDecodeError) as e:
        raise ThemeLoadError(f"Cannot read theme file: {e}", {"path": str(path)}) from e
    except json.JSONDecodeError as e:
        raise ThemeLoadError(f"Invalid JSON: {e}", {"path": str(path)}) from e
    except yaml.YAMLError as e:
        raise ThemeLoadError(f"Invalid YAML: {e}", {"path": str(path)}) from e


def load_theme_file(path: Path) -> ThemeDocument:
    """
    Load a theme document from a JSON or YAML file.

    Raises:
        ThemeLoadError: If the file cannot be read, parsed, or does not
            describe a theme document.
    """
    data = read_theme_data(path)
    if not isinstance(data, dict):
        raise ThemeLoadError("Theme file must contain a mapping", {"path": str(path)})
    try:
        return ThemeDocument.model_validate(data)
    except ValidationError as e:
        raise ThemeLoadError(f"Invalid theme structure: {e}", {"path": str(path)}) from e


def _iter_theme_files(root: Path) -> list[Path]:
    files: list[Path] = []
    for suffix in THEME_FILE_SUFFIXES:
        files.extend(root.glob(f"*{suffix}"))
        files.extend(root.glob(f"*/*{suffix}"))
    return sorted(files)


class ThemeRegistry:
    """
    Index of available themes across several search paths.

    Themes are loaded lazily on first access. Files that fail to load are
    recorded in :attr:`load_errors` and skipped.
    """

    def __init__(self, search_paths: Iterable[Path] | None = None):
        self.search_paths = list(search_paths) if search_paths is not None else [BUNDLED_THEMES_DIR]
        self._themes: dict[str, ThemeDocument] | None = None
        self._sources: dict[str, Path] = {}
        self._errors: dict[Path, str] = {}

    def _load(self) -> dict[str, ThemeDocument]:
        if self._themes is not None:
            return self._themes
        themes: dict[str, ThemeDocument] = {}
        for root in self.search_paths:
            if not root.is_dir():
                logger.debug(f"Theme search path does not exist: {root}")
                continue
            for path in _iter_theme_files(root):
                try:
                    document = load_theme_file(path)
                except ThemeLoadError as e:
                    logger.warning(f"Skipping theme file {path}: {e}")
                    self._errors[path] = str(e)
                    continue
                theme_id = document.id or path.stem
                if theme_id in themes:
                    logger.debug(f"Theme {theme_id} from {path} overrides {self._sources[theme_id]}")
                themes[theme_id] = document
                self._sources[theme_id] = path
        self._themes = themes
        return themes

    def reload(self) -> None:
        self._themes = None
        self._sources.clear()
        self._errors.clear()

    def get_theme(self, theme_id: str) -> ThemeDocument | None:
        return self._load().get(theme_id)

    def theme_path(self, theme_id: str) -> Path | None:
        self._load()
        return self._sources.get(theme_id)

    def theme_ids(self) -> list[str]:
        return sorted(self._load())

    def list_themes(self, category: str | None = None) -> list[ThemeDocument]:
        """Themes sorted by id, optionally restricted to one category."""
        themes = self._load()
        return [
            themes[theme_id]
            for theme_id in sorted(themes)
            if category is None or themes[theme_id].category == category
        ]

    @property
    def load_errors(self) -> dict[Path, str]:
        self._load()
        return dict(self._errors)

    def __contains__(self, theme_id: object) -> bool:
        return theme_id in self._load()

    def __len__(self) -> int:
        return len(self._load())


def project_registry(project_root: Path) -> ThemeRegistry:
    """Registry for a project: bundled, then project themes, then configured paths."""
    config = load_config(project_root)
    paths = [BUNDLED_THEMES_DIR, project_themes_dir(project_root), *config.theme_paths]
    return ThemeRegistry(paths)


def get_project_theme(project_root: Path) -> ThemeDocument | None:
    """The theme currently applied to a project, or None if none was applied."""
    path = design_dir(project_root) / THEME_JSON
    if not path.exists():
        return None
    return load_theme_file(path)
