"""
Project layout and configuration.

A project is initialized when it contains a ``.themeforge/`` directory.
Generated theme artifacts live in ``.themeforge/design/``, backups in
``.themeforge/design/backups/``, project-local themes in
``.themeforge/themes/``. Optional settings come from
``.themeforge/config.toml``.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError
from .scanner import EXCLUDED_DIRECTORIES, SOURCE_EXTENSIONS, ScanOptions

logger = logging.getLogger(__name__)

PROJECT_DIR_NAME = ".themeforge"
DESIGN_DIR_NAME = "design"
BACKUPS_DIR_NAME = "backups"
THEMES_DIR_NAME = "themes"
CONFIG_FILE_NAME = "config.toml"

THEME_JSON = "theme.json"
THEME_CSS = "theme.css"

TAILWIND_CONFIG_NAMES: tuple[str, ...] = ("tailwind.config.ts", "tailwind.config.js")

# Candidate locations for the global stylesheet, in lookup order
GLOBALS_CSS_CANDIDATES: tuple[str, ...] = (
    "app/globals.css",
    "src/app/globals.css",
    "styles/globals.css",
    "src/styles/globals.css",
)


def project_dir(project_root: Path) -> Path:
    return project_root / PROJECT_DIR_NAME


def design_dir(project_root: Path) -> Path:
    return project_dir(project_root) / DESIGN_DIR_NAME


def backups_dir(project_root: Path) -> Path:
    return design_dir(project_root) / BACKUPS_DIR_NAME


def project_themes_dir(project_root: Path) -> Path:
    return project_dir(project_root) / THEMES_DIR_NAME


def is_initialized(project_root: Path) -> bool:
    return project_dir(project_root).is_dir()


def find_tailwind_config(project_root: Path) -> Path | None:
    """Existing ``tailwind.config.ts`` or ``.js`` (ts preferred)."""
    for name in TAILWIND_CONFIG_NAMES:
        candidate = project_root / name
        if candidate.exists():
            return candidate
    return None


def find_globals_css(project_root: Path, configured: str | None = None) -> Path | None:
    """First existing global stylesheet, honoring a configured path."""
    candidates = (configured,) if configured else GLOBALS_CSS_CANDIDATES
    for rel in candidates:
        candidate = project_root / rel
        if candidate.exists():
            return candidate
    return None


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class ScanConfig:
    """Scanner settings.

    Example:

        [scan]
        full_mode = true
        directories = ["src", "app"]
        extensions = [".tsx", ".ts"]
    """

    full_mode: bool = False
    directories: list[str] | None = None
    extensions: list[str] = field(default_factory=lambda: list(SOURCE_EXTENSIONS))
    exclude: list[str] = field(default_factory=lambda: list(EXCLUDED_DIRECTORIES))

    def to_options(self, full_mode: bool | None = None) -> ScanOptions:
        return ScanOptions(
            full_mode=self.full_mode if full_mode is None else full_mode,
            directories=self.directories,
            extensions=tuple(self.extensions),
            exclude_dirs=tuple(self.exclude),
        )


@dataclass
class RebuildConfig:
    """Rebuild settings.

    Example:

        [rebuild]
        fix_colors = true
        tailwind_format = "ts"   # "ts" | "js"; detected when omitted
        globals_css = "src/app/globals.css"
        keep_backups = 10
    """

    fix_colors: bool = True
    tailwind_format: str | None = None
    globals_css: str | None = None
    keep_backups: int | None = None


@dataclass
class ThemesConfig:
    """Extra theme search paths, relative to the project root."""

    paths: list[str] = field(default_factory=list)
    default: str | None = None


@dataclass
class ProjectConfig:
    """Settings loaded from ``.themeforge/config.toml``."""

    project_root: Path
    scan: ScanConfig = field(default_factory=ScanConfig)
    rebuild: RebuildConfig = field(default_factory=RebuildConfig)
    themes: ThemesConfig = field(default_factory=ThemesConfig)

    @property
    def theme_paths(self) -> list[Path]:
        return [self.project_root / p for p in self.themes.paths]


def _string_list(value: object, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return list(value)


def load_config(project_root: Path) -> ProjectConfig:
    """
    Load project settings; missing file or sections fall back to defaults.

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type.
    """
    path = project_dir(project_root) / CONFIG_FILE_NAME
    if not path.exists():
        return ProjectConfig(project_root=project_root)

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file: {e}", {"path": str(path)}) from e

    scan_data = data.get("scan", {})
    rebuild_data = data.get("rebuild", {})
    themes_data = data.get("themes", {})

    directories = scan_data.get("directories")
    scan_config = ScanConfig(
        full_mode=bool(scan_data.get("full_mode", False)),
        directories=_string_list(directories, "scan.directories") if directories else None,
        extensions=_string_list(
            scan_data.get("extensions", list(SOURCE_EXTENSIONS)), "scan.extensions"
        ),
        exclude=_string_list(scan_data.get("exclude", list(EXCLUDED_DIRECTORIES)), "scan.exclude"),
    )

    tailwind_format = rebuild_data.get("tailwind_format")
    if tailwind_format not in (None, "ts", "js"):
        raise ConfigError(f"rebuild.tailwind_format must be 'ts' or 'js', got {tailwind_format!r}")
    keep_backups = rebuild_data.get("keep_backups")
    if keep_backups is not None and (not isinstance(keep_backups, int) or keep_backups < 1):
        raise ConfigError("rebuild.keep_backups must be a positive integer")

    rebuild_config = RebuildConfig(
        fix_colors=bool(rebuild_data.get("fix_colors", True)),
        tailwind_format=tailwind_format,
        globals_css=rebuild_data.get("globals_css"),
        keep_backups=keep_backups,
    )

    themes_config = ThemesConfig(
        paths=_string_list(themes_data.get("paths", []), "themes.paths"),
        default=themes_data.get("default"),
    )

    logger.debug(f"Loaded config from {path}")
    return ProjectConfig(
        project_root=project_root,
        scan=scan_config,
        rebuild=rebuild_config,
        themes=themes_config,
    )
