"""
Format generators for ThemeForge themes.

Each generator is a pure function ``(document, **options) -> str`` that
returns byte-identical output for identical input. ``GENERATORS`` is the
dispatch table used by the CLI and the rebuild engine.

Formats:
- css: CSS custom properties with light/dark blocks
- scss: Sass variables, maps and mixins
- tailwind: Tailwind CSS configuration
- figma: Figma Tokens / Tokens Studio JSON
- style-dictionary: Style Dictionary token JSON
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from themeforge.core.errors import UnknownFormatError
from themeforge.core.ir import ThemeDocument

from .css import generate_css, generate_css_for_mode
from .figma import generate_figma_tokens, generate_tokens_studio
from .scss import generate_scss, generate_scss_partial
from .style_dictionary import generate_style_dictionary, generate_style_dictionary_config
from .tailwind import generate_tailwind, generate_tailwind_minimal

logger = logging.getLogger(__name__)

FALLBACK_EXTENSION = ".txt"


@dataclass(frozen=True)
class GeneratorInfo:
    """Registry entry for one output format."""

    name: str
    description: str
    fn: Callable[..., str]
    extension: str
    mime_type: str
    defaults: Mapping[str, Any] = field(default_factory=dict)
    # Option whose value names the file extension of the generated flavour
    extension_option: str | None = None

    def resolve_options(self, options: Mapping[str, Any]) -> dict[str, Any]:
        return {**self.defaults, **options}

    def extension_for(self, options: Mapping[str, Any]) -> str:
        if self.extension_option is None:
            return self.extension
        value = self.resolve_options(options).get(self.extension_option)
        return f".{value}" if value else self.extension


@dataclass(frozen=True)
class GeneratedOutput:
    """Per-format result of :func:`generate_all_formats`."""

    format: str
    extension: str
    content: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


GENERATORS: dict[str, GeneratorInfo] = {
    "css": GeneratorInfo(
        "CSS", "CSS variables with @layer base", generate_css, ".css", "text/css"
    ),
    "scss": GeneratorInfo(
        "SCSS", "Sass variables and mixins", generate_scss, ".scss", "text/x-scss"
    ),
    "tailwind": GeneratorInfo(
        "Tailwind",
        "Tailwind CSS configuration",
        generate_tailwind,
        ".js",
        "application/javascript",
        defaults={"format": "js"},
        extension_option="format",
    ),
    "figma": GeneratorInfo(
        "Figma", "Figma design tokens", generate_figma_tokens, ".json", "application/json"
    ),
    "style-dictionary": GeneratorInfo(
        "Style Dictionary",
        "Style Dictionary design tokens",
        generate_style_dictionary,
        ".json",
        "application/json",
    ),
}


def available_formats() -> list[str]:
    return list(GENERATORS)


def get_generator_info(fmt: str) -> GeneratorInfo | None:
    return GENERATORS.get(fmt)


def get_format_extension(fmt: str) -> str:
    """File extension (with dot) for ``fmt``; ``.txt`` for unknown formats."""
    info = GENERATORS.get(fmt)
    return info.extension if info else FALLBACK_EXTENSION


def generate_theme(document: ThemeDocument, fmt: str, **options: Any) -> str:
    """Generate ``document`` in one format.

    Raises:
        UnknownFormatError: If ``fmt`` is not registered.
    """
    info = GENERATORS.get(fmt)
    if info is None:
        raise UnknownFormatError(fmt, available_formats())
    return info.fn(document, **info.resolve_options(options))


def generate_all_formats(
    document: ThemeDocument,
    options: Mapping[str, Mapping[str, Any]] | None = None,
    formats: Iterable[str] | None = None,
) -> dict[str, GeneratedOutput]:
    """Run every registered generator (or ``formats``) independently.

    Args:
        document: Theme document.
        options: Per-format keyword options, keyed by format name.
        formats: Subset of formats to run; defaults to all.

    Returns:
        Mapping of format name to GeneratedOutput. A failing generator is
        reported with ``error`` set and never stops the others.
    """
    options = options or {}
    results: dict[str, GeneratedOutput] = {}
    for fmt in formats if formats is not None else GENERATORS:
        fmt_options = dict(options.get(fmt, {}))
        info = GENERATORS.get(fmt)
        extension = info.extension_for(fmt_options) if info else FALLBACK_EXTENSION
        try:
            content = generate_theme(document, fmt, **fmt_options)
        except Exception as e:
            logger.warning(f"Generator {fmt} failed: {e}")
            results[fmt] = GeneratedOutput(fmt, extension, error=str(e))
        else:
            results[fmt] = GeneratedOutput(fmt, extension, content=content)
    return results


def export_theme(
    document: ThemeDocument,
    output_dir: Path,
    formats: Iterable[str] | None = None,
    options: Mapping[str, Mapping[str, Any]] | None = None,
) -> dict[str, Path | str]:
    """Write one file per format into ``output_dir``.

    Files are named ``<theme-id><ext>``; two JSON formats get a format
    suffix so they do not collide.

    Returns:
        Mapping of format name to written path, or to the error message
        when that format failed.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = document.id or "theme"
    written: dict[str, Path | str] = {}
    for fmt, output in generate_all_formats(document, options, formats).items():
        if not output.success or output.content is None:
            written[fmt] = output.error or "no output"
            continue
        suffix = "" if fmt in ("css", "scss", "tailwind") else f".{fmt}"
        path = output_dir / f"{stem}{suffix}{output.extension}"
        path.write_text(output.content, encoding="utf-8")
        logger.info(f"Wrote {fmt} output to {path}")
        written[fmt] = path
    return written


__all__ = [
    "GENERATORS",
    "GeneratedOutput",
    "GeneratorInfo",
    "available_formats",
    "export_theme",
    "generate_all_formats",
    "generate_css",
    "generate_css_for_mode",
    "generate_figma_tokens",
    "generate_scss",
    "generate_scss_partial",
    "generate_style_dictionary",
    "generate_style_dictionary_config",
    "generate_tailwind",
    "generate_tailwind_minimal",
    "generate_theme",
    "generate_tokens_studio",
    "get_format_extension",
    "get_generator_info",
]
