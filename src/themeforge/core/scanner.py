"""
Project color scanner.

Walks a project's source directories and reports hard-coded color usages:
Tailwind palette utilities (``bg-blue-500``), hex literals and ``rgb()`` /
``hsl()`` literals in class or style context. Each finding carries the
suggestion from :mod:`themeforge.core.compliance`, or ``None`` when the
usage needs manual review.

In test files, literals inside assertion call arguments are left alone so
that fixtures asserting on literal classes keep working. Literals inside
rendered markup (``render(...)``, ``mount(...)``, ``shallow(...)``) are still
reported even when the render call is itself wrapped in an assertion.
"""

from __future__ import annotations

import bisect
import logging
import os
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from .compliance import iter_utilities, suggest

logger = logging.getLogger(__name__)

STANDARD_DIRECTORIES: tuple[str, ...] = ("app", "components", "src", "pages")

FULL_DIRECTORIES: tuple[str, ...] = (
    *STANDARD_DIRECTORIES,
    "tests",
    "test",
    "__tests__",
    "lib",
    "utils",
    "hooks",
    "styles",
    "features",
    "modules",
    "layouts",
    "views",
    "screens",
)

SOURCE_EXTENSIONS: tuple[str, ...] = (".tsx", ".jsx", ".ts", ".js")

EXCLUDED_DIRECTORIES: tuple[str, ...] = (
    "node_modules",
    ".git",
    ".themeforge",
    "dist",
    "build",
    ".next",
    "out",
)

# Directory names, and dot-separated filename parts (Button.test.tsx), marking test files
TEST_DIRECTORIES: frozenset[str] = frozenset({"test", "tests", "__tests__", "spec", "specs"})
TEST_NAME_PARTS: frozenset[str] = frozenset({"test", "spec"})

ASSERTION_CALLEES: frozenset[str] = frozenset(
    {
        "expect",
        "toBe",
        "toEqual",
        "toStrictEqual",
        "toContain",
        "toMatch",
        "toHaveClass",
        "toHaveStyle",
    }
)
ASSERTION_PREFIX = "assert"
MARKUP_CALLEES: frozenset[str] = frozenset({"render", "mount", "shallow"})

HEX_PATTERN = re.compile(r"(?<![&\w])#(?:[0-9A-Fa-f]{3}){1,2}\b")
COLOR_FUNCTION_PATTERN = re.compile(r"\b(?:rgb|hsl)a?\((?!\s*var\()[^)]+\)")

# Literal colors are only reported when the line shows class or style context
LITERAL_CONTEXT_MARKERS: tuple[str, ...] = ("className", "style", "bg-[", "text-[")

_CALLEE = re.compile(r"([A-Za-z_$][\w$]*)\s*\(")


class FindingKind(StrEnum):
    UTILITY = "utility"
    HEX_COLOR = "hex-color"
    COLOR_FUNCTION = "color-function"


@dataclass
class ScanOptions:
    """What to scan.

    ``directories``, ``extensions`` and ``exclude_dirs`` default to the
    standard or full sets depending on ``full_mode``.
    """

    full_mode: bool = False
    directories: Sequence[str] | None = None
    extensions: Sequence[str] = SOURCE_EXTENSIONS
    exclude_dirs: Sequence[str] = EXCLUDED_DIRECTORIES

    @property
    def effective_directories(self) -> tuple[str, ...]:
        if self.directories is not None:
            return tuple(self.directories)
        return FULL_DIRECTORIES if self.full_mode else STANDARD_DIRECTORIES


@dataclass(frozen=True)
class ScanFinding:
    """One hard-coded color usage.

    ``line`` is one-based, ``column`` is the zero-based offset within the line.
    """

    file: str
    line: int
    column: int
    match: str
    suggestion: str | None
    kind: FindingKind = FindingKind.UTILITY
    source: str | None = None

    @property
    def fixable(self) -> bool:
        return self.suggestion is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "column": self.column,
            "match": self.match,
            "suggestion": self.suggestion,
            "kind": self.kind.value,
            "fixable": self.fixable,
        }


@dataclass
class FileScan:
    path: str
    matches: list[ScanFinding] = field(default_factory=list)


@dataclass
class ScanReport:
    """Result of :func:`scan_project`."""

    full_mode: bool = False
    scanned_files: int = 0
    files: list[FileScan] = field(default_factory=list)
    ignored: int = 0
    skipped: list[str] = field(default_factory=list)

    @property
    def non_compliant(self) -> list[ScanFinding]:
        return [finding for scan in self.files for finding in scan.matches]

    @property
    def total_references(self) -> int:
        """Color literals seen, including those ignored in test assertions."""
        return len(self.non_compliant) + self.ignored

    @property
    def compliant(self) -> int:
        return self.ignored

    @property
    def fixable(self) -> list[ScanFinding]:
        return [f for f in self.non_compliant if f.fixable]

    @property
    def unfixable(self) -> list[ScanFinding]:
        return [f for f in self.non_compliant if not f.fixable]

    def to_dict(self) -> dict[str, Any]:
        return {
            "scannedFiles": self.scanned_files,
            "files": [
                {"path": scan.path, "matches": [m.to_dict() for m in scan.matches]}
                for scan in self.files
            ],
            "nonCompliant": [
                {"file": f.file, "line": f.line, "match": f.match, "suggestion": f.suggestion}
                for f in self.non_compliant
            ],
            "totalReferences": self.total_references,
            "compliant": self.compliant,
            "fullMode": self.full_mode,
        }


# =============================================================================
# File Discovery
# =============================================================================


def iter_source_files(project_root: Path, options: ScanOptions) -> list[Path]:
    """Source files under the scanned directories, sorted and de-duplicated."""
    excluded = set(options.exclude_dirs)
    extensions = tuple(options.extensions)
    files: set[Path] = set()
    for rel in options.effective_directories:
        base = project_root / rel
        if not base.is_dir():
            continue
        for dirpath, dirnames, filenames in os.walk(base):
            dirnames[:] = sorted(d for d in dirnames if d not in excluded)
            for name in filenames:
                if name.endswith(extensions):
                    files.add(Path(dirpath) / name)
    return sorted(files)


def is_test_file(path: str) -> bool:
    *directories, name = path.replace("\\", "/").split("/")
    if any(part in TEST_DIRECTORIES for part in directories):
        return True
    return any(part in TEST_NAME_PARTS for part in name.split(".")[1:-1])


# =============================================================================
# Call Spans
# =============================================================================


def _skip_string(text: str, start: int) -> int:
    """Index just past the string literal opening at ``start``."""
    quote = text[start]
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            return i
        i += 1
    return len(text)


def _skip_comment(text: str, start: int) -> int:
    if text.startswith("//", start):
        end = text.find("\n", start)
        return len(text) if end == -1 else end
    end = text.find("*/", start + 2)
    return len(text) if end == -1 else end + 2


def find_closing_paren(text: str, open_index: int) -> int | None:
    """Index of the ``)`` matching the ``(`` at ``open_index``.

    Parentheses inside string literals and comments are ignored. Returns
    ``None`` when the call is unbalanced.
    """
    depth = 0
    i = open_index
    while i < len(text):
        ch = text[i]
        if ch in "'\"`":
            i = _skip_string(text, i)
            continue
        if ch == "/" and text.startswith(("//", "/*"), i):
            i = _skip_comment(text, i)
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _is_assertion(name: str) -> bool:
    return name in ASSERTION_CALLEES or name.startswith(ASSERTION_PREFIX)


def call_spans(text: str, predicate: Callable[[str], bool]) -> list[tuple[int, int]]:
    """``(start, end)`` offsets of the argument lists of matching calls."""
    spans: list[tuple[int, int]] = []
    for match in _CALLEE.finditer(text):
        if not predicate(match.group(1)):
            continue
        open_index = match.end() - 1
        close = find_closing_paren(text, open_index)
        if close is None:
            # Unbalanced: fall back to the rest of the line
            line_end = text.find("\n", open_index)
            close = len(text) if line_end == -1 else line_end
        spans.append((open_index, close))
    return spans


def _inside(offset: int, spans: Iterable[tuple[int, int]]) -> bool:
    return any(start < offset < end for start, end in spans)


class _AssertionFilter:
    """Decides which offsets of a test file are assertion-only."""

    def __init__(self, text: str):
        self.assertions = call_spans(text, _is_assertion)
        self.markup = call_spans(text, MARKUP_CALLEES.__contains__) if self.assertions else []

    def ignores(self, offset: int) -> bool:
        return _inside(offset, self.assertions) and not _inside(offset, self.markup)


# =============================================================================
# Scanning
# =============================================================================


class _LineIndex:
    def __init__(self, text: str):
        self.starts = [0, *(m.end() for m in re.finditer("\n", text))]

    def position(self, offset: int) -> tuple[int, int]:
        """One-based line, zero-based column."""
        line = bisect.bisect_right(self.starts, offset) - 1
        return line + 1, offset - self.starts[line]

    def line_prefix(self, text: str, offset: int) -> str:
        line = bisect.bisect_right(self.starts, offset) - 1
        return text[self.starts[line] : offset]


def _has_literal_context(prefix: str) -> bool:
    return any(marker in prefix for marker in LITERAL_CONTEXT_MARKERS)


def scan_text(
    text: str, rel_path: str, full_mode: bool = False
) -> tuple[list[ScanFinding], int]:
    """Scan one file's content.

    Returns:
        ``(findings, ignored)`` where ``ignored`` counts literals skipped
        inside test assertions.
    """
    index = _LineIndex(text)
    assertion_filter = _AssertionFilter(text) if is_test_file(rel_path) else None
    found: list[tuple[int, ScanFinding]] = []
    ignored = 0

    def accept(offset: int) -> bool:
        nonlocal ignored
        if assertion_filter is not None and assertion_filter.ignores(offset):
            ignored += 1
            return False
        return True

    for match, utility in iter_utilities(text):
        if not accept(match.start()):
            continue
        suggestion = suggest(utility, full_mode)
        line, column = index.position(match.start())
        found.append(
            (
                match.start(),
                ScanFinding(
                    file=rel_path,
                    line=line,
                    column=column,
                    match=match.group(0),
                    suggestion=suggestion.value if suggestion else None,
                    kind=FindingKind.UTILITY,
                    source=suggestion.source.value if suggestion else None,
                ),
            )
        )

    for pattern, kind in (
        (HEX_PATTERN, FindingKind.HEX_COLOR),
        (COLOR_FUNCTION_PATTERN, FindingKind.COLOR_FUNCTION),
    ):
        for match in pattern.finditer(text):
            if not _has_literal_context(index.line_prefix(text, match.start())):
                continue
            if not accept(match.start()):
                continue
            line, column = index.position(match.start())
            found.append(
                (
                    match.start(),
                    ScanFinding(rel_path, line, column, match.group(0), None, kind),
                )
            )

    found.sort(key=lambda item: item[0])
    return [finding for _, finding in found], ignored


def scan_project(project_root: Path, options: ScanOptions | None = None) -> ScanReport:
    """
    Scan a project for hard-coded colors.

    Args:
        project_root: Project directory.
        options: Scan options; standard mode with default directories if omitted.

    Returns:
        ScanReport. Files that cannot be read are logged and listed in
        ``skipped``; they never stop the scan.
    """
    options = options or ScanOptions()
    report = ScanReport(full_mode=options.full_mode)

    for path in iter_source_files(project_root, options):
        rel_path = path.relative_to(project_root).as_posix()
        try:
            text = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable file {rel_path}: {e}")
            report.skipped.append(rel_path)
            continue

        report.scanned_files += 1
        findings, ignored = scan_text(text, rel_path, options.full_mode)
        report.ignored += ignored
        if findings:
            report.files.append(FileScan(rel_path, findings))

    logger.info(
        f"Scanned {report.scanned_files} files: "
        f"{len(report.non_compliant)} hard-coded colors "
        f"({len(report.fixable)} fixable)"
    )
    return report


# =============================================================================
# Rewriting
# =============================================================================


@dataclass
class FileFix:
    """Replacements applied (or planned, in dry-run) for one file."""

    path: str
    replacements: int = 0
    stale: int = 0


def rewrite_text(text: str, findings: Iterable[ScanFinding]) -> tuple[str, int, int]:
    """Apply fixable findings to ``text``.

    Findings are applied last-to-first so earlier columns stay valid. A
    finding whose text no longer matches at its position is counted as
    stale and left alone.

    Returns:
        ``(new_text, replaced, stale)``.
    """
    lines = text.split("\n")
    replaced = 0
    stale = 0
    ordered = sorted(
        (f for f in findings if f.fixable), key=lambda f: (f.line, f.column), reverse=True
    )
    for finding in ordered:
        row = finding.line - 1
        if row >= len(lines):
            stale += 1
            continue
        current = lines[row]
        end = finding.column + len(finding.match)
        if current[finding.column : end] != finding.match:
            stale += 1
            continue
        lines[row] = current[: finding.column] + str(finding.suggestion) + current[end:]
        replaced += 1
    return "\n".join(lines), replaced, stale


def apply_fixes(
    project_root: Path, findings: Iterable[ScanFinding], dry_run: bool = False
) -> list[FileFix]:
    """
    Rewrite fixable findings in place.

    Args:
        project_root: Project directory the finding paths are relative to.
        findings: Findings from :func:`scan_project`.
        dry_run: Count replacements without writing.

    Returns:
        One FileFix per file that had fixable findings.
    """
    by_file: dict[str, list[ScanFinding]] = {}
    for finding in findings:
        if finding.fixable:
            by_file.setdefault(finding.file, []).append(finding)

    fixes: list[FileFix] = []
    for rel_path in sorted(by_file):
        path = project_root / rel_path
        try:
            text = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot rewrite {rel_path}: {e}")
            fixes.append(FileFix(rel_path, 0, len(by_file[rel_path])))
            continue

        new_text, replaced, stale = rewrite_text(text, by_file[rel_path])
        if replaced and not dry_run:
            path.write_bytes(new_text.encode("utf-8"))
            logger.debug(f"Rewrote {replaced} colors in {rel_path}")
        fixes.append(FileFix(rel_path, replaced, stale))
    return fixes
