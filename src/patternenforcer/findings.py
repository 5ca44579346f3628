"""
patternenforcer.findings - Shared Result Types and File Discovery
=================================================================

Every check reports its outcome as a :class:`CheckResult` holding
:class:`Violation` records, so the enforcer, the hooks and the CLI can
treat all checks alike.

The module also owns file discovery. Checks either walk the whole tree
with :func:`iter_files` or receive an explicit list of paths (the staged
files of a commit) which :func:`collect_files` filters the same way.
"""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


DEFAULT_SKIP_DIRS: frozenset[str] = frozenset({
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    "coverage",
    ".turbo",
    "out",
    "__pycache__",
    ".venv",
    "venv",
})

CONTEXT_LIMIT = 80


class Severity(str, Enum):
    """
    Severity levels for violations.

    Only errors and warnings make a check fail; info findings are advice.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Violation:
    """
    A single rule violation.

    Attributes
    ----------
    check : str
        Name of the check that found it (a ``CheckName`` value).

    file : str
        POSIX path relative to the checked root.

    rule : str
        Short identifier of the rule, e.g. ``"banned-phrase"``.

    message : str
        Human-readable description.

    severity : Severity
        How serious the violation is.

    line : int | None
        1-based line number, when the rule is line-oriented.

    suggestion : str | None
        What to do instead.

    context : str | None
        The offending line, trimmed and truncated.
    """

    check: str
    file: str
    rule: str
    message: str
    severity: Severity = Severity.ERROR
    line: int | None = None
    suggestion: str | None = None
    context: str | None = None

    def __post_init__(self) -> None:
        if self.context is not None:
            self.context = truncate_context(self.context)

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}" if self.line else self.file

    def to_dict(self) -> dict[str, Any]:
        return {
            "check": self.check,
            "file": self.file,
            "line": self.line,
            "rule": self.rule,
            "message": self.message,
            "severity": self.severity.value,
            "suggestion": self.suggestion,
            "context": self.context,
        }


@dataclass
class CheckResult:
    """
    Outcome of running one check.

    Attributes
    ----------
    check : str
        Name of the check.

    violations : list[Violation]
        Everything the check found.

    files_checked : int
        Number of files the check looked at.
    """

    check: str
    violations: list[Violation] = field(default_factory=list)
    files_checked: int = 0

    @property
    def error_count(self) -> int:
        """Number of error severity violations."""
        return sum(1 for v in self.violations if v.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        """Number of warning severity violations."""
        return sum(1 for v in self.violations if v.severity == Severity.WARNING)

    @property
    def info_count(self) -> int:
        """Number of info severity violations."""
        return sum(1 for v in self.violations if v.severity == Severity.INFO)

    @property
    def passed(self) -> bool:
        """True when there are no errors or warnings."""
        return self.error_count == 0 and self.warning_count == 0

    @property
    def files_with_violations(self) -> int:
        return len({v.file for v in self.violations})

    def to_dict(self) -> dict[str, Any]:
        return {
            "check": self.check,
            "passed": self.passed,
            "filesChecked": self.files_checked,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "info": self.info_count,
            "violations": [v.to_dict() for v in self.violations],
        }


def truncate_context(text: str, limit: int = CONTEXT_LIMIT) -> str:
    """Trim a source line for display, adding ``...`` past ``limit`` characters."""
    text = text.strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text


# =============================================================================
# File Discovery
# =============================================================================

def relative_posix(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` using forward slashes."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def matches_any(rel_path: str, patterns: Iterable[str]) -> bool:
    """
    Test a relative POSIX path against glob patterns.

    ``*`` matches across directories. A leading ``**/`` also matches at
    the root, and a trailing ``/**`` also matches the directory itself.

    Examples
    --------
    >>> matches_any("README.md", ["**/README.md"])
    True
    >>> matches_any("docs/testing/plan.md", ["docs/testing/**"])
    True
    """
    for pattern in patterns:
        if fnmatch.fnmatchcase(rel_path, pattern):
            return True
        if pattern.startswith("**/") and fnmatch.fnmatchcase(rel_path, pattern[3:]):
            return True
        if pattern.endswith("/**") and rel_path == pattern[:-3]:
            return True
    return False


def _is_skipped_dir(name: str, skip_dirs: Iterable[str]) -> bool:
    return name in skip_dirs or (name.startswith(".") and name not in {".", ".."})


def iter_files(
    root: Path,
    suffixes: Iterable[str] | None = None,
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
) -> Iterator[Path]:
    """
    Walk ``root`` and yield files in a stable, sorted order.

    Parameters
    ----------
    root : Path
        Directory to walk.

    suffixes : Iterable[str] | None
        Only yield files with one of these suffixes (``".md"``). ``None``
        yields every file.

    skip_dirs : Iterable[str]
        Directory names never descended into. Dot-directories are always
        skipped.
    """
    wanted = {s.lower() for s in suffixes} if suffixes is not None else None
    skip = set(skip_dirs)

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not _is_skipped_dir(d, skip))
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if wanted is None or path.suffix.lower() in wanted:
                yield path


def collect_files(
    root: Path,
    files: Iterable[str | Path] | None = None,
    suffixes: Iterable[str] | None = None,
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
    ignore_patterns: Iterable[str] = (),
) -> list[Path]:
    """
    Resolve the files a check should look at.

    With ``files`` given, each entry (relative to ``root`` or absolute) is
    kept when it exists, has a wanted suffix and does not sit inside a
    skipped directory. Without it the whole tree is walked.
    """
    suffix_list = list(suffixes) if suffixes is not None else None
    patterns = list(ignore_patterns)
    skip = set(skip_dirs)

    if files is None:
        candidates: Iterable[Path] = iter_files(root, suffix_list, skip)
    else:
        wanted = {s.lower() for s in suffix_list} if suffix_list is not None else None
        selected: list[Path] = []
        for entry in files:
            path = Path(entry)
            if not path.is_absolute():
                path = root / path
            if not path.is_file():
                continue
            if wanted is not None and path.suffix.lower() not in wanted:
                continue
            parts = Path(relative_posix(path, root)).parts[:-1]
            if any(_is_skipped_dir(part, skip) for part in parts):
                continue
            selected.append(path)
        candidates = selected

    return [
        path for path in candidates
        if not patterns or not matches_any(relative_posix(path, root), patterns)
    ]


def read_text(path: Path, newline: str | None = None) -> str | None:
    """
    Read a text file, returning None for unreadable or binary content.

    Pass ``newline=""`` to keep ``\\r\\n`` line endings intact.
    """
    try:
        with path.open(encoding="utf-8", newline=newline) as f:
            return f.read()
    except (OSError, UnicodeDecodeError):
        return None
