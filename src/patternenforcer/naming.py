"""
patternenforcer.naming - Versioned File Name Check
==================================================

Flags files whose names carry a version or status marker instead of
replacing the original, e.g. ``button_improved.tsx``, ``api_v2.py`` or
``utils_backup.js``. Edits belong in the original file; history belongs
in git.

Usage
-----
>>> from patternenforcer.naming import find_naming_violation, suggest_better_name
>>> find_naming_violation("src/button_improved.tsx")
'improved'
>>> suggest_better_name("src/button_improved.tsx")
'src/button.tsx'
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from patternenforcer.findings import (
    CheckResult,
    Severity,
    Violation,
    collect_files,
    relative_posix,
)
from patternenforcer.models import CheckName


logger = logging.getLogger(__name__)

VERSION_MARKERS: tuple[str, ...] = (
    "improved",
    "enhanced",
    "updated",
    "new",
    "refactored",
    "final",
    "copy",
    "backup",
    "old",
    "temp",
    "tmp",
    "fixed",
    "complete",
    "optimized",
    "better",
)

_MARKER_ALTERNATION = "|".join([r"test_v\d+", r"v\d+", *VERSION_MARKERS])

# Marker before any extension chain: name_improved.ts, api_v2.d.ts, Button_new.test.tsx
VERSIONED_NAME_RE = re.compile(rf"_({_MARKER_ALTERNATION})(\.[^/]+)$", re.IGNORECASE)

_COPY_COUNTER_RE = re.compile(r"\s*\(\d+\)$")

NAMING_SKIP_DIRS: frozenset[str] = frozenset({
    "node_modules",
    "dist",
    "build",
    ".git",
    "coverage",
    ".next",
    "out",
})


def find_naming_violation(path: str | Path) -> str | None:
    """
    Return the version marker in a file name, or None if the name is clean.

    Only the final path component is examined, so directories such as
    ``old_reports/`` do not trigger the check.
    """
    match = VERSIONED_NAME_RE.search(PurePosixPath(Path(path).as_posix()).name)
    if match is None:
        return None
    return match.group(1)


def suggest_better_name(path: str | Path) -> str:
    """
    Suggest the name a versioned file should have had.

    Strips the marker suffix and any trailing ``(1)`` style copy counter.
    The directory and the full extension chain (``.test.tsx``, ``.d.ts``)
    are kept. When nothing useful remains, ``renamed-file`` is used as the
    stem.

    Examples
    --------
    >>> suggest_better_name("lib/_v2.py")
    'lib/renamed-file.py'
    >>> suggest_better_name("notes (2)_copy.md")
    'notes.md'
    """
    posix = PurePosixPath(Path(path).as_posix())
    match = VERSIONED_NAME_RE.search(posix.name)
    if match is not None:
        stem, suffix = posix.name[: match.start()], match.group(2)
    else:
        suffix = posix.suffix
        stem = posix.name[: -len(suffix)] if suffix else posix.name

    suggested = _COPY_COUNTER_RE.sub("", stem)
    if not suggested or set(suggested) == {"_"}:
        suggested = "renamed-file"

    return str(posix.with_name(suggested + suffix))


def check_file_naming(
    root: Path,
    files: Iterable[str | Path] | None = None,
    ignore_patterns: Iterable[str] = (),
) -> CheckResult:
    """
    Check every file under ``root`` (or only ``files``) for version markers.

    Returns
    -------
    CheckResult
        One error per offending file, each carrying the suggested name.
    """
    result = CheckResult(check=CheckName.FILE_NAMING.value)

    for path in collect_files(root, files, skip_dirs=NAMING_SKIP_DIRS, ignore_patterns=ignore_patterns):
        result.files_checked += 1
        rel_path = relative_posix(path, root)
        marker = find_naming_violation(rel_path)
        if marker is None:
            continue

        suggestion = suggest_better_name(rel_path)
        logger.debug("Versioned file name %s (marker %s)", rel_path, marker)
        result.violations.append(Violation(
            check=result.check,
            file=rel_path,
            rule="versioned-name",
            message=f"File name carries a '_{marker}' version marker",
            severity=Severity.ERROR,
            suggestion=f"Edit the original file instead, e.g. rename to {suggestion}",
        ))

    return result
