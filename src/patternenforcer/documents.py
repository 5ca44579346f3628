"""
patternenforcer.documents - Banned Status Document Check
========================================================

Status and completion reports (``AUDIT_SUMMARY.md``, ``FIXED_BUGS.md``,
a README that opens with "# ✅ Implementation Complete") go stale the day
they are written. This check rejects them by file name and by the
headings in their first lines.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from patternenforcer.findings import (
    CheckResult,
    Severity,
    Violation,
    collect_files,
    read_text,
    relative_posix,
)
from patternenforcer.models import CheckName


logger = logging.getLogger(__name__)

BANNED_ENDINGS: tuple[str, ...] = (
    "SUMMARY.md",
    "REPORT.md",
    "COMPLETE.md",
    "COMPLETION.md",
    "FIXED.md",
    "DONE.md",
    "FINISHED.md",
    "STATUS.md",
    "FINAL.md",
)

# Matched against the file stem
BANNED_NAME_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^COMPLETE[-_]",
        r"^DONE[-_]",
        r"^FIXED[-_]",
        r"^FINISHED[-_]",
        r"^FINAL[-_]",
        r"[-_]COMPLETE$",
        r"[-_]SUMMARY$",
        r"[-_]REPORT$",
        r"[-_]STATUS$",
        r"[-_]FINAL$",
    )
)

BANNED_CONTENT_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^#\s*✅.*Complete",
        r"^#.*Implementation Complete",
        r"^#.*Audit Complete",
        r"^#.*Audit Summary$",
        r"^#.*Final Report",
        r"^#.*Project.*Summary$",
        r"^#.*Enhancement.*Summary$",
        r"^##\s*✅\s*Completed Tasks",
        r"^##\s*What Was Accomplished",
        r"^##\s*Audit Completed",
    )
)

CONTENT_SCAN_LINES = 10

DOCUMENT_SKIP_DIRS: frozenset[str] = frozenset({
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    "coverage",
    ".turbo",
})


def is_banned_filename(name: str) -> tuple[str, str] | None:
    """
    Check a markdown file name against the banned endings and patterns.

    Parameters
    ----------
    name : str
        File name (a path is reduced to its last component).

    Returns
    -------
    tuple[str, str] | None
        ``(reason, suggestion)`` when banned, otherwise None.
    """
    basename = Path(name).name
    upper = basename.upper()

    for ending in BANNED_ENDINGS:
        if upper.endswith(ending.upper()):
            return (
                f"Filename ends with banned pattern: {ending}",
                "Remove status/completion suffixes from filenames",
            )

    stem = Path(basename).stem
    for pattern in BANNED_NAME_PATTERNS:
        if pattern.search(stem):
            return (
                f"Filename matches banned pattern: {pattern.pattern}",
                "Use descriptive names without status indicators",
            )

    return None


def find_banned_content(text: str) -> tuple[int, str] | None:
    """Return ``(line_number, line)`` of the first status heading in the opening lines."""
    for number, line in enumerate(text.splitlines()[:CONTENT_SCAN_LINES], start=1):
        for pattern in BANNED_CONTENT_PATTERNS:
            if pattern.search(line):
                return number, line.strip()
    return None


def check_document(rel_path: str, text: str | None) -> list[Violation]:
    """
    Check one markdown document by name and, when readable, by content.

    A banned name short-circuits the content scan so each document is
    reported once.
    """
    check = CheckName.BANNED_DOCS.value

    banned = is_banned_filename(rel_path)
    if banned is not None:
        reason, suggestion = banned
        return [Violation(
            check=check,
            file=rel_path,
            rule="banned-filename",
            message=reason,
            severity=Severity.ERROR,
            suggestion=suggestion,
        )]

    if text is None:
        return []

    found = find_banned_content(text)
    if found is None:
        return []

    line_number, line = found
    return [Violation(
        check=check,
        file=rel_path,
        rule="banned-content",
        message="Content indicates completion/status document",
        severity=Severity.ERROR,
        line=line_number,
        suggestion="Convert to technical documentation without status markers",
        context=line,
    )]


def check_banned_documents(
    root: Path,
    files: Iterable[str | Path] | None = None,
    ignore_patterns: Iterable[str] = (),
) -> CheckResult:
    """Check every markdown file under ``root`` (or only ``files``)."""
    result = CheckResult(check=CheckName.BANNED_DOCS.value)

    for path in collect_files(
        root,
        files,
        suffixes=[".md"],
        skip_dirs=DOCUMENT_SKIP_DIRS,
        ignore_patterns=ignore_patterns,
    ):
        result.files_checked += 1
        text = read_text(path)
        if text is None:
            logger.debug("Skipping content check for unreadable %s", path)
        result.violations.extend(check_document(relative_posix(path, root), text))

    return result
