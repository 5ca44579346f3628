"""
patternenforcer.docstyle - Documentation Style Check
====================================================

Lints markdown for the habits that make generated documentation read like
a press release: superlatives, "we're excited to", status shouting
(``DONE``, ``SHIPPED``), very long lines and files, and code blocks that
are too long or have no language.

Rules
-----
- ``banned-phrase``: marketing language and temporal references.
- ``announcement``: first-person completion announcements.
- ``status-word``: upper-case status words outside TODO lines.
- ``line-too-long`` / ``file-too-long``: size limits.
- ``missing-title``, ``missing-toc``, ``code-block-too-long``,
  ``code-block-language``: structure.

Lines inside fenced code blocks are exempt from the phrase, status and
line-length rules.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from patternenforcer.findings import (
    CheckResult,
    Severity,
    Violation,
    collect_files,
    read_text,
    relative_posix,
)
from patternenforcer.models import DEFAULT_DOC_IGNORE_PATTERNS, CheckName


BANNED_PHRASES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), suggestion)
    for pattern, suggestion in (
        (r"we(?:'?re|\s+are)\s+excited\s+to", "Use neutral announcement language"),
        (r"successfully\s+implemented", "State what was implemented without qualifier"),
        (r"as\s+of\s+\w+\s+\d{4}", "Remove temporal references"),
        (r"\b(?:perfect|perfectly)\b", 'Use "functional" or "complete"'),
        (r"\b(?:amazing|amazingly)\b", "Use descriptive technical terms"),
        (r"\b(?:excellent|excellently)\b", 'Use "effective" or "robust"'),
        (r"\b(?:awesome|awesomely)\b", "Use professional language"),
        (r"\bcool\b", "Use technical descriptors"),
        (r"\b(?:best|worst)\b", "Use objective comparisons"),
        (r"\bflawless(?:ly)?\b", 'Use "functional" or "tested"'),
    )
)

ANNOUNCEMENT_RE = re.compile(
    r"We.?re excited to|Successfully implemented|I.?ve created|I.?ve successfully"
)

STATUS_WORDS: tuple[str, ...] = (
    "COMPLETE",
    "FIXED",
    "DONE",
    "FINISHED",
    "FINAL",
    "RESOLVED",
    "SHIPPED",
    "DELIVERED",
    "RELEASED",
    "READY",
)
STATUS_WORD_RE = re.compile(rf"\b({'|'.join(STATUS_WORDS)})\b")

MAX_LINE_LENGTH = 120
MAX_FILE_LENGTH = 500
MAX_CODE_BLOCK_LENGTH = 20
TOC_THRESHOLD = 100

TITLE_RE = re.compile(r"^#\s+[^#]")
TOC_RE = re.compile(r"table of contents|^##\s+contents\b|^##\s+toc\b", re.IGNORECASE)
FENCE_RE = re.compile(r"^\s*```")


@dataclass
class CodeBlock:
    """A fenced code block: 1-based start line, body length and language tag."""

    start_line: int
    lines: int
    language: str


def extract_code_blocks(lines: list[str]) -> list[CodeBlock]:
    """Find fenced code blocks. An unterminated fence runs to the end of the file."""
    blocks: list[CodeBlock] = []
    start: int | None = None
    language = ""

    for index, line in enumerate(lines):
        if not FENCE_RE.match(line):
            continue
        if start is None:
            start = index
            language = line.strip()[3:].strip()
        else:
            blocks.append(CodeBlock(start_line=start + 1, lines=index - start - 1, language=language))
            start = None

    if start is not None:
        blocks.append(CodeBlock(start_line=start + 1, lines=len(lines) - start - 1, language=language))

    return blocks


def _code_line_mask(lines: list[str]) -> list[bool]:
    """Mark fence lines and the lines between them."""
    mask: list[bool] = []
    in_block = False
    for line in lines:
        if FENCE_RE.match(line):
            mask.append(True)
            in_block = not in_block
        else:
            mask.append(in_block)
    return mask


def check_markdown(rel_path: str, text: str) -> list[Violation]:
    """
    Lint one markdown document.

    Parameters
    ----------
    rel_path : str
        Path used in the violations.

    text : str
        Document content.

    Returns
    -------
    list[Violation]
        Findings in document order, followed by the whole-file findings.
    """
    check = CheckName.DOCUMENTATION.value
    lines = text.splitlines()
    in_code = _code_line_mask(lines)
    violations: list[Violation] = []

    def add(rule: str, message: str, line: int, severity: Severity, suggestion: str, context: str | None = None) -> None:
        violations.append(Violation(
            check=check,
            file=rel_path,
            rule=rule,
            message=message,
            severity=severity,
            line=line,
            suggestion=suggestion,
            context=context,
        ))

    for index, line in enumerate(lines):
        if in_code[index]:
            continue
        number = index + 1

        phrase_hit = False
        for pattern, suggestion in BANNED_PHRASES:
            match = pattern.search(line)
            if match:
                phrase_hit = True
                add("banned-phrase", f"Banned phrase '{match.group(0)}'", number, Severity.WARNING, suggestion, line)

        announcement = ANNOUNCEMENT_RE.search(line)
        # "We're excited to" is already reported as a banned phrase
        if announcement and not phrase_hit:
            add(
                "announcement",
                f"Announcement language '{announcement.group(0)}'",
                number,
                Severity.WARNING,
                "Describe what the code does; leave progress reports to commit messages",
                line,
            )

        if "TODO" not in line:
            for match in STATUS_WORD_RE.finditer(line):
                add(
                    "status-word",
                    f"Status announcement '{match.group(1)}'",
                    number,
                    Severity.WARNING,
                    "Remove status announcements, use git commits for status",
                    line,
                )

        if len(line) > MAX_LINE_LENGTH:
            add(
                "line-too-long",
                f"Line has {len(line)} characters",
                number,
                Severity.WARNING,
                f"Keep lines under {MAX_LINE_LENGTH} characters",
            )

    if len(lines) > MAX_FILE_LENGTH:
        add(
            "file-too-long",
            f"File has {len(lines)} lines",
            len(lines),
            Severity.WARNING,
            f"Split into multiple files (max {MAX_FILE_LENGTH} lines)",
        )

    if not any(TITLE_RE.match(line) for line in lines):
        add("missing-title", "No H1 heading found", 1, Severity.WARNING, "Add a title with # at the beginning")

    if len(lines) > TOC_THRESHOLD and not any(TOC_RE.search(line) for line in lines):
        add(
            "missing-toc",
            f"Long document ({len(lines)} lines) without a table of contents",
            1,
            Severity.INFO,
            "Add a ## Table of Contents section for long documents",
        )

    for block in extract_code_blocks(lines):
        if block.lines > MAX_CODE_BLOCK_LENGTH:
            add(
                "code-block-too-long",
                f"Code block has {block.lines} lines",
                block.start_line,
                Severity.INFO,
                "Link to source file or split into smaller examples",
            )
        if not block.language:
            add(
                "code-block-language",
                "Code block without language",
                block.start_line,
                Severity.INFO,
                "Add language after ``` (e.g., ```python)",
            )

    return violations


def check_documentation(
    root: Path,
    files: Iterable[str | Path] | None = None,
    ignore_patterns: Iterable[str] = DEFAULT_DOC_IGNORE_PATTERNS,
) -> CheckResult:
    """Lint every markdown file under ``root`` (or only ``files``) not matched by ``ignore_patterns``."""
    result = CheckResult(check=CheckName.DOCUMENTATION.value)

    for path in collect_files(root, files, suffixes=[".md"], ignore_patterns=ignore_patterns):
        text = read_text(path)
        if text is None:
            continue
        result.files_checked += 1
        result.violations.extend(check_markdown(relative_posix(path, root), text))

    return result
