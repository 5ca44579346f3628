"""
patternenforcer.imports - JavaScript/TypeScript Import Style Check
==================================================================

Line-oriented checks over JS/TS sources:

- absolute project imports inside ``src/`` and ``components/``
- wildcard imports other than React and lodash
- default imports from modules that have none (React, lodash)
- synchronous ``fs`` imports and ``console`` calls
- relative imports that climb more than two directories

Usage
-----
>>> from patternenforcer.imports import check_import_lines
>>> [v.rule for v in check_import_lines("src/app.ts", "import fs from 'fs'")]
['sync-fs']
"""

from __future__ import annotations

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


SOURCE_SUFFIXES: tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")

IMPORT_IGNORE_PATTERNS: tuple[str, ...] = (
    "examples/**",
    "ai/examples/**",
    "extensions/*/node_modules/**",
    "extensions/*/out/**",
    "**/*.d.ts",
    "**/*.min.js",
)

# Module specifier that is neither relative (./, ../), aliased (@/) nor scoped (@x/)
ABSOLUTE_IMPORT_RE = re.compile(r"""from\s+['"](?![@./])([^'"]+)['"]""")
WILDCARD_IMPORT_RE = re.compile(r"""import\s+\*\s+as\s+(\w+)\s+from\s+['"]([^'"]+)['"]""")
SYNC_FS_RE = re.compile(r"""import.*from\s+['"]fs['"]|require\(\s*['"]fs['"]\s*\)""")
CONSOLE_RE = re.compile(r"\bconsole\.(log|error|warn|info|debug|trace)\s*\(")
PARENT_IMPORT_RE = re.compile(r"""from\s+['"]((?:\.\./)+)[^'"]*['"]""")

PROBLEMATIC_DEFAULTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(r"""import\s+React\s+from\s+['"]react['"]"""),
        "import * as React from 'react'",
    ),
    (
        re.compile(r"""import\s+lodash\s+from\s+['"]lodash['"]"""),
        "import * as _ from 'lodash' or import { specific } from 'lodash'",
    ),
)

WILDCARD_ALLOWED_MODULES = frozenset({"react", "lodash"})
EXTENSION_WILDCARD_MODULES = frozenset({"vscode", "path", "fs"})
CONSOLE_ALLOWED_DIRS: tuple[str, ...] = ("tools/enforcement/", "tools/generators/", "scripts/dev/")

MAX_PARENT_DEPTH = 2


def _is_library(module: str) -> bool:
    return "/" not in module and not module.startswith(".")


def check_import_lines(rel_path: str, text: str) -> list[Violation]:
    """
    Check the import style of one source file.

    Parameters
    ----------
    rel_path : str
        POSIX path relative to the root; several rules depend on it.

    text : str
        File content.
    """
    check = CheckName.IMPORTS.value
    anchored = "/" + rel_path
    in_project_source = "/src/" in anchored or "/components/" in anchored
    in_extension = "extensions/" in anchored
    console_allowed = any(d in anchored for d in CONSOLE_ALLOWED_DIRS)
    violations: list[Violation] = []

    def add(rule: str, message: str, line: int, suggestion: str, context: str) -> None:
        violations.append(Violation(
            check=check,
            file=rel_path,
            rule=rule,
            message=message,
            severity=Severity.WARNING,
            line=line,
            suggestion=suggestion,
            context=context,
        ))

    for number, line in enumerate(text.splitlines(), start=1):
        if in_project_source:
            for match in ABSOLUTE_IMPORT_RE.finditer(line):
                module = match.group(1)
                if _is_library(module) or "node_modules" in module:
                    continue
                add(
                    "absolute-import",
                    f"Absolute import of project module '{module}'",
                    number,
                    "Use relative imports for project files",
                    line,
                )

        for match in WILDCARD_IMPORT_RE.finditer(line):
            name, module = match.groups()
            if module in WILDCARD_ALLOWED_MODULES or name in {"React", "_"}:
                continue
            if in_extension and module in EXTENSION_WILDCARD_MODULES:
                continue
            add(
                "wildcard-import",
                f"Wildcard import of '{module}'",
                number,
                "Import specific items instead of using wildcard",
                line,
            )

        for pattern, correct in PROBLEMATIC_DEFAULTS:
            if pattern.search(line):
                add("default-import", "Default import from a module without one", number, correct, line)

        if SYNC_FS_RE.search(line) and not in_extension:
            add(
                "sync-fs",
                "Synchronous fs module imported",
                number,
                "Use fs/promises instead of fs for async operations",
                line,
            )

        if not console_allowed and not line.lstrip().startswith("//"):
            console = CONSOLE_RE.search(line)
            if console:
                add(
                    "console-usage",
                    f"console.{console.group(1)} call",
                    number,
                    "Use the project logger instead of console",
                    line,
                )

        for match in PARENT_IMPORT_RE.finditer(line):
            depth = match.group(1).count("../")
            if depth > MAX_PARENT_DEPTH:
                add(
                    "deep-relative-import",
                    f"Import climbs {depth} parent directories",
                    number,
                    "Consider restructuring to avoid deep parent imports",
                    line,
                )

    return violations


def check_import_style(
    root: Path,
    files: Iterable[str | Path] | None = None,
    ignore_patterns: Iterable[str] = (),
) -> CheckResult:
    """Check every JS/TS source under ``root`` (or only ``files``)."""
    result = CheckResult(check=CheckName.IMPORTS.value)
    patterns = [*IMPORT_IGNORE_PATTERNS, *ignore_patterns]

    for path in collect_files(root, files, suffixes=SOURCE_SUFFIXES, ignore_patterns=patterns):
        text = read_text(path)
        if text is None:
            continue
        result.files_checked += 1
        result.violations.extend(check_import_lines(relative_posix(path, root), text))

    return result
