"""
patternenforcer.logs - Print and Console Call Enforcement
=========================================================

Production code should log through a logger, not ``print()`` or
``console.log()``. This module detects such calls and can rewrite them.

Python
------
Sources are parsed with :mod:`ast`, so ``print`` inside strings or
comments is never reported. The fixer edits the source text at the
positions the AST reports, which keeps the rest of the file byte for
byte. Only calls that map cleanly onto ``logger.info(msg)`` (a single
positional argument, no keywords) are rewritten; the rest are reported
for a manual fix.

JavaScript / TypeScript
-----------------------
``console.<method>(`` calls are found with a regular expression. A
``// log-enforcer-disable-next-line`` comment exempts the next line.

Exclusions
----------
Test files and CLI entry points legitimately write to stdout and are
skipped; the reason is recorded in the report.

Usage
-----
>>> from patternenforcer.logs import fix_python_source
>>> new_source, changes = fix_python_source('print("hi")\\n')
>>> print(new_source)
import logging
<BLANKLINE>
logger = logging.getLogger(__name__)
logger.info("hi")
<BLANKLINE>
"""

from __future__ import annotations

import ast
import logging
import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from patternenforcer.findings import (
    CheckResult,
    Severity,
    Violation,
    collect_files,
    matches_any,
    read_text,
    relative_posix,
)
from patternenforcer.models import CheckName


logger = logging.getLogger(__name__)

PYTHON_SUFFIXES: tuple[str, ...] = (".py",)
JS_SUFFIXES: tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")

PYTHON_TEST_PATTERNS: tuple[str, ...] = ("**/test_*.py", "**/*_test.py", "**/tests/**", "**/testing/**", "**/conftest.py")
PYTHON_CLI_PATTERNS: tuple[str, ...] = ("**/cli.py", "**/cli/**", "**/__main__.py", "**/scripts/**")

# PEP 263 encoding declaration
PYTHON_CODING_RE = re.compile(r"^[ \t\f]*#.*?coding[:=][ \t]*[-\w.]+")

JS_TEST_PATTERNS: tuple[str, ...] = ("**/*.test.*", "**/*.spec.*", "**/tests/**", "**/__tests__/**")
JS_CLI_PATTERNS: tuple[str, ...] = (
    "**/cli.js",
    "**/cli.ts",
    "**/cli/**",
    "**/scripts/**",
    "**/bin/**",
)

CONSOLE_METHODS: tuple[str, ...] = ("log", "error", "warn", "info", "debug", "trace")
CONSOLE_TO_LOGGER: dict[str, str] = {
    "log": "info",
    "error": "error",
    "warn": "warn",
    "info": "info",
    "debug": "debug",
    "trace": "debug",
}
CONSOLE_CALL_RE = re.compile(rf"\bconsole\.({'|'.join(CONSOLE_METHODS)})\s*\(")
DISABLE_NEXT_LINE = "log-enforcer-disable-next-line"

JS_LOGGER_LIBRARIES: tuple[str, ...] = ("winston", "pino", "bunyan", "log4js", "loglevel")
JS_LOGGER_IMPORT_RE = re.compile(
    rf"""(?:from\s+|require\(\s*)['"]({'|'.join(JS_LOGGER_LIBRARIES)})['"]"""
)
JS_IMPORT_LINE_RE = re.compile(r"""^\s*(?:import\s|(?:const|let|var)\s+[\w{}\s,]+=\s*require\()""")
# A module specifier or a trailing semicolon closes a (possibly multi-line) import
JS_IMPORT_END_RE = re.compile(r"""(?:\bfrom\s*|^\s*import\s*|\brequire\(\s*)['"][^'"]*['"]|;\s*(?://.*)?$""")

JS_LOGGER_PREAMBLES: dict[str, str] = {
    "winston": (
        "const winston = require('winston');\n"
        "const logger = winston.createLogger({\n"
        "  level: 'info',\n"
        "  format: winston.format.json(),\n"
        "  transports: [new winston.transports.Console()],\n"
        "});\n"
    ),
    "pino": "const pino = require('pino');\nconst logger = pino();\n",
    "bunyan": "const bunyan = require('bunyan');\nconst logger = bunyan.createLogger({ name: 'app' });\n",
}


# =============================================================================
# Python Detection
# =============================================================================

@dataclass
class PrintCall:
    """A ``print(...)`` call found in Python source."""

    line: int
    col: int
    fixable: bool
    context: str


@dataclass
class PythonAnalysis:
    """What the AST says about a Python module's logging."""

    print_calls: list[PrintCall] = field(default_factory=list)
    has_logging_import: bool = False
    logger_names: list[str] = field(default_factory=list)
    syntax_error: str | None = None
    insert_line: int = 0


class _LoggingVisitor(ast.NodeVisitor):
    def __init__(self, lines: list[str]) -> None:
        self.lines = lines
        self.analysis = PythonAnalysis()
        self.getlogger_aliases: set[str] = set()
        self.depth = 0

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            if alias.name == "logging" and alias.asname is None and self.depth == 0:
                self.analysis.has_logging_import = True
        self.generic_visit(node)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        if node.module == "logging":
            for alias in node.names:
                if alias.name == "getLogger":
                    self.getlogger_aliases.add(alias.asname or alias.name)
        self.generic_visit(node)

    def _visit_scope(self, node: ast.AST) -> None:
        self.depth += 1
        self.generic_visit(node)
        self.depth -= 1

    visit_FunctionDef = _visit_scope
    visit_AsyncFunctionDef = _visit_scope
    visit_ClassDef = _visit_scope

    def visit_Assign(self, node: ast.Assign) -> None:
        # Only module-level loggers are visible to every print call
        if self.depth == 0 and isinstance(node.value, ast.Call) and self._is_getlogger(node.value.func):
            for target in node.targets:
                if isinstance(target, ast.Name):
                    self.analysis.logger_names.append(target.id)
        self.generic_visit(node)

    def visit_Call(self, node: ast.Call) -> None:
        if isinstance(node.func, ast.Name) and node.func.id == "print":
            fixable = (
                len(node.args) == 1
                and not node.keywords
                and not isinstance(node.args[0], ast.Starred)
            )
            self.analysis.print_calls.append(PrintCall(
                line=node.func.lineno,
                col=node.func.col_offset,
                fixable=fixable,
                context=self.lines[node.lineno - 1] if node.lineno <= len(self.lines) else "",
            ))
        self.generic_visit(node)

    def _is_getlogger(self, func: ast.expr) -> bool:
        if isinstance(func, ast.Attribute):
            return (
                func.attr == "getLogger"
                and isinstance(func.value, ast.Name)
                and func.value.id == "logging"
            )
        return isinstance(func, ast.Name) and func.id in self.getlogger_aliases


def _import_insert_line(tree: ast.Module) -> int:
    """Line after which new module-level statements go: the last top-level import, else the docstring."""
    last = 0
    for index, node in enumerate(tree.body):
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            last = node.end_lineno or node.lineno
        elif (
            index == 0
            and isinstance(node, ast.Expr)
            and isinstance(node.value, ast.Constant)
            and isinstance(node.value.value, str)
        ):
            last = node.end_lineno or node.lineno
    return last


def find_python_violations(source: str) -> PythonAnalysis:
    """
    Analyze Python source for print calls and logger setup.

    Parameters
    ----------
    source : str
        Module source code.

    Returns
    -------
    PythonAnalysis
        ``syntax_error`` is set, and nothing else, when the source does not
        parse.
    """
    try:
        tree = ast.parse(source)
    except SyntaxError as e:
        return PythonAnalysis(syntax_error=f"line {e.lineno}: {e.msg}")

    visitor = _LoggingVisitor(source.splitlines())
    visitor.visit(tree)
    visitor.analysis.insert_line = max(_import_insert_line(tree), _header_comment_lines(visitor.lines))
    return visitor.analysis


def _header_comment_lines(lines: list[str]) -> int:
    """Number of leading lines (shebang, encoding cookie) that must stay first."""
    count = 0
    for index, line in enumerate(lines[:2]):
        if (index == 0 and line.startswith("#!")) or PYTHON_CODING_RE.match(line):
            count = index + 1
        else:
            break
    return count


def _char_offset(line: str, byte_offset: int) -> int:
    # ast reports UTF-8 byte offsets
    return len(line.encode("utf-8")[:byte_offset].decode("utf-8", errors="ignore"))


def fix_python_source(source: str) -> tuple[str, list[str]]:
    """
    Rewrite simple ``print(x)`` calls to ``<logger>.info(x)``.

    Adds ``import logging`` and a module logger when they are missing. The
    first existing ``x = logging.getLogger(...)`` name is reused.

    Returns
    -------
    tuple[str, list[str]]
        The new source and a description of each change. Source that does
        not parse, or has nothing to fix, comes back unchanged.
    """
    analysis = find_python_violations(source)
    if analysis.syntax_error is not None:
        return source, []

    fixable = [call for call in analysis.print_calls if call.fixable]
    if not fixable:
        return source, []

    logger_name = analysis.logger_names[0] if analysis.logger_names else "logger"
    lines = source.splitlines(keepends=True)
    changes: list[str] = []

    for call in sorted(fixable, key=lambda c: (c.line, c.col), reverse=True):
        line = lines[call.line - 1]
        start = _char_offset(line, call.col)
        lines[call.line - 1] = line[:start] + f"{logger_name}.info" + line[start + len("print"):]
        changes.append(f"line {call.line}: print() -> {logger_name}.info()")
    changes.reverse()

    header: list[str] = []
    if not analysis.logger_names:
        if not analysis.has_logging_import:
            header.append("import logging\n")
            changes.append("added 'import logging'")
        header.extend(["\n", "logger = logging.getLogger(__name__)\n"])
        changes.append("added 'logger = logging.getLogger(__name__)'")

    if header:
        at = analysis.insert_line
        if at > 0 and not lines[at - 1].endswith("\n"):
            lines[at - 1] += "\n"
        lines[at:at] = header

    return "".join(lines), changes


# =============================================================================
# JavaScript Detection
# =============================================================================

@dataclass
class ConsoleCall:
    """A ``console.<method>(`` call found in JS/TS source."""

    line: int
    method: str
    context: str


@dataclass
class JsAnalysis:
    console_calls: list[ConsoleCall] = field(default_factory=list)
    logger_libraries: list[str] = field(default_factory=list)

    @property
    def has_logger_import(self) -> bool:
        return bool(self.logger_libraries)


def find_js_violations(source: str) -> JsAnalysis:
    """Find console calls and imported logger libraries in JS/TS source."""
    analysis = JsAnalysis()
    lines = source.splitlines()

    for index, line in enumerate(lines):
        for match in JS_LOGGER_IMPORT_RE.finditer(line):
            if match.group(1) not in analysis.logger_libraries:
                analysis.logger_libraries.append(match.group(1))

        if line.lstrip().startswith("//"):
            continue
        if index > 0 and DISABLE_NEXT_LINE in lines[index - 1]:
            continue
        for match in CONSOLE_CALL_RE.finditer(line):
            analysis.console_calls.append(ConsoleCall(line=index + 1, method=match.group(1), context=line))

    return analysis


def _import_statement_end(lines: list[str], start: int) -> int:
    """Index of the line that closes the import starting at ``start``."""
    for index in range(start, len(lines)):
        if JS_IMPORT_END_RE.search(lines[index]):
            return index
    return len(lines) - 1


def fix_js_source(source: str, preferred_logger: str = "winston") -> tuple[str, list[str]]:
    """
    Rewrite console calls to ``logger.<level>(`` calls.

    ``log`` maps to ``info`` and ``trace`` to ``debug``. When no logger
    library is imported, a ``logger`` for ``preferred_logger`` is declared
    after the leading imports.

    Raises
    ------
    ValueError
        If ``preferred_logger`` has no known setup snippet.
    """
    if preferred_logger not in JS_LOGGER_PREAMBLES:
        valid = ", ".join(JS_LOGGER_PREAMBLES)
        raise ValueError(f"Unsupported logger '{preferred_logger}'. Supported: {valid}")

    analysis = find_js_violations(source)
    if not analysis.console_calls:
        return source, []

    lines = source.splitlines(keepends=True)
    changes: list[str] = []
    fixed_lines = {call.line for call in analysis.console_calls}

    for number in sorted(fixed_lines):
        def replace(match: re.Match[str], number: int = number) -> str:
            level = CONSOLE_TO_LOGGER[match.group(1)]
            changes.append(f"line {number}: console.{match.group(1)}() -> logger.{level}()")
            return f"logger.{level}("

        lines[number - 1] = CONSOLE_CALL_RE.sub(replace, lines[number - 1])

    if not analysis.has_logger_import:
        insert_at = 0
        index = 0
        while index < len(lines):
            line = lines[index]
            if index == 0 and line.startswith("#!"):
                insert_at = 1
            elif JS_IMPORT_LINE_RE.match(line):
                index = _import_statement_end(lines, index)
                insert_at = index + 1
            elif line.strip() and not line.lstrip().startswith(("//", "'use strict'", '"use strict"')):
                break
            index += 1
        if insert_at > 0 and not lines[insert_at - 1].endswith("\n"):
            lines[insert_at - 1] += "\n"
        lines[insert_at:insert_at] = [JS_LOGGER_PREAMBLES[preferred_logger]]
        changes.append(f"added {preferred_logger} logger setup")

    return "".join(lines), changes


# =============================================================================
# Project Enforcement
# =============================================================================

def exclusion_reason(rel_path: str) -> str | None:
    """Return why a file is exempt from log enforcement, or None."""
    if rel_path.endswith(PYTHON_SUFFIXES):
        if matches_any(rel_path, PYTHON_TEST_PATTERNS):
            return "test file"
        if matches_any(rel_path, PYTHON_CLI_PATTERNS):
            return "cli entry point"
    elif rel_path.endswith(JS_SUFFIXES):
        if matches_any(rel_path, JS_TEST_PATTERNS):
            return "test file"
        if matches_any(rel_path, JS_CLI_PATTERNS):
            return "cli entry point"
    return None


@dataclass
class LogReport:
    """
    Summary of a log enforcement run.

    Attributes
    ----------
    total_files : int
        Python and JS/TS files found.

    excluded_files : int
        Files skipped as tests or CLI entry points.

    analyzed_files : int
        Files actually inspected.

    violations : list[Violation]
        One entry per offending call.

    exclusion_reasons : dict[str, int]
        How many files were skipped for each reason.

    fixed_files : list[str]
        Files rewritten (or that would be, on a dry run).
    """

    total_files: int = 0
    excluded_files: int = 0
    analyzed_files: int = 0
    violations: list[Violation] = field(default_factory=list)
    exclusion_reasons: dict[str, int] = field(default_factory=dict)
    fixed_files: list[str] = field(default_factory=list)

    @property
    def total_violations(self) -> int:
        return len(self.violations)

    @property
    def files_with_violations(self) -> int:
        return len({v.file for v in self.violations})

    @property
    def violations_by_type(self) -> dict[str, int]:
        return dict(Counter(v.rule for v in self.violations))

    def to_check_result(self) -> CheckResult:
        return CheckResult(
            check=CheckName.LOGGING.value,
            violations=list(self.violations),
            files_checked=self.analyzed_files,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "excludedFiles": self.excluded_files,
            "analyzedFiles": self.analyzed_files,
            "filesWithViolations": self.files_with_violations,
            "totalViolations": self.total_violations,
            "violationsByType": self.violations_by_type,
            "exclusionReasons": self.exclusion_reasons,
            "fixedFiles": self.fixed_files,
        }


def _python_violations(rel_path: str, analysis: PythonAnalysis) -> list[Violation]:
    check = CheckName.LOGGING.value
    if analysis.syntax_error is not None:
        return [Violation(
            check=check,
            file=rel_path,
            rule="syntax-error",
            message=f"Could not parse file ({analysis.syntax_error})",
            severity=Severity.INFO,
        )]
    return [
        Violation(
            check=check,
            file=rel_path,
            rule="print-call",
            message="print() call in production code",
            severity=Severity.WARNING,
            line=call.line,
            suggestion=(
                "Use logger.info() instead (run with --fix)"
                if call.fixable else "Replace with a logger call by hand"
            ),
            context=call.context,
        )
        for call in analysis.print_calls
    ]


def _js_violations(rel_path: str, analysis: JsAnalysis) -> list[Violation]:
    return [
        Violation(
            check=CheckName.LOGGING.value,
            file=rel_path,
            rule="console-call",
            message=f"console.{call.method}() call in production code",
            severity=Severity.WARNING,
            line=call.line,
            suggestion=f"Use logger.{CONSOLE_TO_LOGGER[call.method]}() instead",
            context=call.context,
        )
        for call in analysis.console_calls
    ]


def enforce_logging(
    root: Path,
    files: Iterable[str | Path] | None = None,
    *,
    fix: bool = False,
    dry_run: bool = False,
    preferred_logger: str = "winston",
    ignore_patterns: Iterable[str] = (),
) -> LogReport:
    """
    Detect (and optionally fix) print/console calls under ``root``.

    Parameters
    ----------
    root : Path
        Project root.

    files : Iterable[str | Path] | None
        Restrict the run to these files.

    fix : bool, default=False
        Rewrite offending files in place.

    dry_run : bool, default=False
        With ``fix``, report which files would change without writing.

    preferred_logger : str, default="winston"
        Logger library to declare in JS files that have none.

    Returns
    -------
    LogReport
        Violations reflect the files as they were before any fix.
    """
    report = LogReport()

    for path in collect_files(
        root,
        files,
        suffixes=[*PYTHON_SUFFIXES, *JS_SUFFIXES],
        ignore_patterns=ignore_patterns,
    ):
        rel_path = relative_posix(path, root)
        report.total_files += 1

        reason = exclusion_reason(rel_path)
        if reason is not None:
            report.excluded_files += 1
            report.exclusion_reasons[reason] = report.exclusion_reasons.get(reason, 0) + 1
            continue

        source = read_text(path)
        if source is None:
            continue
        report.analyzed_files += 1

        if path.suffix in PYTHON_SUFFIXES:
            analysis = find_python_violations(source)
            report.violations.extend(_python_violations(rel_path, analysis))
            new_source, changes = fix_python_source(source) if fix else (source, [])
        else:
            js_analysis = find_js_violations(source)
            report.violations.extend(_js_violations(rel_path, js_analysis))
            new_source, changes = fix_js_source(source, preferred_logger) if fix else (source, [])

        if changes and new_source != source:
            report.fixed_files.append(rel_path)
            if dry_run:
                logger.info("Would fix %s: %s", rel_path, "; ".join(changes))
            else:
                path.write_text(new_source, encoding="utf-8")
                logger.info("Fixed %s: %s", rel_path, "; ".join(changes))

    return report
