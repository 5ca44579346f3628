"""
patternenforcer.enforcer - Check Orchestration
==============================================

Runs the enabled checks against a project and decides, from the
:class:`~patternenforcer.models.EnforcementConfig`, whether the outcome
blocks (a commit, a CI job).

Usage
-----
>>> from pathlib import Path
>>> from patternenforcer.enforcer import run_checks
>>> report = run_checks(Path("."))
>>> report.blocked
False
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from patternenforcer.configfiles import enforce_config_files
from patternenforcer.docstyle import check_documentation
from patternenforcer.documents import check_banned_documents
from patternenforcer.findings import CheckResult, Severity
from patternenforcer.imports import check_import_style
from patternenforcer.logs import enforce_logging
from patternenforcer.metrics import MetricsStore
from patternenforcer.models import CheckName, EnforcementConfig
from patternenforcer.naming import check_file_naming
from patternenforcer.rootfiles import check_root_files


logger = logging.getLogger(__name__)

CheckRunner = Callable[[Path, "list[str] | None", "list[str]"], CheckResult]


# =============================================================================
# Check Runners
# =============================================================================

def _run_root_files(root: Path, files: list[str] | None, ignore_patterns: list[str]) -> CheckResult:
    result = check_root_files(root)
    if files is not None:
        # Only report root entries that are part of the change set
        staged = {PurePosixPath(f).parts[0] for f in files if PurePosixPath(f).parts}
        result.violations = [v for v in result.violations if v.file.rstrip("/") in staged]
    return result


RUNNERS: dict[CheckName, CheckRunner] = {
    CheckName.FILE_NAMING: lambda root, files, ignore: check_file_naming(root, files, ignore),
    CheckName.BANNED_DOCS: lambda root, files, ignore: check_banned_documents(root, files, ignore),
    CheckName.DOCUMENTATION: lambda root, files, ignore: check_documentation(root, files, ignore),
    CheckName.IMPORTS: lambda root, files, ignore: check_import_style(root, files, ignore),
    CheckName.LOGGING: lambda root, files, ignore: enforce_logging(
        root, files, ignore_patterns=ignore
    ).to_check_result(),
    CheckName.CONFIG_FILES: lambda root, files, ignore: enforce_config_files(
        root, files, use_cache=False, ignore_patterns=ignore
    ).to_check_result(),
    CheckName.ROOT_FILES: _run_root_files,
}


# =============================================================================
# Report
# =============================================================================

@dataclass
class EnforcementReport:
    """
    Results of one enforcement run.

    Attributes
    ----------
    results : list[CheckResult]
        One result per check that ran, in run order.

    blocking_checks : list[str]
        Checks that failed and whose configuration says a failure blocks.

    level : str
        Name of the global enforcement level in effect.
    """

    results: list[CheckResult] = field(default_factory=list)
    blocking_checks: list[str] = field(default_factory=list)
    level: str = ""

    @property
    def blocked(self) -> bool:
        return bool(self.blocking_checks)

    @property
    def total_violations(self) -> int:
        return sum(len(r.violations) for r in self.results)

    @property
    def error_count(self) -> int:
        return sum(r.error_count for r in self.results)

    @property
    def warning_count(self) -> int:
        return sum(r.warning_count for r in self.results)

    def result_for(self, check: CheckName | str) -> CheckResult | None:
        name = check.value if isinstance(check, CheckName) else check
        return next((r for r in self.results if r.check == name), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "blocked": self.blocked,
            "blockingChecks": list(self.blocking_checks),
            "totalViolations": self.total_violations,
            "results": [r.to_dict() for r in self.results],
        }


# =============================================================================
# Orchestration
# =============================================================================

def run_checks(
    root: Path,
    checks: Iterable[CheckName | str] | None = None,
    files: Iterable[str | Path] | None = None,
    config: EnforcementConfig | None = None,
    record_metrics: bool = True,
) -> EnforcementReport:
    """
    Run the enabled checks for the project at ``root``.

    Parameters
    ----------
    root : Path
        Project root.

    checks : Iterable[CheckName | str] | None
        Run only these checks (still subject to being enabled).

    files : Iterable[str | Path] | None
        Restrict file-based checks to these paths, e.g. staged files.

    config : EnforcementConfig | None
        Configuration to use; loaded from ``root`` when omitted.

    record_metrics : bool, default=True
        Record runs and violation counts in the metrics file.

    Returns
    -------
    EnforcementReport

    Raises
    ------
    FileNotFoundError
        If ``root`` does not exist.

    NotADirectoryError
        If ``root`` is not a directory.

    ValueError
        If a requested check name is unknown.
    """
    root = root.resolve()
    if not root.exists():
        raise FileNotFoundError(f"Project path does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Project path is not a directory: {root}")

    config = config or EnforcementConfig.load(root)
    requested = [CheckName.parse(c) if isinstance(c, str) else c for c in checks] if checks else list(CheckName)
    file_list = [_normalize(f, root) for f in files] if files is not None else None

    metrics = MetricsStore(root, config.metrics) if record_metrics else None
    report = EnforcementReport(level=config.level.name)

    for check in requested:
        if not config.is_enabled(check):
            logger.debug("Skipping disabled check %s", check.value)
            continue

        check_config = config.check_config(check)
        ignore_patterns = list(check_config.ignore_patterns) if check_config else []
        logger.debug("Running %s", check.value)
        result = RUNNERS[check](root, file_list, ignore_patterns)
        report.results.append(result)

        if metrics is not None:
            metrics.record(check.value, len(result.violations))

        if not result.passed and config.should_block(check):
            report.blocking_checks.append(check.value)

    logger.debug(
        "Enforcement finished: %d violations, %d errors, blocked=%s",
        report.total_violations,
        report.error_count,
        report.blocked,
    )
    return report


def _normalize(path: str | Path, root: Path) -> str:
    """Express ``path`` relative to ``root`` in POSIX form."""
    candidate = Path(path)
    if candidate.is_absolute():
        try:
            candidate = candidate.resolve().relative_to(root)
        except ValueError:
            return candidate.as_posix()
    return candidate.as_posix()


def summarize(report: EnforcementReport) -> dict[str, int]:
    """Count violations by severity across all results."""
    counts = {severity.value: 0 for severity in Severity}
    for result in report.results:
        for violation in result.violations:
            counts[violation.severity.value] += 1
    return counts
