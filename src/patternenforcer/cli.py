"""
patternenforcer.cli - Command Line Interface
============================================

Typer application exposing the checks, fixers, generators and hooks.

Architecture
------------
    app
    ├── check          - Run every enabled check (table or JSON)
    ├── naming         - File naming check
    ├── docs           - Documentation style check
    ├── banned         - Banned status documents check
    ├── imports        - Import style check
    ├── root           - Root directory check
    ├── logs           - print/console detection and fixing
    ├── config         - Configuration file validation and fixing
    ├── install-hooks  - Install the git pre-commit hook
    ├── generate
    │   ├── component  - Scaffold a React component
    │   └── feature    - Scaffold a feature module
    ├── enforcement
    │   ├── status     - Show the enforcement configuration
    │   ├── set-level  - Change the global level
    │   ├── enable     - Enable a check
    │   ├── disable    - Disable a check
    │   └── metrics    - Show recorded metrics
    └── hook
        ├── pre-commit   - Run from .git/hooks/pre-commit
        └── pre-tool-use - Run from an AI editor's PreToolUse hook

Exit Codes
----------
- ``0``: success / nothing blocking
- ``1``: violations (single checks), blocked commit, or an error
- ``2``: ``hook pre-tool-use`` refused a write

Usage Examples
--------------
    $ patternenforcer check .
    $ patternenforcer check --only fileNaming --only bannedDocs --staged
    $ patternenforcer generate component UserCard --type display
    $ patternenforcer enforcement set-level full
"""

from __future__ import annotations

import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Annotated

import questionary
import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from patternenforcer import __version__
from patternenforcer.configfiles import ValidationCache, enforce_config_files
from patternenforcer.enforcer import EnforcementReport, run_checks, summarize
from patternenforcer.findings import CheckResult, Severity
from patternenforcer.generator import COMPONENT_TYPES, create_component, create_feature
from patternenforcer.hooks import (
    SKIP_ENV_VAR,
    evaluate_tool_use,
    install_pre_commit_hook,
    run_pre_commit,
    should_skip,
    staged_files,
)
from patternenforcer.logs import enforce_logging
from patternenforcer.metrics import MetricsStore
from patternenforcer.models import CheckName, EnforcementConfig


logger = logging.getLogger(__name__)


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="patternenforcer",
    help="Pattern enforcement for AI-assisted projects: checks, fixers, scaffolding and hooks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=True,
)
generate_app = typer.Typer(help="Scaffold React components and features.", no_args_is_help=True)
enforcement_app = typer.Typer(help="Inspect and change the enforcement configuration.", no_args_is_help=True)
hook_app = typer.Typer(help="Entry points for git and editor hooks.", no_args_is_help=True)

app.add_typer(generate_app, name="generate")
app.add_typer(enforcement_app, name="enforcement")
app.add_typer(hook_app, name="hook")

console = Console()

SEVERITY_COLORS: dict[Severity, str] = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}
SEVERITY_ORDER: dict[Severity, int] = {
    Severity.ERROR: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
}


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


PathArgument = Annotated[
    Path,
    typer.Argument(help="Project root", file_okay=False, dir_okay=True),
]


# =============================================================================
# Callbacks
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]patternenforcer[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Pattern enforcement for AI-assisted projects[/]",
            border_style="green",
        ))
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """
    [bold]patternenforcer[/] - keep AI-assisted projects on their patterns.

    [bold]Quick Start:[/]

        patternenforcer check .
        patternenforcer install-hooks
    """
    configure_logging(verbose)


# =============================================================================
# Output Helpers
# =============================================================================

def _label(check: str) -> str:
    try:
        return CheckName(check).label
    except ValueError:
        return check


def print_check_result(result: CheckResult, quiet: bool = False) -> None:
    """Print a result as a table of violations followed by a one-line summary."""
    label = _label(result.check)
    if not result.violations:
        if not quiet:
            console.print(f"[green]✓[/] {label}: no violations ({result.files_checked} files checked)")
        return

    table = Table(title=f"{label}", show_header=True)
    table.add_column("Severity", style="bold", width=8)
    table.add_column("Location", style="cyan")
    table.add_column("Message")
    table.add_column("Suggestion", style="dim")

    for violation in sorted(result.violations, key=lambda v: (SEVERITY_ORDER[v.severity], v.file, v.line or 0)):
        if quiet and violation.severity == Severity.INFO:
            continue
        color = SEVERITY_COLORS[violation.severity]
        table.add_row(
            f"[{color}]{violation.severity.value}[/]",
            violation.location,
            violation.message,
            violation.suggestion or "",
        )

    console.print(table)
    console.print(_summary_line(result.error_count, result.warning_count, result.info_count))
    console.print()


def _summary_line(errors: int, warnings: int, info: int) -> str:
    parts = []
    if errors:
        parts.append(f"[red]{errors} errors[/]")
    if warnings:
        parts.append(f"[yellow]{warnings} warnings[/]")
    if info:
        parts.append(f"[blue]{info} info[/]")
    return f"[bold]Summary:[/] {', '.join(parts) or '[green]clean[/]'}"


def print_report(report: EnforcementReport) -> None:
    for result in report.results:
        print_check_result(result)

    counts = summarize(report)
    console.print(_summary_line(counts["error"], counts["warning"], counts["info"]))
    if report.blocked:
        console.print(Panel(
            f"[bold red]Blocked by:[/] {', '.join(_label(c) for c in report.blocking_checks)}\n"
            f"[dim]Enforcement level: {report.level}[/]",
            title="[bold red]Blocked[/]",
            border_style="red",
        ))


def _load_report_or_exit(
    path: Path,
    checks: list[str] | None = None,
    files: list[str] | None = None,
    config: EnforcementConfig | None = None,
    record_metrics: bool = True,
) -> EnforcementReport:
    try:
        return run_checks(path, checks=checks, files=files, config=config, record_metrics=record_metrics)
    except (FileNotFoundError, NotADirectoryError, ValueError) as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)


def _echo_json(data: object) -> None:
    typer.echo(json.dumps(data, indent=2))


# =============================================================================
# Check Commands
# =============================================================================

@app.command()
def check(
    path: PathArgument = Path("."),
    only: Annotated[
        list[str] | None,
        typer.Option("--only", "-o", help="Run only this check (repeatable), e.g. fileNaming."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format; json is meant for editors."),
    ] = OutputFormat.TABLE,
    staged: Annotated[
        bool,
        typer.Option("--staged", help="Only check files staged in git."),
    ] = False,
) -> None:
    """
    Run every enabled check and report.

    Exits with code 1 when the enforcement level says the result blocks.

    [bold]Example:[/]

        patternenforcer check .
        patternenforcer check --only bannedDocs --format json
    """
    files = None
    if staged:
        try:
            files = staged_files(path)
        except RuntimeError as e:
            rprint(f"[red]Error:[/] {e}")
            raise typer.Exit(1)

    report = _load_report_or_exit(path, checks=only, files=files)

    if output_format == OutputFormat.JSON:
        _echo_json({**report.to_dict(), "summary": summarize(report)})
    else:
        print_report(report)

    if report.blocked:
        raise typer.Exit(1)


def _run_single(check_name: CheckName, path: Path, json_output: bool, quiet: bool) -> None:
    """Run one check regardless of whether it is enabled; exit 1 on any violation."""
    config = EnforcementConfig.load(path)
    config.enable(check_name)

    report = _load_report_or_exit(path, checks=[check_name.value], config=config, record_metrics=False)
    result = report.results[0]

    if json_output:
        _echo_json(result.to_dict())
    else:
        print_check_result(result, quiet=quiet)

    if result.violations:
        raise typer.Exit(1)


JsonOption = Annotated[bool, typer.Option("--json", help="Print JSON instead of a table.")]
QuietOption = Annotated[bool, typer.Option("--quiet", "-q", help="Hide info findings and success lines.")]


@app.command()
def naming(path: PathArgument = Path("."), json_output: JsonOption = False, quiet: QuietOption = False) -> None:
    """Check for versioned file names such as [cyan]button_v2.tsx[/]."""
    _run_single(CheckName.FILE_NAMING, path, json_output, quiet)


@app.command()
def docs(path: PathArgument = Path("."), json_output: JsonOption = False, quiet: QuietOption = False) -> None:
    """Check markdown style: banned phrases, line length, structure."""
    _run_single(CheckName.DOCUMENTATION, path, json_output, quiet)


@app.command()
def banned(
    path: PathArgument = Path("."),
    json_output: JsonOption = False,
    quiet: QuietOption = False,
    fix: Annotated[bool, typer.Option("--fix", help="Not supported; banned documents need a human decision.")] = False,
) -> None:
    """Check for status/completion documents such as [cyan]SETUP_COMPLETE.md[/]."""
    if fix:
        rprint("[red]Error:[/] Automatic fixing is not supported for banned documents. "
               "Merge their content into existing docs and delete them.")
        raise typer.Exit(1)
    _run_single(CheckName.BANNED_DOCS, path, json_output, quiet)


@app.command()
def imports(path: PathArgument = Path("."), json_output: JsonOption = False, quiet: QuietOption = False) -> None:
    """Check JavaScript/TypeScript import style."""
    _run_single(CheckName.IMPORTS, path, json_output, quiet)


@app.command()
def root(path: PathArgument = Path("."), json_output: JsonOption = False, quiet: QuietOption = False) -> None:
    """Check that the project root only holds expected files and directories."""
    _run_single(CheckName.ROOT_FILES, path, json_output, quiet)


# =============================================================================
# Fixer Commands
# =============================================================================

@app.command()
def logs(
    path: PathArgument = Path("."),
    fix: Annotated[bool, typer.Option("--fix", help="Replace print/console calls with logger calls.")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="With --fix, only show what would change.")] = False,
    preferred_logger: Annotated[
        str,
        typer.Option("--logger", help="JS logger to add when a file has none: winston, pino or bunyan."),
    ] = "winston",
    json_output: JsonOption = False,
) -> None:
    """
    Find [cyan]print()[/] and [cyan]console.*[/] calls that should use a logger.

    Exits with code 1 when violations remain and [bold]--fix[/] was not given.
    """
    if not path.is_dir():
        rprint(f"[red]Error:[/] Project path is not a directory: {path}")
        raise typer.Exit(1)
    try:
        report = enforce_logging(path.resolve(), fix=fix, dry_run=dry_run, preferred_logger=preferred_logger)
    except ValueError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    if json_output:
        _echo_json(report.to_dict())
    else:
        table = Table(title="Log Enforcement", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Files found", str(report.total_files))
        table.add_row("Files excluded", str(report.excluded_files))
        table.add_row("Files analyzed", str(report.analyzed_files))
        table.add_row("Files with violations", str(report.files_with_violations))
        table.add_row("Total violations", str(report.total_violations))
        for rule, count in sorted(report.violations_by_type.items()):
            table.add_row(f"  {rule}", str(count))
        for reason, count in sorted(report.exclusion_reasons.items()):
            table.add_row(f"Excluded ({reason})", str(count))
        console.print(table)

        if report.fixed_files:
            verb = "Would fix" if dry_run else "Fixed"
            console.print(f"[bold]{verb}:[/] {', '.join(report.fixed_files)}")

    if report.violations and not fix:
        raise typer.Exit(1)


@app.command()
def config(
    path: PathArgument = Path("."),
    fix: Annotated[bool, typer.Option("--fix", help="Apply available fixes (files are backed up first).")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="With --fix, only show what would change.")] = False,
    no_cache: Annotated[bool, typer.Option("--no-cache", help="Clear cached validation results and revalidate.")] = False,
    json_output: JsonOption = False,
) -> None:
    """
    Validate package.json, tsconfig, env/ignore files, workflows and compose files.

    Exits with code 1 when a file has errors or warnings and [bold]--fix[/] was not given.
    """
    if not path.is_dir():
        rprint(f"[red]Error:[/] Project path is not a directory: {path}")
        raise typer.Exit(1)

    root = path.resolve()
    if no_cache:
        ValidationCache(root).clear()

    report = enforce_config_files(root, fix=fix, dry_run=dry_run, use_cache=not no_cache)

    if json_output:
        _echo_json({
            "results": [r.to_dict() for r in report.results],
            "fixedFiles": report.fixed_files,
            "cachedFiles": report.cached_files,
        })
    else:
        print_check_result(report.to_check_result())
        if report.fixed_files:
            verb = "Would fix" if dry_run else "Fixed"
            console.print(f"[bold]{verb}:[/] {', '.join(report.fixed_files)}")
        if report.backups:
            console.print(f"[dim]Backups written to {report.backups[0].parent}[/]")

    if report.invalid_files and not fix:
        raise typer.Exit(1)


@app.command("install-hooks")
def install_hooks(
    path: PathArgument = Path("."),
    force: Annotated[bool, typer.Option("--force", help="Replace an existing pre-commit hook.")] = False,
) -> None:
    """Install the git pre-commit hook."""
    try:
        hook_path = install_pre_commit_hook(path.resolve(), force=force)
    except (FileNotFoundError, FileExistsError) as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/] Installed {hook_path}")
    console.print(f"[dim]Skip once with {SKIP_ENV_VAR}=1 git commit ...[/]")


# =============================================================================
# Generate Commands
# =============================================================================

def prompt_component_type() -> str:
    """Interactively choose a component type."""
    choices = [
        questionary.Choice(
            title=f"{info.label:<12} - {info.description}",
            value=key,
        )
        for key, info in COMPONENT_TYPES.items()
    ]

    result = questionary.select(
        "What type of component?",
        choices=choices,
        default="display",
    ).ask()

    if result is None:
        raise typer.Abort()

    return result


@generate_app.command("component")
def generate_component(
    name: Annotated[str, typer.Argument(help="Component name in PascalCase, e.g. UserCard")],
    component_type: Annotated[
        str | None,
        typer.Option("--type", "-t", help=f"Component type: {', '.join(COMPONENT_TYPES)}"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Parent directory (default: $COMPONENTS_DIR or components)"),
    ] = None,
    no_storybook: Annotated[bool, typer.Option("--no-storybook", help="Skip the Storybook story.")] = False,
    with_docs: Annotated[bool, typer.Option("--docs", help="Generate a README for the component.")] = False,
    force: Annotated[bool, typer.Option("--force", help="Overwrite existing files.")] = False,
) -> None:
    """
    Generate a React component with tests, styles and stories.

    [bold]Example:[/]

        patternenforcer generate component UserCard --type display
    """
    if component_type is None:
        component_type = prompt_component_type() if sys.stdin.isatty() else "display"

    try:
        result = create_component(
            name,
            output_dir,
            component_type=component_type,
            storybook=not no_storybook,
            docs=with_docs,
            force=force,
        )
    except (ValueError, OSError) as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    if not result.success:
        raise typer.Exit(1)


@generate_app.command("feature")
def generate_feature(
    name: Annotated[str, typer.Argument(help="Feature name, e.g. UserProfile")],
    output_dir: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Parent directory (default: $FEATURES_DIR or src/features)"),
    ] = None,
    no_api: Annotated[bool, typer.Option("--no-api", help="Skip the API service.")] = False,
    no_components: Annotated[bool, typer.Option("--no-components", help="Skip the view component.")] = False,
    no_hooks: Annotated[bool, typer.Option("--no-hooks", help="Skip the hooks.")] = False,
    no_store: Annotated[bool, typer.Option("--no-store", help="Skip the store/context.")] = False,
    no_tests: Annotated[bool, typer.Option("--no-tests", help="Skip the tests.")] = False,
    force: Annotated[bool, typer.Option("--force", help="Overwrite existing files.")] = False,
) -> None:
    """
    Generate a feature module with API, store, hooks, components and tests.

    [bold]Example:[/]

        patternenforcer generate feature UserProfile --no-tests
    """
    try:
        result = create_feature(
            name,
            output_dir,
            api=not no_api,
            components=not no_components,
            hooks=not no_hooks,
            store=not no_store,
            tests=not no_tests,
            force=force,
        )
    except (ValueError, OSError) as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    if not result.success:
        raise typer.Exit(1)


# =============================================================================
# Enforcement Commands
# =============================================================================

ProjectOption = Annotated[
    Path,
    typer.Option("--path", "-p", help="Project root", file_okay=False, dir_okay=True),
]


@enforcement_app.command("status")
def enforcement_status(path: ProjectOption = Path(".")) -> None:
    """Show the enforcement level and per-check settings."""
    enforcement = EnforcementConfig.load(path)

    console.print(Panel(
        f"[bold]Level:[/] [cyan]{enforcement.level.name}[/] - {enforcement.level.description}\n"
        f"[dim]Source: {enforcement.source or 'defaults'}"
        f"{' | meta project' if enforcement.meta_project else ''}[/]",
        title="[bold]Enforcement[/]",
        border_style="blue",
    ))

    table = Table(show_header=True)
    table.add_column("Check", style="cyan")
    table.add_column("Enabled")
    table.add_column("Blocks now")
    table.add_column("Level")
    table.add_column("Ignored", style="dim")

    for name in CheckName:
        check_config = enforcement.check_config(name)
        if check_config is None:
            continue
        table.add_row(
            f"{name.value}",
            "[green]yes[/]" if check_config.enabled else "[red]no[/]",
            "[red]yes[/]" if enforcement.should_block(name) else "no",
            check_config.level.name,
            str(len(check_config.ignore_patterns)) if check_config.ignore_patterns else "",
        )

    console.print(table)


@enforcement_app.command("set-level")
def enforcement_set_level(
    level: Annotated[str, typer.Argument(help="SILENT, WARNING, PARTIAL or FULL (or 0-3)")],
    path: ProjectOption = Path("."),
) -> None:
    """Change the global enforcement level."""
    enforcement = EnforcementConfig.load(path)
    try:
        enforcement.set_level(level)
    except ValueError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)
    saved = enforcement.save(path)
    console.print(f"[green]✓[/] Enforcement level set to [cyan]{enforcement.level.name}[/] in {saved}")


def _toggle_check(check_name: str, path: Path, enabled: bool) -> None:
    enforcement = EnforcementConfig.load(path)
    try:
        name = CheckName.parse(check_name)
    except ValueError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)
    if enabled:
        enforcement.enable(name)
    else:
        enforcement.disable(name)
    saved = enforcement.save(path)
    console.print(f"[green]✓[/] {name.label} {'enabled' if enabled else 'disabled'} in {saved}")


@enforcement_app.command("enable")
def enforcement_enable(
    check_name: Annotated[str, typer.Argument(metavar="CHECK", help="Check name, e.g. fileNaming")],
    path: ProjectOption = Path("."),
) -> None:
    """Enable a check."""
    _toggle_check(check_name, path, enabled=True)


@enforcement_app.command("disable")
def enforcement_disable(
    check_name: Annotated[str, typer.Argument(metavar="CHECK", help="Check name, e.g. fileNaming")],
    path: ProjectOption = Path("."),
) -> None:
    """Disable a check."""
    _toggle_check(check_name, path, enabled=False)


@enforcement_app.command("metrics")
def enforcement_metrics(path: ProjectOption = Path(".")) -> None:
    """Show runs and violations per check over the retained period."""
    enforcement = EnforcementConfig.load(path)
    totals = MetricsStore(path, enforcement.metrics).totals()
    if not totals:
        console.print("[dim]No metrics recorded yet.[/]")
        return

    table = Table(title="Enforcement Metrics", show_header=True)
    table.add_column("Check", style="cyan")
    table.add_column("Runs", justify="right")
    table.add_column("Violations", justify="right")
    table.add_column("Per run", justify="right", style="dim")
    for name, counts in sorted(totals.items()):
        runs = counts["runs"]
        table.add_row(name, str(runs), str(counts["violations"]), f"{counts['violations'] / runs:.1f}" if runs else "-")
    console.print(table)


# =============================================================================
# Hook Commands
# =============================================================================

@hook_app.command("pre-commit")
def hook_pre_commit(path: ProjectOption = Path(".")) -> None:
    """Check staged files; exit 1 to abort the commit when blocked."""
    if should_skip():
        console.print(f"[yellow]⚠[/] Pattern checks skipped ({SKIP_ENV_VAR}=1)")
        return

    try:
        report = run_pre_commit(path.resolve())
    except RuntimeError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    print_report(report)
    if report.blocked:
        console.print(f"[dim]Fix the issues above, or bypass once with {SKIP_ENV_VAR}=1[/]")
        raise typer.Exit(1)


@hook_app.command("pre-tool-use")
def hook_pre_tool_use(path: ProjectOption = Path(".")) -> None:
    """
    Read a PreToolUse JSON payload from stdin and allow or block the write.

    Exits with code 2 (reason on stderr) when the write is blocked.
    """
    raw = sys.stdin.read()
    try:
        payload = json.loads(raw) if raw.strip() else {}
    except json.JSONDecodeError as e:
        logger.warning("Could not parse tool payload, allowing: %s", e)
        return

    decision = evaluate_tool_use(payload, path)
    if not decision.allowed:
        typer.echo(decision.reason, err=True)
        raise typer.Exit(decision.exit_code)


if __name__ == "__main__":
    app()
