"""
patternenforcer.hooks - Git and Editor Hooks
============================================

Two integration points:

- **git pre-commit**: :func:`run_pre_commit` runs the enforcer over the
  staged files. :func:`install_pre_commit_hook` writes a
  ``.git/hooks/pre-commit`` script that calls ``patternenforcer hook
  pre-commit``. Set ``SKIP_CLAUDE_CHECK=1`` to bypass it for one commit.
- **editor tool hook**: :func:`evaluate_tool_use` inspects the JSON an AI
  coding tool sends before it writes a file (a "PreToolUse" payload) and
  decides whether to let the write happen. A blocked write exits with
  code 2 and the reason on stderr, which the tool shows to the model.

Example payload::

    {
      "tool_name": "Write",
      "tool_input": {"file_path": "/repo/docs/SETUP_COMPLETE.md", "content": "..."}
    }
"""

from __future__ import annotations

import logging
import os
import stat
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from patternenforcer.documents import find_banned_content, is_banned_filename
from patternenforcer.enforcer import EnforcementReport, run_checks
from patternenforcer.models import EnforcementConfig
from patternenforcer.naming import find_naming_violation, suggest_better_name
from patternenforcer.rootfiles import is_allowed_root_file, is_forbidden_new_path


logger = logging.getLogger(__name__)

SKIP_ENV_VAR = "SKIP_CLAUDE_CHECK"
HOOK_MARKER = "# installed by patternenforcer"
PRE_COMMIT_SCRIPT = f"""#!/bin/sh
{HOOK_MARKER}
# Bypass once with: {SKIP_ENV_VAR}=1 git commit ...
exec patternenforcer hook pre-commit
"""

BLOCKED_EXIT_CODE = 2


# =============================================================================
# Git Pre-Commit
# =============================================================================

def should_skip(environ: Mapping[str, str] | None = None) -> bool:
    return (environ if environ is not None else os.environ).get(SKIP_ENV_VAR) == "1"


def staged_files(root: Path) -> list[str]:
    """
    List files staged for commit, excluding deletions.

    Paths are relative to ``root``; staged files outside it are left out,
    so ``root`` may be a subdirectory of the repository.

    Raises
    ------
    RuntimeError
        If git is missing or the command fails (e.g. not a repository).
    """
    try:
        completed = subprocess.run(
            ["git", "diff", "--cached", "--name-only", "--relative", "--diff-filter=d"],
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise RuntimeError("git is not installed or not on PATH") from e
    except subprocess.CalledProcessError as e:
        raise RuntimeError(f"git diff failed: {e.stderr.strip() or e}") from e
    return [line.strip() for line in completed.stdout.splitlines() if line.strip()]


def run_pre_commit(
    root: Path,
    files: Iterable[str] | None = None,
    config: EnforcementConfig | None = None,
) -> EnforcementReport:
    """Run the enabled checks over ``files`` (default: the staged files)."""
    file_list = list(files) if files is not None else staged_files(root)
    logger.debug("Pre-commit check of %d staged files", len(file_list))
    return run_checks(root, files=file_list, config=config)


def install_pre_commit_hook(root: Path, force: bool = False) -> Path:
    """
    Write ``.git/hooks/pre-commit`` and make it executable.

    Re-installing over a hook this function wrote is always allowed.

    Raises
    ------
    FileNotFoundError
        If ``root`` is not the top of a git repository.

    FileExistsError
        If another pre-commit hook exists and ``force`` is False.
    """
    git_dir = root / ".git"
    if not git_dir.is_dir():
        raise FileNotFoundError(f"Not a git repository (no .git directory): {root}")

    hooks_dir = git_dir / "hooks"
    hooks_dir.mkdir(exist_ok=True)
    hook_path = hooks_dir / "pre-commit"

    if hook_path.exists() and not force:
        existing = hook_path.read_text(encoding="utf-8", errors="replace")
        if HOOK_MARKER not in existing:
            raise FileExistsError(f"A pre-commit hook already exists: {hook_path} (use --force to replace it)")

    hook_path.write_text(PRE_COMMIT_SCRIPT, encoding="utf-8")
    hook_path.chmod(hook_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return hook_path


# =============================================================================
# Editor Tool Hook
# =============================================================================

@dataclass
class HookDecision:
    """Whether a tool call may proceed, and why not."""

    allowed: bool
    reason: str = ""

    @property
    def exit_code(self) -> int:
        return 0 if self.allowed else BLOCKED_EXIT_CODE


def _tool_input(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    tool_input = payload.get("tool_input")
    return tool_input if isinstance(tool_input, Mapping) else payload


def _written_content(tool_input: Mapping[str, Any]) -> str | None:
    for key in ("content", "new_string"):
        value = tool_input.get(key)
        if isinstance(value, str):
            return value
    edits = tool_input.get("edits")
    if isinstance(edits, list):
        return "\n".join(e["new_string"] for e in edits if isinstance(e, Mapping) and isinstance(e.get("new_string"), str))
    return None


def evaluate_tool_use(
    payload: Mapping[str, Any],
    root: Path,
    config: EnforcementConfig | None = None,
) -> HookDecision:
    """
    Decide whether a file write requested by an editor tool may proceed.

    Parameters
    ----------
    payload : Mapping[str, Any]
        The decoded PreToolUse JSON. The target comes from
        ``tool_input.file_path`` or a top-level ``file_path``.

    root : Path
        Project root; targets outside it are always allowed.

    config : EnforcementConfig | None
        Configuration; loaded from ``root`` when omitted. Only
        ``meta_project`` is consulted.

    Returns
    -------
    HookDecision
    """
    if not isinstance(payload, Mapping):
        logger.warning("Ignoring malformed tool payload of type %s", type(payload).__name__)
        return HookDecision(allowed=True)

    tool_input = _tool_input(payload)
    file_path = tool_input.get("file_path")
    if not isinstance(file_path, str) or not file_path:
        logger.warning("Tool payload has no file_path; allowing")
        return HookDecision(allowed=True)

    root = root.resolve()
    target = Path(file_path)
    if not target.is_absolute():
        target = root / target
    try:
        rel_path = target.resolve().relative_to(root).as_posix()
    except ValueError:
        return HookDecision(allowed=True)

    is_new = not target.exists()
    name = PurePosixPath(rel_path).name

    if is_new:
        marker = find_naming_violation(rel_path)
        if marker is not None:
            return HookDecision(
                allowed=False,
                reason=(
                    f"Blocked: '{rel_path}' carries a '_{marker}' version marker. "
                    f"Edit the original file instead (e.g. {suggest_better_name(rel_path)})."
                ),
            )

    is_markdown = name.lower().endswith(".md")
    if is_new and is_markdown:
        banned = is_banned_filename(name)
        if banned is not None:
            reason, suggestion = banned
            return HookDecision(allowed=False, reason=f"Blocked: {reason}. {suggestion}.")

    if is_new and "/" not in rel_path and not is_allowed_root_file(name):
        return HookDecision(
            allowed=False,
            reason=f"Blocked: '{name}' is not an allowed root-level file. Put it in a subdirectory such as docs/ or scripts/.",
        )

    if is_new and is_forbidden_new_path(rel_path):
        config = config or EnforcementConfig.load(root)
        if config.meta_project:
            top = PurePosixPath(rel_path).parts[0]
            return HookDecision(
                allowed=False,
                reason=f"Blocked: this is a meta project; application code does not belong in '{top}/' at the root.",
            )

    if is_markdown:
        content = _written_content(tool_input)
        hit = find_banned_content(content) if content else None
        if hit is not None:
            line, text = hit
            return HookDecision(
                allowed=False,
                reason=f"Blocked: status/completion heading on line {line}: {text!r}. Update existing docs instead.",
            )

    return HookDecision(allowed=True)
