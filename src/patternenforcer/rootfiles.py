"""
patternenforcer.rootfiles - Root Directory Hygiene
==================================================

Keeps the project root limited to well-known files (README, manifests,
tool configuration) and directories. Anything else, such as a stray
``AUDIT_NOTES.md`` or ``debug.log``, gets a suggestion of where it
belongs.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

from patternenforcer.findings import CheckResult, Severity, Violation
from patternenforcer.models import CheckName


ALLOWED_ROOT_FILES: frozenset[str] = frozenset({
    # Core documentation
    "README.md",
    "LICENSE",
    "CLAUDE.md",
    "CONTRIBUTING.md",
    "CHANGELOG.md",
    "SETUP.md",
    "FRICTION-MAPPING.md",
    "QUICK-START.md",
    "USER-JOURNEY.md",
    "FULL-GUIDE.md",
    "DOCS_INDEX.md",
    # Node.js
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    # Python
    "requirements.txt",
    "requirements-dev.txt",
    "Pipfile",
    "Pipfile.lock",
    "poetry.lock",
    "uv.lock",
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    # Other languages
    "Gemfile",
    "Gemfile.lock",
    "go.mod",
    "go.sum",
    "Cargo.toml",
    "Cargo.lock",
    # Configuration
    ".gitignore",
    ".aiignore",
    ".cursorrules",
    ".env.example",
    ".nvmrc",
    ".editorconfig",
    ".prettierrc",
    ".prettierrc.json",
    ".prettierignore",
    ".eslintrc.json",
    ".eslintrc.js",
    ".eslintignore",
    ".pre-commit-config.yaml",
    "tsconfig.json",
    "jest.config.js",
    "vite.config.js",
    "vite.config.ts",
    "webpack.config.js",
    "next.config.js",
    "nuxt.config.js",
    "astro.config.mjs",
    "svelte.config.js",
    ".enforcement-config.json",
    ".enforcement-metrics.json",
    # CI/CD
    "Dockerfile",
    "docker-compose.yml",
    "docker-compose.yaml",
    ".dockerignore",
    "Makefile",
    "Procfile",
    ".gitlab-ci.yml",
    ".travis.yml",
    "Jenkinsfile",
    "netlify.toml",
    "vercel.json",
    # Monorepo tools
    "lerna.json",
    "nx.json",
    "pnpm-workspace.yaml",
    "rush.json",
    "turbo.json",
    "workspace.json",
})

ALLOWED_ROOT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\.env\..*$"),
    re.compile(r"^\..*rc$"),
    re.compile(r"^\..*rc\.(json|js|yml)$"),
    re.compile(r"^\..*ignore$"),
    re.compile(r"^.*\.config\.(js|ts|json|mjs)$"),
)

ALLOWED_ROOT_DIRS: frozenset[str] = frozenset({
    ".github",
    ".vscode",
    ".idea",
    ".husky",
    ".ai-compiled",
    ".ai-context",
    ".claude",
    ".context-cache",
    ".config-enforcer-cache",
    ".config-enforcer-backups",
    ".venv",
    "venv",
    "src",
    "docs",
    "tests",
    "scripts",
    "config",
    "public",
    "assets",
    "static",
    "tools",
    "templates",
    "examples",
    "starters",
    "extensions",
    "ai",
    "dist",
    "build",
    ".next",
    "out",
    "node_modules",
    ".git",
})

# Application directories a meta project (a template collection) keeps out of its root
FORBIDDEN_ROOT_DIRS: frozenset[str] = frozenset({
    "components",
    "src",
    "app",
    "pages",
    "lib",
    "config",
    "tests",
})


def is_allowed_root_file(name: str) -> bool:
    return name in ALLOWED_ROOT_FILES or any(p.match(name) for p in ALLOWED_ROOT_PATTERNS)


def suggest_location(name: str) -> str:
    """
    Suggest where a misplaced root file belongs.

    Examples
    --------
    >>> suggest_location("AUDIT_NOTES.md")
    'Move to docs/reports/ or delete if temporary'
    >>> suggest_location("deploy.sh")
    'Move to scripts/'
    """
    lower = name.lower()
    if lower.endswith(".md"):
        if any(word in lower for word in ("summary", "report", "audit")):
            return "Move to docs/reports/ or delete if temporary"
        if "plan" in lower or "proposal" in lower:
            return "Move to docs/plans/"
        if "todo" in lower:
            return "Move to a project management tool or docs/"
        if "architecture" in lower:
            return "Move to docs/architecture/"
        if "snapshot" in lower or "debug" in lower:
            return "Delete or add to .gitignore"
        return "Move to docs/"
    if lower.endswith(".log"):
        return "Delete and add *.log to .gitignore"
    if lower.endswith(".sh"):
        return "Move to scripts/"
    return "Move to appropriate subdirectory"


def is_forbidden_new_path(rel_path: str) -> bool:
    """True when a new file at ``rel_path`` would land in a forbidden top-level directory."""
    parts = PurePosixPath(rel_path).parts
    return len(parts) > 1 and parts[0] in FORBIDDEN_ROOT_DIRS


def check_root_files(root: Path) -> CheckResult:
    """
    Check the entries directly under ``root``.

    Raises
    ------
    FileNotFoundError
        If ``root`` does not exist.
    """
    result = CheckResult(check=CheckName.ROOT_FILES.value)

    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        result.files_checked += 1
        name = entry.name
        if entry.is_dir():
            if name not in ALLOWED_ROOT_DIRS:
                result.violations.append(Violation(
                    check=result.check,
                    file=f"{name}/",
                    rule="unexpected-directory",
                    message=f"Directory '{name}' is not expected in the project root",
                    severity=Severity.INFO,
                    suggestion="Move under src/, tools/ or another standard directory",
                ))
        elif not is_allowed_root_file(name):
            result.violations.append(Violation(
                check=result.check,
                file=name,
                rule="unexpected-file",
                message=f"File '{name}' is not allowed in the project root",
                severity=Severity.WARNING,
                suggestion=suggest_location(name),
            ))

    return result
