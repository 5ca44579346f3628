"""
patternenforcer - Pattern Enforcement for AI-Assisted Projects
==============================================================

Checks, fixers, scaffolding and hooks that keep a project (and the AI
assistants working in it) on its agreed patterns.

Features
--------
- **Checks**: versioned file names, banned status documents, documentation
  style, import style, print/console logging, root directory hygiene and
  configuration files
- **Graduated enforcement**: SILENT, WARNING, PARTIAL and FULL levels decide
  which failures block a commit
- **Fixers**: replace print/console calls with loggers; repair common
  configuration file problems, with backups
- **Scaffolding**: React components and feature modules from Jinja2
  templates
- **Hooks**: a git pre-commit hook and an editor PreToolUse hook

Quick Start
-----------
```bash
pip install patternenforcer

patternenforcer check .
patternenforcer install-hooks
patternenforcer generate component UserCard --type display
```

Example
-------
>>> from pathlib import Path
>>> from patternenforcer import run_checks
>>> report = run_checks(Path("."))
>>> report.blocked
False

Architecture
------------
- ``models``: Pydantic enforcement configuration
- ``findings``: Shared violation/result types and file discovery
- ``naming``, ``documents``, ``docstyle``, ``imports``, ``logs``,
  ``rootfiles``, ``configfiles``: The individual checks
- ``enforcer``: Runs checks and applies the enforcement level
- ``metrics``: Per-day run and violation counts
- ``generator``: Component and feature scaffolding
- ``hooks``: git pre-commit and editor tool hooks
- ``cli``: Typer command line interface
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__author__ = "Technical-1"
__license__ = "MIT"


# =============================================================================
# Public API Exports
# =============================================================================

from patternenforcer.enforcer import EnforcementReport, run_checks
from patternenforcer.generator import create_component, create_feature
from patternenforcer.models import CheckName, EnforcementConfig, EnforcementLevel


__all__ = [
    # Configuration models
    "CheckName",
    "EnforcementConfig",
    "EnforcementLevel",
    # Results
    "EnforcementReport",
    "__author__",
    # Version info
    "__version__",
    # Core functions
    "create_component",
    "create_feature",
    "run_checks",
]
