"""
patternenforcer.models - Pydantic Models for Enforcement Configuration
======================================================================

This module defines the configuration that decides how strictly each check
is enforced. The configuration is persisted as ``.enforcement-config.json``
at the project root, or as a ``[tool.patternenforcer]`` table in
``pyproject.toml``.

Architecture Notes
------------------
The models are organized in a hierarchy:

    EnforcementConfig (main)
    ├── level: EnforcementLevel (global)
    ├── checks: dict[CheckName, CheckConfig]
    │   ├── enabled: bool
    │   ├── block_on_failure: bool
    │   ├── level: EnforcementLevel
    │   └── ignore_patterns: list[str]
    ├── metrics: MetricsConfig
    │   ├── enabled: bool
    │   └── log_path: str
    └── meta_project: bool

The JSON file uses camelCase keys (``blockOnFailure``, ``ignorePatterns``,
``logPath``) so that files written by other tooling keep loading.

Usage Example
-------------
>>> from patternenforcer.models import CheckName, EnforcementConfig
>>> config = EnforcementConfig()
>>> config.should_block(CheckName.FILE_NAMING)
True
>>> config.should_block(CheckName.IMPORTS)
False
"""

from __future__ import annotations

import json
import logging
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
)


try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found,no-redef]


logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".enforcement-config.json"
PYPROJECT_TABLE = "patternenforcer"


# =============================================================================
# Enumerations
# =============================================================================

class EnforcementLevel(IntEnum):
    """
    How strictly violations are acted upon.

    Levels are ordered so they can be compared directly.

    Attributes
    ----------
    SILENT : int
        Nothing is reported as blocking; metrics are still collected.

    WARNING : int
        Violations are reported but never block.

    PARTIAL : int
        Checks that opt in with ``blockOnFailure`` block.

    FULL : int
        Every enabled check blocks on failure.
    """

    SILENT = 0
    WARNING = 1
    PARTIAL = 2
    FULL = 3

    @property
    def description(self) -> str:
        """Human-readable description for status output."""
        descriptions = {
            EnforcementLevel.SILENT: "Collect metrics only",
            EnforcementLevel.WARNING: "Report violations without blocking",
            EnforcementLevel.PARTIAL: "Block checks that opt in",
            EnforcementLevel.FULL: "Block on every enabled check",
        }
        return descriptions[self]

    @classmethod
    def parse(cls, value: str | int) -> EnforcementLevel:
        """
        Parse a level from its name or number.

        Parameters
        ----------
        value : str | int
            ``"partial"``, ``"FULL"``, ``2`` or ``"2"``.

        Raises
        ------
        ValueError
            If the value names no level.
        """
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            valid = ", ".join(level.name for level in cls)
            raise ValueError(f"Unknown enforcement level '{value}'. Valid levels: {valid}") from None


class CheckName(str, Enum):
    """Names of the checks that can be configured."""

    FILE_NAMING = "fileNaming"
    IMPORTS = "imports"
    DOCUMENTATION = "documentation"
    BANNED_DOCS = "bannedDocs"
    CONFIG_FILES = "configFiles"
    LOGGING = "logging"
    ROOT_FILES = "rootFiles"

    @property
    def label(self) -> str:
        labels = {
            CheckName.FILE_NAMING: "File naming",
            CheckName.IMPORTS: "Import style",
            CheckName.DOCUMENTATION: "Documentation style",
            CheckName.BANNED_DOCS: "Banned documents",
            CheckName.CONFIG_FILES: "Config files",
            CheckName.LOGGING: "Logging",
            CheckName.ROOT_FILES: "Root files",
        }
        return labels[self]

    @classmethod
    def parse(cls, value: str) -> CheckName:
        """
        Parse a check from its value (``bannedDocs``) or enum name (``banned_docs``).

        Raises
        ------
        ValueError
            If the value names no check.
        """
        for check in cls:
            if value in {check.value, check.name, check.name.lower()}:
                return check
        valid = ", ".join(check.value for check in cls)
        raise ValueError(f"Unknown check '{value}'. Valid checks: {valid}")


DEFAULT_DOC_IGNORE_PATTERNS: list[str] = [
    "node_modules/**",
    "examples/**",
    "ai/examples/**",
    "ai/prompts/**",
    "templates/**",
    "extensions/*/node_modules/**",
    "docs/testing/**",
    "scripts/**",
    "**/README.md",
    "**/*_TEMPLATE.md",
    "docs/pilot-testing/**",
    "CLAUDE.md",
]


# =============================================================================
# Configuration Models
# =============================================================================

class CheckConfig(BaseModel):
    """
    Enforcement settings for a single check.

    Attributes
    ----------
    enabled : bool
        Disabled checks are neither run nor able to block.

    block_on_failure : bool
        Whether the check opts in to blocking at ``PARTIAL`` level.

    level : EnforcementLevel
        Minimum global level at which an opted-in check blocks.

    ignore_patterns : list[str]
        Glob patterns (relative to the root) the check skips.
    """

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    block_on_failure: bool = Field(default=False, alias="blockOnFailure")
    level: EnforcementLevel = EnforcementLevel.WARNING
    ignore_patterns: list[str] = Field(default_factory=list, alias="ignorePatterns")

    @field_validator("level", mode="before")
    @classmethod
    def parse_level(cls, v: Any) -> Any:
        """Accept level names as well as numbers."""
        if isinstance(v, str):
            return EnforcementLevel.parse(v)
        return v


class MetricsConfig(BaseModel):
    """Where and whether enforcement metrics are recorded."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    log_path: str = Field(default=".enforcement-metrics.json", alias="logPath")


def default_checks() -> dict[CheckName, CheckConfig]:
    """Build the default per-check configuration."""
    return {
        CheckName.FILE_NAMING: CheckConfig(
            block_on_failure=True, level=EnforcementLevel.PARTIAL
        ),
        CheckName.IMPORTS: CheckConfig(
            block_on_failure=False, level=EnforcementLevel.WARNING
        ),
        CheckName.DOCUMENTATION: CheckConfig(
            block_on_failure=False,
            level=EnforcementLevel.WARNING,
            ignore_patterns=list(DEFAULT_DOC_IGNORE_PATTERNS),
        ),
        CheckName.BANNED_DOCS: CheckConfig(
            block_on_failure=True, level=EnforcementLevel.FULL
        ),
        CheckName.CONFIG_FILES: CheckConfig(
            block_on_failure=False, level=EnforcementLevel.WARNING
        ),
        CheckName.LOGGING: CheckConfig(
            block_on_failure=False, level=EnforcementLevel.WARNING
        ),
        CheckName.ROOT_FILES: CheckConfig(
            block_on_failure=False, level=EnforcementLevel.WARNING
        ),
    }


class EnforcementConfig(BaseModel):
    """
    Complete enforcement configuration for a project.

    This is the model that ``patternenforcer enforcement`` edits and that
    the enforcer consults to decide whether a failed check blocks.

    Attributes
    ----------
    level : EnforcementLevel
        Global enforcement level.

    checks : dict[CheckName, CheckConfig]
        Per-check settings.

    metrics : MetricsConfig
        Metrics collection settings.

    meta_project : bool
        The project is a template collection rather than an application,
        so editor hooks refuse new files in application directories such
        as ``src/`` and ``components/`` at the root.

    Examples
    --------
    >>> config = EnforcementConfig(level=EnforcementLevel.WARNING)
    >>> config.should_block(CheckName.BANNED_DOCS)
    False
    """

    model_config = ConfigDict(populate_by_name=True)

    level: EnforcementLevel = EnforcementLevel.PARTIAL
    checks: dict[CheckName, CheckConfig] = Field(default_factory=default_checks)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    meta_project: bool = Field(default=False, alias="metaProject")

    _source: Path | None = PrivateAttr(default=None)

    @field_validator("level", mode="before")
    @classmethod
    def parse_level(cls, v: Any) -> Any:
        """Accept level names as well as numbers."""
        if isinstance(v, str):
            return EnforcementLevel.parse(v)
        return v

    @property
    def source(self) -> Path | None:
        """File this configuration was loaded from, if any."""
        return self._source

    # -------------------------------------------------------------------------
    # Enforcement decisions
    # -------------------------------------------------------------------------

    def check_config(self, check: CheckName) -> CheckConfig | None:
        return self.checks.get(check)

    def is_enabled(self, check: CheckName) -> bool:
        check_config = self.checks.get(check)
        return check_config is not None and check_config.enabled

    def should_block(self, check: CheckName) -> bool:
        """
        Decide whether a failure of ``check`` should block.

        Parameters
        ----------
        check : CheckName
            The check that failed.

        Returns
        -------
        bool
            False for unknown or disabled checks and below ``PARTIAL``;
            True at ``FULL``; otherwise the check's own opt-in and level.
        """
        check_config = self.checks.get(check)
        if check_config is None or not check_config.enabled:
            return False
        if self.level < EnforcementLevel.PARTIAL:
            return False
        if self.level >= EnforcementLevel.FULL:
            return True
        return check_config.block_on_failure and self.level >= check_config.level

    def set_level(self, level: EnforcementLevel | str | int) -> None:
        self.level = EnforcementLevel.parse(level)

    def enable(self, check: CheckName) -> None:
        self.checks.setdefault(check, CheckConfig()).enabled = True

    def disable(self, check: CheckName) -> None:
        self.checks.setdefault(check, CheckConfig()).enabled = False

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used on disk."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> EnforcementConfig:
        """
        Build a configuration from user data merged over the defaults.

        Top-level keys replace the defaults. Entries of ``checks`` are merged
        key by key into the matching default check, so a user file that only
        mentions one check keeps the defaults of the others. Unknown check
        names are dropped with a warning. Keys may be written as aliases
        (``blockOnFailure``) or as field names (``block_on_failure``).

        Raises
        ------
        pydantic.ValidationError
            If a value has the wrong type.
        """
        merged = cls().to_dict()
        for key, value in _alias_keys(cls, data).items():
            if key == "checks" and isinstance(value, dict):
                for name, overrides in value.items():
                    try:
                        check = CheckName.parse(name)
                    except ValueError:
                        logger.warning("Ignoring unknown check '%s' in configuration", name)
                        continue
                    if not isinstance(overrides, dict):
                        logger.warning("Ignoring non-table settings for check '%s'", name)
                        continue
                    merged["checks"][check.value] = {
                        **merged["checks"].get(check.value, {}),
                        **_alias_keys(CheckConfig, overrides),
                    }
            else:
                merged[key] = value
        return cls.model_validate(merged)

    @classmethod
    def load(cls, root: Path) -> EnforcementConfig:
        """
        Load the configuration for the project at ``root``.

        ``.enforcement-config.json`` wins over ``[tool.patternenforcer]`` in
        ``pyproject.toml``. Unreadable or invalid configuration is reported
        as a warning and the defaults are used instead.
        """
        data, source = _read_user_config(root)
        if data is None:
            return cls()

        try:
            config = cls.from_mapping(data)
        except (ValidationError, ValueError) as e:
            logger.warning("Invalid enforcement configuration in %s, using defaults: %s", source, e)
            return cls()

        config._source = source
        return config

    def save(self, root: Path) -> Path:
        """
        Persist the configuration and return the file written.

        A configuration that was loaded from ``pyproject.toml`` is written
        back into its ``[tool.patternenforcer]`` table with tomlkit so the
        rest of the file keeps its formatting. Otherwise
        ``.enforcement-config.json`` is written.
        """
        if self._source is not None and self._source.name == "pyproject.toml":
            _write_pyproject_table(self._source, self.to_dict())
            return self._source

        path = root / CONFIG_FILENAME
        path.write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
        self._source = path
        return path


# =============================================================================
# File Helpers
# =============================================================================

def _alias_keys(model: type[BaseModel], data: dict[str, Any]) -> dict[str, Any]:
    """Rename field-name keys (``block_on_failure``) to their aliases (``blockOnFailure``)."""
    aliases = {name: info.alias for name, info in model.model_fields.items() if info.alias}
    return {aliases.get(key, key): value for key, value in data.items()}


def _read_user_config(root: Path) -> tuple[dict[str, Any] | None, Path | None]:
    """Return the raw user configuration and the file it came from."""
    json_path = root / CONFIG_FILENAME
    if json_path.is_file():
        try:
            data = json.loads(json_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s, using defaults: %s", json_path, e)
            return None, None
        if not isinstance(data, dict):
            logger.warning("%s must contain a JSON object, using defaults", json_path)
            return None, None
        return data, json_path

    pyproject_path = root / "pyproject.toml"
    if pyproject_path.is_file():
        try:
            with pyproject_path.open("rb") as f:
                pyproject = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Could not read %s, using defaults: %s", pyproject_path, e)
            return None, None
        table = pyproject.get("tool", {}).get(PYPROJECT_TABLE)
        if isinstance(table, dict):
            return table, pyproject_path

    return None, None


def _write_pyproject_table(path: Path, data: dict[str, Any]) -> None:
    """Replace the ``[tool.patternenforcer]`` table in a pyproject file."""
    doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    if "tool" not in doc:
        doc["tool"] = tomlkit.table(is_super_table=True)
    doc["tool"][PYPROJECT_TABLE] = data  # type: ignore[index]
    path.write_text(tomlkit.dumps(doc), encoding="utf-8")
