"""
patternenforcer.generator - React Component and Feature Scaffolding
===================================================================

Renders Jinja2 templates into React/TypeScript components and feature
modules that already follow the project's conventions: PascalCase
component files, co-located tests and CSS modules, barrel ``index.ts``
exports.

Architecture
------------
Both generators follow the same pipeline:

    1. Validate the name
    2. Work out which templates apply (``FileSpec`` list)
    3. Render each template with Jinja2
    4. Write files, skipping existing ones unless ``force``

If writing fails partway through, the files created by this run are
removed again and the error is re-raised.

Template System
---------------
Templates live in ``templates/component/`` and ``templates/feature/``.
The ``kebab_case``, ``camel_case`` and ``pascal_case`` filters are
registered on the environment.

Environment
-----------
- ``COMPONENTS_DIR``: default output directory for components
  (``components``)
- ``FEATURES_DIR``: default output directory for features
  (``src/features``)

Usage Example
-------------
>>> from patternenforcer.generator import create_component
>>> result = create_component("UserCard", component_type="display", verbose=False)
>>> [p.name for p in result.files_created]
['UserCard.tsx', 'UserCard.test.tsx', 'UserCard.module.css', 'index.ts', 'UserCard.stories.tsx']
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape
from rich.console import Console
from rich.panel import Panel


logger = logging.getLogger(__name__)


# =============================================================================
# Module-Level Configuration
# =============================================================================

console = Console()

COMPONENTS_DIR_ENV = "COMPONENTS_DIR"
FEATURES_DIR_ENV = "FEATURES_DIR"
DEFAULT_COMPONENTS_DIR = "components"
DEFAULT_FEATURES_DIR = "src/features"

COMPONENT_NAME_RE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
FEATURE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9 _-]*$")


@dataclass(frozen=True)
class ComponentType:
    """A kind of component; shapes the generated props and markup."""

    key: str
    label: str
    description: str
    examples: str


COMPONENT_TYPES: dict[str, ComponentType] = {
    "interactive": ComponentType(
        key="interactive",
        label="Interactive",
        description="Buttons, inputs, toggles - components that users interact with",
        examples="Button, TextField, Toggle, Select",
    ),
    "display": ComponentType(
        key="display",
        label="Display",
        description="Cards, lists, badges - components that display information",
        examples="Card, Badge, Avatar, Chip",
    ),
    "form": ComponentType(
        key="form",
        label="Form",
        description="Form fields with built-in validation and error handling",
        examples="FormInput, FormSelect, FormTextarea, FormCheckbox",
    ),
    "data": ComponentType(
        key="data",
        label="Data",
        description="Tables, grids, charts - components that display data sets",
        examples="DataTable, DataGrid, Chart, List",
    ),
    "overlay": ComponentType(
        key="overlay",
        label="Overlay",
        description="Modals, tooltips, popovers - components that overlay content",
        examples="Modal, Tooltip, Popover, Drawer",
    ),
}

FEATURE_PARTS: tuple[str, ...] = ("api", "store", "hooks", "components", "tests")

# Parts that only work when the listed parts are generated too
FEATURE_PART_REQUIRES: dict[str, tuple[str, ...]] = {
    "hooks": ("api", "store"),
    "components": ("hooks",),
    "tests": ("components",),
}


# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class GenerationResult:
    """
    Result of a scaffolding operation.

    Attributes
    ----------
    success : bool
        Whether generation finished.

    output_path : Path
        Directory the files were written to.

    files_created : list[Path]
        Files written by this run.

    files_skipped : list[Path]
        Files that already existed and were left alone.

    warnings : list[str]
        Non-fatal problems.

    errors : list[str]
        Errors that stopped generation.
    """

    success: bool
    output_path: Path
    files_created: list[Path] = field(default_factory=list)
    files_skipped: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FileSpec:
    """A template and the path (relative to the output directory) it renders to."""

    template: str
    path: str


# =============================================================================
# Name Transformations
# =============================================================================

def kebab_case(value: str) -> str:
    """
    Convert ``UserProfile`` or ``user_profile`` to ``user-profile``.

    >>> kebab_case("UserProfile")
    'user-profile'
    >>> kebab_case("HTTPClient")
    'http-client'
    """
    value = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1-\2", value)
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", value)
    return re.sub(r"[\s_-]+", "-", value).strip("-").lower()


def pascal_case(value: str) -> str:
    """
    >>> pascal_case("user-profile")
    'UserProfile'
    >>> pascal_case("UserProfile")
    'UserProfile'
    """
    return "".join(word[:1].upper() + word[1:] for word in re.split(r"[\s_-]+", value) if word)


def camel_case(value: str) -> str:
    """
    >>> camel_case("UserProfile")
    'userProfile'
    """
    pascal = pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


# =============================================================================
# Template Engine Setup
# =============================================================================

def create_jinja_env() -> Environment:
    """
    Create the Jinja2 environment for the scaffolding templates.

    Autoescaping is off because the output is TypeScript and CSS, not HTML.
    """
    env = Environment(
        loader=PackageLoader("patternenforcer", "templates"),
        autoescape=select_autoescape([]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["kebab_case"] = kebab_case
    env.filters["camel_case"] = camel_case
    env.filters["pascal_case"] = pascal_case
    return env


def render_files(
    env: Environment,
    specs: list[FileSpec],
    context: dict[str, Any],
) -> dict[str, str]:
    """Render every spec; keys are the output paths relative to the output directory."""
    return {spec.path: env.get_template(spec.template).render(**context) for spec in specs}


def write_files(
    output_path: Path,
    files: dict[str, str],
    result: GenerationResult,
    *,
    force: bool = False,
    verbose: bool = True,
) -> None:
    """
    Write rendered files below ``output_path``, recording them on ``result``.

    Existing files are skipped with a warning unless ``force``. On any
    error, files created so far are removed before the error propagates.
    """
    try:
        for relative_path, content in files.items():
            full_path = output_path / relative_path
            if full_path.exists() and not force:
                result.files_skipped.append(full_path)
                result.warnings.append(f"Skipped {relative_path} (already exists)")
                if verbose:
                    console.print(f"  [yellow]⚠[/] Skipping {relative_path} (already exists)")
                continue

            full_path.parent.mkdir(parents=True, exist_ok=True)
            existed = full_path.exists()
            full_path.write_text(content, encoding="utf-8")
            if not existed:
                result.files_created.append(full_path)
            if verbose:
                console.print(f"  [green]✓[/] {'Overwrote' if existed else 'Created'} {relative_path}")
    except Exception as e:
        result.errors.append(str(e))
        _cleanup(result.files_created, output_path)
        result.files_created.clear()
        raise


def _cleanup(created: list[Path], output_path: Path) -> None:
    """Remove files created by a failed run and any directories left empty."""
    for path in reversed(created):
        path.unlink(missing_ok=True)
        parent = path.parent
        while parent != output_path.parent and parent.exists() and not any(parent.iterdir()):
            parent.rmdir()
            parent = parent.parent
    logger.debug("Removed %d partially generated files", len(created))


def _resolve_output_dir(output_dir: Path | str | None, env_var: str, default: str) -> Path:
    if output_dir is not None:
        return Path(output_dir)
    return Path(os.environ.get(env_var) or default)


# =============================================================================
# Component Generation
# =============================================================================

def component_file_specs(name: str, *, storybook: bool = True, docs: bool = False) -> list[FileSpec]:
    specs = [
        FileSpec("component/component.tsx.j2", f"{name}.tsx"),
        FileSpec("component/test.tsx.j2", f"{name}.test.tsx"),
        FileSpec("component/module.css.j2", f"{name}.module.css"),
        FileSpec("component/index.ts.j2", "index.ts"),
    ]
    if storybook:
        specs.append(FileSpec("component/stories.tsx.j2", f"{name}.stories.tsx"))
    if docs:
        specs.append(FileSpec("component/README.md.j2", "README.md"))
    return specs


def create_component(
    name: str,
    output_dir: Path | str | None = None,
    *,
    component_type: str = "display",
    storybook: bool = True,
    docs: bool = False,
    force: bool = False,
    verbose: bool = True,
) -> GenerationResult:
    """
    Generate a React component in ``<output_dir>/<name>/``.

    Parameters
    ----------
    name : str
        PascalCase component name, e.g. ``UserCard``.

    output_dir : Path | str | None
        Parent directory. Defaults to ``$COMPONENTS_DIR`` or ``components``.

    component_type : str, default="display"
        One of :data:`COMPONENT_TYPES`.

    storybook : bool, default=True
        Generate ``<name>.stories.tsx``.

    docs : bool, default=False
        Generate a ``README.md`` for the component.

    force : bool, default=False
        Overwrite files that already exist.

    verbose : bool, default=True
        Print progress to the console.

    Returns
    -------
    GenerationResult

    Raises
    ------
    ValueError
        If ``name`` is not PascalCase or ``component_type`` is unknown.
    """
    if not COMPONENT_NAME_RE.match(name):
        raise ValueError(f"Component name must be PascalCase (e.g. UserCard), got '{name}'")
    type_info = COMPONENT_TYPES.get(component_type)
    if type_info is None:
        raise ValueError(
            f"Unknown component type '{component_type}'. Choose from: {', '.join(COMPONENT_TYPES)}"
        )

    output_path = _resolve_output_dir(output_dir, COMPONENTS_DIR_ENV, DEFAULT_COMPONENTS_DIR) / name
    result = GenerationResult(success=False, output_path=output_path)

    if verbose:
        console.print()
        console.print(
            Panel(
                f"[bold blue]Creating component:[/] [green]{name}[/]\n"
                f"[dim]Type: {type_info.label} | Location: {output_path}[/]",
                title="[bold]patternenforcer[/]",
                border_style="blue",
            )
        )

    context = {
        "name": name,
        "kebab_name": kebab_case(name),
        "component_type": type_info,
        "storybook": storybook,
        "date": datetime.now(timezone.utc).date().isoformat(),
    }
    files = render_files(create_jinja_env(), component_file_specs(name, storybook=storybook, docs=docs), context)
    write_files(output_path, files, result, force=force, verbose=verbose)

    result.success = True
    logger.debug("Generated component %s in %s", name, output_path)
    if verbose:
        console.print()
        console.print(f"[bold green]✨ Component {name} generated[/] ({len(result.files_created)} files)")
    return result


# =============================================================================
# Feature Generation
# =============================================================================

def feature_file_specs(name: str, parts: set[str]) -> list[FileSpec]:
    kebab = kebab_case(name)
    pascal = pascal_case(name)
    specs = [
        FileSpec("feature/index.ts.j2", "index.ts"),
        FileSpec("feature/README.md.j2", "README.md"),
        FileSpec("feature/types.ts.j2", f"types/{kebab}.types.ts"),
        FileSpec("feature/types_index.ts.j2", "types/index.ts"),
    ]
    if "api" in parts:
        specs += [
            FileSpec("feature/api.ts.j2", f"api/{kebab}.api.ts"),
            FileSpec("feature/api_index.ts.j2", "api/index.ts"),
        ]
    if "store" in parts:
        specs += [
            FileSpec("feature/store.tsx.j2", f"store/{kebab}.store.tsx"),
            FileSpec("feature/store_index.ts.j2", "store/index.ts"),
        ]
    if "hooks" in parts:
        specs += [
            FileSpec("feature/hooks.ts.j2", f"hooks/use{pascal}.ts"),
            FileSpec("feature/hooks_index.ts.j2", "hooks/index.ts"),
        ]
    if "components" in parts:
        specs += [
            FileSpec("feature/view.tsx.j2", f"components/{pascal}View.tsx"),
            FileSpec("feature/view.module.css.j2", f"components/{pascal}.module.css"),
            FileSpec("feature/components_index.ts.j2", "components/index.ts"),
        ]
    if "tests" in parts:
        specs.append(FileSpec("feature/test.tsx.j2", f"__tests__/{kebab}.test.tsx"))
    return specs


def resolve_feature_parts(requested: set[str]) -> tuple[set[str], list[str]]:
    """
    Drop parts whose prerequisites are not being generated.

    Returns
    -------
    tuple[set[str], list[str]]
        The parts to generate and a warning per dropped part.
    """
    parts = set(requested)
    warnings: list[str] = []
    for part in FEATURE_PARTS:
        missing = [req for req in FEATURE_PART_REQUIRES.get(part, ()) if req not in parts]
        if part in parts and missing:
            parts.discard(part)
            warnings.append(f"Skipped {part}: requires {', '.join(missing)}")
    return parts, warnings


def create_feature(
    name: str,
    output_dir: Path | str | None = None,
    *,
    api: bool = True,
    components: bool = True,
    hooks: bool = True,
    store: bool = True,
    tests: bool = True,
    force: bool = False,
    verbose: bool = True,
) -> GenerationResult:
    """
    Generate a feature module in ``<output_dir>/<kebab-name>/``.

    ``index.ts``, ``README.md`` and the types are always generated. The
    optional parts build on each other (hooks use the api and store,
    the view uses the hooks, tests exercise the view), so a part whose
    prerequisite is switched off is skipped with a warning.

    Raises
    ------
    ValueError
        If ``name`` is empty or contains characters other than letters,
        digits, spaces, hyphens and underscores.
    """
    if not FEATURE_NAME_RE.match(name):
        raise ValueError(f"Feature name must start with a letter and contain only letters, digits, '-' or '_', got '{name}'")

    flags = {"api": api, "components": components, "hooks": hooks, "store": store, "tests": tests}
    parts, warnings = resolve_feature_parts({part for part, enabled in flags.items() if enabled})

    output_path = _resolve_output_dir(output_dir, FEATURES_DIR_ENV, DEFAULT_FEATURES_DIR) / kebab_case(name)
    result = GenerationResult(success=False, output_path=output_path, warnings=warnings)

    if verbose:
        console.print()
        console.print(
            Panel(
                f"[bold blue]Creating feature:[/] [green]{name}[/]\n"
                f"[dim]Parts: {', '.join(p for p in FEATURE_PARTS if p in parts) or 'types only'} | "
                f"Location: {output_path}[/]",
                title="[bold]patternenforcer[/]",
                border_style="blue",
            )
        )
        for warning in warnings:
            console.print(f"  [yellow]⚠[/] {warning}")

    context = {
        "name": name,
        "pascal_name": pascal_case(name),
        "camel_name": camel_case(name),
        "kebab_name": kebab_case(name),
        "parts": parts,
    }
    files = render_files(create_jinja_env(), feature_file_specs(name, parts), context)
    write_files(output_path, files, result, force=force, verbose=verbose)

    result.success = True
    logger.debug("Generated feature %s in %s", name, output_path)
    if verbose:
        console.print()
        console.print(f"[bold green]✨ Feature {name} generated[/] ({len(result.files_created)} files)")
    return result
