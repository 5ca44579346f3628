"""
pytest configuration and shared fixtures for patternenforcer tests.

This module provides fixtures and configuration used across all test modules.
Fixtures defined here are automatically available to all tests.

Fixtures
--------
project_dir : Path
    An empty project root inside the pytest temporary directory.

write_file : Callable[[str, str], Path]
    Writes a file relative to ``project_dir``, creating parent directories.

sample_package_json : str
    A package.json that passes every package.json rule.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from patternenforcer.models import CheckName, EnforcementConfig


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """
    Create an empty project root for a test.

    Returns
    -------
    Path
        Path to the project directory.
    """
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def write_file(project_dir: Path) -> Callable[[str, str], Path]:
    """
    Provide a helper that writes text files below ``project_dir``.

    Returns
    -------
    Callable[[str, str], Path]
        ``write_file("docs/guide.md", "# Guide\\n")`` returns the path written.
    """
    def _write(rel_path: str, content: str) -> Path:
        path = project_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_package_json() -> str:
    """
    Provide package.json content that passes validation.

    Returns
    -------
    str
        Formatted JSON with name, version, description and scripts.
    """
    data = {
        "name": "sample-app",
        "version": "1.0.0",
        "description": "A sample application",
        "scripts": {"test": "jest", "lint": "eslint .", "build": "vite build"},
        "dependencies": {"react": "^18.2.0"},
    }
    return json.dumps(data, indent=2) + "\n"


@pytest.fixture
def metrics_off_config() -> EnforcementConfig:
    """Default configuration with metrics recording disabled."""
    config = EnforcementConfig()
    config.metrics.enabled = False
    return config


@pytest.fixture
def only_check() -> Callable[[CheckName], EnforcementConfig]:
    """
    Provide a helper building a configuration with a single check enabled.

    Returns
    -------
    Callable[[CheckName], EnforcementConfig]
        Metrics are disabled in the returned configuration.
    """
    def _build(check: CheckName) -> EnforcementConfig:
        config = EnforcementConfig()
        config.metrics.enabled = False
        for name in CheckName:
            if name != check:
                config.disable(name)
        return config

    return _build


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """
    Configure pytest with custom markers.

    This function is called by pytest during startup to register
    custom markers used in our test suite.
    """
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external resources such as git"
    )
