"""
Tests for patternenforcer.imports
=================================

Test Organization
-----------------
- TestCheckImportLines: Rules applied to a single source file
- TestCheckImportStyle: Project-level check and ignores
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from patternenforcer.findings import Severity
from patternenforcer.imports import check_import_lines, check_import_style


def _rules(rel_path: str, text: str) -> list[str]:
    return [v.rule for v in check_import_lines(rel_path, text)]


class TestCheckImportLines:
    """Tests for check_import_lines."""

    def test_absolute_project_import_in_src(self) -> None:
        """Absolute paths to project modules are flagged inside src/."""
        violations = check_import_lines("src/pages/home.ts", "import { fmt } from 'utils/format';")

        assert [v.rule for v in violations] == ["absolute-import"]
        assert violations[0].severity == Severity.WARNING
        assert violations[0].line == 1

    @pytest.mark.parametrize(
        "line",
        [
            "import React from 'react';",
            "import { x } from './x';",
            "import { y } from '../y';",
            "import { z } from '@/lib/z';",
            "import { Button } from '@acme/ui';",
        ],
    )
    def test_allowed_sources_in_src(self, line: str) -> None:
        """Libraries, relative, aliased and scoped imports are fine."""
        assert "absolute-import" not in _rules("src/app.ts", line)

    def test_absolute_import_outside_src_ignored(self) -> None:
        """Only src/ and components/ are checked for absolute imports."""
        assert _rules("tools/build.ts", "import { fmt } from 'utils/format';") == []

    def test_wildcard_import(self) -> None:
        """Wildcards are flagged except for React and lodash."""
        assert _rules("lib/a.ts", "import * as utils from './utils';") == ["wildcard-import"]
        assert _rules("lib/a.ts", "import * as React from 'react';") == []
        assert _rules("lib/a.ts", "import * as _ from 'lodash';") == []

    def test_wildcard_allowed_in_extensions(self) -> None:
        """Editor extensions may wildcard-import vscode and path."""
        assert _rules("extensions/vs/src/ext.ts", "import * as vscode from 'vscode';") == []

    def test_default_import(self) -> None:
        """Default imports of React are flagged with the correct form."""
        violations = check_import_lines("lib/a.tsx", "import React from 'react';")

        assert [v.rule for v in violations] == ["default-import"]
        assert violations[0].suggestion == "import * as React from 'react'"

    def test_sync_fs(self) -> None:
        """Importing or requiring fs is flagged outside extensions."""
        assert _rules("lib/io.js", "const fs = require('fs');") == ["sync-fs"]
        assert _rules("lib/io.js", "import { readFile } from 'fs/promises';") == []
        assert _rules("extensions/vs/io.js", "const fs = require('fs');") == []

    def test_console_usage(self) -> None:
        """console calls are flagged unless commented out or in tooling dirs."""
        assert _rules("lib/a.ts", "console.log('x');") == ["console-usage"]
        assert _rules("lib/a.ts", "// console.log('x');") == []
        assert _rules("tools/enforcement/run.js", "console.log('x');") == []

    def test_deep_relative_import(self) -> None:
        """More than two parent hops is flagged."""
        assert _rules("lib/a/b/c.ts", "import { x } from '../../x';") == []
        assert _rules("lib/a/b/c.ts", "import { x } from '../../../x';") == ["deep-relative-import"]


class TestCheckImportStyle:
    """Tests for check_import_style."""

    def test_project_scan(self, project_dir: Path, write_file: Callable[[str, str], Path]) -> None:
        """Only JS/TS sources are read; declaration files and examples are skipped."""
        write_file("src/app.ts", "import { fmt } from 'utils/format';\n")
        write_file("src/types.d.ts", "import * as utils from './utils';\n")
        write_file("examples/demo.js", "console.log('demo');\n")
        write_file("docs/guide.md", "console.log('x');\n")

        result = check_import_style(project_dir)

        assert result.files_checked == 1
        assert [v.location for v in result.violations] == ["src/app.ts:1"]

    def test_configured_ignores(self, project_dir: Path, write_file: Callable[[str, str], Path]) -> None:
        """Configured ignore patterns add to the built-in ones."""
        write_file("legacy/old.js", "console.log('x');\n")

        result = check_import_style(project_dir, ignore_patterns=["legacy/**"])

        assert result.passed
        assert result.files_checked == 0
