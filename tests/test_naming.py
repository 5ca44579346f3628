"""
Tests for patternenforcer.naming
================================

Test Organization
-----------------
- TestFindNamingViolation: Marker detection on single names
- TestSuggestBetterName: Suggested replacement names
- TestCheckFileNaming: Project-level check
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from patternenforcer.findings import Severity
from patternenforcer.naming import (
    check_file_naming,
    find_naming_violation,
    suggest_better_name,
)


class TestFindNamingViolation:
    """Tests for find_naming_violation."""

    @pytest.mark.parametrize(
        "path,marker",
        [
            ("src/button_improved.tsx", "improved"),
            ("api_v2.py", "v2"),
            ("utils_backup.js", "backup"),
            ("Header_FINAL.tsx", "FINAL"),
            ("spec_test_v3.ts", "test_v3"),
            ("notes_copy.md", "copy"),
        ],
    )
    def test_versioned(self, path: str, marker: str) -> None:
        """Marker suffixes are found, case-insensitively."""
        assert find_naming_violation(path) == marker

    @pytest.mark.parametrize(
        "path,marker",
        [
            ("src/Button_improved.test.tsx", "improved"),
            ("types/api_v2.d.ts", "v2"),
            ("vendor/utils_old.min.js", "old"),
        ],
    )
    def test_multi_part_extensions(self, path: str, marker: str) -> None:
        """Markers before a chain of extensions are found."""
        assert find_naming_violation(path) == marker

    @pytest.mark.parametrize(
        "path",
        [
            "src/button.tsx",
            "old_reports/summary.txt",
            "newsletter.ts",
            "src/final-step.ts",
            "Makefile",
        ],
    )
    def test_clean(self, path: str) -> None:
        """Clean names, and markers in directory names, pass."""
        assert find_naming_violation(path) is None


class TestSuggestBetterName:
    """Tests for suggest_better_name."""

    def test_strips_marker(self) -> None:
        """The marker is removed and the directory kept."""
        assert suggest_better_name("src/button_improved.tsx") == "src/button.tsx"

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("src/Button_improved.test.tsx", "src/Button.test.tsx"),
            ("types/api_v2.d.ts", "types/api.d.ts"),
        ],
    )
    def test_keeps_extension_chain(self, path: str, expected: str) -> None:
        """The marker before the first dot goes; every extension stays."""
        assert suggest_better_name(path) == expected

    def test_strips_copy_counter(self) -> None:
        """Copy counters such as (2) are removed too."""
        assert suggest_better_name("notes (2)_copy.md") == "notes.md"

    def test_empty_stem(self) -> None:
        """A name that is only a marker gets a placeholder stem."""
        assert suggest_better_name("lib/_v2.py") == "lib/renamed-file.py"


class TestCheckFileNaming:
    """Tests for check_file_naming."""

    def test_reports_versioned_files(
        self, project_dir: Path, write_file: Callable[[str, str], Path]
    ) -> None:
        """Every versioned file is an error with a suggestion."""
        write_file("src/button.tsx", "")
        write_file("src/button_new.tsx", "")
        write_file("node_modules/pkg/index_old.js", "")

        result = check_file_naming(project_dir)

        assert result.files_checked == 2
        assert [v.file for v in result.violations] == ["src/button_new.tsx"]
        violation = result.violations[0]
        assert violation.severity == Severity.ERROR
        assert violation.rule == "versioned-name"
        assert "src/button.tsx" in violation.suggestion

    def test_only_given_files(self, project_dir: Path, write_file: Callable[[str, str], Path]) -> None:
        """An explicit file list limits the check."""
        write_file("a_v2.ts", "")
        write_file("b_v2.ts", "")

        result = check_file_naming(project_dir, ["a_v2.ts"])

        assert [v.file for v in result.violations] == ["a_v2.ts"]

    def test_ignore_patterns(self, project_dir: Path, write_file: Callable[[str, str], Path]) -> None:
        """Ignored paths are not reported."""
        write_file("fixtures/data_old.json", "{}")

        result = check_file_naming(project_dir, ignore_patterns=["fixtures/**"])

        assert result.passed
