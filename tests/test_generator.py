"""
Tests for patternenforcer.generator
===================================

Test Organization
-----------------
- TestCaseFilters: Name transformations
- TestCreateComponent: Component scaffolding per type and options
- TestFeatureParts: Feature part dependency resolution
- TestCreateFeature: Feature scaffolding
- TestWriteFiles: Skipping, overwriting and cleanup on failure
"""

from pathlib import Path

import pytest

from patternenforcer.generator import (
    COMPONENT_TYPES,
    GenerationResult,
    camel_case,
    create_component,
    create_feature,
    kebab_case,
    pascal_case,
    resolve_feature_parts,
    write_files,
)
from patternenforcer.naming import find_naming_violation


# =============================================================================
# Name Transformation Tests
# =============================================================================

class TestCaseFilters:
    """Tests for the case conversion helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("UserProfile", "user-profile"),
            ("HTTPClient", "http-client"),
            ("user_profile", "user-profile"),
            ("user profile", "user-profile"),
        ],
    )
    def test_kebab_case(self, value: str, expected: str) -> None:
        """Words are split on case changes and separators."""
        assert kebab_case(value) == expected

    def test_pascal_and_camel(self) -> None:
        """Pascal and camel case share word splitting."""
        assert pascal_case("user-profile") == "UserProfile"
        assert pascal_case("UserProfile") == "UserProfile"
        assert camel_case("UserProfile") == "userProfile"
        assert camel_case("user_profile") == "userProfile"


# =============================================================================
# Component Tests
# =============================================================================

class TestCreateComponent:
    """Tests for create_component."""

    def test_default_files(self, tmp_path: Path) -> None:
        """Component, test, styles, index and story are generated."""
        result = create_component("UserCard", tmp_path, verbose=False)

        assert result.success is True
        assert result.output_path == tmp_path / "UserCard"
        assert [p.name for p in result.files_created] == [
            "UserCard.tsx",
            "UserCard.test.tsx",
            "UserCard.module.css",
            "index.ts",
            "UserCard.stories.tsx",
        ]

    def test_component_content(self, tmp_path: Path) -> None:
        """The rendered files reference each other consistently."""
        create_component("UserCard", tmp_path, component_type="display", verbose=False)
        folder = tmp_path / "UserCard"

        component = (folder / "UserCard.tsx").read_text(encoding="utf-8")
        styles = (folder / "UserCard.module.css").read_text(encoding="utf-8")
        index = (folder / "index.ts").read_text(encoding="utf-8")

        assert "export interface UserCardProps" in component
        assert "import styles from './UserCard.module.css';" in component
        assert "${styles.userCard}" in component
        assert ".userCard {" in styles
        assert "export { UserCard } from './UserCard';" in index
        assert "{{" not in component

    @pytest.mark.parametrize("component_type", list(COMPONENT_TYPES))
    def test_every_type_renders(self, tmp_path: Path, component_type: str) -> None:
        """Each component type produces a component and test file."""
        result = create_component("Widget", tmp_path, component_type=component_type, verbose=False)
        component = (result.output_path / "Widget.tsx").read_text(encoding="utf-8")

        assert "export interface WidgetProps" in component
        assert "{%" not in component
        assert (result.output_path / "Widget.test.tsx").exists()

    def test_interactive_type(self, tmp_path: Path) -> None:
        """Interactive components forward refs to a button."""
        create_component("SaveButton", tmp_path, component_type="interactive", verbose=False)
        component = (tmp_path / "SaveButton" / "SaveButton.tsx").read_text(encoding="utf-8")

        assert "React.forwardRef<HTMLButtonElement, SaveButtonProps>" in component

    def test_options(self, tmp_path: Path) -> None:
        """Storybook can be skipped and docs added."""
        result = create_component("UserCard", tmp_path, storybook=False, docs=True, verbose=False)
        names = {p.name for p in result.files_created}

        assert "UserCard.stories.tsx" not in names
        assert "README.md" in names

    def test_generated_names_are_clean(self, tmp_path: Path) -> None:
        """Generated file names pass the naming check."""
        result = create_component("UserCard", tmp_path, docs=True, verbose=False)
        assert all(find_naming_violation(p) is None for p in result.files_created)

    @pytest.mark.parametrize("name", ["userCard", "User-Card", "1Card", ""])
    def test_invalid_name(self, tmp_path: Path, name: str) -> None:
        """Names must be PascalCase."""
        with pytest.raises(ValueError, match="PascalCase"):
            create_component(name, tmp_path, verbose=False)

    def test_invalid_type(self, tmp_path: Path) -> None:
        """Unknown types list the valid ones."""
        with pytest.raises(ValueError, match="interactive"):
            create_component("UserCard", tmp_path, component_type="widget", verbose=False)

    def test_existing_files_skipped(self, tmp_path: Path) -> None:
        """A second run skips existing files unless forced."""
        create_component("UserCard", tmp_path, verbose=False)
        component = tmp_path / "UserCard" / "UserCard.tsx"
        component.write_text("// custom\n", encoding="utf-8")

        second = create_component("UserCard", tmp_path, verbose=False)

        assert second.files_created == []
        assert len(second.files_skipped) == 5
        assert component.read_text(encoding="utf-8") == "// custom\n"

        forced = create_component("UserCard", tmp_path, force=True, verbose=False)

        assert forced.files_skipped == []
        assert "// custom" not in component.read_text(encoding="utf-8")

    def test_env_default_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """COMPONENTS_DIR sets the default output directory."""
        monkeypatch.setenv("COMPONENTS_DIR", str(tmp_path / "ui"))

        result = create_component("UserCard", verbose=False)

        assert result.output_path == tmp_path / "ui" / "UserCard"


# =============================================================================
# Feature Tests
# =============================================================================

class TestFeatureParts:
    """Tests for resolve_feature_parts."""

    def test_all_parts(self) -> None:
        """With every part requested nothing is dropped."""
        parts, warnings = resolve_feature_parts({"api", "store", "hooks", "components", "tests"})

        assert parts == {"api", "store", "hooks", "components", "tests"}
        assert warnings == []

    def test_dependents_dropped(self) -> None:
        """Dropping the api cascades to hooks, components and tests."""
        parts, warnings = resolve_feature_parts({"store", "hooks", "components", "tests"})

        assert parts == {"store"}
        assert warnings == [
            "Skipped hooks: requires api",
            "Skipped components: requires hooks",
            "Skipped tests: requires components",
        ]


class TestCreateFeature:
    """Tests for create_feature."""

    def test_full_feature(self, tmp_path: Path) -> None:
        """Every part is generated under the kebab-case directory."""
        result = create_feature("UserProfile", tmp_path, verbose=False)
        created = sorted(p.relative_to(result.output_path).as_posix() for p in result.files_created)

        assert result.output_path == tmp_path / "user-profile"
        assert created == [
            "README.md",
            "__tests__/user-profile.test.tsx",
            "api/index.ts",
            "api/user-profile.api.ts",
            "components/UserProfile.module.css",
            "components/UserProfileView.tsx",
            "components/index.ts",
            "hooks/index.ts",
            "hooks/useUserProfile.ts",
            "index.ts",
            "store/index.ts",
            "store/user-profile.store.tsx",
            "types/index.ts",
            "types/user-profile.types.ts",
        ]

    def test_index_exports_enabled_parts(self, tmp_path: Path) -> None:
        """The feature index only re-exports generated parts."""
        result = create_feature("UserProfile", tmp_path, hooks=False, verbose=False)
        index = (result.output_path / "index.ts").read_text(encoding="utf-8")

        assert "export * from './types';" in index
        assert "export * from './api';" in index
        assert "./hooks" not in index
        assert "./components" not in index
        assert result.warnings == [
            "Skipped components: requires hooks",
            "Skipped tests: requires components",
        ]

    def test_barrels_use_file_names(self, tmp_path: Path) -> None:
        """Barrel files point at the generated file names."""
        result = create_feature("UserProfile", tmp_path, verbose=False)

        types_index = (result.output_path / "types" / "index.ts").read_text(encoding="utf-8")
        hooks_index = (result.output_path / "hooks" / "index.ts").read_text(encoding="utf-8")

        assert "from './user-profile.types'" in types_index
        assert "from './useUserProfile'" in hooks_index

    def test_types_only(self, tmp_path: Path) -> None:
        """With every part off only the index, README and types remain."""
        result = create_feature(
            "Billing", tmp_path, api=False, components=False, hooks=False, store=False, tests=False, verbose=False
        )

        assert len(result.files_created) == 4
        assert result.warnings == []

    def test_invalid_name(self, tmp_path: Path) -> None:
        """Names with path separators are rejected."""
        with pytest.raises(ValueError):
            create_feature("../escape", tmp_path, verbose=False)


# =============================================================================
# Write Tests
# =============================================================================

class TestWriteFiles:
    """Tests for write_files."""

    def test_cleanup_on_failure(self, tmp_path: Path) -> None:
        """Files created before an error are removed again."""
        output = tmp_path / "Widget"
        result = GenerationResult(success=False, output_path=output)
        # A directory where a file should go makes the second write fail
        (output / "broken.ts").mkdir(parents=True)

        with pytest.raises(OSError):
            write_files(output, {"a/first.ts": "a", "broken.ts": "b"}, result, force=True, verbose=False)

        assert result.files_created == []
        assert not (output / "a").exists()
        assert result.errors
