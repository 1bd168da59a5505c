"""
Test .gitignore pattern matching, file filtering and source discovery.
"""

import pytest
from pathlib import Path

from rehome.discovery import discover_source_files
from rehome.ignore_defaults import DEFAULT_SOURCE_EXTENSIONS
from rehome.ignore_patterns import (
    is_file_too_large,
    load_all_ignores,
    load_gitignore,
    load_rehomeignore,
    relative_posix,
    should_ignore,
)


@pytest.fixture
def test_workspace(tmp_path):
    """Create a workspace with sources, build outputs and VCS dirs."""
    workspace = tmp_path / "ws"
    files = {
        "src/main/java/com/foo/Bar.java": "package com.foo;\nclass Bar {}\n",
        "src/main/kotlin/com/foo/Baz.kt": "package com.foo\nclass Baz\n",
        "build/generated/com/foo/Bar.java": "package com.foo;\nclass Bar {}\n",
        "target/classes/Bar.java": "class Bar {}\n",
        ".git/config": "",
        ".idea/workspace.xml": "",
        "node_modules/pkg/index.js": "",
        "legacy/Old.java": "class Old {}\n",
        "README.md": "# README",
    }
    for rel, content in files.items():
        path = workspace / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return workspace


def _ignored(workspace: Path, rel: str, spec=None, max_size=None) -> bool:
    spec = spec or load_all_ignores(workspace)
    return should_ignore(workspace / rel, workspace, spec, DEFAULT_SOURCE_EXTENSIONS, max_size)


class TestDefaultIgnores:
    """Test that default ignore patterns work correctly."""

    def test_ignores_build_outputs(self, test_workspace):
        assert _ignored(test_workspace, "build/generated/com/foo/Bar.java") is True
        assert _ignored(test_workspace, "target/classes/Bar.java") is True

    def test_ignores_vcs_and_ide_dirs(self, test_workspace):
        assert _ignored(test_workspace, ".git/config") is True
        assert _ignored(test_workspace, ".idea/workspace.xml") is True

    def test_does_not_ignore_sources(self, test_workspace):
        assert _ignored(test_workspace, "src/main/java/com/foo/Bar.java") is False
        assert _ignored(test_workspace, "src/main/kotlin/com/foo/Baz.kt") is False

    def test_ignores_non_source_extensions(self, test_workspace):
        assert _ignored(test_workspace, "README.md") is True

    def test_ignores_files_outside_root(self, test_workspace, tmp_path):
        outside = tmp_path / "Elsewhere.java"
        outside.write_text("class Elsewhere {}")
        spec = load_all_ignores(test_workspace)

        assert should_ignore(outside, test_workspace, spec, DEFAULT_SOURCE_EXTENSIONS) is True

    def test_ignores_oversized_files(self, test_workspace):
        assert _ignored(test_workspace, "src/main/java/com/foo/Bar.java", max_size=5) is True


class TestCustomIgnores:
    """Test .gitignore, .rehomeignore and caller-supplied patterns."""

    def test_gitignore_is_honoured(self, test_workspace):
        (test_workspace / ".gitignore").write_text("# old code\nlegacy/\n")

        assert load_gitignore(test_workspace) == ["legacy/"]
        assert _ignored(test_workspace, "legacy/Old.java") is True

    def test_gitignore_can_be_disabled(self, test_workspace):
        (test_workspace / ".gitignore").write_text("legacy/\n")
        spec = load_all_ignores(test_workspace, use_gitignore=False)

        assert _ignored(test_workspace, "legacy/Old.java", spec=spec) is False

    def test_rehomeignore_is_honoured(self, test_workspace):
        (test_workspace / ".rehomeignore").write_text("\n*.kt\n")

        assert load_rehomeignore(test_workspace) == ["*.kt"]
        assert _ignored(test_workspace, "src/main/kotlin/com/foo/Baz.kt") is True

    def test_extra_patterns(self, test_workspace):
        spec = load_all_ignores(test_workspace, extra_patterns=["legacy/", "  "])
        assert _ignored(test_workspace, "legacy/Old.java", spec=spec) is True

    def test_missing_files_load_nothing(self, tmp_path):
        assert load_gitignore(tmp_path) == []
        assert load_rehomeignore(tmp_path) == []


class TestHelpers:
    def test_relative_posix(self, tmp_path):
        assert relative_posix(tmp_path / "a" / "B.java", tmp_path) == "a/B.java"
        assert relative_posix(Path("/somewhere/else.java"), tmp_path) is None

    def test_is_file_too_large(self, tmp_path):
        small = tmp_path / "Small.java"
        small.write_text("class Small {}")

        assert is_file_too_large(small, max_size=1024) is False
        assert is_file_too_large(small, max_size=3) is True
        assert is_file_too_large(tmp_path / "Missing.java") is False


class TestDiscovery:
    """Test discover_source_files with directory pruning."""

    def test_finds_only_sources_outside_ignored_dirs(self, test_workspace):
        spec = load_all_ignores(test_workspace)

        found = discover_source_files(test_workspace, spec, DEFAULT_SOURCE_EXTENSIONS, 1024 * 1024)
        rels = [p.relative_to(test_workspace).as_posix() for p in found]

        assert rels == [
            "legacy/Old.java",
            "src/main/java/com/foo/Bar.java",
            "src/main/kotlin/com/foo/Baz.kt",
        ]

    def test_respects_extension_filter(self, test_workspace):
        spec = load_all_ignores(test_workspace)

        found = discover_source_files(test_workspace, spec, (".kt",), 1024 * 1024)

        assert [p.name for p in found] == ["Baz.kt"]

    def test_skips_symlinks(self, test_workspace):
        link = test_workspace / "src" / "Link.java"
        try:
            link.symlink_to(test_workspace / "legacy" / "Old.java")
        except OSError:
            pytest.skip("symlinks not supported")
        spec = load_all_ignores(test_workspace)

        found = discover_source_files(test_workspace, spec, DEFAULT_SOURCE_EXTENSIONS, 1024 * 1024)

        assert link not in found
