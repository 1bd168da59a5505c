"""
Tests for RenameOptions and its REHOME_* environment overrides.
"""

import pytest

from rehome.config import RenameOptions
from rehome.ignore_defaults import DEFAULT_MAX_FILE_SIZE, DEFAULT_SOURCE_EXTENSIONS


@pytest.fixture
def clean_env(monkeypatch):
    for var in (
        "REHOME_EXTENSIONS",
        "REHOME_EXCLUDE",
        "REHOME_MAX_CONCURRENCY",
        "REHOME_MAX_FILE_SIZE",
        "REHOME_SEARCH",
    ):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestDefaults:
    def test_defaults(self):
        options = RenameOptions()

        assert options.dry_run is False
        assert options.extensions == DEFAULT_SOURCE_EXTENSIONS
        assert options.max_file_size == DEFAULT_MAX_FILE_SIZE
        assert options.search_provider == "regex"
        assert options.selected_files is None
        assert options.prune_empty_dirs is True

    def test_extensions_are_normalized(self):
        options = RenameOptions(extensions=("java", ".KT"))
        assert options.extensions == (".java", ".kt")

    def test_rejects_non_positive_concurrency(self):
        with pytest.raises(ValueError):
            RenameOptions(max_concurrency=0)

    def test_rejects_non_positive_file_size(self):
        with pytest.raises(ValueError):
            RenameOptions(max_file_size=0)


class TestFromEnv:
    def test_reads_environment(self, clean_env):
        clean_env.setenv("REHOME_EXTENSIONS", "java, kt")
        clean_env.setenv("REHOME_EXCLUDE", "legacy/,*.gen.java")
        clean_env.setenv("REHOME_MAX_CONCURRENCY", "4")
        clean_env.setenv("REHOME_MAX_FILE_SIZE", "1024")
        clean_env.setenv("REHOME_SEARCH", "RipGrep")

        options = RenameOptions.from_env()

        assert options.extensions == (".java", ".kt")
        assert options.exclude_patterns == ["legacy/", "*.gen.java"]
        assert options.max_concurrency == 4
        assert options.max_file_size == 1024
        assert options.search_provider == "ripgrep"

    def test_overrides_beat_environment(self, clean_env):
        clean_env.setenv("REHOME_MAX_CONCURRENCY", "4")

        options = RenameOptions.from_env(max_concurrency=2, dry_run=True)

        assert options.max_concurrency == 2
        assert options.dry_run is True

    def test_ignores_non_integer_values(self, clean_env):
        clean_env.setenv("REHOME_MAX_CONCURRENCY", "lots")

        options = RenameOptions.from_env()

        assert options.max_concurrency == 16

    def test_empty_environment_gives_defaults(self, clean_env):
        assert RenameOptions.from_env() == RenameOptions()


class TestSelection:
    def test_everything_selected_by_default(self, tmp_path):
        assert RenameOptions().is_selected(tmp_path / "A.java", tmp_path)

    def test_relative_and_absolute_entries(self, tmp_path):
        options = RenameOptions(selected_files=["src/A.java", str(tmp_path / "B.java")])

        assert options.is_selected(tmp_path / "src" / "A.java", tmp_path)
        assert options.is_selected(tmp_path / "B.java", tmp_path)
        assert not options.is_selected(tmp_path / "C.java", tmp_path)

    def test_with_overrides_returns_copy(self):
        options = RenameOptions()
        changed = options.with_overrides(dry_run=True)

        assert changed.dry_run is True
        assert options.dry_run is False
