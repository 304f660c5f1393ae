"""Tests for PathMatcher."""

import pytest

from matching import PathMatcher, PatternSpec, matches_path
from shared_types import PatternKind


def spec(raw):
    return PatternSpec.from_raw(raw)


class TestExact:
    @pytest.mark.parametrize("target", ["src/a.ts", "./src/a.ts", "src/lib/../a.ts", "src\\a.ts"])
    def test_equivalent_spellings(self, matcher, target):
        assert matcher.matches(spec("src/a.ts"), target)

    def test_absolute_target(self, matcher, tmp_path):
        assert matcher.matches(spec("src/a.ts"), tmp_path / "src" / "a.ts")

    def test_absolute_pattern(self, matcher, tmp_path):
        assert matcher.matches(spec(str(tmp_path / "src" / "a.ts")), "src/a.ts")

    def test_different_file(self, matcher):
        assert not matcher.matches(spec("src/a.ts"), "src/b.ts")
        assert not matcher.matches(spec("src/a.ts"), "src/a.ts/extra")


class TestDirectory:
    def test_matches_contents(self, matcher):
        pattern = spec("src/")
        assert matcher.matches(pattern, "src/a.ts")
        assert matcher.matches(pattern, "src/lib/deep/a.ts")

    def test_matches_directory_itself(self, matcher):
        assert matcher.matches(spec("src/"), "src")

    def test_sibling_prefix_does_not_match(self, matcher):
        assert not matcher.matches(spec("lib/"), "libfoo/file.ts")

    def test_backslash_directory(self, matcher):
        assert matcher.matches(spec("src\\lib\\"), "src/lib/a.ts")


class TestGlob:
    def test_bare_pattern_uses_basename(self, matcher):
        pattern = spec("*.ts")
        assert matcher.matches(pattern, "b.ts")
        assert matcher.matches(pattern, "src/deep/a.ts")
        assert not matcher.matches(pattern, "src/a.js")

    def test_relative_to_cwd(self, matcher, tmp_path):
        pattern = spec("src/*.ts")
        assert matcher.matches(pattern, "src/a.ts")
        assert matcher.matches(pattern, tmp_path / "src" / "a.ts")
        assert not matcher.matches(pattern, "src/lib/a.ts")

    def test_recursive(self, matcher):
        assert matcher.matches(spec("src/**/*.ts"), "src/lib/deep/a.ts")
        assert matcher.matches(spec("src/**/*.ts"), "src/a.ts")

    def test_leading_dot_slash_ignored(self, matcher):
        assert matcher.matches(spec("./src/*.ts"), "src/a.ts")

    def test_absolute_glob(self, matcher, tmp_path):
        assert matcher.matches(spec(f"{tmp_path.as_posix()}/src/*.ts"), "src/a.ts")

    def test_trailing_separator_on_glob(self, matcher):
        assert matcher.matches(spec("src/*/"), "src/lib")

    def test_target_outside_cwd_uses_path_as_given(self, matcher):
        assert matcher.matches(spec("elsewhere/*.ts"), "../elsewhere/a.ts") is False
        assert matcher.matches(spec("/elsewhere/*.ts"), "/elsewhere/a.ts")

    def test_hidden_files_match(self, matcher):
        assert matcher.matches(spec("config/*.json"), "config/.secrets.json")

    def test_malformed_glob_matches_nothing(self, matcher):
        assert not matcher.matches(PatternSpec("src/[abc", PatternKind.GLOB), "src/[abc")

    def test_escaped_wildcard_is_literal(self, matcher):
        pattern = spec("\\*.ts")
        assert matcher.matches(pattern, "*.ts")
        assert matcher.matches(pattern, "src/*.ts")
        assert not matcher.matches(pattern, "a.ts")

    def test_escaped_class_in_nested_glob(self, matcher):
        pattern = spec("docs/\\[draft\\]*.md")
        assert matcher.matches(pattern, "docs/[draft]-notes.md")
        assert not matcher.matches(pattern, "docs/d-notes.md")

    def test_backslash_is_not_a_separator_in_globs(self, matcher):
        assert not matcher.matches(spec("src\\*.ts"), "src/a.ts")
        assert matcher.matches(spec("src\\*.ts"), "lib/src*.ts")


class TestMatcherContract:
    def test_unknown_kind_rejected(self, matcher):
        with pytest.raises(ValueError):
            matcher.matches(PatternSpec("x", "weird"), "x")

    def test_independent_of_process_cwd(self, tmp_path, monkeypatch):
        matcher = PathMatcher(tmp_path / "repo")
        monkeypatch.chdir(tmp_path)
        assert matcher.matches(spec("src/a.ts"), tmp_path / "repo" / "src" / "a.ts")
        assert not matcher.matches(spec("src/a.ts"), tmp_path / "src" / "a.ts")

    def test_matches_path_helper(self, tmp_path):
        assert matches_path(spec("src/"), "src/x.ts", tmp_path)
        assert not matches_path(spec("src/"), "lib/x.ts", tmp_path)

    def test_relative(self, matcher, tmp_path):
        assert matcher.relative(tmp_path / "src" / "a.ts") == "src/a.ts"
        assert matcher.relative("./src/a.ts") == "src/a.ts"
