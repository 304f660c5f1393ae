"""Tests for pattern classification."""

import pytest

from matching.patterns import PatternSpec, classify, has_glob_chars
from shared_types import PatternKind


class TestClassify:
    @pytest.mark.parametrize(
        "raw,kind",
        [
            ("src/auth/login.ts", PatternKind.EXACT),
            ("README", PatternKind.EXACT),
            ("src/", PatternKind.DIRECTORY),
            ("src\\lib\\", PatternKind.DIRECTORY),
            ("src/*.ts", PatternKind.GLOB),
            ("file?.ts", PatternKind.GLOB),
            ("file[0-9].ts", PatternKind.GLOB),
            ("**/*.md", PatternKind.GLOB),
        ],
    )
    def test_kinds(self, raw, kind):
        assert classify(raw) is kind

    def test_glob_wins_over_trailing_separator(self):
        assert classify("src/*/") is PatternKind.GLOB

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            classify("")

    def test_has_glob_chars(self):
        assert has_glob_chars("a*b")
        assert not has_glob_chars("plain/path.txt")


class TestPatternSpec:
    def test_from_raw_classifies(self):
        spec = PatternSpec.from_raw("src/")
        assert spec.raw == "src/"
        assert spec.kind is PatternKind.DIRECTORY

    def test_is_hashable_value(self):
        a = PatternSpec.from_raw("src/*.ts")
        b = PatternSpec.from_raw("src/*.ts")
        assert a == b
        assert len({a, b}) == 1
