"""Pattern classification: exact file, directory prefix, or glob."""

from dataclasses import dataclass

from shared_types import PatternKind

from .paths import to_posix

GLOB_CHARS = ("*", "?", "[")
SEPARATORS = ("/", "\\")


def has_glob_chars(path: str) -> bool:
    return any(c in path for c in GLOB_CHARS)


def classify(raw: str) -> PatternKind:
    """Derive the pattern kind of a raw path string.

    Glob metacharacters win over a trailing separator, so "src/*/" is a glob.
    """
    if not raw:
        raise ValueError("Pattern path cannot be empty")
    if has_glob_chars(raw):
        return PatternKind.GLOB
    if raw.endswith(SEPARATORS):
        return PatternKind.DIRECTORY
    return PatternKind.EXACT


@dataclass(frozen=True)
class PatternSpec:
    """A stored path pattern and the kind it was classified as at creation."""

    raw: str
    kind: PatternKind

    @classmethod
    def from_raw(cls, raw: str) -> "PatternSpec":
        return cls(raw=raw, kind=classify(raw))

    @property
    def text(self) -> str:
        """Raw path with '/' separators. In a glob '\\' is an escape and is kept."""
        if self.kind == PatternKind.GLOB:
            return self.raw
        return to_posix(self.raw)
