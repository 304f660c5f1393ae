"""Decide whether a breadcrumb pattern covers a target path."""

import os
import posixpath
from pathlib import Path

from shared_types import PatternKind

from .globbing import glob_match
from .paths import normalize_path, relative_to, to_posix
from .patterns import PatternSpec


class PathMatcher:
    """Matches PatternSpecs against target paths.

    Relative patterns and targets resolve against ``cwd``, which is fixed
    at construction so results never depend on the process working
    directory. Instances hold no mutable state and can be shared freely.
    """

    def __init__(self, cwd: str | Path):
        self.cwd = to_posix(os.path.abspath(str(cwd)))

    def normalize(self, path: str | Path) -> str:
        return normalize_path(path, self.cwd)

    def relative(self, target: str | Path) -> str:
        """Target relative to cwd, best-effort when it lies outside cwd."""
        return relative_to(self.normalize(target), str(target), self.cwd)

    def matches(self, pattern: PatternSpec, target: str | Path) -> bool:
        normalized_target = self.normalize(target)

        if pattern.kind is PatternKind.EXACT:
            return normalized_target == self.normalize(pattern.raw)

        if pattern.kind is PatternKind.DIRECTORY:
            # normalize() already drops the trailing separator
            directory = self.normalize(pattern.raw)
            return (
                normalized_target == directory
                or normalized_target.startswith(directory.rstrip("/") + "/")
            )

        if pattern.kind is PatternKind.GLOB:
            return self._matches_glob(pattern.text, str(target), normalized_target)

        raise ValueError(f"Unknown pattern kind: {pattern.kind!r}")

    def pattern_key(self, pattern: PatternSpec) -> str:
        """Normalized pattern path for equality checks; glob escapes are kept."""
        if pattern.kind == PatternKind.GLOB:
            return posixpath.normpath(posixpath.join(self.cwd, pattern.text))
        return self.normalize(pattern.raw)

    def _matches_glob(self, glob: str, target: str, normalized_target: str) -> bool:
        if len(glob) > 1:
            glob = glob.rstrip("/")

        # Bare patterns like "*.ts" only ever see the filename
        if "/" not in glob:
            return glob_match(glob, posixpath.basename(normalized_target))

        if glob.startswith("/") or os.path.splitdrive(glob)[0]:
            return glob_match(glob, normalized_target)

        while glob.startswith("./"):
            glob = glob[2:]
        return glob_match(glob, relative_to(normalized_target, target, self.cwd))


def matches_path(pattern: PatternSpec, target: str | Path, cwd: str | Path) -> bool:
    """One-off match without keeping a PathMatcher around."""
    return PathMatcher(cwd).matches(pattern, target)
