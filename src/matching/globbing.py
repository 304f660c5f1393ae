"""Glob translation, matching and filesystem expansion.

Supported syntax, per '/'-separated segment:

    *       any run of characters except '/'
    **      (whole segment) zero or more segments
    ?       one character except '/'
    [...]   character class; '!' or '^' negates, ranges allowed
    \\x      literal x

In a glob '\\' is always an escape, never a path separator; only exact
and directory patterns accept Windows-style separators.

Hidden files: INCLUDE_HIDDEN is the fixed default for breadcrumb matching,
so wildcards also match names that start with '.'. File discovery
(expand_glob) passes include_hidden=False explicitly.
"""

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional

INCLUDE_HIDDEN = True


class GlobSyntaxError(ValueError):
    """Raised when a glob pattern cannot be compiled."""


def _translate_class(pattern: str, segment: str, start: int) -> tuple[str, int]:
    """Translate the [...] class opening at segment[start]; return (regex, end index)."""
    j = start + 1
    if j < len(segment) and segment[j] in "!^":
        j += 1
    if j < len(segment) and segment[j] == "]":
        j += 1
    while j < len(segment) and segment[j] != "]":
        j += 1
    if j >= len(segment):
        raise GlobSyntaxError(f"Unterminated character class in {pattern!r}")

    body = segment[start + 1:j]
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    escaped = "".join(c if c == "-" else re.escape(c) for c in body)
    if negate:
        return f"[^/{escaped}]", j
    return f"[{escaped}]", j


def _translate_segment(pattern: str, segment: str, include_hidden: bool) -> str:
    out = []
    if not include_hidden and segment[:1] in ("*", "?", "["):
        out.append(r"(?!\.)")

    i = 0
    while i < len(segment):
        c = segment[i]
        if c == "*":
            while i + 1 < len(segment) and segment[i + 1] == "*":
                i += 1
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            piece, i = _translate_class(pattern, segment, i)
            out.append(piece)
        elif c == "\\":
            if i + 1 >= len(segment):
                raise GlobSyntaxError(f"Trailing escape in {pattern!r}")
            i += 1
            out.append(re.escape(segment[i]))
        else:
            out.append(re.escape(c))
        i += 1
    return "".join(out)


def translate(pattern: str, include_hidden: bool = INCLUDE_HIDDEN) -> str:
    """Translate a glob into an (unanchored) regular expression string."""
    any_segment = r"[^/]*" if include_hidden else r"(?!\.)[^/]*"
    segments = pattern.split("/")
    last = len(segments) - 1

    parts = []
    joined = True  # no separator needed before the next segment
    for index, segment in enumerate(segments):
        if segment == "**":
            if index == last and index == 0:
                parts.append(f"{any_segment}(?:/{any_segment})*")
            elif index == last:
                # "src/**" also matches "src" itself
                parts.append(f"(?:/{any_segment})*")
            else:
                if not joined:
                    parts.append("/")
                parts.append(f"(?:{any_segment}/)*")
                joined = True
                continue
        else:
            if not joined:
                parts.append("/")
            parts.append(_translate_segment(pattern, segment, include_hidden))
        joined = False
    return "".join(parts)


@lru_cache(maxsize=512)
def compile_glob(pattern: str, include_hidden: bool = INCLUDE_HIDDEN) -> re.Pattern:
    """Compile a glob to an anchored regex. Raises GlobSyntaxError."""
    try:
        return re.compile(rf"\A(?:{translate(pattern, include_hidden)})\Z")
    except re.error as e:
        raise GlobSyntaxError(f"Invalid glob {pattern!r}: {e}") from e


def literal_prefix(pattern: str) -> tuple[str, Optional[int]]:
    """Unescaped text before the first wildcard, and that wildcard's index.

    The index is None when every metacharacter in pattern is escaped.
    """
    out = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c in "*?[":
            return "".join(out), i
        if c == "\\" and i + 1 < len(pattern):
            i += 1
            c = pattern[i]
        out.append(c)
        i += 1
    return "".join(out), None


def validate_glob(pattern: str) -> None:
    """Raise GlobSyntaxError if pattern is malformed."""
    compile_glob(pattern)


def glob_match(pattern: str, path: str, include_hidden: bool = INCLUDE_HIDDEN) -> bool:
    """Match a '/'-separated path against a glob. Malformed globs match nothing."""
    try:
        compiled = compile_glob(pattern, include_hidden)
    except GlobSyntaxError:
        return False
    return compiled.match(path) is not None


def expand_glob(
    pattern: str,
    root: str | Path,
    include_hidden: bool = False,
    ignore_dirs: Iterable[str] = (),
) -> list[Path]:
    """List files under root whose root-relative path matches pattern.

    Hidden directories are pruned unless include_hidden. Raises
    GlobSyntaxError for malformed patterns.
    """
    compiled = compile_glob(pattern, include_hidden)
    root = Path(root)
    skip = set(ignore_dirs)
    found = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in skip and (include_hidden or not d.startswith("."))
        )
        for fname in filenames:
            full = Path(dirpath) / fname
            rel = full.relative_to(root).as_posix()
            if compiled.match(rel):
                found.append(full)

    return sorted(found)
