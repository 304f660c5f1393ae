"""Path normalization shared by the matcher and overlap analysis.

Every comparison in the matching core happens between strings produced by
normalize_path(): absolute, '/'-separated, no trailing separator, no '.'
or '..' segments. Symlinks are not resolved.
"""

import os
import posixpath
from pathlib import Path


def to_posix(path: str) -> str:
    """Convert any '\\' separators to '/'."""
    return path.replace("\\", "/")


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or os.path.isabs(path)


def normalize_path(path: str | Path, cwd: str | Path) -> str:
    """Resolve path against cwd into canonical absolute posix form."""
    raw = to_posix(str(path))
    if _is_absolute(raw):
        return posixpath.normpath(raw)
    return posixpath.normpath(posixpath.join(to_posix(str(cwd)), raw))


def relative_to(normalized: str, raw: str, base: str) -> str:
    """Express a normalized path relative to base.

    Falls back to the raw path ('/'-separated, leading './' removed) when
    the path lies outside base.
    """
    prefix = base.rstrip("/") + "/"
    if normalized.startswith(prefix):
        return normalized[len(prefix):]
    rel = to_posix(raw)
    if rel.startswith("./"):
        rel = rel[2:]
    return rel


def is_ancestor_or_equal(ancestor: str, path: str) -> bool:
    if path == ancestor:
        return True
    return path.startswith(ancestor.rstrip("/") + "/")


def depth_below(ancestor: str, path: str) -> int:
    """Number of segments path adds below ancestor (0 when equal)."""
    if path == ancestor:
        return 0
    rest = path[len(ancestor.rstrip("/")) + 1:]
    return len([segment for segment in rest.split("/") if segment])
