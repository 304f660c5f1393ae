"""Compare a stored content hash against the file on disk."""

from pathlib import Path
from typing import NamedTuple, Optional

from shared_types import PatternKind, Staleness

from .hashing import compute_file_hash


class StalenessResult(NamedTuple):
    verdict: Staleness
    fresh_hash: Optional[str]


def check_staleness(
    stored_hash: Optional[str],
    path: str | Path,
    kind: PatternKind,
    cwd: Optional[str | Path] = None,
) -> StalenessResult:
    """Classify a breadcrumb as verified, stale or unknown.

    Only exact-file patterns can be verified. The fresh hash is returned
    whenever the file was readable so callers can backfill or refresh the
    stored value; nothing is written here.
    """
    if kind != PatternKind.EXACT:
        return StalenessResult(Staleness.UNKNOWN, None)

    target = Path(path)
    if cwd is not None and not target.is_absolute():
        target = Path(cwd) / target

    fresh = compute_file_hash(target)
    if fresh is None:
        return StalenessResult(Staleness.UNKNOWN, None)
    if not stored_hash:
        return StalenessResult(Staleness.UNKNOWN, fresh)
    if fresh == stored_hash:
        return StalenessResult(Staleness.VERIFIED, fresh)
    return StalenessResult(Staleness.STALE, fresh)
