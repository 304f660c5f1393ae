"""Expiry bookkeeping and the queries the CLI runs over loaded breadcrumbs."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional

from matching import PathMatcher, expand_glob
from shared_types import Severity, Source

from .models import Breadcrumb

_TTL_RE = re.compile(r"^(\d+)([smhd])$")
_TTL_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}

DEFAULT_IGNORE_DIRS = ("node_modules", ".git", "dist", "build", ".next", "__pycache__", ".venv")

CLEAR = "clear"


def parse_ttl(ttl: str) -> timedelta:
    """Parse '30s', '5m', '2h' or '7d'."""
    match = _TTL_RE.match(ttl or "")
    if not match:
        raise ValueError(f"Invalid TTL format: {ttl}. Use format like 30s, 5m, 2h, or 7d")
    value, unit = int(match.group(1)), match.group(2)
    return timedelta(**{_TTL_UNITS[unit]: value})


def parse_timestamp(value: str) -> datetime:
    """Parse ISO 8601 date or datetime; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def expires_at(breadcrumb: Breadcrumb) -> Optional[datetime]:
    """When the breadcrumb stops applying. Raises ValueError on bad data."""
    if breadcrumb.ttl and breadcrumb.added_at:
        return parse_timestamp(breadcrumb.added_at) + parse_ttl(breadcrumb.ttl)
    if breadcrumb.expires:
        return parse_timestamp(breadcrumb.expires)
    return None


def is_expired(breadcrumb: Breadcrumb, now: Optional[datetime] = None) -> bool:
    """Date or TTL based expiry. Unparseable values count as expired.

    Session-scoped breadcrumbs don't expire here; session-end removes them.
    """
    now = now or utcnow()

    if breadcrumb.expires:
        try:
            if parse_timestamp(breadcrumb.expires) < now:
                return True
        except ValueError:
            return True

    if breadcrumb.ttl and breadcrumb.added_at:
        try:
            deadline = parse_timestamp(breadcrumb.added_at) + parse_ttl(breadcrumb.ttl)
        except ValueError:
            return True
        if now > deadline:
            return True

    return False


def expiration_info(breadcrumb: Breadcrumb) -> Optional[str]:
    """Human-readable expiry for listings."""
    if breadcrumb.session_id:
        return f"session: {breadcrumb.session_id}"
    try:
        when = expires_at(breadcrumb)
    except ValueError:
        return None
    return when.isoformat() if when else None


def is_visible_to(breadcrumb: Breadcrumb, audience: Optional[Source]) -> bool:
    if audience is Source.AGENT and breadcrumb.human_only:
        return False
    if audience is Source.HUMAN and breadcrumb.agent_only:
        return False
    return True


@dataclass
class MatchResult:
    """Whether one breadcrumb is active for one query path."""

    breadcrumb: Breadcrumb
    active: bool


def evaluate(
    breadcrumbs: Iterable[Breadcrumb],
    target: str | Path,
    matcher: PathMatcher,
    include_expired: bool = False,
    audience: Optional[Source] = None,
    now: Optional[datetime] = None,
) -> list[MatchResult]:
    now = now or utcnow()
    results = []
    for b in breadcrumbs:
        active = (
            is_visible_to(b, audience)
            and (include_expired or not is_expired(b, now))
            and matcher.matches(b.pattern, target)
        )
        results.append(MatchResult(b, active))
    return results


def find_matching(
    breadcrumbs: Iterable[Breadcrumb],
    target: str | Path,
    matcher: PathMatcher,
    include_expired: bool = False,
    audience: Optional[Source] = None,
    now: Optional[datetime] = None,
) -> list[Breadcrumb]:
    """Breadcrumbs that currently apply to target."""
    results = evaluate(breadcrumbs, target, matcher, include_expired, audience, now)
    return [r.breadcrumb for r in results if r.active]


def highest_severity(breadcrumbs: Iterable[Breadcrumb]) -> str:
    """'clear' for nothing, otherwise the most severe level present."""
    highest = None
    for b in breadcrumbs:
        if highest is None or b.severity.rank > highest.rank:
            highest = b.severity
    return CLEAR if highest is None else str(highest)


def remove_session(
    breadcrumbs: Iterable[Breadcrumb], session_id: str
) -> tuple[list[Breadcrumb], list[Breadcrumb]]:
    """Split into (remaining, removed) for a finished session."""
    remaining, removed = [], []
    for b in breadcrumbs:
        (removed if b.session_id == session_id else remaining).append(b)
    return remaining, removed


def partition_expired(
    breadcrumbs: Iterable[Breadcrumb], now: Optional[datetime] = None
) -> tuple[list[Breadcrumb], list[Breadcrumb]]:
    """Split into (active, expired) in one pass."""
    now = now or utcnow()
    active, expired = [], []
    for b in breadcrumbs:
        (expired if is_expired(b, now) else active).append(b)
    return active, expired


@dataclass
class CoverageReport:
    root: Path
    covered: list[str] = field(default_factory=list)
    uncovered: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.covered) + len(self.uncovered)

    @property
    def percent(self) -> float:
        if not self.total:
            return 0.0
        return round(len(self.covered) / self.total * 100, 1)


def coverage(
    root: str | Path,
    breadcrumbs: Iterable[Breadcrumb],
    matcher: PathMatcher,
    pattern: str = "**/*",
    ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
    include_expired: bool = False,
    now: Optional[datetime] = None,
) -> CoverageReport:
    """Which files under root carry at least one active breadcrumb."""
    root = Path(root)
    now = now or utcnow()
    candidates = [
        b for b in breadcrumbs if include_expired or not is_expired(b, now)
    ]

    report = CoverageReport(root=root)
    for f in expand_glob(pattern, root, ignore_dirs=ignore_dirs):
        rel = f.relative_to(root).as_posix()
        if any(matcher.matches(b.pattern, f) for b in candidates):
            report.covered.append(rel)
        else:
            report.uncovered.append(rel)
    return report


def severity_sort_key(breadcrumb: Breadcrumb) -> tuple[int, str]:
    """Most severe first, then by path."""
    return (-Severity(breadcrumb.severity).rank, breadcrumb.path)
