"""Session and cleanup CLI commands: claim, release, wait, session-end, prune."""

import sys
import time
from typing import Optional

import click
import structlog

from cli.output import fail, handle_errors, output_json
from cli.utils import author_from_env, get_components, session_id_from_env
from crumbs.models import Breadcrumb
from crumbs.query import (
    expiration_info,
    find_matching,
    parse_ttl,
    partition_expired,
    remove_session,
    utcnow,
)
from crumbs.storage import generate_id
from matching import PatternSpec, validate_glob
from shared_types import PatternKind, Severity, Source

logger = structlog.get_logger()


@click.command()
@click.option("--dry-run", is_flag=True, help="Show what would be removed")
@handle_errors("PRUNE_FAILED")
def prune(dry_run: bool):
    """Remove expired breadcrumbs."""
    c = get_components()
    if not c["store"].exists():
        output_json({"success": True, "removed": 0, "remaining": 0})
        return

    data = c["store"].load()
    remaining, expired = partition_expired(data.breadcrumbs)

    if dry_run:
        output_json(
            {
                "dry_run": True,
                "would_remove": len(expired),
                "expired": [
                    {"id": b.id, "path": b.path, "expiration": expiration_info(b)} for b in expired
                ],
            }
        )
        return

    if expired:
        data.breadcrumbs = remaining
        c["store"].save(data)
        logger.info("breadcrumbs.pruned", removed=len(expired))
    output_json({"success": True, "removed": len(expired), "remaining": len(remaining)})


@click.command()
@click.argument("path")
@click.argument("message", required=False)
@click.option("-t", "--task", help="What the claim is for")
@click.option("--ttl", help="Time to live, to outlast the session (e.g. 2h)")
@handle_errors("CLAIM_FAILED")
def claim(path: str, message: Optional[str], task: Optional[str], ttl: Optional[str]):
    """Mark PATH as work in progress for the current session."""
    session_id = session_id_from_env()
    if not session_id and not ttl:
        fail(
            "NO_SESSION",
            "BREADCRUMB_SESSION_ID is required for claim (or use --ttl for a time-limited claim)",
        )
    if ttl:
        try:
            parse_ttl(ttl)
        except ValueError as e:
            fail("INVALID_TTL", str(e))

    spec = PatternSpec.from_raw(path)
    if spec.kind is PatternKind.GLOB:
        validate_glob(path)

    c = get_components()
    data = c["store"].load()
    existing = data.find_by_path(path, cwd=c["matcher"].cwd)
    if existing:
        fail(
            "ALREADY_CLAIMED",
            f"Path '{path}' is already claimed (id: {existing.id}). Use 'breadcrumb release' first.",
        )

    added_by = author_from_env(session_id) or "agent"
    if task:
        added_by = f"{added_by} ({task})"

    breadcrumb = Breadcrumb(
        id=generate_id({b.id for b in data.breadcrumbs}),
        path=path,
        pattern_type=spec.kind,
        message=message or "Work in progress",
        severity=Severity.WARN,
        source=Source.AGENT,
        added_by=added_by,
        added_at=utcnow().isoformat(),
        session_id=session_id,
        ttl=ttl,
    )
    data.breadcrumbs.append(breadcrumb)
    c["store"].save(data)
    logger.info("path.claimed", id=breadcrumb.id, path=path, session=session_id)
    output_json({"success": True, "breadcrumb": breadcrumb.to_dict()})


@click.command()
@click.argument("path")
@handle_errors("RELEASE_FAILED")
def release(path: str):
    """Release a claim made by the current session.

    Without a session only TTL claims with no session are released.
    """
    session_id = session_id_from_env()
    c = get_components()
    data = c["store"].load()
    matcher = c["matcher"]
    target = matcher.normalize(path)

    def released(b: Breadcrumb) -> bool:
        if matcher.normalize(b.path) != target or b.session_id != session_id:
            return False
        return bool(session_id or b.ttl)

    kept = [b for b in data.breadcrumbs if not released(b)]
    count = len(data.breadcrumbs) - len(kept)
    if count:
        data.breadcrumbs = kept
        c["store"].save(data)

    output_json({"success": True, "released": count, "path": target})


def is_claim(b: Breadcrumb) -> bool:
    """Session claims and TTL warnings block; permanent notes never do."""
    return bool(b.session_id or (b.severity == Severity.WARN and b.ttl))


@click.command()
@click.argument("path")
@click.option("--timeout", default="5m", show_default=True, help="Maximum wait, e.g. 30s, 5m, 1h")
@click.option("--poll", default="5s", show_default=True, help="Poll interval, e.g. 1s, 5s, 1m")
@handle_errors("WAIT_FAILED")
def wait(path: str, timeout: str, poll: str):
    """Wait until no active claim covers PATH.

    Exits 0 once the path is clear, 1 on timeout.
    """
    try:
        timeout_seconds = parse_ttl(timeout).total_seconds()
    except ValueError as e:
        fail("INVALID_TIMEOUT", str(e))
    try:
        poll_seconds = parse_ttl(poll).total_seconds()
    except ValueError as e:
        fail("INVALID_POLL", str(e))

    c = get_components()
    matcher = c["matcher"]
    target = matcher.normalize(path)
    started = time.monotonic()

    while True:
        data = c["store"].load()
        claims = [b for b in find_matching(data.breadcrumbs, target, matcher) if is_claim(b)]
        elapsed = time.monotonic() - started

        if not claims:
            output_json(
                {"success": True, "path": target, "status": "clear", "waited_ms": int(elapsed * 1000)}
            )
            return

        if elapsed >= timeout_seconds:
            output_json(
                {
                    "success": False,
                    "path": target,
                    "status": "timeout",
                    "waited_ms": int(elapsed * 1000),
                    "blocking_claims": [b.to_dict() for b in claims],
                }
            )
            sys.exit(1)

        logger.debug("wait.blocked", path=target, claims=len(claims))
        time.sleep(poll_seconds)


@click.command("session-end")
@click.argument("session_id")
@handle_errors("SESSION_END_FAILED")
def session_end(session_id: str):
    """Remove every breadcrumb tied to a finished session."""
    if not session_id.strip():
        fail("INVALID_SESSION", "Session ID cannot be empty")

    c = get_components()
    if not c["store"].exists():
        output_json({"success": True, "session_id": session_id, "removed": 0})
        return

    data = c["store"].load()
    remaining, removed = remove_session(data.breadcrumbs, session_id)
    if removed:
        data.breadcrumbs = remaining
        c["store"].save(data)
        logger.info("session.ended", session=session_id, removed=len(removed))

    output_json(
        {
            "success": True,
            "session_id": session_id,
            "removed": len(removed),
            "breadcrumbs_removed": [{"id": b.id, "path": b.path} for b in removed],
        }
    )
