"""Add and overlap-preview CLI commands."""

from typing import Optional

import click
import structlog

from cli.output import fail, handle_errors, output_json
from cli.utils import author_from_env, detect_source, get_components, session_id_from_env
from crumbs.models import Breadcrumb
from crumbs.query import is_expired, parse_timestamp, parse_ttl, utcnow
from crumbs.storage import generate_id
from matching import PatternSpec, validate_glob
from shared_types import OverlapKind, PatternKind, Severity, Source
from staleness import compute_file_hash

logger = structlog.get_logger()

SEVERITIES = [s.value for s in Severity]
SOURCES = [s.value for s in Source]


def _parse_pattern(path: str) -> PatternSpec:
    spec = PatternSpec.from_raw(path)
    if spec.kind is PatternKind.GLOB:
        validate_glob(path)
    return spec


def _describe(overlaps) -> str:
    return "; ".join(f"{o.kind} of '{o.path}' ({o.existing_id})" for o in overlaps)


@click.command()
@click.argument("path")
@click.argument("message")
@click.option("-s", "--severity", default="warn", type=click.Choice(SEVERITIES), help="Severity")
@click.option("--source", type=click.Choice(SOURCES), help="Who is adding (auto-detected)")
@click.option("-e", "--expires", help="Expiry date (ISO 8601)")
@click.option("--ttl", help="Time to live, e.g. 30m, 2h, 7d")
@click.option("--session", "session_id", help="Tie the breadcrumb to a session")
@click.option("-H", "--human-only", is_flag=True, help="Hide from agents")
@click.option("--agent-only", is_flag=True, help="Hide from humans")
@click.option("-a", "--author", help="Author name")
@click.option("--allow-overlap", is_flag=True, help="Add even if it overlaps existing breadcrumbs")
@handle_errors("ADD_FAILED")
def add(
    path: str,
    message: str,
    severity: str,
    source: Optional[str],
    expires: Optional[str],
    ttl: Optional[str],
    session_id: Optional[str],
    human_only: bool,
    agent_only: bool,
    author: Optional[str],
    allow_overlap: bool,
):
    """Attach a breadcrumb to a file, directory or glob."""
    active_session = session_id or session_id_from_env()
    detected = detect_source(source, active_session)

    if detected is Source.AGENT and severity == Severity.STOP:
        fail(
            "PERMISSION_DENIED",
            "Agents cannot add 'stop' breadcrumbs. Use 'warn' or ask a human.",
            exit_code=2,
        )
    if human_only and agent_only:
        fail("INVALID_FLAGS", "--human-only and --agent-only are mutually exclusive")
    if expires and ttl:
        fail("INVALID_FLAGS", "Use either --expires or --ttl, not both")

    if expires:
        try:
            expires = parse_timestamp(expires).isoformat()
        except ValueError:
            fail("INVALID_DATE", f"Invalid date format: {expires}. Use ISO 8601, e.g. 2026-12-31")
    if ttl:
        try:
            parse_ttl(ttl)
        except ValueError as e:
            fail("INVALID_TTL", str(e))

    spec = _parse_pattern(path)

    c = get_components()
    data = c["store"].load()
    now = utcnow()

    existing = data.find_by_path(path, cwd=c["matcher"].cwd)
    if existing:
        fail(
            "ALREADY_EXISTS",
            f"Breadcrumb already exists for path '{existing.path}' (id: {existing.id}). "
            "Use 'breadcrumb edit' or 'breadcrumb rm' first.",
        )

    active = [b for b in data.breadcrumbs if not is_expired(b, now)]
    found = c["overlaps"].find_overlaps(spec, active)
    if found and not allow_overlap:
        fail("OVERLAP", f"Pattern '{path}' overlaps existing breadcrumbs: {_describe(found)}")

    breadcrumb = Breadcrumb(
        id=generate_id({b.id for b in data.breadcrumbs}),
        path=path,
        pattern_type=spec.kind,
        message=message,
        severity=severity,
        source=detected,
        added_by=author or author_from_env(active_session),
        added_at=now.isoformat(),
        expires=expires,
        ttl=ttl,
        session_id=session_id,
        human_only=True if human_only else None,
        agent_only=True if agent_only else None,
    )

    if spec.kind is PatternKind.EXACT:
        code_hash = compute_file_hash(c["matcher"].normalize(path))
        if code_hash:
            breadcrumb.code_hash = code_hash
            breadcrumb.last_verified = now.isoformat()

    c["store"].add(breadcrumb)
    logger.info("breadcrumb.added", id=breadcrumb.id, path=path, overlaps=len(found))

    result = {"success": True, "breadcrumb": breadcrumb.to_dict()}
    if found:
        result["overlaps"] = [o.to_dict() for o in found]
    output_json(result)


@click.command()
@click.argument("path")
@handle_errors("OVERLAP_FAILED")
def overlaps(path: str):
    """Show which breadcrumbs a new pattern would overlap, without adding it."""
    spec = _parse_pattern(path)
    c = get_components()
    data = c["store"].load()

    active = [b for b in data.breadcrumbs if not is_expired(b)]
    found = c["overlaps"].find_overlaps(spec, active)

    output_json(
        {
            "path": path,
            "pattern_type": str(spec.kind),
            "overlaps": [o.to_dict() for o in found],
            "has_exact": any(o.kind is OverlapKind.EXACT for o in found),
        }
    )
