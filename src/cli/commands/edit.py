"""Edit and remove CLI commands."""

from typing import Optional

import click
import structlog

from cli.output import fail, handle_errors, output_json
from cli.utils import get_components, resolve_breadcrumb
from crumbs.query import parse_timestamp, parse_ttl, utcnow

logger = structlog.get_logger()


@click.command()
@click.argument("path_or_id")
@click.option("-m", "--message", help="New message (replaces existing)")
@click.option("--append", help="Append to existing message")
@click.option("-s", "--severity", type=click.Choice(["info", "warn", "stop"]), help="New severity")
@click.option("-e", "--expires", help="New expiry date (ISO 8601)")
@click.option("--ttl", help="New time to live, e.g. 30m, 2h, 7d")
@click.option("--clear-expiration", is_flag=True, help="Remove expiry and TTL")
@handle_errors("EDIT_FAILED")
def edit(
    path_or_id: str,
    message: Optional[str],
    append: Optional[str],
    severity: Optional[str],
    expires: Optional[str],
    ttl: Optional[str],
    clear_expiration: bool,
):
    """Change the message, severity or expiry of a breadcrumb."""
    if not any([message, append, severity, expires, ttl, clear_expiration]):
        fail(
            "NO_CHANGES",
            "No changes specified. Use --message, --append, --severity, "
            "--expires, --ttl, or --clear-expiration.",
        )
    if message and append:
        fail("CONFLICTING_OPTIONS", "Cannot use both --message and --append.")
    if clear_expiration and (expires or ttl):
        fail("CONFLICTING_OPTIONS", "Cannot use --clear-expiration with --expires or --ttl.")
    if expires and ttl:
        fail("CONFLICTING_OPTIONS", "Use either --expires or --ttl, not both.")

    if expires:
        try:
            when = parse_timestamp(expires)
        except ValueError:
            fail("INVALID_DATE", f"Invalid expiration date '{expires}'. Use ISO 8601.")
        if when <= utcnow():
            fail("INVALID_DATE", "Expiration date must be in the future.")
        expires = when.isoformat()
    if ttl:
        try:
            parse_ttl(ttl)
        except ValueError as e:
            fail("INVALID_TTL", str(e))

    c = get_components()
    data = c["store"].load()
    breadcrumb = resolve_breadcrumb(data, path_or_id, c["matcher"].cwd)
    original_message = breadcrumb.message

    changes = {}
    if message:
        breadcrumb.message = message
        changes["message"] = {"from": original_message, "to": message}
    if append:
        breadcrumb.message = f"{breadcrumb.message} {append}"
        changes["message"] = {"from": original_message, "appended": append}
    if severity:
        breadcrumb.severity = severity
        changes["severity"] = severity

    if clear_expiration:
        breadcrumb.expires = None
        breadcrumb.ttl = None
        changes["cleared_expiration"] = True
    elif expires:
        breadcrumb.expires = expires
        breadcrumb.ttl = None
        changes["expires"] = expires
    elif ttl:
        breadcrumb.ttl = ttl
        breadcrumb.expires = None
        changes["ttl"] = ttl

    c["store"].save(data)
    logger.info("breadcrumb.edited", id=breadcrumb.id, fields=sorted(changes))
    output_json({"success": True, "breadcrumb": breadcrumb.to_dict(), "changes": changes})


@click.command()
@click.argument("path", required=False)
@click.option("-i", "--id", "breadcrumb_id", help="Remove by ID instead of path")
@handle_errors("RM_FAILED")
def rm(path: Optional[str], breadcrumb_id: Optional[str]):
    """Remove a breadcrumb."""
    if not path and not breadcrumb_id:
        fail("MISSING_ARGUMENT", "Must provide either a path or --id")

    c = get_components()
    data = c["store"].load()
    breadcrumb = resolve_breadcrumb(data, breadcrumb_id or path, c["matcher"].cwd)

    removed = c["store"].remove(breadcrumb.id)
    logger.info("breadcrumb.removed", id=removed.id, path=removed.path)
    output_json({"success": True, "removed": removed.to_dict()})
