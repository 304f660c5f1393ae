"""Read-only CLI commands: show, ls, search, status."""

import re
from collections import Counter
from typing import Optional

import click

from cli.output import fail, handle_errors, output_json, print_breadcrumbs, print_detail
from cli.utils import console, get_components, resolve_breadcrumb
from crumbs.query import expiration_info, is_expired, severity_sort_key, utcnow
from shared_types import Severity
from staleness import check_staleness

SEVERITIES = [s.value for s in Severity]


def matches_path_segment(path: str, segment: str) -> bool:
    """True if a directory or filename in path is segment ("lib" matches lib/ and lib.ts)."""
    parts = [p for p in path.replace("\\", "/").split("/") if p]
    return any(p == segment or p.startswith(segment + ".") for p in parts)


@click.command()
@click.argument("path", required=False)
@click.option("-i", "--id", "breadcrumb_id", help="Show by ID instead of path")
@click.option("-p", "--pretty", is_flag=True, help="Human-readable output")
@handle_errors("SHOW_FAILED")
def show(path: Optional[str], breadcrumb_id: Optional[str], pretty: bool):
    """Show one breadcrumb with its expiry and staleness."""
    if not path and not breadcrumb_id:
        fail("MISSING_ARGUMENT", "Must provide either a path or --id")

    c = get_components()
    data = c["store"].load()
    breadcrumb = resolve_breadcrumb(data, breadcrumb_id or path, c["matcher"].cwd)

    verdict, _ = check_staleness(
        breadcrumb.code_hash, breadcrumb.path, breadcrumb.pattern_type, c["cwd"]
    )
    extra = {
        "expired": is_expired(breadcrumb),
        "expiration": expiration_info(breadcrumb),
        "staleness": str(verdict),
    }

    if pretty:
        print_detail(breadcrumb, {k: v for k, v in extra.items() if v is not None})
        return
    output_json({**breadcrumb.to_dict(), **{k: v for k, v in extra.items() if v is not None}})


@click.command()
@click.option("-e", "--expired", "include_expired", is_flag=True, help="Include expired breadcrumbs")
@click.option("-s", "--severity", type=click.Choice(SEVERITIES), help="Filter by severity")
@click.option("-p", "--pretty", is_flag=True, help="Human-readable output")
@handle_errors("LS_FAILED")
def ls(include_expired: bool, severity: Optional[str], pretty: bool):
    """List breadcrumbs."""
    c = get_components()
    data = c["store"].load()
    now = utcnow()

    breadcrumbs = [
        b
        for b in data.breadcrumbs
        if (include_expired or not is_expired(b, now))
        and (severity is None or b.severity == severity)
    ]

    if pretty:
        print_breadcrumbs(breadcrumbs, title="Breadcrumbs")
        return
    output_json({"breadcrumbs": [b.to_dict() for b in breadcrumbs], "count": len(breadcrumbs)})


@click.command()
@click.argument("query")
@click.option("-r", "--regex", is_flag=True, help="Treat query as a regular expression")
@click.option("-i", "--ignore-case", is_flag=True, help="Case-insensitive regex search")
@click.option("-c", "--case-sensitive", is_flag=True, help="Case-sensitive plain search")
@click.option("-e", "--expired", "include_expired", is_flag=True, help="Include expired breadcrumbs")
@click.option("-s", "--severity", type=click.Choice(SEVERITIES), help="Filter by severity")
@click.option("-p", "--path", "segment", help="Filter by directory or filename segment")
@handle_errors("SEARCH_FAILED")
def search(
    query: str,
    regex: bool,
    ignore_case: bool,
    case_sensitive: bool,
    include_expired: bool,
    severity: Optional[str],
    segment: Optional[str],
):
    """Search breadcrumb messages.

    Plain queries are case-insensitive unless -c; regex queries are
    case-sensitive unless -i.
    """
    insensitive = ignore_case if regex else not case_sensitive
    flags = re.IGNORECASE if insensitive else 0
    try:
        pattern = re.compile(query if regex else re.escape(query), flags)
    except re.error as e:
        fail("INVALID_REGEX", f"Invalid regex pattern: {e}")

    c = get_components()
    data = c["store"].load()
    now = utcnow()

    matches = []
    for b in sorted(data.breadcrumbs, key=severity_sort_key):
        if not include_expired and is_expired(b, now):
            continue
        if severity and b.severity != severity:
            continue
        if segment and not matches_path_segment(b.path, segment):
            continue
        found = pattern.search(b.message)
        if found:
            matches.append({**b.to_dict(), "matched_text": found.group(0)})

    counts = Counter(m["severity"] for m in matches)
    output_json(
        {
            "query": query,
            "regex": regex,
            "matches": matches,
            "summary": {
                "total": len(matches),
                "stop": counts["stop"],
                "warnings": counts["warn"],
            },
        }
    )


@click.command()
@click.option("-p", "--pretty", is_flag=True, help="Human-readable output")
@handle_errors("STATUS_FAILED")
def status(pretty: bool):
    """Count active breadcrumbs by severity."""
    c = get_components()
    data = c["store"].load()
    now = utcnow()

    active = [b for b in data.breadcrumbs if not is_expired(b, now)]
    counts = Counter(str(b.severity) for b in active)
    result = {
        "total": len(active),
        "stop": counts["stop"],
        "warnings": counts["warn"],
        "info": counts["info"],
        "expired": len(data.breadcrumbs) - len(active),
    }

    if pretty:
        console.print(f"[bold]{result['total']}[/] active breadcrumbs")
        console.print(
            f"  [red]stop: {result['stop']}[/]  [yellow]warn: {result['warnings']}[/]  "
            f"[cyan]info: {result['info']}[/]"
        )
        if result["expired"]:
            console.print(f"  [dim]{result['expired']} expired (run 'breadcrumb prune')[/]")
        return
    output_json(result)
