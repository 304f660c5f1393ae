"""JSON and rich output for CLI commands."""

import json
import sys
from functools import wraps
from typing import Iterable, Optional

import click
from rich.table import Table

from crumbs.models import Breadcrumb
from crumbs.query import expiration_info
from crumbs.storage import BreadcrumbError
from matching import GlobSyntaxError

from .utils import console

SEVERITY_STYLE = {"info": "cyan", "warn": "yellow", "stop": "red bold"}


def output_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def fail(code: str, message: str, exit_code: int = 1):
    """Print a JSON error to stderr and exit."""
    click.echo(json.dumps({"error": True, "code": code, "message": message}, indent=2), err=True)
    sys.exit(exit_code)


def handle_errors(default_code: str):
    """Turn store and validation errors into JSON errors with exit code 1."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except BreadcrumbError as e:
                fail(e.code, str(e))
            except GlobSyntaxError as e:
                fail("INVALID_PATTERN", str(e))
            except ValueError as e:
                fail(default_code, str(e))

        return wrapper

    return decorator


def breadcrumb_table(breadcrumbs: Iterable[Breadcrumb], title: Optional[str] = None) -> Table:
    table = Table(show_header=True, title=title)
    table.add_column("ID", style="dim")
    table.add_column("Severity")
    table.add_column("Path", style="cyan")
    table.add_column("Message")
    table.add_column("Expires", style="dim")

    for b in breadcrumbs:
        style = SEVERITY_STYLE.get(str(b.severity), "")
        table.add_row(
            b.id,
            f"[{style}]{b.severity}[/]" if style else str(b.severity),
            b.path,
            b.message[:60],
            expiration_info(b) or "",
        )
    return table


def print_breadcrumbs(breadcrumbs: list[Breadcrumb], title: Optional[str] = None) -> None:
    if not breadcrumbs:
        console.print("[yellow]No breadcrumbs found.[/]")
        return
    console.print(breadcrumb_table(breadcrumbs, title=title))


def print_detail(breadcrumb: Breadcrumb, extra: Optional[dict] = None) -> None:
    style = SEVERITY_STYLE.get(str(breadcrumb.severity), "")
    console.print(f"\n[{style}]{str(breadcrumb.severity).upper()}[/] [cyan bold]{breadcrumb.path}[/]")
    console.print(f"[dim]{breadcrumb.id} | {breadcrumb.pattern_type} | {breadcrumb.source}[/]")
    console.print(breadcrumb.message)
    info = expiration_info(breadcrumb)
    if info:
        console.print(f"[dim]Expires: {info}[/]")
    if breadcrumb.added_by:
        console.print(f"[dim]Added by: {breadcrumb.added_by} at {breadcrumb.added_at or '?'}[/]")
    for key, value in (extra or {}).items():
        console.print(f"[dim]{key}: {value}[/]")
