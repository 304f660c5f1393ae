"""Coverage CLI command."""

from typing import Optional

import click

from cli.output import handle_errors, output_json
from cli.utils import console, get_components
from crumbs.query import coverage as compute_coverage


@click.command()
@click.argument("path", default=".")
@click.option("-g", "--glob", "pattern", help="Glob for files to include (default from config)")
@click.option("-e", "--expired", "include_expired", is_flag=True, help="Count expired breadcrumbs")
@click.option("--show-covered", is_flag=True, help="List covered files")
@click.option("--show-uncovered", is_flag=True, help="List uncovered files")
@click.option("-l", "--limit", default=20, type=click.IntRange(min=1), help="Max files per list")
@click.option("-p", "--pretty", is_flag=True, help="Human-readable output")
@handle_errors("COVERAGE_FAILED")
def coverage(
    path: str,
    pattern: Optional[str],
    include_expired: bool,
    show_covered: bool,
    show_uncovered: bool,
    limit: int,
    pretty: bool,
):
    """Show which files under PATH carry a breadcrumb."""
    c = get_components()
    config = c["config_model"]
    data = c["store"].load()
    root = c["matcher"].normalize(path)

    report = compute_coverage(
        root,
        data.breadcrumbs,
        c["matcher"],
        pattern=pattern or config.coverage.default_glob,
        ignore_dirs=config.coverage.ignore_dirs,
        include_expired=include_expired,
    )

    result = {
        "path": root,
        "total_files": report.total,
        "covered_files": len(report.covered),
        "uncovered_files": len(report.uncovered),
        "coverage_percent": report.percent,
    }
    if not report.total:
        result["message"] = "No files found matching the pattern."
    else:
        result["covered"] = report.covered[:limit] if show_covered else []
        result["uncovered"] = report.uncovered[:limit] if show_uncovered else []
        for name, files, shown in (
            ("covered", report.covered, show_covered),
            ("uncovered", report.uncovered, show_uncovered),
        ):
            if shown and len(files) > limit:
                result[f"{name}_truncated"] = True
                result[f"{name}_total"] = len(files)

    if pretty:
        console.print(
            f"[bold]{report.percent}%[/] covered "
            f"({len(report.covered)}/{report.total} files under {root})"
        )
        for f in result.get("uncovered", []):
            console.print(f"  [yellow]uncovered[/] {f}")
        for f in result.get("covered", []):
            console.print(f"  [green]covered[/] {f}")
        return
    output_json(result)
