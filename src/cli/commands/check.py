"""Check and guard CLI commands."""

import subprocess
import sys
from pathlib import Path
from typing import Optional

import click
import structlog

from cli.output import fail, handle_errors, output_json
from cli.utils import get_components
from crumbs.query import find_matching, highest_severity, utcnow
from crumbs.suggestion import generate_suggestion
from matching import expand_glob
from shared_types import Source, Staleness
from staleness import StalenessVerifier

logger = structlog.get_logger()

EXIT_CODES = {"clear": 0, "info": 0, "warn": 1, "stop": 2}


def _paths_to_check(target: str, recursive: bool, ignore_dirs) -> list[str]:
    paths = [target]
    if recursive and Path(target).is_dir():
        paths.extend(str(p) for p in expand_glob("**/*", target, ignore_dirs=ignore_dirs))
    return paths


@click.command()
@click.argument("path")
@click.option("-r", "--recursive", is_flag=True, help="Also check every file under a directory")
@click.option(
    "--audience",
    type=click.Choice([s.value for s in Source]),
    help="Hide breadcrumbs not meant for this reader",
)
@handle_errors("CHECK_FAILED")
def check(path: str, recursive: bool, audience: Optional[str]):
    """Report breadcrumbs that apply to PATH.

    Exits 0 when clear or info, 1 for warn and 2 for stop.
    """
    c = get_components()
    config = c["config_model"]
    data = c["store"].load()
    matcher = c["matcher"]
    target = matcher.normalize(path)
    now = utcnow()
    reader = Source(audience) if audience else None

    matches = {}
    for checked in _paths_to_check(target, recursive, config.coverage.ignore_dirs):
        for b in find_matching(data.breadcrumbs, checked, matcher, audience=reader, now=now):
            matches.setdefault(b.id, b)
    found = list(matches.values())

    verifier = StalenessVerifier(
        c["cwd"],
        max_workers=config.verify.max_workers,
        deadline_seconds=config.verify.deadline_seconds,
    )
    outcomes = verifier.run(found)

    entries = []
    stats = {str(s): 0 for s in Staleness}
    for outcome in outcomes:
        verdict = outcome.result.verdict if outcome.result else Staleness.UNKNOWN
        stats[str(verdict)] += 1
        entries.append({**outcome.record.to_dict(), "staleness": str(verdict)})

    status = highest_severity(found)
    result = {
        "status": status,
        "path": target,
        "breadcrumbs": entries,
        "suggestion": generate_suggestion(found),
    }
    if stats["verified"] or stats["stale"]:
        result["staleness_summary"] = stats

    logger.debug("check.done", path=target, status=status, matches=len(found))
    output_json(result)

    code = EXIT_CODES[status]
    if code:
        sys.exit(code)


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("path")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.option("-f", "--force", is_flag=True, help="Run the command even on a stop breadcrumb")
@click.option("-q", "--quiet", is_flag=True, help="Don't print the suggestion to stderr")
@click.option("-H", "--include-human-only", is_flag=True, help="Include human-only breadcrumbs")
@handle_errors("GUARD_FAILED")
def guard(path: str, command: tuple[str, ...], force: bool, quiet: bool, include_human_only: bool):
    """Check PATH, then run COMMAND unless a stop breadcrumb applies.

    Use -- before the command: breadcrumb guard src/a.ts -- make test.
    Exits 2 when blocked, otherwise with the command's exit code.
    """
    c = get_components()
    data = c["store"].load()
    target = c["matcher"].normalize(path)
    reader = None if include_human_only else Source.AGENT

    found = find_matching(data.breadcrumbs, target, c["matcher"], audience=reader)
    status = highest_severity(found)
    suggestion = generate_suggestion(found)
    if suggestion and not quiet:
        click.echo(suggestion, err=True)

    if status == "stop" and not force:
        logger.info("guard.blocked", path=target, matches=len(found))
        sys.exit(EXIT_CODES["stop"])

    try:
        completed = subprocess.run(list(command))
    except OSError as e:
        fail("COMMAND_FAILED", f"Failed to run command: {e}")

    code = completed.returncode
    # Killed by a signal: report it the way a shell would
    sys.exit(code if code >= 0 else 128 - code)
