"""Verify CLI command."""

import sys
from typing import Optional

import click
import structlog

from cli.output import handle_errors, output_json
from cli.utils import get_components
from crumbs.query import utcnow
from matching.paths import is_ancestor_or_equal
from shared_types import PatternKind, Staleness
from staleness import StalenessVerifier

logger = structlog.get_logger()


@click.command()
@click.argument("path", required=False)
@click.option("--update", is_flag=True, help="Record current hashes as verified")
@click.option("--stale-only", is_flag=True, help="Only list stale breadcrumbs")
@handle_errors("VERIFY_FAILED")
def verify(path: Optional[str], update: bool, stale_only: bool):
    """Compare stored file hashes with the files on disk.

    Exits 1 if any breadcrumb is stale.
    """
    c = get_components()
    config = c["config_model"]
    data = c["store"].load()
    matcher = c["matcher"]

    if path:
        target = matcher.normalize(path)
        to_check = [
            b for b in data.breadcrumbs if is_ancestor_or_equal(target, matcher.normalize(b.path))
        ]
    else:
        to_check = list(data.breadcrumbs)

    if not to_check:
        output_json(
            {
                "verified": 0,
                "stale": 0,
                "unknown": 0,
                "breadcrumbs": [],
                "message": f"No breadcrumbs found for path: {path}" if path else "No breadcrumbs in config",
            }
        )
        return

    verifier = StalenessVerifier(
        c["cwd"],
        max_workers=config.verify.max_workers,
        deadline_seconds=config.verify.deadline_seconds,
    )
    outcomes = verifier.run(to_check)

    counts = {str(s): 0 for s in Staleness}
    entries = []
    skipped = 0
    updated = False
    now = utcnow().isoformat()

    for outcome in outcomes:
        b = outcome.record
        if outcome.skipped:
            skipped += 1
            verdict, fresh_hash = Staleness.UNKNOWN, None
        else:
            verdict, fresh_hash = outcome.result
        counts[str(verdict)] += 1

        if not stale_only or verdict is Staleness.STALE:
            entry = {"id": b.id, "path": b.path, "staleness": str(verdict), "message": b.message}
            if b.code_hash:
                entry["stored_hash"] = b.code_hash
            if fresh_hash:
                entry["current_hash"] = fresh_hash
            entries.append(entry)

        if update and fresh_hash and b.pattern_type is PatternKind.EXACT:
            b.code_hash = fresh_hash
            b.last_verified = now
            updated = True

    if updated:
        c["store"].save(data)

    result = {**counts, "breadcrumbs": entries}
    if skipped:
        result["skipped"] = skipped
    if updated:
        result["updated"] = True

    logger.debug("verify.summary", **counts, skipped=skipped, updated=updated)
    output_json(result)

    if counts["stale"]:
        sys.exit(1)
