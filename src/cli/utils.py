"""Shared CLI utilities."""

import os
import re
from pathlib import Path
from typing import Optional

import structlog
from rich.console import Console

from shared_types import Source

console = Console()
logger = structlog.get_logger()


def get_components():
    """Initialize config, store and matcher for the current directory.

    The store may not exist yet; its first load() raises StoreNotFoundError.
    """
    from cli.config import load_config_model
    from crumbs.storage import BreadcrumbStore, find_store_path
    from matching import OverlapAnalyzer, PathMatcher

    config_model = load_config_model()
    cwd = Path.cwd()

    store_path = find_store_path(cwd, filename=config_model.store.filename)
    if store_path is None:
        logger.debug("store.missing", cwd=str(cwd))
        store_path = cwd / config_model.store.filename
    store = BreadcrumbStore(store_path)

    matcher = PathMatcher(cwd)

    return {
        "config_model": config_model,
        "cwd": cwd,
        "store": store,
        "matcher": matcher,
        "overlaps": OverlapAnalyzer(matcher),
    }


def session_id_from_env() -> Optional[str]:
    return os.environ.get("BREADCRUMB_SESSION_ID") or None


def author_from_env(session_id: Optional[str] = None) -> Optional[str]:
    author = os.environ.get("BREADCRUMB_AUTHOR")
    if author:
        return author
    if session_id:
        return f"session-{session_id[:8]}"
    return None


def detect_source(explicit: Optional[str], session_id: Optional[str]) -> Source:
    """Explicit flag, then $BREADCRUMB_SOURCE, then agent iff a session is active."""
    value = explicit or os.environ.get("BREADCRUMB_SOURCE")
    if value:
        return Source(value)
    return Source.AGENT if session_id else Source.HUMAN


def resolve_breadcrumb(data, ref: str, cwd: str):
    """Find a breadcrumb by ID ("b_xxxxxx") or by path."""
    from crumbs.models import ID_PATTERN
    from crumbs.storage import BreadcrumbNotFoundError

    if re.match(ID_PATTERN, ref):
        found = data.get(ref)
    else:
        found = data.find_by_path(ref, cwd=cwd)
    if found is None:
        raise BreadcrumbNotFoundError(f"No breadcrumb found for '{ref}'")
    return found
