"""CLI command modules."""

from .add import add, overlaps
from .check import check, guard
from .coverage import coverage
from .edit import edit, rm
from .init import init
from .listing import ls, search, show, status
from .sessions import claim, prune, release, session_end, wait
from .verify import verify

__all__ = [
    "init",
    "add",
    "overlaps",
    "edit",
    "rm",
    "show",
    "ls",
    "search",
    "status",
    "check",
    "guard",
    "coverage",
    "verify",
    "prune",
    "claim",
    "release",
    "wait",
    "session_end",
]
