"""Shared enums and types for breadcrumb."""

from enum import StrEnum


class PatternKind(StrEnum):
    EXACT = "exact"
    DIRECTORY = "directory"
    GLOB = "glob"


class Severity(StrEnum):
    INFO = "info"
    WARN = "warn"
    STOP = "stop"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.INFO: 1, Severity.WARN: 2, Severity.STOP: 3}


class Source(StrEnum):
    HUMAN = "human"
    AGENT = "agent"


class Staleness(StrEnum):
    VERIFIED = "verified"
    STALE = "stale"
    UNKNOWN = "unknown"


class OverlapKind(StrEnum):
    EXACT = "exact"
    SUBSET = "subset"
    SUPERSET = "superset"
    INTERSECT = "intersect"


class Disjointness(StrEnum):
    PROVEN_DISJOINT = "proven_disjoint"
    POSSIBLY_INTERSECTING = "possibly_intersecting"
