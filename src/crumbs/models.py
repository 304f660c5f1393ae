"""Breadcrumb records and the on-disk file model."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from matching.paths import normalize_path
from matching.patterns import PatternSpec
from shared_types import PatternKind, Severity, Source

ID_PATTERN = r"^b_[a-zA-Z0-9]{6}$"
TTL_PATTERN = r"^\d+[smhd]$"
STORE_VERSION = 2


class Breadcrumb(BaseModel):
    """A warning bound to a path pattern.

    ``path`` and ``pattern_type`` are frozen: changing the path of a
    breadcrumb means removing it and adding a new one.
    """

    # Unknown keys written by other tool versions survive a load/save cycle
    model_config = ConfigDict(validate_assignment=True, extra="allow")

    id: str = Field(pattern=ID_PATTERN, frozen=True)
    path: str = Field(min_length=1, frozen=True)
    pattern_type: PatternKind = Field(frozen=True)
    message: str = Field(min_length=1)
    severity: Severity
    source: Source = Source.HUMAN
    added_by: Optional[str] = None
    added_at: Optional[str] = None
    expires: Optional[str] = None
    ttl: Optional[str] = Field(default=None, pattern=TTL_PATTERN)
    session_id: Optional[str] = None
    human_only: Optional[bool] = None
    agent_only: Optional[bool] = None
    code_hash: Optional[str] = None
    last_verified: Optional[str] = None

    @property
    def pattern(self) -> PatternSpec:
        return PatternSpec(raw=self.path, kind=self.pattern_type)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class BreadcrumbFile(BaseModel):
    """Contents of .breadcrumbs.json."""

    version: Literal[1, 2] = STORE_VERSION
    breadcrumbs: list[Breadcrumb] = Field(default_factory=list)

    def get(self, breadcrumb_id: str) -> Optional[Breadcrumb]:
        return next((b for b in self.breadcrumbs if b.id == breadcrumb_id), None)

    def find_by_path(self, path: str, cwd: Optional[str] = None) -> Optional[Breadcrumb]:
        """Look up by the path as entered; with cwd, fall back to normalized equality."""
        for b in self.breadcrumbs:
            if b.path == path:
                return b
        if cwd is None:
            return None
        target = normalize_path(path, cwd)
        return next((b for b in self.breadcrumbs if normalize_path(b.path, cwd) == target), None)

    def remove(self, breadcrumb_id: str) -> Optional[Breadcrumb]:
        for i, b in enumerate(self.breadcrumbs):
            if b.id == breadcrumb_id:
                return self.breadcrumbs.pop(i)
        return None

    def to_dict(self) -> dict:
        return {
            "version": STORE_VERSION,
            "breadcrumbs": [b.to_dict() for b in self.breadcrumbs],
        }
