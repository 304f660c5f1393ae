"""Pydantic configuration models for breadcrumb."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from crumbs.query import DEFAULT_IGNORE_DIRS
from crumbs.storage import STORE_FILENAME

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class StoreConfig(BaseModel):
    """Where breadcrumbs are kept."""

    filename: str = STORE_FILENAME

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"store.filename must be a bare file name, got {v!r}")
        return v


class VerifyConfig(BaseModel):
    """Staleness verification pool."""

    max_workers: int = Field(default=8, ge=1, le=64)
    deadline_seconds: Optional[float] = Field(default=None, gt=0)


class CoverageConfig(BaseModel):
    """File discovery for coverage reports."""

    default_glob: str = "**/*"
    ignore_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE_DIRS))


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    json_mode: bool = Field(default=False, alias="json")

    model_config = {"populate_by_name": True}

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {sorted(VALID_LOG_LEVELS)}")
        return v


class BreadcrumbConfig(BaseModel):
    """Root configuration model."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    verify: VerifyConfig = Field(default_factory=VerifyConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "BreadcrumbConfig":
        return cls.model_validate(data or {})

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)
