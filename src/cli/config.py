"""Configuration loading and management."""

from pathlib import Path
from typing import Optional

import yaml

from .config_models import BreadcrumbConfig
from .logging_config import setup_logging as _setup_structlog

CONFIG_FILENAME = ".breadcrumb.yaml"


def find_config(cwd: Optional[Path] = None) -> Optional[Path]:
    """Find config file in standard locations."""
    locations = [
        (cwd or Path.cwd()) / CONFIG_FILENAME,
        Path.home() / ".breadcrumb" / "config.yaml",
    ]
    for loc in locations:
        if loc.exists():
            return loc
    return None


def load_config_model(config_path: Optional[Path] = None) -> BreadcrumbConfig:
    """Load configuration as Pydantic model with validation."""
    base_config = {}

    path = config_path or find_config()
    if path and path.exists():
        try:
            with open(path) as f:
                base_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")

    if not isinstance(base_config, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    try:
        return BreadcrumbConfig.from_dict(base_config)
    except Exception as e:
        raise ValueError(f"Config validation failed: {e}")


def setup_logging(config: BreadcrumbConfig, verbose: bool = False) -> None:
    """Configure logging based on config."""
    level = "DEBUG" if verbose else config.logging.level
    _setup_structlog(json_mode=config.logging.json_mode, level=level)
