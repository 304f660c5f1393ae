"""Shared test fixtures for breadcrumb."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from crumbs.models import Breadcrumb  # noqa: E402
from matching import PathMatcher  # noqa: E402
from matching.patterns import classify  # noqa: E402

BREADCRUMB_ENV = (
    "BREADCRUMB_FILE",
    "BREADCRUMB_AUTHOR",
    "BREADCRUMB_SOURCE",
    "BREADCRUMB_SESSION_ID",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's breadcrumb environment out of tests."""
    for name in BREADCRUMB_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project(tmp_path):
    """A small source tree to match against."""
    files = [
        "src/auth/login.ts",
        "src/auth/session.ts",
        "src/lib/util.ts",
        "src/lib/deep/nested.ts",
        "src/index.js",
        "docs/readme.md",
        ".env",
        "config/.secrets.json",
    ]
    for rel in files:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {rel}\n")
    return tmp_path


@pytest.fixture
def matcher(tmp_path):
    return PathMatcher(tmp_path)


@pytest.fixture
def now():
    return datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


_counter = iter(range(100000))


def make_breadcrumb(path: str, **overrides) -> Breadcrumb:
    """Build a valid Breadcrumb with sensible defaults."""
    fields = {
        "id": f"b_{next(_counter):06d}",
        "path": path,
        "pattern_type": classify(path),
        "message": f"Careful with {path}.",
        "severity": "warn",
        "added_at": (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat(),
    }
    fields.update(overrides)
    return Breadcrumb(**fields)


@pytest.fixture
def crumb():
    return make_breadcrumb


