"""JSON-backed breadcrumb store (.breadcrumbs.json)."""

import json
import os
import uuid
from pathlib import Path
from typing import Container, Mapping, Optional

import structlog
from pydantic import ValidationError

from .models import Breadcrumb, BreadcrumbFile

STORE_FILENAME = ".breadcrumbs.json"

logger = structlog.get_logger()


class BreadcrumbError(Exception):
    """Base error for store and breadcrumb operations."""

    code = "BREADCRUMB_ERROR"


class StoreNotFoundError(BreadcrumbError):
    code = "NO_CONFIG"


class StoreExistsError(BreadcrumbError):
    code = "CONFIG_EXISTS"


class StoreFormatError(BreadcrumbError):
    code = "INVALID_CONFIG"


class BreadcrumbNotFoundError(BreadcrumbError):
    code = "NOT_FOUND"


class DuplicateBreadcrumbError(BreadcrumbError):
    code = "ALREADY_EXISTS"


def generate_id(taken: Container[str] = ()) -> str:
    """New "b_xxxxxx" id, retried until it is not in taken."""
    while True:
        candidate = f"b_{uuid.uuid4().hex[:6]}"
        if candidate not in taken:
            return candidate


def find_store_path(
    start_dir: Optional[str | Path] = None,
    filename: str = STORE_FILENAME,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Locate the store: $BREADCRUMB_FILE, else walk up from start_dir."""
    env = os.environ if env is None else env
    override = env.get("BREADCRUMB_FILE")
    if override:
        return Path(override).expanduser().resolve()

    current = Path(start_dir or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


class BreadcrumbStore:
    """Load and save the breadcrumb file."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.is_file()

    def init(self, force: bool = False) -> BreadcrumbFile:
        if self.exists() and not force:
            raise StoreExistsError(
                f"Config file already exists at {self.path}. Use --force to overwrite."
            )
        data = BreadcrumbFile()
        self.save(data)
        logger.info("store.initialized", path=str(self.path))
        return data

    def load(self) -> BreadcrumbFile:
        if not self.exists():
            raise StoreNotFoundError(
                f"No {self.path.name} found. Run 'breadcrumb init' first."
            )
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StoreFormatError(f"Invalid JSON in {self.path}: {e}") from e

        try:
            data = BreadcrumbFile.model_validate(raw)
        except ValidationError as e:
            raise StoreFormatError(f"Invalid config {self.path}: {e}") from e

        logger.debug("store.loaded", path=str(self.path), count=len(data.breadcrumbs))
        return data

    def save(self, data: BreadcrumbFile) -> Path:
        """Write atomically: temp file in the same directory, then replace."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data.to_dict(), indent=2, ensure_ascii=False) + "\n"
        tmp = self.path.with_name(f".{self.path.name}.tmp")
        try:
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("store.saved", path=str(self.path), count=len(data.breadcrumbs))
        return self.path

    def add(self, breadcrumb: Breadcrumb) -> Breadcrumb:
        data = self.load()
        if data.get(breadcrumb.id):
            raise DuplicateBreadcrumbError(f"Breadcrumb id '{breadcrumb.id}' is already in use")
        existing = data.find_by_path(breadcrumb.path)
        if existing:
            raise DuplicateBreadcrumbError(
                f"Breadcrumb already exists for path '{breadcrumb.path}' "
                f"(id: {existing.id}). Use 'breadcrumb rm' first."
            )
        data.breadcrumbs.append(breadcrumb)
        self.save(data)
        return breadcrumb

    def remove(self, breadcrumb_id: str) -> Breadcrumb:
        data = self.load()
        removed = data.remove(breadcrumb_id)
        if removed is None:
            raise BreadcrumbNotFoundError(f"No breadcrumb found with ID '{breadcrumb_id}'")
        self.save(data)
        return removed
