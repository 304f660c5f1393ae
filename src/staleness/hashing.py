"""Content hashing for staleness checks."""

import hashlib
from pathlib import Path
from typing import Optional

# 64 bits of SHA-256: enough to notice edits, not meant as a security digest
HASH_LENGTH = 16
_CHUNK_SIZE = 64 * 1024


def compute_file_hash(path: str | Path) -> Optional[str]:
    """Hash a regular file's full content. None if it can't be read."""
    path = Path(path)
    try:
        if not path.is_file():
            return None
        digest = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError:
        return None
    return digest.hexdigest()[:HASH_LENGTH]
