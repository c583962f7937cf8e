"""Path derivation helpers for the file cache.

Maps keys and groups to filesystem-safe names and cleans up directory trees.
"""

import hashlib
import logging
import re
import shutil
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CACHE_FILE_SUFFIX = ".cache"
DIGEST_LENGTH = 16
TENANT_DIR_MARKER = "@"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")

def sanitize(name: str) -> str:
    """Replaces every character outside [A-Za-z0-9_-] with an underscore."""
    return _UNSAFE_CHARS.sub("_", str(name))

def safe_name(name: str) -> str:
    """Sanitizes a key, group or tenant for use as a path segment.

    Names that survive sanitization unchanged stay readable. Otherwise a
    digest of the raw name is appended after a `.`, which sanitized text
    never contains, so distinct names never map to the same segment.
    """
    raw_name = str(name)
    safe = sanitize(raw_name)
    if safe != raw_name:
        digest = hashlib.sha256(raw_name.encode("utf-8")).hexdigest()[:DIGEST_LENGTH]
        safe = f"{safe}.{digest}"
    return safe

def cache_filename(key: str, file_prefix: str) -> str:
    """Builds the cache filename for a key."""
    return f"{file_prefix}{safe_name(key)}{CACHE_FILE_SUFFIX}"

def group_directory(cache_dir: Path, group: str, tenant_id: Optional[str] = None) -> Path:
    """Resolves the directory holding a group's files.

    Group names go through `safe_name` so they can never escape `cache_dir`.
    Tenant scoped groups live under `@<tenant>`, which no group segment can match.
    """
    base = cache_dir
    if tenant_id:
        base = base / f"{TENANT_DIR_MARKER}{safe_name(tenant_id)}"
    return base / safe_name(group)

def cleanup_directory(directory: Path) -> None:
    """Removes every file and subdirectory inside `directory`, keeping it."""
    if not directory.is_dir():
        return
    for child in directory.iterdir():
        try:
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove {child} during cleanup: {e}")

def is_empty_directory(directory: Path) -> bool:
    """Checks whether a directory has no entries (a missing one counts as empty)."""
    if not directory.exists():
        return True
    return not any(directory.iterdir())
