"""File-based object cache.

Persists every entry as a pickled `{value, expires}` record, one file per key
inside one directory per group, and keeps an in-memory hot layer in front of
it. Corrupt or expired files are deleted on first access.
"""

import copy
import logging
import os
import pickle
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

# Domain Layer Imports
from annihilator.domain.models.common import CacheRecord, CacheResult, DEFAULT_GROUP
from annihilator.infrastructure.cache.paths import (
    CACHE_FILE_SUFFIX,
    cache_filename,
    cleanup_directory,
    group_directory,
    is_empty_directory,
)
from annihilator.infrastructure.cache.runtime_cache import Clock, RuntimeCache
from annihilator.infrastructure.host.cache_host import CacheHost

logger = logging.getLogger(__name__)

DEFAULT_FILE_PREFIX = "wp_cache_"

# pickle.loads can raise far more than UnpicklingError on foreign bytes.
_UNPICKLE_ERRORS = (
    pickle.UnpicklingError,
    EOFError,
    AttributeError,
    ImportError,
    IndexError,
    KeyError,
    TypeError,
    ValueError,
    OverflowError,
)
_PICKLE_ERRORS = (pickle.PicklingError, TypeError, AttributeError, RecursionError)

class FileCacheStore(RuntimeCache):
    """Object cache persisted to a directory tree, with an in-memory hot layer."""

    def __init__(
        self,
        cache_dir: Union[str, Path],
        file_prefix: str = DEFAULT_FILE_PREFIX,
        tenant_id: Optional[Union[int, str]] = None,
        clock: Clock = time.time,
    ):
        """Initializes the store and creates its base directory.

        Raises:
            OSError: If the base directory cannot be created.
        """
        super().__init__(tenant_id=tenant_id, clock=clock)
        self.cache_dir = Path(cache_dir)
        self.file_prefix = file_prefix
        self._setup_cache_dir()
        logger.info(f"FileCacheStore initialized at {self.cache_dir} (prefix={file_prefix!r}, tenant={self.tenant_id})")

    def _setup_cache_dir(self) -> None:
        """Creates the base cache directory if it doesn't exist."""
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create cache directory {self.cache_dir}: {e}")
            raise

    # --- Paths ---

    def group_dir(self, group: str) -> Path:
        """Directory holding a group's files for the current tenant."""
        tenant = None if group in self.global_groups else self.tenant_id
        return group_directory(self.cache_dir, group, tenant)

    def cache_file_path(self, key: str, group: str = DEFAULT_GROUP) -> Path:
        """Backing file for `(group, key)`. Does not touch the filesystem."""
        group = self._resolve_group(group)
        return self.group_dir(group) / cache_filename(key, self.file_prefix)

    # --- Record I/O ---

    @staticmethod
    def _is_valid_record(data: Any) -> bool:
        return (
            isinstance(data, dict)
            and set(data) == {"value", "expires"}
            and isinstance(data["expires"], int)
            and not isinstance(data["expires"], bool)
        )

    def _discard(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete cache file {path}: {e}")

    def _read_record(self, path: Path) -> Optional[CacheRecord]:
        """Loads a record, deleting the file if it is not a valid record."""
        try:
            payload = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Failed to read cache file {path}: {e}")
            return None

        try:
            data = pickle.loads(payload)
        except _UNPICKLE_ERRORS as e:
            logger.warning(f"Corrupt cache file {path}: {e}. Removing.")
            self._discard(path)
            return None

        if not self._is_valid_record(data):
            logger.warning(f"Cache file {path} does not hold a valid entry. Removing.")
            self._discard(path)
            return None
        return data

    def _serialize(self, path: Path, record: CacheRecord) -> Optional[bytes]:
        try:
            return pickle.dumps(record, protocol=pickle.HIGHEST_PROTOCOL)
        except _PICKLE_ERRORS as e:
            logger.error(f"Failed to serialize cache entry for {path}: {e}")
            return None

    def _write_payload(self, path: Path, payload: bytes) -> bool:
        """Writes a record through a temp file so readers never see a partial one."""
        temp_path = path.with_name(f"{path.name}.{os.getpid()}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(payload)
            os.replace(temp_path, path)
        except OSError as e:
            logger.error(f"Failed to write cache file {path}: {e}")
            self._discard(temp_path)
            return False
        return True

    @staticmethod
    def _detached(value: Any) -> Any:
        """Copies a hot value so callers never share mutable state with the cache."""
        try:
            return copy.deepcopy(value)
        except (TypeError, copy.Error, RecursionError):
            # Not copyable, so it never reached disk either.
            return value

    # --- ObjectCache Interface Implementation ---

    def get(self, key: str, group: str = DEFAULT_GROUP, force: bool = False) -> CacheResult:
        """Retrieves an item, from memory first unless `force` is set.

        Values from persistent groups are returned as copies.
        """
        key = self._resolve_key(key)
        group = self._resolve_group(group)
        persistent = self._is_persistent(group)

        if not force or not persistent:
            cached = self._recall(group, key)
            if cached.found:
                logger.debug(f"Runtime cache hit: group={group}, key={key}")
                return self._hit(self._detached(cached.value) if persistent else cached.value)
        if not persistent:
            return self._miss()

        path = self.cache_file_path(key, group)
        record = self._read_record(path)
        if record is None:
            logger.debug(f"Cache miss: group={group}, key={key}")
            self._forget(group, key)
            return self._miss()

        if self._is_expired(record["expires"]):
            logger.debug(f"Cache entry expired: group={group}, key={key}. Removing file.")
            self._discard(path)
            self._forget(group, key)
            return self._miss()

        self._remember(group, key, record["value"], record["expires"])
        logger.debug(f"File cache hit: group={group}, key={key}")
        return self._hit(self._detached(record["value"]))

    def set(self, key: str, data: Any, group: str = DEFAULT_GROUP, expire: int = 0) -> bool:
        """Stores an item in memory and on disk.

        The in-memory copy is updated even when persisting fails. For persistent
        groups it is decoded from the written payload, so later changes to
        `data` by the caller reach neither layer.
        """
        key = self._resolve_key(key)
        group = self._resolve_group(group)
        expires = self._expires_at(expire)

        if not self._is_persistent(group):
            self._remember(group, key, data, expires)
            return True

        path = self.cache_file_path(key, group)
        payload = self._serialize(path, CacheRecord(value=data, expires=expires))
        if payload is None:
            self._remember(group, key, data, expires)
            return False
        try:
            stored_value = pickle.loads(payload)["value"]
        except _UNPICKLE_ERRORS as e:
            logger.error(f"Cache entry for {path} does not load back: {e}")
            self._remember(group, key, data, expires)
            return False

        self._remember(group, key, stored_value, expires)
        stored = self._write_payload(path, payload)
        if stored:
            logger.debug(f"Stored cache entry: group={group}, key={key}, file={path}")
        return stored

    def delete(self, key: str, group: str = DEFAULT_GROUP) -> bool:
        """Removes an item. True only if a backing file was removed."""
        key = self._resolve_key(key)
        group = self._resolve_group(group)
        removed_from_memory = self._forget(group, key)
        if not self._is_persistent(group):
            return removed_from_memory

        path = self.cache_file_path(key, group)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Failed to delete cache file {path}: {e}")
            return False
        logger.debug(f"Deleted cache entry: group={group}, key={key}")
        return True

    def flush(self) -> bool:
        """Clears memory, counters and every file under the cache directory."""
        self._reset()
        cleanup_directory(self.cache_dir)
        flushed = is_empty_directory(self.cache_dir)
        if flushed:
            logger.info(f"Flushed file cache at {self.cache_dir}")
        else:
            logger.error(f"Cache directory {self.cache_dir} is not empty after flush")
        return flushed

    def flush_group(self, group: str) -> bool:
        """Deletes a group's cache files and its in-memory entries."""
        group = self._resolve_group(group)
        directory = self.group_dir(group)
        if directory.is_dir():
            for path in directory.glob(f"{self.file_prefix}*"):
                if path.is_file():
                    self._discard(path)
            logger.info(f"Flushed cache group {group} at {directory}")
        self._forget_group(group)
        return True

    def inventory(self) -> Dict[str, int]:
        """Counts cache files per group directory, relative to the cache directory."""
        counts: Dict[str, int] = {}
        if not self.cache_dir.is_dir():
            return counts
        for path in sorted(self.cache_dir.rglob(f"{self.file_prefix}*{CACHE_FILE_SUFFIX}")):
            if path.is_file():
                group = path.parent.relative_to(self.cache_dir).as_posix()
                counts[group] = counts.get(group, 0) + 1
        return counts

    # --- Host integration ---

    def enable(self, host: CacheHost) -> None:
        """Takes over the host's active cache role and starts from a clean slate."""
        host.install_cache(self)
        self.flush()

    def disable(self, host: CacheHost) -> None:
        """Clears this cache and hands the host back its default cache."""
        self.flush()
        host.restore_default()

    def is_active(self, host: CacheHost) -> bool:
        return host.is_active(self)
