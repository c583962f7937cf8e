"""In-memory object cache.

Holds values per group scope for the lifetime of the process, tracks hit and
miss counters, expiry instants, and the global / non-persistent group lists.
It is the hot layer of the file cache and, on its own, the host's default
non-persistent cache.
"""

import logging
import math
import time
from typing import Any, Callable, Dict, Iterable, Optional, Set, Union

# Domain Layer Imports
from annihilator.domain.interfaces.cache import ObjectCache, Number
from annihilator.domain.models.common import (
    CacheResult,
    CacheStats,
    DEFAULT_GROUP,
    MISS,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

def _as_number(value: Any) -> Number:
    """Coerces a cached value for arithmetic; anything non-numeric counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0
        return number if math.isfinite(number) else 0
    return 0

class RuntimeCache(ObjectCache):
    """Process-local cache keeping every entry in memory."""

    def __init__(self, tenant_id: Optional[Union[int, str]] = None, clock: Clock = time.time):
        """Initializes an empty cache.

        Args:
            tenant_id: Active tenant; None runs the cache in single-tenant mode.
            clock: Returns the current time as epoch seconds.
        """
        self.runtime_cache: Dict[str, Dict[str, Any]] = {}
        self._expiry: Dict[str, Dict[str, int]] = {}
        self.hits = 0
        self.misses = 0
        self.global_groups: Set[str] = set()
        self.non_persistent_groups: Set[str] = set()
        self.multi_tenant = tenant_id is not None
        self.tenant_id: Optional[str] = str(tenant_id) if self.multi_tenant else None
        self.tenant_prefix = f"{self.tenant_id}:" if self.multi_tenant else ""
        self._clock = clock

    # --- Helpers ---

    def _now(self) -> int:
        return int(self._clock())

    @staticmethod
    def _resolve_key(key: Any) -> str:
        return str(key)

    @staticmethod
    def _resolve_group(group: Optional[str]) -> str:
        return group or DEFAULT_GROUP

    def _scope(self, group: str) -> str:
        """Hot-cache bucket for a group; tenant-local groups get the tenant prefix."""
        if not self.tenant_prefix or group in self.global_groups:
            return group
        return f"{self.tenant_prefix}{group}"

    def _expires_at(self, expire: int) -> int:
        return self._now() + int(expire) if expire and expire > 0 else 0

    def _is_expired(self, expires: int) -> bool:
        return bool(expires) and self._now() > expires

    def _is_persistent(self, group: str) -> bool:
        return group not in self.non_persistent_groups

    def _remember(self, group: str, key: str, value: Any, expires: int = 0) -> None:
        scope = self._scope(group)
        self.runtime_cache.setdefault(scope, {})[key] = value
        self._expiry.setdefault(scope, {})[key] = expires

    def _recall(self, group: str, key: str) -> CacheResult:
        """Looks a key up in memory, evicting it if it has expired."""
        scope = self._scope(group)
        bucket = self.runtime_cache.get(scope)
        if bucket is None or key not in bucket:
            return MISS
        if self._is_expired(self._expiry.get(scope, {}).get(key, 0)):
            logger.debug(f"Runtime entry expired: group={group}, key={key}")
            self._forget(group, key)
            return MISS
        return CacheResult(bucket[key], True)

    def _forget(self, group: str, key: str) -> bool:
        scope = self._scope(group)
        bucket = self.runtime_cache.get(scope)
        if bucket is None or key not in bucket:
            return False
        del bucket[key]
        self._expiry.get(scope, {}).pop(key, None)
        return True

    def _forget_group(self, group: str) -> None:
        scope = self._scope(group)
        self.runtime_cache.pop(scope, None)
        self._expiry.pop(scope, None)

    def _hit(self, value: Any) -> CacheResult:
        self.hits += 1
        return CacheResult(value, True)

    def _miss(self) -> CacheResult:
        self.misses += 1
        return MISS

    def _reset(self) -> None:
        self.runtime_cache = {}
        self._expiry = {}
        self.hits = 0
        self.misses = 0

    # --- ObjectCache Interface Implementation ---

    def get(self, key: str, group: str = DEFAULT_GROUP, force: bool = False) -> CacheResult:
        """Retrieves an item from memory. `force` has nothing to refresh here."""
        key = self._resolve_key(key)
        group = self._resolve_group(group)
        cached = self._recall(group, key)
        if cached.found:
            return self._hit(cached.value)
        return self._miss()

    def set(self, key: str, data: Any, group: str = DEFAULT_GROUP, expire: int = 0) -> bool:
        key = self._resolve_key(key)
        group = self._resolve_group(group)
        self._remember(group, key, data, self._expires_at(expire))
        return True

    def add(self, key: str, data: Any, group: str = DEFAULT_GROUP, expire: int = 0) -> bool:
        key = self._resolve_key(key)
        group = self._resolve_group(group)
        if self.get(key, group).found:
            return False
        return self.set(key, data, group, expire)

    def replace(self, key: str, data: Any, group: str = DEFAULT_GROUP, expire: int = 0) -> bool:
        key = self._resolve_key(key)
        group = self._resolve_group(group)
        if not self.get(key, group).found:
            return False
        return self.set(key, data, group, expire)

    def delete(self, key: str, group: str = DEFAULT_GROUP) -> bool:
        return self._forget(self._resolve_group(group), self._resolve_key(key))

    def incr(self, key: str, offset: Number = 1, group: str = DEFAULT_GROUP) -> Optional[Number]:
        """Adds `offset` to a cached number, never going below zero.

        The new value is stored without an expiry, clearing any previous one.
        """
        key = self._resolve_key(key)
        group = self._resolve_group(group)
        current = self.get(key, group)
        if not current.found:
            return None

        value = _as_number(current.value) + offset
        if value < 0:
            value = 0

        self.set(key, value, group)
        return value

    def flush(self) -> bool:
        self._reset()
        return True

    def flush_runtime(self) -> bool:
        self._reset()
        return True

    def flush_group(self, group: str) -> bool:
        self._forget_group(self._resolve_group(group))
        return True

    # --- Group and tenant bookkeeping ---

    def add_global_groups(self, groups: Union[str, Iterable[str]]) -> None:
        """Marks groups as shared by every tenant."""
        if isinstance(groups, str):
            groups = [groups]
        self.global_groups.update(groups)

    def add_non_persistent_groups(self, groups: Union[str, Iterable[str]]) -> None:
        """Marks groups whose entries must stay in memory only."""
        if isinstance(groups, str):
            groups = [groups]
        self.non_persistent_groups.update(groups)

    def switch_tenant(self, tenant_id: Union[int, str]) -> None:
        """Switches the active tenant. Ignored in single-tenant mode."""
        if not self.multi_tenant:
            return
        self.tenant_id = str(tenant_id)
        self.tenant_prefix = f"{self.tenant_id}:"
        logger.debug(f"Switched cache tenant to {self.tenant_id}")

    def close(self) -> bool:
        return True

    def stats(self) -> CacheStats:
        """Returns the counters and the size of the in-memory layer."""
        return CacheStats(
            hits=self.hits,
            misses=self.misses,
            groups=len(self.runtime_cache),
            entries=sum(len(bucket) for bucket in self.runtime_cache.values()),
        )
