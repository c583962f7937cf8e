"""Interface for object cache implementations.

Defines the contract for storing, retrieving, and managing cached data
partitioned into groups, with per-entry expiration and arithmetic helpers.
The bulk operations are implemented here in terms of the single-key ones.
"""

import abc
from typing import Any, Dict, Iterable, Mapping, Optional, Union

# Import relevant domain models
from ..models.common import CacheResult, DEFAULT_GROUP

Number = Union[int, float]

class ObjectCache(abc.ABC):
    """Abstract Base Class for object cache operations."""

    @abc.abstractmethod
    def get(self, key: str, group: str = DEFAULT_GROUP, force: bool = False) -> CacheResult:
        """Retrieves an item from the cache.

        Args:
            key: The cache key to retrieve.
            group: The cache group the key belongs to.
            force: Skip the in-memory layer and re-read the persisted copy.

        Returns:
            A CacheResult; `found` is False for missing, expired or corrupt entries.
        """
        pass

    @abc.abstractmethod
    def set(self, key: str, data: Any, group: str = DEFAULT_GROUP, expire: int = 0) -> bool:
        """Stores an item, replacing any previous value.

        Args:
            key: The cache key to store the item under.
            data: The item to store.
            group: The cache group.
            expire: Seconds until the entry expires (0 means never).

        Returns:
            True if the item was stored, False if persisting it failed.
        """
        pass

    @abc.abstractmethod
    def add(self, key: str, data: Any, group: str = DEFAULT_GROUP, expire: int = 0) -> bool:
        """Stores an item only if the key is not already cached."""
        pass

    @abc.abstractmethod
    def replace(self, key: str, data: Any, group: str = DEFAULT_GROUP, expire: int = 0) -> bool:
        """Stores an item only if the key is already cached."""
        pass

    @abc.abstractmethod
    def delete(self, key: str, group: str = DEFAULT_GROUP) -> bool:
        """Removes an item. Returns True only if something was removed."""
        pass

    @abc.abstractmethod
    def incr(self, key: str, offset: Number = 1, group: str = DEFAULT_GROUP) -> Optional[Number]:
        """Increments a numeric item, clamping at zero.

        Returns:
            The new value, or None if the key is not cached.
        """
        pass

    def decr(self, key: str, offset: Number = 1, group: str = DEFAULT_GROUP) -> Optional[Number]:
        """Decrements a numeric item, clamping at zero."""
        return self.incr(key, -offset, group)

    @abc.abstractmethod
    def flush(self) -> bool:
        """Clears every cached item, in memory and persisted."""
        pass

    @abc.abstractmethod
    def flush_runtime(self) -> bool:
        """Clears the in-memory layer only."""
        pass

    @abc.abstractmethod
    def flush_group(self, group: str) -> bool:
        """Clears every item of a single group."""
        pass

    # --- Bulk operations ---

    def get_multiple(
        self, keys: Iterable[str], group: str = DEFAULT_GROUP, force: bool = False
    ) -> Dict[str, Any]:
        """Retrieves several items, keyed in input order.

        Keys that are not cached map to the not-found value (False).
        """
        return {key: self.get(key, group, force).value for key in keys}

    def set_multiple(
        self, items: Mapping[str, Any], group: str = DEFAULT_GROUP, expire: int = 0
    ) -> bool:
        """Stores several items. True only if every item was stored."""
        success = True
        for key, value in items.items():
            if not self.set(key, value, group, expire):
                success = False
        return success

    def add_multiple(
        self, items: Mapping[str, Any], group: str = DEFAULT_GROUP, expire: int = 0
    ) -> bool:
        """Adds several items. True only if every item was added."""
        success = True
        for key, value in items.items():
            if not self.add(key, value, group, expire):
                success = False
        return success

    def delete_multiple(self, keys: Iterable[str], group: str = DEFAULT_GROUP) -> bool:
        """Deletes several items. True only if every item was deleted."""
        success = True
        for key in keys:
            if not self.delete(key, group):
                success = False
        return success
