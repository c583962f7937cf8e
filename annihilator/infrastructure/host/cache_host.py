"""The host application's object cache slot.

Tracks which cache implementation is active and whether an external
(persistent) cache is in use. Falls back to a fresh RuntimeCache when the
external cache is switched off.
"""

import logging
from typing import Callable, Optional

from annihilator.domain.interfaces.cache import ObjectCache
from annihilator.infrastructure.cache.runtime_cache import RuntimeCache

logger = logging.getLogger(__name__)

class CacheHost:
    """Holds the active object cache for a host process."""

    def __init__(self, default_factory: Callable[[], ObjectCache] = RuntimeCache):
        self._default_factory = default_factory
        self.object_cache: ObjectCache = default_factory()
        self.using_external_cache = False

    def install_cache(self, cache: ObjectCache) -> None:
        """Makes `cache` the active cache and flags it as external."""
        self.object_cache = cache
        self.using_external_cache = True
        logger.info(f"Active object cache set to {cache.__class__.__name__}")

    def restore_default(self) -> None:
        """Replaces the active cache with a fresh default one."""
        self.object_cache = self._default_factory()
        self.using_external_cache = False
        logger.info(f"Active object cache reverted to {self.object_cache.__class__.__name__}")

    def is_active(self, cache: Optional[ObjectCache]) -> bool:
        return self.using_external_cache and cache is not None and self.object_cache is cache
