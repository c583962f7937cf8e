"""Process-wide default FileCacheStore.

Callers receive the store explicitly; this module only builds it lazily from
configuration the first time it is requested.
"""

import logging
from typing import Optional

from annihilator.infrastructure.cache.file_cache import FileCacheStore
from annihilator.infrastructure.config.settings import (
    get_cache_dir,
    get_file_prefix,
    get_tenant_id,
)

logger = logging.getLogger(__name__)

_default_store: Optional[FileCacheStore] = None

def create_store() -> FileCacheStore:
    """Builds a new store from the current configuration."""
    return FileCacheStore(
        cache_dir=get_cache_dir(),
        file_prefix=get_file_prefix(),
        tenant_id=get_tenant_id(),
    )

def get_default_store() -> FileCacheStore:
    """Returns the process-wide store, creating it on first use."""
    global _default_store
    if _default_store is None:
        _default_store = create_store()
        logger.debug(f"Created default cache store at {_default_store.cache_dir}")
    return _default_store

def reset_default_store() -> None:
    """Forgets the process-wide store so the next request rebuilds it."""
    global _default_store
    _default_store = None
