"""Install, uninstall and bootstrap glue between the file cache and its host.

The drop-in manifest is the only state shared between processes: when it is
present, a freshly bootstrapped host runs with the file cache as its active
cache; otherwise it keeps its in-memory default.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from annihilator.infrastructure.cache.file_cache import FileCacheStore
from annihilator.infrastructure.host.cache_host import CacheHost
from annihilator.infrastructure.host.dropper import Dropper

logger = logging.getLogger(__name__)

BACKEND_NAME = "annihilator"

def read_manifest(path: Path) -> Optional[Dict[str, Any]]:
    """Parses a drop-in manifest. Returns None if it is missing or unreadable."""
    if not path.is_file():
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            manifest = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read drop-in manifest {path}: {e}")
        return None
    if not isinstance(manifest, dict):
        logger.warning(f"Drop-in manifest {path} did not contain a mapping.")
        return None
    return manifest

def bootstrap_host(dropper: Dropper, store: FileCacheStore) -> CacheHost:
    """Creates a host and activates `store` when the drop-in is installed."""
    host = CacheHost()
    manifest = read_manifest(dropper.target_file)
    if manifest and manifest.get("backend") == BACKEND_NAME:
        host.install_cache(store)
        logger.debug("Drop-in present, file cache active.")
    elif manifest:
        logger.warning(f"Drop-in {dropper.target_file} names unknown backend {manifest.get('backend')!r}.")
    return host

def install(dropper: Dropper, host: CacheHost) -> None:
    """Drops the manifest and clears the file cache if it is already active.

    Raises:
        DropperError: If the manifest cannot be installed.
    """
    dropper.drop()
    if isinstance(host.object_cache, FileCacheStore):
        host.object_cache.flush()

def uninstall(dropper: Dropper, host: CacheHost) -> None:
    """Deactivates the file cache and removes the manifest.

    Raises:
        DropperError: If the manifest cannot be removed.
    """
    active = host.object_cache
    if isinstance(active, FileCacheStore):
        active.disable(host)
    dropper.remove()
