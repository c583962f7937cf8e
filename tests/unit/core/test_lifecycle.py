import pytest
from pathlib import Path

from annihilator.core import lifecycle
from annihilator.infrastructure.cache.file_cache import FileCacheStore
from annihilator.infrastructure.cache.runtime_cache import RuntimeCache
from annihilator.infrastructure.host.cache_host import CacheHost
from annihilator.infrastructure.host.dropper import Dropper

@pytest.fixture
def dropper(content_dir: Path) -> Dropper:
    return Dropper(content_dir / "object-cache.yaml")

def test_bootstrap_without_dropin(dropper: Dropper, store: FileCacheStore):
    host = lifecycle.bootstrap_host(dropper, store)
    assert isinstance(host.object_cache, RuntimeCache)
    assert store.is_active(host) is False

def test_bootstrap_with_dropin(dropper: Dropper, store: FileCacheStore):
    dropper.drop()
    host = lifecycle.bootstrap_host(dropper, store)
    assert store.is_active(host) is True

@pytest.mark.parametrize("manifest", [
    "backend: memcached\n",
    "- not\n- a mapping\n",
    "backend: [unclosed\n",
])
def test_bootstrap_ignores_foreign_manifest(dropper: Dropper, store: FileCacheStore, manifest: str):
    dropper.target_file.parent.mkdir(parents=True)
    dropper.target_file.write_text(manifest)
    host = lifecycle.bootstrap_host(dropper, store)
    assert store.is_active(host) is False

def test_read_manifest_missing(tmp_path: Path):
    assert lifecycle.read_manifest(tmp_path / "missing.yaml") is None

def test_install_flushes_active_store(dropper: Dropper, store: FileCacheStore):
    host = CacheHost()
    host.install_cache(store)
    store.set("k", "v")

    lifecycle.install(dropper, host)

    assert dropper.is_dropped() is True
    assert store.get("k").found is False

def test_install_keeps_inactive_store(dropper: Dropper, store: FileCacheStore):
    host = CacheHost()
    store.set("k", "v")
    lifecycle.install(dropper, host)
    assert store.get("k") == ("v", True)

def test_uninstall(dropper: Dropper, store: FileCacheStore):
    dropper.drop()
    host = lifecycle.bootstrap_host(dropper, store)
    store.set("k", "v")

    lifecycle.uninstall(dropper, host)

    assert dropper.is_dropped() is False
    assert store.is_active(host) is False
    assert store.get("k").found is False
