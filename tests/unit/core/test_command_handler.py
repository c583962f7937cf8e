import pytest
from unittest.mock import MagicMock
from pathlib import Path

from annihilator.core import lifecycle
from annihilator.core.command_handler import CommandHandler
from annihilator.domain.interfaces.user_interface import UserInterface
from annihilator.infrastructure.cache.file_cache import FileCacheStore
from annihilator.infrastructure.host.cache_host import CacheHost
from annihilator.infrastructure.host.dropper import Dropper, DropperError

@pytest.fixture
def mock_ui():
    return MagicMock(spec=UserInterface)

@pytest.fixture
def host():
    return CacheHost()

@pytest.fixture
def dropper(content_dir: Path) -> Dropper:
    return Dropper(content_dir / "object-cache.yaml")

@pytest.fixture
def command_handler(store: FileCacheStore, host: CacheHost, dropper: Dropper, mock_ui: MagicMock):
    """CommandHandler over a real store and drop-in, with a mocked UI."""
    return CommandHandler(store=store, host=host, dropper=dropper, ui=mock_ui)

def test_handle_enable(command_handler: CommandHandler, store: FileCacheStore, host: CacheHost,
                       dropper: Dropper, mock_ui: MagicMock):
    store.set("stale", 1)

    assert command_handler.handle_enable() is True

    assert dropper.is_dropped()
    assert store.is_active(host)
    assert store.get("stale").found is False
    mock_ui.display_success.assert_called_once_with("Object cache enabled successfully.")
    mock_ui.display_error.assert_not_called()

def test_handle_enable_installs_through_lifecycle(mocker, command_handler: CommandHandler, host: CacheHost,
                                                 dropper: Dropper):
    install = mocker.spy(lifecycle, "install")
    command_handler.handle_enable()
    install.assert_called_once_with(dropper, host)

def test_handle_enable_dropper_error(store: FileCacheStore, host: CacheHost, mock_ui: MagicMock):
    """A failed drop is reported with its message and leaves the cache inactive."""
    dropper = MagicMock(spec=Dropper)
    dropper.drop.side_effect = DropperError('not_writable', "The content directory is not writable.")
    handler = CommandHandler(store=store, host=host, dropper=dropper, ui=mock_ui)

    assert handler.handle_enable() is False

    mock_ui.display_error.assert_called_once_with("The content directory is not writable.")
    mock_ui.display_success.assert_not_called()
    assert store.is_active(host) is False

def test_handle_disable(command_handler: CommandHandler, store: FileCacheStore, host: CacheHost,
                        dropper: Dropper, mock_ui: MagicMock):
    command_handler.handle_enable()
    store.set("k", "v")
    mock_ui.reset_mock()

    assert command_handler.handle_disable() is True

    assert not dropper.is_dropped()
    assert store.is_active(host) is False
    assert store.get("k").found is False
    mock_ui.display_success.assert_called_once_with("Object cache disabled successfully.")

def test_handle_disable_when_inactive_still_flushes(command_handler: CommandHandler, store: FileCacheStore,
                                                    mock_ui: MagicMock):
    store.set("k", "v")
    assert command_handler.handle_disable() is True
    assert store.get("k").found is False
    mock_ui.display_success.assert_called_once_with("Object cache disabled successfully.")

def test_handle_disable_dropper_error(store: FileCacheStore, host: CacheHost, mock_ui: MagicMock):
    dropper = MagicMock(spec=Dropper)
    dropper.remove.side_effect = DropperError('unlink_failed', "Failed to remove the object cache file.")
    handler = CommandHandler(store=store, host=host, dropper=dropper, ui=mock_ui)

    assert handler.handle_disable() is False
    mock_ui.display_error.assert_called_once_with("Failed to remove the object cache file.")

def test_handle_flush(command_handler: CommandHandler, store: FileCacheStore, mock_ui: MagicMock):
    store.set("k", "v", "posts")
    assert command_handler.handle_flush() is True
    assert store.inventory() == {}
    mock_ui.display_success.assert_called_once_with("Object cache flushed successfully.")

def test_handle_flush_failure(host: CacheHost, dropper: Dropper, mock_ui: MagicMock):
    store = MagicMock(spec=FileCacheStore)
    store.flush.return_value = False
    handler = CommandHandler(store=store, host=host, dropper=dropper, ui=mock_ui)

    assert handler.handle_flush() is False
    mock_ui.display_error.assert_called_once_with("Failed to flush object cache.")

def test_handle_flush_group(command_handler: CommandHandler, store: FileCacheStore, mock_ui: MagicMock):
    store.set("a", 1, "posts")
    store.set("b", 2, "users")

    assert command_handler.handle_flush_group("posts") is True

    assert store.get("a", "posts", force=True).found is False
    assert store.get("b", "users", force=True).found is True
    mock_ui.display_success.assert_called_once_with("Cache group 'posts' flushed successfully.")

def test_handle_flush_group_requires_name(command_handler: CommandHandler, mock_ui: MagicMock):
    assert command_handler.handle_flush_group("") is False
    mock_ui.display_error.assert_called_once_with("A group name is required.")

def test_handle_status_empty(command_handler: CommandHandler, mock_ui: MagicMock):
    command_handler.handle_status()

    info = mock_ui.display_info.call_args.args[0]
    assert "Object cache is disabled." in info
    assert "(missing)" in info
    mock_ui.display_output.assert_called_once_with("No cached entries on disk.")
    mock_ui.display_table.assert_not_called()

def test_handle_status_lists_groups(command_handler: CommandHandler, store: FileCacheStore, mock_ui: MagicMock):
    command_handler.handle_enable()
    store.set("a", 1, "posts")
    store.set("b", 2, "posts")
    store.set("c", 3, "users")

    command_handler.handle_status()

    info = mock_ui.display_info.call_args.args[0]
    assert "Object cache is enabled." in info
    assert "(present)" in info
    title, columns, rows = mock_ui.display_table.call_args.args
    assert title == "Cached entries"
    assert columns == ["Group", "Files"]
    assert sorted(rows) == [("posts", 2), ("users", 1)]
