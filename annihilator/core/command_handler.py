"""Command Handler: Orchestrates cache administration commands.

Receives commands from the main entry point (main.py), runs them against the
file cache, its host and the drop-in, and reports the outcome to the user as
success or error notices.
"""

import logging

# Core Imports
from annihilator.core import lifecycle

# Domain Layer Imports
from annihilator.domain.interfaces.user_interface import UserInterface

# Infrastructure Layer Imports
from annihilator.infrastructure.cache.file_cache import FileCacheStore
from annihilator.infrastructure.host.cache_host import CacheHost
from annihilator.infrastructure.host.dropper import Dropper, DropperError

logger = logging.getLogger(__name__)

class CommandHandler:
    """Handles admin commands and reports their results."""

    def __init__(
        self,
        store: FileCacheStore,
        host: CacheHost,
        dropper: Dropper,
        ui: UserInterface,
    ):
        """Initializes the CommandHandler with the cache, its host and the UI."""
        self.store = store
        self.host = host
        self.dropper = dropper
        self.ui = ui

    def handle_enable(self) -> bool:
        """Installs the drop-in and makes the file cache the active cache."""
        logger.info("Handling 'enable' command.")
        try:
            lifecycle.install(self.dropper, self.host)
            self.store.enable(self.host)
        except DropperError as e:
            logger.error(f"Failed to install drop-in ({e.code}): {e.message}")
            self.ui.display_error(e.message)
            return False
        except OSError as e:
            logger.error(f"Failed to enable object cache: {e}", exc_info=True)
            self.ui.display_error(f"Failed to enable object cache: {e}")
            return False

        if self.store.is_active(self.host):
            self.ui.display_success("Object cache enabled successfully.")
            return True
        self.ui.display_error("Failed to enable object cache.")
        return False

    def handle_disable(self) -> bool:
        """Hands the host back its default cache and removes the drop-in."""
        logger.info("Handling 'disable' command.")
        try:
            if not self.store.is_active(self.host):
                self.store.flush()
            lifecycle.uninstall(self.dropper, self.host)
        except DropperError as e:
            logger.error(f"Failed to remove drop-in ({e.code}): {e.message}")
            self.ui.display_error(e.message)
            return False

        if not self.store.is_active(self.host):
            self.ui.display_success("Object cache disabled successfully.")
            return True
        self.ui.display_error("Failed to disable object cache.")
        return False

    def handle_flush(self) -> bool:
        """Clears every cached entry."""
        logger.info("Handling 'flush' command.")
        if self.store.flush():
            self.ui.display_success("Object cache flushed successfully.")
            return True
        self.ui.display_error("Failed to flush object cache.")
        return False

    def handle_flush_group(self, group: str) -> bool:
        """Clears the entries of a single group."""
        logger.info(f"Handling 'flush-group' command for group: {group}")
        if not group:
            self.ui.display_error("A group name is required.")
            return False
        self.store.flush_group(group)
        self.ui.display_success(f"Cache group '{group}' flushed successfully.")
        return True

    def handle_status(self) -> None:
        """Reports whether the file cache is active and what it holds."""
        logger.info("Handling 'status' command.")
        active = self.store.is_active(self.host)
        self.ui.display_info(
            f"Object cache is {'enabled' if active else 'disabled'}. "
            f"Drop-in: {self.dropper.target_file} ({'present' if self.dropper.is_dropped() else 'missing'}). "
            f"Cache directory: {self.store.cache_dir}"
        )

        inventory = self.store.inventory()
        if not inventory:
            self.ui.display_output("No cached entries on disk.")
            return
        rows = [(group, count) for group, count in inventory.items()]
        self.ui.display_table("Cached entries", ["Group", "Files"], rows)
