"""Installs and removes the object cache drop-in manifest."""

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

DROPIN_TEMPLATE = Path(__file__).with_name("drop-in.yaml")

class DropperError(Exception):
    """Raised when the drop-in manifest cannot be installed or removed."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

class Dropper:
    """Copies the drop-in template into the host content directory and back out."""

    def __init__(self, target_file: Path, source_file: Path = DROPIN_TEMPLATE):
        self.source_file = Path(source_file)
        self.target_file = Path(target_file)

    def is_dropped(self) -> bool:
        return self.target_file.is_file()

    def drop(self) -> bool:
        """Copies the template over any existing drop-in.

        Raises:
            DropperError: If the content directory is not writable or the copy fails.
        """
        content_dir = self.target_file.parent
        try:
            content_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DropperError('not_writable', f"The content directory {content_dir} is not writable.") from e
        if not os.access(content_dir, os.W_OK):
            raise DropperError('not_writable', f"The content directory {content_dir} is not writable.")

        if self.target_file.exists():
            try:
                self.target_file.unlink()
            except OSError as e:
                raise DropperError('delete_failed', "Failed to remove existing object cache file.") from e

        try:
            shutil.copyfile(self.source_file, self.target_file)
        except OSError as e:
            raise DropperError('copy_failed', "Failed to copy the object cache file.") from e

        logger.info(f"Dropped object cache manifest at {self.target_file}")
        return True

    def remove(self) -> bool:
        """Deletes the drop-in. A missing drop-in counts as removed.

        Raises:
            DropperError: If the file exists but cannot be deleted.
        """
        if not self.target_file.exists():
            return True

        try:
            self.target_file.unlink()
        except OSError as e:
            raise DropperError('unlink_failed', "Failed to remove the object cache file.") from e

        logger.info(f"Removed object cache manifest {self.target_file}")
        return True
