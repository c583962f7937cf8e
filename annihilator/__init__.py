"""File-based object cache for testing host applications."""

__version__ = "0.1.0"
