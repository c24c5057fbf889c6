"""I/O layer - Durable storage for translation data."""

from .local_storage import LocalStorage

__all__ = ["LocalStorage"]
