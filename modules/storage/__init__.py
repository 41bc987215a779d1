"""
Storage Module.

Run folders and artifact persistence on the local filesystem.
"""

from modules.storage.files import StorageLayer

__all__ = ["StorageLayer"]
