"""Storage backends for the RBAC catalog."""

from .base import Storage
from .memory import MemoryStorage
from .registry import StorageRegistry, create_storage, get_registry

__all__ = [
    "MemoryStorage",
    "Storage",
    "StorageRegistry",
    "create_storage",
    "get_registry",
]
