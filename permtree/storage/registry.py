"""Registry of storage backends.

Maps backend names used in configuration to factories that build a
``Storage`` from a ``Settings`` instance.
"""

from typing import Callable, Dict, List, Optional

from ..common.logger import get_logger
from ..core.config import Settings, get_settings
from ..core.rbac.errors import ConfigurationError
from .base import Storage

logger = get_logger("storage_registry")

StorageFactory = Callable[[Settings], Storage]


class StorageRegistry:
    """Registry for storage backend factories."""

    def __init__(self):
        self._factories: Dict[str, StorageFactory] = {}

    def register(self, name: str, factory: StorageFactory) -> None:
        """Register a backend factory.

        Args:
            name: Backend name as used in ``Settings.storage_backend``
            factory: Callable building the backend from settings
        """
        if name in self._factories:
            logger.warning(f"Overwriting existing storage backend: {name}")
        self._factories[name] = factory
        logger.debug(f"Registered storage backend: {name}")

    def unregister(self, name: str) -> None:
        if self._factories.pop(name, None) is not None:
            logger.debug(f"Unregistered storage backend: {name}")

    def list_backends(self) -> List[str]:
        return list(self._factories.keys())

    def create(self, name: str, settings: Settings) -> Storage:
        """Build the named backend.

        Raises:
            ConfigurationError: If no backend is registered under ``name``
        """
        factory = self._factories.get(name)
        if factory is None:
            raise ConfigurationError(
                f"Unknown storage backend: {name!r}. "
                f"Available: {', '.join(sorted(self._factories)) or 'none'}"
            )
        return factory(settings)


def _build_memory(settings: Settings) -> Storage:
    from .memory import MemoryStorage

    return MemoryStorage()


def _build_sql(settings: Settings) -> Storage:
    from .sql import SQLAlchemyStorage

    return SQLAlchemyStorage.from_url(settings.database_url, echo=settings.database_echo)


# Global registry instance
_registry = StorageRegistry()
_registry.register("memory", _build_memory)
_registry.register("sql", _build_sql)


def get_registry() -> StorageRegistry:
    """Get the global storage registry."""
    return _registry


def create_storage(settings: Optional[Settings] = None) -> Storage:
    """Build the backend named by ``settings.storage_backend``."""
    settings = settings or get_settings()
    storage = _registry.create(settings.storage_backend, settings)
    logger.info(f"Using {storage.backend_name} storage backend")
    return storage
