"""Exception types raised by the RBAC manager and storage backends."""

from typing import Any, Optional


class RBACError(Exception):
    """Base class for all permtree failures."""


class ConfigurationError(RBACError):
    """Raised when the manager or a backend is wired incorrectly."""


class InvalidPathError(RBACError):
    """Raised when a resource path is empty or has an empty segment."""

    def __init__(self, path: str):
        super().__init__(f"Invalid resource path: {path!r}")
        self.path = path


class NotFoundError(RBACError):
    """Base class for lookups that matched nothing."""


class ResourceNotFoundError(NotFoundError):
    """Raised when a resource lookup (by key, path or id) fails."""

    def __init__(
        self,
        key: Any,
        parent_id: Optional[Any] = None,
        *,
        path: Optional[str] = None,
    ):
        where = f" under parent {parent_id}" if parent_id is not None else ""
        suffix = f" (path {path!r})" if path else ""
        super().__init__(f"Resource not found: {key}{where}{suffix}")
        self.key = key
        self.parent_id = parent_id
        self.path = path


class ActionNotFoundError(NotFoundError):
    def __init__(self, key: Any, resource_id: Optional[Any] = None):
        where = f" on resource {resource_id}" if resource_id is not None else ""
        super().__init__(f"Action not found: {key}{where}")
        self.key = key
        self.resource_id = resource_id


class RoleNotFoundError(NotFoundError):
    def __init__(self, key: Any):
        super().__init__(f"Role not found: {key}")
        self.key = key


class AlreadyExistsError(RBACError):
    """Base class for uniqueness violations."""


class ResourceExistsError(AlreadyExistsError):
    """Raised by create_resource when a root resource with the key exists."""

    def __init__(self, key: str):
        super().__init__(f"Resource already exists: {key}")
        self.key = key


class RoleExistsError(AlreadyExistsError):
    def __init__(self, key: str):
        super().__init__(f"Role already exists: {key}")
        self.key = key


class DuplicateKeyError(AlreadyExistsError):
    """Raised by a storage backend when a unique constraint is violated."""

    def __init__(self, entity: str, key: str):
        super().__init__(f"Duplicate {entity} key: {key}")
        self.entity = entity
        self.key = key


class ConcurrentModificationError(RBACError):
    """Raised when a role was changed by someone else since it was read."""

    def __init__(self, key: str, expected_version: int):
        super().__init__(
            f"Role {key} was modified concurrently (expected version {expected_version})"
        )
        self.key = key
        self.expected_version = expected_version
