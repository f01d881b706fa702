"""Base class for storage backends.

Defines the persistence contract the RBAC manager depends on. Any
technology (relational, embedded, in-memory) can back the manager by
implementing this interface.

Contract notes shared by every backend:
  - resource reads eagerly include the resource's actions and its
    immediate sub-resources (not deeper descendants)
  - returned entities are detached copies
  - ``delete_resource`` removes the resource, its actions and every
    descendant resource with their actions
  - ``update_role`` compares ``role.version`` with the stored version
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from ..core.rbac.models import Action, Resource, Role


class Storage(ABC):
    """Abstract base class for RBAC storage backends."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the backend identifier (e.g., 'sql', 'memory')."""
        pass

    @abstractmethod
    def initialize(self) -> None:
        """Create tables or containers. Must be idempotent."""
        pass

    # Resource operations

    @abstractmethod
    def create_resource(self, resource: Resource) -> Resource:
        """Insert a resource row (without its actions or children).

        Args:
            resource: Resource to insert; ``id`` is assigned on return

        Returns:
            The same resource with ``id`` and timestamps populated

        Raises:
            DuplicateKeyError: If ``(parent_id, key)`` is taken
        """
        pass

    @abstractmethod
    def get_resource(self, key: str, parent_id: Optional[Any] = None) -> Resource:
        """Look up a resource by key within one tree level.

        Args:
            key: Resource key
            parent_id: Parent resource id, or None for root scope

        Returns:
            Resource with actions and immediate sub-resources

        Raises:
            ResourceNotFoundError: If no such resource exists
        """
        pass

    @abstractmethod
    def get_resource_by_id(self, resource_id: Any) -> Resource:
        """Raises ResourceNotFoundError if the id is unknown."""
        pass

    @abstractmethod
    def list_resources(self, parent_id: Optional[Any] = None) -> List[Resource]:
        """List all resources at one tree level, eager-loaded."""
        pass

    @abstractmethod
    def update_resource(self, resource: Resource) -> Resource:
        """Replace key, name, description and parent of a stored resource.

        Raises:
            ResourceNotFoundError: If the resource does not exist
            DuplicateKeyError: If the new ``(parent_id, key)`` is taken
        """
        pass

    @abstractmethod
    def delete_resource(self, resource_id: Any) -> None:
        """Delete a resource with its actions and all descendants.

        Raises:
            ResourceNotFoundError: If the resource does not exist
        """
        pass

    # Action operations

    @abstractmethod
    def create_actions(self, resource_id: Any, actions: List[Action]) -> List[Action]:
        """Insert a batch of actions bound to one resource.

        Args:
            resource_id: Owning resource id
            actions: Actions to insert; ``resource_id`` is overwritten

        Returns:
            Stored actions with ids assigned

        Raises:
            ResourceNotFoundError: If the resource does not exist
            DuplicateKeyError: If an action key is already used on the
                resource or repeated within the batch
        """
        pass

    @abstractmethod
    def get_action(self, resource_id: Any, key: str) -> Action:
        """Raises ActionNotFoundError if the resource has no such action."""
        pass

    @abstractmethod
    def list_actions(self, resource_id: Any) -> List[Action]:
        pass

    @abstractmethod
    def delete_action(self, action_id: Any) -> None:
        """Raises ActionNotFoundError if the id is unknown."""
        pass

    # Role operations

    @abstractmethod
    def create_role(self, role: Role) -> Role:
        """Insert a role.

        Raises:
            DuplicateKeyError: If the role key is taken
        """
        pass

    @abstractmethod
    def get_role(self, key: str) -> Role:
        """Raises RoleNotFoundError if no role has this key."""
        pass

    @abstractmethod
    def get_role_by_id(self, role_id: Any) -> Role:
        """Raises RoleNotFoundError if the id is unknown."""
        pass

    @abstractmethod
    def list_roles(self) -> List[Role]:
        pass

    @abstractmethod
    def update_role(self, role: Role) -> Role:
        """Replace key, name, description and permissions of a role.

        The write only succeeds if the stored version still equals
        ``role.version``; on success ``role.version`` is advanced.

        Raises:
            RoleNotFoundError: If the role does not exist
            ConcurrentModificationError: If the stored version differs
            DuplicateKeyError: If the new key is taken
        """
        pass

    @abstractmethod
    def delete_role(self, role_id: Any) -> None:
        """Raises RoleNotFoundError if the id is unknown."""
        pass

    def close(self) -> None:
        """Release backend resources. Default is a no-op."""
        pass
