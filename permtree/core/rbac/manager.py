"""RBAC manager for resources, actions and roles.

Provides the high-level API over a storage backend:
- building and extending the resource tree
- granting and revoking role permissions
- answering permission checks for one or several roles

Resource creation is strict at the root (``create_resource`` refuses an
existing key) but permissive when extending (``create_resources`` merges
into an existing child by key). The two behave differently on purpose.
"""

from typing import Iterable, List, Optional, Sequence

from ...common.logger import get_logger
from ..config import Settings
from .errors import (
    ConfigurationError,
    ResourceExistsError,
    ResourceNotFoundError,
    RoleExistsError,
    RoleNotFoundError,
)
from .models import Action, Resource, ResourceConfig, Role, RoleConfig
from .permissions import check_permissions
from .resolver import PathResolver, child_path

logger = get_logger("rbac_manager")


class RBACManager:
    """Manages the resource catalog and roles stored in one backend."""

    def __init__(self, storage):
        """
        Initialize the manager and prepare the backend.

        Args:
            storage: A ``Storage`` implementation

        Raises:
            ConfigurationError: If no storage is supplied
        """
        if storage is None:
            raise ConfigurationError("RBACManager requires a storage backend")
        self.storage = storage
        self.resolver = PathResolver(storage)
        storage.initialize()

    # Resources

    def create_resource(self, config: ResourceConfig) -> Resource:
        """
        Create a root resource with its actions and sub-resources.

        Sub-resources are created without an existence check since the
        whole tree is new.

        Returns:
            The stored resource reloaded with actions and children

        Raises:
            InvalidPathError: If any key in the tree is empty or dotted
            ResourceExistsError: If a root resource with this key exists
        """
        self._check_keys(config, "")
        if self._find_resource(config.key, None) is not None:
            raise ResourceExistsError(config.key)

        resource = self._create_tree(config, parent_id=None)
        logger.info(f"Created resource {config.key}")
        return self.storage.get_resource_by_id(resource.id)

    def add_actions(self, resource_path: str, actions: Sequence[Action]) -> List[Action]:
        """Append actions to the resource at ``resource_path``."""
        resource = self.resolver.resolve(resource_path)
        created = self.storage.create_actions(resource.id, list(actions))
        logger.info(
            f"Added actions {[a.key for a in created]} to resource {resource_path}"
        )
        return created

    def create_resources(
        self, parent_path: str, sub_resources: Sequence[ResourceConfig]
    ) -> None:
        """
        Add sub-resources under an existing resource.

        A candidate whose key already exists under the parent is merged:
        its actions are appended to the existing child and its own
        sub-resources are merged the same way. Other candidates are created.

        Raises:
            InvalidPathError: If any candidate key is empty or dotted
        """
        parent = self.resolver.resolve(parent_path)
        for candidate in sub_resources:
            self._check_keys(candidate, parent_path)
        self._merge_children(parent.id, sub_resources, parent_path)

    def get_resource(self, path: str) -> Resource:
        return self.resolver.resolve(path)

    def list_resources(self) -> List[Resource]:
        """List root resources."""
        return self.storage.list_resources(None)

    def delete_resource(self, path: str) -> None:
        """Delete a resource with its actions and every descendant."""
        resource = self.resolver.resolve(path)
        self.storage.delete_resource(resource.id)
        logger.info(f"Deleted resource {path}")

    def get_action(self, resource_path: str, action_key: str) -> Action:
        resource = self.resolver.resolve(resource_path)
        return self.storage.get_action(resource.id, action_key)

    def remove_action(self, resource_path: str, action_key: str) -> None:
        """Delete one action from a resource.

        Raises:
            ActionNotFoundError: If the resource has no such action
        """
        action = self.get_action(resource_path, action_key)
        self.storage.delete_action(action.id)
        logger.info(f"Removed action {action_key} from resource {resource_path}")

    def _check_keys(self, config, parent_path: str) -> None:
        # Checks the whole tree before the first write
        path = child_path(parent_path, config.key)
        for child in config.sub_resources:
            self._check_keys(child, path)

    def _create_tree(self, config, parent_id) -> Resource:
        resource = self.storage.create_resource(
            Resource(
                key=config.key,
                name=config.name,
                description=config.description,
                parent_id=parent_id,
            )
        )
        if config.actions:
            self.storage.create_actions(resource.id, list(config.actions))
        for child in config.sub_resources:
            self._create_tree(child, resource.id)
        return resource

    def _merge_children(self, parent_id, candidates, parent_path: str) -> None:
        for candidate in candidates:
            path = child_path(parent_path, candidate.key)
            existing = self._find_resource(candidate.key, parent_id)
            if existing is None:
                self._create_tree(candidate, parent_id)
                logger.info(f"Created resource {path}")
                continue

            if candidate.actions:
                self.storage.create_actions(existing.id, list(candidate.actions))
                logger.info(f"Extended resource {path} with {len(candidate.actions)} actions")
            if candidate.sub_resources:
                self._merge_children(existing.id, candidate.sub_resources, path)

    def _find_resource(self, key: str, parent_id) -> Optional[Resource]:
        try:
            return self.storage.get_resource(key, parent_id)
        except ResourceNotFoundError:
            return None

    # Roles

    def create_role(self, key: str, config: Optional[RoleConfig] = None) -> Role:
        """
        Create a role.

        The initial permission list is stored as given, duplicates included.

        Raises:
            RoleExistsError: If the key is taken
        """
        config = config or RoleConfig()
        try:
            self.storage.get_role(key)
        except RoleNotFoundError:
            pass
        else:
            raise RoleExistsError(key)

        role = self.storage.create_role(
            Role(
                key=key,
                name=config.name,
                description=config.description,
                permissions=list(config.permissions),
            )
        )
        logger.info(f"Created role {key} with {len(role.permissions)} permissions")
        return role

    def assign_permissions(self, role_key: str, permissions: Iterable[str]) -> Role:
        """Grant permissions, skipping any the role already holds."""
        role = self.storage.get_role(role_key)

        present = set(role.permissions)
        added = []
        for permission in permissions:
            if permission not in present:
                role.permissions.append(permission)
                present.add(permission)
                added.append(permission)

        if not added:
            return role

        role = self.storage.update_role(role)
        logger.info(f"Assigned {added} to role {role_key}")
        return role

    def remove_permissions(self, role_key: str, permissions: Iterable[str]) -> Role:
        """Revoke permissions; values the role does not hold are ignored."""
        role = self.storage.get_role(role_key)

        to_remove = set(permissions)
        removed = [p for p in dict.fromkeys(role.permissions) if p in to_remove]
        if not removed:
            return role

        role.permissions = [p for p in role.permissions if p not in to_remove]
        role = self.storage.update_role(role)
        logger.info(f"Removed {removed} from role {role_key}")
        return role

    def update_role(
        self,
        role_key: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Role:
        """Update the display fields of a role."""
        role = self.storage.get_role(role_key)
        if name is not None:
            role.name = name
        if description is not None:
            role.description = description
        return self.storage.update_role(role)

    def get_role(self, key: str) -> Role:
        return self.storage.get_role(key)

    def list_roles(self) -> List[Role]:
        return self.storage.list_roles()

    def delete_role(self, key: str) -> None:
        role = self.storage.get_role(key)
        self.storage.delete_role(role.id)
        logger.info(f"Deleted role {key}")

    # Checks

    def check_role_permission(self, role_key: str, required: str) -> bool:
        """
        Check if a role satisfies a required permission.

        Raises:
            RoleNotFoundError: If the role does not exist
        """
        role = self.storage.get_role(role_key)
        return check_permissions(required, role.permissions)

    def check_roles_permission(self, role_keys: Iterable[str], required: str) -> bool:
        """
        Check if any of the roles satisfies a required permission.

        Roles are tried in order. Unknown roles are skipped; any other
        failure propagates.
        """
        for role_key in role_keys:
            try:
                if self.check_role_permission(role_key, required):
                    return True
            except RoleNotFoundError:
                logger.debug(f"Skipping unknown role {role_key}")
        return False

    def get_role_permissions(self, role_keys: Iterable[str]) -> List[str]:
        """Union of the permissions of the given roles, unknown roles skipped."""
        merged: List[str] = []
        seen = set()
        for role_key in role_keys:
            try:
                role = self.storage.get_role(role_key)
            except RoleNotFoundError:
                logger.debug(f"Skipping unknown role {role_key}")
                continue
            for permission in role.permissions:
                if permission not in seen:
                    seen.add(permission)
                    merged.append(permission)
        return merged


def create_manager(settings: Optional[Settings] = None) -> RBACManager:
    """Build a manager on the storage backend named in settings."""
    from ...storage.registry import create_storage

    return RBACManager(create_storage(settings))
