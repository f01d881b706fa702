"""In-memory storage backend.

Keeps rows in dictionaries keyed by integer ids. Useful for tests and
for short-lived processes that load a catalog at startup.
"""

import copy
import itertools
import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..common.logger import get_logger
from ..core.rbac.errors import (
    ActionNotFoundError,
    ConcurrentModificationError,
    DuplicateKeyError,
    ResourceNotFoundError,
    RoleNotFoundError,
)
from ..core.rbac.models import Action, Resource, Role
from .base import Storage

logger = get_logger("memory_storage")


class MemoryStorage(Storage):
    """Dictionary-backed implementation of the storage contract."""

    def __init__(self):
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._resources: Dict[int, Resource] = {}
        self._actions: Dict[int, Action] = {}
        self._roles: Dict[int, Role] = {}

    @property
    def backend_name(self) -> str:
        return "memory"

    def initialize(self) -> None:
        logger.debug("In-memory storage ready")

    # Resource operations

    def create_resource(self, resource: Resource) -> Resource:
        with self._lock:
            if self._find_resource(resource.key, resource.parent_id) is not None:
                raise DuplicateKeyError("resource", resource.key)
            if (
                resource.parent_id is not None
                and resource.parent_id not in self._resources
            ):
                raise ResourceNotFoundError(resource.parent_id)

            now = datetime.utcnow()
            resource.id = next(self._ids)
            resource.created_at = now
            resource.updated_at = now
            self._resources[resource.id] = replace(
                resource, actions=[], sub_resources=[]
            )
            return resource

    def get_resource(self, key: str, parent_id: Optional[Any] = None) -> Resource:
        with self._lock:
            row = self._find_resource(key, parent_id)
            if row is None:
                raise ResourceNotFoundError(key, parent_id)
            return self._hydrate(row)

    def get_resource_by_id(self, resource_id: Any) -> Resource:
        with self._lock:
            row = self._resources.get(resource_id)
            if row is None:
                raise ResourceNotFoundError(resource_id)
            return self._hydrate(row)

    def list_resources(self, parent_id: Optional[Any] = None) -> List[Resource]:
        with self._lock:
            return [
                self._hydrate(row)
                for row in self._resources.values()
                if row.parent_id == parent_id
            ]

    def update_resource(self, resource: Resource) -> Resource:
        with self._lock:
            row = self._resources.get(resource.id)
            if row is None:
                raise ResourceNotFoundError(resource.id)
            clash = self._find_resource(resource.key, resource.parent_id)
            if clash is not None and clash.id != resource.id:
                raise DuplicateKeyError("resource", resource.key)

            row.key = resource.key
            row.name = resource.name
            row.description = resource.description
            row.parent_id = resource.parent_id
            row.updated_at = datetime.utcnow()
            resource.updated_at = row.updated_at
            return resource

    def delete_resource(self, resource_id: Any) -> None:
        with self._lock:
            if resource_id not in self._resources:
                raise ResourceNotFoundError(resource_id)
            self._delete_subtree(resource_id)

    def _delete_subtree(self, resource_id: int) -> None:
        child_ids = [
            row.id for row in self._resources.values() if row.parent_id == resource_id
        ]
        for child_id in child_ids:
            self._delete_subtree(child_id)

        for action_id in [
            a.id for a in self._actions.values() if a.resource_id == resource_id
        ]:
            del self._actions[action_id]
        del self._resources[resource_id]

    # Action operations

    def create_actions(self, resource_id: Any, actions: List[Action]) -> List[Action]:
        with self._lock:
            if resource_id not in self._resources:
                raise ResourceNotFoundError(resource_id)

            taken = {
                a.key for a in self._actions.values() if a.resource_id == resource_id
            }
            for action in actions:
                if action.key in taken:
                    raise DuplicateKeyError("action", action.key)
                taken.add(action.key)

            now = datetime.utcnow()
            stored = []
            for action in actions:
                row = replace(
                    action,
                    id=next(self._ids),
                    resource_id=resource_id,
                    created_at=now,
                    updated_at=now,
                )
                self._actions[row.id] = row
                stored.append(copy.deepcopy(row))
            return stored

    def get_action(self, resource_id: Any, key: str) -> Action:
        with self._lock:
            for action in self._actions.values():
                if action.resource_id == resource_id and action.key == key:
                    return copy.deepcopy(action)
            raise ActionNotFoundError(key, resource_id)

    def list_actions(self, resource_id: Any) -> List[Action]:
        with self._lock:
            return [
                copy.deepcopy(a)
                for a in self._actions.values()
                if a.resource_id == resource_id
            ]

    def delete_action(self, action_id: Any) -> None:
        with self._lock:
            if action_id not in self._actions:
                raise ActionNotFoundError(action_id)
            del self._actions[action_id]

    # Role operations

    def create_role(self, role: Role) -> Role:
        with self._lock:
            if self._find_role(role.key) is not None:
                raise DuplicateKeyError("role", role.key)

            now = datetime.utcnow()
            role.id = next(self._ids)
            role.version = 1
            role.created_at = now
            role.updated_at = now
            self._roles[role.id] = copy.deepcopy(role)
            return role

    def get_role(self, key: str) -> Role:
        with self._lock:
            row = self._find_role(key)
            if row is None:
                raise RoleNotFoundError(key)
            return copy.deepcopy(row)

    def get_role_by_id(self, role_id: Any) -> Role:
        with self._lock:
            row = self._roles.get(role_id)
            if row is None:
                raise RoleNotFoundError(role_id)
            return copy.deepcopy(row)

    def list_roles(self) -> List[Role]:
        with self._lock:
            return [copy.deepcopy(r) for r in self._roles.values()]

    def update_role(self, role: Role) -> Role:
        with self._lock:
            row = self._roles.get(role.id)
            if row is None:
                raise RoleNotFoundError(role.key)
            if row.version != role.version:
                raise ConcurrentModificationError(role.key, role.version)
            clash = self._find_role(role.key)
            if clash is not None and clash.id != role.id:
                raise DuplicateKeyError("role", role.key)

            role.version += 1
            role.updated_at = datetime.utcnow()
            self._roles[role.id] = copy.deepcopy(role)
            return role

    def delete_role(self, role_id: Any) -> None:
        with self._lock:
            if role_id not in self._roles:
                raise RoleNotFoundError(role_id)
            del self._roles[role_id]

    # Helpers

    def _find_resource(self, key: str, parent_id: Optional[Any]) -> Optional[Resource]:
        for row in self._resources.values():
            if row.key == key and row.parent_id == parent_id:
                return row
        return None

    def _find_role(self, key: str) -> Optional[Role]:
        for row in self._roles.values():
            if row.key == key:
                return row
        return None

    def _hydrate(self, row: Resource) -> Resource:
        resource = copy.deepcopy(row)
        resource.actions = [
            copy.deepcopy(a)
            for a in self._actions.values()
            if a.resource_id == row.id
        ]
        resource.sub_resources = [
            copy.deepcopy(child)
            for child in self._resources.values()
            if child.parent_id == row.id
        ]
        return resource
