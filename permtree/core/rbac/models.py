"""Entity model for the resource catalog and roles.

These are plain value records. Storage backends return fresh copies, so
mutating an entity has no effect until it is passed back to an update
operation.

Ownership:
  - a Resource owns its Actions and its child Resources
  - a Resource with ``parent_id=None`` is a root
  - a Role owns nothing; its permissions are plain strings
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional


@dataclass
class Action:
    """An operation keyed within the scope of one resource."""

    key: str
    name: str = ""
    description: str = ""
    id: Optional[Any] = None
    resource_id: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Resource:
    """A named node in the resource tree.

    ``sub_resources`` holds only the immediate children. Grandchildren are
    reachable by looking up a child by id or path.
    """

    key: str
    name: str = ""
    description: str = ""
    id: Optional[Any] = None
    parent_id: Optional[Any] = None
    actions: List[Action] = field(default_factory=list)
    sub_resources: List["Resource"] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def get_action(self, key: str) -> Optional[Action]:
        """Return the loaded action with this key, if any."""
        for action in self.actions:
            if action.key == key:
                return action
        return None

    def get_sub_resource(self, key: str) -> Optional["Resource"]:
        """Return the loaded child with this key, if any."""
        for child in self.sub_resources:
            if child.key == key:
                return child
        return None


@dataclass
class Role:
    """A named bundle of permission strings.

    ``version`` is bumped by the storage backend on every update and is
    compared on write to detect lost updates.
    """

    key: str
    name: str = ""
    description: str = ""
    permissions: List[str] = field(default_factory=list)
    id: Optional[Any] = None
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class ResourceConfig:
    """Configuration for a resource tree handed to the manager."""

    key: str
    name: str = ""
    description: str = ""
    actions: List[Action] = field(default_factory=list)
    sub_resources: List["ResourceConfig"] = field(default_factory=list)


@dataclass
class RoleConfig:
    """Configuration for a role handed to the manager."""

    name: str = ""
    description: str = ""
    permissions: List[str] = field(default_factory=list)


def define_action(key: str, name: str = "", description: str = "") -> Action:
    """Build an unsaved Action value."""
    return Action(key=key, name=name, description=description)
