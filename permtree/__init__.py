"""permtree: hierarchical resource catalog and role-based permission checks.

Typical use::

    from permtree import RBACManager, ResourceConfig, RoleConfig, define_action
    from permtree.storage import MemoryStorage

    manager = RBACManager(MemoryStorage())
    manager.create_resource(
        ResourceConfig(key="article", actions=[define_action("read", "Read")])
    )
    manager.create_role("viewer", RoleConfig(permissions=["article.read"]))
    manager.check_role_permission("viewer", "article.read")  # True
"""

__version__ = "0.1.0"

from .core.rbac import (
    Action,
    PathResolver,
    PermissionChecker,
    RBACManager,
    Resource,
    ResourceConfig,
    Role,
    RoleConfig,
    build_permission_string,
    check_permission,
    check_permissions,
    create_manager,
    define_action,
    parse_resource_path,
)
from .core.rbac.errors import (
    ActionNotFoundError,
    AlreadyExistsError,
    ConcurrentModificationError,
    ConfigurationError,
    DuplicateKeyError,
    InvalidPathError,
    NotFoundError,
    RBACError,
    ResourceExistsError,
    ResourceNotFoundError,
    RoleExistsError,
    RoleNotFoundError,
)

__all__ = [
    "Action",
    "ActionNotFoundError",
    "AlreadyExistsError",
    "ConcurrentModificationError",
    "ConfigurationError",
    "DuplicateKeyError",
    "InvalidPathError",
    "NotFoundError",
    "PathResolver",
    "PermissionChecker",
    "RBACError",
    "RBACManager",
    "Resource",
    "ResourceConfig",
    "ResourceExistsError",
    "ResourceNotFoundError",
    "Role",
    "RoleConfig",
    "RoleExistsError",
    "RoleNotFoundError",
    "build_permission_string",
    "check_permission",
    "check_permissions",
    "create_manager",
    "define_action",
    "parse_resource_path",
]
