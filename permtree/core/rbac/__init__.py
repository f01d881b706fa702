"""RBAC (Role-Based Access Control) module for permtree.

This module defines the resource/role model, hierarchical permission
matching and the manager that ties them to a storage backend.
"""

from .models import Action, Resource, ResourceConfig, Role, RoleConfig, define_action
from .permissions import build_permission_string, check_permission, check_permissions
from .checker import PermissionChecker
from .resolver import PathResolver, parse_resource_path
from .manager import RBACManager, create_manager

__all__ = [
    "Action",
    "PathResolver",
    "PermissionChecker",
    "RBACManager",
    "Resource",
    "ResourceConfig",
    "Role",
    "RoleConfig",
    "build_permission_string",
    "check_permission",
    "check_permissions",
    "create_manager",
    "define_action",
    "parse_resource_path",
]
