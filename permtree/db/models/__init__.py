"""Database tables for the permtree SQL backend."""

from permtree.db.models.resource import ResourceRow
from permtree.db.models.action import ActionRow
from permtree.db.models.role import RoleRow

__all__ = [
    "ResourceRow",
    "ActionRow",
    "RoleRow",
]
