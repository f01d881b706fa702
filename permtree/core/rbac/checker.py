"""Permission checking over an already-loaded permission list."""

from typing import Iterable, List

from .permissions import check_permission, check_permissions


class PermissionChecker:
    """Checks required permissions against a flat list of granted ones."""

    def __init__(self, permissions: Iterable[str]):
        """
        Initialize with a granted permission list.

        Args:
            permissions: Permission strings, typically the union of a
                caller's role permissions
        """
        # dict keeps insertion order while dropping duplicates
        self.permissions: List[str] = list(dict.fromkeys(permissions))

    def has_permission(self, required: str) -> bool:
        """Check if the granted list satisfies a required permission."""
        return check_permissions(required, self.permissions)

    def has_any_permission(self, required: Iterable[str]) -> bool:
        """Check if any of the given requirements is satisfied."""
        return any(self.has_permission(p) for p in required)

    def has_all_permissions(self, required: Iterable[str]) -> bool:
        """Check if all of the given requirements are satisfied."""
        return all(self.has_permission(p) for p in required)

    def matching_permissions(self, required: str) -> List[str]:
        """Return the granted permissions that satisfy ``required``."""
        return [p for p in self.permissions if check_permission(required, p)]
