"""Hierarchical permission matching.

Permission string format: dot-joined path, "<resource-path>.<action>"
or any prefix of it.
Examples:
  - article
  - article.comment
  - article.comment.delete

A granted permission satisfies a required one when the two are equal, or
when one is an ancestor of the other on segment boundaries:
  - given "user" satisfies required "user.create" (group grant)
  - given "infrastructure.vm.start" satisfies required "infrastructure.vm"
  - given "user" does NOT satisfy required "username"
"""

from typing import Iterable

SEPARATOR = "."


def check_permission(required: str, given: str) -> bool:
    """Check if a single granted permission satisfies the required one."""
    if required == given:
        return True

    # Given is a coarser group of the required permission
    if required.startswith(given + SEPARATOR):
        return True

    # Given is a more specific descendant of the required permission
    if given.startswith(required + SEPARATOR):
        return True

    return False


def check_permissions(required: str, given_permissions: Iterable[str]) -> bool:
    """Check if any of the granted permissions satisfies the required one."""
    return any(check_permission(required, given) for given in given_permissions)


def build_permission_string(resource_path: str, action: str) -> str:
    """Build a permission string like "article.comment.delete"."""
    return f"{resource_path}{SEPARATOR}{action}"
