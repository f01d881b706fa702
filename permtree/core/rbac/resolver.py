"""Resolution of dot-delimited resource paths like "article.comment"."""

from typing import List

from ...common.logger import get_logger
from .errors import InvalidPathError, ResourceNotFoundError
from .models import Resource
from .permissions import SEPARATOR

logger = get_logger("path_resolver")


def parse_resource_path(path: str) -> List[str]:
    """Split a resource path into its keys.

    Raises:
        InvalidPathError: If the path is empty or has an empty segment
    """
    keys = path.split(SEPARATOR) if path else []
    if not keys or any(not key for key in keys):
        raise InvalidPathError(path)
    return keys


def child_path(parent_path: str, key: str) -> str:
    """Build the path of a resource with ``key`` under ``parent_path``.

    An empty ``parent_path`` means the resource is a root.

    Raises:
        InvalidPathError: If the key is empty or contains the separator
    """
    path = f"{parent_path}{SEPARATOR}{key}" if parent_path else key
    if not key or SEPARATOR in key:
        raise InvalidPathError(path)
    return path


class PathResolver:
    """Walks a resource path down the tree, one parent-scoped lookup per key."""

    def __init__(self, storage):
        self.storage = storage

    def resolve(self, path: str) -> Resource:
        """
        Resolve a path to the resource at its last segment.

        Args:
            path: Dot-delimited path; the first key is looked up among roots

        Returns:
            Resource with its actions and immediate sub-resources

        Raises:
            InvalidPathError: If the path is malformed
            ResourceNotFoundError: If any segment does not resolve
        """
        keys = parse_resource_path(path)

        parent_id = None
        resource = None
        for key in keys:
            try:
                resource = self.storage.get_resource(key, parent_id)
            except ResourceNotFoundError as e:
                logger.debug(f"Path {path!r} stopped at segment {key!r}")
                raise ResourceNotFoundError(key, parent_id, path=path) from e
            parent_id = resource.id

        return resource
