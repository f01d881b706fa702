"""Catalog seeding for permtree.

Applies a catalog (resource trees and roles) to a manager. Seeding is
idempotent: running the same catalog twice leaves the store unchanged.
"""

from typing import Dict, Optional

from .common.config import CatalogConfig, RoleDefinition, load_catalog
from .common.logger import get_logger
from .core.config import Settings, get_settings
from .core.rbac.errors import RoleNotFoundError
from .core.rbac.manager import RBACManager
from .core.rbac.models import Resource, ResourceConfig, Role, RoleConfig

logger = get_logger("seed")


def seed_resource(manager: RBACManager, config: ResourceConfig) -> Resource:
    """
    Create a root resource tree, or merge it into an existing one.

    Only actions and sub-resources that are missing are added, so the
    catalog can be re-applied after it gains entries.

    Args:
        manager: RBAC manager
        config: Root resource configuration

    Returns:
        The root resource as stored
    """
    roots = {r.key for r in manager.list_resources()}
    if config.key not in roots:
        return manager.create_resource(config)

    _merge_missing(manager, config.key, config)
    return manager.get_resource(config.key)


def _merge_missing(manager: RBACManager, path: str, config: ResourceConfig) -> None:
    resource = manager.get_resource(path)

    present = {a.key for a in resource.actions}
    missing_actions = [a for a in config.actions if a.key not in present]
    if missing_actions:
        manager.add_actions(path, missing_actions)

    children = {child.key for child in resource.sub_resources}
    new_children = [sub for sub in config.sub_resources if sub.key not in children]
    if new_children:
        manager.create_resources(path, new_children)

    for sub in config.sub_resources:
        if sub.key in children:
            _merge_missing(manager, f"{path}.{sub.key}", sub)


def seed_role(manager: RBACManager, definition: RoleDefinition) -> Role:
    """Create a role, or grant it any catalog permissions it lacks."""
    try:
        manager.get_role(definition.key)
    except RoleNotFoundError:
        return manager.create_role(
            definition.key,
            RoleConfig(
                name=definition.name,
                description=definition.description,
                permissions=list(dict.fromkeys(definition.permissions)),
            ),
        )
    return manager.assign_permissions(definition.key, definition.permissions)


def seed_catalog(manager: RBACManager, catalog: CatalogConfig) -> Dict[str, Role]:
    """
    Apply a whole catalog.

    Returns:
        Dict mapping role key to the stored Role
    """
    for resource_config in catalog.resources:
        seed_resource(manager, resource_config)

    roles = {}
    for definition in catalog.roles:
        roles[definition.key] = seed_role(manager, definition)

    logger.info(
        f"Seeded {len(catalog.resources)} resource trees and {len(roles)} roles"
    )
    return roles


def seed_from_settings(
    manager: RBACManager, settings: Optional[Settings] = None
) -> Dict[str, Role]:
    """Apply the catalog file named by ``settings.catalog_path``, if any."""
    settings = settings or get_settings()
    if not settings.catalog_path:
        logger.debug("No catalog configured, nothing to seed")
        return {}
    return seed_catalog(manager, load_catalog(settings.catalog_path))
