"""Catalog configuration for permtree.

Handles loading and validation of YAML catalog files describing the
resource tree and the roles to seed.

Example::

    resources:
      - key: article
        name: Article
        actions:
          - {key: read, name: Read}
        sub_resources:
          - key: comment
            actions:
              - {key: delete, name: Delete Comment}
    roles:
      - key: viewer
        name: Viewer
        permissions: [article.read]
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..core.rbac.models import Action, ResourceConfig, define_action


@dataclass
class RoleDefinition:
    """A role entry of a catalog file."""

    key: str
    name: str = ""
    description: str = ""
    permissions: List[str] = field(default_factory=list)


@dataclass
class CatalogConfig:
    """Top-level catalog: resource trees and roles."""

    resources: List[ResourceConfig] = field(default_factory=list)
    roles: List[RoleDefinition] = field(default_factory=list)


def _require_key(entry: Dict[str, Any], kind: str) -> str:
    key = entry.get("key")
    if not isinstance(key, str) or not key:
        raise ValueError(f"Every {kind} needs a non-empty 'key': {entry!r}")
    return key


def _reject_duplicates(keys: List[str], kind: str, owner: str) -> None:
    seen = set()
    for key in keys:
        if key in seen:
            raise ValueError(f"Duplicate {kind} key {key!r} in resource {owner!r}")
        seen.add(key)


def parse_action_config(action_dict: Dict[str, Any]) -> Action:
    """Parse an action entry.

    A bare string is accepted as shorthand for ``{key: <string>}``.
    """
    if isinstance(action_dict, str):
        action_dict = {"key": action_dict}
    return define_action(
        _require_key(action_dict, "action"),
        action_dict.get("name", ""),
        action_dict.get("description", ""),
    )


def parse_resource_config(resource_dict: Dict[str, Any]) -> ResourceConfig:
    """Parse a resource entry and its nested sub-resources.

    Args:
        resource_dict: Resource configuration dictionary

    Returns:
        ResourceConfig instance

    Raises:
        ValueError: If a key is missing, or two actions or two
            sub-resources of the same entry share a key
    """
    key = _require_key(resource_dict, "resource")
    actions = [parse_action_config(a) for a in resource_dict.get("actions") or []]
    sub_resources = [
        parse_resource_config(sub) for sub in resource_dict.get("sub_resources") or []
    ]
    _reject_duplicates([a.key for a in actions], "action", key)
    _reject_duplicates([s.key for s in sub_resources], "sub-resource", key)

    return ResourceConfig(
        key=key,
        name=resource_dict.get("name", ""),
        description=resource_dict.get("description", ""),
        actions=actions,
        sub_resources=sub_resources,
    )


def parse_role_config(role_dict: Dict[str, Any]) -> RoleDefinition:
    """Parse a role entry.

    Args:
        role_dict: Role configuration dictionary

    Returns:
        RoleDefinition instance
    """
    permissions = role_dict.get("permissions") or []
    if not isinstance(permissions, list):
        raise ValueError(f"Role permissions must be a list: {role_dict!r}")
    return RoleDefinition(
        key=_require_key(role_dict, "role"),
        name=role_dict.get("name", ""),
        description=role_dict.get("description", ""),
        permissions=[str(p) for p in permissions],
    )


def parse_catalog(config_dict: Dict[str, Any]) -> CatalogConfig:
    """Parse the full catalog dictionary.

    Args:
        config_dict: Full catalog dictionary

    Returns:
        CatalogConfig instance
    """
    return CatalogConfig(
        resources=[parse_resource_config(r) for r in config_dict.get("resources") or []],
        roles=[parse_role_config(r) for r in config_dict.get("roles") or []],
    )


def load_config(config_path: str) -> Dict[str, Any]:
    """Load a catalog from a YAML file.

    Args:
        config_path: Path to catalog file

    Returns:
        Catalog dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file is invalid YAML
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Catalog file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Catalog root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in string values."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_catalog(config_path: str) -> CatalogConfig:
    """Load and parse a catalog file into typed dataclasses."""
    return parse_catalog(load_config(config_path))
