"""Common utilities for permtree."""

from .logger import setup_logger, get_logger
from .config import load_catalog, load_config

__all__ = ["get_logger", "load_catalog", "load_config", "setup_logger"]
