"""Public configuration API for PaperPortal."""

from __future__ import annotations

from PaperPortal.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from PaperPortal.config.auth import AuthConfig
from PaperPortal.config.runtime import RuntimeConfig
from PaperPortal.config.scholar import ScholarConfig
from PaperPortal.config.storage import StorageConfig

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "AppConfig",
    "AuthConfig",
    "RuntimeConfig",
    "ScholarConfig",
    "StorageConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
