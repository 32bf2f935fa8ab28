"""Configuration module for MavenKit.

This module provides YAML configuration parsing and validation for mavenkit.yaml.
"""

from mavenkit.config.parser import (
    CONFIG_FILE_NAME,
    JavaConfig,
    MavenConfig,
    CacheConfig,
    MavenKitConfig,
    ConfigError,
    parse_config,
    load_config,
    resolve_path,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "JavaConfig",
    "MavenConfig",
    "CacheConfig",
    "MavenKitConfig",
    "ConfigError",
    "parse_config",
    "load_config",
    "resolve_path",
]
