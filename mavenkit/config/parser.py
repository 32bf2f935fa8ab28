"""YAML configuration parser for MavenKit.

This module provides parsing and validation for mavenkit.yaml configuration files.
Tool versions are only checked for type here; whether a version is supported
is decided by the toolchain resolver.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from mavenkit.core.exceptions import ConfigurationError
from mavenkit.toolchain.requirements import ToolRequirement

CONFIG_FILE_NAME = "mavenkit.yaml"

DEFAULT_JAVA_VERSION = "17"
DEFAULT_JAVA_DISTRIBUTION = "temurin"
DEFAULT_MAVEN_VERSION = "3.9.6"


class ConfigError(ConfigurationError):
    """Configuration parsing or validation error."""

    pass


@dataclass
class JavaConfig:
    """Required Java runtime."""

    version: str = DEFAULT_JAVA_VERSION
    distribution: str = DEFAULT_JAVA_DISTRIBUTION


@dataclass
class MavenConfig:
    """Required Maven version."""

    version: str = DEFAULT_MAVEN_VERSION


@dataclass
class CacheConfig:
    """Dependency cache configuration."""

    enabled: bool = True
    directory: Optional[str] = None  # LocalCacheBackend store
    repository: Optional[str] = None  # Maven repository saved to cache


@dataclass
class MavenKitConfig:
    """Complete MavenKit configuration."""

    version: int = 1
    java: JavaConfig = field(default_factory=JavaConfig)
    maven: MavenConfig = field(default_factory=MavenConfig)
    working_directory: str = "."
    cache: CacheConfig = field(default_factory=CacheConfig)
    tool_cache: Optional[str] = None

    def runtime_requirement(self) -> ToolRequirement:
        return ToolRequirement.runtime(self.java.version, self.java.distribution)

    def build_tool_requirement(self) -> ToolRequirement:
        return ToolRequirement.build_tool(self.maven.version)

    def project_dir(self, base: Path) -> Path:
        """Working directory resolved against ``base``."""
        return resolve_path(self.working_directory, base)


def resolve_path(value: str, base: Path) -> Path:
    """Expand ``~`` and resolve a relative path against ``base``."""
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = Path(base) / path
    return path.resolve()


def parse_config(config_path: Path) -> MavenKitConfig:
    """
    Parse mavenkit.yaml configuration file.

    Args:
        config_path: Path to mavenkit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise ConfigError("Configuration file is empty")

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    return _parse_and_validate(data)


def load_config(
    config_path: Optional[Path] = None, project_root: Optional[Path] = None
) -> MavenKitConfig:
    """
    Load configuration for a project.

    An explicitly given file must exist. Without one, ``mavenkit.yaml`` in
    the project root is used if present, otherwise the defaults.
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default_path = Path(project_root or Path.cwd()) / CONFIG_FILE_NAME
    if default_path.exists():
        return parse_config(default_path)

    return MavenKitConfig()


def _parse_and_validate(data: Dict[str, Any]) -> MavenKitConfig:
    """Parse and validate configuration data."""
    # Check version
    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    java_data = _section(data, "java")
    maven_data = _section(data, "maven")
    cache_data = _section(data, "cache")

    java = JavaConfig(
        version=_version(java_data, "java", DEFAULT_JAVA_VERSION),
        distribution=str(java_data.get("distribution", DEFAULT_JAVA_DISTRIBUTION)),
    )
    maven = MavenConfig(version=_version(maven_data, "maven", DEFAULT_MAVEN_VERSION))

    enabled = cache_data.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigError(f"cache.enabled must be true or false, got: {enabled!r}")

    cache = CacheConfig(
        enabled=enabled,
        directory=_optional_str(cache_data, "directory", "cache"),
        repository=_optional_str(cache_data, "repository", "cache"),
    )

    return MavenKitConfig(
        version=data["version"],
        java=java,
        maven=maven,
        working_directory=str(data.get("working_directory") or "."),
        cache=cache,
        tool_cache=_optional_str(data, "tool_cache"),
    )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return section


def _version(section: Dict[str, Any], name: str, default: str) -> str:
    # YAML reads `17` as an int and `3.9` as a float
    value = section.get("version", default)
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigError(f"{name}.version must be a string, got: {value!r}")
    return str(value)


def _optional_str(
    section: Dict[str, Any], key: str, prefix: Optional[str] = None
) -> Optional[str]:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        name = f"{prefix}.{key}" if prefix else key
        raise ConfigError(f"{name} must be a string, got: {value!r}")
    return value
