"""
Tool kinds and their strategies.

MavenKit resolves exactly two kinds of tool: the Java runtime (JDK) and the
Maven build tool. Each ToolKind member carries a KindStrategy bundling
everything that differs between them: how to query and parse the version,
how to compare versions, what is allowed, and how an installed copy is
registered.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from mavenkit.toolchain.compatibility import build_tool_at_least, runtime_at_least
from mavenkit.toolchain.parsing import (
    ParsedVersion,
    parse_java_home,
    parse_java_version_output,
    parse_maven_version_output,
)

SUPPORTED_JAVA_VERSIONS = ("8", "11", "17", "21")
SUPPORTED_JAVA_DISTRIBUTIONS = (
    "temurin",
    "zulu",
    "adopt",
    "liberica",
    "microsoft",
    "corretto",
)
SUPPORTED_MAVEN_VERSIONS = ("3.6.3", "3.8.1", "3.8.6", "3.9.0", "3.9.5", "3.9.6")


@dataclass(frozen=True)
class KindStrategy:
    """
    Per-kind behaviour used by detection, compatibility and installation.

    Attributes:
        name: Short identifier ('java', 'maven'), also the summary key
        display_name: Human readable tool name
        executable: Executable queried on PATH
        version_args: Arguments printing the version
        parse_output: Parser for the version-query output
        at_least: Comparator deciding detected >= required
        supported_versions: Allow-list of requestable versions
        supported_variants: Allow-list of variants (empty: no variant)
        home_variables: Environment variables exported after install
        home_env_var: Variable consulted for the home directory on detection
        home_query_args: Extra query printing the home directory
        parse_home: Parser for the home-query output
    """

    name: str
    display_name: str
    executable: str
    version_args: Tuple[str, ...]
    parse_output: Callable[[str], Optional[ParsedVersion]]
    at_least: Callable[[str, str], bool]
    supported_versions: Tuple[str, ...]
    supported_variants: Tuple[str, ...]
    home_variables: Tuple[str, ...]
    home_env_var: Optional[str] = None
    home_query_args: Optional[Tuple[str, ...]] = None
    parse_home: Optional[Callable[[str], Optional[str]]] = None

    @property
    def has_variants(self) -> bool:
        return bool(self.supported_variants)

    def tool_cache_name(self, variant: Optional[str]) -> str:
        """Name under which installed copies are kept in the tool cache."""
        if self.has_variants:
            return f"{self.display_name}_{variant}"
        return self.display_name


JAVA_STRATEGY = KindStrategy(
    name="java",
    display_name="Java",
    executable="java",
    version_args=("-version",),
    parse_output=parse_java_version_output,
    at_least=runtime_at_least,
    supported_versions=SUPPORTED_JAVA_VERSIONS,
    supported_variants=SUPPORTED_JAVA_DISTRIBUTIONS,
    home_variables=("JAVA_HOME",),
    home_env_var="JAVA_HOME",
    home_query_args=("-XshowSettings:properties", "-version"),
    parse_home=parse_java_home,
)

MAVEN_STRATEGY = KindStrategy(
    name="maven",
    display_name="Maven",
    executable="mvn",
    version_args=("-version",),
    parse_output=parse_maven_version_output,
    at_least=build_tool_at_least,
    supported_versions=SUPPORTED_MAVEN_VERSIONS,
    supported_variants=(),
    home_variables=("M2_HOME", "MAVEN_HOME"),
)


class ToolKind(Enum):
    """The closed set of tool kinds MavenKit resolves."""

    RUNTIME = JAVA_STRATEGY
    BUILD_AUTOMATION = MAVEN_STRATEGY

    @property
    def strategy(self) -> KindStrategy:
        return self.value

    @property
    def display_name(self) -> str:
        return self.value.display_name
