"""
Version-query output parsing.

Pure functions turning the free text printed by ``java -version`` and
``mvn -version`` into structured fields. They never raise; output that
cannot be understood yields None, which detection treats as absence.
"""

import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ParsedVersion:
    """Fields recovered from a version-query command."""

    version: str
    full_version: str
    variant: Optional[str] = None
    home: Optional[str] = None


# Vendor markers in `java -version` output, mapped to distribution ids.
# Order matters: Temurin builds also mention OpenJDK.
JAVA_VENDOR_PATTERNS = (
    (re.compile(r"Temurin", re.IGNORECASE), "temurin"),
    (re.compile(r"AdoptOpenJDK", re.IGNORECASE), "adopt"),
    (re.compile(r"Zulu", re.IGNORECASE), "zulu"),
    (re.compile(r"Liberica|BellSoft", re.IGNORECASE), "liberica"),
    (re.compile(r"Microsoft", re.IGNORECASE), "microsoft"),
    (re.compile(r"Corretto", re.IGNORECASE), "corretto"),
)

_JAVA_VERSION_RE = re.compile(r'version "([^"]+)"')
_JAVA_HOME_RE = re.compile(r"java\.home = (.+)")
_MAVEN_VERSION_RE = re.compile(r"Apache Maven (\d+(?:\.\d+)*)")
_DOTTED_VERSION_RE = re.compile(r"\b(\d+\.\d+(?:\.\d+)*)\b")
_MAVEN_HOME_RE = re.compile(r"Maven home: (.+)")
_LEADING_INT_RE = re.compile(r"^(\d+)")


def java_major_version(full_version: str) -> Optional[int]:
    """
    Extract the major version from a Java version string.

    Handles the legacy ``1.X.0_build`` scheme (major X) as well as the
    modern ``X.Y.Z`` scheme (major X).

    Example:
        >>> java_major_version("1.8.0_392")
        8
        >>> java_major_version("17.0.9")
        17
    """
    parts = full_version.strip().split(".")
    if len(parts) > 1 and parts[0] == "1":
        candidate = parts[1]
    else:
        candidate = parts[0]

    match = _LEADING_INT_RE.match(candidate)
    return int(match.group(1)) if match else None


def detect_java_vendor(output: str) -> Optional[str]:
    """Map vendor text in ``java -version`` output to a distribution id."""
    for pattern, distribution in JAVA_VENDOR_PATTERNS:
        if pattern.search(output):
            return distribution
    return None


def parse_java_version_output(output: str) -> Optional[ParsedVersion]:
    """
    Parse ``java -version`` output.

    Example:
        >>> parsed = parse_java_version_output(
        ...     'openjdk version "17.0.9" 2023-10-17\\n'
        ...     'OpenJDK Runtime Environment Temurin-17.0.9+9 (build 17.0.9+9)\\n'
        ... )
        >>> parsed.version, parsed.variant
        ('17', 'temurin')
    """
    match = _JAVA_VERSION_RE.search(output)
    if not match:
        return None

    full_version = match.group(1)
    major = java_major_version(full_version)
    if major is None:
        return None

    return ParsedVersion(
        version=str(major),
        full_version=full_version,
        variant=detect_java_vendor(output),
    )


def parse_java_home(output: str) -> Optional[str]:
    """Extract ``java.home`` from ``java -XshowSettings:properties`` output."""
    match = _JAVA_HOME_RE.search(output)
    return match.group(1).strip() if match else None


def parse_maven_version_output(output: str) -> Optional[ParsedVersion]:
    """
    Parse ``mvn -version`` output.

    The version comes from the ``Apache Maven X.Y.Z`` banner, falling back
    to the first dotted version token; the home from ``Maven home:``.

    Example:
        >>> parsed = parse_maven_version_output(
        ...     "Apache Maven 3.9.6 (bc0240f3c744dd6b6ec2920b3cd08dcc295161ae)\\n"
        ...     "Maven home: /opt/maven\\n"
        ... )
        >>> parsed.version, parsed.home
        ('3.9.6', '/opt/maven')
    """
    match = _MAVEN_VERSION_RE.search(output) or _DOTTED_VERSION_RE.search(output)
    if not match:
        return None

    version = match.group(1)
    home_match = _MAVEN_HOME_RE.search(output)

    return ParsedVersion(
        version=version,
        full_version=version,
        home=home_match.group(1).strip() if home_match else None,
    )
