"""Version compatibility policy.

Decides whether a detected tool version satisfies a required one. Newer
tools are accepted: a runtime with an equal or higher major version, or a
build tool whose dotted version compares greater or equal.
"""

import re
from typing import TYPE_CHECKING, List

from mavenkit.toolchain.parsing import java_major_version

if TYPE_CHECKING:
    from mavenkit.toolchain.kinds import ToolKind

_LEADING_INT_RE = re.compile(r"^(\d+)")


def _components(version: str) -> List[int]:
    """Numeric components of a dotted version; non-numeric parts count as 0."""
    components = []
    for part in version.strip().split("."):
        match = _LEADING_INT_RE.match(part)
        components.append(int(match.group(1)) if match else 0)
    return components


def compare_dotted(left: str, right: str) -> int:
    """
    Compare two dotted versions component by component.

    Missing trailing components are treated as 0, so ``3.9`` equals
    ``3.9.0``.

    Returns:
        -1, 0 or 1 as left is lower than, equal to or greater than right

    Example:
        >>> compare_dotted("3.9.6", "3.9.5")
        1
        >>> compare_dotted("3.9", "3.9.0")
        0
    """
    a = _components(left)
    b = _components(right)
    width = max(len(a), len(b))
    a += [0] * (width - len(a))
    b += [0] * (width - len(b))

    if a > b:
        return 1
    if a < b:
        return -1
    return 0


def runtime_at_least(detected: str, required: str) -> bool:
    """True when the detected runtime major is at least the required major."""
    detected_major = java_major_version(detected)
    required_major = java_major_version(required)
    if detected_major is None or required_major is None:
        return False
    return detected_major >= required_major


def build_tool_at_least(detected: str, required: str) -> bool:
    """True when the detected dotted version is at least the required one."""
    return compare_dotted(detected, required) >= 0


def is_compatible(detected: str, required: str, kind: "ToolKind") -> bool:
    """
    Decide whether a detected version satisfies a required version.

    Exact string equality is always compatible; otherwise the comparison
    belongs to the tool kind.

    Example:
        >>> from mavenkit.toolchain.kinds import ToolKind
        >>> is_compatible("21", "17", ToolKind.RUNTIME)
        True
        >>> is_compatible("3.8.1", "3.9.5", ToolKind.BUILD_AUTOMATION)
        False
    """
    if detected == required:
        return True
    return kind.strategy.at_least(detected, required)
