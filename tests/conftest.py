"""
Pytest configuration and shared fixtures for MavenKit tests.
"""

import pytest
from pathlib import Path
from unittest.mock import Mock

from mavenkit.core.platform import PlatformInfo
from mavenkit.core.process import ProcessResult

JAVA_17_TEMURIN_OUTPUT = (
    'openjdk version "17.0.9" 2023-10-17\n'
    "OpenJDK Runtime Environment Temurin-17.0.9+9 (build 17.0.9+9)\n"
    "OpenJDK 64-Bit Server VM Temurin-17.0.9+9 (build 17.0.9+9, mixed mode)\n"
)

MAVEN_396_OUTPUT = (
    "Apache Maven 3.9.6 (bc0240f3c744dd6b6ec2920b3cd08dcc295161ae)\n"
    "Maven home: /opt/maven\n"
    "Java version: 17.0.9, vendor: Eclipse Adoptium\n"
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def linux_x64() -> PlatformInfo:
    """Linux x64 platform."""
    return PlatformInfo(os="linux", arch="x64")


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def maven_project(tmp_path: Path) -> Path:
    """Multi-module Maven project."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "pom.xml").write_bytes(b"<project>root</project>")

    for module in ("core", "web"):
        (root / module).mkdir()
        (root / module / "pom.xml").write_bytes(
            f"<project>{module}</project>".encode("utf-8")
        )

    return root


@pytest.fixture
def fake_runner():
    """
    Process runner answering version queries from a table.

    Set ``fake_runner.responses[executable] = ProcessResult(...)``; unknown
    executables exit with 127.
    """
    runner = Mock()
    runner.responses = {}

    def invoke(executable, args, cwd=None):
        return runner.responses.get(executable, ProcessResult(127, "", ""))

    runner.invoke.side_effect = invoke
    return runner


@pytest.fixture
def java_output() -> str:
    """``java -version`` output of Temurin 17 (printed to stderr)."""
    return JAVA_17_TEMURIN_OUTPUT


@pytest.fixture
def maven_output() -> str:
    """``mvn -version`` output of Maven 3.9.6."""
    return MAVEN_396_OUTPUT
