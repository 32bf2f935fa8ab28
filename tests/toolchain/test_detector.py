"""
Unit tests for tool detection.
"""

from pathlib import Path
from unittest.mock import Mock, patch

from mavenkit.core.process import ProcessResult
from mavenkit.toolchain.detector import ToolDetector
from mavenkit.toolchain.kinds import ToolKind


class TestDetectRuntime:
    """Tests for Java detection."""

    def test_detects_java_with_java_home(self, fake_runner, java_output):
        fake_runner.responses["java"] = ProcessResult(0, "", java_output)
        detector = ToolDetector(fake_runner, environ={"JAVA_HOME": "/opt/jdk-17"})

        detected = detector.detect(ToolKind.RUNTIME)

        assert detected.present is True
        assert detected.version == "17"
        assert detected.full_version == "17.0.9"
        assert detected.variant == "temurin"
        assert detected.home == "/opt/jdk-17"
        fake_runner.invoke.assert_called_once_with("java", ["-version"])

    def test_home_from_settings_query(self, java_output):
        runner = Mock()
        runner.invoke.side_effect = [
            ProcessResult(0, "", java_output),
            ProcessResult(0, "", "    java.home = /usr/lib/jvm/temurin-17\n"),
        ]
        detector = ToolDetector(runner, environ={})

        detected = detector.detect(ToolKind.RUNTIME)

        assert detected.home == "/usr/lib/jvm/temurin-17"
        runner.invoke.assert_called_with(
            "java", ["-XshowSettings:properties", "-version"]
        )

    def test_absent_when_not_on_path(self, fake_runner):
        detected = ToolDetector(fake_runner, environ={}).detect(ToolKind.RUNTIME)

        assert detected.present is False

    def test_absent_on_nonzero_exit(self, fake_runner, java_output):
        fake_runner.responses["java"] = ProcessResult(1, "", java_output)

        detected = ToolDetector(fake_runner, environ={}).detect(ToolKind.RUNTIME)

        assert detected.present is False

    def test_absent_on_unparsable_output(self, fake_runner):
        fake_runner.responses["java"] = ProcessResult(0, "garbage", "")

        detected = ToolDetector(fake_runner, environ={}).detect(ToolKind.RUNTIME)

        assert detected.present is False


class TestDetectBuildTool:
    """Tests for Maven detection."""

    def test_detects_maven(self, fake_runner, maven_output):
        fake_runner.responses["mvn"] = ProcessResult(0, maven_output, "")

        detected = ToolDetector(fake_runner, environ={}).detect(
            ToolKind.BUILD_AUTOMATION
        )

        assert detected.present is True
        assert detected.version == "3.9.6"
        assert detected.variant is None
        assert detected.home == "/opt/maven"
        fake_runner.invoke.assert_called_once_with("mvn", ["-version"])

    def test_absent_maven(self, fake_runner):
        detected = ToolDetector(fake_runner, environ={}).detect(
            ToolKind.BUILD_AUTOMATION
        )

        assert detected.present is False

    def test_home_from_executable_on_path(self, fake_runner, tmp_path: Path):
        """Without a 'Maven home:' line the home is derived from PATH."""
        mvn = tmp_path / "apache-maven-3.9.6" / "bin" / "mvn"
        mvn.parent.mkdir(parents=True)
        mvn.write_text("#!/bin/sh\n")
        fake_runner.responses["mvn"] = ProcessResult(0, "Apache Maven 3.9.6\n", "")

        with patch("mavenkit.toolchain.detector.shutil.which", return_value=str(mvn)):
            detected = ToolDetector(fake_runner, environ={}).detect(
                ToolKind.BUILD_AUTOMATION
            )

        assert detected.present is True
        assert detected.home == str((tmp_path / "apache-maven-3.9.6").resolve())

    def test_absent_without_any_home(self, fake_runner):
        fake_runner.responses["mvn"] = ProcessResult(0, "Apache Maven 3.9.6\n", "")

        with patch("mavenkit.toolchain.detector.shutil.which", return_value=None):
            detected = ToolDetector(fake_runner, environ={}).detect(
                ToolKind.BUILD_AUTOMATION
            )

        assert detected.present is False


class TestJavaHomeFallback:
    """Java home when neither JAVA_HOME nor the settings query give one."""

    def test_home_from_java_on_path(self, java_output, tmp_path: Path):
        java = tmp_path / "jdk-17" / "bin" / "java"
        java.parent.mkdir(parents=True)
        java.write_text("")
        runner = Mock()
        runner.invoke.side_effect = [
            ProcessResult(0, "", java_output),
            ProcessResult(1, "", ""),
        ]

        with patch(
            "mavenkit.toolchain.detector.shutil.which", return_value=str(java)
        ) as which:
            detected = ToolDetector(runner, environ={"PATH": "/custom/bin"}).detect(
                ToolKind.RUNTIME
            )

        assert detected.home == str((tmp_path / "jdk-17").resolve())
        which.assert_called_once_with("java", path="/custom/bin")
