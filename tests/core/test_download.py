"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import hashlib
import pytest
import responses
from pathlib import Path
from unittest.mock import patch

from mavenkit.core.download import ChecksumError, DownloadError, download_file

URL = "https://archive.apache.org/dist/maven/maven-3/3.9.6/binaries/apache-maven-3.9.6-bin.tar.gz"


class TestDownloadFile:
    """Tests for download_file."""

    @responses.activate
    def test_download_success(self, tmp_path: Path):
        responses.add(responses.GET, URL, body=b"archive-bytes", status=200)

        result = download_file(URL, tmp_path / "maven.tar.gz")

        assert result.read_bytes() == b"archive-bytes"

    @responses.activate
    def test_checksum_verified(self, tmp_path: Path):
        content = b"archive-bytes"
        responses.add(responses.GET, URL, body=content, status=200)

        download_file(
            URL,
            tmp_path / "maven.tar.gz",
            expected_sha256=hashlib.sha256(content).hexdigest().upper(),
        )

    @responses.activate
    def test_checksum_mismatch(self, tmp_path: Path):
        responses.add(responses.GET, URL, body=b"archive-bytes", status=200)
        destination = tmp_path / "maven.tar.gz"

        with pytest.raises(ChecksumError, match="Checksum mismatch"):
            download_file(URL, destination, expected_sha256="0" * 64)

        assert not destination.exists()

    @responses.activate
    @patch("mavenkit.core.download.time.sleep")
    def test_retries_then_succeeds(self, mock_sleep, tmp_path: Path):
        responses.add(responses.GET, URL, status=503)
        responses.add(responses.GET, URL, body=b"ok", status=200)

        result = download_file(URL, tmp_path / "maven.tar.gz")

        assert result.read_bytes() == b"ok"
        mock_sleep.assert_called_once_with(1)

    @responses.activate
    @patch("mavenkit.core.download.time.sleep")
    def test_gives_up_after_retries(self, mock_sleep, tmp_path: Path):
        responses.add(responses.GET, URL, status=404)

        with pytest.raises(DownloadError, match="after 3 attempts"):
            download_file(URL, tmp_path / "maven.tar.gz")

        assert mock_sleep.call_count == 2

    def test_empty_url(self, tmp_path: Path):
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "x")


@pytest.mark.integration
def test_real_maven_download(tmp_path: Path):
    """Download a real Maven distribution (network)."""
    result = download_file(URL, tmp_path / "maven.tar.gz")
    assert result.stat().st_size > 1_000_000
