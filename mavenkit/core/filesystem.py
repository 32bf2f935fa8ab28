"""
File system utilities for MavenKit.

This module provides the archive and file operations shared by the tool
installer and the local cache backend:
- Archive extraction (tar.gz, tar.xz, zip) with traversal protection
- Archive creation (tar.gz) for cache entries
- Safe file operations (atomic writes, guarded deletion)
- Directory statistics
"""

import shutil
import sys
import tarfile
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Example:
        >>> is_relative_to(Path("/home/user/project/file.txt"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


# Suffixes JDK vendors and the Apache archive publish; None means zip
_ARCHIVE_FORMATS = (
    (".zip", None),
    (".tar.gz", "r:gz"),
    (".tgz", "r:gz"),
    (".tar.xz", "r:xz"),
)


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Extract a tool or cache archive into ``destination`` (created if missing).

    Raises:
        UnsupportedArchiveFormat: If the file name has no known archive suffix
        InsecureArchiveError: If a member would land outside ``destination``
        ArchiveExtractionError: For missing or corrupt archives

    Example:
        >>> extract_archive('apache-maven-3.9.6-bin.tar.gz', '/tmp/maven')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    name = archive_path.name.lower()
    for suffix, tar_mode in _ARCHIVE_FORMATS:
        if name.endswith(suffix):
            break
    else:
        raise UnsupportedArchiveFormat(
            f"Unsupported archive format: {archive_path.name}. "
            "Supported: .zip, .tar.gz, .tgz, .tar.xz"
        )

    destination.mkdir(parents=True, exist_ok=True)
    try:
        if tar_mode is None:
            _extract_zip(archive_path, destination)
        else:
            _extract_tar(archive_path, destination, tar_mode)
    except InsecureArchiveError:
        raise
    except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


def _extract_zip(archive_path: Path, destination: Path) -> None:
    with zipfile.ZipFile(archive_path, "r") as zf:
        for member in zf.namelist():
            _validate_archive_path(member, destination)
        zf.extractall(destination)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Members are checked above; the data filter also drops device files
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


def create_archive(
    archive_path: Union[str, Path], paths: Iterable[Union[str, Path]]
) -> Path:
    """
    Pack directories into a .tar.gz archive.

    Each path is stored under its absolute location (without the leading
    separator or drive) so that extraction into the filesystem root puts it
    back where it came from.

    Args:
        archive_path: Archive file to create
        paths: Directories or files to include

    Returns:
        Path to the created archive
    """
    archive_path = Path(archive_path)
    archive_path.parent.mkdir(parents=True, exist_ok=True)

    with tarfile.open(archive_path, "w:gz") as tar:
        for path in paths:
            path = Path(path).resolve()
            tar.add(str(path), arcname=archive_member_name(path))

    return archive_path


def archive_member_name(path: Path) -> str:
    """Archive name for an absolute path: anchor stripped, POSIX separators."""
    return Path(path).relative_to(Path(path).anchor).as_posix()


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    If the write fails, the original file (if any) remains unchanged.

    Example:
        >>> atomic_write('state.json', '{"cache-key": "abc"}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('/tmp/build', require_prefix='/tmp')
        >>> safe_rmtree('/usr/bin', require_prefix='/home')  # ValueError
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


# ============================================================================
# Directory Statistics
# ============================================================================


@dataclass
class DirectoryStats:
    """Size and file count of a directory tree."""

    size_bytes: int = 0
    file_count: int = 0


def directory_stats(path: Union[str, Path]) -> DirectoryStats:
    """
    Calculate total size and number of files below a directory.

    Example:
        >>> stats = directory_stats(Path.home() / '.m2' / 'repository')
        >>> print(f"{stats.file_count} files, {stats.size_bytes} bytes")
    """
    stats = DirectoryStats()

    for item in Path(path).rglob("*"):
        if item.is_file():
            stats.size_bytes += item.stat().st_size
            stats.file_count += 1

    return stats


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "is_relative_to",
    "extract_archive",
    "create_archive",
    "archive_member_name",
    "atomic_write",
    "safe_rmtree",
    "DirectoryStats",
    "directory_stats",
]
