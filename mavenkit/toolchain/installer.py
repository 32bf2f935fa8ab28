"""
Tool installation.

Installs a JDK or Maven that detection could not find: look in the local
tool cache, otherwise download, extract, relocate to the tool root and
store in the cache; finally register the tool's ``bin`` directory and home
variables with the environment.

Usage:
    from mavenkit.toolchain.installer import ToolInstaller
    from mavenkit.toolchain.requirements import ToolRequirement

    installer = ToolInstaller()
    outcome = installer.install(ToolRequirement.build_tool("3.9.6"))
    print(outcome.home)
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from mavenkit.core.directory import get_global_cache_dir
from mavenkit.core.download import download_file
from mavenkit.core.environment import EnvironmentRegistrar
from mavenkit.core.exceptions import InstallationFailure
from mavenkit.core.filesystem import extract_archive, safe_rmtree
from mavenkit.core.platform import PlatformInfo, detect_platform
from mavenkit.toolchain.kinds import ToolKind
from mavenkit.toolchain.requirements import (
    ResolutionAction,
    ResolutionOutcome,
    ToolRequirement,
)
from mavenkit.toolchain.tool_cache import LocalToolCache

logger = logging.getLogger(__name__)

MAVEN_ARCHIVE_URL = (
    "https://archive.apache.org/dist/maven/maven-3/{version}/binaries/"
    "apache-maven-{version}-bin.{ext}"
)
ADOPTIUM_API_URL = (
    "https://api.adoptium.net/v3/binary/latest/{version}/ga/{os}/{arch}"
    "/jdk/hotspot/normal/eclipse"
)
CORRETTO_URL = (
    "https://corretto.aws/downloads/latest/"
    "amazon-corretto-{version}-{arch}-{os}-jdk.{ext}"
)
MICROSOFT_URL = "https://aka.ms/download-jdk/microsoft-jdk-{version}-{os}-{arch}.{ext}"

# Vendor naming of operating systems and architectures
_ADOPTIUM_OS = {"linux": "linux", "macos": "mac", "windows": "windows"}
_CORRETTO_OS = {"linux": "linux", "macos": "macos", "windows": "windows"}
_MICROSOFT_OS = {"linux": "linux", "macos": "macOS", "windows": "windows"}
_VENDOR_ARCH = {"x64": "x64", "arm64": "aarch64", "x86": "x86-32", "arm": "arm"}


def _jdk_download_url(distribution: str, version: str, platform: PlatformInfo) -> str:
    arch = _VENDOR_ARCH.get(platform.arch, platform.arch)
    ext = platform.archive_extension

    if distribution in ("temurin", "adopt"):
        return ADOPTIUM_API_URL.format(
            version=version, os=_ADOPTIUM_OS[platform.os], arch=arch
        )
    if distribution == "corretto":
        return CORRETTO_URL.format(
            version=version, os=_CORRETTO_OS[platform.os], arch=arch, ext=ext
        )
    if distribution == "microsoft":
        return MICROSOFT_URL.format(
            version=version, os=_MICROSOFT_OS[platform.os], arch=arch, ext=ext
        )

    raise InstallationFailure(
        "Java", f"download URL not configured for distribution '{distribution}'"
    )


def download_url(requirement: ToolRequirement, platform: PlatformInfo) -> str:
    """
    Download location of a tool archive for the given platform.

    Raises:
        InstallationFailure: If no location is known for the variant

    Example:
        >>> download_url(ToolRequirement.build_tool("3.9.6"), PlatformInfo("linux", "x64"))
        'https://archive.apache.org/dist/maven/maven-3/3.9.6/binaries/apache-maven-3.9.6-bin.tar.gz'
    """
    if requirement.kind is ToolKind.BUILD_AUTOMATION:
        return MAVEN_ARCHIVE_URL.format(
            version=requirement.required_version, ext=platform.archive_extension
        )
    return _jdk_download_url(
        requirement.required_variant, requirement.required_version, platform
    )


def locate_tool_root(
    requirement: ToolRequirement, extract_dir: Path, platform: PlatformInfo
) -> Path:
    """
    Find the tool root inside an extracted archive.

    Maven archives nest ``apache-maven-<version>/``. JDK archives nest a
    single top-level directory, with the actual home under
    ``Contents/Home`` on macOS.
    """
    if requirement.kind is ToolKind.BUILD_AUTOMATION:
        root = extract_dir / f"apache-maven-{requirement.required_version}"
        if not root.is_dir():
            raise FileNotFoundError(f"Archive does not contain {root.name}/")
        return root

    items = list(extract_dir.iterdir())
    root = items[0] if len(items) == 1 and items[0].is_dir() else extract_dir

    if platform.os == "macos" and (root / "Contents" / "Home").is_dir():
        root = root / "Contents" / "Home"

    return root


class ToolInstaller:
    """
    Install tools into the local tool cache and register them.

    Example:
        >>> installer = ToolInstaller()
        >>> outcome = installer.install(ToolRequirement.runtime("17", "temurin"))
        >>> outcome.action
        <ResolutionAction.INSTALLED: 'installed'>
    """

    def __init__(
        self,
        tool_cache: Optional[LocalToolCache] = None,
        registrar: Optional[EnvironmentRegistrar] = None,
        platform: Optional[PlatformInfo] = None,
        downloads_dir: Optional[Path] = None,
        downloader: Callable[..., Path] = download_file,
    ):
        """
        Initialize installer.

        Args:
            tool_cache: Local tool cache (default: ~/.mavenkit/tools)
            registrar: Environment registrar (default: updates os.environ)
            platform: Target platform (default: detected host)
            downloads_dir: Scratch directory for archives (default: ~/.mavenkit/downloads)
            downloader: Callable ``(url, destination) -> Path``
        """
        self.tool_cache = tool_cache or LocalToolCache()
        self.registrar = registrar or EnvironmentRegistrar()
        self.platform = platform or detect_platform()
        self.downloads_dir = (
            Path(downloads_dir)
            if downloads_dir is not None
            else get_global_cache_dir() / "downloads"
        )
        self.downloader = downloader

    def install(self, requirement: ToolRequirement) -> ResolutionOutcome:
        """
        Install the required tool and register it with the environment.

        Returns:
            ResolutionOutcome with action INSTALLED

        Raises:
            InstallationFailure: If any step fails
        """
        strategy = requirement.kind.strategy
        cache_name = strategy.tool_cache_name(requirement.required_variant)
        version = requirement.required_version

        logger.info(f"Installing {requirement}")

        try:
            home = self.tool_cache.find_cached_tool(
                cache_name, version, self.platform.arch
            )
            if home is not None:
                logger.info(f"Using cached {cache_name} {version}: {home}")
            else:
                home = self._download_and_store(requirement, cache_name)

            self.registrar.prepend_path(home / "bin")
            for variable in strategy.home_variables:
                self.registrar.export_variable(variable, str(home))

        except InstallationFailure:
            raise
        except Exception as e:
            logger.error(f"Failed to install {requirement}: {e}")
            raise InstallationFailure(strategy.display_name, str(e)) from e

        logger.info(f"{strategy.display_name} {version} installed at {home}")

        return ResolutionOutcome(
            kind=requirement.kind,
            action=ResolutionAction.INSTALLED,
            version=version,
            home=str(home),
            variant=requirement.required_variant,
        )

    def _download_and_store(
        self, requirement: ToolRequirement, cache_name: str
    ) -> Path:
        version = requirement.required_version
        url = download_url(requirement, self.platform)

        work_dir = self.downloads_dir / f"{cache_name}-{version}-{self.platform.arch}"
        if work_dir.exists():
            safe_rmtree(work_dir, require_prefix=self.downloads_dir)
        work_dir.mkdir(parents=True)

        # Redirecting locators hide the file name, so name the archive ourselves
        extension = self.platform.archive_extension
        archive_path = work_dir / f"{cache_name}-{version}.{extension}"
        extract_dir = work_dir / "extract"

        try:
            logger.info(f"Downloading {cache_name} {version} from {url}")
            self.downloader(url, archive_path)

            logger.info(f"Extracting {archive_path.name}")
            extract_archive(archive_path, extract_dir)

            tool_root = locate_tool_root(requirement, extract_dir, self.platform)
            return self.tool_cache.store_cached_tool(
                tool_root, cache_name, version, self.platform.arch
            )
        finally:
            if work_dir.exists():
                safe_rmtree(work_dir, require_prefix=self.downloads_dir)
