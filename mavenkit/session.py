"""
Build session orchestration.

A build session strings the pipeline together: resolve the toolchain,
restore the dependency cache, run the build, save the dependency cache.

Configuration, installation and verification errors end the session with a
failure result. Cache problems never do; they only cost a cold build.

Usage:
    from mavenkit.config import load_config
    from mavenkit.session import BuildSession

    session = BuildSession(load_config(), project_root=Path.cwd())
    result = session.run(lambda: runner.run_streaming(["mvn", "-B", "verify"]))
    print(result.status, result.build_time)
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from mavenkit.caching.backend import LocalCacheBackend
from mavenkit.caching.keys import CacheContext, CacheKey, CacheKeyDeriver
from mavenkit.caching.store import CacheKeyStore, RestoreResult
from mavenkit.config.parser import MavenKitConfig, resolve_path
from mavenkit.core.exceptions import MavenKitError
from mavenkit.core.platform import PlatformInfo, detect_platform
from mavenkit.core.state import RunStateStore
from mavenkit.toolchain.installer import ToolInstaller
from mavenkit.toolchain.resolver import EnvironmentSetup, ToolchainResolver
from mavenkit.toolchain.tool_cache import LocalToolCache

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"


@dataclass
class BuildResult:
    """
    Result of a build session.

    Attributes:
        status: 'success' or 'failure'
        build_time: Wall-clock duration in seconds
        environment: Environment summary ('java'/'maven' entries), if resolved
        cache_restored: Restore outcome, if a restore was attempted
        cache_saved: Whether a new cache entry was saved
        error: Failure message
    """

    status: str
    build_time: int
    environment: Optional[Dict[str, Any]] = None
    cache_restored: Optional[RestoreResult] = None
    cache_saved: bool = False
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_SUCCESS


def create_cache_store(
    config: MavenKitConfig, base: Path, state_store: Optional[RunStateStore] = None
) -> CacheKeyStore:
    """CacheKeyStore for the configured backend directory and repository."""
    cache = config.cache
    backend = LocalCacheBackend(
        resolve_path(cache.directory, base) if cache.directory else None
    )
    return CacheKeyStore(
        backend=backend,
        state_store=state_store,
        repository=resolve_path(cache.repository, base) if cache.repository else None,
        enabled=cache.enabled,
    )


def create_resolver(config: MavenKitConfig, base: Path) -> ToolchainResolver:
    """ToolchainResolver installing into the configured tool cache."""
    tool_cache = (
        LocalToolCache(resolve_path(config.tool_cache, base))
        if config.tool_cache
        else None
    )
    return ToolchainResolver(installer=ToolInstaller(tool_cache=tool_cache))


class BuildSession:
    """
    One build invocation: toolchain, cache restore, build, cache save.

    Example:
        >>> session = BuildSession(config, project_root=Path("my-project"))
        >>> session.prepare()
        >>> # ... run the build ...
        >>> session.finalize()
        True
    """

    def __init__(
        self,
        config: MavenKitConfig,
        project_root: Optional[Path] = None,
        resolver: Optional[ToolchainResolver] = None,
        deriver: Optional[CacheKeyDeriver] = None,
        cache_store: Optional[CacheKeyStore] = None,
        state_store: Optional[RunStateStore] = None,
        platform: Optional[PlatformInfo] = None,
    ):
        self.config = config
        self.project_root = Path(project_root or Path.cwd())
        self.working_directory = config.project_dir(self.project_root)
        self.resolver = resolver or create_resolver(config, self.project_root)
        self.deriver = deriver or CacheKeyDeriver()
        self.cache_store = cache_store or create_cache_store(
            config, self.project_root, state_store
        )
        self.platform = platform or detect_platform()

        self.environment: Optional[EnvironmentSetup] = None
        self.restore_result: Optional[RestoreResult] = None

    @property
    def cache_context(self) -> CacheContext:
        return CacheContext(
            os=self.platform.os,
            runtime_requirement=self.config.java.version,
            build_tool_requirement=self.config.maven.version,
        )

    def derive_key(self) -> CacheKey:
        """Cache key for the current manifest contents."""
        return self.deriver.derive_for_directory(
            self.working_directory, self.cache_context
        )

    def setup_environment(self) -> EnvironmentSetup:
        logger.info("Setting up Maven environment...")
        self.environment = self.resolver.setup_environment(
            self.config.runtime_requirement(),
            self.config.build_tool_requirement(),
        )
        logger.info("Environment setup completed")
        return self.environment

    def restore_cache(self) -> RestoreResult:
        key = self.derive_key()
        chain = self.deriver.derive_restore_chain(self.cache_context)
        self.restore_result = self.cache_store.restore(key, chain)
        return self.restore_result

    def prepare(self) -> EnvironmentSetup:
        """
        Resolve the toolchain and restore the dependency cache.

        Raises:
            ConfigurationError: If a requirement is not supported
            InstallationFailure: If a tool could not be installed
            VerificationFailure: If a tool is unusable after setup
        """
        if not self.working_directory.is_dir():
            raise MavenKitError(
                f"Working directory does not exist: {self.working_directory}"
            )

        environment = self.setup_environment()
        self.restore_cache()
        return environment

    def finalize(self) -> bool:
        """
        Save the dependency cache for the current manifests.

        The key is derived again so that manifests changed by the build
        are honoured.
        """
        return self.cache_store.save(self.derive_key())

    def run(self, build_step: Callable[[], int]) -> BuildResult:
        """
        Run a complete session around ``build_step``.

        Args:
            build_step: Callable running the build, returning its exit code

        Returns:
            BuildResult; failures are reported in the result, not raised
        """
        start = time.time()

        try:
            self.prepare()

            exit_code = build_step()
            if exit_code != 0:
                raise MavenKitError(f"Build command failed with exit code {exit_code}")

            cache_saved = self.finalize()

        except MavenKitError as e:
            logger.error(f"Build failed: {e}")
            return BuildResult(
                status=STATUS_FAILURE,
                build_time=round(time.time() - start),
                environment=self._summary(),
                cache_restored=self.restore_result,
                error=str(e),
            )

        return BuildResult(
            status=STATUS_SUCCESS,
            build_time=round(time.time() - start),
            environment=self._summary(),
            cache_restored=self.restore_result,
            cache_saved=cache_saved,
        )

    def _summary(self) -> Optional[Dict[str, Any]]:
        if self.environment is None:
            return None
        return self.resolver.summarize(self.environment)
