"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from samuel.core.catalog import build_default_registry
from samuel.core.downloader import Downloader
from samuel.core.extractor import Extractor
from samuel.core.global_config import DEFAULT_FETCH_TIMEOUT, load_global_config
from samuel.core.registry import Registry
from samuel.core.tracker import InstalledStateTracker
from samuel.gateway.filesystem.abc import FileSystem
from samuel.gateway.filesystem.real import RealFileSystem
from samuel.gateway.remote.abc import RemoteSource
from samuel.gateway.remote.real import GitHubRemoteSource


@dataclass(frozen=True)
class SamuelContext:
    """Immutable context holding all dependencies for samuel operations.

    Created at CLI entry point and threaded through the application. The
    engine components are built from it on demand, so nothing reads a
    package-level cache root or config path.
    """

    fs: FileSystem
    remote: RemoteSource
    registry: Registry
    project_dir: Path
    cache_root: Path
    fetch_timeout: float

    def downloader(self) -> Downloader:
        return Downloader(
            remote=self.remote, cache_root=self.cache_root, timeout=self.fetch_timeout
        )

    def extractor(self) -> Extractor:
        return Extractor(fs=self.fs, project_dir=self.project_dir)

    def tracker(self) -> InstalledStateTracker:
        return InstalledStateTracker(
            fs=self.fs,
            project_dir=self.project_dir,
            registry=self.registry,
            extractor=self.extractor(),
            downloader=self.downloader(),
        )

    @staticmethod
    def for_test(
        *,
        project_dir: Path,
        cache_root: Path,
        remote: RemoteSource | None = None,
        fs: FileSystem | None = None,
        registry: Registry | None = None,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
    ) -> "SamuelContext":
        """Create test context with fakes for anything not given.

        Args:
            project_dir: Project directory commands operate on
            cache_root: Cache root for the downloader (real disk)
            remote: RemoteSource. If None, uses an empty FakeRemoteSource.
            fs: FileSystem. If None, uses RealFileSystem, since cache entries
                live on disk.
            registry: Registry. If None, uses the built-in catalog.
            fetch_timeout: Fetch timeout in seconds

        Example:
            >>> remote = FakeRemoteSource(archives={("tag", "v1.0.0"): archive})
            >>> ctx = SamuelContext.for_test(
            ...     project_dir=tmp_path / "project", cache_root=tmp_path / "cache", remote=remote
            ... )
        """
        from samuel.gateway.remote.fake import FakeRemoteSource

        return SamuelContext(
            fs=fs if fs is not None else RealFileSystem(),
            remote=remote if remote is not None else FakeRemoteSource(),
            registry=registry if registry is not None else build_default_registry(),
            project_dir=project_dir,
            cache_root=cache_root,
            fetch_timeout=fetch_timeout,
        )


def create_context() -> SamuelContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Raises:
        ConfigParseError: If the user config file is malformed
    """
    global_config = load_global_config()
    remote = GitHubRemoteSource(
        owner=global_config.owner,
        repo=global_config.repo,
        default_branch=global_config.default_branch,
    )
    return SamuelContext(
        fs=RealFileSystem(),
        remote=remote,
        registry=build_default_registry(),
        project_dir=Path.cwd(),
        cache_root=global_config.cache_path,
        fetch_timeout=global_config.fetch_timeout,
    )
