"""Error types surfaced by the synchronization engine.

Conflicts and per-file I/O errors are not raised; they are collected into
extraction and removal results. Everything here is fatal to the current
command and is translated into a message and exit code 1 by the CLI layer.
"""

from pathlib import Path

from samuel.core.models import ComponentKey


class SamuelError(Exception):
    """Base class for errors reported to the user."""


class DownloadError(SamuelError):
    """A version could not be materialized into the cache.

    Carries the version, the remote source, and the underlying cause.
    """

    def __init__(self, *, version: str, source: str, cause: str) -> None:
        super().__init__(f"Failed to download {version} from {source}: {cause}")
        self.version = version
        self.source = source
        self.cause = cause


class NetworkError(DownloadError):
    """Release metadata query or archive fetch failed on the network."""


class VersionNotFoundError(DownloadError):
    """The remote has no archive for the requested tag or branch."""


class ArchiveError(DownloadError):
    """The fetched archive could not be decompressed or unpacked safely."""


class CacheCorruptionError(SamuelError):
    """A cache entry that should be complete is missing or unreadable."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Corrupt cache entry at {path}: {reason}")
        self.path = path
        self.reason = reason


class FileConflictError(SamuelError):
    """Destination differs from the incoming file and force is off.

    Never raised by the extractor; used to describe skipped outcomes.
    """

    def __init__(self, dest_path: str) -> None:
        super().__init__(f"Local modifications in {dest_path} (use --force to overwrite)")
        self.dest_path = dest_path


class ConfigParseError(SamuelError):
    """A persisted configuration file is malformed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid config file {path}: {reason}")
        self.path = path
        self.reason = reason


class ProjectNotInitializedError(SamuelError):
    def __init__(self, project_dir: Path) -> None:
        super().__init__(f"No samuel installation found in {project_dir}. Run 'samuel init' first.")
        self.project_dir = project_dir


class ComponentNotFoundError(SamuelError):
    """The registry has no component with this identity."""

    def __init__(self, component_type: str, name: str) -> None:
        super().__init__(f"Unknown {component_type}: {name}")
        self.component_type = component_type
        self.name = name


class ComponentNotInstalledError(SamuelError):
    """The component is valid but absent from the installed record."""

    def __init__(self, key: ComponentKey) -> None:
        super().__init__(f"{key.type} '{key.name}' is not installed; nothing to remove")
        self.key = key


class NoBackupError(SamuelError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"No backup found for {path}")
        self.path = path


class PathOutsideProjectError(SamuelError):
    def __init__(self, path: str, project_dir: Path) -> None:
        super().__init__(f"{path} is outside the project directory {project_dir}")
        self.path = path
        self.project_dir = project_dir
