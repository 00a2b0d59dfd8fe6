"""Version-aware downloader with an immutable, atomically committed cache.

Cache layout under the cache root:

    tags/<tag>/            retained indefinitely, never re-fetched once complete
    branches/<branch>/     replaced on every access (branch content is mutable)

Each entry is unpacked into a staging directory next to the final location and
only becomes visible when the staging directory is renamed into place. An
entry is complete when its marker file is present and readable, so readers
never observe a partially written tree.
"""

import logging
import os
import shutil
import tarfile
import tempfile
import uuid
import zlib
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import BinaryIO, Literal

import tomli
import tomli_w
from packaging.version import InvalidVersion, Version

from samuel.core.archive import InvalidArchiveError, unpack_archive
from samuel.core.errors import ArchiveError, CacheCorruptionError, DownloadError
from samuel.core.models import TEMPLATE_PREFIX
from samuel.gateway.remote.abc import RemoteSource

logger = logging.getLogger(__name__)

CacheKind = Literal["tag", "branch"]

LATEST = "latest"
# Alias for the remote's default branch
DEV = "dev"

CACHE_MARKER = ".samuel-cache.toml"
_STAGING_PREFIX = ".staging-"
_RETIRED_PREFIX = ".retired-"


@dataclass(frozen=True)
class ResolvedVersion:
    label: str
    kind: CacheKind


@dataclass(frozen=True)
class CacheEntry:
    """A locally materialized, version-labeled snapshot of the remote tree."""

    version_label: str
    kind: CacheKind
    root_path: Path
    complete: bool

    @property
    def template_root(self) -> Path:
        """Directory holding component sources within the snapshot."""
        return self.root_path / TEMPLATE_PREFIX


@dataclass(frozen=True)
class UpdateInfo:
    current: str
    latest: str | None
    update_available: bool


def is_version_tag(specifier: str) -> bool:
    """Check whether a specifier looks like a release version (e.g. v1.6.0)."""
    try:
        Version(specifier.removeprefix("v"))
    except InvalidVersion:
        return False
    return True


def normalize_tag(specifier: str) -> str:
    return specifier if specifier.startswith("v") else f"v{specifier}"


def _is_newer(latest: str, current: str) -> bool:
    try:
        return Version(latest.removeprefix("v")) > Version(current.removeprefix("v"))
    except InvalidVersion:
        return latest != current


class Downloader:
    """Resolves versions and materializes cache entries.

    Performs exactly one fetch attempt per call; callers decide retry policy.
    """

    def __init__(self, *, remote: RemoteSource, cache_root: Path, timeout: float) -> None:
        self._remote = remote
        self._cache_root = cache_root
        self._timeout = timeout

    @property
    def cache_root(self) -> Path:
        return self._cache_root

    def resolve_version(self, specifier: str) -> ResolvedVersion:
        """Turn a version specifier into a concrete label and kind.

        "latest" queries the remote; with no releases it falls back to the
        default branch. Version-like specifiers are tags, anything else is
        treated as a branch name.
        """
        if specifier == LATEST:
            release = self._remote.get_latest_release(timeout=self._timeout)
            if release is not None:
                logger.debug(
                    "Latest release of %s is %s", self._remote.description, release.tag_name
                )
                return ResolvedVersion(label=release.tag_name, kind="tag")
            branch = self._remote.default_branch
            logger.debug("No releases for %s; using branch %s", self._remote.description, branch)
            return ResolvedVersion(label=branch, kind="branch")
        if specifier == DEV:
            return ResolvedVersion(label=self._remote.default_branch, kind="branch")
        if is_version_tag(specifier):
            return ResolvedVersion(label=normalize_tag(specifier), kind="tag")
        return ResolvedVersion(label=specifier, kind="branch")

    def entry_path(self, resolved: ResolvedVersion) -> Path:
        if resolved.kind == "tag":
            return self._cache_root / "tags" / resolved.label
        return self._cache_root / "branches" / resolved.label.replace("/", "--")

    def ensure(self, specifier: str) -> CacheEntry:
        """Return a complete cache entry for a version, fetching if needed.

        Raises:
            DownloadError: If the version cannot be fetched and unpacked
        """
        resolved = self.resolve_version(specifier)
        if resolved.kind == "tag":
            cached = self.lookup(resolved)
            if cached is not None:
                logger.debug("Cache hit for tag %s", resolved.label)
                return cached
        else:
            logger.debug("Branch %s is mutable; re-fetching", resolved.label)
        return self.fetch(resolved)

    def lookup(self, resolved: ResolvedVersion) -> CacheEntry | None:
        """Find a complete entry for a resolved version.

        Corrupt entries are logged and reported as a miss.
        """
        path = self.entry_path(resolved)
        if not path.exists():
            return None
        try:
            return self._read_entry(path, resolved)
        except CacheCorruptionError as e:
            logger.warning("%s; re-fetching", e)
            return None

    def fetch(self, resolved: ResolvedVersion) -> CacheEntry:
        """Fetch and commit a fresh entry, replacing any prior one on success.

        On failure the staging directory is discarded and the prior entry for
        the label, if any, is left untouched.
        """
        final_path = self.entry_path(resolved)
        self._cache_root.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=_STAGING_PREFIX, dir=self._cache_root))
        committed = False
        try:
            with tempfile.TemporaryFile(dir=self._cache_root) as archive:
                size = self._remote.fetch_archive(
                    ref=resolved.label,
                    kind=resolved.kind,
                    destination=archive,
                    timeout=self._timeout,
                )
                logger.debug("Fetched %d bytes for %s %s", size, resolved.kind, resolved.label)
                archive.seek(0)
                file_count = self._unpack(archive, staging, resolved)
            self._write_marker(staging, resolved)
            self._commit(staging, final_path)
            committed = True
        except OSError as e:
            raise DownloadError(
                version=resolved.label, source=self._remote.description, cause=str(e)
            ) from e
        finally:
            if not committed:
                shutil.rmtree(staging, ignore_errors=True)

        logger.debug(
            "Cached %s %s (%d files) at %s", resolved.kind, resolved.label, file_count, final_path
        )
        return CacheEntry(
            version_label=resolved.label,
            kind=resolved.kind,
            root_path=final_path,
            complete=True,
        )

    def list_entries(self) -> list[CacheEntry]:
        """List complete entries, tags first."""
        entries: list[CacheEntry] = []
        for subdir in ("tags", "branches"):
            parent = self._cache_root / subdir
            if not parent.is_dir():
                continue
            for path in sorted(parent.iterdir()):
                if not path.is_dir() or path.name.startswith("."):
                    continue
                try:
                    entries.append(self._read_entry(path, None))
                except CacheCorruptionError as e:
                    logger.warning("%s", e)
        return entries

    def clear_cache(self) -> int:
        """Remove every cache entry.

        Returns:
            Number of top-level cache items removed
        """
        if not self._cache_root.exists():
            return 0
        removed = 0
        for path in self._cache_root.iterdir():
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
            removed += 1
        return removed

    def cache_size(self) -> int:
        """Total size in bytes of all files in the cache."""
        if not self._cache_root.exists():
            return 0
        return sum(p.stat().st_size for p in self._cache_root.rglob("*") if p.is_file())

    def check_for_update(self, current_version: str) -> UpdateInfo:
        """Compare an installed version with the latest release."""
        release = self._remote.get_latest_release(timeout=self._timeout)
        if release is None:
            return UpdateInfo(current=current_version, latest=None, update_available=False)
        return UpdateInfo(
            current=current_version,
            latest=release.tag_name,
            update_available=_is_newer(release.tag_name, current_version),
        )

    def _unpack(self, archive: BinaryIO, staging: Path, resolved: ResolvedVersion) -> int:
        try:
            return unpack_archive(archive, staging)
        except (tarfile.TarError, InvalidArchiveError, EOFError, zlib.error) as e:
            raise ArchiveError(
                version=resolved.label, source=self._remote.description, cause=str(e)
            ) from e

    def _write_marker(self, staging: Path, resolved: ResolvedVersion) -> None:
        data = {
            "version_label": resolved.label,
            "kind": resolved.kind,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        with open(staging / CACHE_MARKER, "wb") as f:
            tomli_w.dump(data, f)

    def _read_entry(self, path: Path, resolved: ResolvedVersion | None) -> CacheEntry:
        marker = path / CACHE_MARKER
        if not marker.is_file():
            raise CacheCorruptionError(path, "missing completion marker")
        try:
            with open(marker, "rb") as f:
                data = tomli.load(f)
        except (OSError, UnicodeDecodeError, tomli.TOMLDecodeError) as e:
            raise CacheCorruptionError(path, f"unreadable completion marker: {e}") from e

        label = data.get("version_label")
        kind = data.get("kind")
        if not isinstance(label, str) or kind not in ("tag", "branch"):
            raise CacheCorruptionError(path, "completion marker is missing fields")
        if resolved is not None and (label != resolved.label or kind != resolved.kind):
            raise CacheCorruptionError(path, f"marker describes {kind} {label}")
        return CacheEntry(version_label=label, kind=kind, root_path=path, complete=True)

    def _commit(self, staging: Path, final_path: Path) -> None:
        final_path.parent.mkdir(parents=True, exist_ok=True)
        if not final_path.exists():
            os.rename(staging, final_path)
            return

        # Move the prior entry aside first so a failed rename can put it back
        retired = final_path.with_name(f"{_RETIRED_PREFIX}{final_path.name}-{uuid.uuid4().hex[:8]}")
        os.rename(final_path, retired)
        try:
            os.rename(staging, final_path)
        except OSError:
            os.rename(retired, final_path)
            raise
        shutil.rmtree(retired, ignore_errors=True)
