"""Fake RemoteSource implementation for testing.

Serves archives from memory and records every call, so cache policy can be
asserted by counting fetches.
"""

from collections.abc import Iterable, Mapping
from typing import BinaryIO

from samuel.core.errors import NetworkError, VersionNotFoundError
from samuel.gateway.remote.abc import RefKind, Release, RemoteSource


class FakeRemoteSource(RemoteSource):
    """In-memory remote with constructor-injected releases and archives.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(
        self,
        *,
        latest_release: Release | None = None,
        archives: Mapping[tuple[RefKind, str], bytes] | None = None,
        failing_refs: Iterable[str] = (),
        metadata_error: str | None = None,
        default_branch: str = "main",
    ) -> None:
        """Create FakeRemoteSource.

        Args:
            latest_release: Release returned by get_latest_release (None = no releases)
            archives: tar.gz bytes keyed by (kind, ref)
            failing_refs: Refs whose fetch raises NetworkError after partial output
            metadata_error: If set, get_latest_release raises NetworkError with this cause
            default_branch: Branch name reported by default_branch
        """
        self._latest_release = latest_release
        self._archives = dict(archives or {})
        self._failing_refs = frozenset(failing_refs)
        self._metadata_error = metadata_error
        self._default_branch = default_branch
        self._fetches: list[tuple[RefKind, str]] = []
        self._metadata_queries = 0

    # --- Test assertions ---

    @property
    def fetches(self) -> list[tuple[RefKind, str]]:
        """Every (kind, ref) fetch attempted, in order."""
        return list(self._fetches)

    @property
    def metadata_queries(self) -> int:
        return self._metadata_queries

    # --- RemoteSource ---

    @property
    def description(self) -> str:
        return "fake-remote"

    @property
    def default_branch(self) -> str:
        return self._default_branch

    def get_latest_release(self, *, timeout: float) -> Release | None:
        self._metadata_queries += 1
        if self._metadata_error is not None:
            raise NetworkError(
                version="latest", source=self.description, cause=self._metadata_error
            )
        return self._latest_release

    def fetch_archive(
        self,
        *,
        ref: str,
        kind: RefKind,
        destination: BinaryIO,
        timeout: float,
    ) -> int:
        self._fetches.append((kind, ref))
        if ref in self._failing_refs:
            # Simulate a connection dropped mid-transfer
            destination.write(b"\x1f\x8b partial")
            raise NetworkError(version=ref, source=self.description, cause="connection reset")
        content = self._archives.get((kind, ref))
        if content is None:
            raise VersionNotFoundError(
                version=ref, source=self.description, cause=f"{kind} {ref} not found"
            )
        destination.write(content)
        return len(content)
