"""Remote template source abstraction.

The remote publishes releases (tags) and branches; each ref can be fetched as
a gzip'd tarball. This boundary is the only part of the engine that touches
the network.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Literal

RefKind = Literal["tag", "branch"]


@dataclass(frozen=True)
class Release:
    """Release metadata returned by the remote."""

    tag_name: str
    name: str
    body: str


class RemoteSource(ABC):
    """Abstract interface for the remote template repository."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable identity of the remote, used in error messages."""
        ...

    @property
    @abstractmethod
    def default_branch(self) -> str:
        """Branch used when the remote has no releases."""
        ...

    @abstractmethod
    def get_latest_release(self, *, timeout: float) -> Release | None:
        """Query the most recent release.

        Returns:
            Release, or None if the remote has no releases

        Raises:
            NetworkError: If the metadata query fails
        """
        ...

    @abstractmethod
    def fetch_archive(
        self,
        *,
        ref: str,
        kind: RefKind,
        destination: BinaryIO,
        timeout: float,
    ) -> int:
        """Stream the tar.gz archive for a ref into destination.

        Args:
            ref: Tag or branch name
            kind: Whether ref names a tag or a branch
            destination: Writable binary file object
            timeout: Seconds before a stalled connection is abandoned

        Returns:
            Number of bytes written

        Raises:
            VersionNotFoundError: If the remote has no such ref
            NetworkError: If the transfer fails or times out
        """
        ...
