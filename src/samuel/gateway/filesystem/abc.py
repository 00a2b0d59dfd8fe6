"""Filesystem abstraction.

This module provides a narrow read/write/stat interface so that extraction,
backup and diff logic can run against an in-memory filesystem in tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FileStat:
    """Subset of stat information the engine relies on."""

    is_dir: bool
    mode: int  # permission bits only
    size: int


class FileSystem(ABC):
    """Abstract interface for filesystem operations."""

    @abstractmethod
    def stat(self, path: Path) -> FileStat | None:
        """Stat a path.

        Returns:
            FileStat, or None if nothing exists at path (including when a
            parent component is a regular file)
        """
        ...

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        """Read full file content.

        Raises:
            FileNotFoundError: If the file does not exist
            OSError: On any other read failure
        """
        ...

    @abstractmethod
    def write_bytes(self, path: Path, content: bytes, *, mode: int | None) -> None:
        """Write full file content, replacing any previous content.

        The parent directory must already exist.

        Args:
            path: File to write
            content: Bytes to write
            mode: Permission bits to apply after writing, or None to keep defaults
        """
        ...

    @abstractmethod
    def make_dirs(self, path: Path) -> None:
        """Create a directory and any missing parents."""
        ...

    @abstractmethod
    def remove_file(self, path: Path) -> None:
        """Delete a single file."""
        ...

    @abstractmethod
    def remove_dir_if_empty(self, path: Path) -> bool:
        """Delete a directory only if it has no entries.

        Returns:
            True if the directory was removed
        """
        ...

    @abstractmethod
    def list_files(self, root: Path) -> list[Path]:
        """List all files beneath root, recursively.

        Returns:
            Sorted paths relative to root; empty if root is not a directory
        """
        ...
