"""Fake FileSystem implementation for testing.

FakeFileSystem is an in-memory implementation that enables fast and
deterministic tests of conflict policy without touching the disk.
"""

import errno
from collections.abc import Iterable, Mapping
from pathlib import Path

from samuel.gateway.filesystem.abc import FileStat, FileSystem

DEFAULT_FILE_MODE = 0o644
DEFAULT_DIR_MODE = 0o755


class FakeFileSystem(FileSystem):
    """In-memory fake implementation that tracks mutations.

    This class has NO public setup methods beyond constructor.
    All state is provided via constructor or captured during execution.
    """

    def __init__(
        self,
        *,
        files: Mapping[Path, bytes] | None = None,
        modes: Mapping[Path, int] | None = None,
        dirs: Iterable[Path] = (),
        failing_writes: Iterable[Path] = (),
        failing_removes: Iterable[Path] = (),
        failing_dir_removes: Iterable[Path] = (),
    ) -> None:
        """Create FakeFileSystem with optional initial state.

        Args:
            files: Initial file contents keyed by absolute path
            modes: Permission bits for files (defaults to 0o644)
            dirs: Extra empty directories; parents of files are implied
            failing_writes: Paths whose writes raise PermissionError
            failing_removes: Paths whose removal raises PermissionError
            failing_dir_removes: Directories whose removal raises PermissionError
                once they are empty
        """
        self._files: dict[Path, bytes] = dict(files or {})
        self._modes: dict[Path, int] = dict(modes or {})
        self._dirs: set[Path] = set()
        for path in self._files:
            self._add_dir(path.parent)
        for path in dirs:
            self._add_dir(path)
        self._failing_writes = frozenset(failing_writes)
        self._failing_removes = frozenset(failing_removes)
        self._failing_dir_removes = frozenset(failing_dir_removes)
        self._written: list[Path] = []
        self._removed: list[Path] = []

    # --- Test assertions ---

    @property
    def files(self) -> dict[Path, bytes]:
        """Current file contents. Returns a copy."""
        return dict(self._files)

    @property
    def written_paths(self) -> list[Path]:
        """Every path written, in order, including repeated writes."""
        return list(self._written)

    @property
    def removed_paths(self) -> list[Path]:
        return list(self._removed)

    def mode_of(self, path: Path) -> int:
        return self._modes.get(path, DEFAULT_FILE_MODE)

    # --- FileSystem ---

    def stat(self, path: Path) -> FileStat | None:
        if path in self._files:
            return FileStat(is_dir=False, mode=self.mode_of(path), size=len(self._files[path]))
        if path in self._dirs:
            return FileStat(is_dir=True, mode=DEFAULT_DIR_MODE, size=0)
        return None

    def read_bytes(self, path: Path) -> bytes:
        if path in self._dirs:
            raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
        if path not in self._files:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(path))
        return self._files[path]

    def write_bytes(self, path: Path, content: bytes, *, mode: int | None) -> None:
        if path in self._failing_writes:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        if path.parent not in self._dirs:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(path))
        if path in self._dirs:
            raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
        self._files[path] = content
        if mode is not None:
            self._modes[path] = mode
        self._written.append(path)

    def make_dirs(self, path: Path) -> None:
        if path in self._files:
            raise FileExistsError(errno.EEXIST, "File exists", str(path))
        self._add_dir(path)

    def remove_file(self, path: Path) -> None:
        if path in self._failing_removes:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        if path not in self._files:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(path))
        del self._files[path]
        self._modes.pop(path, None)
        self._removed.append(path)

    def remove_dir_if_empty(self, path: Path) -> bool:
        if path not in self._dirs:
            return False
        has_entries = any(p.parent == path for p in self._files) or any(
            d.parent == path and d != path for d in self._dirs
        )
        if has_entries:
            return False
        if path in self._failing_dir_removes:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        self._dirs.discard(path)
        return True

    def list_files(self, root: Path) -> list[Path]:
        if root not in self._dirs:
            return []
        return sorted(p.relative_to(root) for p in self._files if root in p.parents)

    def _add_dir(self, path: Path) -> None:
        self._dirs.add(path)
        self._dirs.update(path.parents)
