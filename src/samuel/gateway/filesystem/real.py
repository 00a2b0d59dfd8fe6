"""Production FileSystem backed by the local disk."""

import os
import stat
from pathlib import Path

from samuel.gateway.filesystem.abc import FileStat, FileSystem


class RealFileSystem(FileSystem):
    def stat(self, path: Path) -> FileStat | None:
        try:
            st = path.stat()
        except (FileNotFoundError, NotADirectoryError):
            return None
        return FileStat(
            is_dir=stat.S_ISDIR(st.st_mode),
            mode=stat.S_IMODE(st.st_mode),
            size=st.st_size,
        )

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def write_bytes(self, path: Path, content: bytes, *, mode: int | None) -> None:
        path.write_bytes(content)
        if mode is not None:
            os.chmod(path, mode)

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def remove_file(self, path: Path) -> None:
        path.unlink()

    def remove_dir_if_empty(self, path: Path) -> bool:
        if not path.is_dir() or any(path.iterdir()):
            return False
        path.rmdir()
        return True

    def list_files(self, root: Path) -> list[Path]:
        if not root.is_dir():
            return []
        return sorted(p.relative_to(root) for p in root.rglob("*") if p.is_file())
