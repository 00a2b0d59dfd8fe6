"""Backups of local files taken before a forced overwrite.

A backup sits next to the original as `<file>.samuel-backup`. Further backups
of the same file get `.1`, `.2`, ... so an older user version is never
replaced. Restoring takes the newest backup and deletes it.
"""

import logging
import re
from pathlib import Path

from samuel.core.content_hash import same_content
from samuel.core.errors import NoBackupError
from samuel.gateway.filesystem.abc import FileSystem

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".samuel-backup"

_BACKUP_PATTERN = re.compile(re.escape(BACKUP_SUFFIX) + r"(\.\d+)?$")


def is_backup_path(path: str) -> bool:
    return _BACKUP_PATTERN.search(path) is not None


def _backup_candidate(path: Path, index: int) -> Path:
    suffix = BACKUP_SUFFIX if index == 0 else f"{BACKUP_SUFFIX}.{index}"
    return path.with_name(path.name + suffix)


class BackupStore:
    """Creates and restores sibling backups through the filesystem gateway."""

    def __init__(self, fs: FileSystem) -> None:
        self._fs = fs

    def backups_for(self, path: Path) -> list[Path]:
        """Existing backups of a file, oldest first."""
        backups: list[Path] = []
        index = 0
        while True:
            candidate = _backup_candidate(path, index)
            if self._fs.stat(candidate) is None:
                return backups
            backups.append(candidate)
            index += 1

    def create(self, path: Path) -> Path:
        """Capture the bytes and permission bits of a file.

        If the newest backup already holds identical bytes it is reused.

        Returns:
            Path of the backup holding the file's current content
        """
        file_stat = self._fs.stat(path)
        if file_stat is None:
            raise FileNotFoundError(path)
        content = self._fs.read_bytes(path)

        existing = self.backups_for(path)
        if existing and same_content(self._fs.read_bytes(existing[-1]), content):
            logger.debug("Reusing backup %s for %s", existing[-1], path)
            return existing[-1]

        backup = _backup_candidate(path, len(existing))
        self._fs.write_bytes(backup, content, mode=file_stat.mode)
        logger.debug("Backed up %s to %s", path, backup)
        return backup

    def restore(self, path: Path) -> Path:
        """Write the newest backup back over the file and delete the backup.

        Returns:
            Path of the backup that was restored

        Raises:
            NoBackupError: If the file has no backups
        """
        backups = self.backups_for(path)
        if not backups:
            raise NoBackupError(path)
        latest = backups[-1]
        backup_stat = self._fs.stat(latest)
        content = self._fs.read_bytes(latest)
        self._fs.make_dirs(path.parent)
        self._fs.write_bytes(path, content, mode=backup_stat.mode if backup_stat else None)
        self._fs.remove_file(latest)
        logger.debug("Restored %s from %s", path, latest)
        return latest
