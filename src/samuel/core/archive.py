"""Safe unpacking of repository tarballs.

GitHub archives wrap the tree in a single `<repo>-<ref>/` directory, which is
stripped. Member paths are validated so a hostile archive cannot write or link
outside the destination.
"""

import logging
import os
import posixpath
import tarfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO

logger = logging.getLogger(__name__)

# Per-file ceiling to guard against decompression bombs (100 MiB)
MAX_EXTRACTED_FILE_SIZE = 100 * 1024 * 1024

_CHUNK_SIZE = 64 * 1024


class InvalidArchiveError(Exception):
    """The archive structure is unexpected or unsafe."""


def _member_parts(name: str) -> tuple[str, ...]:
    path = PurePosixPath(name)
    if path.is_absolute() or ".." in path.parts:
        msg = f"invalid file path: {name}"
        raise InvalidArchiveError(msg)
    return tuple(part for part in path.parts if part != ".")


def _validate_symlink(relative: tuple[str, ...], link_target: str) -> None:
    if posixpath.isabs(link_target):
        msg = f"invalid symlink target: absolute path {link_target!r}"
        raise InvalidArchiveError(msg)
    parent = posixpath.join(*relative[:-1]) if len(relative) > 1 else ""
    resolved = posixpath.normpath(posixpath.join(parent, link_target))
    if resolved == ".." or resolved.startswith("../"):
        msg = f"invalid symlink target: {link_target!r} escapes destination directory"
        raise InvalidArchiveError(msg)


def _write_member(
    archive: tarfile.TarFile,
    member: tarfile.TarInfo,
    target: Path,
    max_file_size: int,
) -> None:
    source = archive.extractfile(member)
    if source is None:
        msg = f"unreadable archive member: {member.name}"
        raise InvalidArchiveError(msg)
    target.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with source, open(target, "wb") as out:
        while True:
            chunk = source.read(_CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_file_size:
                msg = f"file {member.name!r} exceeds maximum size limit ({max_file_size} bytes)"
                raise InvalidArchiveError(msg)
            out.write(chunk)
    os.chmod(target, (member.mode & 0o777) or 0o644)


def unpack_archive(
    archive_file: BinaryIO,
    destination: Path,
    *,
    max_file_size: int = MAX_EXTRACTED_FILE_SIZE,
) -> int:
    """Unpack a tar.gz stream into destination, stripping the top-level directory.

    Args:
        archive_file: Readable binary stream positioned at the archive start
        destination: Existing empty directory to unpack into
        max_file_size: Largest allowed size for a single file

    Returns:
        Number of regular files written

    Raises:
        InvalidArchiveError: If the archive is unsafe or not a single-rooted tree
        tarfile.TarError: If the stream is not a valid tarball
        OSError: On decompression or disk errors
    """
    with tarfile.open(fileobj=archive_file, mode="r:gz") as archive:
        members = archive.getmembers()
        roots = {_member_parts(m.name)[0] for m in members if _member_parts(m.name)}
        if len(roots) != 1:
            msg = (
                "unexpected archive structure: expected one top-level directory, "
                f"found {len(roots)}"
            )
            raise InvalidArchiveError(msg)

        file_count = 0
        for member in members:
            relative = _member_parts(member.name)[1:]
            if not relative:
                continue
            target = destination.joinpath(*relative)
            if member.isdir():
                target.mkdir(parents=True, exist_ok=True)
            elif member.isfile():
                _write_member(archive, member, target, max_file_size)
                file_count += 1
            elif member.issym():
                _validate_symlink(relative, member.linkname)
                target.parent.mkdir(parents=True, exist_ok=True)
                try:
                    os.symlink(member.linkname, target)
                except OSError as e:
                    # Platforms without symlink support still get the rest of the tree
                    logger.warning("Skipping symlink %s: %s", member.name, e)
            else:
                logger.debug("Skipping unsupported archive member %s", member.name)
        return file_count
