# release_deploy/utils/file_utils.py
"""File operation utilities"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

import aiofiles

from ..api.exceptions import DistDirError, FileSyncError
from ..constants import DEFAULT_CHUNK_SIZE, DEFAULT_EXCLUDE_NAMES

logger = logging.getLogger(__name__)


def format_size(size: int) -> str:
    """
    Format file size in human-readable format

    Args:
        size: Size in bytes

    Returns:
        Formatted size string
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"


def is_excluded(relative_path: Path) -> bool:
    """Check if any component of a relative path is an excluded name"""
    return any(part in DEFAULT_EXCLUDE_NAMES for part in relative_path.parts)


def iter_release_entries(source: Path,
                         exclude: bool,
                         skip: Optional[Path] = None) -> Iterator[Tuple[Path, bool]]:
    """
    Walk a source tree

    Symlinks are skipped, so nothing outside the tree is ever copied.

    Args:
        source: Directory to walk
        exclude: Whether to skip DEFAULT_EXCLUDE_NAMES
        skip: Resolved directory never descended into

    Yields:
        (relative path, is_directory) pairs, parents before children
    """
    for dirpath, dirnames, filenames in os.walk(source):
        current = Path(dirpath)

        kept = []
        for name in sorted(dirnames):
            path = current / name
            relative = path.relative_to(source)
            if path.is_symlink() or (exclude and is_excluded(relative)):
                continue
            if skip is not None and path.resolve() == skip:
                continue
            kept.append(name)
            yield relative, True
        dirnames[:] = kept

        for name in sorted(filenames):
            path = current / name
            relative = path.relative_to(source)
            if path.is_symlink() or not path.is_file():
                continue
            if exclude and is_excluded(relative):
                continue
            yield relative, False


async def copy_file(src: Path, dst: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """
    Copy one file in chunks, preserving its metadata

    Returns:
        Bytes copied
    """
    bytes_transferred = 0

    async with aiofiles.open(src, 'rb') as reader:
        async with aiofiles.open(dst, 'wb') as writer:
            while True:
                chunk = await reader.read(chunk_size)
                if not chunk:
                    break

                await writer.write(chunk)
                bytes_transferred += len(chunk)

    shutil.copystat(src, dst)
    return bytes_transferred


async def copy_release_files(source_root: Union[str, Path],
                             dest_root: Union[str, Path],
                             subdir: Optional[str] = None,
                             skip: Optional[Union[str, Path]] = None) -> int:
    """
    Populate a release directory

    With ``subdir`` only that subtree is copied, without exclusions (it is
    expected to be a build output). Without it the whole source tree is
    copied minus DEFAULT_EXCLUDE_NAMES.

    Args:
        source_root: Repository root
        dest_root: Release directory
        subdir: Optional distribution directory relative to source_root
        skip: Directory never copied (defaults to dest_root)

    Returns:
        Number of files copied

    Raises:
        DistDirError: If subdir is missing or not a directory
        FileSyncError: If copying fails
    """
    source_root = Path(source_root)
    dest_root = Path(dest_root)

    if subdir:
        source = source_root / subdir
        if not source.exists():
            raise DistDirError(f"Distribution directory does not exist: {source}")
        if not source.is_dir():
            raise DistDirError(f"Distribution directory is not a directory: {source}")
        exclude = False
        logger.info(f"Copying from dist directory: {source}")
    else:
        source = source_root
        exclude = True
        logger.info(f"Copying from repository root: {source}")

    logger.info(f"Destination: {dest_root}")

    file_count = 0
    total_bytes = 0

    try:
        dest_root.mkdir(parents=True, exist_ok=True)

        for relative, is_dir in iter_release_entries(source, exclude, Path(skip or dest_root).resolve()):
            target = dest_root / relative
            if is_dir:
                target.mkdir(parents=True, exist_ok=True)
                continue

            logger.debug(f"Copying {relative}")
            total_bytes += await copy_file(source / relative, target)
            file_count += 1
    except OSError as e:
        raise FileSyncError(f"Failed to copy release files: {e}")

    logger.info(f"Copied {file_count} files ({format_size(total_bytes)})")
    return file_count
