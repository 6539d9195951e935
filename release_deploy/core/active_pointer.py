"""Active release pointer (the ``current`` link)

The pointer is a symbolic link (a junction on Windows) naming exactly one
release directory. If the pointer path exists it must be a link: a real file
or directory there is an unsafe state that is reported, never repaired.

Links are only ever removed with ``os.unlink``. Recursive removal would
follow the link into the previous live release and delete it.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..api.exceptions import UnsafePointerStateError, PointerUpdateError
from ..constants import TEMP_LINK_SUFFIX, MSG_LINK_UPDATED

logger = logging.getLogger(__name__)

WINDOWS_LONG_PATH_PREFIX = "\\\\?\\"


def _is_junction(path: Path) -> bool:
    """Check for a Windows directory junction"""
    isjunction = getattr(os.path, "isjunction", None)
    if isjunction is None:
        return False
    return isjunction(path)


class ActivePointer:
    """Swappable link from a well-known path to one release"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        """Check if anything exists at the pointer path, dangling links included"""
        return os.path.lexists(self.path)

    def is_redirect(self) -> bool:
        """Check if the pointer path is a symlink or junction

        Probes the entry type with lstat; a real directory reached through
        a link is not mistaken for the link itself.
        """
        try:
            return self.path.is_symlink() or _is_junction(self.path)
        except FileNotFoundError:
            return False

    def target(self) -> Optional[Path]:
        """Get the raw link target

        Returns:
            Link target, or None if the pointer does not exist

        Raises:
            OSError: If the pointer exists but cannot be read as a link
        """
        try:
            raw = os.readlink(self.path)
        except FileNotFoundError:
            return None

        if raw.startswith(WINDOWS_LONG_PATH_PREFIX):
            raw = raw[len(WINDOWS_LONG_PATH_PREFIX):]

        return Path(raw)

    def swap(self, new_target: Union[str, Path]) -> Path:
        """Point the link at a new release

        Args:
            new_target: Release directory to activate

        Returns:
            Path of the pointer

        Raises:
            UnsafePointerStateError: If the pointer path is a real file or directory
            PointerUpdateError: If the link cannot be replaced
        """
        new_target = Path(new_target)
        logger.info(f"Updating {self.path} to: {new_target}")

        if not self.exists():
            self._create(self.path, new_target)
        elif not self.is_redirect():
            raise UnsafePointerStateError(self.path)
        elif os.name == "nt":
            # Junctions cannot be renamed over; drop the link then recreate it
            self.remove()
            self._create(self.path, new_target)
        else:
            self._replace(new_target)

        logger.info(MSG_LINK_UPDATED.format(link=self.path, target=new_target))
        return self.path

    def remove(self) -> None:
        """Remove the link itself, leaving its target untouched

        Raises:
            UnsafePointerStateError: If the pointer path is not a link
            PointerUpdateError: If the link cannot be removed
        """
        if not self.exists():
            logger.info(f"Link does not exist, nothing to remove: {self.path}")
            return

        if not self.is_redirect():
            raise UnsafePointerStateError(self.path)

        logger.info(f"Removing link: {self.path}")
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise PointerUpdateError(f"Failed to remove link {self.path}: {e}")

    def _replace(self, new_target: Path) -> None:
        """Swap an existing link via a temporary link and an atomic rename"""
        temp_link = self.path.with_name(self.path.name + TEMP_LINK_SUFFIX)

        if os.path.lexists(temp_link):
            if not (temp_link.is_symlink() or _is_junction(temp_link)):
                raise UnsafePointerStateError(temp_link)
            os.unlink(temp_link)

        self._create(temp_link, new_target)

        try:
            os.replace(temp_link, self.path)
        except OSError as e:
            os.unlink(temp_link)
            raise PointerUpdateError(f"Failed to replace link {self.path}: {e}")

    @staticmethod
    def _create(link: Path, target: Path) -> None:
        logger.debug(f"Creating link: {link} -> {target}")
        try:
            os.symlink(target, link, target_is_directory=True)
        except OSError as e:
            raise PointerUpdateError(f"Failed to create link {link}: {e}")
