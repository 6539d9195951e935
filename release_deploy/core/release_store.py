"""Release store: owns the deploy root layout

    {root}/
    ├── current -> releases/<id>
    └── releases/
        ├── 20250101-120000-abc1234/
        └── 20250102-093000-def5678/

Releases are created here and never deleted here.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from ..api.exceptions import NotADirectory, PermissionDenied, ReleaseAllocationError
from ..constants import RELEASES_DIR, CURRENT_LINK_NAME, WRITE_TEST_FILE, EMOJI_WARNING
from ..models.release import Release, ReleaseInfo
from .active_pointer import ActivePointer

logger = logging.getLogger(__name__)


def normalize_target(target: Path) -> Path:
    """Strip trailing path separators from a link target"""
    raw = str(target)
    stripped = raw.rstrip("\\/")
    return Path(stripped or raw)


class ReleaseStore:
    """Manages the releases directory and the current link of a deploy root"""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(os.path.abspath(root))
        self.releases_dir = self.root / RELEASES_DIR
        self.current_link = self.root / CURRENT_LINK_NAME
        self.pointer = ActivePointer(self.current_link)

    def ensure_root(self) -> None:
        """Ensure the deploy root exists, is writable and has a releases directory

        Raises:
            NotADirectory: If the root exists but is not a directory
            PermissionDenied: If the root is not writable
        """
        logger.info(f"Ensuring deploy root exists: {self.root}")

        if not self.root.exists():
            logger.info(f"Creating deploy root: {self.root}")
            try:
                self.root.mkdir(parents=True, exist_ok=True)
            except FileExistsError:
                raise NotADirectory(self.root)
            except OSError as e:
                raise PermissionDenied(self.root, str(e))
        elif not self.root.is_dir():
            raise NotADirectory(self.root)

        # Probe write access
        test_file = self.root / WRITE_TEST_FILE
        try:
            test_file.write_bytes(b"")
            test_file.unlink()
        except OSError as e:
            raise PermissionDenied(self.root, str(e))
        logger.info("Deploy root is writable")

        try:
            self.releases_dir.mkdir(parents=True, exist_ok=True)
        except FileExistsError:
            raise NotADirectory(self.releases_dir, name="Releases directory")
        logger.info(f"Releases directory ready: {self.releases_dir}")

    def release_path(self, release_id: str) -> Path:
        """Get the directory for a release id"""
        return self.releases_dir / release_id

    def allocate(self, release_id: str, created_at: Optional[datetime] = None) -> Release:
        """Create the directory for a new release

        Allocating an id that already exists succeeds and returns the same
        path, so retried pipeline runs do not fail here.

        Args:
            release_id: Release identifier
            created_at: Allocation time (defaults to now)

        Returns:
            The allocated release

        Raises:
            ReleaseAllocationError: If the directory cannot be created
        """
        path = self.release_path(release_id)
        logger.info(f"Creating release directory: {path}")

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ReleaseAllocationError(f"Failed to create release directory: {e}")

        return Release(
            release_id=release_id,
            path=path,
            created_at=created_at or datetime.now()
        )

    def previous_target(self) -> Optional[Path]:
        """Get the release the current link points to

        Read-only and lenient: a missing link means first deployment, and a
        link that cannot be read is logged and treated as no previous
        release.

        Returns:
            Normalized target path, or None
        """
        try:
            target = self.pointer.target()
        except OSError as e:
            logger.warning(f"{EMOJI_WARNING} Could not read previous release: {e}")
            return None

        if target is None:
            logger.info("No previous release found (current link does not exist)")
            return None

        target = normalize_target(target)
        logger.info(f"Previous release: {target}")
        return target

    def list_releases(self) -> List[ReleaseInfo]:
        """List releases sorted by id (oldest first)"""
        if not self.releases_dir.is_dir():
            return []

        current = self.previous_target()
        current_name = current.name if current else None

        releases = []
        for item in sorted(self.releases_dir.iterdir(), key=lambda p: p.name):
            if not item.is_dir():
                continue
            releases.append(ReleaseInfo(
                release_id=item.name,
                path=item,
                created_at=datetime.fromtimestamp(item.stat().st_mtime),
                is_current=item.name == current_name
            ))

        return releases
