"""Git operation utilities"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional

from ..constants import REVISION_ENV_VARS

logger = logging.getLogger(__name__)


def is_git_repository(path: Path) -> bool:
    """
    Check if directory is a Git repository

    Args:
        path: Directory path

    Returns:
        True if it's a Git repository
    """
    try:
        result = subprocess.run(
            ['git', 'rev-parse', '--is-inside-work-tree'],
            cwd=path,
            capture_output=True,
            text=True
        )
        return result.returncode == 0
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        return False


def get_head_revision(path: Path) -> Optional[str]:
    """
    Get the commit SHA of HEAD

    Args:
        path: Repository path

    Returns:
        Full SHA or None
    """
    try:
        result = subprocess.run(
            ['git', 'rev-parse', 'HEAD'],
            cwd=path,
            capture_output=True,
            text=True,
            check=True
        )
        return result.stdout.strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        return None


def resolve_revision(repo_path: Path, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Resolve the source revision being deployed

    CI-provided variables win over the local checkout.

    Args:
        repo_path: Repository path
        env: Environment mapping (defaults to os.environ)

    Returns:
        Revision or None when it cannot be determined
    """
    env = os.environ if env is None else env

    for name in REVISION_ENV_VARS:
        value = env.get(name)
        if value:
            logger.debug(f"Revision from {name}: {value}")
            return value

    revision = get_head_revision(repo_path)
    if revision:
        logger.debug(f"Revision from git HEAD: {revision}")
    else:
        logger.debug("Revision could not be determined")
    return revision
