# release_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import deploy
from . import releases

__all__ = [
    "deploy",
    "releases",
]
