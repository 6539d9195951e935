# release_deploy/utils/__init__.py
"""Utility functions for release-deploy"""

from .file_utils import (
    format_size,
    is_excluded,
    copy_file,
    copy_release_files,
)

from .git_utils import (
    is_git_repository,
    get_head_revision,
    resolve_revision,
)

from .command_parser import parse_command_input

from .async_utils import run_async

__all__ = [
    # File utilities
    'format_size',
    'is_excluded',
    'copy_file',
    'copy_release_files',

    # Git utilities
    'is_git_repository',
    'get_head_revision',
    'resolve_revision',

    # Command parsing
    'parse_command_input',

    # Async utilities
    'run_async',
]
