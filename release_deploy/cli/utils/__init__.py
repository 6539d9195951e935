"""CLI utility functions"""

from .output import (
    console,
    format_deploy_result,
    format_deploy_error,
    format_release_list,
    format_ci_outputs,
    write_ci_outputs,
)

__all__ = [
    'console',
    'format_deploy_result',
    'format_deploy_error',
    'format_release_list',
    'format_ci_outputs',
    'write_ci_outputs',
]
