# release_deploy/core/__init__.py
"""Core modules for release-deploy"""

from .release_id import generate_release_id, format_timestamp, short_revision
from .active_pointer import ActivePointer
from .release_store import ReleaseStore
from .command_runner import CommandRunner, Shell, detect_shell
from .health_checker import HealthChecker, check_url, parse_code_range, verify_health

__all__ = [
    'generate_release_id',
    'format_timestamp',
    'short_revision',
    'ActivePointer',
    'ReleaseStore',
    'CommandRunner',
    'Shell',
    'detect_shell',
    'HealthChecker',
    'check_url',
    'parse_code_range',
    'verify_health',
]
