# release_deploy/api/__init__.py
"""API layer for release-deploy"""

from .exceptions import (
    DeployToolError,
    InputValidationError,
    ConfigError,
    InvalidRangeError,
    FilesystemPreconditionError,
    NotADirectory,
    PermissionDenied,
    DistDirError,
    UnsafePointerStateError,
    ReleaseAllocationError,
    PointerUpdateError,
    FileSyncError,
    CommandFailedError,
    HealthCheckFailedError,
)
from .deployer import Deployer, deploy, list_releases, current_release

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",
    "list_releases",
    "current_release",

    # Exceptions
    "DeployToolError",
    "InputValidationError",
    "ConfigError",
    "InvalidRangeError",
    "FilesystemPreconditionError",
    "NotADirectory",
    "PermissionDenied",
    "DistDirError",
    "UnsafePointerStateError",
    "ReleaseAllocationError",
    "PointerUpdateError",
    "FileSyncError",
    "CommandFailedError",
    "HealthCheckFailedError",
]
