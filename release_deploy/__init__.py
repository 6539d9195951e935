"""Release Deploy - immutable release deployments with atomic activation.

Each deployment builds a new directory under ``{root}/releases``, switches
the ``{root}/current`` link to it and optionally verifies it over HTTP.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Exceptions
from .api.exceptions import (
    DeployToolError,
    InputValidationError,
    ConfigError,
    InvalidRangeError,
    FilesystemPreconditionError,
    UnsafePointerStateError,
    CommandFailedError,
    HealthCheckFailedError,
)

# Core API
from .api.deployer import Deployer, deploy, list_releases, current_release

# Data models
from .models.config import DeployConfig, HealthCheckConfig
from .models.release import Release, ReleaseInfo
from .models.result import DeployResult, HealthCheckResult

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Deployer",

    # Core API functions
    "deploy",
    "list_releases",
    "current_release",

    # Data models
    "DeployConfig",
    "HealthCheckConfig",
    "Release",
    "ReleaseInfo",
    "DeployResult",
    "HealthCheckResult",

    # Exceptions
    "DeployToolError",
    "InputValidationError",
    "ConfigError",
    "InvalidRangeError",
    "FilesystemPreconditionError",
    "UnsafePointerStateError",
    "CommandFailedError",
    "HealthCheckFailedError",
]
