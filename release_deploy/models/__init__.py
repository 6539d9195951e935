"""Data models for release-deploy"""

from .config import DeployConfig, HealthCheckConfig
from .release import Release, ReleaseInfo
from .result import DeployResult, HealthCheckResult, StageRecord

__all__ = [
    'DeployConfig',
    'HealthCheckConfig',
    'Release',
    'ReleaseInfo',
    'DeployResult',
    'HealthCheckResult',
    'StageRecord',
]
