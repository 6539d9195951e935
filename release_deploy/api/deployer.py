"""Deployer API for deployment operations"""

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..core.command_runner import CommandRunner
from ..core.release_store import ReleaseStore
from ..models.config import DeployConfig
from ..models.release import ReleaseInfo
from ..models.result import DeployResult
from ..services.config_service import ConfigService
from ..services.deploy_service import DeployService
from ..utils.async_utils import run_async


class Deployer:
    """Deployer class for deployment operations"""

    def __init__(self,
                 config: DeployConfig,
                 runner: Optional[CommandRunner] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize deployer

        Args:
            config: Deployment configuration (validated here)
            runner: Command runner override
            clock: Local time source for release ids

        Raises:
            ConfigError: If the configuration is invalid
        """
        config.validate()
        self.config = config
        self.runner = runner
        self.clock = clock

    async def deploy_async(self) -> DeployResult:
        """
        Deploy a new release

        Returns:
            DeployResult: Deployment result

        Raises:
            DeployToolError: If any stage fails
        """
        service = DeployService(self.config, runner=self.runner, clock=self.clock)
        return await service.deploy()

    def deploy(self) -> DeployResult:
        """Deploy a new release (sync wrapper)"""
        return run_async(self.deploy_async())


def deploy(config: Optional[DeployConfig] = None,
           config_path: Optional[Union[str, Path]] = None,
           **fields) -> DeployResult:
    """
    Deploy a new release

    This is a convenience function that creates a Deployer instance
    and performs the deployment.

    Args:
        config: Ready configuration; when omitted it is built from the
            configuration file and ``fields``
        config_path: Configuration file used when config is omitted
        **fields: DeployConfig fields overriding the file

    Returns:
        DeployResult: Deployment result

    Raises:
        ValueError: If both config and fields are given
        DeployToolError: If deployment fails
    """
    if config is not None and fields:
        raise ValueError("Cannot specify both config and individual fields")

    if config is None:
        config = ConfigService(config_path).build(fields)

    return Deployer(config).deploy()


def list_releases(deploy_root: Union[str, Path]) -> List[ReleaseInfo]:
    """List releases of a deploy root, oldest first"""
    return ReleaseStore(deploy_root).list_releases()


def current_release(deploy_root: Union[str, Path]) -> Optional[Path]:
    """Get the release the current link points to, if any"""
    return ReleaseStore(deploy_root).previous_target()
