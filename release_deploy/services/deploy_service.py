"""Deploy service: the release pipeline

Stages run strictly in order. The first failure aborts the remaining stages
and propagates unchanged; nothing is rolled back. Optional stages are skipped
when their input is empty.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from ..api.exceptions import HealthCheckFailedError
from ..constants import (
    StageStatus,
    MSG_STAGE_START,
    MSG_STAGE_SKIPPED,
    MSG_DEPLOY_COMPLETE,
    EMOJI_FOLDER,
    EMOJI_PACKAGE,
    EMOJI_BUILD,
    EMOJI_RELEASE,
    EMOJI_COPY,
    EMOJI_GEAR,
    EMOJI_SWITCH,
    EMOJI_HEALTH,
    EMOJI_ROCKET,
)
from ..core.command_runner import CommandRunner, detect_shell
from ..core.health_checker import HealthChecker
from ..core.release_id import generate_release_id
from ..core.release_store import ReleaseStore
from ..models.config import DeployConfig
from ..models.release import Release
from ..models.result import DeployResult, StageRecord
from ..utils.file_utils import copy_release_files

logger = logging.getLogger(__name__)


@dataclass
class Stage:
    """One pipeline stage

    Attributes:
        name: Stage name used in records
        emoji: Banner emoji
        description: Banner text
        run: Coroutine function doing the work
        skip_reason: Returns a reason when the stage should be skipped
    """
    name: str
    emoji: str
    description: str
    run: Callable[[], Awaitable[None]]
    skip_reason: Optional[Callable[[], Optional[str]]] = None


class DeployService:
    """Builds a release, activates it and verifies it"""

    def __init__(self,
                 config: DeployConfig,
                 runner: Optional[CommandRunner] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize deploy service

        Args:
            config: Validated deployment configuration
            runner: Command runner (one using the detected shell if None)
            clock: Local time source for release ids
        """
        self.config = config
        self.runner = runner or CommandRunner(detect_shell())
        self.clock = clock
        self.store = ReleaseStore(config.deploy_root)

        self.release: Optional[Release] = None
        self.result = DeployResult()

    def stages(self) -> List[Stage]:
        """Get the ordered pipeline"""
        config = self.config

        return [
            Stage("EnvironmentSetup", EMOJI_FOLDER, "Environment Setup",
                  self._setup_environment),
            Stage("InstallDependencies", EMOJI_PACKAGE, "Install Dependencies",
                  self._install_dependencies,
                  lambda: None if config.install_cmds else "no install_cmds provided"),
            Stage("Build", EMOJI_BUILD, "Build Application",
                  self._build,
                  lambda: None if config.build_cmds else "no build_cmds provided"),
            Stage("PrepareRelease", EMOJI_RELEASE, "Prepare Release Directory",
                  self._prepare_release),
            Stage("CopyFiles", EMOJI_COPY, "Copy Files",
                  self._copy_files),
            Stage("PreDeployCommands", EMOJI_GEAR, "Pre-Deploy Commands",
                  self._pre_deploy,
                  lambda: None if config.pre_deploy_cmds else "no pre_deploy_cmds provided"),
            Stage("SwitchActiveRelease", EMOJI_SWITCH, "Switch Active Release",
                  self._switch_active_release),
            Stage("PostDeployCommands", EMOJI_GEAR, "Post-Deploy Commands",
                  self._post_deploy,
                  lambda: None if config.post_deploy_cmds else "no post_deploy_cmds provided"),
            Stage("HealthCheck", EMOJI_HEALTH, "Health Check",
                  self._health_check,
                  lambda: None if config.healthcheck.enabled else "no healthcheck url provided"),
        ]

    async def deploy(self) -> DeployResult:
        """
        Run the pipeline

        Returns:
            Deployment result

        Raises:
            DeployToolError: From the first failing stage
            HealthCheckFailedError: If the new release is active but unhealthy
        """
        logger.info(f"{EMOJI_ROCKET} Deploying {self.config.app_name} to {self.store.root}")
        started = time.perf_counter()

        try:
            for index, stage in enumerate(self.stages(), 1):
                await self._run_stage(index, stage)
        finally:
            self.result.elapsed = time.perf_counter() - started

        self.result.deployment_time = utc_timestamp()
        self._log_summary()
        return self.result

    async def _run_stage(self, index: int, stage: Stage) -> None:
        reason = stage.skip_reason() if stage.skip_reason else None
        if reason:
            logger.info(MSG_STAGE_SKIPPED.format(
                emoji=stage.emoji, index=index, description=stage.description, reason=reason
            ))
            self.result.add_stage(StageRecord(stage.name, StageStatus.SKIPPED, message=reason))
            return

        logger.info(MSG_STAGE_START.format(
            emoji=stage.emoji, index=index, description=stage.description
        ))
        started = time.perf_counter()

        try:
            await stage.run()
        except Exception as e:
            self.result.add_stage(StageRecord(
                stage.name, StageStatus.FAILED, time.perf_counter() - started, str(e)
            ))
            raise

        self.result.add_stage(StageRecord(
            stage.name, StageStatus.SUCCESS, time.perf_counter() - started
        ))

    async def _setup_environment(self) -> None:
        self.store.ensure_root()

    async def _install_dependencies(self) -> None:
        await self.runner.run(self.config.install_cmds, self.config.repo_path, "Install dependencies")

    async def _build(self) -> None:
        await self.runner.run(self.config.build_cmds, self.config.repo_path, "Build")

    async def _prepare_release(self) -> None:
        now = self.clock()
        release_id = generate_release_id(now, self.config.revision)
        logger.info(f"Release ID: {release_id}")

        self.release = self.store.allocate(release_id, created_at=now)
        self.result.release_id = self.release.release_id
        self.result.release_path = self.release.path

    async def _copy_files(self) -> None:
        await copy_release_files(
            self.config.repo_path,
            self.release.path,
            self.config.dist_dir,
            skip=self.store.root
        )

    async def _pre_deploy(self) -> None:
        await self.runner.run(self.config.pre_deploy_cmds, self.release.path, "Pre-deploy commands")

    async def _switch_active_release(self) -> None:
        previous = self.store.previous_target()
        current = self.store.pointer.swap(self.release.path)

        logger.info(f"Switched active release from '{previous or 'none'}' to '{self.release.path}'")
        self.result.previous_release = previous
        self.result.current_link = current

    async def _post_deploy(self) -> None:
        await self.runner.run(self.config.post_deploy_cmds, self.release.path, "Post-deploy commands")

    async def _health_check(self) -> None:
        settings = self.config.healthcheck
        checker = HealthChecker(
            settings.url,
            code_range=settings.code_range,
            timeout=settings.timeout,
            retries=settings.retries,
            delay=settings.delay,
            interval=settings.interval
        )

        health = await checker.verify()
        self.result.health = health

        if not health.success:
            # The release is already active; report what was deployed
            self.result.deployment_time = utc_timestamp()
            raise HealthCheckFailedError(health, self.result)

    def _log_summary(self) -> None:
        result = self.result

        logger.info(MSG_DEPLOY_COMPLETE)
        logger.info(f"Release ID: {result.release_id}")
        logger.info(f"Release path: {result.release_path}")
        logger.info(f"Current link: {result.current_link}")
        if result.previous_release:
            logger.info(f"Previous release: {result.previous_release}")
        logger.info(f"Deployment time: {result.deployment_time}")
        if result.health:
            logger.info(
                f"Health check: {result.healthcheck_status} "
                f"(code: {result.healthcheck_code}, attempts: {result.healthcheck_attempts})"
            )
        logger.info(f"Elapsed: {result.elapsed:.2f}s")


def utc_timestamp() -> str:
    """Current UTC time in ISO-8601 with millisecond precision"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
