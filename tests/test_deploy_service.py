"""Tests for release_deploy.services.deploy_service."""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from release_deploy.api.exceptions import (
    CommandFailedError,
    ConfigError,
    HealthCheckFailedError,
    NotADirectory,
    UnsafePointerStateError,
)
from release_deploy.api.deployer import Deployer
from release_deploy.constants import StageStatus
from release_deploy.models.config import HealthCheckConfig
from release_deploy.services.deploy_service import DeployService, utc_timestamp

pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX symlink semantics")

STAGES = [
    "EnvironmentSetup",
    "InstallDependencies",
    "Build",
    "PrepareRelease",
    "CopyFiles",
    "PreDeployCommands",
    "SwitchActiveRelease",
    "PostDeployCommands",
    "HealthCheck",
]


@pytest.mark.asyncio
async def test_first_deploy(config, runner, clock, deploy_root: Path) -> None:
    result = await DeployService(config, runner=runner, clock=clock).deploy()

    assert result.release_id == "20250102-030405-abcdef0"
    assert result.release_path == deploy_root / "releases" / "20250102-030405-abcdef0"
    assert result.current_link == deploy_root / "current"
    assert result.previous_release is None
    assert result.health is None
    assert result.deployment_time.endswith("Z")
    assert result.elapsed >= 0

    assert os.readlink(deploy_root / "current") == str(result.release_path)
    assert (deploy_root / "current" / "src" / "app.py").exists()
    assert not (result.release_path / "node_modules").exists()

    assert [s.name for s in result.stages] == STAGES
    assert result.skipped_stages == [
        "InstallDependencies",
        "Build",
        "PreDeployCommands",
        "PostDeployCommands",
        "HealthCheck",
    ]
    assert runner.calls == []


@pytest.mark.asyncio
async def test_second_deploy_reports_previous_release(config, runner, clock, deploy_root: Path) -> None:
    first = await DeployService(config, runner=runner, clock=clock).deploy()
    second = await DeployService(config, runner=runner, clock=clock).deploy()

    assert first.release_id != second.release_id
    assert second.previous_release == first.release_path
    assert (deploy_root / "current").resolve() == second.release_path.resolve()
    assert first.release_path.is_dir()
    assert sorted(p.name for p in (deploy_root / "releases").iterdir()) == [
        first.release_id,
        second.release_id,
    ]


@pytest.mark.asyncio
async def test_commands_run_in_order_and_place(config, runner, clock, repo: Path) -> None:
    config = replace(
        config,
        install_cmds=["npm ci"],
        build_cmds=["npm run build"],
        dist_dir="dist",
        pre_deploy_cmds=["migrate"],
        post_deploy_cmds=["reload"],
    )

    result = await DeployService(config, runner=runner, clock=clock).deploy()

    assert runner.labels == [
        "Install dependencies",
        "Build",
        "Pre-deploy commands",
        "Post-deploy commands",
    ]
    cwds = [cwd for _, cwd, _ in runner.calls]
    assert cwds == [repo, repo, result.release_path, result.release_path]
    assert (result.release_path / "index.html").exists()
    assert not (result.release_path / "src").exists()
    assert result.skipped_stages == ["HealthCheck"]


@pytest.mark.asyncio
async def test_build_failure_stops_before_release(config, clock, runner_factory, deploy_root: Path) -> None:
    runner = runner_factory(fail_label="Build")
    config = replace(config, build_cmds=["make"])
    service = DeployService(config, runner=runner, clock=clock)

    with pytest.raises(CommandFailedError):
        await service.deploy()

    assert list((deploy_root / "releases").iterdir()) == []
    assert not os.path.lexists(deploy_root / "current")
    assert service.result.stages[-1].name == "Build"
    assert service.result.stages[-1].status == StageStatus.FAILED


@pytest.mark.asyncio
async def test_pre_deploy_failure_keeps_previous_release_active(
        config, clock, runner_factory, deploy_root: Path) -> None:
    first = await DeployService(config, runner=runner_factory(), clock=clock).deploy()

    failing = replace(config, pre_deploy_cmds=["migrate"])
    with pytest.raises(CommandFailedError):
        await DeployService(failing, runner=runner_factory("Pre-deploy commands"), clock=clock).deploy()

    assert (deploy_root / "current").resolve() == first.release_path.resolve()
    assert len(list((deploy_root / "releases").iterdir())) == 2


@pytest.mark.asyncio
async def test_unsafe_current_directory_aborts(config, runner, clock, deploy_root: Path) -> None:
    (deploy_root / "current").mkdir(parents=True)
    (deploy_root / "current" / "live.txt").write_text("live")

    with pytest.raises(UnsafePointerStateError):
        await DeployService(config, runner=runner, clock=clock).deploy()

    assert (deploy_root / "current" / "live.txt").read_text() == "live"


@pytest.mark.asyncio
async def test_deploy_root_that_is_a_file(config, runner, clock, deploy_root: Path) -> None:
    deploy_root.parent.mkdir(parents=True)
    deploy_root.write_text("")

    with pytest.raises(NotADirectory):
        await DeployService(config, runner=runner, clock=clock).deploy()


@pytest.mark.asyncio
async def test_health_check_success(config, runner, clock, http_client) -> None:
    config = replace(config, healthcheck=HealthCheckConfig(url="http://localhost/health", delay=0, interval=0))
    client = http_client(503, 200)

    with patch("httpx.AsyncClient", return_value=client):
        result = await DeployService(config, runner=runner, clock=clock).deploy()

    assert result.healthcheck_status == "passed"
    assert result.healthcheck_code == 200
    assert result.healthcheck_attempts == 2
    assert result.to_outputs()["healthcheck_status"] == "passed"


@pytest.mark.asyncio
async def test_health_check_failure_leaves_release_active(config, runner, clock, http_client, deploy_root: Path) -> None:
    config = replace(
        config,
        healthcheck=HealthCheckConfig(url="http://localhost/health", retries=2, delay=0, interval=0),
    )
    client = http_client(500, httpx.ConnectError("refused"))

    with patch("httpx.AsyncClient", return_value=client):
        with pytest.raises(HealthCheckFailedError) as exc_info:
            await DeployService(config, runner=runner, clock=clock).deploy()

    error = exc_info.value
    assert error.health.success is False
    assert error.health.status_code == 500
    assert error.health.attempts == 2
    assert str(error) == "Health check failed: refused"
    assert error.result.healthcheck_status == "failed"
    assert (deploy_root / "current").resolve() == error.result.release_path.resolve()


@pytest.mark.asyncio
async def test_invalid_range_is_rejected_before_any_io(config, deploy_root: Path) -> None:
    config = replace(config, healthcheck=HealthCheckConfig(url="http://localhost/health", code_range="oops"))

    with pytest.raises(ConfigError):
        Deployer(config)

    assert not deploy_root.exists()


@pytest.mark.asyncio
async def test_unparseable_health_url_fails_the_health_check(config, runner, clock, deploy_root: Path) -> None:
    first = await DeployService(config, runner=runner, clock=clock).deploy()
    config = replace(
        config,
        healthcheck=HealthCheckConfig(url="http://[::1/health", retries=2, delay=0, interval=0),
    )

    with pytest.raises(HealthCheckFailedError) as exc_info:
        await DeployService(config, runner=runner, clock=clock).deploy()

    error = exc_info.value
    assert error.health.attempts == 2
    assert error.health.status_code is None
    assert error.result.previous_release == first.release_path
    assert error.result.deployment_time.endswith("Z")


def test_unparseable_health_url_is_rejected_before_any_io(config, deploy_root: Path) -> None:
    config = replace(config, healthcheck=HealthCheckConfig(url="http://[::1/health"))

    with pytest.raises(ConfigError) as exc_info:
        Deployer(config)

    assert "Invalid health check URL" in str(exc_info.value)
    assert not deploy_root.exists()


@pytest.mark.asyncio
async def test_deploy_root_inside_repository(config, runner, clock, repo: Path) -> None:
    config = replace(config, deploy_root=repo / "deploy")

    first = await DeployService(config, runner=runner, clock=clock).deploy()
    second = await DeployService(config, runner=runner, clock=clock).deploy()

    assert (second.release_path / "README.md").exists()
    assert not (first.release_path / "deploy").exists()
    assert not (second.release_path / "deploy").exists()

def test_deployer_sync_wrapper(config, runner, clock) -> None:
    result = Deployer(config, runner=runner, clock=clock).deploy()

    assert result.release_path.is_dir()
    assert result.to_outputs()["release_id"] == result.release_id


def test_utc_timestamp_format() -> None:
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert "T" in stamp
