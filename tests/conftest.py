"""Shared fixtures for release-deploy tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterator, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from release_deploy.api.exceptions import CommandFailedError
from release_deploy.models.config import DeployConfig, HealthCheckConfig


class RecordingRunner:
    """Command runner double that records calls instead of spawning processes."""

    def __init__(self, fail_label: Optional[str] = None) -> None:
        self.calls: List[Tuple[List[str], Path, str]] = []
        self.fail_label = fail_label

    async def run(self, commands, cwd, label) -> None:
        self.calls.append((list(commands), Path(cwd), label))
        if self.fail_label and label == self.fail_label:
            raise CommandFailedError(f"{label} [1/1]: {commands[0]}", 2, stderr="boom")

    @property
    def labels(self) -> List[str]:
        return [label for _, _, label in self.calls]


def make_clock(start: datetime = datetime(2025, 1, 2, 3, 4, 5)):
    """Return a clock advancing one second per call."""
    ticks: Iterator[int] = iter(range(10_000))

    def clock() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return clock


def mock_http_client(*responses) -> AsyncMock:
    """Return an httpx.AsyncClient double whose get() yields the given items in order."""
    side_effect = [
        item if isinstance(item, BaseException) else mock_response(item)
        for item in responses
    ]
    client = AsyncMock()
    client.get = AsyncMock(side_effect=side_effect)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


def mock_response(status_code: int) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    return resp


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """A small checked out repository."""
    root = tmp_path / "repo"
    (root / "src").mkdir(parents=True)
    (root / "src" / "app.py").write_text("print('hi')\n")
    (root / "README.md").write_text("# app\n")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (root / "node_modules" / "left-pad").mkdir(parents=True)
    (root / "node_modules" / "left-pad" / "index.js").write_text("module.exports = 1\n")
    (root / "dist").mkdir()
    (root / "dist" / "index.html").write_text("<html></html>\n")
    return root


@pytest.fixture
def deploy_root(tmp_path: Path) -> Path:
    return tmp_path / "srv" / "app"


@pytest.fixture
def config(repo: Path, deploy_root: Path) -> DeployConfig:
    return DeployConfig(
        app_name="app",
        deploy_root=deploy_root,
        repo_path=repo,
        revision="abcdef0123456789",
        healthcheck=HealthCheckConfig(delay=0, interval=0),
    )


@pytest.fixture
def clock():
    return make_clock()


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def http_client():
    """Factory building httpx.AsyncClient doubles."""
    return mock_http_client


@pytest.fixture
def runner_factory():
    """Factory building recording runners, optionally failing on one label."""
    return RecordingRunner
