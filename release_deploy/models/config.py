"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any

from ..api.exceptions import ConfigError
from ..constants import (
    DEFAULT_HEALTHCHECK_CODE_RANGE,
    DEFAULT_HEALTHCHECK_TIMEOUT,
    DEFAULT_HEALTHCHECK_RETRIES,
    DEFAULT_HEALTHCHECK_DELAY,
    DEFAULT_HEALTHCHECK_INTERVAL,
)
from ..utils.command_parser import parse_command_input

COMMAND_FIELDS = ["install_cmds", "build_cmds", "pre_deploy_cmds", "post_deploy_cmds"]


@dataclass
class HealthCheckConfig:
    """Health check configuration"""

    url: Optional[str] = None
    code_range: str = DEFAULT_HEALTHCHECK_CODE_RANGE
    timeout: int = DEFAULT_HEALTHCHECK_TIMEOUT
    retries: int = DEFAULT_HEALTHCHECK_RETRIES
    delay: int = DEFAULT_HEALTHCHECK_DELAY
    interval: int = DEFAULT_HEALTHCHECK_INTERVAL

    @property
    def enabled(self) -> bool:
        """Check if a health check URL is configured"""
        return bool(self.url)

    def validate(self) -> None:
        """Validate numeric settings, the status code range and the URL

        Raises:
            ConfigError: If any setting is invalid
        """
        from ..core.health_checker import check_url, parse_code_range
        from ..api.exceptions import InputValidationError

        if self.retries < 1:
            raise ConfigError(f"healthcheck retries must be at least 1, got {self.retries}")

        for name in ("timeout", "delay", "interval"):
            value = getattr(self, name)
            if value < 0:
                raise ConfigError(f"healthcheck {name} must not be negative, got {value}")

        try:
            parse_code_range(self.code_range)
            if self.url:
                check_url(self.url)
        except InputValidationError as e:
            raise ConfigError(str(e))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "code_range": self.code_range,
            "timeout": self.timeout,
            "retries": self.retries,
            "delay": self.delay,
            "interval": self.interval
        }
        if self.url:
            data["url"] = self.url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HealthCheckConfig':
        """Create from dictionary"""
        return cls(
            url=data.get("url") or None,
            code_range=str(data.get("code_range", DEFAULT_HEALTHCHECK_CODE_RANGE)),
            timeout=_to_int(data.get("timeout", DEFAULT_HEALTHCHECK_TIMEOUT), "healthcheck.timeout"),
            retries=_to_int(data.get("retries", DEFAULT_HEALTHCHECK_RETRIES), "healthcheck.retries"),
            delay=_to_int(data.get("delay", DEFAULT_HEALTHCHECK_DELAY), "healthcheck.delay"),
            interval=_to_int(data.get("interval", DEFAULT_HEALTHCHECK_INTERVAL), "healthcheck.interval")
        )


@dataclass
class DeployConfig:
    """Validated deployment parameters"""

    app_name: str
    deploy_root: Path
    repo_path: Path = field(default_factory=Path.cwd)
    revision: Optional[str] = None
    install_cmds: List[str] = field(default_factory=list)
    build_cmds: List[str] = field(default_factory=list)
    dist_dir: Optional[str] = None
    pre_deploy_cmds: List[str] = field(default_factory=list)
    post_deploy_cmds: List[str] = field(default_factory=list)
    healthcheck: HealthCheckConfig = field(default_factory=HealthCheckConfig)

    def __post_init__(self):
        self.deploy_root = Path(self.deploy_root) if self.deploy_root else self.deploy_root
        self.repo_path = Path(self.repo_path)

    def validate(self) -> None:
        """Validate required fields

        Raises:
            ConfigError: If a required field is missing or invalid
        """
        if not self.app_name:
            raise ConfigError("Missing required field: app_name")
        if not self.deploy_root or not str(self.deploy_root).strip():
            raise ConfigError("Missing required field: deploy_root")
        if self.dist_dir is not None and Path(self.dist_dir).is_absolute():
            raise ConfigError(f"dist_dir must be relative to repo_path: {self.dist_dir}")

        self.healthcheck.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "app_name": self.app_name,
            "deploy_root": str(self.deploy_root),
            "repo_path": str(self.repo_path),
            "healthcheck": self.healthcheck.to_dict()
        }

        if self.revision:
            data["revision"] = self.revision
        if self.dist_dir:
            data["dist_dir"] = self.dist_dir

        for name in COMMAND_FIELDS:
            commands = getattr(self, name)
            if commands:
                data[name] = list(commands)

        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeployConfig':
        """Create from dictionary

        Command fields accept a list of strings, a JSON array string, a
        multiline script or a single command.
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        commands = {
            name: _parse_commands(data.get(name), name)
            for name in COMMAND_FIELDS
        }

        healthcheck = data.get("healthcheck") or {}
        if not isinstance(healthcheck, dict):
            raise ConfigError("healthcheck must be a mapping")

        return cls(
            app_name=data.get("app_name") or "",
            deploy_root=data.get("deploy_root") or "",
            repo_path=data.get("repo_path") or Path.cwd(),
            revision=data.get("revision") or None,
            dist_dir=data.get("dist_dir") or None,
            healthcheck=HealthCheckConfig.from_dict(healthcheck),
            **commands
        )


def _parse_commands(value: Any, name: str) -> List[str]:
    """Normalize a command field to a list of strings"""
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        if any(not isinstance(cmd, str) for cmd in value):
            raise ConfigError(f"{name} must contain only strings")
        return [cmd for cmd in value if cmd.strip()]

    if isinstance(value, str):
        return parse_command_input(value, name) or []

    raise ConfigError(f"{name} must be a string or a list of strings")


def _to_int(value: Any, name: str) -> int:
    """Convert a config value to int"""
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
