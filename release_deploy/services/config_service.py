"""Configuration management service"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..api.exceptions import ConfigError
from ..constants import PROJECT_CONFIG_FILE, ENV_CONFIG_PATH
from ..models.config import DeployConfig
from ..utils.git_utils import resolve_revision

logger = logging.getLogger(__name__)

# Path fields in the YAML file are relative to the file's directory
PATH_FIELDS = ["deploy_root", "repo_path"]


class ConfigService:
    """Builds a DeployConfig from the YAML file and command line overrides

    Precedence: override > YAML file > defaults.
    """

    def __init__(self,
                 config_path: Optional[Union[str, Path]] = None,
                 env: Optional[Mapping[str, str]] = None):
        """Initialize config service

        Args:
            config_path: Explicit configuration file
            env: Environment mapping (defaults to os.environ)
        """
        self.env = os.environ if env is None else env
        self.explicit = config_path is not None or bool(self.env.get(ENV_CONFIG_PATH))
        self.config_path = self._resolve_config_path(config_path)

    def _resolve_config_path(self, config_path: Optional[Union[str, Path]]) -> Optional[Path]:
        if config_path is not None:
            return Path(config_path)

        from_env = self.env.get(ENV_CONFIG_PATH)
        if from_env:
            return Path(from_env)

        default = Path.cwd() / PROJECT_CONFIG_FILE
        return default if default.exists() else None

    def load_file(self) -> Dict[str, Any]:
        """Load the configuration file

        Returns:
            Parsed mapping, empty when no file is used

        Raises:
            ConfigError: If an explicit file is missing or the YAML is invalid
        """
        if self.config_path is None:
            return {}

        if not self.config_path.exists():
            if self.explicit:
                raise ConfigError(f"Configuration file not found: {self.config_path}")
            return {}

        logger.info(f"Loading configuration: {self.config_path}")

        with open(self.config_path, 'r') as f:
            content = f.read()

        # Environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file must contain a mapping: {self.config_path}")

        base_dir = self.config_path.resolve().parent
        for name in PATH_FIELDS:
            value = data.get(name)
            if value and not Path(str(value)).is_absolute():
                data[name] = str(base_dir / str(value))

        return data

    def build(self, overrides: Optional[Dict[str, Any]] = None) -> DeployConfig:
        """Build and validate the deployment configuration

        Args:
            overrides: Values taking precedence over the file; None values
                are ignored. ``healthcheck`` may be a partial mapping.

        Returns:
            Validated configuration

        Raises:
            ConfigError: If the resulting configuration is invalid
        """
        data = merge_config(self.load_file(), overrides or {})
        config = DeployConfig.from_dict(data)

        if not config.revision:
            config.revision = resolve_revision(config.repo_path, self.env)

        config.validate()
        return config


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Merge overrides into a configuration mapping

    Nested ``healthcheck`` mappings are merged key by key.
    """
    merged = dict(base)

    for key, value in overrides.items():
        if value is None:
            continue

        if key == "healthcheck" and isinstance(value, dict):
            healthcheck = merged.get("healthcheck") or {}
            if not isinstance(healthcheck, dict):
                raise ConfigError("healthcheck must be a mapping")
            healthcheck = dict(healthcheck)
            healthcheck.update({k: v for k, v in value.items() if v is not None})
            merged["healthcheck"] = healthcheck
        else:
            merged[key] = value

    return merged
