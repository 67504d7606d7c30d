"""Config loader for YAML configuration files."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from actionkit.config.models import ActionKitConfig
from actionkit.core.errors import ConfigError

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load ActionKitConfig from YAML files."""

    @staticmethod
    def load(path: Path | str) -> ActionKitConfig:
        """Load configuration from a YAML file or a directory of YAML files.

        Files in a directory are merged in name order: forms and settings are
        merged, other top-level keys are overwritten.

        Args:
            path: Path to a config directory or YAML file

        Returns:
            Parsed ActionKitConfig instance

        Raises:
            ConfigError: If the path does not exist or the content is invalid
        """
        config_path = Path(path)

        if config_path.is_dir():
            files = sorted([*config_path.glob("*.yaml"), *config_path.glob("*.yml")])
            if not files:
                raise ConfigError(f"No config files found in {config_path}")
            data: dict[str, Any] = {"forms": {}, "settings": {}}
            for fpath in files:
                chunk = ConfigLoader._read(fpath)
                data["forms"].update(chunk.get("forms") or {})
                data["settings"].update(chunk.get("settings") or {})
                for key, value in chunk.items():
                    if key not in ("forms", "settings"):
                        data[key] = value
        elif config_path.exists():
            data = ConfigLoader._read(config_path)
        else:
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            config = ActionKitConfig.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

        # Parse mappings eagerly so errors surface at load time
        for name, form in config.forms.items():
            try:
                form.mappings()
            except ConfigError as e:
                raise ConfigError(f"Invalid slot mappings for form '{name}': {e}") from e

        logger.debug(f"Loaded {len(config.forms)} form(s) from {config_path}")
        return config

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {path} must be a mapping")
        return data
