"""Configuration loader for JSON/YAML files and environment variables."""

import os
import json
import yaml
from pathlib import Path
from typing import Dict, Any, Union

from .schema import SheetConfig
from ..utils.logging import get_logger


class ConfigurationError(Exception):
    """Raised when configuration loading fails."""
    pass


class ConfigLoader:
    """Loads and validates sheet configuration from various sources."""

    ENV_OVERRIDES = {
        "JOBTRACKER_SPREADSHEET_ID": "spreadsheet_id",
        "JOBTRACKER_RANGE": "range",
        "JOBTRACKER_API_KEY": "api_key",
    }

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def load_from_file(self, file_path: Union[str, Path]) -> SheetConfig:
        """Load configuration from a JSON or YAML file.

        Args:
            file_path: Path to configuration file

        Returns:
            Validated SheetConfig

        Raises:
            ConfigurationError: If the file cannot be read or validated
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise ConfigurationError(f"Configuration file not found: {file_path}")

        self.logger.info("Loading configuration from file", file_path=str(file_path))

        suffix = file_path.suffix.lower()
        if suffix not in ('.yaml', '.yml', '.json'):
            raise ConfigurationError(f"Unsupported file format: {file_path.suffix}")

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                if suffix == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML format: {e}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON format: {e}")

        return self.load_from_dict(data or {})

    def load_from_dict(self, data: Dict[str, Any]) -> SheetConfig:
        """Load configuration from a dictionary in either key style."""
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a mapping")

        try:
            config = SheetConfig.from_storage(self._apply_env_overrides(data))
        except ValueError as e:
            raise ConfigurationError(f"Failed to load configuration: {e}")

        self.logger.info(
            "Configuration loaded",
            configured=config.is_configured,
            range=config.range
        )
        return config

    def save_to_file(self, config: SheetConfig, file_path: Union[str, Path]) -> None:
        """Save configuration as YAML or JSON, chosen by file extension."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        data = config.to_storage()
        with open(file_path, 'w', encoding='utf-8') as f:
            if file_path.suffix.lower() == '.json':
                json.dump(data, f, indent=2)
            else:
                yaml.safe_dump(data, f, default_flow_style=False)

        self.logger.info("Configuration saved", file_path=str(file_path))

    def _apply_env_overrides(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Environment variables win over file values."""
        merged = dict(data)
        for env_var, field in self.ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value:
                merged.pop(_camel(field), None)
                merged[field] = value
        return merged


def _camel(field: str) -> str:
    head, *rest = field.split("_")
    return head + "".join(part.title() for part in rest)


def load_config_from_env() -> SheetConfig:
    """Build a SheetConfig purely from environment variables."""
    return ConfigLoader().load_from_dict({})
