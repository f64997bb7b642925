"""Configuration loading and validation"""

from pathlib import Path
from typing import Union
import yaml
from pydantic import ValidationError

from .types import DeployKeysConfig


class ConfigError(Exception):
    """Configuration loading or validation error"""
    pass


class ConfigLoader:
    """Load and validate gh-deploy-keys configuration files"""

    def load(self, config_path: Union[str, Path]) -> DeployKeysConfig:
        """Load configuration from YAML file"""
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {config_path}: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {config_path}")

        return self.load_from_dict(data)

    def load_from_dict(self, data: dict) -> DeployKeysConfig:
        """Load configuration from dictionary"""
        if "version" not in data:
            raise ConfigError("version is required")

        try:
            return DeployKeysConfig(**data)
        except ValidationError as e:
            # Flatten pydantic errors into one message
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"{field}: {msg}")
            raise ConfigError("Validation errors:\n" + "\n".join(errors))
