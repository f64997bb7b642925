"""gh-deploy-keys common - shared configuration and types"""

__version__ = "0.1.0"

from .config import ConfigLoader, ConfigError
from .types import DeployKey, Credentials, DeployKeysConfig

__all__ = [
    "ConfigLoader",
    "ConfigError",
    "DeployKey",
    "Credentials",
    "DeployKeysConfig",
]
