"""gh-deploy-keys - GitHub deploy key client"""

from .deploy_keys import DEFAULT_API_URL, DeployKeyClient, rotate_deploy_key
from .errors import CreateKeyError, DeleteKeyError, DeployKeyError, GetKeyError
from .keygen import generate_ssh_keypair
from .transport import TimeoutSession, Transport, build_session

__all__ = [
    "DEFAULT_API_URL",
    "DeployKeyClient",
    "rotate_deploy_key",
    "DeployKeyError",
    "GetKeyError",
    "DeleteKeyError",
    "CreateKeyError",
    "generate_ssh_keypair",
    "Transport",
    "TimeoutSession",
    "build_session",
]
