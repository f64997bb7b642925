"""HTTP transport used by DeployKeyClient"""

from typing import Protocol

import requests


class Transport(Protocol):
    """Anything that can execute a prepared request.

    ``requests.Session`` satisfies this protocol; tests substitute a fake.
    Failures to reach the server must be raised as
    ``requests.RequestException`` or ``OSError``; DeployKeyClient wraps
    those in its typed errors and lets anything else propagate.
    """

    def send(self, request: requests.PreparedRequest, **kwargs) -> requests.Response:
        ...


class TimeoutSession(requests.Session):
    """requests Session that applies a default timeout to every send"""

    def __init__(self, timeout: float = 30.0):
        super().__init__()
        self.timeout = timeout

    def send(self, request, **kwargs):
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def build_session(timeout: float = 30.0) -> TimeoutSession:
    """Create the default transport.

    Args:
        timeout: Seconds to wait for connect and read before failing

    Returns:
        A session suitable for passing to DeployKeyClient
    """
    return TimeoutSession(timeout=timeout)
