# tests/conftest.py
#
# Fake transport and canned responses so no test touches the network.
import io
import json

import pytest
import requests

from gh_deploy_keys import DeployKeyClient
from gh_deploy_keys_common import Credentials


class TrackedResponse(requests.Response):
    """requests.Response that remembers whether close() was called"""

    def __init__(self):
        super().__init__()
        self.was_closed = False

    def close(self):
        self.was_closed = True
        super().close()


class BrokenBody:
    """Raw stream that fails mid-read"""

    def read(self, *args, **kwargs):
        raise ConnectionResetError("connection reset by peer")

    def close(self):
        pass


def make_response(status_code: int, body=b"", raw=None) -> TrackedResponse:
    if not isinstance(body, bytes):
        body = json.dumps(body).encode("utf-8")
    response = TrackedResponse()
    response.status_code = status_code
    response.raw = raw if raw is not None else io.BytesIO(body)
    return response


class FakeTransport:
    """Returns queued responses (or raises queued errors) in order"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def send(self, request, **kwargs):
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def credentials():
    return Credentials(username="test", password="test")


@pytest.fixture
def make_client(credentials):
    def _make_client(*outcomes, **kwargs):
        transport = FakeTransport(*outcomes)
        return DeployKeyClient(transport, "test", credentials, "test", **kwargs), transport
    return _make_client
