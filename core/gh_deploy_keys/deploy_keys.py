"""GitHub deploy key management"""

import json
import logging
from contextlib import closing
from typing import Optional

import requests
from pydantic import TypeAdapter, ValidationError

from gh_deploy_keys_common import __version__
from gh_deploy_keys_common.types import Credentials, DeployKey

from .errors import CreateKeyError, DeleteKeyError, GetKeyError
from .transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
GITHUB_MEDIA_TYPE = "application/vnd.github+json"

# requests.RequestException is itself an OSError; raw socket errors can
# surface unwrapped while the body is read.
TRANSPORT_ERRORS = (requests.RequestException, OSError)

_KEY_LIST = TypeAdapter(list[DeployKey])


def _github_message(body: bytes) -> Optional[str]:
    """Extract GitHub's error ``message`` from a response body, if any"""
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return None


class DeployKeyClient:
    """Client for the deploy keys of one GitHub repository

    Each call is a single request/response round-trip through the injected
    transport. The client keeps no state between calls.
    """

    def __init__(
        self,
        transport: Transport,
        owner: str,
        credentials: Credentials,
        repo: str,
        api_url: str = DEFAULT_API_URL
    ):
        self.transport = transport
        self.owner = owner
        self.credentials = credentials
        self.repo = repo
        self.api_url = api_url.rstrip("/")

    @property
    def keys_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/keys"

    def _prepare(self, method: str, url: str, payload: Optional[dict] = None) -> requests.PreparedRequest:
        headers = {
            "Accept": GITHUB_MEDIA_TYPE,
            "User-Agent": f"gh-deploy-keys/{__version__}",
        }
        return requests.Request(
            method,
            url,
            headers=headers,
            auth=self.credentials.as_auth(),
            json=payload
        ).prepare()

    def find(self, title: str) -> DeployKey:
        """Find a deploy key by its exact title

        Args:
            title: Key title to look for

        Returns:
            The first key (in server order) whose title matches, or an
            empty DeployKey when no key has that title

        Raises:
            GetKeyError: If the request, the body read, or parsing fails
        """
        request = self._prepare("GET", self.keys_url)
        logger.debug(f"Listing deploy keys for {self.owner}/{self.repo}")

        try:
            response = self.transport.send(request)
        except TRANSPORT_ERRORS as e:
            raise GetKeyError(f"Failed to list deploy keys for {self.owner}/{self.repo}: {e}") from e

        with closing(response):
            try:
                body = response.content
            except TRANSPORT_ERRORS as e:
                raise GetKeyError(f"Failed to read deploy key list: {e}") from e

        if not 200 <= response.status_code < 300:
            raise GetKeyError(
                f"Unexpected HTTP status {response.status_code} listing deploy keys "
                f"for {self.owner}/{self.repo}",
                status_code=response.status_code,
                detail=_github_message(body)
            )

        try:
            keys = _KEY_LIST.validate_json(body)
        except ValidationError as e:
            raise GetKeyError(f"Invalid deploy key list in response: {e}") from e

        for key in keys:
            if key.title == title:
                logger.debug(f"Found deploy key {key.id} titled {title!r}")
                return key

        logger.debug(f"No deploy key titled {title!r} in {self.owner}/{self.repo}")
        return DeployKey()

    def delete(self, key_id: int) -> None:
        """Delete a deploy key by id

        Raises:
            DeleteKeyError: If the request fails or GitHub does not answer 204
        """
        request = self._prepare("DELETE", f"{self.keys_url}/{key_id}")

        try:
            response = self.transport.send(request)
        except TRANSPORT_ERRORS as e:
            raise DeleteKeyError(f"Failed to delete deploy key {key_id}: {e}", key_id=key_id) from e

        with closing(response):
            if response.status_code == 204:
                logger.info(f"Deleted deploy key {key_id} from {self.owner}/{self.repo}")
                return

            try:
                detail = _github_message(response.content)
            except TRANSPORT_ERRORS as e:
                logger.debug(f"Could not read error body for deploy key {key_id}: {e}")
                detail = None

        raise DeleteKeyError(
            f"Could not delete deploy key {key_id} (HTTP {response.status_code})",
            key_id=key_id,
            status_code=response.status_code,
            detail=detail
        )

    def create(self, title: str, key: str, read_only: bool = True) -> DeployKey:
        """Add a deploy key to the repository

        Args:
            title: Label for the key
            key: Public key material (``ssh-ed25519 AAAA...``)
            read_only: Restrict the key to read access

        Returns:
            The key as stored by GitHub, including its id

        Raises:
            CreateKeyError: If the request, the body read, or parsing fails,
                or GitHub does not answer 201
        """
        new_key = DeployKey(title=title, key=key, read_only=read_only)
        request = self._prepare("POST", self.keys_url, payload=new_key.creation_payload())

        try:
            response = self.transport.send(request)
        except TRANSPORT_ERRORS as e:
            raise CreateKeyError(f"Failed to create deploy key {title!r}: {e}") from e

        with closing(response):
            try:
                body = response.content
            except TRANSPORT_ERRORS as e:
                raise CreateKeyError(f"Failed to read create response: {e}") from e

        if response.status_code != 201:
            raise CreateKeyError(
                f"Unexpected HTTP status {response.status_code} creating deploy key {title!r}",
                status_code=response.status_code,
                detail=_github_message(body)
            )

        try:
            created = DeployKey.model_validate_json(body)
        except ValidationError as e:
            raise CreateKeyError(f"Invalid deploy key in create response: {e}") from e

        logger.info(f"Created deploy key {created.id} titled {title!r} on {self.owner}/{self.repo}")
        return created


def rotate_deploy_key(
    client: DeployKeyClient,
    title: str,
    public_key: str,
    read_only: bool = True
) -> DeployKey:
    """Replace the deploy key with the given title

    Deletes the existing key with that title (if any), then creates the new
    one. Errors from any step propagate unchanged.
    """
    existing = client.find(title)
    if existing.exists:
        logger.info(f"Replacing deploy key {existing.id} titled {title!r}")
        client.delete(existing.id)

    return client.create(title, public_key, read_only=read_only)
