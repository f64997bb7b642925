"""Type definitions for GitHub deploy keys and tool configuration"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DeployKey(BaseModel):
    """JSON representation of a GitHub deploy key.

    Field names match the GitHub REST payload exactly. A key built by the
    caller (or returned for a title that does not exist) has ``id == 0``.
    """
    model_config = ConfigDict(frozen=True)

    id: int = 0
    key: str = ""
    url: str = ""
    title: str = ""
    verified: bool = False
    created_at: str = ""
    read_only: bool = False

    @property
    def exists(self) -> bool:
        """True when the key carries a server-assigned id"""
        return self.id != 0

    def creation_payload(self) -> dict:
        """Body for POST /repos/{owner}/{repo}/keys"""
        return self.model_dump(include={"title", "key", "read_only"})


class Credentials(BaseModel):
    """HTTP Basic auth credentials (username + password or token)"""
    username: str
    password: str = Field(repr=False)

    def as_auth(self) -> tuple[str, str]:
        return (self.username, self.password)


class DeployKeysConfig(BaseModel):
    """Main gh-deploy-keys configuration"""
    version: str
    api_url: str = "https://api.github.com"
    owner: Optional[str] = None
    repo: Optional[str] = None
    username: Optional[str] = None
    password_env: str = "GITHUB_PASSWORD"
    timeout: float = Field(default=30.0, gt=0, description="Transport timeout in seconds")

    @field_validator('version')
    @classmethod
    def validate_version(cls, v):
        """Ensure version is supported"""
        if v not in ["0.1"]:
            raise ValueError(f"Unsupported version: {v}")
        return v

    @field_validator('api_url')
    @classmethod
    def validate_api_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_url must be an http(s) URL: {v}")
        return v.rstrip("/")

    def password(self) -> Optional[str]:
        """Read the password from the configured environment variable"""
        return os.environ.get(self.password_env)
