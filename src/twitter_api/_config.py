from os import environ as env
from typing import Optional

from httpx import AsyncClient, Client
from pydantic import BaseModel, ConfigDict, Field

from ._utils.constants import (
    DEFAULT_TIMEOUT,
    ENV_ACCESS_SECRET,
    ENV_ACCESS_TOKEN,
    ENV_API_KEY,
    ENV_API_SECRET,
    ENV_BEARER_TOKEN,
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
)


class CredentialSet(BaseModel):
    """Credentials held by a client.

    Any subset may be set; which one authenticates a request is decided by a
    fixed priority (bearer, basic, client id/secret, OAuth1). The value is
    frozen: rotating a token means building a new set.
    """

    model_config = ConfigDict(frozen=True)

    bearer_token: Optional[str] = Field(default=None, repr=False)
    basic_token: Optional[str] = Field(default=None, repr=False)
    client_id: Optional[str] = None
    client_secret: Optional[str] = Field(default=None, repr=False)
    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = Field(default=None, repr=False)
    access_token: Optional[str] = None
    access_secret: Optional[str] = Field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> "CredentialSet":
        return cls(
            bearer_token=env.get(ENV_BEARER_TOKEN) or None,
            consumer_key=env.get(ENV_API_KEY) or None,
            consumer_secret=env.get(ENV_API_SECRET) or None,
            access_token=env.get(ENV_ACCESS_TOKEN) or None,
            access_secret=env.get(ENV_ACCESS_SECRET) or None,
            client_id=env.get(ENV_CLIENT_ID) or None,
            client_secret=env.get(ENV_CLIENT_SECRET) or None,
        )

    @property
    def auth_strategy(self) -> Optional[str]:
        """Name of the scheme that authenticates requests, ``None`` when unauthenticated."""
        if self.bearer_token:
            return "bearer"
        if self.basic_token:
            return "basic"
        if self.client_id and self.client_secret:
            return "client_credentials"
        if any(
            (
                self.consumer_key,
                self.consumer_secret,
                self.access_token,
                self.access_secret,
            )
        ):
            return "oauth1"
        return None

    @property
    def uses_oauth1(self) -> bool:
        """OAuth1 fields are set and no higher-priority scheme is."""
        return self.auth_strategy == "oauth1"

    def with_bearer_token(self, bearer_token: str) -> "CredentialSet":
        return self.model_copy(update={"bearer_token": bearer_token})


class ClientSettings(BaseModel):
    """Client-wide transport settings.

    ``http_client`` / ``async_http_client`` play the role of a shared
    connection agent; when left unset the request maker creates its own.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    timeout: float = DEFAULT_TIMEOUT
    disable_compression: bool = False
    user_agent: Optional[str] = None
    http_client: Optional[Client] = None
    async_http_client: Optional[AsyncClient] = None
    debug: bool = False
