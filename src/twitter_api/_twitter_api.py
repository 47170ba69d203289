from logging import getLogger
from typing import Any, Optional

from dotenv import load_dotenv

from ._config import ClientSettings, CredentialSet
from ._services import ApiSurface, RateLimitStore, ReadOnlyApiSurface, RequestMaker
from ._utils import BodyMode, RequestParameters, get_basic_auth_token, setup_logging
from ._utils.constants import API_V1_1_PREFIX, API_V2_PREFIX, OAUTH2_TOKEN_URL
from .models.errors import InvalidConsumerTokensError, TwitterApiError
from .models.responses import ApiResponse, RateLimit


class ReadOnlyTwitterApi:
    """Read-only view of a client: only GET requests and GET streams."""

    def __init__(self, request_maker: RequestMaker) -> None:
        self._request_maker = request_maker

    @property
    def v1(self) -> ReadOnlyApiSurface:
        return ReadOnlyApiSurface(self._request_maker, API_V1_1_PREFIX)

    @property
    def v2(self) -> ReadOnlyApiSurface:
        return ReadOnlyApiSurface(self._request_maker, API_V2_PREFIX)

    @property
    def rate_limits(self) -> RateLimitStore:
        return self._request_maker.rate_limits

    def get_last_rate_limit(self, endpoint: str) -> Optional[RateLimit]:
        return self._request_maker.rate_limits.get(endpoint)


class TwitterApi(ReadOnlyTwitterApi):
    """Entry point of the library.

    Credentials can be given field by field or as a :class:`CredentialSet`.
    Which one authenticates a request follows a fixed priority: bearer token,
    basic token, OAuth2 client id/secret, then OAuth1 (app key/secret, with
    the access token/secret when both are set).

    Examples:
        ```python
        from twitter_api import TwitterApi

        client = TwitterApi(
            app_key="...", app_secret="...", access_token="...", access_secret="..."
        )
        client.v1.post("statuses/update.json", {"status": "Hello"})

        app_client = client.app_login()
        app_client.v2.get("tweets/search/recent", {"query": "python"})
        ```
    """

    def __init__(
        self,
        *,
        bearer_token: Optional[str] = None,
        app_key: Optional[str] = None,
        app_secret: Optional[str] = None,
        access_token: Optional[str] = None,
        access_secret: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        credentials: Optional[CredentialSet] = None,
        settings: Optional[ClientSettings] = None,
        debug: bool = False,
    ) -> None:
        if credentials is None:
            credentials = CredentialSet(
                bearer_token=bearer_token,
                consumer_key=app_key,
                consumer_secret=app_secret,
                access_token=access_token,
                access_secret=access_secret,
                client_id=client_id,
                client_secret=client_secret,
            )

        settings = settings or ClientSettings(debug=debug)
        if settings.debug:
            setup_logging(settings.debug)

        log = getLogger("twitter_api")
        log.debug(f"AUTH STRATEGY: {credentials.auth_strategy or 'none'}")

        super().__init__(RequestMaker(credentials, settings))

    @classmethod
    def from_env(cls, settings: Optional[ClientSettings] = None) -> "TwitterApi":
        """Build a client from ``TWITTER_*`` environment variables (``.env`` is loaded)."""
        load_dotenv()
        return cls(credentials=CredentialSet.from_env(), settings=settings)

    @classmethod
    def _from_request_maker(cls, request_maker: RequestMaker) -> "TwitterApi":
        client = cls.__new__(cls)
        ReadOnlyTwitterApi.__init__(client, request_maker)
        return client

    @property
    def credentials(self) -> CredentialSet:
        return self._request_maker.credentials

    @property
    def request_maker(self) -> RequestMaker:
        return self._request_maker

    @property
    def v1(self) -> ApiSurface:
        return ApiSurface(self._request_maker, API_V1_1_PREFIX)

    @property
    def v2(self) -> ApiSurface:
        return ApiSurface(self._request_maker, API_V2_PREFIX)

    @property
    def read_only(self) -> ReadOnlyTwitterApi:
        return ReadOnlyTwitterApi(self._request_maker)

    def with_bearer_token(self, bearer_token: str) -> "TwitterApi":
        """A client using ``bearer_token``; store and connections are shared."""
        return self._from_request_maker(
            self._request_maker.with_credentials(
                self.credentials.with_bearer_token(bearer_token)
            )
        )

    def app_login(self) -> "TwitterApi":
        """Exchange the app key/secret for an app-only bearer token.

        Raises:
            InvalidConsumerTokensError: No app key/secret are configured.
            TwitterApiError: The token endpoint did not return a bearer token.
        """
        basic_maker = self._basic_request_maker()
        response = basic_maker.send(self._token_request())
        return self._with_app_token(response)

    async def app_login_async(self) -> "TwitterApi":
        basic_maker = self._basic_request_maker()
        response = await basic_maker.send_async(self._token_request())
        return self._with_app_token(response)

    def close(self) -> None:
        self._request_maker.close()

    async def aclose(self) -> None:
        await self._request_maker.aclose()

    def __enter__(self) -> "TwitterApi":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _basic_request_maker(self) -> RequestMaker:
        credentials = self.credentials
        if not credentials.consumer_key or not credentials.consumer_secret:
            raise InvalidConsumerTokensError(
                "App login requires both an app key and an app secret."
            )
        basic_token = get_basic_auth_token(
            credentials.consumer_key, credentials.consumer_secret
        )
        return self._request_maker.with_credentials(
            CredentialSet(basic_token=basic_token)
        )

    @staticmethod
    def _token_request() -> RequestParameters:
        return RequestParameters(
            url=OAUTH2_TOKEN_URL,
            method="POST",
            body={"grant_type": "client_credentials"},
            force_body_mode=BodyMode.URL,
        )

    def _with_app_token(self, response: ApiResponse) -> "TwitterApi":
        data = response.data
        if not isinstance(data, dict) or data.get("token_type") != "bearer":
            raise TwitterApiError(
                "Unexpected token type returned by the OAuth2 token endpoint."
            )
        return self._from_request_maker(
            self._request_maker.with_credentials(
                CredentialSet(bearer_token=data["access_token"])
            )
        )
