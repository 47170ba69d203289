from logging import getLogger
from typing import Any, Callable, Mapping, Optional

from httpx import URL, AsyncClient, Client

from .._config import ClientSettings, CredentialSet
from .._utils._oauth1 import OAuth1Signer, OAuth1Token
from .._utils._oauth2 import get_basic_auth_token
from .._utils._params import (
    apply_path_parameters,
    encode_body,
    encode_query,
    format_query,
    has_scheme,
    merge_for_signature,
    resolve_body_mode,
    set_header,
    trim_undefined,
)
from .._utils._request_spec import (
    BodyMode,
    RequestBody,
    RequestData,
    RequestDescriptor,
    RequestParameters,
    StreamRequestData,
)
from .._utils._ssl_context import get_httpx_client_kwargs
from .._utils._user_agent import user_agent_value
from .._utils.constants import BODY_METHODS, HEADER_AUTHORIZATION, HEADER_USER_AGENT
from ..models.errors import InvalidConsumerTokensError
from ..models.responses import ApiResponse
from ._rate_limits import RateLimitStore
from ._request_handler import RequestHandler
from ._stream import ApiStream, AsyncApiStream


class RequestMaker:
    """Builds authenticated requests and hands them to the transport.

    One instance is owned by each client. It holds an immutable
    :class:`CredentialSet`, the client settings, the rate-limit store and the
    httpx clients; rotating credentials yields a new maker sharing the store
    and the connections (see :meth:`with_credentials`).

    Raises:
        InvalidConsumerTokensError: OAuth1 credentials were given without both
            a consumer key and a consumer secret.
    """

    def __init__(
        self,
        credentials: CredentialSet,
        settings: Optional[ClientSettings] = None,
        *,
        rate_limits: Optional[RateLimitStore] = None,
        oauth_nonce_factory: Optional[Callable[[], str]] = None,
        oauth_clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._logger = getLogger("twitter_api")
        self._credentials = credentials
        self._settings = settings or ClientSettings()
        self.rate_limits = rate_limits if rate_limits is not None else RateLimitStore()

        self._oauth: Optional[OAuth1Signer] = None
        if credentials.uses_oauth1:
            self._oauth = self._build_oauth(oauth_nonce_factory, oauth_clock)

        client_kwargs = get_httpx_client_kwargs(self._settings.timeout)
        self._owns_client = self._settings.http_client is None
        self._owns_async_client = self._settings.async_http_client is None
        self.client: Client = self._settings.http_client or Client(**client_kwargs)
        self.client_async: AsyncClient = self._settings.async_http_client or AsyncClient(
            **client_kwargs
        )

    @property
    def credentials(self) -> CredentialSet:
        return self._credentials

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    def with_credentials(self, credentials: CredentialSet) -> "RequestMaker":
        """A maker for ``credentials`` that shares this maker's store and connections."""
        settings = self._settings.model_copy(
            update={
                "http_client": self.client,
                "async_http_client": self.client_async,
            }
        )
        return RequestMaker(credentials, settings, rate_limits=self.rate_limits)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    async def aclose(self) -> None:
        if self._owns_async_client:
            await self.client_async.aclose()

    # Sending

    def send(self, params: RequestParameters) -> ApiResponse:
        """Build the request and execute it once.

        Raises:
            ApiRequestError: The request could not be sent.
            ApiPartialResponseError: The response body was cut off.
            ApiResponseError: The API answered with an error status.
        """
        descriptor = self.build_request(params)
        data = self._request_data(params, descriptor, RequestData, timeout=params.timeout)
        return RequestHandler(client=self.client).make_request(data)

    async def send_async(self, params: RequestParameters) -> ApiResponse:
        descriptor = self.build_request(params)
        data = self._request_data(params, descriptor, RequestData, timeout=params.timeout)
        return await RequestHandler(async_client=self.client_async).make_request_async(
            data
        )

    def send_stream(
        self, params: RequestParameters, *, max_connect_attempts: int = 1
    ) -> ApiStream:
        """Build the request and open it as a stream.

        With ``params.auto_connect`` left on the stream is returned connected;
        otherwise it is returned unconnected and :meth:`ApiStream.connect`
        must be called.
        """
        descriptor = self.build_request(params)
        data = self._request_data(
            params,
            descriptor,
            StreamRequestData,
            payload_is_error=params.payload_is_error,
        )
        stream = ApiStream(data, self.client, max_connect_attempts=max_connect_attempts)

        if not params.auto_connect:
            return stream
        return stream.connect()

    async def send_stream_async(
        self, params: RequestParameters, *, max_connect_attempts: int = 1
    ) -> AsyncApiStream:
        descriptor = self.build_request(params)
        data = self._request_data(
            params,
            descriptor,
            StreamRequestData,
            payload_is_error=params.payload_is_error,
        )
        stream = AsyncApiStream(
            data, self.client_async, max_connect_attempts=max_connect_attempts
        )

        if not params.auto_connect:
            return stream
        return await stream.connect()

    def _request_data(
        self,
        params: RequestParameters,
        descriptor: RequestDescriptor,
        data_type: type[RequestData],
        **extra: Any,
    ) -> Any:
        enable_rate_limit_save = params.enable_rate_limit_save
        compression_disabled = (
            params.disable_compression or self._settings.disable_compression
        )

        return data_type(
            url=descriptor.url,
            method=descriptor.method,
            headers=descriptor.headers,
            body=descriptor.body,
            compression=not compression_disabled,
            rate_limit_key=descriptor.raw_url if enable_rate_limit_save else None,
            on_rate_limit=self.rate_limits.save if enable_rate_limit_save else None,
            **extra,
        )

    # Building

    def build_request(self, params: RequestParameters) -> RequestDescriptor:
        """Resolve URL, headers and body for ``params``.

        Auth headers are computed from the logical query and body, before the
        body is encoded; the body is encoded afterwards so content headers
        never take part in the signature.
        """
        method = params.method.upper()
        headers = dict(params.headers or {})
        if not any(key.lower() == HEADER_USER_AGENT for key in headers):
            headers[HEADER_USER_AGENT] = self._settings.user_agent or user_agent_value()

        url = params.url
        if not has_scheme(url):
            url = "https://" + url

        url_object = URL(url)
        # endpoint identity: origin + path, path parameters left unresolved
        raw_url = str(url_object.copy_with(query=None, fragment=None))

        url_object = apply_path_parameters(url_object, params.params)

        query = format_query(params.query)
        for key, value in url_object.params.multi_items():
            query[key] = value
        url_object = url_object.copy_with(query=None, fragment=None)

        body = trim_undefined(params.body)
        body_mode = resolve_body_mode(params.force_body_mode, url_object)

        if params.enable_auth:
            # OAuth1 only signs the body when it is url-encoded.
            body_in_signature = method in BODY_METHODS and body_mode == BodyMode.URL
            headers = self.write_auth_headers(
                headers,
                body_in_signature=body_in_signature,
                method=method,
                url=url_object,
                query=query,
                body=body,
            )

        encoded_body = None
        if method in BODY_METHODS:
            encoded_body = encode_body(body, headers, body_mode)

        if query:
            url_object = url_object.copy_with(query=encode_query(query).encode("ascii"))

        self._logger.debug(f"Built request: {method} {url_object}")

        return RequestDescriptor(
            raw_url=raw_url,
            url=url_object,
            method=method,
            headers=headers,
            body=encoded_body,
        )

    def write_auth_headers(
        self,
        headers: Mapping[str, str],
        *,
        body_in_signature: bool,
        method: str,
        url: URL,
        query: Mapping[str, str],
        body: Optional[RequestBody],
    ) -> dict[str, str]:
        """Return ``headers`` plus the single Authorization header for these credentials.

        Priority: bearer token, basic token, OAuth2 client id/secret, OAuth1.
        A caller Authorization header in any casing is replaced. Without any
        credentials the headers are returned unchanged.
        """
        headers = dict(headers)
        credentials = self._credentials

        if credentials.bearer_token:
            set_header(
                headers, HEADER_AUTHORIZATION, f"Bearer {credentials.bearer_token}"
            )
        elif credentials.basic_token:
            # used to exchange credentials for a bearer token
            set_header(
                headers, HEADER_AUTHORIZATION, f"Basic {credentials.basic_token}"
            )
        elif credentials.client_id and credentials.client_secret:
            token = get_basic_auth_token(credentials.client_id, credentials.client_secret)
            set_header(headers, HEADER_AUTHORIZATION, f"Basic {token}")
        elif credentials.consumer_secret and self._oauth is not None:
            data = merge_for_signature(query, body) if body_in_signature else dict(query)
            oauth_params = self._oauth.authorize(
                str(url), method, data, self._access_token()
            )
            for name, value in self._oauth.to_header(oauth_params).items():
                set_header(headers, name, value)

        return headers

    def _build_oauth(
        self,
        nonce_factory: Optional[Callable[[], str]],
        clock: Optional[Callable[[], float]],
    ) -> OAuth1Signer:
        credentials = self._credentials
        if not credentials.consumer_key or not credentials.consumer_secret:
            raise InvalidConsumerTokensError()

        signer_kwargs: dict[str, Any] = {}
        if nonce_factory is not None:
            signer_kwargs["nonce_factory"] = nonce_factory
        if clock is not None:
            signer_kwargs["clock"] = clock

        return OAuth1Signer(
            OAuth1Token(credentials.consumer_key, credentials.consumer_secret),
            **signer_kwargs,
        )

    def _access_token(self) -> Optional[OAuth1Token]:
        credentials = self._credentials
        if not credentials.access_token or not credentials.access_secret:
            return None
        return OAuth1Token(credentials.access_token, credentials.access_secret)
