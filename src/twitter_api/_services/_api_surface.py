from typing import Any, Mapping, Optional

from .._utils._params import has_scheme
from .._utils._request_spec import RequestBody, RequestParameters
from ..models.responses import ApiResponse, RateLimit
from ._request_maker import RequestMaker
from ._stream import ApiStream, AsyncApiStream


class ReadOnlyApiSurface:
    """Read access to one API version.

    A surface is a URL prefix plus the request maker it delegates to; it holds
    no request state of its own. Relative URLs are resolved against the
    prefix, absolute ones are used as-is.

    Examples:
        ```python
        from twitter_api import TwitterApi

        client = TwitterApi(bearer_token="...")

        me = client.v2.get("users/by/username/:username", params={"username": "jack"})
        ```
    """

    def __init__(self, request_maker: RequestMaker, prefix: str) -> None:
        self._request_maker = request_maker
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def resolve_url(self, url: str, prefix: Optional[str] = None) -> str:
        if has_scheme(url):
            return url
        return (prefix if prefix is not None else self._prefix) + url.lstrip("/")

    def get_last_rate_limit(
        self, endpoint: str, prefix: Optional[str] = None
    ) -> Optional[RateLimit]:
        """Last rate limit reported for ``endpoint`` (path parameters unresolved)."""
        return self._request_maker.rate_limits.get(self.resolve_url(endpoint, prefix))

    def get(
        self,
        url: str,
        query: Optional[Mapping[str, Any]] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        """Send a GET request.

        Args:
            url (str): Endpoint path relative to the surface prefix, or an absolute URL.
            query (Optional[Mapping[str, Any]]): Query parameters; ``None`` values are dropped.
            full_response (bool): Return the :class:`ApiResponse` instead of its data.
            prefix (Optional[str]): Override the surface prefix for this call.
            **options (Any): Any other :class:`RequestParameters` field
                (``headers``, ``params``, ``timeout``, ``enable_auth``...).

        Returns:
            Any: The decoded response data, or the full response.
        """
        return self._send("GET", url, query, None, full_response, prefix, options)

    async def get_async(
        self,
        url: str,
        query: Optional[Mapping[str, Any]] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        return await self._send_async(
            "GET", url, query, None, full_response, prefix, options
        )

    def get_stream(
        self,
        url: str,
        query: Optional[Mapping[str, Any]] = None,
        *,
        prefix: Optional[str] = None,
        max_connect_attempts: int = 1,
        **options: Any,
    ) -> ApiStream:
        """Open a GET stream; pass ``auto_connect=False`` to connect later."""
        params = self._parameters("GET", url, query, None, prefix, options)
        return self._request_maker.send_stream(
            params, max_connect_attempts=max_connect_attempts
        )

    async def get_stream_async(
        self,
        url: str,
        query: Optional[Mapping[str, Any]] = None,
        *,
        prefix: Optional[str] = None,
        max_connect_attempts: int = 1,
        **options: Any,
    ) -> AsyncApiStream:
        params = self._parameters("GET", url, query, None, prefix, options)
        return await self._request_maker.send_stream_async(
            params, max_connect_attempts=max_connect_attempts
        )

    def _parameters(
        self,
        method: str,
        url: str,
        query: Optional[Mapping[str, Any]],
        body: Optional[RequestBody],
        prefix: Optional[str],
        options: dict[str, Any],
    ) -> RequestParameters:
        return RequestParameters(
            url=self.resolve_url(url, prefix),
            method=method,
            query=query or {},
            body=body,
            **options,
        )

    def _send(
        self,
        method: str,
        url: str,
        query: Optional[Mapping[str, Any]],
        body: Optional[RequestBody],
        full_response: bool,
        prefix: Optional[str],
        options: dict[str, Any],
    ) -> Any:
        params = self._parameters(method, url, query, body, prefix, options)
        response = self._request_maker.send(params)
        return response if full_response else response.data

    async def _send_async(
        self,
        method: str,
        url: str,
        query: Optional[Mapping[str, Any]],
        body: Optional[RequestBody],
        full_response: bool,
        prefix: Optional[str],
        options: dict[str, Any],
    ) -> Any:
        params = self._parameters(method, url, query, body, prefix, options)
        response: ApiResponse = await self._request_maker.send_async(params)
        return response if full_response else response.data


class ApiSurface(ReadOnlyApiSurface):
    """Read and write access to one API version."""

    @property
    def read_only(self) -> ReadOnlyApiSurface:
        return ReadOnlyApiSurface(self._request_maker, self._prefix)

    def delete(
        self,
        url: str,
        query: Optional[Mapping[str, Any]] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        return self._send("DELETE", url, query, None, full_response, prefix, options)

    async def delete_async(
        self,
        url: str,
        query: Optional[Mapping[str, Any]] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        return await self._send_async(
            "DELETE", url, query, None, full_response, prefix, options
        )

    def post(
        self,
        url: str,
        body: Optional[RequestBody] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        """Send a POST request.

        The body encoding is picked from the URL unless ``force_body_mode``
        is given; a ``bytes`` body is sent unchanged.
        """
        query = options.pop("query", None)
        return self._send("POST", url, query, body, full_response, prefix, options)

    async def post_async(
        self,
        url: str,
        body: Optional[RequestBody] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        query = options.pop("query", None)
        return await self._send_async(
            "POST", url, query, body, full_response, prefix, options
        )

    def put(
        self,
        url: str,
        body: Optional[RequestBody] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        query = options.pop("query", None)
        return self._send("PUT", url, query, body, full_response, prefix, options)

    async def put_async(
        self,
        url: str,
        body: Optional[RequestBody] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        query = options.pop("query", None)
        return await self._send_async(
            "PUT", url, query, body, full_response, prefix, options
        )

    def patch(
        self,
        url: str,
        body: Optional[RequestBody] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        query = options.pop("query", None)
        return self._send("PATCH", url, query, body, full_response, prefix, options)

    async def patch_async(
        self,
        url: str,
        body: Optional[RequestBody] = None,
        *,
        full_response: bool = False,
        prefix: Optional[str] = None,
        **options: Any,
    ) -> Any:
        query = options.pop("query", None)
        return await self._send_async(
            "PATCH", url, query, body, full_response, prefix, options
        )

    def post_stream(
        self,
        url: str,
        body: Optional[RequestBody] = None,
        *,
        prefix: Optional[str] = None,
        max_connect_attempts: int = 1,
        **options: Any,
    ) -> ApiStream:
        query = options.pop("query", None)
        params = self._parameters("POST", url, query, body, prefix, options)
        return self._request_maker.send_stream(
            params, max_connect_attempts=max_connect_attempts
        )

    async def post_stream_async(
        self,
        url: str,
        body: Optional[RequestBody] = None,
        *,
        prefix: Optional[str] = None,
        max_connect_attempts: int = 1,
        **options: Any,
    ) -> AsyncApiStream:
        query = options.pop("query", None)
        params = self._parameters("POST", url, query, body, prefix, options)
        return await self._request_maker.send_stream_async(
            params, max_connect_attempts=max_connect_attempts
        )
