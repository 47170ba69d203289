import json
from logging import getLogger
from typing import Any, Optional, Union

from httpx import (
    AsyncClient,
    Client,
    HTTPError,
    Request,
    RequestError,
    Response,
    Timeout,
)

from .._utils._request_spec import RequestData
from .._utils.constants import HEADER_ACCEPT_ENCODING
from ..models.errors import (
    ApiPartialResponseError,
    ApiRequestError,
    ApiResponseError,
)
from ..models.responses import ApiResponse, RateLimit


def build_http_request(
    client: Union[Client, AsyncClient],
    data: RequestData,
    timeout: Union[Timeout, float, None] = None,
) -> Request:
    """Turn executor input into an ``httpx.Request`` bound to ``client``.

    ``timeout`` overrides the per-request timeout carried by ``data``.
    """
    headers = dict(data.headers)
    if not data.compression:
        headers[HEADER_ACCEPT_ENCODING] = "identity"

    kwargs: dict[str, Any] = {"headers": headers, "content": data.body}
    if timeout is None:
        timeout = data.timeout
    if timeout is not None:
        kwargs["timeout"] = timeout

    return client.build_request(data.method, data.url, **kwargs)


def save_rate_limit(data: RequestData, response: Response) -> Optional[RateLimit]:
    """Parse the rate-limit headers and report them through ``on_rate_limit``."""
    rate_limit = RateLimit.from_headers(response.headers)
    if (
        rate_limit is not None
        and data.on_rate_limit is not None
        and data.rate_limit_key is not None
    ):
        data.on_rate_limit(data.rate_limit_key, rate_limit)
    return rate_limit


def decode_payload(response: Response, content: Optional[bytes] = None) -> Any:
    """JSON when the server says so, text otherwise, ``None`` for an empty body."""
    if content is None:
        content = response.content
    if not content:
        return None

    text = content.decode(response.encoding or "utf-8", errors="replace")
    if "json" in response.headers.get("content-type", ""):
        try:
            return json.loads(text)
        except ValueError:
            return text
    return text


def raise_for_api_error(
    response: Response, payload: Any, rate_limit: Optional[RateLimit]
) -> None:
    if response.status_code >= 400:
        raise ApiResponseError(
            status_code=response.status_code,
            data=payload,
            headers=dict(response.headers),
            rate_limit=rate_limit,
        )


def _partial_response_error(
    response: Response,
    content: bytes,
    rate_limit: Optional[RateLimit],
    error: BaseException,
) -> ApiPartialResponseError:
    return ApiPartialResponseError(
        f"Response body stream was interrupted: {error}",
        status_code=response.status_code,
        headers=dict(response.headers),
        raw_content=content,
        rate_limit=rate_limit,
        response_error=error,
    )


class RequestHandler:
    """Executes one request and wraps the decoded response.

    Rate-limit headers are reported before the status is checked, so error
    responses update the store too. Failures are never retried here.
    """

    def __init__(
        self,
        client: Optional[Client] = None,
        async_client: Optional[AsyncClient] = None,
    ) -> None:
        self._logger = getLogger("twitter_api")
        self._client = client
        self._async_client = async_client

    def make_request(self, data: RequestData) -> ApiResponse:
        if self._client is None:
            raise ValueError("A synchronous httpx client is required.")

        request = build_http_request(self._client, data)
        self._logger.debug(f"Request: {request.method} {request.url}")

        try:
            response = self._client.send(request, stream=True)
        except RequestError as e:
            raise ApiRequestError(f"Request failed: {e}", e) from e

        try:
            rate_limit = save_rate_limit(data, response)
            content = bytearray()
            try:
                for chunk in response.iter_bytes():
                    content.extend(chunk)
            except HTTPError as e:
                raise _partial_response_error(
                    response, bytes(content), rate_limit, e
                ) from e
        finally:
            response.close()

        return self._wrap(response, bytes(content), rate_limit)

    async def make_request_async(self, data: RequestData) -> ApiResponse:
        if self._async_client is None:
            raise ValueError("An asynchronous httpx client is required.")

        request = build_http_request(self._async_client, data)
        self._logger.debug(f"Request: {request.method} {request.url}")

        try:
            response = await self._async_client.send(request, stream=True)
        except RequestError as e:
            raise ApiRequestError(f"Request failed: {e}", e) from e

        try:
            rate_limit = save_rate_limit(data, response)
            content = bytearray()
            try:
                async for chunk in response.aiter_bytes():
                    content.extend(chunk)
            except HTTPError as e:
                raise _partial_response_error(
                    response, bytes(content), rate_limit, e
                ) from e
        finally:
            await response.aclose()

        return self._wrap(response, bytes(content), rate_limit)

    def _wrap(
        self, response: Response, content: bytes, rate_limit: Optional[RateLimit]
    ) -> ApiResponse:
        self._logger.debug(f"Response: {response.status_code} {response.url}")
        payload = decode_payload(response, content)
        raise_for_api_error(response, payload, rate_limit)

        return ApiResponse(
            data=payload,
            headers=dict(response.headers),
            status_code=response.status_code,
            rate_limit=rate_limit,
        )
