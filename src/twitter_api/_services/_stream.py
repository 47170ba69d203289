import json
from dataclasses import dataclass
from enum import Enum
from logging import Logger, getLogger
from typing import Any, AsyncIterator, Iterator, Optional

from httpx import AsyncClient, Client, HTTPError, RequestError, Response, Timeout
from tenacity import (
    AsyncRetrying,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .._utils._request_spec import PayloadIsError, StreamRequestData
from .._utils.constants import DEFAULT_TIMEOUT
from ..models.errors import ApiRequestError, ApiStreamError
from ._request_handler import (
    build_http_request,
    decode_payload,
    raise_for_api_error,
    save_rate_limit,
)


# Streams stay open indefinitely; only connecting is bounded.
STREAM_TIMEOUT = Timeout(DEFAULT_TIMEOUT, read=None)


class StreamEventType(str, Enum):
    DATA = "data"
    DATA_ERROR = "data error"
    KEEP_ALIVE = "data keep-alive"
    PARSE_ERROR = "parse error"


@dataclass(frozen=True)
class StreamEvent:
    type: StreamEventType
    payload: Any = None


def parse_stream_line(
    line: str, payload_is_error: Optional[PayloadIsError] = None
) -> StreamEvent:
    """Classify one line of a newline-delimited JSON stream."""
    if not line.strip():
        return StreamEvent(StreamEventType.KEEP_ALIVE)

    try:
        payload = json.loads(line)
    except ValueError:
        return StreamEvent(StreamEventType.PARSE_ERROR, line)

    if payload_is_error is not None and payload_is_error(payload):
        return StreamEvent(StreamEventType.DATA_ERROR, payload)
    return StreamEvent(StreamEventType.DATA, payload)


def _retrying_kwargs(max_connect_attempts: int, logger: Logger) -> dict[str, Any]:
    def _log_retry(retry_state) -> None:
        logger.warning(
            f"Stream connection failed, reconnecting "
            f"(attempt {retry_state.attempt_number}/{max_connect_attempts})"
        )

    return {
        "stop": stop_after_attempt(max_connect_attempts),
        "wait": wait_exponential(multiplier=1, min=1, max=10),
        "retry": retry_if_exception_type(ApiRequestError),
        "before_sleep": _log_retry,
        "reraise": True,
    }


def _filter_data(event: StreamEvent, logger: Logger) -> bool:
    if event.type == StreamEventType.DATA:
        return True
    if event.type == StreamEventType.DATA_ERROR:
        logger.warning(f"Stream delivered an error payload: {event.payload}")
    elif event.type == StreamEventType.PARSE_ERROR:
        logger.warning(f"Could not decode stream line: {event.payload!r}")
    return False


class ApiStream:
    """A long-lived streaming response.

    The stream keeps the full request data, so :meth:`reconnect` replays the
    identical request. Connection attempts are not retried unless
    ``max_connect_attempts`` is greater than one.

    Examples:
        ```python
        with client.v2.get_stream("tweets/search/stream") as stream:
            for tweet in stream:
                print(tweet["data"]["text"])
        ```
    """

    def __init__(
        self,
        request_data: StreamRequestData,
        client: Client,
        *,
        max_connect_attempts: int = 1,
    ) -> None:
        self._logger = getLogger("twitter_api")
        self.request_data = request_data
        self._client = client
        self._max_connect_attempts = max_connect_attempts
        self._response: Optional[Response] = None

    @property
    def is_connected(self) -> bool:
        return self._response is not None and not self._response.is_closed

    def connect(self) -> "ApiStream":
        if self.is_connected:
            raise ApiStreamError("Stream is already connected.")

        for attempt in Retrying(
            **_retrying_kwargs(self._max_connect_attempts, self._logger)
        ):
            with attempt:
                self._response = self._open()
        return self

    def reconnect(self) -> "ApiStream":
        self.close()
        return self.connect()

    def close(self) -> None:
        if self._response is not None:
            self._response.close()
            self._response = None

    def events(self) -> Iterator[StreamEvent]:
        if self._response is None:
            raise ApiStreamError("Stream is not connected, call connect() first.")

        try:
            for line in self._response.iter_lines():
                yield parse_stream_line(line, self.request_data.payload_is_error)
        except RequestError as e:
            raise ApiRequestError(f"Stream connection lost: {e}", e) from e

    def __iter__(self) -> Iterator[Any]:
        for event in self.events():
            if _filter_data(event, self._logger):
                yield event.payload

    def __enter__(self) -> "ApiStream":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _open(self) -> Response:
        request = build_http_request(
            self._client, self.request_data, timeout=STREAM_TIMEOUT
        )
        self._logger.debug(f"Stream request: {request.method} {request.url}")

        try:
            response = self._client.send(request, stream=True)
        except RequestError as e:
            raise ApiRequestError(f"Stream connection failed: {e}", e) from e

        rate_limit = save_rate_limit(self.request_data, response)
        if response.status_code >= 400:
            payload = None
            try:
                response.read()
                payload = decode_payload(response)
            except HTTPError:
                self._logger.debug("Could not read stream error body")
            finally:
                response.close()
            raise_for_api_error(response, payload, rate_limit)

        return response


class AsyncApiStream:
    """Asynchronous counterpart of :class:`ApiStream`."""

    def __init__(
        self,
        request_data: StreamRequestData,
        client: AsyncClient,
        *,
        max_connect_attempts: int = 1,
    ) -> None:
        self._logger = getLogger("twitter_api")
        self.request_data = request_data
        self._client = client
        self._max_connect_attempts = max_connect_attempts
        self._response: Optional[Response] = None

    @property
    def is_connected(self) -> bool:
        return self._response is not None and not self._response.is_closed

    async def connect(self) -> "AsyncApiStream":
        if self.is_connected:
            raise ApiStreamError("Stream is already connected.")

        async for attempt in AsyncRetrying(
            **_retrying_kwargs(self._max_connect_attempts, self._logger)
        ):
            with attempt:
                self._response = await self._open()
        return self

    async def reconnect(self) -> "AsyncApiStream":
        await self.close()
        return await self.connect()

    async def close(self) -> None:
        if self._response is not None:
            await self._response.aclose()
            self._response = None

    async def events(self) -> AsyncIterator[StreamEvent]:
        if self._response is None:
            raise ApiStreamError("Stream is not connected, call connect() first.")

        try:
            async for line in self._response.aiter_lines():
                yield parse_stream_line(line, self.request_data.payload_is_error)
        except RequestError as e:
            raise ApiRequestError(f"Stream connection lost: {e}", e) from e

    async def __aiter__(self) -> AsyncIterator[Any]:
        async for event in self.events():
            if _filter_data(event, self._logger):
                yield event.payload

    async def __aenter__(self) -> "AsyncApiStream":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _open(self) -> Response:
        request = build_http_request(
            self._client, self.request_data, timeout=STREAM_TIMEOUT
        )
        self._logger.debug(f"Stream request: {request.method} {request.url}")

        try:
            response = await self._client.send(request, stream=True)
        except RequestError as e:
            raise ApiRequestError(f"Stream connection failed: {e}", e) from e

        rate_limit = save_rate_limit(self.request_data, response)
        if response.status_code >= 400:
            payload = None
            try:
                await response.aread()
                payload = decode_payload(response)
            except HTTPError:
                self._logger.debug("Could not read stream error body")
            finally:
                await response.aclose()
            raise_for_api_error(response, payload, rate_limit)

        return response
