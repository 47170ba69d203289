from typing import Any, Optional

from .responses import RateLimit


class TwitterApiError(Exception):
    """Base class for every error raised by the library."""


class InvalidConsumerTokensError(TwitterApiError):
    def __init__(
        self,
        message="Invalid consumer tokens: OAuth1 signing requires both a consumer key and a consumer secret.",
    ):
        self.message = message
        super().__init__(self.message)


class ApiRequestError(TwitterApiError):
    """The request failed before any response was received."""

    def __init__(self, message: str, request_error: Optional[BaseException] = None):
        self.message = message
        self.request_error = request_error
        super().__init__(self.message)


class ApiPartialResponseError(TwitterApiError):
    """The connection was lost while the response body was being read."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        headers: dict[str, str],
        raw_content: bytes = b"",
        rate_limit: Optional[RateLimit] = None,
        response_error: Optional[BaseException] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.headers = headers
        self.raw_content = raw_content
        self.rate_limit = rate_limit
        self.response_error = response_error
        super().__init__(self.message)


class ApiResponseError(TwitterApiError):
    """The server answered with an HTTP error status.

    ``errors`` holds the API error objects: v1.1 puts them under ``errors``;
    v2 problem responses are a single object with ``title``/``detail``.
    """

    def __init__(
        self,
        *,
        status_code: int,
        data: Any = None,
        headers: Optional[dict[str, str]] = None,
        rate_limit: Optional[RateLimit] = None,
    ):
        self.status_code = status_code
        self.data = data
        self.headers = headers or {}
        self.rate_limit = rate_limit
        self.message = self._build_message()
        super().__init__(self.message)

    def _build_message(self) -> str:
        message = f"Request failed with code {self.status_code}"
        errors = self.errors
        if errors:
            first = errors[0]
            if "message" in first:
                message += f" - {first['message']}"
                if "code" in first:
                    message += f" (Twitter code {first['code']})"
            elif "title" in first:
                message += f" - {first['title']}"
                if first.get("detail"):
                    message += f": {first['detail']}"
        return message

    @property
    def errors(self) -> list[dict[str, Any]]:
        if not isinstance(self.data, dict):
            return []
        errors = self.data.get("errors")
        if isinstance(errors, list):
            return [e for e in errors if isinstance(e, dict)]
        if "title" in self.data:
            return [self.data]
        return []

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401

    @property
    def is_rate_limit_error(self) -> bool:
        return self.status_code == 429

    def has_error_code(self, *codes: int) -> bool:
        return any(error.get("code") in codes for error in self.errors)


class ApiStreamError(TwitterApiError):
    """A stream operation was used in the wrong connection state."""
