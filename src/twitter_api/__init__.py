from ._config import ClientSettings, CredentialSet
from ._services import (
    ApiStream,
    ApiSurface,
    AsyncApiStream,
    RateLimitStore,
    ReadOnlyApiSurface,
    RequestMaker,
    StreamEvent,
    StreamEventType,
)
from ._twitter_api import ReadOnlyTwitterApi, TwitterApi
from ._utils import BodyMode, RequestDescriptor, RequestParameters
from .models import (
    ApiPartialResponseError,
    ApiRequestError,
    ApiResponse,
    ApiResponseError,
    ApiStreamError,
    InvalidConsumerTokensError,
    RateLimit,
    TwitterApiError,
)

__all__ = [
    "ApiPartialResponseError",
    "ApiRequestError",
    "ApiResponse",
    "ApiResponseError",
    "ApiStream",
    "ApiStreamError",
    "ApiSurface",
    "AsyncApiStream",
    "BodyMode",
    "ClientSettings",
    "CredentialSet",
    "InvalidConsumerTokensError",
    "RateLimit",
    "RateLimitStore",
    "ReadOnlyApiSurface",
    "ReadOnlyTwitterApi",
    "RequestDescriptor",
    "RequestMaker",
    "RequestParameters",
    "StreamEvent",
    "StreamEventType",
    "TwitterApi",
    "TwitterApiError",
]
