from .errors import (
    ApiPartialResponseError,
    ApiRequestError,
    ApiResponseError,
    ApiStreamError,
    InvalidConsumerTokensError,
    TwitterApiError,
)
from .responses import ApiResponse, DailyRateLimit, RateLimit

__all__ = [
    "ApiPartialResponseError",
    "ApiRequestError",
    "ApiResponse",
    "ApiResponseError",
    "ApiStreamError",
    "DailyRateLimit",
    "InvalidConsumerTokensError",
    "RateLimit",
    "TwitterApiError",
]
