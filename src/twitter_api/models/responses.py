from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .._utils.constants import (
    HEADER_APP_LIMIT_24H_LIMIT,
    HEADER_APP_LIMIT_24H_REMAINING,
    HEADER_APP_LIMIT_24H_RESET,
    HEADER_RATE_LIMIT_LIMIT,
    HEADER_RATE_LIMIT_REMAINING,
    HEADER_RATE_LIMIT_RESET,
    HEADER_USER_LIMIT_24H_LIMIT,
    HEADER_USER_LIMIT_24H_REMAINING,
    HEADER_USER_LIMIT_24H_RESET,
)


def _read_window(
    headers: Mapping[str, str], limit: str, remaining: str, reset: str
) -> Optional[dict[str, int]]:
    if limit not in headers:
        return None
    return {
        "limit": int(headers[limit]),
        "remaining": int(headers.get(remaining, 0)),
        "reset": int(headers.get(reset, 0)),
    }


class DailyRateLimit(BaseModel):
    """A 24-hour quota window."""

    model_config = ConfigDict(frozen=True)

    limit: int
    remaining: int
    reset: int = Field(description="Epoch seconds at which the window resets")


class RateLimit(BaseModel):
    """Rate-limit state reported by the last response for one endpoint."""

    model_config = ConfigDict(frozen=True)

    limit: int
    remaining: int
    reset: int = Field(description="Epoch seconds at which the window resets")
    day: Optional[DailyRateLimit] = Field(
        default=None, description="Application 24-hour limit"
    )
    user_day: Optional[DailyRateLimit] = Field(
        default=None, description="User 24-hour limit"
    )

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> Optional["RateLimit"]:
        """Parse the ``x-rate-limit-*`` family; ``None`` when absent or malformed."""
        lowered = {key.lower(): value for key, value in headers.items()}
        try:
            window = _read_window(
                lowered,
                HEADER_RATE_LIMIT_LIMIT,
                HEADER_RATE_LIMIT_REMAINING,
                HEADER_RATE_LIMIT_RESET,
            )
            if window is None:
                return None
            day = _read_window(
                lowered,
                HEADER_APP_LIMIT_24H_LIMIT,
                HEADER_APP_LIMIT_24H_REMAINING,
                HEADER_APP_LIMIT_24H_RESET,
            )
            user_day = _read_window(
                lowered,
                HEADER_USER_LIMIT_24H_LIMIT,
                HEADER_USER_LIMIT_24H_REMAINING,
                HEADER_USER_LIMIT_24H_RESET,
            )
        except ValueError:
            return None

        return cls(
            **window,
            day=DailyRateLimit(**day) if day else None,
            user_day=DailyRateLimit(**user_day) if user_day else None,
        )


class ApiResponse(BaseModel):
    """Decoded response of a one-shot request."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any = None
    headers: dict[str, str] = Field(default_factory=dict)
    status_code: int
    rate_limit: Optional[RateLimit] = None
