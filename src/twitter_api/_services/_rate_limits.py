from typing import Optional

from ..models.responses import RateLimit


class RateLimitStore:
    """Last rate-limit snapshot seen per endpoint.

    Keys are endpoint URLs without query string. Every save overwrites the
    previous snapshot (last write wins); entries are never evicted.
    """

    def __init__(self) -> None:
        self._rate_limits: dict[str, RateLimit] = {}

    def save(self, endpoint: str, rate_limit: RateLimit) -> None:
        self._rate_limits[endpoint] = rate_limit

    def get(self, endpoint: str) -> Optional[RateLimit]:
        return self._rate_limits.get(endpoint)

    def snapshot(self) -> dict[str, RateLimit]:
        return dict(self._rate_limits)

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._rate_limits

    def __len__(self) -> int:
        return len(self._rate_limits)
