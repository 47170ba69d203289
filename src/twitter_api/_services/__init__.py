from ._api_surface import ApiSurface, ReadOnlyApiSurface
from ._rate_limits import RateLimitStore
from ._request_handler import RequestHandler
from ._request_maker import RequestMaker
from ._stream import ApiStream, AsyncApiStream, StreamEvent, StreamEventType

__all__ = [
    "ApiStream",
    "ApiSurface",
    "AsyncApiStream",
    "RateLimitStore",
    "ReadOnlyApiSurface",
    "RequestHandler",
    "RequestMaker",
    "StreamEvent",
    "StreamEventType",
]
