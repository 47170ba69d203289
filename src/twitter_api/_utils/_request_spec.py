from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Union

from httpx import URL

if TYPE_CHECKING:
    from ..models.responses import RateLimit

RequestQuery = Mapping[str, Any]
RequestBody = Union[Mapping[str, Any], bytes]
RateLimitHook = Callable[[str, "RateLimit"], None]
PayloadIsError = Callable[[Any], bool]


class BodyMode(str, Enum):
    """How a request body is serialized on the wire."""

    URL = "url"
    JSON = "json"
    FORM_DATA = "form-data"
    RAW = "raw"


@dataclass
class RequestParameters:
    """Everything needed to build one request.

    A value is built per call and is never modified by the library: the
    builder works on copies of ``query``, ``body`` and ``headers``.
    """

    url: str
    method: str
    query: RequestQuery = field(default_factory=dict)
    body: Optional[RequestBody] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    force_body_mode: Optional[Union[BodyMode, str]] = None
    enable_auth: bool = True
    params: Mapping[str, Any] = field(default_factory=dict)
    timeout: Optional[float] = None
    enable_rate_limit_save: bool = True
    disable_compression: bool = False
    auto_connect: bool = True
    payload_is_error: Optional[PayloadIsError] = None


@dataclass(frozen=True)
class RequestDescriptor:
    """A fully resolved request, ready for a transport."""

    raw_url: str
    url: URL
    method: str
    headers: dict[str, str]
    body: Union[str, bytes, None] = None


@dataclass(frozen=True)
class RequestData:
    """Input handed to the one-shot executor."""

    url: URL
    method: str
    headers: dict[str, str]
    body: Union[str, bytes, None] = None
    timeout: Optional[float] = None
    compression: bool = True
    rate_limit_key: Optional[str] = None
    on_rate_limit: Optional[RateLimitHook] = None


@dataclass(frozen=True)
class StreamRequestData(RequestData):
    """Input handed to a stream; reusable for every reconnect."""

    payload_is_error: Optional[PayloadIsError] = None
