from ._logs import setup_logging
from ._oauth1 import OAuth1Signer, OAuth1Token
from ._oauth2 import get_basic_auth_token
from ._request_spec import (
    BodyMode,
    RequestData,
    RequestDescriptor,
    RequestParameters,
    StreamRequestData,
)
from ._ssl_context import get_httpx_client_kwargs
from ._user_agent import user_agent_value

__all__ = [
    "BodyMode",
    "OAuth1Signer",
    "OAuth1Token",
    "RequestData",
    "RequestDescriptor",
    "RequestParameters",
    "StreamRequestData",
    "get_basic_auth_token",
    "get_httpx_client_kwargs",
    "setup_logging",
    "user_agent_value",
]
