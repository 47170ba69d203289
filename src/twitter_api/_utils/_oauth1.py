"""OAuth 1.0a request signing (RFC 5849, HMAC-SHA1)."""

import base64
import hashlib
import hmac
import secrets
import string
import time
from dataclasses import dataclass
from typing import Callable, Mapping, Optional
from urllib.parse import quote

from .constants import HEADER_AUTHORIZATION

_NONCE_ALPHABET = string.ascii_letters + string.digits


def percent_encode(value: str) -> str:
    """RFC 3986 encoding: everything but unreserved characters is escaped."""
    return quote(value, safe="~")


def generate_nonce(length: int = 32) -> str:
    return "".join(secrets.choice(_NONCE_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class OAuth1Token:
    key: str
    secret: str


class OAuth1Signer:
    """Signs requests for one consumer (application) key pair.

    ``nonce_factory`` and ``clock`` default to random nonces and the wall
    clock; pass fixed callables to get reproducible signatures.
    """

    SIGNATURE_METHOD = "HMAC-SHA1"
    VERSION = "1.0"

    def __init__(
        self,
        consumer: OAuth1Token,
        *,
        nonce_factory: Callable[[], str] = generate_nonce,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.consumer = consumer
        self._nonce_factory = nonce_factory
        self._clock = clock

    def authorize(
        self,
        url: str,
        method: str,
        data: Optional[Mapping[str, str]] = None,
        token: Optional[OAuth1Token] = None,
    ) -> dict[str, str]:
        """Compute the ``oauth_*`` parameters, including ``oauth_signature``.

        Without ``token`` the request is signed two-legged (consumer only).
        """
        oauth_params = {
            "oauth_consumer_key": self.consumer.key,
            "oauth_nonce": self._nonce_factory(),
            "oauth_signature_method": self.SIGNATURE_METHOD,
            "oauth_timestamp": str(int(self._clock())),
            "oauth_version": self.VERSION,
        }
        if token is not None:
            oauth_params["oauth_token"] = token.key

        base_string = self.signature_base_string(
            method, url, {**(data or {}), **oauth_params}
        )
        oauth_params["oauth_signature"] = self.sign(
            base_string, token.secret if token is not None else None
        )
        return oauth_params

    def to_header(self, oauth_params: Mapping[str, str]) -> dict[str, str]:
        header = ", ".join(
            f'{percent_encode(key)}="{percent_encode(value)}"'
            for key, value in sorted(oauth_params.items())
            if key.startswith("oauth_")
        )
        return {HEADER_AUTHORIZATION: f"OAuth {header}"}

    @staticmethod
    def signature_base_string(
        method: str, url: str, params: Mapping[str, str]
    ) -> str:
        encoded = sorted(
            (percent_encode(str(key)), percent_encode(str(value)))
            for key, value in params.items()
        )
        normalized = "&".join(f"{key}={value}" for key, value in encoded)
        return "&".join(
            [method.upper(), percent_encode(url), percent_encode(normalized)]
        )

    def sign(self, base_string: str, token_secret: Optional[str] = None) -> str:
        key = (
            f"{percent_encode(self.consumer.secret)}&"
            f"{percent_encode(token_secret or '')}"
        )
        digest = hmac.new(
            key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1
        ).digest()
        return base64.b64encode(digest).decode("ascii")
