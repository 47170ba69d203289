import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Optional, Pattern, Union
from urllib.parse import quote, urlencode

from httpx import URL, Request

from ._request_spec import BodyMode, RequestBody
from .constants import (
    CONTENT_TYPE_FORM_URLENCODED,
    CONTENT_TYPE_JSON,
    HEADER_CONTENT_LENGTH,
    HEADER_CONTENT_TYPE,
)

_PATH_PARAMETER = re.compile(r":([A-Za-z_-]+)")
_HAS_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def has_scheme(url: str) -> bool:
    return _HAS_SCHEME.match(url) is not None


def stringify_param(value: Any) -> str:
    """Render a scalar or list the way the API expects it in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify_param(item) for item in value)
    return str(value)


def format_query(query: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """Convert a query mapping to string values, dropping unset (``None``) entries."""
    if not query:
        return {}
    return {
        str(key): stringify_param(value)
        for key, value in query.items()
        if value is not None
    }


def encode_query(params: Mapping[str, str]) -> str:
    """RFC 3986 percent-encoding, shared by query strings and url-encoded bodies."""
    return urlencode(list(params.items()), quote_via=quote)


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (Mapping, list, tuple, bytes, bytearray))


def is_url_encodable(value: Any) -> bool:
    """Scalars and flat lists of scalars; nested mappings and binary values are not."""
    if isinstance(value, (list, tuple)):
        return all(_is_scalar(item) for item in value)
    return _is_scalar(value)


def merge_for_signature(
    query: Mapping[str, str], body: Optional[RequestBody]
) -> dict[str, str]:
    """Union of query and body for an OAuth1 signature; body keys win.

    Values that cannot be url-encoded are left out.
    """
    merged = dict(query)
    if isinstance(body, Mapping):
        for key, value in body.items():
            if value is None or not is_url_encodable(value):
                continue
            merged[str(key)] = stringify_param(value)
    return merged


def trim_undefined(body: Optional[RequestBody]) -> Optional[RequestBody]:
    """Return the body without ``None`` values; raw bytes pass through untouched."""
    if body is None or isinstance(body, (bytes, bytearray)):
        return body
    return {key: value for key, value in body.items() if value is not None}


def apply_path_parameters(url: URL, params: Optional[Mapping[str, Any]]) -> URL:
    """Replace ``:name`` placeholders in the URL path.

    Placeholders without a matching (non-``None``) parameter are kept as-is.
    """
    if not params:
        return url

    def _substitute(match: "re.Match[str]") -> str:
        value = params.get(match.group(1))
        if value is None:
            return match.group(0)
        return quote(stringify_param(value), safe="")

    return url.copy_with(path=_PATH_PARAMETER.sub(_substitute, url.path))


@dataclass(frozen=True)
class BodyModeRule:
    """Maps a URL shape to a body encoding. Unset criteria match anything."""

    mode: BodyMode
    host: Optional[str] = None
    path: Optional[Pattern[str]] = None

    def matches(self, url: URL) -> bool:
        if self.host is not None and url.host != self.host:
            return False
        if self.path is not None and not self.path.search(url.path):
            return False
        return True


JSON_V1_1_ENDPOINTS = (
    "direct_messages/events/new.json",
    "direct_messages/welcome_messages/new.json",
    "direct_messages/welcome_messages/rules/new.json",
    "media/metadata/create.json",
    "collections/entries/curate.json",
)

# First match wins; URLs matching no rule are url-encoded.
BODY_MODE_RULES: tuple[BodyModeRule, ...] = (
    BodyModeRule(BodyMode.URL, path=re.compile(r"^/2/oauth2/")),
    BodyModeRule(BodyMode.JSON, path=re.compile(r"^/(labs/)?2/")),
    BodyModeRule(
        BodyMode.FORM_DATA,
        host="upload.twitter.com",
        path=re.compile(r"^/1\.1/media/upload\.json$"),
    ),
    BodyModeRule(BodyMode.JSON, host="upload.twitter.com"),
    BodyModeRule(
        BodyMode.JSON,
        path=re.compile(
            r"^/1\.1/(" + "|".join(re.escape(e) for e in JSON_V1_1_ENDPOINTS) + r")$"
        ),
    ),
)


def detect_body_type(url: Union[URL, str]) -> BodyMode:
    if isinstance(url, str):
        url = URL(url)
    for rule in BODY_MODE_RULES:
        if rule.matches(url):
            return rule.mode
    return BodyMode.URL


def resolve_body_mode(
    force_body_mode: Union[BodyMode, str, None], url: URL
) -> BodyMode:
    """An explicit mode always wins over URL-based detection."""
    if force_body_mode is not None:
        return BodyMode(force_body_mode)
    return detect_body_type(url)


def set_header(headers: MutableMapping[str, str], name: str, value: str) -> None:
    for key in [k for k in headers if k.lower() == name.lower()]:
        del headers[key]
    headers[name] = value


def _encode_multipart(body: Mapping[str, Any]) -> tuple[bytes, str]:
    files: dict[str, Any] = {}
    for key, value in body.items():
        if isinstance(value, (bytes, bytearray)):
            files[key] = (None, bytes(value), "application/octet-stream")
        else:
            files[key] = (None, stringify_param(value))

    request = Request("POST", "https://upload.twitter.com/", files=files)
    return request.read(), request.headers["Content-Type"]


def encode_body(
    body: Optional[RequestBody],
    headers: MutableMapping[str, str],
    body_mode: Union[BodyMode, str],
) -> Union[str, bytes, None]:
    """Serialize ``body`` for the wire and set the content headers in ``headers``.

    Returns ``None`` when there is nothing to send; content headers are only
    written when a body is returned.

    Raises:
        ValueError: ``raw`` mode was requested for a non-bytes body.
        TypeError: a url-encoded body holds nested or binary values, or a JSON
            body holds values that cannot be serialized.
    """
    body_mode = BodyMode(body_mode)

    if not body:
        return None

    if isinstance(body, (bytes, bytearray)):
        encoded: Union[str, bytes] = bytes(body)
    elif body_mode == BodyMode.RAW:
        raise ValueError("Raw body mode can only be used with a bytes body.")
    elif body_mode == BodyMode.JSON:
        encoded = json.dumps(dict(body), ensure_ascii=False, separators=(",", ":"))
        set_header(headers, HEADER_CONTENT_TYPE, CONTENT_TYPE_JSON)
    elif body_mode == BodyMode.URL:
        invalid = [
            str(key)
            for key, value in body.items()
            if value is not None and not is_url_encodable(value)
        ]
        if invalid:
            raise TypeError(
                f"Body values for {', '.join(invalid)} cannot be url-encoded; "
                "use the json or form-data body mode."
            )
        encoded = encode_query(format_query(body))
        if not encoded:
            return None
        set_header(headers, HEADER_CONTENT_TYPE, CONTENT_TYPE_FORM_URLENCODED)
    else:
        encoded, content_type = _encode_multipart(body)
        set_header(headers, HEADER_CONTENT_TYPE, content_type)

    length = len(encoded.encode("utf-8")) if isinstance(encoded, str) else len(encoded)
    set_header(headers, HEADER_CONTENT_LENGTH, str(length))
    return encoded
