import base64
from urllib.parse import quote


def get_basic_auth_token(client_id: str, client_secret: str) -> str:
    """Base64 ``id:secret`` credential for HTTP Basic, with both parts URL-encoded."""
    raw = f"{quote(client_id, safe='')}:{quote(client_secret, safe='')}"
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")
