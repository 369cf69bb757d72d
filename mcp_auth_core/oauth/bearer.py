# mcp_auth_core/oauth/bearer.py
from typing import Optional

BEARER_SCHEME = "Bearer"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Returns the token from an `Authorization` header value of the exact form
    `Bearer <token>`. The scheme match is case-sensitive; any other shape
    (missing token, extra words, other scheme) yields None.
    """
    if not authorization:
        return None

    words = authorization.split()
    if len(words) == 2 and words[0] == BEARER_SCHEME:
        return words[1]
    return None
