# mcp_auth_core/oauth/claims.py
import base64
import binascii
import json
import logging
import re
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from .errors import InvalidBase64Error, PayloadParseError, TokenExpiredError, TokenNotYetValidError
from .models import TokenInfo, unix_timestamp

logger = logging.getLogger(__name__)

_BASE64URL_UNPADDED_RE = re.compile(r"^[A-Za-z0-9_-]*$")


def _b64url_decode_unpadded(segment: str) -> bytes:
    if not _BASE64URL_UNPADDED_RE.fullmatch(segment) or len(segment) % 4 == 1:
        raise InvalidBase64Error()
    try:
        return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except (binascii.Error, ValueError) as e:
        raise InvalidBase64Error() from e


def decode_jwt_payload(payload_segment: str) -> TokenInfo:
    """
    Reads the claims from the payload segment of a compact JWT.

    The signature is NOT verified: a successfully parsed payload is reported as
    `active=True` meaning "well-formed", never "authenticated".

    Raises:
        InvalidBase64Error: the segment is not unpadded base64url
        PayloadParseError: the decoded bytes are not a JSON object of valid claims
    """
    raw = _b64url_decode_unpadded(payload_segment)

    try:
        claims = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as e:
        raise PayloadParseError() from e

    if not isinstance(claims, dict):
        raise PayloadParseError()

    try:
        token_info = TokenInfo.model_validate({**claims, "active": True})
    except ValidationError as e:
        logger.debug(f"JWT payload claims rejected: {e.error_count()} validation error(s).")
        raise PayloadParseError() from e

    return token_info


def validate_token_claims(token_info: TokenInfo, now: Optional[datetime] = None) -> None:
    """
    Checks the time-bound claims against `now` (defaults to the current UTC time).

    `exp` is checked first, then `nbf`; each fails with its own error.
    """
    now_ts = unix_timestamp(now)

    if token_info.exp is not None and now_ts > token_info.exp:
        raise TokenExpiredError()

    if token_info.nbf is not None and now_ts < token_info.nbf:
        raise TokenNotYetValidError()
