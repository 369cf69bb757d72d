# mcp_auth_core/oauth/pkce.py
import base64
import hashlib
import random
import re
import secrets
import string
from typing import Optional

from .models import PKCEChallenge

# RFC 7636 unreserved characters: A-Z, a-z, 0-9, '-', '.', '_', '~'
PKCE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-._~"

# RFC 7636 specifies length between 43 and 128 characters
CODE_VERIFIER_MIN_LENGTH = 43
CODE_VERIFIER_MAX_LENGTH = 128
CODE_VERIFIER_LENGTH = CODE_VERIFIER_MAX_LENGTH

S256 = "S256"

_VERIFIER_RE = re.compile(r"^[A-Za-z0-9._~-]+$")


def generate_code_verifier(
    rng: Optional[random.Random] = None,
    length: int = CODE_VERIFIER_LENGTH,
) -> str:
    """
    Generates a PKCE code verifier of `length` characters drawn uniformly,
    with replacement, from the 66-character unreserved alphabet.
    (RFC 7636 - Section 4.1)

    Without an injected `rng`, a fresh `secrets.SystemRandom` is used for each
    call, so concurrent callers draw from the OS entropy pool independently.
    """
    if not (CODE_VERIFIER_MIN_LENGTH <= length <= CODE_VERIFIER_MAX_LENGTH):
        raise ValueError("PKCE code verifier length must be between 43 and 128 characters.")

    source = rng if rng is not None else secrets.SystemRandom()
    return "".join(source.choice(PKCE_ALPHABET) for _ in range(length))


def generate_code_challenge(code_verifier: str) -> str:
    """
    Derives the S256 code challenge: SHA-256 over the verifier's UTF-8 bytes,
    base64url encoded without padding. (RFC 7636 - Section 4.2)
    """
    digest = hashlib.sha256(code_verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def validate_code_verifier(code_verifier: str, code_challenge: str) -> bool:
    """Checks a presented verifier against the challenge issued with the authorization request."""
    expected = generate_code_challenge(code_verifier)
    # Compared as bytes: compare_digest rejects non-ASCII str input
    return secrets.compare_digest(expected.encode("utf-8"), code_challenge.encode("utf-8"))


def create_pkce_challenge(rng: Optional[random.Random] = None) -> PKCEChallenge:
    """Creates the verifier/challenge pair for a single authorization attempt."""
    verifier = generate_code_verifier(rng)
    return PKCEChallenge(
        code_verifier=verifier,
        code_challenge=generate_code_challenge(verifier),
        challenge_method=S256,
    )


def validate_code_verifier_format(code_verifier: str) -> bool:
    """
    Validates the format of a PKCE code_verifier as per RFC 7636.
    Checks length and allowed characters (A-Z, a-z, 0-9, '-', '.', '_', '~').
    """
    if not (CODE_VERIFIER_MIN_LENGTH <= len(code_verifier) <= CODE_VERIFIER_MAX_LENGTH):
        return False
    return bool(_VERIFIER_RE.fullmatch(code_verifier))
