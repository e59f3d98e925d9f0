# fitbit_tcx/fitbit/pkce.py
"""
PKCE (RFC 7636) value generation and the anti-forgery "state" string.
All randomness comes from the secrets module.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
import string

from ..errors import EmptyInput, InvalidLength

# RFC 3986 unreserved characters
UNRESERVED_CHARS = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-._~"
STATE_CHARS = string.ascii_lowercase + string.digits + string.ascii_uppercase

VERIFIER_MIN_LENGTH = 43
VERIFIER_MAX_LENGTH = 128
STATE_LENGTH = 32


def generate_code_verifier(length: int = VERIFIER_MIN_LENGTH) -> str:
    """
    Generate a PKCE code verifier.

    Args:
        length: Number of characters, 43 to 128 inclusive

    Returns:
        Random string over the unreserved alphabet

    Raises:
        InvalidLength: length outside [43, 128]
    """
    if length < VERIFIER_MIN_LENGTH or length > VERIFIER_MAX_LENGTH:
        raise InvalidLength(
            f"code verifier length must be between {VERIFIER_MIN_LENGTH} "
            f"and {VERIFIER_MAX_LENGTH} characters"
        )
    return "".join(secrets.choice(UNRESERVED_CHARS) for _ in range(length))


def generate_code_challenge(verifier: str) -> str:
    """Return the S256 code challenge (unpadded base64url SHA-256) of a verifier."""
    if not verifier:
        raise EmptyInput("empty code verifier string")
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def generate_random_string(length: int = STATE_LENGTH) -> str:
    """Random alphanumeric string used as the OAuth "state" value."""
    return "".join(secrets.choice(STATE_CHARS) for _ in range(length))
