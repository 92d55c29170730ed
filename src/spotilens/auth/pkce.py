"""PKCE (Proof Key for Code Exchange) helpers.

RFC 7636 defines PKCE to protect public OAuth clients.  The mechanism relies on
a *code verifier* (random high-entropy string) generated at the beginning of
the flow and a *code challenge* derived from that verifier that is sent to the
authorization endpoint.

Only the S256 transformation is implemented because Spotify (and virtually
every modern provider) requires it.

This module intentionally performs **no logging** of verifiers or challenges.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
import string
from typing import Final

from spotilens.auth.errors import ConfigurationError

# 64 characters from a 62-symbol alphabet is ~381 bits of entropy.
VERIFIER_LENGTH: Final[int] = 64
ALPHABET: Final[str] = string.ascii_letters + string.digits


def random_string(length: int) -> str:
    """Return *length* characters drawn from :data:`ALPHABET`.

    Uses :mod:`secrets`; a non-cryptographic source would make verifiers
    predictable and defeat PKCE.
    """
    if length < 1:
        raise ValueError("length must be a positive integer")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def generate_code_verifier(length: int = VERIFIER_LENGTH) -> str:
    """Generate a code verifier (43-128 characters, default 64)."""
    if not 43 <= length <= 128:
        raise ValueError("code verifier length must be 43-128 characters")
    return random_string(length)


def code_challenge_s256(verifier: str) -> str:
    """Compute the *S256* PKCE code challenge for a given verifier.

    Parameters
    ----------
    verifier:
        The code verifier string (hashed as UTF-8).

    Returns
    -------
    str
        Base64url-encoded SHA-256 hash without padding.

    Raises
    ------
    ConfigurationError
        If the interpreter was built without SHA-256 support.
    """
    try:
        hasher = hashlib.new("sha256")
    except ValueError as exc:  # pragma: no cover - broken OpenSSL builds only
        raise ConfigurationError("SHA-256 is not available in this environment") from exc
    hasher.update(verifier.encode("utf-8"))
    return base64.urlsafe_b64encode(hasher.digest()).rstrip(b"=").decode("ascii")


async def derive_code_challenge(verifier: str) -> str:
    """Awaitable form of :func:`code_challenge_s256` used by the login flow."""
    return code_challenge_s256(verifier)
