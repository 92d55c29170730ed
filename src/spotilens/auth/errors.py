"""Exception types raised by the PKCE login core and the Spotify API client.

Only lightweight, **data-carrying** exceptions live here so that the web layer
can turn them into a single status line (``status_message``) or a JSON payload
(``to_payload``) without ever touching secrets.
"""

from __future__ import annotations

from typing import Any, ClassVar


class SpotilensError(Exception):
    """Base class for every failure the startup orchestration knows about."""

    kind: ClassVar[str] = "error"

    @property
    def status_message(self) -> str:
        """Human-readable line shown to the user."""
        return str(self)

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload **without secrets**."""
        return {"error": self.kind, "message": self.status_message}


class ConfigurationError(SpotilensError):
    """Raised when required configuration (the client id) is missing."""

    kind = "configuration_error"


class MissingVerifierError(SpotilensError):
    """Raised when a token exchange is attempted without a stored verifier."""

    kind = "missing_verifier"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Missing verifier. Click login again.")


class _HttpFailure(SpotilensError):
    """Shared shape for failures that carry an HTTP status and response body."""

    def __init__(self, status: int, body: str, message: str | None = None) -> None:
        super().__init__(message or f"{status}: {body}")
        self.status: int = status
        self.body: str = body

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["status"] = self.status
        payload["body"] = self.body
        return payload


class TokenExchangeError(_HttpFailure):
    """Raised when the token endpoint rejects an authorization code.

    Authorization codes are single-use, so this is never retried.
    """

    kind = "token_exchange_failed"

    def __init__(self, status: int, body: str, message: str | None = None) -> None:
        super().__init__(status, body, message or f"Token error: {status} {body}")


class TokenExpiredError(SpotilensError):
    """Raised when the resource API answers 401; the session is already cleared."""

    kind = "token_expired"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Token expired. Please log in again.")


class ApiError(_HttpFailure):
    """Raised for any other non-2xx answer or a structurally malformed body."""

    kind = "api_error"
