"""Configuration for the spotilens web client.

All values come from the environment (optionally primed from a ``.env`` file
by the CLI) and are passed explicitly into the app factory and the login
flow; nothing reads the environment at import time.
"""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from typing import Final

from spotilens.auth.errors import ConfigurationError
from spotilens.utils.environment import env_flag, env_int

logger = logging.getLogger("spotilens.config")

DEFAULT_REDIRECT_URI: Final[str] = "http://127.0.0.1:5173/callback"
DEFAULT_SCOPE: Final[str] = (
    "user-read-private user-read-email user-top-read user-read-recently-played"
)
DEFAULT_AUTHORIZE_URL: Final[str] = "https://accounts.spotify.com/authorize"
DEFAULT_TOKEN_URL: Final[str] = "https://accounts.spotify.com/api/token"
DEFAULT_API_BASE_URL: Final[str] = "https://api.spotify.com/v1"

CLIENT_ID_ENV: Final[str] = "SPOTIFY_CLIENT_ID"
_SESSION_SECRET_ENV: Final[str] = "SPOTILENS_SESSION_SECRET"


@dataclass(frozen=True)
class SpotifyConfig:
    """Everything the login flow and the web layer need to know."""

    client_id: str | None
    session_secret: str
    redirect_uri: str = DEFAULT_REDIRECT_URI
    scope: str = DEFAULT_SCOPE
    authorize_url: str = DEFAULT_AUTHORIZE_URL
    token_url: str = DEFAULT_TOKEN_URL
    api_base_url: str = DEFAULT_API_BASE_URL
    verifier_ttl_seconds: int = 600
    secure_cookies: bool = False
    top_artists_limit: int = 10
    recently_played_limit: int = 30

    @classmethod
    def from_env(cls) -> SpotifyConfig:
        """Build a config from ``SPOTIFY_*`` / ``SPOTILENS_*`` variables.

        A missing client id is **not** raised here; it is reported by
        :meth:`require_client_id` when the flow starts, so the page can still
        render the problem as status text.
        """
        session_secret = os.getenv(_SESSION_SECRET_ENV)
        if not session_secret:
            session_secret = secrets.token_urlsafe(32)
            logger.warning(
                "Environment variable %s not set - generated transient secret. "
                "Existing sessions will be invalidated on restart.",
                _SESSION_SECRET_ENV,
            )
        return cls(
            client_id=(os.getenv(CLIENT_ID_ENV) or "").strip() or None,
            session_secret=session_secret,
            redirect_uri=os.getenv("SPOTIFY_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
            scope=os.getenv("SPOTIFY_SCOPE") or DEFAULT_SCOPE,
            authorize_url=(
                os.getenv("SPOTIFY_AUTHORIZE_URL") or DEFAULT_AUTHORIZE_URL
            ).rstrip("/"),
            token_url=os.getenv("SPOTIFY_TOKEN_URL") or DEFAULT_TOKEN_URL,
            api_base_url=(
                os.getenv("SPOTIFY_API_BASE_URL") or DEFAULT_API_BASE_URL
            ).rstrip("/"),
            verifier_ttl_seconds=env_int("SPOTILENS_VERIFIER_TTL_SECONDS", 600),
            secure_cookies=env_flag("SPOTILENS_SECURE_COOKIES"),
            top_artists_limit=env_int("SPOTILENS_TOP_ARTISTS_LIMIT", 10),
            recently_played_limit=env_int("SPOTILENS_RECENTLY_PLAYED_LIMIT", 30),
        )

    def is_configured(self) -> bool:
        return bool(self.client_id)

    def require_client_id(self) -> str:
        """Return the client id or raise :class:`ConfigurationError`."""
        if not self.client_id:
            raise ConfigurationError(f"Missing {CLIENT_ID_ENV} in environment.")
        return self.client_id
