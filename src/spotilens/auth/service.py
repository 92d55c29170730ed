"""PKCE login service: the two legs of the Authorization Code flow.

``begin_login`` persists a fresh verifier and sends the browser to the
provider; ``exchange_code`` trades the returned authorization code plus the
stored verifier for an access token.  Persisting the token and clearing the
verifier afterwards is the caller's job (see :mod:`spotilens.flow`).

**No secrets are logged**: verifiers, challenges, codes and tokens only ever
appear masked.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from urllib.parse import urlencode

import httpx

from spotilens.auth.errors import ConfigurationError, MissingVerifierError, TokenExchangeError
from spotilens.auth.pkce import derive_code_challenge, generate_code_verifier
from spotilens.auth.store import VerifierStore
from spotilens.utils.logging import mask_sensitive

if TYPE_CHECKING:  # pragma: no cover
    from spotilens.config import SpotifyConfig

_LOG = logging.getLogger("spotilens.auth.service")


@runtime_checkable
class Navigator(Protocol):
    """Moves the browser elsewhere (the web layer turns this into redirects)."""

    def assign(self, url: str) -> None:
        """Leave the current page for *url*."""

    def replace(self, path: str) -> None:
        """Swap the current address for *path* without keeping a history entry."""


class AuthService:
    """Authorization Redirector and Token Exchanger for one client."""

    def __init__(
        self,
        config: SpotifyConfig,
        verifiers: VerifierStore,
        http: httpx.AsyncClient,
    ) -> None:
        self.config = config
        self.verifiers = verifiers
        self._http = http

    # ------------------------------------------------------------------ #
    # Leg 1: authorization redirect                                      #
    # ------------------------------------------------------------------ #
    async def build_authorize_url(self, client_id: str) -> str:
        """Create and persist a verifier, then return the authorize URL."""
        if not client_id:
            raise ConfigurationError("client id must be a non-empty string")

        verifier = generate_code_verifier()
        self.verifiers.save(verifier)
        challenge = await derive_code_challenge(verifier)

        query_params: dict[str, str] = {
            "client_id": client_id,
            "response_type": "code",
            "redirect_uri": self.config.redirect_uri,
            "scope": self.config.scope,
            "code_challenge_method": "S256",
            "code_challenge": challenge,
        }
        url = f"{self.config.authorize_url}?{urlencode(query_params)}"
        _LOG.debug(
            "Built authorize URL verifier=%s challenge=%s",
            mask_sensitive(verifier),
            mask_sensitive(challenge),
        )
        return url

    async def begin_login(self, client_id: str, navigator: Navigator) -> None:
        """Start a login attempt; control leaves the page via *navigator*."""
        url = await self.build_authorize_url(client_id)
        _LOG.info("Redirecting to authorization endpoint %s", self.config.authorize_url)
        navigator.assign(url)

    # ------------------------------------------------------------------ #
    # Leg 2: code exchange                                               #
    # ------------------------------------------------------------------ #
    async def exchange_code(self, client_id: str, code: str) -> str:
        """Exchange *code* for an access token.

        Raises
        ------
        MissingVerifierError
            No verifier is stored; no request is sent.
        TokenExchangeError
            The request failed in transport (status 0), the token endpoint
            answered non-2xx, or the body lacks ``access_token``.  Never retried: codes are single-use.
        """
        verifier = self.verifiers.load()
        if not verifier:
            raise MissingVerifierError()

        payload: dict[str, str] = {
            "client_id": client_id,
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.config.redirect_uri,
            "code_verifier": verifier,
        }
        try:
            resp = await self._http.post(
                self.config.token_url,
                data=payload,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as exc:
            _LOG.warning("Token request failed: %s", exc)
            raise TokenExchangeError(0, str(exc), f"Token request failed: {exc}") from exc
        if not resp.is_success:
            _LOG.warning(
                "Token endpoint returned %s for code=%s",
                resp.status_code,
                mask_sensitive(code),
            )
            raise TokenExchangeError(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError:
            raise TokenExchangeError(
                resp.status_code, resp.text, "Token response is not valid JSON"
            ) from None
        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(access_token, str) or not access_token:
            raise TokenExchangeError(
                resp.status_code, resp.text, "Token response missing access_token"
            )

        _LOG.info(
            "Exchanged authorization code=%s (expires in %ss)",
            mask_sensitive(code),
            data.get("expires_in", "?"),
        )
        return access_token
