"""Bearer-authenticated client for the Spotify Web API.

Every read goes through :meth:`SpotifyApiClient.call`, which owns the token
expiry contract: a 401 clears the session (token *and* verifier) before
raising :class:`TokenExpiredError`, so callers never retry with a dead token.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import urlencode

import httpx

from spotilens.auth.errors import ApiError, TokenExpiredError
from spotilens.auth.store import SessionTokenStore
from spotilens.spotify.models import (
    ArtistSummary,
    RecentPlayEvent,
    UserProfile,
    paging_items,
)

_LOG = logging.getLogger("spotilens.spotify.client")

T = TypeVar("T")


class SpotifyApiClient:
    """Thin async wrapper around the resource endpoints used by the page."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        session: SessionTokenStore,
        *,
        base_url: str = "https://api.spotify.com/v1",
    ) -> None:
        self._http = http
        self._session = session
        self.base_url = base_url.rstrip("/")

    def _url(self, path: str, **params: Any) -> str:
        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    async def call(self, token: str, url: str, parse: Callable[[Any], T]) -> T:
        """GET *url* with *token* and map the JSON body through *parse*.

        Raises
        ------
        TokenExpiredError
            On HTTP 401, after logging out.
        ApiError
            On a transport failure (status 0), any other non-2xx status, or
            when the body is not JSON or does not have the shape *parse*
            expects.
        """
        try:
            resp = await self._http.get(url, headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as exc:
            _LOG.warning("Request to %s failed: %s", url, exc)
            raise ApiError(0, str(exc), f"Request to {url} failed: {exc}") from exc

        if resp.status_code == 401:
            _LOG.info("Access token rejected by %s; clearing session", url)
            self._session.clear()
            raise TokenExpiredError()

        if not resp.is_success:
            raise ApiError(resp.status_code, resp.text)

        try:
            return parse(resp.json())
        except (ValueError, TypeError, KeyError) as exc:
            _LOG.warning("Malformed response from %s: %s", url, exc)
            raise ApiError(
                resp.status_code, resp.text, f"Malformed response from {url}: {exc}"
            ) from exc

    # ------------------------------------------------------------------ #
    # Endpoints                                                          #
    # ------------------------------------------------------------------ #
    async def fetch_profile(self, token: str) -> UserProfile:
        return await self.call(token, self._url("me"), UserProfile.from_api)

    async def fetch_top_artists(self, token: str, limit: int = 10) -> list[ArtistSummary]:
        url = self._url("me/top/artists", limit=limit, time_range="medium_term")
        return await self.call(
            token,
            url,
            lambda body: [
                ArtistSummary.from_api(a) for a in paging_items(body, "top artists")
            ],
        )

    async def fetch_recently_played(
        self, token: str, limit: int = 20
    ) -> list[RecentPlayEvent]:
        url = self._url("me/player/recently-played", limit=limit)
        return await self.call(
            token,
            url,
            lambda body: [
                RecentPlayEvent.from_api(i)
                for i in paging_items(body, "recently played")
            ],
        )
