"""Startup orchestration: the page-load state machine.

States::

    UNAUTHENTICATED --(code in URL)--> PENDING_CALLBACK --(exchange ok)--> AUTHENTICATED
    UNAUTHENTICATED --(session token present)------------------------> AUTHENTICATED
    AUTHENTICATED   --(401 from the API | logout)-------------------> UNAUTHENTICATED

Every failure is converted into one status line on the injected
:class:`PresentationSink`; nothing escapes :meth:`StartupFlow.start`.
"""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from spotilens.auth.errors import ConfigurationError, TokenExpiredError
from spotilens.auth.log_utils import get_flow_logger
from spotilens.auth.results import Err, Ok, as_result, capture
from spotilens.auth.service import AuthService, Navigator
from spotilens.auth.store import SessionTokenStore
from spotilens.config import SpotifyConfig
from spotilens.spotify.client import SpotifyApiClient
from spotilens.spotify.models import ArtistSummary, UserProfile, distinct_artists

STATUS_NOT_LOGGED_IN = "Not logged in."
STATUS_LOADING = "Loading…"
STATUS_LOGGED_OUT = "Logged out."


class AuthState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    PENDING_CALLBACK = "pending_callback"
    AUTHENTICATED = "authenticated"


@runtime_checkable
class PresentationSink(Protocol):
    """Narrow rendering interface the flow reports to."""

    def show_status(self, message: str) -> None: ...
    def show_profile(self, profile: UserProfile) -> None: ...
    def show_artist_lists(
        self, top: Sequence[ArtistSummary], recent: Sequence[ArtistSummary]
    ) -> None: ...


def error_status(err: Err) -> str:
    if isinstance(err.error, ConfigurationError):
        return err.detail
    return f"Error: {err.detail}"


class StartupFlow:
    """Drives one page load (or a login/logout action) against the stores."""

    def __init__(
        self,
        config: SpotifyConfig,
        *,
        auth: AuthService,
        api: SpotifyApiClient,
        tokens: SessionTokenStore,
        sink: PresentationSink,
        navigator: Navigator,
        home_path: str = "/",
        load_after_callback: bool = True,
        correlation_id: str | None = None,
    ) -> None:
        self.config = config
        self.auth = auth
        self.api = api
        self.tokens = tokens
        self.sink = sink
        self.navigator = navigator
        self.home_path = home_path
        # The web layer redirects to home_path after the exchange and loads
        # data on that request instead.
        self.load_after_callback = load_after_callback
        self.state = AuthState.UNAUTHENTICATED
        self._log = get_flow_logger(correlation_id=correlation_id)

    def _enter(self, state: AuthState) -> AuthState:
        if state is not self.state:
            self._log.with_state(state.value).debug(
                "Flow transition %s -> %s", self.state.value, state.value
            )
        self.state = state
        return state

    def _fail(self, err: Err, state: AuthState = AuthState.UNAUTHENTICATED) -> AuthState:
        self._log.info("Flow error kind=%s", err.kind)
        self.sink.show_status(error_status(err))
        return self._enter(state)

    def _client_id(self) -> Ok[str] | Err:
        try:
            return Ok(self.config.require_client_id())
        except ConfigurationError as exc:
            return Err(exc)

    # ------------------------------------------------------------------ #
    # Entry points                                                       #
    # ------------------------------------------------------------------ #
    async def start(self, code: str | None = None) -> AuthState:
        """Run the page-load sequence; *code* is the ``?code=`` query value."""
        client_id = self._client_id()
        if isinstance(client_id, Err):
            return self._fail(client_id)

        existing = self.tokens.get()
        if existing:
            # Returning visit in the same session; any code in the URL is stale.
            self._enter(AuthState.AUTHENTICATED)
            if code:
                self.navigator.replace(self.home_path)
                if not self.load_after_callback:
                    return self.state
            return await self.load(existing)

        if not code:
            self.sink.show_status(STATUS_NOT_LOGGED_IN)
            return self._enter(AuthState.UNAUTHENTICATED)

        self._enter(AuthState.PENDING_CALLBACK)
        try:
            exchanged = await capture(self.auth.exchange_code(client_id.value, code))
        finally:
            # Single-use: the verifier is gone whatever the outcome.
            self.auth.verifiers.clear()
        if isinstance(exchanged, Err):
            return self._fail(exchanged)

        self.tokens.set(exchanged.value)
        self.navigator.replace(self.home_path)
        self._enter(AuthState.AUTHENTICATED)
        if not self.load_after_callback:
            return self.state
        return await self.load(exchanged.value)

    async def login(self) -> AuthState:
        """Handle the login affordance; on success the browser leaves the page."""
        client_id = self._client_id()
        if isinstance(client_id, Err):
            return self._fail(client_id)
        begun = await capture(self.auth.begin_login(client_id.value, self.navigator))
        if isinstance(begun, Err):
            return self._fail(begun)
        return self._enter(AuthState.UNAUTHENTICATED)

    def logout(self) -> AuthState:
        """Clear the session (token and verifier) from any state."""
        self.tokens.clear()
        self.sink.show_status(STATUS_LOGGED_OUT)
        return self._enter(AuthState.UNAUTHENTICATED)

    async def load(self, token: str) -> AuthState:
        """Fetch profile, top artists and recent plays concurrently and render."""
        self.sink.show_status(STATUS_LOADING)
        outcomes = await asyncio.gather(
            self.api.fetch_profile(token),
            self.api.fetch_top_artists(token, self.config.top_artists_limit),
            self.api.fetch_recently_played(token, self.config.recently_played_limit),
            return_exceptions=True,
        )
        profile, top, recent = (as_result(o) for o in outcomes)
        failures = [r for r in (profile, top, recent) if isinstance(r, Err)]

        expired = next(
            (f for f in failures if isinstance(f.error, TokenExpiredError)), None
        )
        if expired is not None:
            # Client already cleared the session; sibling results are dropped.
            self.tokens.clear()
            return self._fail(expired)

        if isinstance(profile, Ok):
            self.sink.show_profile(profile.value)
        if failures:
            return self._fail(failures[0], AuthState.AUTHENTICATED)

        user, top_artists, events = (r.value for r in (profile, top, recent))  # type: ignore[union-attr]
        self.sink.show_artist_lists(top_artists, distinct_artists(events))
        self.sink.show_status(f"Logged in as {user.display_name or 'user'}.")
        return self._enter(AuthState.AUTHENTICATED)
