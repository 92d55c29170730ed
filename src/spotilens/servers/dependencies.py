"""Per-request wiring of the login flow.

Each request gets its own cookie-backed stores, HTML page and navigator; the
long-lived pieces (config, shared ``httpx.AsyncClient``) come from
``app.state``.  After the flow ran, :meth:`PageContext.respond` turns the
outcome into a redirect or an HTML page and writes back changed cookies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from starlette.requests import Request
from starlette.responses import HTMLResponse, RedirectResponse, Response

from spotilens.auth.service import AuthService
from spotilens.auth.store import SessionTokenStore, VerifierStore
from spotilens.config import SpotifyConfig
from spotilens.flow import StartupFlow
from spotilens.servers.cookies import SESSION_COOKIE, VERIFIER_COOKIE, CookieStorage
from spotilens.servers.presentation import HtmlPage
from spotilens.spotify.client import SpotifyApiClient

logger = logging.getLogger("spotilens.server.dependencies")


class RedirectNavigator:
    """Records where the flow wants the browser to go."""

    def __init__(self) -> None:
        self.location: str | None = None

    def assign(self, url: str) -> None:
        self.location = url

    def replace(self, path: str) -> None:
        # A 303 to the clean path drops the one-time code from the address bar.
        self.location = path


@dataclass
class PageContext:
    flow: StartupFlow
    page: HtmlPage
    navigator: RedirectNavigator
    verifier_storage: CookieStorage
    session_storage: CookieStorage

    def respond(self, status_code: int = 200) -> Response:
        response: Response
        if self.navigator.location is not None:
            response = RedirectResponse(self.navigator.location, status_code=303)
        else:
            response = HTMLResponse(self.page.render(), status_code=status_code)
        self.verifier_storage.apply(response)
        self.session_storage.apply(response)
        return response


def get_config(request: Request) -> SpotifyConfig:
    return request.app.state.config


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http


def build_page_context(request: Request) -> PageContext:
    """Assemble stores, services and flow for *request*."""
    config = get_config(request)
    http = get_http_client(request)

    verifier_storage = CookieStorage(
        request,
        cookie_name=VERIFIER_COOKIE,
        secret=config.session_secret,
        max_age=config.verifier_ttl_seconds,
        secure=config.secure_cookies,
    )
    session_storage = CookieStorage(
        request,
        cookie_name=SESSION_COOKIE,
        secret=config.session_secret,
        max_age=None,
        secure=config.secure_cookies,
    )
    verifiers = VerifierStore(verifier_storage)
    tokens = SessionTokenStore(session_storage, verifiers)

    page = HtmlPage()
    navigator = RedirectNavigator()
    flow = StartupFlow(
        config,
        auth=AuthService(config, verifiers, http),
        api=SpotifyApiClient(http, tokens, base_url=config.api_base_url),
        tokens=tokens,
        sink=page,
        navigator=navigator,
        load_after_callback=False,
        correlation_id=getattr(request.state, "correlation_id", None),
    )
    return PageContext(
        flow=flow,
        page=page,
        navigator=navigator,
        verifier_storage=verifier_storage,
        session_storage=session_storage,
    )
