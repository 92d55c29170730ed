"""Starlette application factory for spotilens."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from spotilens.config import SpotifyConfig
from spotilens.servers.auth import register_auth_routes
from spotilens.servers.correlation import CorrelationIdMiddleware

logger = logging.getLogger("spotilens.server.main")


async def health_check(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_app(
    config: SpotifyConfig | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> Starlette:
    """Build the ASGI app.

    *http_client* is used for every outbound call when given (tests pass one
    with a mock transport); otherwise the lifespan owns a client and closes it
    on shutdown.
    """
    config = config or SpotifyConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info("spotilens lifespan starting...")
        if not config.is_configured():
            logger.warning(
                "SPOTIFY_CLIENT_ID is not set; login is disabled until it is configured."
            )
        owned: httpx.AsyncClient | None = None
        if app.state.http is None:
            owned = httpx.AsyncClient()
            app.state.http = owned
        try:
            yield
        finally:
            if owned is not None:
                await owned.aclose()
                app.state.http = None
            logger.info("spotilens lifespan shutdown complete.")

    app = Starlette(
        middleware=[Middleware(CorrelationIdMiddleware)],
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.http = http_client
    app.add_route("/healthz", health_check, methods=["GET"])
    register_auth_routes(app)
    return app
