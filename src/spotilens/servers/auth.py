"""Page and login endpoints.

Handlers are intentionally thin:

1. Build the per-request flow (see :mod:`spotilens.servers.dependencies`).
2. Delegate to ``StartupFlow``.
3. Turn the outcome into a redirect or an HTML page.

SECURITY NOTE
-------------
- No raw secrets (verifiers, codes, access tokens) are ever logged.
- Correlation IDs, if present in ``request.state.correlation_id``, are included
  in INFO logs to aid troubleshooting.

This module is HTTP-only and MUST remain free from login logic.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response

from spotilens.servers.dependencies import PageContext, build_page_context

_LOG = logging.getLogger("spotilens.server.routes")


async def _guarded(
    request: Request, action: Callable[[PageContext], Awaitable[object]]
) -> Response:
    """Run *action* and render; unexpected failures become a status line."""
    ctx = build_page_context(request)
    try:
        await action(ctx)
    except Exception as exc:  # broad: mapped to user-visible failure
        _LOG.error(
            "Unhandled error correlation_id=%s: %s",
            getattr(request.state, "correlation_id", "-"),
            exc,
            exc_info=True,
        )
        ctx.navigator.location = None
        ctx.page.show_status(f"Error: {exc}")
        return ctx.respond(status_code=500)
    return ctx.respond()


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def register_auth_routes(app: Starlette) -> None:
    """Attach the page, callback, login and logout endpoints to *app*."""

    # ----- GET / and GET /callback ---------------------------------------- #
    async def _page(request: Request) -> Response:
        code = request.query_params.get("code")
        oauth_error = request.query_params.get("error")
        if oauth_error:
            _LOG.info(
                "Authorization denied error=%s correlation_id=%s",
                oauth_error,
                getattr(request.state, "correlation_id", "-"),
            )

        async def _start(ctx: PageContext) -> object:
            return await ctx.flow.start(code)

        return await _guarded(request, _start)

    # ----- GET|POST /login ------------------------------------------------- #
    async def _login(request: Request) -> Response:
        _LOG.info(
            "Login requested correlation_id=%s",
            getattr(request.state, "correlation_id", "-"),
        )

        async def _begin(ctx: PageContext) -> object:
            return await ctx.flow.login()

        return await _guarded(request, _begin)

    # ----- GET|POST /logout ------------------------------------------------ #
    async def _logout(request: Request) -> Response:
        _LOG.info(
            "Logout correlation_id=%s",
            getattr(request.state, "correlation_id", "-"),
        )

        async def _clear(ctx: PageContext) -> object:
            return ctx.flow.logout()

        return await _guarded(request, _clear)

    app.add_route("/", _page, methods=["GET"])
    app.add_route("/callback", _page, methods=["GET"])
    app.add_route("/login", _login, methods=["GET", "POST"])
    app.add_route("/logout", _logout, methods=["GET", "POST"])
