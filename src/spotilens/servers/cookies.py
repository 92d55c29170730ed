"""Signed-cookie implementation of :class:`~spotilens.auth.store.KeyValueStorage`.

One cookie holds one small JSON object signed with itsdangerous.  Two
lifetimes are used:

* ``max_age`` set   - survives the redirect to the provider, then expires
  (verifier storage);
* ``max_age=None``  - a browser-session cookie, dropped when the browser
  session ends (token storage).

Tampered, expired or otherwise unreadable cookies read as empty storage.
"""

from __future__ import annotations

import logging
from typing import Final

from itsdangerous import BadSignature, URLSafeTimedSerializer
from starlette.requests import Request
from starlette.responses import Response

from spotilens.auth.store import KeyValueStorage

_LOG = logging.getLogger("spotilens.server.cookies")

VERIFIER_COOKIE: Final[str] = "spotilens_verifier"
SESSION_COOKIE: Final[str] = "spotilens_session"


def make_serializer(secret: str, cookie_name: str) -> URLSafeTimedSerializer:
    # Salting by cookie name keeps one cookie's value from validating as another.
    return URLSafeTimedSerializer(secret, salt=f"spotilens.{cookie_name}")


class CookieStorage(KeyValueStorage):
    """Key-value view over one signed cookie of the current request."""

    def __init__(
        self,
        request: Request,
        *,
        cookie_name: str,
        secret: str,
        max_age: int | None = None,
        secure: bool = False,
    ) -> None:
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure
        self._serializer = make_serializer(secret, cookie_name)
        self._data: dict[str, str] = self._read(request.cookies.get(cookie_name))
        self._dirty = False

    def _read(self, raw: str | None) -> dict[str, str]:
        if not raw:
            return {}
        try:
            data = self._serializer.loads(raw, max_age=self.max_age)
        except BadSignature:
            # Covers SignatureExpired as well.
            _LOG.debug("Ignoring invalid or expired cookie %s", self.cookie_name)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._dirty = True

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._dirty = True

    def apply(self, response: Response) -> None:
        """Write pending changes to *response* as ``Set-Cookie`` headers."""
        if not self._dirty:
            return
        if self._data:
            response.set_cookie(
                self.cookie_name,
                self._serializer.dumps(self._data),
                max_age=self.max_age,
                path="/",
                secure=self.secure,
                httponly=True,
                samesite="lax",
            )
        else:
            response.delete_cookie(
                self.cookie_name,
                path="/",
                secure=self.secure,
                httponly=True,
                samesite="lax",
            )
