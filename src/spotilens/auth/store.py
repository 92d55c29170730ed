"""Key-value storage capabilities backing the login state.

The login core never talks to cookies directly.  It is handed two
:class:`KeyValueStorage` objects:

* a *cross-navigation* storage that survives the round trip to the identity
  provider (holds the PKCE verifier), and
* a *session* storage that disappears when the browser session ends (holds the
  access token).

Each store below owns exactly one fixed key in its storage.
"""

from __future__ import annotations

from typing import Final, Protocol, runtime_checkable

VERIFIER_KEY: Final[str] = "verifier"
ACCESS_TOKEN_KEY: Final[str] = "access_token"


@runtime_checkable
class KeyValueStorage(Protocol):
    """Minimal string key-value contract (``get/set/remove``)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage, used by tests and as a scratch implementation."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class VerifierStore:
    """Holds the verifier of the single pending login attempt."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def save(self, verifier: str) -> None:
        # Overwrites any previous attempt: at most one verifier is valid.
        self._storage.set(VERIFIER_KEY, verifier)

    def load(self) -> str | None:
        return self._storage.get(VERIFIER_KEY) or None

    def clear(self) -> None:
        self._storage.remove(VERIFIER_KEY)


class SessionTokenStore:
    """Holds the access token for the lifetime of the browser session.

    :meth:`clear` is the logout primitive: it also drops any lingering
    verifier so that logout fully resets the login state.
    """

    def __init__(self, storage: KeyValueStorage, verifiers: VerifierStore) -> None:
        self._storage = storage
        self._verifiers = verifiers

    def set(self, token: str) -> None:
        self._storage.set(ACCESS_TOKEN_KEY, token)

    def get(self) -> str | None:
        return self._storage.get(ACCESS_TOKEN_KEY) or None

    def clear(self) -> None:
        self._storage.remove(ACCESS_TOKEN_KEY)
        self._verifiers.clear()
