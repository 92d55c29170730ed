"""Shared fixtures: a fake Spotify (accounts + Web API) behind httpx.MockTransport."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from spotilens.auth.store import MemoryStorage, SessionTokenStore, VerifierStore
from spotilens.config import SpotifyConfig

CLIENT_ID = "abc123"
REDIRECT_URI = "http://127.0.0.1:5173/callback"
ACCESS_TOKEN = "access-xyz"

PROFILE: dict[str, Any] = {
    "id": "user-1",
    "display_name": "Ada",
    "email": "ada@example.com",
    "uri": "spotify:user:user-1",
    "href": "https://api.spotify.com/v1/users/user-1",
    "external_urls": {"spotify": "https://open.spotify.com/user/user-1"},
    "images": [{"url": "https://i.scdn.co/image/ada", "height": 300, "width": 300}],
    "country": "GB",
    "product": "premium",
    "followers": {"href": None, "total": 7},
}


def _artist(name: str) -> dict[str, Any]:
    slug = name.lower().replace(" ", "-")
    return {"name": name, "external_urls": {"spotify": f"https://open.spotify.com/artist/{slug}"}}


TOP_ARTISTS: dict[str, Any] = {
    "items": [_artist("Radiohead"), _artist("Bjork")],
    "total": 2,
    "limit": 10,
    "offset": 0,
}

RECENTLY_PLAYED: dict[str, Any] = {
    "items": [
        {"played_at": "2024-05-01T10:00:00Z", "track": {"name": "One", "artists": [_artist("Low"), _artist("Bjork")]}},
        {"played_at": "2024-05-01T09:55:00Z", "track": {"name": "Two", "artists": [_artist("Bjork")]}},
        {"played_at": "2024-05-01T09:50:00Z", "track": {"name": "Three", "artists": [_artist("Slowdive"), _artist("Low")]}},
    ],
}


class FakeSpotify:
    """Callable MockTransport handler recording every request it sees."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token_reply: tuple[int, Any] = (
            200,
            {"access_token": ACCESS_TOKEN, "token_type": "Bearer", "expires_in": 3600},
        )
        self.api_replies: dict[str, tuple[int, Any]] = {
            "/v1/me": (200, PROFILE),
            "/v1/me/top/artists": (200, TOP_ARTISTS),
            "/v1/me/player/recently-played": (200, RECENTLY_PLAYED),
        }

    @staticmethod
    def _build(reply: tuple[int, Any]) -> httpx.Response:
        status, body = reply
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST" and request.url.path == "/api/token":
            return self._build(self.token_reply)
        reply = self.api_replies.get(request.url.path)
        if reply is None:
            return httpx.Response(404, text="not found")
        return self._build(reply)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    @property
    def token_requests(self) -> list[httpx.Request]:
        return self.requests_to("/api/token")


def pytest_addoption(parser):
    """Add integration option to pytest."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def config() -> SpotifyConfig:
    return SpotifyConfig(
        client_id=CLIENT_ID,
        session_secret="test-session-secret",
        redirect_uri=REDIRECT_URI,
    )


@pytest.fixture
def fake_spotify() -> FakeSpotify:
    return FakeSpotify()


@pytest.fixture
def http_client(fake_spotify: FakeSpotify) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_spotify))


@pytest.fixture
def verifier_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def session_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def verifiers(verifier_storage: MemoryStorage) -> VerifierStore:
    return VerifierStore(verifier_storage)


@pytest.fixture
def tokens(session_storage: MemoryStorage, verifiers: VerifierStore) -> SessionTokenStore:
    return SessionTokenStore(session_storage, verifiers)
