"""Tests for the HTTP surface: page, login, callback, logout and health."""

from __future__ import annotations

import dataclasses
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from starlette.testclient import TestClient

from spotilens.auth.pkce import code_challenge_s256
from spotilens.config import SpotifyConfig
from spotilens.servers.cookies import SESSION_COOKIE, VERIFIER_COOKIE
from spotilens.servers.main import create_app


@pytest.fixture
def client(config: SpotifyConfig, http_client: httpx.AsyncClient):
    app = create_app(config, http_client=http_client)
    with TestClient(app) as tc:
        yield tc


def _set_cookie(resp: httpx.Response, name: str) -> str | None:
    for header in resp.headers.get_list("set-cookie"):
        if header.startswith(f"{name}="):
            return header
    return None


def _login_and_callback(client: TestClient) -> httpx.Response:
    client.post("/login", follow_redirects=False)
    return client.get("/callback", params={"code": "the-code"}, follow_redirects=False)


def test_health_and_correlation_header(client: TestClient) -> None:
    resp = client.get("/healthz", headers={"X-Correlation-ID": "abc"})
    assert resp.json() == {"status": "ok"}
    assert resp.headers["X-Correlation-ID"] == "abc"


def test_generated_correlation_id(client: TestClient) -> None:
    resp = client.get("/healthz")
    assert len(resp.headers["X-Correlation-ID"]) == 32


def test_first_visit_is_not_logged_in(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Not logged in." in resp.text
    assert "set-cookie" not in resp.headers


def test_login_redirects_with_challenge_and_sets_verifier_cookie(client: TestClient) -> None:
    resp = client.post("/login", follow_redirects=False)

    assert resp.status_code == 303
    location = resp.headers["location"]
    assert location.startswith("https://accounts.spotify.com/authorize?")
    params = {k: v[0] for k, v in parse_qs(urlparse(location).query).items()}
    assert params["client_id"] == "abc123"
    assert params["code_challenge_method"] == "S256"

    header = _set_cookie(resp, VERIFIER_COOKIE)
    assert header is not None
    assert "Max-Age=600" in header
    assert "HttpOnly" in header


def test_callback_exchanges_and_strips_code(client: TestClient, fake_spotify) -> None:
    login = client.post("/login", follow_redirects=False)
    challenge = parse_qs(urlparse(login.headers["location"]).query)["code_challenge"][0]

    resp = client.get("/callback", params={"code": "the-code"}, follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    session = _set_cookie(resp, SESSION_COOKIE)
    assert session is not None and "Max-Age" not in session
    assert "Max-Age=0" in (_set_cookie(resp, VERIFIER_COOKIE) or "")

    (token_request,) = fake_spotify.token_requests
    sent = parse_qs(token_request.content.decode())
    assert sent["code"] == ["the-code"]
    assert code_challenge_s256(sent["code_verifier"][0]) == challenge
    # data is loaded by the redirected page load, not by the callback
    assert fake_spotify.requests_to("/v1/me") == []


def test_page_after_login_renders_profile_and_artists(client: TestClient) -> None:
    _login_and_callback(client)
    resp = client.get("/")

    assert resp.status_code == 200
    assert "Logged in as Ada." in resp.text
    assert "ada@example.com" in resp.text
    assert "https://open.spotify.com/artist/radiohead" in resp.text
    assert resp.text.count(">Bjork</a>") == 2  # once per list
    assert resp.text.count(">Low</a>") == 1


def test_replayed_callback_with_session_only_strips_code(client: TestClient, fake_spotify) -> None:
    _login_and_callback(client)
    resp = client.get("/callback", params={"code": "the-code"}, follow_redirects=False)

    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    assert len(fake_spotify.token_requests) == 1
    assert fake_spotify.requests_to("/v1/me") == []


def test_callback_without_verifier_cookie(client: TestClient, fake_spotify) -> None:
    resp = client.get("/callback", params={"code": "the-code"}, follow_redirects=False)
    assert resp.status_code == 200
    assert "Missing verifier. Click login again." in resp.text
    assert fake_spotify.requests == []


def test_callback_invalid_grant(client: TestClient, fake_spotify) -> None:
    fake_spotify.token_reply = (400, '{"error":"invalid_grant"}')
    resp = _login_and_callback(client)

    assert resp.status_code == 200
    assert "Token error: 400" in resp.text
    assert _set_cookie(resp, SESSION_COOKIE) is None
    assert SESSION_COOKIE not in client.cookies


def test_denied_authorization_is_not_logged_in(client: TestClient) -> None:
    resp = client.get("/callback", params={"error": "access_denied"})
    assert "Not logged in." in resp.text


def test_expired_token_logs_out(client: TestClient, fake_spotify) -> None:
    _login_and_callback(client)
    fake_spotify.api_replies["/v1/me"] = (401, {"error": {"status": 401}})

    resp = client.get("/")

    assert "Token expired. Please log in again." in resp.text
    assert "mostPlayedList" not in resp.text
    assert "Max-Age=0" in (_set_cookie(resp, SESSION_COOKIE) or "")
    assert "Not logged in." in client.get("/").text


def test_tampered_session_cookie_is_ignored(client: TestClient, fake_spotify) -> None:
    client.cookies.set(SESSION_COOKIE, "forged")
    resp = client.get("/")
    assert "Not logged in." in resp.text
    assert fake_spotify.requests == []


def test_logout_clears_session(client: TestClient) -> None:
    _login_and_callback(client)
    resp = client.post("/logout")

    assert "Logged out." in resp.text
    assert "Max-Age=0" in (_set_cookie(resp, SESSION_COOKIE) or "")
    assert "Not logged in." in client.get("/").text


def test_missing_client_id_is_reported(
    config: SpotifyConfig, http_client: httpx.AsyncClient
) -> None:
    app = create_app(dataclasses.replace(config, client_id=None), http_client=http_client)
    with TestClient(app) as tc:
        page = tc.get("/")
        login = tc.post("/login", follow_redirects=False)

    assert "Missing SPOTIFY_CLIENT_ID in environment." in page.text
    assert login.status_code == 200
    assert "Missing SPOTIFY_CLIENT_ID in environment." in login.text


def test_unexpected_errors_become_status(client: TestClient, fake_spotify, monkeypatch) -> None:
    def _boom(request):
        raise RuntimeError("transport exploded")

    _login_and_callback(client)
    monkeypatch.setattr(type(fake_spotify), "__call__", lambda self, request: _boom(request))

    resp = client.get("/")

    assert resp.status_code == 500
    assert "Error: transport exploded" in resp.text
