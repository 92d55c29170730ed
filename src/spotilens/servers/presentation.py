"""HTML rendering of the page: the web implementation of ``PresentationSink``."""

from __future__ import annotations

from collections.abc import Sequence
from html import escape

from spotilens.spotify.models import ArtistSummary, UserProfile

RECENT_DISPLAY_LIMIT = 15


def _link(text: str | None, href: str | None, *, new_tab: bool = False) -> str:
    target = " target='_blank' rel='noreferrer'" if new_tab else ""
    return f"<a href='{escape(href or '#')}'{target}>{escape(text or '')}</a>"


def _artist_items(artists: Sequence[ArtistSummary], empty: str) -> str:
    if not artists:
        return f"<li>{escape(empty)}</li>"
    return "".join(f"<li>{_link(a.name, a.url, new_tab=True)}</li>" for a in artists)


class HtmlPage:
    """Collects what the flow wants shown and renders it as one document."""

    def __init__(self, title: str = "Spotify profile") -> None:
        self.title = title
        self.status: str = ""
        self.profile: UserProfile | None = None
        self.top: Sequence[ArtistSummary] | None = None
        self.recent: Sequence[ArtistSummary] | None = None

    # PresentationSink ------------------------------------------------- #
    def show_status(self, message: str) -> None:
        self.status = message

    def show_profile(self, profile: UserProfile) -> None:
        self.profile = profile

    def show_artist_lists(
        self, top: Sequence[ArtistSummary], recent: Sequence[ArtistSummary]
    ) -> None:
        self.top = top
        self.recent = recent

    # Rendering --------------------------------------------------------- #
    def _profile_section(self) -> str:
        p = self.profile
        if p is None:
            return ""
        avatar = ""
        if p.image_url:
            avatar = (
                f"<img src='{escape(p.image_url)}' width='200' height='200' "
                "alt='Profile image'>"
            )
        return (
            "<section id='profile'>"
            f"<h2>Logged in as <span id='displayName'>{escape(p.display_name or '')}</span></h2>"
            f"<span id='avatar'>{avatar}</span>"
            "<ul>"
            f"<li>User ID: <span id='id'>{escape(p.id)}</span></li>"
            f"<li>Email: <span id='email'>{escape(p.email or '')}</span></li>"
            f"<li>Spotify URI: {_link(p.uri, p.external_url)}</li>"
            f"<li>Link: {_link(p.href, p.href)}</li>"
            f"<li>Profile Image: <span id='imgUrl'>"
            f"{escape(p.image_url or '(no profile image)')}</span></li>"
            "</ul></section>"
        )

    def _artists_section(self) -> str:
        if self.top is None or self.recent is None:
            return ""
        return (
            "<section id='artists'>"
            "<h2>Most played</h2>"
            f"<ol id='mostPlayedList'>{_artist_items(self.top, '(no data)')}</ol>"
            "<h2>Recently played</h2>"
            "<ol id='recentPlayedList'>"
            f"{_artist_items(self.recent[:RECENT_DISPLAY_LIMIT], '(no recent history)')}"
            "</ol></section>"
        )

    def render(self) -> str:
        return (
            "<!doctype html><html lang='en'>"
            f"<head><meta charset='utf-8'><title>{escape(self.title)}</title></head>"
            f"<body><h1>{escape(self.title)}</h1>"
            "<form method='post' action='/login'><button id='loginBtn'>Log in with Spotify</button></form>"
            "<form method='post' action='/logout'><button id='logoutBtn'>Log out</button></form>"
            f"<p id='status'>{escape(self.status)}</p>"
            f"{self._profile_section()}{self._artists_section()}"
            "</body></html>"
        )
