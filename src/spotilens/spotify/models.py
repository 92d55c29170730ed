"""Typed, immutable value objects mapped from Spotify Web API responses.

Mappers raise :class:`ValueError` on structurally malformed input; the API
client turns that into an :class:`~spotilens.auth.errors.ApiError`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{what} is not an object")
    return value


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _spotify_url(data: Mapping[str, Any]) -> str | None:
    external = data.get("external_urls")
    if isinstance(external, Mapping):
        return _optional_str(external.get("spotify"))
    return None


def paging_items(payload: Any, what: str) -> list[Mapping[str, Any]]:
    """Return the ``items`` of a paging object, validating their shape."""
    page = _mapping(payload, what)
    items = page.get("items")
    if not isinstance(items, list):
        raise ValueError(f"{what} has no items list")
    return [_mapping(item, f"{what} item") for item in items]


@dataclass(frozen=True, slots=True)
class ArtistSummary:
    """Artist name plus its Spotify page."""

    name: str
    url: str | None = None

    @classmethod
    def from_api(cls, data: Any) -> ArtistSummary:
        artist = _mapping(data, "artist")
        name = artist.get("name")
        if not isinstance(name, str):
            raise ValueError("artist has no name")
        return cls(name=name, url=_spotify_url(artist))


@dataclass(frozen=True, slots=True)
class RecentPlayEvent:
    """One entry of the recently-played history."""

    track_name: str | None
    played_at: str | None
    artists: tuple[ArtistSummary, ...]

    @classmethod
    def from_api(cls, data: Any) -> RecentPlayEvent:
        item = _mapping(data, "play event")
        track = _mapping(item.get("track"), "track")
        raw_artists = track.get("artists") or []
        if not isinstance(raw_artists, list):
            raise ValueError("track artists is not a list")
        return cls(
            track_name=_optional_str(track.get("name")),
            played_at=_optional_str(item.get("played_at")),
            artists=tuple(ArtistSummary.from_api(a) for a in raw_artists),
        )


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Current user's profile (``GET /me``)."""

    id: str
    display_name: str | None = None
    email: str | None = None
    uri: str | None = None
    href: str | None = None
    external_url: str | None = None
    image_url: str | None = None
    country: str | None = None
    product: str | None = None
    followers: int | None = None

    @classmethod
    def from_api(cls, data: Any) -> UserProfile:
        profile = _mapping(data, "profile")
        user_id = profile.get("id")
        if not isinstance(user_id, str):
            raise ValueError("profile has no id")

        image_url = None
        images = profile.get("images")
        if isinstance(images, list) and images and isinstance(images[0], Mapping):
            image_url = _optional_str(images[0].get("url"))

        followers = profile.get("followers")
        total = followers.get("total") if isinstance(followers, Mapping) else None

        return cls(
            id=user_id,
            display_name=_optional_str(profile.get("display_name")),
            email=_optional_str(profile.get("email")),
            uri=_optional_str(profile.get("uri")),
            href=_optional_str(profile.get("href")),
            external_url=_spotify_url(profile),
            image_url=image_url,
            country=_optional_str(profile.get("country")),
            product=_optional_str(profile.get("product")),
            followers=total if isinstance(total, int) else None,
        )


def distinct_artists(events: Iterable[RecentPlayEvent]) -> list[ArtistSummary]:
    """Flatten the events' artists, keeping each name once in first-seen order."""
    seen: set[str] = set()
    result: list[ArtistSummary] = []
    for event in events:
        for artist in event.artists:
            if artist.name not in seen:
                seen.add(artist.name)
                result.append(artist)
    return result
