"""Read-only access to the Spotify Web API for the logged-in user."""

from .client import SpotifyApiClient  # noqa: F401
from .models import ArtistSummary, RecentPlayEvent, UserProfile, distinct_artists  # noqa: F401

__all__ = [
    "SpotifyApiClient",
    "ArtistSummary",
    "RecentPlayEvent",
    "UserProfile",
    "distinct_artists",
]
