"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ProviderKey(StrEnum):
    """Stable keys for the streaming/catalog providers we know by name.

    Links for providers outside this list are still carried; their key is a plain string.
    """

    SPOTIFY = "spotify"
    APPLE_MUSIC = "apple_music"
    YOUTUBE_MUSIC = "youtube_music"
    YOUTUBE = "youtube"
    AMAZON_MUSIC = "amazon_music"
    TIDAL = "tidal"
    DEEZER = "deezer"
    SOUNDCLOUD = "soundcloud"
    BANDCAMP = "bandcamp"
    BEATPORT = "beatport"
    PANDORA = "pandora"
    NAPSTER = "napster"
    AUDIOMACK = "audiomack"
    QOBUZ = "qobuz"
    ANGHAMI = "anghami"
    BOOMPLAY = "boomplay"
    IHEARTRADIO = "iheartradio"
    TIKTOK = "tiktok"
    MUSICBRAINZ = "musicbrainz"


class LinkSource(StrEnum):
    """Where a link candidate came from. Declaration order is not precedence."""

    CANONICAL = "canonical"
    SEARCH = "search"
    OVERRIDE = "override"


class MatchStatus(StrEnum):
    SUGGESTED = "suggested"
    AUTO_CONFIRMED = "auto_confirmed"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"

    @property
    def is_active(self) -> bool:
        return self is not MatchStatus.REJECTED


class EntityType(StrEnum):
    """Typed-reference discriminator for link owners."""

    RELEASE = "release"
    TRACK = "track"
    ARTIST_MATCH = "artist_match"


class SyncState(StrEnum):
    HIDDEN = "hidden"
    LOADING = "loading"
    SUGGESTED = "suggested"
    AUTO_CONFIRMED = "auto_confirmed"
    CONFIRMED = "confirmed"
    NO_MATCH = "no_match"


class ConfidenceBand(StrEnum):
    VERY_HIGH = "very_high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
