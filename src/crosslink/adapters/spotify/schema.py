"""Minimal Pydantic models for the Spotify Web API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SpotifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SpotifyImage(SpotifyBaseModel):
    url: str
    height: int | None = None
    width: int | None = None


class SpotifyFollowers(SpotifyBaseModel):
    total: int | None = None


class SpotifyArtist(SpotifyBaseModel):
    id: str
    name: str
    external_urls: dict[str, str] = Field(default_factory=dict)
    images: list[SpotifyImage] = Field(default_factory=list["SpotifyImage"])
    followers: SpotifyFollowers | None = None
    genres: list[str] = Field(default_factory=list)


class SpotifyAlbum(SpotifyBaseModel):
    id: str
    name: str
    release_date: str | None = None
    artists: list[SpotifyArtist] = Field(default_factory=list["SpotifyArtist"])
    external_ids: dict[str, str] = Field(default_factory=dict)
    external_urls: dict[str, str] = Field(default_factory=dict)


class SpotifyTrack(SpotifyBaseModel):
    id: str
    name: str
    duration_ms: int | None = None
    album: SpotifyAlbum
    artists: list[SpotifyArtist] = Field(default_factory=list["SpotifyArtist"])
    external_ids: dict[str, str] = Field(default_factory=dict)
    external_urls: dict[str, str] = Field(default_factory=dict)


class SpotifyPage(SpotifyBaseModel):
    href: str | None = None
    limit: int | None = None
    next: str | None = None
    offset: int | None = None
    previous: str | None = None
    total: int | None = None


class TrackSearchPage(SpotifyPage):
    items: list[SpotifyTrack] = Field(default_factory=list["SpotifyTrack"])


class TrackSearchResponse(SpotifyBaseModel):
    tracks: TrackSearchPage


class ArtistsResponse(SpotifyBaseModel):
    artists: list[SpotifyArtist | None] = Field(default_factory=list["SpotifyArtist | None"])
