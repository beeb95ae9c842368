"""Minimal Pydantic models for the public Deezer API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DeezerBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class DeezerError(DeezerBaseModel):
    type: str | None = None
    message: str | None = None
    code: int | None = None


class ErrorResponse(DeezerBaseModel):
    error: DeezerError


class DeezerArtist(DeezerBaseModel):
    id: int
    name: str
    link: str | None = None
    picture_medium: str | None = None
    picture_big: str | None = None
    nb_fan: int | None = None


class DeezerAlbum(DeezerBaseModel):
    id: int
    title: str | None = None
    link: str | None = None
    upc: str | None = None


class DeezerTrack(DeezerBaseModel):
    id: int
    title: str
    link: str
    isrc: str | None = None
    artist: DeezerArtist
    contributors: list[DeezerArtist] = Field(default_factory=list["DeezerArtist"])
    album: DeezerAlbum | None = None
