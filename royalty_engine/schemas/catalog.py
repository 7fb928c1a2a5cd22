from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from royalty_engine.schemas.common import response_meta


class ArtistCreate(BaseModel):
    user_id: str = Field(..., pattern=r"^usr_")
    name: str
    email: Optional[str] = None


class ArtistResponse(BaseModel):
    id: int
    user_id: str
    name: str
    email: Optional[str] = None
    created_at: datetime
    meta: dict = Field(default_factory=response_meta)

    model_config = ConfigDict(from_attributes=True)


class ReleaseCreate(BaseModel):
    """Release metadata.

    Content rules (lengths, formats, genres) are enforced by the metadata
    validator so that every violation is reported at once; the schema only
    checks types.
    """

    artist_id: int
    title: str
    release_date: Optional[date] = None
    genre: Optional[str] = None
    language: Optional[str] = None
    upc: Optional[str] = None
    label: Optional[str] = None
    description: Optional[str] = None
    copyright_info: Optional[str] = None
    cover_art: Optional[str] = None
    cover_art_width: Optional[int] = Field(default=None, gt=0)
    platforms: list[str] = Field(default_factory=list)


class ReleaseResponse(BaseModel):
    id: int
    artist_id: int
    title: str
    upc: Optional[str] = None
    genre: Optional[str] = None
    language: Optional[str] = None
    release_date: Optional[date] = None
    label: Optional[str] = None
    cover_art: Optional[str] = None
    created_at: datetime
    meta: dict = Field(default_factory=response_meta)

    model_config = ConfigDict(from_attributes=True)


class TrackCreate(BaseModel):
    release_id: int
    title: str
    duration_ms: int
    track_number: int
    isrc: Optional[str] = None
    platforms: list[str] = Field(default_factory=list)


class TrackResponse(BaseModel):
    id: int
    release_id: int
    title: str
    isrc: Optional[str] = None
    duration_ms: int
    track_number: int
    created_at: datetime
    meta: dict = Field(default_factory=response_meta)

    model_config = ConfigDict(from_attributes=True)
