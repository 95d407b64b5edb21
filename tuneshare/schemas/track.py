"""Request/response schemas for track endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, HttpUrl


class CreateTrackRequest(BaseModel):
    """Track to create. URLs point at the source assets the media host fetches."""

    title: str = Field(..., min_length=1, max_length=255)
    audio_file_url: HttpUrl = Field(..., description="Source URL of the audio file")
    cover_image_url: HttpUrl | None = Field(default=None, description="Optional cover image")
    artist: str | None = Field(default=None, max_length=255)
    duration: str = Field(..., min_length=1, max_length=32, description="Duration, e.g. '3:41'")


class TrackAuthor(BaseModel):
    id: int
    username: str
    full_name: str
    profile_image_url: str | None = None

    class Config:
        from_attributes = True


class TrackResponse(BaseModel):
    id: int
    title: str
    audio_file_url: str
    cover_image_url: str | None = None
    artist: str | None = None
    duration: str
    author_id: int
    author: TrackAuthor
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class UserTrackResponse(TrackResponse):
    """Track in a user's listing, with like totals relative to the caller."""

    total_like_count: int = 0
    has_liked: bool = False


class ToggleResponse(BaseModel):
    """New state of a toggled edge: True means it now exists."""

    active: bool


class DeleteResponse(BaseModel):
    deleted: bool = True
