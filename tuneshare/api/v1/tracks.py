"""Track routes: feed, lookup, create (uploads media), delete and like toggle."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tuneshare.api.deps import get_app_settings, get_uploader, require_identity
from tuneshare.core.config import Settings
from tuneshare.core.database import get_db
from tuneshare.schemas.auth import SessionIdentity
from tuneshare.schemas.track import (
    CreateTrackRequest,
    DeleteResponse,
    ToggleResponse,
    TrackResponse,
)
from tuneshare.services import track_service
from tuneshare.services.media import MediaUploader

router = APIRouter()


@router.get("/feed", response_model=list[TrackResponse])
def get_feed_tracks(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> list[TrackResponse]:
    """Most recent tracks across all users (FEED_PAGE_SIZE of them)."""
    tracks = track_service.get_feed_tracks(db, settings.FEED_PAGE_SIZE)
    return [TrackResponse.model_validate(t) for t in tracks]


@router.get("/{track_id}", response_model=TrackResponse)
def get_track_by_id(
    track_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> TrackResponse:
    return TrackResponse.model_validate(track_service.get_track_by_id(db, track_id))


@router.post("", response_model=TrackResponse, status_code=201)
async def create_track(
    body: CreateTrackRequest,
    db: Annotated[Session, Depends(get_db)],
    identity: Annotated[SessionIdentity, Depends(require_identity)],
    uploader: Annotated[MediaUploader, Depends(get_uploader)],
) -> TrackResponse:
    """
    Upload the audio file (and optional cover image) to the media host, then
    store the track with the hosted URLs. Upload failures return 502.
    """
    track = await track_service.create_track(db, identity.id, body, uploader)
    return TrackResponse.model_validate(track)


@router.delete("/{track_id}", response_model=DeleteResponse)
def delete_track(
    track_id: int,
    db: Annotated[Session, Depends(get_db)],
    identity: Annotated[SessionIdentity, Depends(require_identity)],
) -> DeleteResponse:
    return DeleteResponse(deleted=track_service.delete_track(db, identity.id, track_id))


@router.post("/{track_id}/like", response_model=ToggleResponse)
def toggle_like(
    track_id: int,
    db: Annotated[Session, Depends(get_db)],
    identity: Annotated[SessionIdentity, Depends(require_identity)],
) -> ToggleResponse:
    """Like the track, or unlike it if already liked. active=true means now liked."""
    return ToggleResponse(active=track_service.toggle_like(db, identity.id, track_id))
