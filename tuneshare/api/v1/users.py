"""User profile, user track listing and follow toggle routes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tuneshare.api.deps import RequestContext, get_request_context, require_identity
from tuneshare.core.database import get_db
from tuneshare.core.errors import NotFoundError
from tuneshare.schemas.auth import SessionIdentity
from tuneshare.schemas.track import ToggleResponse, UserTrackResponse
from tuneshare.schemas.user import UserProfileResponse
from tuneshare.services import track_service, user_service

router = APIRouter()


@router.get("/{username}", response_model=UserProfileResponse)
def get_user_profile(
    username: str,
    db: Annotated[Session, Depends(get_db)],
    ctx: Annotated[RequestContext, Depends(get_request_context)],
) -> UserProfileResponse:
    """Public profile; followed_by_me is only true for a signed-in follower."""
    profile = user_service.get_user_profile(db, username, ctx.user_id)
    if profile is None:
        raise NotFoundError("User does not exist")
    return profile


@router.get("/{username}/tracks", response_model=list[UserTrackResponse])
def get_user_tracks(
    username: str,
    db: Annotated[Session, Depends(get_db)],
    ctx: Annotated[RequestContext, Depends(get_request_context)],
) -> list[UserTrackResponse]:
    return track_service.get_user_tracks(db, username, ctx.user_id)


@router.post("/{user_id}/follow", response_model=ToggleResponse)
def toggle_follow(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    identity: Annotated[SessionIdentity, Depends(require_identity)],
) -> ToggleResponse:
    """Follow the user, or unfollow if already following. active=true means now following."""
    return ToggleResponse(active=user_service.toggle_follow(db, identity.id, user_id))
