"""Pydantic request/response schemas."""

from tuneshare.schemas.auth import (
    LoginRequest,
    SessionIdentity,
    SignupRequest,
    SignupResponse,
    UserResponse,
    VerifyEmailRequest,
)
from tuneshare.schemas.health import HealthResponse
from tuneshare.schemas.track import (
    CreateTrackRequest,
    DeleteResponse,
    ToggleResponse,
    TrackAuthor,
    TrackResponse,
    UserTrackResponse,
)
from tuneshare.schemas.user import UserProfileResponse

__all__ = [
    "CreateTrackRequest",
    "DeleteResponse",
    "HealthResponse",
    "LoginRequest",
    "SessionIdentity",
    "SignupRequest",
    "SignupResponse",
    "ToggleResponse",
    "TrackAuthor",
    "TrackResponse",
    "UserProfileResponse",
    "UserResponse",
    "UserTrackResponse",
    "VerifyEmailRequest",
]
