"""Pydantic schemas for public user profiles."""

from pydantic import BaseModel, Field


class UserProfileResponse(BaseModel):
    """Public profile with relation totals and whether the caller follows this user."""

    id: int
    username: str
    full_name: str
    profile_image_url: str = Field(default="", description="Empty string when unset")
    bio: str | None = None
    total_tracks: int = 0
    total_followers: int = 0
    total_followings: int = 0
    followed_by_me: bool = False
