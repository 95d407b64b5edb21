"""Public profiles and follow toggling."""

from sqlalchemy import func
from sqlalchemy.orm import InstrumentedAttribute, Session

from tuneshare.core.errors import NotFoundError, ValidationError
from tuneshare.models import Base, Follow, Track, User
from tuneshare.schemas.user import UserProfileResponse
from tuneshare.services.toggle import EdgeKind, edge_exists, toggle_edge


def _count(
    session: Session, model: type[Base], column: InstrumentedAttribute, value: int
) -> int:
    return session.query(func.count()).select_from(model).filter(column == value).scalar() or 0


def get_user_profile(
    session: Session, username: str, viewer_id: int | None
) -> UserProfileResponse | None:
    """Profile for username, or None when no such user exists."""
    user = session.query(User).filter(User.username == username).first()
    if user is None:
        return None
    followed_by_me = (
        viewer_id is not None and edge_exists(session, EdgeKind.FOLLOW, viewer_id, user.id)
    )
    return UserProfileResponse(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        profile_image_url=user.profile_image_url or "",
        bio=user.bio,
        total_tracks=_count(session, Track, Track.author_id, user.id),
        total_followers=_count(session, Follow, Follow.following_id, user.id),
        total_followings=_count(session, Follow, Follow.follower_id, user.id),
        followed_by_me=followed_by_me,
    )


def toggle_follow(session: Session, follower_id: int, following_id: int) -> bool:
    """Follow or unfollow a user; returns True when follower_id now follows following_id."""
    if follower_id == following_id:
        raise ValidationError("You can't follow yourself")
    if session.get(User, following_id) is None:
        raise NotFoundError("User does not exist")
    return toggle_edge(session, EdgeKind.FOLLOW, follower_id, following_id)
