"""SQLAlchemy ORM models."""

from tuneshare.models.base import Base
from tuneshare.models.relationship import Follow, Like
from tuneshare.models.track import Track
from tuneshare.models.user import User

__all__ = ["Base", "Follow", "Like", "Track", "User"]
