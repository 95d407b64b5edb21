"""ORM model for application users (auth, verification and profile)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func

from tuneshare.models.base import Base


class User(Base):
    """
    User account for session authentication and email verification.

    verification_token holds the pending 6-digit code; it and its expiry are
    cleared once the email is verified.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    profile_image_url = Column(String(2048), nullable=True)
    bio = Column(Text, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(6), nullable=True)
    verification_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
