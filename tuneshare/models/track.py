"""ORM model for uploaded audio tracks."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from tuneshare.models.base import Base


class Track(Base):
    """An audio track owned by exactly one user (author_id)."""

    __tablename__ = "tracks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    audio_file_url = Column(String(2048), nullable=False)
    cover_image_url = Column(String(2048), nullable=True)
    artist = Column(String(255), nullable=True)
    duration = Column(String(32), nullable=False)
    author_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )

    # Every track response carries its author, so load it with the row.
    author = relationship("User", lazy="joined")
