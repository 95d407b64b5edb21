"""SQLAlchemy declarative Base shared by users, tracks and relationship edges."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
