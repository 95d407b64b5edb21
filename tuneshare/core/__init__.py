"""Core app configuration, database and security."""

from tuneshare.core.config import Settings, get_settings
from tuneshare.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
