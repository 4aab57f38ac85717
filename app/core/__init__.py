"""Core app configuration, database, security and role hierarchy."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.roles import Role, is_authorized

__all__ = ["get_settings", "settings", "get_db", "Role", "is_authorized"]
