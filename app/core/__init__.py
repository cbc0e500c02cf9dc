"""Core app configuration, database, security and errors."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.errors import ErrorKind, ServiceError

__all__ = ["ErrorKind", "ServiceError", "get_settings", "settings", "get_db"]
