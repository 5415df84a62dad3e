"""Core app configuration, errors and database gateway."""

from sos_api.core.config import get_settings
from sos_api.core.database import Database, get_db

__all__ = ["Database", "get_db", "get_settings"]
