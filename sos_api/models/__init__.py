"""SQLAlchemy ORM models."""

from sos_api.models.base import Base
from sos_api.models.data_entry import DataEntry
from sos_api.models.login_attempt import LoginAttempt
from sos_api.models.user import User

__all__ = ["Base", "DataEntry", "LoginAttempt", "User"]
