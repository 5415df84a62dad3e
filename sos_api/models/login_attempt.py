"""ORM model for the append-only login audit trail."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, false, func

from sos_api.models.base import Base


class LoginAttempt(Base):
    """
    One row per login call: the username and role tried (not checked against
    existing users), the outcome, and where the call came from.

    blocked is True only for calls rejected by the injection heuristic.
    """

    __tablename__ = "login_attempts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False)
    success = Column(Boolean, nullable=False)
    blocked = Column(Boolean, nullable=False, default=False, server_default=false())
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
