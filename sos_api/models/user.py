"""ORM model for application user accounts."""

from sqlalchemy import Column, DateTime, Integer, String, func

from sos_api.models.base import Base

ROLE_USER = "User"
ROLE_ADMIN = "Admin"


class User(Base):
    """
    Account created by signup (or the bootstrap seed / create_user script).

    role: 'User' or 'Admin'. Passwords are stored only as bcrypt hashes.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default=ROLE_USER, server_default=ROLE_USER)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
