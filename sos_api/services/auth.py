"""Signup, login with audit trail, and bootstrap admin seeding."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sos_api.core.errors import AuthenticationError, ClientInputError, ConflictError
from sos_api.core.security import (
    PASSWORD_MIN_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    verify_password,
)
from sos_api.models import LoginAttempt, User
from sos_api.models.user import ROLE_ADMIN, ROLE_USER
from sos_api.services.validation import contains_sql_injection

if TYPE_CHECKING:
    from sos_api.core.config import Settings

logger = logging.getLogger(__name__)

LOGIN_ATTEMPTS_LIMIT = 100
UNKNOWN_CLIENT = "unknown"


@dataclass(frozen=True)
class LoginOutcome:
    success: bool
    message: str
    role: str
    username: str


def signup(db: Session, username: str | None, password: str | None, role: str | None = ROLE_USER) -> User:
    """
    Create a user with a bcrypt-hashed password.

    A requested Admin role is downgraded to User; any other role is kept.
    Raises ClientInputError for missing/short fields and ConflictError if the
    username is taken.
    """
    if not username or not password:
        raise ClientInputError("username and password are required")
    if len(username) < USERNAME_MIN_LEN:
        raise ClientInputError(f"username must be at least {USERNAME_MIN_LEN} characters")
    if len(password) < PASSWORD_MIN_LEN:
        raise ClientInputError(f"password must be at least {PASSWORD_MIN_LEN} characters")

    user_role = ROLE_USER if not role or role == ROLE_ADMIN else role

    existing = db.query(User.id).filter(User.username == username).first()
    if existing is not None:
        raise ConflictError("Username already exists")

    user = User(username=username, password_hash=hash_password(password), role=user_role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same username.
        db.rollback()
        raise ConflictError("Username already exists") from e
    logger.info("Created user %r with role %s", username, user_role)
    return user


def _record_attempt(
    db: Session,
    username: str,
    role: str,
    success: bool,
    ip_address: str | None,
    user_agent: str | None,
    blocked: bool = False,
) -> None:
    db.add(
        LoginAttempt(
            username=username,
            role=role,
            success=success,
            blocked=blocked,
            ip_address=ip_address or UNKNOWN_CLIENT,
            user_agent=user_agent or UNKNOWN_CLIENT,
        )
    )
    db.commit()


def _check_credentials(
    db: Session, username: str, password: str, role: str, settings: "Settings"
) -> LoginOutcome:
    user = db.query(User).filter(User.username == username).first()
    if user is not None:
        if not verify_password(password, user.password_hash):
            return LoginOutcome(False, "Invalid password", role, username)
        if user.role != role:
            return LoginOutcome(
                False, f"Invalid role. This account is registered as {user.role}", role, username
            )
        return LoginOutcome(True, "Login successful", user.role, username)

    if role == ROLE_ADMIN:
        if (
            settings.DEFAULT_ADMIN_FALLBACK
            and username == settings.DEFAULT_ADMIN_USERNAME
            and password == settings.DEFAULT_ADMIN_PASSWORD.get_secret_value()
        ):
            return LoginOutcome(True, "Login successful (default admin)", ROLE_ADMIN, username)
        return LoginOutcome(False, "Invalid admin credentials", role, username)

    return LoginOutcome(False, "User not found. Please sign up first.", role, username)


def login(
    db: Session,
    username: str | None,
    password: str | None,
    role: str | None,
    settings: "Settings",
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> LoginOutcome:
    """
    Verify credentials and the claimed role, and append one login_attempts row.

    Input that trips the injection heuristic is answered exactly like a bad
    password (AuthenticationError "Invalid credentials") before the users
    table is read. Such calls are only audited when AUDIT_BLOCKED_LOGINS is on.
    Raises ClientInputError if a field is missing and AuthenticationError on
    any failed check; the attempt row is written before the error is raised.
    """
    if not username or not password or not role:
        raise ClientInputError("username, password, and role are required")

    if any(contains_sql_injection(v) for v in (username, password, role)):
        logger.warning("Blocked login for %r from %s: suspicious input", username, ip_address)
        if settings.AUDIT_BLOCKED_LOGINS:
            _record_attempt(db, username, role, False, ip_address, user_agent, blocked=True)
        raise AuthenticationError("Invalid credentials")

    outcome = _check_credentials(db, username, password, role, settings)
    _record_attempt(db, username, role, outcome.success, ip_address, user_agent)

    if not outcome.success:
        logger.info("Failed login for %r as %s: %s", username, role, outcome.message)
        raise AuthenticationError(outcome.message)
    return outcome


def list_login_attempts(db: Session, limit: int = LOGIN_ATTEMPTS_LIMIT) -> list[LoginAttempt]:
    """Most recent attempts, newest first."""
    return (
        db.query(LoginAttempt)
        .order_by(LoginAttempt.created_at.desc(), LoginAttempt.id.desc())
        .limit(limit)
        .all()
    )


def seed_default_admin(db: Session, settings: "Settings") -> bool:
    """
    Insert the bootstrap Admin account if no Admin user exists yet.

    Returns True when a row was created. Safe to call on every startup.
    """
    if not settings.SEED_DEFAULT_ADMIN:
        return False
    if db.query(User.id).filter(User.role == ROLE_ADMIN).first() is not None:
        return False
    username = settings.DEFAULT_ADMIN_USERNAME
    if db.query(User.id).filter(User.username == username).first() is not None:
        logger.warning(
            "Not seeding admin: username %r already exists with a non-Admin role", username
        )
        return False
    db.add(
        User(
            username=username,
            password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD.get_secret_value()),
            role=ROLE_ADMIN,
        )
    )
    try:
        db.commit()
    except IntegrityError:
        # Another process seeded it first.
        db.rollback()
        return False
    logger.info("Seeded default admin account %r", username)
    return True
