"""Signup, role-checked login, and the login audit listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from sos_api.core.config import Settings
from sos_api.core.database import get_db
from sos_api.schemas.auth import (
    LoginAttemptItem,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
)
from sos_api.services import auth as auth_service

router = APIRouter()


def get_app_settings(request: Request) -> Settings:
    """Dependency: settings the app was created with."""
    return request.app.state.settings


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> SignupResponse:
    """
    Create a User account. Requesting role Admin yields a User account;
    admins come from the bootstrap seed or the create_user script.
    """
    user = auth_service.signup(db, body.username, body.password, body.role)
    return SignupResponse(
        message="User created successfully",
        username=user.username,
        role=user.role,
    )


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> LoginResponse:
    """
    Check username, password and the claimed role. No token is issued; the
    client remembers the returned role and username. Every call that gets
    past the required-field check is audited (see AUDIT_BLOCKED_LOGINS).
    """
    outcome = auth_service.login(
        db,
        body.username,
        body.password,
        body.role,
        settings,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return LoginResponse(
        message=outcome.message,
        role=outcome.role,
        username=outcome.username,
    )


@router.get("/login-attempts", response_model=list[LoginAttemptItem])
def list_login_attempts(
    db: Annotated[Session, Depends(get_db)],
) -> list[LoginAttemptItem]:
    """The 100 most recent login attempts, newest first."""
    attempts = auth_service.list_login_attempts(db)
    return [LoginAttemptItem.model_validate(a) for a in attempts]
