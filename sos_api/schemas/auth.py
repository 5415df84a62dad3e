"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Signup body. Presence and length rules are enforced by the auth service."""

    username: str | None = Field(default=None, description="Username (at least 3 characters)")
    password: str | None = Field(default=None, description="Password (at least 6 characters)")
    role: str | None = Field(default="User", description="Requested role; Admin is downgraded to User")


class SignupResponse(BaseModel):
    success: bool = True
    message: str
    username: str
    role: str


class LoginRequest(BaseModel):
    """Credentials plus the role the caller claims."""

    username: str | None = None
    password: str | None = None
    role: str | None = None


class LoginResponse(BaseModel):
    """Successful login; the client keeps role and username locally (no token is issued)."""

    success: bool = True
    message: str
    role: str
    username: str


class LoginAttemptItem(BaseModel):
    """Audit row for the admin view (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str
    success: bool
    blocked: bool
    ip_address: str | None
    user_agent: str | None
    created_at: datetime
