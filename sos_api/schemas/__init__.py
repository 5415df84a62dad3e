"""Pydantic request/response schemas."""

from sos_api.schemas.auth import (
    LoginAttemptItem,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
)
from sos_api.schemas.data_entries import DataEntryCreate, DataEntryResponse
from sos_api.schemas.health import HealthResponse

__all__ = [
    "DataEntryCreate",
    "DataEntryResponse",
    "HealthResponse",
    "LoginAttemptItem",
    "LoginRequest",
    "LoginResponse",
    "SignupRequest",
    "SignupResponse",
]
