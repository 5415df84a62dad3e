"""Request/response schemas for SOS data entries."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DataEntryCreate(BaseModel):
    """New SOS report. Required/length/injection checks happen in the service."""

    name: str | None = Field(default=None, description="Reporter name (max 255)")
    message: str | None = Field(default=None, description="Free-text request (max 5000)")
    location: str | None = Field(default=None, description='Optional location, usually "lat, lng"')
    contact: str | None = Field(default=None, description="Optional contact (max 255)")


class DataEntryResponse(BaseModel):
    """Stored entry as returned by the API; message is HTML-escaped."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    message: str
    location: str | None
    contact: str | None
    created_at: datetime
    updated_at: datetime
