"""CRUD over SOS data entries."""

import logging

from sqlalchemy.orm import Session

from sos_api.core.errors import ClientInputError, NotFoundError
from sos_api.models import DataEntry
from sos_api.services.validation import (
    contains_sql_injection,
    sanitize_xss,
    validate_length,
    validate_required,
)

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255
MAX_MESSAGE_LENGTH = 5000
MAX_LOCATION_LENGTH = 255
MAX_CONTACT_LENGTH = 255


def _check_field(field: str, value: object, max_length: int) -> None:
    if contains_sql_injection(value):
        raise ClientInputError(f"Invalid characters detected in {field} field")
    result = validate_length(field, value, max_length)
    if not result.valid:
        raise ClientInputError(result.error)


def create_entry(
    db: Session,
    name: str | None,
    message: str | None,
    location: str | None = None,
    contact: str | None = None,
) -> DataEntry:
    """
    Validate and store a new entry, then read it back with its id and timestamps.

    name, location and contact are rejected if they look like SQL injection.
    message is only length-checked; its HTML-significant characters are
    escaped before storage. Empty location/contact are stored as NULL.
    """
    required = validate_required({"name": name, "message": message})
    if not required.valid:
        raise ClientInputError(required.error)

    _check_field("name", name, MAX_NAME_LENGTH)
    message_length = validate_length("message", message, MAX_MESSAGE_LENGTH)
    if not message_length.valid:
        raise ClientInputError(message_length.error)
    if location:
        _check_field("location", location, MAX_LOCATION_LENGTH)
    if contact:
        _check_field("contact", contact, MAX_CONTACT_LENGTH)

    entry = DataEntry(
        name=name,
        message=sanitize_xss(message),
        location=location or None,
        contact=contact or None,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Created data entry %s", entry.id)
    return entry


def list_entries(db: Session) -> list[DataEntry]:
    """All entries, newest first."""
    return db.query(DataEntry).order_by(DataEntry.created_at.desc(), DataEntry.id.desc()).all()


def _parse_id(entry_id: int | str) -> int:
    try:
        return int(entry_id)
    except (TypeError, ValueError):
        raise NotFoundError("Not Found") from None


def get_entry(db: Session, entry_id: int | str) -> DataEntry:
    entry = db.get(DataEntry, _parse_id(entry_id))
    if entry is None:
        raise NotFoundError("Not Found")
    return entry


def delete_entry(db: Session, entry_id: int | str) -> None:
    """Delete by id; NotFoundError if no row matched."""
    deleted = (
        db.query(DataEntry)
        .filter(DataEntry.id == _parse_id(entry_id))
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted == 0:
        raise NotFoundError("Not Found")
    logger.info("Deleted data entry %s", entry_id)
