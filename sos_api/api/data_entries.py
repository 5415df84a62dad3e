"""SOS data entries: create, list, fetch and delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from sos_api.core.database import get_db
from sos_api.schemas.data_entries import DataEntryCreate, DataEntryResponse
from sos_api.services import data_entries as entries_service

router = APIRouter()


@router.post("", response_model=DataEntryResponse, status_code=status.HTTP_201_CREATED)
def create_data_entry(
    body: DataEntryCreate,
    db: Annotated[Session, Depends(get_db)],
) -> DataEntryResponse:
    """
    Submit an SOS report. name and message are required; location and
    contact are optional. Returns the stored row with id and timestamps.
    """
    entry = entries_service.create_entry(
        db, body.name, body.message, location=body.location, contact=body.contact
    )
    return DataEntryResponse.model_validate(entry)


@router.get("", response_model=list[DataEntryResponse])
def list_data_entries(
    db: Annotated[Session, Depends(get_db)],
) -> list[DataEntryResponse]:
    return [DataEntryResponse.model_validate(e) for e in entries_service.list_entries(db)]


@router.get("/{entry_id}", response_model=DataEntryResponse)
def get_data_entry(
    entry_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> DataEntryResponse:
    return DataEntryResponse.model_validate(entries_service.get_entry(db, entry_id))


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_data_entry(
    entry_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    entries_service.delete_entry(db, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
