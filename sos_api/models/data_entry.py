"""ORM model for submitted SOS reports."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func

from sos_api.models.base import Base


class DataEntry(Base):
    """
    SOS report. message is stored HTML-escaped; location is free text
    (usually "lat, lng") and contact is optional.
    """

    __tablename__ = "data_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    location = Column(String(255), nullable=True)
    contact = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = Column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
