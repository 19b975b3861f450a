"""Key/value entry database model.

This module defines the table backing the persistent storage area using
SQLAlchemy. Values are stored as the JSON text written by the store layer.
"""

from sqlalchemy import Column, String, Text

from .base import Base


class KeyValueEntryModel(Base):
    """One storage key and its JSON-encoded value."""

    __tablename__ = "kv_entries"

    key = Column(String, primary_key=True, index=True)
    value = Column(Text, nullable=False)
    updated_at = Column(String, nullable=False)  # ISO format string
