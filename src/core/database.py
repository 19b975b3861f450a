"""Database connection and the persistent storage backend.

This module handles the SQLite connection using SQLAlchemy and exposes
``SqlStorageBackend``, which keeps the storage area in the ``kv_entries``
table so state survives restarts.
"""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from config import DATA_DIR, STORE_DB_URL
from models.base import Base
from models.kv_entry import KeyValueEntryModel

logger = logging.getLogger(__name__)


def create_store_engine(url: str = STORE_DB_URL) -> Engine:
    """Create the engine and make sure the tables exist.

    Args:
        url: SQLAlchemy database URL.

    Returns:
        SQLAlchemy Engine.
    """
    if url == STORE_DB_URL:
        # Ensure data directory exists
        DATA_DIR.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return engine


class SqlStorageBackend:
    """Storage backend persisted in a SQLite table."""

    def __init__(self, url: Optional[str] = None, engine: Optional[Engine] = None):
        """Initialize SqlStorageBackend.

        Args:
            url: Database URL, defaults to STORE_DB_URL.
            engine: Pre-built engine; takes precedence over ``url``.
        """
        self.engine = engine if engine is not None else create_store_engine(url or STORE_DB_URL)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    def read(self, key: str) -> Optional[str]:
        with self.SessionLocal() as db:
            model = db.get(KeyValueEntryModel, key)
            return model.value if model else None

    def write(self, key: str, value: str) -> None:
        with self.SessionLocal() as db:
            model = db.get(KeyValueEntryModel, key)
            now = datetime.now(pytz.utc).isoformat()
            if model:
                model.value = value
                model.updated_at = now
            else:
                db.add(KeyValueEntryModel(key=key, value=value, updated_at=now))
            db.commit()

    def delete(self, key: str) -> None:
        with self.SessionLocal() as db:
            model = db.get(KeyValueEntryModel, key)
            if model:
                db.delete(model)
                db.commit()

    def list_keys(self) -> List[str]:
        with self.SessionLocal() as db:
            rows = db.query(KeyValueEntryModel.key).order_by(KeyValueEntryModel.key).all()
            return [row[0] for row in rows]

    def delete_all(self) -> None:
        with self.SessionLocal() as db:
            count = db.query(KeyValueEntryModel).delete()
            db.commit()
        logger.info("Cleared storage area (%d entries removed)", count)
