"""Dependency wiring.

This module builds the managers for one browsing context from a store
capability, and holds the process-wide shared storage area.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from config import SEED_DEMO_DATA
from core.database import SqlStorageBackend
from core.storage import KeyValueStore, SharedStorage
from utils.admin_manager import AdminManager
from utils.demo_data import seed_demo_data
from utils.message_manager import MessageManager
from utils.preferences import PreferenceManager
from utils.session_manager import SessionManager
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

# Singleton for the persistent storage area
_shared_storage: Optional[SharedStorage] = None
_storage_lock = threading.Lock()


@dataclass
class PortalContext:
    """All managers bound to one store."""

    store: KeyValueStore
    users: UserManager
    messages: MessageManager
    session: SessionManager
    admin: AdminManager
    preferences: PreferenceManager


def get_shared_storage() -> SharedStorage:
    """Get the SQLite-backed shared storage area (singleton)."""
    global _shared_storage
    if _shared_storage is None:
        with _storage_lock:
            if _shared_storage is None:
                _shared_storage = SharedStorage(SqlStorageBackend())
    return _shared_storage


def build_context(store: KeyValueStore) -> PortalContext:
    """Build the managers for one store."""
    users = UserManager(store)
    session = SessionManager(store, users)
    return PortalContext(
        store=store,
        users=users,
        messages=MessageManager(store),
        session=session,
        admin=AdminManager(store, session),
        preferences=PreferenceManager(store),
    )


def initialize_store(users: UserManager, seed_demo: bool = SEED_DEMO_DATA) -> None:
    """Startup sequence: repair admins, seed demo data, ensure an admin exists."""
    users.repair_admin_invariant()
    if seed_demo:
        seed_demo_data(users)
    users.ensure_admin_exists()
