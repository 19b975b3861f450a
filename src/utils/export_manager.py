"""Export and backup utilities.

Exports produce a (filename, JSON text) pair the caller can offer as a
download or write to EXPORT_DIR. Backups are full copies of the user
collection stored under a timestamped key in the same storage area.
"""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytz

from config import BACKUP_KEY_PREFIX, EXPORT_DIR, USERS_KEY
from core.exceptions import BackupNotFoundError
from core.storage import KeyValueStore, read_json
from schemas.user import User
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(pytz.utc)


def _dumps(payload) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def export_all(users: Sequence[User], now: Optional[datetime] = None) -> Tuple[str, str]:
    """Export the full user collection.

    Returns:
        ``("alumni-system-backup-YYYY-MM-DD.json", json_text)``.
    """
    day = (now or _now()).strftime("%Y-%m-%d")
    return f"alumni-system-backup-{day}.json", _dumps([u.to_record() for u in users])


def export_user(user: User) -> Tuple[str, str]:
    """Export one user's own record.

    Returns:
        ``("alumni-data-<name-slug>.json", json_text)``.
    """
    slug = re.sub(r"\s+", "-", user.name.strip()).lower()
    return f"alumni-data-{slug}.json", _dumps(user.to_record())


def write_export(filename: str, payload: str, directory: Path = EXPORT_DIR) -> Path:
    """Write an export document to disk and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    with open(path, "w", encoding="utf-8") as f:
        f.write(payload)
    logger.info("Wrote export %s", path)
    return path


def backup_key(now: Optional[datetime] = None) -> str:
    stamp = (now or _now()).astimezone(pytz.utc).isoformat(timespec="milliseconds")
    stamp = stamp.replace("+00:00", "Z")
    return BACKUP_KEY_PREFIX + re.sub(r"[:.]", "-", stamp)


def create_backup(store: KeyValueStore, now: Optional[datetime] = None) -> str:
    """Copy the user collection under a new backup key.

    Returns:
        The backup key.
    """
    key = backup_key(now)
    store.set(key, json.dumps(read_json(store, USERS_KEY, []), ensure_ascii=False))
    logger.info("Backup created: %s", key)
    return key


def list_backups(store: KeyValueStore) -> List[str]:
    """Backup keys, oldest first."""
    return sorted(k for k in store.keys() if k.startswith(BACKUP_KEY_PREFIX))


def restore_backup(store: KeyValueStore, key: str) -> int:
    """Replace the user collection with a backup.

    The admin invariant is repaired afterwards.

    Returns:
        Number of restored users.

    Raises:
        BackupNotFoundError: If ``key`` is not a stored backup.
    """
    if not key.startswith(BACKUP_KEY_PREFIX) or store.get(key) is None:
        raise BackupNotFoundError(key)
    records = read_json(store, key, [])
    if not isinstance(records, list):
        records = []
    restored = UserManager(store).import_users(records, replace=True)
    logger.info("Restored %d users from %s", restored, key)
    return restored
