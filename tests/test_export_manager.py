import json
from datetime import datetime

import pytest
import pytz

from core.exceptions import BackupNotFoundError
from utils.export_manager import (
    backup_key,
    create_backup,
    export_all,
    export_user,
    list_backups,
    restore_backup,
    write_export,
)

NOW = datetime(2024, 5, 1, 12, 30, 15, 250000, tzinfo=pytz.utc)


def test_export_all_filename_and_payload(users, add_user) -> None:
    users.ensure_admin_exists()
    add_user("Ann", "ann@x.edu")

    filename, payload = export_all(users.list_users(), now=NOW)

    assert filename == "alumni-system-backup-2024-05-01.json"
    records = json.loads(payload)
    assert [r["email"] for r in records] == ["admin@alumni.edu", "ann@x.edu"]
    assert "passwordHash" in records[0]
    assert "graduationYear" in records[1]


def test_export_user_slugifies_name(add_user) -> None:
    user = add_user("Ann  Marie Lee", "ann@x.edu")
    filename, payload = export_user(user)
    assert filename == "alumni-data-ann-marie-lee.json"
    assert json.loads(payload)["id"] == user.id


def test_write_export(tmp_path) -> None:
    path = write_export("out.json", "[]", directory=tmp_path / "exports")
    assert path.read_text(encoding="utf-8") == "[]"


def test_backup_key_format() -> None:
    assert backup_key(NOW) == "alumniBackup_2024-05-01T12-30-15-250Z"


def test_backup_and_restore(store, users, add_user) -> None:
    users.ensure_admin_exists()
    add_user("Ann", "ann@x.edu")
    key = create_backup(store, now=NOW)
    assert list_backups(store) == [key]

    users.clear_alumni()
    add_user("Bob", "bob@x.edu")

    assert restore_backup(store, key) == 2
    assert [u.email for u in users.list_users()] == ["admin@alumni.edu", "ann@x.edu"]


def test_restore_repairs_admin_invariant(store, users) -> None:
    store.set(
        "alumniBackup_manual",
        json.dumps(
            [
                {"id": 4, "name": "B", "email": "b@x.edu", "role": "admin", "graduationYear": 2000},
                {"id": 2, "name": "A", "email": "a@x.edu", "role": "admin", "graduationYear": 2000},
            ]
        ),
    )
    restore_backup(store, "alumniBackup_manual")
    admins = [u for u in users.list_users() if u.is_admin]
    assert [a.id for a in admins] == [2]


def test_restore_unknown_backup(store) -> None:
    with pytest.raises(BackupNotFoundError):
        restore_backup(store, "alumniBackup_missing")
    with pytest.raises(BackupNotFoundError):
        restore_backup(store, "alumniUsers")
