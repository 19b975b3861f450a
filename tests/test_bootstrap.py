import json

import pytest

from core.database import SqlStorageBackend
from core.dependencies import build_context, initialize_store
from core.exceptions import ConfigurationError
from core.logging_config import setup_logging
from core.storage import SharedStorage
from utils.demo_data import DEMO_ALUMNI, seed_demo_data
from utils.preferences import PreferenceManager


def test_initialize_store_seeds_demo_data(users) -> None:
    initialize_store(users, seed_demo=True)

    everyone = users.list_users()
    assert len(everyone) == len(DEMO_ALUMNI) + 1
    assert [u.email for u in everyone if u.is_admin] == ["admin@alumni.edu"]
    assert users.authenticate("john.smith@alumni.edu", "alumni123") is not None


def test_seed_is_skipped_when_users_exist(users, add_user) -> None:
    add_user("Ann", "ann@x.edu")
    assert seed_demo_data(users) == 0
    assert len(users.list_users()) == 1


def test_initialize_store_without_demo_creates_admin_only(users) -> None:
    initialize_store(users, seed_demo=False)
    assert [u.email for u in users.list_users()] == ["admin@alumni.edu"]


def test_initialize_store_repairs_extra_admins(store, users) -> None:
    store.set(
        "alumniUsers",
        json.dumps(
            [
                {"id": 1, "name": "A", "email": "a@x.edu", "role": "admin", "graduationYear": 2000},
                {"id": 2, "name": "B", "email": "b@x.edu", "role": "admin", "graduationYear": 2000},
            ]
        ),
    )
    initialize_store(users, seed_demo=True)
    assert [u.id for u in users.list_users() if u.is_admin] == [1]
    assert len(users.list_users()) == 2


def test_build_context_shares_one_store(store) -> None:
    portal = build_context(store)
    assert portal.session.users is portal.users
    assert portal.admin.users is portal.users
    assert portal.messages.store is store


def test_dark_mode_preference(store) -> None:
    prefs = PreferenceManager(store)
    assert prefs.dark_mode is False
    prefs.dark_mode = True
    assert store.get("darkMode") == "enabled"
    assert prefs.dark_mode is True
    prefs.dark_mode = False
    assert store.get("darkMode") == "disabled"


def test_sql_backend_persists_across_instances(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'store.db'}"
    backend = SqlStorageBackend(url)
    backend.write("b", "2")
    backend.write("a", "1")
    backend.write("a", "3")

    reopened = SqlStorageBackend(url)
    assert reopened.read("a") == "3"
    assert reopened.list_keys() == ["a", "b"]

    reopened.delete("a")
    reopened.delete("missing")
    assert reopened.read("a") is None

    reopened.delete_all()
    assert reopened.list_keys() == []


def test_shared_storage_over_sql_backend_notifies(tmp_path) -> None:
    storage = SharedStorage(SqlStorageBackend(f"sqlite:///{tmp_path / 'store.db'}"))
    first = storage.open_context("a")
    second = storage.open_context("b")
    seen = []
    second.on_change("k", seen.append)

    first.set("k", "v")

    assert second.get("k") == "v"
    assert [e.new_value for e in seen] == ["v"]


def test_setup_logging_rejects_unknown_level() -> None:
    with pytest.raises(ConfigurationError):
        setup_logging("chatty")
