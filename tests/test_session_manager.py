import json

import pytest

from core.exceptions import InvalidCredentialsError
from schemas.user import ProfileUpdate, RegisterRequest
from utils.password import hash_password


def test_login_with_default_bootstrap_admin(users, session) -> None:
    users.ensure_admin_exists()
    user = session.login("admin@alumni.edu", "putnew")
    assert user.role == "admin"
    assert session.current_user() == user


def test_login_is_case_insensitive_on_email(session, add_user) -> None:
    ann = add_user("Ann", "ann@x.edu", password="secret1")
    assert session.login(" ANN@x.edu ", "secret1").id == ann.id


@pytest.mark.parametrize(
    "email,password",
    [("ann@x.edu", "wrong-password"), ("nobody@x.edu", "secret1")],
)
def test_failed_login_is_generic_and_does_not_mutate(session, add_user, store, email, password) -> None:
    add_user("Ann", "ann@x.edu", password="secret1")
    before = store.get("alumniUsers")

    with pytest.raises(InvalidCredentialsError) as excinfo:
        session.login(email, password)

    assert str(excinfo.value) == "Invalid email or password"
    assert store.get("alumniUsers") == before
    assert session.current_user() is None


def test_legacy_login_upgrades_then_uses_digest(session, store) -> None:
    store.set(
        "alumniUsers",
        json.dumps(
            [
                {
                    "id": 1,
                    "name": "Old Timer",
                    "email": "old@x.edu",
                    "password": "legacy1",
                    "role": "alumni",
                    "department": "ECE",
                    "graduationYear": 2010,
                }
            ]
        ),
    )

    session.login("old@x.edu", "legacy1")
    stored = json.loads(store.get("alumniUsers"))[0]
    assert stored["passwordHash"] == hash_password("legacy1")
    assert "password" not in stored

    session.logout()
    assert session.login("old@x.edu", "legacy1").id == 1
    assert json.loads(store.get("alumniUsers"))[0] == stored


def test_register_logs_in_as_alumni(session) -> None:
    user = session.register(
        RegisterRequest(
            name="Ann",
            email="ann@x.edu",
            password="secret1",
            department="CSE",
            graduation_year=2020,
            terms_accepted=True,
        )
    )
    assert user.role == "alumni"
    assert session.current_user().id == user.id


def test_refresh_picks_up_store_changes(session, users, add_user) -> None:
    ann = add_user("Ann", "ann@x.edu")
    session.login("ann@x.edu", "secret1")
    users.update(ann.id, {"company": "Acme"})

    assert session.current_user().company == ""
    assert session.refresh().company == "Acme"
    assert session.current_user().company == "Acme"


def test_refresh_logs_out_deleted_user(session, users, add_user) -> None:
    ann = add_user("Ann", "ann@x.edu")
    session.login("ann@x.edu", "secret1")
    users.delete(ann.id)

    assert session.refresh() is None
    assert session.current_user() is None


def test_refresh_and_logout_without_session(session) -> None:
    assert session.refresh() is None
    session.logout()
    assert session.current_user() is None


def test_invalid_snapshot_reads_as_logged_out(session, store) -> None:
    store.set("currentUser", json.dumps({"id": "not-a-number"}))
    assert session.current_user() is None
    store.set("currentUser", "{oops")
    assert session.current_user() is None


def test_resolve_view_gates_by_role(session, users, add_user) -> None:
    assert session.resolve_view("dashboard") == "login"
    assert session.resolve_view("admin") == "login"
    assert session.resolve_view("index") == "index"

    add_user("Ann", "ann@x.edu")
    session.login("ann@x.edu", "secret1")
    assert session.resolve_view("admin") == "dashboard"
    assert session.resolve_view("dashboard") == "dashboard"

    users.ensure_admin_exists()
    admin = session.login("admin@alumni.edu", "putnew")
    assert session.resolve_view("dashboard") == "admin"
    assert session.resolve_view("admin") == "admin"
    assert session.home_view(admin) == "admin"


def test_delete_account(session, users, add_user) -> None:
    add_user("Ann", "ann@x.edu")
    session.login("ann@x.edu", "secret1")
    assert session.delete_account() is True
    assert users.find_by_email("ann@x.edu") is None
    assert session.current_user() is None
    assert session.delete_account() is False


def test_admin_cannot_delete_own_account_through_alumni_path(session, users) -> None:
    users.ensure_admin_exists()
    session.login("admin@alumni.edu", "putnew")
    assert session.delete_account() is False
    assert users.find_admin() is not None
    assert session.current_user() is not None


def test_update_profile_rewrites_snapshot_and_announces_it(session, add_user, other_store) -> None:
    add_user("Ann", "ann@x.edu")
    session.login("ann@x.edu", "secret1")
    seen = []
    other_store.on_change("currentUser", seen.append)

    updated = session.update_profile(ProfileUpdate(company="NewCo", mentorship=True))

    assert updated.company == "NewCo"
    assert session.current_user() == updated
    assert session.users.find_by_id(updated.id).mentorship is True
    assert len(seen) == 1
    assert json.loads(seen[0].new_value)["company"] == "NewCo"


def test_update_profile_requires_session(session) -> None:
    assert session.update_profile(ProfileUpdate(company="NewCo")) is None


def test_invalid_legacy_record_is_not_upgraded_on_login(session, store) -> None:
    store.set(
        "alumniUsers",
        json.dumps(
            [
                {
                    "id": 1,
                    "name": "Old Timer",
                    "email": "old@x.edu",
                    "password": "pw1234",
                    "role": "alumni",
                    "graduationYear": None,
                }
            ]
        ),
    )
    before = store.get("alumniUsers")

    with pytest.raises(InvalidCredentialsError):
        session.login("old@x.edu", "pw1234")

    assert store.get("alumniUsers") == before
    assert session.current_user() is None
