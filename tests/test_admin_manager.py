import pytest

from core.exceptions import DuplicateEmailError, InvalidCredentialsError, PermissionDeniedError, ValidationError
from schemas.user import AlumniCreate
from utils.admin_manager import AdminManager
from utils.password import hash_password


@pytest.fixture
def admin_manager(store, session, users) -> AdminManager:
    users.ensure_admin_exists()
    session.login("admin@alumni.edu", "putnew")
    return AdminManager(store, session)


def test_add_alumni_assigns_default_password(admin_manager, session) -> None:
    user = admin_manager.add_alumni(
        AlumniCreate(name=" Ann ", email="Ann@X.edu", department="CSE", graduation_year=2020)
    )
    assert user.name == "Ann"
    assert user.email == "ann@x.edu"
    assert user.role == "alumni"
    assert user.password_hash == hash_password("temp123")
    assert session.users.authenticate("ann@x.edu", "temp123").id == user.id


def test_add_alumni_requires_fields(admin_manager) -> None:
    with pytest.raises(ValidationError):
        admin_manager.add_alumni(AlumniCreate(name="Ann", email="ann@x.edu", department=""))
    with pytest.raises(ValidationError):
        admin_manager.add_alumni(AlumniCreate(name="Ann", email="ann@x.edu", department="CSE"))


def test_add_alumni_rejects_duplicate_email(admin_manager) -> None:
    with pytest.raises(DuplicateEmailError):
        admin_manager.add_alumni(
            AlumniCreate(name="Imposter", email="admin@alumni.edu", department="CSE", graduation_year=2020)
        )


def test_delete_alumni_never_removes_admin(admin_manager, add_user) -> None:
    ann = add_user("Ann", "ann@x.edu")
    admin = admin_manager.users.find_admin()

    assert admin_manager.delete_alumni(admin.id) is False
    assert admin_manager.delete_alumni(ann.id) is True
    assert admin_manager.delete_alumni(ann.id) is False
    assert admin_manager.view_alumni(ann.id) is None


def test_alumni_table_filters_sorts_and_pages(admin_manager, add_user) -> None:
    for i in range(12):
        add_user(f"User {i:02d}", f"u{i}@x.edu", department="CSE" if i % 2 else "ECE", graduation_year=2010 + i)
    add_user("zed", "zed@x.edu", company="Acme")

    first = admin_manager.alumni_table()
    assert first.total == 13
    assert first.pages == 2
    assert [u.name for u in first.items][:2] == ["User 00", "User 01"]
    assert (first.start, first.end) == (1, 10)

    last = admin_manager.alumni_table(page=99)
    assert last.page == 2
    assert [u.name for u in last.items] == ["User 10", "User 11", "zed"]
    assert (last.start, last.end) == (11, 13)

    assert admin_manager.alumni_table(search="acme").total == 1
    assert admin_manager.alumni_table(department="ECE").total == 6
    assert [u.name for u in admin_manager.alumni_table(year=2015).items] == ["User 05"]


def test_update_settings_changes_name_and_password(admin_manager, session) -> None:
    admin = admin_manager.update_settings(
        name="Dean",
        current_password="putnew",
        new_password="newpass",
        confirm_password="newpass",
    )
    assert admin.name == "Dean"
    assert session.current_user().name == "Dean"
    assert session.users.authenticate("admin@alumni.edu", "newpass") is not None
    assert session.users.authenticate("admin@alumni.edu", "putnew") is None


def test_update_settings_name_only(admin_manager) -> None:
    admin = admin_manager.update_settings(name="  Dean  ")
    assert admin.name == "Dean"
    assert admin_manager.users.authenticate("admin@alumni.edu", "putnew") is not None


@pytest.mark.parametrize(
    "current,new,confirm,error",
    [
        ("putnew", "short", "short", ValidationError),
        ("putnew", "newpass", "other-pass", ValidationError),
        ("wrong", "newpass", "newpass", InvalidCredentialsError),
    ],
)
def test_update_settings_rejects_bad_password_change(admin_manager, current, new, confirm, error) -> None:
    with pytest.raises(error):
        admin_manager.update_settings(current_password=current, new_password=new, confirm_password=confirm)
    assert admin_manager.users.authenticate("admin@alumni.edu", "putnew") is not None


def test_update_settings_without_admin(store) -> None:
    with pytest.raises(PermissionDeniedError):
        AdminManager(store).update_settings(name="Dean")


def test_clear_alumni_data_keeps_admin(admin_manager, add_user) -> None:
    add_user("Ann", "ann@x.edu")
    add_user("Bob", "bob@x.edu")

    assert admin_manager.clear_alumni_data() == 2
    remaining = admin_manager.users.list_users()
    assert [u.role for u in remaining] == ["admin"]


def test_reset_system_clears_everything(admin_manager, store, messages, add_user) -> None:
    add_user("Ann", "ann@x.edu")
    messages.send("admin@alumni.edu", "Admin User", "ann@x.edu", "hi")

    admin_manager.reset_system()

    assert store.keys() == []
    assert admin_manager.session.current_user() is None
