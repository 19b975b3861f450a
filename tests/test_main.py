import pytest

from core.dependencies import build_context
from core.exceptions import InvalidCredentialsError
from main import run_one_shot


@pytest.fixture
def portal(store, users):
    users.ensure_admin_exists()
    return build_context(store)


def test_one_shot_runs_command(portal, add_user) -> None:
    add_user("Ann", "ann@x.edu")

    assert run_one_shot(portal, ["admin@alumni.edu", "putnew", "send", "ann@x.edu", "hello", "there"]) is True

    inbox = portal.messages.list_for_recipient("ann@x.edu")
    assert [m.text for m in inbox] == ["hello there"]


def test_one_shot_reports_bad_message_id(portal, capsys) -> None:
    assert run_one_shot(portal, ["admin@alumni.edu", "putnew", "read", "abc"]) is False
    assert "Error:" in capsys.readouterr().out


def test_one_shot_wrong_password(portal) -> None:
    with pytest.raises(InvalidCredentialsError):
        run_one_shot(portal, ["admin@alumni.edu", "nope", "inbox"])
