from datetime import datetime, timedelta

import pytest
import pytz

from core.storage import SharedStorage
from schemas.user import UserCreate
from utils.message_manager import MessageManager
from utils.session_manager import SessionManager
from utils.user_manager import UserManager


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int = 1) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def storage() -> SharedStorage:
    return SharedStorage()


@pytest.fixture
def store(storage):
    return storage.open_context("tab-1")


@pytest.fixture
def other_store(storage):
    return storage.open_context("tab-2")


@pytest.fixture
def users(store) -> UserManager:
    return UserManager(store)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 1, 12, 0, tzinfo=pytz.utc))


@pytest.fixture
def messages(store, clock) -> MessageManager:
    return MessageManager(store, clock=clock)


@pytest.fixture
def session(store, users) -> SessionManager:
    return SessionManager(store, users)


@pytest.fixture
def add_user(users):
    def _add(name: str, email: str, password: str = "secret1", **fields):
        fields.setdefault("department", "CSE")
        fields.setdefault("graduation_year", 2020)
        return users.create(UserCreate(name=name, email=email, password=password, **fields))

    return _add
