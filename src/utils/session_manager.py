"""Session management module.

This module holds the logged-in user's snapshot under the 'currentUser' key.
The snapshot is a copy; the user collection stays authoritative and
``refresh()`` re-reads it.
"""

import logging
from typing import Optional

import pydantic

from config import CURRENT_USER_KEY
from core.exceptions import InvalidCredentialsError
from core.storage import KeyValueStore, read_json, write_json
from schemas.user import ProfileUpdate, RegisterRequest, User
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

LOGIN_VIEW = "login"
DASHBOARD_VIEW = "dashboard"
ADMIN_VIEW = "admin"
PROTECTED_VIEWS = {DASHBOARD_VIEW, ADMIN_VIEW}


class SessionManager:
    """Manages login state for one browsing context."""

    def __init__(self, store: KeyValueStore, users: Optional[UserManager] = None):
        """Initialize SessionManager.

        Args:
            store: Key/value store capability.
            users: User store; built on the same store when omitted.
        """
        self.store = store
        self.users = users or UserManager(store)

    def _save_snapshot(self, user: User) -> None:
        write_json(self.store, CURRENT_USER_KEY, user.to_record())

    def login(self, email: str, password: str) -> User:
        """Log in with email and password.

        Args:
            email: Account email (any case).
            password: Plain text password.

        Returns:
            The authenticated User.

        Raises:
            InvalidCredentialsError: If no account matches. The message does
                not say which part was wrong.
        """
        user = self.users.authenticate(email, password)
        if user is None:
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()
        self._save_snapshot(user)
        logger.info("User id=%d logged in as %s", user.id, user.role)
        return user

    def register(self, req: RegisterRequest) -> User:
        """Register an alumni account and log it in."""
        user = self.users.register(req)
        self._save_snapshot(user)
        return user

    def update_profile(self, profile: ProfileUpdate) -> Optional[User]:
        """Apply a self-update for the logged-in user and refresh the snapshot.

        Both the user collection and the snapshot are written, so other
        contexts see the change on either key.

        Returns:
            The updated User, or None when logged out or the account is gone.
        """
        user = self.current_user()
        if user is None:
            return None
        updated = self.users.update_profile(user.id, profile)
        if updated is None:
            self.logout()
            return None
        self._save_snapshot(updated)
        return updated

    def current_user(self) -> Optional[User]:
        """Return the cached snapshot, or None when logged out."""
        record = read_json(self.store, CURRENT_USER_KEY)
        if not isinstance(record, dict):
            return None
        try:
            return User.model_validate(record)
        except pydantic.ValidationError:
            logger.warning("Discarding invalid session snapshot")
            return None

    def refresh(self) -> Optional[User]:
        """Replace the snapshot with the authoritative record.

        If the account no longer exists, the session is cleared.

        Returns:
            The refreshed User, or None.
        """
        cached = self.current_user()
        if cached is None:
            return None
        latest = self.users.find_by_id(cached.id)
        if latest is None:
            logger.info("Session user id=%d no longer exists, logging out", cached.id)
            self.logout()
            return None
        if latest != cached:
            self._save_snapshot(latest)
        return latest

    def logout(self) -> None:
        self.store.remove(CURRENT_USER_KEY)

    def delete_account(self) -> bool:
        """Delete the logged-in account and log out.

        The administrator account cannot be removed this way.

        Returns:
            True if the account was deleted.
        """
        user = self.current_user()
        if user is None:
            return False
        deleted = self.users.delete_alumni(user.id)
        if deleted:
            self.logout()
        return deleted

    def resolve_view(self, requested: str) -> str:
        """Apply role-based gating to a requested view.

        Args:
            requested: View name such as 'dashboard' or 'admin'.

        Returns:
            The view that should actually be shown.
        """
        if requested not in PROTECTED_VIEWS:
            return requested
        user = self.current_user()
        if user is None:
            return LOGIN_VIEW
        if requested == ADMIN_VIEW and not user.is_admin:
            return DASHBOARD_VIEW
        if requested == DASHBOARD_VIEW and user.is_admin:
            return ADMIN_VIEW
        return requested

    @staticmethod
    def home_view(user: User) -> str:
        """View a user lands on after login."""
        return ADMIN_VIEW if user.is_admin else DASHBOARD_VIEW
