"""Admin console operations.

This module wraps the user store with the actions available from the admin
console: adding and removing alumni, the paged alumni table, the admin's own
settings, and the data maintenance buttons.
"""

import logging
from typing import Optional

from config import ADMIN_CREATED_PASSWORD, MIN_PASSWORD_LENGTH
from core.exceptions import InvalidCredentialsError, PermissionDeniedError, ValidationError
from core.storage import KeyValueStore
from schemas.user import AlumniCreate, User, UserCreate
from utils.directory import Page, filter_alumni, paginate, sort_by_name
from utils.password import verify_password
from utils.session_manager import SessionManager
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


class AdminManager:
    """Admin-only operations over the shared store."""

    def __init__(self, store: KeyValueStore, session: Optional[SessionManager] = None):
        """Initialize AdminManager.

        Args:
            store: Key/value store capability.
            session: Session of the acting context; built on ``store`` when omitted.
        """
        self.store = store
        self.session = session or SessionManager(store)
        self.users: UserManager = self.session.users

    def add_alumni(self, form: AlumniCreate) -> User:
        """Create an alumni record with the default admin-assigned password.

        Raises:
            ValidationError: If a required field is missing.
            DuplicateEmailError: If the email is already registered.
        """
        if not (form.name and form.email and form.department and form.graduation_year):
            raise ValidationError(
                "Please fill required fields: name, email, department, and graduation year."
            )
        user = self.users.create(
            UserCreate(
                name=form.name,
                email=form.email,
                password=ADMIN_CREATED_PASSWORD,
                department=form.department,
                graduation_year=form.graduation_year,
                company=form.company,
                position=form.position,
                skills=form.skills,
                linkedin=form.linkedin,
                mentorship=form.mentorship,
            )
        )
        logger.info("Admin added alumni id=%d", user.id)
        return user

    def view_alumni(self, user_id: int) -> Optional[User]:
        return self.users.find_by_id(user_id)

    def delete_alumni(self, user_id: int) -> bool:
        return self.users.delete_alumni(user_id)

    def alumni_table(
        self,
        search: str = "",
        department: Optional[str] = None,
        year: Optional[int] = None,
        page: int = 1,
    ) -> Page[User]:
        """Filtered alumni sorted by name, one fixed-size page at a time."""
        rows = filter_alumni(self.users.list_users(), search, department, year)
        return paginate(sort_by_name(rows), page)

    def update_settings(
        self,
        name: str = "",
        current_password: str = "",
        new_password: str = "",
        confirm_password: str = "",
    ) -> User:
        """Update the admin's display name and/or password.

        A password change needs the current password, a new password of at
        least MIN_PASSWORD_LENGTH characters, and a matching confirmation.

        Returns:
            The updated admin.

        Raises:
            PermissionDeniedError: If there is no admin account.
            ValidationError: If the new password is too short or unconfirmed.
            InvalidCredentialsError: If the current password is wrong.
        """
        admin = self.users.find_admin()
        if admin is None:
            raise PermissionDeniedError("No administrator account exists")

        if new_password or confirm_password:
            if len(new_password) < MIN_PASSWORD_LENGTH:
                raise ValidationError(
                    f"New password must be at least {MIN_PASSWORD_LENGTH} characters."
                )
            if new_password != confirm_password:
                raise ValidationError("New password and confirmation do not match.")
            record = admin.to_record()
            if not record.get("passwordHash") and record.get("password") is None:
                raise ValidationError("No password set for admin account.")
            matched, _ = verify_password(record, current_password)
            if not matched:
                raise InvalidCredentialsError("Current password is incorrect.")
            admin = self.users.set_password(admin.id, new_password)

        name = (name or "").strip()
        if name:
            admin = self.users.update(admin.id, {"name": name})

        current = self.session.current_user()
        if current is not None and current.is_admin:
            self.session.refresh()
        logger.info("Admin settings updated for id=%d", admin.id)
        return admin

    def clear_alumni_data(self) -> int:
        """Delete every alumni record, keeping admin accounts."""
        return self.users.clear_alumni()

    def reset_system(self) -> None:
        """Wipe the whole storage area, admin accounts included."""
        self.store.clear()
        logger.warning("System reset: storage area cleared")
