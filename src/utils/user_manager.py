"""User management utilities.

This module provides the user store: account creation, lookup, update,
deletion, password verification (with the legacy clear-text upgrade), and
the single-admin invariant repair. The whole collection is kept under one
storage key and rewritten on every mutation.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pydantic
import pytz

from config import (
    DEFAULT_ADMIN_DEPARTMENT,
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_NAME,
    DEFAULT_ADMIN_PASSWORD,
    INITIAL_ADMIN_KEY,
    MIN_PASSWORD_LENGTH,
    USERS_KEY,
)
from core.exceptions import DuplicateEmailError, ValidationError
from core.storage import KeyValueStore, read_json, write_json
from schemas.user import BootstrapAdmin, ProfileUpdate, RegisterRequest, User, UserCreate
from utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)

# Fields that the generic update path never touches
PROTECTED_FIELDS = {"id", "email", "role", "password", "password_hash", "passwordHash"}


def _field_names() -> set:
    names = set()
    for name, field in User.model_fields.items():
        names.add(name)
        if field.alias:
            names.add(field.alias)
    return names


class UserManager:
    """Manages the user collection stored under the 'alumniUsers' key."""

    def __init__(self, store: KeyValueStore):
        """Initialize UserManager.

        Args:
            store: Key/value store capability.
        """
        self.store = store

    # --- raw collection access ---

    def load_records(self) -> List[Dict[str, Any]]:
        """Load raw user records; malformed data yields an empty collection."""
        records = read_json(self.store, USERS_KEY, [])
        if not isinstance(records, list):
            logger.warning("User collection is not a list, treating as empty")
            return []
        return [r for r in records if isinstance(r, dict)]

    def save_records(self, records: List[Dict[str, Any]]) -> None:
        write_json(self.store, USERS_KEY, records)

    @staticmethod
    def _to_user(record: Dict[str, Any]) -> Optional[User]:
        try:
            return User.model_validate(record)
        except pydantic.ValidationError as e:
            logger.warning("Skipping invalid user record id=%s: %s", record.get("id"), e)
            return None

    @staticmethod
    def _next_id(records: List[Dict[str, Any]]) -> int:
        ids = [r["id"] for r in records if isinstance(r.get("id"), int)]
        return max(ids, default=0) + 1

    @staticmethod
    def _find_index(records: List[Dict[str, Any]], user_id: int) -> int:
        for index, record in enumerate(records):
            if record.get("id") == user_id:
                return index
        return -1

    @staticmethod
    def _email_of(record: Dict[str, Any]) -> str:
        return str(record.get("email", "")).strip().lower()

    # --- queries ---

    def list_users(self) -> List[User]:
        """List all valid users in stored order."""
        users = [self._to_user(r) for r in self.load_records()]
        return [u for u in users if u is not None]

    def list_alumni(self) -> List[User]:
        return [u for u in self.list_users() if u.role == "alumni"]

    def find_admin(self) -> Optional[User]:
        for user in self.list_users():
            if user.is_admin:
                return user
        return None

    def find_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by id.

        Returns:
            User object if found, None otherwise.
        """
        for record in self.load_records():
            if record.get("id") == user_id:
                return self._to_user(record)
        return None

    def find_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (case-insensitive).

        Returns:
            User object if found, None otherwise.
        """
        wanted = str(email).strip().lower()
        for record in self.load_records():
            if self._email_of(record) == wanted:
                return self._to_user(record)
        return None

    # --- mutations ---

    def create(self, data: UserCreate) -> User:
        """Create a new alumni account.

        Args:
            data: Account fields; the role is always alumni.

        Returns:
            Created User object.

        Raises:
            DuplicateEmailError: If the email is already registered.
        """
        records = self.load_records()
        if any(self._email_of(r) == data.email for r in records):
            raise DuplicateEmailError(data.email)

        user = User(
            id=self._next_id(records),
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role="alumni",
            department=data.department,
            graduation_year=data.graduation_year,
            company=data.company,
            position=data.position,
            skills=data.skills,
            linkedin=data.linkedin,
            mentorship=data.mentorship,
        )
        records.append(user.to_record())
        self.save_records(records)
        logger.info("Created user id=%d email=%s", user.id, user.email)
        return user

    def register(self, req: RegisterRequest) -> User:
        """Self-service registration.

        Raises:
            ValidationError: If terms are not accepted or the password is too short.
            DuplicateEmailError: If the email is already registered.
        """
        if not req.terms_accepted:
            raise ValidationError("You must agree to the Terms & Conditions")
        if len(req.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        user = self.create(req)
        self.repair_admin_invariant()
        return user

    def update(self, user_id: int, patch: Dict[str, Any]) -> Optional[User]:
        """Merge ``patch`` into a user record.

        Args:
            user_id: Id of the user to update.
            patch: Field values keyed by attribute name or stored name.

        Returns:
            The updated User, or None if no such user exists.

        Raises:
            ValidationError: If the patch touches a protected or unknown field,
                or produces an invalid record.
        """
        protected = PROTECTED_FIELDS.intersection(patch)
        if protected:
            raise ValidationError(
                f"Fields cannot be changed through update: {', '.join(sorted(protected))}"
            )
        unknown = set(patch) - _field_names()
        if unknown:
            raise ValidationError(f"Unknown user fields: {', '.join(sorted(unknown))}")

        records = self.load_records()
        index = self._find_index(records, user_id)
        if index == -1:
            return None

        merged = dict(records[index])
        for name, value in patch.items():
            field = User.model_fields.get(name)
            merged[field.alias if field and field.alias else name] = value
        try:
            user = User.model_validate(merged)
        except pydantic.ValidationError as e:
            raise ValidationError(str(e)) from e

        records[index] = user.to_record()
        self.save_records(records)
        logger.info("Updated user id=%d fields=%s", user_id, sorted(patch))
        return user

    def update_profile(self, user_id: int, profile: ProfileUpdate) -> Optional[User]:
        """Apply an alumni self-update (company, position, skills, linkedin, mentorship)."""
        return self.update(user_id, profile.model_dump(exclude_none=True))

    def set_password(self, user_id: int, new_password: str) -> Optional[User]:
        """Replace a user's password digest and drop any legacy clear-text field."""
        records = self.load_records()
        index = self._find_index(records, user_id)
        if index == -1:
            return None
        records[index]["passwordHash"] = hash_password(new_password)
        records[index].pop("password", None)
        self.save_records(records)
        logger.info("Password changed for user id=%d", user_id)
        return self._to_user(records[index])

    def delete(self, user_id: int) -> None:
        """Delete a user; does nothing if the user does not exist."""
        records = self.load_records()
        remaining = [r for r in records if r.get("id") != user_id]
        if len(remaining) == len(records):
            return
        self.save_records(remaining)
        logger.info("Deleted user id=%d", user_id)

    def delete_alumni(self, user_id: int) -> bool:
        """Delete an alumni record; admin records are refused.

        Returns:
            True if a record was removed.
        """
        user = self.find_by_id(user_id)
        if user is None:
            return False
        if user.is_admin:
            logger.warning("Refusing to delete admin id=%d through alumni deletion", user_id)
            return False
        self.delete(user_id)
        return True

    def clear_alumni(self) -> int:
        """Remove every non-admin record.

        Returns:
            Number of records removed.
        """
        records = self.load_records()
        admins = [r for r in records if r.get("role") == "admin"]
        self.save_records(admins)
        removed = len(records) - len(admins)
        logger.info("Cleared alumni data (%d records removed)", removed)
        return removed

    def import_users(self, records: Iterable[Dict[str, Any]], replace: bool = False) -> int:
        """Bulk import user records, then repair the admin invariant.

        In merge mode, records whose email already exists are skipped and
        clashing ids are reassigned.

        Args:
            records: Raw user records.
            replace: Replace the whole collection instead of merging.

        Returns:
            Number of records imported.
        """
        current = [] if replace else self.load_records()
        emails = {self._email_of(r) for r in current}
        ids = {r.get("id") for r in current}
        imported = 0
        for raw in records:
            user = self._to_user(raw) if isinstance(raw, dict) else None
            if user is None:
                continue
            if user.email in emails:
                logger.warning("Skipping imported user with existing email %s", user.email)
                continue
            if user.id in ids:
                user = user.model_copy(update={"id": self._next_id(current)})
            current.append(user.to_record())
            emails.add(user.email)
            ids.add(user.id)
            imported += 1
        self.save_records(current)
        self.repair_admin_invariant()
        logger.info("Imported %d users (replace=%s)", imported, replace)
        return imported

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Verify credentials, upgrading a legacy clear-text password on success.

        A matching record that does not validate as a User is neither
        returned nor upgraded.

        Returns:
            The matching User, or None.
        """
        wanted = str(email).strip().lower()
        records = self.load_records()
        for record in records:
            if self._email_of(record) != wanted:
                continue
            matched, upgraded = verify_password(record, password)
            if not matched:
                continue
            user = self._to_user(record)
            if user is None:
                # Unloadable record: refuse the login and leave it untouched
                return None
            if upgraded:
                self.save_records(records)
            return user
        return None

    # --- admin invariant ---

    def repair_admin_invariant(self) -> int:
        """Keep the admin with the smallest id and demote the others.

        Returns:
            Number of demoted admins.
        """
        records = self.load_records()
        admins = [r for r in records if r.get("role") == "admin"]
        if len(admins) <= 1:
            return 0
        keep = min(admins, key=lambda r: r.get("id", 0))
        demoted = 0
        for record in admins:
            if record is not keep:
                record["role"] = "alumni"
                demoted += 1
        self.save_records(records)
        logger.warning("Demoted %d extra admin(s); kept admin id=%s", demoted, keep.get("id"))
        return demoted

    def _resolve_bootstrap(self, bootstrap: Optional[BootstrapAdmin]) -> BootstrapAdmin:
        if bootstrap is not None:
            return bootstrap
        override = read_json(self.store, INITIAL_ADMIN_KEY)
        if isinstance(override, dict):
            try:
                return BootstrapAdmin.model_validate(override)
            except pydantic.ValidationError:
                logger.warning("Invalid initialAdmin in storage, ignoring override")
        elif override is not None:
            logger.warning("Invalid initialAdmin in storage, ignoring override")
        return BootstrapAdmin(
            name=DEFAULT_ADMIN_NAME,
            email=DEFAULT_ADMIN_EMAIL,
            password=DEFAULT_ADMIN_PASSWORD,
            department=DEFAULT_ADMIN_DEPARTMENT,
        )

    def ensure_admin_exists(self, bootstrap: Optional[BootstrapAdmin] = None) -> Optional[User]:
        """Create the bootstrap admin if there is no admin yet.

        Args:
            bootstrap: Explicit admin info. Falls back to the 'initialAdmin'
                storage key, then to the configured defaults.

        Returns:
            The created (or promoted) admin, or None if an admin already existed.
        """
        records = self.load_records()
        if any(r.get("role") == "admin" for r in records):
            return None

        info = self._resolve_bootstrap(bootstrap)
        password_hash = hash_password(info.password)

        for record in records:
            if self._email_of(record) == info.email:
                # Bootstrap email already taken: promote that account
                record["role"] = "admin"
                record["passwordHash"] = password_hash
                record.pop("password", None)
                self.save_records(records)
                logger.warning("Promoted existing user %s to admin", info.email)
                return self._to_user(record)

        admin = User(
            id=self._next_id(records),
            name=info.name,
            email=info.email,
            password_hash=password_hash,
            role="admin",
            department=info.department or DEFAULT_ADMIN_DEPARTMENT,
            graduation_year=info.graduation_year or datetime.now(pytz.utc).year,
        )
        records.append(admin.to_record())
        self.save_records(records)
        logger.info("One-time admin account created (dev-only). Email: %s", admin.email)
        return admin
