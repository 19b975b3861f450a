"""Password hashing.

Passwords are stored as an unsalted SHA-256 hex digest. Older records may
still carry a clear-text ``password`` field; those are verified directly and
upgraded to a digest on the first successful check.
"""

import hashlib
import hmac
import logging
from typing import Any, Dict, Tuple

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password.

    Args:
        password: Plain text password.

    Returns:
        Lowercase hex SHA-256 digest of the UTF-8 encoded password.
    """
    if isinstance(password, bytes):
        password = password.decode("utf-8")
    return hashlib.sha256(str(password).encode("utf-8")).hexdigest()


def verify_password(record: Dict[str, Any], password: str) -> Tuple[bool, bool]:
    """Check a password against a stored user record.

    A record with ``passwordHash`` is checked by digest only. A record without
    one but with a legacy clear-text ``password`` is compared directly; on a
    match the record dict is upgraded in place (``passwordHash`` set,
    ``password`` removed) and the caller must persist it.

    Args:
        record: Raw persisted user record.
        password: Plain text password to verify.

    Returns:
        Tuple of (matched, upgraded).
    """
    stored_hash = record.get("passwordHash")
    if stored_hash:
        return hmac.compare_digest(hash_password(password), str(stored_hash)), False

    legacy = record.get("password")
    if legacy is None:
        return False, False
    if not hmac.compare_digest(str(legacy).encode("utf-8"), str(password).encode("utf-8")):
        return False, False

    record["passwordHash"] = hash_password(password)
    record.pop("password", None)
    logger.info("Upgraded legacy password for user id=%s", record.get("id"))
    return True, True
