"""Custom exception classes for the Alumni Portal core.

This module defines application-specific exceptions following Google Python
Style Guide. Lookups that find nothing return None instead of raising.
"""


class AlumniPortalError(Exception):
    """Base exception for all Alumni Portal errors."""

    pass


class DuplicateEmailError(AlumniPortalError):
    """Raised when creating a user whose email is already registered."""

    def __init__(self, email: str):
        """Initialize the exception.

        Args:
            email: The (normalized) email that is already taken.
        """
        self.email = email
        super().__init__("This email is already registered")


class InvalidCredentialsError(AlumniPortalError):
    """Raised when a login attempt does not match any account.

    The message never reveals whether the email or the password was wrong.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class EmptyMessageError(AlumniPortalError):
    """Raised when a message body is blank after trimming."""

    def __init__(self):
        super().__init__("Please enter a message before sending.")


class BackupNotFoundError(AlumniPortalError):
    """Raised when restoring from a backup key that is not stored."""

    def __init__(self, key: str):
        """Initialize the exception.

        Args:
            key: The requested backup key.
        """
        self.key = key
        super().__init__(f"Backup '{key}' not found")


class PermissionDeniedError(AlumniPortalError):
    """Raised when the acting user's role does not allow an operation."""

    pass


class ValidationError(AlumniPortalError):
    """Raised when input data validation fails."""

    pass


class ConfigurationError(AlumniPortalError):
    """Raised when there is a configuration error."""

    pass
