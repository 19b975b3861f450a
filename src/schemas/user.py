"""User schema definitions.

This module defines the User record and the request models used to create
or update it. Records are persisted with the camelCase keys of the storage
layout (``passwordHash``, ``graduationYear``); Python code uses snake_case.
"""

from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

Role = Literal["admin", "alumni"]


def _normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


Email = Annotated[str, BeforeValidator(_normalize_email)]


class User(BaseModel):
    """A stored account, admin or alumni."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(description="Unique id, assigned as max(existing ids) + 1.")
    name: str
    email: Email = Field(description="Unique, lowercase; identity key for messaging.")
    password_hash: Optional[str] = Field(
        default=None,
        alias="passwordHash",
        description="SHA-256 hex digest of the password.",
    )
    password: Optional[str] = Field(
        default=None,
        description="Legacy clear-text password, removed on first successful login.",
    )
    role: Role = "alumni"
    department: str = ""
    graduation_year: int = Field(alias="graduationYear")
    company: str = ""
    position: str = ""
    skills: str = Field(default="", description="Comma-separated free text.")
    linkedin: str = ""
    mentorship: bool = False

    @field_validator("company", "position", "skills", "linkedin", "department", mode="before")
    @classmethod
    def _blank_optional(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("mentorship", mode="before")
    @classmethod
    def _mentorship_default(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def skill_list(self):
        return [s.strip() for s in self.skills.split(",") if s.strip()]

    def to_record(self) -> Dict[str, Any]:
        """Dump in the persisted layout, omitting absent legacy fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class UserCreate(BaseModel):
    """Fields accepted when creating an account."""

    name: str
    email: Email
    password: str
    department: str
    graduation_year: int
    company: str = ""
    position: str = ""
    skills: str = ""
    linkedin: str = ""
    mentorship: bool = False

    @field_validator("name", "company", "position", "skills", "linkedin", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value


class RegisterRequest(UserCreate):
    """Self-service registration form."""

    terms_accepted: bool = False


class AlumniCreate(BaseModel):
    """Admin console "add alumni" form; the password is assigned."""

    name: str
    email: Email
    department: str
    graduation_year: Optional[int] = None
    company: str = ""
    position: str = ""
    skills: str = ""
    linkedin: str = ""
    mentorship: bool = False

    @field_validator("name", "department", "company", "position", "skills", "linkedin", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value


class ProfileUpdate(BaseModel):
    """Alumni self-update; only these fields are editable from the dashboard."""

    company: Optional[str] = None
    position: Optional[str] = None
    skills: Optional[str] = None
    linkedin: Optional[str] = None
    mentorship: Optional[bool] = None

    @field_validator("company", "position", "skills", "linkedin", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class BootstrapAdmin(BaseModel):
    """One-time admin bootstrap info, also the shape of the 'initialAdmin' key."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: Email
    password: str
    department: Optional[str] = None
    graduation_year: Optional[int] = Field(default=None, alias="graduationYear")

    @field_validator("password", mode="before")
    @classmethod
    def _password_as_str(cls, value: Any) -> Any:
        return str(value) if value is not None else value
