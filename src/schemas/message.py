"""Message schema definitions."""

from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Message(BaseModel):
    """A directed message between two user emails.

    Immutable apart from ``read``, which only ever goes from False to True.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    sender: str = Field(alias="from", description="Sender email, lowercase.")
    sender_name: str = Field(
        default="",
        alias="fromName",
        description="Display name snapshot taken at send time.",
    )
    to: str = Field(description="Recipient email, lowercase.")
    text: str
    timestamp: str = Field(description="ISO-8601 send time.")
    read: bool = False

    @field_validator("sender", "to", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("sender_name", mode="before")
    @classmethod
    def _name_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def display_sender(self) -> str:
        return self.sender_name or self.sender

    def sent_at(self) -> datetime:
        return datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
