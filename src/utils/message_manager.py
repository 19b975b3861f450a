"""Message management utilities.

This module provides the message store behind the peer-messaging inbox:
sending, broadcast fan-out, recipient queries, read tracking and deletion.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

import pydantic
import pytz

from config import MESSAGE_SEQ_KEY, MESSAGES_KEY
from core.exceptions import EmptyMessageError, PermissionDeniedError, ValidationError
from core.storage import KeyValueStore, read_json, write_json
from schemas.message import Message
from schemas.user import User

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)


def to_iso(moment: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with milliseconds and a 'Z' suffix."""
    return moment.astimezone(pytz.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _sort_key(message: Message) -> datetime:
    try:
        sent_at = message.sent_at()
    except ValueError:
        return _EPOCH
    if sent_at.tzinfo is None:
        sent_at = pytz.utc.localize(sent_at)
    return sent_at


class MessageManager:
    """Manages the message collection stored under the 'messages' key."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize MessageManager.

        Args:
            store: Key/value store capability.
            clock: Returns the current time; defaults to UTC now.
        """
        self.store = store
        self.clock = clock or (lambda: datetime.now(pytz.utc))

    def load_records(self) -> List[Dict[str, Any]]:
        records = read_json(self.store, MESSAGES_KEY, [])
        if not isinstance(records, list):
            logger.warning("Message collection is not a list, treating as empty")
            return []
        return [r for r in records if isinstance(r, dict)]

    def save_records(self, records: List[Dict[str, Any]]) -> None:
        write_json(self.store, MESSAGES_KEY, records)

    def list_messages(self) -> List[Message]:
        messages = []
        for record in self.load_records():
            try:
                messages.append(Message.model_validate(record))
            except pydantic.ValidationError as e:
                logger.warning("Skipping invalid message id=%s: %s", record.get("id"), e)
        return messages

    def _allocate_id(self, records: List[Dict[str, Any]]) -> int:
        # Counter never goes below the largest stored id, so old clock-derived ids stay unique
        counter = read_json(self.store, MESSAGE_SEQ_KEY, 0)
        if not isinstance(counter, int):
            counter = 0
        existing = [r["id"] for r in records if isinstance(r.get("id"), int)]
        next_id = max([counter, *existing]) + 1
        write_json(self.store, MESSAGE_SEQ_KEY, next_id)
        return next_id

    def _append(self, sender: str, sender_name: str, to: str, text: str, timestamp: str) -> Message:
        records = self.load_records()
        message = Message(
            id=self._allocate_id(records),
            sender=sender,
            sender_name=sender_name,
            to=to,
            text=text,
            timestamp=timestamp,
            read=False,
        )
        records.append(message.to_record())
        self.save_records(records)
        return message

    @staticmethod
    def _clean_text(text: str) -> str:
        cleaned = (text or "").strip()
        if not cleaned:
            raise EmptyMessageError()
        return cleaned

    def send(self, sender: str, sender_name: str, to: str, text: str) -> Message:
        """Send a message to a single recipient.

        Args:
            sender: Sender email.
            sender_name: Sender display name, stored as a snapshot.
            to: Recipient email.
            text: Message body.

        Returns:
            The stored Message.

        Raises:
            EmptyMessageError: If ``text`` is blank after trimming.
            ValidationError: If the recipient is blank.
        """
        body = self._clean_text(text)
        if not str(to or "").strip():
            raise ValidationError("A recipient is required")
        message = self._append(sender, sender_name, to, body, to_iso(self.clock()))
        logger.info("Message %d sent from %s to %s", message.id, message.sender, message.to)
        return message

    def broadcast(
        self,
        sender: str,
        sender_name: str,
        recipients: Iterable[str],
        text: str,
    ) -> List[Message]:
        """Fan a message out to several recipients.

        Each recipient gets an independent record; all share one timestamp.
        Records are written one at a time, so a failure partway through leaves
        the messages already written in place. Nothing is rolled back.

        Args:
            sender: Sender email.
            sender_name: Sender display name.
            recipients: Recipient emails; duplicates (case-insensitive) are dropped.
            text: Message body.

        Returns:
            One Message per distinct recipient, in input order.

        Raises:
            EmptyMessageError: If ``text`` is blank after trimming.
        """
        body = self._clean_text(text)
        timestamp = to_iso(self.clock())
        seen = set()
        sent = []
        for recipient in recipients:
            email = str(recipient or "").strip().lower()
            if not email or email in seen:
                continue
            seen.add(email)
            sent.append(self._append(sender, sender_name, email, body, timestamp))
        logger.info("Broadcast from %s delivered to %d recipients", sender, len(sent))
        return sent

    def broadcast_to_alumni(self, admin: User, alumni: Iterable[User], text: str) -> List[Message]:
        """Admin-only broadcast to every alumni.

        Raises:
            PermissionDeniedError: If ``admin`` is not an administrator.
        """
        if not admin.is_admin:
            raise PermissionDeniedError("Only the administrator can broadcast")
        recipients = [u.email for u in alumni if u.role == "alumni"]
        return self.broadcast(admin.email, admin.name, recipients, text)

    def list_for_recipient(self, email: str) -> List[Message]:
        """List messages addressed to ``email``, newest first."""
        wanted = str(email).strip().lower()
        inbox = [m for m in self.list_messages() if m.to == wanted]
        return sorted(inbox, key=_sort_key, reverse=True)

    def unread_count(self, email: str) -> int:
        return sum(1 for m in self.list_for_recipient(email) if not m.read)

    def latest_unread(self, email: str) -> Optional[Message]:
        for message in self.list_for_recipient(email):
            if not message.read:
                return message
        return None

    def find_by_id(self, message_id: int) -> Optional[Message]:
        for message in self.list_messages():
            if message.id == message_id:
                return message
        return None

    def mark_read(self, message_id: int) -> None:
        """Mark the first message with ``message_id`` as read; no-op otherwise."""
        records = self.load_records()
        for record in records:
            if record.get("id") != message_id:
                continue
            if record.get("read") is True:
                return
            record["read"] = True
            self.save_records(records)
            logger.debug("Message %d marked read", message_id)
            return

    def delete(self, message_id: int) -> None:
        """Delete the first message with ``message_id``; no-op if absent."""
        records = self.load_records()
        for index, record in enumerate(records):
            if record.get("id") == message_id:
                del records[index]
                self.save_records(records)
                logger.info("Deleted message %d", message_id)
                return
