"""Cross-tab change notifier.

Watches the user collection, the message collection and the session
snapshot for writes made by *other* contexts and asks the views to redraw.
It never polls and never fires for the local context's own writes; that
filtering is done by the storage layer.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from config import CURRENT_USER_KEY, MESSAGES_KEY, USERS_KEY
from core.storage import StorageContext, StorageEvent
from schemas.message import Message
from schemas.user import User
from utils.directory import DashboardStats, alumni_network, dashboard_stats
from utils.message_manager import MessageManager
from utils.session_manager import SessionManager

logger = logging.getLogger(__name__)


@dataclass
class ViewCallbacks:
    """Redraw hooks supplied by the view layer. Any of them may be None."""

    on_inbox_changed: Optional[Callable[[User, List[Message]], None]] = None
    on_unread_changed: Optional[Callable[[User, int], None]] = None
    on_new_message: Optional[Callable[[Message], None]] = None
    on_directory_changed: Optional[Callable[[Optional[DashboardStats], List[User]], None]] = None
    on_profile_changed: Optional[Callable[[Optional[User]], None]] = None


class CrossTabNotifier:
    """Routes storage events from other contexts to view callbacks."""

    def __init__(
        self,
        context: StorageContext,
        session: SessionManager,
        messages: MessageManager,
        callbacks: ViewCallbacks,
    ):
        self.context = context
        self.session = session
        self.messages = messages
        self.callbacks = callbacks
        self._unsubscribers: List[Callable[[], None]] = []
        self._last_unread = 0

    def start(self) -> "CrossTabNotifier":
        """Subscribe to the watched keys and prime the unread counter."""
        if not self._unsubscribers:
            for key in (MESSAGES_KEY, USERS_KEY, CURRENT_USER_KEY):
                self._unsubscribers.append(self.context.on_change(key, self.handle))
            user = self.session.current_user()
            if user is not None:
                self._last_unread = self.messages.unread_count(user.email)
        return self

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def handle(self, event: StorageEvent) -> None:
        """Dispatch one storage event; also usable with synthetic events."""
        if not event.key:
            return
        logger.debug("Storage change for key %s from context %s", event.key, event.origin)
        if event.key == MESSAGES_KEY:
            self.render_inbox()
        elif event.key == CURRENT_USER_KEY:
            user = self.session.refresh()
            if self.callbacks.on_profile_changed:
                self.callbacks.on_profile_changed(user)
            self.render_inbox()
        elif event.key == USERS_KEY:
            if self.session.current_user() is not None:
                user = self.session.refresh()
                if self.callbacks.on_profile_changed:
                    self.callbacks.on_profile_changed(user)
            self.render_directory()

    def render_inbox(self) -> None:
        """Redraw the inbox and unread badge for the cached current user."""
        user = self.session.current_user()
        if user is None:
            return
        inbox = self.messages.list_for_recipient(user.email)
        if self.callbacks.on_inbox_changed:
            self.callbacks.on_inbox_changed(user, inbox)

        unread = [m for m in inbox if not m.read]
        if self.callbacks.on_unread_changed:
            self.callbacks.on_unread_changed(user, len(unread))
        if len(unread) > self._last_unread and unread and self.callbacks.on_new_message:
            # inbox is newest first
            self.callbacks.on_new_message(unread[0])
        self._last_unread = len(unread)

    def render_directory(self) -> None:
        """Recompute statistics and the alumni network listing."""
        if not self.callbacks.on_directory_changed:
            return
        users = self.session.users.list_users()
        user = self.session.current_user()
        stats = dashboard_stats(users, user) if user is not None else None
        self.callbacks.on_directory_changed(stats, alumni_network(users, user))
