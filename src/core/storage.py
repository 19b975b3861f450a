"""Key/value store capability.

Every component reads and writes whole JSON-encoded collections through a
``KeyValueStore``. A ``SharedStorage`` plays the role of the origin-wide
storage area; each ``StorageContext`` opened on it plays the role of one
browser tab. Writes made through one context are announced to the change
handlers of every other context, never to the writer itself.

There is no locking and no merge: two contexts writing the same key
back-to-back is last-writer-wins, so one side's update can be lost.
"""

import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageEvent:
    """A storage mutation observed from another context.

    ``key`` is None when the whole storage area was cleared.
    """

    key: Optional[str]
    old_value: Optional[str]
    new_value: Optional[str]
    origin: str


StorageHandler = Callable[[StorageEvent], None]


class KeyValueStore(Protocol):
    """Capability injected into every store component."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...

    def clear(self) -> None: ...

    def on_change(
        self, key: Optional[str], handler: StorageHandler
    ) -> Callable[[], None]: ...


class StorageBackend(Protocol):
    """Raw persistence used by SharedStorage."""

    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def list_keys(self) -> List[str]: ...

    def delete_all(self) -> None: ...


class MemoryStorageBackend:
    """In-memory backend, insertion ordered."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def list_keys(self) -> List[str]:
        return list(self._data.keys())

    def delete_all(self) -> None:
        self._data.clear()


class SharedStorage:
    """Origin-wide storage area shared by several contexts."""

    def __init__(self, backend: Optional[StorageBackend] = None):
        """Initialize SharedStorage.

        Args:
            backend: Persistence backend. Defaults to an in-memory backend.
        """
        self.backend = backend if backend is not None else MemoryStorageBackend()
        self._contexts: List["StorageContext"] = []

    def open_context(self, name: Optional[str] = None) -> "StorageContext":
        """Open a new browsing context (a "tab") on this storage area."""
        context = StorageContext(self, name or uuid.uuid4().hex[:8])
        self._contexts.append(context)
        logger.debug("Opened storage context %s", context.context_id)
        return context

    def _detach(self, context: "StorageContext") -> None:
        if context in self._contexts:
            self._contexts.remove(context)

    def _dispatch(self, event: StorageEvent) -> None:
        for context in list(self._contexts):
            if context.context_id != event.origin:
                context._deliver(event)


class StorageContext:
    """A single browsing context's view of the shared storage area."""

    def __init__(self, storage: SharedStorage, context_id: str):
        self.storage = storage
        self.context_id = context_id
        self._handlers: List[tuple] = []

    def get(self, key: str) -> Optional[str]:
        return self.storage.backend.read(key)

    def set(self, key: str, value: str) -> None:
        old_value = self.storage.backend.read(key)
        self.storage.backend.write(key, value)
        if old_value != value:
            self.storage._dispatch(StorageEvent(key, old_value, value, self.context_id))

    def remove(self, key: str) -> None:
        old_value = self.storage.backend.read(key)
        if old_value is None:
            return
        self.storage.backend.delete(key)
        self.storage._dispatch(StorageEvent(key, old_value, None, self.context_id))

    def keys(self) -> List[str]:
        return self.storage.backend.list_keys()

    def clear(self) -> None:
        self.storage.backend.delete_all()
        self.storage._dispatch(StorageEvent(None, None, None, self.context_id))

    def on_change(
        self, key: Optional[str], handler: StorageHandler
    ) -> Callable[[], None]:
        """Subscribe to writes made by other contexts.

        Args:
            key: Storage key to watch, or None for every key (including clear).
            handler: Called with the StorageEvent.

        Returns:
            A callable that removes the subscription.
        """
        entry = (key, handler)
        self._handlers.append(entry)

        def unsubscribe() -> None:
            if entry in self._handlers:
                self._handlers.remove(entry)

        return unsubscribe

    def close(self) -> None:
        """Drop every subscription and detach from the storage area."""
        self._handlers.clear()
        self.storage._detach(self)

    def _deliver(self, event: StorageEvent) -> None:
        for key, handler in list(self._handlers):
            if key is not None and key != event.key:
                continue
            try:
                handler(event)
            except Exception:
                # A failing listener in one context must not break the writer
                logger.exception(
                    "Storage handler failed in context %s for key %s",
                    self.context_id,
                    event.key,
                )


def read_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """Read and decode a JSON value, failing closed.

    Args:
        store: The key/value store.
        key: Storage key.
        default: Returned when the key is missing or holds malformed JSON.

    Returns:
        The decoded value or ``default``.
    """
    raw = store.get(key)
    if raw is None:
        return default
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Malformed JSON under key '%s', treating as empty", key)
        return default
    if value is None:
        return default
    return value


def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    """Encode ``value`` as JSON and write it under ``key``."""
    store.set(key, json.dumps(value, ensure_ascii=False))
