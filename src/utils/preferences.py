"""UI preferences kept in the storage area."""

from config import DARK_MODE_KEY
from core.storage import KeyValueStore

ENABLED = "enabled"
DISABLED = "disabled"


class PreferenceManager:
    def __init__(self, store: KeyValueStore):
        self.store = store

    @property
    def dark_mode(self) -> bool:
        return self.store.get(DARK_MODE_KEY) == ENABLED

    @dark_mode.setter
    def dark_mode(self, enabled: bool) -> None:
        self.store.set(DARK_MODE_KEY, ENABLED if enabled else DISABLED)
