import logging
import sqlite3
import threading
from collections.abc import Callable

from clipstash.config import PINNED_KEY
from clipstash.models import ClipboardItem, dump_items, load_items
from clipstash.storage import KeyValueStore

logger = logging.getLogger(__name__)


class PinnedStore:
    """Pinned items keyed by content. Unbounded and independent of history."""

    def __init__(
        self,
        storage: KeyValueStore,
        on_change: Callable[[], None] | None = None,
        key: str = PINNED_KEY,
    ):
        self._storage = storage
        self._key = key
        self._on_change = on_change
        self._lock = threading.RLock()
        self._items: list[ClipboardItem] = self._load()

    @property
    def items(self) -> list[ClipboardItem]:
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def is_pinned(self, item: ClipboardItem) -> bool:
        with self._lock:
            return any(i.content == item.content for i in self._items)

    def toggle(self, item: ClipboardItem) -> bool:
        """Unpin content that is pinned, otherwise pin a copy. Returns the new state."""
        with self._lock:
            for index, pinned in enumerate(self._items):
                if pinned.content == item.content:
                    del self._items[index]
                    pinned_now = False
                    break
            else:
                self._items.insert(0, item.clone())
                pinned_now = True
            self._save()
        self._notify()
        return pinned_now

    def remove(self, item: ClipboardItem) -> None:
        with self._lock:
            self._items = [i for i in self._items if i.content != item.content]
            self._save()
        self._notify()

    def clear(self) -> None:
        with self._lock:
            self._items = []
            self._save()
        self._notify()

    def get(self, item_id: str) -> ClipboardItem | None:
        with self._lock:
            for item in self._items:
                if item.id == item_id:
                    return item
        return None

    def _notify(self) -> None:
        if self._on_change:
            self._on_change()

    def _save(self) -> None:
        try:
            self._storage.set(self._key, dump_items(self._items))
        except (sqlite3.Error, TypeError, ValueError):
            logger.exception("Error saving pinned items")

    def _load(self) -> list[ClipboardItem]:
        try:
            data = self._storage.get(self._key)
        except sqlite3.Error:
            logger.exception("Error reading pinned items")
            return []
        if data is None:
            return []
        try:
            items = load_items(data)
        except (ValueError, KeyError, TypeError):
            logger.warning("Stored pinned items are unreadable, starting empty", exc_info=True)
            return []
        # Keep the first (newest) entry per content
        seen: set[str] = set()
        unique = []
        for item in items:
            if item.content not in seen:
                seen.add(item.content)
                unique.append(item)
        return unique
