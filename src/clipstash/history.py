import logging
import sqlite3
import threading
from collections.abc import Callable
from typing import Protocol

from clipstash.classifier import classify
from clipstash.config import HISTORY_KEY
from clipstash.models import ClipboardItem, dump_items, load_items
from clipstash.storage import KeyValueStore

logger = logging.getLogger(__name__)


class PasteboardWriter(Protocol):
    def write_and_suppress(self, text: str) -> None: ...


class HistoryStore:
    """Bounded clipboard history, most recent first."""

    def __init__(
        self,
        storage: KeyValueStore,
        writer: PasteboardWriter,
        max_items: int,
        on_change: Callable[[], None] | None = None,
        key: str = HISTORY_KEY,
    ):
        self._storage = storage
        self._writer = writer
        self._key = key
        self._on_change = on_change
        self._lock = threading.RLock()
        self._max_items = max_items
        self._items: list[ClipboardItem] = self._load()
        if len(self._items) > self._max_items:
            self._evict()
            self._save()

    @property
    def items(self) -> list[ClipboardItem]:
        with self._lock:
            return list(self._items)

    @property
    def max_items(self) -> int:
        return self._max_items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def ingest(self, text: str) -> ClipboardItem | None:
        """Record newly detected pasteboard text. Returns the new item, if any."""
        with self._lock:
            if self._items and self._items[0].content == text:
                return None

            item = ClipboardItem(content=text, item_type=classify(text))
            self._items.insert(0, item)
            self._evict()
            self._save()
        self._notify()
        return item

    def copy_out(self, item: ClipboardItem) -> None:
        self._writer.write_and_suppress(item.content)

    def delete(self, item: ClipboardItem) -> None:
        with self._lock:
            self._items = [i for i in self._items if i.id != item.id]
            self._save()
        self._notify()

    def clear(self) -> None:
        with self._lock:
            self._items = []
            self._save()
        self._notify()

    def set_capacity(self, new_max: int) -> None:
        with self._lock:
            self._max_items = new_max
            evicted = self._evict()
            self._save()
        if evicted:
            logger.info("Capacity now %d, evicted %d item(s)", new_max, evicted)
        self._notify()

    def get(self, item_id: str) -> ClipboardItem | None:
        with self._lock:
            for item in self._items:
                if item.id == item_id:
                    return item
        return None

    def _evict(self) -> int:
        evicted = 0
        while self._items and len(self._items) > self._max_items:
            self._items.pop()
            evicted += 1
        return evicted

    def _notify(self) -> None:
        if self._on_change:
            self._on_change()

    def _save(self) -> None:
        try:
            self._storage.set(self._key, dump_items(self._items))
        except (sqlite3.Error, TypeError, ValueError):
            logger.exception("Error saving clipboard history")

    def _load(self) -> list[ClipboardItem]:
        try:
            data = self._storage.get(self._key)
        except sqlite3.Error:
            logger.exception("Error reading clipboard history")
            return []
        if data is None:
            return []
        try:
            return load_items(data)
        except (ValueError, KeyError, TypeError):
            logger.warning("Stored clipboard history is unreadable, starting empty", exc_info=True)
            return []
