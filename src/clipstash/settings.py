import json
import logging
import sqlite3
from collections.abc import Callable

from clipstash.config import DEFAULT_ICON, DEFAULT_MAX_ITEMS, ICON_OPTIONS, clamp_max_items
from clipstash.storage import KeyValueStore

logger = logging.getLogger(__name__)

MAX_ITEMS_KEY = "maxItems"
MENU_BAR_ICON_KEY = "menuBarIcon"
SHOW_TIMESTAMPS_KEY = "showTimestamps"


class Settings:
    """User preferences, persisted on every change.

    Observers registered with ``subscribe`` are called with the new
    ``max_items`` whenever it changes.
    """

    def __init__(self, storage: KeyValueStore):
        self._storage = storage
        self._observers: list[Callable[[int], None]] = []

        max_items = self._load(MAX_ITEMS_KEY, DEFAULT_MAX_ITEMS)
        if isinstance(max_items, bool) or not isinstance(max_items, int):
            max_items = DEFAULT_MAX_ITEMS
        self._max_items = clamp_max_items(max_items)

        icon = self._load(MENU_BAR_ICON_KEY, DEFAULT_ICON)
        self._menu_bar_icon = icon if icon in ICON_OPTIONS else DEFAULT_ICON

        show_timestamps = self._load(SHOW_TIMESTAMPS_KEY, True)
        self._show_timestamps = show_timestamps if isinstance(show_timestamps, bool) else True

    def subscribe(self, callback: Callable[[int], None]) -> None:
        self._observers.append(callback)

    @property
    def max_items(self) -> int:
        return self._max_items

    @max_items.setter
    def max_items(self, value: int) -> None:
        value = clamp_max_items(int(value))
        changed = value != self._max_items
        self._max_items = value
        self._save(MAX_ITEMS_KEY, value)
        if changed:
            for callback in list(self._observers):
                callback(value)

    @property
    def menu_bar_icon(self) -> str:
        return self._menu_bar_icon

    @menu_bar_icon.setter
    def menu_bar_icon(self, value: str) -> None:
        if value not in ICON_OPTIONS:
            raise ValueError(f"Unsupported menu bar icon: {value!r}")
        self._menu_bar_icon = value
        self._save(MENU_BAR_ICON_KEY, value)

    @property
    def show_timestamps(self) -> bool:
        return self._show_timestamps

    @show_timestamps.setter
    def show_timestamps(self, value: bool) -> None:
        self._show_timestamps = bool(value)
        self._save(SHOW_TIMESTAMPS_KEY, self._show_timestamps)

    def reset_to_defaults(self) -> None:
        self.max_items = DEFAULT_MAX_ITEMS
        self.menu_bar_icon = DEFAULT_ICON
        self.show_timestamps = True

    def _load(self, key: str, default):
        try:
            data = self._storage.get(key)
        except sqlite3.Error:
            logger.exception("Error reading setting %s", key)
            return default
        if data is None:
            return default
        try:
            return json.loads(data.decode("utf-8"))
        except (ValueError, RecursionError):
            logger.warning("Ignoring unreadable setting %s", key)
            return default

    def _save(self, key: str, value) -> None:
        try:
            self._storage.set(key, json.dumps(value, ensure_ascii=False).encode("utf-8"))
        except sqlite3.Error:
            logger.exception("Error saving setting %s", key)
