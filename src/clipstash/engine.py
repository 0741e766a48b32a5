import logging
from collections.abc import Callable

from clipstash.history import HistoryStore
from clipstash.monitor import ClipboardWatcher
from clipstash.pasteboard import Pasteboard
from clipstash.pinned import PinnedStore
from clipstash.settings import Settings
from clipstash.storage import KeyValueStore

logger = logging.getLogger(__name__)


class ClipboardEngine:
    """Wires the watcher, stores and settings around one key-value store."""

    def __init__(
        self,
        storage: KeyValueStore,
        pasteboard: Pasteboard,
        on_change: Callable[[], None] | None = None,
        poll_interval: float | None = None,
    ):
        self.storage = storage
        self.settings = Settings(storage)
        if poll_interval is None:
            self.watcher = ClipboardWatcher(pasteboard)
        else:
            self.watcher = ClipboardWatcher(pasteboard, poll_interval=poll_interval)
        self.history = HistoryStore(storage, self.watcher, self.settings.max_items, on_change=on_change)
        self.pinned = PinnedStore(storage, on_change=on_change)

        self.watcher.add_listener(self.history.ingest)
        self.settings.subscribe(self.history.set_capacity)
        logger.info(
            "Loaded %d history item(s) and %d pinned item(s), capacity %d",
            len(self.history),
            len(self.pinned),
            self.settings.max_items,
        )

    def start(self) -> None:
        self.watcher.start()

    def stop(self) -> None:
        self.watcher.stop()

    def close(self) -> None:
        self.stop()
        self.storage.close()
