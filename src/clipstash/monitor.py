import logging
import threading
from collections.abc import Callable
from enum import Enum

from clipstash.config import POLL_INTERVAL
from clipstash.pasteboard import Pasteboard

logger = logging.getLogger(__name__)


class WatcherState(str, Enum):
    IDLE = "idle"
    AWAITING_SELF_WRITE = "awaiting_self_write"


class ClipboardWatcher:
    """Polls the pasteboard change count and reports new text to listeners.

    Writes made through ``write_and_suppress`` are not reported back. The write
    resyncs the last seen change count so the next tick normally sees no change;
    the AWAITING_SELF_WRITE state additionally swallows one detected change in
    case the resync missed the write. Either outcome of the next successful
    read returns the watcher to IDLE.
    """

    def __init__(self, pasteboard: Pasteboard, poll_interval: float = POLL_INTERVAL):
        self._pasteboard = pasteboard
        self.poll_interval = poll_interval
        self._listeners: list[Callable[[str], None]] = []
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._poll_thread: threading.Thread | None = None
        self._last_seen = self._read_change_count()
        self.state = WatcherState.IDLE

    @property
    def is_running(self) -> bool:
        return self._poll_thread is not None

    @property
    def last_seen(self) -> int | None:
        return self._last_seen

    def add_listener(self, callback: Callable[[str], None]) -> None:
        self._listeners.append(callback)

    def start(self) -> None:
        with self._lock:
            if self._poll_thread is not None:
                return
            self._last_seen = self._read_change_count()
            self._stop_event.clear()
            self._poll_thread = threading.Thread(target=self._poll_loop, name="clipstash-watcher", daemon=True)
            self._poll_thread.start()
        logger.info("Watching pasteboard every %.2fs", self.poll_interval)

    def stop(self) -> None:
        with self._lock:
            thread = self._poll_thread
            if thread is None:
                return
            self._poll_thread = None
            self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout=max(1.0, self.poll_interval * 2))
        logger.info("Stopped watching pasteboard")

    def _poll_loop(self) -> None:
        while not self._stop_event.wait(self.poll_interval):
            self.poll()

    def poll(self) -> bool:
        """Run one tick. Returns True if new content was reported."""
        with self._lock:
            current = self._read_change_count()
            if current is None:
                return False

            if current == self._last_seen:
                if self.state is WatcherState.AWAITING_SELF_WRITE:
                    self.state = WatcherState.IDLE
                return False

            # Recorded before reading so a failed or discarded read is not retried
            self._last_seen = current

            text = self._read_text()
            if self.state is WatcherState.AWAITING_SELF_WRITE:
                self.state = WatcherState.IDLE
                logger.debug("Ignoring own pasteboard write (change %s)", current)
                return False

            if not text:
                return False

            self._emit(text)
            return True

    def write_and_suppress(self, text: str) -> None:
        with self._lock:
            self.state = WatcherState.AWAITING_SELF_WRITE
            try:
                self._pasteboard.write_text(text)
            except Exception:
                logger.exception("Error writing to pasteboard")
                self.state = WatcherState.IDLE
                return

            current = self._read_change_count()
            if current is not None:
                self._last_seen = current

    def _emit(self, text: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(text)
            except Exception:
                logger.exception("Clipboard listener failed")

    def _read_change_count(self) -> int | None:
        try:
            return self._pasteboard.change_count()
        except Exception:
            logger.debug("Could not read pasteboard change count", exc_info=True)
            return None

    def _read_text(self) -> str | None:
        try:
            return self._pasteboard.read_text()
        except Exception:
            logger.exception("Error reading clipboard")
            return None
