import logging
import threading

import rumps

from clipstash import __version__
from clipstash.config import DB_PATH, POLL_INTERVAL
from clipstash.engine import ClipboardEngine
from clipstash.menu import ENTRY_KEY_PREFIX, PINNED_KEY_PREFIX, MenuActions, MenuItemSpec, compute_menu_specs
from clipstash.models import ClipboardItem
from clipstash.pasteboard import MacPasteboard
from clipstash.storage import KeyValueStore
from clipstash.utils import ensure_dirs

logger = logging.getLogger(__name__)


class ClipstashApp(rumps.App):
    def __init__(self):
        ensure_dirs()
        self._dirty = threading.Event()
        self._engine = ClipboardEngine(KeyValueStore(DB_PATH), MacPasteboard(), on_change=self._mark_dirty)
        super().__init__("Clipstash", title=self._engine.settings.menu_bar_icon, quit_button=None)
        self._init_app()

    def _init_app(self) -> None:
        """Initialize menu state. Separated for testability."""
        self._actions = MenuActions(
            on_entry_click=self._on_entry_click,
            on_pinned_click=self._on_pinned_click,
            on_clear_pinned=self._on_clear_pinned,
            on_set_max_items=self._on_set_max_items,
            on_set_icon=self._on_set_icon,
            on_toggle_timestamps=self._on_toggle_timestamps,
            on_reset_settings=self._on_reset_settings,
            on_clear=self._on_clear,
            on_quit=self._on_quit,
        )
        self._build_menu()
        self._engine.start()
        logger.info("Clipstash v%s started", __version__)

    def _build_menu(self) -> None:
        self.menu.clear()
        settings = self._engine.settings
        specs = compute_menu_specs(
            self._engine.history.items,
            self._engine.pinned.items,
            settings.max_items,
            settings.menu_bar_icon,
            settings.show_timestamps,
            self._actions,
        )
        self.menu = [self._render_single_spec(spec) for spec in specs]

    def _render_single_spec(self, spec: MenuItemSpec | None) -> rumps.MenuItem | None:
        if spec is None:
            return None

        if spec.is_submenu:
            submenu = rumps.MenuItem(spec.title)
            for child in spec.children:
                submenu.add(self._render_single_spec(child))
            return submenu

        item = rumps.MenuItem(spec.title, callback=spec.callback)
        if spec.state is not None:
            item.state = int(spec.state)
        if spec.key is not None:
            item._id = spec.key
        if spec.payload is not None:
            item._payload = spec.payload
        return item

    # Store callbacks may arrive on the watcher thread; the menu is rebuilt on the main run loop
    def _mark_dirty(self) -> None:
        self._dirty.set()

    @rumps.timer(POLL_INTERVAL)
    def _refresh_if_dirty(self, _sender) -> None:
        if self._dirty.is_set():
            self._dirty.clear()
            self._build_menu()

    def _refresh_menu(self) -> None:
        self._dirty.clear()
        self._build_menu()

    def _lookup(self, sender, prefix: str, store) -> ClipboardItem | None:
        key = getattr(sender, "_id", "") or ""
        if not key.startswith(prefix):
            return None
        return store.get(key[len(prefix):])

    @staticmethod
    def _modifiers() -> tuple[bool, bool]:
        """Return (option held, command held) for the click being handled."""
        try:
            from AppKit import NSAlternateKeyMask, NSCommandKeyMask, NSEvent

            flags = NSEvent.modifierFlags()
            return bool(flags & NSAlternateKeyMask), bool(flags & NSCommandKeyMask)
        except Exception:
            logger.debug("Could not read modifier flags", exc_info=True)
            return False, False

    def _on_entry_click(self, sender) -> None:
        item = self._lookup(sender, ENTRY_KEY_PREFIX, self._engine.history)
        if item is None:
            return

        option, command = self._modifiers()
        if option:
            pinned = self._engine.pinned.toggle(item)
            rumps.notification("Clipstash", "", "Pinned" if pinned else "Unpinned", sound=False)
        elif command:
            self._engine.history.delete(item)
        else:
            self._engine.history.copy_out(item)
            rumps.notification("Clipstash", "", "Copied to clipboard", sound=False)
        self._refresh_menu()

    def _on_pinned_click(self, sender) -> None:
        item = self._lookup(sender, PINNED_KEY_PREFIX, self._engine.pinned)
        if item is None:
            return

        option, _command = self._modifiers()
        if option:
            self._engine.pinned.remove(item)
            rumps.notification("Clipstash", "", "Unpinned", sound=False)
        else:
            self._engine.history.copy_out(item)
            rumps.notification("Clipstash", "", "Copied to clipboard", sound=False)
        self._refresh_menu()

    def _on_clear_pinned(self, _sender) -> None:
        self._engine.pinned.clear()
        self._refresh_menu()

    def _on_set_max_items(self, sender) -> None:
        self._engine.settings.max_items = sender._payload
        self._refresh_menu()

    def _on_set_icon(self, sender) -> None:
        self._engine.settings.menu_bar_icon = sender._payload
        self.title = self._engine.settings.menu_bar_icon
        self._refresh_menu()

    def _on_toggle_timestamps(self, _sender) -> None:
        settings = self._engine.settings
        settings.show_timestamps = not settings.show_timestamps
        self._refresh_menu()

    def _on_reset_settings(self, _sender) -> None:
        self._engine.settings.reset_to_defaults()
        self.title = self._engine.settings.menu_bar_icon
        self._refresh_menu()

    def _on_clear(self, _sender) -> None:
        if rumps.alert("Clipstash", "Clear all clipboard history?", ok="Clear", cancel="Cancel"):
            self._engine.history.clear()
            self._refresh_menu()

    def _on_quit(self, _sender) -> None:
        self._engine.close()
        rumps.quit_application()
