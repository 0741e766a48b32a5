import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("CLIPSTASH_DATA_DIR", Path.home() / ".local" / "share" / "clipstash"))
DB_PATH = DATA_DIR / "clipstash.db"
LOG_PATH = DATA_DIR / "clipstash.log"

POLL_INTERVAL = 0.5  # seconds between pasteboard checks
PREVIEW_LENGTH = 100  # characters shown in menu item
LONG_CONTENT_THRESHOLD = 50  # show a character count above this length

HISTORY_KEY = "clipboardItems"
PINNED_KEY = "savedClipboardItems"

MIN_ITEMS = 5
MAX_ITEMS_LIMIT = 50
DEFAULT_ICON = "📋"
ICON_OPTIONS = ("📋", "📄", "📝", "📑", "🗂", "📰", "📊", "💾", "⚡️", "🔄")


def clamp_max_items(value: int) -> int:
    return max(MIN_ITEMS, min(MAX_ITEMS_LIMIT, value))


def _parse_default_max_items() -> int:
    raw = os.environ.get("CLIPSTASH_MAX_ITEMS")
    if raw is None:
        return 10
    try:
        value = int(raw)
    except ValueError:
        return 10
    return clamp_max_items(value)


DEFAULT_MAX_ITEMS = _parse_default_max_items()
