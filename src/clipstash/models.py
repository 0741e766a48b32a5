import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from clipstash.config import PREVIEW_LENGTH
from clipstash.utils import truncate_text


class ItemType(str, Enum):
    TEXT = "text"
    URL = "url"
    EMAIL = "email"
    PHONE = "phone"
    CODE = "code"

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]


_GLYPHS = {
    ItemType.TEXT: "📄",
    ItemType.URL: "🔗",
    ItemType.EMAIL: "✉️",
    ItemType.PHONE: "📞",
    ItemType.CODE: "🧩",
}


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ClipboardItem:
    content: str
    item_type: ItemType = ItemType.TEXT
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    @property
    def display_content(self) -> str:
        """Single-line preview of the content, or "(Empty)" for blank text."""
        preview = truncate_text(self.content, PREVIEW_LENGTH)
        return preview if preview else "(Empty)"

    def clone(self) -> "ClipboardItem":
        """Copy content and type into a new item with a fresh identity and timestamp."""
        return ClipboardItem(content=self.content, item_type=self.item_type)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "timestamp": self.created_at.isoformat(),
            "type": self.item_type.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ClipboardItem":
        content = data["content"]
        if not isinstance(content, str):
            raise TypeError(f"content must be a string, got {type(content).__name__}")
        item_id = data["id"]
        if not isinstance(item_id, str):
            raise TypeError(f"id must be a string, got {type(item_id).__name__}")
        return cls(
            content=content,
            item_type=ItemType(data["type"]),
            created_at=datetime.fromisoformat(data["timestamp"]),
            id=item_id,
        )


def dump_items(items: list[ClipboardItem]) -> bytes:
    return json.dumps([item.to_dict() for item in items], ensure_ascii=False).encode("utf-8")


def load_items(data: bytes) -> list[ClipboardItem]:
    """Decode a stored item list.

    Raises ValueError, KeyError or TypeError when the bytes are corrupt or were
    written in an incompatible format.
    """
    try:
        raw = json.loads(data.decode("utf-8"))
    except RecursionError as exc:
        raise ValueError("stored items are nested too deeply") from exc
    if not isinstance(raw, list):
        raise ValueError("stored items must be a JSON array")
    return [ClipboardItem.from_dict(entry) for entry in raw]
