from datetime import datetime

import pytest

from clipstash.models import ClipboardItem, ItemType
from clipstash.storage import KeyValueStore


class FakePasteboard:
    """In-memory stand-in for the system pasteboard."""

    def __init__(self, text: str | None = None):
        self.text = text
        self.count = 0
        self.writes: list[str] = []
        self.fail_reads = False
        self.fail_count = False
        self.fail_writes = False

    def copy(self, text: str | None) -> None:
        """Simulate another application replacing the pasteboard contents."""
        self.text = text
        self.count += 1

    def change_count(self) -> int:
        if self.fail_count:
            raise OSError("pasteboard unavailable")
        return self.count

    def read_text(self) -> str | None:
        if self.fail_reads:
            raise OSError("pasteboard unavailable")
        return self.text

    def write_text(self, text: str) -> None:
        if self.fail_writes:
            raise OSError("pasteboard rejected write")
        self.writes.append(text)
        self.copy(text)


@pytest.fixture
def storage():
    mgr = KeyValueStore(db_path=":memory:")
    yield mgr
    mgr.close()


@pytest.fixture
def pasteboard():
    return FakePasteboard()


@pytest.fixture
def make_item():
    """Factory fixture to create ClipboardItem instances for testing."""

    def _make_item(
        content: str = "hello world",
        item_type: ItemType = ItemType.TEXT,
        created_at: datetime | None = None,
    ) -> ClipboardItem:
        return ClipboardItem(
            content=content,
            item_type=item_type,
            created_at=created_at or datetime(2024, 5, 1, 9, 30),
        )

    return _make_item
