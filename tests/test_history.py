from unittest.mock import MagicMock

import pytest

from clipstash.config import HISTORY_KEY
from clipstash.history import HistoryStore
from clipstash.models import ItemType, dump_items
from clipstash.monitor import ClipboardWatcher


@pytest.fixture
def writer():
    return MagicMock()


@pytest.fixture
def history(storage, writer):
    return HistoryStore(storage, writer, max_items=5)


def contents(store):
    return [item.content for item in store.items]


class TestIngest:
    def test_inserts_at_head(self, history):
        history.ingest("first")
        history.ingest("second")
        assert contents(history) == ["second", "first"]

    def test_classifies_content(self, history):
        item = history.ingest("https://example.com")
        assert item.item_type == ItemType.URL
        assert history.items[0].item_type == ItemType.URL

    def test_adjacent_duplicate_is_no_op(self, history):
        first = history.ingest("same")
        assert history.ingest("same") is None
        assert len(history) == 1
        assert history.items[0].id == first.id

    def test_older_duplicate_is_inserted(self, history):
        history.ingest("a")
        history.ingest("b")
        history.ingest("a")
        assert contents(history) == ["a", "b", "a"]

    def test_duplicate_match_is_exact(self, history):
        history.ingest("Hello")
        history.ingest("Hello ")
        assert len(history) == 2

    def test_capacity_never_exceeded(self, history):
        for i in range(20):
            history.ingest(f"item {i}")
            assert len(history) <= 5
        assert contents(history) == [f"item {i}" for i in range(19, 14, -1)]

    def test_persists(self, history, storage, writer):
        history.ingest("saved")
        reloaded = HistoryStore(storage, writer, max_items=5)
        assert contents(reloaded) == ["saved"]

    def test_on_change_called(self, storage, writer):
        callback = MagicMock()
        store = HistoryStore(storage, writer, max_items=5, on_change=callback)
        store.ingest("x")
        callback.assert_called_once()

    def test_on_change_not_called_for_duplicate(self, storage, writer):
        callback = MagicMock()
        store = HistoryStore(storage, writer, max_items=5, on_change=callback)
        store.ingest("x")
        store.ingest("x")
        callback.assert_called_once()


class TestCopyOut:
    def test_delegates_to_writer(self, history, writer):
        item = history.ingest("copy me")
        history.copy_out(item)
        writer.write_and_suppress.assert_called_once_with("copy me")

    def test_order_unchanged(self, history):
        old = history.ingest("old")
        history.ingest("new")
        history.copy_out(old)
        assert contents(history) == ["new", "old"]

    def test_copy_out_then_poll_adds_nothing(self, storage, pasteboard):
        watcher = ClipboardWatcher(pasteboard)
        store = HistoryStore(storage, watcher, max_items=5)
        watcher.add_listener(store.ingest)

        pasteboard.copy("first")
        watcher.poll()
        pasteboard.copy("second")
        watcher.poll()
        first = store.items[1]

        store.copy_out(first)
        watcher.poll()

        assert contents(store) == ["second", "first"]
        assert pasteboard.text == "first"


class TestDeleteAndClear:
    def test_delete_by_identity(self, history):
        history.ingest("a")
        b = history.ingest("b")
        history.ingest("a")
        history.delete(b)
        assert contents(history) == ["a", "a"]

    def test_delete_only_matching_identity(self, history):
        history.ingest("a")
        history.ingest("b")
        newest_a = history.ingest("a")
        history.delete(newest_a)
        assert contents(history) == ["b", "a"]

    def test_delete_unknown_item_is_harmless(self, history, make_item):
        history.ingest("a")
        history.delete(make_item("a"))
        assert contents(history) == ["a"]

    def test_clear(self, history, storage, writer):
        history.ingest("a")
        history.ingest("b")
        history.clear()
        assert len(history) == 0
        assert HistoryStore(storage, writer, max_items=5).items == []

    def test_get(self, history):
        item = history.ingest("find me")
        assert history.get(item.id) == item
        assert history.get("missing") is None


class TestCapacity:
    def test_shrink_evicts_oldest(self, storage, writer):
        store = HistoryStore(storage, writer, max_items=10)
        for i in range(8):
            store.ingest(f"item {i}")
        survivors = store.items[:3]

        store.set_capacity(3)

        assert store.items == survivors
        assert store.max_items == 3

    def test_non_positive_capacity_empties_store(self, history):
        history.ingest("a")
        history.set_capacity(-1)
        assert history.items == []
        history.set_capacity(0)
        assert history.items == []

    def test_grow_keeps_everything(self, history):
        for i in range(5):
            history.ingest(f"item {i}")
        history.set_capacity(10)
        assert len(history) == 5
        for i in range(5, 10):
            history.ingest(f"item {i}")
        assert len(history) == 10

    def test_shrink_persists(self, history, storage, writer):
        for i in range(5):
            history.ingest(f"item {i}")
        history.set_capacity(2)
        reloaded = HistoryStore(storage, writer, max_items=50)
        assert contents(reloaded) == ["item 4", "item 3"]

    def test_loaded_history_trimmed_to_capacity(self, storage, writer):
        store = HistoryStore(storage, writer, max_items=10)
        for i in range(10):
            store.ingest(f"item {i}")
        smaller = HistoryStore(storage, writer, max_items=4)
        assert contents(smaller) == ["item 9", "item 8", "item 7", "item 6"]


class TestPersistenceFailures:
    def test_corrupt_bytes_load_empty(self, storage, writer):
        storage.set(HISTORY_KEY, b"{definitely not json")
        store = HistoryStore(storage, writer, max_items=5)
        assert store.items == []

    def test_deeply_nested_bytes_load_empty(self, storage, writer):
        storage.set(HISTORY_KEY, b"[" * 100000)
        assert HistoryStore(storage, writer, max_items=5).items == []

    def test_incompatible_format_loads_empty(self, storage, writer):
        storage.set(HISTORY_KEY, b'[{"content": "no id or type"}]')
        assert HistoryStore(storage, writer, max_items=5).items == []

    def test_recovers_after_corrupt_load(self, storage, writer):
        storage.set(HISTORY_KEY, b"garbage")
        store = HistoryStore(storage, writer, max_items=5)
        store.ingest("fresh")
        assert contents(HistoryStore(storage, writer, max_items=5)) == ["fresh"]

    def test_save_failure_keeps_memory_state(self, storage, writer, make_item):
        storage.set(HISTORY_KEY, dump_items([make_item("kept")]))
        store = HistoryStore(storage, writer, max_items=5)
        storage.close()

        store.ingest("in memory only")

        assert contents(store) == ["in memory only", "kept"]
