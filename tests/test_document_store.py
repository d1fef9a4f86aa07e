from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from questlog.core.clock import SteppingClock
from questlog.core.ids import GuidFactory
from questlog.data.document_store import InMemoryDocumentStore, JsonFileDocumentStore
from questlog.data.errors import DocumentLoadError, TransactionError
from questlog.data.events import DocumentChangedEvent
from questlog.services.quest_manager import QuestManager
from questlog.services.session import UserSession


def _build_manager(store: InMemoryDocumentStore) -> QuestManager:
    return QuestManager(
        store=store,
        session=UserSession(user_id="dm", is_director=True),
        ids=GuidFactory(seed=5),
        clock=SteppingClock(),
    )


def test_begin_change_twice_raises() -> None:
    store = InMemoryDocumentStore()
    store.begin_change()
    with pytest.raises(TransactionError):
        store.begin_change()


def test_complete_and_cancel_require_open_change() -> None:
    store = InMemoryDocumentStore()
    with pytest.raises(TransactionError):
        store.complete_change("Nothing open")
    with pytest.raises(TransactionError):
        store.cancel_change()


def test_replacing_data_requires_open_change() -> None:
    store = InMemoryDocumentStore()
    with pytest.raises(TransactionError):
        store.data = {"quests": {}}


def test_cancel_change_restores_snapshot() -> None:
    store = InMemoryDocumentStore(data={"quests": {"a": {"title": "Kept"}}})
    store.begin_change()
    assert store.data is not None
    store.data["quests"]["a"]["title"] = "Lost"
    store.data["quests"]["b"] = {}

    store.cancel_change()

    assert store.data == {"quests": {"a": {"title": "Kept"}}}
    assert store.in_change is False
    assert store.history == []


def test_complete_change_records_history_and_notifies() -> None:
    store = InMemoryDocumentStore(name="log")
    events: list[DocumentChangedEvent] = []
    store.subscribe(events.append)

    store.begin_change()
    store.data = {"quests": {}}
    record = store.complete_change("Seed document", undoable=False)

    assert record.sequence == 1
    assert record.undoable is False
    assert store.history == [record]
    assert events == [DocumentChangedEvent(path="memory://log", change=record)]


def test_json_store_missing_file_starts_empty(tmp_path: Path) -> None:
    store = JsonFileDocumentStore(tmp_path / "quest_log.json")
    assert store.data is None
    assert store.path == str(tmp_path / "quest_log.json")


def test_json_store_writes_committed_changes(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "quest_log.json"
    manager = _build_manager(JsonFileDocumentStore(path))
    quest = manager.create_quest("Persisted")

    on_disk = json.loads(path.read_text(encoding="utf-8"))

    assert on_disk["quests"][quest.id]["title"] == "Persisted"
    assert on_disk["metadata"]["version"] == 1
    assert not path.with_name("quest_log.json.tmp").exists()


def test_json_store_reloads_saved_quests(tmp_path: Path) -> None:
    path = tmp_path / "quest_log.json"
    writer = _build_manager(JsonFileDocumentStore(path))
    quest = writer.create_quest("Survives restart")
    quest.add_objective("Reboot")
    writer.store_quest(quest)

    reader = _build_manager(JsonFileDocumentStore(path))
    loaded = reader.get_quest(quest.id)

    assert loaded == quest


def test_json_store_rolled_back_change_is_not_written(tmp_path: Path) -> None:
    path = tmp_path / "quest_log.json"
    manager = _build_manager(JsonFileDocumentStore(path))
    quest = manager.create_quest("Stable")
    before = path.read_text(encoding="utf-8")

    def fail() -> None:
        quest.set_title("Unstable")
        raise ValueError("nope")

    with pytest.raises(ValueError):
        manager.execute_update_fn(fail)

    assert path.read_text(encoding="utf-8") == before


def test_json_store_invalid_json_is_treated_as_malformed(tmp_path: Path, caplog) -> None:
    path = tmp_path / "quest_log.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="questlog.data.document_store"):
        store = JsonFileDocumentStore(path)

    assert store.data is None
    assert "not valid JSON" in caplog.text


def test_json_store_non_object_document_gets_reinitialized(tmp_path: Path) -> None:
    path = tmp_path / "quest_log.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    store = JsonFileDocumentStore(path)
    assert store.data == {"_malformed": [1, 2, 3]}

    manager = _build_manager(store)
    assert manager.get_all_quests() == ({}, 0)

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["quests"] == {}


def test_json_store_unreadable_path_raises(tmp_path: Path) -> None:
    with pytest.raises(DocumentLoadError):
        JsonFileDocumentStore(tmp_path)


class _FailingStore(InMemoryDocumentStore):
    def _persist(self, data) -> None:
        raise OSError("disk full")


def test_failed_write_rolls_back_and_closes_change() -> None:
    store = _FailingStore(data={"quests": {}})
    store.begin_change()
    assert store.data is not None
    store.data["quests"]["a"] = {}

    with pytest.raises(OSError):
        store.complete_change("Doomed")

    assert store.in_change is False
    assert store.data == {"quests": {}}
    assert store.history == []
