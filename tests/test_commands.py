from __future__ import annotations

from questlog.core.clock import SteppingClock
from questlog.core.ids import GuidFactory
from questlog.data.document_store import InMemoryDocumentStore
from questlog.services.commands import (
    parse_set_visible_args,
    quest_set_visible,
    resolve_quest_reference,
)
from questlog.services.quest_manager import QuestManager
from questlog.services.session import UserSession


def _build_manager(
    store: InMemoryDocumentStore | None = None,
    *,
    user_id: str = "dm",
    is_director: bool = True,
) -> QuestManager:
    return QuestManager(
        store=store if store is not None else InMemoryDocumentStore(),
        session=UserSession(user_id=user_id, is_director=is_director),
        ids=GuidFactory(seed=21),
        clock=SteppingClock(),
    )


def test_parse_set_visible_args() -> None:
    assert parse_set_visible_args("Find the Amulet") == ("Find the Amulet", True)
    assert parse_set_visible_args("Find the Amulet|1") == ("Find the Amulet", True)
    assert parse_set_visible_args(" Find the Amulet | TRUE ") == ("Find the Amulet", True)
    assert parse_set_visible_args("Find the Amulet|0") == ("Find the Amulet", False)
    assert parse_set_visible_args("Find the Amulet|no") == ("Find the Amulet", False)


def test_parse_set_visible_args_rejects_empty_reference() -> None:
    assert parse_set_visible_args(None) is None
    assert parse_set_visible_args("   ") is None
    assert parse_set_visible_args("|1") is None


def test_set_visible_by_title_commits_change() -> None:
    store = InMemoryDocumentStore()
    manager = _build_manager(store)
    quest = manager.create_quest("Find the Amulet")
    assert quest.visible_to_players is False

    assert quest_set_visible(manager, "find the amulet|true") is True

    loaded = manager.get_quest(quest.id)
    assert loaded is not None
    assert loaded.visible_to_players is True
    assert store.history[-1].description == "Set quest visibility"


def test_set_visible_by_guid() -> None:
    manager = _build_manager()
    quest = manager.create_quest("Hidden cave", visible_to_players=True)

    assert quest_set_visible(manager, f"{quest.id}|0") is True

    loaded = manager.get_quest(quest.id)
    assert loaded is not None
    assert loaded.visible_to_players is False


def test_set_visible_skips_unchanged_value() -> None:
    store = InMemoryDocumentStore()
    manager = _build_manager(store)
    manager.create_quest("Already shown", visible_to_players=True)
    commits = len(store.history)

    assert quest_set_visible(manager, "Already shown|1") is False
    assert len(store.history) == commits


def test_set_visible_requires_director() -> None:
    store = InMemoryDocumentStore()
    director = _build_manager(store)
    player = _build_manager(store, user_id="p1", is_director=False)
    quest = director.create_quest("Shown", visible_to_players=True)

    assert quest_set_visible(player, "Shown|0") is False

    loaded = director.get_quest(quest.id)
    assert loaded is not None
    assert loaded.visible_to_players is True


def test_set_visible_unknown_quest() -> None:
    manager = _build_manager()
    assert quest_set_visible(manager, "Nowhere|1") is False


def test_resolve_quest_reference_accepts_tag_and_bare_forms() -> None:
    manager = _build_manager()
    quest = manager.create_quest("Dragon Hunt")

    for text in (f"quest:{quest.id}", f"QUEST:{quest.id}", "quest:dragon hunt", "Dragon Hunt", quest.id):
        resolved = resolve_quest_reference(manager, text)
        assert resolved is not None
        assert resolved.id == quest.id


def test_resolve_quest_reference_hides_invisible_quests() -> None:
    store = InMemoryDocumentStore()
    director = _build_manager(store)
    player = _build_manager(store, user_id="p1", is_director=False)
    quest = director.create_quest("Secret", visible_to_players=False)

    assert resolve_quest_reference(player, f"quest:{quest.id}") is None
    assert resolve_quest_reference(player, "quest:") is None
