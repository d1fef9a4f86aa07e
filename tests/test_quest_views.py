from __future__ import annotations

from questlog.core.clock import SteppingClock
from questlog.core.ids import GuidFactory
from questlog.data.document_store import InMemoryDocumentStore
from questlog.services.quest_manager import QuestManager
from questlog.services.quest_views import (
    EMPTY_TRACKER_MESSAGE,
    NOT_YET_CREATED,
    build_quest_detail_view,
    build_tracker_view,
    format_status,
)
from questlog.services.session import PlayerInfo, UserSession


def _build_manager(*, user_id: str = "dm", is_director: bool = True) -> QuestManager:
    session = UserSession(
        user_id=user_id,
        is_director=is_director,
        players={
            "dm": PlayerInfo("Game Master", color="#ff0000"),
            "p1": PlayerInfo("Rowan"),
        },
    )
    return QuestManager(
        store=InMemoryDocumentStore(),
        session=session,
        ids=GuidFactory(seed=2),
        clock=SteppingClock(),
    )


def test_format_status_labels() -> None:
    assert format_status("not_started") == "Not Started"
    assert format_status("on_hold") == "On Hold"
    assert format_status("under_review") == "Under Review"


def test_empty_tracker_shows_prompt() -> None:
    view = build_tracker_view(_build_manager())
    assert view.is_empty
    assert view.header == EMPTY_TRACKER_MESSAGE


def test_tracker_sorts_by_title_ignoring_case() -> None:
    manager = _build_manager()
    manager.create_quest("beacon")
    manager.create_quest("Amulet")
    manager.create_quest("Crown")

    view = build_tracker_view(manager)

    assert view.header == "Active Quests (3)"
    assert [quest.title for quest in view.quests] == ["Amulet", "beacon", "Crown"]
    assert view.quests[0].priority_label == "Medium priority"
    assert view.quests[0].status_label == "Not Started"


def test_detail_view_orders_children_and_names_authors() -> None:
    manager = _build_manager(user_id="p1", is_director=False)
    quest = manager.create_quest("Lost Cat")
    second = quest.add_objective("Ask the baker")
    first = quest.add_objective("Check the alley")
    quest.move_objective(first.id, second.id)
    quest.add_note("Cat is orange")
    quest.add_note("Baker saw it", author_id="dm")
    quest.add_note("Rumour", author_id="stranger")
    manager.store_quest(quest)

    view = build_quest_detail_view(manager.session, quest)

    assert [objective.title for objective in view.objectives] == ["Check the alley", "Ask the baker"]
    assert [note.author for note in view.notes] == ["{unknown}", "<color=#ff0000>Game Master</color>", "Rowan"]
    assert [note.can_delete for note in view.notes] == [False, False, True]
    assert view.created_by == "Rowan"
    assert view.summary.can_edit is True
    assert view.modified_label == quest.modified_at


def test_detail_view_of_draft_shows_placeholder_timestamp() -> None:
    manager = _build_manager()
    draft = manager.create_draft_quest("")

    view = build_quest_detail_view(manager.session, draft)

    assert view.summary.title == "New Quest"
    assert view.modified_label == NOT_YET_CREATED


def test_detail_view_carries_note_visibility() -> None:
    manager = _build_manager()
    quest = manager.create_quest("Clues")
    shared = quest.add_note("Footprints by the well")
    shared.set_visible_to_players(True)
    quest.add_note("The butler did it")
    manager.store_quest(quest)

    view = build_quest_detail_view(manager.session, quest)

    assert [note.visible_to_players for note in view.notes] == [False, True]
