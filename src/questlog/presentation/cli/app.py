"""Console-driven quest log front-end."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, List, Tuple

from questlog.core.types import QUEST_CATEGORIES, QUEST_PRIORITIES, QUEST_STATUSES
from questlog.data.document_store import JsonFileDocumentStore
from questlog.data.events import DocumentChangedEvent
from questlog.domain.quest import Quest
from questlog.presentation.cli import config
from questlog.presentation.cli.render import (
    debug_enabled,
    render_heading,
    render_menu,
    render_quest_detail,
    render_tracker,
)
from questlog.services.commands import quest_set_visible
from questlog.services.quest_manager import QuestManager
from questlog.services.quest_views import (
    build_quest_detail_view,
    build_tracker_view,
    format_status,
    sort_quests_for_display,
)
from questlog.services.session import PlayerInfo, UserSession

MenuAction = Callable[[QuestManager], bool]


def main() -> None:
    """Start the interactive CLI session."""
    logging.basicConfig(
        level=logging.DEBUG if debug_enabled() else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    manager = build_manager(config.load_config(), config.get_document_path())
    manager.store.subscribe(_announce_change)
    print(f"=== Quest Log: {manager.get_metadata().campaign_name} ===")
    running = True
    while running:
        options = _main_menu_options()
        render_menu("Main Menu", [label for label, _ in options])
        index = _prompt_choice(len(options))
        _, action = options[index]
        running = action(manager)
    print("Goodbye!")


def build_manager(settings: config.CliConfig, document_path: Path) -> QuestManager:
    """Construct the manager over the JSON document for the configured user."""
    session = UserSession(
        user_id=settings.user_id,
        is_director=settings.is_director,
        players={settings.user_id: PlayerInfo(display_name=settings.display_name)},
    )
    return QuestManager(
        store=JsonFileDocumentStore(document_path),
        session=session,
        campaign_name=settings.campaign_name,
    )


def _main_menu_options() -> List[Tuple[str, MenuAction]]:
    options: List[Tuple[str, MenuAction]] = [
        ("List Quests", _list_quests),
        ("Show Quest", _show_quest),
        ("New Quest", _create_quest),
        ("Add Objective", _add_objective),
        ("Add Note", _add_note),
        ("Set Status", _set_status),
        ("Toggle Visibility", _toggle_visibility),
        ("Delete Quest", _delete_quest),
    ]
    if debug_enabled():
        options.append(("Debug: Dump Document", _dump_document))
    options.append(("Quit", _quit))
    return options


def _announce_change(event: DocumentChangedEvent) -> None:
    print(f"(saved: {event.change.description})")


def _list_quests(manager: QuestManager) -> bool:
    render_tracker(build_tracker_view(manager))
    return True


def _show_quest(manager: QuestManager) -> bool:
    quest = _choose_quest(manager)
    if quest is not None:
        render_quest_detail(build_quest_detail_view(manager.session, quest))
    return True


def _create_quest(manager: QuestManager) -> bool:
    title = input("Quest title (default New Quest): ").strip()
    quest = manager.create_draft_quest(title or "New Quest")
    quest.set_description(input("Description: ").strip())
    quest.set_quest_giver(input("Quest giver: ").strip())
    quest.set_location(input("Location: ").strip())
    quest.set_rewards(input("Rewards: ").strip())
    quest.set_category(_prompt_option("Category", QUEST_CATEGORIES, quest.category))
    quest.set_priority(_prompt_option("Priority", QUEST_PRIORITIES, quest.priority))
    manager.store_quest(quest, "Created new quest")
    print(f"Created '{quest.title}'.")
    return True


def _add_objective(manager: QuestManager) -> bool:
    quest = _choose_quest(manager)
    if quest is None or not _check_can_modify(manager, quest):
        return True
    title = input("Objective title: ").strip()
    description = input("Objective description: ").strip()
    quest.add_objective(title, description)
    manager.store_quest(quest, "Added objective to quest")
    return True


def _add_note(manager: QuestManager) -> bool:
    quest = _choose_quest(manager)
    if quest is None:
        return True
    content = input("Note: ").strip()
    if not content:
        print("Empty note discarded.")
        return True
    quest.add_note(content)
    manager.store_quest(quest, "Added note to quest")
    return True


def _set_status(manager: QuestManager) -> bool:
    quest = _choose_quest(manager)
    if quest is None or not _check_can_modify(manager, quest):
        return True
    status = _prompt_option("Status", QUEST_STATUSES, quest.status, labels=format_status)
    quest.update_properties({"status": status}, "Changed quest status")
    return True


def _toggle_visibility(manager: QuestManager) -> bool:
    if not manager.session.is_director:
        print("Only the director can change quest visibility.")
        return True
    quest = _choose_quest(manager)
    if quest is None:
        return True
    flag = "0" if quest.visible_to_players else "1"
    quest_set_visible(manager, f"{quest.id}|{flag}")
    return True


def _delete_quest(manager: QuestManager) -> bool:
    quest = _choose_quest(manager)
    if quest is None or not _check_can_modify(manager, quest):
        return True
    confirm = input(f"Delete '{quest.title}'? This cannot be undone. (y/N): ").strip().lower()
    if confirm == "y":
        manager.delete_quest(quest.id)
    return True


def _dump_document(manager: QuestManager) -> bool:
    render_heading(manager.document_path)
    print(json.dumps(manager.store.data, indent=2, sort_keys=True))
    return True


def _quit(manager: QuestManager) -> bool:
    return False


def _check_can_modify(manager: QuestManager, quest: Quest) -> bool:
    if manager.session.can_modify(quest.created_by):
        return True
    print("You can only change quests you created.")
    return False


def _choose_quest(manager: QuestManager) -> Quest | None:
    quests, count = manager.get_all_quests()
    if not count:
        print("No quests yet.")
        return None
    ordered = sort_quests_for_display(quests.values())
    render_menu("Quests", [quest.title or "Untitled Quest" for quest in ordered])
    return ordered[_prompt_choice(len(ordered))]


def _prompt_option(
    title: str,
    values: Tuple[str, ...],
    current: str,
    *,
    labels: Callable[[str], str] = str,
) -> str:
    render_menu(title, [labels(value) for value in values])
    raw = input(f"Select {title.lower()} (blank keeps {labels(current)}): ").strip()
    if not raw:
        return current
    try:
        index = int(raw) - 1
    except ValueError:
        return current
    return values[index] if 0 <= index < len(values) else current


def _prompt_choice(choice_count: int) -> int:
    while True:
        raw = input("Select an option: ").strip()
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < choice_count:
            return index
        print(f"Please enter a value between 1 and {choice_count}.")
