"""Display-ready views of quests, objectives and notes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from questlog.core.types import STATUS_LABELS
from questlog.domain.quest import Quest
from questlog.services.quest_manager import QuestManager
from questlog.services.session import UserSession

EMPTY_TRACKER_MESSAGE = "No quests yet. Create one to get started!"
NOT_YET_CREATED = "Not yet created"


@dataclass(slots=True)
class QuestSummaryView:
    quest_id: str
    title: str
    status_label: str
    category: str
    priority_label: str
    visible_to_players: bool
    can_edit: bool


@dataclass(slots=True)
class QuestTrackerView:
    header: str
    quests: List[QuestSummaryView]

    @property
    def is_empty(self) -> bool:
        return not self.quests


@dataclass(slots=True)
class ObjectiveView:
    objective_id: str
    order: int
    title: str
    description: str
    status_label: str
    can_delete: bool


@dataclass(slots=True)
class NoteView:
    note_id: str
    content: str
    author: str
    timestamp: str
    can_delete: bool
    visible_to_players: bool = False


@dataclass(slots=True)
class QuestDetailView:
    summary: QuestSummaryView
    description: str
    quest_giver: str
    location: str
    rewards: str
    rewards_claimed: bool
    created_by: str
    created_label: str
    modified_label: str
    objectives: List[ObjectiveView]
    notes: List[NoteView]


def format_status(status: str) -> str:
    """Return the display label for a stored status id."""
    label = STATUS_LABELS.get(status)
    if label:
        return label
    return " ".join(word.capitalize() for word in status.split("_"))


def format_timestamp_label(timestamp: str | None) -> str:
    return timestamp if timestamp else NOT_YET_CREATED


def sort_quests_for_display(quests: Iterable[Quest]) -> List[Quest]:
    return sorted(quests, key=lambda quest: (quest.title.casefold(), quest.id))


def build_summary_view(session: UserSession, quest: Quest) -> QuestSummaryView:
    return QuestSummaryView(
        quest_id=quest.id,
        title=quest.title or "Untitled Quest",
        status_label=format_status(quest.status),
        category=quest.category,
        priority_label=f"{quest.priority} priority",
        visible_to_players=quest.visible_to_players,
        can_edit=session.can_modify(quest.created_by),
    )


def build_tracker_view(manager: QuestManager) -> QuestTrackerView:
    """Summaries of every visible quest, sorted for display."""
    quests, count = manager.get_all_quests()
    summaries = [
        build_summary_view(manager.session, quest)
        for quest in sort_quests_for_display(quests.values())
    ]
    header = f"Active Quests ({count})" if count else EMPTY_TRACKER_MESSAGE
    return QuestTrackerView(header=header, quests=summaries)


def build_quest_detail_view(session: UserSession, quest: Quest) -> QuestDetailView:
    objectives = [
        ObjectiveView(
            objective_id=objective.id,
            order=objective.order,
            title=objective.title,
            description=objective.description,
            status_label=format_status(objective.status),
            can_delete=session.can_modify(objective.created_by),
        )
        for objective in quest.get_objectives_sorted()
    ]
    notes = [
        NoteView(
            note_id=note.id,
            content=note.content,
            author=session.display_name(note.author_id),
            timestamp=note.created_at,
            can_delete=session.can_modify(note.author_id),
            visible_to_players=note.visible_to_players,
        )
        for note in quest.get_notes()
    ]
    return QuestDetailView(
        summary=build_summary_view(session, quest),
        description=quest.description,
        quest_giver=quest.quest_giver,
        location=quest.location,
        rewards=quest.rewards,
        rewards_claimed=quest.rewards_claimed,
        created_by=session.display_name(quest.created_by),
        created_label=format_timestamp_label(quest.created_at),
        modified_label=format_timestamp_label(quest.modified_at),
        objectives=objectives,
        notes=notes,
    )
