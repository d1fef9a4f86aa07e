"""Quest aggregate root with embedded objectives and notes."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Protocol

from questlog.core.clock import Clock
from questlog.core.ids import GuidFactory
from questlog.core.types import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    QUEST_CATEGORIES,
    QUEST_PRIORITIES,
    QUEST_STATUSES,
    QuestCategory,
    QuestPriority,
    QuestStatus,
)
from questlog.domain.note import QuestNote
from questlog.domain.objective import QuestObjective

logger = logging.getLogger(__name__)

_ENUM_FIELDS: Dict[str, tuple[tuple[str, ...], str]] = {
    "category": (QUEST_CATEGORIES, DEFAULT_CATEGORY),
    "status": (QUEST_STATUSES, DEFAULT_STATUS),
    "priority": (QUEST_PRIORITIES, DEFAULT_PRIORITY),
}

_fallback_ids = GuidFactory()
_fallback_clock = Clock()


class QuestBinding(Protocol):
    """Services a quest needs from the manager that loaded it."""

    @property
    def current_user_id(self) -> str: ...

    def new_guid(self) -> str: ...

    def timestamp(self) -> str: ...

    def track_change(self, quest: Quest) -> None: ...

    def store_quest(self, quest: Quest, change_description: str = ...) -> None: ...


@dataclass(slots=True)
class Quest:
    """A tracked quest: metadata plus id-keyed objectives and notes."""

    id: str
    title: str = ""
    description: str = ""
    quest_giver: str = ""
    location: str = ""
    rewards: str = ""
    category: QuestCategory = DEFAULT_CATEGORY
    status: QuestStatus = DEFAULT_STATUS
    priority: QuestPriority = DEFAULT_PRIORITY
    rewards_claimed: bool = False
    visible_to_players: bool = True
    created_by: str = ""
    created_at: str = ""
    modified_at: str | None = None
    objectives: Dict[str, QuestObjective] = field(default_factory=dict)
    notes: Dict[str, QuestNote] = field(default_factory=dict)
    _manager: QuestBinding | None = field(default=None, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        rule = _ENUM_FIELDS.get(name)
        if rule is not None and value not in rule[0]:
            if hasattr(self, name):
                logger.debug("Rejected %s=%r for quest %s", name, value, self.id)
                return
            value = rule[1]
        object.__setattr__(self, name, value)

    # ---------------- scalar setters ---------------- #
    def set_title(self, title: str | None) -> None:
        self.title = title or ""
        self.mark_changed()

    def set_description(self, description: str | None) -> None:
        self.description = description or ""
        self.mark_changed()

    def set_quest_giver(self, quest_giver: str | None) -> None:
        self.quest_giver = quest_giver or ""
        self.mark_changed()

    def set_location(self, location: str | None) -> None:
        self.location = location or ""
        self.mark_changed()

    def set_rewards(self, rewards: str | None) -> None:
        self.rewards = rewards or ""
        self.mark_changed()

    def set_rewards_claimed(self, claimed: bool) -> None:
        self.rewards_claimed = bool(claimed)
        self.mark_changed()

    def set_visible_to_players(self, visible: bool) -> None:
        self.visible_to_players = bool(visible)
        self.mark_changed()

    def set_category(self, category: str) -> bool:
        """Apply a category if valid; invalid values keep the current one."""
        return self._set_enum("category", category)

    def set_status(self, status: str) -> bool:
        """Apply a status if valid; invalid values keep the current one."""
        return self._set_enum("status", status)

    def set_priority(self, priority: str) -> bool:
        """Apply a priority if valid; invalid values keep the current one."""
        return self._set_enum("priority", priority)

    # ---------------- objectives ---------------- #
    def get_max_objective_order(self) -> int:
        return max((objective.order for objective in self.objectives.values()), default=0)

    def add_objective(
        self,
        title: str = "",
        description: str = "",
        *,
        created_by: str | None = None,
    ) -> QuestObjective:
        """Create an objective ordered after every existing one."""
        now = self.timestamp()
        objective = QuestObjective(
            id=self._new_guid(),
            title=title or "",
            description=description or "",
            order=self.get_max_objective_order() + 1,
            created_by=created_by if created_by is not None else self._current_user_id(),
            created_at=now,
            modified_at=now,
            _owner=self,
        )
        self.objectives[objective.id] = objective
        self.mark_changed()
        return objective

    def remove_objective(self, objective_id: str) -> bool:
        if self.objectives.pop(objective_id, None) is None:
            return False
        self.mark_changed()
        return True

    def get_objective(self, objective_id: str) -> QuestObjective | None:
        return self.objectives.get(objective_id)

    def get_objectives_sorted(self) -> List[QuestObjective]:
        """Return objectives ascending by order; ties keep insertion order."""
        return sorted(self.objectives.values(), key=lambda objective: objective.order)

    def move_objective(self, objective_id: str, target_id: str) -> bool:
        """Move an objective in front of the target and renumber from 1."""
        if objective_id == target_id:
            return False
        moving = self.objectives.get(objective_id)
        if moving is None or target_id not in self.objectives:
            return False
        reordered: List[QuestObjective] = []
        for objective in self.get_objectives_sorted():
            if objective.id == target_id:
                reordered.append(moving)
            if objective.id != objective_id:
                reordered.append(objective)
        for position, objective in enumerate(reordered, start=1):
            objective.order = position
        self.mark_changed()
        return True

    # ---------------- notes ---------------- #
    def add_note(self, content: str, author_id: str | None = None) -> QuestNote:
        note = QuestNote(
            id=self._new_guid(),
            content=content or "",
            author_id=author_id if author_id is not None else self._current_user_id(),
            created_at=self.timestamp(),
            _owner=self,
        )
        self.notes[note.id] = note
        self.mark_changed()
        return note

    def remove_note(self, note_id: str) -> bool:
        if self.notes.pop(note_id, None) is None:
            return False
        self.mark_changed()
        return True

    def get_note(self, note_id: str) -> QuestNote | None:
        return self.notes.get(note_id)

    def get_notes(self) -> List[QuestNote]:
        """Return notes newest first."""
        return sorted(self.notes.values(), key=lambda note: note.created_at, reverse=True)

    # ---------------- bulk update ---------------- #
    def update_properties(
        self,
        properties: Mapping[str, Any],
        change_description: str = "Update quest properties",
    ) -> None:
        """Apply a partial update, then persist it through the manager in one transaction."""
        for name, value in properties.items():
            setter = self._property_setters().get(name)
            if setter is None:
                logger.debug("Ignoring unknown quest property '%s'", name)
                continue
            setter(value)
        if self._manager is not None:
            self._manager.store_quest(self, change_description)

    # ---------------- binding helpers ---------------- #
    @property
    def manager(self) -> QuestBinding | None:
        return self._manager

    def bind(self, manager: QuestBinding | None) -> None:
        """Attach the quest (and its children) to a manager."""
        self._manager = manager
        for objective in self.objectives.values():
            objective._owner = self
        for note in self.notes.values():
            note._owner = self

    def mark_changed(self) -> None:
        if self._manager is not None:
            self._manager.track_change(self)

    def timestamp(self) -> str:
        if self._manager is not None:
            return self._manager.timestamp()
        return _fallback_clock.timestamp()

    def _new_guid(self) -> str:
        if self._manager is not None:
            return self._manager.new_guid()
        return _fallback_ids.new_guid()

    def _current_user_id(self) -> str:
        if self._manager is not None:
            return self._manager.current_user_id
        return ""

    def _set_enum(self, name: str, value: str) -> bool:
        allowed, _ = _ENUM_FIELDS[name]
        if value not in allowed:
            logger.debug("Rejected %s=%r for quest %s", name, value, self.id)
            return False
        setattr(self, name, value)
        self.mark_changed()
        return True

    def _property_setters(self) -> Dict[str, Callable[[Any], object]]:
        return {
            "title": self.set_title,
            "description": self.set_description,
            "quest_giver": self.set_quest_giver,
            "location": self.set_location,
            "rewards": self.set_rewards,
            "category": self.set_category,
            "status": self.set_status,
            "priority": self.set_priority,
            "rewards_claimed": self.set_rewards_claimed,
            "visible_to_players": self.set_visible_to_players,
        }
