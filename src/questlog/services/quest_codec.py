"""Conversion between persisted quest records and domain entities."""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from questlog.domain.note import QuestNote
from questlog.domain.objective import QuestObjective
from questlog.domain.quest import Quest, QuestBinding

logger = logging.getLogger(__name__)

QuestRecord = Dict[str, Any]


class QuestCodec:
    """Encodes quests to camelCase records and decodes them leniently."""

    def encode(self, quest: Quest) -> QuestRecord:
        return {
            "id": quest.id,
            "title": quest.title,
            "description": quest.description,
            "questGiver": quest.quest_giver,
            "location": quest.location,
            "rewards": quest.rewards,
            "category": quest.category,
            "status": quest.status,
            "priority": quest.priority,
            "rewardsClaimed": quest.rewards_claimed,
            "visibleToPlayers": quest.visible_to_players,
            "createdBy": quest.created_by,
            "createdTimestamp": quest.created_at,
            "modifiedTimestamp": quest.modified_at,
            "objectives": {
                objective_id: self._encode_objective(objective)
                for objective_id, objective in quest.objectives.items()
            },
            "notes": {note_id: self._encode_note(note) for note_id, note in quest.notes.items()},
        }

    def decode(
        self,
        quest_id: str,
        record: Any,
        *,
        manager: QuestBinding | None = None,
        reader_is_director: bool = False,
    ) -> Quest | None:
        """Build a fresh Quest from a record, or None when the record is not an object."""
        if not isinstance(record, Mapping):
            logger.warning("Skipping malformed quest record '%s'", quest_id)
            return None
        visible = record.get("visibleToPlayers")
        quest = Quest(
            id=quest_id,
            title=_text(record.get("title")),
            description=_text(record.get("description")),
            quest_giver=_text(record.get("questGiver")),
            location=_text(record.get("location")),
            rewards=_text(record.get("rewards")),
            rewards_claimed=record.get("rewardsClaimed") is True,
            visible_to_players=visible if isinstance(visible, bool) else not reader_is_director,
            created_by=_text(record.get("createdBy")),
            created_at=_text(record.get("createdTimestamp")),
            modified_at=_optional_text(record.get("modifiedTimestamp")),
        )
        # Enum fields go through the validating setters so unknown values keep the defaults.
        for name in ("category", "status", "priority"):
            value = record.get(name)
            if value is not None:
                setattr(quest, name, value)
        quest.objectives = self._decode_children(record.get("objectives"), quest_id, self._decode_objective)
        quest.notes = self._decode_children(record.get("notes"), quest_id, self._decode_note)
        quest.bind(manager)
        return quest

    @staticmethod
    def _encode_objective(objective: QuestObjective) -> Dict[str, Any]:
        return {
            "id": objective.id,
            "title": objective.title,
            "description": objective.description,
            "status": objective.status,
            "order": objective.order,
            "createdBy": objective.created_by,
            "createdTimestamp": objective.created_at,
            "modifiedTimestamp": objective.modified_at,
        }

    @staticmethod
    def _encode_note(note: QuestNote) -> Dict[str, Any]:
        return {
            "id": note.id,
            "content": note.content,
            "authorId": note.author_id,
            "timestamp": note.created_at,
            "visibleToPlayers": note.visible_to_players,
        }

    @staticmethod
    def _decode_objective(objective_id: str, record: Mapping[str, Any]) -> QuestObjective:
        order = record.get("order")
        objective = QuestObjective(
            id=objective_id,
            title=_text(record.get("title")),
            description=_text(record.get("description")),
            order=order if isinstance(order, int) and not isinstance(order, bool) else 1,
            created_by=_text(record.get("createdBy")),
            created_at=_text(record.get("createdTimestamp")),
            modified_at=_text(record.get("modifiedTimestamp")),
        )
        status = record.get("status")
        if status is not None:
            objective.status = status
        return objective

    @staticmethod
    def _decode_note(note_id: str, record: Mapping[str, Any]) -> QuestNote:
        return QuestNote(
            id=note_id,
            content=_text(record.get("content")),
            author_id=_text(record.get("authorId")),
            created_at=_text(record.get("timestamp")),
            visible_to_players=record.get("visibleToPlayers") is True,
        )

    @staticmethod
    def _decode_children(value: Any, quest_id: str, decode_fn) -> Dict[str, Any]:
        if not isinstance(value, Mapping):
            return {}
        children: Dict[str, Any] = {}
        for child_id, child_record in value.items():
            if not isinstance(child_id, str) or not isinstance(child_record, Mapping):
                logger.warning("Skipping malformed child record '%s' of quest '%s'", child_id, quest_id)
                continue
            children[child_id] = decode_fn(child_id, child_record)
        return children


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _optional_text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None
