"""Shared type aliases and enum value sets for the core and domain layers."""
from typing import Dict, Literal

QuestStatus = Literal["not_started", "active", "completed", "failed", "on_hold"]
QuestCategory = Literal["Main", "Side", "Personal", "Faction", "Tutorial"]
QuestPriority = Literal["High", "Medium", "Low"]

QUEST_STATUSES: tuple[QuestStatus, ...] = ("not_started", "active", "completed", "failed", "on_hold")
QUEST_CATEGORIES: tuple[QuestCategory, ...] = ("Main", "Side", "Personal", "Faction", "Tutorial")
QUEST_PRIORITIES: tuple[QuestPriority, ...] = ("High", "Medium", "Low")

DEFAULT_STATUS: QuestStatus = "not_started"
DEFAULT_CATEGORY: QuestCategory = "Main"
DEFAULT_PRIORITY: QuestPriority = "Medium"

STATUS_LABELS: Dict[str, str] = {
    "not_started": "Not Started",
    "active": "Active",
    "completed": "Completed",
    "failed": "Failed",
    "on_hold": "On Hold",
}

__all__ = [
    "QuestStatus",
    "QuestCategory",
    "QuestPriority",
    "QUEST_STATUSES",
    "QUEST_CATEGORIES",
    "QUEST_PRIORITIES",
    "DEFAULT_STATUS",
    "DEFAULT_CATEGORY",
    "DEFAULT_PRIORITY",
    "STATUS_LABELS",
]
