"""Domain entities for the quest log."""

from .note import QuestNote
from .objective import QuestObjective
from .quest import Quest, QuestBinding

__all__ = ["Quest", "QuestBinding", "QuestNote", "QuestObjective"]
