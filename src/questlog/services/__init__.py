"""Service layer exports."""

from .commands import quest_set_visible, resolve_quest_reference
from .quest_codec import QuestCodec
from .quest_manager import QuestManager
from .session import PlayerInfo, UserSession

__all__ = [
    "PlayerInfo",
    "QuestCodec",
    "QuestManager",
    "UserSession",
    "quest_set_visible",
    "resolve_quest_reference",
]
