"""Current-user context: identity, director flag, and player display names."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

UNKNOWN_PLAYER = "{unknown}"


@dataclass(frozen=True, slots=True)
class PlayerInfo:
    display_name: str
    color: str | None = None


@dataclass(slots=True)
class UserSession:
    """Who is reading and writing the quest log right now."""

    user_id: str
    is_director: bool = False
    players: Dict[str, PlayerInfo] = field(default_factory=dict)

    def can_modify(self, created_by: str) -> bool:
        """Directors may edit anything; everyone else only what they created."""
        return self.is_director or (bool(self.user_id) and created_by == self.user_id)

    def display_name(self, user_id: str | None) -> str:
        """Return the player's name wrapped in a color tag when a color is known."""
        if not user_id:
            return UNKNOWN_PLAYER
        info = self.players.get(user_id)
        if info is None or not info.display_name:
            return UNKNOWN_PLAYER
        if info.color:
            return f"<color={info.color}>{info.display_name}</color>"
        return info.display_name
