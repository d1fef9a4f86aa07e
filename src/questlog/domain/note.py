"""Quest note entity."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from questlog.domain.quest import Quest


@dataclass(slots=True)
class QuestNote:
    """Timestamped free-text annotation attached to a quest."""

    id: str
    content: str = ""
    author_id: str = ""
    created_at: str = ""
    visible_to_players: bool = False
    _owner: Quest | None = field(default=None, repr=False, compare=False)

    @property
    def timestamp(self) -> str:
        return self.created_at

    def set_content(self, content: str | None) -> None:
        self.content = content or ""
        if self._owner is not None:
            self._owner.mark_changed()

    def set_visible_to_players(self, visible: bool) -> None:
        """Director notes are hidden from players unless shared."""
        self.visible_to_players = bool(visible)
        if self._owner is not None:
            self._owner.mark_changed()
