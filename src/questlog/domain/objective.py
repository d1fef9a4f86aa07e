"""Quest objective entity."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from questlog.core.types import DEFAULT_STATUS, QUEST_STATUSES, QuestStatus

if TYPE_CHECKING:
    from questlog.domain.quest import Quest


@dataclass(slots=True)
class QuestObjective:
    """A single ordered task within a quest."""

    id: str
    title: str = ""
    description: str = ""
    status: QuestStatus = DEFAULT_STATUS
    order: int = 1
    created_by: str = ""
    created_at: str = ""
    modified_at: str = ""
    _owner: Quest | None = field(default=None, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        # Unknown statuses never land on the entity; an unset slot falls back to the default.
        if name == "status" and value not in QUEST_STATUSES:
            if hasattr(self, name):
                return
            value = DEFAULT_STATUS
        object.__setattr__(self, name, value)

    def set_title(self, title: str | None) -> None:
        self.title = title or ""
        self._changed()

    def set_description(self, description: str | None) -> None:
        self.description = description or ""
        self._changed()

    def set_status(self, status: str) -> bool:
        """Apply a status if it is valid; return whether it was accepted."""
        if status not in QUEST_STATUSES:
            return False
        self.status = status  # type: ignore[assignment]
        if self._owner is not None:
            self.modified_at = self._owner.timestamp()
        self._changed()
        return True

    def set_order(self, order: int) -> None:
        self.order = int(order)
        self._changed()

    def _changed(self) -> None:
        if self._owner is not None:
            self._owner.mark_changed()
