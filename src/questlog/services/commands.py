"""Text commands and quest references that resolve through the manager."""
from __future__ import annotations

import logging
import re

from questlog.core.ids import is_guid
from questlog.domain.quest import Quest
from questlog.services.quest_manager import QuestManager

logger = logging.getLogger(__name__)

QUEST_TAG_PATTERN = re.compile(r"^quest:(?P<quest_id>.+)$", re.IGNORECASE)
_TRUE_FLAGS = ("1", "true")


def parse_set_visible_args(args: str | None) -> tuple[str, bool] | None:
    """Split "<title or guid>[|<flag>]" into a reference and a visibility flag."""
    if not args or not args.strip():
        return None
    reference, _, flag = args.partition("|")
    reference = reference.strip()
    if not reference:
        return None
    flag = flag.strip().lower()
    visible = flag in _TRUE_FLAGS if flag else True
    return reference, visible


def find_quest(manager: QuestManager, reference: str) -> Quest | None:
    """Look a quest up by GUID when the reference is one, otherwise by title."""
    if is_guid(reference):
        return manager.get_quest(reference)
    return manager.get_quest_by_title(reference)


def resolve_quest_reference(manager: QuestManager, text: str) -> Quest | None:
    """Resolve "quest:<id or title>" or a bare id/title to a visible quest."""
    match = QUEST_TAG_PATTERN.match(text.strip())
    reference = match.group("quest_id") if match else text
    reference = reference.strip()
    if not reference:
        return None
    return find_quest(manager, reference)


def quest_set_visible(manager: QuestManager, args: str | None) -> bool:
    """Director command: show or hide a quest from players.

    Returns True only when a visibility change was committed.
    """
    if not manager.session.is_director:
        logger.debug("Ignoring questsetvisible from non-director %s", manager.session.user_id)
        return False
    parsed = parse_set_visible_args(args)
    if parsed is None:
        return False
    reference, visible = parsed
    quest = find_quest(manager, reference)
    if quest is None:
        logger.debug("questsetvisible found no quest for %r", reference)
        return False
    if quest.visible_to_players == visible:
        return False
    manager.execute_update_fn(lambda: quest.set_visible_to_players(visible), "Set quest visibility")
    return True
