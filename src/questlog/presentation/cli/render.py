"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
import textwrap
from typing import Iterable, Sequence

from questlog.services.quest_views import QuestDetailView, QuestTrackerView

_TEXT_WIDTH = 72


def debug_enabled() -> bool:
    """Return True only when QUESTLOG_DEBUG is explicitly set to '1'."""
    return os.getenv("QUESTLOG_DEBUG") == "1"


def wrap_text_for_box(text: str, width: int, *, indent_continuation: bool = True) -> list[str]:
    """
    Wrap text to fit within a fixed width, breaking on word boundaries.

    Args:
        text: The text to wrap
        width: Maximum width per line
        indent_continuation: If True, indent continuation lines with 2 spaces

    Returns:
        List of wrapped lines, each <= width characters
    """
    if not text or width <= 0:
        return [text] if text else [""]
    prefix = "- " if text.startswith("- ") else ""
    content = text[len(prefix):]
    subsequent_indent = "  " if indent_continuation else ""
    wrapped = textwrap.fill(
        content,
        width=width - len(prefix),
        subsequent_indent=subsequent_indent,
        break_long_words=False,
        break_on_hyphens=False,
    )
    lines = wrapped.split("\n")
    lines[0] = prefix + lines[0]
    if prefix and indent_continuation:
        lines[1:] = ["  " + line for line in lines[1:]]
    return lines


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        for wrapped in wrap_text_for_box(f"- {line}", _TEXT_WIDTH):
            print(wrapped)


def render_tracker(view: QuestTrackerView) -> None:
    render_heading("Quests")
    print(view.header)
    for idx, quest in enumerate(view.quests, start=1):
        hidden = "" if quest.visible_to_players else " [hidden]"
        print(f"{idx}. {quest.title}{hidden}")
        print(f"   {quest.status_label} | {quest.category} | {quest.priority_label}")


def render_quest_detail(view: QuestDetailView) -> None:
    summary = view.summary
    render_heading(summary.title)
    print(f"Status: {summary.status_label}   Category: {summary.category}   {summary.priority_label}")
    print(f"Visible to players: {'yes' if summary.visible_to_players else 'no'}")
    if view.quest_giver:
        print(f"Quest giver: {view.quest_giver}")
    if view.location:
        print(f"Location: {view.location}")
    if view.rewards:
        claimed = " (claimed)" if view.rewards_claimed else ""
        print(f"Rewards: {view.rewards}{claimed}")
    if view.description:
        for line in wrap_text_for_box(view.description, _TEXT_WIDTH, indent_continuation=False):
            print(line)
    print(f"Created: {view.created_label} by {view.created_by}")
    print(f"Modified: {view.modified_label}")
    render_heading("Objectives")
    if not view.objectives:
        print("(none)")
    for objective in view.objectives:
        print(f"{objective.order}. {objective.title or '(untitled)'} [{objective.status_label}]")
        if objective.description:
            for line in wrap_text_for_box(objective.description, _TEXT_WIDTH - 3):
                print(f"   {line}")
    render_heading("Notes")
    if not view.notes:
        print("(none)")
    render_bullet_lines(f"{note.timestamp} {note.author}: {note.content}" for note in view.notes)
