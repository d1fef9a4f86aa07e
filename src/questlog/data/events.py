"""Typed change notifications emitted by document stores."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """One committed change, kept for audit."""

    sequence: int
    description: str
    undoable: bool


@dataclass(frozen=True, slots=True)
class DocumentChangedEvent:
    """Delivered to listeners after a change has been committed."""

    path: str
    change: ChangeRecord


DocumentListener = Callable[[DocumentChangedEvent], None]
