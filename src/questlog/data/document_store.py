"""Snapshot document stores with a begin/complete change bracket."""
from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, List

from questlog.data.errors import DocumentLoadError, TransactionError
from questlog.data.events import ChangeRecord, DocumentChangedEvent, DocumentListener
from questlog.domain.document import DocumentData

logger = logging.getLogger(__name__)


class DocumentStore:
    """Abstract snapshot API: live data plus a transactional change bracket."""

    @property
    def path(self) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    @property
    def data(self) -> DocumentData | None:  # pragma: no cover - interface
        raise NotImplementedError

    @data.setter
    def data(self, value: DocumentData | None) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @property
    def in_change(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    def begin_change(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def complete_change(self, description: str, *, undoable: bool = True) -> ChangeRecord:  # pragma: no cover - interface
        raise NotImplementedError

    def cancel_change(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def subscribe(self, listener: DocumentListener) -> Callable[[], None]:  # pragma: no cover - interface
        raise NotImplementedError


class InMemoryDocumentStore(DocumentStore):
    """Process-local store; the data dict is mutated in place during a change."""

    def __init__(self, name: str = "quest_log", data: DocumentData | None = None) -> None:
        self._name = name
        self._data = data
        self._snapshot: DocumentData | None = None
        self._in_change = False
        self._listeners: List[DocumentListener] = []
        self._history: List[ChangeRecord] = []

    @property
    def path(self) -> str:
        return f"memory://{self._name}"

    @property
    def data(self) -> DocumentData | None:
        return self._data

    @data.setter
    def data(self, value: DocumentData | None) -> None:
        self._require_change("replace document data")
        self._data = value

    @property
    def in_change(self) -> bool:
        return self._in_change

    @property
    def history(self) -> List[ChangeRecord]:
        return list(self._history)

    def begin_change(self) -> None:
        if self._in_change:
            raise TransactionError(f"A change is already open on {self.path}.")
        self._snapshot = copy.deepcopy(self._data)
        self._in_change = True
        logger.debug("Began change on %s", self.path)

    def complete_change(self, description: str, *, undoable: bool = True) -> ChangeRecord:
        """Commit the open change, persist it, and notify listeners."""
        self._require_change("complete a change")
        record = ChangeRecord(
            sequence=len(self._history) + 1,
            description=description,
            undoable=undoable,
        )
        try:
            self._persist(self._data)
        except OSError:
            self.cancel_change()
            raise
        self._in_change = False
        self._snapshot = None
        self._history.append(record)
        logger.debug("Committed change %d on %s: %s", record.sequence, self.path, description)
        event = DocumentChangedEvent(path=self.path, change=record)
        for listener in list(self._listeners):
            listener(event)
        return record

    def cancel_change(self) -> None:
        """Discard the open change and restore the snapshot taken at begin."""
        self._require_change("cancel a change")
        self._data = self._snapshot
        self._snapshot = None
        self._in_change = False
        logger.debug("Rolled back change on %s", self.path)

    def subscribe(self, listener: DocumentListener) -> Callable[[], None]:
        """Register a listener; the returned callable removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _persist(self, data: DocumentData | None) -> None:
        """Hook for subclasses that write committed data somewhere durable."""

    def _require_change(self, action: str) -> None:
        if not self._in_change:
            raise TransactionError(f"Cannot {action} on {self.path} without an open change.")


class JsonFileDocumentStore(InMemoryDocumentStore):
    """Store that loads from and writes committed changes to a JSON file."""

    def __init__(self, file_path: Path | str) -> None:
        self._file = Path(file_path)
        super().__init__(name=self._file.stem, data=self._load())

    @property
    def path(self) -> str:
        return str(self._file)

    def _load(self) -> DocumentData | None:
        try:
            text = self._file.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No quest log at %s; starting empty", self._file)
            return None
        except OSError as exc:
            raise DocumentLoadError(f"Unable to read quest log: {self._file}") from exc
        try:
            raw: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Quest log %s is not valid JSON (%s); treating as malformed", self._file, exc)
            return None
        logger.info("Loaded quest log from %s", self._file)
        return raw if isinstance(raw, dict) else {"_malformed": raw}

    def _persist(self, data: DocumentData | None) -> None:
        self._file.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._file.with_name(self._file.name + ".tmp")
        temp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(temp_path, self._file)
        logger.info("Wrote quest log to %s", self._file)
