"""Repository facade over the persisted quest-log document."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Mapping, TypeVar

from questlog.core.clock import Clock
from questlog.core.ids import GuidFactory
from questlog.data.document_store import DocumentStore
from questlog.domain.document import (
    DEFAULT_CAMPAIGN_NAME,
    DocumentData,
    DocumentMetadata,
    is_valid_document,
    new_document,
)
from questlog.domain.quest import Quest
from questlog.services.quest_codec import QuestCodec
from questlog.services.session import UserSession

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_QUEST_TITLE = "New Quest"


class QuestManager:
    """Create, read, update and delete quests with read-visibility rules.

    Every read decodes fresh Quest objects from the live document, so callers
    always receive detached copies. Writes are bracketed by the store's
    begin/complete change calls; nested writes join the outermost bracket.
    Edit and delete permissions are not enforced here (see UserSession.can_modify).
    """

    def __init__(
        self,
        *,
        store: DocumentStore,
        session: UserSession,
        ids: GuidFactory | None = None,
        clock: Clock | None = None,
        campaign_name: str = DEFAULT_CAMPAIGN_NAME,
    ) -> None:
        self._store = store
        self._session = session
        self._ids = ids or GuidFactory()
        self._clock = clock or Clock()
        self._campaign_name = campaign_name
        self._codec = QuestCodec()
        self._depth = 0
        self._pending: Dict[str, Quest] = {}

    # ---------------- collaborators ---------------- #
    @property
    def session(self) -> UserSession:
        return self._session

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def document_path(self) -> str:
        """Path listeners use to monitor the quest-log document."""
        return self._store.path

    @property
    def current_user_id(self) -> str:
        return self._session.user_id

    def new_guid(self) -> str:
        return self._ids.new_guid()

    def timestamp(self) -> str:
        return self._clock.timestamp()

    def track_change(self, quest: Quest) -> None:
        """Write an edited quest into the open transaction.

        The live record is replaced immediately so later reads inside the same
        update see the edit; modification times are stamped on commit. Quests
        that are not stored (drafts, or deleted earlier in the update) are
        left untouched.
        """
        if self._depth == 0:
            return
        live = self._store.data
        quests = live.get("quests") if isinstance(live, dict) else None
        if not isinstance(quests, dict) or quest.id not in quests:
            logger.debug("Not tracking unstored quest %s", quest.id)
            return
        quests[quest.id] = self._codec.encode(quest)
        self._pending[quest.id] = quest

    # ---------------- creation ---------------- #
    def create_draft_quest(
        self,
        title: str = DEFAULT_QUEST_TITLE,
        *,
        visible_to_players: bool | None = None,
    ) -> Quest:
        """Build a quest bound to this manager without persisting it."""
        if visible_to_players is None:
            visible_to_players = not self._session.is_director
        return Quest(
            id=self.new_guid(),
            title=title or DEFAULT_QUEST_TITLE,
            visible_to_players=visible_to_players,
            created_by=self._session.user_id,
            created_at=self.timestamp(),
            _manager=self,
        )

    def create_quest(
        self,
        title: str = DEFAULT_QUEST_TITLE,
        *,
        visible_to_players: bool | None = None,
    ) -> Quest:
        """Persist a new quest and return the instance reloaded from the document."""
        draft = self.create_draft_quest(title, visible_to_players=visible_to_players)
        self.store_quest(draft, "Created new quest")
        logger.info("Created quest %s (%s)", draft.id, draft.title)
        quest = self.get_quest(draft.id)
        assert quest is not None
        return quest

    # ---------------- reads ---------------- #
    def get_quest(self, quest_id: str) -> Quest | None:
        """Return the quest if it exists and is visible to the current user."""
        data = self._ensure_doc_initialized()
        record = data["quests"].get(quest_id)
        if record is None:
            return None
        quest = self._decode(quest_id, record)
        if quest is None or not self._quest_visible_to_user(quest):
            return None
        return quest

    def get_quest_by_title(self, title: str) -> Quest | None:
        """Case-insensitive exact title match over visible quests; first hit wins."""
        needle = (title or "").casefold()
        for quest in self._iter_visible_quests():
            if quest.title.casefold() == needle:
                return quest
        return None

    def get_all_quests(self) -> tuple[Dict[str, Quest], int]:
        quests = {quest.id: quest for quest in self._iter_visible_quests()}
        return quests, len(quests)

    def get_quests_by_status(self, status: str) -> Dict[str, Quest]:
        quests, _ = self.get_all_quests()
        return {quest_id: quest for quest_id, quest in quests.items() if quest.status == status}

    def get_quests_by_category(self, category: str) -> Dict[str, Quest]:
        quests, _ = self.get_all_quests()
        return {quest_id: quest for quest_id, quest in quests.items() if quest.category == category}

    def get_quest_last_modified(self, quest_id: str) -> str | None:
        quest = self.get_quest(quest_id)
        return quest.modified_at if quest else None

    def has_conflicting_edit(self, quest: Quest) -> bool:
        """True when someone stored the quest after this copy was loaded."""
        stored = self.get_quest_last_modified(quest.id)
        if stored is None:
            return False
        return stored != quest.modified_at

    def get_metadata(self) -> DocumentMetadata:
        data = self._ensure_doc_initialized()
        return DocumentMetadata.from_payload(data.get("metadata"))

    # ---------------- writes ---------------- #
    def store_quest(self, quest: Quest, change_description: str = "Update quest") -> None:
        """Upsert the quest by id and stamp modification times in one transaction."""
        if quest.manager is None:
            quest.bind(self)
        self._ensure_doc_initialized()
        with self._transaction(change_description):
            self._pending.pop(quest.id, None)
            self._write_quest(quest)

    def delete_quest(self, quest_id: str) -> bool:
        data = self._ensure_doc_initialized()
        if quest_id not in data["quests"]:
            return False
        with self._transaction("Deleted quest"):
            live = self._store.data
            assert live is not None
            del live["quests"][quest_id]
            self._pending.pop(quest_id, None)
            self._touch_metadata(live, self.timestamp())
        logger.info("Deleted quest %s", quest_id)
        return True

    def execute_update_fn(self, fn: Callable[[], T], change_description: str = "Update quest log") -> T:
        """Run a mutation closure inside one transaction.

        Bound quests changed inside the closure are written when it returns.
        If the closure raises, the document is rolled back and the error propagates.
        """
        self._ensure_doc_initialized()
        with self._transaction(change_description):
            return fn()

    def initialize_document(self) -> None:
        """Replace the document with an empty one. Existing quests are discarded."""
        with self._transaction("Initialize quest log"):
            self._store.data = new_document(self.timestamp(), self._campaign_name)
            self._pending.clear()
        logger.info("Initialized quest log at %s", self.document_path)

    # ---------------- internals ---------------- #
    def _ensure_doc_initialized(self) -> DocumentData:
        data = self._store.data
        if is_valid_document(data):
            assert data is not None
            return data
        if data is not None:
            discarded = sorted(str(key) for key in data.keys()) if isinstance(data, Mapping) else []
            logger.warning(
                "Quest log at %s is malformed; reinitializing and discarding keys %s",
                self.document_path,
                discarded,
            )
        self.initialize_document()
        initialized = self._store.data
        assert initialized is not None
        return initialized

    def _quest_visible_to_user(self, quest: Quest) -> bool:
        if self._session.is_director or quest.visible_to_players:
            return True
        return quest.created_by == self._session.user_id

    def _iter_visible_quests(self) -> Iterator[Quest]:
        data = self._ensure_doc_initialized()
        for quest_id, record in list(data["quests"].items()):
            quest = self._decode(quest_id, record)
            if quest is not None and self._quest_visible_to_user(quest):
                yield quest

    def _decode(self, quest_id: str, record: object) -> Quest | None:
        return self._codec.decode(
            quest_id,
            record,
            manager=self,
            reader_is_director=self._session.is_director,
        )

    def _write_quest(self, quest: Quest) -> None:
        live = self._store.data
        assert live is not None
        now = self.timestamp()
        quest.modified_at = now
        live["quests"][quest.id] = self._codec.encode(quest)
        self._touch_metadata(live, now)

    def _touch_metadata(self, data: DocumentData, now: str) -> None:
        metadata = data.get("metadata")
        if isinstance(metadata, dict):
            metadata["modifiedTimestamp"] = now
            return
        data["metadata"] = DocumentMetadata(
            campaign_name=self._campaign_name,
            created_timestamp=now,
            modified_timestamp=now,
        ).to_payload()

    def _flush_pending(self) -> None:
        if not self._pending:
            return
        live = self._store.data
        assert live is not None
        now = self.timestamp()
        while self._pending:
            quest_id, quest = self._pending.popitem()
            record = live["quests"].get(quest_id)
            if not isinstance(record, dict):
                continue
            record["modifiedTimestamp"] = now
            quest.modified_at = now
        self._touch_metadata(live, now)

    @contextmanager
    def _transaction(self, description: str) -> Iterator[None]:
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return
        self._store.begin_change()
        self._depth = 1
        try:
            yield
            self._flush_pending()
        except BaseException:
            self._pending.clear()
            self._depth = 0
            self._store.cancel_change()
            raise
        self._depth = 0
        self._store.complete_change(description, undoable=True)
