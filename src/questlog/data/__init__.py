"""Document persistence for the quest log."""

from .document_store import DocumentStore, InMemoryDocumentStore, JsonFileDocumentStore
from .errors import DataError, DocumentLoadError, TransactionError
from .events import ChangeRecord, DocumentChangedEvent, DocumentListener

__all__ = [
    "ChangeRecord",
    "DataError",
    "DocumentChangedEvent",
    "DocumentListener",
    "DocumentLoadError",
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "TransactionError",
]
