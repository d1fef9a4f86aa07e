"""Persisted quest-log document shape."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

DOCUMENT_VERSION = 1
DEFAULT_CAMPAIGN_NAME = "Default Campaign"

DocumentData = Dict[str, Any]


@dataclass(slots=True)
class DocumentMetadata:
    """Top-level metadata block stored beside the quest mapping."""

    campaign_name: str = DEFAULT_CAMPAIGN_NAME
    version: int = DOCUMENT_VERSION
    created_timestamp: str = ""
    modified_timestamp: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {
            "campaignName": self.campaign_name,
            "version": self.version,
            "createdTimestamp": self.created_timestamp,
            "modifiedTimestamp": self.modified_timestamp,
        }

    @classmethod
    def from_payload(cls, payload: Any) -> DocumentMetadata:
        if not isinstance(payload, Mapping):
            return cls()
        version = payload.get("version")
        return cls(
            campaign_name=_text(payload.get("campaignName")) or DEFAULT_CAMPAIGN_NAME,
            version=version if isinstance(version, int) and not isinstance(version, bool) else DOCUMENT_VERSION,
            created_timestamp=_text(payload.get("createdTimestamp")),
            modified_timestamp=_text(payload.get("modifiedTimestamp")),
        )


def new_document(timestamp: str, campaign_name: str = DEFAULT_CAMPAIGN_NAME) -> DocumentData:
    """Return an empty document with fresh metadata."""
    metadata = DocumentMetadata(
        campaign_name=campaign_name,
        created_timestamp=timestamp,
        modified_timestamp=timestamp,
    )
    return {"quests": {}, "metadata": metadata.to_payload()}


def is_valid_document(data: Any) -> bool:
    """Return True when the document is an object holding a quest mapping."""
    return isinstance(data, Mapping) and isinstance(data.get("quests"), Mapping)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""
