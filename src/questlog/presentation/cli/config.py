"""Who the CLI user is and where their quest log lives."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping

from questlog.domain.document import DEFAULT_CAMPAIGN_NAME

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "QUESTLOG_HOME"
CONFIG_FILE_NAME = "config.json"
DOCUMENT_FILE_NAME = "quest_log.json"


@dataclass(frozen=True, slots=True)
class CliConfig:
    """Identity and campaign settings read from config.json."""

    user_id: str = "director"
    display_name: str = "Director"
    is_director: bool = True
    campaign_name: str = DEFAULT_CAMPAIGN_NAME

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CliConfig:
        """Keep well-typed values from the payload; anything else uses the default."""
        defaults = cls()
        is_director = payload.get("is_director")
        return cls(
            user_id=_clean_text(payload.get("user_id")) or defaults.user_id,
            display_name=_clean_text(payload.get("display_name")) or defaults.display_name,
            is_director=is_director if isinstance(is_director, bool) else defaults.is_director,
            campaign_name=_clean_text(payload.get("campaign_name")) or defaults.campaign_name,
        )

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


def get_user_data_dir() -> Path:
    """Return the per-user data directory; QUESTLOG_HOME overrides it."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        return Path(base) / "QuestLog" if base else Path.home() / "QuestLog"
    return Path.home() / ".config" / "questlog"


def get_default_config_path() -> Path:
    return get_user_data_dir() / CONFIG_FILE_NAME


def get_document_path() -> Path:
    return get_user_data_dir() / DOCUMENT_FILE_NAME


def load_config(path: Path | None = None) -> CliConfig:
    """Read the config file; a missing or unreadable file yields defaults."""
    config_path = path or get_default_config_path()
    if not config_path.exists():
        return CliConfig()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return CliConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a JSON object", config_path)
        return CliConfig()
    return CliConfig.from_payload(raw)


def save_config(config: CliConfig, path: Path | None = None) -> Path:
    """Write the config as sorted JSON and return where it went."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config.to_payload(), indent=2, sort_keys=True), encoding="utf-8")
    return config_path


def _clean_text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""
