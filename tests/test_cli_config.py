from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest

from questlog.presentation.cli import config
from questlog.presentation.cli.config import CliConfig


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert config.load_config(tmp_path / "config.json") == CliConfig()


def test_load_config_corrupt_file_returns_defaults(tmp_path: Path, caplog) -> None:
    path = tmp_path / "config.json"
    path.write_text("{broken", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="questlog.presentation.cli.config"):
        assert config.load_config(path) == CliConfig()
    assert "unreadable config" in caplog.text

    path.write_text("[]", encoding="utf-8")
    assert config.load_config(path) == CliConfig()


def test_save_and_load_config(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    settings = CliConfig(user_id="p1", display_name="Rowan", is_director=False, campaign_name="Isles")

    assert config.save_config(settings, path) == path

    assert config.load_config(path) == settings
    assert json.loads(path.read_text(encoding="utf-8"))["display_name"] == "Rowan"


def test_from_payload_trims_and_drops_bad_values() -> None:
    loaded = CliConfig.from_payload(
        {"user_id": "  p1 ", "display_name": "", "is_director": "yes", "campaign_name": 5}
    )
    assert loaded == CliConfig(user_id="p1")


def test_home_override_moves_every_path(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("QUESTLOG_HOME", str(tmp_path / "qlog"))
    assert config.get_user_data_dir() == tmp_path / "qlog"
    assert config.get_default_config_path() == tmp_path / "qlog" / "config.json"
    assert config.get_document_path() == tmp_path / "qlog" / "quest_log.json"


@pytest.mark.skipif(os.name == "nt", reason="POSIX data directory layout")
def test_paths_default_under_home_config(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("QUESTLOG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert config.get_user_data_dir() == tmp_path / ".config" / "questlog"
    assert config.get_document_path() == tmp_path / ".config" / "questlog" / "quest_log.json"
