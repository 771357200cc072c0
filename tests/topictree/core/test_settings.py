# tests/topictree/core/test_settings.py
from __future__ import annotations
from pathlib import Path

import pytest

from topictree import SettingsError, TopicTreeSettings
from topictree.core import settings as settings_module
from topictree.core.settings import deepMerge, loadSettings


@pytest.fixture
def settingsFile(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Points the loader at a temp file and drops the cached merge around each test."""
    path = tmp_path / "topictree.json5"
    monkeypatch.setenv(settings_module.SETTINGS_ENV_VAR, str(path))
    loadSettings.cache_clear()
    yield path
    loadSettings.cache_clear()


def test_defaults_without_user_file(settingsFile: Path) -> None:
    loaded = loadSettings()

    assert loaded == TopicTreeSettings()
    assert loaded.delivery.defaultAsync is True
    assert loaded.delivery.isolateSubscriberErrors is False
    assert loaded.logging.level is None


def test_user_file_overrides_defaults(settingsFile: Path) -> None:
    settingsFile.write_text(
        """
        // comments and trailing commas are fine in json5
        {
          delivery: { isolateSubscriberErrors: true, },
          logging: { level: "warning" },
        }
        """,
        encoding="utf-8",
    )

    loaded = loadSettings()

    assert loaded.delivery.isolateSubscriberErrors is True
    assert loaded.delivery.defaultAsync is True
    assert loaded.logging.level == "warning"


def test_unparseable_user_file_falls_back_to_defaults(settingsFile: Path, caplog) -> None:
    settingsFile.write_text("{ not json", encoding="utf-8")

    assert loadSettings() == TopicTreeSettings()
    assert any("Failed to parse" in record.getMessage() for record in caplog.records)


def test_invalid_values_raise_settings_error(settingsFile: Path) -> None:
    settingsFile.write_text('{"delivery": {"unknownKey": 1}}', encoding="utf-8")

    with pytest.raises(SettingsError):
        loadSettings()


def test_deep_merge_only_recurses_into_objects() -> None:
    left = {"a": {"x": 1, "y": [1, 2]}, "b": 1}
    right = {"a": {"y": [3]}, "c": 2}

    out = deepMerge(left, right)

    assert out == {"a": {"x": 1, "y": [3]}, "b": 1, "c": 2}
    assert left == {"a": {"x": 1, "y": [1, 2]}, "b": 1}
