from __future__ import annotations

import pytest
from pydantic import ValidationError

from autocomplete.config import AutocompleteSettings, Settings
from autocomplete.services.opensearch.modes import Mode


def test_defaults():
    settings = AutocompleteSettings()

    assert settings.attr == "name"
    assert settings.localized is False
    assert settings.mode is Mode.WORD
    assert settings.commit_callbacks is True
    assert settings.per_page == 50


def test_comma_separated_lists():
    settings = AutocompleteSettings(locales="en, de,,ru", search_attrs="name,title")

    assert settings.locales == ("en", "de", "ru")
    assert settings.search_attrs == ("name", "title")


def test_unknown_mode_rejected_at_load():
    with pytest.raises(ValidationError):
        AutocompleteSettings(mode="fuzzy")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("AUTOCOMPLETE__MODE", "full")
    monkeypatch.setenv("AUTOCOMPLETE__INDEX_PREFIX", "shop")
    monkeypatch.setenv("OPENSEARCH__HOST", "http://search:9200")

    settings = Settings()

    assert settings.autocomplete.mode is Mode.FULL
    assert settings.autocomplete.index_prefix == "shop"
    assert settings.opensearch.host == "http://search:9200"


def test_settings_are_frozen():
    settings = AutocompleteSettings()
    with pytest.raises(ValidationError):
        settings.mode = Mode.FULL


def test_settings_group_only_autocomplete_and_opensearch():
    assert set(Settings.model_fields) == {"autocomplete", "opensearch"}


def test_settings_are_hashable():
    assert hash(Settings()) == hash(Settings())
