from __future__ import annotations

import pytest

from autocomplete.exceptions import ConfigurationError
from autocomplete.services.opensearch.modes import MODES, Mode, resolve_mode, subfield_prefix, subfield_suffixes


def test_suffixes_per_mode():
    assert subfield_suffixes("word") == ["base", "word"]
    assert subfield_suffixes(Mode.PHRASE) == ["base"]
    assert subfield_suffixes("full") == ["base", "full"]


def test_prefixes():
    assert subfield_prefix("word", "base") == "ac"
    assert subfield_prefix("word", "word") == "ac_word"
    assert subfield_prefix("full", "full") == "ac_full"


def test_unknown_mode_is_configuration_error():
    with pytest.raises(ConfigurationError):
        subfield_suffixes("fuzzy")
    with pytest.raises(ConfigurationError):
        resolve_mode(None)


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        MODES[Mode.WORD] = {}
    with pytest.raises(TypeError):
        MODES[Mode.WORD]["extra"] = "ac_extra"
