from enum import Enum
from types import MappingProxyType
from typing import List, Union

from autocomplete.exceptions import UnknownModeError


class Mode(str, Enum):
    """Autocomplete matching style of a field."""

    WORD = "word"
    PHRASE = "phrase"
    FULL = "full"


# Suffix tag -> sub-field prefix, in declaration order.
MODES = MappingProxyType({
    Mode.WORD: MappingProxyType({"base": "ac", "word": "ac_word"}),
    Mode.PHRASE: MappingProxyType({"base": "ac"}),
    Mode.FULL: MappingProxyType({"base": "ac", "full": "ac_full"}),
})


def resolve_mode(value: Union[Mode, str]) -> Mode:
    """Turn a mode name into a ``Mode``, failing on anything unregistered."""
    try:
        return Mode(value)
    except ValueError:
        raise UnknownModeError(
            f"Unknown autocomplete mode {value!r}; expected one of {[m.value for m in Mode]}"
        ) from None


def subfield_suffixes(mode: Union[Mode, str]) -> List[str]:
    """Ordered suffix tags whose sub-fields a mode requires."""
    return list(MODES[resolve_mode(mode)])


def subfield_prefix(mode: Union[Mode, str], tag: str) -> str:
    return MODES[resolve_mode(mode)][tag]
