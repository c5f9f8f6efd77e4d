"""Switch for the document writes fired by model changes."""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_default_enabled = True
_scoped_enabled: ContextVar[Optional[bool]] = ContextVar("autocomplete_indexing_enabled", default=None)


def indexing_enabled() -> bool:
    scoped = _scoped_enabled.get()
    return _default_enabled if scoped is None else scoped


def set_indexing_enabled(enabled: bool) -> None:
    """Set the process-wide default used outside of any scoped override."""
    global _default_enabled
    _default_enabled = bool(enabled)


@contextmanager
def indexing(enabled: bool) -> Iterator[None]:
    """Override the indexing switch for the current context only."""
    token = _scoped_enabled.set(bool(enabled))
    try:
        yield
    finally:
        _scoped_enabled.reset(token)


def without_indexing():
    """
    Suppress document writes inside the block.

    The previous setting is restored when the block exits, including when it
    raises::

        with without_indexing():
            session.add(City(name="Berlin"))
            session.commit()
    """
    return indexing(False)
