from functools import lru_cache
from typing import Optional

from autocomplete.config import Settings, get_settings

from .client import OpenSearchClient


@lru_cache(maxsize=8)
def make_opensearch_client(settings: Optional[Settings] = None) -> OpenSearchClient:
    """Shared client per settings object; models declared without settings share the default one."""
    if settings is None:
        settings = get_settings()
    return OpenSearchClient(host=settings.opensearch.host, settings=settings)


def make_opensearch_client_fresh(settings: Optional[Settings] = None, host: Optional[str] = None) -> OpenSearchClient:
    """New client, optionally pointed at another host than the configured one."""
    if settings is None:
        settings = get_settings()
    return OpenSearchClient(host=host or settings.opensearch.host, settings=settings)
