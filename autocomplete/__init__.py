from .db.searchable import AutocompleteIndex, ac_field
from .exceptions import BackendError, ConfigurationError
from .indexing import indexing_enabled, set_indexing_enabled, without_indexing
from .services.opensearch.modes import Mode

__all__ = [
    "AutocompleteIndex",
    "BackendError",
    "ConfigurationError",
    "Mode",
    "ac_field",
    "indexing_enabled",
    "set_indexing_enabled",
    "without_indexing",
]
