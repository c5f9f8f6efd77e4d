from opensearchpy.exceptions import TransportError


class ConfigurationError(Exception):
    """Exception raised when autocomplete configuration is invalid."""


class UnknownModeError(ConfigurationError):
    """Exception raised when an autocomplete mode is not registered."""


class MissingLocalesError(ConfigurationError):
    """Exception raised when a localized field has no locales to expand to."""


# Errors reported by the search backend are passed through untouched.
BackendError = TransportError
