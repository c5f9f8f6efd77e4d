from .searchable import AutocompleteIndex, ac_field

__all__ = ["AutocompleteIndex", "ac_field"]
