from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from autocomplete.exceptions import MissingLocalesError

from .modes import Mode, resolve_mode, subfield_prefix, subfield_suffixes

SEARCH_ANALYZER = "ac_search"

# Suffix tag -> index-time analyzer
SUFFIX_ANALYZERS = {
    "base": "ac_edge_ngram",       # prefix of the whole value, tokenized on letters/digits
    "word": "ac_edge_ngram_word",  # prefix of every word
    "full": "ac_edge_ngram_full",  # prefix of the untokenized string
}

FULL_MODE_BASE_BOOST = 3

AC_BASE_SETTINGS = {
    "analysis": {
        "analyzer": {
            "ac_edge_ngram": {
                "type": "custom",
                "tokenizer": "ac_edge_ngram",
                "filter": ["lowercase", "asciifolding"],
            },
            "ac_edge_ngram_word": {
                "type": "custom",
                "tokenizer": "standard",
                "filter": ["lowercase", "asciifolding", "ac_edge_ngram"],
            },
            "ac_edge_ngram_full": {
                "type": "custom",
                "tokenizer": "keyword",
                "filter": ["lowercase", "asciifolding", "ac_edge_ngram"],
            },
            # Search side keeps the typed text whole
            SEARCH_ANALYZER: {
                "type": "custom",
                "tokenizer": "keyword",
                "filter": ["lowercase", "asciifolding"],
            },
        },
        "tokenizer": {
            "ac_edge_ngram": {
                "type": "edge_ngram",
                "min_gram": 1,
                "max_gram": 50,
                "token_chars": ["letter", "digit"],
            },
        },
        "filter": {
            "ac_edge_ngram": {
                "type": "edge_ngram",
                "min_gram": 1,
                "max_gram": 50,
            },
        },
    }
}


@dataclass(frozen=True)
class FieldSpec:
    """A searchable source attribute and the autocomplete mode applied to it."""

    name: str
    mode: Union[Mode, str] = Mode.WORD
    localized: bool = False
    locales: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "mode", resolve_mode(self.mode))
        object.__setattr__(self, "locales", tuple(self.locales))


@dataclass(frozen=True)
class SubFieldSpec:
    """One field declaration derived from a FieldSpec.

    ``tag`` is ``None`` for the raw form of the attribute.
    """

    attr: str
    name: str
    tag: Optional[str] = None
    analyzer: Optional[str] = None
    boost: int = 1
    field_type: str = "text"

    @property
    def is_raw(self) -> bool:
        return self.tag is None

    @property
    def nested_path(self) -> str:
        return f"{self.attr}.{self.name}"

    @property
    def search_paths(self) -> Tuple[str, ...]:
        if self.is_raw:
            return (self.attr,)
        return (self.nested_path, self.name)

    def to_mapping(self) -> Dict[str, Any]:
        if self.is_raw:
            return {"type": self.field_type}
        config = {
            "type": self.field_type,
            "analyzer": self.analyzer,
            "search_analyzer": SEARCH_ANALYZER,
        }
        if self.boost != 1:
            config["boost"] = self.boost
        return config


def resolve_attr_names(spec: FieldSpec) -> List[str]:
    """Concrete attribute names for a field, one per locale when localized."""
    if not spec.localized:
        return [spec.name]
    if not spec.locales:
        raise MissingLocalesError(f"Field {spec.name!r} is localized but no locales are configured")
    return [f"{spec.name}_{locale}" for locale in spec.locales]


def generate_mapping(spec: FieldSpec) -> List[SubFieldSpec]:
    """
    Derive every field declaration a searchable attribute needs.

    For each resolved attribute name the raw form comes first, followed by
    one analyzed sub-field per suffix tag of the mode, in declaration order.

    Args:
        spec: Attribute and mode to expand

    Returns:
        Sub-field declarations in locale order, then suffix order
    """
    sub_fields = []
    for attr in resolve_attr_names(spec):
        sub_fields.append(SubFieldSpec(attr=attr, name=attr))
        for tag in subfield_suffixes(spec.mode):
            boost = FULL_MODE_BASE_BOOST if spec.mode is Mode.FULL and tag == "base" else 1
            sub_fields.append(SubFieldSpec(
                attr=attr,
                name=f"{subfield_prefix(spec.mode, tag)}_{attr}",
                tag=tag,
                analyzer=SUFFIX_ANALYZERS[tag],
                boost=boost,
            ))
    return sub_fields


def generate_mappings(specs: Iterable[FieldSpec]) -> List[SubFieldSpec]:
    return [sub_field for spec in specs for sub_field in generate_mapping(spec)]


def search_fields(sub_fields: Iterable[SubFieldSpec]) -> List[str]:
    """Default multi_match field list: analyzed paths first, raw attributes last."""
    sub_fields = list(sub_fields)
    analyzed = [path for sf in sub_fields if not sf.is_raw for path in sf.search_paths]
    raw = [sf.attr for sf in sub_fields if sf.is_raw]
    return analyzed + raw


def index_properties(sub_fields: Iterable[SubFieldSpec]) -> Dict[str, Any]:
    """Mapping properties with every sub-field declared as a multi-field of its attribute."""
    properties: Dict[str, Any] = {}
    for sf in sub_fields:
        attr_config = properties.setdefault(sf.attr, {"type": "text", "fields": {}})
        attr_config["fields"][sf.name] = sf.to_mapping()
    return properties


def build_index_body(sub_fields: Iterable[SubFieldSpec]) -> Dict[str, Any]:
    return {
        "settings": AC_BASE_SETTINGS,
        "mappings": {"properties": index_properties(sub_fields)},
    }
