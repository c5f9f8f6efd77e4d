import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from autocomplete.config import Settings, get_settings
from autocomplete.indexing import indexing_enabled
from autocomplete.services.opensearch.client import OpenSearchClient, SearchPage
from autocomplete.services.opensearch.factory import make_opensearch_client
from autocomplete.services.opensearch.field_types import (
    ChainedFieldTypeResolver,
    ColumnFieldTypeResolver,
    MappingFieldTypeResolver,
)
from autocomplete.services.opensearch.index_config import (
    FieldSpec,
    build_index_body,
    generate_mappings,
    search_fields,
)
from autocomplete.services.opensearch.modes import resolve_mode
from autocomplete.services.opensearch.query_builder import AutocompleteQueryBuilder, SearchRequest

from .listeners import register_listeners

logger = logging.getLogger(__name__)

ACTIONS = ("index", "update", "delete")


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class AutocompleteIndex:
    """
    Autocomplete configuration of one model, resolved once when the model is declared.

    Options fall back to ``AutocompleteSettings``:
        attr, localized, mode, locales, search_attrs, index_prefix,
        commit_callbacks, per_page, geo_field
    plus ``index_name`` and ``skip_settings`` (leave the index body to the caller).
    """

    def __init__(
        self,
        model: Any,
        attr: Optional[str] = None,
        settings: Optional[Settings] = None,
        client: Optional[OpenSearchClient] = None,
        **options: Any,
    ):
        self.model = model
        self._own_settings = settings is not None
        self.settings = settings or get_settings()
        self._client = client

        self.options: Dict[str, Any] = {**self.settings.autocomplete.model_dump(), **options}
        self.attr = attr or self.options["attr"]
        self.mode = resolve_mode(self.options["mode"])

        self.field_specs = self._build_field_specs()
        self.sub_fields = generate_mappings(self.field_specs)
        self.search_attrs: List[str] = [sf.attr for sf in self.sub_fields if sf.is_raw]
        self.search_fields: List[str] = search_fields(self.sub_fields)
        self.index_name = self._build_index_name()
        self.index_body = None if self.options.get("skip_settings") else build_index_body(self.sub_fields)
        self.field_type_resolver = ChainedFieldTypeResolver(
            MappingFieldTypeResolver(self.index_body),
            ColumnFieldTypeResolver(model),
        )

    def _build_field_specs(self) -> List[FieldSpec]:
        explicit = self.options.get("search_attrs")
        if explicit:
            return [FieldSpec(name=attr, mode=self.mode) for attr in explicit]
        return [FieldSpec(
            name=self.attr,
            mode=self.mode,
            localized=self.options["localized"],
            locales=tuple(self.options.get("locales") or ()),
        )]

    def _build_index_name(self) -> str:
        name = self.options.get("index_name") or getattr(self.model, "__tablename__", None) or self.model.__name__.lower()
        prefix = self.options.get("index_prefix")
        if prefix and not name.startswith(prefix):
            name = f"{prefix}_{name}"
        return name

    @property
    def client(self) -> OpenSearchClient:
        if self._client is None:
            self._client = make_opensearch_client(self.settings if self._own_settings else None)
        return self._client

    # ============================================================
    # DOCUMENTS
    # ============================================================

    def document_id(self, obj: Any) -> Any:
        return getattr(obj, "id")

    def as_indexed_json(self, obj: Any) -> Dict[str, Any]:
        attrs = ["id", "created_at"] + self.search_attrs
        return {attr: _json_value(getattr(obj, attr, None)) for attr in attrs}

    def store_document(self, obj: Any, action: str) -> bool:
        body = None if action == "delete" else self.as_indexed_json(obj)
        return self.send(action, self.document_id(obj), body)

    def send(self, action: str, doc_id: Any, body: Optional[Dict[str, Any]] = None) -> bool:
        """
        Write one document change to the index.

        Returns:
            False when indexing is disabled, True once the write was sent
        """
        if action not in ACTIONS:
            raise ValueError(f"Unknown document action {action!r}; expected one of {ACTIONS}")
        if not indexing_enabled():
            logger.debug(f"Indexing disabled, skipping {action} of {self.index_name}/{doc_id}")
            return False

        if action == "index":
            self.client.index_document(self.index_name, doc_id, body)
        elif action == "update":
            self.client.update_document(self.index_name, doc_id, body)
        else:
            self.client.delete_document(self.index_name, doc_id)
        return True

    # ============================================================
    # SEARCH
    # ============================================================

    def build_query(self, text: str = "", **options: Any) -> Dict[str, Any]:
        options.setdefault("per_page", self.options["per_page"])
        request = SearchRequest(text=text, **options)
        builder = AutocompleteQueryBuilder(
            request=request,
            search_fields=self.search_fields,
            field_type_resolver=self.field_type_resolver,
            geo_field=self.options["geo_field"],
        )
        return builder.build()

    def search(self, text: str = "", **options: Any) -> SearchPage:
        """Search this model's index; options are ``SearchRequest`` fields."""
        return self.client.search(self.index_name, self.build_query(text, **options))


def ac_field(attr: Optional[str] = None, **options: Any):
    """
    Class decorator making a SQLAlchemy model autocomplete-searchable.

    Example::

        @ac_field("name", mode="full")
        class City(Base):
            __tablename__ = "cities"
            ...

        City.__autocomplete__.search("ber", filters={"country_id": "3"})
    """
    def decorator(model):
        model.__autocomplete__ = AutocompleteIndex(model, attr, **options)
        register_listeners(model)
        return model

    return decorator
