import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from .coercion import val_to_terms

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 50

FieldTypeResolver = Callable[[str], Optional[str]]


def _presence(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return value


def _positive_int(value: Any, default: int) -> int:
    value = _presence(value)
    if value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _normalize_pairs(value: Any) -> List[Tuple[str, Any]]:
    """Accept a mapping, ``(field, value)`` pairs or single-key dicts."""
    if value is None:
        return []
    if isinstance(value, dict):
        return list(value.items())
    pairs = []
    for item in value:
        if isinstance(item, dict):
            pairs.extend(item.items())
        else:
            field, raw = item
            pairs.append((field, raw))
    return pairs


class GeoPoint(BaseModel):
    lat: Optional[Union[int, float, str]] = None
    lon: Optional[Union[int, float, str]] = None

    @property
    def is_complete(self) -> bool:
        return _presence(self.lat) is not None and _presence(self.lon) is not None


class SearchRequest(BaseModel):
    """A single autocomplete search call."""

    text: str = ""
    fields: Optional[List[str]] = None  # overrides the configured search fields
    filters: List[Tuple[str, Any]] = Field(default_factory=list)
    exclusions: List[Tuple[str, Any]] = Field(default_factory=list)
    sort: List[Tuple[str, str]] = Field(default_factory=list)
    geo: Optional[GeoPoint] = None
    geo_order: bool = False  # take lat/lon out of the filters and sort by distance
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE

    @field_validator("text", mode="before")
    @classmethod
    def parse_text(cls, value):
        return "" if value is None else value

    @field_validator("filters", "exclusions", mode="before")
    @classmethod
    def parse_pairs(cls, value):
        return _normalize_pairs(value)

    @field_validator("sort", mode="before")
    @classmethod
    def parse_sort(cls, value):
        if value is None:
            return []
        if isinstance(value, (str, dict)):
            value = [value]
        entries = []
        for entry in value:
            if isinstance(entry, str):
                entries.append((entry, "asc"))
            elif isinstance(entry, dict):
                entries.extend((field, direction or "asc") for field, direction in entry.items())
            else:
                field, direction = entry
                entries.append((field, direction or "asc"))
        return entries

    @field_validator("page", mode="before")
    @classmethod
    def parse_page(cls, value):
        return _positive_int(value, DEFAULT_PAGE)

    @field_validator("per_page", mode="before")
    @classmethod
    def parse_per_page(cls, value):
        return _positive_int(value, DEFAULT_PER_PAGE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


class AutocompleteQueryBuilder:
    """
    Query builder for autocomplete search.

    Builds OpenSearch queries with:
    - multi_match over the autocomplete sub-fields
    - terms filters for inclusion and exclusion criteria
    - optional geo-distance sorting
    - from/size pagination
    """

    def __init__(
        self,
        request: SearchRequest,
        search_fields: List[str],
        field_type_resolver: Optional[FieldTypeResolver] = None,
        geo_field: str = "lat_lon",
    ):
        """
        Initialize query builder.

        Args:
            request: Search request to compile
            search_fields: Fields searched when the request has no override
            field_type_resolver: Callable returning the declared type of a field
            geo_field: Geo-point field used for distance sorting
        """
        self.request = request
        self.search_fields = list(search_fields)
        self.field_type_resolver = field_type_resolver
        self.geo_field = geo_field

        # Coordinates are search parameters, never term filters
        self.filters = list(request.filters)
        self.geo = request.geo
        if request.geo_order:
            extracted = {key: value for key, value in self.filters if key in ("lat", "lon")}
            self.filters = [(key, value) for key, value in self.filters if key not in ("lat", "lon")]
            if self.geo is None:
                self.geo = GeoPoint(lat=_presence(extracted.get("lat")), lon=_presence(extracted.get("lon")))

    def build(self) -> Dict[str, Any]:
        """Build the complete OpenSearch query body."""
        query = self._build_query()
        filter_clauses = self._build_filters()

        if filter_clauses:
            query.setdefault("bool", {})["filter"] = filter_clauses
            query.pop("match_all", None)

        body = {
            "query": query,
            "sort": self._build_sort(),
            "from": self.request.offset,
            "size": self.request.per_page,
        }
        logger.debug(f"Compiled autocomplete query: {body}")
        return body

    def _build_query(self) -> Dict[str, Any]:
        if not self.request.text:
            return {"match_all": {}}
        return {
            "bool": {
                "must": {
                    "multi_match": {
                        "query": self.request.text,
                        "fields": self.request.fields or self.search_fields,
                    }
                }
            }
        }

    def _build_sort(self) -> List[Dict[str, Any]]:
        sort = []
        if self.geo is not None and self.geo.is_complete:
            sort.append({
                "_geo_distance": {
                    self.geo_field: f"{self.geo.lat},{self.geo.lon}",
                    "order": "asc",
                    "unit": "km",
                }
            })
        for field, direction in self.request.sort:
            sort.append({field: direction})
        return sort

    def _build_filters(self) -> List[Dict[str, Any]]:
        """Build filter clauses (don't affect scoring)."""
        filters = []

        for field, value in self.filters:
            terms = val_to_terms(value, False, self._field_type(field))
            filters.append({"terms": {field: terms}})

        for field, value in self.request.exclusions:
            terms = val_to_terms(value, True, self._field_type(field))
            filters.append({"bool": {"must_not": {"terms": {field: terms}}}})

        return filters

    def _field_type(self, field: str) -> Optional[str]:
        # Unknown fields resolve to None and are left for the backend to reject
        if self.field_type_resolver is None:
            return None
        return self.field_type_resolver(field)


def build_search_query(
    text: str,
    search_fields: List[str],
    field_type_resolver: Optional[FieldTypeResolver] = None,
    geo_field: str = "lat_lon",
    **options: Any,
) -> Dict[str, Any]:
    """Helper function to build a search query."""
    request = SearchRequest(text=text, **options)
    builder = AutocompleteQueryBuilder(
        request=request,
        search_fields=search_fields,
        field_type_resolver=field_type_resolver,
        geo_field=geo_field,
    )
    return builder.build()
