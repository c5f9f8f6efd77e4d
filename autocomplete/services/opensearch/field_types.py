from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import Table, inspect
from sqlalchemy.types import TypeDecorator


class BaseFieldTypeResolver(ABC):
    """Looks up the declared type of a field by name."""

    @abstractmethod
    def resolve(self, field: str) -> Optional[str]:
        """Return the type name of ``field`` or None when it is not declared."""

    def __call__(self, field: str) -> Optional[str]:
        return self.resolve(field)


class MappingFieldTypeResolver(BaseFieldTypeResolver):
    """Reads field types from an index body, its ``mappings``, or bare properties."""

    def __init__(self, mapping: Optional[Mapping[str, Any]]):
        mapping = mapping or {}
        if "mappings" in mapping:
            mapping = mapping["mappings"] or {}
        if "properties" in mapping:
            mapping = mapping["properties"] or {}
        self.properties: Dict[str, Any] = dict(mapping)

    def resolve(self, field: str) -> Optional[str]:
        config = self.properties.get(str(field))
        if isinstance(config, Mapping):
            return config.get("type") or None
        return None


class ColumnFieldTypeResolver(BaseFieldTypeResolver):
    """Reads field types from the columns of a SQLAlchemy model or table."""

    def __init__(self, model_or_table: Any):
        self.source = model_or_table

    @property
    def columns(self):
        # Inspected on use so models can be declared before their mapper is configured
        if isinstance(self.source, Table):
            return self.source.columns
        return inspect(self.source).columns

    def resolve(self, field: str) -> Optional[str]:
        column = self.columns.get(str(field))
        if column is None:
            return None
        column_type = column.type
        while isinstance(column_type, TypeDecorator):
            column_type = column_type.impl
        return getattr(column_type, "__visit_name__", None)


class ChainedFieldTypeResolver(BaseFieldTypeResolver):
    """Asks each resolver in turn; the first non-empty answer wins."""

    def __init__(self, *resolvers: BaseFieldTypeResolver):
        self.resolvers = resolvers

    def resolve(self, field: str) -> Optional[str]:
        for resolver in self.resolvers:
            field_type = resolver(field)
            if field_type:
                return field_type
        return None
