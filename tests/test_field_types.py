from __future__ import annotations

from sqlalchemy import Boolean, Column, Integer, MetaData, String, Table
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

from autocomplete.services.opensearch.field_types import (
    ChainedFieldTypeResolver,
    ColumnFieldTypeResolver,
    MappingFieldTypeResolver,
)


class Flag(TypeDecorator):
    impl = Boolean
    cache_ok = True


Base = declarative_base()


class Shop(Base):
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True)
    name = Column(String)
    active = Column(Boolean)
    featured = Column(Flag)


def test_mapping_resolver_accepts_body_mappings_or_properties():
    properties = {"active": {"type": "boolean"}, "name": {"fields": {}}}

    for mapping in ({"mappings": {"properties": properties}}, {"properties": properties}, properties):
        resolver = MappingFieldTypeResolver(mapping)
        assert resolver("active") == "boolean"
        assert resolver("name") is None
        assert resolver("missing") is None

    assert MappingFieldTypeResolver(None)("active") is None


def test_column_resolver_reads_model_and_table_columns():
    resolver = ColumnFieldTypeResolver(Shop)
    assert resolver("active") == "boolean"
    assert resolver("id") == "integer"
    assert resolver("missing") is None

    table = Table("t", MetaData(), Column("flag", Boolean))
    assert ColumnFieldTypeResolver(table)("flag") == "boolean"


def test_chain_prefers_first_answer():
    resolver = ChainedFieldTypeResolver(
        MappingFieldTypeResolver({"properties": {"id": {"type": "keyword"}}}),
        ColumnFieldTypeResolver(Shop),
    )

    assert resolver("id") == "keyword"
    assert resolver("active") == "boolean"
    assert resolver("missing") is None


def test_column_resolver_unwraps_type_decorators():
    resolver = ColumnFieldTypeResolver(Shop)
    assert resolver("featured") == "boolean"
