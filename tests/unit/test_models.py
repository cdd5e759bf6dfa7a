"""Tests for modelddl.schema.models module."""

import dataclasses

import pytest

from modelddl.schema.models import (
    Column,
    DerivedSchema,
    ForeignKey,
    PrimaryKey,
    Table,
)
from modelddl.types import ColumnType


class TestModelsBasic:
    """Basic tests for schema model dataclasses."""

    def test_column_creation(self):
        """Column can be created with required fields."""
        col = Column(name="id", type=ColumnType.BIGINT)
        assert col.name == "id"
        assert col.type is ColumnType.BIGINT
        assert col.nullable is True
        assert col.primary_key is False
        assert col.autoincrement is False

    def test_models_are_immutable(self):
        col = Column(name="id", type=ColumnType.BIGINT)
        with pytest.raises(dataclasses.FrozenInstanceError):
            col.name = "other"

    def test_table_get_column(self):
        table = Table(
            name="users",
            columns=(
                Column(name="id", type=ColumnType.BIGINT),
                Column(name="name", type=ColumnType.VARCHAR),
            ),
            primary_key=PrimaryKey(columns=("id",)),
        )
        assert table.get_column("name").type is ColumnType.VARCHAR
        assert table.get_column("missing") is None
        assert table.column_names() == ["id", "name"]


class TestForeignKey:
    """Tests for ForeignKey comparison."""

    def test_same_reference_ignores_on_delete(self):
        a = ForeignKey(columns=("user_id",), ref_table="users", ref_columns=("id",))
        b = ForeignKey(
            columns=("user_id",),
            ref_table="users",
            ref_columns=("id",),
            on_delete="CASCADE",
        )
        assert a.same_reference(b)
        assert a != b

    def test_different_columns_are_different_references(self):
        a = ForeignKey(columns=("user_id",), ref_table="users", ref_columns=("id",))
        b = ForeignKey(columns=("owner_id",), ref_table="users", ref_columns=("id",))
        assert not a.same_reference(b)


class TestTableDependencies:
    """Tests for Table.dependencies and DerivedSchema lookups."""

    def test_dependencies_exclude_self(self):
        table = Table(
            name="categories",
            columns=(
                Column(name="id", type=ColumnType.BIGINT),
                Column(name="parent_id", type=ColumnType.BIGINT),
                Column(name="owner_id", type=ColumnType.BIGINT),
            ),
            foreign_keys=(
                ForeignKey(
                    columns=("parent_id",), ref_table="categories", ref_columns=("id",)
                ),
                ForeignKey(columns=("owner_id",), ref_table="users", ref_columns=("id",)),
            ),
        )
        assert table.dependencies() == {"users"}

    def test_derived_schema_lookup(self):
        users = Table(name="users", columns=(Column(name="id", type=ColumnType.BIGINT),))
        stories = Table(
            name="stories", columns=(Column(name="id", type=ColumnType.BIGINT),)
        )
        schema = DerivedSchema(tables=(users, stories))
        assert schema.table_names() == ["users", "stories"]
        assert schema.get_table("stories") is stories
        assert schema.get_table("missing") is None
