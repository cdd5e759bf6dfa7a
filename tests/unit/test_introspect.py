"""Tests for reading descriptors off dataclass models."""

import datetime
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

import pytest

from modelddl import belongs_to, column, has_many, many_to_many
from modelddl.exceptions import DescriptorExtractionError
from modelddl.schema.introspect import describe
from modelddl.types import ColumnType, RelationKind
from tests.fixtures.models import Story, User


@dataclass
class Everything:
    id: int = column(pk=True)
    active: bool = column()
    score: float = column()
    price: Decimal = column(precision=10, scale=2)
    label: str = column(length=40)
    created_at: datetime.datetime = column()
    born_on: datetime.date = column()
    blob: bytes = column()
    token: uuid.UUID = column()
    payload: dict = column()
    tags: list = column()
    note: Optional[str] = column()


@dataclass
class Account:
    __tablename__ = "legacy_accounts"
    __unique__ = [("region", "number")]

    id: int = column(pk=True, autoincrement=True, type=ColumnType.INTEGER)
    region: str = column()
    number: str = column()
    email: str = column(name="email_address", unique=True)
    bio: str = column(type=ColumnType.TEXT, nullable=True)
    status: str = column(default="'active'")
    cache: Optional[dict] = column(skip=True)
    plain: int = 0


class NotAModel:
    id: int = 0


@dataclass
class Unmappable:
    id: int = column(pk=True)
    anything: Any = column()


@dataclass
class TextAutoincrement:
    id: str = column(pk=True, autoincrement=True)


@dataclass
class DuplicateColumns:
    id: int = column(pk=True)
    other: int = column(name="id")


@dataclass
class BadAction:
    id: int = column(pk=True)
    user_id: int = column()
    user: Optional[User] = belongs_to(User, on_delete="explode")


@dataclass
class BadArity:
    id: int = column(pk=True)
    user: Optional[User] = belongs_to(User, fk=["a", "b"], references="id")


@dataclass
class BadUnique:
    __unique__ = ["missing"]

    id: int = column(pk=True)


@dataclass
class WithRelations:
    id: int = column(pk=True)
    owner_id: int = column()
    owner: Optional[User] = belongs_to(User, fk="owner_id", on_delete="set null")
    stories: list[Story] = has_many(Story, fk="writer_id")
    friends: list[User] = many_to_many(User, through="friendships")
    extra: list[int] = field(default_factory=list, metadata={"other": 1})


class TestDescribeColumns:
    """Test column extraction from field type hints and options."""

    def test_python_types_map_to_column_types(self):
        """Each supported Python type should map to its column type."""
        descriptor = describe(Everything)
        types = {col.name: col.type for col in descriptor.columns}
        assert types == {
            "id": ColumnType.BIGINT,
            "active": ColumnType.BOOLEAN,
            "score": ColumnType.DOUBLE,
            "price": ColumnType.DECIMAL,
            "label": ColumnType.VARCHAR,
            "created_at": ColumnType.TIMESTAMP,
            "born_on": ColumnType.DATE,
            "blob": ColumnType.BINARY,
            "token": ColumnType.UUID,
            "payload": ColumnType.JSON,
            "tags": ColumnType.JSON,
            "note": ColumnType.VARCHAR,
        }

    def test_optional_marks_nullable(self):
        """Only Optional hints should be nullable; primary keys never are."""
        descriptor = describe(Everything)
        assert descriptor.get_column("note").nullable is True
        assert descriptor.get_column("label").nullable is False
        assert descriptor.get_column("id").nullable is False

    def test_lengths_and_precision(self):
        descriptor = describe(Everything)
        assert descriptor.get_column("label").length == 40
        price = descriptor.get_column("price")
        assert (price.precision, price.scale) == (10, 2)

    def test_column_options(self):
        """Explicit options should override inferred values."""
        descriptor = describe(Account)
        pk = descriptor.get_column("id")
        assert pk.type is ColumnType.INTEGER
        assert pk.autoincrement is True
        assert descriptor.get_column("email_address") is not None
        assert descriptor.get_column("email") is None
        bio = descriptor.get_column("bio")
        assert bio.type is ColumnType.TEXT
        assert bio.nullable is True
        assert descriptor.get_column("status").default == "'active'"

    def test_skipped_fields_are_not_columns(self):
        assert describe(Account).get_column("cache") is None

    def test_fields_without_metadata_are_columns(self):
        """Plain dataclass fields should still be stored."""
        plain = describe(Account).get_column("plain")
        assert plain.type is ColumnType.BIGINT
        assert plain.nullable is False

    def test_columns_keep_field_order(self):
        descriptor = describe(Account)
        assert [c.name for c in descriptor.columns] == [
            "id",
            "region",
            "number",
            "email_address",
            "bio",
            "status",
            "plain",
        ]

    def test_unique_constraints(self):
        """Column and model level unique declarations should both be read."""
        constraints = describe(Account).unique_constraints
        assert [uc.columns for uc in constraints] == [
            ("email_address",),
            ("region", "number"),
        ]


class TestDescribeModel:
    """Test table naming, relations and source positions."""

    def test_default_table_name(self):
        assert describe(User).table == "users"
        assert describe(Story).table == "stories"

    def test_tablename_override(self):
        assert describe(Account).table == "legacy_accounts"

    def test_instance_describes_its_class(self):
        descriptor = describe(User())
        assert descriptor.model is User
        assert descriptor.name == "User"

    def test_primary_key(self):
        assert describe(User).primary_key == ("id",)

    def test_relations(self):
        """Relation fields should become relations, not columns."""
        descriptor = describe(WithRelations)
        assert descriptor.get_column("owner") is None
        assert descriptor.get_column("extra") is not None

        owner, stories, friends = descriptor.relations
        assert owner.kind is RelationKind.BELONGS_TO
        assert owner.target is User
        assert owner.columns == ("owner_id",)
        assert owner.on_delete == "SET NULL"

        assert stories.kind is RelationKind.HAS_MANY
        assert stories.columns == ("writer_id",)

        assert friends.kind is RelationKind.MANY_TO_MANY
        assert friends.through == "friendships"
        assert descriptor.relations_of(RelationKind.MANY_TO_MANY) == [friends]

    def test_string_targets_are_kept(self):
        """String targets are resolved later, against the supplied models."""
        (stories,) = describe(User).relations
        assert stories.target == "Story"

    def test_source_position(self):
        """The descriptor should record where the class was declared."""
        source = describe(User).source
        assert source.path.endswith("tests/fixtures/models.py")
        assert source.line > 0


class TestDescribeErrors:
    """Test models that cannot be described."""

    def test_not_a_dataclass(self):
        with pytest.raises(DescriptorExtractionError, match="not a dataclass"):
            describe(NotAModel)

    def test_unmappable_type(self):
        with pytest.raises(DescriptorExtractionError, match=r"column\(type=...\)"):
            describe(Unmappable)

    def test_autoincrement_requires_integer(self):
        with pytest.raises(DescriptorExtractionError, match="autoincrement"):
            describe(TextAutoincrement)

    def test_duplicate_column_names(self):
        with pytest.raises(DescriptorExtractionError, match="Duplicate column name 'id'"):
            describe(DuplicateColumns)

    def test_unknown_on_delete_action(self):
        with pytest.raises(DescriptorExtractionError, match="explode"):
            describe(BadAction)

    def test_foreign_key_arity(self):
        with pytest.raises(DescriptorExtractionError, match="2 foreign key column"):
            describe(BadArity)

    def test_unique_on_unknown_column(self):
        with pytest.raises(DescriptorExtractionError, match="missing"):
            describe(BadUnique)
