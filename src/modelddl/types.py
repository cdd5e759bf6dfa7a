"""Core type definitions for modelddl."""

from enum import Enum
from typing import TypeAlias, Union

TableName: TypeAlias = str
ColumnName: TypeAlias = str
ModelName: TypeAlias = str
ModelRef: TypeAlias = Union[type, str]
DefaultValue: TypeAlias = Union[str, bool, int, float]

__all__ = [
    "TableName",
    "ColumnName",
    "ModelName",
    "ModelRef",
    "DefaultValue",
    "ColumnType",
    "RelationKind",
    "TableOrder",
]


class ColumnType(Enum):
    """Dialect-independent column types a model field can map to."""

    BOOLEAN = "boolean"
    SMALLINT = "smallint"
    INTEGER = "integer"
    BIGINT = "bigint"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    VARCHAR = "varchar"
    TEXT = "text"
    DATE = "date"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    JSON = "json"
    UUID = "uuid"

    @property
    def is_integer(self) -> bool:
        return self in (ColumnType.SMALLINT, ColumnType.INTEGER, ColumnType.BIGINT)


class RelationKind(Enum):
    """Kinds of relationships a model can declare."""

    BELONGS_TO = "belongs-to"
    HAS_MANY = "has-many"
    MANY_TO_MANY = "m2m"


class TableOrder(Enum):
    """Tie-break rule for tables with no dependency between them."""

    NAME = "name"
    SUPPLY = "supply"
