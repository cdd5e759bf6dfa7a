"""Derive CREATE TABLE statements from dataclass models."""

from modelddl.config import LoaderConfig
from modelddl.dialects import Dialect, available_dialects, get_dialect, register_dialect
from modelddl.exceptions import (
    AmbiguousJoinTableError,
    ConfigError,
    CyclicSchemaError,
    DescriptorExtractionError,
    DuplicateTableError,
    InvalidJoinTableOverrideError,
    ModelDdlError,
    UnresolvedRelationshipError,
    UnsupportedColumnTypeError,
    UnsupportedDialectError,
)
from modelddl.fields import belongs_to, column, has_many, many_to_many
from modelddl.loader import Loader, derive_schema
from modelddl.schema.introspect import describe
from modelddl.types import ColumnType, RelationKind, TableOrder

__all__ = [
    "AmbiguousJoinTableError",
    "ColumnType",
    "ConfigError",
    "CyclicSchemaError",
    "DescriptorExtractionError",
    "Dialect",
    "DuplicateTableError",
    "InvalidJoinTableOverrideError",
    "Loader",
    "LoaderConfig",
    "ModelDdlError",
    "RelationKind",
    "TableOrder",
    "UnresolvedRelationshipError",
    "UnsupportedColumnTypeError",
    "UnsupportedDialectError",
    "available_dialects",
    "belongs_to",
    "column",
    "derive_schema",
    "describe",
    "get_dialect",
    "has_many",
    "many_to_many",
    "register_dialect",
]
