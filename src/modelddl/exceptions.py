"""Exception classes for modelddl."""

from typing import Iterable

from modelddl.types import ColumnType

__all__ = [
    "ModelDdlError",
    "DescriptorExtractionError",
    "RelationshipError",
    "AmbiguousJoinTableError",
    "InvalidJoinTableOverrideError",
    "UnresolvedRelationshipError",
    "SchemaAssemblyError",
    "DuplicateTableError",
    "CyclicSchemaError",
    "RenderError",
    "UnsupportedDialectError",
    "UnsupportedColumnTypeError",
    "ConfigError",
]


class ModelDdlError(Exception):
    """Base exception for modelddl."""


class DescriptorExtractionError(ModelDdlError):
    """Error reading column or relationship metadata off a model."""


class RelationshipError(ModelDdlError):
    """Base error while resolving relationships between models."""


class AmbiguousJoinTableError(RelationshipError):
    """More than one supplied model could be the join table of a pair."""

    def __init__(self, pair: tuple[str, str], candidates: Iterable[str]):
        self.pair = pair
        self.candidates = sorted(candidates)
        super().__init__(
            f"Ambiguous join table for {pair[0]} <-> {pair[1]}: "
            f"candidates {', '.join(self.candidates)}"
        )


class InvalidJoinTableOverrideError(RelationshipError):
    """An explicit join table does not match any many-to-many pair."""


class UnresolvedRelationshipError(RelationshipError):
    """A relationship points at a model or column that cannot be found."""


class SchemaAssemblyError(ModelDdlError):
    """Base error while assembling the derived schema."""


class DuplicateTableError(SchemaAssemblyError):
    """Two models map to the same table name."""


class CyclicSchemaError(SchemaAssemblyError):
    """Foreign keys form a cycle that cannot be ordered."""

    def __init__(self, tables: Iterable[str]):
        self.tables = sorted(tables)
        super().__init__(
            f"Circular foreign key dependency between tables: {', '.join(self.tables)}"
        )


class RenderError(ModelDdlError):
    """Base error while rendering DDL."""


class UnsupportedDialectError(RenderError):
    """No renderer is registered for the dialect."""

    def __init__(self, dialect: str, message: str):
        self.dialect = dialect
        super().__init__(message)


class UnsupportedColumnTypeError(RenderError):
    """The dialect has no type for a column."""

    def __init__(self, dialect: str, column_type: ColumnType, message: str):
        self.dialect = dialect
        self.column_type = column_type
        super().__init__(message)


class ConfigError(ModelDdlError):
    """Error in configuration."""
