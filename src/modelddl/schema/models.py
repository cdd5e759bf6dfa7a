"""Schema representation classes."""

from dataclasses import dataclass
from typing import Optional

from modelddl.types import ColumnType, DefaultValue


@dataclass(frozen=True)
class SourcePosition:
    """File and line a model was declared at."""

    path: str
    line: int


@dataclass(frozen=True)
class Column:
    """Column definition.

    A string default is emitted verbatim as a SQL expression; bool, int and
    float defaults are emitted as literals of the target dialect.
    """

    name: str
    type: ColumnType
    nullable: bool = True
    primary_key: bool = False
    default: Optional[DefaultValue] = None
    autoincrement: bool = False
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None


@dataclass(frozen=True)
class PrimaryKey:
    """Primary key definition."""

    columns: tuple[str, ...]


@dataclass(frozen=True)
class ForeignKey:
    """Foreign key from columns of one table to columns of another."""

    columns: tuple[str, ...]
    ref_table: str
    ref_columns: tuple[str, ...]
    on_delete: Optional[str] = None

    def same_reference(self, other: "ForeignKey") -> bool:
        """Check if both keys link the same columns, ignoring actions."""
        return (
            self.columns == other.columns
            and self.ref_table == other.ref_table
            and self.ref_columns == other.ref_columns
        )


@dataclass(frozen=True)
class UniqueConstraint:
    """UNIQUE constraint over one or more columns."""

    columns: tuple[str, ...]
    name: Optional[str] = None


@dataclass(frozen=True)
class Table:
    """Table definition."""

    name: str
    columns: tuple[Column, ...]
    primary_key: Optional[PrimaryKey] = None
    foreign_keys: tuple[ForeignKey, ...] = ()
    unique_constraints: tuple[UniqueConstraint, ...] = ()
    is_join_table: bool = False
    source: Optional[SourcePosition] = None

    def get_column(self, name: str) -> Optional[Column]:
        """Get a column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    def dependencies(self) -> set[str]:
        """Names of other tables this table references."""
        return {fk.ref_table for fk in self.foreign_keys if fk.ref_table != self.name}


@dataclass(frozen=True)
class DerivedSchema:
    """Ordered tables, ready for rendering."""

    tables: tuple[Table, ...]

    def get_table(self, name: str) -> Optional[Table]:
        """Get a table by name."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def table_names(self) -> list[str]:
        """Get table names in emission order."""
        return [table.name for table in self.tables]
