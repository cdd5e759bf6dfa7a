"""SQLite dialect."""

from typing import Optional

from modelddl.dialects.base import Dialect
from modelddl.schema.models import Column, Table
from modelddl.types import ColumnType


def _rowid_alias(table: Table) -> Optional[Column]:
    """The single autoincrement primary key column, if the table has one.

    SQLite only allows AUTOINCREMENT on an ``INTEGER PRIMARY KEY`` column,
    declared inline.
    """
    if table.primary_key is None or len(table.primary_key.columns) != 1:
        return None
    column = table.get_column(table.primary_key.columns[0])
    if column is not None and column.autoincrement:
        return column
    return None


class SQLiteDialect(Dialect):
    name = "sqlite"
    true_literal = "1"
    false_literal = "0"
    type_names = {
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.SMALLINT: "INTEGER",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.BIGINT: "INTEGER",
        ColumnType.FLOAT: "REAL",
        ColumnType.DOUBLE: "REAL",
        ColumnType.DECIMAL: "NUMERIC",
        ColumnType.VARCHAR: "VARCHAR",
        ColumnType.TEXT: "TEXT",
        ColumnType.DATE: "DATE",
        ColumnType.TIMESTAMP: "TIMESTAMP",
        ColumnType.BINARY: "BLOB",
        ColumnType.JSON: "TEXT",
        ColumnType.UUID: "TEXT",
    }

    def identity_clause(self, column: Column, table: Table) -> str:
        if _rowid_alias(table) is column:
            return "PRIMARY KEY AUTOINCREMENT"
        return ""

    def primary_key_clause(self, table: Table) -> Optional[str]:
        if _rowid_alias(table) is not None:
            return None
        return super().primary_key_clause(table)
