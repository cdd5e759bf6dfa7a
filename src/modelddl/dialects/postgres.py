"""PostgreSQL dialect."""

from modelddl.dialects.base import Dialect
from modelddl.schema.models import Column
from modelddl.types import ColumnType

SERIAL_TYPES = {
    ColumnType.SMALLINT: "SMALLSERIAL",
    ColumnType.INTEGER: "SERIAL",
    ColumnType.BIGINT: "BIGSERIAL",
}


class PostgresDialect(Dialect):
    """PostgreSQL: serial types stand in for autoincrement columns."""

    name = "postgres"
    type_names = {
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.FLOAT: "REAL",
        ColumnType.DOUBLE: "DOUBLE PRECISION",
        ColumnType.DECIMAL: "NUMERIC",
        ColumnType.VARCHAR: "VARCHAR",
        ColumnType.TEXT: "TEXT",
        ColumnType.DATE: "DATE",
        ColumnType.TIMESTAMP: "TIMESTAMPTZ",
        ColumnType.BINARY: "BYTEA",
        ColumnType.JSON: "JSONB",
        ColumnType.UUID: "UUID",
    }

    def column_type(self, column: Column) -> str:
        if column.autoincrement and column.type in SERIAL_TYPES:
            return SERIAL_TYPES[column.type]
        return super().column_type(column)
