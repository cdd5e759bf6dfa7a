"""MySQL dialect."""

from modelddl.dialects.base import Dialect
from modelddl.schema.models import Column, Table
from modelddl.types import ColumnType


class MySQLDialect(Dialect):
    name = "mysql"
    quote_open = "`"
    quote_close = "`"
    default_varchar_length = 255
    type_names = {
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INTEGER: "INT",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.FLOAT: "FLOAT",
        ColumnType.DOUBLE: "DOUBLE",
        ColumnType.DECIMAL: "DECIMAL",
        ColumnType.VARCHAR: "VARCHAR",
        ColumnType.TEXT: "LONGTEXT",
        ColumnType.DATE: "DATE",
        ColumnType.TIMESTAMP: "DATETIME(6)",
        ColumnType.BINARY: "LONGBLOB",
        ColumnType.JSON: "JSON",
        ColumnType.UUID: "CHAR(36)",
    }

    def identity_clause(self, column: Column, table: Table) -> str:
        return "AUTO_INCREMENT"
