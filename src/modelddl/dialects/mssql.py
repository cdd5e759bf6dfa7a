"""Microsoft SQL Server dialect."""

from modelddl.dialects.base import Dialect
from modelddl.schema.models import Column, Table
from modelddl.types import ColumnType


class SQLServerDialect(Dialect):
    name = "mssql"
    quote_open = "["
    quote_close = "]"
    default_varchar_length = 255
    true_literal = "1"
    false_literal = "0"
    type_names = {
        ColumnType.BOOLEAN: "BIT",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INTEGER: "INT",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.FLOAT: "REAL",
        ColumnType.DOUBLE: "FLOAT",
        ColumnType.DECIMAL: "DECIMAL",
        ColumnType.VARCHAR: "NVARCHAR",
        ColumnType.TEXT: "NVARCHAR(MAX)",
        ColumnType.DATE: "DATE",
        ColumnType.TIMESTAMP: "DATETIME2",
        ColumnType.BINARY: "VARBINARY(MAX)",
        ColumnType.JSON: "NVARCHAR(MAX)",
        ColumnType.UUID: "UNIQUEIDENTIFIER",
    }

    def identity_clause(self, column: Column, table: Table) -> str:
        return "IDENTITY(1,1)"
