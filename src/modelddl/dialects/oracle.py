"""Oracle dialect."""

from modelddl.dialects.base import Dialect
from modelddl.schema.models import Column, Table
from modelddl.types import ColumnType


class OracleDialect(Dialect):
    """Oracle 12c+. JSON columns are not supported."""

    name = "oracle"
    default_varchar_length = 255
    true_literal = "1"
    false_literal = "0"
    type_names = {
        ColumnType.BOOLEAN: "NUMBER(1)",
        ColumnType.SMALLINT: "NUMBER(5)",
        ColumnType.INTEGER: "NUMBER(10)",
        ColumnType.BIGINT: "NUMBER(19)",
        ColumnType.FLOAT: "BINARY_FLOAT",
        ColumnType.DOUBLE: "BINARY_DOUBLE",
        ColumnType.DECIMAL: "NUMBER",
        ColumnType.VARCHAR: "VARCHAR2",
        ColumnType.TEXT: "CLOB",
        ColumnType.DATE: "DATE",
        ColumnType.TIMESTAMP: "TIMESTAMP",
        ColumnType.BINARY: "BLOB",
        ColumnType.UUID: "RAW(16)",
    }

    def identity_clause(self, column: Column, table: Table) -> str:
        return "GENERATED BY DEFAULT AS IDENTITY"
