"""Dialect renderers, looked up by name."""

from modelddl.dialects.base import Dialect, relative_source_path
from modelddl.dialects.mssql import SQLServerDialect
from modelddl.dialects.mysql import MySQLDialect
from modelddl.dialects.oracle import OracleDialect
from modelddl.dialects.postgres import PostgresDialect
from modelddl.dialects.sqlite import SQLiteDialect
from modelddl.exceptions import UnsupportedDialectError

DIALECTS: dict[str, type[Dialect]] = {
    PostgresDialect.name: PostgresDialect,
    MySQLDialect.name: MySQLDialect,
    SQLiteDialect.name: SQLiteDialect,
    SQLServerDialect.name: SQLServerDialect,
    OracleDialect.name: OracleDialect,
}


def register_dialect(dialect: type[Dialect]) -> type[Dialect]:
    """Register a dialect class under its name. Usable as a class decorator."""
    DIALECTS[dialect.name] = dialect
    return dialect


def available_dialects() -> list[str]:
    return sorted(DIALECTS)


def get_dialect(name: str) -> Dialect:
    """Get a renderer for a dialect name.

    Raises:
        UnsupportedDialectError: If no dialect is registered under the name
    """
    dialect = DIALECTS.get(name)
    if dialect is None:
        raise UnsupportedDialectError(
            name,
            f"Unsupported dialect '{name}' "
            f"(expected one of: {', '.join(available_dialects())})",
        )
    return dialect()


__all__ = [
    "DIALECTS",
    "Dialect",
    "MySQLDialect",
    "OracleDialect",
    "PostgresDialect",
    "SQLServerDialect",
    "SQLiteDialect",
    "available_dialects",
    "get_dialect",
    "register_dialect",
    "relative_source_path",
]
