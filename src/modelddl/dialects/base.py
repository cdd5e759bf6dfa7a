"""Dialect renderer interface and the shared CREATE TABLE layout."""

import os
from abc import ABC
from typing import ClassVar, Optional

from modelddl.config import LoaderConfig
from modelddl.exceptions import UnsupportedColumnTypeError
from modelddl.schema.models import Column, DerivedSchema, ForeignKey, Table
from modelddl.types import ColumnType, DefaultValue

POSITION_PREFIX = "-- modelddl:pos"


def relative_source_path(path: str, project_root: str) -> str:
    """Express ``path`` relative to ``project_root`` when it lies under it."""
    root = os.path.abspath(project_root)
    path = os.path.abspath(path)
    if os.path.commonpath([path, root]) != root:
        return path
    return os.path.relpath(path, root)


class Dialect(ABC):
    """Render a derived schema as DDL for one SQL dialect.

    Subclasses set the quoting characters, type names and identity syntax;
    override the hooks below where the layout itself differs.
    """

    name: ClassVar[str]
    default_delimiter: ClassVar[str] = ";"
    quote_open: ClassVar[str] = '"'
    quote_close: ClassVar[str] = '"'
    type_names: ClassVar[dict[ColumnType, str]] = {}
    default_varchar_length: ClassVar[Optional[int]] = None
    true_literal: ClassVar[str] = "TRUE"
    false_literal: ClassVar[str] = "FALSE"
    indent: ClassVar[str] = "    "

    def render(self, schema: DerivedSchema, config: LoaderConfig) -> str:
        """Render one CREATE TABLE statement per table, in schema order."""
        delimiter = (
            config.delimiter if config.delimiter is not None else self.default_delimiter
        )
        statements = []
        for table in schema.tables:
            statement = self.create_table(table) + delimiter
            if config.positions and table.source is not None:
                comment = self.position_comment(table, config.resolved_project_root())
                statement = f"{comment}\n{statement}"
            statements.append(statement)

        if not statements:
            return ""
        return "\n".join(statements) + "\n"

    def position_comment(self, table: Table, project_root: str) -> str:
        """Source position comment, with the path relative to the project root."""
        source = table.source
        path = relative_source_path(source.path, project_root)
        return f"{POSITION_PREFIX} {table.name}[type=table] {path}:{source.line}"

    def quote(self, identifier: str) -> str:
        """Quote an identifier, doubling any closing quote character inside it."""
        escaped = identifier.replace(self.quote_close, self.quote_close * 2)
        return f"{self.quote_open}{escaped}{self.quote_close}"

    def quote_list(self, identifiers: tuple[str, ...]) -> str:
        return ", ".join(self.quote(i) for i in identifiers)

    def column_type(self, column: Column) -> str:
        """Dialect type name of a column, including length or precision."""
        type_name = self.type_names.get(column.type)
        if type_name is None:
            raise UnsupportedColumnTypeError(
                self.name,
                column.type,
                f"Dialect '{self.name}' does not support column type "
                f"'{column.type.value}' (column '{column.name}')",
            )
        if column.type is ColumnType.VARCHAR:
            length = column.length or self.default_varchar_length
            if length:
                type_name = f"{type_name}({length})"
        elif column.type is ColumnType.DECIMAL and column.precision is not None:
            type_name = f"{type_name}({column.precision},{column.scale or 0})"
        return type_name

    def identity_clause(self, column: Column, table: Table) -> str:
        """Clause following the type of an autoincrement column."""
        return ""

    def literal(self, value: DefaultValue) -> str:
        """SQL text of a default value. Strings are taken as SQL expressions."""
        if isinstance(value, bool):
            return self.true_literal if value else self.false_literal
        return str(value)

    def column_definition(self, column: Column, table: Table) -> str:
        parts = [self.quote(column.name), self.column_type(column)]
        if column.autoincrement:
            identity = self.identity_clause(column, table)
            if identity:
                parts.append(identity)
        if not column.nullable:
            parts.append("NOT NULL")
        if column.default is not None:
            parts.append(f"DEFAULT {self.literal(column.default)}")
        return " ".join(parts)

    def primary_key_clause(self, table: Table) -> Optional[str]:
        if table.primary_key is None:
            return None
        return f"PRIMARY KEY ({self.quote_list(table.primary_key.columns)})"

    def foreign_key_clause(self, fk: ForeignKey) -> str:
        clause = (
            f"FOREIGN KEY ({self.quote_list(fk.columns)}) "
            f"REFERENCES {self.quote(fk.ref_table)} ({self.quote_list(fk.ref_columns)})"
        )
        if fk.on_delete:
            clause += f" ON DELETE {fk.on_delete}"
        return clause

    def create_table(self, table: Table) -> str:
        """Generate a CREATE TABLE statement, without its delimiter."""
        definitions = [self.column_definition(col, table) for col in table.columns]

        pk = self.primary_key_clause(table)
        if pk:
            definitions.append(pk)
        for unique in table.unique_constraints:
            clause = f"UNIQUE ({self.quote_list(unique.columns)})"
            if unique.name:
                clause = f"CONSTRAINT {self.quote(unique.name)} {clause}"
            definitions.append(clause)
        for fk in table.foreign_keys:
            definitions.append(self.foreign_key_clause(fk))

        body = ",\n".join(f"{self.indent}{d}" for d in definitions)
        return f"CREATE TABLE {self.quote(table.name)} (\n{body}\n)"
