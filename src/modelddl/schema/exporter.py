"""Export a derived schema to YAML."""

from typing import Any

import yaml

from modelddl.schema.models import Column, DerivedSchema, Table


def table_to_dict(table: Table) -> dict[str, Any]:
    """Convert a Table model to a dictionary suitable for YAML export."""
    data: dict[str, Any] = {"table": table.name}

    if table.is_join_table:
        data["join_table"] = True

    data["columns"] = [_column_to_dict(col) for col in table.columns]

    if table.primary_key:
        data["primary_key"] = list(table.primary_key.columns)

    if table.unique_constraints:
        data["unique"] = [
            _drop_none({"name": uc.name, "columns": list(uc.columns)})
            for uc in table.unique_constraints
        ]

    if table.foreign_keys:
        data["foreign_keys"] = [
            _drop_none(
                {
                    "columns": list(fk.columns),
                    "references": {
                        "table": fk.ref_table,
                        "columns": list(fk.ref_columns),
                    },
                    "on_delete": fk.on_delete,
                }
            )
            for fk in table.foreign_keys
        ]

    return data


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def _column_to_dict(col: Column) -> dict[str, Any]:
    """Convert a Column model to a dictionary."""
    data: dict[str, Any] = {"name": col.name, "type": col.type.value}

    if not col.nullable:
        data["nullable"] = False

    if col.primary_key:
        data["primary_key"] = True

    if col.autoincrement:
        data["autoincrement"] = True

    if col.default is not None:
        data["default"] = col.default

    for attr in ("length", "precision", "scale"):
        value = getattr(col, attr)
        if value is not None:
            data[attr] = value

    return data


def schema_to_dict(schema: DerivedSchema) -> dict[str, Any]:
    return {"tables": [table_to_dict(table) for table in schema.tables]}


def export_schema_yaml(schema: DerivedSchema) -> str:
    """Export a derived schema, tables in emission order, to a YAML string."""
    return yaml.dump(
        schema_to_dict(schema),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
