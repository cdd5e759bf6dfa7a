"""Read column and relationship metadata off dataclass models."""

import dataclasses
import datetime
import inspect
import logging
import os
import types
import typing
import uuid
from decimal import Decimal
from typing import Any, Optional, Union

from modelddl.exceptions import DescriptorExtractionError
from modelddl.fields import METADATA_KEY, ColumnOptions, RelationOptions
from modelddl.schema.descriptors import ModelDescriptor, Relation
from modelddl.schema.models import Column, SourcePosition, UniqueConstraint
from modelddl.schema.naming import default_table_name
from modelddl.types import ColumnType, RelationKind

logger = logging.getLogger(__name__)

# Order matters: subclasses (bool, datetime) before their bases (int, date).
PYTHON_TYPES: dict[type, ColumnType] = {
    bool: ColumnType.BOOLEAN,
    int: ColumnType.BIGINT,
    float: ColumnType.DOUBLE,
    Decimal: ColumnType.DECIMAL,
    str: ColumnType.VARCHAR,
    datetime.datetime: ColumnType.TIMESTAMP,
    datetime.date: ColumnType.DATE,
    bytes: ColumnType.BINARY,
    uuid.UUID: ColumnType.UUID,
    dict: ColumnType.JSON,
    list: ColumnType.JSON,
}

REFERENTIAL_ACTIONS = {"CASCADE", "SET NULL", "SET DEFAULT", "RESTRICT", "NO ACTION"}


def describe(model: Any) -> ModelDescriptor:
    """Build the descriptor of a model class or zero-value instance.

    Args:
        model: A dataclass type or an instance of one

    Returns:
        ModelDescriptor with columns in field order

    Raises:
        DescriptorExtractionError: If the model is not a dataclass or its
            fields cannot be mapped to columns
    """
    cls = model if isinstance(model, type) else type(model)
    if not dataclasses.is_dataclass(cls):
        raise DescriptorExtractionError(f"{cls.__name__} is not a dataclass model")

    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        raise DescriptorExtractionError(
            f"Cannot resolve type hints of {cls.__name__}: {e}"
        ) from e

    columns: list[Column] = []
    relations: list[Relation] = []
    unique_constraints: list[UniqueConstraint] = []

    for f in dataclasses.fields(cls):
        options = f.metadata.get(METADATA_KEY)
        if isinstance(options, RelationOptions):
            relations.append(_parse_relation(cls, f.name, options))
            continue
        if options is None:
            options = ColumnOptions()
        if options.skip:
            continue
        col = _parse_column(cls, f.name, hints.get(f.name, f.type), options)
        columns.append(col)
        if options.unique:
            unique_constraints.append(UniqueConstraint(columns=(col.name,)))

    seen = set()
    for col in columns:
        if col.name in seen:
            raise DescriptorExtractionError(
                f"Duplicate column name '{col.name}' in model {cls.__name__}"
            )
        seen.add(col.name)

    unique_constraints.extend(_parse_model_unique(cls, seen))

    table = getattr(cls, "__tablename__", None) or default_table_name(cls.__name__)
    descriptor = ModelDescriptor(
        model=cls,
        table=table,
        columns=tuple(columns),
        relations=tuple(relations),
        unique_constraints=tuple(unique_constraints),
        source=_source_position(cls),
    )
    logger.debug(
        f"Described {cls.__name__} as table '{table}' "
        f"({len(columns)} columns, {len(relations)} relations)"
    )
    return descriptor


def _unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Strip ``Optional`` from a type hint, reporting whether it was there."""
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = typing.get_args(tp)
        non_none = [a for a in args if a is not type(None)]
        optional = len(non_none) < len(args)
        if len(non_none) == 1:
            return non_none[0], optional
        return tp, optional
    return tp, False


def _column_type(tp: Any) -> Optional[ColumnType]:
    """Map a Python type to a column type, or None if it has no mapping."""
    base = typing.get_origin(tp) or tp
    if base in PYTHON_TYPES:
        return PYTHON_TYPES[base]
    if isinstance(base, type):
        for py_type, column_type in PYTHON_TYPES.items():
            if issubclass(base, py_type):
                return column_type
    return None


def _parse_column(
    cls: type, field_name: str, hint: Any, options: ColumnOptions
) -> Column:
    """Parse a column definition from a dataclass field."""
    inner, optional = _unwrap_optional(hint)

    column_type = options.type or _column_type(inner)
    if column_type is None:
        raise DescriptorExtractionError(
            f"{cls.__name__}.{field_name}: cannot map {hint!r} to a column type; "
            "pass column(type=...)"
        )

    if options.autoincrement and not column_type.is_integer:
        raise DescriptorExtractionError(
            f"{cls.__name__}.{field_name}: autoincrement requires an integer column, "
            f"got {column_type.value}"
        )

    nullable = options.nullable if options.nullable is not None else optional
    if options.pk:
        nullable = False

    return Column(
        name=options.name or field_name,
        type=column_type,
        nullable=nullable,
        primary_key=options.pk,
        default=options.default,
        autoincrement=options.autoincrement,
        length=options.length,
        precision=options.precision,
        scale=options.scale,
    )


def _parse_relation(cls: type, field_name: str, options: RelationOptions) -> Relation:
    """Parse a relationship declaration from a dataclass field."""
    if options.fk and options.references and len(options.fk) != len(options.references):
        raise DescriptorExtractionError(
            f"{cls.__name__}.{field_name}: {len(options.fk)} foreign key column(s) "
            f"but {len(options.references)} referenced column(s)"
        )

    on_delete = options.on_delete.upper() if options.on_delete else None
    if on_delete is not None and on_delete not in REFERENTIAL_ACTIONS:
        raise DescriptorExtractionError(
            f"{cls.__name__}.{field_name}: unknown ON DELETE action '{options.on_delete}'"
        )

    return Relation(
        kind=options.kind,
        target=options.target,
        field=field_name,
        columns=options.fk,
        ref_columns=options.references,
        through=options.through if options.kind is RelationKind.MANY_TO_MANY else None,
        on_delete=on_delete,
    )


def _parse_model_unique(cls: type, column_names: set[str]) -> list[UniqueConstraint]:
    """Parse the ``__unique__`` class attribute into constraints."""
    constraints = []
    for entry in getattr(cls, "__unique__", ()):
        columns = (entry,) if isinstance(entry, str) else tuple(entry)
        unknown = [c for c in columns if c not in column_names]
        if unknown or not columns:
            raise DescriptorExtractionError(
                f"Unique constraint on {cls.__name__} names unknown column(s): "
                f"{', '.join(unknown) or '<none>'}"
            )
        constraints.append(UniqueConstraint(columns=columns))
    return constraints


def _source_position(cls: type) -> Optional[SourcePosition]:
    """Locate the class definition, if its source is available."""
    try:
        path = inspect.getsourcefile(cls)
        _, line = inspect.getsourcelines(cls)
    except (OSError, TypeError):
        return None
    if path is None:
        return None
    return SourcePosition(path=os.path.abspath(path), line=line)
