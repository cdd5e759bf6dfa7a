"""Field helpers for declaring column and relationship metadata on models.

Models are plain dataclasses. Each helper returns a ``dataclasses.field`` with
a ``None`` default (an empty list for to-many relations) and stores its
options in the field metadata under ``METADATA_KEY``::

    @dataclass
    class Story:
        __tablename__ = "stories"

        id: int = column(pk=True, autoincrement=True)
        user_id: int = column()
        author: Optional[User] = belongs_to(User)
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

from modelddl.types import ColumnType, DefaultValue, ModelRef, RelationKind

METADATA_KEY = "modelddl"


@dataclass(frozen=True)
class ColumnOptions:
    name: Optional[str] = None
    type: Optional[ColumnType] = None
    pk: bool = False
    nullable: Optional[bool] = None
    default: Optional[DefaultValue] = None
    autoincrement: bool = False
    unique: bool = False
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    skip: bool = False


@dataclass(frozen=True)
class RelationOptions:
    kind: RelationKind
    target: ModelRef
    fk: tuple[str, ...] = ()
    references: tuple[str, ...] = ()
    through: Optional[ModelRef] = None
    on_delete: Optional[str] = None


def _names(value: Union[str, Sequence[str], None]) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def column(
    *,
    name: Optional[str] = None,
    type: Optional[ColumnType] = None,
    pk: bool = False,
    nullable: Optional[bool] = None,
    default: Optional[DefaultValue] = None,
    autoincrement: bool = False,
    unique: bool = False,
    length: Optional[int] = None,
    precision: Optional[int] = None,
    scale: Optional[int] = None,
    skip: bool = False,
) -> Any:
    """Declare a column.

    Args:
        name: Column name (default: the field name)
        type: Column type (default: inferred from the type hint)
        pk: Part of the primary key
        nullable: Override the nullability inferred from ``Optional``
        default: SQL default; strings are emitted verbatim
        autoincrement: Database-generated integer values
        unique: Add a single-column UNIQUE constraint
        length: VARCHAR length
        precision: DECIMAL precision
        scale: DECIMAL scale
        skip: The field is not stored
    """
    options = ColumnOptions(
        name=name,
        type=type,
        pk=pk,
        nullable=nullable,
        default=default,
        autoincrement=autoincrement,
        unique=unique,
        length=length,
        precision=precision,
        scale=scale,
        skip=skip,
    )
    return field(default=None, metadata={METADATA_KEY: options})


def belongs_to(
    target: ModelRef,
    *,
    fk: Union[str, Sequence[str], None] = None,
    references: Union[str, Sequence[str], None] = None,
    on_delete: Optional[str] = None,
) -> Any:
    """Declare that this model holds a foreign key to ``target``.

    ``fk`` defaults to ``<target>_id``; ``references`` defaults to the
    target's primary key.
    """
    options = RelationOptions(
        kind=RelationKind.BELONGS_TO,
        target=target,
        fk=_names(fk),
        references=_names(references),
        on_delete=on_delete,
    )
    return field(default=None, metadata={METADATA_KEY: options})


def has_many(
    target: ModelRef,
    *,
    fk: Union[str, Sequence[str], None] = None,
    references: Union[str, Sequence[str], None] = None,
    on_delete: Optional[str] = None,
) -> Any:
    """Declare that ``target`` holds a foreign key to this model.

    ``fk`` names the column on ``target`` and defaults to ``<model>_id``;
    ``references`` defaults to this model's primary key.
    """
    options = RelationOptions(
        kind=RelationKind.HAS_MANY,
        target=target,
        fk=_names(fk),
        references=_names(references),
        on_delete=on_delete,
    )
    return field(default_factory=list, metadata={METADATA_KEY: options})


def many_to_many(target: ModelRef, *, through: Optional[ModelRef] = None) -> Any:
    """Declare a many-to-many relationship with ``target``.

    ``through`` names the join model (class, class name or table name). When
    it is a table name and no supplied model provides that table, the join
    table is synthesized.
    """
    options = RelationOptions(
        kind=RelationKind.MANY_TO_MANY,
        target=target,
        through=through,
    )
    return field(default_factory=list, metadata={METADATA_KEY: options})
