"""Normalized, dialect-independent model metadata."""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from modelddl.exceptions import UnresolvedRelationshipError
from modelddl.schema.models import Column, SourcePosition, UniqueConstraint
from modelddl.types import ModelRef, RelationKind


def ref_name(ref: Optional[ModelRef]) -> str:
    """Readable name of a model reference."""
    if ref is None:
        return "<none>"
    if isinstance(ref, type):
        return ref.__name__
    return ref


@dataclass(frozen=True)
class Relation:
    """A relationship declared by a model field.

    ``columns`` are the foreign key columns on whichever side holds the key
    and ``ref_columns`` the columns they reference; both are empty when the
    defaults apply.
    """

    kind: RelationKind
    target: ModelRef
    field: str
    columns: tuple[str, ...] = ()
    ref_columns: tuple[str, ...] = ()
    through: Optional[ModelRef] = None
    on_delete: Optional[str] = None


@dataclass(frozen=True, eq=False)
class ModelDescriptor:
    """Columns and relationships of one model.

    Compared by identity: one descriptor is built per model per load.
    """

    model: type
    table: str
    columns: tuple[Column, ...]
    relations: tuple[Relation, ...] = ()
    unique_constraints: tuple[UniqueConstraint, ...] = ()
    source: Optional[SourcePosition] = None

    @property
    def name(self) -> str:
        return self.model.__name__

    @property
    def primary_key(self) -> tuple[str, ...]:
        return tuple(col.name for col in self.columns if col.primary_key)

    def get_column(self, name: str) -> Optional[Column]:
        """Get a column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def relations_of(self, kind: RelationKind) -> list[Relation]:
        return [rel for rel in self.relations if rel.kind is kind]

    def __repr__(self) -> str:
        return f"<ModelDescriptor {self.name} table={self.table}>"


class ModelIndex:
    """Lookup of supplied models by class, class name or table name."""

    def __init__(self, descriptors: Iterable[ModelDescriptor]):
        self._descriptors: list[ModelDescriptor] = []
        self._by_model: dict[type, ModelDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.model in self._by_model:
                continue
            self._descriptors.append(descriptor)
            self._by_model[descriptor.model] = descriptor

    def __iter__(self) -> Iterator[ModelDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, model: object) -> bool:
        return model in self._by_model

    def lookup(self, ref: ModelRef) -> Optional[ModelDescriptor]:
        """Find the descriptor a reference points at, if it was supplied.

        String references match a class name first, then a table name.
        """
        if isinstance(ref, type):
            return self._by_model.get(ref)
        by_name = [d for d in self._descriptors if d.name == ref]
        if len(by_name) == 1:
            return by_name[0]
        if len(by_name) > 1:
            raise UnresolvedRelationshipError(
                f"Model name '{ref}' is ambiguous; reference the class instead"
            )
        by_table = [d for d in self._descriptors if d.table == ref]
        return by_table[0] if by_table else None

    def resolve(
        self, ref: ModelRef, *, owner: ModelDescriptor, field: str
    ) -> ModelDescriptor:
        """Like lookup, but a missing model is an error."""
        descriptor = self.lookup(ref)
        if descriptor is None:
            raise UnresolvedRelationshipError(
                f"{owner.name}.{field} references {ref_name(ref)}, "
                "which was not supplied"
            )
        return descriptor
