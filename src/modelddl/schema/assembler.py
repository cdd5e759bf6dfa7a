"""Assemble resolved models into an ordered, dialect-independent schema."""

import heapq
import logging
from typing import Any

from modelddl.exceptions import (
    CyclicSchemaError,
    DuplicateTableError,
    UnresolvedRelationshipError,
)
from modelddl.schema.descriptors import ModelDescriptor, ModelIndex, Relation
from modelddl.schema.models import (
    Column,
    DerivedSchema,
    ForeignKey,
    PrimaryKey,
    Table,
)
from modelddl.schema.naming import default_fk_column
from modelddl.schema.resolver import JoinTable, Resolution
from modelddl.types import RelationKind, TableOrder

logger = logging.getLogger(__name__)


class SchemaAssembler:
    """Build tables with foreign keys and order them for emission."""

    def __init__(self, order: TableOrder = TableOrder.NAME):
        self.order = order

    def assemble(self, resolution: Resolution) -> DerivedSchema:
        """Build the derived schema of a resolution.

        Raises:
            UnresolvedRelationshipError: If a foreign key cannot be derived
            DuplicateTableError: If two tables share a name
            CyclicSchemaError: If foreign keys form a cycle
        """
        index = resolution.index
        foreign_keys = self._collect_foreign_keys(index)

        tables = [
            self._build_table(d, foreign_keys.get(d.model, []))
            for d in resolution.entities
        ]
        for join_table in resolution.join_tables:
            if join_table.descriptor is not None:
                descriptor = join_table.descriptor
                tables.append(
                    self._build_table(
                        descriptor, foreign_keys.get(descriptor.model, []), join=True
                    )
                )
            else:
                tables.append(self._synthesize_join_table(join_table))

        seen: dict[str, Table] = {}
        for table in tables:
            if table.name in seen:
                raise DuplicateTableError(f"Duplicate table name '{table.name}'")
            seen[table.name] = table

        ordered = self._sort(tables)
        logger.debug(f"Table order: {', '.join(t.name for t in ordered)}")
        return DerivedSchema(tables=tuple(ordered))

    def _collect_foreign_keys(self, index: ModelIndex) -> dict[type, list[ForeignKey]]:
        """Derive foreign keys per model from belongs-to and has-many relations."""
        result: dict[type, list[ForeignKey]] = {d.model: [] for d in index}

        for descriptor in index:
            for rel in descriptor.relations_of(RelationKind.BELONGS_TO):
                target = index.resolve(rel.target, owner=descriptor, field=rel.field)
                fk = self._foreign_key(descriptor, target, rel, holder=descriptor)
                self._add_foreign_key(result[descriptor.model], fk)

        for descriptor in index:
            for rel in descriptor.relations_of(RelationKind.HAS_MANY):
                target = index.resolve(rel.target, owner=descriptor, field=rel.field)
                fk = self._foreign_key(target, descriptor, rel, holder=descriptor)
                self._add_foreign_key(result[target.model], fk)

        return result

    def _foreign_key(
        self,
        child: ModelDescriptor,
        parent: ModelDescriptor,
        rel: Relation,
        holder: ModelDescriptor,
    ) -> ForeignKey:
        """Foreign key from ``child`` columns to ``parent`` columns.

        ``holder`` is the model that declared the relation, for error messages.
        """
        where = f"{holder.name}.{rel.field}"

        ref_columns = rel.ref_columns or parent.primary_key
        if not ref_columns:
            raise UnresolvedRelationshipError(
                f"{where}: {parent.name} has no primary key to reference; "
                "pass references="
            )
        if rel.kind is RelationKind.BELONGS_TO:
            default_owner = parent.name
        else:
            default_owner = holder.name
        columns = rel.columns or tuple(
            default_fk_column(default_owner, ref) for ref in ref_columns
        )
        if len(columns) != len(ref_columns):
            raise UnresolvedRelationshipError(
                f"{where}: {len(columns)} foreign key column(s) but "
                f"{len(ref_columns)} referenced column(s)"
            )

        for name in columns:
            if child.get_column(name) is None:
                raise UnresolvedRelationshipError(
                    f"{where}: foreign key column '{name}' not found on {child.name}"
                )
        for name in ref_columns:
            if parent.get_column(name) is None:
                raise UnresolvedRelationshipError(
                    f"{where}: referenced column '{name}' not found on {parent.name}"
                )

        return ForeignKey(
            columns=tuple(columns),
            ref_table=parent.table,
            ref_columns=tuple(ref_columns),
            on_delete=rel.on_delete,
        )

    def _add_foreign_key(self, keys: list[ForeignKey], fk: ForeignKey) -> None:
        if not any(existing.same_reference(fk) for existing in keys):
            keys.append(fk)

    def _build_table(
        self,
        descriptor: ModelDescriptor,
        foreign_keys: list[ForeignKey],
        join: bool = False,
    ) -> Table:
        pk = descriptor.primary_key
        return Table(
            name=descriptor.table,
            columns=descriptor.columns,
            primary_key=PrimaryKey(columns=pk) if pk else None,
            foreign_keys=tuple(foreign_keys),
            unique_constraints=descriptor.unique_constraints,
            is_join_table=join,
            source=descriptor.source,
        )

    def _synthesize_join_table(self, join_table: JoinTable) -> Table:
        """Join table with one key column per primary key column of each side."""
        pair = join_table.pair
        sides = sorted((pair.left, pair.right), key=lambda d: d.table)

        columns: list[Column] = []
        foreign_keys: list[ForeignKey] = []
        for side in sides:
            if not side.primary_key:
                raise UnresolvedRelationshipError(
                    f"Cannot synthesize join table '{join_table.table}': "
                    f"{side.name} has no primary key"
                )
            local = []
            for ref in side.primary_key:
                ref_column = side.get_column(ref)
                name = default_fk_column(side.name, ref)
                columns.append(
                    Column(name=name, type=ref_column.type, nullable=False, primary_key=True)
                )
                local.append(name)
            foreign_keys.append(
                ForeignKey(
                    columns=tuple(local),
                    ref_table=side.table,
                    ref_columns=side.primary_key,
                    on_delete="CASCADE",
                )
            )

        return Table(
            name=join_table.table,
            columns=tuple(columns),
            primary_key=PrimaryKey(columns=tuple(c.name for c in columns)),
            foreign_keys=tuple(foreign_keys),
            is_join_table=True,
        )

    def _sort(self, tables: list[Table]) -> list[Table]:
        """Order tables so referenced tables come first (Kahn's algorithm)."""
        by_name = {t.name: t for t in tables}
        rank: dict[str, Any] = {}
        for position, table in enumerate(tables):
            rank[table.name] = table.name if self.order is TableOrder.NAME else position

        dependents: dict[str, list[str]] = {name: [] for name in by_name}
        in_degree = {name: 0 for name in by_name}
        for table in tables:
            for ref in table.dependencies():
                if ref not in by_name:
                    raise UnresolvedRelationshipError(
                        f"Table '{table.name}' references unknown table '{ref}'"
                    )
                dependents[ref].append(table.name)
                in_degree[table.name] += 1

        ready = [(rank[name], name) for name, degree in in_degree.items() if degree == 0]
        heapq.heapify(ready)
        ordered = []
        while ready:
            _, name = heapq.heappop(ready)
            ordered.append(by_name[name])
            for dependent in dependents[name]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    heapq.heappush(ready, (rank[dependent], dependent))

        if len(ordered) != len(tables):
            raise CyclicSchemaError(name for name, degree in in_degree.items() if degree > 0)
        return ordered
