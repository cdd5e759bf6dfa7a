"""Resolve many-to-many relationships to join tables.

A supplied model is a join-table candidate when all of its relationships are
``belongs_to`` links that reach exactly two other supplied models. Each
many-to-many pair is resolved by the first strategy that recognises it:

1. an explicit join table passed to the loader (deprecated option)
2. the one candidate connecting the pair
3. a join table synthesized from the ``through`` table name
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from modelddl.exceptions import (
    AmbiguousJoinTableError,
    InvalidJoinTableOverrideError,
    UnresolvedRelationshipError,
)
from modelddl.schema.descriptors import ModelDescriptor, ModelIndex, Relation, ref_name
from modelddl.types import ModelRef, RelationKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManyToManyPair:
    """Two models linked by a many-to-many relationship.

    ``left`` is the first model (in supply order) that declares the relation.
    """

    left: ModelDescriptor
    right: ModelDescriptor
    relation: Relation
    through: Optional[ModelRef] = None

    @property
    def models(self) -> frozenset[type]:
        return frozenset((self.left.model, self.right.model))

    @property
    def label(self) -> tuple[str, str]:
        return (self.left.name, self.right.name)


@dataclass(frozen=True)
class JoinTable:
    """Resolved join table of a many-to-many pair.

    ``descriptor`` is None when the table was synthesized.
    """

    pair: ManyToManyPair
    table: str
    descriptor: Optional[ModelDescriptor] = None

    @property
    def synthesized(self) -> bool:
        return self.descriptor is None


@dataclass(frozen=True)
class Resolution:
    """Output of relationship resolution, input of schema assembly."""

    entities: tuple[ModelDescriptor, ...]
    join_tables: tuple[JoinTable, ...]
    index: ModelIndex


class JoinTableStrategy(Protocol):
    """One way of finding the join table of a many-to-many pair."""

    name: str

    def resolve(self, pair: ManyToManyPair) -> Optional[JoinTable]: ...


def join_targets(
    descriptor: ModelDescriptor, index: ModelIndex
) -> Optional[frozenset[type]]:
    """The two models a join-table candidate connects, or None if not a candidate."""
    if not descriptor.relations:
        return None
    if any(rel.kind is not RelationKind.BELONGS_TO for rel in descriptor.relations):
        return None

    targets = set()
    for rel in descriptor.relations:
        target = index.lookup(rel.target)
        if target is None or target is descriptor:
            return None
        targets.add(target.model)

    if len(descriptor.relations) != 2 or len(targets) != 2:
        return None
    return frozenset(targets)


def _matches_through(descriptor: ModelDescriptor, through: Optional[ModelRef]) -> bool:
    if through is None:
        return True
    if isinstance(through, type):
        return descriptor.model is through
    return through in (descriptor.name, descriptor.table)


class ExplicitJoinTableStrategy:
    """Adopt a join table the caller declared up front."""

    name = "explicit"

    def __init__(self, overrides: dict[ModelDescriptor, frozenset[type]]):
        self._overrides = overrides
        self.used: set[ModelDescriptor] = set()

    def resolve(self, pair: ManyToManyPair) -> Optional[JoinTable]:
        matches = [d for d, targets in self._overrides.items() if targets == pair.models]
        if not matches:
            return None
        if len(matches) > 1:
            raise AmbiguousJoinTableError(pair.label, [d.name for d in matches])
        self.used.add(matches[0])
        return JoinTable(pair=pair, table=matches[0].table, descriptor=matches[0])


class AutoDetectJoinTableStrategy:
    """Find the single supplied candidate that connects the pair."""

    name = "auto-detect"

    def __init__(self, candidates: dict[ModelDescriptor, frozenset[type]]):
        self._candidates = candidates

    def resolve(self, pair: ManyToManyPair) -> Optional[JoinTable]:
        matches = [
            d
            for d, targets in self._candidates.items()
            if targets == pair.models and _matches_through(d, pair.through)
        ]
        if not matches:
            return None
        if len(matches) > 1:
            raise AmbiguousJoinTableError(pair.label, [d.name for d in matches])
        return JoinTable(pair=pair, table=matches[0].table, descriptor=matches[0])


class SynthesizedJoinTableStrategy:
    """Create the join table named by ``through`` when no model provides it."""

    name = "synthesized"

    def resolve(self, pair: ManyToManyPair) -> Optional[JoinTable]:
        if not isinstance(pair.through, str):
            return None
        return JoinTable(pair=pair, table=pair.through)


class RelationshipResolver:
    """Split supplied models into entities and join tables."""

    def __init__(self, overrides: Sequence[ModelDescriptor] = ()):
        self.overrides = tuple(overrides)

    def resolve(self, descriptors: Sequence[ModelDescriptor]) -> Resolution:
        """Resolve every many-to-many pair among the supplied models.

        Args:
            descriptors: Descriptors in supply order

        Returns:
            Resolution with entities in supply order and one join table per pair

        Raises:
            AmbiguousJoinTableError: If two candidates connect the same pair
            InvalidJoinTableOverrideError: If an override matches no pair
            UnresolvedRelationshipError: If a pair has no join table, or a
                relation targets a model that was not supplied
        """
        supplied = {d.model for d in descriptors}
        index = ModelIndex(
            list(descriptors) + [o for o in self.overrides if o.model not in supplied]
        )

        overrides = self._validate_overrides(index)
        candidates = {}
        for descriptor in index:
            targets = join_targets(descriptor, index)
            if targets is not None:
                candidates[descriptor] = targets

        explicit = ExplicitJoinTableStrategy(overrides)
        strategies: list[JoinTableStrategy] = [
            explicit,
            AutoDetectJoinTableStrategy(candidates),
            SynthesizedJoinTableStrategy(),
        ]

        join_tables = []
        for pair in self._collect_pairs(index):
            join_tables.append(self._resolve_pair(pair, strategies))

        unused = [d.name for d in overrides if d not in explicit.used]
        if unused:
            raise InvalidJoinTableOverrideError(
                f"Join table override(s) {', '.join(unused)} do not match any "
                "many-to-many relationship among the supplied models"
            )

        adopted = {jt.descriptor for jt in join_tables if jt.descriptor is not None}
        entities = tuple(d for d in index if d not in adopted)
        return Resolution(entities=entities, join_tables=tuple(join_tables), index=index)

    def _validate_overrides(
        self, index: ModelIndex
    ) -> dict[ModelDescriptor, frozenset[type]]:
        """Check every override is shaped like a join table."""
        overrides = {}
        for override in self.overrides:
            descriptor = index.lookup(override.model)
            targets = join_targets(descriptor, index)
            if targets is None:
                raise InvalidJoinTableOverrideError(
                    f"{override.name} is not a join table: it must only belong to "
                    "exactly two other supplied models"
                )
            overrides[descriptor] = targets
        return overrides

    def _collect_pairs(self, index: ModelIndex) -> list[ManyToManyPair]:
        """Collect distinct many-to-many pairs, merging mutual declarations."""
        pairs: dict[frozenset[type], ManyToManyPair] = {}
        for descriptor in index:
            for rel in descriptor.relations_of(RelationKind.MANY_TO_MANY):
                target = index.resolve(rel.target, owner=descriptor, field=rel.field)
                if target is descriptor:
                    raise UnresolvedRelationshipError(
                        f"{descriptor.name}.{rel.field}: self-referencing "
                        "many-to-many relationships are not supported"
                    )
                if isinstance(rel.through, type) and rel.through not in index:
                    raise UnresolvedRelationshipError(
                        f"{descriptor.name}.{rel.field} goes through "
                        f"{ref_name(rel.through)}, which was not supplied"
                    )
                key = frozenset((descriptor.model, target.model))
                existing = pairs.get(key)
                if existing is None:
                    pairs[key] = ManyToManyPair(
                        left=descriptor, right=target, relation=rel, through=rel.through
                    )
                elif existing.through is None and rel.through is not None:
                    pairs[key] = ManyToManyPair(
                        left=existing.left,
                        right=existing.right,
                        relation=existing.relation,
                        through=rel.through,
                    )
        return list(pairs.values())

    def _resolve_pair(
        self,
        pair: ManyToManyPair,
        strategies: list[JoinTableStrategy],
    ) -> JoinTable:
        for strategy in strategies:
            join_table = strategy.resolve(pair)
            if join_table is not None:
                logger.debug(
                    f"Join table '{join_table.table}' for "
                    f"{pair.left.name} <-> {pair.right.name} ({strategy.name})"
                )
                return join_table
        raise UnresolvedRelationshipError(
            f"No join table found for {pair.left.name}.{pair.relation.field} "
            f"<-> {pair.right.name}; supply the join model or name it with through="
        )
