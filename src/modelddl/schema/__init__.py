"""Schema derivation: descriptors, relationship resolution and assembly."""

from modelddl.schema.assembler import SchemaAssembler
from modelddl.schema.descriptors import ModelDescriptor, ModelIndex, Relation
from modelddl.schema.introspect import describe
from modelddl.schema.models import (
    Column,
    DerivedSchema,
    ForeignKey,
    PrimaryKey,
    SourcePosition,
    Table,
    UniqueConstraint,
)
from modelddl.schema.resolver import JoinTable, RelationshipResolver, Resolution

__all__ = [
    "Column",
    "DerivedSchema",
    "ForeignKey",
    "JoinTable",
    "ModelDescriptor",
    "ModelIndex",
    "PrimaryKey",
    "Relation",
    "RelationshipResolver",
    "Resolution",
    "SchemaAssembler",
    "SourcePosition",
    "Table",
    "UniqueConstraint",
    "describe",
]
