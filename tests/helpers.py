"""Shared test helpers for modelddl tests."""

from pathlib import Path

from modelddl.config import LoaderConfig
from modelddl.schema.assembler import SchemaAssembler
from modelddl.schema.introspect import describe
from modelddl.schema.models import DerivedSchema
from modelddl.schema.resolver import RelationshipResolver, Resolution

FIXTURES_DIR = Path(__file__).parent / "fixtures"
PROJECT_ROOT = Path(__file__).parent.parent

# Delimiters the golden files were rendered with.
GOLDEN_DELIMITERS = {"mssql": "\nGO"}


def read_golden(dialect: str, case: str) -> str:
    """Read the expected DDL of a fixture case (``default`` or ``m2m``)."""
    return (FIXTURES_DIR / "sql" / f"{dialect}_{case}.sql").read_text()


def resolve_models(*models, overrides=()) -> Resolution:
    """Describe and resolve models without assembling them."""
    return RelationshipResolver([describe(m) for m in overrides]).resolve(
        [describe(m) for m in models]
    )


def assemble_models(*models, config: LoaderConfig | None = None) -> DerivedSchema:
    """Describe, resolve and assemble models into a derived schema."""
    config = config or LoaderConfig()
    return SchemaAssembler(config.table_order).assemble(resolve_models(*models))
