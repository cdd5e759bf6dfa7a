"""Entry point: derive DDL for a set of models in one dialect."""

import logging
import warnings
from typing import Any, Optional, Sequence

from modelddl.config import LoaderConfig
from modelddl.dialects import Dialect, get_dialect
from modelddl.schema.assembler import SchemaAssembler
from modelddl.schema.descriptors import ModelDescriptor
from modelddl.schema.introspect import describe
from modelddl.schema.models import DerivedSchema
from modelddl.schema.resolver import RelationshipResolver
from modelddl.types import TableOrder

logger = logging.getLogger(__name__)


class Loader:
    """Load models and render the schema that creates them.

    A loader is bound to one dialect and an immutable configuration; every
    ``load`` call starts from scratch, so a loader can be reused and shared.

    Example::

        loader = Loader("postgres")
        sql = loader.load(User, Story)
    """

    def __init__(
        self,
        dialect: str,
        *,
        delimiter: Optional[str] = None,
        join_tables: Sequence[Any] = (),
        table_order: TableOrder = TableOrder.NAME,
        positions: bool = False,
        project_root: Optional[str] = None,
        config: Optional[LoaderConfig] = None,
    ):
        """Create a loader.

        Args:
            dialect: Target dialect name (postgres, mysql, sqlite, mssql, oracle)
            delimiter: Statement terminator (default: the dialect's own)
            join_tables: Deprecated. Join tables are detected automatically;
                models listed here take precedence for their pair
            table_order: Tie-break for tables with no dependency between them
            positions: Emit a source position comment before each statement
            project_root: Directory absolute paths are made relative to
            config: Prepared settings; replaces all the options above

        Raises:
            UnsupportedDialectError: If the dialect is unknown
        """
        if config is None:
            if join_tables:
                warnings.warn(
                    "join_tables is deprecated: join tables are detected automatically",
                    DeprecationWarning,
                    stacklevel=2,
                )
            config = LoaderConfig(
                delimiter=delimiter,
                join_tables=tuple(join_tables),
                table_order=table_order,
                positions=positions,
                project_root=project_root,
            )
        self.dialect: Dialect = get_dialect(dialect)
        self.config = config

    def derive(self, *models: Any) -> DerivedSchema:
        """Resolve and assemble the schema of the models, without rendering."""
        return derive_schema(models, self.config)

    def load(self, *models: Any) -> str:
        """Render the CREATE TABLE statements for the models.

        Args:
            models: Model classes or zero-value instances

        Returns:
            The statements, in dependency order, each followed by the delimiter

        Raises:
            ModelDdlError: The first error met; nothing is rendered on failure
        """
        schema = self.derive(*models)
        return self.dialect.render(schema, self.config)


def describe_models(models: Sequence[Any]) -> list[ModelDescriptor]:
    """Describe each distinct model once, in supply order."""
    descriptors = []
    seen = set()
    for model in models:
        cls = model if isinstance(model, type) else type(model)
        if cls in seen:
            continue
        seen.add(cls)
        descriptors.append(describe(model))
    return descriptors


def derive_schema(models: Sequence[Any], config: LoaderConfig) -> DerivedSchema:
    """Run descriptor extraction, relationship resolution and assembly."""
    descriptors = describe_models(models)
    overrides = describe_models(config.join_tables)
    resolution = RelationshipResolver(overrides).resolve(descriptors)
    schema = SchemaAssembler(config.table_order).assemble(resolution)
    logger.debug(
        f"Derived {len(schema.tables)} tables from {len(descriptors)} models "
        f"({len(resolution.join_tables)} join tables)"
    )
    return schema
