"""Configuration management for modelddl."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from modelddl.exceptions import ConfigError
from modelddl.types import TableOrder

DEFAULT_CONFIG_FILE = "modelddl.yaml"

VALID_CONFIG_FIELDS = {
    "dialect",
    "models",
    "join_tables",
    "delimiter",
    "output",
    "positions",
    "project_root",
    "table_order",
}


@dataclass(frozen=True)
class LoaderConfig:
    """Settings a loader is bound to. Immutable after construction.

    Args:
        delimiter: Statement terminator (default: the dialect's own)
        join_tables: Models declared as join tables up front (deprecated)
        table_order: Tie-break for tables with no dependency between them
        positions: Emit a source position comment before each statement
        project_root: Directory absolute paths are made relative to
            (default: the current working directory)
    """

    delimiter: Optional[str] = None
    join_tables: tuple[Any, ...] = ()
    table_order: TableOrder = TableOrder.NAME
    positions: bool = False
    project_root: Optional[str] = None

    def resolved_project_root(self) -> str:
        return os.path.abspath(self.project_root or os.getcwd())


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a modelddl YAML project file.

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or has unknown fields
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    unknown_fields = set(data.keys()) - VALID_CONFIG_FIELDS
    if unknown_fields:
        raise ConfigError(
            f"Unknown field(s) in config file: {', '.join(sorted(unknown_fields))}"
        )

    for list_field in ("models", "join_tables"):
        value = data.get(list_field)
        if isinstance(value, str):
            data[list_field] = [value]
        elif value is not None and not isinstance(value, list):
            raise ConfigError(f"'{list_field}' must be a list of model references")

    return data


@dataclass
class Config:
    """Configuration for the modelddl command line."""

    dialect: Optional[str] = None
    models: list[str] = field(default_factory=list)
    join_tables: list[str] = field(default_factory=list)
    delimiter: Optional[str] = None
    output: Optional[str] = None
    positions: bool = False
    project_root: Optional[str] = None
    table_order: TableOrder = TableOrder.NAME

    @classmethod
    def from_env(
        cls,
        *,
        dialect: Optional[str] = None,
        models: Optional[list[str]] = None,
        join_tables: Optional[list[str]] = None,
        delimiter: Optional[str] = None,
        output: Optional[str] = None,
        positions: Optional[bool] = None,
        project_root: Optional[str] = None,
        table_order: Optional[str] = None,
        config_path: Optional[Path] = None,
    ) -> "Config":
        """Load configuration from the project file, env vars, with CLI overrides.

        Priority (highest to lowest):
        1. Explicit parameters (CLI args)
        2. Environment variables
        3. Project file (``--config``, ``MODELDDL_CONFIG`` or ./modelddl.yaml)
        """
        file_cfg: dict[str, Any] = {}
        if config_path is None and os.environ.get("MODELDDL_CONFIG"):
            config_path = Path(os.environ["MODELDDL_CONFIG"])
        if config_path is not None:
            file_cfg = load_config_file(config_path)
        elif Path(DEFAULT_CONFIG_FILE).is_file():
            file_cfg = load_config_file(Path(DEFAULT_CONFIG_FILE))

        def resolve(explicit, env_key, cfg_key):
            if explicit is not None:
                return explicit
            if env_key is not None:
                env_val = os.environ.get(env_key)
                if env_val is not None:
                    return env_val
            return file_cfg.get(cfg_key)

        order = resolve(table_order, "MODELDDL_TABLE_ORDER", "table_order")
        try:
            resolved_order = TableOrder(order) if order else TableOrder.NAME
        except ValueError:
            valid = ", ".join(o.value for o in TableOrder)
            raise ConfigError(
                f"Invalid table order '{order}' (expected one of: {valid})"
            ) from None

        return cls(
            dialect=resolve(dialect, "MODELDDL_DIALECT", "dialect"),
            models=models if models else list(file_cfg.get("models") or []),
            join_tables=join_tables
            if join_tables
            else list(file_cfg.get("join_tables") or []),
            delimiter=resolve(delimiter, "MODELDDL_DELIMITER", "delimiter"),
            output=resolve(output, None, "output"),
            positions=bool(resolve(positions, None, "positions")),
            project_root=resolve(project_root, "MODELDDL_PROJECT_ROOT", "project_root"),
            table_order=resolved_order,
        )

    def validate(self, require_dialect: bool = True) -> None:
        """Validate that a dialect and at least one model are configured.

        Raises:
            ConfigError: If dialect or models are missing.
        """
        missing = []
        if require_dialect and not self.dialect:
            missing.append("dialect (use --dialect or MODELDDL_DIALECT)")
        if not self.models:
            missing.append("models (pass model references or list them in the config file)")

        if missing:
            raise ConfigError(
                "Missing required configuration:\n  - " + "\n  - ".join(missing)
            )

    def loader_config(self, join_tables: tuple[Any, ...] = ()) -> LoaderConfig:
        """Loader settings for these options, with join tables already imported."""
        return LoaderConfig(
            delimiter=self.delimiter,
            join_tables=join_tables,
            table_order=self.table_order,
            positions=self.positions,
            project_root=self.project_root,
        )
