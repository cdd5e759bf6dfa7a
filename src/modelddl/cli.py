"""Command-line interface for modelddl."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from modelddl.config import Config
from modelddl.dialects import available_dialects
from modelddl.exceptions import ConfigError, ModelDdlError
from modelddl.importer import import_models
from modelddl.loader import Loader, derive_schema
from modelddl.schema.exporter import export_schema_yaml
from modelddl.types import TableOrder


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="modelddl",
        description="Generate CREATE TABLE statements from dataclass models",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    load_parser = subparsers.add_parser("load", help="Print the DDL of the models")
    _add_model_arguments(load_parser)
    load_parser.add_argument(
        "--delimiter",
        help="Statement delimiter; backslash escapes are decoded (e.g. '\\nGO')",
    )
    load_parser.add_argument(
        "--positions",
        action="store_true",
        help="Emit a source position comment before each statement",
    )
    load_parser.add_argument(
        "--output",
        type=Path,
        help="Output file path (default: stdout)",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Print the derived schema as YAML"
    )
    _add_model_arguments(inspect_parser)

    subparsers.add_parser("dialects", help="List supported dialects")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    if args.command == "load":
        return cmd_load(args)
    elif args.command == "inspect":
        return cmd_inspect(args)
    elif args.command == "dialects":
        return cmd_dialects(args)
    else:
        print(f"Command '{args.command}' not yet implemented", file=sys.stderr)
        return 1


def _add_model_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "models",
        nargs="*",
        help="Model references: package.module:Class or package.module",
    )
    parser.add_argument("--config", type=Path, help="Project file (modelddl.yaml)")
    parser.add_argument("--dialect", help="Target dialect")
    parser.add_argument(
        "--join-table",
        dest="join_tables",
        action="append",
        default=[],
        help="Deprecated: declare a join table model explicitly",
    )
    parser.add_argument(
        "--table-order",
        choices=[o.value for o in TableOrder],
        help="Tie-break for independent tables (default: name)",
    )
    parser.add_argument("--project-root", help="Root for relative source paths")


def _decode_escapes(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    # Non-ASCII characters pass through unchanged.
    return value.encode("latin-1", "backslashreplace").decode("unicode_escape")


def _build_config(args: argparse.Namespace, require_dialect: bool = True) -> Config:
    """Merge CLI arguments over env vars and the project file."""
    config = Config.from_env(
        dialect=args.dialect,
        models=args.models or None,
        join_tables=args.join_tables or None,
        delimiter=_decode_escapes(getattr(args, "delimiter", None)),
        output=str(args.output) if getattr(args, "output", None) else None,
        positions=True if getattr(args, "positions", False) else None,
        project_root=args.project_root,
        table_order=args.table_order,
        config_path=args.config,
    )
    config.validate(require_dialect=require_dialect)
    return config


def cmd_load(args: argparse.Namespace) -> int:
    """Print or write the CREATE TABLE statements of the models."""
    try:
        config = _build_config(args)
        models = import_models(config.models)
        join_tables = tuple(import_models(config.join_tables))
        loader = Loader(config.dialect, config=config.loader_config(join_tables))
        sql = loader.load(*models)

        if config.output:
            try:
                Path(config.output).write_text(sql)
            except OSError as e:
                print(f"Cannot write {config.output}: {e}", file=sys.stderr)
                return 1
            print(f"Wrote DDL for {len(models)} models to {config.output}")
        else:
            print(sql, end="")
        return 0
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except ModelDdlError as e:
        print(f"Load error: {e}", file=sys.stderr)
        return 1


def cmd_inspect(args: argparse.Namespace) -> int:
    """Print the dialect-independent derived schema as YAML."""
    try:
        config = _build_config(args, require_dialect=False)
        models = import_models(config.models)
        join_tables = tuple(import_models(config.join_tables))
        schema = derive_schema(models, config.loader_config(join_tables))
        print(export_schema_yaml(schema), end="")
        return 0
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except ModelDdlError as e:
        print(f"Inspect error: {e}", file=sys.stderr)
        return 1


def cmd_dialects(args: argparse.Namespace) -> int:
    """List supported dialects."""
    for name in available_dialects():
        print(name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
