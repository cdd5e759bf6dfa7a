"""Import models named on the command line or in the config file."""

import dataclasses
import importlib

from modelddl.exceptions import ConfigError


def import_models(refs: list[str]) -> list[type]:
    """Import models from ``package.module:Class`` or ``package.module`` references.

    A bare module reference yields every dataclass defined in that module, in
    definition order.

    Raises:
        ConfigError: If a module or class cannot be imported
    """
    models: list[type] = []
    for ref in refs:
        for model in _import_ref(ref):
            if model not in models:
                models.append(model)
    return models


def _import_ref(ref: str) -> list[type]:
    module_name, _, attr = ref.partition(":")
    if not module_name:
        raise ConfigError(f"Invalid model reference '{ref}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import module '{module_name}': {e}") from e

    if attr:
        model = getattr(module, attr, None)
        if not isinstance(model, type):
            raise ConfigError(f"'{attr}' is not a class in module '{module_name}'")
        return [model]

    models = [
        obj
        for obj in vars(module).values()
        if isinstance(obj, type)
        and dataclasses.is_dataclass(obj)
        and obj.__module__ == module.__name__
    ]
    if not models:
        raise ConfigError(f"No dataclass models defined in module '{module_name}'")
    return models
