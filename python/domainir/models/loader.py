"""Loading model-defining units into a registry.

A unit is one of:
    - a dotted module name ("myapp.models.auth") or a module object exposing
      ``register_models(registry)`` or a ``MODELS`` iterable
    - a Path to a JSON file holding one declaration or a list of them
    - a Path to a directory; every ``*.json`` file in it is loaded in name order
    - a callable taking the registry

Import and parse failures raise DeclarationLoadError. Invalid declarations
raise the registry's own errors unchanged.
"""

from __future__ import annotations

import importlib
import json
import logging
from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import Any, Union

from domainir.exceptions import DeclarationLoadError
from domainir.models.registry import ModelRegistry

logger = logging.getLogger(__name__)

Unit = Union[str, Path, ModuleType, Callable[[ModelRegistry], Any]]


def load_unit(unit: Unit, registry: ModelRegistry) -> int:
    """Register every model of one unit. Returns the number of models added."""
    before = len(registry)
    if isinstance(unit, Path):
        _load_path(unit, registry)
    elif isinstance(unit, ModuleType):
        _load_module(unit, registry)
    elif isinstance(unit, str):
        if unit.endswith(".json") or Path(unit).is_dir():
            _load_path(Path(unit), registry)
        else:
            _load_module(_import(unit), registry)
    elif callable(unit):
        unit(registry)
    else:
        raise DeclarationLoadError(repr(unit), f"unsupported unit type {type(unit).__name__}")

    added = len(registry) - before
    logger.debug("Loaded %d model(s) from %s", added, _describe(unit))
    return added


def _import(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except ImportError as exc:
        raise DeclarationLoadError(name, str(exc)) from exc


def _load_module(module: ModuleType, registry: ModelRegistry) -> None:
    register = getattr(module, "register_models", None)
    if callable(register):
        register(registry)
        return
    models = getattr(module, "MODELS", None)
    if models is None:
        raise DeclarationLoadError(module.__name__, "defines neither register_models() nor MODELS")
    registry.register_many(models)


def _load_path(path: Path, registry: ModelRegistry) -> None:
    if path.is_dir():
        for child in sorted(path.glob("*.json")):
            _load_path(child, registry)
        return
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise DeclarationLoadError(str(path), str(exc)) from exc

    declarations = data if isinstance(data, list) else [data]
    for declaration in declarations:
        if not isinstance(declaration, dict):
            raise DeclarationLoadError(str(path), "expected a JSON object or a list of objects")
        registry.register(declaration)


def _describe(unit: Unit) -> str:
    if isinstance(unit, ModuleType):
        return unit.__name__
    if isinstance(unit, (str, Path)):
        return str(unit)
    return getattr(unit, "__qualname__", repr(unit))


__all__ = ["Unit", "load_unit"]
