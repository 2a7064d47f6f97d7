from __future__ import annotations

import importlib.util
import re
import sys
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Final

GENERATED_PACKAGE: Final[str] = "errcase_generated"
_NON_IDENTIFIER = re.compile(r"\W")


def generated_module_name(unit_path: Path) -> str:
    stem = unit_path.name.removesuffix(".py")
    return f"{GENERATED_PACKAGE}.{_NON_IDENTIFIER.sub('_', stem)}"


def load_generated_unit(
    unit_path: Path, *, bindings: Mapping[str, object] | None = None
) -> ModuleType:
    """Import one generated unit and register it in ``sys.modules``.

    ``bindings`` are placed in the module namespace before it runs. Units of
    families without a namespace do not import their family, so the family
    class must be supplied this way.
    """
    module_name = generated_module_name(unit_path)
    existing = sys.modules.get(module_name)
    if existing is not None:
        return existing
    spec = importlib.util.spec_from_file_location(module_name, unit_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load generated unit '{unit_path}'")
    module = importlib.util.module_from_spec(spec)
    if bindings:
        module.__dict__.update(bindings)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[module_name]
        raise
    return module


def load_generated_units(
    directory: Path, *, bindings: Mapping[str, object] | None = None
) -> tuple[ModuleType, ...]:
    """Import every generated unit found in ``directory``, in name order."""
    return tuple(
        load_generated_unit(unit_path, bindings=bindings)
        for unit_path in sorted(directory.glob("*.py"), key=lambda path: path.name)
    )
