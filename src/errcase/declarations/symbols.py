from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

BASE_ERROR_CONTRACT: Final[str] = "errcase.Error"
PARTIAL_MARKER: Final[str] = "errcase.partial"
STUB_MARKER: Final[str] = "errcase.stub"
STATIC_MARKER: Final[str] = "staticmethod"

DEFAULT_SYMBOL_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "errcase.runtime.Error": BASE_ERROR_CONTRACT,
        "errcase.runtime.errors.Error": BASE_ERROR_CONTRACT,
        "errcase.runtime.partial": PARTIAL_MARKER,
        "errcase.runtime.markers.partial": PARTIAL_MARKER,
        "errcase.runtime.stub": STUB_MARKER,
        "errcase.runtime.markers.stub": STUB_MARKER,
        "builtins.staticmethod": STATIC_MARKER,
    }
)


def canonical_symbol(name: str, aliases: Mapping[str, str] = DEFAULT_SYMBOL_ALIASES) -> str:
    return aliases.get(name, name)


def qualify(namespace: str | None, name: str) -> str:
    if namespace is None:
        return name
    return f"{namespace}.{name}"
