from __future__ import annotations

import json
from pathlib import Path
from typing import Final, Literal

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ManifestError
from .models import Declaration

MANIFEST_VERSION: Final[int] = 1
MANIFEST_SUFFIXES: Final[frozenset[str]] = frozenset((".json", ".yaml", ".yml"))


class DeclarationManifest(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    version: Literal[1] = MANIFEST_VERSION
    declarations: tuple[Declaration, ...] = ()


def is_manifest_path(path: Path) -> bool:
    return path.suffix.lower() in MANIFEST_SUFFIXES


def parse_declaration_manifest(payload: object, *, source: str = "<payload>") -> DeclarationManifest:
    if not isinstance(payload, dict):
        raise ManifestError("E_MANIFEST_INVALID", f"manifest root must be a mapping in '{source}'")
    try:
        return DeclarationManifest.model_validate(payload)
    except ValidationError as exc:
        raise ManifestError(
            "E_MANIFEST_INVALID",
            f"invalid declaration manifest '{source}': {exc.error_count()} validation error(s); "
            f"first: {_first_error(exc)}",
        ) from exc


def load_declaration_manifest(path: Path) -> tuple[Declaration, ...]:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(
            "E_MANIFEST_READ_FAILED",
            f"unable to read declaration manifest '{path}': {exc}",
        ) from exc

    try:
        if path.suffix.lower() == ".json":
            payload = json.loads(raw_text)
        else:
            payload = yaml.safe_load(raw_text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ManifestError(
            "E_MANIFEST_PARSE_FAILED",
            f"unable to parse declaration manifest '{path}': {exc}",
        ) from exc

    return parse_declaration_manifest(payload, source=str(path)).declarations


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}"
