from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Final, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from errcase.declarations.symbols import BASE_ERROR_CONTRACT, DEFAULT_SYMBOL_ALIASES

from .errors import ConfigError

CONFIG_FILE_NAME: Final[str] = "errcase.yaml"
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"
_YAML_SUFFIXES: Final[frozenset[str]] = frozenset((".yaml", ".yml"))
_TOML_SUFFIX: Final[str] = ".toml"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["console", "json"]


class GeneratorSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_error: str = BASE_ERROR_CONTRACT
    output_dir: Path = Path("_generated")
    max_workers: int | None = Field(default=None, ge=1)
    symbol_aliases: dict[str, str] = Field(default_factory=dict)
    log_level: LogLevel | None = None
    log_format: LogFormat | None = None

    @field_validator("base_error")
    @classmethod
    def _base_error_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("base_error must be non-empty")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    def aliases(self) -> Mapping[str, str]:
        merged = dict(DEFAULT_SYMBOL_ALIASES)
        merged.update(self.symbol_aliases)
        return MappingProxyType(merged)


def parse_settings(payload: object, *, source: str = "<payload>") -> GeneratorSettings:
    if payload is None:
        return GeneratorSettings()
    if not isinstance(payload, dict):
        raise ConfigError("E_CONFIG_INVALID", f"configuration root must be a mapping in '{source}'")
    try:
        return GeneratorSettings.model_validate(payload)
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise ConfigError(
            "E_CONFIG_INVALID",
            f"invalid configuration '{source}': {location}: {error['msg']}",
        ) from exc


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(
            "E_CONFIG_READ_FAILED",
            f"unable to read configuration '{path}': {exc}",
        ) from exc


def _load_yaml(path: Path) -> object:
    try:
        return yaml.safe_load(_read_text(path))
    except yaml.YAMLError as exc:
        raise ConfigError(
            "E_CONFIG_PARSE_FAILED",
            f"unable to parse configuration '{path}': {exc}",
        ) from exc


def _load_toml(path: Path, *, tool_table: bool) -> object:
    try:
        document = tomllib.loads(_read_text(path))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            "E_CONFIG_PARSE_FAILED",
            f"unable to parse configuration '{path}': {exc}",
        ) from exc
    if not tool_table:
        return document
    tool = document.get("tool", {})
    return tool.get("errcase") if isinstance(tool, dict) else None


def load_settings(path: Path | None = None, *, search_dir: Path | None = None) -> GeneratorSettings:
    """Resolve generator settings.

    An explicit ``path`` wins. Otherwise ``errcase.yaml`` in ``search_dir``
    is used, then the ``[tool.errcase]`` table of ``pyproject.toml``, then
    the defaults.
    """
    if path is not None:
        suffix = path.suffix.lower()
        if suffix in _YAML_SUFFIXES:
            return parse_settings(_load_yaml(path), source=str(path))
        if suffix == _TOML_SUFFIX:
            tool_table = path.name == PYPROJECT_FILE_NAME
            return parse_settings(_load_toml(path, tool_table=tool_table), source=str(path))
        raise ConfigError(
            "E_CONFIG_READ_FAILED",
            f"unsupported configuration file type '{path.suffix}': {path}",
        )

    directory = search_dir if search_dir is not None else Path.cwd()
    candidate = directory / CONFIG_FILE_NAME
    if candidate.is_file():
        return parse_settings(_load_yaml(candidate), source=str(candidate))
    pyproject = directory / PYPROJECT_FILE_NAME
    if pyproject.is_file():
        return parse_settings(_load_toml(pyproject, tool_table=True), source=str(pyproject))
    return GeneratorSettings()
