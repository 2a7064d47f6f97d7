from __future__ import annotations

import keyword
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from errcase.declarations.models import VARIADIC_PARAMETER_KINDS, ParameterKind
from errcase.declarations.symbols import qualify

from .errors import GeneratorErrorCode, build_generator_error

VARIANT_TYPE_SUFFIX: Final[str] = "Error"


class ReturnContract(StrEnum):
    FAMILY = "family"
    BASE = "base"


def _validate_identifier(field_name: str, value: str, *, dotted: bool = False) -> None:
    if not value:
        raise ValueError(f"{field_name} must be non-empty")
    parts = value.split(".") if dotted else [value]
    if not all(part.isidentifier() and not keyword.iskeyword(part) for part in parts):
        raise build_generator_error(
            GeneratorErrorCode.E_MODEL_NAME_INVALID,
            f"{field_name} '{value}' is not a usable Python name",
            subject=value,
        )


def _first_duplicate(values: list[str]) -> str | None:
    previous: str | None = None
    for value in sorted(values):
        if value == previous:
            return value
        previous = value
    return None


def _upper_initial(char: str) -> str:
    upper = char.upper()
    # 'ß' and ligatures have no single-character uppercase form
    return upper if len(upper) == 1 else char


def derive_property_name(parameter_name: str) -> str:
    return _upper_initial(parameter_name[:1]) + parameter_name[1:]


def derive_variant_type_name(factory_name: str) -> str:
    return f"{factory_name}{VARIANT_TYPE_SUFFIX}"


@dataclass(frozen=True, slots=True)
class CaseParameter:
    original_name: str
    derived_property_name: str
    type_name: str
    default: str | None = None
    kind: ParameterKind = ParameterKind.POSITIONAL_OR_KEYWORD

    def __post_init__(self) -> None:
        _validate_identifier("original_name", self.original_name)
        if not self.type_name:
            raise ValueError("type_name must be non-empty")
        if self.kind in VARIADIC_PARAMETER_KINDS:
            raise ValueError(f"parameter '{self.original_name}' must not be variadic")
        if keyword.iskeyword(self.derived_property_name):
            raise build_generator_error(
                GeneratorErrorCode.E_MODEL_PROPERTY_RESERVED,
                f"parameter '{self.original_name}' derives reserved word "
                f"'{self.derived_property_name}'",
                subject=self.original_name,
                witness=(self.derived_property_name,),
            )
        _validate_identifier("derived_property_name", self.derived_property_name)


@dataclass(frozen=True, slots=True)
class CaseDescriptor:
    factory_name: str
    variant_type_name: str
    is_publicly_visible: bool
    declared_return_contract: ReturnContract
    parameters: tuple[CaseParameter, ...] = ()

    def __post_init__(self) -> None:
        _validate_identifier("factory_name", self.factory_name)
        _validate_identifier("variant_type_name", self.variant_type_name)
        object.__setattr__(self, "parameters", tuple(self.parameters))
        duplicate = _first_duplicate([param.derived_property_name for param in self.parameters])
        if duplicate is not None:
            raise build_generator_error(
                GeneratorErrorCode.E_MODEL_PROPERTY_DUPLICATE,
                f"case '{self.factory_name}' derives property '{duplicate}' more than once",
                subject=self.factory_name,
                witness=tuple(
                    param.original_name
                    for param in self.parameters
                    if param.derived_property_name == duplicate
                ),
            )

    @property
    def is_singleton(self) -> bool:
        return not self.parameters


@dataclass(frozen=True, slots=True)
class FamilyModel:
    name: str
    namespace_path: str | None
    cases: tuple[CaseDescriptor, ...]

    def __post_init__(self) -> None:
        _validate_identifier("name", self.name, dotted=True)
        if self.namespace_path is not None:
            _validate_identifier("namespace_path", self.namespace_path, dotted=True)
        cases = tuple(self.cases)
        family = self.qualified_name
        if not cases:
            raise build_generator_error(
                GeneratorErrorCode.E_MODEL_CASES_EMPTY,
                f"family '{family}' has no cases",
                subject=family,
            )

        duplicate_variant = _first_duplicate([case.variant_type_name for case in cases])
        if duplicate_variant is not None:
            raise build_generator_error(
                GeneratorErrorCode.E_MODEL_VARIANT_DUPLICATE,
                f"family '{family}' derives variant type '{duplicate_variant}' more than once",
                subject=family,
                witness=(duplicate_variant,),
            )

        factory_names = {case.factory_name for case in cases}
        colliding = sorted(
            case.variant_type_name for case in cases if case.variant_type_name in factory_names
        )
        if colliding:
            raise build_generator_error(
                GeneratorErrorCode.E_MODEL_MEMBER_COLLISION,
                f"family '{family}' variant type '{colliding[0]}' collides with a factory name",
                subject=family,
                witness=tuple(colliding),
            )
        object.__setattr__(self, "cases", cases)

    @property
    def identity(self) -> tuple[str | None, str]:
        return (self.namespace_path, self.name)

    @property
    def qualified_name(self) -> str:
        return qualify(self.namespace_path, self.name)
