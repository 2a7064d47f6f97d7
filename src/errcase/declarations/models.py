from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .symbols import qualify


class Accessibility(StrEnum):
    PUBLIC = "public"
    INTERNAL = "internal"
    PROTECTED = "protected"
    PRIVATE = "private"


class ParameterKind(StrEnum):
    POSITIONAL_ONLY = "positional_only"
    POSITIONAL_OR_KEYWORD = "positional_or_keyword"
    KEYWORD_ONLY = "keyword_only"
    VAR_POSITIONAL = "var_positional"
    VAR_KEYWORD = "var_keyword"


VARIADIC_PARAMETER_KINDS: frozenset[ParameterKind] = frozenset(
    (ParameterKind.VAR_POSITIONAL, ParameterKind.VAR_KEYWORD)
)


class ParameterDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    type_name: str = Field(default="object", min_length=1)
    default: str | None = None
    kind: ParameterKind = ParameterKind.POSITIONAL_OR_KEYWORD


class MethodDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["method"] = "method"
    name: str = Field(min_length=1)
    accessibility: Accessibility = Accessibility.PUBLIC
    is_static: bool = False
    is_stub: bool = False
    return_type: str | None = None
    parameters: tuple[ParameterDeclaration, ...] = ()

    @model_validator(mode="after")
    def _validate_unique_parameter_names(self) -> MethodDeclaration:
        seen: set[str] = set()
        for parameter in self.parameters:
            if parameter.name in seen:
                raise ValueError(
                    f"method '{self.name}' has duplicate parameter name: {parameter.name}"
                )
            seen.add(parameter.name)
        return self


class ValueDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["value"] = "value"
    name: str = Field(min_length=1)
    accessibility: Accessibility = Accessibility.PUBLIC
    type_name: str | None = None


MemberDeclaration = Annotated[MethodDeclaration | ValueDeclaration, Field(discriminator="kind")]


class TypeDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["type"] = "type"
    name: str = Field(min_length=1)
    namespace: str | None = Field(default=None, min_length=1)
    accessibility: Accessibility = Accessibility.PUBLIC
    is_partial: bool = False
    bases: tuple[str, ...] = ()
    members: tuple[MemberDeclaration, ...] = ()

    @property
    def qualified_name(self) -> str:
        return qualify(self.namespace, self.name)


Declaration = Annotated[
    TypeDeclaration | MethodDeclaration | ValueDeclaration, Field(discriminator="kind")
]


@dataclass(frozen=True, slots=True)
class DeclarationIndex:
    """Type declarations of one discovery pass, keyed by qualified name.

    A later declaration of the same qualified name shadows an earlier one,
    matching Python's rebinding of a class name.
    """

    types: Mapping[str, TypeDeclaration]

    @classmethod
    def build(cls, declarations: Iterable[object]) -> DeclarationIndex:
        types: dict[str, TypeDeclaration] = {}
        for declaration in declarations:
            if isinstance(declaration, TypeDeclaration):
                types[declaration.qualified_name] = declaration
        return cls(types=MappingProxyType(types))

    def get(self, qualified_name: str) -> TypeDeclaration | None:
        return self.types.get(qualified_name)
