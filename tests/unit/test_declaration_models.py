from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from errcase.declarations import (
    Accessibility,
    Declaration,
    DeclarationIndex,
    MethodDeclaration,
    ParameterDeclaration,
    ParameterKind,
    TypeDeclaration,
    ValueDeclaration,
)

pytestmark = pytest.mark.unit

_DECLARATION_ADAPTER: TypeAdapter[Declaration] = TypeAdapter(Declaration)


def test_type_declaration_qualified_name_uses_namespace() -> None:
    scoped = TypeDeclaration(name="ServiceError", namespace="weather.api")
    unscoped = TypeDeclaration(name="ServiceError")

    assert scoped.qualified_name == "weather.api.ServiceError"
    assert unscoped.qualified_name == "ServiceError"


def test_parameter_defaults_to_object_type() -> None:
    parameter = ParameterDeclaration(name="payload")

    assert parameter.type_name == "object"
    assert parameter.kind is ParameterKind.POSITIONAL_OR_KEYWORD
    assert parameter.default is None


def test_method_rejects_duplicate_parameter_names() -> None:
    with pytest.raises(ValidationError, match="duplicate parameter name: code"):
        MethodDeclaration(
            name="Broken",
            parameters=(ParameterDeclaration(name="code"), ParameterDeclaration(name="code")),
        )


def test_declarations_are_frozen_and_forbid_extra_fields() -> None:
    declaration = TypeDeclaration(name="ServiceError")

    with pytest.raises(ValidationError):
        declaration.name = "Other"  # type: ignore[misc]
    with pytest.raises(ValidationError):
        TypeDeclaration(name="ServiceError", sealed=True)  # type: ignore[call-arg]


def test_discriminated_union_selects_declaration_kind() -> None:
    type_declaration = _DECLARATION_ADAPTER.validate_python(
        {
            "kind": "type",
            "name": "ServiceError",
            "is_partial": True,
            "members": [
                {"kind": "method", "name": "Timeout", "is_static": True, "is_stub": True},
                {"kind": "value", "name": "LIMIT", "type_name": "int"},
            ],
        }
    )
    method = _DECLARATION_ADAPTER.validate_python({"kind": "method", "name": "helper"})
    value = _DECLARATION_ADAPTER.validate_python({"kind": "value", "name": "TOKEN"})

    assert isinstance(type_declaration, TypeDeclaration)
    assert isinstance(type_declaration.members[0], MethodDeclaration)
    assert isinstance(type_declaration.members[1], ValueDeclaration)
    assert type_declaration.accessibility is Accessibility.PUBLIC
    assert isinstance(method, MethodDeclaration)
    assert isinstance(value, ValueDeclaration)


def test_declaration_index_keys_by_qualified_name_and_later_shadows() -> None:
    first = TypeDeclaration(name="ServiceError", namespace="app", bases=("errcase.Error",))
    second = TypeDeclaration(name="ServiceError", namespace="app", is_partial=True)
    other = TypeDeclaration(name="ServiceError", namespace="lib")
    index = DeclarationIndex.build(
        (first, MethodDeclaration(name="helper"), other, second)
    )

    assert index.get("app.ServiceError") is second
    assert index.get("lib.ServiceError") is other
    assert index.get("helper") is None
    assert sorted(index.types) == ["app.ServiceError", "lib.ServiceError"]
