from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from errcase.declarations import ParameterKind, TypeDeclaration
from errcase.generator import (
    CaseDescriptor,
    CaseParameter,
    FamilyModel,
    GeneratorError,
    ReturnContract,
    RootCandidate,
    build,
    derive_property_name,
    derive_variant_type_name,
)

pytestmark = pytest.mark.unit


def _parameter(name: str, type_name: str = "int") -> CaseParameter:
    return CaseParameter(
        original_name=name,
        derived_property_name=derive_property_name(name),
        type_name=type_name,
    )


def _case(factory_name: str, *parameters: CaseParameter) -> CaseDescriptor:
    return CaseDescriptor(
        factory_name=factory_name,
        variant_type_name=derive_variant_type_name(factory_name),
        is_publicly_visible=True,
        declared_return_contract=ReturnContract.FAMILY,
        parameters=parameters,
    )


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("count", "Count"),
        ("x", "X"),
        ("Code", "Code"),
        ("httpStatus", "HttpStatus"),
        ("\u00dfe", "\u00dfe"),
        ("\u00e9tat", "\u00c9tat"),
    ],
)
def test_derive_property_name(name: str, expected: str) -> None:
    assert derive_property_name(name) == expected


def test_variant_type_name_appends_error_suffix() -> None:
    assert derive_variant_type_name("Timeout") == "TimeoutError"


def test_case_rejects_properties_that_collide_after_derivation() -> None:
    with pytest.raises(GeneratorError, match="E_MODEL_PROPERTY_DUPLICATE") as excinfo:
        _case("Broken", _parameter("code"), _parameter("Code"))

    assert excinfo.value.detail.subject == "Broken"
    assert excinfo.value.detail.witness == ("code", "Code")


def test_parameter_rejects_reserved_property_names() -> None:
    with pytest.raises(GeneratorError, match="E_MODEL_PROPERTY_RESERVED"):
        _parameter("none")


@pytest.mark.parametrize("name", ["class", "def", "my-param", "2nd"])
def test_parameter_rejects_unusable_original_names(name: str) -> None:
    with pytest.raises(GeneratorError, match="E_MODEL_NAME_INVALID") as excinfo:
        CaseParameter(original_name=name, derived_property_name="Value", type_name="int")

    assert excinfo.value.detail.subject == name


def test_case_and_family_names_must_be_usable() -> None:
    with pytest.raises(GeneratorError, match="E_MODEL_NAME_INVALID"):
        _case("Lambda-Failed")
    with pytest.raises(GeneratorError, match="E_MODEL_NAME_INVALID"):
        CaseDescriptor(
            factory_name="pass",
            variant_type_name="passError",
            is_publicly_visible=True,
            declared_return_contract=ReturnContract.FAMILY,
        )
    with pytest.raises(GeneratorError, match="E_MODEL_NAME_INVALID"):
        FamilyModel(name="Outer.class", namespace_path="app", cases=(_case("Closed"),))
    with pytest.raises(GeneratorError, match="E_MODEL_NAME_INVALID"):
        FamilyModel(name="ServiceError", namespace_path="app.global", cases=(_case("Closed"),))


def test_parameter_rejects_variadic_kinds() -> None:
    with pytest.raises(ValueError, match="must not be variadic"):
        CaseParameter(
            original_name="rest",
            derived_property_name="Rest",
            type_name="int",
            kind=ParameterKind.VAR_POSITIONAL,
        )


def test_family_requires_cases() -> None:
    with pytest.raises(GeneratorError, match="E_MODEL_CASES_EMPTY"):
        FamilyModel(name="ServiceError", namespace_path="app", cases=())


def test_family_rejects_duplicate_variant_types() -> None:
    with pytest.raises(GeneratorError, match="E_MODEL_VARIANT_DUPLICATE") as excinfo:
        FamilyModel(
            name="ServiceError",
            namespace_path="app",
            cases=(_case("Timeout"), _case("Timeout")),
        )

    assert excinfo.value.detail.subject == "app.ServiceError"
    assert excinfo.value.detail.witness == ("TimeoutError",)


def test_family_rejects_variant_colliding_with_factory() -> None:
    with pytest.raises(GeneratorError, match="E_MODEL_MEMBER_COLLISION"):
        FamilyModel(
            name="ServiceError",
            namespace_path=None,
            cases=(_case("Timeout"), _case("TimeoutError")),
        )


def test_family_identity_and_immutability() -> None:
    model = FamilyModel(name="ServiceError", namespace_path="app", cases=[_case("Timeout")])

    assert model.identity == ("app", "ServiceError")
    assert model.qualified_name == "app.ServiceError"
    assert isinstance(model.cases, tuple)
    assert model.cases[0].is_singleton
    with pytest.raises(FrozenInstanceError):
        model.name = "Other"  # type: ignore[misc]


def test_build_returns_none_for_empty_cases() -> None:
    root = TypeDeclaration(name="ServiceError", namespace="app")

    assert build(root, ()) is None
    assert build(RootCandidate(declaration=root), []) is None


def test_build_aggregates_root_and_cases() -> None:
    root = TypeDeclaration(name="ServiceError", namespace="app")
    cases = (_case("Timeout", _parameter("seconds")), _case("Closed"))

    model = build(RootCandidate(declaration=root), cases)

    assert model == FamilyModel(name="ServiceError", namespace_path="app", cases=cases)
