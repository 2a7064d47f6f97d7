from __future__ import annotations

import ast
import keyword
import random
from dataclasses import dataclass

import pytest
from hypothesis import given
from hypothesis import strategies as st

from errcase.declarations import (
    Accessibility,
    MethodDeclaration,
    ParameterDeclaration,
    TypeDeclaration,
)
from errcase.generator import (
    derive_property_name,
    discover_families,
    hash_family_model,
    run,
)

pytestmark = pytest.mark.property

_BASE = "errcase.Error"
_FACTORY_NAMES = st.from_regex(r"[A-Z][a-z]{1,6}", fullmatch=True).filter(
    lambda name: not keyword.iskeyword(name)
)
_PARAMETER_NAMES = st.from_regex(r"[a-z][a-z0-9_]{0,6}", fullmatch=True).filter(
    lambda name: not keyword.iskeyword(name)
    and not keyword.iskeyword(derive_property_name(name))
)
_TYPE_NAMES = st.sampled_from(("int", "str", "float", "bytes", "list[int]", "str | None"))
_ACCESS = st.sampled_from(tuple(Accessibility))


@dataclass(frozen=True, slots=True)
class _StubShape:
    name: str
    access: Accessibility
    returns_base: bool
    qualifies: bool
    parameters: tuple[tuple[str, str], ...]


@st.composite
def _stub_shapes(draw: st.DrawFn, name: str) -> _StubShape:
    parameter_names = draw(st.lists(_PARAMETER_NAMES, unique=True, max_size=4))
    return _StubShape(
        name=name,
        access=draw(_ACCESS),
        returns_base=draw(st.booleans()),
        qualifies=draw(st.booleans()),
        parameters=tuple((parameter, draw(_TYPE_NAMES)) for parameter in parameter_names),
    )


@st.composite
def _families(draw: st.DrawFn, name: str) -> TypeDeclaration:
    factory_names = draw(st.lists(_FACTORY_NAMES, unique=True, min_size=1, max_size=5))
    shapes = [draw(_stub_shapes(factory_name)) for factory_name in factory_names]
    qualified = f"app.{name}"
    members = tuple(
        MethodDeclaration(
            name=shape.name,
            accessibility=shape.access,
            is_static=True,
            is_stub=shape.qualifies,
            return_type=_BASE if shape.returns_base else qualified,
            parameters=tuple(
                ParameterDeclaration(name=parameter, type_name=type_name)
                for parameter, type_name in shape.parameters
            ),
        )
        for shape in shapes
    )
    return TypeDeclaration(
        name=name,
        namespace="app",
        is_partial=True,
        bases=(_BASE,),
        members=members,
    )


@st.composite
def _declaration_sets(draw: st.DrawFn) -> tuple[TypeDeclaration, ...]:
    count = draw(st.integers(min_value=1, max_value=4))
    return tuple(draw(_families(f"Family{index}Error")) for index in range(count))


def _qualifying_stub_count(family: TypeDeclaration) -> int:
    return sum(
        1
        for member in family.members
        if isinstance(member, MethodDeclaration)
        and member.is_stub
        and member.accessibility in (Accessibility.PUBLIC, Accessibility.INTERNAL)
    )


@given(_declaration_sets())
def test_run_is_idempotent(declarations: tuple[TypeDeclaration, ...]) -> None:
    first = run(declarations)
    second = run(declarations)

    assert first == second
    assert [unit.source_text.encode("utf-8") for unit in first] == [
        unit.source_text.encode("utf-8") for unit in second
    ]


@given(_declaration_sets())
def test_factories_variants_and_stubs_have_equal_counts(
    declarations: tuple[TypeDeclaration, ...],
) -> None:
    units = {unit.unit_id: unit for unit in run(declarations)}

    for family in declarations:
        expected = _qualifying_stub_count(family)
        unit_id = f"app.{family.name}.py"
        if expected == 0:
            assert unit_id not in units
            continue
        tree = ast.parse(units[unit_id].source_text)
        piece = next(node for node in tree.body if isinstance(node, ast.ClassDef))
        factories = [node for node in piece.body if isinstance(node, ast.FunctionDef)]
        variants = [node for node in piece.body if isinstance(node, ast.ClassDef)]
        assert len(factories) == len(variants) == expected


@given(_declaration_sets())
def test_variant_fields_mirror_parameters(declarations: tuple[TypeDeclaration, ...]) -> None:
    for model in discover_families(declarations):
        for case in model.cases:
            for parameter in case.parameters:
                assert parameter.derived_property_name[0] == parameter.original_name[0].upper()
                assert parameter.derived_property_name[1:] == parameter.original_name[1:]


@given(_declaration_sets(), st.integers(min_value=2, max_value=4))
def test_parallel_emission_equals_sequential(
    declarations: tuple[TypeDeclaration, ...], workers: int
) -> None:
    assert run(declarations, max_workers=workers) == run(declarations)


@given(_declaration_sets(), st.randoms(use_true_random=False))
def test_unit_set_is_independent_of_declaration_order(
    declarations: tuple[TypeDeclaration, ...], rng: random.Random
) -> None:
    shuffled = list(declarations)
    rng.shuffle(shuffled)

    assert set(run(shuffled)) == set(run(declarations))
    assert {hash_family_model(model) for model in discover_families(shuffled)} == {
        hash_family_model(model) for model in discover_families(declarations)
    }
