from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from errcase.declarations.models import ParameterKind

from .models import CaseDescriptor, CaseParameter, FamilyModel, ReturnContract

GENERATED_HEADER: Final[str] = "# Code generated by errcase. DO NOT EDIT."
GLOBAL_NAMESPACE: Final[str] = "global"
SINGLETON_ATTRIBUTE: Final[str] = "Instance"
_INDENT: Final[str] = "    "


@dataclass(frozen=True, slots=True)
class OutputUnit:
    unit_id: str
    source_text: str

    def __post_init__(self) -> None:
        if not self.unit_id:
            raise ValueError("unit_id must be non-empty")


def output_unit_id(namespace_path: str | None, name: str) -> str:
    prefix = namespace_path if namespace_path is not None else GLOBAL_NAMESPACE
    return f"{prefix}.{name}.py"


def render_signature(parameters: tuple[CaseParameter, ...]) -> str:
    rendered: list[str] = []
    positional_only_open = False
    keyword_only_open = False
    for parameter in parameters:
        if parameter.kind is ParameterKind.POSITIONAL_ONLY:
            positional_only_open = True
        elif positional_only_open:
            rendered.append("/")
            positional_only_open = False
        if parameter.kind is ParameterKind.KEYWORD_ONLY and not keyword_only_open:
            rendered.append("*")
            keyword_only_open = True
        text = f"{parameter.original_name}: {parameter.type_name}"
        if parameter.default is not None:
            text = f"{text} = {parameter.default}"
        rendered.append(text)
    if positional_only_open:
        rendered.append("/")
    return ", ".join(rendered)


def _return_annotation(model: FamilyModel, case: CaseDescriptor) -> str:
    if case.declared_return_contract is ReturnContract.BASE:
        return "Error"
    return model.name


def _factory_lines(model: FamilyModel, case: CaseDescriptor) -> list[str]:
    lines = [f"{_INDENT}@staticmethod"]
    if not case.is_publicly_visible:
        lines.append(f"{_INDENT}@internal")
    signature = render_signature(case.parameters)
    annotation = _return_annotation(model, case)
    lines.append(f"{_INDENT}def {case.factory_name}({signature}) -> {annotation}:")
    variant = f"{model.name}.{case.variant_type_name}"
    if case.is_singleton:
        lines.append(f"{_INDENT * 2}return {variant}.{SINGLETON_ATTRIBUTE}")
        return lines
    lines.append(f"{_INDENT * 2}return {variant}(")
    for parameter in case.parameters:
        lines.append(
            f"{_INDENT * 3}{parameter.derived_property_name}={parameter.original_name},"
        )
    lines.append(f"{_INDENT * 2})")
    return lines


def _variant_lines(model: FamilyModel, case: CaseDescriptor) -> list[str]:
    lines = [f"{_INDENT}@final"]
    if case.is_singleton:
        lines.append(f"{_INDENT}@dataclass(frozen=True)")
    else:
        lines.append(f"{_INDENT}@dataclass(frozen=True, kw_only=True)")
    lines.append(f"{_INDENT}class {case.variant_type_name}({model.name}):")
    if case.is_singleton:
        lines.append(f"{_INDENT * 2}pass")
        lines.append("")
        lines.append(
            f"{_INDENT}{case.variant_type_name}.{SINGLETON_ATTRIBUTE} = "
            f"{case.variant_type_name}()"
        )
        return lines
    for parameter in case.parameters:
        lines.append(
            f"{_INDENT * 2}{parameter.derived_property_name}: {parameter.type_name}"
        )
    return lines


def _import_lines(model: FamilyModel) -> list[str]:
    runtime_names = {"piece_of"}
    if any(case.declared_return_contract is ReturnContract.BASE for case in model.cases):
        runtime_names.add("Error")
    if any(not case.is_publicly_visible for case in model.cases):
        runtime_names.add("internal")

    lines = [
        "from dataclasses import dataclass",
        "from typing import final",
        "",
        f"from errcase import {', '.join(sorted(runtime_names))}",
    ]
    if model.namespace_path is not None:
        outer_name = model.name.split(".", 1)[0]
        lines.append(f"from {model.namespace_path} import {outer_name}")
    return lines


def emit(model: FamilyModel) -> OutputUnit:
    """Render the generated piece for one family.

    The piece holds every factory implementation followed by every variant
    type, both in case order. Equal models render byte-identical text.
    """
    class_name = model.name.rsplit(".", 1)[-1]
    members = [_factory_lines(model, case) for case in model.cases]
    members.extend(_variant_lines(model, case) for case in model.cases)

    lines = [
        GENERATED_HEADER,
        f"# Family: {model.qualified_name}",
        "",
        "from __future__ import annotations",
        "",
        *_import_lines(model),
        "",
        "",
        f"@piece_of({model.name})",
        f"class {class_name}:",
    ]
    for position, member_lines in enumerate(members):
        if position:
            lines.append("")
        lines.extend(member_lines)
    return OutputUnit(
        unit_id=output_unit_id(model.namespace_path, model.name),
        source_text="\n".join(lines) + "\n",
    )
