from __future__ import annotations

import structlog

from errcase.declarations.models import (
    VARIADIC_PARAMETER_KINDS,
    Accessibility,
    MethodDeclaration,
    ParameterDeclaration,
    TypeDeclaration,
)
from errcase.declarations.symbols import BASE_ERROR_CONTRACT

from .classification import CaseCandidate, MemberClassification, RejectionReason, Rejected
from .matcher import ALLOWED_ACCESSIBILITY
from .models import (
    CaseDescriptor,
    CaseParameter,
    ReturnContract,
    derive_property_name,
    derive_variant_type_name,
)

logger = structlog.get_logger(__name__)


def _return_contract(
    member: MethodDeclaration, root: TypeDeclaration, base_contract: str
) -> ReturnContract | None:
    if member.return_type == root.qualified_name:
        return ReturnContract.FAMILY
    if member.return_type == base_contract:
        return ReturnContract.BASE
    return None


def classify_member(
    member: object,
    root: TypeDeclaration,
    *,
    base_contract: str = BASE_ERROR_CONTRACT,
) -> MemberClassification:
    if not isinstance(member, MethodDeclaration):
        name = getattr(member, "name", type(member).__name__)
        return Rejected(name=str(name), reason=RejectionReason.NOT_A_METHOD)
    if not member.is_static:
        return Rejected(name=member.name, reason=RejectionReason.NOT_STATIC)
    if not member.is_stub:
        return Rejected(name=member.name, reason=RejectionReason.NOT_A_STUB)
    contract = _return_contract(member, root, base_contract)
    if contract is None:
        return Rejected(name=member.name, reason=RejectionReason.RETURN_TYPE)
    if member.accessibility not in ALLOWED_ACCESSIBILITY:
        return Rejected(name=member.name, reason=RejectionReason.ACCESSIBILITY)
    if any(parameter.kind in VARIADIC_PARAMETER_KINDS for parameter in member.parameters):
        return Rejected(name=member.name, reason=RejectionReason.VARIADIC_PARAMETER)
    return CaseCandidate(member=member, return_contract=contract)


def _case_parameter(parameter: ParameterDeclaration) -> CaseParameter:
    return CaseParameter(
        original_name=parameter.name,
        derived_property_name=derive_property_name(parameter.name),
        type_name=parameter.type_name,
        default=parameter.default,
        kind=parameter.kind,
    )


def describe_case(candidate: CaseCandidate) -> CaseDescriptor:
    member = candidate.member
    return CaseDescriptor(
        factory_name=member.name,
        variant_type_name=derive_variant_type_name(member.name),
        is_publicly_visible=member.accessibility is Accessibility.PUBLIC,
        declared_return_contract=candidate.return_contract,
        parameters=tuple(_case_parameter(parameter) for parameter in member.parameters),
    )


def extract(
    root: TypeDeclaration, *, base_contract: str = BASE_ERROR_CONTRACT
) -> tuple[CaseDescriptor, ...]:
    """Derive one case descriptor per qualifying factory stub, in member order."""
    cases: list[CaseDescriptor] = []
    for member in root.members:
        classification = classify_member(member, root, base_contract=base_contract)
        if isinstance(classification, Rejected):
            logger.debug(
                "member_rejected",
                family=root.qualified_name,
                member=classification.name,
                reason=classification.reason.value,
            )
            continue
        cases.append(describe_case(classification))
    return tuple(cases)
