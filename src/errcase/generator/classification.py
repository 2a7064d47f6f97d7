from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from errcase.declarations.models import MethodDeclaration, TypeDeclaration

from .models import ReturnContract


class RejectionReason(StrEnum):
    NOT_A_TYPE = "not_a_type"
    NOT_A_METHOD = "not_a_method"
    ACCESSIBILITY = "accessibility"
    NOT_PARTIAL = "not_partial"
    NOT_AN_ERROR = "not_an_error"
    NOT_STATIC = "not_static"
    NOT_A_STUB = "not_a_stub"
    RETURN_TYPE = "return_type"
    VARIADIC_PARAMETER = "variadic_parameter"


@dataclass(frozen=True, slots=True)
class RootCandidate:
    declaration: TypeDeclaration


@dataclass(frozen=True, slots=True)
class CaseCandidate:
    member: MethodDeclaration
    return_contract: ReturnContract


@dataclass(frozen=True, slots=True)
class Rejected:
    name: str
    reason: RejectionReason


type RootClassification = RootCandidate | Rejected
type MemberClassification = CaseCandidate | Rejected
