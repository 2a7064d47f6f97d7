from __future__ import annotations

from typing import Final

import structlog

from errcase.declarations.models import (
    Accessibility,
    DeclarationIndex,
    TypeDeclaration,
)
from errcase.declarations.symbols import BASE_ERROR_CONTRACT

from .classification import RejectionReason, Rejected, RootCandidate, RootClassification

logger = structlog.get_logger(__name__)

ALLOWED_ACCESSIBILITY: Final[frozenset[Accessibility]] = frozenset(
    (Accessibility.PUBLIC, Accessibility.INTERNAL)
)


def inherits_from(declaration: TypeDeclaration, base_contract: str, index: DeclarationIndex) -> bool:
    pending = list(declaration.bases)
    visited: set[str] = {declaration.qualified_name}
    while pending:
        base = pending.pop()
        if base == base_contract:
            return True
        if base in visited:
            continue
        visited.add(base)
        parent = index.get(base)
        if parent is not None:
            pending.extend(parent.bases)
    return False


def classify_declaration(
    declaration: object,
    index: DeclarationIndex,
    *,
    base_contract: str = BASE_ERROR_CONTRACT,
) -> RootClassification:
    if not isinstance(declaration, TypeDeclaration):
        name = getattr(declaration, "name", type(declaration).__name__)
        return Rejected(name=str(name), reason=RejectionReason.NOT_A_TYPE)
    name = declaration.qualified_name
    if declaration.accessibility not in ALLOWED_ACCESSIBILITY:
        return Rejected(name=name, reason=RejectionReason.ACCESSIBILITY)
    if not declaration.is_partial:
        return Rejected(name=name, reason=RejectionReason.NOT_PARTIAL)
    if not inherits_from(declaration, base_contract, index):
        return Rejected(name=name, reason=RejectionReason.NOT_AN_ERROR)
    return RootCandidate(declaration=declaration)


def match(
    declaration: object,
    index: DeclarationIndex,
    *,
    base_contract: str = BASE_ERROR_CONTRACT,
) -> RootCandidate | None:
    classification = classify_declaration(declaration, index, base_contract=base_contract)
    if isinstance(classification, Rejected):
        logger.debug(
            "declaration_rejected",
            declaration=classification.name,
            reason=classification.reason.value,
        )
        return None
    return classification
