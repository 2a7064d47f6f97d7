from __future__ import annotations

from collections.abc import Sequence

from errcase.declarations.models import TypeDeclaration

from .classification import RootCandidate
from .models import CaseDescriptor, FamilyModel


def build(
    root: RootCandidate | TypeDeclaration, cases: Sequence[CaseDescriptor]
) -> FamilyModel | None:
    if not cases:
        return None
    declaration = root.declaration if isinstance(root, RootCandidate) else root
    return FamilyModel(
        name=declaration.name,
        namespace_path=declaration.namespace,
        cases=tuple(cases),
    )
