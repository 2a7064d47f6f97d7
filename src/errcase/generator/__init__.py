from .builder import build
from .classification import (
    CaseCandidate,
    MemberClassification,
    Rejected,
    RejectionReason,
    RootCandidate,
    RootClassification,
)
from .emitter import OutputUnit, emit, output_unit_id, render_signature
from .errors import GeneratorError, GeneratorErrorCode, GeneratorErrorDetail
from .extractor import classify_member, describe_case, extract
from .matcher import classify_declaration, inherits_from, match
from .models import (
    CaseDescriptor,
    CaseParameter,
    FamilyModel,
    ReturnContract,
    derive_property_name,
    derive_variant_type_name,
)
from .pipeline import discover_families, emit_families, run
from .serialize import canonical_family_json, hash_family_model, hash_output_unit

__all__ = [
    "CaseCandidate",
    "CaseDescriptor",
    "CaseParameter",
    "FamilyModel",
    "GeneratorError",
    "GeneratorErrorCode",
    "GeneratorErrorDetail",
    "MemberClassification",
    "OutputUnit",
    "Rejected",
    "RejectionReason",
    "ReturnContract",
    "RootCandidate",
    "RootClassification",
    "build",
    "canonical_family_json",
    "classify_declaration",
    "classify_member",
    "derive_property_name",
    "derive_variant_type_name",
    "describe_case",
    "discover_families",
    "emit",
    "emit_families",
    "extract",
    "hash_family_model",
    "hash_output_unit",
    "inherits_from",
    "match",
    "output_unit_id",
    "render_signature",
    "run",
]
