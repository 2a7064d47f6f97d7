from __future__ import annotations

import hashlib
import json

from .emitter import OutputUnit
from .models import CaseDescriptor, CaseParameter, FamilyModel


def _parameter_payload(parameter: CaseParameter) -> dict[str, object]:
    return {
        "default": parameter.default,
        "derived_property_name": parameter.derived_property_name,
        "kind": parameter.kind.value,
        "original_name": parameter.original_name,
        "type_name": parameter.type_name,
    }


def _case_payload(case: CaseDescriptor) -> dict[str, object]:
    return {
        "declared_return_contract": case.declared_return_contract.value,
        "factory_name": case.factory_name,
        "is_publicly_visible": case.is_publicly_visible,
        "parameters": [_parameter_payload(parameter) for parameter in case.parameters],
        "variant_type_name": case.variant_type_name,
    }


def family_payload(model: FamilyModel) -> dict[str, object]:
    return {
        "cases": [_case_payload(case) for case in model.cases],
        "name": model.name,
        "namespace_path": model.namespace_path,
    }


def _canonical_json(payload: object) -> str:
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        allow_nan=False,
    )


def canonical_family_json(model: FamilyModel) -> str:
    return _canonical_json(family_payload(model))


def _digest(data: bytes, algo: str) -> str:
    hasher = hashlib.new(algo)
    hasher.update(data)
    return hasher.hexdigest()


def hash_family_model(model: FamilyModel, algo: str = "sha256") -> str:
    return _digest(canonical_family_json(model).encode("utf-8"), algo)


def hash_output_unit(unit: OutputUnit, algo: str = "sha256") -> str:
    payload = {"source_text": unit.source_text, "unit_id": unit.unit_id}
    return _digest(_canonical_json(payload).encode("utf-8"), algo)
