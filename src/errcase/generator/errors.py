from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class GeneratorErrorCode(StrEnum):
    E_MODEL_CASES_EMPTY = "E_MODEL_CASES_EMPTY"
    E_MODEL_VARIANT_DUPLICATE = "E_MODEL_VARIANT_DUPLICATE"
    E_MODEL_PROPERTY_DUPLICATE = "E_MODEL_PROPERTY_DUPLICATE"
    E_MODEL_PROPERTY_RESERVED = "E_MODEL_PROPERTY_RESERVED"
    E_MODEL_NAME_INVALID = "E_MODEL_NAME_INVALID"
    E_MODEL_MEMBER_COLLISION = "E_MODEL_MEMBER_COLLISION"
    E_PIPELINE_UNIT_DUPLICATE = "E_PIPELINE_UNIT_DUPLICATE"


@dataclass(frozen=True, slots=True)
class GeneratorErrorDetail:
    code: str
    message: str
    subject: str
    witness: tuple[str, ...] | None = None


class GeneratorError(ValueError):
    def __init__(self, detail: GeneratorErrorDetail) -> None:
        super().__init__(f"{detail.code}: {detail.message}")
        self.detail = detail


def build_generator_error(
    code: GeneratorErrorCode,
    message: str,
    subject: str,
    witness: tuple[str, ...] | None = None,
) -> GeneratorError:
    return GeneratorError(
        GeneratorErrorDetail(
            code=code.value,
            message=message,
            subject=subject,
            witness=witness,
        )
    )
