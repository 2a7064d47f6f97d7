from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

import structlog

from errcase.declarations.models import Declaration, DeclarationIndex
from errcase.declarations.symbols import BASE_ERROR_CONTRACT

from .builder import build
from .emitter import OutputUnit, emit
from .errors import GeneratorErrorCode, build_generator_error
from .extractor import extract
from .matcher import match
from .models import FamilyModel

logger = structlog.get_logger(__name__)


def discover_families(
    declarations: Iterable[Declaration],
    *,
    base_contract: str = BASE_ERROR_CONTRACT,
) -> tuple[FamilyModel, ...]:
    items = tuple(declarations)
    index = DeclarationIndex.build(items)
    families: list[FamilyModel] = []
    for declaration in items:
        root = match(declaration, index, base_contract=base_contract)
        if root is None:
            continue
        model = build(root, extract(root.declaration, base_contract=base_contract))
        if model is None:
            logger.debug("family_without_cases", family=root.declaration.qualified_name)
            continue
        logger.debug(
            "family_discovered",
            family=model.qualified_name,
            cases=len(model.cases),
        )
        families.append(model)
    return tuple(families)


def _check_unique_units(units: tuple[OutputUnit, ...]) -> None:
    seen: set[str] = set()
    for unit in units:
        if unit.unit_id in seen:
            raise build_generator_error(
                GeneratorErrorCode.E_PIPELINE_UNIT_DUPLICATE,
                f"more than one family resolves to output unit '{unit.unit_id}'",
                subject=unit.unit_id,
                witness=(unit.unit_id,),
            )
        seen.add(unit.unit_id)


def emit_families(
    families: Iterable[FamilyModel], *, max_workers: int | None = None
) -> tuple[OutputUnit, ...]:
    models = tuple(families)
    if max_workers is not None and max_workers < 1:
        raise ValueError("max_workers must be >= 1")
    if max_workers is None or max_workers == 1 or len(models) < 2:
        units = tuple(emit(model) for model in models)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            units = tuple(executor.map(emit, models))
    for unit in units:
        logger.debug("unit_emitted", unit_id=unit.unit_id)
    _check_unique_units(units)
    return units


def run(
    declarations: Iterable[Declaration],
    *,
    base_contract: str = BASE_ERROR_CONTRACT,
    max_workers: int | None = None,
) -> tuple[OutputUnit, ...]:
    """Turn a declaration set into one output unit per recognized family.

    Units come back in declaration order regardless of ``max_workers``.
    """
    families = discover_families(declarations, base_contract=base_contract)
    units = emit_families(families, max_workers=max_workers)
    logger.info("pipeline_completed", families=len(families), units=len(units))
    return units
