from __future__ import annotations

import json
from collections.abc import Iterator, Mapping, Sequence
from enum import StrEnum
from pathlib import Path
from typing import Final, NoReturn

import typer

from errcase import __version__
from errcase.config import ConfigError, GeneratorSettings, load_settings
from errcase.declarations import (
    Declaration,
    DeclarationSourceError,
    ManifestError,
    is_manifest_path,
    load_declaration_manifest,
    load_python_declarations,
)
from errcase.generator import (
    FamilyModel,
    GeneratorError,
    OutputUnit,
    discover_families,
    hash_family_model,
    output_unit_id,
    run,
)
from errcase.generator.serialize import family_payload

from .logs import configure_logging

app = typer.Typer(help="errcase error-family generator CLI", no_args_is_help=True)

_CLI_WRITE_FAILED: Final[str] = "E_CLI_WRITE_FAILED"
_CLI_READ_FAILED: Final[str] = "E_CLI_READ_FAILED"
_SKIPPED_DIR_NAMES: Final[frozenset[str]] = frozenset(("__pycache__", ".git", ".venv"))
_INPUTS_ARGUMENT = typer.Argument(
    ...,
    exists=True,
    help="Python modules, directories, or .json/.yaml declaration manifests",
)
_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    exists=True,
    dir_okay=False,
    help="Settings file (.yaml, .yml or .toml)",
)
_PACKAGE_ROOT_OPTION = typer.Option(
    None,
    "--package-root",
    exists=True,
    file_okay=False,
    help="Directory that module names are computed relative to",
)


class OutputFormat(StrEnum):
    TEXT = "text"
    JSON = "json"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"errcase {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Generate variant types and factories for partial error families."""


def _fail(code: str, message: str) -> NoReturn:
    typer.echo(f"error code={code} message={message}", err=True)
    raise typer.Exit(code=2)


def _is_within(path: Path, directory: Path | None) -> bool:
    if directory is None:
        return False
    return path.resolve().is_relative_to(directory.resolve())


def _expand_inputs(inputs: Sequence[Path], *, exclude: Path | None) -> Iterator[Path]:
    seen: set[Path] = set()
    for raw in inputs:
        if raw.is_dir():
            candidates = sorted(
                path
                for path in raw.rglob("*.py")
                if not _SKIPPED_DIR_NAMES.intersection(path.relative_to(raw).parts)
            )
        else:
            candidates = [raw]
        for path in candidates:
            resolved = path.resolve()
            if resolved in seen or _is_within(path, exclude):
                continue
            seen.add(resolved)
            yield path


def collect_declarations(
    inputs: Sequence[Path],
    *,
    package_root: Path | None = None,
    aliases: Mapping[str, str] | None = None,
    exclude: Path | None = None,
) -> tuple[Declaration, ...]:
    settings_aliases = aliases if aliases is not None else GeneratorSettings().aliases()
    declarations: list[Declaration] = []
    for path in _expand_inputs(inputs, exclude=exclude):
        if is_manifest_path(path):
            declarations.extend(load_declaration_manifest(path))
        else:
            declarations.extend(
                load_python_declarations(path, package_root=package_root, aliases=settings_aliases)
            )
    return tuple(declarations)


def _discover(
    inputs: Sequence[Path],
    *,
    settings: GeneratorSettings,
    package_root: Path | None,
    exclude: Path | None,
) -> tuple[FamilyModel, ...]:
    declarations = collect_declarations(
        inputs,
        package_root=package_root,
        aliases=settings.aliases(),
        exclude=exclude,
    )
    return discover_families(declarations, base_contract=settings.base_error)


def _load_cli_settings(config: Path | None) -> GeneratorSettings:
    settings = load_settings(config, search_dir=Path.cwd())
    try:
        configure_logging(settings.log_level, settings.log_format)
    except ValueError as exc:
        raise ConfigError("E_CONFIG_INVALID", str(exc)) from exc
    return settings


@app.command()
def generate(
    inputs: list[Path] = _INPUTS_ARGUMENT,
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        file_okay=False,
        help="Directory receiving generated units (default from settings: _generated)",
    ),
    config: Path | None = _CONFIG_OPTION,
    workers: int | None = typer.Option(
        None,
        "--workers",
        min=1,
        help="Emit families on a thread pool of this size",
    ),
    package_root: Path | None = _PACKAGE_ROOT_OPTION,
    check: bool = typer.Option(
        False,
        "--check",
        help="Report stale or missing units without writing; exit 1 when any are found",
    ),
) -> None:
    """Generate one unit per recognized error family."""
    try:
        settings = _load_cli_settings(config)
        target_dir = output_dir if output_dir is not None else settings.output_dir
        declarations = collect_declarations(
            inputs,
            package_root=package_root,
            aliases=settings.aliases(),
            exclude=target_dir,
        )
        units = run(
            declarations,
            base_contract=settings.base_error,
            max_workers=workers if workers is not None else settings.max_workers,
        )
    except GeneratorError as exc:
        _fail(exc.detail.code, exc.detail.message)
    except (DeclarationSourceError, ManifestError, ConfigError) as exc:
        _fail(exc.code, exc.message)

    if check:
        raise typer.Exit(code=1 if _check_units(units, target_dir) else 0)
    _write_units(units, target_dir)


def _current_text(target: Path) -> str | None:
    if not target.is_file():
        return None
    try:
        return target.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return ""
    except OSError as exc:
        _fail(_CLI_READ_FAILED, f"unable to read '{target}': {exc}")


def _check_units(units: Sequence[OutputUnit], target_dir: Path) -> int:
    outdated = 0
    for unit in units:
        target = target_dir / unit.unit_id
        current = _current_text(target)
        if current is None:
            typer.echo(f"MISSING unit={unit.unit_id} path={target.as_posix()}")
            outdated += 1
        elif current != unit.source_text:
            typer.echo(f"STALE unit={unit.unit_id} path={target.as_posix()}")
            outdated += 1
    return outdated


def _write_units(units: Sequence[OutputUnit], target_dir: Path) -> None:
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        for unit in units:
            target = target_dir / unit.unit_id
            if _current_text(target) == unit.source_text:
                status = "UNCHANGED"
            else:
                target.write_text(unit.source_text, encoding="utf-8")
                status = "WROTE"
            typer.echo(f"{status} unit={unit.unit_id} path={target.as_posix()}")
    except OSError as exc:
        _fail(_CLI_WRITE_FAILED, f"unable to write generated units to '{target_dir}': {exc}")


@app.command("inspect")
def inspect_families(
    inputs: list[Path] = _INPUTS_ARGUMENT,
    output_format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        help="Inspect output format: text|json",
        show_default=True,
    ),
    config: Path | None = _CONFIG_OPTION,
    package_root: Path | None = _PACKAGE_ROOT_OPTION,
) -> None:
    """List the error families and cases that would be generated."""
    try:
        settings = _load_cli_settings(config)
        families = _discover(inputs, settings=settings, package_root=package_root, exclude=None)
    except GeneratorError as exc:
        _fail(exc.detail.code, exc.detail.message)
    except (DeclarationSourceError, ManifestError, ConfigError) as exc:
        _fail(exc.code, exc.message)

    if output_format is OutputFormat.JSON:
        typer.echo(_inspect_json(families))
        return
    for model in families:
        _print_family(model)


def _inspect_json(families: Sequence[FamilyModel]) -> str:
    payload = {
        "families": [
            {
                "family": family_payload(model),
                "hash": hash_family_model(model),
                "unit_id": output_unit_id(model.namespace_path, model.name),
            }
            for model in families
        ],
        "schema_version": 1,
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def _print_family(model: FamilyModel) -> None:
    typer.echo(
        "FAMILY"
        f" name={model.qualified_name}"
        f" unit={output_unit_id(model.namespace_path, model.name)}"
        f" cases={len(model.cases)}"
    )
    for case in model.cases:
        parameters = ",".join(parameter.original_name for parameter in case.parameters)
        typer.echo(
            "CASE"
            f" family={model.qualified_name}"
            f" factory={case.factory_name}"
            f" variant={case.variant_type_name}"
            f" visibility={'public' if case.is_publicly_visible else 'internal'}"
            f" returns={case.declared_return_contract.value}"
            f" parameters={parameters or '-'}"
        )


def main() -> None:
    app()
