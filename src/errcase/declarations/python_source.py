from __future__ import annotations

import ast
import io
import tokenize
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

import structlog

from .errors import DeclarationSourceError
from .models import (
    Accessibility,
    Declaration,
    MemberDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
    ParameterKind,
    TypeDeclaration,
    ValueDeclaration,
)
from .symbols import (
    DEFAULT_SYMBOL_ALIASES,
    PARTIAL_MARKER,
    STATIC_MARKER,
    STUB_MARKER,
    canonical_symbol,
    qualify,
)

logger = structlog.get_logger(__name__)

UNANNOTATED_TYPE_NAME: Final[str] = "object"
_ACCESS_KEYWORD: Final[str] = "access"


def accessibility_from_name(name: str) -> Accessibility:
    if name.startswith("__") and name.endswith("__"):
        return Accessibility.PUBLIC
    if name.startswith("__"):
        return Accessibility.PRIVATE
    if name.startswith("_"):
        return Accessibility.PROTECTED
    return Accessibility.PUBLIC


def _dotted_name(expr: ast.expr) -> str | None:
    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        owner = _dotted_name(expr.value)
        return None if owner is None else f"{owner}.{expr.attr}"
    return None


def _annotation_text(annotation: ast.expr | None) -> str:
    if annotation is None:
        return UNANNOTATED_TYPE_NAME
    if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
        return annotation.value.strip() or UNANNOTATED_TYPE_NAME
    return ast.unparse(annotation)


def _is_stub_body(body: Sequence[ast.stmt]) -> bool:
    for statement in body:
        if isinstance(statement, ast.Pass):
            continue
        if isinstance(statement, ast.Expr) and isinstance(statement.value, ast.Constant):
            if statement.value.value is Ellipsis or isinstance(statement.value.value, str):
                continue
        return False
    return True


def _package_of(module: str | None, *, is_package: bool) -> list[str] | None:
    if module is None:
        return None
    parts = module.split(".")
    return parts if is_package else parts[:-1]


def _iter_module_imports(body: Sequence[ast.stmt]) -> Iterator[ast.Import | ast.ImportFrom]:
    for statement in body:
        if isinstance(statement, ast.Import | ast.ImportFrom):
            yield statement
        elif isinstance(statement, ast.If):
            yield from _iter_module_imports(statement.body)
            yield from _iter_module_imports(statement.orelse)
        elif isinstance(statement, ast.Try):
            yield from _iter_module_imports(statement.body)
            for handler in statement.handlers:
                yield from _iter_module_imports(handler.body)


def _collect_imports(
    body: Sequence[ast.stmt], *, module: str | None, is_package: bool
) -> dict[str, str]:
    bindings: dict[str, str] = {}
    package = _package_of(module, is_package=is_package)
    for statement in _iter_module_imports(body):
        if isinstance(statement, ast.Import):
            for alias in statement.names:
                if alias.asname is not None:
                    bindings[alias.asname] = alias.name
                else:
                    head = alias.name.split(".")[0]
                    bindings[head] = head
            continue

        if statement.level == 0:
            source = statement.module
        else:
            if package is None or statement.level - 1 > len(package):
                continue
            anchor = package[: len(package) - (statement.level - 1)]
            if statement.module:
                anchor = [*anchor, statement.module]
            source = ".".join(anchor)
        if not source:
            continue
        for alias in statement.names:
            if alias.name == "*":
                continue
            bindings[alias.asname or alias.name] = f"{source}.{alias.name}"
    return bindings


def _collect_class_names(body: Sequence[ast.stmt], prefix: str = "") -> Iterator[str]:
    for statement in body:
        if isinstance(statement, ast.ClassDef):
            qualname = f"{prefix}{statement.name}"
            yield qualname
            yield from _collect_class_names(statement.body, f"{qualname}.")


@dataclass(frozen=True, slots=True)
class _ModuleScope:
    module: str | None
    imports: Mapping[str, str]
    class_names: frozenset[str]
    aliases: Mapping[str, str]
    source: str

    def resolve(self, expr: ast.expr, enclosing: tuple[str, ...] = ()) -> str | None:
        if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
            try:
                parsed = ast.parse(expr.value.strip(), mode="eval")
            except SyntaxError:
                return None
            return self.resolve(parsed.body, enclosing)

        dotted = _dotted_name(expr)
        if dotted is None:
            return None
        head, _, rest = dotted.partition(".")

        resolved: str | None = None
        for depth in range(len(enclosing), -1, -1):
            candidate = ".".join((*enclosing[:depth], head))
            if candidate in self.class_names:
                resolved = qualify(self.module, candidate)
                break
        if resolved is None:
            resolved = self.imports.get(head, head)
        if rest:
            resolved = f"{resolved}.{rest}"
        return canonical_symbol(resolved, self.aliases)

    def resolve_or_text(self, expr: ast.expr, enclosing: tuple[str, ...]) -> str:
        resolved = self.resolve(expr, enclosing)
        return resolved if resolved is not None else _annotation_text(expr)

    def marker(
        self, decorators: Sequence[ast.expr], symbol: str, enclosing: tuple[str, ...]
    ) -> ast.expr | None:
        for decorator in decorators:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            if self.resolve(target, enclosing) == symbol:
                return decorator
        return None

    def explicit_access(self, decorator: ast.expr | None, owner: str) -> Accessibility | None:
        if not isinstance(decorator, ast.Call):
            return None
        for keyword in decorator.keywords:
            if keyword.arg != _ACCESS_KEYWORD:
                continue
            value = keyword.value
            if isinstance(value, ast.Constant) and isinstance(value.value, str):
                try:
                    return Accessibility(value.value)
                except ValueError:
                    pass
            raise DeclarationSourceError(
                "E_SOURCE_ACCESS_INVALID",
                f"'{owner}' declares access={ast.unparse(value)}; expected one of: "
                + ",".join(level.value for level in Accessibility),
                source=self.source,
            )
        return None


def _parameters(arguments: ast.arguments) -> tuple[ParameterDeclaration, ...]:
    positional = [*arguments.posonlyargs, *arguments.args]
    first_default = len(positional) - len(arguments.defaults)
    parameters: list[ParameterDeclaration] = []
    for index, argument in enumerate(positional):
        default = arguments.defaults[index - first_default] if index >= first_default else None
        parameters.append(
            ParameterDeclaration(
                name=argument.arg,
                type_name=_annotation_text(argument.annotation),
                default=None if default is None else ast.unparse(default),
                kind=(
                    ParameterKind.POSITIONAL_ONLY
                    if index < len(arguments.posonlyargs)
                    else ParameterKind.POSITIONAL_OR_KEYWORD
                ),
            )
        )
    if arguments.vararg is not None:
        parameters.append(
            ParameterDeclaration(
                name=arguments.vararg.arg,
                type_name=_annotation_text(arguments.vararg.annotation),
                kind=ParameterKind.VAR_POSITIONAL,
            )
        )
    for argument, kw_default in zip(arguments.kwonlyargs, arguments.kw_defaults, strict=True):
        parameters.append(
            ParameterDeclaration(
                name=argument.arg,
                type_name=_annotation_text(argument.annotation),
                default=None if kw_default is None else ast.unparse(kw_default),
                kind=ParameterKind.KEYWORD_ONLY,
            )
        )
    if arguments.kwarg is not None:
        parameters.append(
            ParameterDeclaration(
                name=arguments.kwarg.arg,
                type_name=_annotation_text(arguments.kwarg.annotation),
                kind=ParameterKind.VAR_KEYWORD,
            )
        )
    return tuple(parameters)


def _method(
    node: ast.FunctionDef | ast.AsyncFunctionDef,
    scope: _ModuleScope,
    enclosing: tuple[str, ...],
) -> MethodDeclaration:
    owner = ".".join((*enclosing, node.name))
    stub_marker = scope.marker(node.decorator_list, STUB_MARKER, enclosing)
    access = scope.explicit_access(stub_marker, owner)
    # a coroutine can never complete a synchronous factory stub
    is_stub = (
        stub_marker is not None
        and not isinstance(node, ast.AsyncFunctionDef)
        and _is_stub_body(node.body)
    )
    return MethodDeclaration(
        name=node.name,
        accessibility=access if access is not None else accessibility_from_name(node.name),
        is_static=scope.marker(node.decorator_list, STATIC_MARKER, enclosing) is not None,
        is_stub=is_stub,
        return_type=None if node.returns is None else scope.resolve_or_text(node.returns, enclosing),
        parameters=_parameters(node.args),
    )


def _values(statement: ast.Assign | ast.AnnAssign) -> Iterator[ValueDeclaration]:
    if isinstance(statement, ast.AnnAssign):
        if isinstance(statement.target, ast.Name):
            yield ValueDeclaration(
                name=statement.target.id,
                accessibility=accessibility_from_name(statement.target.id),
                type_name=_annotation_text(statement.annotation),
            )
        return
    for target in statement.targets:
        if isinstance(target, ast.Name):
            yield ValueDeclaration(
                name=target.id, accessibility=accessibility_from_name(target.id)
            )


def _class_declarations(
    node: ast.ClassDef, scope: _ModuleScope, enclosing: tuple[str, ...]
) -> Iterator[TypeDeclaration]:
    qualname = (*enclosing, node.name)
    dotted = ".".join(qualname)
    partial_marker = scope.marker(node.decorator_list, PARTIAL_MARKER, enclosing)
    access = scope.explicit_access(partial_marker, dotted)

    members: list[MemberDeclaration] = []
    nested: list[ast.ClassDef] = []
    for statement in node.body:
        if isinstance(statement, ast.FunctionDef | ast.AsyncFunctionDef):
            members.append(_method(statement, scope, qualname))
        elif isinstance(statement, ast.Assign | ast.AnnAssign):
            members.extend(_values(statement))
        elif isinstance(statement, ast.ClassDef):
            nested.append(statement)

    yield TypeDeclaration(
        name=dotted,
        namespace=scope.module,
        accessibility=access if access is not None else accessibility_from_name(node.name),
        is_partial=partial_marker is not None,
        bases=tuple(scope.resolve_or_text(base, enclosing) for base in node.bases),
        members=tuple(members),
    )
    for child in nested:
        yield from _class_declarations(child, scope, qualname)


def parse_module_source(
    source: str,
    *,
    module: str | None = None,
    is_package: bool = False,
    aliases: Mapping[str, str] = DEFAULT_SYMBOL_ALIASES,
    filename: str = "<string>",
) -> tuple[Declaration, ...]:
    """Translate one Python module into declarations, in source order.

    Classes (nested ones included, with dotted names) become type
    declarations; module-level functions and assignments become method and
    value declarations. Nothing is imported or executed.
    """
    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as exc:
        raise DeclarationSourceError(
            "E_SOURCE_SYNTAX_INVALID",
            f"{filename}:{exc.lineno}: {exc.msg}",
            source=filename,
        ) from exc

    scope = _ModuleScope(
        module=module,
        imports=_collect_imports(tree.body, module=module, is_package=is_package),
        class_names=frozenset(_collect_class_names(tree.body)),
        aliases=aliases,
        source=filename,
    )
    declarations: list[Declaration] = []
    for statement in tree.body:
        if isinstance(statement, ast.ClassDef):
            declarations.extend(_class_declarations(statement, scope, ()))
        elif isinstance(statement, ast.FunctionDef | ast.AsyncFunctionDef):
            declarations.append(_method(statement, scope, ()))
        elif isinstance(statement, ast.Assign | ast.AnnAssign):
            declarations.extend(_values(statement))
    return tuple(declarations)


def module_name_for_path(path: Path, *, package_root: Path | None = None) -> str | None:
    resolved = path.resolve()
    if package_root is not None:
        try:
            relative = resolved.relative_to(package_root.resolve())
        except ValueError as exc:
            raise DeclarationSourceError(
                "E_SOURCE_OUTSIDE_ROOT",
                f"'{path}' is not located under package root '{package_root}'",
                source=str(path),
            ) from exc
        parts = list(relative.with_suffix("").parts)
    else:
        parts = [resolved.stem]
        parent = resolved.parent
        while (parent / "__init__.py").is_file():
            parts.insert(0, parent.name)
            parent = parent.parent

    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts) if parts else None


def read_module_source(path: Path) -> str:
    """Read a module the way the interpreter would, honouring a coding cookie or BOM."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise DeclarationSourceError(
            "E_SOURCE_READ_FAILED",
            f"unable to read '{path}': {exc}",
            source=str(path),
        ) from exc
    try:
        encoding, _ = tokenize.detect_encoding(io.BytesIO(raw).readline)
        return raw.decode(encoding)
    except (SyntaxError, LookupError, UnicodeDecodeError) as exc:
        raise DeclarationSourceError(
            "E_SOURCE_READ_FAILED",
            f"unable to decode '{path}': {exc}",
            source=str(path),
        ) from exc


def load_python_declarations(
    path: Path,
    *,
    package_root: Path | None = None,
    aliases: Mapping[str, str] = DEFAULT_SYMBOL_ALIASES,
) -> tuple[Declaration, ...]:
    source = read_module_source(path)

    module = module_name_for_path(path, package_root=package_root)
    declarations = parse_module_source(
        source,
        module=module,
        is_package=path.name == "__init__.py",
        aliases=aliases,
        filename=str(path),
    )
    logger.debug("module_parsed", path=str(path), module=module, declarations=len(declarations))
    return declarations
