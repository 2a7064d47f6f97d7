from .errors import DeclarationSourceError, ManifestError
from .manifest import (
    DeclarationManifest,
    is_manifest_path,
    load_declaration_manifest,
    parse_declaration_manifest,
)
from .models import (
    Accessibility,
    Declaration,
    DeclarationIndex,
    MethodDeclaration,
    ParameterDeclaration,
    ParameterKind,
    TypeDeclaration,
    ValueDeclaration,
)
from .python_source import (
    accessibility_from_name,
    load_python_declarations,
    module_name_for_path,
    parse_module_source,
)
from .symbols import BASE_ERROR_CONTRACT, DEFAULT_SYMBOL_ALIASES

__all__ = [
    "Accessibility",
    "BASE_ERROR_CONTRACT",
    "DEFAULT_SYMBOL_ALIASES",
    "Declaration",
    "DeclarationIndex",
    "DeclarationManifest",
    "DeclarationSourceError",
    "ManifestError",
    "MethodDeclaration",
    "ParameterDeclaration",
    "ParameterKind",
    "TypeDeclaration",
    "ValueDeclaration",
    "accessibility_from_name",
    "is_manifest_path",
    "load_declaration_manifest",
    "load_python_declarations",
    "module_name_for_path",
    "parse_declaration_manifest",
    "parse_module_source",
]
