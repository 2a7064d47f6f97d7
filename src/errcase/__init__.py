from .runtime import (
    Error,
    InvalidResultStateError,
    Result,
    ResultIsNotFailureError,
    ResultIsNotSuccessError,
    StubNotGeneratedError,
    UnspecifiedError,
    accessibility_of,
    failure,
    internal,
    is_partial,
    is_stub,
    load_generated_unit,
    load_generated_units,
    partial,
    piece_of,
    stub,
    success,
)

__version__ = "0.1.0"

__all__ = [
    "Error",
    "InvalidResultStateError",
    "Result",
    "ResultIsNotFailureError",
    "ResultIsNotSuccessError",
    "StubNotGeneratedError",
    "UnspecifiedError",
    "__version__",
    "accessibility_of",
    "failure",
    "internal",
    "is_partial",
    "is_stub",
    "load_generated_unit",
    "load_generated_units",
    "partial",
    "piece_of",
    "stub",
    "success",
]
