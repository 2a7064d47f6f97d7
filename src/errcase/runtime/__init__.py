from .errors import (
    Error,
    InvalidResultStateError,
    ResultIsNotFailureError,
    ResultIsNotSuccessError,
    UnspecifiedError,
)
from .loading import load_generated_unit, load_generated_units
from .markers import (
    StubNotGeneratedError,
    accessibility_of,
    internal,
    is_partial,
    is_stub,
    partial,
    piece_of,
    stub,
)
from .result import Result, failure, success

__all__ = [
    "Error",
    "InvalidResultStateError",
    "Result",
    "ResultIsNotFailureError",
    "ResultIsNotSuccessError",
    "StubNotGeneratedError",
    "UnspecifiedError",
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
