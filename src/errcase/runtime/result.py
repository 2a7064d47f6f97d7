from __future__ import annotations

from collections.abc import Callable
from typing import Final, cast, final

from .errors import Error, ResultIsNotFailureError, ResultIsNotSuccessError

_NO_VALUE: Final[object] = object()


@final
class Result[T]:
    """Outcome of an operation: either a success value or an :class:`Error`.

    Instances are created through :meth:`success` and :meth:`failure` only.
    Reading the value of a failure, or the error of a success, raises an
    :class:`~errcase.runtime.errors.InvalidResultStateError` subclass.
    """

    __slots__ = ("_error", "_value", "is_success")

    _value: object
    _error: Error | None
    is_success: bool

    def __init__(self, value: object, error: Error | None) -> None:
        if error is None and value is None:
            raise ValueError("success value must not be None")
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_error", error)
        object.__setattr__(self, "is_success", error is None)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value, None)

    @classmethod
    def failure(cls, error: Error | str) -> Result[T]:
        if isinstance(error, str):
            return cls(_NO_VALUE, Error.new(error))
        if not isinstance(error, Error):
            raise TypeError(f"failure requires an Error, got {type(error).__name__}")
        return cls(_NO_VALUE, error)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def value(self) -> T:
        if not self.is_success:
            raise ResultIsNotSuccessError()
        return cast(T, self._value)

    @property
    def error(self) -> Error:
        if self._error is None:
            raise ResultIsNotFailureError()
        return self._error

    @property
    def case(self) -> T | Error:
        """Success value or error, convenient as a ``match`` statement subject."""
        if self._error is None:
            return cast(T, self._value)
        return self._error

    def match[R](self, on_success: Callable[[T], R], on_failure: Callable[[Error], R]) -> R:
        if self._error is None:
            return on_success(cast(T, self._value))
        return on_failure(self._error)

    def value_or(self, alternative: T) -> T:
        if self._error is None:
            return cast(T, self._value)
        return alternative

    def value_or_else(self, on_failure: Callable[[Error], T]) -> T:
        if self._error is None:
            return cast(T, self._value)
        return on_failure(self._error)

    def if_success(self, action: Callable[[T], object]) -> None:
        if self._error is None:
            action(cast(T, self._value))

    def if_failure(self, action: Callable[[Error], object]) -> None:
        if self._error is not None:
            action(self._error)

    def __bool__(self) -> bool:
        return self.is_success

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        if self.is_success and other.is_success:
            return bool(self._value == other._value)
        # any two failures compare equal, regardless of their errors
        return not self.is_success and not other.is_success

    def __hash__(self) -> int:
        if self.is_success:
            return hash((True, self._value))
        return hash((False,))

    def __repr__(self) -> str:
        if self._error is None:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self._error!r})"


def success[T](value: T) -> Result[T]:
    return Result.success(value)


def failure[T](error: Error | str) -> Result[T]:
    return Result.failure(error)
