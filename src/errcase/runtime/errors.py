from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass


class Error:
    """Base class for result failures.

    Families of failure cases derive from this class; every case is usable
    wherever an ``Error`` is accepted. The only capability all errors share is
    a human-readable description.
    """

    __slots__ = ()

    @staticmethod
    def new(message: str) -> Error:
        return UnspecifiedError(message=message)

    def describe(self) -> str:
        name = type(self).__name__
        if not is_dataclass(self):
            return name
        rendered = ", ".join(
            f"{field.name}={getattr(self, field.name)!r}" for field in fields(self)
        )
        return f"{name}({rendered})"

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class UnspecifiedError(Error):
    """Error with no particular meaning besides the message explaining it."""

    message: str

    def describe(self) -> str:
        return self.message


class InvalidResultStateError(Exception):
    """Raised when a result is read in the state it is not in."""


class ResultIsNotSuccessError(InvalidResultStateError):
    def __init__(self) -> None:
        super().__init__("Result is not in the Success state")


class ResultIsNotFailureError(InvalidResultStateError):
    def __init__(self) -> None:
        super().__init__("Result is not in the Failure state")
