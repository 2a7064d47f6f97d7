from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Final, Literal, overload

type AccessLevel = Literal["public", "internal", "protected", "private"]

ACCESS_LEVELS: Final[tuple[str, ...]] = ("public", "internal", "protected", "private")
_PARTIAL_ATTR: Final[str] = "__errcase_partial__"
_STUB_ATTR: Final[str] = "__errcase_stub__"
_ACCESS_ATTR: Final[str] = "__errcase_access__"


class StubNotGeneratedError(NotImplementedError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"factory stub '{name}' has no generated implementation; "
            "run 'errcase generate' and load the generated unit"
        )
        self.name = name


def _check_access(access: str | None) -> None:
    if access is not None and access not in ACCESS_LEVELS:
        raise ValueError(f"access must be one of: {','.join(ACCESS_LEVELS)}")


def _mark_partial[C: type](cls: C, access: str | None) -> C:
    setattr(cls, _PARTIAL_ATTR, True)
    if access is not None:
        setattr(cls, _ACCESS_ATTR, access)
    return cls


@overload
def partial[C: type](cls: C, /) -> C: ...


@overload
def partial[C: type](*, access: AccessLevel | None = None) -> Callable[[C], C]: ...


def partial(cls: type | None = None, /, *, access: str | None = None) -> object:
    """Mark an error family as extensible by generated pieces.

    Usable bare (``@partial``) or with an explicit accessibility
    (``@partial(access="internal")``).
    """
    _check_access(access)
    if cls is not None:
        return _mark_partial(cls, access)
    return lambda target: _mark_partial(target, access)


def _make_stub[**P, R](fn: Callable[P, R], access: str | None) -> Callable[P, R]:
    @functools.wraps(fn)
    def placeholder(*args: P.args, **kwargs: P.kwargs) -> R:
        raise StubNotGeneratedError(fn.__qualname__)

    setattr(placeholder, _STUB_ATTR, True)
    if access is not None:
        setattr(placeholder, _ACCESS_ATTR, access)
    return placeholder


@overload
def stub[**P, R](fn: Callable[P, R], /) -> Callable[P, R]: ...


@overload
def stub[**P, R](
    *, access: AccessLevel | None = None
) -> Callable[[Callable[P, R]], Callable[P, R]]: ...


def stub(fn: Callable[..., object] | None = None, /, *, access: str | None = None) -> object:
    """Declare a factory whose implementation is generated."""
    _check_access(access)
    if fn is not None:
        return _make_stub(fn, access)
    return lambda target: _make_stub(target, access)


def internal[F: Callable[..., object]](fn: F) -> F:
    setattr(fn, _ACCESS_ATTR, "internal")
    return fn


def is_partial(cls: type) -> bool:
    return bool(cls.__dict__.get(_PARTIAL_ATTR, False))


def is_stub(obj: object) -> bool:
    return bool(getattr(_unwrap_static(obj), _STUB_ATTR, False))


def accessibility_of(obj: object) -> str:
    target = _unwrap_static(obj)
    if isinstance(target, type):
        access = target.__dict__.get(_ACCESS_ATTR)
    else:
        access = getattr(target, _ACCESS_ATTR, None)
    return access if isinstance(access, str) else "public"


def _unwrap_static(obj: object) -> object:
    if isinstance(obj, staticmethod | classmethod):
        return obj.__func__
    return obj


def piece_of[C: type](target: C) -> Callable[[type], C]:
    """Merge the decorated class body into ``target`` and return ``target``.

    Generated units continue a partial family this way: the decorated class
    is only a carrier; its factories and nested variant types become
    attributes of the family itself.
    """
    if not isinstance(target, type):
        raise TypeError("piece_of target must be a class")
    if not is_partial(target):
        raise TypeError(f"'{target.__qualname__}' is not marked @partial")

    def merge(piece: type) -> C:
        for name, value in piece.__dict__.items():
            if name.startswith("__") and name.endswith("__"):
                continue
            setattr(target, name, value)
        return target

    return merge
