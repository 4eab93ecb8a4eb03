"""Explicit success/failure return type used at the provider boundary."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

_MISSING: Any = object()


class Result(Generic[T]):
    """Either a success value or an exception, never both.

    Build instances with :meth:`ok` and :meth:`err`; they are immutable.
    """

    __slots__ = ("_error", "_value")

    def __init__(self, value: Any = _MISSING, error: BaseException | None = None):
        if (value is _MISSING) == (error is None):
            raise ValueError("Result needs exactly one of value or error")
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_error", error)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Result is immutable")

    @classmethod
    def ok(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def err(cls, error: BaseException) -> Result[Any]:
        if not isinstance(error, BaseException):
            raise TypeError(f"Result.err expects an exception, got {type(error).__name__}")
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T | None:
        """The success value, or None for a failed result."""
        return None if self._value is _MISSING else self._value

    @property
    def error(self) -> BaseException | None:
        return self._error

    def unwrap(self) -> T:
        """Return the success value or raise the stored error."""
        if self._error is not None:
            raise self._error
        return self._value

    def unwrap_or(self, default: T) -> T:
        return default if self._error is not None else self._value

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        if self._error is not None:
            return Result.err(self._error)
        return Result.ok(fn(self._value))

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Result.err({self._error!r})"
        return f"Result.ok({self._value!r})"
