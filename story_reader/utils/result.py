"""
Success-or-error result values passed between the transport, parser and service layers.
"""
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Result(Generic[T]):
    """Holds either a value or the exception explaining why there is none."""

    def __init__(self, ok: Optional[T], error: Optional[Exception]):
        self._ok = ok
        self._error = error

    def is_ok(self) -> bool:
        return self._error is None

    @property
    def value(self) -> Optional[T]:
        return self._ok

    @property
    def error(self) -> Optional[Exception]:
        return self._error

    def unwrap(self) -> T:
        if self.is_ok():
            return self._ok
        raise self._error

    def __repr__(self) -> str:
        if self.is_ok():
            return f"Result.ok({self._ok!r})"
        return f"Result.error({self._error!r})"

    @staticmethod
    def from_ok(ok: T) -> "Result[T]":
        return Result(ok, None)

    @staticmethod
    def from_error(error: Exception) -> "Result[T]":
        return Result(None, error)
