"""Two-variant result type used to chain fallible pipeline steps.

Every step takes an unwrapped value and returns a fresh ``Result``, so a run
reads as a flat chain of ``bind`` calls::

    Ok(client).bind(check_hours).bind(fetch).bind(validate_response)

``Err`` is absorbing: ``map`` and ``bind`` on an ``Err`` return the same
instance and never call the supplied function.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from .errors import WatcherError

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful step holding its value."""

    value: T

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        try:
            return Ok(fn(self.value))
        except Exception as exc:  # noqa: BLE001
            return Err(exc)

    def bind(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        try:
            return fn(self.value)
        except Exception as exc:  # noqa: BLE001
            return Err(exc)

    def fold(self, on_ok: Callable[[T], R], on_err: Callable[[Any], R]) -> R:
        return on_ok(self.value)

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """A failed step holding an error message or exception."""

    error: Union[str, BaseException]

    @property
    def message(self) -> str:
        return str(self.error)

    def map(self, fn: Callable[[Any], Any]) -> "Err":
        return self

    def bind(self, fn: Callable[[Any], Any]) -> "Err":
        return self

    def fold(self, on_ok: Callable[[Any], R], on_err: Callable[[Any], R]) -> R:
        return on_err(self.error)

    def unwrap(self):
        if isinstance(self.error, BaseException):
            raise self.error
        raise WatcherError(self.error)


Result = Union[Ok[T], Err]

__all__ = ["Err", "Ok", "Result"]
