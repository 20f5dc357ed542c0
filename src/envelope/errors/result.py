"""Result sum type: the tagged-union view of a Response envelope.

A Response keeps code, message and data in one mutable shape. Result[T, E]
holds exactly one of a success value or an error, so a failed Result can
never be mistaken for a payload.

Example:
    >>> Ok(21).map(lambda x: x * 2).unwrap()
    42
    >>> Err(ResponseError(code=7, message="bad input")).unwrap_or(0)
    0
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from .errors import ResponseError, ResponseException

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")

_OK = True
_ERR = False


class Result(Generic[T, E]):
    """Either an Ok value or an Err value, discriminated by a flag."""

    __slots__ = ("_value", "_is_ok")
    __match_args__ = ("_value",)

    def __init__(self, value: T | E, is_ok: bool) -> None:
        self._value = value
        self._is_ok = is_ok

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    def unwrap(self) -> T:
        """Ok value, or raise. A ResponseError is raised as its ResponseException."""
        if self._is_ok:
            return self._value  # type: ignore[return-value]
        if isinstance(self._value, ResponseError):
            raise ResponseException(self._value)
        raise RuntimeError(f"unwrap() on Err: {self._value}")

    def unwrap_err(self) -> E:
        if not self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"unwrap_err() on Ok: {self._value}")

    def unwrap_or(self, default: T) -> T:
        return self._value if self._is_ok else default  # type: ignore[return-value]

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        """Transform the Ok value, pass an Err through untouched."""
        return Result(f(self._value), _OK) if self._is_ok else Result(self._value, _ERR)  # type: ignore[arg-type]

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        """Transform the Err value, pass an Ok through untouched."""
        return Result(self._value, _OK) if self._is_ok else Result(f(self._value), _ERR)  # type: ignore[arg-type]

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain a fallible step onto an Ok value."""
        return f(self._value) if self._is_ok else Result(self._value, _ERR)  # type: ignore[arg-type]

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        """Handle both variants, returning whichever branch ran."""
        return ok(self._value) if self._is_ok else err(self._value)  # type: ignore[arg-type]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self._is_ok == other._is_ok and self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{'Ok' if self._is_ok else 'Err'}({self._value!r})"


def Ok(value: T) -> Result[T, E]:  # noqa: N802
    """Construct the success variant."""
    return Result(value, _OK)


def Err(error: E) -> Result[T, E]:  # noqa: N802
    """Construct the failure variant."""
    return Result(error, _ERR)
