"""Status codes and structured failures carried by a Response envelope.

A structured failure is the only way work running inside a guarded boundary
reports an expected, caller-classified error. It travels as a
ResponseException and is converted back into envelope state by the boundary.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Self

from pydantic import BaseModel, ConfigDict


class ResponseCode(IntEnum):
    """Reserved envelope status codes. Any other integer is caller-defined."""
    SUCCESS = 0
    EXCEPTION = -1


def describe_exception(exc: BaseException) -> str:
    """Failure description for an exception, falling back to its class name when blank."""
    return str(exc) or type(exc).__name__


class ResponseError(BaseModel):
    """Structured failure: an explicit code plus a description."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: int = ResponseCode.EXCEPTION.value
    message: str

    @classmethod
    def create(cls, message: str, code: int = ResponseCode.EXCEPTION.value) -> Self:
        """Factory method for construction."""
        return cls(code=code, message=message)

    def render(self) -> str:
        return f"[{self.code}] {self.message}"

    __str__ = render


class ResponseException(Exception):
    """Exception wrapping a ResponseError for raising out of a unit of work."""

    __slots__ = ("error",)

    def __init__(self, error: ResponseError) -> None:
        self.error = error
        super().__init__(error.message)

    def __reduce__(self) -> tuple[type[Self], tuple[ResponseError]]:
        return (type(self), (self.error,))

    @property
    def code(self) -> int:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @classmethod
    def create(cls, message: str, code: int = ResponseCode.EXCEPTION.value) -> Self:
        """Create a structured failure exception."""
        return cls(ResponseError(code=code, message=message))

    @classmethod
    def from_exc(cls, exc: BaseException, context: str = "") -> Self:
        """Normalize an arbitrary exception into a code -1 structured failure."""
        message = describe_exception(exc)
        return cls(ResponseError(code=ResponseCode.EXCEPTION.value, message=f"{context}: {message}" if context else message))
