"""Response envelope: a payload or a structured failure, plus guarded execution.

A unit of work receives a fresh Response, fills in ``data`` on success or
calls ``throw`` to abandon itself with a structured failure. The guarded
boundary absorbs every failure into ``code``/``message`` and always hands the
envelope back. Callers later either inspect the envelope or ``unwrap_or_fail``
it, which re-raises a stored failure as a ResponseException.

Example:
    >>> def load(r: Response[int]) -> None:
    ...     r.data = 42
    >>> Response.run_guarded(load).data
    42
    >>> failed = Response.run_guarded(lambda r: r.throw(7, "bad input"))
    >>> (failed.code, failed.message)
    (7, 'bad input')
    >>> failed.unwrap_or_fail("context:")
    Traceback (most recent call last):
        ...
    envelope.errors.errors.ResponseException: context: bad input

Callback ordering:
    For a structured failure ``on_error`` runs before code/message are written,
    so it sees the envelope in its pre-failure state. For any other exception
    code/message are written first and ``on_error`` sees the final state.
"""

from __future__ import annotations

import asyncio
import inspect
import traceback
from functools import wraps
from typing import Awaitable, Callable, Generic, NoReturn, Self, TypeVar, overload

from pydantic import BaseModel, ConfigDict

from envelope.config import get_settings
from envelope.errors import Err, Ok, Result, ResponseCode, ResponseError, ResponseException, describe_exception
from envelope.observability import StructuredLogger, get_logger

T = TypeVar("T")
R = TypeVar("R")

_STRUCTURED = "structured"
_UNSTRUCTURED = "unstructured"


class Response(BaseModel, Generic[T]):
    """Status code, optional message and optional payload.

    ``data`` is only meaningful while ``code == 0``. Nothing enforces that on
    assignment; ``unwrap_or_fail`` checks it at the point of use.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    code: int = ResponseCode.SUCCESS.value
    message: str | None = None
    data: T | None = None

    # ─── Guarded Execution ───────────────────────────────────────────

    @classmethod
    def run_guarded(
        cls,
        work: Callable[[Self], object],
        on_error: Callable[[Self], object] | None = None,
        *,
        log: StructuredLogger | None = None,
    ) -> Self:
        """Run ``work`` against a fresh envelope and return it. Never raises.

        Args:
            work: Fills in the envelope, or calls ``throw`` on it.
            on_error: Observes the envelope when a failure is absorbed.
            log: Failure sink; defaults to the configured logger.
        """
        result = cls()
        try:
            work(result)
        except ResponseException as e:
            _report(log, _STRUCTURED, e.error, e)
            _notify(on_error, result, log)
            result.code, result.message = e.code, e.message
        except Exception as e:
            error = ResponseException.from_exc(e).error
            _report(log, _UNSTRUCTURED, error, e)
            result.code, result.message = error.code, error.message
            _notify(on_error, result, log)
        return result

    @classmethod
    async def run_guarded_async(
        cls,
        work: Callable[[Self], Awaitable[object] | object],
        on_error: Callable[[Self], Awaitable[object] | object] | None = None,
        *,
        log: StructuredLogger | None = None,
    ) -> Self:
        """Async ``run_guarded``. ``work`` and ``on_error`` run to completion in the caller's task.

        Cancellation of the awaited work is absorbed like any other exception.
        """
        result = cls()
        try:
            if inspect.isawaitable(outcome := work(result)):
                await outcome
        except ResponseException as e:
            _report(log, _STRUCTURED, e.error, e)
            await _notify_async(on_error, result, log)
            result.code, result.message = e.code, e.message
        except (Exception, asyncio.CancelledError) as e:
            error = ResponseException.from_exc(e).error
            _report(log, _UNSTRUCTURED, error, e)
            result.code, result.message = error.code, error.message
            await _notify_async(on_error, result, log)
        return result

    # ─── Failure Signaling ───────────────────────────────────────────

    @overload
    def throw(self, message: str, /) -> NoReturn: ...
    @overload
    def throw(self, code: int, message: str, /) -> NoReturn: ...

    def throw(self, code: int | str, message: str | None = None, /) -> NoReturn:
        """Abandon the current unit of work with a structured failure.

        ``throw(message)`` uses code -1; ``throw(code, message)`` uses ``code``.
        """
        if message is None:
            if not isinstance(code, str):
                raise TypeError("throw() with a code also needs a message")
            raise ResponseException.create(code)
        raise ResponseException.create(message, code)  # type: ignore[arg-type]

    # ─── Extraction ──────────────────────────────────────────────────

    def unwrap_or_fail(self, prefix: str = "", on_error: Callable[[Self], object] | None = None) -> T:
        """Return ``data`` when ``code == 0``, else re-raise the stored failure.

        A non-empty ``prefix`` is stripped and prepended to the message with a
        single space. ``on_error`` runs once, before the raise, on failure only.
        """
        if self.code == ResponseCode.SUCCESS:
            return self.data  # type: ignore[return-value]
        if on_error is not None:
            on_error(self)
        message = self.message or ""
        self.throw(self.code, f"{prefix.strip()} {message}" if prefix else message)

    def is_ok(self) -> bool:
        return self.code == ResponseCode.SUCCESS

    def is_err(self) -> bool:
        return self.code != ResponseCode.SUCCESS

    @property
    def error(self) -> ResponseError | None:
        """Stored failure, or None on success."""
        if self.code == ResponseCode.SUCCESS:
            return None
        return ResponseError(code=self.code, message=self.message or "")

    # ─── Construction & Conversion ───────────────────────────────────

    @classmethod
    def success(cls, data: T) -> Self:
        return cls(data=data)

    @classmethod
    def failure(cls, message: str, code: int = ResponseCode.EXCEPTION.value) -> Self:
        return cls(code=code, message=message)

    def to_result(self) -> Result[T, ResponseError]:
        """Tagged-union view: Ok(data) or Err(ResponseError)."""
        return Ok(self.data) if self.code == ResponseCode.SUCCESS else Err(self.error)  # type: ignore[arg-type]

    @classmethod
    def from_result(cls, result: Result[T, object]) -> Self:
        """Envelope from a Result. A non-ResponseError Err becomes a code -1 failure."""
        return result.match(
            ok=cls.success,
            err=lambda e: cls.failure(e.message, e.code) if isinstance(e, ResponseError) else cls.failure(str(e)),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Decorator
# ═══════════════════════════════════════════════════════════════════════════════


def guarded(
    func: Callable[..., R] | None = None,
    *,
    on_error: Callable[[Response[R]], object] | None = None,
    log: StructuredLogger | None = None,
) -> Callable[..., Response[R]] | Callable[[Callable[..., R]], Callable[..., Response[R]]]:
    """Make a function return a Response holding its return value.

    Works on plain and coroutine functions. Inside the function raise
    ``ResponseException.create(message, code)`` for a structured failure.

    Example:
        >>> @guarded
        ... def parse(text: str) -> int:
        ...     return int(text)
        >>> parse("12").data, parse("x").code
        (12, -1)
    """
    def decorator(fn: Callable[..., R]) -> Callable[..., Response[R]]:
        if inspect.iscoroutinefunction(fn):
            @wraps(fn)
            async def async_wrapper(*args: object, **kwargs: object) -> Response[R]:
                async def work(r: Response[R]) -> None:
                    r.data = await fn(*args, **kwargs)
                return await Response.run_guarded_async(work, on_error, log=log)
            return async_wrapper  # type: ignore[return-value]

        @wraps(fn)
        def wrapper(*args: object, **kwargs: object) -> Response[R]:
            def work(r: Response[R]) -> None:
                r.data = fn(*args, **kwargs)
            return Response.run_guarded(work, on_error, log=log)
        return wrapper

    return decorator(func) if func is not None else decorator


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _resolve_logger(log: StructuredLogger | None) -> StructuredLogger:
    return log if log is not None else get_logger(get_settings().logger_name)


def _report(log: StructuredLogger | None, kind: str, error: ResponseError, exc: BaseException) -> None:
    """Record one absorbed failure. A broken sink or bad settings never escape the boundary."""
    try:
        extra: dict[str, object] = {}
        if kind == _UNSTRUCTURED and get_settings().logging.include_traceback:
            extra["exc_info"] = "".join(traceback.format_exception(exc))
        _resolve_logger(log).error("guarded call failed", kind=kind, code=error.code, message=error.message, **extra)
    except Exception:
        pass


def _warn_handler_failed(log: StructuredLogger | None, exc: Exception) -> None:
    try:
        _resolve_logger(log).warning("error handler failed", error=describe_exception(exc))
    except Exception:
        pass


def _notify(on_error: Callable[[Response[T]], object] | None, result: Response[T], log: StructuredLogger | None) -> None:
    if on_error is None:
        return
    try:
        on_error(result)
    except Exception as e:
        _warn_handler_failed(log, e)


async def _notify_async(
    on_error: Callable[[Response[T]], Awaitable[object] | object] | None,
    result: Response[T],
    log: StructuredLogger | None,
) -> None:
    if on_error is None:
        return
    try:
        if inspect.isawaitable(outcome := on_error(result)):
            await outcome
    except Exception as e:
        _warn_handler_failed(log, e)
