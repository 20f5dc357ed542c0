"""Envelope - result/error propagation for units of work.

A Response carries a status code, an optional message and an optional
payload. Guarded execution runs a unit of work against a fresh Response and
absorbs every failure into it; extraction hands the payload back or re-raises
the stored failure.

Quick Start:
    >>> from envelope import Response
    >>>
    >>> def divide(r: Response[float]) -> None:
    ...     r.data = 1 / 0
    >>>
    >>> result = Response.run_guarded(divide)
    >>> result.code, result.message
    (-1, 'division by zero')

Structured failures:
    >>> def validate(r: Response[str]) -> None:
    ...     r.throw(7, "bad input")
    ...     r.data = "unreachable"
    >>>
    >>> Response.run_guarded(validate).unwrap_or_fail("context:")
    Traceback (most recent call last):
        ...
    ResponseException: context: bad input

Async:
    >>> async def fetch(r: Response[str]) -> None:
    ...     r.data = "ok"
    >>> result = await Response.run_guarded_async(fetch)

Configuration (environment):
    ENVELOPE_LOG_LEVEL=DEBUG
    ENVELOPE_LOG_FORMAT=json
    ENVELOPE_LOG_INCLUDE_TRACEBACK=true
"""

from .config import EnvelopeSettings, clear_settings_cache, get_settings
from .errors import Err, Ok, Result, ResponseCode, ResponseError, ResponseException
from .observability import configure_from_settings, configure_logging, get_logger
from .response import Response, guarded

__version__ = "0.1.0"

__all__ = [
    # Envelope
    "Response", "guarded",
    # Failures
    "ResponseCode", "ResponseError", "ResponseException",
    # Sum type
    "Result", "Ok", "Err",
    # Configuration
    "EnvelopeSettings", "get_settings", "clear_settings_cache",
    # Logging
    "configure_logging", "configure_from_settings", "get_logger",
]
