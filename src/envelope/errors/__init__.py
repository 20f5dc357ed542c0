"""Structured failures and the Result sum type.

- ResponseCode: reserved status codes (0 success, -1 exception)
- ResponseError/ResponseException: structured failure and its raisable wrapper
- Result/Ok/Err: tagged-union view of an envelope
"""

from .errors import ResponseCode, ResponseError, ResponseException, describe_exception
from .result import Err, Ok, Result

__all__ = [
    "ResponseCode", "ResponseError", "ResponseException", "describe_exception",
    "Result", "Ok", "Err",
]
