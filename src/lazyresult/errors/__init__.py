"""Error handling for lazyresult.

- ErrorCode: codes for the library's own errors
- ResultError and subclasses: contract, wrapping and marker errors
- add_suppressed/get_suppressed: secondary-cause bookkeeping
- ErrorInfo: structured snapshot of an error's causal chain
"""

from .errors import (
    NONE_VALUE_MESSAGE,
    NOT_PRESENT_MESSAGE,
    SNEAKY_THROW_MESSAGE,
    TAP_ERROR_MESSAGE,
    CheckedError,
    ErrorCode,
    ErrorInfo,
    ResultContractError,
    ResultError,
    SneakyThrowError,
    TapError,
    ValueNotPresentError,
    add_suppressed,
    classify_exception,
    get_suppressed,
)

__all__ = [
    # Codes & classification
    "ErrorCode", "classify_exception",
    # Exceptions
    "ResultError", "ResultContractError", "SneakyThrowError", "ValueNotPresentError", "TapError", "CheckedError",
    # Suppressed causes
    "add_suppressed", "get_suppressed",
    # Diagnostics
    "ErrorInfo",
    # Messages
    "SNEAKY_THROW_MESSAGE", "TAP_ERROR_MESSAGE", "NOT_PRESENT_MESSAGE", "NONE_VALUE_MESSAGE",
]
