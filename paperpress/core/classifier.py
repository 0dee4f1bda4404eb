"""Classification of backend failures.

The Gemini API does not expose structured error codes through every client
path, so failures are sorted by matching substrings of the error message.
All matching rules live here.
"""
import enum
import re

from ..exceptions import PaperPressError


class ErrorKind(enum.Enum):
    """How the call executor should react to a failure."""

    HARD_QUOTA_ZERO = "hard_quota_zero"
    ROTATION = "rotation"
    TRANSIENT = "transient"
    FATAL = "fatal"


RATE_LIMIT_MARKERS = (
    "429",
    "resource_exhausted",
    "resource has been exhausted",
    "quota",
    "rate limit",
    "rate_limit",
    "too many requests",
)

ZERO_QUOTA_MARKERS = (
    "limit: 0",
    "limit 0",
    'quota_limit_value":"0"',
    "limit_value: 0",
    "model is not available",
    "not available for your",
    "is not supported for this",
)

DENIAL_MARKERS = (
    "403",
    "permission_denied",
    "permission denied",
    "suspended",
)

TRANSIENT_MARKERS = (
    "500",
    "502",
    "503",
    "504",
    "internal",
    "unavailable",
    "overloaded",
    "deadline",
    "timeout",
    "timed out",
    "connection",
    "reset by peer",
    "temporarily",
)


def _matches(message: str, markers) -> bool:
    for marker in markers:
        if marker.isdigit():
            # Status codes must stand alone, not sit inside a larger number.
            if re.search(rf"(?<!\d){marker}(?!\d)", message):
                return True
        elif marker in message:
            return True
    return False


def classify_error(error: BaseException) -> ErrorKind:
    """Decide whether a failure should rotate keys, back off, or stop.

    Args:
        error: Exception raised by the underlying request

    Returns:
        The ErrorKind for the failure
    """
    # Our own errors are already final decisions (missing keys, exhausted budgets).
    if isinstance(error, PaperPressError):
        return ErrorKind.FATAL

    message = str(error).lower()

    if _matches(message, RATE_LIMIT_MARKERS):
        if _matches(message, ZERO_QUOTA_MARKERS):
            return ErrorKind.HARD_QUOTA_ZERO
        return ErrorKind.ROTATION

    if _matches(message, DENIAL_MARKERS):
        return ErrorKind.ROTATION

    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorKind.TRANSIENT

    if _matches(message, TRANSIENT_MARKERS):
        return ErrorKind.TRANSIENT

    return ErrorKind.FATAL


def failure_reason(error: BaseException) -> str:
    """Short category for operator-facing messages: suspended, quota or error."""
    message = str(error).lower()
    if "suspended" in message or _matches(message, DENIAL_MARKERS):
        return "suspended"
    if _matches(message, RATE_LIMIT_MARKERS):
        return "quota"
    return "error"
