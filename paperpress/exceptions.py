"""Custom exceptions for PaperPress."""
from typing import Optional


class PaperPressError(Exception):
    """Base exception for all PaperPress errors."""

    pass


class ConfigurationError(PaperPressError):
    """Raised when configuration is invalid or missing."""

    pass


class LLMError(PaperPressError):
    """Raised when LLM API call fails."""

    def __init__(
        self,
        message: str,
        reason: str = "error",
        last_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.last_error = last_error


class RateLimitError(LLMError):
    """Raised when API rate limit is hit and waiting did not help."""

    def __init__(
        self,
        message: str,
        reason: str = "quota",
        last_error: Optional[BaseException] = None,
    ):
        super().__init__(message, reason=reason, last_error=last_error)


class QuotaExhaustedError(RateLimitError):
    """Raised when a key has no quota at all for the requested model."""

    pass


class CredentialsExhaustedError(RateLimitError):
    """Raised when every configured API key failed within one call."""

    pass


class RetryExhaustedError(LLMError):
    """Raised when transient failures outlast the retry budget."""

    pass


class CompilationError(PaperPressError):
    """Raised when LaTeX compilation fails."""

    def __init__(self, message: str, log: str = ""):
        super().__init__(message)
        self.log = log


class PublishError(PaperPressError):
    """Raised when a publishing request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(PaperPressError):
    """Raised when input validation fails."""

    pass


# Aliases for backward compatibility
ConfigError = ConfigurationError
