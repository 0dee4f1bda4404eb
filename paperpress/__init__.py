"""PaperPress - AI-assisted academic paper generation and publishing.

A Python library for:
- Generating LaTeX papers with Google Gemini, rotating across API keys
- Reviewing and refining generated papers
- Compiling LaTeX to PDF
- Publishing to Zenodo
"""

from .config import Config
from .exceptions import (
    PaperPressError,
    ConfigurationError,
    LLMError,
    RateLimitError,
    QuotaExhaustedError,
    CredentialsExhaustedError,
    RetryExhaustedError,
    CompilationError,
    PublishError,
    ValidationError,
)
from .core.credentials import CredentialPool
from .core.executor import CallExecutor
from .core.settings import SettingsStore
from .core.models import Author, PaperSource, GeneratedPaper, AnalysisItem, AnalysisResult
from .paperpress import PaperPress

__version__ = "0.1.0"
__all__ = [
    "PaperPress",
    "Config",
    "CredentialPool",
    "CallExecutor",
    "SettingsStore",
    "Author",
    "PaperSource",
    "GeneratedPaper",
    "AnalysisItem",
    "AnalysisResult",
    "PaperPressError",
    "ConfigurationError",
    "LLMError",
    "RateLimitError",
    "QuotaExhaustedError",
    "CredentialsExhaustedError",
    "RetryExhaustedError",
    "CompilationError",
    "PublishError",
    "ValidationError",
]
