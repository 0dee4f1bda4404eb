"""Document converters for PaperPress."""
from .latex import (
    extract_latex_from_response,
    extract_strategic_context,
    post_process_latex,
    strip_latex_comments,
)

__all__ = [
    "extract_latex_from_response",
    "extract_strategic_context",
    "post_process_latex",
    "strip_latex_comments",
]
