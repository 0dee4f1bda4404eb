"""Logging configuration for PaperPress."""
import logging
import sys
from typing import Optional


def setup_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None
) -> None:
    """Configure logging for PaperPress.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        format_string: Custom format string for log messages
        log_file: Optional file path to write logs to
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Configure root logger
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=handlers
    )


def mask_credential(credential: Optional[str]) -> str:
    """Shorten an API key so it can be logged safely.

    Keeps the first and last four characters; keys of eight characters or
    fewer are fully hidden.
    """
    if not credential:
        return "<none>"
    if len(credential) <= 8:
        return "****"
    return f"{credential[:4]}...{credential[-4:]}"
