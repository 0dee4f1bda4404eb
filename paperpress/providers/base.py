"""Base provider interfaces."""
from abc import ABC
from typing import Optional, Any


class BaseProvider(ABC):
    """Base class for all providers."""

    def __init__(self, config: Optional[Any] = None):
        """Initialize provider with optional configuration.

        Args:
            config: Configuration object
        """
        self.config = config
