"""LLM provider implementations."""
from .base import BaseLLMProvider
from .gemini import GeminiProvider

__all__ = ["BaseLLMProvider", "GeminiProvider"]
