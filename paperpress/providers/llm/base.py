"""Base LLM provider interface."""
from abc import abstractmethod
from typing import Any, Dict, Optional
from ..base import BaseProvider


class BaseLLMProvider(BaseProvider):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def resolve_model(self, model: Optional[str]) -> str:
        """Map a tier name ("pro", "flash") or model name to a backend model.

        Args:
            model: Tier or model name; None selects the default tier

        Returns:
            Concrete model identifier
        """
        pass

    @abstractmethod
    def generate_content(
        self,
        model: Optional[str],
        system_instruction: str,
        prompt: str,
        json_output: bool = False,
        response_schema: Optional[Dict[str, Any]] = None,
        google_search: bool = False,
    ) -> Any:
        """Run a generation request and return the raw backend response.

        Args:
            model: Tier or model name
            system_instruction: System prompt
            prompt: User prompt
            json_output: Ask for a JSON response
            response_schema: Optional schema for structured output
            google_search: Enable search grounding

        Returns:
            Provider response object

        Raises:
            LLMError: If generation fails
        """
        pass

    def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_instruction: str = "",
        **kwargs,
    ) -> str:
        """Generate text from a prompt.

        Returns:
            Generated text
        """
        response = self.generate_content(model, system_instruction, prompt, **kwargs)
        return response.text
