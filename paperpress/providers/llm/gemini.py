"""Google Gemini LLM provider implementation."""
import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional

import google.generativeai as genai
from google.generativeai import types

from .base import BaseLLMProvider
from ...core.credentials import CredentialPool
from ...core.executor import CallExecutor
from ...core.models import PaperSource
from ...core.settings import SettingsStore
from ...exceptions import LLMError, RateLimitError

logger = logging.getLogger(__name__)

PRO_TIER = "pro"
FLASH_TIER = "flash"
SEARCH_TOOL = "google_search_retrieval"


class GeminiProvider(BaseLLMProvider):
    """Google Gemini LLM provider.

    Every request goes through a CallExecutor, so it is retried and rotated
    across the configured API keys. Requests for the default flash model get
    one extra try on the cheaper fallback model when quota runs out.
    """

    def __init__(
        self,
        config,
        pool: Optional[CredentialPool] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        """Initialize Gemini provider.

        Args:
            config: Configuration object with model names and retry settings
            pool: Credential pool; built from ``config.settings_path`` when omitted
            sleep: Wait function used for backoff and cooldown
            rng: Random source for backoff jitter
        """
        super().__init__(config)

        if pool is None:
            pool = CredentialPool(
                SettingsStore(config.settings_path),
                default_credential=config.gemini_api_key,
            )
        self.pool = pool

        self.model_table: Dict[str, str] = {
            PRO_TIER: config.gemini_model_pro,
            FLASH_TIER: config.gemini_model_flash,
        }

        self.executor = CallExecutor(
            pool,
            client_factory=self._bind_client,
            max_retries=config.max_retries,
            rotation_cooldown=config.rotation_cooldown,
            sleep=sleep,
            rng=rng,
        )

    @staticmethod
    def _bind_client(api_key: str):
        """Point the SDK at ``api_key``.

        The SDK keeps its key globally; this is safe because the executor
        never runs two attempts at once.
        """
        genai.configure(api_key=api_key)
        return genai

    def resolve_model(self, model: Optional[str]) -> str:
        """Map a requested model to the pro or flash tier.

        Anything mentioning "pro" goes to the pro tier, everything else
        (including None) to flash.
        """
        if model and PRO_TIER in model.lower():
            return self.model_table[PRO_TIER]
        return self.model_table[FLASH_TIER]

    def generate_content(
        self,
        model: Optional[str],
        system_instruction: str,
        prompt: str,
        json_output: bool = False,
        response_schema: Optional[Dict[str, Any]] = None,
        google_search: bool = False,
    ) -> Any:
        """Generate content, falling back to the cheaper model on flash quota exhaustion.

        Args:
            model: Tier or model name
            system_instruction: System prompt
            prompt: User prompt
            json_output: Request ``application/json`` output
            response_schema: Optional response schema
            google_search: Enable Google Search grounding

        Returns:
            The SDK's GenerateContentResponse

        Raises:
            ConfigurationError: If no API keys are configured
            LLMError: If generation fails
        """
        target = self.resolve_model(model)
        logger.info(f"Generating with Gemini model: {target}")

        try:
            return self._invoke(
                target, system_instruction, prompt, json_output, response_schema, google_search
            )
        except RateLimitError as e:
            fallback = self.config.gemini_model_fallback
            if (
                e.reason != "quota"
                or target != self.model_table[FLASH_TIER]
                or not fallback
                or fallback == target
            ):
                raise
            logger.warning(f"{target} out of quota ({e}); retrying with {fallback}")
            return self._invoke(
                fallback, system_instruction, prompt, json_output, response_schema, google_search
            )

    def _invoke(
        self,
        target: str,
        system_instruction: str,
        prompt: str,
        json_output: bool,
        response_schema: Optional[Dict[str, Any]],
        google_search: bool,
    ) -> Any:
        generation_config = None
        if json_output or response_schema:
            generation_config = types.GenerationConfig(
                response_mime_type="application/json",
                response_schema=response_schema,
            )

        def operation(client):
            gen_model = client.GenerativeModel(
                target,
                system_instruction=system_instruction or None,
                tools=SEARCH_TOOL if google_search else None,
            )
            return gen_model.generate_content(prompt, generation_config=generation_config)

        return self.executor.execute(operation)

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

        Raises:
            LLMError: If generation fails or the response holds no text
        """
        response = self.generate_content(model, system_instruction, prompt, **kwargs)
        return self.response_text(response)

    @staticmethod
    def response_text(response: Any) -> str:
        """Return the response text, raising LLMError for empty or blocked replies."""
        try:
            text = response.text
        except ValueError as e:
            # Raised by the SDK when the candidate has no text parts (e.g. safety block).
            raise LLMError(f"Gemini returned no text: {e}", last_error=e) from e
        return text or ""

    @staticmethod
    def grounding_sources(response: Any) -> List[PaperSource]:
        """Collect web sources from the response's grounding metadata."""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return []

        metadata = getattr(candidates[0], "grounding_metadata", None)
        chunks = getattr(metadata, "grounding_chunks", None) or []

        sources = []
        for chunk in chunks:
            web = getattr(chunk, "web", None)
            uri = getattr(web, "uri", None) if web is not None else None
            if uri:
                sources.append(PaperSource(uri=uri, title=getattr(web, "title", None)))
        return sources

    def get_default_model(self) -> str:
        """Get the default Gemini model.

        Returns:
            The flash tier model
        """
        return self.model_table[FLASH_TIER]
