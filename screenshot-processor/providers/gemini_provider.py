"""
Gemini Provider - Fallback LLM Provider

Direct Gemini SDK implementation with multi-key rotation, used when the
OpenAI provider is unavailable or failing.
"""

import os
import logging
from typing import Optional, List

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from .base import LLMProvider, TaskType, GenerationConfig, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


def parse_api_keys(value: Optional[str]) -> List[str]:
    """Split a comma-separated key list, dropping blanks."""
    if not value:
        return []
    return [k.strip() for k in value.split(",") if k.strip()]


class GeminiProvider(LLMProvider):
    """
    Fallback LLM provider using the google-generativeai SDK.

    Rotates across API keys, skipping keys that hit their quota.
    """

    def __init__(self, api_keys: Optional[List[str]] = None, model: Optional[str] = None):
        """
        Initialize Gemini provider.

        Args:
            api_keys: Gemini API keys (default from GEMINI_API_KEYS / GEMINI_API_KEY)
            model: Model name (default gemini-2.5-flash)
        """
        if api_keys is None:
            api_keys = parse_api_keys(os.getenv("GEMINI_API_KEYS")) or parse_api_keys(os.getenv("GEMINI_API_KEY"))

        self.api_keys = api_keys
        self.model = model or DEFAULT_MODEL
        self._current_key_idx = 0
        self._failed_keys: set = set()

        logger.info(f"GeminiProvider initialized with {len(self.api_keys)} API keys")

    @property
    def name(self) -> str:
        return "gemini"

    def is_available(self) -> bool:
        return len(self.api_keys) > 0

    def get_model_for_task(self, task_type: TaskType) -> str:
        if task_type == TaskType.SIMPLE:
            return "gemini-2.5-flash-lite"
        return self.model

    def _get_current_key(self) -> Optional[str]:
        """Get current API key, rotating if needed."""
        available_keys = [k for k in self.api_keys if k not in self._failed_keys]
        if not available_keys:
            # Every key failed once; start over
            self._failed_keys.clear()
            available_keys = self.api_keys

        if not available_keys:
            return None

        self._current_key_idx = self._current_key_idx % len(available_keys)
        return available_keys[self._current_key_idx]

    def _rotate_key(self):
        self._current_key_idx += 1
        logger.info(f"Rotated to key index {self._current_key_idx}")

    def _mark_key_failed(self, key: str):
        self._failed_keys.add(key)
        logger.warning(f"Marked key ...{key[-6:]} as failed")

    async def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        config: Optional[GenerationConfig] = None,
        system: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate text using the Gemini SDK.

        Args:
            prompt: User prompt
            model: Model name
            config: Generation config
            system: Optional system instruction

        Returns:
            LLMResponse with generated text
        """
        if config is None:
            config = GenerationConfig()

        model_name = model or self.get_model_for_task(TaskType.COPYWRITING)

        generation_config = {
            "temperature": config.temperature,
            "top_p": config.top_p,
            "top_k": config.top_k,
            "max_output_tokens": config.max_tokens,
        }
        if config.json_mode:
            generation_config["response_mime_type"] = "application/json"

        # Try each key until one works
        for attempt in range(len(self.api_keys)):
            api_key = self._get_current_key()
            if not api_key:
                break

            try:
                logger.info(f"Gemini: model={model_name}, key=...{api_key[-6:]}")

                genai.configure(api_key=api_key)
                gmodel = genai.GenerativeModel(model_name, system_instruction=system)

                response = await gmodel.generate_content_async(prompt, generation_config=generation_config)

                if not response.text:
                    logger.warning("Empty response from Gemini")
                    self._rotate_key()
                    continue

                text = response.text.strip()
                logger.info(f"Gemini success: {len(text)} chars")

                return LLMResponse(text=text, model_used=model_name, provider=self.name)

            except google_exceptions.ResourceExhausted as e:
                logger.warning(f"Gemini rate limited: {e}")
                self._mark_key_failed(api_key)
                self._rotate_key()
                continue

            except Exception as e:
                error_str = str(e)
                logger.error(f"Gemini error: {error_str}")

                if "429" in error_str or "quota" in error_str.lower():
                    self._mark_key_failed(api_key)
                    self._rotate_key()
                    continue

                return LLMResponse(
                    text="",
                    model_used=model_name,
                    provider=self.name,
                    error=f"gemini_error: {error_str}",
                )

        if not self.api_keys:
            return LLMResponse(text="", model_used=model_name, provider=self.name, error="no_api_keys_available")

        return LLMResponse(text="", model_used=model_name, provider=self.name, error="all_keys_exhausted")
