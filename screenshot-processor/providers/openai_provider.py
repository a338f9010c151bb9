"""
OpenAI Provider - Primary LLM Provider

Uses the OpenAI chat completions API. Any OpenAI-compatible gateway works
by pointing base_url at it.
"""

import os
import logging
from typing import Optional

from openai import AsyncOpenAI
from openai import APIError, APIConnectionError, RateLimitError

from .base import LLMProvider, TaskType, GenerationConfig, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

# Default models per task type
DEFAULT_MODELS = {
    TaskType.COPYWRITING: DEFAULT_MODEL,
    TaskType.SIMPLE: DEFAULT_MODEL,
}


class OpenAIProvider(LLMProvider):
    """
    Primary LLM provider using the OpenAI SDK.

    Features:
    - OpenAI-compatible API (custom base_url supported)
    - JSON mode for structured copy
    - Task-based model selection
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: API key (default from OPENAI_API_KEY)
            base_url: Optional gateway URL (default from OPENAI_BASE_URL)
            model: Model for every task type (default gpt-4o-mini)
        """
        self.api_key = api_key if api_key is not None else os.getenv("OPENAI_API_KEY", "")
        self.base_url = base_url or os.getenv("OPENAI_BASE_URL") or None

        self.models = DEFAULT_MODELS.copy()
        if model:
            self.models = {task: model for task in self.models}

        self._client: Optional[AsyncOpenAI] = None

        logger.info(f"OpenAIProvider initialized (base_url={self.base_url or 'default'})")

    @property
    def name(self) -> str:
        return "openai"

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def is_available(self) -> bool:
        return bool(self.api_key)

    def get_model_for_task(self, task_type: TaskType) -> str:
        return self.models.get(task_type, DEFAULT_MODEL)

    async def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        config: Optional[GenerationConfig] = None,
        system: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate text using chat completions.

        Args:
            prompt: User prompt
            model: Model name (default: gpt-4o-mini)
            config: Generation config
            system: Optional system message

        Returns:
            LLMResponse with generated text
        """
        if config is None:
            config = GenerationConfig()

        model_name = model or self.get_model_for_task(TaskType.COPYWRITING)

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        kwargs = {}
        if config.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            logger.info(f"OpenAI generate_text: model={model_name}")

            response = await self.client.chat.completions.create(
                model=model_name,
                messages=messages,
                temperature=config.temperature,
                top_p=config.top_p,
                max_tokens=config.max_tokens,
                **kwargs,
            )

            text = response.choices[0].message.content or ""
            tokens = response.usage.total_tokens if response.usage else None

            if not text.strip():
                return LLMResponse(text="", model_used=model_name, provider=self.name, error="empty_response")

            logger.info(f"OpenAI success: {len(text)} chars, {tokens} tokens")

            return LLMResponse(
                text=text,
                model_used=model_name,
                provider=self.name,
                tokens_used=tokens,
            )

        except RateLimitError as e:
            logger.warning(f"OpenAI rate limit: {e}")
            return LLMResponse(text="", model_used=model_name, provider=self.name, error=f"rate_limit: {e}")

        except APIConnectionError as e:
            logger.error(f"OpenAI connection error: {e}")
            return LLMResponse(text="", model_used=model_name, provider=self.name, error=f"connection_error: {e}")

        except APIError as e:
            logger.error(f"OpenAI API error: {e}")
            return LLMResponse(text="", model_used=model_name, provider=self.name, error=f"api_error: {e}")

        except Exception as e:
            logger.error(f"OpenAI unexpected error: {e}")
            return LLMResponse(text="", model_used=model_name, provider=self.name, error=f"unexpected: {e}")
